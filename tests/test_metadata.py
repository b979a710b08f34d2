import os
import pytest
from pathlib import Path
from datetime import datetime
from clip_ingest.config import IngestConfig
from clip_ingest.metadata.extract import MetadataResolver, date_from_filename, clean_probe_date
from clip_ingest.models import Clip, Segment, VideoFormat


@pytest.mark.parametrize(
    "name,expected",
    [
        ("00_0001_2024-06-01_101500.m2t", datetime(2024, 6, 1, 10, 15, 0)),
        ("2024-06-01_101500.mov", datetime(2024, 6, 1, 10, 15, 0)),
        ("00_0001_2024-06-01_1015.m2t", None),
        ("2024-6-1_101500.m2t", None),
        ("00_0001_2024-13-01_101500.m2t", None),
        ("clip.m2t", None),
        ("a_b_c.m2t", None),
    ],
)
def test_date_from_filename(name, expected):
    assert date_from_filename(Path(name)) == expected


def test_clean_probe_date():
    assert clean_probe_date("UTC 2023-05-06 07:08:09") == "2023-05-06 07:08:09"
    assert clean_probe_date("2023-05-06 07:08:09 UTC\n") == "2023-05-06 07:08:09"


def test_filename_tier_never_invokes_probe(tmp_path, make_tool):
    probe, calls = make_tool("mediainfo", "UTC 1999-01-01 00:00:00")
    f = tmp_path / "00_0001_2024-06-01_101500.m2t"
    f.write_bytes(b"x")

    resolver = MetadataResolver(IngestConfig(mediainfo_path=probe))
    assert resolver.recording_date(f) == datetime(2024, 6, 1, 10, 15, 0)
    assert not calls.exists()


def test_probe_tier_used_when_name_has_no_date(tmp_path, make_tool):
    probe, calls = make_tool("mediainfo", "UTC 2023-05-06 07:08:09")
    f = tmp_path / "clip.m2t"
    f.write_bytes(b"x")

    resolver = MetadataResolver(IngestConfig(mediainfo_path=probe))
    assert resolver.recording_date(f) == datetime(2023, 5, 6, 7, 8, 9)
    assert "--Inform=General;%Recorded_Date%" in calls.read_text()


def test_probe_failure_falls_back_to_mtime(tmp_path, make_tool):
    probe, calls = make_tool("mediainfo", "2023-05-06 07:08:09", exit_code=1)
    f = tmp_path / "clip.m2t"
    f.write_bytes(b"x")
    ts = datetime(2020, 2, 3, 4, 5, 6).timestamp()
    os.utime(f, (ts, ts))

    resolver = MetadataResolver(IngestConfig(mediainfo_path=probe))
    assert resolver.recording_date(f) == datetime(2020, 2, 3, 4, 5, 6)
    # Both date fields were tried before giving up
    assert len(calls.read_text().splitlines()) == 2


def test_unparseable_probe_output_falls_back_to_mtime(tmp_path, make_tool):
    probe, _ = make_tool("mediainfo", "sometime last week")
    f = tmp_path / "clip.m2t"
    f.write_bytes(b"x")
    ts = datetime(2021, 7, 8, 9, 10, 11).timestamp()
    os.utime(f, (ts, ts))

    resolver = MetadataResolver(IngestConfig(mediainfo_path=probe))
    assert resolver.recording_date(f) == datetime(2021, 7, 8, 9, 10, 11)


def test_missing_probe_uses_mtime_and_unknown_format(tmp_path, no_tools_config):
    f = tmp_path / "clip.dv"
    f.write_bytes(b"x")
    ts = datetime(2019, 1, 1, 12, 0, 0).timestamp()
    os.utime(f, (ts, ts))

    resolver = MetadataResolver(no_tools_config)
    assert resolver.recording_date(f) == datetime(2019, 1, 1, 12, 0, 0)
    assert resolver.video_format(f) == VideoFormat.UNKNOWN


@pytest.mark.parametrize(
    "output,exit_code,include_mpeg2,expected",
    [
        ("MPEG-TS HDV 1080i", 0, True, VideoFormat.HDV),
        ("DV", 0, True, VideoFormat.DV),
        ("MPEG-TS", 0, True, VideoFormat.MPEG2),
        ("MPEG-TS", 0, False, VideoFormat.UNKNOWN),
        ("DV", 1, True, VideoFormat.UNKNOWN),
        ("DV", 1, False, VideoFormat.DV),
        ("QuickTime", 0, True, VideoFormat.UNKNOWN),
    ],
)
def test_video_format_classification(tmp_path, make_tool, output, exit_code, include_mpeg2, expected):
    probe, _ = make_tool("mediainfo", output, exit_code)
    f = tmp_path / "clip.m2t"
    f.write_bytes(b"x")

    resolver = MetadataResolver(IngestConfig(mediainfo_path=probe))
    assert resolver.video_format(f, include_mpeg2=include_mpeg2) == expected


def test_resolve_clip_uses_first_segment(tmp_path, no_tools_config):
    paths = []
    for name in ["00_0001_2024-06-01_101500.M2T", "00_0001_2024-06-01_101520.M2T"]:
        p = tmp_path / name
        p.write_bytes(b"x")
        paths.append(p)
    clip = Clip(
        clip_id="0001",
        segments=tuple(Segment(p.name, p, p.stem.split("_", 2)[2], "M2T") for p in paths),
    )

    resolved = MetadataResolver(no_tools_config).resolve_clip(clip)

    assert resolved.recording_date == datetime(2024, 6, 1, 10, 15, 0)
    assert resolved.canonical_file_name == "2024-06-01_101500.m2t"
    assert resolved.format == VideoFormat.UNKNOWN
    assert resolved.is_multi_segment


# --- Inspector ---

class MockTrack:
    def __init__(self, track_type, **kwargs):
        self.track_type = track_type
        for k, v in kwargs.items():
            setattr(self, k, v)


class MockMediaInfo:
    def __init__(self, tracks):
        self.tracks = tracks

    @classmethod
    def parse(cls, path):
        return cls([
            MockTrack("General", recorded_date="UTC 2023-01-01 12:00:00", format="MPEG-TS",
                      commercial_name="HDV 1080i"),
            MockTrack("Video", format="MPEG Video", scan_type="Interlaced", scan_order="TFF"),
        ])


def test_inspector_reports_resolver_fields(monkeypatch, tmp_path):
    import clip_ingest.metadata.inspect as inspect_module
    monkeypatch.setattr(inspect_module, "MediaInfo", MockMediaInfo)

    vid = tmp_path / "00_0001_2024-06-01_101500.m2t"
    vid.touch()

    info = inspect_module.describe_file(vid)

    assert info['filename_date'] == "2024-06-01 10:15:00"
    assert info['general']['recorded_date'] == "2023-01-01 12:00:00"
    assert info['general']['commercial_name'] == "HDV 1080i"
    assert info['video']['scan_type'] == "Interlaced"
    assert "HDV 1080i" in inspect_module.format_report(info)


def test_inspector_missing_file(capsys, tmp_path):
    from clip_ingest.metadata.inspect import main
    assert main([str(tmp_path / "nope.m2t")]) == 1
    assert "File not found" in capsys.readouterr().out
