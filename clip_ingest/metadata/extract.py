import logging
from pathlib import Path
from datetime import datetime
from typing import Optional

from .. import config
from ..config import IngestConfig
from ..models import Clip, ClipResolution, ResolvedClip, VideoFormat
from ..tools import run_tool


def date_from_filename(path: Path) -> Optional[datetime]:
    """
    Reads the recording time embedded in a file name.

    Accepts both the recorder's raw form (00_0001_2024-06-01_101500.m2t)
    and the library's canonical form (2024-06-01_101500.m2t).
    """
    tokens = path.stem.split(config.TOKEN_DELIMITER)

    if len(tokens) >= config.MIN_RAW_TOKENS:
        date_part, time_part = tokens[2], tokens[3]
    elif len(tokens) == 2:
        date_part, time_part = tokens[0], tokens[1]
    else:
        return None

    if len(date_part) != config.DATE_TOKEN_LEN or len(time_part) != config.TIME_TOKEN_LEN:
        return None

    try:
        return datetime.strptime(f"{date_part} {time_part}", config.FILENAME_DATE_FORMAT)
    except ValueError:
        return None


def clean_probe_date(text: str) -> str:
    """Strips the 'UTC' markers mediainfo puts around its dates."""
    return text.replace("UTC ", "").replace(" UTC", "").strip()


class MetadataResolver:
    """
    Resolves the recording date and video format of a raw file.

    Date strategy (first match wins):
      1. File name tokens (no I/O).
      2. mediainfo's Recorded_Date / Encoded_Date, if the tool is installed.
      3. File modification time (always succeeds for an existing file).
    """

    def __init__(self, cfg: IngestConfig):
        self.config = cfg

    def recording_date(self, path: Path) -> datetime:
        dt = date_from_filename(path)
        if dt:
            return dt

        if self.config.has_probe:
            dt = self._probe_recording_date(path)
            if dt:
                return dt

        logging.warning(
            f"Could not extract date from filename or metadata for {path}, using file modification date"
        )
        return datetime.fromtimestamp(path.stat().st_mtime)

    def video_format(self, path: Path, include_mpeg2: bool = True) -> VideoFormat:
        """
        Classifies the container via mediainfo's Format/CommercialName.

        include_mpeg2=True is the import flavour: a failed probe means
        UNKNOWN and MPEG streams are reported as MPEG2. The conversion
        flavour only distinguishes HDV from DV and ignores the exit code.
        """
        if not self.config.has_probe:
            return VideoFormat.UNKNOWN

        result = run_tool(
            self.config.mediainfo_path,
            [f"--Inform={config.PROBE_FORMAT_QUERY}", str(path)],
            timeout=self.config.tool_timeout,
        )
        if include_mpeg2 and not result.ok:
            return VideoFormat.UNKNOWN

        output = result.output.lower()
        # "hdv" must be tested before the broader "dv"
        if "hdv" in output:
            return VideoFormat.HDV
        if "dv" in output:
            return VideoFormat.DV
        if include_mpeg2 and "mpeg" in output:
            return VideoFormat.MPEG2
        return VideoFormat.UNKNOWN

    def resolve_clip(self, clip: Clip) -> ResolvedClip:
        """Resolves a clip from its first segment."""
        first = clip.first_segment.file_path
        resolution = ClipResolution(
            recording_date=self.recording_date(first),
            format=self.video_format(first),
        )
        return ResolvedClip(clip=clip, resolution=resolution)

    # --- Internal Helpers ---

    def _probe_recording_date(self, path: Path) -> Optional[datetime]:
        for field in config.PROBE_DATE_FIELDS:
            result = run_tool(
                self.config.mediainfo_path,
                [f"--Inform=General;%{field}%", str(path)],
                timeout=self.config.tool_timeout,
            )
            if not result.ok or not result.output:
                continue

            try:
                return datetime.strptime(clean_probe_date(result.output), config.PROBE_DATE_FORMAT)
            except ValueError:
                logging.debug(f"Unparseable {field} for {path}: {result.output!r}")
                continue
        return None
