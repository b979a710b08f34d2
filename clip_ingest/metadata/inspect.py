"""
Show the mediainfo fields the importer relies on for a recorder file.

Usage:
  clip-inspect <file> [<file> ...]

Handy when a clip lands with the wrong date or format: it prints what
libmediainfo reports next to what the file name says.
"""
import sys
from pathlib import Path
from typing import Any, Dict

from pymediainfo import MediaInfo

from .extract import clean_probe_date, date_from_filename

GENERAL_FIELDS = ["recorded_date", "encoded_date", "format", "commercial_name", "duration"]
VIDEO_FIELDS = ["format", "scan_type", "scan_order", "width", "height", "frame_rate"]


def describe_file(path: Path) -> Dict[str, Any]:
    """Collects the General/Video track fields used for date and format resolution."""
    mi = MediaInfo.parse(str(path))
    info: Dict[str, Any] = {
        'file': path.name,
        'filename_date': None,
        'general': {},
        'video': {},
    }

    dt = date_from_filename(path)
    if dt:
        info['filename_date'] = dt.isoformat(sep=" ")

    for track in mi.tracks:
        if track.track_type == "General":
            fields, target = GENERAL_FIELDS, info['general']
        elif track.track_type == "Video" and not info['video']:
            fields, target = VIDEO_FIELDS, info['video']
        else:
            continue

        for name in fields:
            val = getattr(track, name, None)
            if val is None or val == "":
                continue
            if name.endswith("_date"):
                val = clean_probe_date(str(val))
            target[name] = val

    return info


def format_report(info: Dict[str, Any]) -> str:
    lines = [f"Inspecting: {info['file']}", "=" * 70]
    lines.append(f"  filename date: {info['filename_date'] or '(not in name)'}")
    for section in ('general', 'video'):
        lines.append(f"[{section.capitalize()}]")
        if not info[section]:
            lines.append("  (no fields)")
        for name, val in info[section].items():
            lines.append(f"  {name}: {val}")
    return "\n".join(lines)


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Usage: clip-inspect <file> [<file> ...]")
        return 1

    status = 0
    for arg in args:
        path = Path(arg)
        if not path.exists():
            print(f"Error: File not found: {arg}")
            status = 1
            continue
        try:
            print(format_report(describe_file(path)))
        except Exception as e:
            print(f"Error parsing {arg}: {e}")
            status = 1
        print()
    return status


if __name__ == "__main__":
    sys.exit(main())
