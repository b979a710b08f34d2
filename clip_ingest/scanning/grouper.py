import os
import logging
from pathlib import Path
from typing import Dict, List, Optional

from .. import config
from ..exceptions import SourceLayoutError
from ..models import Clip, RawFile, Segment


def parse_raw_filename(path: Path) -> Optional[RawFile]:
    """
    Splits a recorder file name into its tokens.
    Returns None when the name does not carry unit, clip, date and time.
    """
    tokens = path.stem.split(config.TOKEN_DELIMITER)
    if len(tokens) < config.MIN_RAW_TOKENS:
        return None

    return RawFile(
        path=path,
        ext=path.suffix.lower(),
        unit_id=tokens[0],
        clip_id=tokens[config.CLIP_ID_TOKEN],
        date_token=tokens[2],
        time_token=tokens[3],
    )


class ClipGrouper:
    """
    Rebuilds logical clips from the fragments the recorder writes.

    The recorder splits long takes into several files that share a clip
    number; the time token in each name increases monotonically, so a
    plain filename sort gives playback order.
    """

    def __init__(self):
        self.skipped: List[Path] = []

    def media_dir(self, source_root: Path) -> Path:
        return source_root / config.SOURCE_SUBDIR

    def scan(self, source_root: Path) -> List[Clip]:
        media_dir = self.media_dir(source_root)
        if not media_dir.is_dir():
            raise SourceLayoutError(f"Recorder folder not found at {media_dir}")

        logging.info(f"Scanning memory card at {media_dir}")
        self.skipped = []

        buckets: Dict[str, List[RawFile]] = {}
        for path in self._iter_raw_files(media_dir):
            raw = parse_raw_filename(path)
            if raw is None:
                logging.warning(f"Skipping file with unexpected format: {path.name}")
                self.skipped.append(path)
                continue
            buckets.setdefault(raw.clip_id, []).append(raw)

        clips = []
        for clip_id, raws in buckets.items():
            raws.sort(key=lambda r: r.name)
            clips.append(Clip(clip_id=clip_id, segments=tuple(Segment.from_raw(r) for r in raws)))

        clips.sort(key=lambda c: c.clip_id)
        logging.info(f"Found {len(clips)} clip(s)")
        return clips

    def _iter_raw_files(self, media_dir: Path):
        try:
            with os.scandir(media_dir) as it:
                entries = list(it)
        except OSError as e:
            raise SourceLayoutError(f"Failed to read {media_dir}: {e}") from e

        for e in entries:
            if not e.is_file(follow_symlinks=True):
                continue
            if Path(e.name).suffix.lower() in config.RAW_EXTS:
                yield Path(e.path)
