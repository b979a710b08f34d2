import os
import shutil
import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from .. import config
from ..config import IngestConfig
from ..exceptions import DestinationOpenError, FileOperationError, SegmentReadError
from ..models import ResolvedClip, Segment
from ..tools import run_tool


class ClipTransfer:
    """
    Materializes one clip in a library bucket.

    Single files are copied; fragmented clips are concatenated in the
    grouper's order. Raw concatenation is only valid because the recorder
    writes MPEG transport streams and raw DV, both of which play back fine
    when appended.
    """

    def __init__(self, cfg: IngestConfig):
        self.config = cfg

    def transfer(self, clip: ResolvedClip, bucket_dir: Path, dry_run: bool = False) -> Path:
        name = clip.canonical_file_name
        if name is None:
            raise FileOperationError(f"Clip {clip.clip_id} has no canonical file name")

        dest = bucket_dir / name

        if dry_run:
            action = f"Merge {len(clip.segments)} segments" if clip.is_multi_segment else "Copy"
            logging.info(f"[DRY RUN] {action} clip {clip.clip_id} -> {dest}")
            return dest

        if clip.is_multi_segment:
            self._merge_segments(clip.segments, dest)
            logging.info(f"Merged {len(clip.segments)} segments into {name}")
        else:
            self._copy_single(clip.segments[0], dest)
            logging.info(f"Copied {clip.segments[0].original_file_name} to {name}")

        if clip.recording_date is not None:
            self.restore_timestamp(dest, clip.recording_date)

        return dest

    def restore_timestamp(self, path: Path, when: datetime) -> bool:
        """Sets the file's dates to the recording time. Best effort."""
        stamp = when.strftime(config.TOUCH_DATE_FORMAT)
        result = run_tool(self.config.touch_path, ["-t", stamp, str(path)], timeout=self.config.tool_timeout)
        if not result.ok:
            logging.warning(f"Could not set timestamp on {path}: {result.output or 'exit ' + str(result.exit_code)}")
            return False
        return True

    # --- Internal Helpers ---

    def _copy_single(self, segment: Segment, dest: Path):
        try:
            src = segment.file_path.open('rb')
        except OSError as e:
            raise SegmentReadError(segment.file_path, str(e)) from e

        with src, self._staged_output(dest) as out:
            shutil.copyfileobj(src, out, config.COPY_CHUNK_SIZE)

    def _merge_segments(self, segments, dest: Path):
        with self._staged_output(dest) as out:
            for segment in segments:
                try:
                    src = segment.file_path.open('rb')
                except OSError as e:
                    raise SegmentReadError(segment.file_path, str(e)) from e
                with src:
                    shutil.copyfileobj(src, out, config.COPY_CHUNK_SIZE)

    @contextmanager
    def _staged_output(self, dest: Path):
        """
        Yields a writable file next to dest and renames it over dest on success.
        An earlier import at dest survives any failure.
        """
        part = dest.with_name(dest.name + config.PARTIAL_SUFFIX)
        try:
            out = part.open('wb')
        except OSError as e:
            raise DestinationOpenError(dest, str(e)) from e

        try:
            with out:
                yield out
            os.replace(part, dest)
        except Exception:
            part.unlink(missing_ok=True)
            raise
