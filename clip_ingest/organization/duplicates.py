from typing import Dict, Iterable

from ..models import Bucket, DuplicateStatus, ResolvedClip
from .library import LibraryLayout


class DuplicateDetector:
    """
    Flags clips whose canonical name already exists anywhere in the library.

    Matching is by file name only. Canonical names come from the recording
    time, so two different takes started in the same second will collide.
    """

    def __init__(self, layout: LibraryLayout):
        self.layout = layout

    def check(self, clips: Iterable[ResolvedClip]) -> Dict[str, DuplicateStatus]:
        results: Dict[str, DuplicateStatus] = {}

        for clip in clips:
            name = clip.canonical_file_name
            if name is None:
                continue

            # An optimized copy still counts even if the raw one was deleted
            locations = [b for b in Bucket if self.layout.contains(b, name)]
            if locations:
                results[clip.clip_id] = DuplicateStatus.duplicate(locations)
            else:
                results[clip.clip_id] = DuplicateStatus.new()

        return results
