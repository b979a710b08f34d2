from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional, Tuple, FrozenSet, Iterable

from . import config


class VideoFormat(Enum):
    DV = "DV"
    HDV = "HDV"
    MPEG2 = "MPEG-2"
    UNKNOWN = "Unknown"

    @property
    def is_hdv(self) -> bool:
        return self is VideoFormat.HDV


class Bucket(Enum):
    """The three fixed folders of a destination library."""
    RAW = config.RAW_BUCKET
    OPTIMIZED = config.OPTIMIZED_BUCKET
    TRANSCODED = config.TRANSCODED_BUCKET


@dataclass(frozen=True)
class RawFile:
    """
    A single fragment found on the card.
    Only built for names that carry all four device tokens.
    """
    path: Path
    ext: str                # lowercase, with leading dot
    unit_id: str
    clip_id: str
    date_token: str
    time_token: str

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class Segment:
    original_file_name: str
    file_path: Path
    timestamp: str          # "<date>_<time>" as embedded in the name
    file_extension: str     # as written on the card, without the dot

    @classmethod
    def from_raw(cls, raw: RawFile) -> "Segment":
        return cls(
            original_file_name=raw.name,
            file_path=raw.path,
            timestamp=f"{raw.date_token}_{raw.time_token}",
            file_extension=raw.path.suffix.lstrip('.'),
        )


@dataclass(frozen=True)
class Clip:
    """
    A logical recording rebuilt from one or more fragments.
    Segments are kept in ascending filename order (the recorder's sequence).
    """
    clip_id: str
    segments: Tuple[Segment, ...]

    @property
    def is_multi_segment(self) -> bool:
        return len(self.segments) > 1

    @property
    def first_segment(self) -> Segment:
        return self.segments[0]


@dataclass(frozen=True)
class ClipResolution:
    recording_date: Optional[datetime] = None
    format: VideoFormat = VideoFormat.UNKNOWN


@dataclass(frozen=True)
class ResolvedClip:
    """
    A Clip paired with its resolved date and format.
    Built once by MetadataResolver.resolve_clip().
    """
    clip: Clip
    resolution: ClipResolution = field(default_factory=ClipResolution)

    @property
    def clip_id(self) -> str:
        return self.clip.clip_id

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return self.clip.segments

    @property
    def is_multi_segment(self) -> bool:
        return self.clip.is_multi_segment

    @property
    def recording_date(self) -> Optional[datetime]:
        return self.resolution.recording_date

    @property
    def format(self) -> VideoFormat:
        return self.resolution.format

    @property
    def canonical_file_name(self) -> Optional[str]:
        if self.recording_date is None:
            return None
        stamp = self.recording_date.strftime(config.CANONICAL_NAME_FORMAT)
        return f"{stamp}.{self.clip.first_segment.file_extension.lower()}"


@dataclass(frozen=True)
class DuplicateStatus:
    is_duplicate: bool
    locations: FrozenSet[Bucket] = frozenset()

    @classmethod
    def new(cls) -> "DuplicateStatus":
        return cls(is_duplicate=False)

    @classmethod
    def duplicate(cls, locations: Iterable[Bucket]) -> "DuplicateStatus":
        return cls(is_duplicate=True, locations=frozenset(locations))
