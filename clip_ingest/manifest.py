"""
Import manifest written at the library root after each run.

The file is replaced wholesale on every run; it records what that run
imported, not the library's history.
"""
import json
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime, UTC
from pathlib import Path
from typing import List, Optional

from . import config
from .exceptions import ManifestError
from .models import ResolvedClip


@dataclass
class ManifestEntry:
    clip_id: str
    original_file_names: List[str]
    new_file_name: str
    recording_time: str
    format: str
    was_segmented: bool
    file_size: int

    @classmethod
    def from_clip(cls, clip: ResolvedClip, file_size: int) -> "ManifestEntry":
        when = clip.recording_date
        return cls(
            clip_id=clip.clip_id,
            original_file_names=[s.original_file_name for s in clip.segments],
            new_file_name=clip.canonical_file_name or "",
            recording_time=when.strftime(config.MANIFEST_TIME_FORMAT) if when else "Unknown",
            format=clip.format.value,
            was_segmented=clip.is_multi_segment,
            file_size=file_size,
        )


@dataclass
class ImportManifest:
    source_volume: str
    destination_path: str
    import_date: datetime = field(default_factory=lambda: datetime.now(UTC))
    clips: List[ManifestEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        data = asdict(self)
        data['import_date'] = self.import_date.isoformat()
        return data

    def save(self, path: Path):
        """Overwrites path. The parent folder must already exist."""
        try:
            with path.open("w", encoding="utf-8") as f:
                json.dump(self.to_dict(), f, indent=2, sort_keys=True)
                f.write("\n")
        except OSError as e:
            raise ManifestError(f"Cannot write manifest {path}: {e}") from e
        logging.info(f"Saved import metadata to {path}")

    @classmethod
    def load(cls, path: Path) -> Optional["ImportManifest"]:
        """Returns None when the file is missing or not a manifest."""
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            return cls(
                source_volume=data['source_volume'],
                destination_path=data['destination_path'],
                import_date=datetime.fromisoformat(data['import_date']),
                clips=[ManifestEntry(**c) for c in data.get('clips', [])],
            )
        except (OSError, ValueError, KeyError, TypeError) as e:
            logging.debug(f"Could not load manifest {path}: {e}")
            return None
