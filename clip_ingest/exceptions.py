"""
Custom exception hierarchy for the clip ingester.

Run-level errors abort an import before anything is transferred;
clip-level errors are caught by the orchestrator and tallied.
"""
from pathlib import Path


class ClipIngestError(Exception):
    """Base exception for all clip ingester errors."""
    pass


class SourceLayoutError(ClipIngestError):
    """Raised when the card's raw media folder is missing or unreadable."""
    pass


class LibraryLayoutError(ClipIngestError):
    """Raised when the destination bucket folders cannot be created."""
    pass


class FileOperationError(ClipIngestError):
    """Raised when a clip cannot be copied or merged."""
    pass


class DestinationOpenError(FileOperationError):
    """Raised when the destination file cannot be created."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        super().__init__(f"Cannot open destination {path}" + (f": {reason}" if reason else ""))


class SegmentReadError(FileOperationError):
    """Raised when a source segment cannot be read."""

    def __init__(self, path: Path, reason: str = ""):
        self.path = path
        super().__init__(f"Cannot read segment {path}" + (f": {reason}" if reason else ""))


class ManifestError(ClipIngestError):
    """Raised when the import manifest cannot be written."""
    pass
