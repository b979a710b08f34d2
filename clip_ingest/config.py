"""
Configuration constants for the clip ingester.
"""
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# --- Source Card Layout ---
# Raw fragments live in a fixed folder relative to the card's mount point.
SOURCE_SUBDIR = Path("VIDEO") / "HVR"

# Extensions the recorder writes (matched case-insensitively)
RAW_EXTS = {'.m2t', '.dv', '.avi'}

# Raw names look like 00_0001_2024-06-01_101500.m2t
TOKEN_DELIMITER = "_"
MIN_RAW_TOKENS = 4
CLIP_ID_TOKEN = 1

# --- Date Parsing ---
DATE_TOKEN_LEN = 10   # YYYY-MM-DD
TIME_TOKEN_LEN = 6    # HHMMSS
FILENAME_DATE_FORMAT = "%Y-%m-%d %H%M%S"
PROBE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CANONICAL_NAME_FORMAT = "%Y-%m-%d_%H%M%S"
TOUCH_DATE_FORMAT = "%Y%m%d%H%M.%S"
MANIFEST_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# Probe fields tried in order for the recording date
PROBE_DATE_FIELDS = ["Recorded_Date", "Encoded_Date"]
PROBE_FORMAT_QUERY = "General;%Format%\\n%CommercialName%"

# --- Destination Library ---
RAW_BUCKET = "Original Media"
OPTIMIZED_BUCKET = "Optimized Media"
TRANSCODED_BUCKET = "Transcoded Media"

MANIFEST_NAME = "import_metadata.json"
LOG_NAME = "clip_ingest.log"

# --- Copying ---
COPY_CHUNK_SIZE = 1024 * 1024  # 1 MB chunks when merging segments
PARTIAL_SUFFIX = ".part"     # in-progress copies, renamed into place when complete

# --- External Tools ---
DEFAULT_MEDIAINFO_PATH = "/opt/homebrew/bin/mediainfo"
DEFAULT_TOUCH_PATH = "/usr/bin/touch"


def default_mediainfo_path() -> Path:
    """Prefer a mediainfo found on PATH, else the Homebrew location."""
    found = shutil.which("mediainfo")
    return Path(found) if found else Path(DEFAULT_MEDIAINFO_PATH)


@dataclass(frozen=True)
class IngestConfig:
    """
    Tool locations shared by the resolver, the transfer engine and the app.

    Passed explicitly so tests can point at fake executables.
    """
    mediainfo_path: Path = Path(DEFAULT_MEDIAINFO_PATH)
    touch_path: Path = Path(DEFAULT_TOUCH_PATH)
    # None means wait for the tool indefinitely
    tool_timeout: Optional[float] = None

    @property
    def has_probe(self) -> bool:
        return self.mediainfo_path.is_file()
