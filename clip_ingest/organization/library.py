import logging
from pathlib import Path
from typing import Dict

from ..exceptions import LibraryLayoutError
from ..models import Bucket


class LibraryLayout:
    """
    Destination root with its three fixed buckets:

        <root>/Original Media     raw imports (merged / copied here)
        <root>/Optimized Media    remuxed copies
        <root>/Transcoded Media   proxies
    """

    def __init__(self, root: Path):
        self.root = root
        self.buckets: Dict[Bucket, Path] = {b: root / b.value for b in Bucket}

    def bucket_path(self, bucket: Bucket) -> Path:
        return self.buckets[bucket]

    def ensure_directories(self):
        """Creates any missing bucket folder. Safe to call repeatedly."""
        for bucket, path in self.buckets.items():
            try:
                path.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise LibraryLayoutError(f"Cannot create {bucket.value} at {path}: {e}") from e
        logging.debug(f"Library layout ready at {self.root}")

    def contains(self, bucket: Bucket, file_name: str) -> bool:
        return (self.buckets[bucket] / file_name).exists()
