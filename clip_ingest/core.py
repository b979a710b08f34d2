import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

from tqdm import tqdm

from .config import IngestConfig
from .exceptions import ClipIngestError
from .manifest import ImportManifest, ManifestEntry
from .metadata.extract import MetadataResolver
from .models import Bucket, DuplicateStatus, ResolvedClip
from .organization.duplicates import DuplicateDetector
from .organization.library import LibraryLayout
from .organization.mover import ClipTransfer
from .reporting import parse_selection, render_clip_listing
from .scanning.grouper import ClipGrouper
from . import config


class ImportStage(Enum):
    SCANNING = "scanning"
    GROUPING = "grouping"
    RESOLVING = "resolving"
    DUPLICATE_CHECKING = "duplicate checking"
    AWAITING_SELECTION = "awaiting selection"
    TRANSFERRING = "transferring"
    PERSISTING_MANIFEST = "persisting manifest"
    DONE = "done"


@dataclass
class ImportResult:
    stage: ImportStage
    clips: List[ResolvedClip]
    statuses: Dict[str, DuplicateStatus]
    selected: List[ResolvedClip]
    succeeded: int = 0
    failed: int = 0
    manifest_path: Optional[Path] = None
    unresolved: List[str] = field(default_factory=list)


class ClipImportApp:
    def __init__(self, cfg: IngestConfig):
        self.config = cfg
        self.grouper = ClipGrouper()
        self.resolver = MetadataResolver(cfg)
        self.transfer = ClipTransfer(cfg)
        self.stage = ImportStage.SCANNING

    def run(self,
            source_root: Path,
            dest_root: Path,
            interactive: bool = True,
            prompt: Callable[[str], str] = input,
            dry_run: bool = False) -> ImportResult:
        """
        Executes one import pass.
        1. Scan & Group (card folder -> clips)
        2. Resolve (date + format per clip)
        3. Duplicate check against the library
        4. Select (prompt, or every NEW clip when unattended)
        5. Transfer (merge / copy into Original Media)
        6. Persist the manifest

        Clip-level failures are tallied; only layout problems abort the run.
        """
        # --- Step 1: Scanning & Grouping ---
        self._enter(ImportStage.SCANNING)
        self._enter(ImportStage.GROUPING)
        clips = self.grouper.scan(source_root)
        result = ImportResult(stage=self.stage, clips=[], statuses={}, selected=[])

        if not clips:
            logging.warning("No clips found on memory card")
            return result

        # --- Step 2: Resolving ---
        self._enter(ImportStage.RESOLVING)
        for clip in clips:
            try:
                result.clips.append(self.resolver.resolve_clip(clip))
            except OSError as e:
                # Fragment vanished since the scan (card pulled, file removed)
                logging.error(f"Failed to resolve clip {clip.clip_id}: {e}")
                result.unresolved.append(clip.clip_id)

        # --- Step 3: Duplicate Check ---
        self._enter(ImportStage.DUPLICATE_CHECKING)
        layout = LibraryLayout(dest_root)
        if not dry_run:
            layout.ensure_directories()
        result.statuses = DuplicateDetector(layout).check(result.clips)

        # --- Step 4: Selection ---
        self._enter(ImportStage.AWAITING_SELECTION)
        result.selected = self._select(result.clips, result.statuses, interactive, prompt)
        result.stage = self.stage

        if not result.selected:
            logging.info("No clips selected for import")
            return result

        # --- Step 5: Transfer ---
        self._enter(ImportStage.TRANSFERRING)
        entries = self._transfer_all(result, layout, dry_run)
        result.stage = self.stage

        if dry_run:
            self._enter(ImportStage.DONE)
            result.stage = self.stage
            return result

        # --- Step 6: Manifest ---
        self._enter(ImportStage.PERSISTING_MANIFEST)
        manifest = ImportManifest(
            source_volume=str(source_root),
            destination_path=str(dest_root),
            clips=entries,
        )
        manifest_path = dest_root / config.MANIFEST_NAME
        manifest.save(manifest_path)
        result.manifest_path = manifest_path

        self._enter(ImportStage.DONE)
        result.stage = self.stage
        return result

    def _enter(self, stage: ImportStage):
        self.stage = stage
        logging.debug(f"Stage: {stage.value}")

    def _select(self, clips, statuses, interactive: bool, prompt) -> List[ResolvedClip]:
        if interactive:
            print(render_clip_listing(clips, statuses))
            answer = prompt("Press Enter to import all clips, or enter clip numbers (e.g., 1,3,5): ")
            indices = parse_selection(answer, len(clips))
            return [clips[i] for i in indices]

        # Unattended: everything that isn't already in the library
        selected = []
        for clip in clips:
            status = statuses.get(clip.clip_id)
            if status is not None and not status.is_duplicate:
                selected.append(clip)
        return selected

    def _transfer_all(self, result: ImportResult, layout: LibraryLayout, dry_run: bool) -> List[ManifestEntry]:
        raw_dir = layout.bucket_path(Bucket.RAW)
        entries: List[ManifestEntry] = []

        logging.info(f"Importing {len(result.selected)} clip(s) (DryRun={dry_run})...")

        for clip in tqdm(result.selected, desc="Importing"):
            if clip.canonical_file_name is None:
                logging.warning(f"Skipping clip {clip.clip_id} - no filename generated")
                result.failed += 1
                continue

            try:
                dest = self.transfer.transfer(clip, raw_dir, dry_run=dry_run)
                size = 0 if dry_run else dest.stat().st_size
            except (ClipIngestError, OSError) as e:
                logging.error(f"Failed to import clip {clip.clip_id}: {e}")
                result.failed += 1
                continue

            entries.append(ManifestEntry.from_clip(clip, size))
            result.succeeded += 1

        logging.info(f"Import summary: {result.succeeded} successful, {result.failed} failed")
        return entries
