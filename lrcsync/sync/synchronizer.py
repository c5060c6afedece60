"""
Library synchronization: one lyrics file per audio file

This module drives a whole run over a music library. Every audio file found by
the walker goes through the same pipeline:

    walk -> skip check -> read tags -> resolve lyrics -> write .lrc

Run Semantics:
- A file whose .lrc sidecar already exists is skipped unless force is set.
- Resolution outcomes are counted: RESOLVED files are written (or only
  reported in dry-run mode), NOT_FOUND files are logged, ERROR outcomes are
  recorded as failures.
- Any per-file problem (unreadable directory, unreadable tags, service error,
  write failure) is reported with the file path and the run moves on. Nothing
  short of a configuration error stops a run.

Files are processed one at a time in walk order; there is no concurrency.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from ..audio.metadata import MetadataReader, get_metadata_reader
from ..config.settings import Settings, get_settings
from ..exceptions import LocalIOError, SchemaError
from ..library.walker import DEFAULT_IGNORE_FILENAMES, iter_library
from ..library.writer import lrc_path_for, write_lrc_file
from ..lyrics.lrclib import get_lrclib_client
from ..lyrics.models import OutcomeStatus, ResolutionOutcome
from ..lyrics.resolver import LyricsResolver, ResolveOptions
from ..utils.logger import OperationLogger, get_logger


@dataclass
class SyncResult:
    """
    Counters and failure records for one library run

    Attributes:
        scanned: Audio files produced by the walker
        written: .lrc files written (or that would be written in dry-run)
        skipped: Files skipped because an .lrc already exists
        not_found: Files for which no synchronized lyrics were found
        failed: Files (or directories) that hit an error
        failures: (path, detail) for every failure, in encounter order
        total_time: Wall-clock duration of the run in seconds
    """
    scanned: int = 0
    written: int = 0
    skipped: int = 0
    not_found: int = 0
    failed: int = 0
    failures: List[Tuple[str, str]] = field(default_factory=list)
    total_time: Optional[float] = None

    def record_failure(self, path: Union[str, Path], detail: str) -> None:
        self.failed += 1
        self.failures.append((str(path), detail))

    @property
    def success(self) -> bool:
        return self.failed == 0

    @property
    def summary(self) -> str:
        """
        Human-readable summary of the run

        Returns:
            e.g. "12 scanned, 9 written, 2 skipped, 1 not found"
        """
        parts = [f"{self.scanned} scanned"]
        if self.written:
            parts.append(f"{self.written} written")
        if self.skipped:
            parts.append(f"{self.skipped} skipped")
        if self.not_found:
            parts.append(f"{self.not_found} not found")
        if self.failed:
            parts.append(f"{self.failed} failed")
        return ", ".join(parts)


class LibrarySynchronizer:
    """
    Walks a library and writes synchronized lyrics next to each audio file

    The collaborators are injected so that tests (and alternative front ends)
    can swap the resolver or the tag reader; create_synchronizer()
    wires the defaults from settings.
    """

    def __init__(
        self,
        resolver: LyricsResolver,
        reader: Optional[MetadataReader] = None,
        include_hidden: bool = False,
        ignore_filenames: Sequence[str] = DEFAULT_IGNORE_FILENAMES,
        force: bool = False,
        dry_run: bool = False,
        show_progress: bool = True,
    ):
        """
        Initialize the synchronizer

        Args:
            resolver: Lyrics resolver used for every file
            reader: Tag reader, defaults to the shared MetadataReader
            include_hidden: Visit hidden files and directories
            ignore_filenames: Ignore file names honoured by the walker
            force: Overwrite existing .lrc files
            dry_run: Resolve lyrics but do not write anything
            show_progress: Draw a console counter while scanning
        """
        self.resolver = resolver
        self.reader = reader or get_metadata_reader()
        self.include_hidden = include_hidden
        self.ignore_filenames = tuple(ignore_filenames)
        self.force = force
        self.dry_run = dry_run
        self.show_progress = show_progress
        self.logger = get_logger(__name__)

    def sync_directory(self, root: Union[str, Path]) -> SyncResult:
        """
        Synchronize lyrics for every audio file below a directory

        Args:
            root: Library root directory

        Returns:
            SyncResult with per-category counts and failure records
        """
        root_path = Path(root)
        result = SyncResult()
        operation = OperationLogger(self.logger, f"Lyrics sync for {root_path}", show_progress=self.show_progress)
        operation.start(f"Syncing lyrics in {root_path}" + (" (dry run)" if self.dry_run else ""))

        for entry in iter_library(root_path, self.include_hidden, self.ignore_filenames):
            if entry.error is not None:
                self.logger.console_error(f"Error walking library: {entry.error.message}")
                path = entry.error.details.get('file_path', root_path)
                result.record_failure(path, entry.error.message)
                continue

            result.scanned += 1
            operation.progress(f"Processing {entry.path.name}", result.scanned)
            self.sync_file(entry.path, result)

        if operation.start_time:
            result.total_time = time.time() - operation.start_time
        operation.complete(f"Lyrics sync finished: {result.summary}")
        return result

    def sync_file(self, file_path: Path, result: SyncResult) -> Optional[ResolutionOutcome]:
        """
        Run the per-file pipeline and update the counters

        Args:
            file_path: Audio file to process
            result: Run result to update

        Returns:
            The resolution outcome, or None if the file was skipped or its
            tags could not be read
        """
        lrc_path = lrc_path_for(file_path)
        if lrc_path.exists() and not self.force:
            self.logger.debug(f"Skipping {file_path}: lrc file already exists")
            result.skipped += 1
            return None

        try:
            metadata = self.reader.read(file_path)
        except LocalIOError as e:
            self.logger.console_error(f"Error reading tags of {file_path}: {e.message}")
            result.record_failure(file_path, e.message)
            return None

        outcome = self.resolver.resolve(metadata)

        if outcome.status is OutcomeStatus.ERROR:
            if isinstance(outcome.error, SchemaError):
                self.logger.console_error(
                    f"Error parsing lyrics service response for {file_path} "
                    f"(did the api schema change?): {outcome.detail}"
                )
            else:
                self.logger.console_error(f"Error fetching lyrics for {file_path}: {outcome.detail}")
            result.record_failure(file_path, outcome.detail)
            return outcome

        if outcome.status is OutcomeStatus.NOT_FOUND:
            self.logger.console_warning(f"Did not find lrc for {file_path}: {outcome.detail}")
            result.not_found += 1
            return outcome

        if self.dry_run:
            self.logger.console_info(f"Would write synced lrc to {lrc_path}")
            result.written += 1
            return outcome

        try:
            written_path = write_lrc_file(file_path, outcome.lyrics_text)
        except LocalIOError as e:
            self.logger.console_error(f"Error writing lyrics for {file_path}: {e.message}")
            result.record_failure(file_path, e.message)
            return outcome

        self.logger.console_info(f"Wrote synced lrc to {written_path}")
        result.written += 1
        return outcome


def create_synchronizer(settings: Optional[Settings] = None, show_progress: bool = True) -> LibrarySynchronizer:
    """
    Build a synchronizer wired from settings

    Args:
        settings: Settings to use, defaults to the global settings
        show_progress: Draw a console counter while scanning

    Returns:
        LibrarySynchronizer using the shared LRCLIB client and tag reader
    """
    settings = settings or get_settings()
    options = ResolveOptions.from_tokens(
        settings.sync.ignore,
        search_fallback=settings.sync.search,
        tolerance=settings.sync.tolerance,
    )
    resolver = LyricsResolver(get_lrclib_client(), options)
    return LibrarySynchronizer(
        resolver,
        reader=get_metadata_reader(),
        include_hidden=settings.sync.include_hidden,
        ignore_filenames=settings.sync.ignore_filenames,
        force=settings.sync.force,
        dry_run=settings.sync.dry_run,
        show_progress=show_progress,
    )


# Global synchronizer instance
_synchronizer_instance: Optional[LibrarySynchronizer] = None


def get_synchronizer() -> LibrarySynchronizer:
    """
    Get the global synchronizer instance

    Created from the current settings on first access. Call
    reset_synchronizer() after changing settings so the next access picks the
    changes up.

    Returns:
        Global LibrarySynchronizer instance
    """
    global _synchronizer_instance
    if not _synchronizer_instance:
        _synchronizer_instance = create_synchronizer()
    return _synchronizer_instance


def reset_synchronizer() -> None:
    global _synchronizer_instance
    _synchronizer_instance = None
