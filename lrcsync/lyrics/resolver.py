"""
Lyrics resolution: exact lookup first, search fallback second

For every file the resolver walks the same short state machine:

    Start -> QueryBuilt -> ExactAttempted -> Resolved
                                          -> SearchAttempted -> Resolved | NotFound
                                          -> NotFound | Error

1. Build the query from the track's tags, dropping suppressed fields.
2. Try the exact lookup. A hit with synchronized lyrics resolves the file; a
   hit without them means there is nothing to write.
3. On a miss, and only if the search fallback is enabled, drop the artist if
   requested, search, and let the selector pick by duration.
4. The chosen candidate must carry synchronized lyrics to count.

Service errors end the resolution of this file only. They are returned as an
ERROR outcome instead of raised, so the caller's loop never has to guess which
exceptions are per-file.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..exceptions import LyricsServiceError, SchemaError
from ..utils.helpers import format_track_seconds
from ..utils.logger import get_logger
from .lrclib import LrclibClient
from .models import LookupSource, ResolutionOutcome, TrackMetadata
from .query import QuerySuppression, build_query
from .selector import select_candidate


@dataclass(frozen=True)
class ResolveOptions:
    """
    Per-run resolution options

    Attributes:
        suppression: Fields to leave out of lookups
        search_fallback: Whether to search when the exact lookup misses
        tolerance: Maximum duration delta in seconds for search candidates;
                   zero or negative disables the window
    """
    suppression: QuerySuppression = field(default_factory=QuerySuppression)
    search_fallback: bool = False
    tolerance: float = 5.0

    @classmethod
    def from_tokens(cls, ignore: Iterable[str], search_fallback: bool = False, tolerance: float = 5.0) -> 'ResolveOptions':
        """Build options from raw ignore tokens, resolving them into flags once."""
        return cls(
            suppression=QuerySuppression.from_tokens(ignore),
            search_fallback=search_fallback,
            tolerance=float(tolerance),
        )


class LyricsResolver:
    """
    Turns track metadata into a resolution outcome

    The resolver keeps no state between calls apart from the shared client,
    so resolving the same metadata twice against the same service data gives
    the same outcome.
    """

    def __init__(self, client: LrclibClient, options: Optional[ResolveOptions] = None):
        """
        Initialize the resolver

        Args:
            client: Lyrics service client (any object with exact_get/fuzzy_search)
            options: Resolution options, defaults to exact lookups only
        """
        self.client = client
        self.options = options or ResolveOptions()
        self.logger = get_logger(__name__)

    def resolve(self, metadata: TrackMetadata) -> ResolutionOutcome:
        """
        Resolve synchronized lyrics for one track

        Args:
            metadata: Tags read from the audio file

        Returns:
            RESOLVED with the lyrics text, NOT_FOUND, or ERROR with the cause
        """
        query = build_query(metadata, self.options.suppression)
        label = metadata.describe()

        try:
            candidate = self.client.exact_get(query)
        except LyricsServiceError as e:
            self._log_service_error("exact lookup", label, e)
            return ResolutionOutcome.failed(e, target_duration=query.duration)

        if candidate is not None:
            if candidate.has_synced_lyrics:
                self.logger.debug(f"Exact match for {label}: {candidate.describe()}")
                return ResolutionOutcome.resolved(
                    candidate, LookupSource.EXACT, target_duration=query.duration
                )
            # The service knows the track but only has plain lyrics (or it is instrumental)
            kind = "instrumental" if candidate.instrumental else "no synced lyrics"
            self.logger.debug(f"Exact match for {label} has {kind}")
            return ResolutionOutcome.not_found(
                f"exact match has {kind}", target_duration=query.duration
            )

        if not self.options.search_fallback:
            return ResolutionOutcome.not_found("no exact match", target_duration=query.duration)

        return self._search(query, label)

    def _search(self, query, label: str) -> ResolutionOutcome:
        """Run the search fallback and select among its candidates."""
        if self.options.suppression.suppress_artist_on_search:
            query.remove_artist_name()

        self.logger.debug(f"Searching lyrics for {label}")
        try:
            candidates = self.client.fuzzy_search(query)
        except LyricsServiceError as e:
            self._log_service_error("search", label, e)
            return ResolutionOutcome.failed(e, target_duration=query.duration)

        if not candidates:
            return ResolutionOutcome.not_found("no search results", target_duration=query.duration)

        selection = select_candidate(candidates, query.duration, self.options.tolerance)
        if not selection.found:
            return ResolutionOutcome.not_found(
                f"no search result within {self.options.tolerance}s of {format_track_seconds(query.duration)}",
                target_duration=query.duration,
            )

        chosen = selection.candidate
        if not chosen.has_synced_lyrics:
            return ResolutionOutcome.not_found(
                "best search result has no synced lyrics", target_duration=query.duration
            )

        self.logger.info(
            f"Searched lyrics for {label}: found {format_track_seconds(chosen.duration)} "
            f"vs actual {format_track_seconds(query.duration)} "
            f"out of {selection.considered} filtered results"
        )
        return ResolutionOutcome.resolved(
            chosen,
            LookupSource.SEARCH,
            target_duration=query.duration,
            candidates_considered=selection.considered,
        )

    def _log_service_error(self, step: str, label: str, error: LyricsServiceError) -> None:
        # The caller reports the failure to the user with the file path
        kind = "schema mismatch" if isinstance(error, SchemaError) else type(error).__name__
        self.logger.debug(f"Lyrics {step} for {label} failed ({kind}): {error}")
