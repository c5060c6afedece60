"""
Data models for lyrics resolution

This module defines the data structures that flow through the lyrics resolution
engine, from the raw tags read off an audio file to the final outcome reported
for that file.

Model Layers:

1. **Input Layer**
   - TrackMetadata: Tags read from an audio file (immutable)

2. **Lookup Layer**
   - LookupQuery: Parameters sent to the lyrics service, with explicit
     suppression operations and wire parameter builders for both endpoints

3. **Service Layer**
   - LyricsCandidate: One lyrics record returned by the service, built through
     `from_api_data()` which validates the wire schema

4. **Outcome Layer**
   - OutcomeStatus / LookupSource: Enumerations describing what happened
   - ResolutionOutcome: Final per-file result consumed by the synchronizer

Lifecycle:
A LookupQuery is built fresh for every file and consumed once. Candidates are
owned by the lookup call that produced them; nothing here is shared across
files, so independent files never see each other's state.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..exceptions import SchemaError
from ..utils.helpers import join_artists


class OutcomeStatus(Enum):
    """
    Terminal state of resolving one file

    Values:
        RESOLVED: Synchronized lyrics were found and can be written
        NOT_FOUND: No usable synchronized lyrics; nothing to write, not an error
        ERROR: A lookup failed; the error is scoped to this file only
    """
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    ERROR = "error"


class LookupSource(Enum):
    """
    Which lookup protocol produced a result

    Values:
        EXACT: The single-candidate /api/get lookup
        SEARCH: The multi-candidate /api/search fallback
    """
    EXACT = "exact"
    SEARCH = "search"


@dataclass(frozen=True)
class TrackMetadata:
    """
    Track information read from an audio file's tags

    Any field may be missing from the file; missing text fields are empty
    (title) or None (album), a missing artist tag is an empty tuple.

    Attributes:
        title: Track title, empty string when the tag is absent
        artists: Artist names in tag order
        album: Album title or None
        duration: Length of the audio stream in seconds, or None
    """
    title: str = ""
    artists: Tuple[str, ...] = ()
    album: Optional[str] = None
    duration: Optional[float] = None

    @property
    def artist_display(self) -> str:
        """Artists joined into the single display string the service expects."""
        return join_artists(self.artists)

    def describe(self) -> str:
        """Short "Artist - Title" label for log messages."""
        artist = self.artist_display or "Unknown Artist"
        title = self.title or "Unknown Title"
        return f"{artist} - {title}"


@dataclass
class LookupQuery:
    """
    Lookup parameters derived from TrackMetadata

    The query is only changed through the explicit remove_* operations and is
    not mutated after it has been sent.

    Attributes:
        track_name: Track title, always sent (may be empty)
        artist_name: Joined artist names; always sent on exact lookups, only
                     when non-empty on searches
        album_name: Album title, omitted when None
        duration: Duration in seconds, only ever sent on exact lookups
    """
    track_name: str
    artist_name: str = ""
    album_name: Optional[str] = None
    duration: Optional[float] = None

    def remove_duration(self) -> None:
        self.duration = None

    def remove_album_name(self) -> None:
        self.album_name = None

    def remove_artist_name(self) -> None:
        self.artist_name = ""

    def to_search_params(self) -> List[Tuple[str, str]]:
        """
        Build query parameters for the search endpoint

        Duration is never sent here: it is used client-side for ranking,
        not as a server-side filter.

        Returns:
            Ordered (name, value) pairs
        """
        params = [("track_name", self.track_name)]
        if self.artist_name:
            params.append(("artist_name", self.artist_name))
        if self.album_name is not None:
            params.append(("album_name", self.album_name))
        return params

    def to_get_params(self) -> List[Tuple[str, str]]:
        """
        Build query parameters for the exact lookup endpoint

        artist_name is always present, even when empty, because the exact
        lookup keys on it.

        Returns:
            Ordered (name, value) pairs
        """
        params = [
            ("track_name", self.track_name),
            ("artist_name", self.artist_name),
        ]
        if self.album_name is not None:
            params.append(("album_name", self.album_name))
        if self.duration is not None:
            params.append(("duration", format_duration_param(self.duration)))
        return params


def format_duration_param(duration: float) -> str:
    """
    Render a duration for the wire without float noise

    Whole seconds are sent without a decimal part ("200"), anything else with
    the shortest representation Python produces ("215.5").
    """
    if float(duration).is_integer():
        return str(int(duration))
    return repr(float(duration))


@dataclass(frozen=True)
class LyricsCandidate:
    """
    One lyrics record returned by the lyrics service

    Read-only value. The resolution engine only inspects `duration` and
    `synced_lyrics`; the other fields are kept for logging.

    Attributes:
        id: Service record identifier
        track_name: Track title as stored by the service
        artist_name: Artist as stored by the service
        album_name: Album as stored by the service
        duration: Track duration in seconds
        instrumental: Whether the service marks the track as instrumental
        plain_lyrics: Unsynchronized lyrics, if any
        synced_lyrics: Time-tagged LRC text, if any
    """
    id: int
    track_name: str
    artist_name: str
    album_name: str
    duration: float
    instrumental: bool = False
    plain_lyrics: Optional[str] = None
    synced_lyrics: Optional[str] = None

    @property
    def has_synced_lyrics(self) -> bool:
        return self.synced_lyrics is not None

    @classmethod
    def from_api_data(cls, data: Any) -> 'LyricsCandidate':
        """
        Factory method to construct a candidate from one service record

        The record must match the service schema exactly as far as the fields
        used here are concerned: a missing or wrongly typed field means the
        remote contract changed, which is reported instead of guessed around.

        Args:
            data: Decoded JSON object

        Returns:
            LyricsCandidate instance

        Raises:
            SchemaError: If the record does not match the expected schema
        """
        if not isinstance(data, dict):
            raise SchemaError(
                f"Expected a lyrics record object, got {type(data).__name__}",
                details={'record': data}
            )

        return cls(
            id=_require(data, 'id', int),
            track_name=_require(data, 'trackName', str),
            artist_name=_require(data, 'artistName', str),
            album_name=_require(data, 'albumName', str),
            duration=float(_require(data, 'duration', (int, float))),
            instrumental=_require(data, 'instrumental', bool),
            plain_lyrics=_optional(data, 'plainLyrics', str),
            synced_lyrics=_optional(data, 'syncedLyrics', str),
        )

    def describe(self) -> str:
        return f"{self.artist_name} - {self.track_name} (#{self.id}, {self.duration:.1f}s)"


def _require(data: Dict[str, Any], key: str, expected) -> Any:
    if key not in data:
        raise SchemaError(f"Lyrics record is missing field '{key}'", details={'record': data})
    value = data[key]
    # bool is a subclass of int; an id or duration of true/false is not valid
    if isinstance(value, bool) and expected is not bool:
        raise SchemaError(f"Lyrics record field '{key}' has type bool", details={'record': data})
    if not isinstance(value, expected):
        raise SchemaError(
            f"Lyrics record field '{key}' has type {type(value).__name__}",
            details={'record': data}
        )
    return value


def _optional(data: Dict[str, Any], key: str, expected) -> Any:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, expected):
        raise SchemaError(
            f"Lyrics record field '{key}' has type {type(value).__name__}",
            details={'record': data}
        )
    return value


@dataclass
class ResolutionOutcome:
    """
    Result of resolving lyrics for one file

    Built through the `resolved`, `not_found` and `failed` factories so that
    every status carries the fields that make sense for it.

    Attributes:
        status: Terminal state of the resolution
        lyrics_text: Synchronized lyrics to write (RESOLVED only)
        matched_duration: Duration of the chosen candidate (RESOLVED only)
        target_duration: Duration that was looked up, if any
        source: Lookup protocol that produced the lyrics (RESOLVED only)
        candidates_considered: Search candidates that survived filtering
        detail: Human-readable explanation for NOT_FOUND and ERROR
        error: The exception behind an ERROR outcome
    """
    status: OutcomeStatus
    lyrics_text: Optional[str] = None
    matched_duration: Optional[float] = None
    target_duration: Optional[float] = None
    source: Optional[LookupSource] = None
    candidates_considered: int = 0
    detail: str = ""
    error: Optional[Exception] = field(default=None, compare=False)

    @classmethod
    def resolved(
        cls,
        candidate: LyricsCandidate,
        source: LookupSource,
        target_duration: Optional[float] = None,
        candidates_considered: int = 1
    ) -> 'ResolutionOutcome':
        return cls(
            status=OutcomeStatus.RESOLVED,
            lyrics_text=candidate.synced_lyrics,
            matched_duration=candidate.duration,
            target_duration=target_duration,
            source=source,
            candidates_considered=candidates_considered,
        )

    @classmethod
    def not_found(cls, detail: str, target_duration: Optional[float] = None) -> 'ResolutionOutcome':
        return cls(status=OutcomeStatus.NOT_FOUND, detail=detail, target_duration=target_duration)

    @classmethod
    def failed(cls, error: Exception, target_duration: Optional[float] = None) -> 'ResolutionOutcome':
        return cls(
            status=OutcomeStatus.ERROR,
            detail=str(error),
            error=error,
            target_duration=target_duration,
        )

    @property
    def is_resolved(self) -> bool:
        return self.status is OutcomeStatus.RESOLVED

