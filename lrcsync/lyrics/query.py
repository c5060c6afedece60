"""
Lookup query construction with field suppression

Users can ask for fields to be left out of lookups when their tags are known
to disagree with the lyrics database (for instance albums tagged as
compilations, or durations of files with long silences). The raw tokens are
resolved once into a QuerySuppression value at configuration time, and every
file's query is built from that value.
"""

from dataclasses import dataclass
from typing import Iterable

from .models import LookupQuery, TrackMetadata


DURATION_TOKENS = frozenset({"duration"})
ALBUM_TOKENS = frozenset({"album", "album_name"})
ARTIST_TOKENS = frozenset({"artist", "artist_name"})


@dataclass(frozen=True)
class QuerySuppression:
    """
    Which lookup fields to leave out

    Attributes:
        suppress_duration: Never send or rank by the track duration
        suppress_album: Never send the album name
        suppress_artist_on_search: Drop the artist on the search fallback only.
            Exact lookups always need the artist to disambiguate, while the
            search may drop it to widen the match.
    """
    suppress_duration: bool = False
    suppress_album: bool = False
    suppress_artist_on_search: bool = False

    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> 'QuerySuppression':
        """
        Resolve raw ignore tokens into flags

        Tokens are case-sensitive; unrecognised tokens are ignored.

        Args:
            tokens: Values such as "duration", "album", "artist_name"

        Returns:
            QuerySuppression with the matching flags set
        """
        token_set = set(tokens)
        return cls(
            suppress_duration=bool(token_set & DURATION_TOKENS),
            suppress_album=bool(token_set & ALBUM_TOKENS),
            suppress_artist_on_search=bool(token_set & ARTIST_TOKENS),
        )


def build_query(metadata: TrackMetadata, suppression: QuerySuppression) -> LookupQuery:
    """
    Build the lookup query for one track

    All four fields are copied from the metadata, then the suppressed ones are
    cleared. Artist suppression is not applied here; the resolver applies it
    right before the search fallback.

    Args:
        metadata: Tags read from the audio file
        suppression: Resolved ignore flags

    Returns:
        A fresh LookupQuery
    """
    query = LookupQuery(
        track_name=metadata.title,
        artist_name=metadata.artist_display,
        album_name=metadata.album,
        duration=metadata.duration,
    )
    if suppression.suppress_duration:
        query.remove_duration()
    if suppression.suppress_album:
        query.remove_album_name()
    return query
