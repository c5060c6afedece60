# lrcsync/lyrics/__init__.py
"""
Lyrics resolution package

Turns raw track metadata into synchronized lyrics using an LRCLIB-compatible
service: an exact lookup first, then (optionally) a search whose candidates
are ranked by duration and filtered through a tolerance window.

Usage:
    client = get_lrclib_client()
    resolver = LyricsResolver(client, ResolveOptions.from_tokens(["album"], search_fallback=True))
    outcome = resolver.resolve(metadata)
"""

from .models import (
    TrackMetadata,
    LookupQuery,
    LyricsCandidate,
    ResolutionOutcome,
    OutcomeStatus,
    LookupSource,
)
from .query import QuerySuppression, build_query
from .lrclib import LrclibClient, get_lrclib_client, reset_lrclib_client
from .selector import SelectionResult, select_candidate
from .resolver import LyricsResolver, ResolveOptions

__all__ = [
    # Data models
    'TrackMetadata',
    'LookupQuery',
    'LyricsCandidate',
    'ResolutionOutcome',
    'OutcomeStatus',
    'LookupSource',

    # Query building
    'QuerySuppression',
    'build_query',

    # Remote client
    'LrclibClient',
    'get_lrclib_client',
    'reset_lrclib_client',

    # Candidate selection
    'SelectionResult',
    'select_candidate',

    # Orchestration
    'LyricsResolver',
    'ResolveOptions',
]
