"""
Synchronization package: the per-file lyrics pipeline over a whole library

The synchronizer ties the other packages together:

    library.walker  -> audio files, lazily, honouring hidden and ignore rules
    audio.metadata  -> TrackMetadata from tags
    lyrics.resolver -> ResolutionOutcome (exact lookup, optional search)
    library.writer  -> .lrc sidecar next to the audio file

Usage:
    synchronizer = get_synchronizer()
    result = synchronizer.sync_directory("~/Music")
    print(result.summary)
"""

from .synchronizer import (
    LibrarySynchronizer,
    SyncResult,
    create_synchronizer,
    get_synchronizer,
    reset_synchronizer,
)

__all__ = [
    'LibrarySynchronizer',
    'SyncResult',
    'create_synchronizer',
    'get_synchronizer',
    'reset_synchronizer',
]
