"""
Audio package: tag reading for lyrics lookups

Wraps mutagen so that the rest of the application only ever sees
TrackMetadata values, whatever the container format.

Usage:
    reader = get_metadata_reader()
    metadata = reader.read("Artist - Song.flac")
"""

from .metadata import MetadataReader, get_metadata_reader

__all__ = [
    'MetadataReader',       # Tag reader class for direct instantiation
    'get_metadata_reader',  # Factory function returning the shared reader
]
