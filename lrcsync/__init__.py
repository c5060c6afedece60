"""
lrcsync: fetch synchronized lyrics for a local music library

lrcsync walks a directory of audio files, reads each file's tags and asks an
LRCLIB-compatible lyrics service for matching time-synced lyrics. Matches are
written next to the audio file as a .lrc sidecar, which most players pick up
automatically.

## Package Layout

**Configuration (`lrcsync/config/`)**
- YAML and environment variable settings with typed sections

**Lyrics Resolution (`lrcsync/lyrics/`)**
- Query building with per-field suppression
- LRCLIB client for exact lookups and fuzzy searches
- Duration-based candidate selection with a tolerance window
- The resolver that sequences exact lookup and search fallback

**Library Access (`lrcsync/library/`, `lrcsync/audio/`)**
- Directory walking that honours hidden files and ignore files
- Tag reading through mutagen and .lrc sidecar writing

**Synchronization (`lrcsync/sync/`)**
- The per-file loop that isolates failures and collects a run summary

## Usage

```bash
# Fetch lyrics for everything under the current directory
lrcsync sync

# Fall back to search, matching durations within 3 seconds, and do not send album names
lrcsync sync ~/Music --search --tolerance 3 --ignore album
```
"""

# Version information for the lrcsync package
__version__ = "0.3.0"

# Package author information
__author__ = "lrcsync contributors"

# Project homepage, also sent to the lyrics service in the client identification
__homepage__ = "https://pypi.org/project/lrcsync/"

# Concise description of package functionality for package managers and documentation
__description__ = "Download synchronized lyrics (.lrc) for a local music library from LRCLIB"

__all__ = [
    "__version__",
    "__author__",
    "__homepage__",
    "__description__"
]
