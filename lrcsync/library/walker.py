"""
Music library walking with hidden-file and ignore-file rules

The walker yields audio files below a root directory lazily, one at a time, so
that a large library starts producing work immediately.

Visibility Rules:
- Entries whose name starts with a dot are hidden and skipped unless
  include_hidden is set.
- Ignore files (".lrcsyncignore" and ".ignore" by default) may appear in any
  directory. Each non-blank line that does not start with "#" is a glob:
    - "!" negates a pattern (re-includes what an earlier pattern excluded)
    - a trailing "/" restricts the pattern to directories
    - a leading "/" or any inner "/" anchors the pattern to the directory
      holding the ignore file; otherwise it matches names at any depth
  Rules apply to the ignore file's directory and everything below it. The last
  matching rule wins, and rules from deeper directories are considered after
  rules from their parents.

Error Handling:
Symbolic links to directories are not followed.

A directory that cannot be listed is reported as a WalkEntry carrying a
WalkError and the walk continues with the remaining directories.
"""

import fnmatch
import mimetypes
import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterator, List, Optional, Sequence, Union

from ..exceptions import WalkError
from ..utils.logger import get_logger

# Not every platform's mime database knows these
for _mime, _ext in (
    ('audio/flac', '.flac'),
    ('audio/mp4', '.m4a'),
    ('audio/ogg', '.ogg'),
    ('audio/ogg', '.oga'),
    ('audio/opus', '.opus'),
    ('audio/x-ms-wma', '.wma'),
    ('audio/x-aiff', '.aiff'),
    ('audio/wav', '.wav'),
    ('audio/x-ape', '.ape'),
    ('audio/x-wavpack', '.wv'),
):
    mimetypes.add_type(_mime, _ext)

DEFAULT_IGNORE_FILENAMES = (".lrcsyncignore", ".ignore")

logger = get_logger(__name__)


@dataclass(frozen=True)
class WalkEntry:
    """
    One item produced by the walker: either a file path or an error

    Attributes:
        path: Audio file path (None for error entries)
        error: Directory listing failure (None for file entries)
    """
    path: Optional[Path] = None
    error: Optional[WalkError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class IgnoreRule:
    """
    A single pattern from an ignore file

    Attributes:
        pattern: Glob without the "!" prefix and the leading/trailing "/"
        base_dir: Directory holding the ignore file
        negate: Re-include instead of exclude
        dir_only: Only match directories
        anchored: Match against the path relative to base_dir instead of the name
    """
    pattern: str
    base_dir: Path
    negate: bool = False
    dir_only: bool = False
    anchored: bool = False

    @classmethod
    def parse(cls, line: str, base_dir: Path) -> Optional['IgnoreRule']:
        """
        Parse one ignore-file line

        Returns:
            IgnoreRule, or None for blank lines and comments
        """
        line = line.rstrip("\n").rstrip()
        if not line or line.startswith("#"):
            return None

        negate = line.startswith("!")
        if negate:
            line = line[1:]
        if line.startswith("\\"):
            # "\#name" and "\!name" match literal names
            line = line[1:]

        dir_only = line.endswith("/")
        line = line.rstrip("/")
        anchored = line.startswith("/") or "/" in line
        line = line.lstrip("/")
        if not line:
            return None

        return cls(pattern=line, base_dir=base_dir, negate=negate, dir_only=dir_only, anchored=anchored)

    def matches(self, path: Path, is_dir: bool) -> bool:
        if self.dir_only and not is_dir:
            return False
        try:
            relative = path.relative_to(self.base_dir)
        except ValueError:
            return False

        if self.anchored:
            target = PurePosixPath(*relative.parts).as_posix()
        else:
            target = path.name
        return fnmatch.fnmatchcase(target, self.pattern)


def load_ignore_rules(directory: Path, ignore_filenames: Sequence[str]) -> List[IgnoreRule]:
    """
    Read ignore rules defined directly in a directory

    Args:
        directory: Directory to look in
        ignore_filenames: Ignore file names to honour, in priority order

    Returns:
        Rules in file order; unreadable ignore files are logged and skipped
    """
    rules = []
    for name in ignore_filenames:
        ignore_file = directory / name
        if not os.path.isfile(ignore_file):
            continue
        try:
            with open(ignore_file, 'r', encoding='utf-8', errors='replace') as f:
                for line in f:
                    rule = IgnoreRule.parse(line, directory)
                    if rule:
                        rules.append(rule)
        except OSError as e:
            logger.warning(f"Could not read ignore file {ignore_file}: {e}")
    return rules


def is_ignored(path: Path, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    """
    Apply ignore rules to a path; the last matching rule wins

    Args:
        path: Path to check
        is_dir: Whether the path is a directory
        rules: Rules from the root down to the path's directory

    Returns:
        True if the path is excluded
    """
    ignored = False
    for rule in rules:
        if rule.matches(path, is_dir):
            ignored = not rule.negate
    return ignored


def is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def is_audio_file(path: Union[str, Path]) -> bool:
    """
    Check whether a file looks like audio by its MIME type

    Args:
        path: File path

    Returns:
        True for audio/* MIME types
    """
    mime_type, _ = mimetypes.guess_type(str(path))
    return bool(mime_type and mime_type.startswith("audio/"))


def iter_library(
    root: Union[str, Path],
    include_hidden: bool = False,
    ignore_filenames: Sequence[str] = DEFAULT_IGNORE_FILENAMES,
) -> Iterator[WalkEntry]:
    """
    Lazily walk a library and yield audio files

    Directories are visited depth-first with entries in name order, so runs
    over an unchanged library visit files in the same order.

    Args:
        root: Library root directory
        include_hidden: Also visit dot-files and dot-directories
        ignore_filenames: Names of ignore files to honour

    Yields:
        WalkEntry with an audio file path, or with a WalkError for a
        directory that could not be listed
    """
    root_path = Path(root)
    # Each stack item carries the rules inherited from parent directories
    stack = [(root_path, [])]

    while stack:
        directory, inherited_rules = stack.pop()
        rules = inherited_rules + load_ignore_rules(directory, ignore_filenames)

        try:
            with os.scandir(directory) as it:
                entries = sorted(it, key=lambda e: e.name)
        except OSError as e:
            yield WalkEntry(error=WalkError(
                f"Cannot read directory {directory}: {e.strerror or e}",
                details={'file_path': str(directory), 'original_error': e}
            ))
            continue

        subdirectories = []
        for entry in entries:
            path = Path(entry.path)
            if not include_hidden and is_hidden(path):
                continue

            # Symlinked directories are not followed, so a link back to an
            # ancestor cannot loop
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError as e:
                yield WalkEntry(error=WalkError(
                    f"Cannot stat {path}: {e.strerror or e}",
                    details={'file_path': str(path), 'original_error': e}
                ))
                continue

            if is_ignored(path, is_dir, rules):
                logger.debug(f"Ignoring {path}")
                continue

            if is_dir:
                subdirectories.append((path, rules))
            elif is_audio_file(path):
                yield WalkEntry(path=path)

        # Reversed so that popping visits subdirectories in name order
        stack.extend(reversed(subdirectories))
