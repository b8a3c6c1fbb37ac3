"""
Change relevance filtering.

Decides whether a changed path should trigger a rebuild. Ignore patterns are
checked first (gitwildmatch globs compiled with ``pathspec``), then the
extension allow/deny sets.
"""

import logging
from pathlib import Path, PurePath
from typing import AbstractSet, Iterable, List, Optional, Sequence, Union

import pathspec

from ..config.defaults import ALWAYS_RELEVANT_FILENAMES
from ..validation import ConfigError, ValidationError, validate_glob_pattern

logger = logging.getLogger(__name__)

PathLike = Union[str, PurePath]


def normalize_extension(ext: str) -> str:
    """Trim whitespace, strip one leading dot, lower-case: ``" .RS"`` -> ``"rs"``."""
    ext = ext.strip()
    if ext.startswith("."):
        ext = ext[1:]
    return ext.lower()


def is_relevant_path(path: PathLike, include_ext: AbstractSet[str],
                     exclude_ext: AbstractSet[str]) -> bool:
    """
    Return True if a change to ``path`` should trigger a rebuild.

    Cargo.toml and Cargo.lock are always relevant. Otherwise a path needs an
    extension that is in ``include_ext`` and not in ``exclude_ext``. Both sets
    must already be normalized.
    """
    path = PurePath(path)
    if path.name in ALWAYS_RELEVANT_FILENAMES:
        return True

    ext = normalize_extension(path.suffix)
    if not ext:
        return False
    if ext in exclude_ext:
        return False
    return ext in include_ext


def _split_alternatives(body: str) -> List[str]:
    """Split the inside of a ``{...}`` group on its top-level commas."""
    parts = []
    depth = 0
    current = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\" and i + 1 < len(body):
            current.append(body[i:i + 2])
            i += 2
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            i += 1
            continue
        current.append(char)
        i += 1
    parts.append("".join(current))
    return parts


def expand_braces(pattern: str) -> List[str]:
    """
    Expand ``{a,b}`` alternations into separate patterns.

    ``"**/*.{tmp,bak}"`` becomes ``["**/*.tmp", "**/*.bak"]``. The pattern must
    already have passed ``validate_glob_pattern``.
    """
    depth = 0
    start = None
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\":
            i += 2
            continue
        if char == "{":
            if depth == 0:
                start = i
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0 and start is not None:
                prefix, body, suffix = pattern[:start], pattern[start + 1:i], pattern[i + 1:]
                expanded = []
                for alternative in _split_alternatives(body):
                    expanded.extend(expand_braces(prefix + alternative + suffix))
                return expanded
        i += 1
    return [pattern]


def compile_ignore_spec(globs: Sequence[str]) -> pathspec.PathSpec:
    """
    Compile ignore globs into a single matcher.

    Raises:
        ConfigError: If any pattern is malformed
    """
    lines: List[str] = []
    for i, glob in enumerate(globs):
        try:
            validate_glob_pattern(glob, field_name=f"ignore[{i}]")
        except ValidationError as e:
            raise ConfigError(f"bad glob: {e}", field_name="ignore", value=glob) from e
        lines.extend(expand_braces(glob))

    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", lines)
    except ValueError as e:
        raise ConfigError(f"bad glob: {e}", field_name="ignore", value=list(globs)) from e


class PathFilter:
    """
    Applies ignore patterns and extension filters to changed paths.

    Absolute paths under ``base_dir`` are matched relative to it, so that
    anchored patterns like ``src/generated/**`` work on watcher output.
    """

    def __init__(self, ignore_spec: pathspec.PathSpec, include_ext: AbstractSet[str],
                 exclude_ext: AbstractSet[str], base_dir: Optional[Path] = None):
        self.ignore_spec = ignore_spec
        self.include_ext = include_ext
        self.exclude_ext = exclude_ext
        self.base_dir = base_dir or Path.cwd()

    @classmethod
    def from_config(cls, config, base_dir: Optional[Path] = None) -> "PathFilter":
        return cls(config.ignore_spec, config.include_ext, config.exclude_ext, base_dir)

    def _match_key(self, path: PathLike) -> str:
        path = PurePath(path)
        if path.is_absolute():
            try:
                return path.relative_to(self.base_dir).as_posix()
            except ValueError:
                pass
        return path.as_posix()

    def is_ignored(self, path: PathLike) -> bool:
        return self.ignore_spec.match_file(self._match_key(path))

    def is_relevant(self, path: PathLike) -> bool:
        """True if the path is not ignored and passes the extension filters."""
        if self.is_ignored(path):
            return False
        return is_relevant_path(path, self.include_ext, self.exclude_ext)

    def matches(self, paths: Iterable[PathLike]) -> bool:
        """True if at least one of ``paths`` is relevant."""
        for path in paths:
            if self.is_ignored(path):
                logger.debug(f"Ignored change: {path}")
                continue
            if is_relevant_path(path, self.include_ext, self.exclude_ext):
                logger.debug(f"Relevant change: {path}")
                return True
        return False
