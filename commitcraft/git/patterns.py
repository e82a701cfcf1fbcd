"""Glob exclude patterns used when staging.

Each pattern is matched against the full repository-relative path, never
just the file name: ``README.md`` excludes the top level README only, and
``docs`` excludes nothing below ``docs/``. ``*`` stays within one path
segment, ``**`` spans any number of them, and ``{a,b}`` alternation is
supported. Every pattern excludes; there is no negation and no precedence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence, Union

from wcmatch import glob

from commitcraft.errors import PatternCompileError

logger = logging.getLogger(__name__)

# A leading "!" stays literal since NEGATE is not set.
GLOB_FLAGS = glob.GLOBSTAR | glob.BRACE | glob.DOTGLOB


@dataclass(frozen=True)
class ExcludePattern:
    """A compiled exclude rule matched against repository-relative paths."""

    source: str
    matcher: Any = field(repr=False, compare=False)

    @classmethod
    def compile(cls, pattern: str) -> "ExcludePattern":
        """Compile a glob string.

        Raises:
            PatternCompileError: If the pattern is empty or not a valid glob.
        """
        if not pattern or not pattern.strip():
            raise PatternCompileError(pattern, "pattern is empty")

        try:
            matcher = glob.compile(pattern, flags=GLOB_FLAGS)
        except ValueError as e:
            raise PatternCompileError(pattern, str(e)) from e

        return cls(source=pattern, matcher=matcher)

    def matches(self, path: str) -> bool:
        """Check whether the full relative path matches this pattern."""
        return self.matcher.match(path)


PatternLike = Union[ExcludePattern, str]


def compile_patterns(patterns: Iterable[PatternLike]) -> list[ExcludePattern]:
    """Compile a mix of strings and already compiled patterns."""
    return [p if isinstance(p, ExcludePattern) else ExcludePattern.compile(p) for p in patterns]


@dataclass
class StagingSelection:
    """Result of filtering the stageable set through exclude patterns."""

    included: list[str] = field(default_factory=list)
    excluded: list[str] = field(default_factory=list)

    @property
    def excluded_count(self) -> int:
        return len(self.excluded)


def select_for_staging(
    stageable: Iterable[str],
    exclude_patterns: Sequence[PatternLike],
) -> StagingSelection:
    """Split stageable paths into included and excluded ones.

    A path is excluded as soon as any pattern matches it. Both lists are
    sorted so repeated calls on the same input give the same result.

    Args:
        stageable: Paths eligible for staging.
        exclude_patterns: Glob patterns, as strings or ExcludePattern.

    Returns:
        StagingSelection with included and excluded paths.

    Raises:
        PatternCompileError: If a string pattern is invalid.
    """
    compiled = compile_patterns(exclude_patterns)
    selection = StagingSelection()

    for path in sorted(set(stageable)):
        if any(pattern.matches(path) for pattern in compiled):
            logger.debug(f"Excluding {path}")
            selection.excluded.append(path)
        else:
            selection.included.append(path)

    return selection
