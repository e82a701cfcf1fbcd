"""Porcelain status parsing and classification.

`git status --porcelain -u` prints one line per path in the form
``XY<sep>path`` or ``XY<sep>old -> new`` for renames, where X is the
index state and Y the working tree state. Paths git had to quote are
unquoted here so they can be handed back to git. Every line is parsed once into
a StatusEntry; the category extractors below are plain filters over that
list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from commitcraft.errors import MalformedStatusLineError, StatusUnavailableError
from commitcraft.git.utils import DEFAULT_TIMEOUT, run_git_command

logger = logging.getLogger(__name__)

STATUS_ARGS = ["status", "--porcelain", "-u"]

# Every code git may print in either column.
STATUS_CODES = frozenset("MADRCU?T! ")

# Codes that make an entry worth staging when no deletion rule applies.
STAGEABLE_CODES = frozenset("MTARCU?")

RENAME_ARROW = " -> "

_ESCAPES = {
    "a": 0x07, "b": 0x08, "t": 0x09, "n": 0x0A, "v": 0x0B,
    "f": 0x0C, "r": 0x0D, '"': 0x22, "\\": 0x5C,
}


class FileCategory(Enum):
    """Semantic category of a status entry."""

    MODIFIED = "modified"
    UNTRACKED = "untracked"
    RENAMED = "renamed"
    STAGED_DELETION = "staged_deletion"
    UNSTAGED_DELETION = "unstaged_deletion"

    @property
    def is_stageable(self) -> bool:
        return self in (FileCategory.MODIFIED, FileCategory.UNTRACKED, FileCategory.RENAMED)


@dataclass(frozen=True)
class StatusEntry:
    """One parsed porcelain status line."""

    index_code: str
    worktree_code: str
    path: str
    renamed_to: Optional[str] = None

    @property
    def resolved_path(self) -> str:
        """The path that downstream operations act on (the new name for renames)."""
        return self.renamed_to if self.renamed_to is not None else self.path

    @property
    def category(self) -> Optional[FileCategory]:
        """Classify the entry, or None when no rule applies (e.g. `!!`)."""
        x, y = self.index_code, self.worktree_code

        if y == "D" and x != "D":
            return FileCategory.UNSTAGED_DELETION
        if x == "D":
            return FileCategory.STAGED_DELETION
        if x in STAGEABLE_CODES or y in STAGEABLE_CODES:
            if x == "?" and y == "?":
                return FileCategory.UNTRACKED
            if self.renamed_to is not None:
                return FileCategory.RENAMED
            return FileCategory.MODIFIED
        return None


def read_git_status(cwd: Path | str | None = None, timeout: float = DEFAULT_TIMEOUT) -> str:
    """Read the porcelain status of the repository at cwd.

    Raises:
        StatusUnavailableError: If git exits with a non-zero code.
    """
    result = run_git_command(STATUS_ARGS, cwd=cwd, timeout=timeout, check=False)
    if result.returncode != 0:
        raise StatusUnavailableError(result.stderr, result.returncode)
    return result.stdout


def parse_status_line(line: str) -> StatusEntry:
    """Parse a single porcelain line.

    Raises:
        MalformedStatusLineError: If the line does not follow ``XY<sep>path``.
    """
    if len(line) < 4:
        raise MalformedStatusLineError(line, "too short")

    x, y, sep = line[0], line[1], line[2]
    if x not in STATUS_CODES or y not in STATUS_CODES:
        raise MalformedStatusLineError(line, f"unknown status code {x + y!r}")
    if sep not in (" ", "\t"):
        raise MalformedStatusLineError(line, "missing separator after status code")

    try:
        old, new = _split_rename(line[3:])
        path = unquote_path(old)
        renamed_to = unquote_path(new) if new is not None else None
    except ValueError as e:
        raise MalformedStatusLineError(line, str(e))

    if renamed_to is not None and (not path or not renamed_to):
        raise MalformedStatusLineError(line, "incomplete rename")
    if not path:
        raise MalformedStatusLineError(line, "empty path")

    return StatusEntry(x, y, path, renamed_to)


def _split_rename(text: str) -> tuple[str, Optional[str]]:
    """Split ``old -> new`` into its still-quoted halves; new is None without an arrow."""
    if text.startswith('"'):
        end = _closing_quote(text)
        old, rest = text[:end + 1], text[end + 1:]
        if not rest:
            return old, None
        if not rest.startswith(RENAME_ARROW):
            raise ValueError(f"unexpected text after quoted path: {rest!r}")
        return old, rest[len(RENAME_ARROW):]

    if RENAME_ARROW in text:
        old, new = text.split(RENAME_ARROW, 1)
        return old, new
    return text, None


def _closing_quote(text: str) -> int:
    i = 1
    while i < len(text):
        if text[i] == "\\":
            i += 2
        elif text[i] == '"':
            return i
        else:
            i += 1
    raise ValueError("unterminated quoted path")


def unquote_path(text: str) -> str:
    """Undo git's C-style path quoting.

    Git quotes paths holding control characters, quotes, backslashes or
    (with the default ``core.quotePath``) non-ASCII bytes, which it writes
    as octal escapes: ``"caf\\303\\251.txt"`` is ``café.txt``. Text that
    does not start with a double quote is returned unchanged.

    Raises:
        ValueError: On an unterminated quote or an unknown escape.
    """
    if not text.startswith('"'):
        return text
    if len(text) < 2 or _closing_quote(text) != len(text) - 1:
        raise ValueError(f"badly quoted path: {text!r}")

    body = text[1:-1]
    raw = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\":
            raw.extend(char.encode("utf-8", "surrogateescape"))
            i += 1
            continue

        escape = body[i + 1:i + 2]
        if escape in _ESCAPES:
            raw.append(_ESCAPES[escape])
            i += 2
            continue

        octal = body[i + 1:i + 4]
        if len(octal) == 3 and all(c in "01234567" for c in octal):
            raw.append(int(octal, 8) & 0xFF)
            i += 4
            continue

        raise ValueError(f"unknown escape in quoted path: {body[i:i + 2]!r}")

    return raw.decode("utf-8", errors="surrogateescape")


def parse_status(text: str) -> list[StatusEntry]:
    """Parse porcelain status text into classifiable entries.

    Best effort: lines that cannot be parsed or classified are logged and
    left out instead of failing the whole parse.
    """
    entries = []

    for line in text.splitlines():
        if not line.strip():
            continue

        try:
            entry = parse_status_line(line)
        except MalformedStatusLineError as e:
            logger.warning(f"Skipping status line: {e}")
            continue

        if entry.category is None:
            logger.debug(f"Status line {line!r} does not take part in staging, skipping")
            continue

        entries.append(entry)

    return entries


def _paths_in(text: str, *categories: FileCategory) -> set[str]:
    return {e.resolved_path for e in parse_status(text) if e.category in categories}


def stageable_files(text: str) -> set[str]:
    """All non-deleted changes, renames resolved to their new name."""
    return {e.resolved_path for e in parse_status(text) if e.category.is_stageable}


def to_stage_deletions(text: str) -> list[str]:
    """Paths deleted in the working tree whose deletion is not staged yet."""
    return sorted(_paths_in(text, FileCategory.UNSTAGED_DELETION))


def staged_deletions(text: str) -> list[str]:
    """Paths whose deletion is already staged."""
    return sorted(_paths_in(text, FileCategory.STAGED_DELETION))


def staged_changes(text: str) -> list[str]:
    """Paths with a staged, non-deletion change in the index column."""
    return sorted({
        e.resolved_path
        for e in parse_status(text)
        if e.index_code not in (" ", "?", "!") and e.category.is_stageable
    })


def count_renames(text: str) -> int:
    """Count staged renames (an `R` in the index column)."""
    return sum(1 for line in text.splitlines() if line.startswith(("R ", "R\t")))
