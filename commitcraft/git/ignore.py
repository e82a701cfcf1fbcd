"""Ignore entries for commit message generation.

Entries are literal paths or folder prefixes read from `.commitignore` and
`.gitignore`. They are not globs: `*.log` only matches a file literally
named `*.log`. Staging exclusion lives in `commitcraft.git.patterns`.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from typing import Iterable

from commitcraft.errors import IoFailureError

logger = logging.getLogger(__name__)

COMMITIGNORE_FILE = ".commitignore"
GITIGNORE_FILE = ".gitignore"


def parse_ignore_lines(content: str) -> list[str]:
    """Extract entries from ignore file content.

    Blank lines and lines starting with `#` are skipped.
    """
    entries = []
    for line in content.splitlines():
        entry = line.strip()
        if entry and not entry.startswith("#"):
            entries.append(entry)
    return entries


def read_ignore_file(path: Path) -> list[str]:
    """Read entries from one ignore file; a missing file has none.

    Raises:
        IoFailureError: If the file exists but cannot be read.
    """
    if not path.is_file():
        return []

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IoFailureError(str(path), "read ignore file", e) from e

    return parse_ignore_lines(content)


def merge_ignore_entries(*sources: Iterable[str]) -> list[str]:
    """Merge entry lists, dropping exact duplicates and keeping first-seen order."""
    merged: list[str] = []
    seen: set[str] = set()
    for source in sources:
        for entry in source:
            if entry not in seen:
                seen.add(entry)
                merged.append(entry)
    return merged


def load_ignore_entries(
    root: Path | str,
    commitignore_file: str = COMMITIGNORE_FILE,
    gitignore_file: str = GITIGNORE_FILE,
) -> list[str]:
    """Load and merge the commit-ignore and git-ignore entries under root."""
    root = Path(root)
    entries = merge_ignore_entries(
        read_ignore_file(root / commitignore_file),
        read_ignore_file(root / gitignore_file),
    )
    logger.debug(f"Loaded {len(entries)} ignore entries from {root}")
    return entries


def _is_in_folder(path: str, folder: str) -> bool:
    parent = PurePosixPath(path).parent
    folder_path = PurePosixPath(folder)
    if str(folder_path) in ("", "."):
        return False
    return parent == folder_path or folder_path in parent.parents


def is_ignored(path: str, ignore_entries: Iterable[str]) -> bool:
    """Check whether a path is covered by an ignore entry.

    A path is ignored when it equals an entry, or when its parent
    directory is the entry or lies below it. Containment is
    component-wise: `data/year_2015` does not contain `data/year_20151/x`.

    Examples:
        >>> is_ignored("data/year_2015/puzzles/day_01.md", ["data/year_2015/puzzles"])
        True
        >>> is_ignored("data/year_2016/x.md", ["data/year_2015/puzzles"])
        False
    """
    entries = list(ignore_entries)
    if path in entries:
        return True
    return any(_is_in_folder(path, entry) for entry in entries)
