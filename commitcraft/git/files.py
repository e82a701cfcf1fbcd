"""Working files kept at the repository root and hidden from git."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from commitcraft.errors import IoFailureError
from commitcraft.git.commit import COMMIT_MESSAGE_FILE
from commitcraft.git.ignore import COMMITIGNORE_FILE, parse_ignore_lines
from commitcraft.git.repository import GitRepository

logger = logging.getLogger(__name__)

EXCLUDE_MARKER = "# Added by commitcraft"


def add_to_git_exclude(repo: GitRepository, paths: Iterable[str]) -> list[str]:
    """Append paths to `.git/info/exclude`, skipping ones already listed.

    Returns:
        The paths that were added.
    """
    exclude_file = repo.get_git_dir() / "info" / "exclude"

    try:
        content = exclude_file.read_text(encoding="utf-8") if exclude_file.exists() else ""
    except OSError as e:
        raise IoFailureError(str(exclude_file), "read git exclude file", e) from e

    existing = set(parse_ignore_lines(content))
    to_add = [p for p in dict.fromkeys(paths) if p not in existing]
    if not to_add:
        return []

    lines = []
    if EXCLUDE_MARKER not in content:
        if content and not content.endswith("\n"):
            lines.append("")
        if content:
            lines.append("")
        lines.append(EXCLUDE_MARKER)
    elif content and not content.endswith("\n"):
        lines.append("")
    lines.extend(to_add)

    try:
        exclude_file.parent.mkdir(parents=True, exist_ok=True)
        with open(exclude_file, "a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
    except OSError as e:
        raise IoFailureError(str(exclude_file), "write git exclude file", e) from e

    logger.debug(f"Added {to_add} to {exclude_file}")
    return to_add


def create_needed_files(
    repo: GitRepository,
    message_file: str = COMMIT_MESSAGE_FILE,
    commitignore_file: str = COMMITIGNORE_FILE,
) -> list[Path]:
    """Create the message and commit-ignore files if missing and hide them from git.

    Returns:
        The files that were created.
    """
    created = []
    for name in (message_file, commitignore_file):
        path = repo.path / name
        if path.exists():
            continue
        try:
            path.touch()
        except OSError as e:
            raise IoFailureError(str(path), "create file", e) from e
        created.append(path)

    add_to_git_exclude(repo, [message_file, commitignore_file])
    return created
