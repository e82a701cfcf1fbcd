"""Commit message generation, committing and pushing."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence

from commitcraft.errors import CommitMessageNotFoundError, IoFailureError
from commitcraft.git.ignore import COMMITIGNORE_FILE, is_ignored, load_ignore_entries
from commitcraft.git.repository import GitRepository
from commitcraft.git.status import stageable_files, staged_deletions

logger = logging.getLogger(__name__)

COMMIT_MESSAGE_FILE = "commit_message.md"
COMMIT_TYPES = ("chore", "feat", "fix", "test")


def format_branch_name(commit_types: Iterable[str], branch: str) -> str:
    """Strip a commit type prefix such as `feat/` from a branch name.

    Only the earliest `<type>/` starting a path segment is removed, once.

    Examples:
        >>> format_branch_name(COMMIT_TYPES, "feat/user-auth")
        'user-auth'
        >>> format_branch_name(COMMIT_TYPES, "feat/fix/complex")
        'fix/complex'
        >>> format_branch_name(COMMIT_TYPES, "main")
        'main'
    """
    best_index = -1
    best_token = ""

    for commit_type in commit_types:
        token = f"{commit_type}/"
        index = branch.find(token)
        while index > 0 and branch[index - 1] != "/":
            index = branch.find(token, index + 1)
        if index != -1 and (best_index == -1 or index < best_index):
            best_index, best_token = index, token

    if best_index == -1:
        return branch
    return branch[:best_index] + branch[best_index + len(best_token):]


@dataclass(frozen=True)
class CommitHeader:
    """First line of a generated commit message."""

    commit_type: str
    branch: str
    number: Optional[int] = None

    def render(self) -> str:
        text = f"({self.commit_type} on {self.branch})"
        if self.number is not None:
            return f"[{self.number}] {text}"
        return text


def build_commit_message(
    header: CommitHeader,
    files: Iterable[str],
    deleted_files: Iterable[str],
    ignore_entries: Sequence[str] = (),
) -> str:
    """Render the commit message template.

    Every file not covered by an ignore entry gets a placeholder for its
    description. Deleted files are always listed.
    """
    parts = [f"{header.render()}\n\n\n"]

    for path in sorted(files):
        if is_ignored(path, ignore_entries):
            logger.debug(f"Leaving ignored file out of the commit message: {path}")
            continue
        parts.append(f"- `{path}`:\n\n\t\n\n")

    for path in sorted(deleted_files):
        parts.append(f"- `{path}`: deleted\n\n")

    return "".join(parts)


def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise IoFailureError(str(path), "write commit message file", e) from e


def generate_commit_message(
    repo: GitRepository,
    commit_type: str,
    no_commit_number: bool = False,
    commit_types: Iterable[str] = COMMIT_TYPES,
    default_branch: str = "main",
    message_file: str = COMMIT_MESSAGE_FILE,
    commitignore_file: str = COMMITIGNORE_FILE,
) -> Path:
    """Write a fresh commit message template for the current changes.

    Any previous content of the message file is discarded first.

    Args:
        repo: Repository to describe.
        commit_type: Type shown in the header, e.g. "feat".
        no_commit_number: Leave the `[N]` commit number out of the header.
        commit_types: Types stripped from the front of the branch name.
        default_branch: Branch name used when HEAD cannot be resolved.
        message_file: Message file name, relative to the repository root.
        commitignore_file: Commit-ignore file name, relative to the root.

    Returns:
        Path of the written message file.
    """
    path = repo.path / message_file
    if path.exists():
        _write_text(path, "")

    status_text = repo.read_status()
    files = stageable_files(status_text)
    deleted = staged_deletions(status_text)

    branch = format_branch_name(commit_types, repo.get_current_branch(default_branch))
    number = None if no_commit_number else repo.get_commit_count() + 1
    header = CommitHeader(commit_type=commit_type, branch=branch, number=number)

    ignore_entries = load_ignore_entries(repo.path, commitignore_file=commitignore_file)
    content = build_commit_message(header, files, deleted, ignore_entries)

    _write_text(path, content)
    logger.info(f"{message_file} created")
    return path


def read_commit_message(repo: GitRepository, message_file: str = COMMIT_MESSAGE_FILE) -> str:
    """Read the message file, stripped of surrounding whitespace.

    Raises:
        CommitMessageNotFoundError: If the file does not exist.
        IoFailureError: If it cannot be read.
    """
    path = repo.path / message_file
    if not path.is_file():
        raise CommitMessageNotFoundError(message_file)

    try:
        return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        raise IoFailureError(str(path), "read commit message file", e) from e


def filter_commit_args(args: Iterable[str]) -> list[str]:
    """Drop arguments that would clash with the generated message."""
    return [arg for arg in args if not arg.startswith(("-c", "--commit"))]


@dataclass
class CommitResult:
    """Outcome of git_commit()."""

    message: str
    sign: bool
    args: list[str] = field(default_factory=list)
    dry_run: bool = False
    unsigned_fallback: bool = False
    output: str = ""


def git_commit(
    repo: GitRepository,
    args: Optional[Sequence[str]] = None,
    unsigned: bool = False,
    dry_run: bool = False,
    message_file: str = COMMIT_MESSAGE_FILE,
) -> CommitResult:
    """Commit staged changes with the message file as message.

    Commits are signed with -S when GPG signing is available, unless
    unsigned is set.

    Args:
        repo: Repository to commit in.
        args: Extra git commit arguments.
        unsigned: Never sign.
        dry_run: Only report what would be committed.
        message_file: Message file name, relative to the repository root.

    Returns:
        CommitResult with the message, signing decision and git output.
    """
    message = read_commit_message(repo, message_file)
    filtered_args = filter_commit_args(args or [])

    gpg_available = False if unsigned else repo.is_gpg_signing_available()
    result = CommitResult(
        message=message,
        sign=gpg_available,
        args=filtered_args,
        dry_run=dry_run,
        unsigned_fallback=not unsigned and not gpg_available,
    )

    if result.unsigned_fallback:
        logger.debug("GPG signing not available, commit will be unsigned")

    if dry_run:
        return result

    result.output = repo.commit(message, filtered_args, sign=result.sign)
    return result


def git_push(
    repo: GitRepository,
    args: Optional[Sequence[str]] = None,
    dry_run: bool = False,
) -> Optional[str]:
    """Push to the remote.

    Returns:
        Git's output, or None for a dry run.
    """
    if dry_run:
        logger.debug(f"Dry run: would push with args {list(args or [])}")
        return None
    return repo.push(list(args or []))
