"""Git utility functions for CommitCraft."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Optional

from commitcraft.errors import GitError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


def find_git_root(start_path: Path | str) -> Optional[Path]:
    """Find the root of a git repository.

    Walks up the directory tree from start_path looking for a .git entry
    (a directory, or a file for worktrees and submodules).

    Args:
        start_path: Path to start searching from.

    Returns:
        Path to the repository root, or None if not in a git repository.
    """
    path = Path(start_path).resolve()

    for parent in [path] + list(path.parents):
        if (parent / ".git").exists():
            return parent

    return None


def is_git_repository(path: Path | str) -> bool:
    """Check if a path is inside a git repository."""
    return find_git_root(path) is not None


def run_command(
    cmd: list[str],
    cwd: Path | str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> subprocess.CompletedProcess:
    """Run an arbitrary command, never raising on a non-zero exit.

    Used for probes such as `gpg --version` where failure is an answer,
    not an error.

    Args:
        cmd: Full command line.
        cwd: Working directory for the command.
        timeout: Command timeout in seconds.

    Returns:
        CompletedProcess with stdout/stderr. A missing executable is
        reported as returncode 127.
    """
    logger.debug(f"Running command: {' '.join(cmd)}")

    try:
        return subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        return subprocess.CompletedProcess(cmd, 127, stdout="", stderr=str(e))
    except subprocess.TimeoutExpired:
        raise TimeoutError(f"Command timed out after {timeout}s: {' '.join(cmd)}")


def run_git_command(
    args: list[str],
    cwd: Path | str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """Run a git command and return the result.

    Args:
        args: Git command arguments (without 'git' prefix).
        cwd: Working directory for the command.
        timeout: Command timeout in seconds.
        check: If True, raise GitError on non-zero exit.

    Returns:
        CompletedProcess with stdout/stderr.

    Raises:
        GitError: If check=True and command fails, or git is not installed.
        TimeoutError: If command times out.
    """
    cmd = ["git"] + args

    logger.debug(f"Running git command: {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise GitError("git executable not found on PATH")
    except subprocess.TimeoutExpired:
        raise TimeoutError(f"Git command timed out after {timeout}s: {' '.join(cmd)}")

    if check and result.returncode != 0:
        error_msg = result.stderr.strip() or f"Git command failed with exit code {result.returncode}"
        raise GitError(error_msg, result.returncode, result.stderr)

    return result
