"""Git repository operations for CommitCraft."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from commitcraft.errors import GitError, NotARepositoryError
from commitcraft.git.status import read_git_status
from commitcraft.git.utils import (
    DEFAULT_TIMEOUT,
    find_git_root,
    run_command,
    run_git_command,
)

logger = logging.getLogger(__name__)

DETACHED_HEAD = "HEAD"


class GitRepository:
    """A git working tree; every command runs with the tree as its cwd."""

    def __init__(self, path: Path | str, timeout: float = DEFAULT_TIMEOUT):
        """Initialize a GitRepository.

        Args:
            path: Path to the repository root.
            timeout: Timeout in seconds for each git command.

        Raises:
            NotARepositoryError: If path has no .git entry.
        """
        self.path = Path(path).resolve()
        self.timeout = timeout

        if not (self.path / ".git").exists():
            raise NotARepositoryError(str(self.path))

    @classmethod
    def find(cls, start_path: Path | str, timeout: float = DEFAULT_TIMEOUT) -> Optional["GitRepository"]:
        """Find a git repository from a starting path.

        Args:
            start_path: Path to start searching from.
            timeout: Timeout in seconds for each git command.

        Returns:
            GitRepository instance, or None if not found.
        """
        root = find_git_root(start_path)
        if root:
            return cls(root, timeout=timeout)
        return None

    @classmethod
    def open(cls, start_path: Path | str, timeout: float = DEFAULT_TIMEOUT) -> "GitRepository":
        """Like find(), but raise NotARepositoryError instead of returning None."""
        repo = cls.find(start_path, timeout=timeout)
        if repo is None:
            raise NotARepositoryError(str(Path(start_path).resolve()))
        return repo

    def _run(self, args: list[str], **kwargs) -> str:
        """Run a git command in this repository and return its stripped stdout."""
        kwargs.setdefault("timeout", self.timeout)
        result = run_git_command(args, cwd=self.path, **kwargs)
        return result.stdout.strip()

    def read_status(self) -> str:
        """Get raw `git status --porcelain -u` output (not stripped)."""
        return read_git_status(cwd=self.path, timeout=self.timeout)

    def get_top_level(self) -> Path:
        """Get the top level directory of the working tree."""
        return Path(self._run(["rev-parse", "--show-toplevel"]))

    def get_git_dir(self) -> Path:
        """Get the git directory (`.git`, or the real one for worktrees)."""
        git_dir = Path(self._run(["rev-parse", "--git-dir"]))
        return git_dir if git_dir.is_absolute() else self.path / git_dir

    def get_config(self, key: str) -> Optional[str]:
        """Read a git config value, or None when it is not set."""
        result = run_git_command(["config", "--get", key], cwd=self.path, timeout=self.timeout, check=False)
        value = result.stdout.strip()
        return value if result.returncode == 0 and value else None

    def get_current_branch(self, default_branch: str = "main") -> str:
        """Get current branch name.

        Falls back, in order, to the unborn branch HEAD points at, git's
        `init.defaultBranch`, and finally default_branch, so repositories
        without commits still get a name. A detached HEAD yields the short
        commit hash.

        Args:
            default_branch: Name used when nothing else resolves.

        Returns:
            Branch name.
        """
        try:
            branch = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        except GitError as e:
            logger.debug(f"HEAD does not resolve ({e}), looking up the default branch")
        else:
            if branch != DETACHED_HEAD:
                return branch
            return self._run(["rev-parse", "--short", "HEAD"])

        try:
            unborn = self._run(["symbolic-ref", "--short", "HEAD"])
            if unborn:
                return unborn
        except GitError as e:
            logger.debug(f"HEAD is not a symbolic ref: {e}")

        return self.get_config("init.defaultBranch") or default_branch

    def get_commit_count(self) -> int:
        """Count the commits reachable from HEAD.

        A freshly initialized repository has no HEAD, so counting falls back
        to all refs, which yields 0 there.

        Raises:
            GitError: If neither count can be obtained or parsed.
        """
        try:
            output = self._run(["rev-list", "--count", "HEAD"])
        except GitError as head_error:
            try:
                output = self._run(["rev-list", "--count", "--all"])
            except GitError:
                raise head_error

        try:
            return int(output)
        except ValueError:
            raise GitError(f"Invalid commit count: {output!r}")

    def add(self, files: list[str]) -> None:
        """Stage files (new, modified or deleted) in a single git call."""
        if not files:
            return
        self._run(["add", "--"] + files)

    def commit(self, message: str, args: Optional[list[str]] = None, sign: bool = False) -> str:
        """Create a commit.

        Args:
            message: Commit message.
            args: Extra arguments passed to git commit.
            sign: Add -S to GPG-sign the commit.

        Returns:
            Git's output.
        """
        cmd = ["commit"]
        if sign:
            cmd.append("-S")
        cmd.extend(["-m", message])
        cmd.extend(args or [])
        return self._run(cmd)

    def push(self, args: Optional[list[str]] = None) -> str:
        """Push to the remote. Git reports progress on stderr, so both streams are returned."""
        result = run_git_command(["push"] + (args or []), cwd=self.path, timeout=self.timeout)
        return "\n".join(part.strip() for part in (result.stdout, result.stderr) if part.strip())

    def is_gpg_signing_available(self) -> bool:
        """Detect whether commits can be GPG-signed.

        Signing needs a configured `user.signingkey` whose secret key is
        known to the GPG program (`gpg.program`, or `gpg` by default).
        """
        signing_key = self.get_config("user.signingkey")
        if not signing_key:
            return False

        gpg_program = self.get_config("gpg.program") or "gpg"
        result = run_command(
            [gpg_program, "--list-secret-keys", signing_key],
            cwd=self.path,
            timeout=self.timeout,
        )
        return result.returncode == 0
