"""Pytest configuration and fixtures for CommitCraft tests."""

import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

import pytest

from commitcraft.config import reset_settings
from commitcraft.git import GitRepository


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary config file."""
    config_path = temp_dir / "config.yaml"
    config_path.write_text(
        """
editor: vim
default_branch: trunk
commit_types:
  - chore
  - feat
  - fix
  - docs
"""
    )
    return config_path


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove COMMITCRAFT_* variables and reset the settings singleton."""
    original = {k: v for k, v in os.environ.items() if k.startswith("COMMITCRAFT_")}
    for var in original:
        del os.environ[var]

    reset_settings()

    yield

    for var in [k for k in os.environ if k.startswith("COMMITCRAFT_")]:
        del os.environ[var]
    os.environ.update(original)

    reset_settings()


@pytest.fixture
def fake_repo_path(tmp_path: Path) -> Path:
    """A directory that looks like a repository root (has .git)."""
    (tmp_path / ".git").mkdir()
    return tmp_path


@pytest.fixture
def mock_repo(fake_repo_path: Path) -> MagicMock:
    """A GitRepository double rooted at a real temporary directory."""
    repo = MagicMock(spec=GitRepository)
    repo.path = fake_repo_path
    repo.timeout = 30.0
    repo.get_git_dir.return_value = fake_repo_path / ".git"
    repo.get_current_branch.return_value = "main"
    repo.get_commit_count.return_value = 0
    repo.is_gpg_signing_available.return_value = False
    repo.read_status.return_value = ""
    return repo


def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """A real git repository with one commit on branch main."""
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    _git(tmp_path, "init", "-q")
    _git(tmp_path, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(tmp_path, "config", "user.name", "Test User")
    _git(tmp_path, "config", "user.email", "test@example.com")
    _git(tmp_path, "config", "commit.gpgsign", "false")

    (tmp_path / "README.md").write_text("# Test\n")
    _git(tmp_path, "add", "README.md")
    _git(tmp_path, "commit", "-q", "-m", "initial")

    return tmp_path


@pytest.fixture
def run_git():
    """Helper to run git in a test repository."""
    return _git
