"""Tests for GitRepository class."""

from unittest.mock import MagicMock, patch

import pytest

from commitcraft.errors import GitError, NotARepositoryError
from commitcraft.git.repository import GitRepository


def _ok(stdout: str = "", stderr: str = "") -> MagicMock:
    return MagicMock(stdout=stdout, stderr=stderr, returncode=0)


def _fail(stderr: str = "fatal") -> MagicMock:
    return MagicMock(stdout="", stderr=stderr, returncode=1)


class TestGitRepositoryInit:
    """Tests for GitRepository construction and lookup."""

    def test_init_without_git_dir(self, tmp_path):
        """Test a directory without .git is rejected."""
        with pytest.raises(NotARepositoryError):
            GitRepository(tmp_path)

    def test_find_in_repo(self, fake_repo_path):
        """Test find returns repository when in repo."""
        result = GitRepository.find(fake_repo_path)
        assert result is not None
        assert result.path == fake_repo_path.resolve()

    def test_find_from_subdirectory(self, fake_repo_path):
        """Test find walks up to the repository root."""
        subdir = fake_repo_path / "src" / "pkg"
        subdir.mkdir(parents=True)

        result = GitRepository.find(subdir, timeout=5.0)
        assert result.path == fake_repo_path.resolve()
        assert result.timeout == 5.0

    @patch("commitcraft.git.repository.find_git_root")
    def test_open_outside_repo(self, mock_find, tmp_path):
        """Test open raises when no repository is found."""
        mock_find.return_value = None

        with pytest.raises(NotARepositoryError) as exc_info:
            GitRepository.open(tmp_path)

        assert exc_info.value.code == "NOT_A_REPOSITORY"


class TestGitRepositoryCommands:
    """Tests for the git commands GitRepository runs."""

    @pytest.fixture
    def repo(self, fake_repo_path):
        return GitRepository(fake_repo_path, timeout=7.0)

    @patch("commitcraft.git.repository.run_git_command")
    def test_commands_run_in_repo_root(self, mock_run, repo):
        """Test cwd and timeout are passed on every call."""
        mock_run.return_value = _ok("/repo\n")

        repo.get_top_level()

        _, kwargs = mock_run.call_args
        assert kwargs["cwd"] == repo.path
        assert kwargs["timeout"] == 7.0

    @patch("commitcraft.git.repository.read_git_status")
    def test_read_status_not_stripped(self, mock_status, repo):
        """Test the leading space of the first status line survives."""
        mock_status.return_value = " M a.py\n"

        assert repo.read_status() == " M a.py\n"
        mock_status.assert_called_once_with(cwd=repo.path, timeout=7.0)

    @patch("commitcraft.git.repository.run_git_command")
    def test_get_git_dir_relative(self, mock_run, repo):
        """Test a relative git dir is resolved against the root."""
        mock_run.return_value = _ok(".git\n")
        assert repo.get_git_dir() == repo.path / ".git"

    @patch("commitcraft.git.repository.run_git_command")
    def test_get_config_unset(self, mock_run, repo):
        """Test unset config keys yield None."""
        mock_run.return_value = _fail("")
        assert repo.get_config("user.signingkey") is None

    @patch("commitcraft.git.repository.run_git_command")
    def test_get_current_branch(self, mock_run, repo):
        """Test the branch name is returned."""
        mock_run.return_value = _ok("feat/login\n")
        assert repo.get_current_branch() == "feat/login"

    @patch("commitcraft.git.repository.run_git_command")
    def test_get_current_branch_detached(self, mock_run, repo):
        """Test a detached HEAD yields the short hash."""
        mock_run.side_effect = [_ok("HEAD\n"), _ok("abc1234\n")]
        assert repo.get_current_branch() == "abc1234"

    @patch("commitcraft.git.repository.run_git_command")
    def test_get_current_branch_unborn(self, mock_run, repo):
        """Test a repository without commits uses the symbolic ref."""
        mock_run.side_effect = [GitError("unknown revision"), _ok("develop\n")]
        assert repo.get_current_branch() == "develop"

    @patch("commitcraft.git.repository.run_git_command")
    def test_get_current_branch_default(self, mock_run, repo):
        """Test the configured default is the last resort."""
        mock_run.side_effect = [
            GitError("unknown revision"),
            GitError("not a symbolic ref"),
            _fail(""),
        ]
        assert repo.get_current_branch("trunk") == "trunk"

    @patch("commitcraft.git.repository.run_git_command")
    def test_get_current_branch_init_default(self, mock_run, repo):
        """Test git's init.defaultBranch is preferred over the fallback."""
        mock_run.side_effect = [
            GitError("unknown revision"),
            GitError("not a symbolic ref"),
            _ok("master\n"),
        ]
        assert repo.get_current_branch("trunk") == "master"

    @patch("commitcraft.git.repository.run_git_command")
    def test_get_commit_count(self, mock_run, repo):
        """Test the commit count is parsed."""
        mock_run.return_value = _ok("42\n")
        assert repo.get_commit_count() == 42

    @patch("commitcraft.git.repository.run_git_command")
    def test_get_commit_count_empty_repo(self, mock_run, repo):
        """Test a repository without HEAD counts all refs."""
        mock_run.side_effect = [GitError("bad revision 'HEAD'"), _ok("0\n")]

        assert repo.get_commit_count() == 0
        assert mock_run.call_args[0][0] == ["rev-list", "--count", "--all"]

    @patch("commitcraft.git.repository.run_git_command")
    def test_get_commit_count_failure(self, mock_run, repo):
        """Test the HEAD error surfaces when both counts fail."""
        mock_run.side_effect = [GitError("bad revision 'HEAD'"), GitError("other")]

        with pytest.raises(GitError, match="bad revision"):
            repo.get_commit_count()

    @patch("commitcraft.git.repository.run_git_command")
    def test_get_commit_count_garbage(self, mock_run, repo):
        """Test unparsable output raises GitError."""
        mock_run.return_value = _ok("lots\n")

        with pytest.raises(GitError, match="Invalid commit count"):
            repo.get_commit_count()

    @patch("commitcraft.git.repository.run_git_command")
    def test_add_single_call(self, mock_run, repo):
        """Test all files go to git in one add."""
        mock_run.return_value = _ok()

        repo.add(["a.py", "-weird.py", "old.rs"])

        mock_run.assert_called_once()
        assert mock_run.call_args[0][0] == ["add", "--", "a.py", "-weird.py", "old.rs"]

    @patch("commitcraft.git.repository.run_git_command")
    def test_add_nothing(self, mock_run, repo):
        """Test an empty list never runs git."""
        repo.add([])
        mock_run.assert_not_called()

    @patch("commitcraft.git.repository.run_git_command")
    def test_commit_signed(self, mock_run, repo):
        """Test -S is added for signed commits."""
        mock_run.return_value = _ok("[main abc] msg\n")

        output = repo.commit("msg", ["--no-verify"], sign=True)

        assert output == "[main abc] msg"
        assert mock_run.call_args[0][0] == ["commit", "-S", "-m", "msg", "--no-verify"]

    @patch("commitcraft.git.repository.run_git_command")
    def test_commit_unsigned(self, mock_run, repo):
        """Test unsigned commits have no -S."""
        mock_run.return_value = _ok()

        repo.commit("msg")

        assert mock_run.call_args[0][0] == ["commit", "-m", "msg"]

    @patch("commitcraft.git.repository.run_git_command")
    def test_push_output(self, mock_run, repo):
        """Test stdout and stderr are both returned."""
        mock_run.return_value = _ok("", "To origin\n   abc..def  main -> main\n")

        assert repo.push(["origin"]) == "To origin\n   abc..def  main -> main"
        assert mock_run.call_args[0][0] == ["push", "origin"]


class TestGpgSigning:
    """Tests for GPG signing detection."""

    @pytest.fixture
    def repo(self, fake_repo_path):
        return GitRepository(fake_repo_path)

    @patch("commitcraft.git.repository.run_command")
    @patch("commitcraft.git.repository.run_git_command")
    def test_no_signing_key(self, mock_git, mock_cmd, repo):
        """Test no signing key means no signing."""
        mock_git.return_value = _fail("")

        assert not repo.is_gpg_signing_available()
        mock_cmd.assert_not_called()

    @patch("commitcraft.git.repository.run_command")
    @patch("commitcraft.git.repository.run_git_command")
    def test_key_known_to_gpg(self, mock_git, mock_cmd, repo):
        """Test a configured key with a secret key available."""
        mock_git.side_effect = [_ok("ABCD1234\n"), _fail("")]
        mock_cmd.return_value = _ok("sec   rsa4096/ABCD1234\n")

        assert repo.is_gpg_signing_available()
        assert mock_cmd.call_args[0][0] == ["gpg", "--list-secret-keys", "ABCD1234"]

    @patch("commitcraft.git.repository.run_command")
    @patch("commitcraft.git.repository.run_git_command")
    def test_custom_gpg_program(self, mock_git, mock_cmd, repo):
        """Test gpg.program is honored."""
        mock_git.side_effect = [_ok("ABCD1234\n"), _ok("gpg2\n")]
        mock_cmd.return_value = _ok()

        repo.is_gpg_signing_available()

        assert mock_cmd.call_args[0][0][0] == "gpg2"

    @patch("commitcraft.git.repository.run_command")
    @patch("commitcraft.git.repository.run_git_command")
    def test_key_unknown_to_gpg(self, mock_git, mock_cmd, repo):
        """Test a configured key gpg does not know about."""
        mock_git.side_effect = [_ok("ABCD1234\n"), _fail("")]
        mock_cmd.return_value = MagicMock(stdout="", stderr="not found", returncode=2)

        assert not repo.is_gpg_signing_available()
