"""Tests for the working files kept at the repository root."""

from commitcraft.git.files import EXCLUDE_MARKER, add_to_git_exclude, create_needed_files


class TestAddToGitExclude:
    """Tests for add_to_git_exclude function."""

    def test_creates_exclude_file(self, mock_repo):
        """Test info/exclude is created when missing."""
        added = add_to_git_exclude(mock_repo, ["commit_message.md"])

        exclude = mock_repo.path / ".git" / "info" / "exclude"
        assert added == ["commit_message.md"]
        assert exclude.read_text() == f"{EXCLUDE_MARKER}\ncommit_message.md\n"

    def test_appends_after_existing_content(self, mock_repo):
        """Test existing rules are kept and separated by a blank line."""
        exclude = mock_repo.path / ".git" / "info" / "exclude"
        exclude.parent.mkdir(parents=True)
        exclude.write_text("# git ls-files --others --exclude-from=.git/info/exclude\n*.swp")

        add_to_git_exclude(mock_repo, ["commit_message.md", ".commitignore"])

        assert exclude.read_text() == (
            "# git ls-files --others --exclude-from=.git/info/exclude\n*.swp\n\n"
            f"{EXCLUDE_MARKER}\ncommit_message.md\n.commitignore\n"
        )

    def test_skips_existing_entries(self, mock_repo):
        """Test running twice does not duplicate entries."""
        first = add_to_git_exclude(mock_repo, ["commit_message.md", ".commitignore"])
        second = add_to_git_exclude(mock_repo, ["commit_message.md", ".commitignore"])

        exclude = mock_repo.path / ".git" / "info" / "exclude"
        assert first == ["commit_message.md", ".commitignore"]
        assert second == []
        assert exclude.read_text().count("commit_message.md") == 1

    def test_marker_written_once(self, mock_repo):
        """Test later additions go under the existing marker."""
        add_to_git_exclude(mock_repo, ["a.md"])
        add_to_git_exclude(mock_repo, ["b.md"])

        exclude = mock_repo.path / ".git" / "info" / "exclude"
        assert exclude.read_text() == f"{EXCLUDE_MARKER}\na.md\nb.md\n"


class TestCreateNeededFiles:
    """Tests for create_needed_files function."""

    def test_creates_missing_files(self, mock_repo):
        """Test both working files are created and excluded."""
        created = create_needed_files(mock_repo)

        assert sorted(p.name for p in created) == [".commitignore", "commit_message.md"]
        assert (mock_repo.path / "commit_message.md").exists()
        assert (mock_repo.path / ".commitignore").exists()

        exclude = (mock_repo.path / ".git" / "info" / "exclude").read_text()
        assert "commit_message.md" in exclude
        assert ".commitignore" in exclude

    def test_keeps_existing_files(self, mock_repo):
        """Test existing files are not touched."""
        ignore = mock_repo.path / ".commitignore"
        ignore.write_text("docs\n")

        created = create_needed_files(mock_repo)

        assert [p.name for p in created] == ["commit_message.md"]
        assert ignore.read_text() == "docs\n"

    def test_custom_names(self, mock_repo):
        """Test configured file names are used."""
        created = create_needed_files(mock_repo, message_file="MSG.md", commitignore_file=".ccignore")

        assert sorted(p.name for p in created) == [".ccignore", "MSG.md"]
