"""Git integration for CommitCraft.

This package classifies porcelain status output, selects what to stage,
and builds commit message templates for a repository.
"""

from commitcraft.git.commit import (
    COMMIT_MESSAGE_FILE,
    COMMIT_TYPES,
    CommitHeader,
    CommitResult,
    build_commit_message,
    format_branch_name,
    generate_commit_message,
    git_commit,
    git_push,
    read_commit_message,
)
from commitcraft.git.files import add_to_git_exclude, create_needed_files
from commitcraft.git.ignore import is_ignored, load_ignore_entries
from commitcraft.git.patterns import (
    ExcludePattern,
    StagingSelection,
    compile_patterns,
    select_for_staging,
)
from commitcraft.git.repository import GitRepository
from commitcraft.git.staging import StagingPlan, StagingResult, add_with_exclude, plan_staging
from commitcraft.git.status import (
    FileCategory,
    StatusEntry,
    count_renames,
    parse_status,
    read_git_status,
    stageable_files,
    staged_deletions,
    to_stage_deletions,
)
from commitcraft.git.utils import find_git_root, is_git_repository, run_git_command

__all__ = [
    # Main class
    "GitRepository",
    # Status classification
    "FileCategory",
    "StatusEntry",
    "parse_status",
    "read_git_status",
    "stageable_files",
    "to_stage_deletions",
    "staged_deletions",
    "count_renames",
    # Staging
    "ExcludePattern",
    "StagingSelection",
    "StagingPlan",
    "StagingResult",
    "compile_patterns",
    "select_for_staging",
    "plan_staging",
    "add_with_exclude",
    # Ignore entries
    "is_ignored",
    "load_ignore_entries",
    # Commit messages
    "COMMIT_MESSAGE_FILE",
    "COMMIT_TYPES",
    "CommitHeader",
    "CommitResult",
    "build_commit_message",
    "format_branch_name",
    "generate_commit_message",
    "read_commit_message",
    "git_commit",
    "git_push",
    # Working files
    "add_to_git_exclude",
    "create_needed_files",
    # Utility functions
    "find_git_root",
    "is_git_repository",
    "run_git_command",
]
