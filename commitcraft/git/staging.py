"""Staging with exclude patterns.

Selection is computed by plan_staging() for both real and preview runs;
add_with_exclude() only decides whether the plan is applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from commitcraft.git.patterns import PatternLike, select_for_staging
from commitcraft.git.repository import GitRepository
from commitcraft.git.status import (
    count_renames,
    stageable_files,
    staged_changes,
    to_stage_deletions,
)

logger = logging.getLogger(__name__)


@dataclass
class StagingPlan:
    """What a staging run would do, derived from one status snapshot."""

    included: list[str] = field(default_factory=list)
    excluded: list[str] = field(default_factory=list)
    deletions: list[str] = field(default_factory=list)

    @property
    def excluded_count(self) -> int:
        return len(self.excluded)

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to add and nothing to delete."""
        return not self.included and not self.deletions

    @property
    def paths(self) -> list[str]:
        """Everything handed to `git add`, additions first."""
        return self.included + self.deletions


@dataclass
class StagingResult:
    """Outcome of add_with_exclude()."""

    plan: StagingPlan
    dry_run: bool = False
    staged_count: Optional[int] = None
    renamed_count: int = 0

    @property
    def applied(self) -> bool:
        return not self.dry_run and not self.plan.is_empty

    def summary(self) -> str:
        """Get a one-line summary of the run."""
        plan = self.plan
        if plan.is_empty:
            return "No files to add or delete"
        if self.dry_run:
            return (
                f"Would add {len(plan.included)} file(s), delete {len(plan.deletions)} "
                f"and exclude {plan.excluded_count} file(s)"
            )
        return (
            f"Added {self.staged_count} file(s), deleted {len(plan.deletions)} "
            f"and excluded {plan.excluded_count} file(s) for commit"
        )


def plan_staging(status_text: str, exclude_patterns: Sequence[PatternLike]) -> StagingPlan:
    """Compute the staging selection from porcelain status text.

    Args:
        status_text: Output of `git status --porcelain -u`.
        exclude_patterns: Glob patterns whose matches are left unstaged.

    Returns:
        StagingPlan with included, excluded and deleted paths.

    Raises:
        PatternCompileError: If a pattern is invalid.
    """
    selection = select_for_staging(stageable_files(status_text), exclude_patterns)
    return StagingPlan(
        included=selection.included,
        excluded=selection.excluded,
        deletions=to_stage_deletions(status_text),
    )


def add_with_exclude(
    repo: GitRepository,
    exclude_patterns: Sequence[PatternLike],
    dry_run: bool = False,
) -> StagingResult:
    """Stage every change except the paths matching an exclude pattern.

    Unstaged deletions are staged too. Additions and deletions go to git in
    a single `git add` call, run from the repository root since porcelain
    paths are root-relative. Afterwards the status is read again and the
    staged (non-deletion) changes are counted.

    Args:
        repo: Repository to stage in.
        exclude_patterns: Glob patterns to exclude.
        dry_run: Compute the plan without touching the index.

    Returns:
        StagingResult describing what was (or would be) staged.
    """
    status_text = repo.read_status()
    plan = plan_staging(status_text, exclude_patterns)
    result = StagingResult(plan=plan, dry_run=dry_run, renamed_count=count_renames(status_text))

    if plan.is_empty:
        logger.info("No files to add or delete")
        return result

    if dry_run:
        logger.debug(f"Dry run: would stage {len(plan.paths)} path(s)")
        return result

    repo.add(plan.paths)

    post_status = repo.read_status()
    result.staged_count = len(staged_changes(post_status))
    result.renamed_count = count_renames(post_status)

    logger.debug(
        f"Staged {result.staged_count} change(s) ({result.renamed_count} rename(s)), "
        f"{len(plan.deletions)} deletion(s)"
    )
    return result
