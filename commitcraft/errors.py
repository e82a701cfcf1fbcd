"""Centralized exception hierarchy for CommitCraft.

This module defines all custom exceptions used throughout CommitCraft,
organized in a hierarchy so the CLI can catch a single base class and
still report something specific.
"""

from __future__ import annotations

from typing import Any, Optional


class CommitCraftError(Exception):
    """Base exception for all CommitCraft errors.

    Attributes:
        message: Human-readable error message.
        code: Optional error code for programmatic handling.
        details: Optional dictionary with additional error context.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(CommitCraftError):
    """Raised when there's a configuration problem."""
    pass


class ConfigNotFoundError(ConfigurationError):
    """Raised when the user configuration file does not exist."""

    def __init__(self, path: str):
        super().__init__(
            message=f"Configuration file not found at {path}. Run 'commitcraft init [editor]' first",
            code="CONFIG_NOT_FOUND",
            details={"path": path},
        )


class ConfigAlreadyExistsError(ConfigurationError):
    """Raised when trying to create a configuration file that already exists."""

    def __init__(self, path: str):
        super().__init__(
            message=f"Configuration file already exists at {path}. Use 'commitcraft set-editor' to modify it",
            code="CONFIG_ALREADY_EXISTS",
            details={"path": path},
        )


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid configuration for '{field}': {reason}",
            code="INVALID_CONFIG",
            details={"field": field, "value": str(value)[:100], "reason": reason},
        )


# =============================================================================
# Git Errors
# =============================================================================

class GitError(CommitCraftError):
    """Raised when a git operation fails."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ):
        details = {}
        if returncode is not None:
            details["returncode"] = returncode
        if stderr:
            details["stderr"] = stderr[:500]  # Truncate for safety
        super().__init__(message, "GIT_ERROR", details)
        self.returncode = returncode
        self.stderr = stderr


class StatusUnavailableError(GitError):
    """Raised when `git status` cannot be read."""

    def __init__(self, stderr: str, returncode: Optional[int] = None):
        reason = stderr.strip() or "unknown error"
        super().__init__(
            message=f"Could not read repository status: {reason}",
            returncode=returncode,
            stderr=stderr,
        )
        self.code = "STATUS_UNAVAILABLE"


class NotARepositoryError(GitError):
    """Raised when path is not a git repository."""

    def __init__(self, path: str):
        super().__init__(
            message=f"Not a git repository: {path}",
        )
        self.details["path"] = path
        self.code = "NOT_A_REPOSITORY"


class CommitMessageNotFoundError(GitError):
    """Raised when committing without a generated commit message file."""

    def __init__(self, path: str):
        super().__init__(
            message=f"Commit message file '{path}' not found. Run 'commitcraft generate' first",
        )
        self.details["path"] = path
        self.code = "COMMIT_MESSAGE_NOT_FOUND"


# =============================================================================
# Parsing and Pattern Errors
# =============================================================================

class PatternCompileError(CommitCraftError):
    """Raised when an exclude pattern cannot be compiled."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(
            message=f"Invalid exclude pattern '{pattern}': {reason}",
            code="PATTERN_COMPILE_FAILURE",
            details={"pattern": pattern, "reason": reason},
        )


class MalformedStatusLineError(CommitCraftError):
    """Describes a status line that could not be classified.

    The status parser logs these and moves on; they are never raised
    out of it.
    """

    def __init__(self, line: str, reason: str):
        super().__init__(
            message=f"Malformed status line {line!r}: {reason}",
            code="MALFORMED_STATUS_LINE",
            details={"line": line, "reason": reason},
        )


# =============================================================================
# I/O Errors
# =============================================================================

class IoFailureError(CommitCraftError):
    """Raised when reading or writing one of the working files fails."""

    def __init__(
        self,
        path: str,
        operation: str,
        original_error: Optional[Exception] = None,
    ):
        details = {"path": path, "operation": operation}
        message = f"Could not {operation} '{path}'"
        if original_error:
            details["original_error"] = str(original_error)
            details["original_type"] = type(original_error).__name__
            message += f": {getattr(original_error, 'strerror', None) or original_error}"
        super().__init__(
            message=message,
            code="IO_FAILURE",
            details=details,
        )
