"""Utility functions for CommitCraft."""

from .logging import (
    LogCapture,
    get_logger,
    setup_logging,
)

__all__ = [
    "LogCapture",
    "get_logger",
    "setup_logging",
]
