"""CommitCraft - stage, describe, commit and push from the command line."""

__version__ = "1.0.0"
