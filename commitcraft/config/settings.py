"""Configuration settings models using Pydantic."""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_COMMIT_TYPES = ["chore", "feat", "fix", "test"]


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="COMMITCRAFT_",
        extra="ignore",
    )

    editor: str = "nano"
    default_branch: str = "main"
    commit_types: list[str] = Field(default_factory=lambda: list(DEFAULT_COMMIT_TYPES))
    commit_message_file: str = "commit_message.md"
    commitignore_file: str = ".commitignore"
    git_timeout: float = Field(default=30.0, gt=0)

    @field_validator("editor", "default_branch", "commit_message_file", "commitignore_file")
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("value cannot be empty")
        return v.strip()

    @field_validator("commit_types")
    @classmethod
    def validate_commit_types(cls, v: Optional[list[str]]) -> list[str]:
        """Commit types must be non-empty, unique words without slashes."""
        types = [t.strip() for t in (v or []) if t and t.strip()]
        if not types:
            raise ValueError("at least one commit type is required")
        if len(set(types)) != len(types):
            raise ValueError("commit types must be unique")
        if any("/" in t for t in types):
            raise ValueError("commit types cannot contain '/'")
        return types
