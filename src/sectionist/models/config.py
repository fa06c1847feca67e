"""Configuration models for sectionist.

Configuration is read from ~/.config/sectionist/config.yaml when it exists.
Every key can be overridden with a SECTIONIST_* environment variable:

- SECTIONIST_STORAGE_STATE_PATH: Override storage.state_path
- SECTIONIST_EXPORT_DOCUMENT_PATH: Override export.document_path
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator


def default_config_path() -> Path:
    """Return ~/.config/sectionist/config.yaml for the current home."""
    return Path.home() / ".config" / "sectionist" / "config.yaml"


def _default_state_path() -> str:
    return str(Path.home() / ".local" / "share" / "sectionist" / "editor.json")


class StorageConfig(BaseModel):
    """Where the editor state is persisted between CLI invocations."""

    state_path: str = Field(
        default_factory=_default_state_path,
        description="Path to the JSON editor state file"
    )

    @field_validator("state_path")
    @classmethod
    def expand_state_path(cls, v: str) -> str:
        """Expand ~ and reject directories."""
        path = Path(v).expanduser()
        if path.is_dir():
            raise ValueError(
                f"State path is a directory: {path}\n"
                f"Please point storage.state_path at a file"
            )
        return str(path)

    model_config = {"frozen": True}


class ExportConfig(BaseModel):
    """Defaults for exporting the compiled document."""

    document_path: Optional[str] = Field(
        default=None,
        description="Default output file for `sectionist export`"
    )

    model_config = {"frozen": True}


class Config(BaseModel):
    """Root configuration for sectionist."""

    storage: StorageConfig = Field(default_factory=StorageConfig, description="State file settings")
    export: ExportConfig = Field(default_factory=ExportConfig, description="Export settings")

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """
        Load configuration from YAML file with environment variable overrides.

        A missing file is not an error: defaults (plus any environment
        overrides) are used instead.

        Args:
            path: Path to config.yaml (defaults to ~/.config/sectionist/config.yaml)

        Returns:
            Validated Config instance

        Raises:
            ValueError: If YAML is invalid or validation fails
        """
        if path is None:
            path = default_config_path()

        data: Dict[str, Any] = {}
        if path.exists():
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {path}: {e}") from e

            if not isinstance(data, dict):
                raise ValueError(f"Configuration in {path} must be a mapping")

        data = _apply_env_overrides(data)

        try:
            return cls(**data)
        except ValidationError as e:
            raise ValueError(str(e)) from e

    model_config = {"frozen": True}


def _apply_env_overrides(data: Dict[str, Any]) -> Dict[str, Any]:
    """Apply SECTIONIST_SECTION_KEY environment overrides to config data."""
    data.setdefault("storage", {})
    data.setdefault("export", {})

    if env_state_path := os.getenv("SECTIONIST_STORAGE_STATE_PATH"):
        data["storage"]["state_path"] = env_state_path

    if env_document_path := os.getenv("SECTIONIST_EXPORT_DOCUMENT_PATH"):
        data["export"]["document_path"] = env_document_path

    return data
