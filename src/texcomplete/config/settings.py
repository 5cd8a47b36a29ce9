"""Configuration settings and texcomplete.yaml loader."""

from __future__ import annotations

import os
import re
from enum import StrEnum
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field


class CitationMode(StrEnum):
    """How citation keys are offered."""

    INLINE = "inline"
    BROWSER = "browser"


class IntellisenseConfig(BaseModel):
    """Completion behaviour settings."""

    citation_type: CitationMode = CitationMode.INLINE
    surround_command_enabled: bool = False


class EditorConfig(BaseModel):
    """Editor settings the completer honours."""

    auto_closing_brackets: bool = True


class TexCompleteConfig(BaseModel):
    """Root configuration model for texcomplete.yaml."""

    intellisense: IntellisenseConfig = Field(default_factory=IntellisenseConfig)
    editor: EditorConfig = Field(default_factory=EditorConfig)

    @classmethod
    def load(cls, path: Path) -> TexCompleteConfig:
        """Load configuration from YAML file."""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        # Expand environment variables in the config
        data = _expand_env_vars(data)
        return cls.model_validate(data)

    def save(self, path: Path) -> None:
        """Save configuration to YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand ${VAR} patterns in strings."""
    if isinstance(obj, str):
        pattern = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")

        def replace(match: re.Match[str]) -> str:
            var_name = match.group(1) or match.group(2)
            return os.environ.get(var_name, match.group(0))

        return pattern.sub(replace, obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    return obj


CONFIG_FILENAME = "texcomplete.yaml"


def find_config_path(start_dir: Path | None = None) -> Path | None:
    """Find texcomplete.yaml by walking up directory tree."""
    current = start_dir or Path.cwd()

    while current != current.parent:
        config_path = current / CONFIG_FILENAME
        if config_path.exists():
            return config_path
        current = current.parent

    return None
