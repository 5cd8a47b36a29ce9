"""Per-request view of the settings that change completion behaviour."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import yaml
from pydantic import ValidationError

from texcomplete.config.settings import CitationMode, TexCompleteConfig

logger = logging.getLogger(__name__)


class SettingsStore(Protocol):
    """Source of the current configuration. Owns the defaults."""

    def load(self) -> TexCompleteConfig:
        ...


class StaticSettingsStore:
    """Settings held in memory, mutable by the embedding host."""

    def __init__(self, config: TexCompleteConfig | None = None):
        self.config = config or TexCompleteConfig()

    def load(self) -> TexCompleteConfig:
        return self.config


class YamlSettingsStore:
    """Settings read from a texcomplete.yaml file on every call."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> TexCompleteConfig:
        return TexCompleteConfig.load(self.path)


@dataclass(frozen=True)
class CompletionSettings:
    """Snapshot of the settings consulted by one request."""

    citation_mode: CitationMode = CitationMode.INLINE
    surround_enabled: bool = False
    auto_closing_brackets: bool = True

    @property
    def browse_citations(self) -> bool:
        return self.citation_mode == CitationMode.BROWSER


class ConfigGate:
    """Reads settings fresh for each request. Nothing is cached."""

    def __init__(self, store: SettingsStore):
        self.store = store

    def read(self) -> CompletionSettings:
        try:
            config = self.store.load()
        except (OSError, ValueError, yaml.YAMLError, ValidationError) as e:
            logger.warning("Invalid completion settings, using defaults: %s", e)
            config = TexCompleteConfig()

        return CompletionSettings(
            citation_mode=config.intellisense.citation_type,
            surround_enabled=config.intellisense.surround_command_enabled,
            auto_closing_brackets=config.editor.auto_closing_brackets,
        )
