"""Completion providers for each context type."""

from texcomplete.providers.citation import CitationProvider
from texcomplete.providers.command import CommandProvider
from texcomplete.providers.environment import EnvironmentProvider
from texcomplete.providers.reference import ReferenceProvider

__all__ = ["CitationProvider", "CommandProvider", "EnvironmentProvider", "ReferenceProvider"]
