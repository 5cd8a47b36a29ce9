"""Context-type patterns and provider dispatch."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from texcomplete.core.types import CompletionContext, ContextType, Suggestion

if TYPE_CHECKING:
    from texcomplete.config.gate import CompletionSettings
    from texcomplete.providers.base import Provider
    from texcomplete.providers.citation import CitationProvider
    from texcomplete.providers.command import CommandProvider

logger = logging.getLogger(__name__)

# Each pattern is anchored at the end of the line prefix. The command pattern
# also matches inside every other one, so it must be tried last.
PATTERNS: dict[ContextType, re.Pattern[str]] = {
    ContextType.CITATION: re.compile(r"(?:\\[a-zA-Z]*cite[a-zA-Z]*(?:\[[^\[\]]*\])*)\{([^}]*)$"),
    ContextType.REFERENCE: re.compile(r"(?:\\[a-zA-Z]*ref[a-zA-Z]*(?:\[[^\[\]]*\])?)\{([^}]*)$"),
    ContextType.ENVIRONMENT: re.compile(r"(?:\\(?:begin|end)(?:\[[^\[\]]*\])?)\{([^}]*)$"),
    ContextType.COMMAND: re.compile(r"\\([a-zA-Z]*)$"),
}


@dataclass(frozen=True)
class PatternRule:
    """Pattern and provider for one context type."""

    context_type: ContextType
    pattern: re.Pattern[str]
    provider: Provider

    def matches(self, line: str) -> bool:
        return self.pattern.search(line) is not None


@dataclass
class DispatchOutcome:
    """Result of dispatching one request.

    ``deferred`` is run by the completer after the response is delivered.
    """

    context_type: ContextType | None = None
    suggestions: list[Suggestion] | None = None
    deferred: Callable[[], object] | None = None
    clear_selection: bool = False


class ProviderDispatcher:
    """Routes a line prefix to the first provider that has something to say."""

    def __init__(
        self,
        citation: CitationProvider,
        reference: Provider,
        environment: Provider,
        command: CommandProvider,
    ):
        self.citation = citation
        self.command = command
        providers: dict[ContextType, Provider] = {
            ContextType.CITATION: citation,
            ContextType.REFERENCE: reference,
            ContextType.ENVIRONMENT: environment,
            ContextType.COMMAND: command,
        }
        self.rules: dict[ContextType, PatternRule] = {
            context_type: PatternRule(context_type, PATTERNS[context_type], providers[context_type])
            for context_type in ContextType
        }

    def completion(self, context_type: ContextType, line: str) -> list[Suggestion]:
        """Ask the provider for ``context_type`` if its pattern matches ``line``."""
        rule = self.rules.get(context_type)
        if rule is None:
            # Unreachable with the fixed set of context types
            logger.error("Error - trying to complete unknown type %s", context_type)
            return []

        if not rule.matches(line):
            return []

        try:
            return list(rule.provider.provide())
        except Exception:
            logger.exception("The %s provider failed", context_type)
            return []

    def dispatch(self, context: CompletionContext, settings: CompletionSettings) -> DispatchOutcome:
        """Try each context type in priority order."""
        for context_type in ContextType:
            if context.cancelled:
                logger.debug("Request cancelled during dispatch")
                return DispatchOutcome()

            suggestions = self.completion(context_type, context.line_prefix)
            if suggestions:
                return self._post_process(context_type, suggestions, context, settings)

        return DispatchOutcome()

    def _post_process(
        self,
        context_type: ContextType,
        suggestions: list[Suggestion],
        context: CompletionContext,
        settings: CompletionSettings,
    ) -> DispatchOutcome:
        if context_type == ContextType.CITATION and settings.browse_citations:
            return DispatchOutcome(context_type=context_type, deferred=self.citation.browser)

        if context_type == ContextType.COMMAND and settings.surround_enabled and context.selection:
            selection = context.selection
            return DispatchOutcome(
                context_type=context_type,
                deferred=lambda: self.command.surround(selection),
                clear_selection=True,
            )

        return DispatchOutcome(context_type=context_type, suggestions=suggestions)
