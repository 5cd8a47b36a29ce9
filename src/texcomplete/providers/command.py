"""Command name completion and selection surround."""

from __future__ import annotations

import logging
from collections.abc import Callable

from texcomplete.core.snippet import expand_snippet, parse_placeholders
from texcomplete.core.types import SnippetString, Suggestion, SuggestionKind
from texcomplete.providers.base import CommandDefinition, EnvironmentDefinition

logger = logging.getLogger(__name__)

Picker = Callable[[list[Suggestion]], Suggestion | None]


def _environment_snippet(name: str) -> str:
    return "begin{%s}\n\t${0}\n\\end{%s}" % (name, name)


class CommandProvider:
    """Suggests control words after a backslash.

    ``picker`` chooses the wrapping command during surround and ``apply``
    receives the wrapped text. Both are supplied by the host.
    """

    def __init__(
        self,
        picker: Picker | None = None,
        apply: Callable[[str], object] | None = None,
    ):
        self.picker = picker
        self.apply = apply
        self.suggestions: list[Suggestion] = []
        self.initialized = False

    def initialize(
        self,
        commands: dict[str, CommandDefinition],
        symbols: dict[str, CommandDefinition],
        environments: dict[str, EnvironmentDefinition],
    ) -> None:
        suggestions = []

        for definition in commands.values():
            suggestions.append(self._from_definition(definition, SuggestionKind.FUNCTION))

        for definition in symbols.values():
            suggestions.append(self._from_definition(definition, SuggestionKind.CONSTANT))

        for name in environments:
            suggestions.append(Suggestion(
                label=f"\\begin{{{name}}}",
                kind=SuggestionKind.SNIPPET,
                insert_text=SnippetString(_environment_snippet(name)),
                detail=f"{name} environment",
            ))

        self.suggestions = suggestions
        self.initialized = True

    @staticmethod
    def _from_definition(definition: CommandDefinition, kind: SuggestionKind) -> Suggestion:
        name = definition.command.lstrip("\\")
        insert: str | SnippetString = name
        if definition.snippet:
            insert = SnippetString(definition.snippet)
        return Suggestion(
            label=f"\\{name}",
            kind=kind,
            insert_text=insert,
            detail=definition.detail or "",
            documentation=definition.documentation or "",
        )

    def provide(self) -> list[Suggestion]:
        return list(self.suggestions)

    def surround_candidates(self) -> list[Suggestion]:
        """Commands with at least one argument slot, except ``\\begin``."""
        return [
            s for s in self.suggestions
            if s.kind == SuggestionKind.FUNCTION
            and s.is_snippet
            and s.label != "\\begin"
            and any(stop.index == 1 for stop in parse_placeholders(s.insert_value))
        ]

    def surround(self, text: str) -> str | None:
        """Wrap ``text`` with the command the picker chooses."""
        candidates = self.surround_candidates()
        if not candidates:
            logger.debug("No commands available to surround selection")
            return None
        if self.picker is None:
            logger.debug("No picker attached, surround skipped")
            return None

        chosen = self.picker(candidates)
        if chosen is None:
            return None

        wrapped = "\\" + expand_snippet(chosen.insert_value, {1: text}).text
        if self.apply is not None:
            self.apply(wrapped)
        return wrapped
