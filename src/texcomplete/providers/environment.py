"""Environment name completion."""

from __future__ import annotations

from texcomplete.core.types import SnippetString, Suggestion, SuggestionKind
from texcomplete.providers.base import EnvironmentDefinition


class EnvironmentProvider:
    """Suggests names inside ``\\begin{`` and ``\\end{``."""

    def __init__(self):
        self.suggestions: list[Suggestion] = []
        self.initialized = False

    def initialize(self, environments: dict[str, EnvironmentDefinition]) -> None:
        self.suggestions = [
            Suggestion(
                label=definition.text or name,
                kind=SuggestionKind.MODULE,
                insert_text=SnippetString(definition.snippet) if definition.snippet else name,
                detail=definition.detail or "environment",
            )
            for name, definition in environments.items()
        ]
        self.initialized = True

    def provide(self) -> list[Suggestion]:
        return list(self.suggestions)
