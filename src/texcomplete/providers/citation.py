"""Citation key completion."""

from __future__ import annotations

import logging
from collections.abc import Callable

from texcomplete.core.types import Suggestion, SuggestionKind
from texcomplete.latex.parser import LatexParser

logger = logging.getLogger(__name__)


class CitationProvider:
    """Suggests bibliography keys and opens the citation browser."""

    def __init__(
        self,
        parser: LatexParser,
        on_browse: Callable[[list[Suggestion]], object] | None = None,
    ):
        self.parser = parser
        self.on_browse = on_browse

    def provide(self) -> list[Suggestion]:
        suggestions = []
        for key, fields in self.parser.parse_bibliography().items():
            author = fields.get("author", "")
            year = fields.get("year", "")
            suggestions.append(Suggestion(
                label=key,
                kind=SuggestionKind.REFERENCE,
                insert_text=key,
                detail=fields.get("title", ""),
                documentation=f"{author} ({year})" if year else author,
            ))
        return suggestions

    def browser(self) -> object:
        """Hand every entry to the interactive picker."""
        items = self.provide()
        if self.on_browse is None:
            logger.info("No citation browser attached (%d entries)", len(items))
            return None
        return self.on_browse(items)
