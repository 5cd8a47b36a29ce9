"""Cross-reference label completion."""

from __future__ import annotations

from texcomplete.core.types import Suggestion, SuggestionKind
from texcomplete.latex.parser import LatexParser


class ReferenceProvider:
    """Suggests ``\\label`` names defined in the project."""

    def __init__(self, parser: LatexParser):
        self.parser = parser

    def provide(self) -> list[Suggestion]:
        return [
            Suggestion(
                label=entry["label"],
                kind=SuggestionKind.REFERENCE,
                insert_text=entry["label"],
                detail=f"{entry['file']}:{entry['line']}",
                documentation=entry["context"],
            )
            for entry in self.parser.extract_labels()
        ]
