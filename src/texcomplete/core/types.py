"""Request, response and suggestion types shared by the completer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Protocol


class ContextType(StrEnum):
    """Completion domain, declared in dispatch priority order."""

    CITATION = "citation"
    REFERENCE = "reference"
    ENVIRONMENT = "environment"
    COMMAND = "command"


class SuggestionKind(StrEnum):
    """Category tag shown next to a suggestion."""

    FUNCTION = "function"
    MODULE = "module"
    REFERENCE = "reference"
    CONSTANT = "constant"
    KEYWORD = "keyword"
    VARIABLE = "variable"
    SNIPPET = "snippet"


@dataclass(frozen=True)
class Position:
    """Zero-based line/character position in a document."""

    line: int
    character: int

    def translate(self, line_delta: int = 0, character_delta: int = 0) -> Position:
        return Position(self.line + line_delta, self.character + character_delta)


@dataclass(frozen=True)
class Range:
    """Span between two positions, end exclusive."""

    start: Position
    end: Position


@dataclass(frozen=True)
class SnippetString:
    """Insert text using ``${n}`` tab stops and a final ``${0}`` marker."""

    value: str


@dataclass
class Suggestion:
    """A single completion candidate."""

    label: str
    kind: SuggestionKind
    insert_text: str | SnippetString | None = None
    detail: str = ""
    documentation: str = ""
    range: Range | None = None

    @property
    def is_snippet(self) -> bool:
        return isinstance(self.insert_text, SnippetString)

    @property
    def insert_value(self) -> str:
        """Raw text or template inserted when the suggestion is accepted."""
        if self.insert_text is None:
            return self.label
        if isinstance(self.insert_text, SnippetString):
            return self.insert_text.value
        return self.insert_text


class CancellationToken:
    """Cancellation signal handed in by the host with each request."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class TextDocument(Protocol):
    """Line accessor for the document being edited."""

    def line_at(self, line: int) -> str:
        ...


class StringDocument:
    """In-memory document backed by a string."""

    def __init__(self, text: str):
        self.lines = text.split("\n")

    def line_at(self, line: int) -> str:
        if 0 <= line < len(self.lines):
            return self.lines[line]
        return ""


@dataclass
class CompletionContext:
    """Everything known about one completion request.

    The pending surround selection travels here rather than on a provider so
    that overlapping requests never share it.
    """

    line_prefix: str
    invocation_char: str
    position: Position
    selection: str = ""
    token: CancellationToken = field(default_factory=CancellationToken)

    @classmethod
    def from_document(
        cls,
        document: TextDocument,
        position: Position,
        selection: str = "",
        token: CancellationToken | None = None,
    ) -> CompletionContext:
        text = document.line_at(position.line)
        prefix = text[: position.character]
        invocation = prefix[-1] if prefix else ""
        return cls(
            line_prefix=prefix,
            invocation_char=invocation,
            position=position,
            selection=selection,
            token=token or CancellationToken(),
        )

    @property
    def cancelled(self) -> bool:
        return self.token.is_cancellation_requested


@dataclass
class CompletionResponse:
    """What the host receives for a request.

    ``items`` is ``None`` when the request produced nothing to show.
    ``clear_selection`` tells the host to drop its stored selection after a
    surround action was scheduled.
    """

    items: list[Suggestion] | None = None
    clear_selection: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.items
