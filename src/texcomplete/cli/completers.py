"""prompt_toolkit adapter for the LaTeX completer."""

from __future__ import annotations

import asyncio
import re
from collections.abc import Iterable
from typing import TYPE_CHECKING

from prompt_toolkit.completion import CompleteEvent, Completer, Completion
from prompt_toolkit.document import Document

from texcomplete.core.snippet import expand_snippet
from texcomplete.core.types import CompletionContext, ContextType, Position, StringDocument

if TYPE_CHECKING:
    from texcomplete.completion.completer import LatexCompleter

_COMMAND_FRAGMENT = re.compile(r"\\([a-zA-Z]*)$")
_ARGUMENT_FRAGMENT = re.compile(r"([^{},\s]*)$")


def typed_fragment(line_prefix: str, context_type: ContextType | None) -> str:
    """Part of the prefix the chosen suggestion replaces."""
    if context_type is None:
        return ""
    pattern = _COMMAND_FRAGMENT if context_type == ContextType.COMMAND else _ARGUMENT_FRAGMENT
    match = pattern.search(line_prefix)
    return match.group(1) if match else ""


class LatexPromptCompleter(Completer):
    """Completer for the texcomplete REPL.

    Browser and surround actions are handed to ``loop``, the event loop the
    REPL runs on, since prompt_toolkit calls this from its own thread.
    """

    def __init__(self, engine: LatexCompleter, loop: asyncio.AbstractEventLoop | None = None):
        self.engine = engine
        self.loop = loop

    def get_completions(
        self, document: Document, complete_event: CompleteEvent
    ) -> Iterable[Completion]:
        """Get completions for current input."""
        try:
            yield from self._get_completions_inner(document)
        except Exception:
            # Never let a completer crash take down the REPL.
            return

    def _get_completions_inner(self, document: Document) -> Iterable[Completion]:
        position = Position(document.cursor_position_row, document.cursor_position_col)
        context = CompletionContext.from_document(StringDocument(document.text), position)
        outcome = self.engine.complete(context, self.engine.gate.read())

        if outcome.deferred is not None and self.loop is not None:
            token = None if outcome.clear_selection else context.token
            self.loop.call_soon_threadsafe(self.engine.schedule, outcome.deferred, token)

        fragment = typed_fragment(context.line_prefix, outcome.context_type)
        for suggestion in outcome.suggestions or []:
            text = expand_snippet(suggestion.insert_value).text
            if not text.startswith(fragment):
                continue
            yield Completion(
                text=text,
                start_position=-len(fragment),
                display=suggestion.label,
                display_meta=suggestion.detail[:40],
            )
