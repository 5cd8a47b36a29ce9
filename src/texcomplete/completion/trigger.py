"""Invocation-character checks run before pattern dispatch."""

from __future__ import annotations

from dataclasses import dataclass

from texcomplete.core.types import (
    CompletionContext,
    Range,
    SnippetString,
    Suggestion,
    SuggestionKind,
)

BRACKET_TRIGGERS = ("(", "[")

# invocation char -> (label, snippet, detail)
MATH_SNIPPETS = {
    "(": ("\\(", "${1}\\)${0}", "inline math \\( ... \\)"),
    "[": ("\\[", "${1}\\]${0}", "display math \\[ ... \\]"),
}


@dataclass
class TriggerResult:
    """Outcome of the bracket check.

    When ``handled`` is true the request is answered with ``suggestions``
    (``None`` meaning no result) and pattern dispatch is skipped.
    """

    handled: bool
    suggestions: list[Suggestion] | None = None


def math_snippet(invocation_char: str, context: CompletionContext, auto_closing_brackets: bool) -> Suggestion:
    """Build the ``\\(`` or ``\\[`` snippet for the given bracket."""
    label, template, detail = MATH_SNIPPETS[invocation_char]
    suggestion = Suggestion(
        label=label,
        kind=SuggestionKind.FUNCTION,
        insert_text=SnippetString(template),
        detail=detail,
    )
    if auto_closing_brackets:
        # Let the snippet's own delimiter overwrite the auto-inserted bracket
        suggestion.range = Range(context.position, context.position.translate(0, 1))
    return suggestion


def classify(context: CompletionContext, auto_closing_brackets: bool) -> TriggerResult:
    """Decide whether a bracket invocation short-circuits the request."""
    char = context.invocation_char
    if char not in BRACKET_TRIGGERS:
        return TriggerResult(handled=False)

    prefix = context.line_prefix
    if len(prefix) > 1 and prefix[-2] == "\\":
        return TriggerResult(
            handled=True,
            suggestions=[math_snippet(char, context, auto_closing_brackets)],
        )

    return TriggerResult(handled=True, suggestions=None)
