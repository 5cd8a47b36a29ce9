"""Entry point answering completion requests from the editor."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from pathlib import Path

from texcomplete.completion.dispatcher import DispatchOutcome, ProviderDispatcher
from texcomplete.completion.loader import ResourceLoader
from texcomplete.completion.trigger import classify
from texcomplete.config.gate import CompletionSettings, ConfigGate, SettingsStore
from texcomplete.core.types import (
    CancellationToken,
    CompletionContext,
    CompletionResponse,
    Position,
    Suggestion,
    TextDocument,
)
from texcomplete.latex.parser import LatexParser
from texcomplete.providers import (
    CitationProvider,
    CommandProvider,
    EnvironmentProvider,
    ReferenceProvider,
)
from texcomplete.providers.base import Provider

logger = logging.getLogger(__name__)


class LatexCompleter:
    """Classifies the text before the cursor and delegates to a provider.

    Resource loading starts in the background as soon as an event loop is
    available. Until it finishes the command and environment providers are
    empty.
    """

    def __init__(
        self,
        citation: CitationProvider,
        reference: Provider,
        environment: EnvironmentProvider,
        command: CommandProvider,
        gate: ConfigGate,
        loader: ResourceLoader | None = None,
    ):
        self.citation = citation
        self.reference = reference
        self.environment = environment
        self.command = command
        self.gate = gate
        self.loader = loader or ResourceLoader()
        self.dispatcher = ProviderDispatcher(citation, reference, environment, command)
        self._load_task: asyncio.Task[bool] | None = None
        self._pending: set[asyncio.Task[None]] = set()

        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet, loading starts with the first request
            return
        self._ensure_loading()

    @classmethod
    def for_project(
        cls,
        project_root: Path,
        store: SettingsStore,
        on_browse: Callable[[list[Suggestion]], object] | None = None,
        picker: Callable[[list[Suggestion]], Suggestion | None] | None = None,
        apply: Callable[[str], object] | None = None,
        loader: ResourceLoader | None = None,
    ) -> LatexCompleter:
        """Wire the default providers for a LaTeX project directory."""
        parser = LatexParser(project_root)
        return cls(
            citation=CitationProvider(parser, on_browse=on_browse),
            reference=ReferenceProvider(parser),
            environment=EnvironmentProvider(),
            command=CommandProvider(picker=picker, apply=apply),
            gate=ConfigGate(store),
            loader=loader,
        )

    def _ensure_loading(self) -> asyncio.Task[bool]:
        if self._load_task is None:
            self._load_task = asyncio.get_running_loop().create_task(
                self.loader.initialize(self.command, self.environment)
            )
        return self._load_task

    async def wait_until_loaded(self) -> bool:
        """Wait for resource loading; ``False`` if it failed."""
        return await self._ensure_loading()

    def complete(self, context: CompletionContext, settings: CompletionSettings) -> DispatchOutcome:
        """Answer a request synchronously, leaving side effects to the caller."""
        if context.cancelled:
            return DispatchOutcome()

        trigger = classify(context, settings.auto_closing_brackets)
        if trigger.handled:
            return DispatchOutcome(suggestions=trigger.suggestions)

        return self.dispatcher.dispatch(context, settings)

    async def provide_completion_items(
        self,
        document: TextDocument,
        position: Position,
        token: CancellationToken | None = None,
        selection: str = "",
    ) -> CompletionResponse:
        """Answer a request and schedule any browser or surround action."""
        self._ensure_loading()
        context = CompletionContext.from_document(document, position, selection=selection, token=token)
        outcome = self.complete(context, self.gate.read())

        if outcome.deferred is not None:
            # The host clears its selection on this response, so the
            # surround it acknowledged must run even if cancelled later
            token = None if outcome.clear_selection else context.token
            self.schedule(outcome.deferred, token)

        return CompletionResponse(items=outcome.suggestions, clear_selection=outcome.clear_selection)

    def schedule(self, action: Callable[[], object], token: CancellationToken | None) -> None:
        task = asyncio.get_running_loop().create_task(self._run_deferred(action, token))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run_deferred(self, action: Callable[[], object], token: CancellationToken | None) -> None:
        # Yield once so the response reaches the host first
        await asyncio.sleep(0)
        if token is not None and token.is_cancellation_requested:
            logger.debug("Request cancelled, dropping deferred action")
            return

        try:
            result = action()
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Deferred completion action failed")

    async def wait_for_side_effects(self) -> None:
        """Wait until every scheduled browser/surround action has run."""
        if self._pending:
            await asyncio.gather(*list(self._pending))
