"""Interactive REPL using prompt_toolkit."""

from __future__ import annotations

import asyncio
from pathlib import Path

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console
from rich.markup import escape

from texcomplete.cli.completers import LatexPromptCompleter
from texcomplete.completion.completer import LatexCompleter
from texcomplete.config.gate import SettingsStore


async def run_repl(project_root: Path, store: SettingsStore, console: Console) -> None:
    """Run the interactive REPL loop."""
    console.print(f"[bold]texcomplete[/bold] [dim]{escape(str(project_root))}[/dim]")
    console.print("[dim]Type LaTeX, Tab to complete, 'exit' to quit[/dim]\n")

    engine = LatexCompleter.for_project(project_root, store)
    if not await engine.wait_until_loaded():
        console.print("[yellow]Default completion data could not be loaded[/yellow]")

    prompt_session: PromptSession = PromptSession(
        completer=LatexPromptCompleter(engine, asyncio.get_running_loop()),
        complete_while_typing=True,
        multiline=False,
    )

    while True:
        try:
            # Prompt runs in a thread, deferred actions run on this loop
            with patch_stdout():
                user_input = await asyncio.to_thread(
                    prompt_session.prompt,
                    HTML('<style fg="ansibrightcyan" bold="true">❯ </style>'),
                )
        except (EOFError, KeyboardInterrupt):
            break

        if user_input.strip().lower() in ("exit", "quit"):
            break

        await engine.wait_for_side_effects()

    await engine.wait_for_side_effects()
    console.print("\n[dim]Goodbye![/dim]")
