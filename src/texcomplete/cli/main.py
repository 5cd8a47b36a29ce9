"""Main CLI entry point using Typer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.prompt import Prompt
from rich.table import Table

from texcomplete.completion.completer import LatexCompleter
from texcomplete.config.gate import SettingsStore, StaticSettingsStore, YamlSettingsStore
from texcomplete.config.settings import CONFIG_FILENAME, TexCompleteConfig, find_config_path
from texcomplete.core.types import CancellationToken, Position, StringDocument, Suggestion

app = typer.Typer(
    name="texcomplete",
    help="Context-aware LaTeX completion from the terminal",
    no_args_is_help=True,
)
console = Console(highlight=False)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def _settings_store(config: Path | None, start_dir: Path) -> SettingsStore:
    """Pick the YAML store if a config file is given or can be found."""
    config_path = config or find_config_path(start_dir)
    if config_path is None:
        return StaticSettingsStore()
    return YamlSettingsStore(config_path)


def _print_suggestions(items: list[Suggestion]) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Label", style="cyan")
    table.add_column("Kind")
    table.add_column("Insert")
    table.add_column("Detail", style="dim")

    for item in items:
        table.add_row(
            escape(item.label),
            item.kind.value,
            escape(item.insert_value),
            escape(item.detail),
        )

    console.print(table)


def _show_bibliography(items: list[Suggestion]) -> None:
    """Citation browser: list every bibliography entry."""
    table = Table(title="Bibliography", show_header=True, header_style="bold")
    table.add_column("Key", style="cyan")
    table.add_column("Title")
    table.add_column("Author / Year", style="dim")

    for item in items:
        table.add_row(escape(item.label), escape(item.detail), escape(item.documentation))

    console.print(table)


def _pick_command(candidates: list[Suggestion]) -> Suggestion | None:
    """Ask which command should wrap the selection."""
    by_label = {c.label.lstrip("\\"): c for c in candidates}
    choice = Prompt.ask(
        "Surround with",
        choices=sorted(by_label),
        console=console,
        show_choices=False,
    )
    return by_label.get(choice)


def _show_surrounded(text: str) -> None:
    console.print(f"[green]{escape(text)}[/green]")


@app.command()
def complete(
    file: Path = typer.Argument(..., help="LaTeX file to complete in"),
    line: int = typer.Option(..., "--line", "-l", help="Line number (1-based)"),
    column: int = typer.Option(
        None,
        "--column",
        "-c",
        help="Cursor column (0-based, default: end of line)",
    ),
    selection: str = typer.Option(
        "",
        "--selection",
        "-s",
        help="Selected text to surround with a command",
    ),
    config: Path = typer.Option(
        None,
        "--config",
        help=f"Settings file (default: find {CONFIG_FILENAME} in parent directories)",
    ),
) -> None:
    """Show the completions offered at a position in a file."""
    file = file.resolve()
    if not file.exists():
        console.print(f"[red]File does not exist: {file}[/red]")
        raise typer.Exit(1)

    document = StringDocument(file.read_text(errors="ignore"))
    text = document.line_at(line - 1)
    character = len(text) if column is None else max(0, min(column, len(text)))
    position = Position(line - 1, character)

    async def run() -> None:
        engine = LatexCompleter.for_project(
            file.parent,
            _settings_store(config, file.parent),
            on_browse=_show_bibliography,
            picker=_pick_command,
            apply=_show_surrounded,
        )
        if not await engine.wait_until_loaded():
            console.print("[yellow]Default completion data could not be loaded[/yellow]")

        response = await engine.provide_completion_items(
            document, position, CancellationToken(), selection=selection
        )
        await engine.wait_for_side_effects()

        if response.items:
            _print_suggestions(response.items)
        elif response.clear_selection:
            console.print("[dim]Selection consumed by surround[/dim]")
        else:
            console.print("[dim]No completions[/dim]")

    asyncio.run(run())


@app.command()
def repl(
    directory: Path = typer.Option(
        Path("."),
        "--directory",
        "-d",
        help="Project directory providing labels and bibliography",
    ),
) -> None:
    """Type LaTeX with live completion."""
    from texcomplete.cli.repl import run_repl

    directory = directory.resolve()
    asyncio.run(run_repl(directory, _settings_store(None, directory), console))


@app.command()
def init(
    directory: Path = typer.Argument(
        Path("."),
        help="Directory to initialize (default: current directory)",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing config file",
    ),
) -> None:
    """Write a default texcomplete.yaml."""
    directory = directory.resolve()

    if not directory.exists():
        console.print(f"[red]Directory does not exist: {directory}[/red]")
        raise typer.Exit(1)

    config_path = directory / CONFIG_FILENAME
    if config_path.exists() and not force:
        console.print(f"[yellow]{CONFIG_FILENAME} already exists. Use --force to overwrite.[/yellow]")
        raise typer.Exit(1)

    TexCompleteConfig().save(config_path)
    console.print(f"  [green]+[/green] {CONFIG_FILENAME}")


if __name__ == "__main__":
    app()
