"""Tests for the request entry point."""

import asyncio
import tempfile
from pathlib import Path

import pytest
from fakes import FakeCitation, FakeCommand, FakeProvider, NoopLoader

from texcomplete.completion.completer import LatexCompleter
from texcomplete.completion.loader import ResourceLoader
from texcomplete.config.gate import ConfigGate, StaticSettingsStore, YamlSettingsStore
from texcomplete.config.settings import CitationMode, TexCompleteConfig
from texcomplete.core.types import CancellationToken, Position, StringDocument
from texcomplete.providers import CommandProvider, EnvironmentProvider


def make_completer(providers, config=None, loader=None):
    return LatexCompleter(
        citation=providers["citation"],
        reference=providers["reference"],
        environment=providers["environment"],
        command=providers["command"],
        gate=ConfigGate(StaticSettingsStore(config or TexCompleteConfig())),
        loader=loader or NoopLoader(),
    )


async def request(completer, line, character=None, **kwargs):
    character = len(line) if character is None else character
    return await completer.provide_completion_items(
        StringDocument(line), Position(0, character), **kwargs
    )


@pytest.mark.asyncio
async def test_inline_citation_items(providers):
    """Test that citation suggestions are returned unchanged."""
    completer = make_completer(providers)

    response = await request(completer, "see \\cite{foo")

    assert response.items == providers["citation"].items
    assert not response.clear_selection


@pytest.mark.asyncio
async def test_browser_runs_after_response(providers):
    """Test the browser opens once, only after the response is delivered."""
    config = TexCompleteConfig()
    config.intellisense.citation_type = CitationMode.BROWSER
    completer = make_completer(providers, config)

    response = await request(completer, "\\cite{foo")

    assert response.items is None
    assert providers["citation"].browsed == 0

    await completer.wait_for_side_effects()
    assert providers["citation"].browsed == 1


@pytest.mark.asyncio
async def test_math_snippet_skips_providers(providers):
    completer = make_completer(providers)

    response = await request(completer, "\\cite{\\(")

    assert [item.label for item in response.items] == ["\\("]
    assert all(p.calls == 0 for p in providers.values())


@pytest.mark.asyncio
async def test_auto_closing_setting_read_per_request(providers):
    """Test that a settings change applies to the next request."""
    store = StaticSettingsStore()
    completer = make_completer(providers)
    completer.gate = ConfigGate(store)

    first = await request(completer, "\\[]", character=2)
    store.config = TexCompleteConfig.model_validate({"editor": {"auto_closing_brackets": False}})
    second = await request(completer, "\\[]", character=2)

    assert first.items[0].range is not None
    assert second.items[0].range is None


@pytest.mark.asyncio
async def test_plain_bracket_returns_nothing(providers):
    completer = make_completer(providers)

    response = await request(completer, "\\cite{foo(")

    assert response.items is None
    assert response.is_empty


@pytest.mark.asyncio
async def test_surround_clears_selection(providers):
    """Test surround is deferred and the host is told to clear its selection."""
    config = TexCompleteConfig()
    config.intellisense.surround_command_enabled = True
    completer = make_completer(providers, config)

    response = await request(completer, "\\", selection="important")

    assert response.items is None
    assert response.clear_selection
    assert providers["command"].surrounded == []

    await completer.wait_for_side_effects()
    assert providers["command"].surrounded == ["important"]


@pytest.mark.asyncio
async def test_overlapping_requests_keep_their_own_selection(providers):
    """Test that concurrent surround requests never see each other's text."""
    config = TexCompleteConfig()
    config.intellisense.surround_command_enabled = True
    completer = make_completer(providers, config)

    first, second = await asyncio.gather(
        request(completer, "\\", selection="alpha"),
        request(completer, "\\", selection="beta"),
    )
    await completer.wait_for_side_effects()

    assert first.clear_selection and second.clear_selection
    assert sorted(providers["command"].surrounded) == ["alpha", "beta"]


@pytest.mark.asyncio
async def test_cancel_drops_deferred_action(providers):
    """Test that cancelling after the response skips the browser."""
    config = TexCompleteConfig()
    config.intellisense.citation_type = CitationMode.BROWSER
    completer = make_completer(providers, config)
    token = CancellationToken()

    await request(completer, "\\cite{foo", token=token)
    token.cancel()
    await completer.wait_for_side_effects()

    assert providers["citation"].browsed == 0


@pytest.mark.asyncio
async def test_cancelled_request_has_no_items(providers):
    completer = make_completer(providers)
    token = CancellationToken()
    token.cancel()

    response = await request(completer, "\\cite{foo", token=token)

    assert response.items is None


@pytest.mark.asyncio
async def test_failing_browser_is_contained(providers, caplog):
    """Test that a browser error is logged, not raised."""
    class BrokenBrowser(FakeCitation):
        def browser(self):
            raise RuntimeError("no display")

    providers["citation"] = BrokenBrowser(["smith2024"])
    config = TexCompleteConfig()
    config.intellisense.citation_type = CitationMode.BROWSER
    completer = make_completer(providers, config)

    response = await request(completer, "\\cite{")
    await completer.wait_for_side_effects()

    assert response.items is None
    assert "Deferred completion action failed" in caplog.text


@pytest.mark.asyncio
async def test_async_browser_is_awaited(providers):
    calls = []

    class AsyncBrowser(FakeCitation):
        async def browser(self):
            await asyncio.sleep(0)
            calls.append("opened")

    providers["citation"] = AsyncBrowser(["smith2024"])
    config = TexCompleteConfig()
    config.intellisense.citation_type = CitationMode.BROWSER
    completer = make_completer(providers, config)

    await request(completer, "\\cite{")
    await completer.wait_for_side_effects()

    assert calls == ["opened"]


@pytest.mark.asyncio
async def test_requests_before_loading_are_empty():
    """Test that unloaded command/environment providers answer with nothing."""
    gate_open = asyncio.Event()

    async def slow_reader(path):
        await gate_open.wait()
        return path.read_bytes()

    command = CommandProvider()
    environment = EnvironmentProvider()
    completer = LatexCompleter(
        citation=FakeCitation(),
        reference=FakeProvider(),
        environment=environment,
        command=command,
        gate=ConfigGate(StaticSettingsStore()),
        loader=ResourceLoader(reader=slow_reader),
    )

    before = await request(completer, "\\begin{")
    assert before.items is None
    assert (await request(completer, "\\sec")).items is None

    gate_open.set()
    assert await completer.wait_until_loaded()

    after = await request(completer, "\\begin{")
    assert after.items
    assert any(item.label == "align" for item in after.items)


@pytest.mark.asyncio
async def test_failed_loading_keeps_providers_empty():
    async def failing_reader(path):
        raise FileNotFoundError(path)

    completer = LatexCompleter(
        citation=FakeCitation(),
        reference=FakeProvider(),
        environment=EnvironmentProvider(),
        command=CommandProvider(),
        gate=ConfigGate(StaticSettingsStore()),
        loader=ResourceLoader(reader=failing_reader),
    )

    assert not await completer.wait_until_loaded()
    assert (await request(completer, "\\begin{")).items is None
    assert (await request(completer, "\\textb")).items is None


def test_constructed_outside_event_loop(providers):
    """Test that construction without a loop defers loading to the first request."""
    completer = make_completer(providers)

    async def run():
        return await request(completer, "\\cite{")

    response = asyncio.run(run())

    assert response.items == providers["citation"].items


def test_command_fallthrough_with_fakes():
    completer = make_completer({
        "citation": FakeCitation(),
        "reference": FakeProvider(),
        "environment": FakeProvider(),
        "command": FakeCommand(["\\emph"]),
    })

    async def run():
        return await request(completer, "\\cite{\\em")

    response = asyncio.run(run())

    assert [item.label for item in response.items] == ["\\emph"]


@pytest.mark.asyncio
async def test_undecodable_settings_never_reach_host(providers):
    """Test that a corrupt settings file still produces a response."""
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "texcomplete.yaml"
        path.write_bytes(b"editor:\n  auto_closing_brackets: \xff\xfe\n")
        completer = make_completer(providers)
        completer.gate = ConfigGate(YamlSettingsStore(path))

        response = await request(completer, "\\cite{x")

    assert response.items == providers["citation"].items


@pytest.mark.asyncio
async def test_acknowledged_surround_survives_cancel(providers):
    """Test that a surround the host was told to clear for still runs."""
    config = TexCompleteConfig()
    config.intellisense.surround_command_enabled = True
    completer = make_completer(providers, config)
    token = CancellationToken()

    response = await request(completer, "\\", selection="x", token=token)
    token.cancel()
    await completer.wait_for_side_effects()

    assert response.clear_selection
    assert providers["command"].surrounded == ["x"]
