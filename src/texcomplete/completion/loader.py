"""Startup loading of the bundled environment, command and symbol data."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from texcomplete.errors import ResourceError, ResourceLoadError, ResourceParseError
from texcomplete.providers.base import CommandDefinition, EnvironmentDefinition

if TYPE_CHECKING:
    from texcomplete.providers.command import CommandProvider
    from texcomplete.providers.environment import EnvironmentProvider

logger = logging.getLogger(__name__)

DEFAULT_RESOURCE_DIR = Path(__file__).parent.parent / "resources"

ENVIRONMENTS_FILE = "environments.json"
COMMANDS_FILE = "commands.json"
SYMBOLS_FILE = "unimathsymbols.json"

Reader = Callable[[Path], Awaitable[bytes]]
M = TypeVar("M", bound=BaseModel)


async def read_file(path: Path) -> bytes:
    """Read a file without blocking the event loop."""
    return await asyncio.to_thread(path.read_bytes)


@dataclass(frozen=True)
class StaticResources:
    """Parsed resource maps. Never mutated after loading."""

    environments: dict[str, EnvironmentDefinition]
    commands: dict[str, CommandDefinition]
    symbols: dict[str, CommandDefinition]


class ResourceLoader:
    """Reads the three resource files one after another.

    Commands are only read once environments parsed, and symbols only once
    commands parsed. The first failure stops the chain.
    """

    def __init__(self, resource_dir: Path | None = None, reader: Reader | None = None):
        self.resource_dir = resource_dir or DEFAULT_RESOURCE_DIR
        self.reader = reader or read_file

    async def _read(self, name: str, filename: str, model: type[M]) -> dict[str, M]:
        path = self.resource_dir / filename
        try:
            raw = await self.reader(path)
        except OSError as e:
            raise ResourceLoadError(name, path, str(e)) from e

        try:
            data = json.loads(raw)
            return TypeAdapter(dict[str, model]).validate_python(data)
        except (ValueError, ValidationError) as e:
            raise ResourceParseError(name, path, str(e)) from e

    async def load(self) -> StaticResources | None:
        """Load all resources, or return ``None`` after logging a failure."""
        try:
            environments = await self._read("environments", ENVIRONMENTS_FILE, EnvironmentDefinition)
            logger.info("Default environments loaded")
            commands = await self._read("commands", COMMANDS_FILE, CommandDefinition)
            logger.info("Default commands loaded")
            symbols = await self._read("unimathsymbols", SYMBOLS_FILE, CommandDefinition)
            logger.info("Default unimathsymbols loaded")
        except ResourceError as e:
            verb = "parsing" if isinstance(e, ResourceParseError) else "reading"
            logger.error("Error %s default %s: %s", verb, e.name, e.reason)
            return None

        return StaticResources(environments=environments, commands=commands, symbols=symbols)

    async def initialize(
        self,
        command: CommandProvider,
        environment: EnvironmentProvider,
    ) -> bool:
        """Load resources and hand them to the providers that need them."""
        resources = await self.load()
        if resources is None:
            return False

        command.initialize(resources.commands, resources.symbols, resources.environments)
        environment.initialize(resources.environments)
        return True
