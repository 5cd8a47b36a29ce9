"""Provider protocol and the definitions stored in static resources."""

from __future__ import annotations

from typing import Protocol

from pydantic import BaseModel

from texcomplete.core.types import Suggestion


class Provider(Protocol):
    """Supplies candidates for one completion domain."""

    def provide(self) -> list[Suggestion]:
        ...


class EnvironmentDefinition(BaseModel):
    """Entry of environments.json."""

    text: str | None = None
    snippet: str | None = None
    detail: str | None = None


class CommandDefinition(BaseModel):
    """Entry of commands.json and unimathsymbols.json."""

    command: str
    snippet: str | None = None
    detail: str | None = None
    documentation: str | None = None
