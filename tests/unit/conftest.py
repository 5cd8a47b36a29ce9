"""Shared fixtures for unit tests."""

import pytest
from fakes import FakeCitation, FakeCommand, FakeProvider


@pytest.fixture
def providers():
    """One fake per context type, each with a single suggestion."""
    return {
        "citation": FakeCitation(["smith2024"]),
        "reference": FakeProvider(["fig:overview"]),
        "environment": FakeProvider(["align"]),
        "command": FakeCommand(["\\section"]),
    }
