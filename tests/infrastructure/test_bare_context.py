from __future__ import annotations

import asyncio

import pytest

from domain.definition import ContextOptions
from domain.exceptions import ConfigurationError, ContextAcquisitionError
from infrastructure.context.bare_context import BareContext, BareContextProvider, UnavailableContextProvider


def test_bare_context_has_no_page() -> None:
    context = asyncio.run(BareContextProvider().create_context(ContextOptions()))

    assert isinstance(context, BareContext)
    with pytest.raises(ConfigurationError, match="'navigate' needs a browser context"):
        asyncio.run(context.navigate("https://x.test", "load", 1000))
    with pytest.raises(ConfigurationError):
        asyncio.run(context.screenshot())


def test_bare_context_destroy() -> None:
    context = BareContext(ContextOptions())

    asyncio.run(context.destroy())

    assert context.destroyed


def test_unavailable_provider_always_fails() -> None:
    provider = UnavailableContextProvider("no browser could be launched")

    with pytest.raises(ContextAcquisitionError, match="no browser could be launched"):
        asyncio.run(provider.create_context(ContextOptions()))
