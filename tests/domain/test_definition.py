from __future__ import annotations

import pytest

from domain.definition import TestDefinition
from domain.exceptions import ConfigurationError
from domain.steps import ClickStep, HttpRequestSpec, RequestStep, WaitStep
from domain.variables import VariableStore


def test_definition_requires_id() -> None:
    with pytest.raises(ConfigurationError):
        TestDefinition(id=" ", name="nameless")


def test_sequences_become_tuples() -> None:
    definition = TestDefinition(id="t1", name="T", steps=[WaitStep(name="w", duration_ms=1)], tags=["smoke"])
    assert isinstance(definition.steps, tuple)
    assert definition.tags == ("smoke",)


def test_metadata() -> None:
    definition = TestDefinition(id="t1", name="T", description="d", tags=("a",), steps=[WaitStep(name="w", duration_ms=1)])
    assert definition.metadata() == {
        "id": "t1",
        "name": "T",
        "description": "d",
        "tags": ["a"],
        "step_count": 1,
    }


def test_needs_page_looks_at_steps_and_cleanup() -> None:
    api_only = TestDefinition(
        id="api",
        name="api",
        steps=[RequestStep(name="r", request=HttpRequestSpec(url="/users"))],
    )
    page_cleanup = TestDefinition(
        id="ui",
        name="ui",
        steps=[WaitStep(name="w", duration_ms=5)],
        cleanup=[ClickStep(name="logout", selector="#logout")],
    )
    assert api_only.needs_page() is False
    assert page_cleanup.needs_page() is True


def test_variable_store() -> None:
    store = VariableStore({"a": 1})
    store.set("b", 2)
    assert "a" in store and "b" in store
    assert store.get("missing", "x") == "x"
    assert sorted(store) == ["a", "b"]
    assert len(store) == 2
    snapshot = store.snapshot()
    snapshot["c"] = 3
    assert "c" not in store
