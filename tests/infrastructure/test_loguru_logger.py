from __future__ import annotations

import json

import pytest
from loguru import logger as loguru_logger

from infrastructure.logging.loguru_logger import LoguruLogger


@pytest.fixture
def records():
    captured = []
    sink_id = loguru_logger.add(lambda message: captured.append(message.record), level="DEBUG")
    yield captured
    loguru_logger.remove(sink_id)


def test_emits_type_field_and_bound_context(records) -> None:
    logger = LoguruLogger().bind(test_id="login", flavor="chromium")

    logger.info("step.start", step="open")

    record = records[-1]
    assert record["level"].name == "INFO"
    assert record["extra"]["type"] == "step.start"
    assert record["extra"]["test_id"] == "login"
    assert record["message"].startswith("step.start ")
    payload = json.loads(record["message"].replace("step.start ", "", 1))
    assert payload == {"test_id": "login", "flavor": "chromium", "step": "open", "type": "step.start"}


def test_bind_does_not_mutate_parent(records) -> None:
    parent = LoguruLogger().bind(a=1)
    parent.bind(b=2)

    parent.warning("x.y")

    assert "b" not in records[-1]["extra"]
    assert records[-1]["level"].name == "WARNING"


def test_non_json_values_are_stringified(records) -> None:
    LoguruLogger().error("x.failed", error=ValueError("bad"))

    assert '"error": "bad"' in records[-1]["message"]
