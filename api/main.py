"""FastAPI application - test execution endpoints"""
import asyncio
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from fastapi import Body, FastAPI, HTTPException, Query, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from application.config import EngineConfig
from application.outcome import OutcomeStatus, outcome_to_dict, summary_to_dict
from domain.definition import TestDefinition
from domain.exceptions import ConfigurationError
from infrastructure.bootstrap import Engine, build_engine
from infrastructure.config.env_config_loader import load_engine_config
from infrastructure.definitions.base_loader import DefinitionLoadError
from infrastructure.definitions.file_finder import DefinitionFileFinder
from infrastructure.definitions.json_loader import JsonDefinitionLoader
from infrastructure.definitions.loader_registry import DefinitionLoaderRegistry
from infrastructure.http.requests_http_client import RequestsHttpClient
from infrastructure.logging.log_setup import setup_console_logging
from infrastructure.logging.loguru_logger import LoguruLogger
from infrastructure.run.in_memory_batch_scheduler import InMemoryBatchScheduler
from infrastructure.run.in_memory_batch_store import InMemoryBatchStore
from infrastructure.run.in_memory_result_sink import InMemoryResultSink
from infrastructure.run.in_memory_run_registry import InMemoryRunRegistry


# Request models
class RunBatchRequest(BaseModel):
    """Batch run request"""
    test_ids: List[str] = Field(default_factory=list, description="Ids of definition files to run")
    tests: List[Dict[str, Any]] = Field(default_factory=list, description="Inline test definitions")
    browsers: Optional[List[str]] = Field(default=None, description="Browser flavors; defaults to config")
    variables: Dict[str, Any] = Field(default_factory=dict, description="Initial variables for every test")


class RunAcceptedResponse(BaseModel):
    """Accepted response for background execution"""
    batch_id: str = Field(description="Batch identifier")
    status: str = Field(description="Batch status")
    links: Dict[str, str] = Field(description="Related resources")


class BatchStatusResponse(BaseModel):
    """Batch status response"""
    batch_id: str
    status: str
    test_ids: List[str]
    outcomes: List[Dict[str, Any]] = Field(default_factory=list)
    summary: Optional[Dict[str, Any]] = None
    runs: List[Dict[str, Any]] = Field(default_factory=list, description="Per-pairing run records")
    error: Optional[str] = None


class StopResponse(BaseModel):
    message: str
    test_id: str


class ResultsResponse(BaseModel):
    total: int
    results: List[Dict[str, Any]]


# FastAPI application
app = FastAPI(
    title="SmartQA Engine",
    description="Browser and API test execution engine",
    version="1.0.0",
)

# Settings
CONFIG: EngineConfig = load_engine_config()
setup_console_logging(level=CONFIG.log_level, log_file=CONFIG.log_file)
DEFINITIONS_DIR = Path(CONFIG.definitions_dir)
RUN_REGISTRY = InMemoryRunRegistry()
RESULT_SINK = InMemoryResultSink()
BATCH_STORE = InMemoryBatchStore()
BATCH_SCHEDULER = InMemoryBatchScheduler()
HTTP_CLIENT = RequestsHttpClient(timeout_ms=CONFIG.http_timeout_ms)
MAX_WAIT_SEC = 30


@app.get("/")
def read_root():
    """Health check"""
    return {"status": "ok", "service": "smartqa-engine"}


def _build_engine(request: RunBatchRequest) -> Engine:
    config = CONFIG
    if request.browsers:
        config = replace(config, browsers=tuple(request.browsers))
    return build_engine(
        config,
        logger=LoguruLogger(),
        sink=RESULT_SINK,
        http_client=HTTP_CLIENT,
        registry=RUN_REGISTRY,
    )


def _load_definitions(request: RunBatchRequest) -> List[TestDefinition]:
    tests: List[TestDefinition] = []
    finder = DefinitionFileFinder(DEFINITIONS_DIR)
    registry = DefinitionLoaderRegistry()
    for test_id in request.test_ids:
        path = finder.find_by_id(test_id)
        if path is None:
            raise HTTPException(status_code=404, detail=f"Definition file not found: {test_id}")
        tests.extend(registry.load(path))

    if request.tests:
        tests.extend(JsonDefinitionLoader().load_from_data(request.tests))

    if not tests:
        raise HTTPException(status_code=400, detail="No tests given: provide test_ids or tests")
    return tests


def _build_links(batch_id: str) -> Dict[str, str]:
    return {
        "self": f"/runs/{batch_id}",
        "results": "/results",
    }


def _execute_batch(batch_id: str, engine: Engine, tests: List[TestDefinition], variables: Dict[str, Any]) -> None:
    logger = engine.deps.logger.bind(batch_id=batch_id)
    logger.info("batch.accepted", tests=[t.id for t in tests])
    try:
        result = asyncio.run(engine.run_tests(tests, variables))
    except Exception as exc:
        logger.error("batch.execution_failed", error=str(exc))
        BATCH_STORE.fail(batch_id, str(exc) or type(exc).__name__)
        return
    BATCH_STORE.complete(batch_id, result)


def _status_response(batch_id: str) -> BatchStatusResponse:
    record = BATCH_STORE.get(batch_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Batch not found: {batch_id}")

    runs = [
        {
            "run_id": r.run_id,
            "test_id": r.test_id,
            "flavor": r.flavor,
            "status": r.status.value,
            "error": r.error,
        }
        for r in RUN_REGISTRY.list()
        if r.test_id in record.test_ids
    ]
    result = record.result
    return BatchStatusResponse(
        batch_id=record.batch_id,
        status=record.status,
        test_ids=record.test_ids,
        outcomes=[outcome_to_dict(o) for o in result.outcomes] if result else [],
        summary=summary_to_dict(result.summary) if result else None,
        runs=runs,
        error=record.error,
    )


@app.post("/runs")
def start_run(
    request: RunBatchRequest = Body(...),
    wait_sec: Optional[int] = Query(default=None, ge=0),
):
    """
    Start a batch on a background worker.

    Args:
        request: test ids and/or inline definitions, browsers, variables
        wait_sec: optionally block up to this many seconds for completion

    Returns:
        202 with the batch id, or the final status when it finished within wait_sec
    """
    if wait_sec is not None and wait_sec > MAX_WAIT_SEC:
        raise HTTPException(status_code=400, detail=f"wait_sec must be <= {MAX_WAIT_SEC}")

    try:
        tests = _load_definitions(request)
    except (DefinitionLoadError, ConfigurationError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    engine = _build_engine(request)
    batch_id = uuid4().hex
    record = BATCH_STORE.create(batch_id, [t.id for t in tests])
    BATCH_SCHEDULER.submit(
        batch_id,
        lambda: _execute_batch(batch_id, engine, tests, dict(request.variables)),
    )

    if wait_sec and BATCH_SCHEDULER.wait(batch_id, wait_sec):
        return _status_response(batch_id)

    accepted = RunAcceptedResponse(
        batch_id=batch_id,
        status=record.status,
        links=_build_links(batch_id),
    )
    return JSONResponse(
        status_code=status.HTTP_202_ACCEPTED,
        content=accepted.model_dump(),
    )


@app.get("/runs/{batch_id}", response_model=BatchStatusResponse)
def get_run_status(batch_id: str) -> BatchStatusResponse:
    return _status_response(batch_id)


@app.post("/tests/{test_id}/stop", response_model=StopResponse)
def stop_test(test_id: str) -> StopResponse:
    """Ask every in-flight run of the test to stop before its next step."""
    _build_engine(RunBatchRequest()).stop(test_id)
    return StopResponse(message="Test stopped successfully", test_id=test_id)


@app.get("/results", response_model=ResultsResponse)
def list_results(
    status_filter: Optional[OutcomeStatus] = Query(default=None, alias="status"),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
) -> ResultsResponse:
    """Completed test outcomes, newest first."""
    outcomes = RESULT_SINK.outcomes(status=status_filter, limit=limit, offset=offset)
    return ResultsResponse(
        total=RESULT_SINK.count(status=status_filter),
        results=[outcome_to_dict(o) for o in outcomes],
    )
