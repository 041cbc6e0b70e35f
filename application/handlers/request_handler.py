# application/handlers/request_handler.py
from __future__ import annotations

from typing import Any, Dict, Optional

from application.handlers.base import StepHandler, StepResult
from application.ports.http_client import HttpClientPort, HttpResponse
from application.ports.schema_validator import SchemaValidatorPort
from application.services.execution_deps import ExecutionDeps
from application.services.interpolator import Interpolator
from application.services.redactor import mask_body, mask_dict
from application.services.retry import RetryController
from domain.exceptions import AssertionFailedError, RetryableResponseError, SchemaValidationError
from domain.run import RunContext
from domain.steps.http import RequestStep
from domain.variables import LAST_RESPONSE_KEY, VariableStore


class RequestStepHandler(StepHandler):
    """
    `request` steps. Every request field is interpolated against the variable
    store, the call goes through the retry controller, and a successful
    response becomes the last response (and the save_as value).
    """

    def __init__(
        self,
        http_client: HttpClientPort,
        retry: RetryController,
        schema_validator: SchemaValidatorPort,
        interpolator: Optional[Interpolator] = None,
    ):
        self._http = http_client
        self._retry = retry
        self._schema_validator = schema_validator
        self._interpolator = interpolator or Interpolator()

    def supports(self, step) -> bool:
        return isinstance(step, RequestStep)

    async def handle(self, step: RequestStep, ctx: RunContext, deps: ExecutionDeps) -> StepResult:
        response = await self.send(step, ctx.variables, deps)
        ctx.variables.set(LAST_RESPONSE_KEY, response)

        if step.response_schema is not None:
            try:
                self._schema_validator.validate(response.body, step.response_schema)
            except SchemaValidationError as exc:
                raise AssertionFailedError(f"Schema validation failed: {exc}") from exc

        return StepResult(value=response)

    async def send(self, step: RequestStep, variables: VariableStore, deps: ExecutionDeps) -> HttpResponse:
        """Interpolate and send with retries. Also used by load-test workers."""
        spec = step.request
        url = deps.config.resolve_url(self._interpolator.interpolate(spec.url, variables))
        headers: Dict[str, str] = self._interpolator.interpolate(dict(spec.headers or {}), variables)
        body: Any = self._interpolator.interpolate(spec.body, variables)
        params: Optional[Dict[str, Any]] = self._interpolator.interpolate(spec.params, variables)
        timeout_ms = spec.timeout_ms or deps.config.http_timeout_ms
        retry_statuses = set(deps.config.retry_statuses)

        deps.logger.debug(
            "request.send",
            method=spec.method,
            url=url,
            headers=mask_dict(headers),
            body=mask_body(body),
            params=params,
        )

        async def attempt() -> HttpResponse:
            resp = await self._http.send(spec.method, url, headers, body, params, timeout_ms)
            if resp.status in retry_statuses:
                raise RetryableResponseError(f"HTTP {resp.status} from {spec.method} {url}", resp)
            return resp

        response = await self._retry.run(attempt, attempts=step.retries, logger=deps.logger)

        deps.logger.info(
            "request.response",
            method=spec.method,
            url=url,
            status=response.status,
            duration_ms=round(response.duration_ms, 1),
        )
        return response
