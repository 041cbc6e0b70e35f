# application/handlers/page_handler.py
from __future__ import annotations

from application.handlers.base import StepHandler, StepResult, require_context
from application.services.execution_deps import ExecutionDeps
from application.services.interpolator import Interpolator
from domain.run import RunContext
from domain.steps.browser import ClickStep, FillStep, NavigateStep, ScreenshotStep, TypeStep, WaitStep


class PageActionHandler(StepHandler):
    """navigate / click / fill / type / screenshot against the live page."""

    _SUPPORTED = (NavigateStep, ClickStep, FillStep, TypeStep, ScreenshotStep)

    def __init__(self, interpolator: Interpolator):
        self._interpolator = interpolator

    def supports(self, step) -> bool:
        return isinstance(step, self._SUPPORTED)

    async def handle(self, step, ctx: RunContext, deps: ExecutionDeps) -> StepResult:
        page = require_context(ctx, step)
        cfg = deps.config

        if isinstance(step, NavigateStep):
            url = cfg.resolve_url(self._interpolator.interpolate(step.url, ctx.variables))
            wait_until = step.wait_until or cfg.default_wait_until
            await page.navigate(url, wait_until, step.timeout_ms or cfg.navigation_timeout_ms)
            deps.logger.debug("page.navigated", url=url, wait_until=wait_until)
            return StepResult(value=url)

        if isinstance(step, ClickStep):
            await page.click(step.selector, cfg.selector_timeout_ms, step.options)
            return StepResult()

        if isinstance(step, FillStep):
            value = self._interpolator.interpolate(step.value, ctx.variables)
            await page.fill(step.selector, value, cfg.selector_timeout_ms)
            return StepResult(value=value)

        if isinstance(step, TypeStep):
            text = self._interpolator.interpolate(step.text, ctx.variables)
            await page.type(step.selector, text, cfg.selector_timeout_ms, step.delay_ms)
            return StepResult(value=text)

        # ScreenshotStep
        data = await page.screenshot(full_page=step.full_page)
        deps.logger.debug("page.screenshot", bytes=len(data))
        return StepResult(value=data, screenshot=data)


class WaitStepHandler(StepHandler):
    """
    Selector waits need a page; fixed-duration waits also work in bare
    (HTTP-only) contexts.
    """

    def supports(self, step) -> bool:
        return isinstance(step, WaitStep)

    async def handle(self, step: WaitStep, ctx: RunContext, deps: ExecutionDeps) -> StepResult:
        if step.selector:
            page = require_context(ctx, step)
            await page.wait_for_selector(step.selector, step.timeout_ms or deps.config.selector_timeout_ms)
            return StepResult()

        await deps.clock.sleep(step.duration_ms or 0)
        return StepResult()
