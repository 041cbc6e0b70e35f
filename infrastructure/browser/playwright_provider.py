# infrastructure/browser/playwright_provider.py
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright

from application.ports.execution_context import ContextProviderPort, ExecutionContextPort
from application.ports.logger import LoggerPort
from domain.definition import ContextOptions
from domain.exceptions import ContextAcquisitionError

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


class PlaywrightExecutionContext(ExecutionContextPort):
    """One Playwright BrowserContext with a single page."""

    def __init__(self, context: BrowserContext, page: Page):
        self._context = context
        self._page = page

    async def navigate(self, url: str, wait_until: str, timeout_ms: int) -> None:
        await self._page.goto(url, wait_until=wait_until, timeout=timeout_ms)

    async def click(self, selector: str, timeout_ms: int, options: Optional[Dict[str, Any]] = None) -> None:
        await self._page.click(selector, timeout=timeout_ms, **(options or {}))

    async def fill(self, selector: str, value: str, timeout_ms: int) -> None:
        await self._page.fill(selector, value, timeout=timeout_ms)

    async def type(self, selector: str, text: str, timeout_ms: int, delay_ms: Optional[int] = None) -> None:
        await self._page.type(selector, text, delay=delay_ms or 0, timeout=timeout_ms)

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        await self._page.wait_for_selector(selector, timeout=timeout_ms)

    async def screenshot(self, full_page: bool = False) -> bytes:
        return await self._page.screenshot(full_page=full_page)

    async def text_content(self, selector: str, timeout_ms: int) -> Optional[str]:
        return await self._page.text_content(selector, timeout=timeout_ms)

    async def is_visible(self, selector: str) -> bool:
        return await self._page.is_visible(selector)

    async def url(self) -> str:
        return self._page.url

    async def count(self, selector: str) -> int:
        return await self._page.locator(selector).count()

    async def destroy(self) -> None:
        await self._context.close()


class PlaywrightContextProvider(ContextProviderPort):
    def __init__(self, browser: Browser):
        self._browser = browser

    async def create_context(self, options: ContextOptions) -> ExecutionContextPort:
        kwargs: Dict[str, Any] = dict(options.extra)
        if options.viewport is not None:
            kwargs["viewport"] = {"width": options.viewport.width, "height": options.viewport.height}
        if options.user_agent:
            kwargs["user_agent"] = options.user_agent

        try:
            context = await self._browser.new_context(**kwargs)
            page = await context.new_page()
        except Exception as exc:
            raise ContextAcquisitionError(f"could not open a browser context: {exc}") from exc
        return PlaywrightExecutionContext(context, page)


class PlaywrightBrowserPool:
    """
    Launches one browser per requested engine and hands out a context
    provider per launched browser. Engines that fail to launch are logged and
    skipped; if none launch the pool refuses to start.
    """

    def __init__(self, logger: LoggerPort, headless: bool = True):
        self._logger = logger
        self._headless = headless
        self._playwright: Optional[Playwright] = None
        self._browsers: Dict[str, Browser] = {}

    async def start(self, names: Iterable[str]) -> Dict[str, ContextProviderPort]:
        self._playwright = await async_playwright().start()
        for name in names:
            if name not in SUPPORTED_BROWSERS:
                self._logger.warning("browser.unsupported", browser=name)
                continue
            try:
                browser_type = getattr(self._playwright, name)
                self._browsers[name] = await browser_type.launch(headless=self._headless)
                self._logger.info("browser.launched", browser=name)
            except Exception as exc:
                self._logger.error("browser.launch_failed", browser=name, error=str(exc))

        if not self._browsers:
            await self.close()
            raise ContextAcquisitionError("no browser could be launched")
        return self.providers()

    def providers(self) -> Dict[str, ContextProviderPort]:
        return {name: PlaywrightContextProvider(browser) for name, browser in self._browsers.items()}

    async def close(self) -> None:
        for name, browser in list(self._browsers.items()):
            try:
                await browser.close()
            except Exception as exc:
                self._logger.warning("browser.close_failed", browser=name, error=str(exc))
        self._browsers.clear()
        if self._playwright is not None:
            await self._playwright.stop()
            self._playwright = None
