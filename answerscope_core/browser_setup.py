#!/usr/bin/env python3
import asyncio
import logging
import subprocess
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, Optional, Tuple

from .config import DEFAULT_USER_AGENT, SearchOptions
from .dom_scripts import STEALTH_INIT_SCRIPT

logger = logging.getLogger(__name__)

# Returns (browser, shutdown) for one Chromium process.
Launcher = Callable[[SearchOptions], Awaitable[Tuple[Any, Callable[[], Awaitable[None]]]]]


def launch_args(options: SearchOptions) -> Dict[str, Any]:
    args = [
        "--disable-blink-features=AutomationControlled",
        "--no-first-run",
        "--disable-default-apps",
        "--disable-dev-shm-usage",
    ]
    if not options.headless:
        # Headed runs look more like a real user; keep the window off-screen.
        args.extend([
            "--window-position=-2000,-2000",
            "--window-size=1,1",
            "--start-minimized",
        ])
    return {"headless": bool(options.headless), "args": args}


def _install_chromium() -> None:
    logger.warning("Chromium executable missing, running 'playwright install chromium'")
    result = subprocess.run(
        [sys.executable, "-m", "playwright", "install", "chromium"],
        capture_output=True,
        text=True,
        timeout=300,
    )
    if result.returncode != 0:
        logger.warning(f"Playwright install warning: {result.stderr[:200]}")


async def launch_playwright(options: SearchOptions):
    from playwright.async_api import async_playwright

    playwright = await async_playwright().start()
    kwargs = launch_args(options)
    try:
        try:
            browser = await playwright.chromium.launch(**kwargs)
        except Exception as e:
            if "Executable doesn't exist" not in str(e):
                raise
            await asyncio.to_thread(_install_chromium)
            browser = await playwright.chromium.launch(**kwargs)
    except BaseException:
        await playwright.stop()
        raise

    async def shutdown() -> None:
        try:
            await browser.close()
        finally:
            await playwright.stop()

    return browser, shutdown


class SharedBrowser:
    """
    Reference-counted handle to one browser process.

    Every user calls acquire() and later release(); the process is launched
    on the first acquire and shut down by the last release. Only new
    contexts are ever created on the shared process.
    """

    def __init__(self, options: Optional[SearchOptions] = None, launcher: Optional[Launcher] = None):
        self.options = options or SearchOptions.from_config()
        self.launcher = launcher or launch_playwright
        self.refs = 0
        self._browser = None
        self._shutdown: Optional[Callable[[], Awaitable[None]]] = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self._browser is not None

    async def acquire(self):
        async with self._lock:
            if self._browser is None:
                logger.debug("Launching browser")
                self._browser, self._shutdown = await self.launcher(self.options)
            self.refs += 1
            return self._browser

    async def release(self) -> None:
        async with self._lock:
            if self.refs == 0:
                return
            self.refs -= 1
            if self.refs > 0:
                return
            shutdown, self._shutdown = self._shutdown, None
            self._browser = None
            if shutdown is not None:
                logger.debug("Last user released the browser, shutting down")
                try:
                    await shutdown()
                except Exception as e:
                    logger.warning(f"Browser shutdown failed: {e}")


def context_args(options: SearchOptions) -> Dict[str, Any]:
    return {
        "user_agent": options.user_agent or DEFAULT_USER_AGENT,
        "viewport": {"width": 1024, "height": 600},
        "locale": options.locale,
        "ignore_https_errors": True,
    }


@asynccontextmanager
async def open_page(shared: SharedBrowser, options: SearchOptions) -> AsyncIterator[Any]:
    """
    Page in a fresh, isolated browsing context.

    The context is closed and the browser reference released on every exit
    path, cancellation included.
    """
    browser = await shared.acquire()
    try:
        context = await browser.new_context(**context_args(options))
        try:
            page = await context.new_page()
            await page.add_init_script(STEALTH_INIT_SCRIPT)
            yield page
        finally:
            try:
                await context.close()
            except Exception as e:
                logger.warning(f"Closing browser context failed: {e}")
    finally:
        await shared.release()
