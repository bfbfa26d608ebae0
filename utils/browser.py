from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator


@dataclass(frozen=True)
class BrowserClient:
    timeout_ms: int = 30_000
    user_agent: str | None = None

    @contextmanager
    def session(self) -> Iterator["BrowserSession"]:
        """
        Launch a headless Chromium for the duration of the `with` block.

        Every `get_html` call on the yielded session opens its own page; the
        browser itself is closed when the block exits, error or not.
        """
        try:
            from playwright.sync_api import sync_playwright  # type: ignore
        except Exception as e:  # pragma: no cover
            raise RuntimeError(
                "Playwright is not installed. Install with `pip install playwright` and "
                "`python -m playwright install chromium`."
            ) from e

        with sync_playwright() as p:  # pragma: no cover
            # --no-sandbox is required inside most Linux containers.
            browser = p.chromium.launch(headless=True, args=["--no-sandbox"])
            try:
                yield BrowserSession(browser, timeout_ms=self.timeout_ms, user_agent=self.user_agent)
            finally:
                browser.close()


class BrowserSession:
    def __init__(self, browser: Any, *, timeout_ms: int, user_agent: str | None = None):
        self._browser = browser
        self.timeout_ms = timeout_ms
        self.user_agent = user_agent

    def get_html(self, url: str) -> str:  # pragma: no cover
        if self.user_agent:
            page = self._browser.new_page(user_agent=self.user_agent)
        else:
            page = self._browser.new_page()
        try:
            response = page.goto(url, wait_until="domcontentloaded", timeout=self.timeout_ms)
            if response is not None and response.status >= 400:
                raise RuntimeError(f"{response.status} for url: {url}")
            return page.content()
        finally:
            page.close()
