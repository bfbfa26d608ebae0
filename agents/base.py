from __future__ import annotations

import abc
import logging
import os
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING, Protocol

from models import ScrapedInternship

if TYPE_CHECKING:
    from config import ScrapeConfig, SourceConfig


class Navigator(Protocol):
    def get_html(self, url: str) -> str: ...


class NavigationClient(Protocol):
    def session(self) -> AbstractContextManager[Navigator]: ...


class BaseAgent(abc.ABC):
    def __init__(
        self,
        source: "SourceConfig",
        *,
        scrape_config: "ScrapeConfig",
        http: NavigationClient,
        browser: NavigationClient,
        keywords: list[str],
        logger: logging.Logger,
    ):
        self.source = source
        self.scrape_config = scrape_config
        self.http = http
        self.browser = browser
        self.keywords = keywords
        self.logger = logger

    @property
    def name(self) -> str:
        return self.source.name

    def navigation_client(self) -> NavigationClient:
        use_browser = _env_bool("USE_PLAYWRIGHT", default=self.scrape_config.use_playwright)
        return self.browser if use_browser else self.http

    @abc.abstractmethod
    def scrape(self) -> list[ScrapedInternship]:
        """Return postings for this source. Must not raise."""
        raise NotImplementedError


def _env_bool(key: str, *, default: bool) -> bool:
    val = os.environ.get(key)
    if val is None:
        return default
    return val.strip().lower() in {"1", "true", "yes", "y", "on"}


def _describe(e: BaseException) -> str:
    return f"{type(e).__name__}: {e}"
