from __future__ import annotations

import argparse
import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Protocol, Sequence

import pandas as pd
from dotenv import load_dotenv

from agents.base import BaseAgent
from agents.uader import UaderExtensionAgent
from config import AppConfig, SourceConfig, load_config
from models import InternshipRecord, ScrapedInternship
from notifiers.discord import DiscordNotifier, NullNotifier, load_discord_config_from_env
from utils.browser import BrowserClient
from utils.http import HttpClient
from utils.logging_setup import setup_logging
from utils.store import DuplicateInternshipError, InternshipStore


class Notifier(Protocol):
    def send(self, posting: ScrapedInternship) -> Optional[bool]: ...


class InternshipController:
    """
    Runs every registered agent, keeps only postings the store has never seen,
    and announces each new one exactly once.

    Cycles are serialized; the store's unique URL key settles any remaining race.
    """

    def __init__(
        self,
        strategies: Sequence[BaseAgent],
        *,
        store: InternshipStore,
        notifier: Notifier,
        logger: logging.Logger,
    ):
        self.strategies = list(strategies)
        self.store = store
        self.notifier = notifier
        self.logger = logger
        self._cycle_lock = threading.Lock()

    def run_cycle(self) -> list[ScrapedInternship]:
        with self._cycle_lock:
            self.logger.info("Scrape cycle start (%s strategies)", len(self.strategies))
            new_items: list[ScrapedInternship] = []

            for strategy in self.strategies:
                self.logger.info("Running strategy: %s", strategy.name)
                try:
                    scraped = strategy.scrape()
                except Exception as e:
                    self.logger.exception("%s: scrape raised (%s: %s)", strategy.name, type(e).__name__, e)
                    continue

                for item in _dedupe_by_url(scraped):
                    if self._save_if_new(item):
                        new_items.append(item)
                        self._notify(item)

            self.logger.info("Scrape cycle done. New=%s", len(new_items))
            return new_items

    def _save_if_new(self, item: ScrapedInternship) -> bool:
        try:
            if self.store.find_by_url(item.url) is not None:
                return False
            record = InternshipRecord.from_posting(item, found_at=datetime.now(timezone.utc))
            self.store.create(record)
        except DuplicateInternshipError:
            self.logger.info("Already stored by a concurrent run: %s", item.url)
            return False
        except Exception as e:
            self.logger.error("Failed saving internship %s: %s: %s", item.url, type(e).__name__, e)
            return False
        self.logger.info("New internship saved: %s", item.title)
        return True

    def _notify(self, item: ScrapedInternship) -> None:
        try:
            sent = self.notifier.send(item)
        except Exception as e:
            self.logger.error("Notifier raised for %s: %s: %s", item.url, type(e).__name__, e)
            sent = False
        if sent is None:
            # Left unflagged so list_internships --unpublished still finds it.
            self.logger.info("Notification skipped for %s", item.url)
            return
        if not sent:
            self.logger.warning("Notification not delivered for %s", item.url)

        # The flag records that a send was attempted; failed sends are not retried.
        try:
            self.store.mark_published(item.url)
        except Exception as e:
            self.logger.error("Failed flagging %s as published: %s: %s", item.url, type(e).__name__, e)


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default="config.yaml")
    parser.add_argument(
        "--no-notify",
        action="store_true",
        help="Persist new postings without posting them to Discord",
    )
    args = parser.parse_args()
    return run(args.config, notify=not args.no_notify)


def run(config_path: str, *, notify: bool) -> int:
    controller, app_config, logger = build_controller(config_path, notify=notify)
    run_cycle_and_report(controller, app_config, logger)
    return 0


def build_controller(config_path: str, *, notify: bool) -> tuple[InternshipController, AppConfig, logging.Logger]:
    load_dotenv()
    app_config = load_config(config_path)
    app_config.output.dir.mkdir(parents=True, exist_ok=True)

    logger = setup_logging(Path("logs"))

    http = HttpClient(timeout_seconds=app_config.scrape.timeout_seconds, user_agent=app_config.scrape.user_agent)
    browser = BrowserClient(
        timeout_ms=app_config.scrape.timeout_seconds * 1000,
        user_agent=app_config.scrape.user_agent,
    )
    agents = [
        _build_agent(source, app_config=app_config, http=http, browser=browser, logger=logger)
        for source in app_config.sources
    ]
    notifier: Notifier = DiscordNotifier(load_discord_config_from_env(), logger=logger) if notify else NullNotifier()
    store = InternshipStore(app_config.storage.sqlite_path)
    return InternshipController(agents, store=store, notifier=notifier, logger=logger), app_config, logger


def run_cycle_and_report(controller: InternshipController, app_config: AppConfig, logger: logging.Logger) -> list[ScrapedInternship]:
    new_items = controller.run_cycle()
    output_dir = app_config.output.dir
    _write_json(output_dir / app_config.output.json, new_items)
    _write_csv(output_dir / app_config.output.csv, new_items)
    logger.info("Done. New=%s Stored=%s", len(new_items), controller.store.count())
    return new_items


def _build_agent(
    source: SourceConfig,
    *,
    app_config: AppConfig,
    http: HttpClient,
    browser: BrowserClient,
    logger: logging.Logger,
) -> BaseAgent:
    if source.type == "uader":
        return UaderExtensionAgent(
            source,
            scrape_config=app_config.scrape,
            http=http,
            browser=browser,
            keywords=app_config.filter.keywords,
            logger=logger,
        )
    raise ValueError(f"Unknown source type: {source.type}")


def _dedupe_by_url(postings: list[ScrapedInternship]) -> list[ScrapedInternship]:
    seen: set[str] = set()
    out: list[ScrapedInternship] = []
    for p in postings:
        key = p.url.strip()
        if key in seen:
            continue
        seen.add(key)
        out.append(p)
    return out


def _write_json(path: Path, postings: list[ScrapedInternship]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = [p.to_json_dict() for p in postings]
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def _write_csv(path: Path, postings: list[ScrapedInternship]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    df = pd.DataFrame([p.to_json_dict() for p in postings])
    if df.empty:
        df = pd.DataFrame(columns=["origin", "url", "title", "image_url", "published_at"])
    df.to_csv(path, index=False)


if __name__ == "__main__":
    raise SystemExit(main())
