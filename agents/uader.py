from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from agents.base import BaseAgent, Navigator, _describe
from filtering import is_internship
from models import ScrapedInternship
from utils.dates import DateSignals, resolve_published_at


@dataclass(frozen=True)
class ListingCandidate:
    title: str
    url: str


class UaderExtensionAgent(BaseAgent):
    """
    Scrapes the UADER FCyT "Secretaría de Extensión" WordPress category.

    The listing only gives a title and link per <article>; matching posts are
    opened one by one to pick up Open Graph metadata and the publication date.
    """

    def scrape(self) -> list[ScrapedInternship]:
        self.logger.info("UADER scrape start %s (%s)", self.source.name, self.source.url)
        results: list[ScrapedInternship] = []
        try:
            with self.navigation_client().session() as nav:
                html = nav.get_html(self.source.url)
                candidates = parse_listing(
                    html,
                    base_url=self.source.url,
                    limit=self.scrape_config.max_articles,
                    logger=self.logger,
                )
                self.logger.info("%s: analysing %s recent articles", self.source.name, len(candidates))

                for candidate in candidates:
                    if not is_internship(candidate.title, self.keywords):
                        self.logger.debug("%s: ignored (not an internship): %r", self.source.name, candidate.title)
                        continue
                    self.logger.info("%s: internship detected %r, fetching detail", self.source.name, candidate.title)
                    posting = self._scrape_detail(nav, candidate)
                    if posting:
                        results.append(posting)
        except Exception as e:
            self.logger.exception("%s: listing scrape failed (%s)", self.source.name, _describe(e))

        self.logger.info("%s: scraped %s postings", self.source.name, len(results))
        return results

    def _scrape_detail(self, nav: Navigator, candidate: ListingCandidate) -> Optional[ScrapedInternship]:
        try:
            html = nav.get_html(candidate.url)
            return parse_detail(
                html,
                url=candidate.url,
                fallback_title=candidate.title,
                origin=self.source.origin,
                logger=self.logger,
            )
        except Exception as e:
            self.logger.warning("%s: failed reading detail %s (%s)", self.source.name, candidate.url, _describe(e))
            return None


def parse_listing(
    html: str,
    *,
    base_url: str,
    limit: int,
    logger: Optional[logging.Logger] = None,
) -> list[ListingCandidate]:
    soup = BeautifulSoup(html, "html.parser")
    out: list[ListingCandidate] = []
    # Newest first on WordPress category pages; older entries were seen on earlier runs.
    for article in soup.select("article")[:limit]:
        link = article.select_one(".entry-title a")
        if link is None:
            if logger:
                logger.debug("Skipping article without a title link")
            continue
        title = _collapse_spaces(link.get_text(" ", strip=True))
        href = (link.get("href") or "").strip()
        if not title or not href:
            if logger:
                logger.debug("Skipping listing entry with missing title or href: %r", title or href)
            continue
        out.append(ListingCandidate(title=title, url=urljoin(base_url, href)))
    return out


def parse_detail(
    html: str,
    *,
    url: str,
    fallback_title: str,
    origin: str,
    now: Optional[datetime] = None,
    logger: Optional[logging.Logger] = None,
) -> ScrapedInternship:
    soup = BeautifulSoup(html, "html.parser")

    title = _meta_content(soup, "og:title") or fallback_title

    image_url = _meta_content(soup, "og:image")
    if not image_url:
        thumb = soup.select_one(".img-thumbnail img[src]")
        if thumb is not None:
            image_url = str(thumb.get("src") or "").strip() or None
    if image_url:
        image_url = urljoin(url, image_url)

    signals = extract_date_signals(soup)
    if logger and not signals.meta_published_time and not signals.time_datetime_attr:
        logger.debug("No machine-readable date on %s; falling back to visual text %r", url, signals.visual_text)

    return ScrapedInternship(
        origin=origin,
        url=url,
        title=_collapse_spaces(title),
        image_url=image_url,
        published_at=resolve_published_at(signals, now=now),
    )


def extract_date_signals(soup: BeautifulSoup) -> DateSignals:
    time_attr = None
    time_el = soup.select_one(".post-date time[datetime]")
    if time_el is not None:
        time_attr = str(time_el.get("datetime") or "").strip() or None

    visual = None
    post_date = soup.select_one(".post-date")
    if post_date is not None:
        visual = post_date.get_text(" ", strip=True) or None

    return DateSignals(
        meta_published_time=_meta_content(soup, "article:published_time"),
        time_datetime_attr=time_attr,
        visual_text=visual,
    )


def _meta_content(soup: BeautifulSoup, prop: str) -> Optional[str]:
    el = soup.select_one(f'meta[property="{prop}"]')
    if el is None:
        return None
    content = str(el.get("content") or "").strip()
    return content or None


def _collapse_spaces(s: str) -> str:
    return re.sub(r"\s+", " ", s).strip()
