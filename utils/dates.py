from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional


@dataclass(frozen=True)
class DateSignals:
    """Raw date hints scraped from a detail page, in decreasing order of trust."""

    meta_published_time: Optional[str] = None
    time_datetime_attr: Optional[str] = None
    visual_text: Optional[str] = None


Resolver = Callable[[DateSignals, datetime], Optional[datetime]]


_SPANISH_MONTHS: dict[str, int] = {
    "enero": 1,
    "febrero": 2,
    "marzo": 3,
    "abril": 4,
    "mayo": 5,
    "junio": 6,
    "julio": 7,
    "agosto": 8,
    "septiembre": 9,
    "setiembre": 9,
    "octubre": 10,
    "noviembre": 11,
    "diciembre": 12,
    "ene": 1,
    "feb": 2,
    "mar": 3,
    "abr": 4,
    "may": 5,
    "jun": 6,
    "jul": 7,
    "ago": 8,
    "sep": 9,
    "set": 9,
    "oct": 10,
    "nov": 11,
    "dic": 12,
}

_FILLER_TOKENS = {"de", "del"}
_COMPACT_OFFSET = re.compile(r"([+-]\d{2})(\d{2})$")


def from_structured_metadata(signals: DateSignals, now: datetime) -> Optional[datetime]:
    raw = (signals.meta_published_time or "").strip()
    if not raw:
        return None
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    # "+0000" style offsets are not accepted by fromisoformat before 3.11.
    raw = _COMPACT_OFFSET.sub(r"\1:\2", raw)
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    return _as_utc(parsed)


def from_semantic_markup(signals: DateSignals, now: datetime) -> Optional[datetime]:
    raw = (signals.time_datetime_attr or "").strip()
    if len(raw) < 10 or raw[4] != "-" or raw[7] != "-":
        return None
    try:
        y, m, d = (int(raw[0:4]), int(raw[5:7]), int(raw[8:10]))
        # Built from components so the calendar day never shifts with the local zone.
        return datetime(y, m, d, tzinfo=timezone.utc)
    except ValueError:
        return None


def from_visual_text(signals: DateSignals, now: datetime) -> Optional[datetime]:
    return parse_spanish_date(signals.visual_text or "", now=now)


def parse_spanish_date(text: str, *, now: datetime) -> Optional[datetime]:
    """
    Parse free text such as "12 Nov", "15 Dic 2024" or "3 de marzo, 2025".

    A missing year means the year of `now`; if that lands in the future the
    date belongs to the previous year (e.g. "15 Dic" read in February).
    """
    parts = [p for p in re.split(r"[\s,.]+", (text or "").strip().lower()) if p and p not in _FILLER_TOKENS]
    if len(parts) < 2:
        return None

    if not parts[0].isdigit():
        return None
    day = int(parts[0])
    month = _lookup_month(parts[1])
    if month is None:
        return None

    year_inferred = True
    year = now.year
    if len(parts) > 2 and parts[2].isdigit():
        year = int(parts[2])
        if year < 100:
            year += 2000
        year_inferred = False

    try:
        candidate = datetime(year, month, day, tzinfo=timezone.utc)
        if year_inferred and candidate > now:
            candidate = candidate.replace(year=year - 1)
    except ValueError:
        return None
    return candidate


RESOLVERS: tuple[Resolver, ...] = (
    from_structured_metadata,
    from_semantic_markup,
    from_visual_text,
)


def resolve_published_at(
    signals: DateSignals,
    *,
    now: Optional[datetime] = None,
    resolvers: tuple[Resolver, ...] = RESOLVERS,
) -> datetime:
    current = _as_utc(now) if now else datetime.now(timezone.utc)
    for resolver in resolvers:
        result = resolver(signals, current)
        if result is not None:
            return result
    return current


def _lookup_month(token: str) -> Optional[int]:
    if token in _SPANISH_MONTHS:
        return _SPANISH_MONTHS[token]
    return _SPANISH_MONTHS.get(token[:3])


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
