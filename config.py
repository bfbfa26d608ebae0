from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from filtering import DEFAULT_KEYWORDS


SourceType = Literal["uader"]
_SOURCE_TYPES: set[str] = {"uader"}


@dataclass(frozen=True)
class SourceConfig:
    name: str
    type: SourceType
    origin: str
    url: str


@dataclass(frozen=True)
class FilterConfig:
    keywords: list[str]


@dataclass(frozen=True)
class ScrapeConfig:
    timeout_seconds: int
    user_agent: str
    max_articles: int
    use_playwright: bool


@dataclass(frozen=True)
class StorageConfig:
    sqlite_path: Path


@dataclass(frozen=True)
class OutputConfig:
    dir: Path
    json: str
    csv: str


@dataclass(frozen=True)
class ScheduleConfig:
    interval_seconds: int


@dataclass(frozen=True)
class AppConfig:
    filter: FilterConfig
    scrape: ScrapeConfig
    storage: StorageConfig
    output: OutputConfig
    schedule: ScheduleConfig
    sources: list[SourceConfig]


def _require_dict(obj: Any, path: str) -> dict[str, Any]:
    if not isinstance(obj, dict):
        raise ValueError(f"Expected mapping at {path}")
    return obj


def load_config(path: str | Path) -> AppConfig:
    try:
        import yaml  # type: ignore
    except Exception as e:  # pragma: no cover
        raise RuntimeError("Missing dependency PyYAML. Install with `pip install -e .`.") from e

    raw = yaml.safe_load(Path(path).read_text(encoding="utf-8"))
    root = _require_dict(raw, "root")

    filter_raw = _require_dict(root.get("filter") or {}, "filter")
    scrape_raw = _require_dict(root.get("scrape") or {}, "scrape")
    storage_raw = _require_dict(root.get("storage") or {}, "storage")
    output_raw = _require_dict(root.get("output") or {}, "output")
    schedule_raw = _require_dict(root.get("schedule") or {}, "schedule")

    keywords_raw = filter_raw.get("keywords")
    if keywords_raw is None:
        keywords = list(DEFAULT_KEYWORDS)
    elif isinstance(keywords_raw, list):
        keywords = [str(x) for x in keywords_raw if str(x).strip()]
    else:
        raise ValueError("Expected filter.keywords to be a list")

    max_articles = int(scrape_raw.get("max_articles", 5))
    if max_articles < 1:
        raise ValueError("Expected scrape.max_articles to be >= 1")

    scrape = ScrapeConfig(
        timeout_seconds=int(scrape_raw.get("timeout_seconds", 30)),
        user_agent=str(scrape_raw.get("user_agent", "internTracker/1.0")),
        max_articles=max_articles,
        use_playwright=bool(scrape_raw.get("use_playwright", True)),
    )
    output_dir = Path(str(output_raw.get("dir", "output")))
    storage = StorageConfig(
        sqlite_path=Path(str(storage_raw.get("sqlite_path", output_dir / "internships.db"))),
    )
    output = OutputConfig(
        dir=output_dir,
        json=str(output_raw.get("json", "new_internships.json")),
        csv=str(output_raw.get("csv", "new_internships.csv")),
    )
    schedule = ScheduleConfig(interval_seconds=int(schedule_raw.get("interval_seconds", 60 * 60)))

    sources_raw = root.get("sources")
    if not isinstance(sources_raw, list) or not sources_raw:
        raise ValueError("Expected non-empty sources list")

    sources: list[SourceConfig] = []
    for i, s in enumerate(sources_raw):
        s_dict = _require_dict(s, f"sources[{i}]")
        s_type = str(s_dict.get("type", ""))
        if s_type not in _SOURCE_TYPES:
            raise ValueError(f"Unsupported source type at sources[{i}].type: {s_type}")
        for key in ("name", "url"):
            if not str(s_dict.get(key) or "").strip():
                raise ValueError(f"Missing sources[{i}].{key}")
        sources.append(
            SourceConfig(
                name=str(s_dict["name"]),
                type=s_type,  # type: ignore[arg-type]
                origin=str(s_dict.get("origin") or s_dict["name"]),
                url=str(s_dict["url"]),
            )
        )

    return AppConfig(
        filter=FilterConfig(keywords=keywords),
        scrape=scrape,
        storage=storage,
        output=output,
        schedule=schedule,
        sources=sources,
    )
