from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class ScrapedInternship:
    origin: str
    url: str
    title: str
    image_url: Optional[str]
    published_at: Optional[datetime]

    def to_json_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["published_at"] = self.published_at.isoformat() if self.published_at else None
        return data


@dataclass(frozen=True)
class InternshipRecord:
    origin: str
    url: str
    title: str
    image_url: Optional[str]
    published_at: datetime
    found_at: datetime
    is_published: bool = False

    @staticmethod
    def from_posting(posting: ScrapedInternship, *, found_at: datetime) -> "InternshipRecord":
        # Postings without a resolved date are stamped with the discovery time.
        return InternshipRecord(
            origin=posting.origin,
            url=posting.url,
            title=posting.title,
            image_url=posting.image_url,
            published_at=posting.published_at or found_at,
            found_at=found_at,
            is_published=False,
        )

    def to_json_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["published_at"] = self.published_at.isoformat()
        data["found_at"] = self.found_at.isoformat()
        return data
