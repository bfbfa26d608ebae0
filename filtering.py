from __future__ import annotations

from typing import Iterable

# Accented and unaccented spellings are listed separately: matching is plain
# case-folded substring search.
DEFAULT_KEYWORDS: tuple[str, ...] = ("pasantia", "pasantía", "rentada", "fcyt")


def _normalize(text: str) -> str:
    return text.casefold()


def keyword_in_text(*, normalized_text: str, keyword: str) -> bool:
    kw = keyword.strip()
    if not kw:
        return False
    return _normalize(kw) in normalized_text


def keyword_match(text: str, keywords: Iterable[str]) -> bool:
    normalized = _normalize(text or "")
    for kw in keywords:
        if keyword_in_text(normalized_text=normalized, keyword=str(kw)):
            return True
    return False


def is_internship(title: str, keywords: Iterable[str] = DEFAULT_KEYWORDS) -> bool:
    """
    Decide whether a listing title announces an internship / paid placement.

    Deliberately blunt: no stemming and no accent folding. A title matches when
    any keyword is a substring of the case-folded title.
    """
    return keyword_match(title, keywords)
