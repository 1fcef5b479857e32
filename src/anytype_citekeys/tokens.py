"""Resolvers computing the value of a single template token from a record."""

from __future__ import annotations

import re

from anytype_citekeys.models import DATE_FIELD, TITLE_FIELD, RecordHandle
from anytype_citekeys.text import capitalize, is_stop_word, strip_diacritics

_NON_LETTER_RE = re.compile(r"[^A-Za-z]")
_PUNCTUATION_RE = re.compile(r"[^\w\s]", re.ASCII)
_YEAR_RE = re.compile(r"[0-9]{4}")

NO_DATE = "nd"


def resolve_author(record: RecordHandle, capitalized: bool) -> str:
    """Return the first creator's name reduced to ASCII letters."""
    creators = record.get_creators()
    if not creators:
        return ""
    clean = _NON_LETTER_RE.sub("", strip_diacritics(creators[0].key_name()))
    if not clean:
        return ""
    return capitalize(clean) if capitalized else clean.lower()


def significant_title_words(title: str, count: int) -> list[str]:
    words = _PUNCTUATION_RE.sub("", strip_diacritics(title)).split()
    kept = [word for word in words if len(word) > 1 and not is_stop_word(word)]
    return kept[:count]


def resolve_title_words(record: RecordHandle, count: int, style: str) -> str:
    """Join the first ``count`` significant title words.

    ``camel`` gives ``RiseFallEmpires``; ``lower`` gives ``rise_fall_empires``.
    """
    words = significant_title_words(record.get_field(TITLE_FIELD) or "", count)
    if style == "camel":
        return "".join(capitalize(word) for word in words)
    if style == "lower":
        return "_".join(word.lower() for word in words)
    raise ValueError(f"Unknown title style: {style}")


def resolve_year(record: RecordHandle) -> str:
    match = _YEAR_RE.search(record.get_field(DATE_FIELD) or "")
    return match.group(0) if match else NO_DATE
