"""Text cleaning shared by the token resolvers."""

from __future__ import annotations

import unicodedata

STOP_WORDS = frozenset(
    {
        "a", "an", "the", "of", "in", "on", "at", "to", "for", "with", "by",
        "and", "or", "but", "from", "into", "about", "as", "is", "was", "are",
        "were", "be", "been", "that", "this", "it", "its", "via",
        # French articles and prepositions
        "de", "du", "des", "le", "la", "les", "un", "une",
    }
)


def strip_diacritics(value: str) -> str:
    """Remove combining accents, e.g. ``"Müller"`` becomes ``"Muller"``."""
    normalized = unicodedata.normalize("NFD", value)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


def is_stop_word(word: str) -> bool:
    return word.lower() in STOP_WORDS


def capitalize(word: str) -> str:
    return word[:1].upper() + word[1:].lower()
