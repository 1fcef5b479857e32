"""Configuration loading for Anytype Citekeys."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    anytype_base_url: str
    anytype_token: str
    anytype_space_id: str
    anytype_object_type_article: str
    anytype_object_type_book: str
    anytype_field_year: str
    anytype_field_authors: str
    anytype_field_citation_key: str
    anytype_author_separator: str


DEFAULT_BASE_URL = "https://api.anytype.io"

PREF_TEMPLATE = "extensions.citekeys.template"
PREF_TITLE_WORDS = "extensions.citekeys.titleWords"

DEFAULT_TEMPLATE = "{auth}{year}"
DEFAULT_TITLE_WORDS = 3

# Values a preference store may hand back for an entry that was never set.
_UNSET_MARKERS = {"", "undefined"}


def load_settings() -> Settings:
    """Load configuration from environment variables."""
    base_url = os.getenv("ANYTYPE_BASE_URL", DEFAULT_BASE_URL)
    token = os.getenv("ANYTYPE_TOKEN")
    space_id = os.getenv("ANYTYPE_SPACE_ID")

    if not token or not space_id:
        raise RuntimeError(
            "ANYTYPE_TOKEN and ANYTYPE_SPACE_ID must be set in the environment."
        )

    return Settings(
        anytype_base_url=base_url,
        anytype_token=token,
        anytype_space_id=space_id,
        anytype_object_type_article=os.getenv("ANYTYPE_OBJECT_TYPE_ARTICLE", "Article"),
        anytype_object_type_book=os.getenv("ANYTYPE_OBJECT_TYPE_BOOK", "Book"),
        anytype_field_year=os.getenv("ANYTYPE_FIELD_YEAR", "year"),
        anytype_field_authors=os.getenv("ANYTYPE_FIELD_AUTHORS", "authors"),
        anytype_field_citation_key=os.getenv("ANYTYPE_FIELD_CITATION_KEY", "citation_key"),
        anytype_author_separator=os.getenv("ANYTYPE_AUTHOR_SEPARATOR", "; "),
    )


class PreferenceStore(Protocol):
    """Key-value store holding the key generation preferences."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class InMemoryPreferences:
    """Dict-backed preference store."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = str(value)


class EnvironmentPreferences:
    """Preference store backed by ``CITEKEY_*`` environment variables."""

    env_names = {
        PREF_TEMPLATE: "CITEKEY_TEMPLATE",
        PREF_TITLE_WORDS: "CITEKEY_TITLE_WORDS",
    }

    def get(self, key: str) -> Optional[str]:
        return os.getenv(self.env_names[key])

    def set(self, key: str, value: str) -> None:
        os.environ[self.env_names[key]] = str(value)


@dataclass(frozen=True)
class KeySettings:
    template: str = DEFAULT_TEMPLATE
    title_word_count: int = DEFAULT_TITLE_WORDS


def _is_unset(value: Optional[str]) -> bool:
    return value is None or value.strip() in _UNSET_MARKERS


def load_key_settings(preferences: PreferenceStore) -> KeySettings:
    """Read the current key settings, substituting defaults for bad entries.

    An explicitly empty template is honoured so that callers can switch key
    generation off; only a missing or ``"undefined"`` template falls back.
    """
    template = preferences.get(PREF_TEMPLATE)
    if template is None or template == "undefined":
        template = DEFAULT_TEMPLATE

    raw_words = preferences.get(PREF_TITLE_WORDS)
    title_word_count = DEFAULT_TITLE_WORDS
    if not _is_unset(raw_words):
        try:
            title_word_count = int(str(raw_words).strip())
        except ValueError:
            logger.warning("Ignoring invalid title word count %r", raw_words)
        else:
            if title_word_count < 1:
                logger.warning("Ignoring non-positive title word count %r", raw_words)
                title_word_count = DEFAULT_TITLE_WORDS

    return KeySettings(template=template, title_word_count=title_word_count)


def ensure_default_preferences(preferences: PreferenceStore) -> None:
    """Write defaults for entries that are missing or were stored corrupted."""
    if _is_unset(preferences.get(PREF_TEMPLATE)):
        preferences.set(PREF_TEMPLATE, DEFAULT_TEMPLATE)
    if _is_unset(preferences.get(PREF_TITLE_WORDS)):
        preferences.set(PREF_TITLE_WORDS, str(DEFAULT_TITLE_WORDS))
