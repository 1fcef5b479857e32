"""Citation key generation from the configured template."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from anytype_citekeys.config import PreferenceStore, load_key_settings
from anytype_citekeys.models import RecordHandle
from anytype_citekeys.tokens import resolve_author, resolve_title_words, resolve_year

logger = logging.getLogger(__name__)

# Substitution order; "{title}" never matches inside "{title_lower}".
TOKENS = ("{auth}", "{Auth}", "{year}", "{title}", "{title_lower}")


def render_template(template: str, values: dict[str, str]) -> str:
    """Replace every occurrence of each known token, leaving others as-is."""
    rendered = template
    for token in TOKENS:
        rendered = rendered.replace(token, values.get(token, ""))
    return rendered


@dataclass
class KeyGenerator:
    """Builds citation keys, re-reading preferences on every call."""

    preferences: PreferenceStore

    def generate(self, record: RecordHandle) -> str:
        settings = load_key_settings(self.preferences)
        count = settings.title_word_count
        values = {
            "{auth}": resolve_author(record, capitalized=False),
            "{Auth}": resolve_author(record, capitalized=True),
            "{year}": resolve_year(record),
            "{title}": resolve_title_words(record, count, "camel"),
            "{title_lower}": resolve_title_words(record, count, "lower"),
        }
        key = render_template(settings.template, values)
        logger.debug("Generated key %r from template %r", key, settings.template)
        return key
