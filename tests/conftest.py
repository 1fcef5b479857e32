from typing import Optional

import pytest

from anytype_citekeys.config import (
    PREF_TEMPLATE,
    PREF_TITLE_WORDS,
    InMemoryPreferences,
    Settings,
)
from anytype_citekeys.models import Creator


class FakeRecord:
    def __init__(
        self,
        creators=None,
        title=None,
        date=None,
        citation_key=None,
        regular=True,
        fail_save=False,
    ):
        self.creators = [Creator(**creator) for creator in (creators or [])]
        self.fields = {"title": title, "date": date, "citationKey": citation_key}
        self.regular = regular
        self.fail_save = fail_save
        self.saves = 0

    def get_creators(self):
        return list(self.creators)

    def get_field(self, name) -> Optional[str]:
        return self.fields.get(name)

    def set_field(self, name, value):
        self.fields[name] = value

    def is_regular_item(self):
        return self.regular

    async def save(self):
        if self.fail_save:
            raise RuntimeError("store rejected write")
        self.saves += 1


class FakeLibrary:
    def __init__(self, records=None):
        self.records = dict(records or {})

    async def all_records(self):
        return list(self.records.values())

    async def get(self, record_id):
        return self.records.get(record_id)


class FakeNotifier:
    def __init__(self):
        self.observers = {}

    def register_observer(self, observer, entity_types):
        observer_id = f"obs{len(self.observers) + 1}"
        self.observers[observer_id] = (observer, entity_types)
        return observer_id

    def unregister_observer(self, observer_id):
        del self.observers[observer_id]

    def fire(self, event, entity_type, ids):
        for observer, entity_types in list(self.observers.values()):
            if entity_type in entity_types:
                observer.notify(event, entity_type, ids)


@pytest.fixture
def preferences() -> InMemoryPreferences:
    return InMemoryPreferences({PREF_TEMPLATE: "{auth}{year}", PREF_TITLE_WORDS: "3"})


@pytest.fixture
def sample_record() -> FakeRecord:
    return FakeRecord(
        creators=[{"last_name": "Müller", "first_name": "Jörg"}, {"last_name": "Smith"}],
        title="The Rise and Fall of Empires",
        date="2023-05-01",
    )


@pytest.fixture
def sample_settings() -> Settings:
    return Settings(
        anytype_base_url="https://api.example",
        anytype_token="token",
        anytype_space_id="space",
        anytype_object_type_article="Article",
        anytype_object_type_book="Book",
        anytype_field_year="year",
        anytype_field_authors="authors",
        anytype_field_citation_key="citation_key",
        anytype_author_separator="; ",
    )
