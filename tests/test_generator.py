from anytype_citekeys.config import PREF_TEMPLATE, PREF_TITLE_WORDS
from anytype_citekeys.generator import KeyGenerator, render_template

from conftest import FakeRecord


def test_default_template(preferences, sample_record):
    assert KeyGenerator(preferences).generate(sample_record) == "muller2023"


def test_generation_is_repeatable(preferences, sample_record):
    generator = KeyGenerator(preferences)
    assert generator.generate(sample_record) == generator.generate(sample_record)


def test_all_tokens_and_repeats(preferences, sample_record):
    preferences.set(PREF_TEMPLATE, "{Auth}_{year}_{title}-{title_lower}-{year}")
    assert (
        KeyGenerator(preferences).generate(sample_record)
        == "Muller_2023_RiseFallEmpires-rise_fall_empires-2023"
    )


def test_unknown_token_left_literal(preferences, sample_record):
    preferences.set(PREF_TEMPLATE, "{foo}{year}")
    assert KeyGenerator(preferences).generate(sample_record) == "{foo}2023"


def test_settings_are_read_on_every_call(preferences, sample_record):
    generator = KeyGenerator(preferences)
    preferences.set(PREF_TEMPLATE, "{title}")
    assert generator.generate(sample_record) == "RiseFallEmpires"
    preferences.set(PREF_TITLE_WORDS, "1")
    assert generator.generate(sample_record) == "Rise"


def test_corrupted_settings_fall_back_to_defaults(preferences, sample_record):
    preferences.set(PREF_TEMPLATE, "undefined")
    preferences.set(PREF_TITLE_WORDS, "many")
    assert KeyGenerator(preferences).generate(sample_record) == "muller2023"


def test_empty_template_yields_empty_key(preferences, sample_record):
    preferences.set(PREF_TEMPLATE, "")
    assert KeyGenerator(preferences).generate(sample_record) == ""


def test_tokens_resolving_empty_yield_empty_key(preferences):
    preferences.set(PREF_TEMPLATE, "{auth}{title}")
    assert KeyGenerator(preferences).generate(FakeRecord()) == ""


def test_render_template_without_tokens():
    assert render_template("static", {"{auth}": "doe"}) == "static"
