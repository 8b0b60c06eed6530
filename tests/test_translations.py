from __future__ import annotations

import json
import random
from pathlib import Path

import pytest

from chatbotbase.errors import ConfigurationError
from chatbotbase.messages import Message
from chatbotbase.translations import (
    TranslationResolver,
    choose_variant,
    compose_message,
    load_translations,
    strip_ssml,
    wrap_ssml,
)


def test_variant_is_always_one_of_the_configured_values(make_input) -> None:
    resolver = TranslationResolver({"en": {"GREETING": ["Hi", "Hello"]}}, rng=random.Random(7))
    message = make_input()

    seen = {resolver.get_display_text(message, "GREETING") for _ in range(200)}

    assert seen == {"Hi", "Hello"}


def test_injected_random_source_decides_variant(make_input, resolver: TranslationResolver) -> None:
    message = make_input()

    picks = [resolver.get_display_text(message, "GREETING") for _ in range(4)]

    assert picks == ["Hi", "Hello", "Hi", "Hello"]


def test_choose_variant_returns_plain_string_unchanged() -> None:
    assert choose_variant("Hi", random.Random(1)) == "Hi"
    assert choose_variant([], random.Random(1)) == ""


def test_missing_language_or_key_resolves_to_none(make_input, resolver: TranslationResolver) -> None:
    assert resolver.get_display_text(make_input(language="fr"), "WELCOME") is None
    assert resolver.get_display_text(make_input(), "UNKNOWN") is None
    assert resolver.get_ssml(make_input(), "UNKNOWN") is None
    assert resolver.get_message(make_input(), "UNKNOWN") is None


def test_language_tag_is_reduced_to_two_letters(make_input, resolver: TranslationResolver) -> None:
    assert resolver.get_display_text(make_input(language="de-DE"), "WELCOME") == "Hallo"
    assert resolver.has_key(make_input(language="EN-us"), "WELCOME")


def test_printf_placeholders_are_substituted(make_input, resolver: TranslationResolver) -> None:
    message = make_input()

    assert resolver.get_display_text(message, "NAMED", "Ada") == "Hello Ada"
    assert resolver.get_display_text(message, "COUNT", 3) == "You have 3 new messages"


def test_argument_mismatch_leaves_template_untouched(make_input, resolver: TranslationResolver) -> None:
    assert resolver.get_display_text(make_input(), "COUNT", "many") == "You have %d new messages"


def test_ssml_has_exactly_one_envelope(make_input, resolver: TranslationResolver) -> None:
    message = make_input()

    assert resolver.get_ssml(message, "WELCOME") == "<speak>Hi</speak>"
    assert resolver.get_ssml(message, "WRAPPED") == "<speak>Hi</speak>"


def test_ssml_strips_nested_message_envelope(make_input, resolver: TranslationResolver) -> None:
    message = make_input()
    nested = resolver.get_message(message, "WELCOME")
    assert nested is not None

    ssml = resolver.get_ssml(message, "SENTENCE", nested)

    assert ssml == "<speak>Hi, how are you?</speak>"
    assert ssml.count("<speak>") == 1


def test_get_message_pairs_text_and_voice_from_same_variant(make_input, resolver: TranslationResolver) -> None:
    message = make_input()

    first = resolver.get_message(message, "GREETING")
    second = resolver.get_message(message, "GREETING")

    assert first == Message(display_text="Hi", ssml="<speak>Hi</speak>")
    assert second == Message(display_text="Hello", ssml="<speak>Hello</speak>")


def test_resolve_message_uses_unknown_key_as_literal_template(make_input, resolver: TranslationResolver) -> None:
    resolved = resolver.resolve_message(make_input(), "Goodbye %s", "Ada")

    assert resolved.display_text == "Goodbye Ada"
    assert resolved.ssml == "<speak>Goodbye Ada</speak>"


def test_compose_message_keeps_placeholders_inside_values() -> None:
    composed = compose_message("Say %s", ["100%s sure"])

    assert composed.display_text == "Say 100%s sure"


def test_escaped_percent_collapses_with_and_without_arguments() -> None:
    assert compose_message("100%% off", []).display_text == "100% off"
    assert compose_message("%s%% off", ["5"]).display_text == "5% off"


def test_strip_and_wrap_ssml() -> None:
    assert strip_ssml('<speak version="1.1">Hi <break/></speak>') == "Hi <break/>"
    assert strip_ssml("Hi") == "Hi"
    assert wrap_ssml(wrap_ssml("Hi")) == "<speak>Hi</speak>"


def test_load_translations_from_json(tmp_path: Path) -> None:
    path = tmp_path / "translations.json"
    path.write_text(json.dumps({"en": {"WELCOME": ["Hi", "Hello"], "BYE": "Bye"}}), encoding="utf-8")

    assert load_translations(path) == {"en": {"WELCOME": ["Hi", "Hello"], "BYE": "Bye"}}


def test_load_translations_from_yaml(tmp_path: Path) -> None:
    path = tmp_path / "translations.yaml"
    path.write_text("en:\n  WELCOME:\n    - Hi\n    - Hello\n  BYE: Bye\n", encoding="utf-8")

    assert load_translations(path) == {"en": {"WELCOME": ["Hi", "Hello"], "BYE": "Bye"}}


def test_load_translations_rejects_invalid_shape(tmp_path: Path) -> None:
    path = tmp_path / "translations.yaml"
    path.write_text("en:\n  WELCOME:\n    nested: true\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="invalid translations"):
        load_translations(path)


def test_load_translations_reports_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="cannot read"):
        load_translations(tmp_path / "missing.json")
