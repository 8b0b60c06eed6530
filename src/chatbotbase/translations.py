"""Translation lookup, variant selection and voice markup helpers."""

from __future__ import annotations

import json
import random
import re
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from chatbotbase.errors import ConfigurationError
from chatbotbase.messages import IOMessage, Message
from chatbotbase.types import Translations

SSML_ROOT = "speak"
_SSML_ENVELOPE = re.compile(rf"^\s*<{SSML_ROOT}(?:\s[^>]*)?>(?P<inner>.*)</{SSML_ROOT}>\s*$", re.DOTALL)
_TRANSLATIONS_ADAPTER: TypeAdapter[Translations] = TypeAdapter(dict[str, dict[str, str | list[str]]])


def strip_ssml(markup: str) -> str:
    """Remove one ``<speak>`` root envelope if present."""

    matched = _SSML_ENVELOPE.match(markup)
    if matched is None:
        return markup
    return matched.group("inner")


def wrap_ssml(markup: str) -> str:
    """Wrap markup in exactly one ``<speak>`` root envelope."""

    return f"<{SSML_ROOT}>{strip_ssml(markup)}</{SSML_ROOT}>"


def choose_variant(value: str | Sequence[str], rng: random.Random) -> str:
    """Pick one variant of a translation value."""

    if isinstance(value, str):
        return value
    if not value:
        return ""
    return rng.choice(list(value))


def format_template(template: str, args: Sequence[Any]) -> str:
    """Apply printf-style placeholders; a mismatch leaves the template untouched.

    Formatting always runs, so ``%%`` collapses to ``%`` with or without
    arguments.
    """

    try:
        return template % tuple(args)
    except (TypeError, ValueError, KeyError):
        logger.warning("translation.format_failed template={!r} args={}", template, len(args))
        return template


def compose_message(template: str, args: Sequence[Any]) -> Message:
    """Fill ``template`` with plain values and nested messages.

    Nested messages contribute their display text to the display side and
    their unwrapped voice markup to the voice side, so the composite carries
    a single envelope.
    """

    if not any(isinstance(arg, Message) for arg in args):
        text = format_template(template, args)
        return Message(display_text=text, ssml=wrap_ssml(text))

    display_args = [arg.display_text if isinstance(arg, Message) else arg for arg in args]
    voice_args = [strip_ssml(arg.ssml) if isinstance(arg, Message) else arg for arg in args]
    return Message(
        display_text=format_template(template, display_args),
        ssml=wrap_ssml(format_template(template, voice_args)),
    )


class TranslationResolver:
    """Resolve translation keys for the language of a message.

    The table is shared read-only state; the random source is injectable so
    variant choice can be made reproducible.
    """

    def __init__(self, translations: Translations, *, rng: random.Random | None = None) -> None:
        self._translations = translations
        self._rng = rng or random.Random()

    @property
    def languages(self) -> list[str]:
        return sorted(self._translations)

    def has_key(self, message: IOMessage, key: str) -> bool:
        return key in self._translations.get(message.language_code, {})

    def template(self, message: IOMessage, key: str) -> str | None:
        """Return one variant of the raw template, or ``None`` when unknown."""

        value = self._translations.get(message.language_code, {}).get(key)
        if value is None:
            return None
        return choose_variant(value, self._rng)

    def get_display_text(self, message: IOMessage, key: str, *args: Any) -> str | None:
        resolved = self.get_message(message, key, *args)
        if resolved is None:
            return None
        return resolved.display_text

    def get_ssml(self, message: IOMessage, key: str, *args: Any) -> str | None:
        resolved = self.get_message(message, key, *args)
        if resolved is None:
            return None
        return resolved.ssml

    def get_message(self, message: IOMessage, key: str, *args: Any) -> Message | None:
        template = self.template(message, key)
        if template is None:
            return None
        return compose_message(template, args)

    def resolve_message(self, message: IOMessage, key: str, *args: Any) -> Message:
        """Like :meth:`get_message` but an unknown key is used as a literal template."""

        template = self.template(message, key)
        if template is None:
            logger.debug("translation.literal_fallback language={} key={!r}", message.language_code, key)
            template = key
        return compose_message(template, args)


def load_translations(path: Path) -> Translations:
    """Load a ``language -> key -> text | [variants]`` table from JSON or YAML."""

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"cannot read translations file {path}: {exc}") from exc
    try:
        payload = json.loads(raw) if path.suffix.lower() == ".json" else yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"cannot parse translations file {path}: {exc}") from exc
    try:
        return _TRANSLATIONS_ADAPTER.validate_python(payload or {})
    except ValidationError as exc:
        raise ConfigurationError(f"invalid translations in {path}: {exc}") from exc
