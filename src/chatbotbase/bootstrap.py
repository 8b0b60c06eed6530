"""Static assembly of a chatbot and entrypoint loading."""

from __future__ import annotations

import importlib
import random
from typing import Self

from chatbotbase.composer import ReplyComposer
from chatbotbase.config import Settings
from chatbotbase.errors import AppLoadError, ConfigurationError
from chatbotbase.framework import Chatbot
from chatbotbase.intents import CallbackRouter, IntentHandler, IntentRouter, ReplyCallback, ReplyRouter
from chatbotbase.messages import Input, Output
from chatbotbase.platform import VoicePlatform
from chatbotbase.platforms import GenericPlatform
from chatbotbase.tracking import LoggingTracker, TrackingProvider
from chatbotbase.translations import TranslationResolver, load_translations
from chatbotbase.types import Translations


class ChatbotBuilder:
    """Collect platforms, intent handlers and trackers once at startup."""

    def __init__(self) -> None:
        self._platforms: list[VoicePlatform] = []
        self._handlers: list[IntentHandler] = []
        self._callback: ReplyCallback | None = None
        self._fallback: ReplyCallback | None = None
        self._translations: Translations = {}
        self._rng: random.Random | None = None
        self._trackers: list[TrackingProvider] = []
        self._plugins: list[object] = []

    def platform(self, platform: VoicePlatform) -> Self:
        self._platforms.append(platform)
        return self

    def intent(self, handler: IntentHandler) -> Self:
        self._handlers.append(handler)
        return self

    def reply(self, callback: ReplyCallback) -> Self:
        """Use one callback for every request."""
        self._callback = callback
        return self

    def fallback(self, callback: ReplyCallback) -> Self:
        """Callback used when no intent handler supports the input."""
        self._fallback = callback
        return self

    def translations(self, translations: Translations) -> Self:
        self._translations = translations
        return self

    def random(self, rng: random.Random) -> Self:
        self._rng = rng
        return self

    def tracker(self, tracker: TrackingProvider) -> Self:
        self._trackers.append(tracker)
        return self

    def plugin(self, plugin: object) -> Self:
        self._plugins.append(plugin)
        return self

    def build(self) -> Chatbot:
        if not self._platforms:
            raise ConfigurationError("at least one platform is required")
        return Chatbot(
            self._platforms,
            self._build_router(),
            TranslationResolver(self._translations, rng=self._rng),
            trackers=self._trackers,
            plugins=self._plugins,
        )

    def _build_router(self) -> ReplyRouter:
        if self._callback is not None and self._handlers:
            raise ConfigurationError("use either a reply callback or intent handlers, not both")
        if self._callback is not None:
            return CallbackRouter(self._callback)
        if self._fallback is None:
            raise ConfigurationError("intent handlers need a fallback reply callback")
        return IntentRouter(self._handlers, self._fallback)


def echo_reply(message: Input, translations: TranslationResolver) -> Output:
    """Answer with the translation named after the intent, else echo the message."""

    composer = ReplyComposer.for_input(message, translations)
    if message.intent and composer.has_key(message.intent):
        composer.add_reply(message.intent)
    else:
        composer.add_reply(composer.plain(message.message or message.intent))
    return composer.output


def build_default_chatbot(settings: Settings) -> Chatbot:
    """Chatbot with the generic platform, the configured translations and an echo fallback."""

    builder = (
        ChatbotBuilder()
        .platform(GenericPlatform(settings.generic_secret, default_language=settings.default_language))
        .reply(echo_reply)
        .tracker(LoggingTracker())
    )
    if settings.translations_path is not None:
        builder.translations(load_translations(settings.translations_path))
    if settings.random_seed is not None:
        builder.random(random.Random(settings.random_seed))
    return builder.build()


def load_app(entrypoint: str) -> Chatbot:
    """Load a chatbot from ``module:attr``; ``attr`` may also be a zero-argument factory."""

    module_name, separator, attr = entrypoint.partition(":")
    if not separator or not module_name or not attr:
        raise AppLoadError(f"entrypoint must look like 'module:attr', got {entrypoint!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise AppLoadError(f"cannot import {module_name!r}: {exc}") from exc
    target = getattr(module, attr, None)
    if target is None:
        raise AppLoadError(f"{module_name!r} has no attribute {attr!r}")
    if not isinstance(target, Chatbot) and callable(target):
        target = target()
    if not isinstance(target, Chatbot):
        raise AppLoadError(f"{entrypoint!r} is not a Chatbot (got {type(target).__name__})")
    return target


def resolve_chatbot(settings: Settings) -> Chatbot:
    if settings.app:
        return load_app(settings.app)
    return build_default_chatbot(settings)
