"""Intent routing strategies that produce the output of one request."""

from __future__ import annotations

import inspect
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Collection, Sequence
from typing import ClassVar, Protocol, TypeAlias

from loguru import logger

from chatbotbase.messages import Input, Output
from chatbotbase.translations import TranslationResolver

OutputResult: TypeAlias = Output | Awaitable[Output]
ReplyCallback: TypeAlias = Callable[[Input, TranslationResolver], OutputResult]


class ReplyRouter(Protocol):
    """Turn one input into its output."""

    async def route(self, message: Input, translations: TranslationResolver) -> Output: ...


async def resolve_output(result: OutputResult) -> Output:
    """Accept an immediate or an awaitable output."""

    if inspect.isawaitable(result):
        result = await result
    if not isinstance(result, Output):
        raise TypeError(f"reply producer returned {type(result).__name__}, expected Output")
    return result


class IntentHandler(ABC):
    """Produce outputs for the intents it supports.

    Subclasses either list their intent names in ``intents`` or override
    :meth:`is_supported`.
    """

    intents: ClassVar[Collection[str]] = ()

    def is_supported(self, message: Input) -> bool:
        return message.intent in self.intents

    @abstractmethod
    def create_output(self, message: Input, translations: TranslationResolver) -> OutputResult:
        """Build the output for ``message``."""


class CallbackRouter:
    """Single-callback strategy."""

    def __init__(self, callback: ReplyCallback) -> None:
        self._callback = callback

    async def route(self, message: Input, translations: TranslationResolver) -> Output:
        return await resolve_output(self._callback(message, translations))


class IntentRouter:
    """Handler-list strategy: the first supporting handler wins, else the fallback."""

    def __init__(self, handlers: Sequence[IntentHandler], fallback: ReplyCallback) -> None:
        self._handlers = tuple(handlers)
        self._fallback = fallback

    @property
    def handlers(self) -> tuple[IntentHandler, ...]:
        return self._handlers

    def select(self, message: Input) -> IntentHandler | None:
        for handler in self._handlers:
            if handler.is_supported(message):
                return handler
        return None

    async def route(self, message: Input, translations: TranslationResolver) -> Output:
        handler = self.select(message)
        if handler is None:
            logger.debug("intent.fallback intent={!r}", message.intent)
            return await resolve_output(self._fallback(message, translations))
        logger.debug("intent.selected intent={!r} handler={}", message.intent, type(handler).__name__)
        return await resolve_output(handler.create_output(message, translations))
