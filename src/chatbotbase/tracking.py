"""Analytics tracker contract and its hook wiring."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from loguru import logger

from chatbotbase.hookspecs import hookimpl
from chatbotbase.messages import Input, IOMessage, Output


class TrackingProvider(ABC):
    """An analytics backend notified of every input and output.

    Results are never awaited by the request path and failures never reach
    the caller.
    """

    name: str = "tracker"
    logging: bool = False

    @abstractmethod
    async def track_input(self, message: Input) -> Any:
        """Record one parsed input."""

    @abstractmethod
    async def track_output(self, message: Output) -> Any:
        """Record one delivered output."""


class TrackerPlugin:
    """Expose one :class:`TrackingProvider` through the tracking hooks."""

    def __init__(self, tracker: TrackingProvider) -> None:
        self.tracker = tracker

    @property
    def plugin_name(self) -> str:
        return f"tracker:{self.tracker.name}"

    @hookimpl
    async def track_input(self, message: Input) -> None:
        if self.tracker.logging:
            logger.debug("tracker.input tracker={} id={}", self.tracker.name, message.id)
        await self.tracker.track_input(message)

    @hookimpl
    async def track_output(self, message: Output) -> None:
        if self.tracker.logging:
            logger.debug("tracker.output tracker={} id={}", self.tracker.name, message.id)
        await self.tracker.track_output(message)


class LoggingTracker(TrackingProvider):
    """Tracker writing one log line per message."""

    name = "log"

    async def track_input(self, message: Input) -> None:
        logger.info(
            "track.input platform={} intent={} user={} message={!r}",
            message.platform,
            message.intent,
            message.user_id,
            message.message,
        )

    async def track_output(self, message: Output) -> None:
        logger.info(
            "track.output platform={} intent={} replies={} expect_answer={}",
            message.platform,
            message.intent,
            len(message.replies),
            message.expect_answer,
        )


class LoggingErrorReporter:
    """Default ``on_error`` observer."""

    @hookimpl
    def on_error(self, stage: str, error: Exception, message: IOMessage | None) -> None:
        message_id = message.id if message is not None else "-"
        logger.opt(exception=error).error("chatbot.error stage={} message={} error={}", stage, message_id, error)
