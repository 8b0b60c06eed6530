"""Typed reply and suggestion artifacts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from chatbotbase.types import GENERIC_PLATFORM


class Reply(ABC):
    """One reply element owned by a platform (``"*"`` for every platform)."""

    platform: str = GENERIC_PLATFORM
    kind: str = "custom"

    @abstractmethod
    def render(self) -> Any:
        """Produce the platform specific payload of this reply."""

    @abstractmethod
    def debug(self) -> str:
        """Produce a human readable rendering for logs."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(platform={self.platform!r}, kind={self.kind!r}, {self.debug()!r})"


class Suggestion(ABC):
    """A short label or action offered to the user."""

    platform: str = GENERIC_PLATFORM

    @abstractmethod
    def render(self) -> Any:
        """Produce the platform specific payload of this suggestion."""

    def __str__(self) -> str:
        return str(self.render())


class _GenericTextReply(Reply):
    def __init__(self, text: str) -> None:
        self.text = text

    def render(self) -> str:
        return self.text

    def debug(self) -> str:
        return self.text

    def __eq__(self, other: object) -> bool:
        return type(other) is type(self) and other.text == self.text  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), self.text))


class TextReply(_GenericTextReply):
    """Plain display text understood by every platform."""

    kind = "text"


class VoiceReply(_GenericTextReply):
    """Voice markup wrapped in a single ``<speak>`` root."""

    kind = "voice"


class FormattedReply(_GenericTextReply):
    """Display text with lightweight formatting such as markdown."""

    kind = "formatted"


class TextSuggestion(Suggestion):
    def __init__(self, label: str) -> None:
        self.label = label

    def render(self) -> str:
        return self.label

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TextSuggestion) and other.label == self.label

    def __hash__(self) -> int:
        return hash(self.label)

    def __repr__(self) -> str:
        return f"TextSuggestion({self.label!r})"
