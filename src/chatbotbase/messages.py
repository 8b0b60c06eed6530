"""Canonical input and output message models."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chatbotbase.replies import Reply, Suggestion
from chatbotbase.types import GENERIC_PLATFORM, Context, InputMethod

REPLY_ID_SUFFIX = ".reply"


def namespaced(owner: str, key: str) -> str:
    """Build an internal key owned by one platform adapter."""

    return f"{owner}.{key}"


def normalize_language(language: str) -> str:
    """Reduce an IETF language tag to its two letter ISO 639-1 prefix."""

    return language[:2].lower()


class Message(BaseModel):
    """One localized phrase as display text and voice markup."""

    model_config = ConfigDict(frozen=True)

    display_text: str
    ssml: str

    def __str__(self) -> str:
        return self.display_text


class IOMessage(BaseModel):
    """Fields shared by normalized inputs and outputs."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    user_id: str
    session_id: str
    platform: str
    language: str
    time: datetime = Field(default_factory=lambda: datetime.now(UTC))
    intent: str = ""
    input_method: InputMethod = InputMethod.TEXT
    message: str = ""
    context: Context = Field(default_factory=dict)

    @property
    def language_code(self) -> str:
        return normalize_language(self.language)


class Input(IOMessage):
    """The normalized message a platform parsed from one webhook request.

    Fields cannot be reassigned and the ``context`` and ``internal`` mappings
    are read-only views over private copies.
    """

    model_config = ConfigDict(frozen=True)

    context: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)  # type: ignore[assignment]
    access_token: str | None = None
    internal: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("context", "internal", mode="after")
    @classmethod
    def _read_only(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    def internal_value(self, owner: str, key: str, default: Any = None) -> Any:
        return self.internal.get(namespaced(owner, key), default)

    def reply(self) -> Output:
        """Derive the empty output answering this input."""

        return Output(
            id=self.id + REPLY_ID_SUFFIX,
            user_id=self.user_id,
            session_id=self.session_id,
            platform=self.platform,
            language=self.language,
            intent=self.intent,
            input_method=InputMethod.TEXT,
            message="",
            context=dict(self.context),
        )


class Output(IOMessage):
    """The composed answer for one request."""

    replies: list[Reply] = Field(default_factory=list)
    suggestions: list[Suggestion] = Field(default_factory=list)
    retention_message: str | None = None
    expect_answer: bool = False

    def add_reply(self, reply: Reply) -> None:
        self.replies.append(reply)

    def add_suggestion(self, suggestion: Suggestion) -> None:
        self.suggestions.append(suggestion)

    def set_retention_message(self, message: str | None) -> None:
        self.retention_message = message

    def set_expect_answer(self, expect_answer: bool) -> None:
        self.expect_answer = expect_answer

    def replies_for(self, platform: str) -> list[Reply]:
        """Replies owned by ``platform`` or by no platform in particular."""

        return [reply for reply in self.replies if reply.platform in (platform, GENERIC_PLATFORM)]
