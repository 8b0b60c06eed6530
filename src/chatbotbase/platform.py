"""Platform adapter contract and the request/response boundary."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from chatbotbase.errors import ResponseAlreadySentError
from chatbotbase.messages import Input, Output


@dataclass(frozen=True)
class WebhookRequest:
    """Read-only view on one inbound webhook request."""

    body: bytes
    headers: Mapping[str, str] = field(default_factory=dict)

    def header(self, name: str, default: str | None = None) -> str | None:
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default

    def json(self) -> Any:
        return json.loads(self.body.decode("utf-8"))

    @classmethod
    def from_json(cls, payload: Any, headers: Mapping[str, str] | None = None) -> WebhookRequest:
        return cls(body=json.dumps(payload).encode("utf-8"), headers=dict(headers or {}))


class ResponseSink(Protocol):
    """Where exactly one serialized response payload is written."""

    def end(self, payload: str, *, status: int = 200) -> None: ...


class BufferedResponse:
    """In-memory response sink."""

    def __init__(self) -> None:
        self.payload: str | None = None
        self.status: int | None = None

    @property
    def sent(self) -> bool:
        return self.payload is not None

    def end(self, payload: str, *, status: int = 200) -> None:
        if self.sent:
            raise ResponseAlreadySentError("response payload already delivered")
        self.payload = payload
        self.status = status


class VoicePlatform(ABC):
    """Translate one platform's wire format to and from the canonical models.

    Support predicates of the configured platforms should be mutually
    exclusive: only the first platform accepting a body handles it.

    ``verify`` may answer synchronously or return an awaitable. A synchronous
    ``False`` means the platform rejected the request *and already wrote its
    own error response* through ``sink``; the dispatcher will not write
    anything for that request. An awaitable resolving to ``False`` leaves the
    response to the hosting transport.
    """

    @abstractmethod
    def platform_id(self) -> str:
        """Stable identifier of this platform."""

    @abstractmethod
    def is_supported(self, payload: Any) -> bool:
        """Whether the decoded request body belongs to this platform."""

    @abstractmethod
    def parse(self, payload: Any) -> Input:
        """Normalize the decoded request body."""

    @abstractmethod
    def render(self, output: Output) -> Any:
        """Render the composed output into a JSON serializable payload."""

    def verify(self, request: WebhookRequest, sink: ResponseSink) -> bool | Awaitable[bool]:
        _ = (request, sink)
        return True
