"""Reference platform speaking the generic text/voice JSON envelope."""

from __future__ import annotations

import hashlib
import hmac
import json
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from chatbotbase.messages import Input, Output
from chatbotbase.platform import ResponseSink, VoicePlatform, WebhookRequest
from chatbotbase.translations import strip_ssml, wrap_ssml
from chatbotbase.types import Context, InputMethod

PLATFORM_ID = "generic"
SIGNATURE_HEADER = "X-Chatbot-Signature"
SIGNATURE_PREFIX = "sha256="


class GenericRequest(BaseModel):
    """Inbound envelope, keys in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    platform: str
    id: str
    user_id: str
    session_id: str
    language: str | None = None
    intent: str = ""
    input_method: InputMethod = InputMethod.TEXT
    message: str = ""
    time: datetime | None = None
    context: Context = Field(default_factory=dict)
    access_token: str | None = None


def sign(body: bytes, secret: str) -> str:
    """Signature header value for ``body``."""

    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"{SIGNATURE_PREFIX}{digest}"


class GenericPlatform(VoicePlatform):
    """Platform adapter for ``{"platform": "generic", ...}`` bodies.

    With a ``secret`` every request must carry an HMAC-SHA256 signature of
    the raw body in ``X-Chatbot-Signature``; unsigned or mis-signed requests
    are answered with a 401 by the platform itself.
    """

    def __init__(self, secret: str | None = None, *, default_language: str = "en") -> None:
        self._secret = secret
        self._default_language = default_language

    def platform_id(self) -> str:
        return PLATFORM_ID

    def is_supported(self, payload: Any) -> bool:
        return isinstance(payload, dict) and payload.get("platform") == PLATFORM_ID

    def parse(self, payload: Any) -> Input:
        request = GenericRequest.model_validate(payload)
        return Input(
            id=request.id,
            user_id=request.user_id,
            session_id=request.session_id,
            platform=PLATFORM_ID,
            language=request.language or self._default_language,
            time=request.time or datetime.now(UTC),
            intent=request.intent,
            input_method=request.input_method,
            message=request.message,
            context=request.context,
            access_token=request.access_token,
            internal={},
        )

    def render(self, output: Output) -> dict[str, Any]:
        replies = output.replies_for(PLATFORM_ID)
        texts = [str(reply.render()) for reply in replies if reply.kind in ("text", "formatted")]
        voices = [strip_ssml(str(reply.render())) for reply in replies if reply.kind == "voice"]
        return {
            "id": output.id,
            "text": " ".join(texts),
            "ssml": wrap_ssml(" ".join(voices)) if voices else None,
            "replies": [{"kind": reply.kind, "content": reply.render()} for reply in replies],
            "suggestions": [suggestion.render() for suggestion in output.suggestions],
            "expectAnswer": output.expect_answer,
            "retentionMessage": output.retention_message,
            "context": output.context,
        }

    def verify(self, request: WebhookRequest, sink: ResponseSink) -> bool:
        if self._secret is None:
            return True
        signature = request.header(SIGNATURE_HEADER) or ""
        expected = sign(request.body, self._secret)
        if hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8")):
            return True
        sink.end(json.dumps({"error": "invalid signature"}), status=401)
        return False
