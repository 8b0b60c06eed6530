"""Exception types for chatbotbase."""

from __future__ import annotations

from typing import Literal

ResponseOwner = Literal["verifier", "transport"]


class ChatbotError(Exception):
    """Base exception for chatbotbase."""


class RequestNotSupportedError(ChatbotError):
    """Raised when no configured platform accepts the request body."""

    def __init__(self, platforms: list[str]) -> None:
        self.platforms = platforms
        tried = ", ".join(platforms) or "<none>"
        super().__init__(f"no platform supports this request (tried: {tried})")


class VerificationFailedError(ChatbotError):
    """Raised when the selected platform rejects the authenticity of a request.

    ``response_owner`` tells the hosting transport who answers the client:
    ``"verifier"`` means the platform already wrote its own response through
    the sink, ``"transport"`` means nothing was written and the transport must
    map the failure to a status.
    """

    def __init__(self, platform: str, *, response_owner: ResponseOwner) -> None:
        self.platform = platform
        self.response_owner: ResponseOwner = response_owner
        super().__init__(f"request verification failed for platform {platform!r}")


class TranslationMissingError(ChatbotError, LookupError):
    """Raised by strict translation when no text exists for a key."""

    def __init__(self, key: str, language: str) -> None:
        self.key = key
        self.language = language
        super().__init__(f"missing translation {key!r} for language {language!r}")


class ConfigurationError(ChatbotError):
    """Base exception for configuration and startup validation errors."""


class AppLoadError(ConfigurationError):
    """Raised when a ``module:attr`` application entrypoint cannot be loaded."""


class ResponseAlreadySentError(ChatbotError):
    """Raised when a response sink is asked to deliver a second payload."""
