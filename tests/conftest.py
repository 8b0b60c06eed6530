from __future__ import annotations

import pytest

from chatbotbase.messages import Input
from chatbotbase.translations import TranslationResolver


class CyclingRandom:
    """Stand-in random source returning variants in order."""

    def __init__(self) -> None:
        self.calls = 0

    def choice(self, seq):  # noqa: ANN001, ANN201
        value = seq[self.calls % len(seq)]
        self.calls += 1
        return value


@pytest.fixture
def make_input():
    def _make(language: str = "en", intent: str = "LaunchRequest", message: str = "", **extra) -> Input:  # noqa: ANN003
        return Input(
            id="msg-1",
            user_id="user-1",
            session_id="session-1",
            platform="test",
            language=language,
            intent=intent,
            message=message,
            **extra,
        )

    return _make


@pytest.fixture
def cycling_random() -> CyclingRandom:
    return CyclingRandom()


@pytest.fixture
def resolver(cycling_random: CyclingRandom) -> TranslationResolver:
    return TranslationResolver(
        {
            "en": {
                "WELCOME": "Hi",
                "GREETING": ["Hi", "Hello"],
                "NAMED": "Hello %s",
                "COUNT": "You have %d new messages",
                "WRAPPED": "<speak>Hi</speak>",
                "SENTENCE": "%s, how are you?",
            },
            "de": {"WELCOME": "Hallo"},
        },
        rng=cycling_random,  # type: ignore[arg-type]
    )
