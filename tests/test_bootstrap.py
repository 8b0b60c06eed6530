from __future__ import annotations

import sys
from pathlib import Path

import pytest

from chatbotbase.bootstrap import ChatbotBuilder, build_default_chatbot, echo_reply, load_app
from chatbotbase.config import load_settings
from chatbotbase.errors import AppLoadError, ConfigurationError
from chatbotbase.framework import Chatbot
from chatbotbase.platforms import GenericPlatform


def test_builder_requires_a_platform() -> None:
    with pytest.raises(ConfigurationError, match="platform"):
        ChatbotBuilder().reply(echo_reply).build()


def test_builder_requires_fallback_for_intent_handlers() -> None:
    with pytest.raises(ConfigurationError, match="fallback"):
        ChatbotBuilder().platform(GenericPlatform()).build()


def test_builder_rejects_callback_with_handlers() -> None:
    from chatbotbase.intents import IntentHandler

    class Handler(IntentHandler):
        def create_output(self, message, translations):  # noqa: ANN001, ANN201
            return message.reply()

    with pytest.raises(ConfigurationError, match="not both"):
        ChatbotBuilder().platform(GenericPlatform()).reply(echo_reply).intent(Handler()).build()


def test_default_chatbot_loads_configured_translations(tmp_path: Path) -> None:
    translations = tmp_path / "translations.yaml"
    translations.write_text("en:\n  WELCOME: Hi\n", encoding="utf-8")

    chatbot = build_default_chatbot(load_settings(translations_path=translations, random_seed=1))

    assert [platform.platform_id() for platform in chatbot.platforms] == ["generic"]
    assert chatbot.translations.languages == ["en"]
    assert "tracker:log" in chatbot.hook_report()["track_input"]


def _write_app_module(tmp_path: Path, name: str) -> None:
    (tmp_path / f"{name}.py").write_text(
        "\n".join(
            [
                "from chatbotbase.bootstrap import ChatbotBuilder, echo_reply",
                "from chatbotbase.platforms import GenericPlatform",
                "",
                "def create():",
                "    return ChatbotBuilder().platform(GenericPlatform()).reply(echo_reply).build()",
                "",
                "chatbot = create()",
                "not_a_bot = 42",
            ]
        ),
        encoding="utf-8",
    )


def test_load_app_accepts_instance_and_factory(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    _write_app_module(tmp_path, "bot_app_ok")
    monkeypatch.syspath_prepend(str(tmp_path))

    assert isinstance(load_app("bot_app_ok:chatbot"), Chatbot)
    assert isinstance(load_app("bot_app_ok:create"), Chatbot)
    sys.modules.pop("bot_app_ok", None)


@pytest.mark.parametrize(
    ("entrypoint", "message"),
    [
        ("no_colon", "module:attr"),
        ("missing_module_for_tests:app", "cannot import"),
        ("bot_app_bad:missing", "no attribute"),
        ("bot_app_bad:not_a_bot", "not a Chatbot"),
    ],
)
def test_load_app_errors(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, entrypoint: str, message: str) -> None:
    _write_app_module(tmp_path, "bot_app_bad")
    monkeypatch.syspath_prepend(str(tmp_path))

    with pytest.raises(AppLoadError, match=message):
        load_app(entrypoint)
    sys.modules.pop("bot_app_bad", None)
