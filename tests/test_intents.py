from __future__ import annotations

import pytest

from chatbotbase.composer import ReplyComposer
from chatbotbase.intents import CallbackRouter, IntentHandler, IntentRouter
from chatbotbase.messages import Input, Output
from chatbotbase.translations import TranslationResolver


class LaunchHandler(IntentHandler):
    intents = ("LaunchRequest",)

    def create_output(self, message: Input, translations: TranslationResolver) -> Output:
        return ReplyComposer.for_input(message, translations).add_reply("launch").output


class AsyncHelpHandler(IntentHandler):
    def is_supported(self, message: Input) -> bool:
        return message.intent.endswith("HelpIntent")

    async def create_output(self, message: Input, translations: TranslationResolver) -> Output:
        return ReplyComposer.for_input(message, translations).add_reply("help").output


def fallback(message: Input, translations: TranslationResolver) -> Output:
    return ReplyComposer.for_input(message, translations).add_reply("fallback").output


def _first_text(output: Output) -> str:
    return output.replies[0].render()


@pytest.mark.asyncio
async def test_first_supporting_handler_is_used(make_input, resolver: TranslationResolver) -> None:
    router = IntentRouter([LaunchHandler(), AsyncHelpHandler()], fallback)

    output = await router.route(make_input(intent="LaunchRequest"), resolver)

    assert _first_text(output) == "launch"


@pytest.mark.asyncio
async def test_async_handler_output_is_awaited(make_input, resolver: TranslationResolver) -> None:
    router = IntentRouter([LaunchHandler(), AsyncHelpHandler()], fallback)

    output = await router.route(make_input(intent="AMAZON.HelpIntent"), resolver)

    assert _first_text(output) == "help"


@pytest.mark.asyncio
async def test_fallback_used_when_no_handler_matches(make_input, resolver: TranslationResolver) -> None:
    router = IntentRouter([LaunchHandler()], fallback)

    output = await router.route(make_input(intent="Unknown"), resolver)

    assert _first_text(output) == "fallback"


@pytest.mark.asyncio
async def test_callback_router_accepts_async_callback(make_input, resolver: TranslationResolver) -> None:
    async def reply(message: Input, translations: TranslationResolver) -> Output:
        return ReplyComposer.for_input(message, translations).add_reply("WELCOME").output

    output = await CallbackRouter(reply).route(make_input(), resolver)

    assert _first_text(output) == "Hi"


@pytest.mark.asyncio
async def test_router_rejects_non_output_results(make_input, resolver: TranslationResolver) -> None:
    router = CallbackRouter(lambda message, translations: "not an output")  # type: ignore[arg-type,return-value]

    with pytest.raises(TypeError, match="expected Output"):
        await router.route(make_input(), resolver)
