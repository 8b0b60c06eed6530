"""Platform dispatcher: one webhook request in, one rendered reply out."""

from __future__ import annotations

import asyncio
import inspect
import json
import uuid
from collections.abc import Iterable, Mapping, Sequence
from contextvars import ContextVar
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

import pluggy
from loguru import logger

from chatbotbase.errors import RequestNotSupportedError, VerificationFailedError
from chatbotbase.hook_runtime import HookRuntime
from chatbotbase.hookspecs import CHATBOT_HOOK_NAMESPACE, ChatbotHookSpecs
from chatbotbase.intents import ReplyRouter
from chatbotbase.messages import Input, IOMessage, Output
from chatbotbase.platform import BufferedResponse, ResponseSink, VoicePlatform, WebhookRequest
from chatbotbase.replies import TextReply
from chatbotbase.tracking import LoggingErrorReporter, TrackerPlugin, TrackingProvider
from chatbotbase.translations import TranslationResolver
from chatbotbase.types import GENERIC_PLATFORM

_current_request: ContextVar[str] = ContextVar("chatbot_request", default="-")


def current_request() -> str:
    return _current_request.get()


class RequestState(StrEnum):
    RECEIVED = "received"
    PLATFORM_MATCHED = "platform_matched"
    VERIFYING = "verifying"
    VERIFIED = "verified"
    RENDERED = "rendered"
    DELIVERED = "delivered"
    TRACKED = "tracked"
    REJECTED = "rejected"


@dataclass
class RequestContext:
    """Mutable state of one request; never shared between requests."""

    request: WebhookRequest
    sink: ResponseSink
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    state: RequestState = RequestState.RECEIVED
    platform: VoicePlatform | None = None
    input: Input | None = None
    output: Output | None = None

    @property
    def language(self) -> str | None:
        if self.input is None:
            return None
        return self.input.language_code

    @property
    def message(self) -> IOMessage | None:
        return self.output or self.input

    def advance(self, state: RequestState) -> None:
        logger.debug("dispatch.state {} -> {}", self.state, state)
        self.state = state


@dataclass(frozen=True)
class DispatchResult:
    """Result of one delivered request."""

    platform: str
    input: Input
    output: Output
    payload: Any
    body: str


class Chatbot:
    """Select a platform per request, compose the reply and notify trackers.

    Platforms, router, translations and plugins are fixed at construction
    and only read afterwards, so one instance serves concurrent requests.
    """

    def __init__(
        self,
        platforms: Sequence[VoicePlatform],
        router: ReplyRouter,
        translations: TranslationResolver,
        *,
        trackers: Iterable[TrackingProvider] = (),
        plugins: Iterable[object] = (),
    ) -> None:
        self._platforms = tuple(platforms)
        self._router = router
        self.translations = translations
        self._plugin_manager = pluggy.PluginManager(CHATBOT_HOOK_NAMESPACE)
        self._plugin_manager.add_hookspecs(ChatbotHookSpecs)
        self._plugin_manager.register(LoggingErrorReporter(), name="builtin:error-log")
        for tracker in trackers:
            plugin = TrackerPlugin(tracker)
            self._plugin_manager.register(plugin, name=plugin.plugin_name)
        for plugin in plugins:
            self._plugin_manager.register(plugin)
        self._hook_runtime = HookRuntime(self._plugin_manager)
        self._background: set[asyncio.Task[None]] = set()

    @property
    def platforms(self) -> tuple[VoicePlatform, ...]:
        return self._platforms

    def hook_report(self) -> dict[str, list[str]]:
        return self._hook_runtime.hook_report()

    async def handle(self, request: WebhookRequest, sink: ResponseSink) -> DispatchResult:
        """Dispatch one request and deliver its payload through ``sink``."""

        context = RequestContext(request=request, sink=sink)
        token = _current_request.set(context.request_id)
        try:
            return await self._dispatch(context)
        except Exception as exc:
            stage = context.state.value
            if context.state is not RequestState.REJECTED:
                context.advance(RequestState.REJECTED)
            await self._hook_runtime.notify_error(stage=f"dispatch:{stage}", error=exc, message=context.message)
            raise
        finally:
            _current_request.reset(token)

    async def handle_json(self, payload: Any, headers: Mapping[str, str] | None = None) -> DispatchResult:
        """Dispatch an already decoded body with an in-memory response sink."""

        return await self.handle(WebhookRequest.from_json(payload, headers), BufferedResponse())

    async def drain(self) -> None:
        """Wait for all in-flight tracker notifications."""

        while self._background:
            await asyncio.gather(*list(self._background))

    async def _dispatch(self, context: RequestContext) -> DispatchResult:
        payload = self._decode(context.request)
        platform = self._select_platform(payload)
        platform_id = platform.platform_id()
        context.platform = platform
        context.advance(RequestState.PLATFORM_MATCHED)
        logger.info("dispatch.platform_detected platform={}", platform_id)

        message = platform.parse(payload)
        context.input = message
        self._fan_out("track_input", message)
        logger.info("> {}", message.message)

        verification = platform.verify(context.request, context.sink)
        if verification is False:
            context.advance(RequestState.REJECTED)
            raise VerificationFailedError(platform_id, response_owner="verifier")

        context.advance(RequestState.VERIFYING)
        pending = asyncio.ensure_future(verification) if inspect.isawaitable(verification) else None
        try:
            output = await self._router.route(message, self.translations)
        except BaseException:
            if pending is not None:
                pending.cancel()
            raise
        verified = bool(await pending if pending is not None else verification)
        context.output = output
        if not verified:
            context.advance(RequestState.REJECTED)
            raise VerificationFailedError(platform_id, response_owner="transport")
        context.advance(RequestState.VERIFIED)

        for reply in output.replies_for(platform_id):
            logger.info("< {}", reply.debug())
        if output.suggestions:
            logger.info("  [{}]", "] [".join(str(suggestion) for suggestion in output.suggestions))

        rendered = platform.render(output)
        context.advance(RequestState.RENDERED)
        body = json.dumps(rendered, ensure_ascii=False)
        context.sink.end(body)
        context.advance(RequestState.DELIVERED)

        if not output.message:
            output.message = _generic_text(output)
        self._fan_out("track_output", output)
        context.advance(RequestState.TRACKED)
        return DispatchResult(platform=platform_id, input=message, output=output, payload=rendered, body=body)

    def _decode(self, request: WebhookRequest) -> Any:
        try:
            return request.json()
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise RequestNotSupportedError([platform.platform_id() for platform in self._platforms]) from exc

    def _select_platform(self, payload: Any) -> VoicePlatform:
        for platform in self._platforms:
            if platform.is_supported(payload):
                return platform
        raise RequestNotSupportedError([platform.platform_id() for platform in self._platforms])

    def _fan_out(self, hook_name: str, message: IOMessage) -> None:
        for task in self._hook_runtime.spawn_many(hook_name, message=message):
            self._background.add(task)
            task.add_done_callback(self._background.discard)


def _generic_text(output: Output) -> str:
    for reply in reversed(output.replies):
        if isinstance(reply, TextReply) and reply.platform == GENERIC_PLATFORM:
            return reply.render()
    return ""
