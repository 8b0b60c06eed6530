"""Pluggy hook namespace and chatbot hook specifications."""

from __future__ import annotations

import pluggy

from chatbotbase.messages import Input, IOMessage, Output

CHATBOT_HOOK_NAMESPACE = "chatbotbase"
hookspec = pluggy.HookspecMarker(CHATBOT_HOOK_NAMESPACE)
hookimpl = pluggy.HookimplMarker(CHATBOT_HOOK_NAMESPACE)


class ChatbotHookSpecs:
    """Hook contract for trackers and error observers."""

    @hookspec
    def track_input(self, message: Input) -> None:
        """Observe one parsed input. May be a coroutine."""

    @hookspec
    def track_output(self, message: Output) -> None:
        """Observe one delivered output. May be a coroutine."""

    @hookspec
    def on_error(self, stage: str, error: Exception, message: IOMessage | None) -> None:
        """Observe failures from any stage, including tracker failures."""
