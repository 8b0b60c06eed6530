"""Hook execution runtime with per-plugin fault isolation."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any

import pluggy
from loguru import logger

from chatbotbase.messages import IOMessage


class HookRuntime:
    """Safe wrapper around pluggy hook execution."""

    def __init__(self, plugin_manager: pluggy.PluginManager) -> None:
        self._plugin_manager = plugin_manager

    def spawn_many(self, hook_name: str, **kwargs: Any) -> list[asyncio.Task[None]]:
        """Schedule every implementation as its own task without awaiting it.

        Failures are routed to ``on_error`` inside the task, so the returned
        tasks never finish with an exception.
        """

        loop = asyncio.get_running_loop()
        tasks: list[asyncio.Task[None]] = []
        for impl in self._iter_hookimpls(hook_name):
            call_kwargs = self._kwargs_for_impl(impl, kwargs)
            task = loop.create_task(
                self._invoke_impl_async(hook_name=hook_name, impl=impl, call_kwargs=call_kwargs, kwargs=kwargs),
                name=f"{hook_name}:{impl.plugin_name or '<unknown>'}",
            )
            tasks.append(task)
        return tasks

    async def notify_error(self, *, stage: str, error: Exception, message: IOMessage | None) -> None:
        """Call on_error hooks, swallowing observer failures."""

        for impl in self._iter_hookimpls("on_error"):
            call_kwargs = self._kwargs_for_impl(impl, {"stage": stage, "error": error, "message": message})
            try:
                value = impl.function(**call_kwargs)
                if inspect.isawaitable(value):
                    await value
            except Exception:
                logger.opt(exception=True).warning(
                    "hook.on_error_failed stage={} plugin={}",
                    stage,
                    impl.plugin_name or "<unknown>",
                )

    def hook_report(self) -> dict[str, list[str]]:
        """Build a hook->plugins mapping for diagnostics."""

        report: dict[str, list[str]] = {}
        for hook_name, hook_caller in sorted(self._plugin_manager.hook.__dict__.items()):
            if hook_name.startswith("_") or not hasattr(hook_caller, "get_hookimpls"):
                continue
            plugin_names = [impl.plugin_name for impl in hook_caller.get_hookimpls()]
            if plugin_names:
                report[hook_name] = plugin_names
        return report

    async def _invoke_impl_async(
        self,
        *,
        hook_name: str,
        impl: Any,
        call_kwargs: dict[str, Any],
        kwargs: dict[str, Any],
    ) -> None:
        try:
            value = impl.function(**call_kwargs)
            if inspect.isawaitable(value):
                await value
        except Exception as error:
            await self.notify_error(
                stage=f"{hook_name}:{impl.plugin_name or '<unknown>'}",
                error=error,
                message=_message_from_kwargs(kwargs),
            )

    def _iter_hookimpls(self, hook_name: str) -> list[Any]:
        hook = getattr(self._plugin_manager.hook, hook_name, None)
        if hook is None or not hasattr(hook, "get_hookimpls"):
            return []
        return list(reversed(hook.get_hookimpls()))

    @staticmethod
    def _kwargs_for_impl(impl: Any, kwargs: dict[str, Any]) -> dict[str, Any]:
        return {name: kwargs[name] for name in impl.argnames if name in kwargs}


def _message_from_kwargs(kwargs: dict[str, Any]) -> IOMessage | None:
    message = kwargs.get("message")
    if isinstance(message, IOMessage):
        return message
    return None
