"""Process logging for the dispatcher and the CLI."""

from __future__ import annotations

import sys
from logging import Handler
from typing import Literal

import loguru
from loguru import logger
from rich import get_console
from rich.logging import RichHandler

LogProfile = Literal["default", "console", "json"]

NO_REQUEST = "-"

_PROFILE_FORMATS: dict[LogProfile, str] = {
    "default": "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<6} | {name}:{function}:{line} | {extra[request]} | {message}",
    "console": "[{extra[request]}] {message}",
    "json": "{message}",
}
_CONFIGURED: tuple[LogProfile, str] | None = None


def _build_console_handler() -> Handler:
    return RichHandler(
        console=get_console(),
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )


def _tag_request(record: loguru.Record) -> None:
    from chatbotbase.framework import current_request

    record["extra"]["request"] = current_request()


def configure_logging(*, profile: LogProfile = "default", level: str = "INFO") -> None:
    """Route loguru records to one sink, tagged with the dispatching request id.

    ``default`` writes one line per record to stderr, ``console`` renders
    through rich for interactive CLI use and ``json`` serializes every record
    (request id under ``record.extra.request``) for log collectors.
    Reconfiguring with the same profile and level is a no-op.
    """

    global _CONFIGURED
    level = level.upper()
    if (profile, level) == _CONFIGURED:
        return

    logger.remove()
    logger.configure(patcher=_tag_request, extra={"request": NO_REQUEST})
    sink = _build_console_handler() if profile == "console" else sys.stderr
    logger.add(
        sink,
        level=level,
        format=_PROFILE_FORMATS[profile],
        serialize=profile == "json",
        backtrace=False,
        diagnose=False,
    )
    _CONFIGURED = (profile, level)
