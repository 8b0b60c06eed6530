"""chatbotbase command line."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import typer

from chatbotbase.bootstrap import resolve_chatbot
from chatbotbase.config import Settings, load_settings
from chatbotbase.errors import ChatbotError, VerificationFailedError
from chatbotbase.framework import Chatbot
from chatbotbase.logging_utils import configure_logging
from chatbotbase.messages import Input
from chatbotbase.platform import BufferedResponse, WebhookRequest
from chatbotbase.translations import TranslationResolver, load_translations

app = typer.Typer(name="chatbotbase", help="Dispatch chatbot webhooks and compose localized replies", add_completion=False)


def _settings(app_entrypoint: str | None, translations: Path | None) -> Settings:
    settings = load_settings(app=app_entrypoint, translations_path=translations)
    configure_logging(profile=settings.log_profile, level=settings.log_level)
    return settings


def _parse_headers(values: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for value in values:
        name, separator, content = value.partition(":")
        if not separator or not name.strip():
            raise typer.BadParameter(f"header must look like 'Name: value', got {value!r}")
        headers[name.strip()] = content.strip()
    return headers


async def _dispatch(chatbot: Chatbot, request: WebhookRequest, sink: BufferedResponse) -> None:
    try:
        await chatbot.handle(request, sink)
    finally:
        await chatbot.drain()


@app.command("handle")
def handle(
    body: str = typer.Argument(..., help="JSON body file, or '-' for stdin"),
    app_entrypoint: str | None = typer.Option(None, "--app", help="Chatbot entrypoint 'module:attr'"),
    translations: Path | None = typer.Option(None, "--translations", "-t", help="Translation table"),  # noqa: B008
    header: list[str] = typer.Option([], "--header", "-H", help="Request header 'Name: value'"),  # noqa: B008
) -> None:
    """Dispatch one webhook body and print the delivered payload."""

    settings = _settings(app_entrypoint, translations)
    raw = sys.stdin.buffer.read() if body == "-" else Path(body).read_bytes()
    request = WebhookRequest(body=raw, headers=_parse_headers(header))
    sink = BufferedResponse()
    try:
        chatbot = resolve_chatbot(settings)
        asyncio.run(_dispatch(chatbot, request, sink))
    except VerificationFailedError as exc:
        if sink.payload is not None:
            typer.echo(sink.payload)
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    except ChatbotError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(sink.payload)


@app.command("translate")
def translate(
    key: str = typer.Argument(..., help="Translation key"),
    args: list[str] = typer.Argument(None, help="Placeholder values"),  # noqa: B008
    language: str = typer.Option("en", "--lang", "-l", help="Language tag"),
    translations: Path = typer.Option(..., "--translations", "-t", help="Translation table"),  # noqa: B008
) -> None:
    """Resolve one key and print its display text and voice markup."""

    try:
        resolver = TranslationResolver(load_translations(translations))
    except ChatbotError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    lookup = Input(id="cli", user_id="cli", session_id="cli", platform="cli", language=language)
    message = resolver.get_message(lookup, key, *(args or []))
    if message is None:
        typer.echo(f"error: missing translation {key!r} for language {lookup.language_code!r}", err=True)
        raise typer.Exit(code=1)
    typer.echo(message.display_text)
    typer.echo(message.ssml)


@app.command("hooks")
def list_hooks(
    app_entrypoint: str | None = typer.Option(None, "--app", help="Chatbot entrypoint 'module:attr'"),
) -> None:
    """Show hook implementation mapping."""

    settings = _settings(app_entrypoint, None)
    try:
        chatbot = resolve_chatbot(settings)
    except ChatbotError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    for platform in chatbot.platforms:
        typer.echo(f"platform: {platform.platform_id()}")
    for hook_name, plugin_names in chatbot.hook_report().items():
        typer.echo(f"{hook_name}: {', '.join(plugin_names)}")
