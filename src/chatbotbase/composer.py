"""Per-request composition of localized replies and suggestions."""

from __future__ import annotations

from typing import Any, Self, TypeAlias

from chatbotbase.errors import TranslationMissingError
from chatbotbase.messages import Input, Message, Output
from chatbotbase.replies import FormattedReply, Reply, Suggestion, TextReply, TextSuggestion, VoiceReply
from chatbotbase.translations import TranslationResolver

ReplyValue: TypeAlias = Reply | Message | str
SuggestionValue: TypeAlias = Suggestion | str


class ReplyComposer:
    """Accumulate replies on one :class:`Output` using the shared resolver."""

    def __init__(self, output: Output, translations: TranslationResolver) -> None:
        self.output = output
        self.translations = translations

    @classmethod
    def for_input(cls, message: Input, translations: TranslationResolver) -> ReplyComposer:
        return cls(message.reply(), translations)

    def add_reply(self, value: ReplyValue, *args: Any) -> Self:
        """Append a reply, a message as text and voice pair, or a translated key."""

        match value:
            case Reply():
                self.output.add_reply(value)
            case Message(display_text=text, ssml=ssml):
                self.output.add_reply(TextReply(text))
                self.output.add_reply(VoiceReply(ssml))
            case str():
                self.add_reply(self.create_message(value, *args))
            case _:
                raise TypeError(f"cannot add reply of type {type(value).__name__}")
        return self

    def add_suggestion(self, value: SuggestionValue, *args: Any) -> Self:
        match value:
            case Suggestion():
                self.output.add_suggestion(value)
            case str():
                label = self.create_message(value, *args).display_text
                self.output.add_suggestion(TextSuggestion(label))
            case _:
                raise TypeError(f"cannot add suggestion of type {type(value).__name__}")
        return self

    def create_message(self, key: str, *args: Any) -> Message:
        """Resolve ``key`` into a message; unknown keys are used as literal templates."""

        return self.translations.resolve_message(self.output, key, *args)

    def t(self, key: str, *args: Any) -> str:
        """Strict translation for content that must exist."""

        text = self.translations.get_display_text(self.output, key, *args)
        if text is None:
            raise TranslationMissingError(key, self.output.language_code)
        return text

    def has_key(self, key: str) -> bool:
        return self.translations.has_key(self.output, key)

    def set_expect_answer(self, expect_answer: bool) -> Self:
        self.output.set_expect_answer(expect_answer)
        return self

    def set_retention_message(self, message: str | None) -> Self:
        self.output.set_retention_message(message)
        return self

    @staticmethod
    def plain(text: str) -> TextReply:
        return TextReply(text)

    @staticmethod
    def formatted(text: str) -> FormattedReply:
        return FormattedReply(text)

    @staticmethod
    def suggestion(label: str) -> TextSuggestion:
        return TextSuggestion(label)
