"""chatbotbase - one canonical model for voice and chat platform webhooks."""

from chatbotbase.bootstrap import ChatbotBuilder
from chatbotbase.composer import ReplyComposer
from chatbotbase.errors import (
    ChatbotError,
    RequestNotSupportedError,
    TranslationMissingError,
    VerificationFailedError,
)
from chatbotbase.framework import Chatbot, DispatchResult
from chatbotbase.intents import CallbackRouter, IntentHandler, IntentRouter
from chatbotbase.messages import Input, Message, Output
from chatbotbase.platform import BufferedResponse, VoicePlatform, WebhookRequest
from chatbotbase.replies import Reply, Suggestion
from chatbotbase.tracking import TrackingProvider
from chatbotbase.translations import TranslationResolver

__version__ = "0.1.0"

__all__ = [
    "BufferedResponse",
    "CallbackRouter",
    "Chatbot",
    "ChatbotBuilder",
    "ChatbotError",
    "DispatchResult",
    "Input",
    "IntentHandler",
    "IntentRouter",
    "Message",
    "Output",
    "Reply",
    "ReplyComposer",
    "RequestNotSupportedError",
    "Suggestion",
    "TrackingProvider",
    "TranslationMissingError",
    "TranslationResolver",
    "VerificationFailedError",
    "VoicePlatform",
    "WebhookRequest",
]
