"""Bundled platform adapters."""

from chatbotbase.platforms.generic import GenericPlatform

__all__ = ["GenericPlatform"]
