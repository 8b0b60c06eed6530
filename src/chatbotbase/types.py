"""Framework-neutral data aliases."""

from __future__ import annotations

from enum import StrEnum
from typing import Any, TypeAlias

Context: TypeAlias = dict[str, Any]
Translation: TypeAlias = dict[str, str | list[str]]
Translations: TypeAlias = dict[str, Translation]

GENERIC_PLATFORM = "*"


class InputMethod(StrEnum):
    """How the user started the current intent."""

    VOICE = "voice"
    TEXT = "text"
    TOUCH = "touch"
