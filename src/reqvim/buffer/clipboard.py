"""Yank storage and the optional bridge to the system clipboard."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol

import pyperclip

from reqvim.runtime import telemetry


class ClipboardErrorKind(str, Enum):
    INIT = "init"
    READ = "read"
    WRITE = "write"


class ClipboardError(RuntimeError):
    """Raised when the system clipboard cannot be reached."""

    def __init__(self, kind: ClipboardErrorKind, cause: Exception) -> None:
        super().__init__(f"{kind.value} failed: {cause}")
        self.kind = kind
        self.cause = cause


class ClipboardProvider(Protocol):
    def get_text(self) -> str: ...

    def set_text(self, text: str) -> None: ...


class SystemClipboard:
    """pyperclip-backed clipboard.

    The platform backend is probed lazily on first use so that hosts
    without a clipboard (CI, bare ttys) can still construct one.
    """

    def __init__(self) -> None:
        self._ready = False

    def _ensure_ready(self) -> None:
        if self._ready:
            return
        try:
            pyperclip.determine_clipboard()
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(ClipboardErrorKind.INIT, exc) from exc
        self._ready = True

    def get_text(self) -> str:
        self._ensure_ready()
        try:
            return pyperclip.paste()
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(ClipboardErrorKind.READ, exc) from exc

    def set_text(self, text: str) -> None:
        self._ensure_ready()
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as exc:
            raise ClipboardError(ClipboardErrorKind.WRITE, exc) from exc


class YankSlot:
    """Single slot holding the last cut or copied text.

    When a provider is attached, ``push`` mirrors the slot to it and
    ``pull`` refreshes the slot from it. Provider failures are logged and
    the slot keeps its buffer-local value.
    """

    def __init__(self, provider: Optional[ClipboardProvider] = None) -> None:
        self.text = ""
        self.provider = provider

    def push(self, text: str) -> None:
        self.text = text
        if self.provider is None or not text:
            return
        try:
            self.provider.set_text(text)
        except ClipboardError as exc:
            telemetry.record_event(
                "clipboard.error",
                level="warning",
                data={"kind": exc.kind.value, "reason": str(exc.cause)},
                logger_name="reqvim.clipboard",
            )

    def pull(self) -> str:
        if self.provider is None:
            return self.text
        try:
            external = self.provider.get_text()
        except ClipboardError as exc:
            telemetry.record_event(
                "clipboard.error",
                level="warning",
                data={"kind": exc.kind.value, "reason": str(exc.cause)},
                logger_name="reqvim.clipboard",
            )
            return self.text
        if external:
            self.text = external
        return self.text


__all__ = [
    "ClipboardError",
    "ClipboardErrorKind",
    "ClipboardProvider",
    "SystemClipboard",
    "YankSlot",
]
