"""Editor settings and mode presentation constants."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from reqvim.modes.types import ModeKind

ENV_PREFIX = "REQVIM_"


@dataclass(frozen=True)
class ModeConfig:
    """Status-line presentation for a mode."""

    label: str
    color: str


MODE_CONFIGS: Mapping[ModeKind, ModeConfig] = {
    ModeKind.NORMAL: ModeConfig("NORMAL", "#98C379"),
    ModeKind.INSERT: ModeConfig("INSERT", "#E8B86D"),
    ModeKind.VISUAL: ModeConfig("VISUAL", "#6EACDA"),
    ModeKind.OPERATOR_PENDING: ModeConfig("OPERATOR", "#E06C75"),
}


@dataclass(frozen=True)
class EditorSettings:
    """Tunables shared by the text buffers, render caches and host widgets."""

    tab_size: int = 4
    undo_limit: int = 50
    # 0 scrolls by half of the visible rows.
    page_scroll: int = 0
    selection_style: str = "reverse"
    cursor_style: str = "reverse"
    use_system_clipboard: bool = True

    def __post_init__(self) -> None:
        if self.tab_size < 1:
            raise ValueError("tab_size must be positive")
        if self.undo_limit < 0:
            raise ValueError("undo_limit cannot be negative")
        if self.page_scroll < 0:
            raise ValueError("page_scroll cannot be negative")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EditorSettings":
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            tab_size=_env_int(env, "TAB_SIZE", defaults.tab_size, minimum=1),
            undo_limit=_env_int(env, "UNDO_LIMIT", defaults.undo_limit),
            page_scroll=_env_int(env, "PAGE_SCROLL", defaults.page_scroll),
            selection_style=env.get(
                f"{ENV_PREFIX}SELECTION_STYLE", defaults.selection_style
            ),
            cursor_style=env.get(f"{ENV_PREFIX}CURSOR_STYLE", defaults.cursor_style),
            use_system_clipboard=_env_flag(
                env, "SYSTEM_CLIPBOARD", defaults.use_system_clipboard
            ),
        )

    def page_rows(self, viewport_height: int) -> int:
        if self.page_scroll:
            return self.page_scroll
        return max(1, viewport_height // 2)


def _env_int(
    env: Mapping[str, str], name: str, fallback: int, *, minimum: int = 0
) -> int:
    value = env.get(f"{ENV_PREFIX}{name}")
    if value is None:
        return fallback
    try:
        parsed = int(value)
    except ValueError:
        return fallback
    return parsed if parsed >= minimum else fallback


def _env_flag(env: Mapping[str, str], name: str, fallback: bool) -> bool:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None:
        return fallback
    return raw.lower() in {"1", "true", "yes", "on"}


__all__ = ["EditorSettings", "ModeConfig", "MODE_CONFIGS"]
