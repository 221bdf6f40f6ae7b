"""Executable Textual app: a request editor built from modal fields."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Optional, Sequence

from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Footer, Header, Static

from reqvim.config import EditorSettings
from reqvim.modes import ModalEngine
from reqvim.runtime import telemetry

from .widgets import EditorField, TextPane, shared_yank

METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")


@dataclass
class RequestDraft:
    method: str = "GET"
    url: str = ""
    headers: str = ""
    body: str = ""

    def raw(self) -> str:
        """HTTP/1.1 style text of the request as it would be sent."""

        lines = [f"{self.method} {self.url or '/'} HTTP/1.1"]
        lines.extend(line for line in self.headers.splitlines() if line.strip())
        if self.body:
            lines.extend(["", self.body])
        return "\n".join(lines)


class RequestEditorApp(App[None]):
    """URL, headers and body fields with a live preview of the raw request."""

    TITLE = "reqvim"

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor-area {
		height: 1fr;
	}

	#fields {
		width: 1fr;
	}

	#body {
		height: 1fr;
	}

	#preview {
		width: 1fr;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        draft: Optional[RequestDraft] = None,
        *,
        settings: Optional[EditorSettings] = None,
    ) -> None:
        super().__init__()
        self.draft = draft or RequestDraft()
        self.settings = settings or EditorSettings.from_env()
        self.engine = ModalEngine(tab_size=self.settings.tab_size)
        self.yank = shared_yank(self.settings)
        self._preview: TextPane | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="editor-area"):
            with Vertical(id="fields"):
                yield self._field("url", self.draft.url, "URL", single_line=True)
                yield self._field("headers", self.draft.headers, "Headers")
                yield self._field("body", self.draft.body, "Body")
            self._preview = TextPane(
                self.draft.raw(),
                label=f"{self.draft.method} preview",
                settings=self.settings,
                id="preview",
            )
            yield self._preview
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def _field(
        self, field_id: str, text: str, label: str, *, single_line: bool = False
    ) -> EditorField:
        return EditorField(
            text,
            label=label,
            single_line=single_line,
            settings=self.settings,
            engine=self.engine,
            yank=self.yank,
            id=field_id,
        )

    def on_mount(self) -> None:
        self.query_one("#url", EditorField).focus()
        self._update_status("")

    def on_editor_field_changed(self, message: EditorField.Changed) -> None:
        field_id = message.field.id
        if field_id in ("url", "headers", "body"):
            setattr(self.draft, field_id, message.text)
        if self._preview:
            self._preview.load(self.draft.raw())

    def on_editor_field_status_changed(
        self, message: EditorField.StatusChanged
    ) -> None:
        self._update_status(message.status, message.color)

    def _update_status(self, status: str, color: str = "") -> None:
        if self._status_widget is None:
            return
        hint = "Enter: edit field  Tab: next field  Ctrl+Q: quit"
        self._status_widget.update(status or hint)
        self._status_widget.styles.color = color or None


def _env_str(key: str, fallback: str) -> str:
    return os.environ.get(key) or fallback


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit an HTTP request with vi keys.")
    parser.add_argument(
        "--method",
        type=str.upper,
        choices=METHODS,
        default=_env_str("REQVIM_METHOD", "GET").upper(),
        help="Request method shown in the preview (default: GET)",
    )
    parser.add_argument("--url", default="", help="Initial request URL")
    parser.add_argument(
        "--header",
        action="append",
        default=[],
        metavar="NAME: VALUE",
        help="Initial header line (repeatable)",
    )
    parser.add_argument(
        "--body-file",
        type=argparse.FileType("r", encoding="utf-8"),
        help="Read the initial body from this file",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Write logs here instead of reqvim.log",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_file:
        os.environ["REQVIM_LOG_FILE"] = args.log_file
    telemetry.configure(preset="production")

    body = ""
    if args.body_file is not None:
        with args.body_file as handle:
            body = handle.read()
    draft = RequestDraft(
        method=args.method,
        url=args.url,
        headers="\n".join(args.header),
        body=body,
    )
    app = RequestEditorApp(draft)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
