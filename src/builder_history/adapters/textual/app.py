"""Executable Textual app that edits a canvas with a live history timeline."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Optional, Sequence

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Footer, Header, Static

from builder_history.documents import CanvasBlock, CanvasHistoryAdapter
from builder_history.history import CANVAS_OPTIONS, HistoryOptions
from builder_history.runtime import telemetry

from .controller import TextualHistoryAdapter, TextualUIHooks
from .timeline import TimelineRow

ADD_KEYS = {"h": "hero", "f": "form", "t": "text", "b": "button", "i": "image"}
NUDGE_KEYS = {"left": (-10, 0), "right": (10, 0), "up": (0, -10), "down": (0, 10)}


@dataclass
class UIState:
    canvas_text: str = ""
    timeline_text: str = ""
    status_text: str = ""


def render_blocks(blocks: Sequence[CanvasBlock]) -> str:
    if not blocks:
        return "(empty canvas)"
    lines = []
    for block in blocks:
        title = block.properties.get("title", "")
        lines.append(f"{block.id} [{block.type}] @ ({block.x:g}, {block.y:g}) {title}")
    return "\n".join(lines)


class CanvasHistoryApp(App[None]):
    """Canvas editor demo: blocks on the left, history timeline on the right."""

    CSS = """
	#canvas-view {
		width: 2fr;
		border: round $accent;
		padding: 1 1;
	}

	#timeline-view {
		width: 1fr;
		border: round $secondary;
		padding: 1 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, options: HistoryOptions = CANVAS_OPTIONS) -> None:
        super().__init__()
        self._state = UIState()
        self._options = options
        self._counter = 0
        self.canvas: CanvasHistoryAdapter | None = None
        self.adapter: TextualHistoryAdapter | None = None
        self._canvas_widget: Static | None = None
        self._timeline_widget: Static | None = None
        self._status_widget: Static | None = None
        self.logger = telemetry.get_logger("builder_history.demo")

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal():
            self._canvas_widget = Static("", id="canvas-view")
            self._timeline_widget = Static("", id="timeline-view")
            yield self._canvas_widget
            yield self._timeline_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    async def on_mount(self) -> None:
        self.canvas = CanvasHistoryAdapter(options=self._options)
        hooks = TextualUIHooks(
            update_state=self._update_canvas,
            update_status=self._update_status,
            show_timeline=self._show_timeline,
            log=self._log_line,
        )
        self.adapter = TextualHistoryAdapter(self.canvas, hooks)
        self._update_status("h/f/t/b/i add | e edit | d dup | x remove | u/r undo/redo")
        self.set_interval(0.1, self._process_timers)

    def _process_timers(self) -> None:
        if self.adapter:
            self.adapter.process_timers()

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter or not self.canvas:
            return
        if self._dispatch(event.key):
            event.stop()

    def _dispatch(self, key: str) -> bool:
        assert self.adapter is not None and self.canvas is not None
        if self.adapter.handle_key(key):
            return True
        if key == "u":
            self.adapter.undo()
            return True
        if key == "r":
            self.adapter.redo()
            return True
        if key == "c":
            self.adapter.clear()
            return True
        if key.isdigit() and key != "0":
            self.adapter.go_to(int(key) - 1)
            return True

        last = self.canvas.working[-1] if self.canvas.working else None
        if key in ADD_KEYS:
            self._counter += 1
            block = CanvasBlock(
                id=f"block-{self._counter}",
                type=ADD_KEYS[key],  # type: ignore[arg-type]
                x=20 * self._counter,
                y=20 * self._counter,
            )
            self.canvas.add_block(block)
        elif last is None:
            return False
        elif key == "e":
            title = str(last.properties.get("title", "")) + "*"
            self.canvas.update_block(last.id, title=title)
        elif key == "d":
            self.canvas.duplicate_block(last.id)
        elif key == "x":
            self.canvas.remove_block(last.id)
        elif key in NUDGE_KEYS:
            dx, dy = NUDGE_KEYS[key]
            self.canvas.move_block(last.id, (last.x + dx, last.y + dy))
        else:
            return False
        self.adapter.refresh()
        return True

    def _update_canvas(self, blocks: Sequence[CanvasBlock]) -> None:
        self._state.canvas_text = render_blocks(blocks)
        if self._canvas_widget:
            self._canvas_widget.update(self._state.canvas_text)

    def _show_timeline(self, rows: Sequence[TimelineRow], headline: str) -> None:
        body = "\n".join(row.render() for row in reversed(rows))
        self._state.timeline_text = f"{headline}\n\n{body}"
        if self._timeline_widget:
            self._timeline_widget.update(self._state.timeline_text)

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)

    def _log_line(self, line: str) -> None:
        self.logger.debug(line)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = HistoryOptions.from_env("canvas", CANVAS_OPTIONS)
    parser = argparse.ArgumentParser(description="Run the canvas history demo.")
    parser.add_argument(
        "--max-size",
        type=int,
        default=defaults.max_size,
        help=f"Maximum retained history entries (default: {defaults.max_size})",
    )
    parser.add_argument(
        "--debounce-ms",
        type=int,
        default=defaults.debounce_ms,
        help=f"Coalescing window for property edits (default: {defaults.debounce_ms})",
    )
    parser.add_argument(
        "--telemetry",
        choices=sorted(telemetry.PROFILES),
        default=telemetry.env("TELEMETRY") or "demo",
        help="Telemetry profile (default: demo, logs to builder_history-demo.log)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure(args.telemetry)
    options = HistoryOptions(max_size=args.max_size, debounce_ms=args.debounce_ms)
    app = CanvasHistoryApp(options=options)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
