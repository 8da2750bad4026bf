"""
Terminal plumbing for the chooser: key input and drawing.

Keys come from a prompt_toolkit ``Input`` (raw mode and VT100 decoding) and
are mapped onto the chooser's own ``Key`` set. The chooser does not take over
the whole screen. It reserves ``height`` lines under the current command line
and redraws only those, addressing them relative to a saved cursor position.
"""
from __future__ import annotations

import enum
import os
import select
import shutil
from collections import deque
from typing import IO, Deque, Optional, Union

from prompt_toolkit.input import Input
from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys

from .config import Settings

CSI = "\033["


class Key(enum.Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    HOME = "home"
    END = "end"
    ENTER = "enter"
    TAB = "tab"
    BACKSPACE = "backspace"
    ESCAPE = "escape"
    CTRL_C = "ctrl_c"
    UNKNOWN = "unknown"


KeyEvent = Union[Key, str]

_KEYS = {
    Keys.Up: Key.UP, Keys.Down: Key.DOWN, Keys.Left: Key.LEFT, Keys.Right: Key.RIGHT,
    Keys.PageUp: Key.PAGE_UP, Keys.PageDown: Key.PAGE_DOWN,
    Keys.Home: Key.HOME, Keys.End: Key.END,
    Keys.ControlM: Key.ENTER, Keys.ControlJ: Key.ENTER, Keys.ControlI: Key.TAB,
    Keys.ControlH: Key.BACKSPACE, Keys.Escape: Key.ESCAPE, Keys.ControlC: Key.CTRL_C,
}


def to_key(press: KeyPress) -> Optional[KeyEvent]:
    """Map a prompt_toolkit key press to a chooser key; None for presses to skip."""
    if press.key in (Keys.Ignore, Keys.CPRResponse):
        return None
    if isinstance(press.key, Keys):
        return _KEYS.get(press.key, Key.UNKNOWN)
    return press.key if press.key.isprintable() else Key.UNKNOWN


class KeyReader:
    """
    Blocking, one-key-at-a-time reader over a prompt_toolkit ``Input``.

    ``read_keys`` only returns what is already buffered, so the reader waits
    for the input to become readable. A partial sequence (a lone ESC) is
    flushed once nothing more arrives within ``escape_timeout``.
    """

    def __init__(self, source: Input, escape_timeout: float = 0.05) -> None:
        self.source = source
        self.escape_timeout = escape_timeout
        self._pending: Deque[KeyEvent] = deque()

    def _queue(self, presses) -> None:
        for press in presses:
            key = to_key(press)
            if key is not None:
                self._pending.append(key)

    def read_key(self) -> Optional[KeyEvent]:
        """The next key, or None at end of input."""
        while not self._pending:
            if self.source.closed:
                self._queue(self.source.flush_keys())
                if not self._pending:
                    return None
                break
            ready, _, _ = select.select([self.source.fileno()], [], [], self.escape_timeout)
            if ready:
                self._queue(self.source.read_keys())
            else:
                self._queue(self.source.flush_keys())
        return self._pending.popleft()


# ------------- colors -------------

def _supports_color(stream: IO[str]) -> bool:
    return stream.isatty() and os.environ.get("NO_COLOR", "") == ""


def _c(text: str, code: Optional[str], enabled: bool = True) -> str:
    if not code or not enabled:
        return text
    return f"{CSI}{code}m{text}{CSI}0m"


# ------------- canvas -------------

class TermCanvas:
    """
    A block of ``height`` lines below the cursor. Rows and columns are
    relative to the top-left corner of that block.
    """

    def __init__(self, out: IO[str], height: int, width: Optional[int] = None) -> None:
        self.out = out
        self.height = height
        self.width = width or shutil.get_terminal_size().columns
        # make room (scrolling if needed), go back up and remember the corner
        out.write("\n" * height)
        out.write(f"{CSI}{height}A\0337")
        out.flush()

    def move_to(self, row: int, col: int) -> None:
        self.out.write("\0338")
        if row > 0:
            self.out.write(f"{CSI}{row}B")
        if col > 0:
            self.out.write(f"{CSI}{col}C")

    def write(self, text: str) -> None:
        self.out.write(text)

    def clear(self) -> None:
        for row in range(self.height):
            self.move_to(row, 0)
            self.out.write(f"{CSI}2K")
        self.move_to(0, 0)

    def flush(self) -> None:
        self.out.flush()

    def close(self) -> None:
        """Wipe the block and leave the cursor where the block started."""
        self.clear()
        self.flush()


class Renderer:
    """Draws the active level of a Model onto a TermCanvas."""

    prompt = "  Search: "

    def __init__(self, canvas: TermCanvas, settings: Optional[Settings] = None,
                 color: Optional[bool] = None) -> None:
        self.canvas = canvas
        self.settings = settings or Settings()
        self.color = _supports_color(canvas.out) if color is None else color

    def status(self, model) -> str:
        count = model.completions_count()
        off = model.view_offset()
        first = off + 1 if count else 0
        last = min(off + self.settings.page_height, count)
        return f"[{model.completer_name()} {first}-{last}/{count}]"

    def draw(self, model) -> None:
        canvas = self.canvas
        width = canvas.width
        canvas.clear()
        canvas.write(self.prompt + model.query)
        status = self.status(model)
        canvas.move_to(0, max(width - len(status), 0))
        canvas.write(status)

        off = model.view_offset()
        selection = model.selection()
        for row, (completion, score) in enumerate(model.page(), start=1):
            i = off + row - 1
            prefix = f"{score} "
            text = completion.display_string()[: max(width - len(prefix) - 1, 0)]
            canvas.move_to(row, 0)
            line = prefix + _c(text, completion.color(), self.color)
            if i == selection:
                line = _c(prefix + text, "7", self.color) if self.color else "> " + prefix + text
            canvas.write(line)

        canvas.move_to(0, len(self.prompt) + len(model.query))
        canvas.flush()
