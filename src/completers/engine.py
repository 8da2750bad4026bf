# completers/engine.py
from __future__ import annotations

import logging
import queue
import threading
from typing import Optional, Protocol, Sequence

from prompt_toolkit.input import create_input

from .config import Settings
from .core import Completer
from .model import Model
from .terminal import Key, KeyEvent, KeyReader, Renderer, TermCanvas

log = logging.getLogger(__name__)

# key reader tokens
_NEXT_KEY = object()
_STOP = object()


class KeySource(Protocol):
    def read_key(self) -> Optional[KeyEvent]: ...


class Display(Protocol):
    def draw(self, model: Model) -> None: ...


def _key_reader(keys: KeySource, requests: "queue.Queue[object]", out: "queue.Queue[Optional[KeyEvent]]") -> None:
    """Read one key per request token; a stop token or end of input ends the thread."""
    while requests.get() is _NEXT_KEY:
        key = keys.read_key()
        out.put(key)
        if key is None:
            return


def handle_key(model: Model, key: KeyEvent) -> bool:
    """
    Apply one key to the model. Returns True when the key ends the session
    (Enter on a selection, or Ctrl-C); the caller decides the result.
    """
    if key is Key.ENTER:
        return model.selected_result() is not None
    if key is Key.CTRL_C:
        return True
    if isinstance(key, str):
        model.query_append(key)
        return False
    actions = {
        Key.UP: model.select_previous,
        Key.DOWN: model.select_next,
        Key.PAGE_UP: model.previous_page,
        Key.PAGE_DOWN: model.next_page,
        Key.HOME: model.select_first,
        Key.END: model.select_last,
        Key.LEFT: model.ascend,
        Key.RIGHT: model.descend,
        Key.TAB: model.next_tab,
        Key.BACKSPACE: model.query_backspace,
    }
    action = actions.get(key)
    if action is not None:
        action()
    return False


def run_session(model: Model, keys: KeySource, display: Display,
                settings: Optional[Settings] = None) -> Optional[str]:
    """
    Drive ``model`` until the user accepts or cancels.

    Keys are read on a separate thread, one per request, so at most one key is
    ever pending. While the active level is still fetching, the loop waits for
    a key only ``poll_seconds`` and runs one fetch tick after each wait; once
    it is finished the loop just blocks on the keyboard.

    Returns the accepted result string, or None on Ctrl-C / end of input.
    """
    settings = settings or model.settings
    requests: "queue.Queue[object]" = queue.Queue()
    incoming: "queue.Queue[Optional[KeyEvent]]" = queue.Queue()
    reader = threading.Thread(target=_key_reader, args=(keys, requests, incoming),
                              name="completers-keys", daemon=True)
    reader.start()

    model.start_fetching_completions()
    requests.put(_NEXT_KEY)
    outstanding = True
    try:
        while True:
            display.draw(model)
            if model.fetching_finished():
                key = incoming.get()
            else:
                try:
                    key = incoming.get(timeout=settings.poll_seconds)
                except queue.Empty:
                    model.fetch_completions()
                    continue
                model.fetch_completions()
            outstanding = False

            if key is None:
                log.info("input closed, cancelling")
                return None
            if handle_key(model, key):
                if key is Key.CTRL_C:
                    log.info("cancelled")
                    return None
                result = model.selected_result()
                log.info("accepted %r", result)
                return result
            requests.put(_NEXT_KEY)
            outstanding = True
    finally:
        requests.put(_STOP)
        # a reader blocked on the keyboard cannot be interrupted; leave it (daemon)
        if not outstanding:
            reader.join()


def get_completion(initial_query: str, completers: Sequence[Completer],
                   settings: Optional[Settings] = None, tty_path: str = "/dev/tty") -> str:
    """
    Run an interactive session on the controlling terminal.

    Returns the chosen completion's result string, or ``initial_query`` when
    the user cancels.
    """
    settings = settings or Settings()
    with Model(completers, settings) as model:
        model.query_set(initial_query)
        log.info("session start: query=%r tabs=%s", initial_query,
                 [s.top().completer.name() for s in model.stacks])
        with open(tty_path, "r", encoding="utf-8") as tty_in, \
                open(tty_path, "w", encoding="utf-8") as tty_out:
            source = create_input(stdin=tty_in)
            with source.raw_mode():
                canvas = TermCanvas(tty_out, settings.page_height + 1)
                renderer = Renderer(canvas, settings)
                try:
                    result = run_session(model, KeyReader(source), renderer, settings)
                finally:
                    canvas.close()
    return initial_query if result is None else result
