# src/completers/core.py
"""
The completer capability and its two stock shapes.

A completer is a source of Completion objects. The engine only talks to it
through ``Completer``:

    name()               short label for the status line
    fetch_completions()  next batch of new completions (may block briefly)
    fetching_finished()  True once no more batches will ever come
    descend(c)           completer scoped into ``c``, or None
    ascend()             completer scoped to the parent, or None
    close()              stop background work (optional, advisory)

``SyncCompleter`` does all its work on the first fetch.
``BackgroundCompleter`` runs a producer on a worker thread and hands over what
has accumulated on every fetch tick.
"""
from __future__ import annotations

import logging
import queue
import threading
import weakref
from typing import Iterator, List, Optional, Protocol, Tuple

from .models import Completion

log = logging.getLogger(__name__)

Batch = List[Completion]


class Completer(Protocol):
    def name(self) -> str: ...

    def fetch_completions(self) -> Batch: ...

    def fetching_finished(self) -> bool: ...

    def descend(self, completion: Completion) -> Optional["Completer"]:
        return None

    def ascend(self) -> Optional["Completer"]:
        return None

    def close(self) -> None:
        return None


class SyncCompleter(Completer):
    """
    A completer whose whole result comes from one call of ``_fetch_all``
    (one external process run, a generator, ...). It always reports fetching
    as finished; the first fetch returns everything, later ones nothing.
    """

    def __init__(self) -> None:
        self._fetched = False

    def _fetch_all(self) -> Batch:
        raise NotImplementedError

    def fetching_finished(self) -> bool:
        return True

    def fetch_completions(self) -> Batch:
        if self._fetched:
            return []
        self._fetched = True
        return self._fetch_all()


# request queue tokens
_REQUEST = object()
_STOP = object()

Response = Tuple[Batch, bool]


def _worker(produce: Iterator[Batch],
            requests: "queue.Queue[object]",
            responses: "queue.Queue[Response]",
            label: str) -> None:
    """
    Drive ``produce`` one unit at a time. After each unit, answer a pending
    request (if any) with everything accumulated since the last answer.
    Once exhausted, wait for one more request and answer it with the rest and
    done=True. A stop token ends the loop wherever it is seen.
    """
    log.debug("worker %s: started", label)
    pending: Batch = []
    try:
        for unit in produce:
            pending.extend(unit)
            try:
                token = requests.get_nowait()
            except queue.Empty:
                continue
            if token is _STOP:
                log.debug("worker %s: stopped", label)
                return
            responses.put((pending, False))
            pending = []
    except Exception:
        log.exception("worker %s: producer failed", label)

    token = requests.get()
    if token is _STOP:
        log.debug("worker %s: stopped", label)
        return
    responses.put((pending, True))
    log.debug("worker %s: finished", label)


class BackgroundCompleter(Completer):
    """
    A completer that produces completions on its own thread.

    Subclasses hand ``__init__`` a producer: an iterator of batches, each
    batch one unit of work. The producer must not refer back to the completer
    (build it from a module-level generator function), so that dropping the
    completer stops its worker. The thread only communicates through two
    queues: requests (no payload) and responses ``(batch, done)``.
    ``fetch_completions`` sends one request and blocks for exactly one
    response, so the worker never runs more than one unit ahead unobserved.
    """

    def __init__(self, producer: Iterator[Batch]) -> None:
        self._requests: "queue.Queue[object]" = queue.Queue()
        self._responses: "queue.Queue[Response]" = queue.Queue()
        self._thread: Optional[threading.Thread] = threading.Thread(
            target=_worker,
            args=(producer, self._requests, self._responses, self.name()),
            name=f"completers-{self.name()}",
            daemon=True,
        )
        # a dropped completer stops its worker like close() does
        self._stop = weakref.finalize(self, self._requests.put, _STOP)
        self._thread.start()

    def fetching_finished(self) -> bool:
        return self._thread is None

    def fetch_completions(self) -> Batch:
        thread = self._thread
        if thread is None:
            return []
        self._requests.put(_REQUEST)
        batch, done = self._responses.get()
        if done:
            thread.join()
            self._thread = None
            self._stop.detach()
        return batch

    def close(self) -> None:
        """
        Ask the worker to stop. The worker exits at its next check; an
        unfinished worker is not waited for.
        """
        if self._thread is not None:
            self._stop()
            self._thread = None
