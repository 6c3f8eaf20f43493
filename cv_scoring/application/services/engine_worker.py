from __future__ import annotations
from typing import Any, Callable, Dict, Mapping, Optional, Sequence
import copy
import queue
import threading

from loguru import logger

from cv_scoring.application.services.scoring_engine import ScoringEngine
from cv_scoring.application.services.tfidf import TfIdfVectoriser

ResponseCallback = Callable[[Dict[str, Any]], None]

_STOP = None  # inbox sentinel


class EngineWorker:
    """
    A dedicated thread that owns one ScoringEngine.

    Requests go in through post() and are handled one at a time, in the
    order they were queued. Each response dict is passed to `on_response`
    from the worker thread; callers must hop back to their own thread/loop.
    """

    def __init__(
        self,
        on_response: ResponseCallback,
        corpus: Sequence[str] | None = None,
        name: str = "scoring-engine-0",
    ):
        self.name = name
        self._on_response = on_response
        self._corpus = tuple(corpus) if corpus is not None else None
        self._inbox: "queue.Queue[Optional[Dict[str, Any]]]" = queue.Queue()
        self._ready = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def wait_ready(self, timeout: float | None = None) -> bool:
        """Block until the engine has finished training (or timeout)."""
        return self._ready.wait(timeout)

    def post(self, message: Mapping[str, Any]) -> None:
        # deep copy: the engine never holds a reference to caller objects
        self._inbox.put(copy.deepcopy(dict(message)))

    def stop(self, timeout: float | None = 5.0) -> None:
        if self._thread is None:
            return
        self._inbox.put(_STOP)
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("Engine worker '{}' did not stop within {}s", self.name, timeout)
        self._thread = None

    def _run(self) -> None:
        try:
            engine = ScoringEngine.build(self._corpus)
        except Exception:
            logger.exception("Engine worker '{}' failed to train; requests will be answered with errors", self.name)
            # untrained engine: handle() answers every request with NotReady
            engine = ScoringEngine(vectoriser=TfIdfVectoriser(), corpus=())

        self._ready.set()
        logger.info("Engine worker '{}' started", self.name)

        while True:
            message = self._inbox.get()
            if message is _STOP:
                break

            response = engine.handle(message)
            try:
                self._on_response(response)
            except Exception:
                logger.exception(
                    "Response callback failed in worker '{}' for id={}",
                    self.name,
                    response.get("id"),
                )

        logger.info("Engine worker '{}' stopped", self.name)
