from __future__ import annotations
from typing import Any, Dict, List, Mapping, Sequence
import asyncio
import itertools
import uuid

from loguru import logger

from cv_scoring.application.errors import EngineClosedError, ScoringEngineError, ScoringTimeoutError
from cv_scoring.application.schemas import (
    ComplexityResult,
    KeywordSuggestions,
    RelevanceResult,
    ScoringResponse,
)
from cv_scoring.application.services.engine_worker import EngineWorker
from cv_scoring.application.settings import Settings


class ScoringClient:
    """
    asyncio front end for one or more EngineWorkers.

    Every request gets a fresh correlation id and a pending future; the
    response resolves whichever future carries its id, so responses may
    arrive in any order. Requests are spread round-robin over the workers,
    each of which trains its own copy of the model.

    Nothing is cancelled on timeout: the caller stops waiting and the late
    response is dropped when it turns up.
    """

    def __init__(self, workers: int = 1, timeout_s: float = 5.0, corpus: Sequence[str] | None = None):
        if workers < 1:
            raise ValueError("ScoringClient needs at least one worker")
        self.timeout_s = timeout_s
        self._workers: List[EngineWorker] = [
            EngineWorker(self._on_response, corpus=corpus, name=f"scoring-engine-{i}")
            for i in range(workers)
        ]
        self._next_worker = itertools.cycle(self._workers)
        self._pending: Dict[str, asyncio.Future] = {}
        self._loop: asyncio.AbstractEventLoop | None = None
        self._started = False
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScoringClient":
        return cls(
            workers=settings.scoring_workers,
            timeout_s=settings.request_timeout_s,
            corpus=settings.seed_corpus,
        )

    @property
    def worker_count(self) -> int:
        return len(self._workers)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def start(self) -> None:
        if self._closed:
            raise EngineClosedError("Scoring client is closed")
        if self._started:
            return
        self._loop = asyncio.get_running_loop()
        for worker in self._workers:
            worker.start()
        self._started = True
        logger.info("Scoring client started with {} worker(s)", len(self._workers))

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for worker in self._workers:
            await asyncio.to_thread(worker.stop)

        for future in self._pending.values():
            if not future.done():
                future.set_exception(EngineClosedError("Scoring client closed before a response arrived"))
        self._pending.clear()
        logger.info("Scoring client closed")

    async def __aenter__(self) -> "ScoringClient":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # ---------------- protocol ----------------

    async def submit(
        self,
        message_type: str,
        payload: Mapping[str, Any],
        timeout_s: float | None = None,
    ) -> ScoringResponse:
        """Send one request and return its response envelope, `error` included."""
        if self._closed:
            raise EngineClosedError("Scoring client is closed")
        await self.start()

        request_id = uuid.uuid4().hex
        future = self._loop.create_future()
        self._pending[request_id] = future
        self._post({"type": message_type, "id": request_id, "payload": dict(payload)})

        wait_s = timeout_s if timeout_s is not None else self.timeout_s
        try:
            raw = await asyncio.wait_for(future, wait_s)
        except asyncio.TimeoutError:
            logger.warning("No response for {} request id={} within {}s", message_type, request_id, wait_s)
            raise ScoringTimeoutError(f"{message_type} timed out after {wait_s}s") from None
        finally:
            self._pending.pop(request_id, None)

        return ScoringResponse.model_validate(raw)

    async def request(self, message_type: str, payload: Mapping[str, Any]) -> Dict[str, Any]:
        response = await self.submit(message_type, payload)
        if response.is_error:
            logger.error("Scoring engine error for {}: {}", message_type, response.payload)
            raise ScoringEngineError(str(response.payload), request_id=response.id)
        return response.payload

    async def analyze_relevance(self, cv_text: str, job_text: str) -> RelevanceResult:
        result = await self.request("analyze_relevance", {"cvText": cv_text, "jobText": job_text})
        return RelevanceResult.model_validate(result)

    async def suggest_keywords(self, text: str) -> KeywordSuggestions:
        result = await self.request("suggest_keywords", {"text": text})
        return KeywordSuggestions.model_validate(result)

    async def analyze_complexity(self, text: str) -> ComplexityResult:
        result = await self.request("analyze_complexity", {"text": text})
        return ComplexityResult.model_validate(result)

    # ---------------- channel ----------------

    def _post(self, message: Dict[str, Any]) -> None:
        next(self._next_worker).post(message)

    def _on_response(self, response: Dict[str, Any]) -> None:
        # runs on a worker thread
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug("Event loop gone; dropping response id={}", response.get("id"))
            return
        loop.call_soon_threadsafe(self._deliver, response)

    def _deliver(self, response: Dict[str, Any]) -> None:
        future = self._pending.get(response.get("id"))
        if future is None or future.done():
            # timed out, closed, or never ours
            logger.debug("Dropping late response id={}", response.get("id"))
            return
        future.set_result(response)
