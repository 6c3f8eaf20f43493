from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Sequence, Tuple, Type
import math
import re

import numpy as np
from loguru import logger
from pydantic import BaseModel, ValidationError

from cv_scoring.application.errors import NotReadyError, ScoringError, UnknownCommandError
from cv_scoring.application.schemas import (
    ComplexityResult,
    KeywordSuggestions,
    RelevancePayload,
    RelevanceResult,
    TextPayload,
)
from cv_scoring.application.services.tfidf import TfIdfVectoriser
from cv_scoring.application.services.vector_math import cosine_similarity


# Job-title / skill snippets the model is trained on at start-up
SEED_CORPUS: Tuple[str, ...] = (
    "Software Engineer React TypeScript Frontend",
    "Backend Developer Node.js Express Database SQL",
    "Full Stack Developer React Node.js TypeScript",
    "Project Manager Agile Scrum Leadership",
    "Data Scientist Python Machine Learning AI",
    "UX Designer Figma Prototype User Research",
)

_SENTENCE_END = re.compile(r"[.!?]+")


def _round_half_up(value: float) -> int:
    # 0.5 always rounds up (round() would give banker's rounding)
    return int(math.floor(value + 0.5))


def score_complexity(text: str) -> ComplexityResult:
    """
    Readability heuristic, independent of any trained vocabulary.

    score = 3 * words-per-sentence + 5 * chars-per-word, clamped to [0, 100].
    Roughly: 4 words/sentence -> ~20, 20 words/sentence -> ~80.
    """
    if not text:
        return ComplexityResult(score=0, level="compact")

    sentences = [s for s in _SENTENCE_END.split(text) if s.strip()]
    words = text.split()

    avg_sentence_len = len(words) / len(sentences) if sentences else 0.0
    avg_word_len = sum(len(w) for w in words) / len(words) if words else 0.0

    score = min(max(avg_sentence_len * 3 + avg_word_len * 5, 0.0), 100.0)

    if score < 30:
        level = "compact"
    elif score > 60:
        level = "spacious"
    else:
        level = "comfortable"
    return ComplexityResult(score=_round_half_up(score), level=level)


class _Route(NamedTuple):
    result_type: str
    payload_model: Type[BaseModel]
    run: Callable[["ScoringEngine", Any], BaseModel]


_ROUTES: Dict[str, _Route] = {
    "analyze_relevance": _Route(
        "analysis_result",
        RelevancePayload,
        lambda engine, p: engine.analyze_relevance(p.cv_text, p.job_text),
    ),
    "suggest_keywords": _Route(
        "suggestions_result",
        TextPayload,
        lambda engine, p: engine.suggest_keywords(p.text),
    ),
    "analyze_complexity": _Route(
        "complexity_result",
        TextPayload,
        lambda engine, p: engine.analyze_complexity(p.text),
    ),
}


@dataclass
class ScoringEngine:
    """
    Frozen TF-IDF model plus the three scoring commands.

    Use ScoringEngine.build(): it trains on the seed corpus and returns a
    ready engine. An engine never trains again and holds no other mutable
    state, so one instance can serve any number of requests one at a time.
    """
    vectoriser: TfIdfVectoriser
    corpus: Tuple[str, ...]
    # vectorised corpus, same order as `corpus`
    seed_vectors: List[np.ndarray] = field(default_factory=list)
    ready: bool = False

    @classmethod
    def build(cls, corpus: Sequence[str] | None = None) -> "ScoringEngine":
        docs = tuple(corpus) if corpus is not None else SEED_CORPUS
        if not docs:
            raise ValueError("Seed corpus must contain at least one document")

        vectoriser = TfIdfVectoriser.fit(docs)
        seed_vectors = [vectoriser.vectorise(doc) for doc in docs]

        logger.info(
            "Scoring engine ready: {} seed document(s), vocabulary size {}",
            len(docs),
            vectoriser.vocabulary_size,
        )
        return cls(vectoriser=vectoriser, corpus=docs, seed_vectors=seed_vectors, ready=True)

    # ---------------- commands ----------------

    def analyze_relevance(self, cv_text: str, job_text: str) -> RelevanceResult:
        cv_vec = self.vectoriser.vectorise(cv_text)
        job_vec = self.vectoriser.vectorise(job_text)
        similarity = cosine_similarity(cv_vec, job_vec)
        return RelevanceResult(similarity=_round_half_up(similarity * 100))

    def suggest_keywords(self, text: str) -> KeywordSuggestions:
        """
        Closest seed document to `text` and the words of it the text lacks.
        A seed word counts as present when it is a case-insensitive substring
        of the input, not only when it is a whole word.
        """
        input_vec = self.vectoriser.vectorise(text)

        best_match, best_score = "", -1.0
        for doc, doc_vec in zip(self.corpus, self.seed_vectors):
            score = cosine_similarity(input_vec, doc_vec)
            if score > best_score:  # strict: ties keep the earlier document
                best_match, best_score = doc, score

        lowered = text.lower()
        keywords = [w for w in best_match.split(" ") if w.lower() not in lowered]
        return KeywordSuggestions(match=best_match, score=best_score, keywords=keywords)

    def analyze_complexity(self, text: str) -> ComplexityResult:
        return score_complexity(text)

    # ---------------- dispatch ----------------

    def handle(self, message: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Run one request envelope {type, id, payload} and return the response
        envelope. Never raises: every failure becomes an `error` response
        carrying the request's id.
        """
        msg_id = message.get("id")
        msg_type = message.get("type")

        try:
            if not self.ready:
                raise NotReadyError("AI not ready")

            route = _ROUTES.get(msg_type)
            if route is None:
                raise UnknownCommandError(f"Unknown command: {msg_type!r}")

            payload = route.payload_model.model_validate(message.get("payload") or {})
            result = route.run(self, payload)

        except (ScoringError, ValidationError) as e:
            logger.warning("Request id={} type={} rejected: {}", msg_id, msg_type, e)
            return self._error(msg_id, str(e))

        except Exception as e:
            logger.exception("Unexpected failure handling request id={} type={}", msg_id, msg_type)
            return self._error(msg_id, f"{type(e).__name__}: {e}")

        return {"type": route.result_type, "id": msg_id, "payload": result.model_dump()}

    @staticmethod
    def _error(msg_id: Any, message: str) -> Dict[str, Any]:
        return {"type": "error", "id": msg_id, "payload": message}
