from __future__ import annotations


class ScoringError(Exception):
    """Base class for everything the scoring engine and its client raise."""


class NotReadyError(ScoringError):
    """A request reached an engine whose model is not trained yet."""


class UnknownCommandError(ScoringError):
    """The request type is not one of the engine's commands."""


class DimensionMismatchError(ScoringError, ValueError):
    """Two vectors of different lengths were combined."""


class VocabularyFrozenError(ScoringError, RuntimeError):
    """The vectoriser was trained again after its IDF table was finalised."""


class ScoringEngineError(ScoringError):
    """The engine answered a request with an `error` response."""

    def __init__(self, message: str, request_id: str | None = None):
        super().__init__(message)
        self.request_id = request_id


class ScoringTimeoutError(ScoringError, TimeoutError):
    """No response arrived for a request within the client's timeout."""


class EngineClosedError(ScoringError):
    """The client was used after close()."""
