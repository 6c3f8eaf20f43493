from __future__ import annotations
from typing import List, Sequence, Union
import re

import numpy as np

from cv_scoring.application.errors import DimensionMismatchError

VectorLike = Union[np.ndarray, Sequence[float]]

_WORD = re.compile(r"\b\w+\b")


def _as_array(vec: VectorLike) -> np.ndarray:
    arr = np.asarray(vec)
    if not np.issubdtype(arr.dtype, np.floating):
        arr = arr.astype(np.float64)
    return arr


def dot_product(a: VectorLike, b: VectorLike) -> float:
    va, vb = _as_array(a), _as_array(b)
    if va.shape[0] != vb.shape[0]:
        raise DimensionMismatchError(
            f"Vectors must have the same dimensionality ({va.shape[0]} != {vb.shape[0]})"
        )
    return float(np.dot(va, vb))


def magnitude(vec: VectorLike) -> float:
    """Euclidean norm; 0.0 for the zero (or empty) vector."""
    return float(np.linalg.norm(_as_array(vec)))


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """
    dot(a, b) / (||a|| * ||b||), in [-1, 1].
    Returns exactly 0.0 when either side has zero length, never NaN.
    """
    dot = dot_product(a, b)
    denom = magnitude(a) * magnitude(b)
    if denom == 0.0:
        return 0.0
    return dot / denom


def normalize(vec: VectorLike) -> np.ndarray:
    # Unit length copy; the zero vector comes back as-is.
    arr = _as_array(vec)
    mag = magnitude(arr)
    if mag == 0.0:
        return arr
    return arr / arr.dtype.type(mag)


def text_to_vector(text: str, vocabulary: Sequence[str]) -> List[int]:
    """Plain bag-of-words counts of `text` against an ordered vocabulary."""
    words = _WORD.findall((text or "").lower())
    return [words.count(term) for term in vocabulary]
