from __future__ import annotations
from collections import Counter
from typing import Dict, Iterable, Optional
import math

import numpy as np
from loguru import logger

from cv_scoring.application.errors import VocabularyFrozenError
from cv_scoring.application.services.tokenizer import tokenize
from cv_scoring.application.services.vector_math import normalize


class TfIdfVectoriser:
    """
    Corpus-trained TF-IDF model: tokenize -> vocabulary -> IDF -> unit vectors.

    Training is two-phase: call add_document() for every training text, then
    calculate_idf() exactly once. After that the vocabulary and IDF table are
    frozen and every vector has length == vocabulary_size.
    """

    def __init__(self):
        # token -> column index, first-seen order
        self._vocabulary: Dict[str, int] = {}
        # token -> number of training documents containing it
        self._doc_freq: Dict[str, int] = {}
        self._idf: Dict[str, float] = {}
        self._doc_count = 0
        self._frozen = False

    @classmethod
    def fit(cls, documents: Iterable[str]) -> "TfIdfVectoriser":
        vectoriser = cls()
        for doc in documents:
            vectoriser.add_document(doc)
        vectoriser.calculate_idf()
        return vectoriser

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def document_count(self) -> int:
        return self._doc_count

    @property
    def vocabulary_size(self) -> int:
        return len(self._vocabulary)

    def get_vocabulary_size(self) -> int:
        return self.vocabulary_size

    def idf(self, token: str) -> Optional[float]:
        return self._idf.get(token)

    def add_document(self, text: str) -> None:
        if self._frozen:
            raise VocabularyFrozenError("Cannot add documents after calculate_idf(); build a new vectoriser")

        self._doc_count += 1
        # distinct stems, keeping the order they first appear in this document
        for token in dict.fromkeys(tokenize(text)):
            if token not in self._vocabulary:
                self._vocabulary[token] = len(self._vocabulary)
            self._doc_freq[token] = self._doc_freq.get(token, 0) + 1

    def calculate_idf(self) -> None:
        # IDF = ln(N / df); a token in every document gets exactly 0
        if self._frozen:
            raise VocabularyFrozenError("IDF table is already finalised")

        for token, df in self._doc_freq.items():
            self._idf[token] = math.log(self._doc_count / df)
        self._frozen = True
        logger.debug(
            "TF-IDF finalised: {} document(s), vocabulary size {}",
            self._doc_count,
            len(self._vocabulary),
        )

    def vectorise(self, text: str) -> np.ndarray:
        """
        TF-IDF vector for `text`, L2-normalised, float32, one slot per
        vocabulary entry. Unknown terms are dropped, so out-of-vocabulary text
        yields the zero vector.
        """
        tokens = tokenize(text)
        vector = np.zeros(len(self._vocabulary), dtype=np.float32)
        if not tokens:
            return vector

        total = len(tokens)
        for token, count in Counter(tokens).items():
            index = self._vocabulary.get(token)
            idf_val = self._idf.get(token)
            if index is None or idf_val is None:
                continue
            vector[index] = (count / total) * idf_val

        return normalize(vector)
