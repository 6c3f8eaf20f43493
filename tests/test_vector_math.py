import math
import unittest

import numpy as np

from cv_scoring.application.errors import DimensionMismatchError
from cv_scoring.application.services.vector_math import (
    cosine_similarity,
    dot_product,
    magnitude,
    normalize,
    text_to_vector,
)


class DotProductTests(unittest.TestCase):
    def test_sum_of_products(self):
        self.assertEqual(dot_product([1, 2, 3], [4, 5, 6]), 32.0)

    def test_mismatched_dimensions(self):
        with self.assertRaises(DimensionMismatchError):
            dot_product([1, 2], [1, 2, 3])
        # still a ValueError for callers that only know the builtin
        with self.assertRaises(ValueError):
            dot_product(np.zeros(2, dtype=np.float32), np.zeros(4, dtype=np.float32))


class MagnitudeTests(unittest.TestCase):
    def test_pythagorean(self):
        self.assertEqual(magnitude([3, 4]), 5.0)

    def test_zero_vector(self):
        self.assertEqual(magnitude([0, 0, 0]), 0.0)


class CosineSimilarityTests(unittest.TestCase):
    def test_identical_vectors(self):
        self.assertAlmostEqual(cosine_similarity([1, 2, 3], [1, 2, 3]), 1.0, places=6)
        v = np.array([0.2, 0.0, 0.7, 0.1], dtype=np.float32)
        self.assertAlmostEqual(cosine_similarity(v, v), 1.0, places=5)

    def test_orthogonal_and_opposite(self):
        self.assertAlmostEqual(cosine_similarity([1, 0], [0, 1]), 0.0)
        self.assertAlmostEqual(cosine_similarity([1, 0], [-1, 0]), -1.0)

    def test_zero_vector_is_exactly_zero(self):
        score = cosine_similarity([1, 2, 3], [0, 0, 0])
        self.assertEqual(score, 0.0)
        self.assertFalse(math.isnan(score))
        self.assertEqual(cosine_similarity([0, 0], [0, 0]), 0.0)


class NormalizeTests(unittest.TestCase):
    def test_unit_length(self):
        normalized = normalize([3, 4])
        self.assertAlmostEqual(magnitude(normalized), 1.0)
        self.assertAlmostEqual(float(normalized[0]), 0.6)
        self.assertAlmostEqual(float(normalized[1]), 0.8)

    def test_keeps_float32(self):
        normalized = normalize(np.array([3, 4], dtype=np.float32))
        self.assertEqual(normalized.dtype, np.float32)
        self.assertAlmostEqual(float(normalized[0]), 0.6, places=6)

    def test_does_not_mutate_input(self):
        vec = np.array([3.0, 4.0])
        normalize(vec)
        self.assertEqual(vec.tolist(), [3.0, 4.0])

    def test_zero_vector(self):
        self.assertEqual(normalize(np.zeros(2, dtype=np.float32)).tolist(), [0.0, 0.0])


class TextToVectorTests(unittest.TestCase):
    def test_bag_of_words_counts(self):
        self.assertEqual(
            text_to_vector("React and react, Python", ["react", "python", "java"]),
            [2, 1, 0],
        )


if __name__ == "__main__":
    unittest.main()
