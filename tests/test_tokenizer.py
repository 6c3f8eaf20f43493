import unittest

from cv_scoring.application.services.tokenizer import STOPWORDS, generate_ngrams, stem, tokenize


class TokenizerTests(unittest.TestCase):
    def test_drops_stopwords_and_stems_literally(self):
        self.assertEqual(tokenize("The Running Developers"), ["runn", "developer"])

    def test_strips_punctuation_but_keeps_hyphens(self):
        self.assertEqual(tokenize("Node.js, C++ & SQL!"), ["node", "sql"])
        self.assertEqual(tokenize("front-end developer"), ["front-end", "developer"])

    def test_short_tokens_are_dropped(self):
        self.assertEqual(tokenize("AI ML UX at scale"), ["scale"])

    def test_french_stopwords(self):
        # accented letters become separators; "je", "et", "les" are stopwords
        self.assertEqual(
            tokenize("Je suis développeur et les projets"),
            ["sui", "veloppeur", "projet"],
        )
        self.assertIn("elles", STOPWORDS)

    def test_empty_input(self):
        self.assertEqual(tokenize(""), [])
        self.assertEqual(tokenize(None), [])
        self.assertEqual(tokenize("   \n\t "), [])

    def test_keeps_duplicates_in_order(self):
        self.assertEqual(tokenize("python java python"), ["python", "java", "python"])


class StemTests(unittest.TestCase):
    def test_rule_priority(self):
        cases = {
            "building": "build",
            "tested": "test",
            "boxes": "box",
            "classes": "class",
            "class": "class",
            "skills": "skill",
            "requirements": "requirement",
            "management": "manage",
            "automation": "automa",
            "python": "python",
        }
        for word, expected in cases.items():
            with self.subTest(word=word):
                self.assertEqual(stem(word), expected)

    def test_no_reapplication(self):
        # "ings" -> strip "s" only, not "ing" afterwards
        self.assertEqual(stem("meetings"), "meeting")


class NGramTests(unittest.TestCase):
    def test_bigrams(self):
        self.assertEqual(generate_ngrams(["front", "end", "dev"]), ["front end", "end dev"])

    def test_trigram_and_too_few_tokens(self):
        self.assertEqual(generate_ngrams(["front", "end", "dev"], 3), ["front end dev"])
        self.assertEqual(generate_ngrams(["front"], 2), [])
        self.assertEqual(generate_ngrams([], 1), [])


if __name__ == "__main__":
    unittest.main()
