# Minimal tokenizer: lowercase -> strip punctuation -> stopwords -> crude stems
from typing import Iterable, List
import re


# English + French function words (articles, conjunctions, auxiliaries, pronouns)
STOPWORDS = frozenset([
    "a", "an", "the", "in", "on", "at", "to", "for", "of", "with", "by",
    "and", "or", "but", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "should",
    "can", "could", "may", "might", "must", "i", "you", "he", "she", "it",
    "we", "they", "my", "your", "his", "her", "its", "our", "their",
    "le", "la", "les", "un", "une", "des", "et", "ou", "mais", "donc",
    "est", "sont", "je", "tu", "il", "elle", "nous", "vous", "ils", "elles",
])

_NON_WORD = re.compile(r"[^a-z0-9\s-]")  # keep alphanumerics, whitespace and hyphens
_MIN_TOKEN_LEN = 3


def stem(word: str) -> str:
    """
    Naive suffix stripping. First matching rule wins and is never reapplied,
    so "running" -> "runn" and "requirements" -> "requirement" (the plural
    rule fires before "ment" is ever looked at).
    """
    if word.endswith("ing"):
        return word[:-3]
    if word.endswith("ed"):
        return word[:-2]
    if word.endswith("es"):
        return word[:-2]
    if word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    if word.endswith("ment"):
        return word[:-4]
    if word.endswith("tion"):
        return word[:-4]
    return word


def tokenize(text: str | None) -> List[str]:
    # e.g. "The Running Developers" -> ["runn", "developer"]
    if not text:
        return []
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [
        stem(tok)
        for tok in cleaned.split()
        if len(tok) >= _MIN_TOKEN_LEN and tok not in STOPWORDS
    ]


def generate_ngrams(tokens: Iterable[str], n: int = 2) -> List[str]:
    """["front", "end", "dev"] -> ["front end", "end dev"]"""
    toks = list(tokens)
    if n <= 0 or len(toks) < n:
        return []
    return [" ".join(toks[i:i + n]) for i in range(len(toks) - n + 1)]
