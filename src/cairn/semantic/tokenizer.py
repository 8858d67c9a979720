"""Tokenizer and stop-word lexicon shared by embeddings and extraction."""

import re
from collections import Counter

STOP_WORDS: frozenset[str] = frozenset(
    {
        "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for",
        "of", "with", "by", "from", "is", "was", "are", "were", "be", "been",
        "being", "have", "has", "had", "do", "does", "did", "will", "would",
        "could", "should", "may", "might", "shall", "can", "need", "dare",
        "ought", "used", "i", "me", "my", "we", "our", "you", "your", "he",
        "him", "his", "she", "her", "it", "its", "they", "them", "their",
        "what", "which", "who", "whom", "this", "that", "these", "those",
        "am", "about", "above", "after", "again", "against", "all",
        "any", "because", "before", "below", "between", "both", "during",
        "each", "few", "further", "here", "how", "into", "just", "more",
        "most", "no", "nor", "not", "only", "other", "out", "over", "own",
        "same", "so", "some", "such", "than", "then", "there", "through",
        "too", "under", "until", "up", "very", "s", "t", "don", "ll", "ve",
        "re", "d", "m", "o", "ain", "aren", "couldn", "didn", "doesn",
        "hadn", "hasn", "haven", "isn", "ma", "mightn", "mustn", "needn",
        "shan", "shouldn", "wasn", "weren", "won", "wouldn",
    }
)  # fmt: skip

_NON_WORD = re.compile(r"[^a-z0-9\s'-]")


def tokenize(text: str) -> list[str]:
    """Split text into lower-cased content words.

    Characters outside ``[a-z0-9\\s'-]`` become spaces. Single-character
    tokens and stop words are dropped. Never raises; empty input gives [].
    """
    if not text:
        return []
    cleaned = _NON_WORD.sub(" ", text.lower())
    return [w for w in cleaned.split() if len(w) > 1 and w not in STOP_WORDS]


def extract_keywords(text: str, max_keywords: int = 10) -> list[str]:
    """Return the most frequent distinct tokens, ties by first occurrence."""
    # Counter.most_common is stable for equal counts
    return [word for word, _ in Counter(tokenize(text)).most_common(max_keywords)]
