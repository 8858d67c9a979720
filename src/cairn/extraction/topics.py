"""Topic phrases from bigram and keyword frequency."""

from collections import Counter

from cairn.extraction.summary import meeting_text
from cairn.semantic.tokenizer import extract_keywords, tokenize

# Vocabulary of extraction prompts, never a topic in its own right
PROMPT_WORDS: frozenset[str] = frozenset(
    {
        "extract", "analyze", "meeting", "note", "json", "return", "object",
        "array", "summary", "topics", "names", "person", "keyword", "phrase",
        "brief", "sentence", "information", "data", "valid", "following",
        "mentioned", "conversation", "discussed", "include", "distinct",
        "parse",
    }
)  # fmt: skip

MAX_TOPICS = 8
MAX_BIGRAMS = 5
KEYWORD_POOL = 15


def extract_topics(text: str) -> list[str]:
    """Return up to eight topics, bigram phrases first.

    The five most frequent adjacent word pairs come first, then single
    keywords that are not already part of a chosen topic.
    """
    content = meeting_text(text)
    keywords = [
        kw for kw in extract_keywords(content, KEYWORD_POOL) if kw not in PROMPT_WORDS
    ]

    words = tokenize(content)
    bigrams: Counter[str] = Counter()
    for first, second in zip(words, words[1:], strict=False):
        if first in PROMPT_WORDS or second in PROMPT_WORDS:
            continue
        bigrams[f"{first} {second}"] += 1

    topics = [bigram for bigram, _ in bigrams.most_common(MAX_BIGRAMS)]
    for kw in keywords:
        if len(topics) >= MAX_TOPICS:
            break
        if not any(kw in topic for topic in topics):
            topics.append(kw)

    return topics[:MAX_TOPICS]
