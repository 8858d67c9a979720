"""Offline hashed term-frequency embeddings.

Every text maps to a fixed 384-dimensional vector with no network access.
Each distinct token is spread over three dimensions by a seeded rolling
hash, and the bigram starting at its first occurrence adds a half-weight
feature. Identical text always produces a bit-identical vector.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

import numpy as np

from cairn.semantic.tokenizer import tokenize

EMBEDDING_DIMS = 384

_HASH_SEEDS = 3
_SEED_MULTIPLIER = 2654435761
_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193
_BIGRAM_WEIGHT = 0.5

# Little-endian float32, the stored blob format
_WIRE_DTYPE = np.dtype("<f4")


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _token_hash(token: str, seed: int) -> int:
    h = _to_int32(seed * _SEED_MULTIPLIER)
    for ch in token:
        h = _to_int32((h << 5) - h + ord(ch))
    return h


def _fnv1a(text: str) -> int:
    h = _to_int32(_FNV_OFFSET)
    for ch in text:
        h = _to_int32((h ^ ord(ch)) * _FNV_PRIME)
    return h


def embed_tokens(tokens: Sequence[str], dims: int = EMBEDDING_DIMS) -> np.ndarray:
    """Embed an already tokenized stream as a float64 array."""
    vector = np.zeros(dims, dtype=np.float64)
    if not tokens:
        return vector

    total = len(tokens)
    first_index: dict[str, int] = {}
    for i, token in enumerate(tokens):
        first_index.setdefault(token, i)

    for token, count in Counter(tokens).items():
        tf = count / total

        for seed in range(_HASH_SEEDS):
            h = _token_hash(token, seed)
            sign = 1.0 if ((h >> 16) & 1) == 0 else -1.0
            vector[abs(h) % dims] += sign * tf

        pos = first_index[token]
        if pos < total - 1:
            bigram = f"{token}_{tokens[pos + 1]}"
            vector[abs(_fnv1a(bigram)) % dims] += tf * _BIGRAM_WEIGHT

    norm = np.linalg.norm(vector)
    if norm > 0:
        vector /= norm
    return vector


def embed(text: str) -> list[float]:
    """Return the unit-norm fingerprint of ``text``.

    Text with no content tokens yields the all-zero vector.
    """
    return embed_tokens(tokenize(text)).tolist()


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity over the overlapping prefix of two vectors.

    Returns 0.0 when either side is empty or has zero norm.
    """
    n = min(len(a), len(b))
    if n == 0:
        return 0.0
    va = np.asarray(a[:n], dtype=np.float64)
    vb = np.asarray(b[:n], dtype=np.float64)
    denom = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denom == 0:
        return 0.0
    return float(np.dot(va, vb) / denom)


def encode_embedding(vector: Sequence[float]) -> bytes:
    """Pack a vector as contiguous little-endian float32 (4 bytes per value)."""
    return np.asarray(vector, dtype=_WIRE_DTYPE).tobytes()


def decode_embedding(blob: bytes) -> list[float]:
    """Inverse of encode_embedding.

    Raises:
        ValueError: If the blob length is not a multiple of 4.
    """
    if len(blob) % _WIRE_DTYPE.itemsize:
        raise ValueError(
            f"Embedding blob length {len(blob)} is not a multiple of "
            f"{_WIRE_DTYPE.itemsize}"
        )
    return np.frombuffer(blob, dtype=_WIRE_DTYPE).astype(np.float64).tolist()
