"""Offline semantic layer: tokenizer, hashed embeddings, vector index."""

from cairn.semantic.embeddings import (
    EMBEDDING_DIMS,
    cosine_similarity,
    decode_embedding,
    embed,
    encode_embedding,
)
from cairn.semantic.tokenizer import STOP_WORDS, extract_keywords, tokenize
from cairn.semantic.vectors import NumpyVectorIndex

__all__ = [
    "EMBEDDING_DIMS",
    "NumpyVectorIndex",
    "STOP_WORDS",
    "cosine_similarity",
    "decode_embedding",
    "embed",
    "encode_embedding",
    "extract_keywords",
    "tokenize",
]
