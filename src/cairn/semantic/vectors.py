"""Numpy-based brute-force vector index.

Holds unit-normalised fingerprints keyed by record id. At personal-CRM
scale (hundreds to a few thousand people and meetings, 384 dims) a single
matmul per query is fast enough that no approximate index is needed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

import numpy as np

logger = logging.getLogger(__name__)


class NumpyVectorIndex:
    """Brute-force cosine similarity using numpy.

    New vectors are buffered in a list and flushed into the main
    matrix lazily (before search or remove) to avoid O(n) array
    copies on every add().
    """

    def __init__(self) -> None:
        self._vectors: np.ndarray = np.empty((0, 0), dtype=np.float32)
        self._ids: list[int] = []
        self._id_to_index: dict[int, int] = {}
        self._pending: list[np.ndarray] = []
        self._dims: int | None = None

    @classmethod
    def from_items(
        cls, items: Iterable[tuple[int, Sequence[float] | None]]
    ) -> NumpyVectorIndex:
        """Build an index from (id, embedding) pairs, skipping missing vectors."""
        index = cls()
        for item_id, embedding in items:
            if embedding:
                index.add(item_id, embedding)
        return index

    def _flush(self) -> None:
        """Consolidate pending vectors into the main matrix."""
        if not self._pending:
            return
        new_block = np.stack(self._pending)
        if self._vectors.size == 0:
            self._vectors = new_block
        else:
            self._vectors = np.vstack([self._vectors, new_block])
        self._pending.clear()

    @property
    def count(self) -> int:
        return len(self._ids)

    def search(
        self, query_embedding: Sequence[float], limit: int = 10
    ) -> list[tuple[int, float]]:
        """Return (id, similarity) pairs sorted by descending similarity."""
        if len(self._ids) == 0:
            return []

        self._flush()

        q = np.array(query_embedding, dtype=np.float32)
        if q.shape[0] != self._vectors.shape[1]:
            logger.warning(
                "vector_dimension_mismatch",
                extra={
                    "query_dims": q.shape[0],
                    "index_dims": self._vectors.shape[1],
                },
            )
            return []
        norm = np.linalg.norm(q)
        if norm == 0:
            return []
        q /= norm

        scores = self._vectors @ q

        k = min(limit, len(self._ids))
        if k >= len(self._ids):
            top_k = np.argsort(-scores, kind="stable")[:k]
        else:
            top_k = np.argpartition(scores, -k)[-k:]
            top_k = top_k[np.argsort(-scores[top_k], kind="stable")]

        return [(self._ids[i], float(scores[i])) for i in top_k]

    def similarity(self, item_id: int, query_embedding: Sequence[float]) -> float:
        """Cosine similarity between one indexed vector and a query.

        Returns 0.0 when the id is not indexed or the query has zero norm.
        """
        idx = self._id_to_index.get(item_id)
        if idx is None:
            return 0.0
        self._flush()
        q = np.array(query_embedding, dtype=np.float32)
        norm = np.linalg.norm(q)
        if norm == 0 or q.shape[0] != self._vectors.shape[1]:
            return 0.0
        return float(self._vectors[idx] @ (q / norm))

    def add(self, item_id: int, embedding: Sequence[float]) -> None:
        """Add or update a vector."""
        vec = np.array(embedding, dtype=np.float32)
        norm = np.linalg.norm(vec)
        if norm == 0:
            logger.debug("vector_skipped_zero_norm", extra={"item_id": item_id})
            self.remove(item_id)
            return
        vec /= norm

        if self._dims is None:
            self._dims = vec.shape[0]
        elif vec.shape[0] != self._dims:
            logger.warning(
                "vector_dimension_mismatch",
                extra={
                    "item_id": item_id,
                    "dims": vec.shape[0],
                    "index_dims": self._dims,
                },
            )
            return

        if item_id in self._id_to_index:
            idx = self._id_to_index[item_id]
            materialized = self._vectors.shape[0] if self._vectors.size > 0 else 0
            if idx < materialized:
                self._vectors[idx] = vec
            else:
                self._pending[idx - materialized] = vec
            return

        self._id_to_index[item_id] = len(self._ids)
        self._ids.append(item_id)
        self._pending.append(vec)

    def remove(self, item_id: int) -> None:
        """Remove a vector by ID."""
        idx = self._id_to_index.pop(item_id, None)
        if idx is None:
            return

        self._flush()

        last_idx = len(self._ids) - 1
        if idx != last_idx:
            # Swap with last element
            last_id = self._ids[last_idx]
            self._ids[idx] = last_id
            self._id_to_index[last_id] = idx
            self._vectors[idx] = self._vectors[last_idx]

        self._ids.pop()
        if len(self._ids) == 0:
            self._vectors = np.empty((0, 0), dtype=np.float32)
            self._dims = None
        else:
            self._vectors = self._vectors[: len(self._ids)]

    def clear(self) -> None:
        """Remove all vectors from the index."""
        self._ids.clear()
        self._id_to_index.clear()
        self._pending.clear()
        self._vectors = np.empty((0, 0), dtype=np.float32)
        self._dims = None

    def has(self, item_id: int) -> bool:
        """Check if an item has an embedding."""
        return item_id in self._id_to_index

    def get_ids(self) -> set[int]:
        """Get all indexed IDs."""
        return set(self._ids)
