"""FAISS vector store with passage-text mapping and persistence."""

from __future__ import annotations

import asyncio
import json
import os
from pathlib import Path

import faiss
import numpy as np

from agentic_rag.exceptions import RetrievalError
from agentic_rag.models.domain import RetrievedPassage
from agentic_rag.observability.logger import get_logger

logger = get_logger("faiss_store")


class FAISSVectorStore:
    """Cosine-similarity index; scores fall in [-1, 1]."""

    def __init__(self, dimensions: int, index_path: str | None = None) -> None:
        self._dimensions = dimensions
        self._index_path = index_path
        self._index = faiss.IndexIDMap(faiss.IndexFlatIP(dimensions))
        self._texts: dict[int, str] = {}
        self._next_id: int = 0
        self._write_lock = asyncio.Lock()

        if index_path:
            self._try_load(index_path)

    def _try_load(self, path: str) -> None:
        index_file = os.path.join(path, "index.faiss")
        mapping_file = os.path.join(path, "passages.json")
        if os.path.exists(index_file) and os.path.exists(mapping_file):
            self._index = faiss.read_index(index_file)
            with open(mapping_file, encoding="utf-8") as f:
                data = json.load(f)
            self._texts = {int(k): v for k, v in data["texts"].items()}
            self._next_id = data["next_id"]
            logger.info("faiss_loaded", size=self._index.ntotal, path=path)

    def add(self, texts: list[str], embeddings: np.ndarray) -> None:
        if len(texts) == 0:
            return
        embeddings = embeddings.astype(np.float32)
        faiss.normalize_L2(embeddings)
        int_ids = list(range(self._next_id, self._next_id + len(texts)))
        for int_id, text in zip(int_ids, texts):
            self._texts[int_id] = text
        self._next_id += len(texts)
        self._index.add_with_ids(embeddings, np.array(int_ids, dtype=np.int64))
        logger.info("faiss_added", count=len(texts), total=self._index.ntotal)

    async def add_texts(self, texts: list[str], embeddings: list[list[float]]) -> None:
        async with self._write_lock:
            await asyncio.to_thread(self.add, texts, np.array(embeddings, dtype=np.float32))

    def search(
        self, query_embedding: np.ndarray, max_results: int, min_score: float
    ) -> list[RetrievedPassage]:
        if self._index.ntotal == 0 or max_results <= 0:
            return []
        query_embedding = query_embedding.astype(np.float32).reshape(1, -1)
        faiss.normalize_L2(query_embedding)
        scores, indices = self._index.search(
            query_embedding, min(max_results, self._index.ntotal)
        )
        results = []
        for idx, score in zip(indices[0], scores[0]):
            idx = int(idx)
            if idx == -1 or float(score) < min_score:
                continue
            text = self._texts.get(idx)
            if text is not None:
                results.append(
                    RetrievedPassage(text=text, score=float(score), rank=len(results) + 1)
                )
        return results

    async def find_relevant(
        self,
        query_embedding: list[float],
        max_results: int,
        min_score: float,
    ) -> list[RetrievedPassage]:
        try:
            query = np.array(query_embedding, dtype=np.float32)
            return await asyncio.to_thread(self.search, query, max_results, min_score)
        except Exception as e:
            raise RetrievalError(f"FAISS search failed: {e}") from e

    def save(self, path: str | None = None) -> None:
        path = path or self._index_path
        if not path:
            return
        Path(path).mkdir(parents=True, exist_ok=True)
        faiss.write_index(self._index, os.path.join(path, "index.faiss"))
        with open(os.path.join(path, "passages.json"), "w", encoding="utf-8") as f:
            json.dump({"texts": self._texts, "next_id": self._next_id}, f)
        logger.info("faiss_saved", path=path, size=self._index.ntotal)

    @property
    def size(self) -> int:
        return self._index.ntotal
