"""In-memory knowledge base.

Documents are kept in insertion order for the lifetime of the session. The
store itself never deduplicates: callers check ``contains`` before extracting
so that no work is wasted on files that are already present.
"""
from typing import Iterable, List

from models import Document


class DocumentStore:
    def __init__(self):
        self._documents: List[Document] = []

    def add(self, documents: Iterable[Document]) -> int:
        """Append a whole batch in one step and return how many were added."""
        batch = list(documents)
        self._documents = self._documents + batch
        return len(batch)

    def clear(self) -> int:
        removed = len(self._documents)
        self._documents = []
        return removed

    def list(self) -> List[Document]:
        return list(self._documents)

    def contains(self, name: str, byte_size: int) -> bool:
        return any(d.fingerprint == (name, byte_size) for d in self._documents)

    def aggregate_character_count(self) -> int:
        return sum(len(d.content) for d in self._documents)

    def estimated_tokens(self) -> int:
        # Rough display figure, about four characters per token
        return self.aggregate_character_count() // 4

    def __len__(self) -> int:
        return len(self._documents)
