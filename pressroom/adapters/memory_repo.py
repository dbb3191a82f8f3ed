"""
In-memory document repository.

Implements DocumentRepoPort for development, the HTTP surface's default
wiring, and tests. Last write wins; nothing survives the process.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Any
from uuid import uuid4


class DocumentNotFoundError(LookupError):
    """Raised when updating a document that does not exist."""

    def __init__(self, document_id: str) -> None:
        self.document_id = document_id
        super().__init__(f"Document not found: {document_id}")


class InMemoryDocumentRepo:
    """Dict-backed DocumentRepoPort."""

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}
        self._associations: dict[str, list[str]] = {}
        # Abandoned attempts may still write from worker threads
        self._lock = threading.Lock()

    def insert_document(self, fields: dict[str, Any]) -> dict[str, Any]:
        document_id = str(uuid4())
        row = {**fields, "id": document_id}
        with self._lock:
            self._documents[document_id] = row
        return dict(row)

    def update_document(self, document_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        with self._lock:
            if document_id not in self._documents:
                raise DocumentNotFoundError(document_id)
            row = {**self._documents[document_id], **fields, "id": document_id}
            self._documents[document_id] = row
        return dict(row)

    def replace_associations(self, document_id: str, association_ids: Sequence[str]) -> None:
        with self._lock:
            self._associations[document_id] = list(dict.fromkeys(association_ids))

    def get(self, document_id: str) -> dict[str, Any] | None:
        with self._lock:
            row = self._documents.get(document_id)
        return dict(row) if row is not None else None

    def associations(self, document_id: str) -> list[str]:
        with self._lock:
            return list(self._associations.get(document_id, []))

    def count(self) -> int:
        with self._lock:
            return len(self._documents)
