"""
Persistence collaborator port.

Any method may fail with a transient or permanent error; the publish
orchestrator treats every failure as retry-eligible up to its cap.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol


class DocumentRepoPort(Protocol):
    """Primary document writes and secondary associations."""

    def insert_document(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Insert a document. Returned mapping must contain ``id``."""
        ...

    def update_document(self, document_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        """Update a document by id and return the stored row."""
        ...

    def replace_associations(self, document_id: str, association_ids: Sequence[str]) -> None:
        """Clear and re-create the document's tag associations."""
        ...
