"""
Document persistence for learner journals.

A journal is one JSON document per learner. Writes are conditional on the
version read, so two writers racing on the same document cannot silently
overwrite each other: the loser gets VersionConflict and re-reads.
"""

from __future__ import annotations

import copy
import threading
from typing import Optional, Protocol

from lingobot.errors import DocumentStoreError, VersionConflict
from lingobot.logger_module import get_logger

logger = get_logger("lingobot")


class DocumentStore(Protocol):
    def load(self, key: str) -> tuple[Optional[dict], int]:
        """Return (document, version). A missing document is (None, 0)."""
        ...

    def save(self, key: str, document: dict, expected_version: int) -> int:
        """Write the document if it is still at expected_version and return the new version."""
        ...


class MemoryDocumentStore:
    """In-process document store, used for local runs and tests."""

    def __init__(self):
        self._documents: dict[str, tuple[dict, int]] = {}
        self._lock = threading.Lock()

    def load(self, key: str) -> tuple[Optional[dict], int]:
        with self._lock:
            if key not in self._documents:
                return None, 0
            document, version = self._documents[key]
            return copy.deepcopy(document), version

    def save(self, key: str, document: dict, expected_version: int) -> int:
        with self._lock:
            current = self._documents.get(key, (None, 0))[1]
            if current != expected_version:
                raise VersionConflict(key, expected_version, current)
            self._documents[key] = (copy.deepcopy(document), current + 1)
            return current + 1


class SupabaseDocumentStore:
    """
    Document store on a Supabase table.

    Expected table layout:
        learner_id text primary key, document jsonb, version integer
    """

    UNIQUE_VIOLATION = "23505"

    def __init__(self, client, table: str = "journals"):
        self.client = client
        self.table = table

    def load(self, key: str) -> tuple[Optional[dict], int]:
        try:
            response = (
                self.client.table(self.table)
                .select("document, version")
                .eq("learner_id", key)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error loading journal document {key}: {e}")
            raise DocumentStoreError(f"Failed to load document {key}") from e

        if not response.data:
            return None, 0
        row = response.data[0]
        return row["document"], int(row["version"])

    def save(self, key: str, document: dict, expected_version: int) -> int:
        new_version = expected_version + 1
        try:
            if expected_version == 0:
                response = (
                    self.client.table(self.table)
                    .insert({"learner_id": key, "document": document, "version": new_version})
                    .execute()
                )
            else:
                response = (
                    self.client.table(self.table)
                    .update({"document": document, "version": new_version})
                    .eq("learner_id", key)
                    .eq("version", expected_version)
                    .execute()
                )
        except Exception as e:
            if getattr(e, "code", None) == self.UNIQUE_VIOLATION:
                raise VersionConflict(key, expected_version, None) from e
            logger.error(f"Error saving journal document {key}: {e}")
            raise DocumentStoreError(f"Failed to save document {key}") from e

        if not response.data:
            raise VersionConflict(key, expected_version, None)
        return new_version
