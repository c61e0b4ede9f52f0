"""
Keyed-document write surface used by the seeder.

A batch queues full-document upserts and sends them as one unit on
commit. Field values may be SERVER_TIMESTAMP, which the store resolves
with its own clock when the batch is committed.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Callable, Optional
import copy
import structlog

logger = structlog.get_logger(__name__)


class ServerTimestamp:
    """Placeholder for "the store server's time at commit"."""

    def __repr__(self) -> str:
        return "SERVER_TIMESTAMP"


SERVER_TIMESTAMP = ServerTimestamp()

# Postgres special timestamp input, evaluated by the database as the
# start time of the current transaction.
POSTGRES_NOW = "now"


def encode_fields(data: dict[str, Any], now: Any = POSTGRES_NOW) -> dict[str, Any]:
    """Replace top-level SERVER_TIMESTAMP values with `now`."""
    return {
        key: (now if value is SERVER_TIMESTAMP else value)
        for key, value in data.items()
    }


class WriteBatch(ABC):
    """
    Pending writes committed together.

    A batch is single-use: once committed (or failed) it cannot be
    committed again.
    """

    def __init__(self):
        self._writes: list[tuple[str, str, dict[str, Any]]] = []
        self._committed = False

    def set(self, collection: str, key: str, data: dict[str, Any]) -> "WriteBatch":
        """Queue a full-document upsert of `data` under `key`."""
        if self._committed:
            raise RuntimeError("Batch already committed")
        self._writes.append((collection, key, dict(data)))
        return self

    def __len__(self) -> int:
        return len(self._writes)

    def commit(self) -> None:
        """Send every queued write. Blocks until the store answers."""
        if self._committed:
            raise RuntimeError("Batch already committed")
        self._committed = True
        if not self._writes:
            return
        self._commit(self._writes)

    @abstractmethod
    def _commit(self, writes: list[tuple[str, str, dict[str, Any]]]) -> None:
        ...


class DocumentStore(ABC):
    """Factory for write batches."""

    @abstractmethod
    def batch(self) -> WriteBatch:
        ...


# ===================
# SUPABASE
# ===================

class SupabaseWriteBatch(WriteBatch):
    """
    Batch sent as one PostgREST bulk upsert per table.

    PostgREST runs a bulk upsert in a single transaction, so each
    table's rows land together or not at all. On conflict only the
    columns present in the row are updated: a document that must
    replace the old row has to carry every column, null where empty.
    """

    def __init__(self, client, key_column: str = "id"):
        super().__init__()
        self.client = client
        self.key_column = key_column

    def _commit(self, writes: list[tuple[str, str, dict[str, Any]]]) -> None:
        rows_by_table: dict[str, list[dict[str, Any]]] = {}
        for collection, key, data in writes:
            row = encode_fields(data)
            row[self.key_column] = key
            rows_by_table.setdefault(collection, []).append(row)

        for table, rows in rows_by_table.items():
            logger.debug("batch_upsert_start", table=table, rows=len(rows))
            (
                self.client.table(table)
                .upsert(rows, on_conflict=self.key_column)
                .execute()
            )
            logger.debug("batch_upsert_complete", table=table, rows=len(rows))


class SupabaseDocumentStore(DocumentStore):
    """Document store over Supabase tables (one collection per table)."""

    def __init__(self, client, key_column: str = "id"):
        self.client = client
        self.key_column = key_column

    def batch(self) -> SupabaseWriteBatch:
        return SupabaseWriteBatch(self.client, key_column=self.key_column)


# ===================
# IN MEMORY
# ===================

class InMemoryWriteBatch(WriteBatch):
    """Batch applied to an InMemoryDocumentStore."""

    def __init__(self, store: "InMemoryDocumentStore"):
        super().__init__()
        self.store = store

    def _commit(self, writes: list[tuple[str, str, dict[str, Any]]]) -> None:
        self.store._apply(writes)


class InMemoryDocumentStore(DocumentStore):
    """
    Store kept in process memory.

    Used for dry runs and tests. `fail_on_commit` makes the Nth commit
    (1-indexed) raise without applying anything.
    """

    def __init__(
        self,
        fail_on_commit: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.collections: dict[str, dict[str, dict[str, Any]]] = {}
        self.commits: list[list[str]] = []
        self.fail_on_commit = fail_on_commit
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self._attempts = 0

    def batch(self) -> InMemoryWriteBatch:
        return InMemoryWriteBatch(self)

    def get(self, collection: str, key: str) -> Optional[dict[str, Any]]:
        document = self.collections.get(collection, {}).get(key)
        return copy.deepcopy(document) if document is not None else None

    def keys(self, collection: str) -> list[str]:
        return list(self.collections.get(collection, {}))

    def _apply(self, writes: list[tuple[str, str, dict[str, Any]]]) -> None:
        self._attempts += 1
        if self.fail_on_commit is not None and self._attempts == self.fail_on_commit:
            raise ConnectionError(f"Simulated failure on commit {self._attempts}")

        now = self.clock()
        for collection, key, data in writes:
            self.collections.setdefault(collection, {})[key] = copy.deepcopy(
                encode_fields(data, now=now)
            )
        self.commits.append([key for _, key, _ in writes])
