"""Cloud Firestore entry store.

One document per date in a single collection; the document ID is the
date. Ordering and the before-filter are native queries on
``scheduledDate``.

Requires ``dailymuse[cloud]``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger

from dailymuse.core.exceptions import StoreUnavailableError

from ..models import MuseEntry
from ..store import EntryStore


def _require_firestore():
    """Lazy import with clear error message."""
    try:
        from google.api_core import exceptions as gexc
        from google.cloud import firestore

        return firestore, gexc
    except ImportError:
        raise ImportError("Install with: pip install dailymuse[cloud]") from None


class FirestoreEntryStore(EntryStore):
    """Entries as Firestore documents.

    Args:
        collection: Collection name.
        project: GCP project ID. Empty uses the environment default.
        credentials_file: Service-account JSON. Empty uses Application
            Default Credentials.
    """

    name = "firestore"
    supports_conditional_write = True

    def __init__(self, collection: str = "muses", project: str = "", credentials_file: str = "") -> None:
        self.collection_name = collection
        self.project = project
        self.credentials_file = credentials_file
        self._client = None

    @property
    def client(self):
        if self._client is None:
            firestore, _ = _require_firestore()
            kwargs = {}
            if self.project:
                kwargs["project"] = self.project
            if self.credentials_file:
                from google.oauth2 import service_account

                kwargs["credentials"] = service_account.Credentials.from_service_account_file(self.credentials_file)
            self._client = firestore.AsyncClient(**kwargs)
        return self._client

    @property
    def collection(self):
        return self.client.collection(self.collection_name)

    @asynccontextmanager
    async def _api_errors(self, action: str):
        _, gexc = _require_firestore()
        try:
            yield
        except (gexc.PermissionDenied, gexc.Unauthenticated, gexc.Forbidden) as e:
            raise StoreUnavailableError(f"Cannot {action}: {e}", reason="access-denied", backend=self.name) from e
        except gexc.GoogleAPICallError as e:
            raise StoreUnavailableError(f"Cannot {action}: {e}", reason="unavailable", backend=self.name) from e

    async def get(self, date: str) -> MuseEntry | None:
        async with self._api_errors(f"read entry {date}"):
            snapshot = await self.collection.document(date).get()
        if not snapshot.exists:
            return None
        return MuseEntry.from_record(snapshot.to_dict() or {}, key=date)

    async def put(self, date: str, entry: MuseEntry) -> None:
        async with self._api_errors(f"write entry {date}"):
            await self.collection.document(date).set(entry.to_record())

    async def put_if_absent(self, date: str, entry: MuseEntry) -> bool:
        _, gexc = _require_firestore()
        async with self._api_errors(f"write entry {date}"):
            try:
                await self.collection.document(date).create(entry.to_record())
            except gexc.AlreadyExists:
                logger.debug(f"Document {date} already exists; conditional write refused")
                return False
        return True

    async def delete(self, date: str) -> None:
        # Deleting a missing document succeeds server-side.
        async with self._api_errors(f"delete entry {date}"):
            await self.collection.document(date).delete()

    async def _stream(self, query, action: str) -> AsyncIterator[MuseEntry]:
        async with self._api_errors(action):
            async for snapshot in query.stream():
                yield MuseEntry.from_record(snapshot.to_dict() or {}, key=snapshot.id)

    def list_all(self) -> AsyncIterator[MuseEntry]:
        firestore, _ = _require_firestore()
        query = self.collection.order_by("scheduledDate", direction=firestore.Query.DESCENDING)
        return self._stream(query, "list entries")

    def list_before(self, date: str) -> AsyncIterator[MuseEntry]:
        firestore, _ = _require_firestore()
        query = self.collection.where(filter=firestore.FieldFilter("scheduledDate", "<", date)).order_by(
            "scheduledDate", direction=firestore.Query.DESCENDING
        )
        return self._stream(query, f"list entries before {date}")
