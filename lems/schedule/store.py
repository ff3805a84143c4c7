"""Firestore persistence for imported event data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from google.api_core.exceptions import GoogleAPICallError

from lems.core.constants import (
    EVENT_ID_FIELD,
    EVENT_STATES_COLLECTION,
    EVENTS_COLLECTION,
    FIRESTORE_BATCH_LIMIT,
    MATCHES_COLLECTION,
    ROOMS_COLLECTION,
    SESSIONS_COLLECTION,
    TABLES_COLLECTION,
    TEAMS_COLLECTION,
)
from lems.errors import StoreFailureError

from .models import (
    Event,
    EventState,
    JudgingRoom,
    JudgingSession,
    RobotGameMatch,
    RobotGameTable,
    Team,
)

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

EVENT_DATA_COLLECTIONS = [
    TEAMS_COLLECTION,
    TABLES_COLLECTION,
    ROOMS_COLLECTION,
    MATCHES_COLLECTION,
    SESSIONS_COLLECTION,
]


def _chunks(items: list[Any], size: int = FIRESTORE_BATCH_LIMIT) -> list[list[Any]]:
    return [items[i : i + size] for i in range(0, len(items), size)]


class EventStore:
    """Reads and writes one event's documents through a Firestore client.

    Every write is reported as a ``StoreFailureError`` naming the step that
    failed. Nothing is retried.
    """

    def __init__(self, db: Client) -> None:
        self.db = db

    def _insert(self, collection: str, documents: list[dict[str, Any]], step: str) -> None:
        """Write new documents in batches and check every write was acknowledged."""
        collection_ref = self.db.collection(collection)
        try:
            for chunk in _chunks(documents):
                batch = self.db.batch()
                for document in chunk:
                    batch.set(collection_ref.document(), document)
                results = batch.commit()
                if results is None or len(results) != len(chunk):
                    raise StoreFailureError(
                        step, f"{len(results or [])} of {len(chunk)} writes acknowledged"
                    )
        except GoogleAPICallError as e:
            raise StoreFailureError(step, str(e)) from e

    def _fetch(self, collection: str, event_id: str, step: str) -> list[dict[str, Any]]:
        """Return every document of an event in a collection, with its id."""
        try:
            docs = (
                self.db.collection(collection)
                .where(filter=firestore.FieldFilter(EVENT_ID_FIELD, "==", event_id))
                .stream()
            )
            results = []
            for doc in docs:
                data = doc.to_dict() or {}
                data["id"] = doc.id
                results.append(data)
            return results
        except GoogleAPICallError as e:
            raise StoreFailureError(step, str(e)) from e

    def insert_teams(self, teams: list[Team]) -> None:
        """Insert teams."""
        self._insert(TEAMS_COLLECTION, cast(list[dict[str, Any]], teams), "teams")

    def insert_tables(self, tables: list[RobotGameTable]) -> None:
        """Insert robot game tables."""
        self._insert(TABLES_COLLECTION, cast(list[dict[str, Any]], tables), "tables")

    def insert_rooms(self, rooms: list[JudgingRoom]) -> None:
        """Insert judging rooms."""
        self._insert(ROOMS_COLLECTION, cast(list[dict[str, Any]], rooms), "rooms")

    def insert_matches(self, matches: list[RobotGameMatch]) -> None:
        """Insert robot game matches."""
        self._insert(MATCHES_COLLECTION, cast(list[dict[str, Any]], matches), "matches")

    def insert_sessions(self, sessions: list[JudgingSession]) -> None:
        """Insert judging sessions."""
        self._insert(
            SESSIONS_COLLECTION, cast(list[dict[str, Any]], sessions), "sessions"
        )

    def fetch_teams(self, event_id: str) -> list[Team]:
        """Fetch an event's stored teams."""
        return cast(list[Team], self._fetch(TEAMS_COLLECTION, event_id, "teams"))

    def fetch_tables(self, event_id: str) -> list[RobotGameTable]:
        """Fetch an event's stored tables."""
        return cast(
            list[RobotGameTable], self._fetch(TABLES_COLLECTION, event_id, "tables")
        )

    def fetch_rooms(self, event_id: str) -> list[JudgingRoom]:
        """Fetch an event's stored rooms."""
        return cast(list[JudgingRoom], self._fetch(ROOMS_COLLECTION, event_id, "rooms"))

    def get_event(self, event_id: str) -> Event | None:
        """Fetch an event, or None if it doesn't exist."""
        try:
            doc = cast(
                "DocumentSnapshot",
                self.db.collection(EVENTS_COLLECTION).document(event_id).get(),
            )
        except GoogleAPICallError as e:
            raise StoreFailureError("event", str(e)) from e
        if not doc.exists:
            return None
        event = cast(Event, doc.to_dict() or {})
        event["id"] = doc.id
        return event

    def set_event_has_state(self, event_id: str, has_state: bool) -> None:
        """Flag whether the event holds imported data."""
        try:
            self.db.collection(EVENTS_COLLECTION).document(event_id).update(
                {"hasState": has_state}
            )
        except GoogleAPICallError as e:
            raise StoreFailureError("event", str(e)) from e

    def has_event_state(self, event_id: str) -> bool:
        """Whether a schedule has already been imported for the event."""
        try:
            doc = self.db.collection(EVENT_STATES_COLLECTION).document(event_id).get()
        except GoogleAPICallError as e:
            raise StoreFailureError("event state", str(e)) from e
        return bool(doc.exists)

    def has_event_data(self, event_id: str) -> bool:
        """Whether any imported document of the event is still stored."""
        for collection in EVENT_DATA_COLLECTIONS:
            try:
                docs = (
                    self.db.collection(collection)
                    .where(filter=firestore.FieldFilter(EVENT_ID_FIELD, "==", event_id))
                    .limit(1)
                    .stream()
                )
                if any(True for _ in docs):
                    return True
            except GoogleAPICallError as e:
                raise StoreFailureError(collection, str(e)) from e
        return False

    def add_event_state(self, event_id: str) -> EventState:
        """Create the initial live state for an event."""
        state: EventState = {
            "eventId": event_id,
            "activeMatch": None,
            "loadedMatch": None,
            "currentSession": None,
            "currentMatch": 0,
            "activeSession": 0,
        }
        try:
            self.db.collection(EVENT_STATES_COLLECTION).document(event_id).set(
                dict(state)
            )
        except GoogleAPICallError as e:
            raise StoreFailureError("event state", str(e)) from e
        return state

    def delete_event_data(self, event_id: str) -> None:
        """Delete everything an import created for the event."""
        for collection in EVENT_DATA_COLLECTIONS:
            refs = [doc["id"] for doc in self._fetch(collection, event_id, collection)]
            try:
                for chunk in _chunks(refs):
                    batch = self.db.batch()
                    for doc_id in chunk:
                        batch.delete(self.db.collection(collection).document(doc_id))
                    batch.commit()
            except GoogleAPICallError as e:
                raise StoreFailureError(collection, str(e)) from e

        if not self.has_event_state(event_id):
            return
        try:
            self.db.collection(EVENT_STATES_COLLECTION).document(event_id).delete()
        except GoogleAPICallError as e:
            raise StoreFailureError("event state", str(e)) from e
