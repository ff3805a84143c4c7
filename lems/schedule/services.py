"""Service layer for importing event schedules."""

from __future__ import annotations

import logging
from typing import Union

from .models import Event, ImportResult
from .parser import parse_entities, parse_schedule
from .store import EventStore

logger = logging.getLogger(__name__)


class ScheduleService:
    """Runs schedule imports against an event store."""

    @staticmethod
    def import_schedule(
        store: EventStore, event: Event, data: Union[str, bytes]
    ) -> ImportResult:
        """Import a schedule document into an event in two passes.

        Teams, tables and rooms are extracted and stored first. They are then
        read back so matches and sessions can reference their stored ids. A
        failure in the second pass leaves the first pass's documents in place.
        """
        event_id = event["id"]

        entities = parse_entities(event, data)
        logger.info(
            f"Inserting {len(entities['teams'])} teams, {len(entities['tables'])} "
            f"tables and {len(entities['rooms'])} rooms for event {event_id}"
        )
        store.insert_teams(entities["teams"])
        store.insert_tables(entities["tables"])
        store.insert_rooms(entities["rooms"])

        teams = store.fetch_teams(event_id)
        tables = store.fetch_tables(event_id)
        rooms = store.fetch_rooms(event_id)

        logger.info(f"Parsing schedule for event {event_id}")
        schedule = parse_schedule(event, teams, tables, rooms, data)

        store.insert_sessions(schedule["sessions"])
        store.insert_matches(schedule["matches"])
        logger.info(
            f"Inserted {len(schedule['matches'])} matches and "
            f"{len(schedule['sessions'])} sessions for event {event_id}"
        )

        return {
            "teams": teams,
            "tables": tables,
            "rooms": rooms,
            "matches": schedule["matches"],
            "sessions": schedule["sessions"],
        }

    @staticmethod
    def clean_event_data(store: EventStore, event_id: str) -> None:
        """Remove every document a schedule import created for an event."""
        logger.info(f"Deleting imported data for event {event_id}")
        store.delete_event_data(event_id)
        store.set_event_has_state(event_id, False)
