"""Turn a schedule document into teams, tables, rooms, matches and sessions.

Parsing runs in two passes. ``parse_entities`` extracts the primary entities,
which carry no references. Once they have been stored, ``parse_schedule``
reads the same document again and derives matches and judging sessions that
point at the stored documents by id.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from lems.core.constants import (
    JUDGING_SESSIONS_BLOCK_ID,
    PRACTICE_MATCHES_BLOCK_ID,
    PRESENCE_NO_SHOW,
    RANKING_MATCHES_BLOCK_ID,
    STATUS_NOT_STARTED,
    TEAMS_BLOCK_ID,
)
from lems.errors import (
    MalformedDocumentError,
    UnresolvedReferenceError,
    ValidationError,
)

from .models import (
    Event,
    JudgingRoom,
    JudgingSession,
    MatchParticipant,
    ParsedEntities,
    ParsedSchedule,
    RobotGameMatch,
    RobotGameMatchStage,
    RobotGameTable,
    Team,
)
from .reader import Row, ScheduleBlocks, cell, parse_int

logger = logging.getLogger(__name__)

TEAM_HEADER_ROWS = 1
RESOURCE_HEADER_ROWS = 4

# Columns where team numbers start in match and session rows
MATCH_TEAMS_OFFSET = 4
SESSION_TEAMS_OFFSET = 3


def _split_resource_block(rows: list[Row]) -> tuple[list[str], list[Row]]:
    """Split a match or judging block into resource names and data rows.

    The resource row follows the fixed header rows. Blank names are left out;
    the order of the rest is kept.
    """
    rows = rows[RESOURCE_HEADER_ROWS:]
    if not rows:
        return [], []
    names = [name for name in rows[0][1:] if name.strip()]
    return names, rows[1:]


def _is_blank(row: Row) -> bool:
    return not any(value.strip() for value in row)


def _event_start(event: Event) -> datetime:
    """The event's start date, in the event's own timezone when it has one."""
    start = event["startDate"]
    tz_name = event.get("timezone")
    if not tz_name:
        return start
    try:
        return start.astimezone(ZoneInfo(tz_name))
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ValidationError(f"Unknown event timezone: {tz_name}") from e


def _scheduled_time(event: Event, value: str) -> datetime:
    """Place an ``HH:MM`` time on the event's local start date."""
    hour, _, minute = value.strip().partition(":")
    try:
        return _event_start(event).replace(
            hour=int(hour), minute=int(minute), second=0, microsecond=0
        )
    except ValueError as e:
        raise MalformedDocumentError(f"bad time {value!r}") from e


def _required_int(row: Row, index: int, what: str) -> int:
    value = parse_int(cell(row, index))
    if value is None:
        raise MalformedDocumentError(f"bad {what} {cell(row, index)!r} in row {row}")
    return value


def _team_id(teams_by_number: dict[int, Team], value: str) -> str | None:
    """Resolve a team cell to a team id. Blank cells mean no team."""
    if not value.strip():
        return None
    number = parse_int(value)
    team = teams_by_number.get(number) if number is not None else None
    if team is None:
        raise UnresolvedReferenceError("team", value)
    return team["id"]


def parse_teams(rows: list[Row], event: Event) -> list[Team]:
    """Extract teams from the team roster block."""
    teams: list[Team] = []
    for row in rows[TEAM_HEADER_ROWS:]:
        number = parse_int(cell(row, 0))
        if number is None:
            logger.warning(f"Skipping team row without a team number: {row}")
            continue
        teams.append({
            "eventId": event["id"],
            "number": number,
            "name": cell(row, 1),
            "registered": False,
            "affiliation": {"institution": cell(row, 2), "city": cell(row, 3)},
        })
    return teams


def parse_tables(rows: list[Row], event: Event) -> list[RobotGameTable]:
    """Extract robot game tables from the header of a match block."""
    names, _ = _split_resource_block(rows)
    return [{"eventId": event["id"], "name": name} for name in names]


def parse_rooms(rows: list[Row], event: Event) -> list[JudgingRoom]:
    """Extract judging rooms from the header of the judging block."""
    names, _ = _split_resource_block(rows)
    return [{"eventId": event["id"], "name": name} for name in names]


def get_test_match(event: Event) -> RobotGameMatch:
    """The single test match every event gets, with no teams or time."""
    return {
        "eventId": event["id"],
        "stage": "test",
        "round": None,
        "number": None,
        "scheduledTime": None,
        "status": STATUS_NOT_STARTED,
        "participants": [],
    }


def parse_matches(
    rows: list[Row],
    stage: RobotGameMatchStage,
    event: Event,
    teams: list[Team],
    tables: list[RobotGameTable],
) -> list[RobotGameMatch]:
    """Derive matches from a practice or ranking match block.

    Each row is one match: number, round and ``HH:MM`` start time, then one
    team number per table in the order of the block's table header.
    """
    table_names, rows = _split_resource_block(rows)
    tables_by_name = {table["name"]: table for table in tables}
    teams_by_number = {team["number"]: team for team in teams}

    matches: list[RobotGameMatch] = []
    for row in rows:
        if _is_blank(row):
            continue

        participants: list[MatchParticipant] = []
        for i, table_name in enumerate(table_names):
            table = tables_by_name.get(table_name)
            if table is None:
                raise UnresolvedReferenceError("table", table_name)
            participants.append({
                "tableId": table["id"],
                "tableName": table["name"],
                "teamId": _team_id(teams_by_number, cell(row, MATCH_TEAMS_OFFSET + i)),
                "ready": False,
                "present": PRESENCE_NO_SHOW,
            })

        matches.append({
            "eventId": event["id"],
            "stage": stage,
            "round": _required_int(row, 1, "round"),
            "number": _required_int(row, 0, "match number"),
            "scheduledTime": _scheduled_time(event, cell(row, 2)),
            "status": STATUS_NOT_STARTED,
            "participants": participants,
        })

    return matches


def parse_sessions(
    rows: list[Row],
    event: Event,
    teams: list[Team],
    rooms: list[JudgingRoom],
) -> list[JudgingSession]:
    """Derive judging sessions from the judging block.

    Every row is a time slot, and every room in the header gets a session in
    every slot, with or without a team.
    """
    room_names, rows = _split_resource_block(rows)
    rooms_by_name = {room["name"]: room for room in rooms}
    teams_by_number = {team["number"]: team for team in teams}

    sessions: list[JudgingSession] = []
    for row in rows:
        if _is_blank(row):
            continue

        number = _required_int(row, 0, "session number")
        scheduled_time = _scheduled_time(event, cell(row, 1))

        for i, room_name in enumerate(room_names):
            room = rooms_by_name.get(room_name)
            if room is None:
                raise UnresolvedReferenceError("room", room_name)
            sessions.append({
                "eventId": event["id"],
                "number": number,
                "roomId": room["id"],
                "teamId": _team_id(teams_by_number, cell(row, SESSION_TEAMS_OFFSET + i)),
                "scheduledTime": scheduled_time,
                "status": STATUS_NOT_STARTED,
            })

    return sessions


def parse_entities(event: Event, data: Union[str, bytes]) -> ParsedEntities:
    """First pass: extract teams, tables and rooms."""
    blocks = ScheduleBlocks.from_document(data)
    return {
        "teams": parse_teams(blocks.get(TEAMS_BLOCK_ID), event),
        "tables": parse_tables(blocks.get(PRACTICE_MATCHES_BLOCK_ID), event),
        "rooms": parse_rooms(blocks.get(JUDGING_SESSIONS_BLOCK_ID), event),
    }


def parse_schedule(
    event: Event,
    teams: list[Team],
    tables: list[RobotGameTable],
    rooms: list[JudgingRoom],
    data: Union[str, bytes],
) -> ParsedSchedule:
    """Second pass: derive matches and sessions against stored entities."""
    blocks = ScheduleBlocks.from_document(data)

    matches = parse_matches(
        blocks.get(PRACTICE_MATCHES_BLOCK_ID), "practice", event, teams, tables
    )
    matches += parse_matches(
        blocks.get(RANKING_MATCHES_BLOCK_ID), "ranking", event, teams, tables
    )
    matches.append(get_test_match(event))

    sessions = parse_sessions(blocks.get(JUDGING_SESSIONS_BLOCK_ID), event, teams, rooms)

    return {"matches": matches, "sessions": sessions}
