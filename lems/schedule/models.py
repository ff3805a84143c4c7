"""Data models for the schedule blueprint."""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, TypedDict

from lems.core.types import FirestoreDocument

RobotGameMatchStage = Literal["test", "practice", "ranking"]


class Event(FirestoreDocument, total=False):
    """An event document in Firestore."""

    name: str
    startDate: datetime
    timezone: str
    endDate: datetime
    hasState: bool


class Affiliation(TypedDict):
    """The institution a team represents."""

    institution: str
    city: str


class Team(FirestoreDocument, total=False):
    """A team registered to an event."""

    eventId: str
    number: int
    name: str
    registered: bool
    affiliation: Affiliation


class RobotGameTable(FirestoreDocument, total=False):
    """A robot game table."""

    eventId: str
    name: str


class JudgingRoom(FirestoreDocument, total=False):
    """A judging room."""

    eventId: str
    name: str


class MatchParticipant(TypedDict):
    """A match's slot on one table."""

    tableId: str
    tableName: str
    teamId: Optional[str]
    ready: bool
    present: str


class RobotGameMatch(FirestoreDocument, total=False):
    """A robot game match.

    ``round``, ``number`` and ``scheduledTime`` are ``None`` for the test match.
    """

    eventId: str
    stage: RobotGameMatchStage
    round: Optional[int]
    number: Optional[int]
    scheduledTime: Optional[datetime]
    status: str
    participants: list[MatchParticipant]


class JudgingSession(FirestoreDocument, total=False):
    """A judging session in one room. ``teamId`` is ``None`` for an unused slot."""

    eventId: str
    number: int
    roomId: str
    teamId: Optional[str]
    scheduledTime: datetime
    status: str


class EventState(FirestoreDocument, total=False):
    """Live state of an event, created once its schedule is imported."""

    eventId: str
    activeMatch: Optional[str]
    loadedMatch: Optional[str]
    currentSession: Optional[int]
    currentMatch: int
    activeSession: int


class ParsedEntities(TypedDict):
    """Primary entities extracted from a schedule, before persistence."""

    teams: list[Team]
    tables: list[RobotGameTable]
    rooms: list[JudgingRoom]


class ParsedSchedule(TypedDict):
    """Secondary entities derived from a schedule, before persistence."""

    matches: list[RobotGameMatch]
    sessions: list[JudgingSession]


class ImportResult(TypedDict):
    """Everything a completed import produced.

    Downstream generators (scoresheets, rubrics, station accounts) read these.
    """

    teams: list[Team]
    tables: list[RobotGameTable]
    rooms: list[JudgingRoom]
    matches: list[RobotGameMatch]
    sessions: list[JudgingSession]
