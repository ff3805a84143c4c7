"""Shared fixtures for schedule tests."""

from __future__ import annotations

import datetime
from typing import Any

EVENT_ID = "event1"
EVENT_START = datetime.datetime(2024, 3, 2, 7, 0, tzinfo=datetime.timezone.utc)

TEAMS_BLOCK = """\
Block Format,1
Number,Name,Affiliation,City
12,RoboCats,Lincoln High,Springfield
7,Gearheads,Roosevelt Middle,Shelbyville
31,Bolt Busters,Capital Academy,Capital City
"""

PRACTICE_BLOCK = """\
Block Format,4
Number of Practice Matches,2
Number of Tables,2
Number of Teams per Table,1
Rounds,1
Practice Round,Table A,Table B,
1,1,08:30,08:35,,12
2,1,08:40,08:45,7,31
"""

RANKING_BLOCK = """\
Block Format,2
Number of Ranking Matches,3
Number of Tables,2
Number of Teams per Table,1
Rounds,2
Ranking Round,Table A,Table B,
1,1,09:00,09:05,12,7
2,1,09:10,09:15,31,
3,2,10:00,10:05,7,12
"""

JUDGING_BLOCK = """\
Block Format,3
Number of Judging Sessions,2
Number of Rooms,2
Sessions per Team,1
Session Length,30
Judging Room,Room 1,Room 2,
1,08:00,08:30,12,7
2,08:45,09:15,31,
"""


def make_event(**overrides: Any) -> dict[str, Any]:
    """An event as returned by the store."""
    event = {
        "id": EVENT_ID,
        "name": "Springfield Qualifier",
        "startDate": EVENT_START,
        "endDate": EVENT_START + datetime.timedelta(hours=10),
        "hasState": False,
    }
    event.update(overrides)
    return event


def make_schedule(version: int = 2, blocks: list[str] | None = None) -> str:
    """Build a schedule document from block texts."""
    if blocks is None:
        blocks = [TEAMS_BLOCK, PRACTICE_BLOCK, RANKING_BLOCK, JUDGING_BLOCK]
    return f"Version Number,{version}\n" + "".join(blocks) + "\n"


def persisted(documents: list[dict[str, Any]], prefix: str) -> list[dict[str, Any]]:
    """Give parsed documents ids, as if they had been stored."""
    return [{**doc, "id": f"{prefix}{i}"} for i, doc in enumerate(documents)]
