"""Schedule blueprint."""

from flask import Blueprint

bp = Blueprint("schedule", __name__, url_prefix="/admin/events")

from . import routes  # noqa: E402, F401
from .parser import parse_entities, parse_schedule  # noqa: E402
from .services import ScheduleService  # noqa: E402
from .store import EventStore  # noqa: E402

__all__ = ["EventStore", "ScheduleService", "parse_entities", "parse_schedule", "routes"]
