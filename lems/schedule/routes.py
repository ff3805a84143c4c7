"""Routes for the schedule blueprint."""

from __future__ import annotations

from typing import Any

from firebase_admin import firestore
from flask import current_app, jsonify

from lems.errors import (
    DuplicateResourceError,
    NotFoundError,
    ScheduleError,
    ValidationError,
)

from . import bp
from .forms import ScheduleUploadForm
from .services import ScheduleService
from .store import EventStore


def _get_store_and_event(event_id: str) -> tuple[EventStore, Any]:
    store = EventStore(firestore.client())
    event = store.get_event(event_id)
    if event is None:
        raise NotFoundError("Event not found.")
    return store, event


@bp.route("/<string:event_id>/schedule/parse", methods=["POST"])
def upload_schedule(event_id: str) -> Any:
    """Import an uploaded schedule into an event that has no data yet."""
    store, event = _get_store_and_event(event_id)

    if store.has_event_state(event_id) or store.has_event_data(event_id):
        raise DuplicateResourceError("Could not parse schedule: Event has data")

    form = ScheduleUploadForm()
    if not form.validate_on_submit():
        messages = [m for errors in form.errors.values() for m in errors]
        raise ValidationError(" ".join(messages) or "Invalid upload.")

    current_app.logger.info(f"Parsing schedule for event {event_id}")
    data = form.file.data.read()

    try:
        result = ScheduleService.import_schedule(store, event, data)
    except ScheduleError as e:
        current_app.logger.warning(
            f"Import failed for event {event_id}, removing partial data: {e}"
        )
        try:
            ScheduleService.clean_event_data(store, event_id)
        except ScheduleError as cleanup_error:
            current_app.logger.error(
                f"Could not remove partial data for event {event_id}: {cleanup_error}"
            )
        raise e

    current_app.logger.info(f"Creating event state for event {event_id}")
    store.add_event_state(event_id)
    store.set_event_has_state(event_id, True)
    current_app.logger.info(f"Finished parsing schedule for event {event_id}")

    return jsonify({
        "ok": True,
        "teams": len(result["teams"]),
        "tables": len(result["tables"]),
        "rooms": len(result["rooms"]),
        "matches": len(result["matches"]),
        "sessions": len(result["sessions"]),
    })


@bp.route("/<string:event_id>/data", methods=["DELETE"])
def delete_event_data(event_id: str) -> Any:
    """Delete everything a schedule import created for an event."""
    store, _ = _get_store_and_event(event_id)
    ScheduleService.clean_event_data(store, event_id)
    current_app.logger.info(f"Deleted data for event {event_id}")
    return jsonify({"ok": True})
