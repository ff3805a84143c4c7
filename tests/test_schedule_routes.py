"""Tests for the schedule blueprint using mockfirestore."""

from __future__ import annotations

import io
import unittest
from unittest.mock import MagicMock, patch

from lems import create_app
from tests.conftest import make_mock_db
from tests.helpers import EVENT_ID, make_event, make_schedule

PARSE_URL = f"/admin/events/{EVENT_ID}/schedule/parse"
DATA_URL = f"/admin/events/{EVENT_ID}/data"


class ScheduleRoutesTestCase(unittest.TestCase):
    """Test case for the schedule blueprint."""

    def setUp(self) -> None:
        """Set up a test client backed by an in-memory Firestore."""
        self.mock_db = make_mock_db()

        self.mock_firestore_module = MagicMock()
        self.mock_firestore_module.client.return_value = self.mock_db

        patcher = patch(
            "lems.schedule.routes.firestore", new=self.mock_firestore_module
        )
        patcher.start()
        self.addCleanup(patcher.stop)

        self.app = create_app({"TESTING": True, "WTF_CSRF_ENABLED": False})
        self.client = self.app.test_client()

        event = make_event()
        del event["id"]
        self.mock_db.collection("events").document(EVENT_ID).set(event)

    def _upload(self, document: str, filename: str = "schedule.csv", url: str = PARSE_URL):
        return self.client.post(
            url,
            data={"file": (io.BytesIO(document.encode("utf-8")), filename)},
            content_type="multipart/form-data",
        )

    def _count(self, collection: str) -> int:
        return sum(
            1 for doc in self.mock_db.collection(collection).stream() if doc.to_dict()
        )

    def test_upload_schedule(self) -> None:
        response = self._upload(make_schedule())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.get_json(),
            {
                "ok": True,
                "teams": 3,
                "tables": 2,
                "rooms": 2,
                "matches": 6,
                "sessions": 4,
            },
        )
        self.assertEqual(self._count("matches"), 6)
        state = self.mock_db.collection("event_states").document(EVENT_ID).get()
        self.assertTrue(state.exists)
        event = self.mock_db.collection("events").document(EVENT_ID).get().to_dict()
        self.assertTrue(event["hasState"])

    def test_event_with_data_is_rejected(self) -> None:
        self.mock_db.collection("event_states").document(EVENT_ID).set(
            {"eventId": EVENT_ID}
        )
        response = self._upload(make_schedule())
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()["error"], "DUPLICATE_RESOURCE")
        self.assertEqual(self._count("teams"), 0)

    def test_unknown_event(self) -> None:
        response = self._upload(make_schedule(), url="/admin/events/nope/schedule/parse")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()["error"], "NOT_FOUND")

    def test_unsupported_version(self) -> None:
        response = self._upload(make_schedule(version=1))
        self.assertEqual(response.status_code, 400)
        body = response.get_json()
        self.assertEqual(body["error"], "UNSUPPORTED_SCHEDULE_VERSION")
        self.assertEqual(self._count("teams"), 0)
        self.assertFalse(
            self.mock_db.collection("event_states").document(EVENT_ID).get().exists
        )

    def test_malformed_document(self) -> None:
        response = self._upload('Version Number,2\nBlock Format,1\n"12,RoboCats')
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "MALFORMED_DOCUMENT")

    def test_unresolved_reference_hides_row_details(self) -> None:
        document = make_schedule().replace("Ranking Round,Table A", "Ranking Round,Table Q")
        response = self._upload(document)
        self.assertEqual(response.status_code, 422)
        body = response.get_json()
        self.assertEqual(body["error"], "UNRESOLVED_REFERENCE")
        self.assertNotIn("Table Q", body["message"])

    def test_failed_import_is_rolled_back(self) -> None:
        document = make_schedule().replace("Ranking Round,Table A", "Ranking Round,Table Q")
        self.assertEqual(self._upload(document).status_code, 422)

        for collection in ["teams", "tables", "rooms", "matches", "sessions"]:
            with self.subTest(collection=collection):
                self.assertEqual(self._count(collection), 0)
        self.assertFalse(
            self.mock_db.collection("event_states").document(EVENT_ID).get().exists
        )

    def test_retry_after_failed_import(self) -> None:
        document = make_schedule().replace("Ranking Round,Table A", "Ranking Round,Table Q")
        self.assertEqual(self._upload(document).status_code, 422)

        response = self._upload(make_schedule())

        self.assertEqual(response.status_code, 200)
        self.assertEqual(self._count("teams"), 3)
        self.assertEqual(self._count("tables"), 2)
        self.assertEqual(self._count("rooms"), 2)
        self.assertEqual(self._count("matches"), 6)

    def test_leftover_data_is_rejected(self) -> None:
        self.mock_db.collection("teams").document().set(
            {"eventId": EVENT_ID, "number": 12, "name": "RoboCats"}
        )
        response = self._upload(make_schedule())
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.get_json()["error"], "DUPLICATE_RESOURCE")
        self.assertEqual(self._count("teams"), 1)
        self.assertEqual(self._count("tables"), 0)

    def test_store_failure_reports_step(self) -> None:
        failing = MagicMock()
        failing.commit.return_value = []
        self.mock_db.batch = MagicMock(return_value=failing)
        response = self._upload(make_schedule())
        self.assertEqual(response.status_code, 500)
        body = response.get_json()
        self.assertEqual(body["error"], "STORE_FAILURE")
        self.assertEqual(body["step"], "teams")

    def test_missing_file(self) -> None:
        response = self.client.post(PARSE_URL, data={}, content_type="multipart/form-data")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.get_json()["error"], "VALIDATION_ERROR")

    def test_wrong_file_type(self) -> None:
        response = self._upload(make_schedule(), filename="schedule.pdf")
        self.assertEqual(response.status_code, 400)
        self.assertIn("CSV", response.get_json()["message"])

    def test_delete_event_data(self) -> None:
        self.assertEqual(self._upload(make_schedule()).status_code, 200)

        response = self.client.delete(DATA_URL)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json(), {"ok": True})
        self.assertEqual(self._count("teams"), 0)
        self.assertEqual(self._count("sessions"), 0)
        event = self.mock_db.collection("events").document(EVENT_ID).get().to_dict()
        self.assertFalse(event["hasState"])

        # The event can be imported again once its data is gone.
        self.assertEqual(self._upload(make_schedule()).status_code, 200)


if __name__ == "__main__":
    unittest.main()
