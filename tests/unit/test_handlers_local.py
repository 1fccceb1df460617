"""
Local handler tests.

Handlers are exercised with API Gateway HTTP API events against an
in-memory QueueService; no AWS access is required.
"""

import json
from unittest.mock import MagicMock

import pytest

from handlers import admin, agenda, desks, state, tickets
from services.ticket_service import TicketService


def _event(method, path, body=None, path_params=None):
    event = {"requestContext": {"http": {"method": method, "path": path}}}
    if body is not None:
        event["body"] = json.dumps(body)
    if path_params is not None:
        event["pathParameters"] = path_params
    return event


@pytest.fixture
def wired(queue):
    """Point every handler module at the test queue."""
    for module in (admin, agenda, desks, state, tickets):
        module._queue_service = queue
    tickets._ticket_service = TicketService(queue=queue)
    return queue


def _login(desk_id=1, services=("civil",)):
    return desks.lambda_handler(
        _event(
            "POST",
            f"/desks/{desk_id}/login",
            {"user_id": "u-1", "display_name": "Ana", "services": list(services)},
        ),
        None,
    )


class TestTicketHandlers:
    def test_dispense_returns_201(self, wired):
        resp = tickets.lambda_handler(_event("POST", "/tickets", {"type": "NORMAL", "service": "civil"}), None)

        assert resp["statusCode"] == 201
        body = json.loads(resp["body"])
        assert body["ticket_number"] == "N001"
        assert body["mode"] == "memory"

    def test_dispense_missing_fields_returns_422(self, wired):
        resp = tickets.lambda_handler(_event("POST", "/tickets", {"type": "NORMAL"}), None)

        assert resp["statusCode"] == 422
        assert json.loads(resp["body"])["message"] == "Invalid request"
        assert wired.state.waiting_normal == []

    def test_dispense_bad_json_returns_422(self, wired):
        event = {"body": "{oops"}
        resp = tickets.lambda_handler(event, None)
        assert resp["statusCode"] == 422

    def test_reinsert_not_found(self, wired):
        resp = tickets.reinsert_handler(_event("POST", "/tickets/reinsert", {"ticket_number": "N999"}), None)
        assert resp["statusCode"] == 404
        assert json.loads(resp["body"])["success"] is False

    def test_reinsert_conflict_after_service(self, wired):
        wired.dispense("NORMAL", "civil")
        _login()
        wired.call_next(1)
        wired.start_service(1)
        wired.end_service(1)

        resp = tickets.reinsert_handler(_event("POST", "/tickets/reinsert", {"ticket_number": "n001"}), None)

        assert resp["statusCode"] == 409
        details = json.loads(resp["body"])["details"]
        assert details["desk_id"] == 1
        assert details["user"] == "Ana"

    def test_reinsert_requires_ticket_number(self, wired):
        resp = tickets.reinsert_handler(_event("POST", "/tickets/reinsert", {}), None)
        assert resp["statusCode"] == 422


class TestDeskHandlers:
    def test_login_and_call_next(self, wired):
        wired.dispense("NORMAL", "civil")

        assert _login()["statusCode"] == 200
        resp = desks.lambda_handler(_event("POST", "/desks/1/call-next"), None)

        assert resp["statusCode"] == 200
        body = json.loads(resp["body"])
        assert body["ticket"]["number"] == "N001"
        assert body["desk"]["current_ticket"]["number"] == "N001"

    def test_path_parameters_take_precedence(self, wired):
        resp = desks.lambda_handler(
            _event(
                "POST",
                "/ignored",
                {"user_id": "u-9", "display_name": "Rui", "services": ["civil"]},
                path_params={"id": "9", "action": "login"},
            ),
            None,
        )
        assert resp["statusCode"] == 200
        assert wired.state.desk(9).user.display_name == "Rui"

    def test_invalid_desk_id(self, wired):
        resp = desks.lambda_handler(_event("POST", "/desks/42/logout"), None)
        assert resp["statusCode"] == 422

    def test_unknown_action(self, wired):
        resp = desks.lambda_handler(_event("POST", "/desks/1/dance"), None)
        assert resp["statusCode"] == 404

    def test_end_without_service_conflicts(self, wired):
        _login()
        resp = desks.lambda_handler(_event("POST", "/desks/1/end"), None)
        assert resp["statusCode"] == 409

    def test_login_validation(self, wired):
        resp = desks.lambda_handler(_event("POST", "/desks/1/login", {"services": ["civil"]}), None)
        assert resp["statusCode"] == 422

    def test_start_then_end(self, wired):
        wired.dispense("PREFERENTIAL", "civil")
        _login()
        desks.lambda_handler(_event("POST", "/desks/1/call-next"), None)
        desks.lambda_handler(_event("POST", "/desks/1/start"), None)
        resp = desks.lambda_handler(_event("POST", "/desks/1/end"), None)

        assert resp["statusCode"] == 200
        assert wired.state.completed_services[0].ticket_number == "P001"


class TestStateHandlers:
    def test_get_state(self, wired):
        wired.dispense("NORMAL", "civil")
        resp = state.lambda_handler(_event("GET", "/state"), None)
        body = json.loads(resp["body"])
        assert body["waiting_normal"][0]["number"] == "N001"
        assert len(body["desks"]) == 20

    def test_sync_replaces_state(self, wired):
        snapshot = wired.state.model_copy(update={"alert_message": "from desk 2"}).model_dump(mode="json")
        resp = state.sync_handler({"body": json.dumps(snapshot)}, None)

        assert resp["statusCode"] == 200
        assert wired.state.alert_message == "from desk 2"

    def test_sync_rejects_invalid_snapshot(self, wired):
        resp = state.sync_handler({"body": json.dumps({"next_normal_ticket": "many"})}, None)
        assert resp["statusCode"] == 422

    def test_sync_without_body_reloads_storage(self, wired, storage):
        payload = wired.state.model_copy(update={"tips": ["stored tip"]}).model_dump(mode="json")
        storage.save(payload)

        resp = state.sync_handler({}, None)

        assert json.loads(resp["body"])["source"] == "storage"
        assert wired.state.tips == ["stored tip"]


class TestAgendaHandlers:
    ENTRY = {
        "ticket_number": "N005",
        "client_name": "Paula",
        "service": "civil",
        "scheduled_for": "2026-03-10T10:00:00+00:00",
    }

    def test_add_update_cancel(self, wired):
        created = agenda.lambda_handler(_event("POST", "/agenda", self.ENTRY), None)
        assert created["statusCode"] == 201
        entry = json.loads(created["body"])["entry"]

        entry["notes"] = "Rescheduled by phone"
        updated = agenda.lambda_handler(_event("PUT", f"/agenda/{entry['id']}", entry), None)
        assert updated["statusCode"] == 200
        assert wired.state.agenda[0].notes == "Rescheduled by phone"

        canceled = agenda.lambda_handler(_event("POST", f"/agenda/{entry['id']}/cancel"), None)
        assert canceled["statusCode"] == 200
        assert json.loads(canceled["body"])["entry"]["status"] == "CANCELED"

    def test_cancel_unknown(self, wired):
        resp = agenda.lambda_handler(_event("POST", "/agenda/AGENDA-x/cancel"), None)
        assert resp["statusCode"] == 404

    def test_add_invalid(self, wired):
        resp = agenda.lambda_handler(_event("POST", "/agenda", {"ticket_number": "N1"}), None)
        assert resp["statusCode"] == 422


class TestAdminHandlers:
    def test_reset_returns_archive(self, wired):
        wired.dispense("NORMAL", "civil")
        _login()
        wired.call_next(1)
        wired.logout(1)

        resp = admin.lambda_handler(_event("POST", "/admin/reset"), None)

        body = json.loads(resp["body"])
        assert resp["statusCode"] == 200
        assert body["archived"]["abandoned_tickets"][0]["ticket_number"] == "N001"

        day = body["archived"]["date_key"]
        archive = admin.lambda_handler(_event("GET", f"/admin/archive/{day}"), None)
        assert archive["statusCode"] == 200

    def test_archive_missing_and_malformed(self, wired):
        assert admin.lambda_handler(_event("GET", "/admin/archive/2020-01-01"), None)["statusCode"] == 404
        assert admin.lambda_handler(_event("GET", "/admin/archive/yesterday"), None)["statusCode"] == 422

    def test_tips_and_alert(self, wired):
        resp = admin.lambda_handler(_event("PUT", "/admin/tips", {"tips": ["Bring ID"]}), None)
        assert resp["statusCode"] == 200
        assert wired.state.tips == ["Bring ID"]

        admin.lambda_handler(_event("PUT", "/admin/alert", {"message": "Closing at 4pm"}), None)
        assert wired.state.alert_message == "Closing at 4pm"
        admin.lambda_handler(_event("DELETE", "/admin/alert"), None)
        assert wired.state.alert_message is None

    def test_tips_must_be_list(self, wired):
        resp = admin.lambda_handler(_event("PUT", "/admin/tips", {"tips": "one"}), None)
        assert resp["statusCode"] == 422

    def test_unknown_admin_route(self, wired):
        resp = admin.lambda_handler(_event("POST", "/admin/nothing"), None)
        assert resp["statusCode"] == 404

    def test_reset_failure_keeps_queue(self, wired, storage):
        wired.dispense("NORMAL", "civil")
        _login()
        wired.call_next(1)
        wired.logout(1)
        storage.archive_day = MagicMock(side_effect=RuntimeError("table unreachable"))

        resp = admin.lambda_handler(_event("POST", "/admin/reset"), None)

        assert resp["statusCode"] == 500
        assert json.loads(resp["body"])["status"] == "error"
        assert wired.state.abandoned_tickets[0].ticket_number == "N001"

    def test_archive_lookup_failure(self, wired, storage):
        storage.load_archive = MagicMock(side_effect=RuntimeError("throttled"))

        resp = admin.lambda_handler(_event("GET", "/admin/archive/2026-03-02"), None)

        assert resp["statusCode"] == 500
