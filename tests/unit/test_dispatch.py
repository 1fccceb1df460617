"""Dispatch fairness, FIFO ordering and call bookkeeping."""

from datetime import datetime, timedelta, timezone

from models.desk import DeskUser
from models.queue import new_queue_state
from models.ticket import CalledEntry, TicketType
from services.dispatch import call_next, count_calls, select_next_ticket
from services.sequencer import issue_ticket

T0 = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)
CLERK = DeskUser(id="u-1", display_name="Ana Clerk")


def _logged_in(state, desk_id=1, services=("civil",)):
    desk = state.desk(desk_id).model_copy(update={"user": CLERK, "services": list(services)})
    return state.with_desk(desk)


def _issue(state, ticket_type, service="civil", minute=0):
    state, ticket = issue_ticket(state, ticket_type, service, T0 + timedelta(minutes=minute))
    return state, ticket


def test_first_call_prefers_preferential_then_normal():
    state = _logged_in(new_queue_state())
    state, _ = _issue(state, TicketType.NORMAL)
    state, _ = _issue(state, TicketType.PREFERENTIAL)

    state, first = call_next(state, 1, T0 + timedelta(minutes=1))
    state, second = call_next(state, 1, T0 + timedelta(minutes=2))

    assert first.number == "P001"
    assert second.number == "N001"


def test_no_user_or_no_services_is_noop():
    state = new_queue_state()
    state, _ = _issue(state, TicketType.NORMAL)

    unchanged, ticket = call_next(state, 1, T0)
    assert ticket is None
    assert unchanged is state

    no_services = _logged_in(state, services=())
    unchanged, ticket = call_next(no_services, 1, T0)
    assert ticket is None
    assert unchanged is no_services


def test_unknown_desk_is_noop():
    state = new_queue_state()
    unchanged, ticket = call_next(state, 99, T0)
    assert ticket is None
    assert unchanged is state


def test_filters_by_desk_services():
    state = _logged_in(new_queue_state(), services=("family",))
    state, _ = _issue(state, TicketType.NORMAL, service="civil")
    state, _ = _issue(state, TicketType.NORMAL, service="family")

    state, ticket = call_next(state, 1, T0)
    assert ticket.number == "N002"
    assert [t.number for t in state.waiting_normal] == ["N001"]


def test_fifo_within_class():
    state = _logged_in(new_queue_state())
    for minute in range(5):
        state, _ = _issue(state, TicketType.NORMAL, minute=minute)

    called = []
    for minute in range(5):
        state, ticket = call_next(state, 1, T0 + timedelta(minutes=10 + minute))
        called.append(ticket.number)

    assert called == ["N001", "N002", "N003", "N004", "N005"]


def test_fairness_ratio_with_both_lists_full():
    state = _logged_in(new_queue_state())
    for _ in range(60):
        state, _ = _issue(state, TicketType.NORMAL)
    for _ in range(60):
        state, _ = _issue(state, TicketType.PREFERENTIAL)

    for step in range(60):
        state, ticket = call_next(state, 1, T0 + timedelta(minutes=step))
        assert ticket is not None
        called_pref, called_norm = count_calls(state.called_history)
        # After the first call, preferential never exceeds half of normal by more than one.
        assert called_pref <= called_norm / 2 + 1

    called_pref, called_norm = count_calls(state.called_history)
    assert called_pref == 20
    assert called_norm == 40


def test_preferential_served_when_normal_list_empty():
    state = _logged_in(new_queue_state())
    state = state.model_copy(
        update={
            "called_history": [
                CalledEntry(ticket_number="P00X", desk_id=2, called_at=T0, type=TicketType.PREFERENTIAL)
            ]
            * 5
        }
    )
    state, _ = _issue(state, TicketType.PREFERENTIAL)

    state, ticket = call_next(state, 1, T0)
    assert ticket.number == "P001"


def test_normal_served_when_preferential_over_ratio():
    history = [
        CalledEntry(ticket_number="P900", desk_id=2, called_at=T0, type=TicketType.PREFERENTIAL)
    ]
    state = _logged_in(new_queue_state()).model_copy(update={"called_history": history})
    state, _ = _issue(state, TicketType.PREFERENTIAL)
    state, _ = _issue(state, TicketType.NORMAL)

    assert select_next_ticket(state, ["civil"]).number == "N001"


def test_call_appends_history_and_sets_desk():
    state = _logged_in(new_queue_state())
    state, _ = _issue(state, TicketType.NORMAL)

    called_at = T0 + timedelta(minutes=3)
    state, ticket = call_next(state, 1, called_at)

    desk = state.desk(1)
    assert desk.current_ticket == ticket
    assert desk.service_started_at is None
    assert state.called_history[-1] == CalledEntry(
        ticket_number="N001", desk_id=1, called_at=called_at, type=TicketType.NORMAL
    )
    assert state.ticket_locations("N001") == ["desk:1"]


def test_call_finalizes_previous_ticket_before_selecting():
    state = _logged_in(new_queue_state())
    state, _ = _issue(state, TicketType.NORMAL)
    state, _ = _issue(state, TicketType.NORMAL)

    state, first = call_next(state, 1, T0 + timedelta(minutes=1))
    state, second = call_next(state, 1, T0 + timedelta(minutes=2))

    assert state.ticket_locations(first.number) == ["abandoned"]
    assert state.ticket_locations(second.number) == ["desk:1"]


def test_empty_queue_leaves_desk_idle():
    state = _logged_in(new_queue_state())
    state, _ = _issue(state, TicketType.NORMAL)
    state, _ = call_next(state, 1, T0)

    state, ticket = call_next(state, 1, T0 + timedelta(minutes=1))
    assert ticket is None
    assert state.desk(1).current_ticket is None
    assert state.desk(1).user == CLERK
    assert len(state.abandoned_tickets) == 1


def test_unremovable_ticket_clears_desk(monkeypatch):
    from services import dispatch
    from models.ticket import WaitingTicket

    ghost = WaitingTicket(number="N999", type=TicketType.NORMAL, service="civil", dispensed_at=T0)
    monkeypatch.setattr(dispatch, "select_next_ticket", lambda state, services: ghost)

    state = _logged_in(new_queue_state())
    state, ticket = call_next(state, 1, T0)

    assert ticket is None
    assert state.desk(1).current_ticket is None
    assert state.called_history == []
