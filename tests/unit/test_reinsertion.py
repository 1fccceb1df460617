"""Returning abandoned tickets to the queue."""


def _abandon(queue, clerk, ticket_type="NORMAL", service="civil", desk_id=1):
    result = queue.dispense(ticket_type, service)
    queue.login(desk_id, clerk, [service])
    queue.call_next(desk_id)
    queue.logout(desk_id)
    return result.ticket.number


def test_round_trip(queue, clock, civil_clerk):
    number = _abandon(queue, civil_clerk)
    assert queue.state.ticket_locations(number) == ["abandoned"]

    clock.advance(minutes=30)
    result = queue.reinsert(number)

    assert result.success is True
    assert queue.state.ticket_locations(number) == ["waiting_normal"]
    waiting = queue.state.waiting_normal[-1]
    assert waiting.dispensed_at == clock.now
    assert waiting.service == "civil"

    again = queue.reinsert(number)
    assert again.success is False
    assert "not found" in again.message.lower()
    assert again.details is None


def test_preferential_goes_back_to_preferential_list(queue, civil_clerk):
    number = _abandon(queue, civil_clerk, ticket_type="PREFERENTIAL")

    queue.reinsert(number)

    assert [t.number for t in queue.state.waiting_preferential] == [number]
    assert queue.state.waiting_normal == []


def test_match_is_case_insensitive(queue, civil_clerk):
    number = _abandon(queue, civil_clerk)
    assert queue.reinsert(number.lower()).success is True


def test_completed_ticket_is_refused_with_details(queue, clock, civil_clerk):
    queue.dispense("NORMAL", "civil")
    queue.login(3, civil_clerk, ["civil"])
    queue.call_next(3)
    queue.start_service(3)
    clock.advance(minutes=7)
    queue.end_service(3)
    before = queue.state

    result = queue.reinsert("N001")

    assert result.success is False
    assert result.details.desk_id == 3
    assert result.details.user == civil_clerk.display_name
    assert result.details.timestamp == clock.now
    assert queue.state is before


def test_unknown_ticket_is_not_found(queue):
    before = queue.state
    result = queue.reinsert("X123")
    assert result.success is False
    assert queue.state is before
