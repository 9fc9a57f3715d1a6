"""
Tests for the screening and scheduling state machines.
"""
import pytest

from backend.errors import DuplicateCandidateError, FlowBusyError, NotFoundError, PipelineError, ValidationError
from backend.flows import UNEXPECTED_ERROR, FlowRegistry, SchedulingFlow, SchedulingState, ScreeningFlow, ScreeningState

from conftest import SAMPLE_RESULT, SAMPLE_SLOTS, make_response


# ---------------------------
# Screening
# ---------------------------
def test_screening_success_stores_result_and_clears_buffer(store, n8n_client, fake_session):
    fake_session.queue(make_response(200, SAMPLE_RESULT))
    flow = ScreeningFlow("role-001")
    flow.set_resume("Ada's resume", "ada.txt")

    result = flow.run(store, n8n_client)

    assert flow.state == ScreeningState.SUCCESS
    assert flow.last_result == result
    assert flow.resume_text == ""
    assert flow.error is None
    assert store.get_candidates_by_role_id("role-001") == [result]
    assert fake_session.calls[0]["json"]["job_description"] == store.get_role_by_id("role-001").description


def test_screening_failure_keeps_buffer_for_retry(store, n8n_client, fake_session):
    fake_session.queue(make_response(500, text="server error"))
    flow = ScreeningFlow("role-001")
    flow.set_resume("resume text")

    with pytest.raises(PipelineError):
        flow.run(store, n8n_client)

    assert flow.state == ScreeningState.FAILED
    assert flow.resume_text == "resume text"
    assert "server error" in flow.error
    assert store.get_all_candidates() == []

    fake_session.queue(make_response(200, SAMPLE_RESULT))
    flow.run(store, n8n_client)
    assert flow.state == ScreeningState.SUCCESS
    assert len(store.get_all_candidates()) == 1


def test_screening_without_resume_makes_no_request(store, n8n_client, fake_session):
    flow = ScreeningFlow("role-001")

    with pytest.raises(ValidationError):
        flow.run(store, n8n_client)

    assert flow.error == "Please upload a resume first."
    assert flow.state == ScreeningState.IDLE
    assert fake_session.calls == []


def test_only_one_screening_in_flight(store, n8n_client, fake_session):
    flow = ScreeningFlow("role-001")
    flow.set_resume("resume text")
    flow.state = ScreeningState.RUNNING

    with pytest.raises(FlowBusyError):
        flow.run(store, n8n_client)
    with pytest.raises(FlowBusyError):
        flow.set_resume("other resume")
    assert not flow.can_screen
    assert fake_session.calls == []


def test_duplicate_screening_is_surfaced(store, n8n_client, fake_session):
    fake_session.queue(make_response(200, SAMPLE_RESULT))
    fake_session.queue(make_response(200, SAMPLE_RESULT))
    flow = ScreeningFlow("role-001")
    flow.set_resume("resume")
    flow.run(store, n8n_client)

    flow.set_resume("resume again")
    with pytest.raises(DuplicateCandidateError):
        flow.run(store, n8n_client)
    assert flow.state == ScreeningState.FAILED
    assert "already been screened" in flow.error
    assert flow.resume_text == "resume again"


# ---------------------------
# Scheduling
# ---------------------------
@pytest.fixture
def screened(store, make_result):
    result = make_result()
    store.add_screening_result("role-001", result)
    return result


def test_scheduling_happy_path(store, n8n_client, fake_session, screened):
    fake_session.queue(make_response(200, SAMPLE_SLOTS))
    flow = SchedulingFlow(screened.candidate.email)

    flow.find_slots(store, n8n_client)
    assert flow.state == SchedulingState.PICKING
    assert len(flow.slots) == 2
    assert fake_session.calls[0]["json"]["job_title"] == "Senior Frontend Engineer"

    slot = flow.select("2026-03-04T14:00:00Z")
    assert flow.selected_slot == slot

    confirmed = flow.confirm()
    assert confirmed.display == "Wednesday, March 4 at 9:00 AM ET"
    assert flow.state == SchedulingState.CONFIRMED


def test_scheduling_failure_returns_to_idle(store, n8n_client, fake_session, screened):
    fake_session.queue(make_response(502, text="calendar down"))
    flow = SchedulingFlow(screened.candidate.email)

    with pytest.raises(PipelineError):
        flow.find_slots(store, n8n_client)
    assert flow.state == SchedulingState.IDLE
    assert "calendar down" in flow.error

    fake_session.queue(make_response(200, SAMPLE_SLOTS))
    flow.find_slots(store, n8n_client)
    assert flow.state == SchedulingState.PICKING
    assert flow.error is None


def test_confirm_requires_selection(store, n8n_client, fake_session, screened):
    fake_session.queue(make_response(200, SAMPLE_SLOTS))
    flow = SchedulingFlow(screened.candidate.email)

    with pytest.raises(ValidationError):
        flow.confirm()
    flow.find_slots(store, n8n_client)
    with pytest.raises(ValidationError):
        flow.confirm()
    with pytest.raises(ValidationError):
        flow.select("1999-01-01T00:00:00Z")


def test_confirmed_is_terminal(store, n8n_client, fake_session, screened):
    fake_session.queue(make_response(200, SAMPLE_SLOTS))
    flow = SchedulingFlow(screened.candidate.email)
    flow.find_slots(store, n8n_client)
    flow.select("2026-03-03T15:00:00Z")
    flow.confirm()

    with pytest.raises(ValidationError):
        flow.find_slots(store, n8n_client)
    assert len(fake_session.calls) == 1


def test_confirmation_is_not_persisted(store, n8n_client, fake_session, screened):
    before = store.snapshot()
    fake_session.queue(make_response(200, SAMPLE_SLOTS))
    flow = SchedulingFlow(screened.candidate.email)
    flow.find_slots(store, n8n_client)
    flow.select("2026-03-03T15:00:00Z")
    flow.confirm()

    assert store.snapshot() == before


def test_scheduling_unknown_candidate(store, n8n_client, fake_session):
    flow = SchedulingFlow("ghost@example.com")
    with pytest.raises(NotFoundError):
        flow.find_slots(store, n8n_client)
    assert flow.state == SchedulingState.IDLE
    assert fake_session.calls == []


def test_registry_returns_same_flow():
    flows = FlowRegistry()
    assert flows.screening("role-001") is flows.screening("role-001")
    assert flows.screening("role-001") is not flows.screening("role-002")
    assert flows.scheduling("a@example.com") is flows.scheduling("a@example.com")


def test_whitespace_buffer_cannot_screen():
    flow = ScreeningFlow("role-001")
    flow.set_resume("   \n ")
    assert not flow.can_screen


def test_unexpected_screening_error_releases_flow(full_disk_store, n8n_client, fake_session):
    fake_session.queue(make_response(200, SAMPLE_RESULT))
    flow = ScreeningFlow("role-001")
    flow.set_resume("resume text")

    with pytest.raises(OSError):
        flow.run(full_disk_store, n8n_client)

    assert flow.state == ScreeningState.FAILED
    assert flow.error == UNEXPECTED_ERROR
    assert flow.resume_text == "resume text"
    assert full_disk_store.get_all_candidates() == []
    flow.set_resume("again")
    assert flow.can_screen


def test_unexpected_scheduling_error_returns_to_idle(store, n8n_client, fake_session, screened):
    fake_session.error = RuntimeError("connection pool exploded")
    flow = SchedulingFlow(screened.candidate.email)

    with pytest.raises(RuntimeError):
        flow.find_slots(store, n8n_client)
    assert flow.state == SchedulingState.IDLE
    assert flow.error == UNEXPECTED_ERROR

    fake_session.error = None
    fake_session.queue(make_response(200, SAMPLE_SLOTS))
    flow.find_slots(store, n8n_client)
    assert flow.state == SchedulingState.PICKING
