from fastapi import APIRouter, Depends, Form
from fastapi.responses import RedirectResponse
from typing import Optional
from urllib.parse import quote

from backend.dependencies import get_client, get_flows, get_store
from backend.errors import RecruitError
from backend.flows import FlowRegistry
from backend.models.schemas import ScheduleRequest
from backend.store import RecruitStore
from backend.utils.n8n_client import N8nClient
from backend.views import render_not_found, render_schedule

router = APIRouter(tags=["Scheduling"])


def _back_to_schedule(email: str) -> RedirectResponse:
    return RedirectResponse(url=f"/schedule/{quote(email, safe='')}", status_code=303)


# -------------------------------
# HTML
# -------------------------------
@router.get("/schedule/{email}")
def schedule_page(
    email: str,
    store: RecruitStore = Depends(get_store),
    flows: FlowRegistry = Depends(get_flows),
):
    result = store.get_candidate_by_id(email)
    if result is None:
        return render_not_found("Candidate not found.")
    return render_schedule(result, flows.scheduling(email))


@router.post("/schedule/{email}/slots")
def find_slots(
    email: str,
    store: RecruitStore = Depends(get_store),
    client: N8nClient = Depends(get_client),
    flows: FlowRegistry = Depends(get_flows),
):
    if store.get_candidate_by_id(email) is None:
        return render_not_found("Candidate not found.")
    try:
        flows.scheduling(email).find_slots(store, client)
    except RecruitError:
        # already recorded on the flow for display
        pass
    return _back_to_schedule(email)


@router.post("/schedule/{email}/select")
def select_slot(
    email: str,
    slot: Optional[str] = Form(None),
    store: RecruitStore = Depends(get_store),
    flows: FlowRegistry = Depends(get_flows),
):
    if store.get_candidate_by_id(email) is None:
        return render_not_found("Candidate not found.")
    flow = flows.scheduling(email)
    try:
        flow.select(slot or "")
    except RecruitError as e:
        flow.record_error(e.message)
    return _back_to_schedule(email)


@router.post("/schedule/{email}/confirm")
def confirm_slot(
    email: str,
    store: RecruitStore = Depends(get_store),
    flows: FlowRegistry = Depends(get_flows),
):
    if store.get_candidate_by_id(email) is None:
        return render_not_found("Candidate not found.")
    flow = flows.scheduling(email)
    try:
        flow.confirm()
    except RecruitError as e:
        flow.record_error(e.message)
    return _back_to_schedule(email)


# -------------------------------
# JSON API
# -------------------------------
@router.post("/api/candidates/{email}/schedule")
def api_schedule_interview(
    email: str,
    body: Optional[ScheduleRequest] = None,
    store: RecruitStore = Depends(get_store),
    client: N8nClient = Depends(get_client),
):
    result = store.require_candidate(email)
    job_title = result.job_requirements.job_title if result.job_requirements else ""
    response = client.schedule_interview(
        candidate_email=result.candidate.email,
        candidate_name=result.candidate.name,
        job_title=job_title,
        job_id=result.job_id,
        interviewer_calendar_id=body.interviewer_calendar_id if body else None,
    )
    return response.model_dump()
