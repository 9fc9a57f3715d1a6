from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import RedirectResponse
from typing import Optional
from urllib.parse import quote
import logging

from backend.dependencies import get_client, get_flows, get_store
from backend.errors import RecruitError
from backend.flows import FlowRegistry
from backend.models.schemas import ScreenRequest
from backend.store import RecruitStore
from backend.utils.extract_text import extract_resume_text
from backend.utils.n8n_client import N8nClient
from backend.views import render_not_found, render_role_detail

router = APIRouter(tags=["Roles"])
logger = logging.getLogger("recruitai")


def _back_to_role(role_id: str) -> RedirectResponse:
    return RedirectResponse(url=f"/roles/{quote(role_id, safe='')}", status_code=303)


# -------------------------------
# HTML
# -------------------------------
@router.get("/roles/{role_id}")
def role_detail(
    role_id: str,
    store: RecruitStore = Depends(get_store),
    flows: FlowRegistry = Depends(get_flows),
):
    role = store.get_role_by_id(role_id)
    if role is None:
        return render_not_found("Role not found.")
    return render_role_detail(role, store.get_candidates_by_role_id(role_id), flows.screening(role_id))


@router.post("/roles/{role_id}/resume")
def upload_resume(
    role_id: str,
    file: Optional[UploadFile] = File(None),
    store: RecruitStore = Depends(get_store),
    flows: FlowRegistry = Depends(get_flows),
):
    if store.get_role_by_id(role_id) is None:
        return render_not_found("Role not found.")

    flow = flows.screening(role_id)
    if file is None or not file.filename:
        flow.fail_upload("Please choose a resume file to upload.")
        return _back_to_role(role_id)

    try:
        text = extract_resume_text(file.filename, file.file.read())
        flow.set_resume(text, file.filename)
    except RecruitError as e:
        logger.info(f"Resume upload rejected for role {role_id}: {e.message}")
        flow.fail_upload(e.message)
    return _back_to_role(role_id)


@router.post("/roles/{role_id}/screen")
def screen_candidate(
    role_id: str,
    store: RecruitStore = Depends(get_store),
    client: N8nClient = Depends(get_client),
    flows: FlowRegistry = Depends(get_flows),
):
    if store.get_role_by_id(role_id) is None:
        return render_not_found("Role not found.")

    try:
        flows.screening(role_id).run(store, client)
    except RecruitError:
        # already recorded on the flow for display
        pass
    return _back_to_role(role_id)


# -------------------------------
# JSON API
# -------------------------------
@router.get("/api/roles")
def list_roles(store: RecruitStore = Depends(get_store)):
    return [r.model_dump() for r in store.roles]


@router.get("/api/roles/{role_id}")
def get_role(role_id: str, store: RecruitStore = Depends(get_store)):
    return store.require_role(role_id).model_dump()


@router.get("/api/roles/{role_id}/candidates")
def role_candidates(role_id: str, store: RecruitStore = Depends(get_store)):
    store.require_role(role_id)
    return [r.model_dump(mode="json") for r in store.get_candidates_by_role_id(role_id)]


@router.post("/api/roles/{role_id}/screen")
def api_screen_candidate(
    role_id: str,
    body: ScreenRequest,
    store: RecruitStore = Depends(get_store),
    client: N8nClient = Depends(get_client),
):
    # stateless: the role page's upload buffer and banner are left alone
    role = store.require_role(role_id)
    result = client.run_pipeline(
        resume_text=body.resume_text,
        job_description=role.description,
        job_id=role.id,
        interviewer_calendar_id=body.interviewer_calendar_id,
    )
    store.add_screening_result(role.id, result)
    return result.model_dump(mode="json")
