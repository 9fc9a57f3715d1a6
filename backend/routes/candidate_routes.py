from fastapi import APIRouter, Depends, Query
from typing import Optional

from backend.dependencies import get_store
from backend.store import RecruitStore
from backend.utils.formatting import sort_by_candidate_score
from backend.views import render_candidate, render_not_found

router = APIRouter(tags=["Candidates"])


@router.get("/candidates/{email}")
def candidate_profile(email: str, store: RecruitStore = Depends(get_store)):
    result = store.get_candidate_by_id(email)
    if result is None:
        return render_not_found("Candidate not found.")
    return render_candidate(result)


@router.get("/api/candidates")
def list_candidates(
    status: Optional[str] = Query(None),
    sort: Optional[str] = Query(None, pattern="^score$"),
    store: RecruitStore = Depends(get_store),
):
    """
    All screened candidates, oldest first, or best fit first with
    `sort=score`. `status` filters on an exact status, or on one of the
    groups `qualified`, `borderline`, `rejected`.
    """
    groups = {
        "qualified": store.get_qualified_candidates,
        "borderline": store.get_borderline_candidates,
        "rejected": store.get_rejected_candidates,
    }
    if not status:
        results = store.get_all_candidates()
    elif status.lower() in groups:
        results = groups[status.lower()]()
    else:
        results = store.get_candidates_by_status(status)
    if sort == "score":
        results = sort_by_candidate_score(results)
    return [r.model_dump(mode="json") for r in results]


@router.get("/api/candidates/{email}")
def get_candidate(email: str, store: RecruitStore = Depends(get_store)):
    return store.require_candidate(email).model_dump(mode="json")
