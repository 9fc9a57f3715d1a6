from fastapi import APIRouter, Depends

from backend.dependencies import get_store
from backend.store import RecruitStore
from backend.utils.formatting import get_average_fit_score
from backend.views import render_dashboard

router = APIRouter(tags=["Dashboard"])


def dashboard_summary_data(store: RecruitStore) -> dict:
    candidates = store.get_all_candidates()
    return {
        "total_screened": len(candidates),
        "advancing": len(store.get_qualified_candidates()),
        "borderline": len(store.get_borderline_candidates()),
        "rejected": len(store.get_rejected_candidates()),
        "average_fit_score": get_average_fit_score(candidates),
        "open_roles": len(store.open_roles()),
    }


@router.get("/")
def dashboard(store: RecruitStore = Depends(get_store)):
    return render_dashboard(store.open_roles(), dashboard_summary_data(store), store.get_all_candidates())


@router.get("/api/dashboard/summary")
def dashboard_summary(store: RecruitStore = Depends(get_store)):
    return dashboard_summary_data(store)
