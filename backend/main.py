from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from typing import Optional
import os
import logging

from backend import config
from backend.errors import RecruitError
from backend.flows import FlowRegistry
from backend.store import RecruitStore
from backend.utils.local_storage import LocalStorage
from backend.utils.n8n_client import N8nClient

# -------------------------------
# Logging
# -------------------------------
logging.basicConfig(level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger("recruitai")

# -------------------------------
# Frontend Directory
# -------------------------------
FRONTEND_DIR = config.BASE_DIR / "frontend"


def _allowed_origins() -> list:
    frontend_url = os.getenv("FRONTEND_URL")
    allowed_origins_env = os.getenv("ALLOWED_ORIGINS", "")
    allowed_origins = []
    if frontend_url:
        allowed_origins.append(frontend_url)
    if allowed_origins_env:
        allowed_origins.extend([o.strip() for o in allowed_origins_env.split(",") if o.strip()])
    return allowed_origins or ["*"]


def create_app(store: Optional[RecruitStore] = None, n8n_client: Optional[N8nClient] = None) -> FastAPI:
    """
    Composition root: builds the store, the webhook client and the flow
    registry, and hands them to the routes through app.state.
    """
    app = FastAPI(title="Recruit-AI Screening Dashboard")

    app.add_middleware(CORSMiddleware, allow_origins=_allowed_origins(), allow_credentials=True, allow_methods=["*"], allow_headers=["*"])

    if store is None:
        store = RecruitStore(LocalStorage(config.STORE_PATH), enforce_unique_emails=config.ENFORCE_UNIQUE_EMAILS)
        store.load()
    app.state.store = store
    app.state.n8n_client = n8n_client or N8nClient.from_env()
    app.state.flows = FlowRegistry()

    # -------------------------------
    # Static Files
    # -------------------------------
    styles_path = FRONTEND_DIR / "styles"
    if styles_path.exists():
        app.mount("/styles", StaticFiles(directory=styles_path), name="styles")
    else:
        logger.warning(f"Styles folder not found at: {styles_path}")

    # -------------------------------
    # API Health & Root
    # -------------------------------
    @app.get("/api")
    def api_root():
        return {"message": "Recruit-AI API is running"}

    @app.get("/health")
    def health():
        return {"status": "ok"}

    # -------------------------------
    # Routers
    # -------------------------------
    from backend.routes.dashboard_routes import router as dashboard_router
    from backend.routes.role_routes import router as role_router
    from backend.routes.candidate_routes import router as candidate_router
    from backend.routes.schedule_routes import router as schedule_router

    app.include_router(dashboard_router)
    app.include_router(role_router)
    app.include_router(candidate_router)
    app.include_router(schedule_router)

    # -------------------------------
    # Exception Handlers
    # -------------------------------
    @app.exception_handler(RecruitError)
    async def recruit_error_handler(request: Request, exc: RecruitError):
        logger.warning(f"{exc.error_code} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc)
            }
        )

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run(app, host="0.0.0.0", port=port)
