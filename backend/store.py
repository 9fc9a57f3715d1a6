"""
Application state: job roles and the screening results produced for them.

The store is created once by the app factory and handed to the routes
through a FastAPI dependency. State is loaded explicitly with `load()` at
startup and written back with `save()` after every mutation.
"""
from itertools import chain
from typing import Dict, List, Optional
import threading
import logging

from backend.config import STORE_KEY
from backend.errors import DuplicateCandidateError, NotFoundError
from backend.models.schemas import (
    BORDERLINE,
    QUALIFIED_STATUSES,
    REJECTED,
    Role,
    ScreeningResult,
)
from backend.utils.local_storage import LocalStorage

logger = logging.getLogger("recruitai")

STORE_VERSION = 0

# ---------------------------
# Seed Roles
# ---------------------------
SEED_ROLES = [
    {
        "id": "role-001",
        "title": "Senior Frontend Engineer",
        "department": "Engineering",
        "description": """We are looking for a Senior Frontend Engineer with 5+ years of experience building production-grade React applications.

Required:
- 5+ years React/TypeScript experience
- Strong CSS and responsive design skills
- Experience with state management (Redux, Zustand, or similar)
- Familiarity with REST APIs and GraphQL
- Experience with testing frameworks (Jest, Cypress)

Nice to have:
- Next.js experience
- Design system experience
- Performance optimization background

Culture: Fast-paced, collaborative, user-obsessed team. We ship weekly.""",
        "status": "Open",
        "created_at": "2026-02-01T00:00:00Z",
        "candidate_count": 0,
    },
    {
        "id": "role-002",
        "title": "Product Manager — Core Platform",
        "department": "Product",
        "description": """Seeking an experienced Product Manager to lead our core platform roadmap.

Required:
- 4+ years of product management at a SaaS company
- Experience with B2B enterprise products
- Strong data analysis skills (SQL a plus)
- Proven track record shipping features at scale
- Excellent stakeholder communication

Nice to have:
- Technical background or engineering experience
- Experience with AI/ML products
- Background in HR Tech or Recruiting tools

Culture: Outcome-driven, direct communication, no ego.""",
        "status": "Open",
        "created_at": "2026-02-10T00:00:00Z",
        "candidate_count": 0,
    },
    {
        "id": "role-003",
        "title": "DevOps Engineer",
        "department": "Infrastructure",
        "description": """Looking for a DevOps Engineer to own our cloud infrastructure and CI/CD pipelines.

Required:
- 3+ years DevOps/SRE experience
- AWS or GCP expertise (AWS preferred)
- Kubernetes and Docker proficiency
- CI/CD pipeline design (GitHub Actions, CircleCI)
- Infrastructure as Code (Terraform or Pulumi)

Nice to have:
- Security/compliance background
- Experience with observability tools (Datadog, Grafana)
- On-call experience

Culture: Reliability first. We treat incidents as learning opportunities.""",
        "status": "Open",
        "created_at": "2026-02-15T00:00:00Z",
        "candidate_count": 0,
    },
]


def seed_roles() -> List[Role]:
    return [Role.model_validate(r) for r in SEED_ROLES]


def _dump_state(roles: List[Role], results: Dict[str, List[ScreeningResult]]) -> dict:
    return {
        "roles": [r.model_dump(mode="json") for r in roles],
        "screeningResults": {
            role_id: [item.model_dump(mode="json") for item in items]
            for role_id, items in results.items()
        },
    }


class RecruitStore:
    def __init__(self, storage: LocalStorage, enforce_unique_emails: bool = True):
        self._storage = storage
        self._lock = threading.RLock()
        self.enforce_unique_emails = enforce_unique_emails
        self._roles: List[Role] = seed_roles()
        self._results: Dict[str, List[ScreeningResult]] = {}

    # ---------------------------
    # Persistence
    # ---------------------------
    def load(self) -> None:
        """
        Restores persisted roles and results, or the seed state when nothing
        usable is stored.
        """
        with self._lock:
            try:
                record = self._storage.get_item(STORE_KEY)
                if record is None:
                    logger.info("No persisted state found, starting from seed roles")
                    self._reset()
                    return
                state = record["state"]
                roles = [Role.model_validate(r) for r in state["roles"]]
                results = {
                    role_id: [ScreeningResult.model_validate(item) for item in items]
                    for role_id, items in state.get("screeningResults", {}).items()
                }
            except (ValueError, KeyError, TypeError, AttributeError) as e:
                logger.warning(f"Persisted state is unreadable, falling back to seed roles: {e}")
                self._reset()
                return

            self._roles = roles
            self._results = results
            logger.info(f"Loaded {len(roles)} roles and {sum(len(v) for v in results.values())} screening results")

    def save(self) -> None:
        with self._lock:
            self._write(self._roles, self._results)

    def _write(self, roles: List[Role], results: Dict[str, List[ScreeningResult]]) -> None:
        self._storage.set_item(STORE_KEY, {"state": _dump_state(roles, results), "version": STORE_VERSION})

    def snapshot(self) -> dict:
        with self._lock:
            return _dump_state(self._roles, self._results)

    def _reset(self) -> None:
        self._roles = seed_roles()
        self._results = {}

    # ---------------------------
    # Mutations
    # ---------------------------
    def add_screening_result(self, role_id: str, result: ScreeningResult) -> None:
        with self._lock:
            if self.enforce_unique_emails and self.get_candidate_by_id(result.email) is not None:
                raise DuplicateCandidateError(result.email, role_id)

            bucket = self._results.get(role_id, []) + [result]
            results = {**self._results, role_id: bucket}
            roles = [
                r.model_copy(update={"candidate_count": len(bucket)}) if r.id == role_id else r
                for r in self._roles
            ]
            if not any(r.id == role_id for r in roles):
                logger.warning(f"Screening result stored under unknown role: {role_id}")

            # memory only moves once the new state is on disk
            self._write(roles, results)
            self._results = results
            self._roles = roles

    # ---------------------------
    # Accessors
    # ---------------------------
    @property
    def roles(self) -> List[Role]:
        return list(self._roles)

    def open_roles(self) -> List[Role]:
        return [r for r in self._roles if r.status == "Open"]

    def get_role_by_id(self, role_id: str) -> Optional[Role]:
        return next((r for r in self._roles if r.id == role_id), None)

    def require_role(self, role_id: str) -> Role:
        role = self.get_role_by_id(role_id)
        if role is None:
            raise NotFoundError("Role", role_id)
        return role

    def get_candidates_by_role_id(self, role_id: str) -> List[ScreeningResult]:
        return list(self._results.get(role_id, []))

    def get_candidate_by_id(self, email: str) -> Optional[ScreeningResult]:
        return next((r for r in self.get_all_candidates() if r.candidate.email == email), None)

    def require_candidate(self, email: str) -> ScreeningResult:
        result = self.get_candidate_by_id(email)
        if result is None:
            raise NotFoundError("Candidate", email)
        return result

    def get_all_candidates(self) -> List[ScreeningResult]:
        return list(chain.from_iterable(self._results.values()))

    def get_candidates_by_status(self, status: str) -> List[ScreeningResult]:
        return [r for r in self.get_all_candidates() if r.status == status]

    def get_qualified_candidates(self) -> List[ScreeningResult]:
        return [r for r in self.get_all_candidates() if r.status in QUALIFIED_STATUSES]

    def get_borderline_candidates(self) -> List[ScreeningResult]:
        return self.get_candidates_by_status(BORDERLINE)

    def get_rejected_candidates(self) -> List[ScreeningResult]:
        return self.get_candidates_by_status(REJECTED)
