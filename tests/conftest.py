"""
Shared fixtures: a store backed by a temporary JSON file, a fake HTTP
session standing in for the n8n webhooks, and a TestClient over an app
wired to both.
"""
import copy
import json

import pytest
import requests
from fastapi.testclient import TestClient

from backend.main import create_app
from backend.models.schemas import ScreeningResult
from backend.store import RecruitStore
from backend.utils.local_storage import LocalStorage
from backend.utils.n8n_client import N8nClient

PIPELINE_URL = "https://n8n.example.com/webhook/pipeline"
SCHEDULING_URL = "https://n8n.example.com/webhook/schedule"

SAMPLE_RESULT = {
    "candidate": {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "phone": "+1 555 0100",
        "location": "London",
        "current_title": "Frontend Engineer",
        "years_experience": 6,
        "skills": ["React", "TypeScript", "CSS"],
        "years_experience_per_skill": {"React": 5, "TypeScript": 4},
        "education": {"degree": "BSc Mathematics", "institution": "UCL", "graduation_year": 2018},
        "certifications": [],
        "work_history": [{"company": "Analytical Engines", "title": "Frontend Engineer", "duration": "2019-2025"}],
        "languages": ["English"],
        "links": {"github": "https://github.com/ada"},
        "visa_status": "Citizen",
        "soft_skills": ["Communication"],
    },
    "job_requirements": {
        "must_haves": ["React", "TypeScript"],
        "nice_to_haves": ["Next.js"],
        "experience_years_required": 5,
        "culture_keywords": ["collaborative"],
        "job_title": "Senior Frontend Engineer",
        "department": "Engineering",
        "salary_range": {"min": 150000, "max": 190000},
    },
    "job_id": "role-001",
    "fit_score": 87,
    "status": "Qualified/High",
    "confidence": "High",
    "score_breakdown": {"must_haves": 95, "experience": 85, "adjacency": 75, "culture": 80},
    "strengths": ["Deep React experience"],
    "gaps": ["No GraphQL"],
    "proceed_to_scheduling": True,
}

SAMPLE_SLOTS = {
    "available_slots": [
        {"start": "2026-03-03T15:00:00Z", "end": "2026-03-03T15:45:00Z", "display": "Tuesday, March 3 at 10:00 AM ET"},
        {"start": "2026-03-04T14:00:00Z", "end": "2026-03-04T14:45:00Z", "display": "Wednesday, March 4 at 9:00 AM ET"},
    ],
    "candidate_name": "Ada Lovelace",
    "candidate_email": "ada@example.com",
    "job_title": "Senior Frontend Engineer",
    "job_id": "role-001",
}


def make_response(status_code: int = 200, payload=None, text: str = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.encoding = "utf-8"
    if text is None:
        text = json.dumps(payload if payload is not None else {})
    response._content = text.encode("utf-8")
    return response


class FakeSession:
    """Records every POST and answers from a queue of prepared responses."""

    def __init__(self):
        self.calls = []
        self.responses = []
        self.error = None

    def queue(self, response: requests.Response) -> None:
        self.responses.append(response)

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.responses.pop(0)


@pytest.fixture
def make_result():
    """Builds a validated ScreeningResult, overriding candidate email and any top-level field."""

    def _make(email: str = "ada@example.com", name: str = "Ada Lovelace", **overrides) -> ScreeningResult:
        payload = copy.deepcopy(SAMPLE_RESULT)
        payload["candidate"]["email"] = email
        payload["candidate"]["name"] = name
        payload.update(overrides)
        return ScreeningResult.model_validate(payload)

    return _make


class FullDiskStorage(LocalStorage):
    """Reads normally but every write fails."""

    def set_item(self, key, value):
        raise OSError("disk full")


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "store.json"))


@pytest.fixture
def full_disk_store(tmp_path):
    s = RecruitStore(FullDiskStorage(str(tmp_path / "store.json")))
    s.load()
    return s


@pytest.fixture
def store(storage):
    s = RecruitStore(storage)
    s.load()
    return s


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def n8n_client(fake_session):
    return N8nClient(pipeline_url=PIPELINE_URL, scheduling_url=SCHEDULING_URL, session=fake_session)


@pytest.fixture
def client(store, n8n_client):
    return TestClient(create_app(store=store, n8n_client=n8n_client))
