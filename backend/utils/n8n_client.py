"""
Client for the two n8n webhooks.

The pipeline webhook runs the whole multi-agent flow in one call:
parse resume -> score against the job -> schedule (qualified) or
send a rejection email (rejected); borderline candidates come back for
manual review. The scheduling webhook runs the scheduling agent alone and
is used when a borderline candidate is approved by hand.
"""
from typing import Any, Dict, Optional, Type
import logging

import requests
from pydantic import BaseModel, ValidationError as PydanticValidationError

from backend import config
from backend.errors import (
    ConfigurationError,
    PipelineError,
    SchedulingError,
    SchemaError,
    ValidationError,
)
from backend.models.schemas import SchedulingResult, ScreeningResult

logger = logging.getLogger("recruitai")


def _require_text(value: Optional[str], field: str, message: str) -> None:
    if not value or not value.strip():
        raise ValidationError(message, field=field)


def _parse_payload(response: requests.Response, model: Type[BaseModel], what: str) -> Any:
    try:
        payload = response.json()
    except ValueError:
        raise SchemaError(f"{what} response is not valid JSON")

    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        fields = ", ".join(err["field"] or "<root>" for err in errors)
        raise SchemaError(f"{what} response has an unexpected shape ({fields})", errors=errors)


class N8nClient:
    """
    Explicit URLs and timeout win. A client built with from_env() resolves
    them from the environment on every call instead.
    """

    def __init__(
        self,
        pipeline_url: Optional[str] = None,
        scheduling_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        read_env: bool = False,
    ):
        self._pipeline_url = pipeline_url
        self._scheduling_url = scheduling_url
        self._timeout = timeout
        self.read_env = read_env
        self.session = session or requests.Session()

    @classmethod
    def from_env(cls, session: Optional[requests.Session] = None) -> "N8nClient":
        return cls(session=session, read_env=True)

    @property
    def pipeline_url(self) -> Optional[str]:
        return self._pipeline_url or (config.pipeline_webhook_url() if self.read_env else None)

    @property
    def scheduling_url(self) -> Optional[str]:
        return self._scheduling_url or (config.scheduling_webhook_url() if self.read_env else None)

    @property
    def timeout(self) -> Optional[float]:
        if self._timeout is None and self.read_env:
            return config.webhook_timeout()
        return self._timeout

    def _check_configured(self) -> None:
        if not self.pipeline_url:
            raise ConfigurationError("N8N_PIPELINE_WEBHOOK")
        if not self.scheduling_url:
            raise ConfigurationError("N8N_SCHEDULING_WEBHOOK")

    def _post(self, url: str, body: Dict[str, Any], error_cls: Type[PipelineError]) -> requests.Response:
        try:
            response = self.session.post(url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"{error_cls.prefix}: {e}")
            raise error_cls()

        if not response.ok:
            logger.warning(f"{error_cls.prefix} with HTTP {response.status_code}")
            raise error_cls(upstream_status=response.status_code, body=response.text)
        return response

    # ---------------------------
    # Full multi-agent pipeline
    # ---------------------------
    def run_pipeline(
        self,
        resume_text: str,
        job_description: str,
        job_id: str,
        interviewer_calendar_id: Optional[str] = None,
    ) -> ScreeningResult:
        self._check_configured()
        _require_text(resume_text, "resume_text", "Resume text is required.")
        _require_text(job_description, "job_description", "Job description is required.")

        body = {
            "resume_text": resume_text,
            "job_description": job_description,
            "job_id": job_id,
            "interviewer_calendar_id": interviewer_calendar_id or config.DEFAULT_CALENDAR_ID,
        }
        logger.info(f"Running screening pipeline for job {job_id}")
        response = self._post(self.pipeline_url, body, PipelineError)
        result = _parse_payload(response, ScreeningResult, "Pipeline")
        logger.info(f"Pipeline finished for job {job_id}: {result.status} ({result.fit_score})")
        return result

    # ---------------------------
    # Standalone scheduling
    # ---------------------------
    def schedule_interview(
        self,
        candidate_email: str,
        candidate_name: str,
        job_title: str,
        job_id: str,
        interviewer_calendar_id: Optional[str] = None,
    ) -> SchedulingResult:
        self._check_configured()
        _require_text(candidate_email, "candidate_email", "Candidate email is required.")
        _require_text(candidate_name, "candidate_name", "Candidate name is required.")

        body = {
            "candidate_email": candidate_email,
            "candidate_name": candidate_name,
            "job_title": job_title,
            "job_id": job_id,
            "interviewer_calendar_id": interviewer_calendar_id or config.DEFAULT_CALENDAR_ID,
        }
        logger.info(f"Requesting interview slots for job {job_id}")
        response = self._post(self.scheduling_url, body, SchedulingError)
        return _parse_payload(response, SchedulingResult, "Scheduling")
