"""
Error taxonomy shared by the store, the webhook client and the views.
Every error carries an HTTP status so the JSON API can render it directly.
"""
from typing import Any, Dict, Optional


class RecruitError(Exception):
    """Base application error."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(RecruitError):
    """A required webhook address is not configured."""

    def __init__(self, setting: str):
        super().__init__(
            message=f"{setting} is not configured. Set it in your environment or .env file.",
            status_code=503,
            error_code="CONFIGURATION_ERROR",
            details={"setting": setting},
        )


class ValidationError(RecruitError):
    """Required input is missing or malformed."""

    def __init__(self, message: str, field: Optional[str] = None, status_code: int = 400):
        super().__init__(
            message=message,
            status_code=status_code,
            error_code="VALIDATION_ERROR",
            details={"field": field},
        )


class FlowBusyError(ValidationError):
    def __init__(self, message: str = "A request is already in progress. Please wait for it to finish."):
        super().__init__(message, status_code=409)
        self.error_code = "FLOW_BUSY"


class DuplicateCandidateError(RecruitError):
    def __init__(self, email: str, role_id: Optional[str] = None):
        super().__init__(
            message=f"A candidate with email {email} has already been screened",
            status_code=409,
            error_code="DUPLICATE_CANDIDATE",
            details={"email": email, "role_id": role_id},
        )


class NotFoundError(RecruitError):
    def __init__(self, resource: str, identifier: Optional[str] = None):
        super().__init__(
            message=f"{resource} not found" + (f": {identifier}" if identifier else ""),
            status_code=404,
            error_code="NOT_FOUND",
            details={"resource": resource, "identifier": identifier},
        )


class PipelineError(RecruitError):
    """
    The pipeline webhook answered with a non-2xx status or could not be reached.
    `status_code` on the instance is the HTTP status we answer with; the
    upstream status and body live in `upstream_status` / `body`.
    """

    prefix = "Pipeline failed"
    error_label = "PIPELINE_ERROR"

    def __init__(self, message: Optional[str] = None, upstream_status: Optional[int] = None, body: Optional[str] = None):
        if message is None:
            if upstream_status is not None:
                message = f"{self.prefix} ({upstream_status}): {body or ''}"
            else:
                message = f"{self.prefix}: could not reach the webhook"
        self.upstream_status = upstream_status
        self.body = body
        super().__init__(
            message=message,
            status_code=502,
            error_code=self.error_label,
            details={"upstream_status": upstream_status},
        )


class SchedulingError(PipelineError):
    prefix = "Scheduling failed"
    error_label = "SCHEDULING_ERROR"


class SchemaError(RecruitError):
    """The webhook answered 2xx but the payload does not match the expected shape."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(
            message=message,
            status_code=502,
            error_code="SCHEMA_ERROR",
            details={"errors": errors or []},
        )
