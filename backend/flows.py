"""
In-memory state for the two interactive flows.

A ScreeningFlow lives per role page and a SchedulingFlow per candidate
schedule page. Neither is persisted: a restart drops buffers, errors and
interview confirmations.
"""
from enum import Enum
from typing import Dict, List, Optional
import threading
import logging

from backend.errors import FlowBusyError, RecruitError, ValidationError
from backend.models.schemas import SchedulingResult, ScreeningResult, TimeSlot
from backend.store import RecruitStore
from backend.utils.n8n_client import N8nClient

logger = logging.getLogger("recruitai")

UNEXPECTED_ERROR = "Something went wrong. Please try again."


class ScreeningState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class SchedulingState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    PICKING = "picking"
    CONFIRMED = "confirmed"


class ScreeningFlow:
    def __init__(self, role_id: str):
        self.role_id = role_id
        self.state = ScreeningState.IDLE
        self.resume_text = ""
        self.file_name: Optional[str] = None
        self.error: Optional[str] = None
        self.last_result: Optional[ScreeningResult] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self.state == ScreeningState.RUNNING

    @property
    def can_screen(self) -> bool:
        return not self.is_running and bool(self.resume_text.strip())

    def set_resume(self, text: str, file_name: Optional[str] = None) -> None:
        with self._lock:
            if self.is_running:
                raise FlowBusyError()
            self.resume_text = text
            self.file_name = file_name
            self.error = None

    def fail_upload(self, message: str) -> None:
        with self._lock:
            self.error = message

    def _begin(self) -> None:
        with self._lock:
            if self.is_running:
                raise FlowBusyError("A screening is already running for this role.")
            if not self.resume_text.strip():
                self.error = "Please upload a resume first."
                raise ValidationError(self.error, field="resume_text")
            self.state = ScreeningState.RUNNING
            self.error = None
            self.last_result = None

    def run(self, store: RecruitStore, client: N8nClient, interviewer_calendar_id: Optional[str] = None) -> ScreeningResult:
        """
        Runs one screening attempt for the buffered resume.
        Errors are recorded on the flow for display and re-raised.
        """
        self._begin()
        try:
            role = store.require_role(self.role_id)
            result = client.run_pipeline(
                resume_text=self.resume_text,
                job_description=role.description,
                job_id=role.id,
                interviewer_calendar_id=interviewer_calendar_id,
            )
            store.add_screening_result(role.id, result)
        except RecruitError as e:
            logger.warning(f"Screening failed for role {self.role_id}: {e.message}")
            with self._lock:
                self.state = ScreeningState.FAILED
                self.error = e.message
            raise
        except Exception:
            logger.exception(f"Unexpected error while screening for role {self.role_id}")
            with self._lock:
                self.state = ScreeningState.FAILED
                self.error = UNEXPECTED_ERROR
            raise

        with self._lock:
            self.state = ScreeningState.SUCCESS
            self.last_result = result
            self.resume_text = ""
            self.file_name = None
        return result


class SchedulingFlow:
    def __init__(self, candidate_email: str):
        self.candidate_email = candidate_email
        self.state = SchedulingState.IDLE
        self.slots: List[TimeSlot] = []
        self.selected_slot: Optional[TimeSlot] = None
        self.error: Optional[str] = None
        self._lock = threading.Lock()

    def find_slots(self, store: RecruitStore, client: N8nClient) -> SchedulingResult:
        with self._lock:
            if self.state == SchedulingState.LOADING:
                raise FlowBusyError("Already checking the calendar.")
            if self.state == SchedulingState.CONFIRMED:
                raise ValidationError("This interview has already been confirmed.")
            self.state = SchedulingState.LOADING
            self.error = None

        try:
            result = store.require_candidate(self.candidate_email)
            job_title = result.job_requirements.job_title if result.job_requirements else ""
            response = client.schedule_interview(
                candidate_email=result.candidate.email,
                candidate_name=result.candidate.name,
                job_title=job_title,
                job_id=result.job_id,
            )
        except RecruitError as e:
            logger.warning(f"Slot lookup failed for {self.candidate_email}: {e.message}")
            with self._lock:
                self.state = SchedulingState.IDLE
                self.error = e.message
            raise
        except Exception:
            logger.exception(f"Unexpected error while finding slots for {self.candidate_email}")
            with self._lock:
                self.state = SchedulingState.IDLE
                self.error = UNEXPECTED_ERROR
            raise

        with self._lock:
            self.slots = list(response.available_slots)
            self.selected_slot = None
            self.state = SchedulingState.PICKING
        return response

    def select(self, slot_start: str) -> TimeSlot:
        with self._lock:
            if self.state != SchedulingState.PICKING:
                raise ValidationError("No slots to choose from. Find available slots first.")
            slot = next((s for s in self.slots if s.start == slot_start), None)
            if slot is None:
                raise ValidationError("Selected slot is not available.", field="slot")
            self.selected_slot = slot
            self.error = None
            return slot

    def record_error(self, message: str) -> None:
        with self._lock:
            self.error = message

    def confirm(self) -> TimeSlot:
        with self._lock:
            if self.state != SchedulingState.PICKING or self.selected_slot is None:
                raise ValidationError("Select a slot before confirming.", field="slot")
            self.state = SchedulingState.CONFIRMED
            logger.info(f"Interview confirmed for {self.candidate_email} at {self.selected_slot.start}")
            return self.selected_slot


class FlowRegistry:
    """Per-process registry handing out one flow per role / candidate."""

    def __init__(self):
        self._screening: Dict[str, ScreeningFlow] = {}
        self._scheduling: Dict[str, SchedulingFlow] = {}
        self._lock = threading.Lock()

    def screening(self, role_id: str) -> ScreeningFlow:
        with self._lock:
            if role_id not in self._screening:
                self._screening[role_id] = ScreeningFlow(role_id)
            return self._screening[role_id]

    def scheduling(self, candidate_email: str) -> SchedulingFlow:
        with self._lock:
            if candidate_email not in self._scheduling:
                self._scheduling[candidate_email] = SchedulingFlow(candidate_email)
            return self._scheduling[candidate_email]
