from pydantic import BaseModel, ConfigDict, confloat, conint, Field
from typing import Dict, List, Optional

QUALIFIED_HIGH = "Qualified/High"
QUALIFIED_MEDIUM = "Qualified/Medium"
BORDERLINE = "Borderline"
REJECTED = "Rejected"

QUALIFIED_STATUSES = (QUALIFIED_HIGH, QUALIFIED_MEDIUM)

Score = confloat(ge=0, le=100)


# ---------------------------
# Candidate (parsed by the pipeline)
# ---------------------------
class Education(BaseModel):
    degree: str = ""
    institution: str = ""
    graduation_year: Optional[int] = None

class WorkHistory(BaseModel):
    company: str = ""
    title: str = ""
    duration: str = ""

class CandidateLinks(BaseModel):
    github: Optional[str] = None
    linkedin: Optional[str] = None
    portfolio: Optional[str] = None

class Candidate(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str = ""
    location: str = ""
    current_title: str = ""
    years_experience: float = 0
    skills: List[str] = []
    years_experience_per_skill: Dict[str, float] = {}
    education: Optional[Education] = None
    certifications: List[str] = []
    work_history: List[WorkHistory] = []
    languages: List[str] = []
    links: CandidateLinks = Field(default_factory=CandidateLinks)
    visa_status: str = ""
    soft_skills: List[str] = []

class SalaryRange(BaseModel):
    min: float = 0
    max: float = 0

class JobRequirements(BaseModel):
    model_config = ConfigDict(extra="allow")

    must_haves: List[str] = []
    nice_to_haves: List[str] = []
    experience_years_required: float = 0
    culture_keywords: List[str] = []
    job_title: str = ""
    department: str = ""
    salary_range: Optional[SalaryRange] = None


# ---------------------------
# Scoring
# ---------------------------
class ScoreBreakdown(BaseModel):
    must_haves: Score
    experience: Score
    adjacency: Score
    culture: Score

class ScreeningResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    candidate: Candidate
    job_requirements: Optional[JobRequirements] = None
    job_id: str
    fit_score: Score
    status: str = Field(pattern=r"^(Qualified/High|Qualified/Medium|Borderline|Rejected)$")
    confidence: str = Field(pattern=r"^(High|Medium|Low)$")
    score_breakdown: ScoreBreakdown
    strengths: List[str] = []
    gaps: List[str] = []
    proceed_to_scheduling: bool = False

    @property
    def email(self) -> str:
        return self.candidate.email


# ---------------------------
# Roles
# ---------------------------
class Role(BaseModel):
    id: str
    title: str
    department: str
    description: str
    status: str = Field(pattern=r"^(Open|Closed|Paused)$")
    created_at: str
    candidate_count: conint(ge=0) = 0


# ---------------------------
# Scheduling
# ---------------------------
class TimeSlot(BaseModel):
    start: str
    end: str
    display: str

class SchedulingResult(BaseModel):
    available_slots: List[TimeSlot] = []
    candidate_name: str = ""
    candidate_email: str = ""
    job_title: str = ""
    job_id: str = ""


# ---------------------------
# API request bodies
# ---------------------------
class ScreenRequest(BaseModel):
    resume_text: str
    interviewer_calendar_id: Optional[str] = None

class ScheduleRequest(BaseModel):
    interviewer_calendar_id: Optional[str] = None
