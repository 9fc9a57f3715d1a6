from datetime import datetime
from typing import List
import re

from backend.models.schemas import (
    BORDERLINE,
    QUALIFIED_HIGH,
    QUALIFIED_MEDIUM,
    REJECTED,
    ScreeningResult,
)

STATUS_LABELS = {
    QUALIFIED_HIGH: "Qualified · High",
    QUALIFIED_MEDIUM: "Qualified · Medium",
    BORDERLINE: "Borderline",
    REJECTED: "Rejected",
}

# css class suffix used by the badge styles in frontend/styles/app.css
STATUS_STYLES = {
    QUALIFIED_HIGH: "green",
    QUALIFIED_MEDIUM: "blue",
    BORDERLINE: "yellow",
    REJECTED: "red",
}

SCORE_COMPONENTS = [
    ("Must-Have Skills", "must_haves", "40%"),
    ("Experience Depth", "experience", "25%"),
    ("Adjacent Skills", "adjacency", "20%"),
    ("Culture Fit", "culture", "15%"),
]


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def status_style(status: str) -> str:
    return STATUS_STYLES.get(status, "gray")


def status_color(status: str) -> str:
    if "Qualified" in status:
        return "green"
    if status == BORDERLINE:
        return "yellow"
    if status == REJECTED:
        return "red"
    return "blue"


def confidence_color(confidence: str) -> str:
    if confidence == "High":
        return "green"
    if confidence == "Medium":
        return "yellow"
    return "red"


def score_bar_color(value: float) -> str:
    if value >= 80:
        return "green"
    if value >= 60:
        return "blue"
    if value >= 40:
        return "yellow"
    return "red"


def format_score(value: float) -> str:
    return f"{value:g}"


def _parse_iso(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def format_date(value: str) -> str:
    """'2026-02-01T00:00:00Z' -> 'Feb 1, 2026'"""
    try:
        d = _parse_iso(value)
    except (TypeError, ValueError, AttributeError):
        return "Invalid date"
    return f"{d.strftime('%b')} {d.day}, {d.year}"


def format_datetime(value: str) -> str:
    try:
        d = _parse_iso(value)
    except (TypeError, ValueError, AttributeError):
        return "Invalid date"
    return f"{d.strftime('%b')} {d.day}, {d.year}, {d.strftime('%I:%M %p')}"


def sort_by_candidate_score(candidates: List[ScreeningResult]) -> List[ScreeningResult]:
    return sorted(candidates, key=lambda r: r.fit_score, reverse=True)


def get_average_fit_score(candidates: List[ScreeningResult]) -> int:
    if not candidates:
        return 0
    return round(sum(c.fit_score for c in candidates) / len(candidates))


def truncate_text(text: str, max_length: int = 100) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "…"


def is_valid_email(email: str) -> bool:
    return bool(re.match(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", email or ""))
