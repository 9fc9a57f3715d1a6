"""
HTML rendering for the dashboard pages.

Pages are plain HTML strings wrapped in a shared layout; styles live in
frontend/styles/app.css. Every value coming from the store or the user is
escaped with `e()`.
"""
from html import escape
from typing import List, Optional
from urllib.parse import quote

from fastapi.responses import HTMLResponse

from backend.flows import SchedulingFlow, SchedulingState, ScreeningFlow
from backend.models.schemas import BORDERLINE, REJECTED, Role, ScreeningResult
from backend.utils.formatting import (
    SCORE_COMPONENTS,
    confidence_color,
    format_date,
    format_datetime,
    format_score,
    is_valid_email,
    score_bar_color,
    status_color,
    status_label,
    status_style,
    truncate_text,
)


def e(value) -> str:
    return escape("" if value is None else str(value))


def candidate_url(email: str) -> str:
    return f"/candidates/{quote(email, safe='')}"


def schedule_url(email: str) -> str:
    return f"/schedule/{quote(email, safe='')}"


# -------------------------------
# Layout
# -------------------------------
def page(title: str, body: str, status_code: int = 200) -> HTMLResponse:
    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{e(title)} · Recruit-AI</title>
  <link rel="stylesheet" href="/styles/app.css">
</head>
<body>
  <nav class="navbar">
    <a href="/" class="brand"><span class="logo">RA</span> Recruit-AI</a>
    <a href="/" class="nav-link">Dashboard</a>
  </nav>
  <main class="container">
{body}
  </main>
</body>
</html>"""
    return HTMLResponse(html, status_code=status_code)


def render_not_found(message: str) -> HTMLResponse:
    body = f"""
    <div class="empty">
      <p>{e(message)}</p>
      <a href="/" class="link">← Back to Dashboard</a>
    </div>"""
    return page("Not found", body, status_code=404)


def render_error_banner(message: Optional[str]) -> str:
    if not message:
        return ""
    return f'<div class="alert alert-error">{e(message)}</div>'


def score_badge(score, status: str, size: str = "md") -> str:
    return (
        f'<span class="badge badge-{size} badge-{status_style(status)}">'
        f'<strong>{e(format_score(score))}</strong> {e(status_label(status))}</span>'
    )


def score_bar(value) -> str:
    return (
        f'<div class="bar"><div class="bar-fill bar-{score_bar_color(value)}" '
        f'style="width: {e(format_score(value))}%"></div></div>'
    )


# -------------------------------
# Dashboard
# -------------------------------
def render_dashboard(roles: List[Role], summary: dict, candidates: List[ScreeningResult]) -> HTMLResponse:
    stats = [
        ("Total Screened", summary["total_screened"], "gray"),
        ("Advancing", summary["advancing"], "green"),
        ("Borderline", summary["borderline"], "yellow"),
        ("Rejected", summary["rejected"], "red"),
    ]
    stat_cards = "".join(
        f'<div class="card stat"><div class="stat-value text-{color}">{value}</div>'
        f'<div class="stat-label">{label}</div></div>'
        for label, value, color in stats
    )

    role_cards = "".join(
        f"""
        <a class="card role-card" href="/roles/{quote(r.id, safe='')}">
          <div>
            <h3>{e(r.title)}</h3>
            <p class="muted">{e(r.department)} · opened {e(format_date(r.created_at))}</p>
            <p class="muted small">{e(truncate_text(r.description.splitlines()[0] if r.description else ""))}</p>
          </div>
          <span class="muted">{r.candidate_count} candidate{"" if r.candidate_count == 1 else "s"}</span>
        </a>"""
        for r in roles
    )

    if candidates:
        rows = "".join(
            f"""
            <tr>
              <td><div class="strong">{e(r.candidate.name)}</div><div class="muted small">{e(r.candidate.email)}</div></td>
              <td>{score_badge(r.fit_score, r.status, "sm")}</td>
              <td class="muted">{e(r.job_requirements.job_title if r.job_requirements and r.job_requirements.job_title else "—")}</td>
              <td><a class="link" href="{candidate_url(r.candidate.email)}">View</a></td>
            </tr>"""
            for r in list(reversed(candidates))[:10]
        )
        recent = f"""
    <section>
      <h2>Recent Candidates ({len(candidates)})</h2>
      <div class="card">
        <table>
          <thead><tr><th>Candidate</th><th>Score</th><th>Role</th><th>Action</th></tr></thead>
          <tbody>{rows}</tbody>
        </table>
      </div>
    </section>"""
    else:
        recent = """
    <div class="card empty">
      <p class="strong">No candidates screened yet</p>
      <p class="small">Open a role and upload a resume to get started</p>
    </div>"""

    body = f"""
    <header>
      <h1>Recruitment Dashboard</h1>
      <p class="muted">AI-powered screening pipeline overview</p>
    </header>
    <div class="stats">{stat_cards}</div>
    <section>
      <h2>Open Roles ({len(roles)})</h2>
      <div class="stack">{role_cards}</div>
    </section>
{recent}"""
    return page("Dashboard", body)


# -------------------------------
# Role detail
# -------------------------------
def render_role_detail(role: Role, candidates: List[ScreeningResult], flow: ScreeningFlow) -> HTMLResponse:
    role_path = f"/roles/{quote(role.id, safe='')}"
    disabled = "" if flow.can_screen else " disabled"

    uploaded = ""
    if flow.resume_text:
        uploaded = f'<p class="muted small">Loaded: {e(flow.file_name or "resume")} ({len(flow.resume_text)} characters)</p>'

    running = ""
    if flow.is_running:
        running = '<p class="text-blue small">Running AI pipeline (Agent 1 → 2 → scheduling)…</p>'

    last = ""
    if flow.last_result is not None:
        r = flow.last_result
        last = f"""
        <div class="alert alert-success">
          <p class="strong">Screened: {e(r.candidate.name)}</p>
          {score_badge(r.fit_score, r.status, "sm")}
          <a class="link small" href="{candidate_url(r.candidate.email)}">View full profile →</a>
        </div>"""

    if candidates:
        rows = "".join(
            f"""
            <tr>
              <td><div class="strong">{e(r.candidate.name)}</div><div class="muted small">{e(r.candidate.current_title)}</div></td>
              <td>{score_badge(r.fit_score, r.status, "sm")}</td>
              <td class="text-{confidence_color(r.confidence)} small">{e(r.confidence)}</td>
              <td><a class="link" href="{candidate_url(r.candidate.email)}">View</a></td>
            </tr>"""
            for r in reversed(candidates)
        )
        table = f"""
        <div class="card">
          <table>
            <thead><tr><th>Candidate</th><th>Score</th><th>Confidence</th><th>Action</th></tr></thead>
            <tbody>{rows}</tbody>
          </table>
        </div>"""
    else:
        table = """
        <div class="card empty">
          <p>No candidates screened for this role yet.</p>
          <p class="small">Upload a resume to get started.</p>
        </div>"""

    body = f"""
    <a class="link small" href="/">← Dashboard</a>
    <header>
      <h1>{e(role.title)}</h1>
      <p class="muted">{e(role.department)}</p>
    </header>
    <div class="grid">
      <aside class="card panel">
        <h2>Screen a Candidate</h2>
        <form method="post" action="{role_path}/resume" enctype="multipart/form-data">
          <input type="file" name="file" accept=".txt,.pdf,.docx">
          <p class="muted small">Supports .txt and .pdf (up to 5MB)</p>
          <button type="submit" class="btn btn-secondary"{" disabled" if flow.is_running else ""}>Upload</button>
        </form>
        {uploaded}
        {render_error_banner(flow.error)}
        {running}
        <form method="post" action="{role_path}/screen">
          <button type="submit" class="btn btn-primary"{disabled}>{"Running AI Pipeline…" if flow.is_running else "Screen Candidate"}</button>
        </form>
        {last}
      </aside>
      <section>
        <h2>Candidates ({len(candidates)})</h2>
        {table}
        <div class="card">
          <h3>Job Description</h3>
          <pre class="description">{e(role.description)}</pre>
        </div>
      </section>
    </div>"""
    return page(role.title, body)


# -------------------------------
# Candidate profile
# -------------------------------
def render_candidate(result: ScreeningResult) -> HTMLResponse:
    c = result.candidate
    must_haves = set(result.job_requirements.must_haves) if result.job_requirements else set()

    contact = []
    if is_valid_email(c.email):
        contact.append(f'<a class="link" href="mailto:{e(c.email)}">{e(c.email)}</a>')
    elif c.email:
        contact.append(f"<span>{e(c.email)}</span>")
    if c.phone:
        contact.append(f"<span>{e(c.phone)}</span>")
    if c.links.github:
        contact.append(f'<a class="link" href="{e(c.links.github)}" target="_blank" rel="noopener noreferrer">GitHub</a>')
    if c.links.linkedin:
        contact.append(f'<a class="link" href="{e(c.links.linkedin)}" target="_blank" rel="noopener noreferrer">LinkedIn</a>')
    if c.links.portfolio:
        contact.append(f'<a class="link" href="{e(c.links.portfolio)}" target="_blank" rel="noopener noreferrer">Portfolio</a>')

    components = "".join(
        f"""
        <div class="component">
          <div class="row"><span>{label}</span><span class="muted small">{weight} weight · {e(format_score(getattr(result.score_breakdown, key)))}/100</span></div>
          {score_bar(getattr(result.score_breakdown, key))}
        </div>"""
        for label, key, weight in SCORE_COMPONENTS
    )

    strengths = "".join(f'<li><span class="text-green">✓</span> {e(s)}</li>' for s in result.strengths)
    gaps = "".join(f'<li><span class="text-red">✗</span> {e(g)}</li>' for g in result.gaps)

    skills = ""
    if c.skills:
        chips = "".join(
            f'<span class="chip{" chip-required" if s in must_haves else ""}">{e(s)}'
            f'{" ✓" if s in must_haves else ""}</span>'
            for s in c.skills
        )
        skills = f"""
    <div class="card">
      <h2>Skills</h2>
      <div class="chips">{chips}</div>
      <p class="muted small">Blue = required by role</p>
    </div>"""

    history = ""
    if c.work_history:
        jobs = "".join(
            f'<div class="job"><div class="strong">{e(j.title)}</div><div class="muted small">{e(j.company)} · {e(j.duration)}</div></div>'
            for j in c.work_history
        )
        history = f"""
    <div class="card">
      <h2>Work History</h2>
      {jobs}
    </div>"""

    if result.proceed_to_scheduling:
        action = f"""
      <p class="small">This candidate meets the threshold for an interview.</p>
      <a class="btn btn-primary" href="{schedule_url(c.email)}">Schedule Interview</a>"""
    else:
        note = ""
        if result.status == REJECTED:
            note = " — A personalized rejection email has been sent automatically via Agent 2b."
        elif result.status == BORDERLINE:
            note = " — This candidate requires manual review before proceeding."
        action = f'<p class="small"><span class="strong text-{status_color(result.status)}">Status: {e(result.status)}</span><span class="muted">{e(note)}</span></p>'

    subtitle = e(c.current_title) + (f" · {e(c.location)}" if c.location else "")
    body = f"""
    <a class="link small" href="/">← Dashboard</a>
    <div class="card profile-header">
      <div>
        <h1>{e(c.name)}</h1>
        <p class="muted">{subtitle}</p>
        <p class="contact small">{" ".join(contact)}</p>
      </div>
      {score_badge(result.fit_score, result.status)}
    </div>
    <div class="grid-2">
      <div class="card">
        <div class="row">
          <h2>Score Breakdown</h2>
          <span class="pill pill-{confidence_color(result.confidence)}">{e(result.confidence)} confidence</span>
        </div>
        {components}
        <div class="row total"><span>Weighted Total</span><strong>{e(format_score(result.fit_score))}/100</strong></div>
      </div>
      <div>
        <div class="card"><h2 class="text-green">Strengths</h2><ul class="list">{strengths}</ul></div>
        <div class="card"><h2 class="text-red">Gaps</h2><ul class="list">{gaps}</ul></div>
      </div>
    </div>
{skills}
{history}
    <div class="card">{action}</div>"""
    return page(c.name, body)


# -------------------------------
# Scheduling
# -------------------------------
def render_schedule(result: ScreeningResult, flow: SchedulingFlow) -> HTMLResponse:
    c = result.candidate
    job_title = result.job_requirements.job_title if result.job_requirements and result.job_requirements.job_title else "Role"
    base = schedule_url(c.email)

    if flow.state == SchedulingState.CONFIRMED:
        content = f"""
      <div class="center">
        <h2>Interview Scheduled</h2>
        <p class="strong">{e(flow.selected_slot.display)}</p>
        <p class="muted small">Calendar invite sent to {e(c.email)}</p>
        <a class="btn btn-secondary" href="{candidate_url(c.email)}">Back to Profile</a>
        <a class="btn btn-primary" href="/">Dashboard</a>
      </div>"""
    elif flow.state == SchedulingState.PICKING:
        options = "".join(
            f"""
          <label class="slot{" slot-selected" if flow.selected_slot and flow.selected_slot.start == s.start else ""}">
            <input type="radio" name="slot" value="{e(s.start)}"{" checked" if flow.selected_slot and flow.selected_slot.start == s.start else ""}>
            <span class="strong small">{e(s.display or format_datetime(s.start))}</span>
          </label>"""
            for s in flow.slots
        )
        if not flow.slots:
            options = '<p class="muted">No available slots were returned.</p>'
        content = f"""
      <h2>Select a 45-minute interview slot</h2>
      <p class="muted small">All times shown in Eastern Time. Agent 3 found these based on interviewer calendar availability.</p>
      <form method="post" action="{base}/select">
        <div class="stack">{options}</div>
        <button type="submit" class="btn btn-secondary"{"" if flow.slots else " disabled"}>Select</button>
      </form>
      <form method="post" action="{base}/confirm">
        <button type="submit" class="btn btn-primary"{"" if flow.selected_slot else " disabled"}>Confirm &amp; Send Invite</button>
      </form>
      {render_error_banner(flow.error)}"""
    else:
        loading = flow.state == SchedulingState.LOADING
        content = f"""
      <div class="center">
        <h2>Find Available Slots</h2>
        <p class="muted small">Agent 3 will check the interviewer's Google Calendar and suggest 3–5 optimal 45-minute slots in the next 2 weeks.</p>
        <form method="post" action="{base}/slots">
          <button type="submit" class="btn btn-primary"{" disabled" if loading else ""}>{"Checking Calendar…" if loading else "Find Available Slots"}</button>
        </form>
        {render_error_banner(flow.error)}
      </div>"""

    body = f"""
    <a class="link small" href="{candidate_url(c.email)}">← Candidate Profile</a>
    <header>
      <h1>Schedule Interview</h1>
      <p class="muted">{e(c.name)} · {e(job_title)}</p>
    </header>
    <div class="card">{content}</div>
    <div class="muted small">
      <p>• 45-minute slots, 15-minute buffer between interviews</p>
      <p>• Prefers mid-morning (9am–12pm ET)</p>
      <p>• Weekdays only, next 14 days</p>
    </div>"""
    return page("Schedule Interview", body)
