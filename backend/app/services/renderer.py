"""Project request confirmation email rendering.

Turns a submission plus the agency branding into the invoice-style HTML
email (and its plain-text alternative). Rendering is pure: the invoice
number and submission date are passed in, derived by the caller from a
single clock reading via generate_invoice_number() / format_submission_date().
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup, escape

from app.models.project_request import AgencyBranding, ProjectRequest

TEMPLATES_DIR = Path(__file__).resolve().parent.parent.parent.parent / "templates"

HTML_TEMPLATE = "project_request_email.html"
TEXT_TEMPLATE = "project_request_email.txt"

# Palette + header copy per theme. Only presentation differs between themes.
THEMES: dict[str, dict[str, str]] = {
    "indigo": {
        "accent": "#4338ca",
        "gradient_from": "#4338ca",
        "gradient_to": "#6366f1",
        "table_head": "#eef2ff",
        "title": "🧾 Design Project Invoice",
        "subtitle": "Prepared especially for you",
    },
    "emerald": {
        "accent": "#047857",
        "gradient_from": "#047857",
        "gradient_to": "#10b981",
        "table_head": "#ecfdf5",
        "title": "✅ Project Request Received",
        "subtitle": "Here is a summary of what you sent us",
    },
    "slate": {
        "accent": "#1f2937",
        "gradient_from": "#111827",
        "gradient_to": "#374151",
        "table_head": "#f3f4f6",
        "title": "Project Estimate",
        "subtitle": "Summary of your project request",
    },
}
DEFAULT_THEME = "indigo"

_NEWLINES = re.compile(r"\r\n|\r|\n")
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def nl2br(value: str | None) -> Markup:
    """Escape a free-text value and turn its line breaks into <br />."""
    escaped = str(escape(value or ""))
    return Markup(_NEWLINES.sub("<br />", escaped))


_env = Environment(
    loader=FileSystemLoader(str(TEMPLATES_DIR)),
    autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=True),
    keep_trailing_newline=True,
)
_env.filters["nl2br"] = nl2br


def generate_invoice_number(now: datetime) -> str:
    """'INV-' followed by the last 6 digits of the millisecond timestamp."""
    millis = (now.astimezone(timezone.utc) - _EPOCH) // timedelta(milliseconds=1)
    return f"INV-{str(millis)[-6:]}"


def format_submission_date(now: datetime) -> str:
    """Long form date, e.g. 'Monday, October 19, 2026'."""
    return f"{now:%A}, {now:%B} {now.day}, {now.year}"


def _or_default(value: str | None, default: str) -> str:
    if value is None or not value.strip():
        return default
    return value


def _template_context(
    request: ProjectRequest,
    branding: AgencyBranding,
    invoice_number: str,
    submission_date: str,
    theme: str,
) -> dict:
    if theme not in THEMES:
        raise ValueError(f"Unknown email theme '{theme}'. Choose one of: {', '.join(THEMES)}")

    return {
        "theme": THEMES[theme],
        "project_name": request.project_name or "",
        "client_name": request.client_name or "",
        "project_type": request.project_type or "",
        "project_description": request.project_description or "",
        "timeline": request.timeline or "",
        "client_email": request.client_email or "",
        "client_company": _or_default(request.client_company, "N/A"),
        "client_phone": _or_default(request.client_phone, "N/A"),
        "additional_info": _or_default(request.additional_info, "None"),
        "reference_files": _or_default(request.reference_files, "None provided"),
        "amount": _or_default(request.budget, "0"),
        "invoice_number": invoice_number,
        "submission_date": submission_date,
        "agency_name": branding.agency_name,
        "agency_website": branding.agency_website,
        "agency_phone": branding.agency_phone,
        "agency_email": branding.agency_email,
    }


def render_project_request_html(
    request: ProjectRequest,
    branding: AgencyBranding,
    *,
    invoice_number: str,
    submission_date: str,
    theme: str = DEFAULT_THEME,
) -> str:
    """Render the confirmation email as a self-contained HTML document.

    Every submitted value is HTML-escaped; the description and additional
    info keep their line breaks as <br />. Empty optional fields fall back
    to "N/A" (company, phone), "None" (additional info), "None provided"
    (reference files) and "0" (budget).

    Raises:
        ValueError: If ``theme`` is not one of THEMES.
    """
    context = _template_context(request, branding, invoice_number, submission_date, theme)
    return _env.get_template(HTML_TEMPLATE).render(**context)


def render_project_request_text(
    request: ProjectRequest,
    branding: AgencyBranding,
    *,
    invoice_number: str,
    submission_date: str,
    theme: str = DEFAULT_THEME,
) -> str:
    """Render the plain-text alternative of the confirmation email."""
    context = _template_context(request, branding, invoice_number, submission_date, theme)
    return _env.get_template(TEXT_TEMPLATE).render(**context)
