"""Render the confirmation email for every theme with sample data.

Run: python3 backend/scripts/preview_email.py
Output: preview/project_request_<theme>.html (open in a browser)
"""

import sys
from datetime import datetime
from pathlib import Path

# Add backend/ to path so `app` is importable from scripts/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.models.project_request import AgencyBranding, ProjectRequest
from app.services.renderer import (
    THEMES,
    format_submission_date,
    generate_invoice_number,
    render_project_request_html,
)

ROOT = Path(__file__).resolve().parent.parent.parent
OUTPUT_DIR = ROOT / "preview"

SAMPLE_REQUEST = ProjectRequest(
    project_name="Brand Refresh",
    client_name="Jordan Avery",
    client_company="Northwind Coffee",
    client_email="jordan@northwind.example",
    client_phone="+1 555 0100",
    project_type="Logo & Identity",
    project_description="New logo, colour palette and packaging.\nKeep the owl mascot.",
    timeline="6 weeks",
    budget="$2,400",
    reference_files="https://files.example.com/moodboard.pdf",
    additional_info="Launch is planned for spring.",
)

SAMPLE_BRANDING = AgencyBranding(
    agency_name="Studio Example",
    agency_website="https://studio.example",
    agency_phone="+1 555 0199",
    agency_email="hello@studio.example",
)


def main() -> None:
    now = datetime.now()
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    for theme in THEMES:
        html = render_project_request_html(
            SAMPLE_REQUEST,
            SAMPLE_BRANDING,
            invoice_number=generate_invoice_number(now),
            submission_date=format_submission_date(now),
            theme=theme,
        )
        output = OUTPUT_DIR / f"project_request_{theme}.html"
        output.write_text(html, encoding="utf-8")
        print(f"Preview saved to: {output}")


if __name__ == "__main__":
    main()
