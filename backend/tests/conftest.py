import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add backend/ to path so `app` is importable from tests/
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.config import Settings
from app.models.project_request import AgencyBranding, OutboundEmail, ProjectRequest


class FakeMailer:
    """Records every message; optionally fails like a broken SMTP server."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.sent: list[OutboundEmail] = []

    async def send(self, email: OutboundEmail) -> str:
        self.sent.append(email)
        if self.error is not None:
            raise self.error
        return "<fake-message-id@studio.test>"


@pytest.fixture
def branding() -> AgencyBranding:
    return AgencyBranding(
        agency_name="Studio Example",
        agency_website="https://studio.example",
        agency_phone="+1 555 0199",
        agency_email="hello@studio.example",
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 10, 19, 9, 30, 0, 123000, tzinfo=timezone.utc)


@pytest.fixture
def minimal_request() -> ProjectRequest:
    """Only the fields the form marks as required."""
    return ProjectRequest(
        project_name="Brand Refresh",
        client_name="Jordan Avery",
        project_type="Logo & Identity",
        project_description="New logo and packaging.",
        timeline="6 weeks",
        client_email="jordan@northwind.example",
    )


@pytest.fixture
def full_request(minimal_request: ProjectRequest) -> ProjectRequest:
    return minimal_request.model_copy(
        update={
            "client_company": "Northwind Coffee",
            "client_phone": "+1 555 0100",
            "additional_info": "Launch is planned for spring.",
            "budget": "$2,400",
            "reference_files": "https://files.example.com/moodboard.pdf",
        }
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        smtp_host="smtp.studio.test",
        smtp_port=587,
        smtp_user="noreply@studio.test",
        smtp_pass="secret",
        admin_email="admin@studio.test",
        agency_name="Studio Example",
        agency_website="https://studio.example",
        agency_phone="+1 555 0199",
        agency_email="hello@studio.example",
        storage_bucket="reference-files",
        storage_public_base_url="https://cdn.studio.test",
    )


@pytest.fixture
def mailer() -> FakeMailer:
    return FakeMailer()
