"""Tests for the submission handler (render + deliver + status mapping).

Run with: pytest backend/tests/test_submission.py -v
"""

import asyncio

import pytest

from app.models.project_request import UploadedFile
from app.services.mailer import MailConfigurationError, MailDeliveryError
from app.services.submission import (
    FAILURE_MESSAGE,
    INVALID_EMAIL_MESSAGE,
    SUCCESS_MESSAGE,
    InvalidSubmissionError,
    build_confirmation_email,
    handle_submission,
    reference_files_display,
)
from conftest import FakeMailer


def _uploaded(*names: str) -> list[UploadedFile]:
    return [
        UploadedFile(
            filename=name,
            content_type="application/pdf",
            url=f"https://cdn.studio.test/{name}",
            resource_type="raw",
        )
        for name in names
    ]


def _handle(request, uploaded, mailer, branding, now, **kwargs):
    return asyncio.run(
        handle_submission(
            request,
            uploaded,
            branding=branding,
            sender_address="noreply@studio.test",
            admin_email="admin@studio.test",
            mailer=mailer,
            now=now,
            **kwargs,
        )
    )


class TestReferenceFilesDisplay:
    def test_no_files(self):
        assert reference_files_display([]) == "None"

    def test_urls_joined_with_comma_space(self):
        display = reference_files_display(_uploaded("a.pdf", "b.pdf"))

        assert display == "https://cdn.studio.test/a.pdf, https://cdn.studio.test/b.pdf"


class TestBuildConfirmationEmail:
    def test_envelope(self, minimal_request, branding, fixed_now):
        email = build_confirmation_email(
            minimal_request,
            [],
            branding=branding,
            sender_address="noreply@studio.test",
            admin_email="admin@studio.test",
            now=fixed_now,
        )

        assert email.to == "jordan@northwind.example"
        assert email.cc == "admin@studio.test"
        assert email.subject == "Project Request Confirmation – Brand Refresh"
        assert "Studio Example" in email.sender
        assert "<noreply@studio.test>" in email.sender

    def test_clock_values_rendered(self, minimal_request, branding, fixed_now):
        email = build_confirmation_email(
            minimal_request,
            [],
            branding=branding,
            sender_address="noreply@studio.test",
            admin_email="admin@studio.test",
            now=fixed_now,
        )

        assert "INV-200123" in email.html
        assert "Monday, October 19, 2026" in email.html
        assert "INV-200123" in email.text

    def test_no_files_renders_none(self, full_request, branding, fixed_now):
        # Client-supplied referenceFiles text is always replaced
        email = build_confirmation_email(
            full_request,
            [],
            branding=branding,
            sender_address="noreply@studio.test",
            admin_email="admin@studio.test",
            now=fixed_now,
        )

        assert "<strong>References:</strong> None</p>" in email.html
        assert "moodboard.pdf" not in email.html

    def test_missing_sender_leaves_sender_empty(self, minimal_request, branding, fixed_now):
        email = build_confirmation_email(
            minimal_request,
            [],
            branding=branding,
            sender_address="",
            admin_email="admin@studio.test",
            now=fixed_now,
        )

        assert email.sender == ""

    @pytest.mark.parametrize(
        "address",
        [
            "",
            "not-an-email",
            "@nodomain.com",
            "jordan@",
            "jordan@northwind.example\r\nBcc: victim@evil.example",
            "jordan@northwind.example\nBcc: victim@evil.example",
        ],
    )
    def test_invalid_client_email(self, minimal_request, branding, fixed_now, address):
        request = minimal_request.model_copy(update={"client_email": address})

        with pytest.raises(InvalidSubmissionError):
            build_confirmation_email(
                request,
                [],
                branding=branding,
                sender_address="noreply@studio.test",
                admin_email="admin@studio.test",
                now=fixed_now,
            )


class TestHandleSubmission:
    def test_success(self, minimal_request, branding, fixed_now, mailer):
        result = _handle(minimal_request, [], mailer, branding, fixed_now)

        assert result.status_code == 200
        assert result.body.success is True
        assert result.body.message == SUCCESS_MESSAGE
        assert len(mailer.sent) == 1
        assert mailer.sent[0].to == "jordan@northwind.example"
        assert mailer.sent[0].cc == "admin@studio.test"

    def test_two_files(self, minimal_request, branding, fixed_now, mailer):
        _handle(minimal_request, _uploaded("a.pdf", "b.pdf"), mailer, branding, fixed_now)

        html = mailer.sent[0].html
        assert "https://cdn.studio.test/a.pdf, https://cdn.studio.test/b.pdf" in html

    def test_delivery_error(self, minimal_request, branding, fixed_now):
        mailer = FakeMailer(error=MailDeliveryError("jordan@northwind.example", "Connection refused"))
        result = _handle(minimal_request, [], mailer, branding, fixed_now)

        assert result.status_code == 500
        assert result.body.success is False
        assert result.body.message == FAILURE_MESSAGE
        assert "Connection refused" not in result.body.message

    def test_configuration_error(self, minimal_request, branding, fixed_now):
        mailer = FakeMailer(error=MailConfigurationError("SMTP_HOST is not configured"))
        result = _handle(minimal_request, [], mailer, branding, fixed_now)

        assert result.status_code == 500
        assert result.body.success is False

    def test_unexpected_error_does_not_escape(self, minimal_request, branding, fixed_now):
        mailer = FakeMailer(error=RuntimeError("boom"))
        result = _handle(minimal_request, [], mailer, branding, fixed_now)

        assert result.status_code == 500
        assert result.body.message == FAILURE_MESSAGE

    def test_unknown_theme_is_a_failure_not_a_crash(self, minimal_request, branding, fixed_now, mailer):
        result = _handle(minimal_request, [], mailer, branding, fixed_now, theme="neon")

        assert result.status_code == 500
        assert mailer.sent == []

    def test_invalid_email_is_a_client_error(self, minimal_request, branding, fixed_now, mailer):
        request = minimal_request.model_copy(update={"client_email": "nope"})
        result = _handle(request, [], mailer, branding, fixed_now)

        assert result.status_code == 400
        assert result.body.success is False
        assert result.body.message == INVALID_EMAIL_MESSAGE
        assert mailer.sent == []

    def test_header_injection_is_rejected_before_sending(self, minimal_request, branding, fixed_now, mailer):
        request = minimal_request.model_copy(
            update={"client_email": "jordan@northwind.example\r\nBcc: victim@evil.example"}
        )
        result = _handle(request, [], mailer, branding, fixed_now)

        assert result.status_code == 400
        assert result.body.message == INVALID_EMAIL_MESSAGE
        assert mailer.sent == []
