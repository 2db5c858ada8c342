"""Project request submission handling.

Takes a submission whose reference files are already stored, renders the
confirmation email, sends it to the client with the administrator in Cc,
and maps the outcome to an HTTP status plus a {success, message} body.
Errors are logged here and never propagate to the caller.
"""

from __future__ import annotations

from datetime import datetime
from email.utils import formataddr, parseaddr
from typing import Protocol

from loguru import logger
from pydantic import BaseModel

from app.models.project_request import (
    AgencyBranding,
    OutboundEmail,
    ProjectRequest,
    SubmissionResponse,
    UploadedFile,
)
from app.services.mailer import MailConfigurationError, MailDeliveryError
from app.services.renderer import (
    DEFAULT_THEME,
    format_submission_date,
    generate_invoice_number,
    render_project_request_html,
    render_project_request_text,
)

SUCCESS_MESSAGE = "Project request received and confirmation email sent!"
FAILURE_MESSAGE = "Failed to process request. Please try again later."
INVALID_EMAIL_MESSAGE = "Please provide a valid email address so we can send your confirmation."


class Mailer(Protocol):
    async def send(self, email: OutboundEmail) -> str: ...


class InvalidSubmissionError(ValueError):
    """Raised when the submission cannot be delivered as sent by the client."""


class SubmissionResult(BaseModel):
    status_code: int
    body: SubmissionResponse


def reference_files_display(uploaded_files: list[UploadedFile]) -> str:
    """Comma-separated file URLs, or 'None' when nothing was attached."""
    return ", ".join(f.url for f in uploaded_files) or "None"


def _check_recipient(address: str) -> None:
    address = address or ""
    _, addr = parseaddr(address)
    local, _, domain = addr.partition("@")
    # The raw value becomes the To header, so it must be a bare address
    if not local or not domain or " " in addr or addr != address.strip() or "\r" in address or "\n" in address:
        raise InvalidSubmissionError(f"Invalid client email: {address!r}")


def build_confirmation_email(
    request: ProjectRequest,
    uploaded_files: list[UploadedFile],
    *,
    branding: AgencyBranding,
    sender_address: str,
    admin_email: str,
    now: datetime,
    theme: str = DEFAULT_THEME,
) -> OutboundEmail:
    """Render the confirmation email and address it.

    The stored file URLs always replace whatever ``referenceFiles`` text
    the form carried.
    """
    _check_recipient(request.client_email)
    record = request.model_copy(update={"reference_files": reference_files_display(uploaded_files)})

    invoice_number = generate_invoice_number(now)
    submission_date = format_submission_date(now)
    render_args = {
        "invoice_number": invoice_number,
        "submission_date": submission_date,
        "theme": theme,
    }

    return OutboundEmail(
        sender=formataddr((branding.agency_name, sender_address)) if sender_address else "",
        to=request.client_email,
        cc=admin_email or None,
        subject=f"Project Request Confirmation – {request.project_name}",
        html=render_project_request_html(record, branding, **render_args),
        text=render_project_request_text(record, branding, **render_args),
    )


async def handle_submission(
    request: ProjectRequest,
    uploaded_files: list[UploadedFile],
    *,
    branding: AgencyBranding,
    sender_address: str,
    admin_email: str,
    mailer: Mailer,
    now: datetime | None = None,
    theme: str = DEFAULT_THEME,
) -> SubmissionResult:
    """Render and send the confirmation email for one submission.

    Returns:
        200 on delivery, 400 when the client email is unusable, 500 for
        transport, configuration or unexpected errors.
    """
    logger.info(
        "Received project request '{}' from {} with {} file(s)",
        request.project_name,
        request.client_email,
        len(uploaded_files),
    )

    try:
        email = build_confirmation_email(
            request,
            uploaded_files,
            branding=branding,
            sender_address=sender_address,
            admin_email=admin_email,
            now=now or datetime.now(),
            theme=theme,
        )
        message_id = await mailer.send(email)
    except InvalidSubmissionError as e:
        logger.warning("Rejected project request: {}", e)
        return _result(400, False, INVALID_EMAIL_MESSAGE)
    except MailConfigurationError as e:
        logger.error("Mail transport is not configured: {}", e)
        return _result(500, False, FAILURE_MESSAGE)
    except MailDeliveryError as e:
        logger.error("Mail delivery failed: {}", e)
        return _result(500, False, FAILURE_MESSAGE)
    except Exception:
        logger.exception("Error processing project request")
        return _result(500, False, FAILURE_MESSAGE)

    logger.info("Confirmation {} sent to {} (cc {})", message_id, email.to, email.cc)
    return _result(200, True, SUCCESS_MESSAGE)


def _result(status_code: int, success: bool, message: str) -> SubmissionResult:
    return SubmissionResult(
        status_code=status_code,
        body=SubmissionResponse(success=success, message=message),
    )
