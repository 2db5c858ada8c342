"""Project request form endpoint.

Receives the multipart form from the frontend, stores any reference files,
then hands the submission to the submission service which renders and
sends the confirmation email.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse
from loguru import logger

from app.config import Settings, get_settings
from app.models.project_request import ProjectRequest, SubmissionResponse
from app.routers._deps import get_mailer, get_now, get_storage
from app.services.storage import ReferenceFileStorage, StorageError
from app.services.submission import FAILURE_MESSAGE, Mailer, handle_submission

router = APIRouter(prefix="/api", tags=["project-request"])


def _failure(status_code: int = 500) -> JSONResponse:
    body = SubmissionResponse(success=False, message=FAILURE_MESSAGE)
    return JSONResponse(status_code=status_code, content=body.model_dump())


@router.post("/send-project-request", response_model=SubmissionResponse)
async def send_project_request(
    project_name: str = Form("", alias="projectName"),
    client_name: str = Form("", alias="clientName"),
    project_type: str = Form("", alias="projectType"),
    project_description: str = Form("", alias="projectDescription"),
    timeline: str = Form("", alias="timeline"),
    client_email: str = Form("", alias="clientEmail"),
    client_company: str | None = Form(None, alias="clientCompany"),
    client_phone: str | None = Form(None, alias="clientPhone"),
    additional_info: str | None = Form(None, alias="additionalInfo"),
    budget: str | None = Form(None, alias="budget"),
    reference_files: list[UploadFile] | None = File(None, alias="referenceFiles"),
    settings: Settings = Depends(get_settings),
    storage: ReferenceFileStorage = Depends(get_storage),
    mailer: Mailer = Depends(get_mailer),
    now: datetime = Depends(get_now),
):
    """Store reference files, then email the confirmation to client and admin."""
    request = ProjectRequest(
        project_name=project_name,
        client_name=client_name,
        project_type=project_type,
        project_description=project_description,
        timeline=timeline,
        client_email=client_email,
        client_company=client_company,
        client_phone=client_phone,
        additional_info=additional_info,
        budget=budget,
    )

    try:
        uploaded = await storage.upload_all(reference_files)
    except StorageError as e:
        logger.error("Reference file upload failed: {}", e)
        return _failure()
    except Exception:
        logger.exception("Unexpected error while uploading reference files")
        return _failure()

    result = await handle_submission(
        request,
        uploaded,
        branding=settings.branding,
        sender_address=settings.sender_address,
        admin_email=settings.admin_email,
        mailer=mailer,
        now=now,
        theme=settings.email_theme,
    )
    return JSONResponse(status_code=result.status_code, content=result.body.model_dump())
