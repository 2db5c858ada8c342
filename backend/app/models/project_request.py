from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ProjectRequest(BaseModel):
    """A project-request form submission.

    Attribute names are snake_case; the form/JSON field names are the
    camelCase aliases used by the frontend. Nothing here is validated:
    missing required fields simply render as empty text.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    # Required by the form, but not enforced here
    project_name: str = Field(default="", alias="projectName")
    client_name: str = Field(default="", alias="clientName")
    project_type: str = Field(default="", alias="projectType")
    project_description: str = Field(default="", alias="projectDescription")
    timeline: str = Field(default="", alias="timeline")
    client_email: str = Field(default="", alias="clientEmail")

    # Optional, rendered with a placeholder when empty
    client_company: str | None = Field(default=None, alias="clientCompany")
    client_phone: str | None = Field(default=None, alias="clientPhone")
    additional_info: str | None = Field(default=None, alias="additionalInfo")
    budget: str | None = Field(default=None, alias="budget")
    reference_files: str | None = Field(default=None, alias="referenceFiles")


class AgencyBranding(BaseModel):
    """Agency identity shown in the email header and footer."""

    model_config = ConfigDict(frozen=True)

    agency_name: str
    agency_website: str = ""
    agency_phone: str = ""
    agency_email: str = ""


class UploadedFile(BaseModel):
    """A reference file already stored by the upload provider."""

    filename: str
    content_type: str
    url: str
    resource_type: Literal["raw", "auto"] = "auto"


class OutboundEmail(BaseModel):
    """Rendered confirmation email plus its envelope."""

    sender: str
    to: str
    cc: str | None = None
    subject: str
    html: str
    text: str = ""


class SubmissionResponse(BaseModel):
    """JSON body returned by the submission endpoint."""

    success: bool
    message: str
