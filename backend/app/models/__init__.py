from .project_request import (
    AgencyBranding,
    OutboundEmail,
    ProjectRequest,
    SubmissionResponse,
    UploadedFile,
)

__all__ = [
    "AgencyBranding",
    "OutboundEmail",
    "ProjectRequest",
    "SubmissionResponse",
    "UploadedFile",
]
