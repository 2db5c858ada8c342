"""Shared dependencies for the API routers.

Collaborators are built from the cached settings so tests can swap any of
them through ``app.dependency_overrides``.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import Depends

from app.config import Settings, get_settings
from app.services.mailer import SmtpMailer
from app.services.storage import ReferenceFileStorage


def get_storage(settings: Settings = Depends(get_settings)) -> ReferenceFileStorage:
    return ReferenceFileStorage.from_settings(settings)


def get_mailer(settings: Settings = Depends(get_settings)) -> SmtpMailer:
    return SmtpMailer.from_settings(settings)


def get_now() -> datetime:
    return datetime.now()
