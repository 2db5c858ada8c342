from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from app.models.project_request import AgencyBranding
from app.services.renderer import THEMES

ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    port: int = Field(default=3000, description="HTTP listening port")

    # Email (SMTP)
    smtp_host: str = Field(default="", description="SMTP server host")
    smtp_port: int = Field(default=587, description="SMTP server port")
    smtp_secure: bool = Field(default=False, description="Use implicit TLS")
    smtp_user: str = Field(default="", description="SMTP username")
    smtp_pass: str = Field(default="", description="SMTP password")
    from_email: str = Field(default="", description="Sender address (defaults to SMTP user)")
    admin_email: str = Field(
        default="admin@example.com",
        description="Administrator copied on every confirmation",
    )

    # Agency branding
    agency_name: str = Field(default="My Agency")
    agency_website: str = Field(default="https://example.com")
    agency_phone: str = Field(default="")
    agency_email: str = Field(default="support@example.com")
    email_theme: str = Field(default="indigo", description="Confirmation email theme")

    # Reference file storage (S3-compatible bucket)
    storage_endpoint_url: str = Field(default="", description="S3 endpoint (R2, MinIO…)")
    storage_access_key_id: str = Field(default="")
    storage_secret_access_key: str = Field(default="")
    storage_region: str = Field(default="auto")
    storage_bucket: str = Field(default="", description="Bucket for reference files")
    storage_folder: str = Field(default="portfolio_uploads")
    storage_public_base_url: str = Field(
        default="",
        description="Public bucket URL; presigned URLs are used when empty",
    )
    storage_url_expiration: int = Field(
        default=7 * 24 * 3600,
        description="Presigned URL lifetime in seconds",
    )

    # HTTP
    cors_origins: list[str] = Field(default=["*"])
    static_dir: Path = Field(
        default=ROOT / "frontend",
        description="Frontend directory served at / when present",
    )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @field_validator("email_theme")
    @classmethod
    def _known_theme(cls, value: str) -> str:
        if value not in THEMES:
            raise ValueError(f"Unknown email theme '{value}'. Choose one of: {', '.join(THEMES)}")
        return value

    @property
    def use_implicit_tls(self) -> bool:
        return self.smtp_secure or self.smtp_port == 465

    @property
    def sender_address(self) -> str:
        return self.from_email or self.smtp_user

    @property
    def branding(self) -> AgencyBranding:
        return AgencyBranding(
            agency_name=self.agency_name,
            agency_website=self.agency_website,
            agency_phone=self.agency_phone,
            agency_email=self.agency_email,
        )


@lru_cache
def get_settings() -> Settings:
    """Load settings once per process."""
    return Settings()
