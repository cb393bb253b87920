"""Session configuration via environment variables (``SESSION_*``)."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class SessionSettings(BaseSettings):
    storage: str = "memory"  # "memory", "signed-cookie" or "dynamodb"
    secret: str | None = None  # signed-cookie key; random per process when unset
    algorithm: str = "HS256"
    encryption_key: str | None = None  # Fernet key for encrypted signed cookies

    cookie_name: str = "sessionid"
    cookie_secure: bool = False
    cookie_http_only: bool = True
    cookie_domain: str | None = None
    cookie_path: str = "/"
    cookie_same_site: str | None = "lax"

    dynamodb_table: str = "sessions"
    dynamodb_endpoint: str = ""  # For local DynamoDB
    dynamodb_region: str = "us-west-2"

    @property
    def cookie_options(self) -> dict:
        return {
            "cookie_name": self.cookie_name,
            "cookie_secure": self.cookie_secure,
            "cookie_http_only": self.cookie_http_only,
            "cookie_domain": self.cookie_domain,
            "cookie_path": self.cookie_path,
            "cookie_same_site": self.cookie_same_site,
        }

    model_config = {"env_prefix": "SESSION_", "case_sensitive": False}


settings: SessionSettings | None = None


def get_settings() -> SessionSettings:
    global settings
    if settings is None:
        settings = SessionSettings()
    return settings


def override_settings(s: SessionSettings | None) -> None:
    """For testing: inject a SessionSettings instance (None resets)."""
    global settings
    settings = s
