"""Configuration and environment loading for the UiPath adapter."""

from collections.abc import Mapping
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from uipath_mcp.exceptions import MissingCredentialsError
from uipath_mcp.models.config import ClientConfig

DEFAULT_TENANT_NAME = "Default"

# Credential headers accepted by the HTTP binding
URL_HEADER = "x-uipath-url"
CLIENT_ID_HEADER = "x-uipath-client-id"
CLIENT_SECRET_HEADER = "x-uipath-client-secret"
TENANT_HEADER = "x-uipath-tenant-name"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # UiPath Orchestrator
    uipath_url: str | None = None
    uipath_client_id: str | None = None
    uipath_client_secret: str | None = None
    uipath_tenant_name: str = DEFAULT_TENANT_NAME
    uipath_folder_id: int | None = None
    uipath_disable_ssl_verify: bool = False
    uipath_timeout_seconds: float = 30.0

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    log_level: str = "INFO"

    # Analytics sampling caps
    dashboard_queue_sample: int = 5
    job_stats_fallback_limit: int = 1000
    folder_overview_limit: int = 1000

    @field_validator("uipath_folder_id", mode="before")
    @classmethod
    def _blank_folder_is_none(cls, value):
        if value is None or isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            return None

    @field_validator("uipath_disable_ssl_verify", mode="before")
    @classmethod
    def _blank_flag_is_false(cls, value):
        if isinstance(value, str) and not value.strip():
            return False
        return value

    def client_config(self) -> ClientConfig:
        """Build the client configuration from the environment.

        Raises:
            MissingCredentialsError: If the URL, client id or secret is unset
        """
        missing = [
            name
            for name, value in (
                ("UIPATH_URL", self.uipath_url),
                ("UIPATH_CLIENT_ID", self.uipath_client_id),
                ("UIPATH_CLIENT_SECRET", self.uipath_client_secret),
            )
            if not value
        ]
        if missing:
            raise MissingCredentialsError(
                f"Missing UiPath credentials: {', '.join(missing)} not set"
            )
        return ClientConfig(
            base_url=self.uipath_url,
            tenant_name=self.uipath_tenant_name or DEFAULT_TENANT_NAME,
            client_id=self.uipath_client_id,
            client_secret=self.uipath_client_secret,
            default_folder_id=self.uipath_folder_id,
            disable_ssl_verify=self.uipath_disable_ssl_verify,
            timeout_seconds=self.uipath_timeout_seconds,
        )


def client_config_from_headers(
    headers: Mapping[str, str],
    timeout_seconds: float = 30.0,
) -> ClientConfig | None:
    """Build a per-request client configuration from credential headers.

    Returns None when no credential header is present, so the caller can
    fall back to the environment.

    Raises:
        MissingCredentialsError: If only some of the required headers are set
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    url = lowered.get(URL_HEADER)
    client_id = lowered.get(CLIENT_ID_HEADER)
    client_secret = lowered.get(CLIENT_SECRET_HEADER)

    if not (url or client_id or client_secret):
        return None
    if not (url and client_id and client_secret):
        raise MissingCredentialsError(
            "Missing UiPath credentials. Provide X-UiPath-Url, "
            "X-UiPath-Client-Id and X-UiPath-Client-Secret headers."
        )

    return ClientConfig(
        base_url=url,
        tenant_name=lowered.get(TENANT_HEADER) or DEFAULT_TENANT_NAME,
        client_id=client_id,
        client_secret=client_secret,
        timeout_seconds=timeout_seconds,
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
