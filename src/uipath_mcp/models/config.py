"""Client configuration models."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import urlparse

IDENTITY_TOKEN_ROUTE = "/identity_/connect/token"


@dataclass(frozen=True)
class ClientConfig:
    """Immutable connection settings for one Orchestrator tenant.

    Attributes:
        base_url: Cloud or on-prem base endpoint (organization URL).
        tenant_name: Tenant the API root is resolved under.
        client_id: External application client id.
        client_secret: External application client secret.
        default_folder_id: Folder applied when a call passes none.
        disable_ssl_verify: Skip TLS certificate verification for this client.
        timeout_seconds: Per-request timeout handed to the transport.
    """

    base_url: str
    tenant_name: str
    client_id: str
    client_secret: str = field(repr=False)
    default_folder_id: int | None = None
    disable_ssl_verify: bool = False
    timeout_seconds: float = 30.0
    orchestrator_url: str = field(init=False)
    identity_url: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "orchestrator_url", build_orchestrator_url(self.base_url, self.tenant_name)
        )
        object.__setattr__(self, "identity_url", build_identity_url(self.base_url))


def build_orchestrator_url(base_url: str, tenant_name: str) -> str:
    """Resolve the tenant-scoped Orchestrator API root."""
    if "orchestrator_" in base_url:
        return base_url.rstrip("/")

    base = base_url.rstrip("/")
    if base.lower().endswith(f"/{tenant_name.lower()}"):
        return f"{base}/orchestrator_"
    return f"{base}/{tenant_name}/orchestrator_"


def build_identity_url(base_url: str) -> str:
    """Resolve the identity token endpoint from the organization URL.

    Keeps scheme, host and the first path segment (the organization).
    """
    parsed = urlparse(base_url)
    parts = [p for p in parsed.path.split("/") if p]
    org_path = f"/{parts[0]}" if parts else ""
    return f"{parsed.scheme}://{parsed.netloc}{org_path}{IDENTITY_TOKEN_ROUTE}"
