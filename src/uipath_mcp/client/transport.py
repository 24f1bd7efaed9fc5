"""Per-client HTTP transport settings."""

from __future__ import annotations

from dataclasses import dataclass

import httpx

from uipath_mcp.models.config import ClientConfig


@dataclass(frozen=True)
class TransportConfig:
    """TLS and timeout settings scoped to a single client instance.

    Each client opens its own ``httpx.AsyncClient`` with these settings, so
    two clients with different verification needs never affect each other.
    """

    verify_tls: bool = True
    timeout_seconds: float = 30.0

    @classmethod
    def from_client_config(cls, config: ClientConfig) -> TransportConfig:
        return cls(
            verify_tls=not config.disable_ssl_verify,
            timeout_seconds=config.timeout_seconds,
        )

    def open(self) -> httpx.AsyncClient:
        """Open a short-lived async HTTP client; use as a context manager."""
        return httpx.AsyncClient(timeout=self.timeout_seconds, verify=self.verify_tls)
