"""Read-only resources exposing Orchestrator data as JSON documents."""

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from uipath_mcp.client.analytics import OrchestratorAnalytics
from uipath_mcp.client.orchestrator import OrchestratorClient
from uipath_mcp.exceptions import ResourceReadError, UnknownResourceError
from uipath_mcp.tools.dispatcher import paged, to_jsonable

logger = logging.getLogger(__name__)

MIME_TYPE = "application/json"
RESOURCE_PAGE_SIZE = 100
RECENT_JOBS_PAGE_SIZE = 20


@dataclass(frozen=True)
class ResourceDefinition:
    uri: str
    name: str
    description: str

    def to_wire(self) -> dict[str, str]:
        return {
            "uri": self.uri,
            "name": self.name,
            "description": self.description,
            "mimeType": MIME_TYPE,
        }


RESOURCES: tuple[ResourceDefinition, ...] = (
    ResourceDefinition("uipath://folders", "UiPath Folders", "List of all folders in UiPath Orchestrator"),
    ResourceDefinition("uipath://robots", "UiPath Robots", "List of robots in UiPath Orchestrator"),
    ResourceDefinition("uipath://machines", "UiPath Machines", "List of machines in UiPath Orchestrator"),
    ResourceDefinition("uipath://queues", "UiPath Queues", "List of all queue definitions in UiPath Orchestrator"),
    ResourceDefinition("uipath://jobs/recent", "Recent Jobs", "Recent jobs from UiPath Orchestrator"),
    ResourceDefinition("uipath://releases", "Releases", "Available releases/processes in UiPath Orchestrator"),
    ResourceDefinition("uipath://dashboard", "Dashboard Summary", "Overall dashboard statistics for queues and jobs"),
    ResourceDefinition("uipath://sessions", "UiPath Sessions", "Active robot sessions in UiPath Orchestrator"),
    ResourceDefinition("uipath://assets", "UiPath Assets", "Assets configured in UiPath Orchestrator"),
    ResourceDefinition("uipath://schedules", "Process Schedules", "Scheduled process triggers in UiPath Orchestrator"),
)


def list_resources() -> list[dict[str, str]]:
    return [resource.to_wire() for resource in RESOURCES]


class ResourceReader:
    """Resolves resource URIs to JSON content using one client."""

    def __init__(
        self,
        client: OrchestratorClient,
        analytics: OrchestratorAnalytics | None = None,
    ) -> None:
        self.client = client
        self.analytics = analytics or OrchestratorAnalytics(client)
        self._readers: dict[str, Callable[[], Awaitable[Any]]] = {
            "uipath://folders": self._folders,
            "uipath://robots": self._robots,
            "uipath://machines": self._machines,
            "uipath://queues": self._queues,
            "uipath://jobs/recent": self._recent_jobs,
            "uipath://releases": self._releases,
            "uipath://dashboard": self._dashboard,
            "uipath://sessions": self._sessions,
            "uipath://assets": self._assets,
            "uipath://schedules": self._schedules,
        }

    async def read(self, uri: str) -> dict[str, Any]:
        """Read a resource.

        Returns:
            ``{"contents": [{"uri", "mimeType", "text"}]}`` with the JSON text

        Raises:
            UnknownResourceError: If the URI is not in the catalog
            ResourceReadError: If fetching the underlying data fails
        """
        reader = self._readers.get(uri)
        if reader is None:
            raise UnknownResourceError(uri)

        try:
            content = to_jsonable(await reader())
        except Exception as e:
            logger.error(f"Failed to read resource {uri}: {e}")
            raise ResourceReadError(uri, e) from e

        return {
            "contents": [
                {"uri": uri, "mimeType": MIME_TYPE, "text": json.dumps(content, indent=2)}
            ]
        }

    async def _folders(self):
        return paged("folders", await self.client.get_folders(top=RESOURCE_PAGE_SIZE))

    async def _robots(self):
        return paged("robots", await self.client.get_robots(top=RESOURCE_PAGE_SIZE))

    async def _machines(self):
        return paged("machines", await self.client.get_machines(top=RESOURCE_PAGE_SIZE))

    async def _queues(self):
        return await self.client.get_queue_definitions()

    async def _recent_jobs(self):
        return (await self.client.get_jobs(top=RECENT_JOBS_PAGE_SIZE)).items

    async def _releases(self):
        return await self.client.get_releases()

    async def _dashboard(self):
        return await self.analytics.get_dashboard_summary()

    async def _sessions(self):
        return paged("sessions", await self.client.get_sessions(top=RESOURCE_PAGE_SIZE))

    async def _assets(self):
        return paged("assets", await self.client.get_assets(top=RESOURCE_PAGE_SIZE))

    async def _schedules(self):
        return paged("schedules", await self.client.get_process_schedules(top=RESOURCE_PAGE_SIZE))
