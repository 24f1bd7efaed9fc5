"""Tool catalog and dispatch onto the Orchestrator client.

Each tool validates its arguments with a pydantic model, resolves
human-friendly names (queue name, process name) to identifiers, and returns a
JSON-serializable value.
"""

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from uipath_mcp.client.analytics import OrchestratorAnalytics
from uipath_mcp.client.orchestrator import OrchestratorClient
from uipath_mcp.exceptions import ApiError, NotFoundError, OrchestratorError, UnknownToolError
from uipath_mcp.models.enums import StopStrategy
from uipath_mcp.models.records import PagedResult
from uipath_mcp.tools import schemas

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolDefinition:
    """Catalog entry for one tool.

    Attributes:
        name: Stable tool name (e.g. "uipath_get_jobs").
        description: Human-readable summary shown to the caller.
        args_model: Pydantic model validating the tool's arguments.
    """

    name: str
    description: str
    args_model: type[schemas.ToolArgs]

    def input_schema(self) -> dict[str, Any]:
        schema = self.args_model.model_json_schema(by_alias=True)
        schema.setdefault("properties", {})
        schema.setdefault("required", [])
        return schema

    def to_wire(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }


TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        "uipath_get_folders",
        "Get folders from UiPath Orchestrator.",
        schemas.GetFoldersArgs,
    ),
    ToolDefinition(
        "uipath_get_robots",
        "Get robots from UiPath Orchestrator with optional folder filtering.",
        schemas.GetRobotsArgs,
    ),
    ToolDefinition(
        "uipath_get_machines",
        "Get machines from UiPath Orchestrator.",
        schemas.GetMachinesArgs,
    ),
    ToolDefinition(
        "uipath_get_robot_asset",
        "Get an asset value for a robot by ID and asset name.",
        schemas.GetRobotAssetArgs,
    ),
    ToolDefinition(
        "uipath_get_robot_logs",
        "Get robot logs with optional filters.",
        schemas.GetRobotLogsArgs,
    ),
    ToolDefinition(
        "uipath_get_queue_definitions",
        "Get all queue definitions from UiPath Orchestrator.",
        schemas.GetQueueDefinitionsArgs,
    ),
    ToolDefinition(
        "uipath_get_queue_items",
        "Get queue items with optional filtering by queue name or ID and status.",
        schemas.GetQueueItemsArgs,
    ),
    ToolDefinition(
        "uipath_add_queue_item",
        "Add a new item to a UiPath queue. The item will be processed by robots.",
        schemas.AddQueueItemArgs,
    ),
    ToolDefinition(
        "uipath_get_queue_stats",
        "Get item counts by status and the success rate for a queue.",
        schemas.GetQueueStatsArgs,
    ),
    ToolDefinition(
        "uipath_get_jobs",
        "Get jobs with optional filtering by state or process name.",
        schemas.GetJobsArgs,
    ),
    ToolDefinition(
        "uipath_get_job_details",
        "Get detailed information about a specific job by its ID.",
        schemas.GetJobDetailsArgs,
    ),
    ToolDefinition(
        "uipath_start_job",
        "Start a new job for a process/release. Accepts a release name or process key.",
        schemas.StartJobArgs,
    ),
    ToolDefinition(
        "uipath_stop_job",
        "Stop a running job, softly by default or by killing it.",
        schemas.StopJobArgs,
    ),
    ToolDefinition(
        "uipath_get_job_stats",
        "Get job counts by state and the overall success rate.",
        schemas.GetJobStatsArgs,
    ),
    ToolDefinition(
        "uipath_get_releases",
        "Get available releases/processes from UiPath Orchestrator.",
        schemas.GetReleasesArgs,
    ),
    ToolDefinition(
        "uipath_get_dashboard_summary",
        "Get a dashboard summary with queue and job statistics. "
        "Queue figures cover only the first few queues.",
        schemas.GetDashboardSummaryArgs,
    ),
    ToolDefinition(
        "uipath_get_sessions",
        "Get robot sessions and their state (Available, Busy, Disconnected).",
        schemas.GetSessionsArgs,
    ),
    ToolDefinition(
        "uipath_get_assets",
        "List the assets (configuration values, credentials) in a folder.",
        schemas.GetAssetsArgs,
    ),
    ToolDefinition(
        "uipath_get_schedules",
        "Get process schedules with their cron expressions and next execution times.",
        schemas.GetSchedulesArgs,
    ),
    ToolDefinition(
        "uipath_get_audit_logs",
        "Get audit log entries: who did what and when.",
        schemas.GetAuditLogsArgs,
    ),
    ToolDefinition(
        "uipath_get_faulted_jobs",
        "Get faulted jobs with error details and execution durations.",
        schemas.GetFaultedJobsArgs,
    ),
    ToolDefinition(
        "uipath_get_process_performance",
        "Get success rate, durations and recent executions for a process.",
        schemas.GetProcessPerformanceArgs,
    ),
    ToolDefinition(
        "uipath_get_folder_overview",
        "Get job counts by state and queue, release and robot counts for a folder.",
        schemas.GetFolderOverviewArgs,
    ),
    ToolDefinition(
        "uipath_get_consumption_license_stats",
        "Get consumption (platform unit) license usage over time. Requires License.View.",
        schemas.LicenseStatsArgs,
    ),
    ToolDefinition(
        "uipath_get_license_stats",
        "Get robot license counts by type over time. Requires License.View.",
        schemas.LicenseStatsArgs,
    ),
    ToolDefinition(
        "uipath_get_licenses_runtime",
        "Get runtime license assignments for a robot type.",
        schemas.RobotTypeArgs,
    ),
    ToolDefinition(
        "uipath_get_licenses_named_user",
        "Get named-user license assignments for a robot type.",
        schemas.RobotTypeArgs,
    ),
    ToolDefinition(
        "uipath_get_count_stats",
        "Get the number of processes, assets, queues and schedules in the tenant.",
        schemas.NoArgs,
    ),
    ToolDefinition(
        "uipath_get_sessions_stats",
        "Get the number of robots in each session state.",
        schemas.NoArgs,
    ),
)

_TOOLS_BY_NAME = {tool.name: tool for tool in TOOLS}


def list_tools() -> list[dict[str, Any]]:
    return [tool.to_wire() for tool in TOOLS]


def get_tool(name: str) -> ToolDefinition:
    """Look up a tool by name.

    Raises:
        UnknownToolError: If no tool has that name
    """
    try:
        return _TOOLS_BY_NAME[name]
    except KeyError:
        raise UnknownToolError(name) from None


def to_jsonable(value: Any) -> Any:
    """Convert models (and containers of models) to wire-format JSON values."""
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, mode="json")
    if isinstance(value, list):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    return value


def paged(key: str, page: PagedResult) -> dict[str, Any]:
    """Shape a page as ``{<key>: [...], "totalCount": n}``."""
    return {key: to_jsonable(page.items), "totalCount": page.total_count}


def format_error(exc: BaseException) -> dict[str, Any]:
    """Build the ``{"error": {"message", "type"}}`` envelope for a failure."""
    if isinstance(exc, ValidationError):
        error: dict[str, Any] = {"message": str(exc), "type": "validation_error"}
    elif isinstance(exc, OrchestratorError):
        error = {"message": str(exc), "type": exc.error_type}
        if isinstance(exc, ApiError):
            error["statusCode"] = exc.status_code
    else:
        error = {"message": str(exc) or "Unknown error", "type": OrchestratorError.error_type}
    return {"error": error}


class ToolDispatcher:
    """Runs catalog tools against one client."""

    def __init__(
        self,
        client: OrchestratorClient,
        analytics: OrchestratorAnalytics | None = None,
    ) -> None:
        self.client = client
        self.analytics = analytics or OrchestratorAnalytics(client)

    async def call_tool(self, name: str, arguments: dict[str, Any] | None = None) -> Any:
        """Validate arguments and run a tool.

        Raises:
            UnknownToolError: If the tool name is not in the catalog
            ValidationError: If the arguments do not match the tool's model
            NotFoundError: If a named queue or process does not exist
            OrchestratorError: For authentication or API failures
        """
        tool = get_tool(name)
        args = tool.args_model.model_validate(arguments or {})
        handler = getattr(self, f"_{name.removeprefix('uipath_')}")
        logger.info(f"Calling tool {name}")
        result = await handler(args)
        return to_jsonable(result)

    # Folders, robots, machines, assets, logs

    async def _get_folders(self, args: schemas.GetFoldersArgs):
        return paged("folders", await self.client.get_folders(top=args.limit, skip=args.skip))

    async def _get_robots(self, args: schemas.GetRobotsArgs):
        page = await self.client.get_robots(folder_id=args.folder_id, top=args.limit, skip=args.skip)
        return paged("robots", page)

    async def _get_machines(self, args: schemas.GetMachinesArgs):
        return paged("machines", await self.client.get_machines(top=args.limit, skip=args.skip))

    async def _get_robot_asset(self, args: schemas.GetRobotAssetArgs):
        return await self.client.get_robot_asset(args.robot_id, args.asset_name)

    async def _get_robot_logs(self, args: schemas.GetRobotLogsArgs):
        page = await self.client.get_robot_logs(
            folder_id=args.folder_id,
            job_key=args.job_key,
            start_time=args.start_time,
            end_time=args.end_time,
            level=args.level,
            top=args.limit,
            skip=args.skip,
        )
        return paged("logs", page)

    # Queues

    async def _get_queue_definitions(self, args: schemas.GetQueueDefinitionsArgs):
        return await self.client.get_queue_definitions(folder_id=args.folder_id)

    async def _find_queue(self, name: str, folder_id: int | None):
        queue = await self.client.get_queue_definition_by_name(name, folder_id=folder_id)
        if queue is None:
            raise NotFoundError(f"Queue not found: {name}")
        return queue

    async def _get_queue_items(self, args: schemas.GetQueueItemsArgs):
        queue_id = args.queue_id
        if args.queue_name and queue_id is None:
            queue_id = (await self._find_queue(args.queue_name, args.folder_id)).id
        page = await self.client.get_queue_items(
            queue_id=queue_id, status=args.status, folder_id=args.folder_id, top=args.limit
        )
        return paged("items", page)

    async def _add_queue_item(self, args: schemas.AddQueueItemArgs):
        return await self.client.add_queue_item(
            args.queue_name,
            args.data,
            reference=args.reference,
            priority=args.priority,
            defer_date=args.defer_date,
            due_date=args.due_date,
            folder_id=args.folder_id,
        )

    async def _get_queue_stats(self, args: schemas.GetQueueStatsArgs):
        queue = await self._find_queue(args.queue_name, args.folder_id)
        return await self.analytics.get_queue_stats(queue.id, queue.name, args.folder_id)

    # Jobs and releases

    async def _get_jobs(self, args: schemas.GetJobsArgs):
        page = await self.client.get_jobs(
            state=args.state, release_name=args.release_name, folder_id=args.folder_id, top=args.limit
        )
        return paged("jobs", page)

    async def _get_job_details(self, args: schemas.GetJobDetailsArgs):
        return await self.client.get_job(args.job_id, folder_id=args.folder_id)

    async def _start_job(self, args: schemas.StartJobArgs):
        release = await self.analytics.find_release_by_name_or_key(
            args.process_name, folder_id=args.folder_id
        )
        if release is None:
            raise NotFoundError(f"No release found for process: {args.process_name}")
        return await self.client.start_job(
            release.key,
            input_arguments=args.input_arguments,
            jobs_count=args.jobs_count,
            folder_id=args.folder_id,
        )

    async def _stop_job(self, args: schemas.StopJobArgs):
        strategy = StopStrategy.KILL if args.force else StopStrategy.SOFT_STOP
        await self.client.stop_job(args.job_id, strategy, folder_id=args.folder_id)
        return {"success": True, "message": f"Job {args.job_id} stop requested"}

    async def _get_job_stats(self, args: schemas.GetJobStatsArgs):
        return await self.analytics.get_job_stats(args.folder_id)

    async def _get_releases(self, args: schemas.GetReleasesArgs):
        return await self.client.get_releases(process_key=args.process_key, folder_id=args.folder_id)

    async def _get_dashboard_summary(self, args: schemas.GetDashboardSummaryArgs):
        return await self.analytics.get_dashboard_summary(args.folder_id)

    # Sessions, assets, schedules, audit

    async def _get_sessions(self, args: schemas.GetSessionsArgs):
        page = await self.client.get_sessions(
            folder_id=args.folder_id, state=args.state, top=args.limit, skip=args.skip
        )
        return paged("sessions", page)

    async def _get_assets(self, args: schemas.GetAssetsArgs):
        page = await self.client.get_assets(folder_id=args.folder_id, top=args.limit, skip=args.skip)
        return paged("assets", page)

    async def _get_schedules(self, args: schemas.GetSchedulesArgs):
        page = await self.client.get_process_schedules(
            folder_id=args.folder_id, enabled=args.enabled, top=args.limit, skip=args.skip
        )
        return paged("schedules", page)

    async def _get_audit_logs(self, args: schemas.GetAuditLogsArgs):
        page = await self.client.get_audit_logs(
            action=args.action,
            user_name=args.user_name,
            component=args.component,
            start_time=args.start_time,
            end_time=args.end_time,
            top=args.limit,
            skip=args.skip,
        )
        return paged("logs", page)

    # Composite analytics

    async def _get_faulted_jobs(self, args: schemas.GetFaultedJobsArgs):
        return await self.analytics.get_faulted_jobs(
            folder_id=args.folder_id,
            top=args.limit,
            release_name=args.release_name,
            start_time=args.start_time,
            end_time=args.end_time,
        )

    async def _get_process_performance(self, args: schemas.GetProcessPerformanceArgs):
        return await self.analytics.get_process_performance(
            args.process_name, folder_id=args.folder_id, top=args.limit
        )

    async def _get_folder_overview(self, args: schemas.GetFolderOverviewArgs):
        return await self.analytics.get_folder_overview(args.folder_id)

    # Licensing and tenant stats

    async def _get_consumption_license_stats(self, args: schemas.LicenseStatsArgs):
        return await self.client.get_consumption_license_stats(tenant_id=args.tenant_id, days=args.days)

    async def _get_license_stats(self, args: schemas.LicenseStatsArgs):
        return await self.client.get_license_stats(tenant_id=args.tenant_id, days=args.days)

    async def _get_licenses_runtime(self, args: schemas.RobotTypeArgs):
        return paged("licenses", await self.client.get_licenses_runtime(args.robot_type))

    async def _get_licenses_named_user(self, args: schemas.RobotTypeArgs):
        return paged("licenses", await self.client.get_licenses_named_user(args.robot_type))

    async def _get_count_stats(self, args: schemas.NoArgs):
        return await self.client.get_count_stats()

    async def _get_sessions_stats(self, args: schemas.NoArgs):
        return await self.client.get_sessions_stats()
