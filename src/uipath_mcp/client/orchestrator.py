"""Client for the UiPath Orchestrator REST/OData API.

One method per remote collection. Listings return a ``PagedResult``; the
non-paginated routes (queue definitions, releases, /api/Stats) return plain
lists. Folder-scoped calls fall back to the configured default folder.
"""

import json
import logging
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from uipath_mcp.client.executor import RequestExecutor
from uipath_mcp.client.odata import (
    DROP_COUNT,
    DROP_COUNT_AND_ORDER,
    DROP_COUNT_AND_ORDER_COUNT_PAGE,
    DROP_ORDER,
    ODataQuery,
    fetch_collection,
)
from uipath_mcp.client.token_manager import TokenManager
from uipath_mcp.client.transport import TransportConfig
from uipath_mcp.exceptions import ResponseFormatError
from uipath_mcp.models.config import ClientConfig
from uipath_mcp.models.enums import (
    JobState,
    QueueItemPriority,
    QueueItemStatus,
    RobotType,
    StartStrategy,
    StopStrategy,
)
from uipath_mcp.models.records import (
    Asset,
    AssetValue,
    AuditLog,
    ConsumptionLicenseStats,
    CountStats,
    Folder,
    Job,
    LicenseNamedUser,
    LicenseRuntime,
    LicenseStats,
    Machine,
    PagedResult,
    ProcessSchedule,
    QueueDefinition,
    QueueItem,
    RecordT,
    Release,
    Robot,
    RobotLog,
    Session,
)

logger = logging.getLogger(__name__)

_CONFIGURATION_NS = "UiPath.Server.Configuration.OData"


def _parse(record_type: type[RecordT], data: Any) -> RecordT:
    """Validate one response record, reporting a malformed body as a server fault."""
    try:
        return record_type.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Malformed {record_type.__name__} record: {e.error_count()} error(s)")
        raise ResponseFormatError(record_type.__name__, str(e)) from e


def _value(option: Any) -> str:
    """Wire value of an enum member or plain string option."""
    return option.value if hasattr(option, "value") else str(option)


class OrchestratorClient:
    """Typed access to Orchestrator entities for one tenant."""

    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: TransportConfig | None = None,
        token_manager: TokenManager | None = None,
        executor: RequestExecutor | None = None,
    ) -> None:
        self.config = config
        self._transport = transport or TransportConfig.from_client_config(config)
        self.token_manager = token_manager or TokenManager(config, self._transport)
        self.executor = executor or RequestExecutor(
            config.orchestrator_url, self.token_manager, self._transport
        )

    def resolve_folder(self, folder_id: int | None = None) -> int | None:
        """Explicit folder first, then the configured default, else tenant-wide."""
        return folder_id if folder_id is not None else self.config.default_folder_id

    async def _list(
        self,
        path: str,
        record_type: type,
        query: ODataQuery,
        *,
        folder_id: int | None = None,
        fallback=None,
    ) -> PagedResult:
        items, total = await fetch_collection(
            self.executor, path, query, folder_id=folder_id, fallback=fallback
        )
        return PagedResult[record_type](
            items=[_parse(record_type, item) for item in items],
            total_count=total,
        )

    # ---------------------------------------------------------------------
    # Folders, robots, machines
    # ---------------------------------------------------------------------

    async def get_folders(
        self,
        top: int = 100,
        skip: int = 0,
        order_by: str = "DisplayName asc",
    ) -> PagedResult[Folder]:
        query = ODataQuery(top=top, skip=skip, order_by=order_by, count=True)
        return await self._list("/odata/Folders", Folder, query)

    async def get_robots(
        self,
        folder_id: int | None = None,
        top: int = 100,
        skip: int = 0,
        order_by: str = "Name asc",
    ) -> PagedResult[Robot]:
        """List robots; a folder selects the folder-specific route."""
        folder = self.resolve_folder(folder_id)
        if folder is not None:
            path = f"/odata/Robots/{_CONFIGURATION_NS}.GetRobotsFromFolder(folderId={folder})"
        else:
            path = "/odata/Robots"
        query = ODataQuery(top=top, skip=skip, order_by=order_by, count=True)
        return await self._list(path, Robot, query)

    async def get_machines(
        self,
        top: int = 100,
        skip: int = 0,
        order_by: str = "Name asc",
    ) -> PagedResult[Machine]:
        query = ODataQuery(top=top, skip=skip, order_by=order_by, count=True)
        return await self._list("/odata/Machines", Machine, query)

    # ---------------------------------------------------------------------
    # Assets, logs, sessions, schedules, audit
    # ---------------------------------------------------------------------

    async def get_robot_asset(self, robot_id: int, asset_name: str) -> AssetValue:
        """Resolve an asset's value as seen by a specific robot."""
        encoded = quote(asset_name, safe="")
        path = (
            f"/odata/Assets/{_CONFIGURATION_NS}.GetRobotAssetByRobotId"
            f"(robotId={robot_id},assetName='{encoded}')"
        )
        data = await self.executor.execute("GET", path)
        return _parse(AssetValue, data or {})

    async def get_assets(
        self,
        folder_id: int | None = None,
        top: int = 100,
        skip: int = 0,
    ) -> PagedResult[Asset]:
        query = ODataQuery(top=top, skip=skip, order_by="Name asc", count=True)
        return await self._list(
            "/odata/Assets", Asset, query,
            folder_id=self.resolve_folder(folder_id), fallback=DROP_COUNT,
        )

    async def get_robot_logs(
        self,
        folder_id: int | None = None,
        job_key: str | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
        level: str | None = None,
        top: int = 100,
        skip: int = 0,
        order_by: str = "TimeStamp desc",
    ) -> PagedResult[RobotLog]:
        query = ODataQuery(top=top, skip=skip, order_by=order_by, count=True)
        if job_key:
            query.where_eq("JobKey", job_key)
        if level:
            query.where_eq("Level", level)
        if start_time:
            query.where_ge("TimeStamp", start_time)
        if end_time:
            query.where_le("TimeStamp", end_time)
        return await self._list(
            "/odata/RobotLogs", RobotLog, query, folder_id=self.resolve_folder(folder_id)
        )

    async def get_sessions(
        self,
        folder_id: int | None = None,
        state: str | None = None,
        top: int = 100,
        skip: int = 0,
    ) -> PagedResult[Session]:
        query = ODataQuery(top=top, skip=skip, count=True)
        if state:
            query.where_eq("State", state)
        return await self._list(
            "/odata/Sessions", Session, query,
            folder_id=self.resolve_folder(folder_id), fallback=DROP_COUNT,
        )

    async def get_process_schedules(
        self,
        folder_id: int | None = None,
        enabled: bool | None = None,
        top: int = 100,
        skip: int = 0,
    ) -> PagedResult[ProcessSchedule]:
        query = ODataQuery(top=top, skip=skip, count=True)
        if enabled is not None:
            query.where_eq("Enabled", enabled)
        return await self._list(
            "/odata/ProcessSchedules", ProcessSchedule, query,
            folder_id=self.resolve_folder(folder_id), fallback=DROP_COUNT,
        )

    async def get_audit_logs(
        self,
        action: str | None = None,
        user_name: str | None = None,
        component: str | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
        top: int = 100,
        skip: int = 0,
    ) -> PagedResult[AuditLog]:
        """Query the tenant-wide audit trail."""
        query = ODataQuery(top=top, skip=skip, order_by="ExecutionTime desc", count=True)
        if action:
            query.where_eq("Action", action)
        if user_name:
            query.where_eq("UserName", user_name)
        if component:
            query.where_eq("Component", component)
        if start_time:
            query.where_ge("ExecutionTime", start_time)
        if end_time:
            query.where_le("ExecutionTime", end_time)
        return await self._list(
            "/odata/AuditLogs", AuditLog, query, fallback=DROP_COUNT_AND_ORDER_COUNT_PAGE
        )

    # ---------------------------------------------------------------------
    # Queues
    # ---------------------------------------------------------------------

    async def get_queue_definitions(self, folder_id: int | None = None) -> list[QueueDefinition]:
        data = await self.executor.execute(
            "GET", "/odata/QueueDefinitions", folder_id=self.resolve_folder(folder_id)
        )
        return [_parse(QueueDefinition, q) for q in (data or {}).get("value", [])]

    async def get_queue_definition_by_name(
        self,
        name: str,
        folder_id: int | None = None,
    ) -> QueueDefinition | None:
        """Find a queue by exact name; None when there is no match."""
        query = ODataQuery().where_eq("Name", name)
        data = await self.executor.execute(
            "GET", "/odata/QueueDefinitions", query.to_params(),
            folder_id=self.resolve_folder(folder_id),
        )
        matches = (data or {}).get("value", [])
        return _parse(QueueDefinition, matches[0]) if matches else None

    async def get_queue_items(
        self,
        queue_id: int | None = None,
        status: QueueItemStatus | str | None = None,
        folder_id: int | None = None,
        top: int = 100,
        skip: int = 0,
        order_by: str | None = None,
    ) -> PagedResult[QueueItem]:
        query = ODataQuery(
            top=top, skip=skip, order_by=order_by or "CreationTime desc", count=True
        )
        if queue_id is not None:
            query.where_eq("QueueDefinitionId", queue_id)
        if status:
            query.where_eq("Status", _value(status))
        return await self._list(
            "/odata/QueueItems", QueueItem, query,
            folder_id=self.resolve_folder(folder_id), fallback=DROP_COUNT_AND_ORDER,
        )

    async def add_queue_item(
        self,
        queue_name: str,
        specific_content: dict[str, Any],
        reference: str | None = None,
        priority: QueueItemPriority | str = QueueItemPriority.NORMAL,
        defer_date: str | None = None,
        due_date: str | None = None,
        folder_id: int | None = None,
    ) -> QueueItem:
        item_data: dict[str, Any] = {
            "Name": queue_name,
            "SpecificContent": specific_content,
            "Priority": _value(priority),
        }
        if reference is not None:
            item_data["Reference"] = reference
        if defer_date is not None:
            item_data["DeferDate"] = defer_date
        if due_date is not None:
            item_data["DueDate"] = due_date

        data = await self.executor.execute(
            "POST", "/odata/Queues/UiPathODataSvc.AddQueueItem",
            body={"itemData": item_data},
            folder_id=self.resolve_folder(folder_id),
        )
        logger.info(f"Added item to queue '{queue_name}'")
        return _parse(QueueItem, data or {})

    # ---------------------------------------------------------------------
    # Jobs and releases
    # ---------------------------------------------------------------------

    async def get_jobs(
        self,
        state: JobState | str | None = None,
        release_name: str | None = None,
        folder_id: int | None = None,
        top: int = 100,
        skip: int = 0,
        order_by: str | None = None,
    ) -> PagedResult[Job]:
        query = ODataQuery(
            top=top, skip=skip, order_by=order_by or "CreationTime desc", count=True
        )
        if state:
            query.where_eq("State", _value(state))
        if release_name:
            query.where_eq("ReleaseName", release_name)
        return await self._list(
            "/odata/Jobs", Job, query,
            folder_id=self.resolve_folder(folder_id), fallback=DROP_COUNT_AND_ORDER,
        )

    async def get_faulted_jobs_raw(
        self,
        folder_id: int | None = None,
        top: int = 50,
        release_name: str | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
    ) -> list[Job]:
        """Faulted jobs, newest first when the server allows ordering."""
        query = ODataQuery(top=top, order_by="CreationTime desc")
        query.where_eq("State", JobState.FAULTED.value)
        if release_name:
            query.where_eq("ReleaseName", release_name)
        if start_time:
            query.where_ge("CreationTime", start_time)
        if end_time:
            query.where_le("CreationTime", end_time)
        items, _ = await fetch_collection(
            self.executor, "/odata/Jobs", query,
            folder_id=self.resolve_folder(folder_id), fallback=DROP_ORDER,
        )
        return [_parse(Job, item) for item in items]

    async def get_job(self, job_id: int, folder_id: int | None = None) -> Job:
        data = await self.executor.execute(
            "GET", f"/odata/Jobs({job_id})", folder_id=self.resolve_folder(folder_id)
        )
        return _parse(Job, data)

    async def start_job(
        self,
        release_key: str,
        input_arguments: dict[str, Any] | None = None,
        jobs_count: int = 1,
        strategy: StartStrategy | str = StartStrategy.MODERN_JOBS_COUNT,
        folder_id: int | None = None,
    ) -> list[Job]:
        """Start jobs for a release; returns the created job records.

        Does not wait for the jobs to finish.
        """
        start_info: dict[str, Any] = {
            "ReleaseKey": release_key,
            "Strategy": _value(strategy),
            "JobsCount": jobs_count,
        }
        if input_arguments:
            start_info["InputArguments"] = json.dumps(input_arguments)

        data = await self.executor.execute(
            "POST", f"/odata/Jobs/{_CONFIGURATION_NS}.StartJobs",
            body={"startInfo": start_info},
            folder_id=self.resolve_folder(folder_id),
        )
        jobs = [_parse(Job, j) for j in (data or {}).get("value", [])]
        logger.info(f"Started {len(jobs)} job(s) for release {release_key}")
        return jobs

    async def stop_job(
        self,
        job_id: int,
        strategy: StopStrategy | str = StopStrategy.SOFT_STOP,
        folder_id: int | None = None,
    ) -> None:
        await self.executor.execute(
            "POST", f"/odata/Jobs({job_id})/{_CONFIGURATION_NS}.StopJob",
            body={"strategy": _value(strategy)},
            folder_id=self.resolve_folder(folder_id),
        )
        logger.info(f"Requested {_value(strategy)} for job {job_id}")

    async def get_releases(
        self,
        process_key: str | None = None,
        folder_id: int | None = None,
    ) -> list[Release]:
        query = ODataQuery()
        if process_key:
            query.where_eq("ProcessKey", process_key)
        return await self._get_releases(query, folder_id)

    async def get_releases_by_name(
        self,
        name: str,
        folder_id: int | None = None,
    ) -> list[Release]:
        return await self._get_releases(ODataQuery().where_eq("Name", name), folder_id)

    async def _get_releases(self, query: ODataQuery, folder_id: int | None) -> list[Release]:
        data = await self.executor.execute(
            "GET", "/odata/Releases", query.to_params() or None,
            folder_id=self.resolve_folder(folder_id),
        )
        return [_parse(Release, r) for r in (data or {}).get("value", [])]

    # ---------------------------------------------------------------------
    # Licensing and tenant stats
    # ---------------------------------------------------------------------

    async def get_consumption_license_stats(
        self,
        tenant_id: int | None = None,
        days: int | None = None,
    ) -> list[ConsumptionLicenseStats]:
        data = await self.executor.execute(
            "GET", "/api/Stats/GetConsumptionLicenseStats", _stats_params(tenant_id, days)
        )
        return [_parse(ConsumptionLicenseStats, r) for r in data or []]

    async def get_license_stats(
        self,
        tenant_id: int | None = None,
        days: int | None = None,
    ) -> list[LicenseStats]:
        data = await self.executor.execute(
            "GET", "/api/Stats/GetLicenseStats", _stats_params(tenant_id, days)
        )
        return [_parse(LicenseStats, r) for r in data or []]

    async def get_licenses_runtime(self, robot_type: RobotType | str) -> PagedResult[LicenseRuntime]:
        path = (
            f"/odata/LicensesRuntime/{_CONFIGURATION_NS}.GetLicensesRuntime"
            f"(robotType='{quote(_value(robot_type), safe='')}')"
        )
        return await self._get_function_collection(path, LicenseRuntime)

    async def get_licenses_named_user(self, robot_type: RobotType | str) -> PagedResult[LicenseNamedUser]:
        path = (
            f"/odata/LicensesNamedUser/{_CONFIGURATION_NS}.GetLicensesNamedUser"
            f"(robotType='{quote(_value(robot_type), safe='')}')"
        )
        return await self._get_function_collection(path, LicenseNamedUser)

    async def _get_function_collection(self, path: str, record_type: type) -> PagedResult:
        data = await self.executor.execute("GET", path) or {}
        return PagedResult[record_type](
            items=[_parse(record_type, r) for r in data.get("value", [])],
            total_count=data.get("@odata.count"),
        )

    async def get_count_stats(self) -> list[CountStats]:
        data = await self.executor.execute("GET", "/api/Stats/GetCountStats")
        return [_parse(CountStats, r) for r in data or []]

    async def get_sessions_stats(self) -> list[CountStats]:
        data = await self.executor.execute("GET", "/api/Stats/GetSessionsStats")
        return [_parse(CountStats, r) for r in data or []]


def _stats_params(tenant_id: int | None, days: int | None) -> dict[str, str] | None:
    params: dict[str, str] = {}
    if tenant_id is not None:
        params["tenantId"] = str(tenant_id)
    if days is not None:
        params["days"] = str(days)
    return params or None
