"""Argument models for the UiPath tools.

Tool callers send camelCase keys (``folderId``, ``queueName``); each model
accepts those and the snake_case field names alike. Unknown keys are ignored.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from uipath_mcp.models.enums import QueueItemPriority, RobotType


class ToolArgs(BaseModel):
    """Base for tool argument models."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=True,
    )


class FolderScoped(ToolArgs):
    folder_id: int | None = Field(default=None, description="Folder ID to scope the request to")


class Paged(ToolArgs):
    limit: int = Field(default=50, ge=1, description="Maximum items to return")
    skip: int = Field(default=0, ge=0, description="Number of items to skip")


class GetFoldersArgs(Paged):
    pass


class GetRobotsArgs(Paged):
    folder_id: int | None = Field(default=None, description="Optional folder ID filter")


class GetMachinesArgs(Paged):
    pass


class GetRobotAssetArgs(ToolArgs):
    robot_id: int = Field(description="Robot ID")
    asset_name: str = Field(description="Asset name")


class GetRobotLogsArgs(FolderScoped):
    job_key: str | None = Field(default=None, description="Filter by job key")
    start_time: str | None = Field(default=None, description="Filter by start time (ISO 8601)")
    end_time: str | None = Field(default=None, description="Filter by end time (ISO 8601)")
    level: str | None = Field(default=None, description="Filter by log level")
    limit: int = Field(default=100, ge=1, description="Maximum items to return")
    skip: int = Field(default=0, ge=0, description="Number of items to skip")


class GetQueueDefinitionsArgs(FolderScoped):
    pass


QueueItemStatusFilter = Literal["New", "InProgress", "Successful", "Failed", "Abandoned", "Retried"]
JobStateFilter = Literal["Pending", "Running", "Successful", "Faulted", "Stopped", "Terminated"]


class GetQueueItemsArgs(FolderScoped):
    queue_name: str | None = Field(default=None, description="Filter by queue name")
    queue_id: int | None = Field(default=None, description="Filter by queue ID")
    status: QueueItemStatusFilter | None = Field(default=None, description="Filter by item status")
    limit: int = Field(default=50, ge=1, description="Maximum items to return")


class AddQueueItemArgs(FolderScoped):
    queue_name: str = Field(description="Name of the queue to add the item to")
    data: dict[str, Any] = Field(description="The specific content of the queue item")
    reference: str | None = Field(default=None, description="Optional unique reference for tracking")
    priority: QueueItemPriority = Field(
        default=QueueItemPriority.NORMAL, description="Item priority"
    )
    defer_date: str | None = Field(default=None, description="Earliest processing time (ISO 8601)")
    due_date: str | None = Field(default=None, description="Latest processing time (ISO 8601)")


class GetQueueStatsArgs(FolderScoped):
    queue_name: str = Field(description="Name of the queue")


class GetJobsArgs(FolderScoped):
    state: JobStateFilter | None = Field(default=None, description="Filter by job state")
    release_name: str | None = Field(default=None, description="Filter by release/process name")
    limit: int = Field(default=50, ge=1, description="Maximum jobs to return")


class GetJobDetailsArgs(FolderScoped):
    job_id: int = Field(description="The ID of the job")


class StartJobArgs(FolderScoped):
    process_name: str = Field(description="Name or key of the process to start")
    input_arguments: dict[str, Any] | None = Field(default=None, description="Input arguments for the job")
    jobs_count: int = Field(default=1, ge=1, description="Number of jobs to start")


class StopJobArgs(FolderScoped):
    job_id: int = Field(description="The ID of the job to stop")
    force: bool = Field(default=False, description="Kill instead of a soft stop")


class GetJobStatsArgs(FolderScoped):
    pass


class GetReleasesArgs(FolderScoped):
    process_key: str | None = Field(default=None, description="Filter by process key")


class GetDashboardSummaryArgs(FolderScoped):
    pass


class GetSessionsArgs(Paged):
    folder_id: int | None = Field(default=None, description="Folder ID to filter sessions")
    state: str | None = Field(
        default=None, description="Filter by session state (Available, Busy, Disconnected)"
    )


class GetAssetsArgs(Paged):
    folder_id: int | None = Field(default=None, description="Folder ID to list assets for")


class GetSchedulesArgs(Paged):
    folder_id: int | None = Field(default=None, description="Folder ID to filter schedules")
    enabled: bool | None = Field(default=None, description="Filter by enabled/disabled status")


class GetAuditLogsArgs(Paged):
    action: str | None = Field(default=None, description="Filter by action type (e.g. 'Create', 'Update', 'Delete')")
    user_name: str | None = Field(default=None, description="Filter by user name")
    component: str | None = Field(default=None, description="Filter by component (e.g. 'Jobs', 'Queues', 'Robots')")
    start_time: str | None = Field(default=None, description="Filter by start time (ISO 8601)")
    end_time: str | None = Field(default=None, description="Filter by end time (ISO 8601)")


class GetFaultedJobsArgs(FolderScoped):
    release_name: str | None = Field(default=None, description="Filter by process/release name")
    start_time: str | None = Field(default=None, description="Only faulted jobs after this time (ISO 8601)")
    end_time: str | None = Field(default=None, description="Only faulted jobs before this time (ISO 8601)")
    limit: int = Field(default=50, ge=1, description="Maximum items to return")


class GetProcessPerformanceArgs(FolderScoped):
    process_name: str = Field(description="Name of the process/release to analyze")
    limit: int = Field(default=100, ge=1, description="Number of recent executions to analyze")


class GetFolderOverviewArgs(ToolArgs):
    folder_id: int = Field(description="Folder ID to get the overview for")


class LicenseStatsArgs(ToolArgs):
    tenant_id: int | None = Field(default=None, description="Tenant ID (used when authenticated as Host)")
    days: int | None = Field(default=None, ge=1, description="Number of reported license usage days")


class RobotTypeArgs(ToolArgs):
    robot_type: RobotType = Field(description="Type of robot to filter licenses by")


class NoArgs(ToolArgs):
    pass
