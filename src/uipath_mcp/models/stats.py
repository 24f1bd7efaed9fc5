"""Derived aggregate models computed from freshly fetched records."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from uipath_mcp.models.records import Job


class Aggregate(BaseModel):
    """Base for aggregates; serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class QueueStats(Aggregate):
    """Item counts per status for a single queue."""

    queue_id: int
    queue_name: str
    total_items: int = 0
    new_items: int = 0
    in_progress_items: int = 0
    successful_items: int = 0
    failed_items: int = 0
    abandoned_items: int = 0
    success_rate: float | None = None


class JobStats(Aggregate):
    """Job counts per state; Stopped and Terminated share one counter."""

    total_jobs: int = 0
    pending_jobs: int = 0
    running_jobs: int = 0
    successful_jobs: int = 0
    faulted_jobs: int = 0
    stopped_jobs: int = 0
    success_rate: float | None = None


class FaultedJobSummary(BaseModel):
    """A faulted job with its computed duration.

    Keeps the job's PascalCase wire names next to ``durationSeconds``.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(alias="Id")
    key: str | None = Field(default=None, alias="Key")
    release_name: Any = Field(default=None, alias="ReleaseName")
    state: str | None = Field(default=None, alias="State")
    info: Any = Field(default=None, alias="Info")
    job_error: Any = Field(default=None, alias="JobError")
    creation_time: Any = Field(default=None, alias="CreationTime")
    start_time: str | None = Field(default=None, alias="StartTime")
    end_time: str | None = Field(default=None, alias="EndTime")
    host_machine_name: Any = Field(default=None, alias="HostMachineName")
    duration_seconds: int | None = Field(default=None, alias="durationSeconds")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ProcessPerformance(Aggregate):
    """Execution metrics for one process over its most recent jobs."""

    process_name: str
    total_executions: int = 0
    successful: int = 0
    faulted: int = 0
    stopped: int = 0
    running: int = 0
    pending: int = 0
    success_rate: float | None = None
    avg_duration_seconds: int | None = None
    min_duration_seconds: int | None = None
    max_duration_seconds: int | None = None
    recent_jobs: list[Job] = Field(default_factory=list)


class FolderOverview(Aggregate):
    """Health snapshot of a single folder."""

    folder_id: int
    folder_name: str
    job_counts: dict[str, int] = Field(default_factory=dict)
    total_jobs: int = 0
    queue_count: int = 0
    release_count: int = 0
    robot_count: int = 0


class DashboardSummary(Aggregate):
    """Tenant or folder dashboard.

    Queue figures only cover the first ``queues_sampled`` queue
    definitions, not every queue in scope.
    """

    total_queues: int = 0
    queues_sampled: int = 0
    total_queue_items: int = 0
    queue_items_by_status: dict[str, int] = Field(default_factory=dict)
    total_jobs: int = 0
    jobs_by_state: dict[str, int] = Field(default_factory=dict)
    active_jobs: int = 0
    success_rate_jobs: float | None = None
    success_rate_queues: float | None = None
