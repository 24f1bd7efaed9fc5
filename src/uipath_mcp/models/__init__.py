"""Data models for Orchestrator records, aggregates and configuration."""

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
    Release,
    Robot,
    RobotLog,
    Session,
)
from uipath_mcp.models.stats import (
    DashboardSummary,
    FaultedJobSummary,
    FolderOverview,
    JobStats,
    ProcessPerformance,
    QueueStats,
)

__all__ = [
    "Asset",
    "AssetValue",
    "AuditLog",
    "ClientConfig",
    "ConsumptionLicenseStats",
    "CountStats",
    "DashboardSummary",
    "FaultedJobSummary",
    "Folder",
    "FolderOverview",
    "Job",
    "JobState",
    "JobStats",
    "LicenseNamedUser",
    "LicenseRuntime",
    "LicenseStats",
    "Machine",
    "PagedResult",
    "ProcessPerformance",
    "ProcessSchedule",
    "QueueDefinition",
    "QueueItem",
    "QueueItemPriority",
    "QueueItemStatus",
    "QueueStats",
    "Release",
    "Robot",
    "RobotLog",
    "RobotType",
    "Session",
    "StartStrategy",
    "StopStrategy",
]
