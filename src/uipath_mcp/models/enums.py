"""Enumerations for Orchestrator states and request options."""

from enum import Enum


class QueueItemStatus(str, Enum):
    """Processing status of a queue item."""

    NEW = "New"
    IN_PROGRESS = "InProgress"
    SUCCESSFUL = "Successful"
    FAILED = "Failed"
    ABANDONED = "Abandoned"
    RETRIED = "Retried"
    DELETED = "Deleted"


class JobState(str, Enum):
    """Execution state of a job."""

    PENDING = "Pending"
    RUNNING = "Running"
    SUCCESSFUL = "Successful"
    FAULTED = "Faulted"
    STOPPING = "Stopping"
    TERMINATED = "Terminated"
    STOPPED = "Stopped"
    SUSPENDED = "Suspended"
    RESUMED = "Resumed"


class QueueItemPriority(str, Enum):
    """Priority of a queue item."""

    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"


class StartStrategy(str, Enum):
    """Robot allocation strategy for starting jobs."""

    MODERN_JOBS_COUNT = "ModernJobsCount"
    SPECIFIC = "Specific"
    JOBS_COUNT = "JobsCount"


class StopStrategy(str, Enum):
    """How a running job is stopped."""

    SOFT_STOP = "SoftStop"  # graceful, the process checks for the stop signal
    KILL = "Kill"


class RobotType(str, Enum):
    """License robot types accepted by the runtime/named-user license routes."""

    NON_PRODUCTION = "NonProduction"
    ATTENDED = "Attended"
    UNATTENDED = "Unattended"
    DEVELOPMENT = "Development"
    STUDIO = "Studio"
    RPA_DEVELOPER = "RpaDeveloper"
    STUDIO_X = "StudioX"
    CITIZEN_DEVELOPER = "CitizenDeveloper"
    HEADLESS = "Headless"
    STUDIO_PRO = "StudioPro"
    RPA_DEVELOPER_PRO = "RpaDeveloperPro"
    TEST_AUTOMATION = "TestAutomation"
    AUTOMATION_CLOUD = "AutomationCloud"
    SERVERLESS = "Serverless"
    AUTOMATION_KIT = "AutomationKit"
    SERVERLESS_TEST_AUTOMATION = "ServerlessTestAutomation"
    AUTOMATION_CLOUD_TEST_AUTOMATION = "AutomationCloudTestAutomation"
    ATTENDED_STUDIO_WEB = "AttendedStudioWeb"
    HOSTING = "Hosting"
    ASSISTANT_WEB = "AssistantWeb"
    PROCESS_ORCHESTRATION = "ProcessOrchestration"
    AGENT_SERVICE = "AgentService"
    APP_TEST = "AppTest"
    PERFORMANCE_TEST = "PerformanceTest"
    BUSINESS_RULE = "BusinessRule"
    CASE_MANAGEMENT = "CaseManagement"


# Fixed status order used by queue statistics
QUEUE_STAT_STATUSES = (
    QueueItemStatus.NEW,
    QueueItemStatus.IN_PROGRESS,
    QueueItemStatus.SUCCESSFUL,
    QueueItemStatus.FAILED,
    QueueItemStatus.ABANDONED,
)

# Fixed state order used by job statistics
JOB_STAT_STATES = (
    JobState.PENDING,
    JobState.RUNNING,
    JobState.SUCCESSFUL,
    JobState.FAULTED,
    JobState.STOPPED,
    JobState.TERMINATED,
)
