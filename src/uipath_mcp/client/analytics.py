"""Composite analytics built from several entity queries.

Every aggregate is recomputed from fresh fetches; nothing is cached. Only two
paths tolerate failures: the folder overview's parallel sub-fetches and the
job statistics fallback to client-side tallying.
"""

import asyncio
import logging
import math
from datetime import UTC, datetime

from uipath_mcp.client.orchestrator import OrchestratorClient
from uipath_mcp.models.enums import JOB_STAT_STATES, QUEUE_STAT_STATUSES, JobState
from uipath_mcp.models.records import Job, Release
from uipath_mcp.models.stats import (
    DashboardSummary,
    FaultedJobSummary,
    FolderOverview,
    JobStats,
    ProcessPerformance,
    QueueStats,
)

logger = logging.getLogger(__name__)

DEFAULT_DASHBOARD_QUEUE_SAMPLE = 5
DEFAULT_JOB_STATS_FALLBACK_LIMIT = 1000
DEFAULT_FOLDER_OVERVIEW_LIMIT = 1000
FOLDER_OVERVIEW_ROBOT_LIMIT = 100
RECENT_JOBS_LIMIT = 10

# Buckets reported by the folder overview; Terminated counts as Stopped
_OVERVIEW_STATES = ("Pending", "Running", "Successful", "Faulted", "Stopped")
_STOPPED_STATES = frozenset({JobState.STOPPED.value, JobState.TERMINATED.value})


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def compute_duration(start_time: str | None, end_time: str | None) -> int | None:
    """Whole seconds between two ISO-8601 timestamps.

    Returns None if either timestamp is missing or cannot be parsed.
    Timestamps without an offset are taken as UTC.
    """
    if not start_time or not end_time:
        return None
    try:
        start = _parse_timestamp(start_time)
        end = _parse_timestamp(end_time)
    except ValueError:
        return None
    return round_half_up((end - start).total_seconds())


def success_rate(successful: int, failed: int) -> float | None:
    """Percentage of successes among completed work; None when nothing completed."""
    completed = successful + failed
    if completed <= 0:
        return None
    return successful / completed * 100


class OrchestratorAnalytics:
    """Aggregates over an ``OrchestratorClient``.

    Args:
        client: Entity client used for every sub-fetch
        dashboard_queue_sample: How many queue definitions the dashboard
            aggregates (the first N returned, not all of them)
        job_stats_fallback_limit: Jobs fetched when per-state counting
            is unavailable
        folder_overview_limit: Jobs and folders scanned by the folder overview
    """

    def __init__(
        self,
        client: OrchestratorClient,
        dashboard_queue_sample: int = DEFAULT_DASHBOARD_QUEUE_SAMPLE,
        job_stats_fallback_limit: int = DEFAULT_JOB_STATS_FALLBACK_LIMIT,
        folder_overview_limit: int = DEFAULT_FOLDER_OVERVIEW_LIMIT,
    ) -> None:
        self.client = client
        self.dashboard_queue_sample = dashboard_queue_sample
        self.job_stats_fallback_limit = job_stats_fallback_limit
        self.folder_overview_limit = folder_overview_limit

    async def get_queue_stats(
        self,
        queue_id: int,
        queue_name: str,
        folder_id: int | None = None,
    ) -> QueueStats:
        """Count a queue's items per status, one count query per status."""
        folder = self.client.resolve_folder(folder_id)
        counts: dict[str, int] = {}
        for status in QUEUE_STAT_STATUSES:
            page = await self.client.get_queue_items(
                queue_id=queue_id, status=status, folder_id=folder, top=1
            )
            counts[status.value] = page.total_count or 0

        successful = counts["Successful"]
        failed = counts["Failed"]
        return QueueStats(
            queue_id=queue_id,
            queue_name=queue_name,
            total_items=sum(counts.values()),
            new_items=counts["New"],
            in_progress_items=counts["InProgress"],
            successful_items=successful,
            failed_items=failed,
            abandoned_items=counts["Abandoned"],
            success_rate=success_rate(successful, failed),
        )

    async def get_job_stats(self, folder_id: int | None = None) -> JobStats:
        """Job counts per state.

        Uses one count query per state. If any count is unknown or a query
        fails, discards the partial counts and tallies a raw fetch of up to
        ``job_stats_fallback_limit`` jobs instead.
        """
        folder = self.client.resolve_folder(folder_id)
        counts: dict[str, int] | None = {}
        try:
            for state in JOB_STAT_STATES:
                page = await self.client.get_jobs(state=state, folder_id=folder, top=1)
                if page.total_count is None:
                    logger.info(f"No count returned for {state.value} jobs, tallying instead")
                    counts = None
                    break
                counts[state.value] = page.total_count
        except Exception as e:
            logger.warning(f"Per-state job counting failed, tallying instead: {e}")
            counts = None

        if counts is None:
            page = await self.client.get_jobs(folder_id=folder, top=self.job_stats_fallback_limit)
            counts = {state.value: 0 for state in JOB_STAT_STATES}
            for job in page.items:
                if job.state in counts:
                    counts[job.state] += 1
            total = len(page.items)
        else:
            total = sum(counts.values())

        successful = counts["Successful"]
        faulted = counts["Faulted"]
        return JobStats(
            total_jobs=total,
            pending_jobs=counts["Pending"],
            running_jobs=counts["Running"],
            successful_jobs=successful,
            faulted_jobs=faulted,
            stopped_jobs=counts["Stopped"] + counts["Terminated"],
            success_rate=success_rate(successful, faulted),
        )

    async def get_faulted_jobs(
        self,
        folder_id: int | None = None,
        top: int = 50,
        release_name: str | None = None,
        start_time: str | None = None,
        end_time: str | None = None,
    ) -> list[FaultedJobSummary]:
        jobs = await self.client.get_faulted_jobs_raw(
            folder_id=folder_id,
            top=top,
            release_name=release_name,
            start_time=start_time,
            end_time=end_time,
        )
        return [
            FaultedJobSummary(
                id=job.id,
                key=job.key,
                release_name=job.release_name,
                state=job.state,
                info=job.info,
                job_error=job.job_error,
                creation_time=job.creation_time,
                start_time=job.start_time,
                end_time=job.end_time,
                host_machine_name=job.host_machine_name,
                duration_seconds=compute_duration(job.start_time, job.end_time),
            )
            for job in jobs
        ]

    async def get_process_performance(
        self,
        process_name: str,
        folder_id: int | None = None,
        top: int = 100,
    ) -> ProcessPerformance:
        """Execution metrics over a process's most recent jobs.

        Durations only consider successful jobs with both timestamps.
        """
        page = await self.client.get_jobs(release_name=process_name, folder_id=folder_id, top=top)
        jobs = page.items

        by_state: dict[str, list[Job]] = {}
        for job in jobs:
            by_state.setdefault(job.state or "", []).append(job)

        successful = by_state.get("Successful", [])
        faulted = by_state.get("Faulted", [])
        stopped = sum(len(by_state.get(s, [])) for s in _STOPPED_STATES)

        durations = [
            d for d in (compute_duration(j.start_time, j.end_time) for j in successful)
            if d is not None
        ]

        return ProcessPerformance(
            process_name=process_name,
            total_executions=len(jobs),
            successful=len(successful),
            faulted=len(faulted),
            stopped=stopped,
            running=len(by_state.get("Running", [])),
            pending=len(by_state.get("Pending", [])),
            success_rate=success_rate(len(successful), len(faulted)),
            avg_duration_seconds=round_half_up(sum(durations) / len(durations)) if durations else None,
            min_duration_seconds=min(durations) if durations else None,
            max_duration_seconds=max(durations) if durations else None,
            recent_jobs=jobs[:RECENT_JOBS_LIMIT],
        )

    async def get_folder_overview(self, folder_id: int) -> FolderOverview:
        """Health snapshot of one folder.

        The four sub-fetches run concurrently; a failed one counts as empty.
        """
        folders = await self.client.get_folders(top=self.folder_overview_limit)
        folder = next((f for f in folders.items if f.id == folder_id), None)
        folder_name = (folder.display_name if folder else None) or f"Folder {folder_id}"

        labels = ("jobs", "queues", "releases", "robots")
        results = await asyncio.gather(
            self.client.get_jobs(folder_id=folder_id, top=self.folder_overview_limit),
            self.client.get_queue_definitions(folder_id=folder_id),
            self.client.get_releases(folder_id=folder_id),
            self.client.get_robots(folder_id=folder_id, top=FOLDER_OVERVIEW_ROBOT_LIMIT),
            return_exceptions=True,
        )

        fetched: dict[str, list] = {}
        for label, result in zip(labels, results):
            if isinstance(result, BaseException):
                logger.warning(f"Folder {folder_id} overview: {label} fetch failed: {result}")
                fetched[label] = []
            elif isinstance(result, list):
                fetched[label] = result
            else:
                fetched[label] = result.items

        job_counts = {state: 0 for state in _OVERVIEW_STATES}
        for job in fetched["jobs"]:
            if job.state in job_counts:
                job_counts[job.state] += 1
            elif job.state == JobState.TERMINATED.value:
                job_counts["Stopped"] += 1

        return FolderOverview(
            folder_id=folder_id,
            folder_name=folder_name,
            job_counts=job_counts,
            total_jobs=len(fetched["jobs"]),
            queue_count=len(fetched["queues"]),
            release_count=len(fetched["releases"]),
            robot_count=len(fetched["robots"]),
        )

    async def get_dashboard_summary(self, folder_id: int | None = None) -> DashboardSummary:
        """Queue and job overview for a folder or the whole tenant.

        Queue figures cover only the first ``dashboard_queue_sample`` queue
        definitions.
        """
        folder = self.client.resolve_folder(folder_id)
        queues = await self.client.get_queue_definitions(folder_id=folder)
        job_stats = await self.get_job_stats(folder)

        sampled = queues[: self.dashboard_queue_sample]
        by_status = {"New": 0, "InProgress": 0, "Successful": 0, "Failed": 0}
        total_items = 0
        for queue in sampled:
            stats = await self.get_queue_stats(queue.id, queue.name, folder)
            by_status["New"] += stats.new_items
            by_status["InProgress"] += stats.in_progress_items
            by_status["Successful"] += stats.successful_items
            by_status["Failed"] += stats.failed_items
            total_items += stats.total_items

        return DashboardSummary(
            total_queues=len(queues),
            queues_sampled=len(sampled),
            total_queue_items=total_items,
            queue_items_by_status=by_status,
            total_jobs=job_stats.total_jobs,
            jobs_by_state={
                "Pending": job_stats.pending_jobs,
                "Running": job_stats.running_jobs,
                "Successful": job_stats.successful_jobs,
                "Faulted": job_stats.faulted_jobs,
                "Stopped": job_stats.stopped_jobs,
            },
            active_jobs=job_stats.pending_jobs + job_stats.running_jobs,
            success_rate_jobs=job_stats.success_rate,
            success_rate_queues=success_rate(by_status["Successful"], by_status["Failed"]),
        )

    async def find_release_by_name_or_key(
        self,
        name_or_key: str,
        folder_id: int | None = None,
    ) -> Release | None:
        """Match on the release key (ProcessKey) first, then on the release name."""
        releases = await self.client.get_releases(process_key=name_or_key, folder_id=folder_id)
        if releases:
            return releases[0]
        releases = await self.client.get_releases_by_name(name_or_key, folder_id=folder_id)
        return releases[0] if releases else None
