"""Wall-clock job scheduler running the release radar background jobs."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime, time, timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from releaseradar.domain.model import Frequency
from releaseradar.domain.time_windows import utcnow

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence
    from datetime import tzinfo

    from releaseradar.config.scheduler import SchedulerConfig
    from releaseradar.domain.digests import DigestBuilder
    from releaseradar.domain.notifications import NotificationDispatcher
    from releaseradar.domain.release_sync import ReleaseSynchronizer
    from releaseradar.domain.time_windows import Clock

log = getLogger(__name__)

SYNC_JOB = "sync-releases"
DAILY_BATCH_JOB = "daily-digest"
WEEKLY_BATCH_JOB = "weekly-digest"
WEEKLY_SUMMARY_JOB = "weekly-summary"
CLEANUP_JOB = "purge-logs"


@dataclass(frozen=True, slots=True)
class Cadence:
    """When a job fires, in local wall-clock time.

    ``hour=None`` fires every hour at ``minute``; ``weekday=None`` fires every day.
    """

    minute: int = 0
    hour: int | None = None
    weekday: int | None = None

    @classmethod
    def hourly(cls, minute: int = 0) -> Cadence:
        return cls(minute=minute)

    @classmethod
    def daily(cls, at: time) -> Cadence:
        return cls(minute=at.minute, hour=at.hour)

    @classmethod
    def weekly(cls, weekday: int, at: time) -> Cadence:
        return cls(minute=at.minute, hour=at.hour, weekday=weekday)

    def next_after(self, now: datetime) -> datetime:
        """First firing time strictly after ``now`` (same time zone as ``now``)."""

        candidate = now.replace(minute=self.minute, second=0, microsecond=0)
        if self.hour is None:
            return candidate if candidate > now else candidate + timedelta(hours=1)

        candidate = candidate.replace(hour=self.hour)
        if self.weekday is None:
            return candidate if candidate > now else candidate + timedelta(days=1)

        candidate += timedelta(days=(self.weekday - candidate.weekday()) % 7)
        return candidate if candidate > now else candidate + timedelta(days=7)


@dataclass(frozen=True, slots=True)
class ScheduledJob:
    name: str
    cadence: Cadence
    action: Callable[[], Awaitable[object]]


class Scheduler:
    """Owns one asyncio task per job.

    A failing run is logged and never cancels other jobs or the job's own
    later runs. Each slot of a cadence runs at most once. Runs of the same job
    never overlap within one scheduler, but a manual ``run_job`` may overlap a
    scheduled run. ``shutdown`` stops the timers and waits for in-flight runs
    to finish instead of cancelling them.
    """

    def __init__(
        self,
        jobs: Sequence[ScheduledJob],
        *,
        timezone: tzinfo,
        clock: Clock = utcnow,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._jobs = {job.name: job for job in jobs}
        self._timezone = timezone
        self._clock = clock
        self._sleep = sleep
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._executing: set[str] = set()
        self._stop_event = asyncio.Event()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def job_names(self) -> tuple[str, ...]:
        return tuple(self._jobs)

    def init(self) -> None:
        """Start every job on the running event loop; a no-op when already started."""

        if self._initialized:
            log.debug("Scheduler already initialised")
            return
        self._stop_event = asyncio.Event()
        for job in self._jobs.values():
            self._tasks[job.name] = asyncio.create_task(
                self._run_forever(job), name=f"scheduler:{job.name}"
            )
            next_run = self.next_run(job.name)
            log.info(
                "Scheduled %s; next run at %s", job.name, next_run.strftime("%Y-%m-%d %H:%M %Z")
            )
        self._initialized = True

    async def shutdown(self) -> None:
        """Stop the timers; jobs that are running are awaited, not cancelled."""

        self._stop_event.set()
        running = {name: task for name, task in self._tasks.items() if name in self._executing}
        idle = [task for name, task in self._tasks.items() if name not in running]
        for task in idle:
            task.cancel()
        await asyncio.gather(*idle, return_exceptions=True)
        if running:
            log.info("Waiting for running job(s) to finish: %s", ", ".join(running))
            # Shielded so that cancelling shutdown itself leaves the jobs running.
            await asyncio.gather(
                *(asyncio.shield(task) for task in running.values()), return_exceptions=True
            )
        self._tasks.clear()
        self._initialized = False
        log.info("Scheduler stopped")

    async def run_job(self, name: str) -> bool:
        """Run a job immediately. Returns whether it completed without error."""

        job = self._jobs.get(name)
        if job is None:
            raise KeyError(f"Unknown job {name!r}; known jobs: {', '.join(self._jobs)}")
        return await self._execute(job)

    def next_run(self, name: str) -> datetime:
        now = self._clock().astimezone(self._timezone)
        return self._jobs[name].cadence.next_after(now)

    async def _run_forever(self, job: ScheduledJob) -> None:
        last_due: datetime | None = None
        while not self._stop_event.is_set():
            now = self._clock().astimezone(self._timezone)
            # A timer that wakes a little early must not hit the same slot twice.
            reference = now if last_due is None else max(now, last_due)
            due = job.cadence.next_after(reference)
            delay = (due.astimezone(UTC) - now.astimezone(UTC)).total_seconds()
            await self._sleep(max(delay, 0.0))
            if self._stop_event.is_set():
                return
            self._executing.add(job.name)
            try:
                await self._execute(job)
            finally:
                self._executing.discard(job.name)
            last_due = due

    async def _execute(self, job: ScheduledJob) -> bool:
        started = self._clock()
        log.info("Running job %s", job.name)
        try:
            await job.action()
        except Exception:
            log.exception("Job %s failed", job.name)
            return False
        elapsed = (self._clock() - started).total_seconds()
        log.info("Job %s finished in %.1fs", job.name, elapsed)
        return True


def build_jobs(
    config: SchedulerConfig,
    *,
    synchronizer: ReleaseSynchronizer,
    dispatcher: NotificationDispatcher,
    digests: DigestBuilder,
) -> list[ScheduledJob]:
    async def purge_logs() -> int:
        return dispatcher.purge_logs()

    return [
        ScheduledJob(SYNC_JOB, Cadence.hourly(config.sync_minute), synchronizer.sync_all),
        ScheduledJob(
            DAILY_BATCH_JOB,
            Cadence.daily(config.daily_batch_at),
            lambda: dispatcher.send_batch(Frequency.DAILY),
        ),
        ScheduledJob(
            WEEKLY_BATCH_JOB,
            Cadence.weekly(config.weekly_batch_weekday, config.weekly_batch_at),
            lambda: dispatcher.send_batch(Frequency.WEEKLY),
        ),
        ScheduledJob(
            WEEKLY_SUMMARY_JOB,
            Cadence.weekly(config.weekly_summary_weekday, config.weekly_summary_at),
            digests.build_weekly_summary,
        ),
        ScheduledJob(
            CLEANUP_JOB,
            Cadence.weekly(config.cleanup_weekday, config.cleanup_at),
            purge_logs,
        ),
    ]
