"""Entry points of the thermostat telemetry collector.

This module exposes two ways of triggering collection runs:
- `handler`, the AWS Lambda entry point invoked by a scheduled EventBridge rule.
- `main`, a long-running process using an APScheduler `BlockingScheduler` to run
  the pipeline at a fixed interval, for deployments without a cloud scheduler.

In both cases the configuration is read from the environment once per run.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from thermostat_collector.config import Settings
from thermostat_collector.pipeline import run_pipeline
from thermostat_collector.util.logging import LoggingUtil

logger = LoggingUtil.get_logger(__name__)


def handler(event: Dict[str, Any], context: Any = None) -> Optional[str]:
    """AWS Lambda handler for scheduled events.

    Args:
        event: The scheduled event. Only its `source` is used.
        context: The Lambda context object (unused).

    Returns:
        The `source` of the triggering event.

    Raises:
        CollectorError: If the run fails; the error is surfaced to Lambda.
    """
    source = event.get("source") if isinstance(event, dict) else None
    logger.info("Received trigger", extra={"source": source})
    run_pipeline(Settings.from_env())
    return source


def _collect_job() -> int:
    return run_pipeline(Settings.from_env())


def job_finished_listener(event: JobExecutionEvent) -> None:
    """Logs the outcome of every scheduled collection run.

    Args:
        event: The `JobExecutionEvent` emitted by APScheduler.
    """
    if event.exception is not None:
        logger.error("Collection job %s failed: %s", event.job_id, event.exception)
    else:
        logger.info(
            "Collection job %s completed, %s measurements written",
            event.job_id,
            event.retval,
        )


def build_scheduler(interval_minutes: int) -> BlockingScheduler:
    """Creates a scheduler running the collection job every `interval_minutes`.

    At most one run is active at a time; missed runs are coalesced into one.
    The first run starts immediately.

    Args:
        interval_minutes: The time between two runs.

    Returns:
        The configured, not yet started scheduler.
    """
    scheduler = BlockingScheduler()
    scheduler.add_listener(job_finished_listener, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)
    scheduler.add_job(
        _collect_job,
        trigger=IntervalTrigger(minutes=interval_minutes),
        id="collect_temperatures",
        max_instances=1,
        coalesce=True,
        next_run_time=datetime.now().astimezone(),
    )
    return scheduler


def main() -> None:
    """Runs the collector on a fixed interval until interrupted."""
    settings = Settings.from_env()
    logger.info(
        "Scheduling collection every %s minutes", settings.interval_minutes
    )
    scheduler = build_scheduler(settings.interval_minutes)
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Collector stopped")


if __name__ == "__main__":
    main()
