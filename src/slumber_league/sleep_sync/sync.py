from collections.abc import Callable
from datetime import tzinfo
from typing import Any

from aws_lambda_powertools import Logger

from ..aggregator import aggregate
from ..common.errors import InputUnavailableError
from ..common.models import AggregatedNight, SyncReport
from ..sources import SleepSampleSource

logger = Logger()

Uploader = Callable[[AggregatedNight], Any]


def run_sync(
    source: SleepSampleSource,
    uploader: Uploader,
    window_days: int = 7,
    tz: tzinfo | None = None,
) -> SyncReport:
    """Fetch recent samples, aggregate them per night and upload each night.

    An unavailable source and an empty result are reported, not raised. A failed
    upload only affects its own night.
    """
    try:
        samples = source.fetch_recent_sleep_samples(window_days)
    except InputUnavailableError as exc:
        logger.warning("sleep source unavailable", error=str(exc))
        return SyncReport(status="unavailable", message=f"{exc} {exc.action}")

    nights = aggregate(samples, tz=tz)
    if not nights:
        logger.info("no qualifying nights", samples=len(samples))
        return SyncReport(status="no_data", samples=len(samples), message="No sleep data for the last few days.")

    uploaded = 0
    failed: list[str] = []
    for night in nights:
        try:
            uploader(night)
        except Exception:
            logger.exception("night upload failed", date=night.date)
            failed.append(night.date)
            continue
        uploaded += 1

    report = SyncReport(
        status="partial" if failed else "synced",
        samples=len(samples),
        nights_attempted=len(nights),
        nights_uploaded=uploaded,
        failed_dates=failed,
        message=f"Uploaded {uploaded} of {len(nights)} nights.",
    )
    logger.info("sleep_sync_complete", uploaded=uploaded, attempted=len(nights), failed=failed)
    return report
