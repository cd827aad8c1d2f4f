from datetime import UTC, date, datetime, timedelta
from typing import Any

from aws_lambda_powertools import Logger
from aws_lambda_powertools.utilities import parameters

from ..common.fitbit_client import FitbitClient
from ..common.models import RawSample

logger = Logger()


class FitbitSleepSource:
    """Pulls stage intervals from the Fitbit sleep log for the last few days."""

    def __init__(self, client: FitbitClient, refresh_secret_name: str) -> None:
        self.client = client
        self.refresh_secret_name = refresh_secret_name

    def _access_token(self) -> str:
        refresh_token = parameters.get_secret(self.refresh_secret_name)
        access_token, new_refresh_token = self.client.refresh_access_token(refresh_token)
        if new_refresh_token and new_refresh_token != refresh_token:
            parameters.set_secret(self.refresh_secret_name, new_refresh_token)
        return access_token

    def fetch_recent_sleep_samples(self, window_days: int, today: date | None = None) -> list[RawSample]:
        today = today or datetime.now(UTC).date()
        start = today - timedelta(days=max(1, int(window_days)) - 1)
        payload = self.client.get_sleep_by_date_range(
            start.strftime("%Y-%m-%d"), today.strftime("%Y-%m-%d"), self._access_token()
        )
        return samples_from_sleep_payload(payload)


def samples_from_sleep_payload(payload: dict[str, Any]) -> list[RawSample]:
    samples: list[RawSample] = []
    for log in payload.get("sleep") or []:
        if not isinstance(log, dict):
            logger.warning("invalid sleep log entry", value=repr(log))
            continue
        levels = log.get("levels")
        if not isinstance(levels, dict):
            levels = {}
        for d in levels.get("data") or []:
            if not isinstance(d, dict):
                logger.warning("invalid sleep level entry", value=repr(d))
                continue
            dt_raw = str(d.get("dateTime"))
            # Fitbit returns local wall-clock like 2020-02-20T23:21:30.000
            try:
                start = datetime.fromisoformat(dt_raw.replace("Z", ""))
                seconds = int(d.get("seconds", 0))
            except (TypeError, ValueError):
                logger.warning("invalid sleep level entry", value=dt_raw)
                continue
            samples.append(
                RawSample(
                    start=start,
                    end=start + timedelta(seconds=seconds),
                    stage_value=d.get("level"),
                    source="fitbit",
                )
            )
    return samples
