import json
from datetime import UTC, datetime
from typing import Any

from aws_lambda_powertools import Logger

from ..common.errors import InputUnavailableError
from ..common.models import RawSample
from ..common.timeutil import recent_window

logger = Logger()


def _parse_timestamp(raw: Any) -> datetime:
    return datetime.fromisoformat(str(raw).replace("Z", "+00:00"))


def _is_recent(end: datetime, cutoff: datetime) -> bool:
    aware_end = end if end.tzinfo is not None else end.replace(tzinfo=UTC)
    return aware_end >= cutoff


class ExportFileSource:
    """Reads a HealthKit-style JSON export of sleep samples.

    Accepts either a bare list or an object with a 'samples' list; each entry
    carries startDate, endDate and value.
    """

    def __init__(self, path: str) -> None:
        self.path = path

    def _load(self) -> list[Any]:
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as exc:
            raise InputUnavailableError(
                f"Sleep export not found: {self.path}", action="Export your sleep data and check EXPORT_PATH."
            ) from exc
        except PermissionError as exc:
            raise InputUnavailableError(f"Sleep export not readable: {self.path}") from exc
        except json.JSONDecodeError as exc:
            raise InputUnavailableError(
                f"Invalid JSON in sleep export: {exc}", action="Re-export your sleep data."
            ) from exc

        if isinstance(data, dict):
            data = data.get("samples", [])
        if not isinstance(data, list):
            raise InputUnavailableError(f"'samples' must be a list, got {type(data).__name__}")
        return data

    def fetch_recent_sleep_samples(self, window_days: int, now: datetime | None = None) -> list[RawSample]:
        cutoff, _ = recent_window(window_days, now)
        samples: list[RawSample] = []
        skipped: list[tuple[int, str]] = []
        for idx, entry in enumerate(self._load()):
            try:
                sample = RawSample(
                    start=_parse_timestamp(entry["startDate"]),
                    end=_parse_timestamp(entry["endDate"]),
                    stage_value=entry.get("value"),
                    source=entry.get("sourceName"),
                )
            except (KeyError, TypeError, ValueError) as e:
                skipped.append((idx, str(e)))
                continue
            if _is_recent(sample.end, cutoff):
                samples.append(sample)

        if skipped:
            logger.warning("skipped invalid export entries", skipped=len(skipped), first_error=skipped[0][1])
        return samples
