"""Device data sources that return recent raw sleep samples."""

from typing import Protocol

from ..common.models import RawSample


class SleepSampleSource(Protocol):
    def fetch_recent_sleep_samples(self, window_days: int) -> list[RawSample]: ...
