"""
Interval aggregation: raw sleep-stage samples -> one summary per night.

Minutes are collected into sets keyed by night date, so overlapping or
re-synced samples covering the same wall-clock minute are counted once.
Each minute also belongs to at most one specific stage.
A sample is attributed to a single night based on its end time only.
"""

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import tzinfo

from aws_lambda_powertools import Logger

from .common.models import AggregatedNight, RawSample
from .common.stages import ASLEEP_STAGES, SleepStage, classify_stage
from .common.timeutil import minute_index, night_date_for

logger = Logger()

# Nights with fewer distinct asleep minutes are treated as noise or naps
MIN_NIGHT_MINUTES = 15

# When samples disagree about a minute, the higher rank keeps it
STAGE_PRECEDENCE = {SleepStage.DEEP: 3, SleepStage.REM: 2, SleepStage.CORE: 1}


@dataclass
class _NightMinutes:
    asleep: set[int] = field(default_factory=set)
    staged: dict[int, SleepStage] = field(default_factory=dict)

    def claim(self, minutes: range, stage: SleepStage) -> None:
        self.asleep.update(minutes)
        rank = STAGE_PRECEDENCE.get(stage)
        if rank is None:
            return
        for minute in minutes:
            held = self.staged.get(minute)
            if held is None or STAGE_PRECEDENCE[held] < rank:
                self.staged[minute] = stage

    def count(self, stage: SleepStage) -> int:
        return sum(1 for held in self.staged.values() if held is stage)


def _positive_interval(sample: RawSample) -> bool:
    try:
        return sample.end > sample.start
    except TypeError:
        # naive and aware timestamps mixed in one sample
        return False


def aggregate(samples: Iterable[RawSample], tz: tzinfo | None = None) -> list[AggregatedNight]:
    """Aggregate raw samples into per-night summaries, most recent night first.

    Samples with an unknown stage, a missing stage, or a non-positive duration
    are skipped. `tz` is the zone used to decide which night a sample belongs to;
    naive timestamps are already taken to be local.
    """
    nights: dict[str, _NightMinutes] = defaultdict(_NightMinutes)
    skipped = 0

    for sample in samples:
        stage = classify_stage(sample.stage_value)
        if stage is None or not _positive_interval(sample):
            skipped += 1
            continue
        if stage not in ASLEEP_STAGES:
            continue

        # floor(start) up to floor(end), end exclusive
        minutes = range(minute_index(sample.start), minute_index(sample.end))

        nights[night_date_for(sample.end, tz)].claim(minutes, stage)

    if skipped:
        logger.debug("skipped malformed sleep samples", skipped=skipped)

    result = [
        AggregatedNight(
            date=date,
            total_minutes=len(m.asleep),
            rem_minutes=m.count(SleepStage.REM),
            deep_minutes=m.count(SleepStage.DEEP),
            core_minutes=m.count(SleepStage.CORE),
        )
        for date, m in nights.items()
        if len(m.asleep) >= MIN_NIGHT_MINUTES
    ]
    result.sort(key=lambda n: n.date, reverse=True)
    return result
