from enum import StrEnum
from typing import Final


class SleepStage(StrEnum):
    IN_BED = "IN_BED"
    AWAKE = "AWAKE"
    ASLEEP_GENERIC = "ASLEEP_GENERIC"
    CORE = "CORE"
    DEEP = "DEEP"
    REM = "REM"


# Keys are upper-cased; lookups go through classify_stage
STAGE_ALIASES: Final[dict[str, SleepStage]] = {
    # HealthKit legacy numeric codes
    "0": SleepStage.IN_BED,
    "1": SleepStage.ASLEEP_GENERIC,
    "2": SleepStage.AWAKE,
    "3": SleepStage.CORE,
    "4": SleepStage.DEEP,
    "5": SleepStage.REM,
    # string names
    "IN_BED": SleepStage.IN_BED,
    "INBED": SleepStage.IN_BED,
    "AWAKE": SleepStage.AWAKE,
    "WAKE": SleepStage.AWAKE,
    "RESTLESS": SleepStage.AWAKE,
    "ASLEEP": SleepStage.ASLEEP_GENERIC,
    "ASLEEP_GENERIC": SleepStage.ASLEEP_GENERIC,
    "ASLEEP_UNSPECIFIED": SleepStage.ASLEEP_GENERIC,
    "UNSPECIFIED": SleepStage.ASLEEP_GENERIC,
    "CORE": SleepStage.CORE,
    "ASLEEP_CORE": SleepStage.CORE,
    "LIGHT": SleepStage.CORE,
    "DEEP": SleepStage.DEEP,
    "ASLEEP_DEEP": SleepStage.DEEP,
    "REM": SleepStage.REM,
    "ASLEEP_REM": SleepStage.REM,
    # HealthKit category identifiers
    "HKCATEGORYVALUESLEEPANALYSISINBED": SleepStage.IN_BED,
    "HKCATEGORYVALUESLEEPANALYSISAWAKE": SleepStage.AWAKE,
    "HKCATEGORYVALUESLEEPANALYSISASLEEP": SleepStage.ASLEEP_GENERIC,
    "HKCATEGORYVALUESLEEPANALYSISASLEEPUNSPECIFIED": SleepStage.ASLEEP_GENERIC,
    "HKCATEGORYVALUESLEEPANALYSISASLEEPCORE": SleepStage.CORE,
    "HKCATEGORYVALUESLEEPANALYSISASLEEPDEEP": SleepStage.DEEP,
    "HKCATEGORYVALUESLEEPANALYSISASLEEPREM": SleepStage.REM,
}

ASLEEP_STAGES: Final[frozenset[SleepStage]] = frozenset(
    {SleepStage.ASLEEP_GENERIC, SleepStage.CORE, SleepStage.DEEP, SleepStage.REM}
)


def classify_stage(value: object) -> SleepStage | None:
    """Map a device stage value onto a canonical stage; None when unrecognized."""
    if value is None or isinstance(value, bool):
        return None
    return STAGE_ALIASES.get(str(value).strip().upper())
