from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class RawSample(BaseModel):
    """One device-reported interval; validity is judged by the aggregator, not here."""

    start: datetime
    end: datetime
    stage_value: str | int | None = None
    source: str | None = None


class AggregatedNight(BaseModel):
    date: str
    total_minutes: int
    rem_minutes: int = 0
    deep_minutes: int = 0
    core_minutes: int = 0


class SleepUploadModel(BaseModel):
    date: str
    totalSleepMinutes: int = Field(gt=0)
    remSleepMinutes: int = Field(default=0, ge=0)
    deepSleepMinutes: int = Field(default=0, ge=0)

    @field_validator("date")
    @classmethod
    def _iso_date(cls, value: str) -> str:
        return date.fromisoformat(value).isoformat()

    @model_validator(mode="after")
    def _stages_fit_in_total(self) -> "SleepUploadModel":
        if self.remSleepMinutes + self.deepSleepMinutes > self.totalSleepMinutes:
            raise ValueError("remSleepMinutes + deepSleepMinutes must not exceed totalSleepMinutes")
        return self

    @classmethod
    def from_night(cls, night: AggregatedNight) -> "SleepUploadModel":
        return cls(
            date=night.date,
            totalSleepMinutes=night.total_minutes,
            remSleepMinutes=night.rem_minutes,
            deepSleepMinutes=night.deep_minutes,
        )


class StoredNightModel(BaseModel):
    userId: str
    sleepDate: str
    totalSleepMinutes: int
    remSleepMinutes: int = 0
    deepSleepMinutes: int = 0
    updatedAt: int | None = None


SyncStatus = Literal["synced", "partial", "no_data", "unavailable"]


class SyncReport(BaseModel):
    status: SyncStatus
    samples: int = 0
    nights_attempted: int = 0
    nights_uploaded: int = 0
    failed_dates: list[str] = Field(default_factory=list)
    message: str = ""
