from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

# Constants
STEP_MINUTES = 10
COMPACT_TIME_FORMAT = "%Y%m%dT%H%M%S"
IMAGE_EXTENSION = "jpg"


def as_utc(value: datetime) -> datetime:
    # naive datetimes are assumed to be UTC already
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def compact_utc(value: datetime) -> str:
    return as_utc(value).strftime(COMPACT_TIME_FORMAT)


def is_aligned(value: datetime) -> bool:
    return value.minute % STEP_MINUTES == 0 and value.second == 0 and value.microsecond == 0


TimePoint = Annotated[datetime, AfterValidator(as_utc)]


class ResolvedWindow(BaseModel):
    """Aligned time interval to fetch, plus the stride between snapshots."""

    model_config = ConfigDict(frozen=True)

    start: TimePoint
    end: TimePoint
    stride: timedelta

    @model_validator(mode="after")
    def validate_window(self):
        if self.start > self.end:
            raise ValueError(f"Invalid window: start ({self.start}) must not be after end ({self.end})")
        if not (is_aligned(self.start) and is_aligned(self.end)):
            raise ValueError(f"Invalid window: start and end must be aligned to {STEP_MINUTES} minutes")
        stride_minutes, remainder = divmod(self.stride, timedelta(minutes=1))
        if remainder or stride_minutes <= 0 or stride_minutes % STEP_MINUTES != 0:
            raise ValueError(f"Invalid window: stride ({self.stride}) must be a positive multiple of {STEP_MINUTES}m")
        return self

    @property
    def stride_minutes(self) -> int:
        return self.stride // timedelta(minutes=1)

    def __str__(self) -> str:
        return f"{self.start.isoformat()} -> {self.end.isoformat()} every {self.stride_minutes}m"


class FetchTask(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: TimePoint
    destination_dir: Path

    @property
    def item_id(self) -> str:
        return compact_utc(self.timestamp)

    @property
    def image_path(self) -> Path:
        return self.destination_dir / f"{self.item_id}.{IMAGE_EXTENSION}"


class Saved(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["saved"] = "saved"
    timestamp: TimePoint
    path: Path

    @property
    def success(self) -> bool:
        return True


class Failed(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["failed"] = "failed"
    timestamp: TimePoint
    reason: str

    @property
    def success(self) -> bool:
        return False


FetchOutcome = Annotated[Saved | Failed, Field(discriminator="status")]


class BatchReport(BaseModel):
    window: ResolvedWindow
    directory: Path
    outcomes: list[FetchOutcome] = Field(default_factory=list)

    @property
    def saved(self) -> list[Saved]:
        return [o for o in self.outcomes if isinstance(o, Saved)]

    @property
    def failed(self) -> list[Failed]:
        return [o for o in self.outcomes if isinstance(o, Failed)]


class ProgressEventType(Enum):
    TASK_CREATED = "task_created"
    TASK_DURATION = "task_duration"
    TASK_PROGRESS = "task_progress"
    TASK_COMPLETED = "task_completed"
    BATCH_STARTED = "batch_started"
    BATCH_COMPLETED = "batch_completed"


class ProgressEvent(BaseModel):
    type: ProgressEventType
    task_id: str
    data: dict[str, Any]
