import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from goesctl.model import ProgressEvent, ProgressEventType
from goesctl.progress.events import get_bus

DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


@dataclass
class LoggingConfig:
    format: str = DEFAULT_LOG_FORMAT
    handlers: list[logging.Handler] | None = field(default=None)


class ProgressReporter(ABC):
    """Receives progress events from the bus and renders them."""

    @classmethod
    def logging_config(cls) -> LoggingConfig:
        return LoggingConfig()

    @abstractmethod
    def start(self, total_items: int) -> None: ...

    @abstractmethod
    def add_task(self, item_id: str, description: str) -> Any: ...

    @abstractmethod
    def set_task_duration(self, item_id: str, total: int) -> None: ...

    @abstractmethod
    def update_progress(self, item_id: str, advance: int | None = None) -> None: ...

    @abstractmethod
    def end_task(self, item_id: str, success: bool, description: str | None = None) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    def handle(self, event: ProgressEvent) -> None:
        """Dispatch a bus event to the matching reporter hook.

        Args:
            event (ProgressEvent): event emitted by the scheduler or a downloader.
        """
        data = event.data
        match event.type:
            case ProgressEventType.BATCH_STARTED:
                self.start(total_items=data.get("total_items", 0))
            case ProgressEventType.TASK_CREATED:
                self.add_task(event.task_id, description=data.get("description", ""))
            case ProgressEventType.TASK_DURATION:
                self.set_task_duration(event.task_id, total=data["duration"])
            case ProgressEventType.TASK_PROGRESS:
                self.update_progress(event.task_id, advance=data.get("advance"))
            case ProgressEventType.TASK_COMPLETED:
                self.end_task(event.task_id, success=data.get("success", False), description=data.get("description"))
            case ProgressEventType.BATCH_COMPLETED:
                self.stop()

    def cleanup(self) -> None:
        """Detach the reporter from the event bus."""
        get_bus().unsubscribe(self.handle)


class EmptyProgressReporter(ProgressReporter):
    """
    Empty reporter to avoid continuos checks against None
    """

    def start(self, total_items: int) -> None:
        pass

    def add_task(self, item_id: str, description: str) -> Any:
        pass

    def set_task_duration(self, item_id: str, total: int) -> None:
        pass

    def update_progress(self, item_id: str, advance: int | None = None) -> None:
        pass

    def end_task(self, item_id: str, success: bool, description: str | None = None) -> None:
        pass

    def stop(self) -> None:
        pass
