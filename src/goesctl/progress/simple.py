import logging
import threading

from goesctl.progress.base import ProgressReporter


class SimpleProgressReporter(ProgressReporter):
    """Simple text-based progress reporter using logging."""

    def __init__(self):
        self.log = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self.total_items = 0
        self.completed = 0
        self.failed = 0

    def start(self, total_items: int) -> None:
        self.total_items = total_items
        self.completed = 0
        self.failed = 0
        self.log.info("Tracking progress for %d images", total_items)

    def add_task(self, item_id: str, description: str) -> dict:
        self.log.debug("Started %s - %s", description, item_id)
        return {"item_id": item_id, "description": description}

    def set_task_duration(self, item_id: str, total: int) -> None:
        # byte counts are not tracked here
        pass

    def update_progress(self, item_id: str, advance: int | None = None) -> None:
        pass

    def end_task(self, item_id: str, success: bool, description: str | None = None) -> None:
        # tasks end concurrently on worker threads
        with self._lock:
            if success:
                self.completed += 1
            else:
                self.failed += 1
            done = self.completed + self.failed
        status = f"✓ {description or ''}" if success else f"✗ {description or ''}"
        self.log.info("%s - %s (%d/%d, %d remaining)", status, item_id, done, self.total_items, self.total_items - done)

    def stop(self) -> None:
        self.log.info(
            "Tracking completed: %d successful, %d failed, %d total",
            self.completed,
            self.failed,
            self.total_items,
        )
