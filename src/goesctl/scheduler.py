import logging
import threading
import uuid
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from datetime import datetime
from pathlib import Path
from typing import Callable

from goesctl.errors import InvalidURLError, TransportError
from goesctl.model import Failed, FetchOutcome, FetchTask, ProgressEventType, Saved
from goesctl.progress.events import emit_event

log = logging.getLogger(__name__)

URLBuilder = Callable[[datetime], str]
FetchFn = Callable[[str, str], bytes]
WriteFn = Callable[[Path, bytes], None]
TaskUnit = Callable[[FetchTask], FetchOutcome]


def fetch_and_save(task: FetchTask, build_url: URLBuilder, fetch: FetchFn, write: WriteFn) -> FetchOutcome:
    """Fetch the image for a single timestamp and store it in the task's directory.

    Args:
        task (FetchTask): timestamp and destination to process.
        build_url (URLBuilder): returns the image URL for a timestamp.
        fetch (FetchFn): retrieves the bytes at a URL, given the URL and the item id.
        write (WriteFn): persists bytes at a path.

    Returns:
        FetchOutcome: `Saved` with the image path, or `Failed` with the reason.
    """
    try:
        url = build_url(task.timestamp)
    except InvalidURLError as e:
        return Failed(timestamp=task.timestamp, reason=f"url construction failed: {e}")

    try:
        data = fetch(url, task.item_id)
    except TransportError as e:
        return Failed(timestamp=task.timestamp, reason=f"fetch failed: {e}")

    path = task.image_path
    try:
        write(path, data)
    except OSError as e:
        return Failed(timestamp=task.timestamp, reason=f"write failed: {e}")
    return Saved(timestamp=task.timestamp, path=path)


class FetchScheduler:
    """Runs one unit per task on a thread pool, with at most `max_concurrency` in flight.

    The admission gate is a counting semaphore: the dispatcher takes a slot before
    submitting each task, the slot is given back when the task's future is done,
    whatever the way it ended (result, exception or cancellation).
    """

    def __init__(self, max_concurrency: int, gate: threading.Semaphore | None = None):
        if max_concurrency < 1:
            raise ValueError(f"Invalid concurrency: {max_concurrency}, at least one worker is required")
        self.max_concurrency = max_concurrency
        self.gate = gate or threading.BoundedSemaphore(max_concurrency)

    def _release(self, _: Future) -> None:
        self.gate.release()

    def _guarded(self, unit: TaskUnit, task: FetchTask) -> FetchOutcome:
        try:
            emit_event(ProgressEventType.TASK_CREATED, task_id=task.item_id, description="download")
            outcome = unit(task)
        except Exception as e:
            log.warning("Unexpected error processing %s: %s - %s", task.item_id, type(e).__name__, e)
            outcome = Failed(timestamp=task.timestamp, reason=f"unexpected error: {e}")
        if isinstance(outcome, Failed):
            log.warning("Image %s not saved: %s", task.item_id, outcome.reason)
        else:
            log.debug("Image %s saved to %s", task.item_id, outcome.path)
        emit_event(
            ProgressEventType.TASK_COMPLETED,
            task_id=task.item_id,
            success=outcome.success,
            description=None if outcome.success else outcome.reason,
        )
        return outcome

    def run(self, tasks: Iterable[FetchTask], unit: TaskUnit) -> list[FetchOutcome]:
        """Process every task and wait for all of them.

        Args:
            tasks (Iterable[FetchTask]): tasks, dispatched in iteration order.
            unit (TaskUnit): callable turning one task into its outcome.

        Returns:
            list[FetchOutcome]: one outcome per task, sorted by timestamp.
        """
        tasks = list(tasks)
        outcomes: list[FetchOutcome] = []
        batch_id = str(uuid.uuid4())
        emit_event(ProgressEventType.BATCH_STARTED, task_id=batch_id, total_items=len(tasks), description="download")

        executor = None
        try:
            with ThreadPoolExecutor(max_workers=self.max_concurrency, thread_name_prefix="goesctl") as executor:
                future2task: dict[Future, FetchTask] = {}
                for task in tasks:
                    self.gate.acquire()
                    try:
                        future = executor.submit(self._guarded, unit, task)
                    except BaseException:
                        self.gate.release()
                        raise
                    future.add_done_callback(self._release)
                    future2task[future] = task
                for future in as_completed(future2task):
                    outcomes.append(future.result())
        except KeyboardInterrupt:
            log.info("Interrupted, cleaning up...")
            if executor:
                executor.shutdown(wait=False, cancel_futures=True)
            raise
        finally:
            failures = sum(1 for o in outcomes if not o.success)
            emit_event(
                ProgressEventType.BATCH_COMPLETED,
                task_id=batch_id,
                success_count=len(outcomes) - failures,
                failure_count=failures,
            )

        return sorted(outcomes, key=lambda o: o.timestamp)
