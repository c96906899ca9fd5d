"""End-to-end download of a window of GOES images.

The window is resolved and the output directory allocated before any request
is sent: failures at these stages abort the run. Afterwards every timestamp is
fetched independently, and its failure only shows up in its own outcome.
"""

import logging
from datetime import datetime
from functools import partial
from pathlib import Path

from pydantic import BaseModel, Field

from goesctl.downloaders import Downloader
from goesctl.model import BatchReport, FetchTask
from goesctl.scheduler import FetchScheduler, WriteFn, fetch_and_save
from goesctl.sources import GOESImagery
from goesctl.storage import allocate_output_dir, write_file
from goesctl.timing import DEFAULT_STRIDE_MINUTES, TimestampSequence, resolve_window

log = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 8


class PipelineConfig(BaseModel):
    start: str | None = None
    ago: str | None = None
    duration: str | None = None
    stride_minutes: int = DEFAULT_STRIDE_MINUTES
    root: Path = Path(".")
    max_concurrency: int = Field(default=DEFAULT_MAX_CONCURRENCY, ge=1)


def run_pipeline(
    config: PipelineConfig,
    *,
    imagery: GOESImagery,
    downloader: Downloader,
    now: datetime | None = None,
    writer: WriteFn = write_file,
) -> BatchReport:
    """Download every image of the configured window into a fresh directory.

    Args:
        config (PipelineConfig): time expressions, stride, output root and concurrency.
        imagery (GOESImagery): builds the URL of each image.
        downloader (Downloader): retrieves the images, initialized and closed here.
        now (datetime | None, optional): reference time. Defaults to None (current UTC time).
        writer (WriteFn, optional): persists each image. Defaults to `write_file`.

    Raises:
        WindowValidationError: if the window is invalid.
        InvalidDurationError: if a duration expression is malformed.
        DirectoryError: if the output directory cannot be created.

    Returns:
        BatchReport: window, directory and one outcome per timestamp.
    """
    window = resolve_window(
        start=config.start,
        ago=config.ago,
        duration=config.duration,
        stride_minutes=config.stride_minutes,
        now=now,
    )
    directory = allocate_output_dir(config.root, window)
    timestamps = TimestampSequence(window)
    log.info(
        "Fetching %d images from %s to %s with a stride of %d minutes (%s)",
        len(timestamps),
        window.start.isoformat(),
        window.end.isoformat(),
        window.stride_minutes,
        imagery,
    )

    tasks = (FetchTask(timestamp=t, destination_dir=directory) for t in timestamps)
    unit = partial(fetch_and_save, build_url=imagery.build_url, fetch=downloader.fetch, write=writer)
    scheduler = FetchScheduler(max_concurrency=config.max_concurrency)

    downloader.init()
    try:
        outcomes = scheduler.run(tasks, unit)
    finally:
        downloader.close()

    report = BatchReport(window=window, directory=directory, outcomes=outcomes)
    log.info("Completed: %d saved, %d failed", len(report.saved), len(report.failed))
    return report
