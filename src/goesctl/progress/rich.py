from typing import Any

from goesctl.progress.base import LoggingConfig, ProgressReporter


class RichProgressReporter(ProgressReporter):
    """Rich-based progress reporter, one bar per image, keyed by its compact timestamp."""

    def __init__(self):
        try:
            from rich.progress import BarColumn, DownloadColumn, Progress, TextColumn, TransferSpeedColumn
        except ImportError:
            raise ImportError(
                "rich is not installed, please ensure to install it manually or include the extra `goesctl[console]`"
            )

        self.progress = Progress(
            TextColumn("[bold green]{task.description}", justify="right"),
            TextColumn("[blue]{task.fields[item_id]}", justify="right"),
            BarColumn(bar_width=None),
            "[progress.percentage]{task.percentage:>3.1f}%",
            "•",
            DownloadColumn(),
            "•",
            TransferSpeedColumn(),
        )
        self._active = False
        # item id -> (rich task id, label)
        self._bars: dict[str, tuple[Any, str]] = {}

    @classmethod
    def logging_config(cls) -> LoggingConfig:
        from rich.logging import RichHandler

        # rich renders time and level on its own
        return LoggingConfig(format="%(message)s", handlers=[RichHandler(rich_tracebacks=True)])

    def _bar(self, item_id: str) -> Any | None:
        if not self._active or item_id not in self._bars:
            return None
        return self._bars[item_id][0]

    def start(self, total_items: int) -> None:
        self._bars = {}
        self.progress.start()
        self._active = True

    def add_task(self, item_id: str, description: str) -> Any:
        # total stays unknown until the response announces its length
        bar = self.progress.add_task(description=description, item_id=item_id, start=False, total=None)
        self._bars[item_id] = (bar, description)
        return bar

    def set_task_duration(self, item_id: str, total: int) -> None:
        if (bar := self._bar(item_id)) is not None:
            self.progress.update(bar, total=total)
            self.progress.start_task(bar)

    def update_progress(self, item_id: str, advance: int | None = None) -> None:
        if (bar := self._bar(item_id)) is not None:
            self.progress.update(bar, advance=advance)

    def end_task(self, item_id: str, success: bool, description: str | None = None) -> None:
        if (bar := self._bar(item_id)) is not None:
            label = description or self._bars[item_id][1]
            self.progress.update(bar, description=f"{'✓' if success else '✗'} {label}")

    def stop(self) -> None:
        if self._active:
            self.progress.stop()
            self._active = False
            self._bars.clear()
