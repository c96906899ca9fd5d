"""Progress reporting for image downloads.

This package provides progress reporters for tracking a download batch:
- EmptyProgressReporter: No-op reporter for silent operation
- SimpleProgressReporter: Basic log-based progress output
- RichProgressReporter: Terminal progress bars (requires `rich`)

Reporters consume the events published on the progress event bus; use
`create_reporter()` to build one and attach it to the bus.
"""

from typing import Any

from goesctl.progress.base import EmptyProgressReporter, LoggingConfig, ProgressReporter
from goesctl.progress.events import get_bus
from goesctl.progress.rich import RichProgressReporter
from goesctl.progress.simple import SimpleProgressReporter
from goesctl.registry import Registry

registry = Registry[ProgressReporter](name="reporter")
registry.register("empty", EmptyProgressReporter)
registry.register("simple", SimpleProgressReporter)
registry.register("rich", RichProgressReporter)

__all__ = [
    "ProgressReporter",
    "EmptyProgressReporter",
    "SimpleProgressReporter",
    "RichProgressReporter",
    "LoggingConfig",
    "create_reporter",
    "registry",
]


def create_reporter(reporter_name: str, subscribe: bool = True, **kwargs: Any) -> ProgressReporter:
    """Create a reporter from the registry, optionally subscribing it to the event bus.

    Args:
        reporter_name (str): registered name, one of `registry.list()`.
        subscribe (bool, optional): attach the reporter to the global bus. Defaults to True.

    Returns:
        ProgressReporter: the new reporter instance.
    """
    reporter = registry.create(reporter_name, **kwargs)
    if subscribe:
        get_bus().subscribe(reporter.handle)
    return reporter
