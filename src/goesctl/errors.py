"""Exception hierarchy shared by the download pipeline.

Fatal errors (invalid window, unusable destination) abort a run before any
network activity, while per-item errors (URL construction, transport, write)
only end up in the outcome of the affected timestamp.
"""


class GoesCtlError(Exception):
    """Base class for every error raised by goesctl.

    Args:
        reason (str): short, stable description of the failure category.
        detail (str | None, optional): human readable context. Defaults to None.
    """

    def __init__(self, reason: str, detail: str | None = None) -> None:
        self.reason = reason
        self.detail = detail
        message = f"{reason}: {detail}" if detail else reason
        super().__init__(message)


class InvalidDurationError(GoesCtlError, ValueError):
    """Raised when a compact duration expression cannot be parsed."""


class WindowValidationError(GoesCtlError, ValueError):
    """Raised when the requested time window is ambiguous or out of range."""


class DirectoryError(GoesCtlError):
    """Raised when the output directory cannot be allocated."""


class InvalidURLError(GoesCtlError, ValueError):
    """Raised when an image URL cannot be built for a timestamp."""


class TransportError(GoesCtlError):
    """Raised when a remote resource cannot be retrieved."""
