"""Time handling for the download pipeline.

Parses compact duration expressions, resolves the requested window against the
current time and enumerates the timestamps to fetch.

Example:
    >>> from datetime import datetime, timezone
    >>> now = datetime(2024, 11, 30, 10, 25, tzinfo=timezone.utc)
    >>> window = resolve_window(ago="2h30m", now=now)
    >>> [t.strftime("%H:%M") for t in TimestampSequence(window)][:3]
    ['07:50', '08:00', '08:10']
"""

import logging
from collections.abc import Iterator
from datetime import datetime, timedelta, timezone

from goesctl.errors import InvalidDurationError, WindowValidationError
from goesctl.model import STEP_MINUTES, ResolvedWindow, as_utc

log = logging.getLogger(__name__)

DEFAULT_STRIDE_MINUTES = 10
MAX_LOOKBACK = timedelta(days=5)
UNIT_MINUTES = {"m": 1, "h": 60, "d": 1440}


def parse_duration(text: str) -> timedelta:
    """Parse a compact duration expression such as "2d12h20m".

    Args:
        text (str): sequence of `<digits><unit>` groups, units being m, h or d.

    Raises:
        InvalidDurationError: when the input is empty, malformed, uses an unknown
            unit or does not amount to a multiple of 10 minutes.

    Returns:
        timedelta: the total duration.
    """
    if not text:
        raise InvalidDurationError("empty", "duration expression is empty")

    total_minutes = 0
    value = ""
    for char in text:
        if char.isascii() and char.isdigit():
            value += char
            continue
        if char not in UNIT_MINUTES:
            if char.isalpha():
                raise InvalidDurationError("unsupported unit", f"'{char}' in '{text}', use m, h or d")
            raise InvalidDurationError("malformed", f"unexpected character '{char}' in '{text}'")
        if not value:
            raise InvalidDurationError("malformed", f"unit '{char}' without a value in '{text}'")
        total_minutes += int(value) * UNIT_MINUTES[char]
        value = ""

    if value:
        raise InvalidDurationError("malformed", f"trailing value '{value}' without a unit in '{text}'")
    if total_minutes % STEP_MINUTES != 0:
        raise InvalidDurationError("not a multiple of 10", f"'{text}' is {total_minutes} minutes")
    try:
        return timedelta(minutes=total_minutes)
    except OverflowError as e:
        raise InvalidDurationError("malformed", f"'{text}' is too large to be a duration") from e


def align_to_step(value: datetime) -> datetime:
    """Round a timestamp down to the previous 10-minute boundary."""
    value = as_utc(value)
    return value.replace(minute=value.minute - value.minute % STEP_MINUTES, second=0, microsecond=0)


def parse_start(text: str) -> datetime:
    # fromisoformat only understands the trailing Z from 3.11 onwards
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    try:
        return as_utc(datetime.fromisoformat(text))
    except ValueError as e:
        raise WindowValidationError("bad start format", f"'{text}' is not an ISO 8601 timestamp ({e})") from e


def resolve_window(
    start: str | None = None,
    ago: str | None = None,
    duration: str | None = None,
    stride_minutes: int = DEFAULT_STRIDE_MINUTES,
    now: datetime | None = None,
    max_lookback: timedelta = MAX_LOOKBACK,
) -> ResolvedWindow:
    """Derive the aligned window to fetch from the user's time expressions.

    Args:
        start (str | None, optional): absolute start, ISO 8601. Defaults to None.
        ago (str | None, optional): start as an offset from now, e.g. "2h30m". Defaults to None.
        duration (str | None, optional): window length from start. Defaults to None (up to now).
        stride_minutes (int, optional): minutes between snapshots. Defaults to 10.
        now (datetime | None, optional): reference time. Defaults to None (current UTC time).
        max_lookback (timedelta, optional): how far back the start may be. Defaults to 5 days.

    Raises:
        WindowValidationError: when the window is ambiguous or violates a range constraint.
        InvalidDurationError: when `ago` or `duration` cannot be parsed.

    Returns:
        ResolvedWindow: aligned start and end plus stride.
    """
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)

    if (start is None) == (ago is None):
        raise WindowValidationError("ambiguous start", "specify either a start time or an offset, but not both")
    if start is not None:
        start_time = align_to_step(parse_start(start))
    else:
        offset = parse_duration(ago)  # type: ignore[arg-type]
        # checked before subtracting, large offsets fall outside the datetime range
        if offset > max_lookback:
            raise WindowValidationError(
                "range too large", f"offset '{ago}' is more than {max_lookback.days} days in the past"
            )
        start_time = align_to_step(now - offset)

    if now - start_time > max_lookback:
        raise WindowValidationError(
            "range too large",
            f"start ({start_time.isoformat()}) is more than {max_lookback.days} days in the past",
        )

    if duration is not None:
        span = parse_duration(duration)
        # start and span are both on the 10-minute grid, so this is exactly `end > now`
        if span > now - start_time:
            raise WindowValidationError(
                "end in future",
                f"start ({start_time.isoformat()}) plus '{duration}' is after the current time ({now.isoformat()})",
            )
        end_time = align_to_step(start_time + span)
    else:
        end_time = align_to_step(now)

    if end_time > now:
        raise WindowValidationError(
            "end in future",
            f"end ({end_time.isoformat()}) is after the current time ({now.isoformat()})",
        )
    if stride_minutes <= 0 or stride_minutes % STEP_MINUTES != 0:
        raise WindowValidationError("bad stride", f"stride ({stride_minutes}) must be a positive multiple of 10")
    if start_time > end_time:
        raise WindowValidationError(
            "start after end",
            f"start ({start_time.isoformat()}) is after end ({end_time.isoformat()})",
        )

    window = ResolvedWindow(start=start_time, end=end_time, stride=timedelta(minutes=stride_minutes))
    log.debug("Resolved window %s (now: %s)", window, now.isoformat())
    return window


class TimestampSequence:
    """Finite, restartable sequence of timestamps covering a window.

    Starts at `window.start` and advances by `window.stride` while the next
    value does not exceed `window.end`.
    """

    def __init__(self, window: ResolvedWindow):
        self.window = window

    def __iter__(self) -> Iterator[datetime]:
        start, end, stride = self.window.start, self.window.end, self.window.stride
        if stride <= timedelta(0):
            return
        current = start
        while current <= end:
            yield current
            current += stride

    def __len__(self) -> int:
        if self.window.start > self.window.end or self.window.stride <= timedelta(0):
            return 0
        return (self.window.end - self.window.start) // self.window.stride + 1
