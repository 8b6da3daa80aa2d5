"""Display and relative-time helpers for GTFS schedule times.

Schedule times arrive as ``HH:MM:SS`` strings in the agency's local time.
Trips that run past midnight keep counting hours (``24:15:00``, ``25:02:00``)
so the whole trip belongs to one service day.

Two comparisons are offered on purpose:

* :func:`minutes_until` / :func:`relative_label` compare time of day only
  (hour and minute), for coarse labels such as ``"in 5 minutes"``.
* :func:`is_past` compares a full date and time (today's date plus the
  parsed time, seconds included), for dimming departed stops.

Neither handles service-day rollover: a ``25:00:00`` time is invalid for
both. :func:`service_datetime` is the rollover-aware reading when the
service date is known.

Every function taking ``now`` accepts an aware or naive datetime. An aware
value is converted to *tz* before comparing, a naive one is read as wall
time in *tz*, and when it is omitted the current instant in *tz* is used.

Parsing is lenient about layout: surrounding whitespace is ignored and the
hour may have one digit (``"7:45:00"``). Minutes and seconds need two.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo

from pymetra._constants import DEFAULT_TIME_ZONE
from pymetra.exceptions import InvalidTimeError

INVALID_TIME = "Invalid Time"
NOW_LABEL = "Now"

_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2}):(\d{2})\s*$")


def _zone(tz: str | tzinfo) -> tzinfo:
    return ZoneInfo(tz) if isinstance(tz, str) else tz


def _now(now: datetime | None, tz: str | tzinfo) -> datetime:
    if now is not None:
        # Naive values are taken as already local to tz.
        return now.astimezone(_zone(tz)) if now.tzinfo is not None else now
    return datetime.now(_zone(tz))


def _split(text: str) -> tuple[int, int, int]:
    """Split ``HH:MM:SS`` into integers. Hours are not range-checked."""
    if not isinstance(text, str):
        raise InvalidTimeError(repr(text))
    match = _TIME_RE.match(text)
    if match is None:
        raise InvalidTimeError(text)
    hours, minutes, seconds = (int(group) for group in match.groups())
    if minutes >= 60 or seconds >= 60:
        raise InvalidTimeError(text)
    return hours, minutes, seconds


def parse_schedule_time(text: str) -> time:
    """Parse ``HH:MM:SS`` as a wall-clock time.

    Accepts ``" 7:45:00 "`` as well as ``"07:45:00"``. Raises
    :class:`InvalidTimeError` for malformed strings and for past-midnight
    hours (``>= 24``).
    """
    hours, minutes, seconds = _split(text)
    if hours >= 24:
        raise InvalidTimeError(text)
    return time(hours, minutes, seconds)


def format_display(text: str) -> str:
    """Render a schedule time on a 12-hour clock, e.g. ``"2:05 PM"``.

    Returns :data:`INVALID_TIME` instead of raising.
    """
    try:
        parsed = parse_schedule_time(text)
    except InvalidTimeError:
        return INVALID_TIME
    hour = parsed.hour % 12 or 12
    suffix = "AM" if parsed.hour < 12 else "PM"
    return f"{hour}:{parsed.minute:02d} {suffix}"


def minutes_until(
    text: str,
    now: datetime | None = None,
    *,
    tz: str | tzinfo = DEFAULT_TIME_ZONE,
) -> int | None:
    """Signed minutes from now until *text*, by time of day only.

    Seconds are ignored on both sides. Returns ``None`` when *text* does not
    parse.
    """
    try:
        parsed = parse_schedule_time(text)
    except InvalidTimeError:
        return None
    current = _now(now, tz)
    return (parsed.hour * 60 + parsed.minute) - (current.hour * 60 + current.minute)


def _plural(count: int) -> str:
    return "minute" if count == 1 else "minutes"


def relative_label(
    text: str,
    now: datetime | None = None,
    *,
    tz: str | tzinfo = DEFAULT_TIME_ZONE,
) -> str:
    """``"Now"``, ``"in 5 minutes"`` or ``"3 minutes ago"``."""
    minutes = minutes_until(text, now, tz=tz)
    if minutes is None:
        return INVALID_TIME
    if minutes == 0:
        return NOW_LABEL
    if minutes < 0:
        return f"{-minutes} {_plural(-minutes)} ago"
    return f"in {minutes} {_plural(minutes)}"


def is_past(
    text: str,
    now: datetime | None = None,
    *,
    tz: str | tzinfo = DEFAULT_TIME_ZONE,
) -> bool:
    """Whether *text*, placed on today's date, is before now.

    Fails open: unparsable times are never past.
    """
    try:
        parsed = parse_schedule_time(text)
    except InvalidTimeError:
        return False
    current = _now(now, tz)
    candidate = datetime.combine(current.date(), parsed, tzinfo=current.tzinfo)
    return candidate < current


def service_datetime(
    text: str,
    service_date: date,
    *,
    tz: str | tzinfo = DEFAULT_TIME_ZONE,
) -> datetime:
    """Aware datetime for a schedule time on *service_date*.

    Hours past 23 roll onto the following day(s), so ``"25:10:00"`` on
    2024-05-19 is 01:10 on 2024-05-20.
    """
    hours, minutes, seconds = _split(text)
    days, hours = divmod(hours, 24)
    return datetime.combine(
        service_date + timedelta(days=days),
        time(hours, minutes, seconds),
        tzinfo=_zone(tz),
    )
