"""Single entry point for interpreting date fields.

Records reach the engine with dates as ISO strings, native ``date`` /
``datetime`` values, nulls, or garbage. Everything that needs a date asks
:func:`normalize` for a verdict instead of parsing on its own.
"""

import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, NamedTuple, Optional

INVALID_DATE = "Invalid date"

_ISO_PATTERN = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[T ](?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:\.(?P<fraction>\d{1,6}))?)?"
    r"(?P<tz>Z|[+-]\d{2}:?\d{2})?)?$"
)


class DateVerdict(NamedTuple):
    instant: Optional[datetime]
    valid: bool

    @property
    def calendar_date(self) -> Optional[date]:
        return self.instant.date() if self.valid else None


_NO_DATE = DateVerdict(None, False)


def _parse_offset(raw: str) -> timezone:
    if raw == "Z":
        return timezone.utc
    sign = -1 if raw[0] == "-" else 1
    digits = raw[1:].replace(":", "")
    hours, minutes = int(digits[:2]), int(digits[2:])
    if hours > 23 or minutes > 59:
        raise ValueError(f"offset out of range: {raw}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _parse_iso(text: str) -> DateVerdict:
    match = _ISO_PATTERN.match(text)
    if not match:
        return _NO_DATE

    parts = match.groupdict()
    fraction = (parts["fraction"] or "").ljust(6, "0")
    try:
        instant = datetime(
            int(parts["year"]),
            int(parts["month"]),
            int(parts["day"]),
            int(parts["hour"] or 0),
            int(parts["minute"] or 0),
            int(parts["second"] or 0),
            int(fraction),
            tzinfo=_parse_offset(parts["tz"]) if parts["tz"] else None,
        )
    except ValueError:
        # 2024-02-30, 25:00 and friends
        return _NO_DATE
    return DateVerdict(instant, True)


def normalize(value: Any) -> DateVerdict:
    """Resolve a raw date field into ``(instant, valid)``.

    - ``None`` and blank strings have no date.
    - Strings must be ISO-8601: ``YYYY-MM-DD`` or a full datetime with an
      optional ``Z`` / ``+HH:MM`` offset. Anything else, including dates that
      do not exist on the calendar, is invalid.
    - ``datetime`` values are valid as-is and ``date`` values are promoted to
      midnight. NaN-like sentinels (``float('nan')``, ``pandas.NaT``) are
      invalid.
    - Any other type is invalid.

    Never raises.
    """
    if value is None:
        return _NO_DATE

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return _NO_DATE
        return _parse_iso(text)

    # NaT and NaN are the only values that compare unequal to themselves
    try:
        if value != value:
            return _NO_DATE
    except Exception:
        return _NO_DATE

    if isinstance(value, datetime):
        return DateVerdict(value, True)
    if isinstance(value, date):
        return DateVerdict(datetime.combine(value, time.min), True)
    return _NO_DATE


def calendar_date(value: Any) -> Optional[date]:
    """Calendar date of ``value`` or ``None`` when it does not normalize."""
    return normalize(value).calendar_date


def format_date(value: Any, sentinel: str = INVALID_DATE) -> str:
    """Render ``value`` as ``YYYY-MM-DD``, or ``sentinel`` when invalid."""
    day = calendar_date(value)
    return day.isoformat() if day is not None else sentinel
