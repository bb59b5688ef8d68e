"""Local time decomposition. Every function takes its timezone explicitly."""

from datetime import datetime, timedelta, tzinfo

from pytz import timezone, utc

DayKey = tuple[str, int, int, int]

SECONDS_PER_DAY = 24 * 3600


def resolve_timezone(identifier: str) -> tzinfo:
    """Return the pytz zone for an IANA identifier. Unknown names raise UnknownTimeZoneError."""
    return timezone(identifier)


def to_local(instant: datetime, tz: tzinfo) -> datetime:
    """Convert an instant to local wall time in `tz`. Naive instants are taken as UTC."""
    if instant.tzinfo is None:
        instant = utc.localize(instant)
    return instant.astimezone(tz)


def fractional_hour(local_dt: datetime) -> float:
    """Hours since local midnight on the wall clock, in [0, 24)."""
    return (
        local_dt.hour
        + local_dt.minute / 60.0
        + local_dt.second / 3600.0
        + local_dt.microsecond / 3_600_000_000.0
    )


def day_key(identifier: str, local_dt: datetime) -> DayKey:
    return (identifier, local_dt.year, local_dt.month, local_dt.day)


def local_midnight(local_dt: datetime, tz: tzinfo) -> datetime:
    """First instant of the local day containing `local_dt`.

    Zones whose DST change happens at midnight have no 00:00; pytz's
    non-raising localize resolves those to the first valid wall time.
    """
    naive = datetime(local_dt.year, local_dt.month, local_dt.day)
    localize = getattr(tz, "localize", None)
    if localize is None:
        return naive.replace(tzinfo=tz)
    return tz.normalize(localize(naive))  # type: ignore[attr-defined]


def next_local_midnight(local_dt: datetime, tz: tzinfo) -> datetime:
    # +26h always lands on the next calendar day, even across a DST change
    return local_midnight(local_midnight(local_dt, tz) + timedelta(hours=26), tz)


def hours_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / 3600.0
