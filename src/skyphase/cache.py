"""Per-(timezone, local day) memoization of solar events."""

import logging
from collections import OrderedDict
from collections.abc import Callable
from datetime import datetime
from threading import RLock
from typing import Generic, TypeVar

from skyphase.config import DEFAULT_CACHE_SIZE
from skyphase.ephemeris import Ephemeris
from skyphase.errors import LocationUnavailable
from skyphase.locations import CoordinateTable
from skyphase.models import EphemerisDay, SolarEvents
from skyphase.timebase import DayKey, day_key, local_midnight, resolve_timezone, to_local

logger = logging.getLogger(__name__)

V = TypeVar("V")

# Used whole whenever a timezone has no coordinates, so the ordering always holds.
FALLBACK_EVENTS = SolarEvents(
    sunrise=6.0,
    sunset=18.0,
    civil_dawn=5.5,
    civil_dusk=18.5,
    nautical_dawn=5.0,
    nautical_dusk=19.0,
    astronomical_dawn=4.5,
    astronomical_dusk=19.5,
    solar_noon=12.0,
    source="fallback",
)


class DayCache(Generic[V]):
    """Thread-safe bounded map keyed by (timezone, year, month, day).

    Oldest-inserted entries are evicted once `capacity` is exceeded. Values
    are built outside the lock, so two threads missing the same key may both
    build it; the first one stored wins and both callers get that value.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_SIZE):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self._capacity = capacity
        self._entries: OrderedDict[DayKey, V] = OrderedDict()
        self._lock = RLock()
        self._hits = 0
        self._misses = 0

    def get(self, key: DayKey) -> V | None:
        with self._lock:
            value = self._entries.get(key)
            if value is None:
                self._misses += 1
            else:
                self._hits += 1
            return value

    def put(self, key: DayKey, value: V) -> V:
        """Store `value` unless the key is already present; return the stored value."""
        with self._lock:
            existing = self._entries.get(key)
            if existing is not None:
                return existing
            self._entries[key] = value
            while len(self._entries) > self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted %s", evicted)
            return value

    def get_or_create(self, key: DayKey, factory: Callable[[], V]) -> V:
        value = self.get(key)
        if value is not None:
            return value
        return self.put(key, factory())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self._capacity,
                "hits": self._hits,
                "misses": self._misses,
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries


def _first(*values: float | None) -> float:
    for value in values:
        if value is not None:
            return value
    raise ValueError("no defined value")


def complete_events(raw: EphemerisDay) -> SolarEvents:
    """Fill undefined (polar) events so every field has a value.

    Missing sunrise/sunset: polar day spans 0..24, polar night collapses both
    onto solar noon; a day where the sun only sets (or only rises) opens at
    0.0 (or closes at 24.0). Missing twilight events collapse onto their
    neighbour toward sunrise/sunset, which never inverts the ordering.
    """
    sunrise, sunset = raw.sunrise, raw.sunset
    if sunrise is None and sunset is None:
        if raw.polar == "day":
            sunrise, sunset = 0.0, 24.0
        else:
            sunrise = sunset = _first(raw.solar_noon, 12.0)
    elif sunrise is None:
        sunrise = 0.0
    elif sunset is None:
        sunset = 24.0

    if raw.solar_noon is not None:
        solar_noon = raw.solar_noon
    elif sunset > sunrise:
        solar_noon = (sunrise + sunset) / 2.0
    else:
        solar_noon = 12.0

    civil_dawn = _first(raw.civil_dawn, sunrise)
    nautical_dawn = _first(raw.nautical_dawn, civil_dawn)
    astronomical_dawn = _first(raw.astronomical_dawn, nautical_dawn)
    civil_dusk = _first(raw.civil_dusk, sunset)
    nautical_dusk = _first(raw.nautical_dusk, civil_dusk)
    astronomical_dusk = _first(raw.astronomical_dusk, nautical_dusk)

    complete = None not in (
        raw.sunrise,
        raw.sunset,
        raw.solar_noon,
        raw.civil_dawn,
        raw.civil_dusk,
        raw.nautical_dawn,
        raw.nautical_dusk,
        raw.astronomical_dawn,
        raw.astronomical_dusk,
    )
    return SolarEvents(
        sunrise=sunrise,
        sunset=sunset,
        civil_dawn=civil_dawn,
        civil_dusk=civil_dusk,
        nautical_dawn=nautical_dawn,
        nautical_dusk=nautical_dusk,
        astronomical_dawn=astronomical_dawn,
        astronomical_dusk=astronomical_dusk,
        solar_noon=solar_noon,
        source="ephemeris" if complete else "polar",
    )


class SolarEventCache:
    """Solar events per (timezone, local calendar day), computed at most once while cached."""

    def __init__(
        self,
        ephemeris: Ephemeris,
        coordinates: CoordinateTable,
        capacity: int = DEFAULT_CACHE_SIZE,
    ):
        self._ephemeris = ephemeris
        self._coordinates = coordinates
        self._days: DayCache[SolarEvents] = DayCache(capacity)

    def get_or_compute(self, timezone: str, instant: datetime) -> SolarEvents:
        """Return the solar events of the local day containing `instant` in `timezone`.

        Args:
            timezone: IANA timezone identifier ("Asia/Tokyo").
            instant: Aware datetime (naive is taken as UTC).

        Returns:
            SolarEvents for that day; FALLBACK_EVENTS when the timezone has no coordinates.
        """
        tz = resolve_timezone(timezone)
        local = to_local(instant, tz)
        key = day_key(timezone, local)
        return self._days.get_or_create(key, lambda: self._compute(timezone, local))

    def _compute(self, timezone: str, local: datetime) -> SolarEvents:
        try:
            location = self._coordinates.require_coordinates(timezone)
        except LocationUnavailable as e:
            logger.debug("%s; using fixed fallback events", e)
            return FALLBACK_EVENTS

        tz = resolve_timezone(timezone)
        logger.debug("Computing solar events for %s on %s", timezone, local.date())
        raw = self._ephemeris.day(location, tz, local_midnight(local, tz))
        return complete_events(raw)

    def stats(self) -> dict[str, int]:
        return self._days.stats()

    def clear(self) -> None:
        self._days.clear()

    def __len__(self) -> int:
        return len(self._days)
