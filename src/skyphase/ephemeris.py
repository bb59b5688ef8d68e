"""Ephemeris layer: solar events and sun direction from skyfield."""

import logging
from datetime import datetime, tzinfo
from threading import RLock
from typing import Protocol

from pytz import utc
from skyfield import almanac
from skyfield.api import Loader, wgs84

from skyphase.config import Settings, load_settings
from skyphase.models import EphemerisDay, Location
from skyphase.timebase import fractional_hour, next_local_midnight, to_local

logger = logging.getLogger(__name__)

# dark_twilight_day levels: 0 night, 1 astronomical, 2 nautical, 3 civil, 4 day.
# A rise into level n is a dawn event; a fall into level n is a dusk event.
_DAWN_BY_LEVEL: dict[int, str] = {
    1: "astronomical_dawn",
    2: "nautical_dawn",
    3: "civil_dawn",
    4: "sunrise",
}
_DUSK_BY_LEVEL: dict[int, str] = {
    3: "sunset",
    2: "civil_dusk",
    1: "nautical_dusk",
    0: "astronomical_dusk",
}


def events_from_levels(
    start_level: int,
    hours: list[float],
    levels: list[int],
) -> tuple[dict[str, float], str | None]:
    """Name the twilight transitions of one local day.

    Args:
        start_level: dark_twilight_day level at local midnight.
        hours: Local fractional hour of each transition, in order.
        levels: Level entered at each transition.

    Returns:
        (events, polar): the first occurrence of each named event, and
        "day" / "night" when the sun neither rose nor set and stayed above
        / below the horizon all day, else None.
    """
    previous = start_level
    seen_levels = [start_level]
    found: dict[str, float] = {}
    for hour, level in zip(hours, levels):
        # Levels normally step by one; fill in any that were skipped
        if level > previous:
            names = [_DAWN_BY_LEVEL[n] for n in range(previous + 1, level + 1)]
        else:
            names = [_DUSK_BY_LEVEL[n] for n in range(previous - 1, level - 1, -1)]
        for name in names:
            found.setdefault(name, hour)
        seen_levels.append(level)
        previous = level

    polar = None
    if "sunrise" not in found and "sunset" not in found:
        if min(seen_levels) == 4:
            polar = "day"
        elif max(seen_levels) < 4:
            polar = "night"
    return found, polar


def first_upper_transit(hours: list[float], kinds: list[int]) -> float | None:
    """Hour of the first upper meridian transit (kind 1), or None if there is none."""
    for hour, kind in zip(hours, kinds):
        if kind == 1:
            return hour
    return None


class Ephemeris(Protocol):
    """Anything that can answer solar events and sun direction for a location."""

    def day(self, location: Location, tz: tzinfo, midnight: datetime) -> EphemerisDay:
        """Events of the local day starting at `midnight`, as hours since local midnight."""
        ...

    def position(self, location: Location, instant: datetime) -> tuple[float, float]:
        """(azimuth_degrees, altitude_degrees) of the sun seen from `location`."""
        ...


class SkyfieldEphemeris:
    """Ephemeris backed by skyfield and a JPL kernel (de421 by default).

    The kernel is loaded (and downloaded into the data directory if missing)
    on first use, not at construction.
    """

    def __init__(self, settings: Settings | None = None):
        self._settings = settings or load_settings()
        self._lock = RLock()
        self._eph = None
        self._ts = None

    def _load(self):
        with self._lock:
            if self._eph is None:
                logger.info(
                    "Loading ephemeris %s from %s",
                    self._settings.ephemeris_file,
                    self._settings.data_dir,
                )
                loader = Loader(str(self._settings.data_dir))
                self._eph = loader(self._settings.ephemeris_file)
                self._ts = loader.timescale()
            return self._eph, self._ts

    def day(self, location: Location, tz: tzinfo, midnight: datetime) -> EphemerisDay:
        eph, ts = self._load()
        topos = wgs84.latlon(
            latitude_degrees=location.latitude,
            longitude_degrees=location.longitude,
        )
        t0 = ts.from_datetime(midnight)
        t1 = ts.from_datetime(next_local_midnight(midnight, tz))

        twilight = almanac.dark_twilight_day(eph, topos)
        times, levels = almanac.find_discrete(t0, t1, twilight)
        found, polar = events_from_levels(
            int(twilight(t0)),
            [fractional_hour(to_local(t.utc_datetime(), tz)) for t in times],
            [int(level) for level in levels],
        )

        transits = almanac.meridian_transits(eph, eph["sun"], topos)
        transit_times, kinds = almanac.find_discrete(t0, t1, transits)
        solar_noon = first_upper_transit(
            [fractional_hour(to_local(t.utc_datetime(), tz)) for t in transit_times],
            [int(kind) for kind in kinds],
        )
        if solar_noon is not None:
            found["solar_noon"] = solar_noon

        return EphemerisDay(polar=polar, **found)

    def position(self, location: Location, instant: datetime) -> tuple[float, float]:
        eph, ts = self._load()
        observer = eph["earth"] + wgs84.latlon(
            latitude_degrees=location.latitude,
            longitude_degrees=location.longitude,
        )
        t = ts.from_datetime(to_local(instant, utc))
        alt, az, _ = observer.at(t).observe(eph["sun"]).apparent().altaz()
        return float(az.degrees) % 360.0, float(alt.degrees)
