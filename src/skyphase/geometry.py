"""Sun position signals for display: arc height, daylight progress, compass direction."""

import math
from datetime import datetime, timedelta, tzinfo

from skyphase.ephemeris import Ephemeris
from skyphase.models import Location, SolarEvents, SunGeometry, SunTrack
from skyphase.timebase import (
    SECONDS_PER_DAY,
    fractional_hour,
    local_midnight,
    resolve_timezone,
    to_local,
)

MIN_HALF_DAYLIGHT_SECONDS = 60.0
FALLBACK_DAY_ALTITUDE = 30.0
TRACK_HOURS = 24


def vertical_position(hour: float, events: SolarEvents) -> float:
    """cos of the angle from solar noon: +1 at noon, 0 at sunrise/sunset, -1 at most.

    The angle is clamped to [-pi, pi] so the signal bottoms out at -1 far
    from the daylight window instead of oscillating.
    """
    half_daylight = max(
        MIN_HALF_DAYLIGHT_SECONDS, (events.sunset - events.sunrise) * 3600.0 / 2.0
    )
    seconds_from_noon = (hour - events.solar_noon) * 3600.0
    angle = seconds_from_noon / half_daylight * (math.pi / 2.0)
    return math.cos(min(math.pi, max(-math.pi, angle)))


def daylight_progress(hour: float, events: SolarEvents, day_fraction: float) -> float:
    """0 at sunrise, 1 at sunset; `day_fraction` of elapsed local day when there is no daylight window."""
    if events.sunset > events.sunrise:
        progress = (hour - events.sunrise) / (events.sunset - events.sunrise)
    else:
        progress = day_fraction
    return min(1.0, max(0.0, progress))


def fallback_direction(hour: float) -> tuple[float, float]:
    """Coarse (azimuth, altitude) used when a timezone has no coordinates.

    Azimuth moves through four 90° segments, N→E over 0-6h, E→S over
    6-12h, S→W over 12-18h and W→N over 18-24h. Altitude is a constant
    +30° from 6h to 18h and -30° otherwise.
    """
    hour = hour % 24.0
    azimuth = (hour * 360.0 / 24.0) % 360.0
    altitude = FALLBACK_DAY_ALTITUDE if 6.0 <= hour < 18.0 else -FALLBACK_DAY_ALTITUDE
    return azimuth, altitude


def daylight_ratio(events: SolarEvents) -> float:
    """Share of the 24h day between sunrise and sunset; 0.5 when there is no usable window."""
    if events.sunset > events.sunrise:
        return min(1.0, (events.sunset - events.sunrise) / 24.0)
    return 0.5


def dial_angle(hour: float) -> float:
    """Angle on a 24-hour dial, 0° at midnight (top), 15° per hour clockwise."""
    return (hour % 24.0) * 15.0


def build_track(
    midnight: datetime,
    location: Location | None,
    ephemeris: Ephemeris | None,
    day_hours: float = TRACK_HOURS,
) -> SunTrack:
    """Sample the sun's direction every elapsed hour of the local day starting at `midnight`.

    Samples run from hour 0 through the next local midnight: 25 values on a
    normal day, 26 on a day that repeats an hour at the end of DST.
    """
    last = max(TRACK_HOURS, math.ceil(day_hours))
    azimuths: list[float] = []
    altitudes: list[float] = []
    for hour in range(last + 1):
        if location is not None and ephemeris is not None:
            azimuth, altitude = ephemeris.position(location, midnight + timedelta(hours=hour))
        else:
            azimuth, altitude = fallback_direction(float(hour))
        azimuths.append(azimuth)
        altitudes.append(altitude)
    return SunTrack(azimuths=tuple(azimuths), altitudes=tuple(altitudes))


def interpolate_track(track: SunTrack, hour: float) -> tuple[float, float]:
    """Linear (azimuth, altitude) between hourly samples, crossing 0°/360° the short way."""
    last = len(track.azimuths) - 1
    hour = min(max(hour, 0.0), float(last))
    lower = min(int(hour), last)
    upper = min(lower + 1, last)
    t = hour - lower

    az1 = track.azimuths[lower]
    az2 = track.azimuths[upper]
    if az2 - az1 > 180.0:
        az1 += 360.0
    elif az1 - az2 > 180.0:
        az2 += 360.0
    azimuth = (az1 + (az2 - az1) * t) % 360.0

    alt1 = track.altitudes[lower]
    alt2 = track.altitudes[upper]
    return azimuth, alt1 + (alt2 - alt1) * t


class SunGeometryModel:
    """Sun position signals for an instant, given the day's solar events."""

    def __init__(self, ephemeris: Ephemeris | None = None):
        self._ephemeris = ephemeris

    def position(
        self,
        instant: datetime,
        timezone: str,
        events: SolarEvents,
        location: Location | None = None,
        track: SunTrack | None = None,
    ) -> SunGeometry:
        """Compute SunGeometry for `instant`.

        Args:
            instant: Aware datetime (naive is taken as UTC).
            timezone: IANA identifier of the local day.
            events: Solar events of that local day.
            location: Coordinates; None selects the coarse fallback direction.
            track: Cached hourly samples; when given, direction is interpolated
                from it instead of asking the ephemeris.

        Returns:
            SunGeometry with azimuth, altitude, vertical position and progress.
        """
        tz = resolve_timezone(timezone)
        local = to_local(instant, tz)
        hour = fractional_hour(local)

        if track is not None:
            azimuth, altitude = interpolate_track(track, _elapsed_hours(local, tz))
        elif location is not None and self._ephemeris is not None:
            azimuth, altitude = self._ephemeris.position(location, instant)
        else:
            azimuth, altitude = fallback_direction(hour)

        day_fraction = _elapsed_hours(local, tz) * 3600.0 / SECONDS_PER_DAY
        return SunGeometry(
            azimuth_degrees=azimuth,
            altitude_degrees=altitude,
            vertical_position=vertical_position(hour, events),
            progress=daylight_progress(hour, events, day_fraction),
        )


def _elapsed_hours(local: datetime, tz: tzinfo) -> float:
    return (local - local_midnight(local, tz)).total_seconds() / 3600.0
