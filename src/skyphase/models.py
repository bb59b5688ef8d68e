"""Data model definitions: value types passed between cache, normalizer, and signal layers."""

from dataclasses import dataclass, fields
from datetime import datetime

RGB = tuple[float, float, float]

# Event names in normal (non-polar) chronological order.
EVENT_ORDER: tuple[str, ...] = (
    "astronomical_dawn",
    "nautical_dawn",
    "civil_dawn",
    "sunrise",
    "solar_noon",
    "sunset",
    "civil_dusk",
    "nautical_dusk",
    "astronomical_dusk",
)


@dataclass(frozen=True)
class Location:
    """Geographic coordinates looked up for a timezone."""

    latitude: float  # Decimal degrees, north positive
    longitude: float  # Decimal degrees, east positive


@dataclass(frozen=True)
class EphemerisDay:
    """Raw ephemeris answer for one local day. Any event may be undefined near the poles."""

    sunrise: float | None = None
    sunset: float | None = None
    civil_dawn: float | None = None
    civil_dusk: float | None = None
    nautical_dawn: float | None = None
    nautical_dusk: float | None = None
    astronomical_dawn: float | None = None
    astronomical_dusk: float | None = None
    solar_noon: float | None = None
    polar: str | None = None  # "day" (sun never sets) / "night" (sun never rises)


@dataclass(frozen=True)
class SolarEvents:
    """The nine solar events of one local day, in fractional hours since local midnight."""

    sunrise: float
    sunset: float
    civil_dawn: float
    civil_dusk: float
    nautical_dawn: float
    nautical_dusk: float
    astronomical_dawn: float
    astronomical_dusk: float
    solar_noon: float
    source: str = "ephemeris"  # "ephemeris", "polar" or "fallback"

    @property
    def daylight_hours(self) -> float:
        return max(0.0, self.sunset - self.sunrise)

    def ordering_violations(self) -> tuple[str, ...]:
        """Return "earlier>=later" labels for each adjacent pair out of order."""
        values = [getattr(self, name) for name in EVENT_ORDER]
        return tuple(
            f"{EVENT_ORDER[i]}>={EVENT_ORDER[i + 1]}"
            for i in range(len(values) - 1)
            if values[i] >= values[i + 1]
        )

    def as_dict(self) -> dict[str, float | str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class SkyAppearance:
    """Sky gradient and star visibility for one normalized phase."""

    colors: tuple[RGB, ...]  # Gradient stops, zenith first, horizon last
    star_opacity: float  # 0 = no stars, 1 = full star field
    animation_key: int  # Changes once per canonical hour or weather flip
    phase: float  # Normalized phase the appearance was derived from
    is_rainy: bool


@dataclass(frozen=True)
class SunGeometry:
    """Display signals for the sun's position."""

    azimuth_degrees: float  # 0 = North, clockwise
    altitude_degrees: float  # Positive = above horizon
    vertical_position: float  # +1 at solar noon, 0 at sunrise/sunset, -1 far into the night
    progress: float  # 0 at sunrise, 1 at sunset

    @property
    def is_visible(self) -> bool:
        return self.altitude_degrees > 0


@dataclass(frozen=True)
class SunTrack:
    """Hourly sun direction samples for one local day (25 values, 26 on a day with a repeated hour)."""

    azimuths: tuple[float, ...]
    altitudes: tuple[float, ...]


@dataclass(frozen=True)
class SkyState:
    """Everything derived for one timezone at one instant."""

    timezone: str
    instant: datetime
    location: Location | None  # None when no coordinates are known
    events: SolarEvents
    phase: float
    appearance: SkyAppearance
    geometry: SunGeometry
