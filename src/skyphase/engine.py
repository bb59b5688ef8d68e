"""Engine that owns the caches and wires events, phase, appearance and geometry together."""

import logging
from datetime import datetime
from threading import Lock

from skyphase.appearance import SkyAppearanceModel
from skyphase.cache import DayCache, SolarEventCache
from skyphase.config import Settings, load_settings
from skyphase.ephemeris import Ephemeris, SkyfieldEphemeris
from skyphase.geometry import SunGeometryModel, build_track
from skyphase.locations import CoordinateTable
from skyphase.models import Location, SkyAppearance, SkyState, SolarEvents, SunGeometry, SunTrack
from skyphase.normalizer import DayPhaseNormalizer
from skyphase.timebase import (
    day_key,
    hours_between,
    local_midnight,
    next_local_midnight,
    resolve_timezone,
    to_local,
)

logger = logging.getLogger(__name__)


class SkyPhaseEngine:
    """Process-wide solar phase engine.

    Every method takes the timezone and instant explicitly; the only state
    is the two bounded per-day caches (solar events, hourly sun track).
    """

    def __init__(
        self,
        settings: Settings | None = None,
        ephemeris: Ephemeris | None = None,
        coordinates: CoordinateTable | None = None,
    ):
        self.settings = settings or load_settings()
        self.ephemeris = ephemeris if ephemeris is not None else SkyfieldEphemeris(self.settings)
        self.coordinates = coordinates if coordinates is not None else CoordinateTable()
        self.events_cache = SolarEventCache(
            self.ephemeris, self.coordinates, capacity=self.settings.cache_size
        )
        self.track_cache: DayCache[SunTrack] = DayCache(self.settings.cache_size)
        self.normalizer = DayPhaseNormalizer()
        self.sky = SkyAppearanceModel()
        self.sun = SunGeometryModel(self.ephemeris)

    def location(self, timezone: str) -> Location | None:
        return self.coordinates.coordinates_for(timezone)

    def solar_events(self, timezone: str, instant: datetime) -> SolarEvents:
        return self.events_cache.get_or_compute(timezone, instant)

    def phase(self, timezone: str, instant: datetime) -> float:
        """Normalized day phase in [0, 24) for `instant` in `timezone`."""
        events = self.solar_events(timezone, instant)
        return self.normalizer.normalize(instant, timezone, events)

    def appearance(self, timezone: str, instant: datetime, is_rainy: bool = False) -> SkyAppearance:
        return self.sky.appearance(self.phase(timezone, instant), is_rainy)

    def sun_track(self, timezone: str, instant: datetime) -> SunTrack:
        """Hourly sun direction samples for the local day, cached per (timezone, day)."""
        tz = resolve_timezone(timezone)
        local = to_local(instant, tz)
        location = self.location(timezone)
        midnight = local_midnight(local, tz)
        day_hours = hours_between(midnight, next_local_midnight(local, tz))
        return self.track_cache.get_or_create(
            day_key(timezone, local),
            lambda: build_track(midnight, location, self.ephemeris, day_hours),
        )

    def sun_geometry(self, timezone: str, instant: datetime, interpolate: bool = False) -> SunGeometry:
        """Sun position signals.

        Args:
            timezone: IANA identifier.
            instant: Aware datetime (naive is taken as UTC).
            interpolate: Read direction from the cached hourly track instead
                of evaluating the ephemeris for this exact instant.
        """
        events = self.solar_events(timezone, instant)
        location = self.location(timezone)
        track = self.sun_track(timezone, instant) if interpolate else None
        return self.sun.position(instant, timezone, events, location=location, track=track)

    def snapshot(self, timezone: str, instant: datetime, is_rainy: bool = False) -> SkyState:
        """Everything for one clock tick."""
        events = self.solar_events(timezone, instant)
        phase = self.normalizer.normalize(instant, timezone, events)
        location = self.location(timezone)
        return SkyState(
            timezone=timezone,
            instant=instant,
            location=location,
            events=events,
            phase=phase,
            appearance=self.sky.appearance(phase, is_rainy),
            geometry=self.sun.position(instant, timezone, events, location=location),
        )


_default_engine: SkyPhaseEngine | None = None
_default_lock = Lock()


def get_engine() -> SkyPhaseEngine:
    """Return the process-wide engine, creating it from the environment on first call."""
    global _default_engine
    with _default_lock:
        if _default_engine is None:
            logger.debug("Creating default engine")
            _default_engine = SkyPhaseEngine()
        return _default_engine
