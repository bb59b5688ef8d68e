from datetime import datetime

import pytest

from skyphase.config import Settings
from skyphase.engine import SkyPhaseEngine
from skyphase.locations import CoordinateTable
from skyphase.models import EphemerisDay, Location, SolarEvents

TOKYO = Location(latitude=35.6544, longitude=139.7447)


class CountingEphemeris:
    """Stub ephemeris returning a fixed day and counting every call."""

    def __init__(self, day: EphemerisDay | None = None, direction: tuple[float, float] = (180.0, 45.0)):
        self.result = day or EphemerisDay(
            sunrise=6.0,
            sunset=18.0,
            civil_dawn=5.5,
            civil_dusk=18.5,
            nautical_dawn=5.0,
            nautical_dusk=19.0,
            astronomical_dawn=4.5,
            astronomical_dusk=19.5,
            solar_noon=12.0,
        )
        self.direction = direction
        self.day_calls: list[tuple[Location, datetime]] = []
        self.position_calls = 0

    def day(self, location, tz, midnight):
        self.day_calls.append((location, midnight))
        return self.result

    def position(self, location, instant):
        self.position_calls += 1
        return self.direction


@pytest.fixture
def ephemeris() -> CountingEphemeris:
    return CountingEphemeris()


@pytest.fixture
def coordinates() -> CoordinateTable:
    return CoordinateTable(overrides={"Asia/Tokyo": TOKYO}, use_zone_tab=False)


@pytest.fixture
def engine(ephemeris, coordinates) -> SkyPhaseEngine:
    return SkyPhaseEngine(settings=Settings(cache_size=4), ephemeris=ephemeris, coordinates=coordinates)


@pytest.fixture
def events() -> SolarEvents:
    """06:00 sunrise, 12:00 noon, 18:00 sunset with half-hour twilight steps."""
    return SolarEvents(
        sunrise=6.0,
        sunset=18.0,
        civil_dawn=5.5,
        civil_dusk=18.5,
        nautical_dawn=5.0,
        nautical_dusk=19.0,
        astronomical_dawn=4.5,
        astronomical_dusk=19.5,
        solar_noon=12.0,
    )


@pytest.fixture
def summer_events() -> SolarEvents:
    """Mid-latitude summer day with long twilight."""
    return SolarEvents(
        sunrise=4.5,
        sunset=20.5,
        civil_dawn=3.8,
        civil_dusk=21.2,
        nautical_dawn=2.8,
        nautical_dusk=22.2,
        astronomical_dawn=1.5,
        astronomical_dusk=23.5,
        solar_noon=12.5,
    )
