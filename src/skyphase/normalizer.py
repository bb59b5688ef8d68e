"""Day-phase normalization: real local time onto a canonical 24-phase timeline.

Canonical layout:
  0-4   deep night (second half)      14-17 afternoon
  4-5   astronomical dawn             17-18 golden hour
  5-6   nautical dawn                 18-19 sunset period
  6-7   civil dawn                    19-20 civil dusk
  7-8   sunrise period                20-21 nautical dusk
  8-11  morning                       21-22 astronomical dusk
  11-14 noon (solar noon is 12)       22-24 deep night (first half)

Each branch is a chain of knots (real hour, canonical value) interpolated
linearly. Knot positions are forced strictly increasing by at least
MIN_WINDOW_HOURS, so collapsed or inverted twilight (high latitudes) still
sweeps through its canonical slot instead of jumping over it.
"""

import logging
from datetime import datetime
from functools import lru_cache
from typing import NamedTuple

from skyphase.errors import DegenerateSolarWindow
from skyphase.models import SolarEvents
from skyphase.timebase import fractional_hour, resolve_timezone, to_local

logger = logging.getLogger(__name__)

MIN_WINDOW_HOURS = 0.1
SUNRISE_PERIOD_HOURS = 1.0
MORNING_END_HOURS = 4.0  # after sunrise
NOON_HALF_WIDTH_HOURS = 1.5
GOLDEN_HOUR_HOURS = 1.0
SUNSET_PERIOD_HOURS = 1.0

Knot = tuple[float, float]


class PhaseChains(NamedTuple):
    """Knot chains for one day of solar events."""

    dawn: tuple[Knot, ...]  # astronomical dawn .. sunrise, values 4 -> 7
    day: tuple[Knot, ...]  # sunrise .. sunset, values 7 -> 18
    dusk: tuple[Knot, ...]  # sunset .. astronomical dusk, values 18 -> 22

    @property
    def night_start(self) -> float:
        return self.dusk[-1][0]

    @property
    def dawn_start(self) -> float:
        return self.dawn[0][0]

    @property
    def day_start(self) -> float:
        return self.day[0][0]

    @property
    def day_end(self) -> float:
        return self.day[-1][0]

    @property
    def night_hours(self) -> float:
        return max(MIN_WINDOW_HOURS, self.dawn_start + 24.0 - self.night_start)


def _forward(knots: list[Knot]) -> tuple[Knot, ...]:
    out = [knots[0]]
    for position, value in knots[1:]:
        out.append((max(position, out[-1][0] + MIN_WINDOW_HOURS), value))
    return tuple(out)


def _backward(knots: list[Knot]) -> tuple[Knot, ...]:
    # knots given latest-first; returned earliest-first
    out = [knots[0]]
    for position, value in knots[1:]:
        out.append((min(position, out[-1][0] - MIN_WINDOW_HOURS), value))
    return tuple(reversed(out))


def check_ordering(events: SolarEvents) -> None:
    """Raise DegenerateSolarWindow when the events are not in their normal order."""
    violations = events.ordering_violations()
    if violations:
        raise DegenerateSolarWindow(violations)


@lru_cache(maxsize=128)
def build_chains(events: SolarEvents) -> PhaseChains:
    try:
        check_ordering(events)
    except DegenerateSolarWindow as e:
        logger.debug("%s; flooring windows to %.1fh", e, MIN_WINDOW_HOURS)

    dawn = _backward(
        [
            (events.sunrise, 7.0),
            (events.civil_dawn, 6.0),
            (events.nautical_dawn, 5.0),
            (events.astronomical_dawn, 4.0),
        ]
    )

    noon_start = events.solar_noon - NOON_HALF_WIDTH_HOURS
    morning_end = min(events.sunrise + MORNING_END_HOURS, noon_start)
    day_knots = [
        (events.sunrise, 7.0),
        (events.sunrise + SUNRISE_PERIOD_HOURS, 8.0),
        (morning_end, 11.0),
    ]
    if noon_start > morning_end:
        # Gap between morning and the noon window: hold at 11
        day_knots.append((noon_start, 11.0))
    day_knots += [
        (events.solar_noon, 12.0),
        (events.solar_noon + NOON_HALF_WIDTH_HOURS, 14.0),
        (events.sunset - GOLDEN_HOUR_HOURS, 17.0),
        (events.sunset, 18.0),
    ]
    day = _forward(day_knots)

    # Dusk starts where the (possibly stretched) day chain ends
    dusk = _forward(
        [
            day[-1],
            (events.sunset + SUNSET_PERIOD_HOURS, 19.0),
            (events.civil_dusk, 20.0),
            (events.nautical_dusk, 21.0),
            (events.astronomical_dusk, 22.0),
        ]
    )
    return PhaseChains(dawn=dawn, day=day, dusk=dusk)


def interpolate(hour: float, knots: tuple[Knot, ...]) -> float:
    """Piecewise-linear value of `hour` along `knots`, clamped to the end values."""
    if hour < knots[0][0]:
        return knots[0][1]
    for (p0, v0), (p1, v1) in zip(knots, knots[1:]):
        if hour < p1:
            progress = (hour - p0) / max(MIN_WINDOW_HOURS, p1 - p0)
            return v0 + (v1 - v0) * min(max(progress, 0.0), 1.0)
    return knots[-1][1]


def night_phase(hours_into_night: float, chains: PhaseChains) -> float:
    """Astronomical dusk -> next astronomical dawn: 22 -> 24 | 0 -> 4, split at the midpoint."""
    progress = min(max(hours_into_night / chains.night_hours, 0.0), 1.0)
    if progress < 0.5:
        return 22.0 + progress * 4.0
    return (progress - 0.5) * 8.0


def normalize_hour(hour: float, events: SolarEvents) -> float:
    """Map a local fractional hour onto the canonical phase in [0, 24).

    Branches follow the chain bounds rather than the raw events, so a
    collapsed day (sunrise == sunset) still sweeps its floored slots.
    `hour >= day_end` is evening and `hour < day_start` is pre-dawn. Chains
    that cross midnight (dusk past 24h, dawn or day before 0h) are matched
    on the side they belong to. Anything outside the chains is deep night.
    """
    chains = build_chains(events)

    for h in (hour, hour - 24.0, hour + 24.0):
        if chains.dawn_start <= h < chains.day_start:
            return interpolate(h, chains.dawn) % 24.0
        if chains.day_start <= h < chains.day_end:
            return interpolate(h, chains.day) % 24.0
        if chains.day_end <= h < chains.night_start:
            return interpolate(h, chains.dusk) % 24.0

    return night_phase((hour - chains.night_start) % 24.0, chains) % 24.0


class DayPhaseNormalizer:
    """Normalized day phase for an instant in a timezone."""

    def normalize(self, instant: datetime, timezone: str, events: SolarEvents) -> float:
        """Return the canonical phase of `instant`.

        Args:
            instant: Aware datetime (naive is taken as UTC).
            timezone: IANA identifier the events were computed for.
            events: Solar events of the local day containing `instant`.

        Returns:
            Phase in [0, 24).
        """
        local = to_local(instant, resolve_timezone(timezone))
        return normalize_hour(fractional_hour(local), events)
