"""Timezone → coordinate lookup backed by the tz database's zone.tab (shipped with pytz)."""

import logging
from collections.abc import Mapping

import pytz

from skyphase.errors import LocationUnavailable
from skyphase.models import Location

logger = logging.getLogger(__name__)


def parse_iso6709(coords: str) -> Location:
    """Parse a zone.tab coordinate string: ``±DDMM±DDDMM`` or ``±DDMMSS±DDDMMSS``.

    Raises:
        ValueError: When the string is not in either form.
    """
    split = max(coords.rfind("+"), coords.rfind("-"))
    if split <= 0:
        raise ValueError(f"Not an ISO 6709 coordinate: {coords!r}")
    return Location(
        latitude=_dms(coords[:split], degree_digits=2),
        longitude=_dms(coords[split:], degree_digits=3),
    )


def _dms(part: str, degree_digits: int) -> float:
    sign = -1.0 if part[0] == "-" else 1.0
    digits = part[1:]
    if not digits.isdigit() or len(digits) not in (degree_digits + 2, degree_digits + 4):
        raise ValueError(f"Bad ISO 6709 component: {part!r}")
    degrees = int(digits[:degree_digits])
    minutes = int(digits[degree_digits : degree_digits + 2])
    seconds = int(digits[degree_digits + 2 :] or 0)
    return sign * (degrees + minutes / 60.0 + seconds / 3600.0)


def load_zone_tab() -> dict[str, Location]:
    """Read every zone's principal location from pytz's bundled zone.tab."""
    table: dict[str, Location] = {}
    with pytz.open_resource("zone.tab") as f:
        for raw in f:
            line = raw.decode("utf-8").strip()
            if not line or line.startswith("#"):
                continue
            parts = line.split("\t")
            if len(parts) < 3:
                continue
            try:
                table[parts[2]] = parse_iso6709(parts[1])
            except ValueError:
                logger.debug("Skipping zone.tab row with bad coordinates: %s", line)
    return table


class CoordinateTable:
    """Coordinate lookup keyed by timezone identifier.

    Explicit `overrides` win over zone.tab. zone.tab is parsed once, on first lookup.
    """

    def __init__(self, overrides: Mapping[str, Location] | None = None, use_zone_tab: bool = True):
        self._overrides = dict(overrides or {})
        self._use_zone_tab = use_zone_tab
        self._zone_tab: dict[str, Location] | None = None

    def coordinates_for(self, timezone: str) -> Location | None:
        if timezone in self._overrides:
            return self._overrides[timezone]
        if not self._use_zone_tab:
            return None
        if self._zone_tab is None:
            self._zone_tab = load_zone_tab()
        return self._zone_tab.get(timezone)

    def require_coordinates(self, timezone: str) -> Location:
        """Like `coordinates_for` but raises LocationUnavailable instead of returning None."""
        location = self.coordinates_for(timezone)
        if location is None:
            raise LocationUnavailable(timezone)
        return location
