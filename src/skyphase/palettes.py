"""Sky gradient palettes, one keyframe per canonical phase boundary.

Each keyframe lists four RGB stops from zenith to horizon. Rows are built
from consecutive keyframes, so every row ends on the stops the next row
starts with and the gradient never jumps at a boundary (24 wraps to 0).
"""

from typing import NamedTuple

from skyphase.models import RGB

Stops = tuple[RGB, ...]


class PaletteRow(NamedTuple):
    start: float  # Canonical phase where the row begins (inclusive)
    end: float  # Canonical phase where the row ends (exclusive)
    start_stops: Stops
    end_stops: Stops


def rows_from_keyframes(keyframes: list[tuple[float, Stops]]) -> tuple[PaletteRow, ...]:
    return tuple(
        PaletteRow(start, end, start_stops, end_stops)
        for (start, start_stops), (end, end_stops) in zip(keyframes, keyframes[1:])
    )


_CLEAR_NIGHT: Stops = (
    (0.005, 0.008, 0.02),  # Deep space
    (0.01, 0.015, 0.04),
    (0.015, 0.022, 0.06),
    (0.02, 0.03, 0.08),  # Horizon
)
_CLEAR_NOON: Stops = (
    (0.15, 0.48, 0.85),  # Zenith, rich blue
    (0.30, 0.60, 0.90),
    (0.60, 0.80, 0.95),
    (0.85, 0.92, 0.98),  # Horizon haze
)

CLEAR_KEYFRAMES: list[tuple[float, Stops]] = [
    (0.0, _CLEAR_NIGHT),
    # Astronomical dawn: deep indigo
    (4.0, ((0.01, 0.01, 0.05), (0.02, 0.025, 0.10), (0.025, 0.032, 0.125), (0.03, 0.04, 0.15))),
    # Nautical dawn: blue hour
    (5.0, ((0.02, 0.03, 0.12), (0.05, 0.08, 0.25), (0.10, 0.15, 0.40), (0.15, 0.20, 0.45))),
    # Civil dawn: lavender to cool pink horizon
    (6.0, ((0.05, 0.10, 0.35), (0.20, 0.25, 0.55), (0.50, 0.35, 0.55), (0.75, 0.50, 0.50))),
    # Sunrise: clean blue over a white-gold horizon
    (7.0, ((0.15, 0.40, 0.70), (0.45, 0.60, 0.85), (0.75, 0.75, 0.90), (0.95, 0.85, 0.70))),
    # Morning
    (8.0, ((0.10, 0.40, 0.75), (0.25, 0.55, 0.85), (0.50, 0.70, 0.90), (0.70, 0.85, 0.95))),
    (11.0, _CLEAR_NOON),
    (14.0, _CLEAR_NOON),
    # Golden hour
    (17.0, ((0.20, 0.45, 0.70), (0.45, 0.58, 0.75), (0.70, 0.75, 0.85), (0.90, 0.85, 0.80))),
    # Sunset: salmon and orange under a deep blue
    (18.0, ((0.15, 0.30, 0.50), (0.40, 0.40, 0.55), (0.75, 0.55, 0.50), (0.95, 0.70, 0.50))),
    # Civil dusk: fading belt of Venus
    (19.0, ((0.05, 0.10, 0.40), (0.20, 0.25, 0.50), (0.50, 0.35, 0.45), (0.80, 0.40, 0.30))),
    # Nautical dusk
    (20.0, ((0.02, 0.03, 0.15), (0.08, 0.10, 0.25), (0.15, 0.15, 0.30), (0.25, 0.20, 0.30))),
    # Astronomical dusk into night
    (21.0, ((0.01, 0.01, 0.05), (0.02, 0.02, 0.08), (0.03, 0.035, 0.10), (0.04, 0.05, 0.12))),
    (24.0, _CLEAR_NIGHT),
]

_RAINY_NIGHT: Stops = (
    (0.02, 0.022, 0.03),
    (0.035, 0.038, 0.05),
    (0.05, 0.055, 0.068),
    (0.065, 0.07, 0.085),
)
_RAINY_NOON: Stops = (
    (0.58, 0.62, 0.68),
    (0.70, 0.73, 0.77),
    (0.82, 0.84, 0.86),
    (0.90, 0.91, 0.92),  # Near-white overcast horizon
)

RAINY_KEYFRAMES: list[tuple[float, Stops]] = [
    (0.0, _RAINY_NIGHT),
    (4.0, ((0.03, 0.033, 0.045), (0.05, 0.055, 0.075), (0.07, 0.075, 0.095), (0.09, 0.095, 0.12))),
    (5.0, ((0.07, 0.08, 0.11), (0.12, 0.13, 0.17), (0.18, 0.19, 0.24), (0.24, 0.25, 0.30))),
    (6.0, ((0.16, 0.18, 0.24), (0.27, 0.29, 0.35), (0.40, 0.39, 0.43), (0.52, 0.48, 0.48))),
    (7.0, ((0.36, 0.40, 0.46), (0.50, 0.53, 0.58), (0.63, 0.64, 0.66), (0.74, 0.71, 0.68))),
    (8.0, ((0.45, 0.50, 0.56), (0.58, 0.62, 0.67), (0.70, 0.73, 0.76), (0.80, 0.82, 0.84))),
    (11.0, _RAINY_NOON),
    (14.0, _RAINY_NOON),
    (17.0, ((0.48, 0.51, 0.56), (0.60, 0.61, 0.63), (0.70, 0.68, 0.66), (0.78, 0.72, 0.66))),
    (18.0, ((0.34, 0.36, 0.42), (0.46, 0.45, 0.48), (0.58, 0.52, 0.50), (0.66, 0.56, 0.50))),
    (19.0, ((0.20, 0.22, 0.29), (0.28, 0.29, 0.35), (0.36, 0.34, 0.38), (0.42, 0.38, 0.38))),
    (20.0, ((0.10, 0.11, 0.16), (0.15, 0.16, 0.21), (0.20, 0.21, 0.25), (0.25, 0.25, 0.28))),
    (21.0, ((0.05, 0.055, 0.08), (0.07, 0.075, 0.10), (0.09, 0.095, 0.12), (0.11, 0.115, 0.14))),
    (24.0, _RAINY_NIGHT),
]

CLEAR_PALETTE = rows_from_keyframes(CLEAR_KEYFRAMES)
RAINY_PALETTE = rows_from_keyframes(RAINY_KEYFRAMES)

# Star field visibility on a clear night, (phase, opacity)
STAR_OPACITY_KEYFRAMES: list[tuple[float, float]] = [
    (0.0, 1.0),
    (4.0, 1.0),
    (5.0, 0.7),
    (6.0, 0.2),
    (7.0, 0.0),
    (19.0, 0.0),
    (20.0, 0.2),
    (21.0, 0.7),
    (22.0, 1.0),
    (24.0, 1.0),
]
