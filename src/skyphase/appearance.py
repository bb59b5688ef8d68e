"""Gradient stops, star opacity and animation key for a normalized phase."""

import math
from bisect import bisect_right

from skyphase.models import RGB, SkyAppearance
from skyphase.palettes import CLEAR_PALETTE, RAINY_PALETTE, STAR_OPACITY_KEYFRAMES, PaletteRow

_STAR_PHASES = [phase for phase, _ in STAR_OPACITY_KEYFRAMES]


def _wrap(phase: float) -> float:
    wrapped = phase % 24.0
    # -1e-17 % 24 rounds to 24.0
    return 0.0 if wrapped >= 24.0 else wrapped


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def palette_for(is_rainy: bool) -> tuple[PaletteRow, ...]:
    return RAINY_PALETTE if is_rainy else CLEAR_PALETTE


def find_row(palette: tuple[PaletteRow, ...], phase: float) -> PaletteRow:
    for row in palette:
        if row.start <= phase < row.end:
            return row
    return palette[-1]


def colors(phase: float, is_rainy: bool) -> tuple[RGB, ...]:
    """Gradient stops (zenith first) for `phase`, walked from the clear or rainy table."""
    phase = _wrap(phase)
    row = find_row(palette_for(is_rainy), phase)
    progress = (phase - row.start) / (row.end - row.start)
    return tuple(
        (
            _lerp(start[0], end[0], progress),
            _lerp(start[1], end[1], progress),
            _lerp(start[2], end[2], progress),
        )
        for start, end in zip(row.start_stops, row.end_stops)
    )


def star_opacity(phase: float, is_rainy: bool) -> float:
    """Star field opacity in [0, 1]. Rain hides the stars whatever the phase."""
    if is_rainy:
        return 0.0
    phase = _wrap(phase)
    i = min(bisect_right(_STAR_PHASES, phase), len(STAR_OPACITY_KEYFRAMES) - 1)
    p0, v0 = STAR_OPACITY_KEYFRAMES[i - 1]
    p1, v1 = STAR_OPACITY_KEYFRAMES[i]
    return min(1.0, max(0.0, _lerp(v0, v1, (phase - p0) / (p1 - p0))))


def animation_key(phase: float, is_rainy: bool) -> int:
    """Changes once per canonical hour and on every weather flip."""
    return int(math.floor(_wrap(phase))) * 2 + int(is_rainy)


class SkyAppearanceModel:
    """Bundles the three appearance signals for one phase."""

    def colors(self, phase: float, is_rainy: bool) -> tuple[RGB, ...]:
        return colors(phase, is_rainy)

    def star_opacity(self, phase: float, is_rainy: bool) -> float:
        return star_opacity(phase, is_rainy)

    def animation_key(self, phase: float, is_rainy: bool) -> int:
        return animation_key(phase, is_rainy)

    def appearance(self, phase: float, is_rainy: bool) -> SkyAppearance:
        return SkyAppearance(
            colors=colors(phase, is_rainy),
            star_opacity=star_opacity(phase, is_rainy),
            animation_key=animation_key(phase, is_rainy),
            phase=_wrap(phase),
            is_rainy=is_rainy,
        )
