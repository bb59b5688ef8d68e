"""Sky appearance: palette tables, star opacity, and animation key."""

import pytest

from skyphase.appearance import SkyAppearanceModel, animation_key, colors, find_row, star_opacity
from skyphase.normalizer import normalize_hour
from skyphase.palettes import CLEAR_PALETTE, RAINY_PALETTE, STAR_OPACITY_KEYFRAMES

ROW_BOUNDS = [(0, 4), (4, 5), (5, 6), (6, 7), (7, 8), (8, 11), (11, 14), (14, 17), (17, 18),
              (18, 19), (19, 20), (20, 21), (21, 24)]


class TestPaletteTables:
    @pytest.mark.parametrize("palette", [CLEAR_PALETTE, RAINY_PALETTE], ids=["clear", "rainy"])
    def test_rows_cover_the_canonical_day(self, palette):
        assert [(row.start, row.end) for row in palette] == ROW_BOUNDS

    @pytest.mark.parametrize("palette", [CLEAR_PALETTE, RAINY_PALETTE], ids=["clear", "rainy"])
    def test_rows_meet_without_jumps(self, palette):
        for row, following in zip(palette, palette[1:]):
            assert row.end == following.start
            assert row.end_stops == following.start_stops
        assert palette[-1].end_stops == palette[0].start_stops

    @pytest.mark.parametrize("palette", [CLEAR_PALETTE, RAINY_PALETTE], ids=["clear", "rainy"])
    def test_every_channel_in_unit_range(self, palette):
        for row in palette:
            assert len(row.start_stops) >= 3
            for stop in row.start_stops + row.end_stops:
                assert all(0.0 <= channel <= 1.0 for channel in stop)

    def test_find_row(self):
        assert find_row(CLEAR_PALETTE, 12.5).start == 11
        assert find_row(CLEAR_PALETTE, 21.0).start == 21
        assert find_row(CLEAR_PALETTE, 0.0).start == 0


class TestColors:
    def test_noon_is_the_noon_table(self):
        assert colors(12.0, False) == CLEAR_PALETTE[6].start_stops

    def test_interpolates_inside_a_row(self):
        start = CLEAR_PALETTE[0].start_stops[3]
        end = CLEAR_PALETTE[0].end_stops[3]
        horizon = colors(2.0, False)[3]
        for channel in range(3):
            assert horizon[channel] == pytest.approx((start[channel] + end[channel]) / 2)

    def test_rain_selects_the_other_table(self):
        assert colors(12.0, True) == RAINY_PALETTE[6].start_stops
        assert colors(12.0, True) != colors(12.0, False)

    def test_rainy_midday_is_brighter_at_horizon_and_greyer(self):
        r, g, b = colors(12.0, True)[-1]
        assert min(r, g, b) > 0.85
        assert b - r < colors(12.0, False)[-1][2] - colors(12.0, False)[-1][0]

    @pytest.mark.parametrize("is_rainy", [False, True])
    def test_continuous_across_row_boundaries(self, is_rainy):
        for start, _ in ROW_BOUNDS[1:]:
            before = colors(start - 1e-9, is_rainy)
            at = colors(start, is_rainy)
            for a, b in zip(before, at):
                assert a == pytest.approx(b, abs=1e-6)

    def test_phase_wraps(self):
        assert colors(26.0, False) == colors(2.0, False)
        assert colors(-1.0, False) == colors(23.0, False)


class TestStarOpacity:
    CASES = [
        # (name, phase, expected)
        ("noon", 12.0, 0.0),
        ("deep_night", 2.0, 1.0),
        ("midnight", 0.0, 1.0),
        ("late_night", 23.0, 1.0),
        ("astronomical_dawn_start", 4.0, 1.0),
        ("nautical_dawn_start", 5.0, 0.7),
        ("civil_dawn_start", 6.0, 0.2),
        ("sunrise_period", 7.0, 0.0),
        ("sunset_period", 18.5, 0.0),
        ("civil_dusk_start", 19.0, 0.0),
        ("nautical_dusk_start", 20.0, 0.2),
        ("astronomical_dusk_start", 21.0, 0.7),
        ("deep_night_start", 22.0, 1.0),
    ]

    @pytest.mark.parametrize("name,phase,expected", CASES, ids=[c[0] for c in CASES])
    def test_clear_sky(self, name, phase, expected):
        assert star_opacity(phase, False) == pytest.approx(expected)

    def test_daytime_is_exactly_zero(self):
        for tenth in range(70, 190):
            assert star_opacity(tenth / 10.0, False) == 0.0

    def test_rain_hides_stars_at_any_phase(self):
        for tenth in range(240):
            assert star_opacity(tenth / 10.0, True) == 0.0

    def test_ramps_are_monotonic(self):
        dawn = [star_opacity(4.0 + i / 100.0, False) for i in range(301)]
        dusk = [star_opacity(19.0 + i / 100.0, False) for i in range(301)]
        assert all(a >= b for a, b in zip(dawn, dawn[1:]))
        assert all(a <= b for a, b in zip(dusk, dusk[1:]))

    def test_keyframes_in_unit_range(self):
        assert all(0.0 <= v <= 1.0 for _, v in STAR_OPACITY_KEYFRAMES)


class TestAnimationKey:
    def test_quantizes_phase_and_weather(self):
        assert animation_key(12.7, False) == 24
        assert animation_key(12.7, True) == 25
        assert animation_key(0.2, False) == 0

    def test_changes_once_per_canonical_hour(self):
        keys = {animation_key(7.0 + i / 100.0, False) for i in range(100)}
        assert keys == {14}

    def test_non_decreasing_through_the_day(self, events):
        """Within one day the key only steps forward, wrapping once near midnight."""
        keys = [animation_key(normalize_hour(m / 60.0, events), False) for m in range(24 * 60)]
        drops = [(a, b) for a, b in zip(keys, keys[1:]) if b < a]
        assert len(drops) <= 1
        assert all(a >= 46 and b <= 1 for a, b in drops)


class TestSkyAppearanceModel:
    def test_appearance_bundles_signals(self):
        appearance = SkyAppearanceModel().appearance(2.0, False)
        assert appearance.star_opacity == 1.0
        assert appearance.animation_key == 4
        assert appearance.phase == 2.0
        assert appearance.is_rainy is False
        assert len(appearance.colors) == 4

    def test_rainy_appearance_has_no_stars(self):
        appearance = SkyAppearanceModel().appearance(2.0, True)
        assert appearance.star_opacity == 0.0
        assert appearance.animation_key == 5
