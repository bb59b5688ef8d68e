"""End-to-end engine behaviour with a stub ephemeris."""

from datetime import datetime

import pytest
from pytz import utc

import skyphase.engine as engine_module
from skyphase.cache import FALLBACK_EVENTS
from skyphase.engine import SkyPhaseEngine, get_engine
from skyphase.ephemeris import SkyfieldEphemeris

TOKYO_NOON = utc.localize(datetime(2024, 6, 1, 3, 0))
TOKYO_1PM = utc.localize(datetime(2024, 6, 1, 4, 0))


class TestSnapshot:
    def test_tokyo_noon(self, engine, ephemeris):
        state = engine.snapshot("Asia/Tokyo", TOKYO_NOON)
        assert state.phase == 12.0
        assert state.events.source == "ephemeris"
        assert state.location is not None
        assert state.appearance.star_opacity == 0.0
        assert state.appearance.animation_key == 24
        assert (state.geometry.azimuth_degrees, state.geometry.altitude_degrees) == (180.0, 45.0)
        assert state.geometry.vertical_position == pytest.approx(1.0)
        assert ephemeris.position_calls == 1

    def test_unknown_location_uses_fallback(self, engine, ephemeris):
        state = engine.snapshot("UTC", utc.localize(datetime(2024, 6, 1, 12, 0)))
        assert state.events == FALLBACK_EVENTS
        assert state.location is None
        assert state.phase == 12.0
        assert state.geometry.azimuth_degrees == pytest.approx(180.0)
        assert state.geometry.altitude_degrees == 30.0
        assert ephemeris.day_calls == []
        assert ephemeris.position_calls == 0

    def test_rain_changes_appearance_only(self, engine):
        clear = engine.snapshot("Asia/Tokyo", TOKYO_NOON)
        rainy = engine.snapshot("Asia/Tokyo", TOKYO_NOON, is_rainy=True)
        assert rainy.phase == clear.phase
        assert rainy.appearance.colors != clear.appearance.colors
        assert rainy.appearance.animation_key == clear.appearance.animation_key + 1


class TestEngineOperations:
    def test_phase_and_events_share_the_cache(self, engine, ephemeris):
        engine.phase("Asia/Tokyo", TOKYO_NOON)
        engine.solar_events("Asia/Tokyo", TOKYO_1PM)
        engine.appearance("Asia/Tokyo", TOKYO_1PM, is_rainy=True)
        assert len(ephemeris.day_calls) == 1

    def test_appearance_at_midnight(self, engine):
        midnight = utc.localize(datetime(2024, 5, 31, 15, 0))  # 00:00 June 1 in Tokyo
        appearance = engine.appearance("Asia/Tokyo", midnight)
        assert appearance.star_opacity == 1.0
        assert appearance.phase == pytest.approx(0.0, abs=1e-9)

    def test_interpolated_geometry_samples_the_track_once(self, engine, ephemeris):
        first = engine.sun_geometry("Asia/Tokyo", TOKYO_NOON, interpolate=True)
        engine.sun_geometry("Asia/Tokyo", TOKYO_1PM, interpolate=True)
        assert ephemeris.position_calls == 25
        assert first.azimuth_degrees == pytest.approx(180.0)
        assert first.altitude_degrees == pytest.approx(45.0)

    def test_exact_geometry_asks_every_time(self, engine, ephemeris):
        engine.sun_geometry("Asia/Tokyo", TOKYO_NOON)
        engine.sun_geometry("Asia/Tokyo", TOKYO_1PM)
        assert ephemeris.position_calls == 2

    def test_track_is_cached_per_day(self, engine):
        first = engine.sun_track("Asia/Tokyo", TOKYO_NOON)
        assert engine.sun_track("Asia/Tokyo", TOKYO_1PM) is first
        assert len(engine.track_cache) == 1

    def test_track_covers_the_repeated_dst_hour(self, engine):
        fall_back = utc.localize(datetime(2024, 11, 3, 17, 0))
        assert len(engine.sun_track("America/New_York", fall_back).azimuths) == 26
        normal = utc.localize(datetime(2024, 11, 4, 17, 0))
        assert len(engine.sun_track("America/New_York", normal).azimuths) == 25

    def test_caches_are_bounded(self, engine):
        for day in range(1, 11):
            instant = utc.localize(datetime(2024, 7, day, 3, 0))
            engine.snapshot("Asia/Tokyo", instant)
            engine.sun_track("Asia/Tokyo", instant)
        assert len(engine.events_cache) == 4
        assert len(engine.track_cache) == 4


class TestDefaultEngine:
    def test_singleton_is_lazy_and_shared(self, monkeypatch):
        monkeypatch.setattr(engine_module, "_default_engine", None)
        first = get_engine()
        assert get_engine() is first
        assert isinstance(first, SkyPhaseEngine)
        assert isinstance(first.ephemeris, SkyfieldEphemeris)
