"""Tests for the explosion pattern generators."""

import logging
import math

import numpy as np
import pytest

from skyburst.core.config import FireworkConfig, FireworkType, SECONDARY_TYPES
from skyburst.core.particle import ParticleRole
from skyburst.core.vector import Vec2
from skyburst.patterns import (
    FALLBACK_PATTERN,
    PATTERNS,
    BurstParams,
    chrysanthemum,
    crackling,
    detonate,
    get_pattern,
    horsetail,
    multi_break,
    palm,
    peony,
    sphere,
    strobe,
    willow,
)
from skyburst.patterns.base import speed_bounds

ORIGIN = Vec2(400, 300)
STILL = Vec2(0, 0)


@pytest.fixture
def params(palette):
    return BurstParams(count=200, base_force=40.0, palette=palette)


def relative_speeds(specs, inherited=STILL):
    return np.array([(s.velocity - inherited).length for s in specs])


class TestBurstParams:

    def test_primary(self, palette):
        config = FireworkConfig(particle_count=1500, explosion_size=800)
        params = BurstParams.primary(config, palette)
        assert params.count == 1500
        assert params.base_force == pytest.approx(80.0)
        assert params.lifespan_scale == 1.0

    def test_secondary(self, palette):
        config = FireworkConfig(particle_count=1500, explosion_size=900)
        params = BurstParams.secondary(config, palette)
        assert params.count == 600
        assert params.base_force == pytest.approx(50.0)
        assert params.lifespan_scale == pytest.approx(0.8)

    def test_primary_count_is_capped(self, palette):
        config = FireworkConfig(particle_count=9000)
        assert BurstParams.primary(config, palette).count == 5000


class TestRadial:

    def test_peony_count_and_speed(self, params, rng):
        specs = peony(ORIGIN, STILL, params, rng)
        assert len(specs) == 200
        lo, hi = speed_bounds(params, 0.8, 1.2)
        speeds = relative_speeds(specs)
        assert np.all(speeds >= lo - 1e-9)
        assert np.all(speeds <= hi + 1e-9)
        assert all(1.0 <= s.lifespan <= 1.8 for s in specs)

    def test_all_start_at_origin(self, params, rng):
        for pattern in (peony, chrysanthemum, willow, palm, horsetail, strobe, crackling, multi_break, sphere):
            for spec in pattern(ORIGIN, STILL, params, rng):
                assert spec.position == ORIGIN
                assert spec.position is not ORIGIN

    def test_inherited_velocity_is_added(self, params, rng):
        inherited = Vec2(30, -10)
        specs = peony(ORIGIN, inherited, params, rng)
        lo, hi = speed_bounds(params, 0.8, 1.2)
        speeds = relative_speeds(specs, inherited)
        assert np.all((speeds >= lo - 1e-9) & (speeds <= hi + 1e-9))
        mean_vx = np.mean([s.velocity.x for s in specs])
        assert mean_vx == pytest.approx(30, abs=8)

    def test_chrysanthemum_is_a_stronger_peony(self, params, rng):
        specs = chrysanthemum(ORIGIN, STILL, params, rng)
        speeds = relative_speeds(specs)
        assert np.all(speeds >= 0.84 * 40 - 1e-9)
        assert np.all(speeds <= 1.26 * 40 + 1e-9)
        assert all(1.1 - 1e-9 <= s.lifespan <= 1.98 + 1e-9 for s in specs)

    def test_willow_is_slow_and_long_lived(self, params, rng):
        specs = willow(ORIGIN, STILL, params, rng)
        speeds = relative_speeds(specs)
        assert np.all(speeds <= 0.8 * 40 + 1e-9)
        assert all(3.0 <= s.lifespan <= 5.0 for s in specs)
        assert all(s.fade_rate == pytest.approx(0.4) for s in specs)

    def test_sphere_speeds(self, params, rng):
        specs = sphere(ORIGIN, STILL, params, rng)
        assert len(specs) == 200
        assert np.all(relative_speeds(specs) <= 1.3 * 40 + 1e-9)

    def test_palette_colours_without_drift(self, params, rng, palette):
        for spec in peony(ORIGIN, STILL, params, rng):
            assert spec.color in palette

    def test_zero_count(self, palette, rng):
        empty = BurstParams(count=0, base_force=40.0, palette=palette)
        assert peony(ORIGIN, STILL, empty, rng) == []


class TestShapedBursts:

    def test_palm_branches(self, params, rng):
        specs = palm(ORIGIN, STILL, params, rng)
        # 4-6 branches of count // branches particles
        assert len(specs) in {200 // n * n for n in (4, 5, 6)}
        assert all(3.0 <= s.size <= 4.5 for s in specs)
        # Branch speed 1.2-1.6 x base, perturbed by 0.35 x base
        speeds = relative_speeds(specs)
        assert np.all(speeds >= (1.2 - 0.35) * 40 - 1e-9)
        assert np.all(speeds <= (1.6 + 0.35) * 40 + 1e-9)

    def test_horsetail_is_a_narrow_upward_cone(self, params, rng):
        specs = horsetail(ORIGIN, STILL, params, rng)
        assert len(specs) == 200
        angles = np.array([math.atan2(s.velocity.y, s.velocity.x) for s in specs])
        assert np.all([s.velocity.y < 0 for s in specs])
        assert angles.max() - angles.min() <= 0.6 + 1e-9
        axis = (angles.max() + angles.min()) / 2
        assert -math.pi / 2 - math.pi / 4 - 0.3 <= axis <= -math.pi / 2 + math.pi / 4 + 0.3
        assert all(s.fade_rate == pytest.approx(0.6) for s in specs)

    def test_strobe(self, params, rng):
        specs = strobe(ORIGIN, STILL, params, rng)
        assert len(specs) == 140
        for s in specs:
            assert s.role is ParticleRole.STROBE
            assert 5.0 <= s.payload.rate <= 15.0
            r, g, b = s.color
            assert r == g == b and r >= 199

    def test_crackling(self, params, rng):
        specs = crackling(ORIGIN, STILL, params, rng)
        assert len(specs) == 160
        for s in specs:
            assert s.role is ParticleRole.CRACKLE_SOURCE
            assert 3.0 <= s.payload.rate <= 8.0
            assert 0.8 <= s.lifespan <= 1.5

    def test_multi_break(self, params, rng):
        inherited = Vec2(10, 0)
        specs = multi_break(ORIGIN, inherited, params, rng)
        assert 2 <= len(specs) <= 4
        secondary = {t.value for t in SECONDARY_TYPES}
        for s in specs:
            assert s.role is ParticleRole.MINI_SHELL
            assert s.alpha == 200
            assert 0.4 <= s.payload.delay <= 0.9
            assert s.payload.sub_type in secondary
            assert s.payload.palette
            assert not s.payload.exploded
            speed = (s.velocity - inherited * 1.5).length
            assert 0.6 * 40 - 1e-9 <= speed <= 1.0 * 40 + 1e-9


class TestRegistry:

    def test_every_concrete_type_has_a_pattern(self):
        for firework_type in FireworkType:
            if firework_type is FireworkType.RANDOM:
                assert firework_type not in PATTERNS
            else:
                assert firework_type in PATTERNS

    def test_lookup_by_name(self):
        assert get_pattern('peony') is peony
        assert get_pattern(FireworkType.WILLOW) is willow

    def test_unknown_type_falls_back(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert get_pattern('SPARKLER') is FALLBACK_PATTERN
        assert 'SPARKLER' in caplog.text

    def test_random_falls_back_quietly(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert get_pattern(FireworkType.RANDOM) is sphere
        assert caplog.text == ''


class TestDetonate:

    def test_spawns_into_state(self, state, config, palette):
        config.set('particle_count', 100)
        params = BurstParams.primary(config, palette)
        spawned = detonate(state, config, 'PEONY', ORIGIN, STILL, params)
        assert len(spawned) == 100
        assert state.particles == spawned
        assert all(p.born == state.time for p in spawned)

    def test_respects_global_cap(self, state, config, palette):
        config.set('max_total_particles', 5000)
        config.set('particle_count', 100)
        state.particles = [object()] * 4990
        params = BurstParams.primary(config, palette)
        spawned = detonate(state, config, FireworkType.PEONY, ORIGIN, STILL, params)
        assert len(spawned) == 10
        assert len(state.particles) == 5000

    def test_applies_particle_style(self, state, config, palette):
        config.set('particle_style', 'QUANTUM')
        config.set('particle_count', 100)
        params = BurstParams.primary(config, palette)
        spawned = detonate(state, config, 'WILLOW', ORIGIN, STILL, params)
        assert all(p.style.value == 'QUANTUM' for p in spawned)

    def test_patterns_are_pure(self, params):
        a = peony(ORIGIN, STILL, params, np.random.default_rng(3))
        b = peony(ORIGIN, STILL, params, np.random.default_rng(3))
        assert [s.velocity for s in a] == [s.velocity for s in b]
