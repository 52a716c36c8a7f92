"""Tests for launch scheduling and the frame tick."""

import logging

import numpy as np
import pytest

from skyburst.core.config import FireworkConfig, FireworkType, LAUNCHABLE_TYPES, ParticleStyle
from skyburst.core.particle import FLUID_SWIRL_FORCE, FLUID_VISCOSITY, Particle, ParticleRole, sample_swirl
from skyburst.core.state import SimulationState
from skyburst.core.system import DEFAULT_DT, FireworkSystem
from skyburst.core.vector import Vec2

DT = 1.0 / 60


def run_until_burst(system, state, firework, max_seconds=10.0):
    """Step the show until `firework` detonates. Returns the burst particles."""
    for _ in range(int(max_seconds / DT)):
        spawned = system.step(state, DT)
        if firework.done:
            return spawned
    pytest.fail("firework never detonated")


class TestLaunch:

    def test_launch_adds_shell_and_firework(self, system, state):
        fw = system.launch(state, Vec2(500, 1000))
        assert fw is not None
        assert fw.shell in state.particles
        assert fw in state.fireworks
        assert fw.shell.born == state.time

    def test_launch_ranges(self, system, state):
        for _ in range(50):
            fw = system.launch(state, Vec2(500, 1000))
            assert -15 <= fw.shell.velocity.x <= 15
            assert -480 <= fw.shell.velocity.y <= -360
            assert 100 <= fw.explosion_altitude <= 500
            assert len(fw.palette) == 5

    def test_random_type_resolves(self, system, state):
        for _ in range(20):
            fw = system.launch(state, Vec2(500, 1000))
            assert fw.firework_type in LAUNCHABLE_TYPES

    def test_configured_type_is_used(self, system, state):
        system.config.set('firework_type', 'willow')
        assert system.launch(state, Vec2(500, 1000)).firework_type is FireworkType.WILLOW

    def test_override_wins(self, system, state):
        fw = system.launch(state, Vec2(500, 1000), type_override='palm')
        assert fw.firework_type is FireworkType.PALM

    def test_unknown_override_passes_through(self, system, state, caplog):
        with caplog.at_level(logging.WARNING):
            fw = system.launch(state, Vec2(500, 1000), type_override='SPARKLER')
        assert fw.firework_type == 'SPARKLER'
        assert 'SPARKLER' in caplog.text
        system.config.set('particle_count', 100)
        assert len(fw.explode(state)) == 100

    def test_rejected_at_cap(self, system, state, caplog):
        system.config.set('max_total_particles', 5000)
        filler = Particle(position=Vec2(1, 1), velocity=Vec2())
        state.particles = [filler] * 5000
        with caplog.at_level(logging.WARNING):
            assert system.launch(state, Vec2(500, 1000)) is None
        assert 'cap' in caplog.text
        assert state.fireworks == []
        assert len(state.particles) == 5000

    @pytest.mark.parametrize('position', [Vec2(float('nan'), 10), Vec2(10, float('inf')), (10, 10), None])
    def test_rejects_invalid_position(self, system, state, caplog, position):
        with caplog.at_level(logging.ERROR):
            assert system.launch(state, position) is None
        assert 'Invalid launch position' in caplog.text
        assert state.particles == []

    def test_launch_random_starts_at_bottom(self, system, state):
        fw = system.launch_random(state)
        assert fw.shell.position.y == 1000
        assert 150 <= fw.shell.position.x <= 850

    def test_manual_launch(self, system, state):
        fw = system.manual_launch(state, 320)
        assert fw.shell.position == Vec2(320, 1000)
        fw = system.manual_launch(state, 320, 700)
        assert fw.shell.position == Vec2(320, 700)


class TestPointer:

    def test_click_launches_in_manual_mode(self, system, state):
        fw = system.handle_pointer(state, 250, 40, over_panel=False)
        assert fw is not None
        assert fw.shell.position == Vec2(250, 1000)

    def test_click_over_panel_is_ignored(self, system, state):
        assert system.handle_pointer(state, 250, 40, over_panel=True) is None
        assert state.fireworks == []

    def test_click_ignored_in_auto_mode(self, system, state):
        system.config.set('auto_launch', True)
        assert system.handle_pointer(state, 250, 40, over_panel=False) is None


class TestAutoLaunch:

    def test_waits_for_interval(self, state):
        system = FireworkSystem(FireworkConfig(launch_frequency=0.5))
        state.time = 1.9
        assert system.update(state) is None
        state.time = 2.1
        assert system.update(state) is not None
        assert system.last_launch == pytest.approx(2.1)
        state.time = 2.2
        assert system.update(state) is None
        assert len(state.fireworks) == 1

    def test_disabled(self, system, state):
        state.time = 100.0
        assert system.update(state) is None

    def test_blocked_at_cap(self, state, caplog):
        system = FireworkSystem(FireworkConfig())
        system.config.set('max_total_particles', 5000)
        state.particles = [Particle(position=Vec2(1, 1), velocity=Vec2())] * 5000
        state.time = 10.0
        with caplog.at_level(logging.DEBUG, logger='skyburst'):
            assert system.update(state) is None
        assert 'cap' in caplog.text
        assert 'auto-launch' in caplog.text
        assert system.last_launch == 0.0

    def test_toggle_resets_timer(self, system, state):
        state.time = 7.5
        assert system.toggle_auto_launch(state) is True
        assert system.last_launch == 7.5
        # Nothing due right after enabling
        assert system.update(state) is None
        assert system.toggle_auto_launch(state) is False

    def test_step_launches_over_time(self, state):
        system = FireworkSystem(FireworkConfig(launch_frequency=2.0))
        seen = {}
        for _ in range(int(2.0 / DT)):
            system.step(state, DT)
            seen.update((id(fw), fw) for fw in state.fireworks)
        assert 3 <= len(seen) <= 4


class TestWind:

    def test_invalid_position_gets_no_wind(self, system, state):
        assert system.get_wind(state, Vec2(float('nan'), 3)) == Vec2()
        assert system.get_wind(state, 'here') == Vec2()

    def test_wind_is_horizontal(self, system, state):
        force = system.get_wind(state, Vec2(120, 340))
        assert force.y == 0.0
        wind = system.config.wind
        assert 0.0 <= force.x <= 2 * wind

    def test_no_wind_when_calm(self, system, state):
        system.config.set('wind', 0)
        assert system.get_wind(state, Vec2(120, 340)) == Vec2()

    def test_point_matches_field(self, system, state):
        xs = np.array([10.0, 500.0, 990.0])
        ys = np.array([20.0, 400.0, 700.0])
        field = system.get_wind_field(state, xs, ys)
        for x, y, expected in zip(xs, ys, field):
            assert system.get_wind(state, Vec2(x, y)).x == pytest.approx(expected)

    def test_wind_varies_in_space(self, system, state):
        xs = np.linspace(0, 1000, 50)
        field = system.get_wind_field(state, xs, np.full(50, 312.5))
        assert np.ptp(field) > 0


class TestStep:

    @pytest.mark.parametrize('dt', [0.0, -1.0, 0.25, 5.0, float('nan')])
    def test_bad_dt_uses_default(self, system, state, dt):
        system.step(state, dt)
        assert state.time == pytest.approx(DEFAULT_DT)

    def test_good_dt_is_kept(self, system, state):
        system.step(state, 0.1)
        assert state.time == pytest.approx(0.1)

    def test_gravity_pulls_down(self, system, state):
        system.config.update(wind=0, air_drag=0)
        p = Particle(position=Vec2(100, 100), velocity=Vec2(), lifespan=10)
        state.particles.append(p)
        system.step(state, 0.1)
        assert p.velocity.y == pytest.approx(system.config.gravity * 0.1)
        assert p.velocity.x == 0.0

    def test_fluid_swirl_sampled_at_start_of_frame(self, system, state):
        system.config.update(wind=0, air_drag=0)
        fluid = Particle(position=Vec2(137, 412), velocity=Vec2(), lifespan=10, style=ParticleStyle.FLUID)
        classic = Particle(position=Vec2(300, 300), velocity=Vec2(), lifespan=10)
        state.particles.extend([fluid, classic])
        twist = sample_swirl(state, 137.0, 412.0)

        system.step(state, DT)

        expected = Vec2.from_angle(twist * 4 * np.pi, FLUID_SWIRL_FORCE)
        assert fluid.acceleration.x == pytest.approx(expected.x)
        assert fluid.acceleration.y == pytest.approx(expected.y)
        assert fluid.velocity.y == pytest.approx(system.config.gravity * DT * FLUID_VISCOSITY)
        assert classic.acceleration == Vec2()
        assert classic.velocity.y == pytest.approx(system.config.gravity * DT)

    def test_malformed_particle_removed(self, system, state, caplog):
        good = Particle(position=Vec2(100, 100), velocity=Vec2(), lifespan=10)
        bad = Particle(position=Vec2(100, 100), velocity=Vec2(), lifespan=10)
        bad.velocity = Vec2(float('nan'), 0)
        state.particles.extend([good, bad])
        with caplog.at_level(logging.ERROR):
            system.step(state, DT)
        assert state.particles == [good]
        assert 'malformed' in caplog.text

    def test_finished_particles_removed(self, system, state):
        p = Particle(position=Vec2(100, 100), velocity=Vec2(), lifespan=10)
        p.retire()
        state.particles.append(p)
        system.step(state, DT)
        assert state.particles == []

    def test_exploded_fireworks_removed(self, system, state):
        fw = system.launch(state, Vec2(500, 1000))
        run_until_burst(system, state, fw)
        assert fw not in state.fireworks


class TestScenarios:

    def test_peony_burst(self, system, state):
        system.config.update(particle_count=100, explosion_size=400, firework_type='PEONY')
        fw = system.launch(state, Vec2(500, 800))
        spawned = run_until_burst(system, state, fw)

        position, velocity = fw.detonation
        inherited = velocity * 0.1
        assert len(spawned) == 100
        for p in spawned:
            assert p.role is ParticleRole.EXPLOSION
            assert p.position == position
            speed = (p.velocity - inherited).length
            assert 32 - 1e-9 <= speed <= 48 + 1e-9
        assert fw.shell.is_fading

        # The burst lives on after the firework is gone
        system.step(state, DT)
        assert fw not in state.fireworks
        assert all(p in state.particles for p in spawned)

    def test_detonates_near_apex_or_altitude(self, system, state):
        fw = system.launch(state, Vec2(500, 1000))
        run_until_burst(system, state, fw)
        position, velocity = fw.detonation
        assert velocity.y >= -5 or position.y <= fw.explosion_altitude

    def test_multi_break(self, system, state):
        system.config.update(particle_count=200, firework_type='MULTI_BREAK')
        fw = system.launch(state, Vec2(500, 1000))
        spawned = run_until_burst(system, state, fw)
        assert 2 <= len(spawned) <= 4
        assert all(p.role is ParticleRole.MINI_SHELL for p in spawned)

        for _ in range(int(1.0 / DT)):
            system.step(state, DT)

        assert all(p.payload.exploded for p in spawned)
        assert not any(p.role is ParticleRole.MINI_SHELL for p in state.particles)
        roles = {p.role for p in state.particles}
        assert roles & {ParticleRole.EXPLOSION, ParticleRole.STROBE, ParticleRole.CRACKLE_SOURCE}

    @pytest.mark.slow
    def test_global_cap_is_never_exceeded(self):
        config = FireworkConfig(launch_frequency=5.0)
        config.update(max_total_particles=5000, particle_count=2000)
        system = FireworkSystem(config)
        state = SimulationState.create(800, 600, seed=7)
        for _ in range(240):
            system.step(state, DT)
            assert len(state.particles) <= 5000
