"""Session controller: speed, game over, reset and the action dispatcher."""
import time

import pytest

from planet_tycoon.game_engine import GameEngine


@pytest.fixture
def engine(never_grow, data_loader):
    return GameEngine(1, rng=never_grow, data_loader=data_loader)


def test_new_engine(engine):
    state = engine.get_state()

    assert state['session_id'] == 1
    assert state['speed'] == 1
    assert state['game_over'] is False
    assert state['tick'] == 0
    assert state['credits'] == 500
    assert state['energy_production_rate'] == 25
    assert state['energy_usage_rate'] == 5
    assert state['upgrade_costs'] == {'habitat-1': 75, 'powerPlant-1': 150}


def test_advance_ticks(engine):
    assert engine.advance(10) == 10
    assert engine.tick_count == 10
    assert engine.state.day == pytest.approx(2.0)


def test_paused_ticks_still_fire_but_change_nothing(engine):
    before = engine.state.to_dict()
    engine.set_speed(0)

    assert engine.tick() is True
    assert engine.advance(5) == 5
    assert engine.state.to_dict() == before
    assert engine.tick_count == 0


def test_speed_takes_effect_on_next_tick(engine):
    engine.tick()
    engine.set_speed(2)
    engine.tick()
    assert engine.state.day == pytest.approx(1.3)


@pytest.mark.parametrize('speed', [3, -1, 'fast', None, True, 1.5])
def test_invalid_speed(engine, speed):
    with pytest.raises(ValueError):
        engine.set_speed(speed)
    assert engine.speed == 1


def test_game_over_stops_ticks(engine, starving_state):
    engine.state = starving_state

    assert engine.tick() is False
    assert engine.game_over is True
    assert engine.scheduler.cancelled
    day = engine.state.day

    assert engine.advance(10) == 0
    assert engine.state.day == day
    assert engine.get_summary() == {'game_over': True, 'day': 7, 'population': 10}


def test_commands_ignored_after_game_over(engine, starving_state):
    engine.state = starving_state
    engine.tick()

    engine.build('farm')
    engine.upgrade('powerPlant-1')
    assert len(engine.state.buildings) == 1
    assert engine.state.credits == pytest.approx(100.5)


def test_reset_recovers_from_game_over(engine, starving_state):
    engine.state = starving_state
    engine.set_speed(2)
    engine.tick()

    engine.reset()

    assert engine.game_over is False
    assert engine.speed == 1
    assert engine.tick_count == 0
    assert engine.state.credits == 500
    assert engine.advance(3) == 3


def test_build_and_upgrade(engine):
    engine.build('farm')
    engine.upgrade('farm-3')

    farm = engine.state.get_building('farm-3')
    assert farm.level == 2
    assert engine.state.credits == 500 - 80 - 60


def test_failed_commands_leave_state_alone(engine):
    before = engine.state.to_dict()
    engine.build('spaceport')
    engine.upgrade('farm-42')
    engine.state.credits = 10
    engine.build('farm')

    assert len(engine.state.buildings) == len(before['buildings'])


def test_perform_action_dispatch(engine):
    engine.perform_action('build', {'building_type': 'lab'})
    engine.perform_action('set_speed', {'speed': 2})

    assert engine.state.get_building('lab-3') is not None
    assert engine.speed == 2

    engine.perform_action('reset')
    assert engine.speed == 1
    assert len(engine.state.buildings) == 2


def test_perform_action_errors(engine):
    with pytest.raises(ValueError, match='Unknown action type'):
        engine.perform_action('demolish', {'building_id': 'habitat-1'})
    with pytest.raises(ValueError, match='Missing building_type'):
        engine.perform_action('build', {})


def test_seeded_engines_are_reproducible(data_loader):
    first = GameEngine(1, {'seed': 42}, data_loader=data_loader)
    second = GameEngine(2, {'seed': 42}, data_loader=data_loader)
    first.set_speed(2)
    second.set_speed(2)
    first.advance(500)
    second.advance(500)

    assert first.state == second.state


def test_realtime_ticking(engine):
    engine.start_realtime(interval=0.01)
    try:
        deadline = time.monotonic() + 2.0
        while engine.tick_count < 3 and time.monotonic() < deadline:
            time.sleep(0.005)
        assert engine.tick_count >= 3
    finally:
        engine.stop_realtime()


def test_realtime_ticker_cancelled_on_game_over(engine, starving_state):
    engine.state = starving_state
    engine.start_realtime(interval=0.01)

    deadline = time.monotonic() + 2.0
    while engine.ticker.running and time.monotonic() < deadline:
        time.sleep(0.005)

    assert engine.game_over
    assert not engine.ticker.running
    engine.stop_realtime()


def test_commands_report_whether_they_applied(engine, starving_state):
    assert engine.perform_action('build', {'building_type': 'farm'}) is True
    assert engine.perform_action('upgrade', {'building_id': 'farm-3'}) is True
    assert engine.perform_action('build', {'building_type': 'spaceport'}) is False
    assert engine.perform_action('upgrade', {'building_id': 'farm-42'}) is False
    engine.state.credits = 10
    assert engine.perform_action('build', {'building_type': 'farm'}) is False
    assert engine.perform_action('upgrade', {'building_id': 'farm-3'}) is False
    assert engine.perform_action('set_speed', {'speed': 0}) is True

    engine.state = starving_state
    engine.set_speed(1)
    engine.tick()
    assert engine.perform_action('build', {'building_type': 'farm'}) is False
    assert engine.perform_action('reset') is True


@pytest.mark.parametrize('action_type,action_data', [
    ('build', {'building_type': ['farm']}),
    ('build', {'building_type': {'type': 'farm'}}),
    ('upgrade', {'building_id': ['habitat-1']}),
    ('upgrade', {'building_id': 7}),
])
def test_non_string_names_rejected(engine, action_type, action_data):
    with pytest.raises(ValueError, match='must be a string'):
        engine.perform_action(action_type, action_data)
    assert len(engine.state.buildings) == 2
    assert engine.state.credits == 500


def test_realtime_ticks_hold_the_engine_lock(engine):
    engine.start_realtime(interval=0.01)
    try:
        assert engine.ticker.tick_lock is engine._lock
        with engine._lock:
            held = engine.tick_count
            time.sleep(0.1)
            assert engine.tick_count == held
        deadline = time.monotonic() + 2.0
        while engine.tick_count <= held and time.monotonic() < deadline:
            time.sleep(0.005)
        assert engine.tick_count > held
    finally:
        engine.stop_realtime()
