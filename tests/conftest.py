"""Shared fixtures for Planet Tycoon tests."""
import pytest

from planet_tycoon.app import create_app
from planet_tycoon.colony import Building, ColonyState
from planet_tycoon.game_data_loader import GameDataLoader
from planet_tycoon.models import db
from planet_tycoon.sessions import get_session_registry


class FixedRandom:
    """Random source that always returns the same draw and counts calls."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value


@pytest.fixture
def data_loader():
    return GameDataLoader()


@pytest.fixture
def fixed_random():
    return FixedRandom


@pytest.fixture
def never_grow():
    return FixedRandom(0.999)


@pytest.fixture
def always_grow():
    return FixedRandom(0.0)


@pytest.fixture
def starving_state():
    """A colony one tick away from running out of food."""
    return ColonyState(
        credits=100, population=10, food=0.3, water=100, oxygen=100,
        energy=0, minerals=0, research=0, day=7.5,
        buildings=[
            Building('powerPlant-1', 'Solar Power Plant', 'powerPlant', cost=200,
                     production={'energy': 25}, energy_usage=0),
        ]
    )


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
    get_session_registry().clear()


@pytest.fixture
def client(app):
    return app.test_client()
