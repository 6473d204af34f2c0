"""Core game engine: one live colony session."""
import logging
import math
import random
import threading

from planet_tycoon import simulation
from planet_tycoon.colony import initial_state
from planet_tycoon.config import Config
from planet_tycoon.game_data_loader import get_game_data_loader
from planet_tycoon.scheduler import RealtimeTicker, TickScheduler

logger = logging.getLogger(__name__)


class GameEngine:
    """Owns one colony, its speed and its game-over flag.

    Requests and the realtime timer can call in from different threads, so
    every public method holds the engine lock; ticks and commands never
    interleave.
    """

    def __init__(self, session_id, config=None, rng=None, data_loader=None):
        """Initialize game engine."""
        self.session_id = session_id
        self.config = config or {}
        self.data_loader = data_loader or get_game_data_loader()

        seed = self.config.get('seed', Config.RANDOM_SEED)
        self.rng = rng if rng is not None else random.Random(seed)

        self._lock = threading.RLock()
        self.tick_interval = self.config.get('tick_interval', Config.TICK_INTERVAL_SECONDS)
        self.realtime = False
        self.ticker = None
        self._generation = 0
        self._new_game()

    def _new_game(self):
        self.state = initial_state(self.data_loader)
        self.speed = Config.DEFAULT_SPEED
        self.game_over = False
        self.tick_count = 0  # ticks that changed the colony; paused ticks don't count
        self._generation += 1
        generation = self._generation
        self.scheduler = TickScheduler(lambda: self._tick_once(generation))

    def _tick_once(self, generation):
        with self._lock:
            # A timer from before the last reset must not tick the new colony
            if generation != self._generation or self.game_over:
                return False
            if self.speed == 0:
                return True

            self.state = simulation.tick(self.state, self.speed, self.rng, self.data_loader)
            self.tick_count += 1

            if simulation.is_colony_lost(self.state):
                self.game_over = True
                logger.info(
                    "Colony %s lost on day %d with %d colonists",
                    self.session_id, math.floor(self.state.day), math.floor(self.state.population)
                )
                return False
            return True

    def tick(self):
        """Run one scheduled tick. Returns False once the game is over."""
        with self._lock:
            return self.scheduler.advance(1) == 1 and not self.game_over

    def advance(self, n_ticks):
        """Run up to ``n_ticks`` ticks and return how many the scheduler ran."""
        with self._lock:
            return self.scheduler.advance(n_ticks)

    def build(self, building_type):
        """Build a structure. Does nothing if it can't be afforded or doesn't exist.

        Returns True if a building was added.
        """
        with self._lock:
            if self.game_over:
                return False
            count = len(self.state.buildings)
            self.state = simulation.build(self.state, building_type, self.data_loader)
            return len(self.state.buildings) > count

    def upgrade(self, building_id):
        """Upgrade a building. Does nothing if it can't be afforded or doesn't exist.

        Returns True if the building went up a level.
        """
        with self._lock:
            building = self.state.get_building(building_id)
            if self.game_over or building is None:
                return False
            level = building.level
            self.state = simulation.upgrade(self.state, building_id, self.data_loader)
            return self.state.get_building(building_id).level > level

    def reset(self):
        """Start the colony over: fresh state, normal speed, game-over cleared."""
        with self._lock:
            if self.ticker is not None:
                self.ticker.stop()
                self.ticker = None
            self._new_game()
            if self.realtime:
                self._start_ticker()
            return self.state

    def set_speed(self, speed):
        """Set the multiplier used from the next tick on."""
        if isinstance(speed, bool) or speed not in Config.SPEEDS:
            raise ValueError(f"Invalid speed: {speed}. Expected one of {list(Config.SPEEDS)}")
        with self._lock:
            self.speed = int(speed)
            return self.speed

    def start_realtime(self, interval=None):
        """Tick on a real timer, once per ``interval`` seconds."""
        with self._lock:
            if interval is not None:
                self.tick_interval = interval
            self.realtime = True
            if self.ticker is None or not self.ticker.running:
                self._start_ticker()

    def stop_realtime(self):
        with self._lock:
            self.realtime = False
            if self.ticker is not None:
                self.ticker.stop()
                self.ticker = None

    def _start_ticker(self):
        if self.game_over:
            return
        self.ticker = RealtimeTicker(self.scheduler, self.tick_interval, lock=self._lock)
        self.ticker.start()

    def get_state(self):
        """Get current game state as dictionary."""
        with self._lock:
            energy_production, energy_usage = simulation.energy_balance(self.state)
            return {
                'session_id': self.session_id,
                'tick': self.tick_count,
                'speed': self.speed,
                'game_over': self.game_over,
                **self.state.to_dict(),
                'energy_production_rate': energy_production,
                'energy_usage_rate': energy_usage,
                'upgrade_costs': {
                    b.id: simulation.upgrade_cost(b, self.data_loader) for b in self.state.buildings
                },
            }

    def get_summary(self):
        """Final numbers for the game-over view."""
        with self._lock:
            return {
                'game_over': self.game_over,
                'day': math.floor(self.state.day),
                'population': math.floor(self.state.population),
            }

    def get_time(self):
        """Get current colony day."""
        return self.state.day

    def perform_action(self, action_type, action_data=None):
        """Perform a player command.

        Returns True if the command changed the game. Unaffordable or unknown
        builds and upgrades return False without raising.
        """
        action_data = action_data or {}
        if action_type == 'build':
            return self.build(self._require_name(action_data, 'building_type'))
        elif action_type == 'upgrade':
            return self.upgrade(self._require_name(action_data, 'building_id'))
        elif action_type == 'set_speed':
            self.set_speed(self._require(action_data, 'speed'))
            return True
        elif action_type == 'reset':
            self.reset()
            return True
        else:
            raise ValueError(f"Unknown action type: {action_type}")

    @staticmethod
    def _require(action_data, key):
        if key not in action_data:
            raise ValueError(f"Missing {key}")
        return action_data[key]

    @classmethod
    def _require_name(cls, action_data, key):
        value = cls._require(action_data, key)
        if not isinstance(value, str):
            raise ValueError(f"{key} must be a string")
        return value
