"""Configuration settings for the Flask application."""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        os.environ.get('SQLALCHEMY_DATABASE_URI') or \
        'sqlite:///planet_tycoon.db'  # Use SQLite for development
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Scheduler: one tick per real second. The browser drives ticks through
    # the API unless REALTIME_TICKS turns on the server-side timer.
    TICK_INTERVAL_SECONDS = float(os.environ.get('TICK_INTERVAL_SECONDS', 1.0))
    REALTIME_TICKS = _env_flag('REALTIME_TICKS')
    MAX_TICKS_PER_REQUEST = 600  # one minute of catch-up per call
    RANDOM_SEED = int(os.environ['RANDOM_SEED']) if os.environ.get('RANDOM_SEED') else None

    # Time system: fundamental unit is 1 day, split into 10 ticks at normal speed.
    # Speed multiplies simulated time per tick, not the tick count.
    TICKS_PER_DAY = 10
    SPEEDS = (0, 1, 2)  # paused, normal, fast
    DEFAULT_SPEED = 1

    # FALLBACK values - primary source is game_data/economic_rules.json
    # All rates are per-day per colonist
    FOOD_UPKEEP_PER_CAPITA = 0.5
    WATER_UPKEEP_PER_CAPITA = 0.3
    OXYGEN_UPKEEP_PER_CAPITA = 0.2
    CREDITS_PER_CAPITA = 0.5
    GROWTH_CHANCE_PER_DAY = 0.01

    # Upgrade economy - FALLBACKS (see economic_rules.json upgrades section)
    UPGRADE_COST_FACTOR = 0.75  # price = base cost * factor * current level
    UPGRADE_PRODUCTION_MULTIPLIER = 1.5
    UPGRADE_ENERGY_USAGE_MULTIPLIER = 1.2  # rounded half-up after each upgrade

    # Starting colony - FALLBACKS (see economic_rules.json initial_colony section)
    INITIAL_CREDITS = 500
    INITIAL_POPULATION = 10
    INITIAL_FOOD = 100
    INITIAL_WATER = 100
    INITIAL_OXYGEN = 100
    INITIAL_ENERGY = 50  # overwritten by the energy balance on the first tick
    INITIAL_MINERALS = 50
    INITIAL_RESEARCH = 0
    INITIAL_DAY = 1
    STARTER_BUILDINGS = ('habitat', 'powerPlant')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    REALTIME_TICKS = False
    RANDOM_SEED = 1234


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
