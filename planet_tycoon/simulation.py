"""Colony simulation: the per-tick update and the player commands.

Every function here is pure. It takes a ``ColonyState`` and returns a new
one, and the input is never modified. Commands that can't be applied
(unknown building type, unknown building id, not enough credits) return
an unchanged copy rather than raising; the caller can't tell the
failures apart.

Rates in the data files are per day. A day is ``ticks_per_day`` ticks at
normal speed, so one tick applies ``rate / (ticks_per_day / speed)``.
Speed scales simulated time per tick; it never changes how often ticks
happen.
"""
import logging
import math
import random

from planet_tycoon.colony import (
    Building, BuildingType, LIFE_SUPPORT, Resource, STOCKPILED_RESOURCES, initial_state
)
from planet_tycoon.game_data_loader import get_game_data_loader

logger = logging.getLogger(__name__)


def _loader(data_loader):
    return data_loader if data_loader is not None else get_game_data_loader()


def round_half_up(value):
    """Round to the nearest integer with halves going up, as browsers do."""
    return math.floor(value + 0.5)


def energy_balance(state):
    """Return (production, usage) of energy per day.

    Only power plants count towards production. Usage is summed over every
    building, power plants included.
    """
    production = sum(
        b.produces(Resource.ENERGY) for b in state.buildings
        if b.type == BuildingType.POWER_PLANT
    )
    usage = sum(b.energy_usage for b in state.buildings)
    return production, usage


def is_colony_lost(state):
    """True once food, water or oxygen has run out."""
    return any(state.get_resource(resource) <= 0 for resource in LIFE_SUPPORT)


def tick(state, speed, rng=None, data_loader=None):
    """Advance the colony by one tick at the given speed.

    A paused tick (speed 0) returns an unchanged copy. Habitat population
    production is catalog data only: population grows solely through the
    random growth roll, at most one colonist per tick.

    Args:
        state: current ColonyState
        speed: 0 (paused), 1 (normal) or 2 (fast)
        rng: object with a ``random()`` method, defaults to the ``random`` module

    Returns:
        The next ColonyState. Check ``is_colony_lost`` on it for game over.
    """
    if speed < 0:
        raise ValueError(f"Speed cannot be negative: {speed}")
    if speed == 0:
        return state.copy()

    loader = _loader(data_loader)
    rules = loader.get_population_rules()
    rng = rng if rng is not None else random
    divisor = loader.get_ticks_per_day() / speed

    energy_production, energy_usage = energy_balance(state)
    new_state = state.copy()

    for building in state.buildings:
        for resource in STOCKPILED_RESOURCES:
            amount = building.produces(resource)
            if amount:
                new_state.set_resource(resource, new_state.get_resource(resource) + amount / divisor)

    # Upkeep and taxes use the population at the start of the tick
    population = state.population
    for resource, per_capita in rules['upkeep_per_capita'].items():
        new_state.set_resource(resource, new_state.get_resource(resource) - (population * per_capita) / divisor)

    if new_state.food > 0 and new_state.water > 0 and new_state.oxygen > 0:
        growth_rate = rules['growth_chance_per_day'] / divisor
        if rng.random() < growth_rate:
            new_state.population += 1

    new_state.credits += (population * rules['credits_per_capita']) / divisor

    # Energy is a balance, not a stock
    new_state.energy = energy_production - energy_usage

    new_state.food = max(0, new_state.food)
    new_state.water = max(0, new_state.water)
    new_state.oxygen = max(0, new_state.oxygen)
    new_state.energy = max(0, new_state.energy)

    new_state.day = state.day + 1 / divisor
    return new_state


def build(state, building_type, data_loader=None):
    """Buy a new building from the catalog and append it to the colony."""
    loader = _loader(data_loader)
    template = loader.get_building_template(building_type)
    if template is None or state.credits < template['cost']:
        return state.copy()

    new_state = state.copy()
    new_state.credits -= template['cost']
    building_id = new_state.next_building_id(template['type'])
    new_state.buildings.append(Building.from_template(building_id, template))
    logger.debug("Built %s for %s credits", building_id, template['cost'])
    return new_state


def upgrade_cost(building, data_loader=None):
    """Price of the next upgrade: base cost * cost factor * current level."""
    rules = _loader(data_loader).get_upgrade_rules()
    return building.cost * rules['cost_factor'] * building.level


def upgrade(state, building_id, data_loader=None):
    """Upgrade a building one level.

    Production values scale by the production multiplier and energy usage
    by the energy multiplier, rounded after every upgrade. Production keys
    never change.
    """
    loader = _loader(data_loader)
    building = state.get_building(building_id)
    if building is None:
        return state.copy()

    price = upgrade_cost(building, loader)
    if state.credits < price:
        return state.copy()

    rules = loader.get_upgrade_rules()
    new_state = state.copy()
    new_state.credits -= price
    upgraded = new_state.get_building(building_id)
    upgraded.level += 1
    upgraded.production = {
        resource: value * rules['production_multiplier']
        for resource, value in upgraded.production.items()
    }
    upgraded.energy_usage = round_half_up(upgraded.energy_usage * rules['energy_usage_multiplier'])
    logger.debug("Upgraded %s to level %d for %s credits", building_id, upgraded.level, price)
    return new_state


def reset(data_loader=None):
    """Return a brand new starting colony."""
    return initial_state(_loader(data_loader))
