"""Colony data model: resources, buildings and the colony state aggregate."""
import copy
from enum import Enum


class Resource(Enum):
    """Resource kinds a building can produce."""
    POPULATION = "population"
    FOOD = "food"
    WATER = "water"
    OXYGEN = "oxygen"
    ENERGY = "energy"
    MINERALS = "minerals"
    RESEARCH = "research"


class BuildingType(Enum):
    """Building types available in the catalog."""
    HABITAT = "habitat"
    FARM = "farm"
    WATER_PLANT = "waterPlant"
    OXYGEN_GENERATOR = "oxygenGenerator"
    POWER_PLANT = "powerPlant"
    MINE = "mine"
    LAB = "lab"


# Resources added to the colony stock by building production each tick.
# Population and energy are handled separately by the tick.
STOCKPILED_RESOURCES = (
    Resource.FOOD,
    Resource.WATER,
    Resource.OXYGEN,
    Resource.MINERALS,
    Resource.RESEARCH,
)

# Life support: clamped at zero every tick, and the colony is lost when any hits zero.
LIFE_SUPPORT = (Resource.FOOD, Resource.WATER, Resource.OXYGEN)


class Building:
    """A constructed building.

    ``cost`` is the base cost the building was bought at. Upgrades never
    change it, so upgrade prices grow linearly with level.
    """

    def __init__(self, id, name, type, level=1, cost=0, production=None, energy_usage=0):
        self.id = id
        self.name = name
        self.type = BuildingType(type)
        self.level = level
        self.cost = cost
        self.production = {Resource(key): value for key, value in (production or {}).items()}
        self.energy_usage = energy_usage

    @classmethod
    def from_template(cls, building_id, template):
        """Clone a building template under a new id."""
        return cls(
            id=building_id,
            name=template['name'],
            type=template['type'],
            level=template.get('level', 1),
            cost=template['cost'],
            production=template.get('production', {}),
            energy_usage=template.get('energy_usage', 0)
        )

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=data['id'],
            name=data['name'],
            type=data['type'],
            level=data.get('level', 1),
            cost=data.get('cost', 0),
            production=data.get('production', {}),
            energy_usage=data.get('energy_usage', 0)
        )

    def produces(self, resource):
        return self.production.get(resource, 0)

    def copy(self):
        return Building(
            id=self.id,
            name=self.name,
            type=self.type,
            level=self.level,
            cost=self.cost,
            production=dict(self.production),
            energy_usage=self.energy_usage
        )

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type.value,
            'level': self.level,
            'cost': self.cost,
            'production': {resource.value: value for resource, value in self.production.items()},
            'energy_usage': self.energy_usage
        }

    def __eq__(self, other):
        if not isinstance(other, Building):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Building(id={self.id!r}, type={self.type.value!r}, level={self.level})"


class ColonyState:
    """Everything the simulation knows about one colony.

    Food, water, oxygen and energy never go below zero after a tick.
    Population and day are continuous; the front end floors them for display.
    """

    def __init__(self, credits=0.0, population=0.0, food=0.0, water=0.0, oxygen=0.0,
                 energy=0.0, minerals=0.0, research=0.0, day=1.0, buildings=None):
        self.credits = credits
        self.population = population
        self.food = food
        self.water = water
        self.oxygen = oxygen
        self.energy = energy
        self.minerals = minerals
        self.research = research
        self.day = day
        self.buildings = list(buildings or [])

    @classmethod
    def from_dict(cls, data):
        return cls(
            credits=data['credits'],
            population=data['population'],
            food=data['food'],
            water=data['water'],
            oxygen=data['oxygen'],
            energy=data['energy'],
            minerals=data['minerals'],
            research=data['research'],
            day=data['day'],
            buildings=[Building.from_dict(b) for b in data.get('buildings', [])]
        )

    def get_resource(self, resource):
        return getattr(self, Resource(resource).value)

    def set_resource(self, resource, value):
        setattr(self, Resource(resource).value, value)

    def get_building(self, building_id):
        for building in self.buildings:
            if building.id == building_id:
                return building
        return None

    def next_building_id(self, building_type):
        # Buildings are never removed, so the running count keeps ids unique.
        return f"{BuildingType(building_type).value}-{len(self.buildings) + 1}"

    def copy(self):
        clone = copy.copy(self)
        clone.buildings = [b.copy() for b in self.buildings]
        return clone

    def to_dict(self):
        """Convert to dictionary."""
        return {
            'credits': self.credits,
            'population': self.population,
            'food': self.food,
            'water': self.water,
            'oxygen': self.oxygen,
            'energy': self.energy,
            'minerals': self.minerals,
            'research': self.research,
            'day': self.day,
            'buildings': [b.to_dict() for b in self.buildings]
        }

    def __eq__(self, other):
        if not isinstance(other, ColonyState):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"ColonyState(day={self.day}, population={self.population}, "
                f"credits={self.credits}, buildings={len(self.buildings)})")


def initial_state(data_loader):
    """Create the starting colony from the economic rules and building templates."""
    start = data_loader.get_initial_colony()
    state = ColonyState(
        credits=start['credits'],
        population=start['population'],
        food=start['food'],
        water=start['water'],
        oxygen=start['oxygen'],
        energy=start['energy'],
        minerals=start['minerals'],
        research=start['research'],
        day=start['day']
    )
    # Starter buildings are numbered per type: habitat-1, powerPlant-1
    for building_type in start['buildings']:
        template = data_loader.get_building_template(building_type)
        building_id = f"{template['type']}-1"
        state.buildings.append(Building.from_template(building_id, template))
    return state
