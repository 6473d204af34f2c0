"""Game data loader for loading JSON configuration files."""
import copy
import json
from pathlib import Path

from planet_tycoon.colony import BuildingType, Resource
from planet_tycoon.config import Config


class GameDataLoader:
    """Loads and caches game data from JSON files."""

    def __init__(self, data_dir=None):
        """Initialize the data loader."""
        if data_dir is None:
            self.data_dir = Path(__file__).parent / 'game_data'
        else:
            self.data_dir = Path(data_dir)

        self._buildings = None
        self._economic_rules = None

    def load_buildings(self):
        """Load building templates, keyed by building type."""
        if self._buildings is None:
            file_path = self.data_dir / 'buildings.json'
            with open(file_path, 'r') as f:
                data = json.load(f)
                self._buildings = data['buildings']
        return self._buildings

    def get_building_template(self, building_type):
        """Get a copy of the template for a building type, or None if unknown.

        Callers get their own copy so the template table can't be mutated
        through a built or upgraded building.
        """
        if isinstance(building_type, BuildingType):
            building_type = building_type.value
        if not isinstance(building_type, str):
            return None
        template = self.load_buildings().get(building_type)
        if template is None:
            return None
        return copy.deepcopy(template)

    def get_building_templates(self):
        """Get copies of all building templates in catalog order."""
        return [
            {'id': building_type, **copy.deepcopy(template)}
            for building_type, template in self.load_buildings().items()
        ]

    def load_economic_rules(self):
        """Load economic rules data."""
        if self._economic_rules is None:
            file_path = self.data_dir / 'economic_rules.json'
            if file_path.exists():
                with open(file_path, 'r') as f:
                    self._economic_rules = json.load(f)
            else:
                self._economic_rules = {}
        return self._economic_rules

    def get_ticks_per_day(self):
        rules = self.load_economic_rules()
        return rules.get('time', {}).get('ticks_per_day', Config.TICKS_PER_DAY)

    def get_population_rules(self):
        """Get per-capita upkeep, credit yield and growth chance."""
        population = self.load_economic_rules().get('population', {})
        upkeep = population.get('upkeep_per_capita', {})
        return {
            'upkeep_per_capita': {
                Resource.FOOD: upkeep.get('food', Config.FOOD_UPKEEP_PER_CAPITA),
                Resource.WATER: upkeep.get('water', Config.WATER_UPKEEP_PER_CAPITA),
                Resource.OXYGEN: upkeep.get('oxygen', Config.OXYGEN_UPKEEP_PER_CAPITA),
            },
            'credits_per_capita': population.get('credits_per_capita', Config.CREDITS_PER_CAPITA),
            'growth_chance_per_day': population.get('growth_chance_per_day', Config.GROWTH_CHANCE_PER_DAY),
        }

    def get_upgrade_rules(self):
        upgrades = self.load_economic_rules().get('upgrades', {})
        return {
            'cost_factor': upgrades.get('cost_factor', Config.UPGRADE_COST_FACTOR),
            'production_multiplier': upgrades.get('production_multiplier', Config.UPGRADE_PRODUCTION_MULTIPLIER),
            'energy_usage_multiplier': upgrades.get('energy_usage_multiplier', Config.UPGRADE_ENERGY_USAGE_MULTIPLIER),
        }

    def get_initial_colony(self):
        """Get starting resources and starter building types."""
        start = self.load_economic_rules().get('initial_colony', {})
        return {
            'credits': start.get('credits', Config.INITIAL_CREDITS),
            'population': start.get('population', Config.INITIAL_POPULATION),
            'food': start.get('food', Config.INITIAL_FOOD),
            'water': start.get('water', Config.INITIAL_WATER),
            'oxygen': start.get('oxygen', Config.INITIAL_OXYGEN),
            'energy': start.get('energy', Config.INITIAL_ENERGY),
            'minerals': start.get('minerals', Config.INITIAL_MINERALS),
            'research': start.get('research', Config.INITIAL_RESEARCH),
            'day': start.get('day', Config.INITIAL_DAY),
            'buildings': list(start.get('buildings', Config.STARTER_BUILDINGS)),
        }

    def validate_data(self):
        """Validate loaded data structure."""
        errors = []

        buildings = self.load_buildings()
        if not buildings:
            errors.append("No buildings loaded")

        resource_names = {r.value for r in Resource}
        for building_type in BuildingType:
            if building_type.value not in buildings:
                errors.append(f"Missing building template: {building_type.value}")

        for key, template in buildings.items():
            if template.get('type') != key:
                errors.append(f"Building template {key} has type {template.get('type')}")
            if template.get('cost', 0) < 0:
                errors.append(f"Building template {key} has negative cost")
            if template.get('energy_usage', 0) < 0:
                errors.append(f"Building template {key} has negative energy usage")
            unknown = set(template.get('production', {})) - resource_names
            if unknown:
                errors.append(f"Building template {key} produces unknown resources: {sorted(unknown)}")

        for building_type in self.get_initial_colony()['buildings']:
            if building_type not in buildings:
                errors.append(f"Starter building has no template: {building_type}")

        if self.get_ticks_per_day() <= 0:
            errors.append("ticks_per_day must be positive")

        return errors


# Global instance
_game_data_loader = None


def get_game_data_loader(data_dir=None):
    """Get or create the global game data loader instance."""
    global _game_data_loader
    if _game_data_loader is None:
        _game_data_loader = GameDataLoader(data_dir)
    return _game_data_loader
