"""Building templates and economic rules."""
import json

import pytest

from planet_tycoon.colony import BuildingType, Resource
from planet_tycoon.config import Config
from planet_tycoon.game_data_loader import GameDataLoader


def test_shipped_data_is_valid(data_loader):
    assert data_loader.validate_data() == []


def test_catalog_lists_every_type_in_order(data_loader):
    catalog = data_loader.get_building_templates()

    assert [t['id'] for t in catalog] == [t.value for t in BuildingType]
    lab = catalog[-1]
    assert lab['name'] == 'Research Lab'
    assert lab['cost'] == 250
    assert lab['production'] == {'research': 10}
    assert lab['energy_usage'] == 20


def test_templates_are_copies(data_loader):
    template = data_loader.get_building_template('habitat')
    template['production']['population'] = 1000
    template['cost'] = 1

    fresh = data_loader.get_building_template(BuildingType.HABITAT)
    assert fresh['production'] == {'population': 10}
    assert fresh['cost'] == 100


def test_unknown_template(data_loader):
    assert data_loader.get_building_template('spaceport') is None


def test_rules_from_json(data_loader):
    rules = data_loader.get_population_rules()

    assert rules['upkeep_per_capita'] == {Resource.FOOD: 0.5, Resource.WATER: 0.3, Resource.OXYGEN: 0.2}
    assert rules['credits_per_capita'] == 0.5
    assert rules['growth_chance_per_day'] == 0.01
    assert data_loader.get_upgrade_rules() == {
        'cost_factor': 0.75,
        'production_multiplier': 1.5,
        'energy_usage_multiplier': 1.2,
    }
    assert data_loader.get_ticks_per_day() == 10


def _write_buildings(data_dir, buildings):
    (data_dir / 'buildings.json').write_text(json.dumps({'buildings': buildings}))


def test_missing_rules_fall_back_to_config(tmp_path, data_loader):
    _write_buildings(tmp_path, data_loader.load_buildings())
    loader = GameDataLoader(tmp_path)

    assert loader.get_ticks_per_day() == Config.TICKS_PER_DAY
    assert loader.get_upgrade_rules()['cost_factor'] == Config.UPGRADE_COST_FACTOR
    start = loader.get_initial_colony()
    assert start['credits'] == Config.INITIAL_CREDITS
    assert start['buildings'] == list(Config.STARTER_BUILDINGS)
    assert loader.validate_data() == []


def test_validation_reports_bad_templates(tmp_path):
    _write_buildings(tmp_path, {
        'farm': {'name': 'Farm', 'type': 'farm', 'cost': -5, 'production': {'gold': 3}, 'energy_usage': 1},
        'mine': {'name': 'Mine', 'type': 'lab', 'cost': 10, 'production': {}, 'energy_usage': -1},
    })
    errors = GameDataLoader(tmp_path).validate_data()

    assert "Missing building template: habitat" in errors
    assert "Building template farm has negative cost" in errors
    assert "Building template farm produces unknown resources: ['gold']" in errors
    assert "Building template mine has type lab" in errors
    assert "Building template mine has negative energy usage" in errors
    assert "Starter building has no template: powerPlant" in errors


@pytest.mark.parametrize('building_type', [['farm'], {'farm': 1}, None, 3])
def test_template_lookup_with_non_string_type(data_loader, building_type):
    assert data_loader.get_building_template(building_type) is None
