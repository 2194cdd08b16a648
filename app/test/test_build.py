"""
Database build and demo data tests
"""

import pytest

from app.build import build_database, insert_demo_data, is_empty
from app.buisness.core.errors import IntegrityViolation, ViolationReason


def test_build_without_seed_leaves_database_empty(app):
    build_database(seed=False)
    assert is_empty()


def test_seed_data(app, service):
    build_database(seed=True)

    locations = {loc['name']: loc for loc in service.list_locations()}
    assert locations['Equipment Room']['parent_location_id'] == locations['Main Studio']['id']

    assets = {a['name']: a for a in service.list_assets()}
    assert assets['Sony FX6']['location']['name'] == 'Equipment Room'

    camera = service.get_asset(assets['Sony FX6']['id'])
    assert [t['type'] for t in camera['transactions']] == ['CHECK_OUT']
    computer = service.get_asset(assets['Edit Station 1']['id'])
    assert computer['maintenance_logs'][0]['cost'] == 150.0


def test_seed_is_not_repeated(app, service):
    build_database(seed=True)
    build_database(seed=True)
    assert len(service.list_locations()) == 2


def test_seeded_studio_cannot_be_deleted(app, service):
    ids = insert_demo_data()

    with pytest.raises(IntegrityViolation) as exc_info:
        service.delete_location(ids['main_studio'])
    assert exc_info.value.reason is ViolationReason.HAS_CHILD_LOCATIONS


def test_foreign_keys_enforced(app, db):
    with db.engine.connect() as connection:
        assert connection.exec_driver_sql('PRAGMA foreign_keys').scalar() == 1


def test_seeded_hierarchy_survives_to_teardown(app, service):
    """Parent and child rows are left in place; the fixture must still tear down"""
    ids = insert_demo_data()
    location = service.get_location(ids['equipment_room'])
    assert location['parent_location_id'] == ids['main_studio']


def test_seeded_consumables(app, service):
    ids = insert_demo_data()

    consumables = {c['name']: c for c in service.list_consumables()}
    assert consumables['SDI Cables']['quantity'] == 50
    assert consumables['SDI Cables']['reorder_level'] == 10
    assert consumables['XLR Cables']['location'] == {'id': ids['equipment_room'], 'name': 'Equipment Room'}
    assert not consumables['XLR Cables']['low_stock']
