"""
Tests for the Integrity Engine checks, run directly against the gateway.
"""

import pytest

from app.buisness.core.deadline import Deadline
from app.buisness.core.errors import DeadlineExceeded, IntegrityViolation, ViolationReason
from app.buisness.core.integrity import Decision


@pytest.fixture
def engine(service):
    return service.integrity


def _ticking_clock(*readings):
    """Clock that returns the given readings in order, then repeats the last one"""
    values = list(readings)

    def clock():
        if len(values) > 1:
            return values.pop(0)
        return values[0]
    return clock


def test_decision_allow_and_deny():
    assert Decision.allow()
    assert Decision.allow().enforce() is None

    denied = Decision.deny(ViolationReason.CONTAINS_ASSETS, 'loc-1')
    assert not denied
    assert denied.reason is ViolationReason.CONTAINS_ASSETS

    with pytest.raises(IntegrityViolation) as exc_info:
        denied.enforce()
    assert exc_info.value.reason is ViolationReason.CONTAINS_ASSETS
    assert str(exc_info.value) == 'Cannot delete location that contains assets'


def test_deny_accepts_reason_value():
    assert Decision.deny('HasChildLocations').reason is ViolationReason.HAS_CHILD_LOCATIONS


def test_leaf_location_can_be_deleted(engine, warehouse):
    _, shelf = warehouse
    assert engine.can_delete_location(shelf['id'])


def test_location_with_children_is_denied(engine, warehouse):
    root, _ = warehouse
    decision = engine.can_delete_location(root['id'])
    assert not decision
    assert decision.reason is ViolationReason.HAS_CHILD_LOCATIONS


def test_location_with_assets_is_denied(engine, service, warehouse):
    _, shelf = warehouse
    service.create_asset('Drill', 'TOOL', shelf['id'])

    decision = engine.can_delete_location(shelf['id'])
    assert decision.reason is ViolationReason.CONTAINS_ASSETS


def test_location_with_consumables_is_denied(engine, service, warehouse):
    _, shelf = warehouse
    service.create_consumable('SDI Cables', shelf['id'], quantity=50)

    decision = engine.can_delete_location(shelf['id'])
    assert decision.reason is ViolationReason.CONTAINS_CONSUMABLES


def test_assets_are_reported_before_consumables(engine, service, warehouse):
    _, shelf = warehouse
    service.create_consumable('SDI Cables', shelf['id'])
    service.create_asset('Drill', 'TOOL', shelf['id'])

    decision = engine.can_delete_location(shelf['id'])
    assert decision.reason is ViolationReason.CONTAINS_ASSETS


def test_children_are_reported_before_assets(engine, service, warehouse):
    """Both conditions hold: the child check runs first"""
    root, _ = warehouse
    service.create_asset('Forklift', 'VEHICLE', root['id'])

    decision = engine.can_delete_location(root['id'])
    assert decision.reason is ViolationReason.HAS_CHILD_LOCATIONS


def test_project_with_assets_is_denied(engine, service, warehouse):
    _, shelf = warehouse
    project = service.create_project('Rollout', 'active')
    assert engine.can_delete_project(project['id'])

    service.create_asset('Laptop', 'COMPUTER', shelf['id'], project_id=project['id'])
    decision = engine.can_delete_project(project['id'])
    assert decision.reason is ViolationReason.HAS_ASSIGNED_ASSETS


def test_attach_to_missing_parent_is_denied(engine):
    decision = engine.can_attach_parent(None, 'no-such-location')
    assert decision.reason is ViolationReason.PARENT_NOT_FOUND


def test_attach_to_existing_parent_is_allowed(engine, warehouse):
    root, shelf = warehouse
    assert engine.can_attach_parent(None, root['id'])
    assert engine.can_attach_parent(None, shelf['id'])


def test_attach_to_self_is_a_cycle(engine, warehouse):
    root, _ = warehouse
    decision = engine.can_attach_parent(root['id'], root['id'])
    assert decision.reason is ViolationReason.PARENT_CYCLE


def test_attach_under_descendant_is_a_cycle(engine, service, warehouse):
    root, shelf = warehouse
    bin_ = service.create_location('Bin 3', 'BIN', parent_id=shelf['id'])

    decision = engine.can_attach_parent(root['id'], bin_['id'])
    assert decision.reason is ViolationReason.PARENT_CYCLE


def test_attach_under_unrelated_branch_is_allowed(engine, service, warehouse):
    _, shelf = warehouse
    annex = service.create_location('Annex', 'BUILDING')
    assert engine.can_attach_parent(shelf['id'], annex['id'])


def test_deadline_checked_between_round_trips(engine, warehouse):
    """The budget runs out after the child check: the asset check never runs"""
    _, shelf = warehouse
    deadline = Deadline(1.0, clock=_ticking_clock(0.0, 0.5, 2.0))

    with pytest.raises(DeadlineExceeded) as exc_info:
        engine.can_delete_location(shelf['id'], deadline)
    assert exc_info.value.step == 'contained asset check'


def test_asset_delete_is_always_allowed(engine, service, warehouse):
    _, shelf = warehouse
    asset = service.create_asset('Drill', 'TOOL', shelf['id'])
    assert engine.can_delete_asset(asset['id'])
