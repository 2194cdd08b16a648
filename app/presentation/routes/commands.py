"""
JSON command routes
Thin dispatch from HTTP requests to the EntityService. This is the only
place errors are turned into strings for the outside world.
"""

from flask import Blueprint, request, jsonify

from app import get_entity_service
from app.buisness.core.errors import InventoryError, InvalidInput
from app.services.core.entity_service import UNSET
from app.utils.logger import get_logger

logger = get_logger("inventory.routes.commands")

commands_bp = Blueprint('commands', __name__)

ERROR_STATUS = {
    'NotFound': 404,
    'IntegrityViolation': 409,
    'InvalidInput': 400,
    'DeadlineExceeded': 504,
    'StorageError': 500,
}


@commands_bp.errorhandler(InventoryError)
def handle_inventory_error(error):
    """Every service failure becomes {"success": false, "error": "<message>"}"""
    return jsonify({"success": False, "error": str(error)}), ERROR_STATUS.get(error.kind, 500)


def _ok(data, status=200):
    return jsonify({"success": True, "data": data}), status


def _payload():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidInput("Request body must be a JSON object", reason='InvalidBody')
    return data


def _timeout():
    """Per-request deadline in seconds (?timeout=), else the service default"""
    value = request.args.get('timeout')
    if value is None:
        return None
    try:
        timeout = float(value)
    except ValueError:
        raise InvalidInput(f"Invalid timeout: {value}", reason='InvalidTimeout') from None
    if timeout < 0:
        raise InvalidInput(f"Invalid timeout: {value}", reason='InvalidTimeout')
    return timeout


# Assets

@commands_bp.route('/assets', methods=['GET'])
def list_assets():
    return _ok(get_entity_service().list_assets(timeout=_timeout()))


@commands_bp.route('/assets/<asset_id>', methods=['GET'])
def get_asset(asset_id):
    return _ok(get_entity_service().get_asset(asset_id, timeout=_timeout()))


@commands_bp.route('/assets', methods=['POST'])
def create_asset():
    data = _payload()
    asset = get_entity_service().create_asset(
        name=data.get('name'),
        asset_type=data.get('type'),
        location_id=data.get('location_id'),
        status=data.get('status') or 'AVAILABLE',
        project_id=data.get('project_id'),
        assigned_to_id=data.get('assigned_to_id'),
        serial_number=data.get('serial_number'),
        barcode=data.get('barcode'),
        notes=data.get('notes'),
        timeout=_timeout(),
    )
    return _ok(asset, 201)


@commands_bp.route('/assets/<asset_id>', methods=['PATCH'])
def update_asset(asset_id):
    """Reassign location, project and/or assignee; null clears project and assignee"""
    data = _payload()
    fields = {key: data[key] for key in ('location_id', 'project_id', 'assigned_to_id') if key in data}
    if not fields:
        raise InvalidInput("Nothing to update", reason='EmptyUpdate')

    asset = get_entity_service().update_asset(asset_id, timeout=_timeout(), **fields)
    return _ok(asset)


@commands_bp.route('/assets/<asset_id>', methods=['DELETE'])
def delete_asset(asset_id):
    return _ok(get_entity_service().delete_asset(asset_id, timeout=_timeout()))


# Consumables

@commands_bp.route('/consumables', methods=['GET'])
def list_consumables():
    return _ok(get_entity_service().list_consumables(timeout=_timeout()))


@commands_bp.route('/consumables/<consumable_id>', methods=['GET'])
def get_consumable(consumable_id):
    return _ok(get_entity_service().get_consumable(consumable_id, timeout=_timeout()))


@commands_bp.route('/consumables', methods=['POST'])
def create_consumable():
    data = _payload()
    consumable = get_entity_service().create_consumable(
        name=data.get('name'),
        location_id=data.get('location_id'),
        quantity=data.get('quantity', 0),
        reorder_level=data.get('reorder_level', 0),
        timeout=_timeout(),
    )
    return _ok(consumable, 201)


@commands_bp.route('/consumables/<consumable_id>/quantity', methods=['PUT'])
def set_consumable_quantity(consumable_id):
    data = _payload()
    consumable = get_entity_service().set_consumable_quantity(
        consumable_id, data.get('quantity'), timeout=_timeout()
    )
    return _ok(consumable)


@commands_bp.route('/consumables/<consumable_id>', methods=['DELETE'])
def delete_consumable(consumable_id):
    return _ok(get_entity_service().delete_consumable(consumable_id, timeout=_timeout()))


# Locations

@commands_bp.route('/locations', methods=['GET'])
def list_locations():
    return _ok(get_entity_service().list_locations(timeout=_timeout()))


@commands_bp.route('/locations', methods=['POST'])
def create_location():
    data = _payload()
    location = get_entity_service().create_location(
        name=data.get('name'),
        kind=data.get('type'),
        parent_id=data.get('parent_id'),
        description=data.get('description'),
        display_order=data.get('display_order') or 0,
        timeout=_timeout(),
    )
    return _ok(location, 201)


@commands_bp.route('/locations/<location_id>', methods=['PATCH'])
def update_location(location_id):
    data = _payload()
    location = get_entity_service().update_location(
        location_id,
        name=data.get('name'),
        kind=data.get('type'),
        parent_id=data['parent_id'] if 'parent_id' in data else UNSET,
        description=data['description'] if 'description' in data else UNSET,
        display_order=data.get('display_order'),
        timeout=_timeout(),
    )
    return _ok(location)


@commands_bp.route('/locations/<location_id>', methods=['DELETE'])
def delete_location(location_id):
    return _ok(get_entity_service().delete_location(location_id, timeout=_timeout()))


# Projects

@commands_bp.route('/projects', methods=['GET'])
def list_projects():
    return _ok(get_entity_service().list_projects(timeout=_timeout()))


@commands_bp.route('/projects', methods=['POST'])
def create_project():
    data = _payload()
    project = get_entity_service().create_project(
        name=data.get('name'),
        status=data.get('status') or 'active',
        description=data.get('description'),
        start_date=data.get('start_date'),
        end_date=data.get('end_date'),
        display_order=data.get('display_order') or 0,
        timeout=_timeout(),
    )
    return _ok(project, 201)


@commands_bp.route('/projects/<project_id>', methods=['DELETE'])
def delete_project(project_id):
    return _ok(get_entity_service().delete_project(project_id, timeout=_timeout()))


# Users

@commands_bp.route('/users', methods=['GET'])
def list_users():
    return _ok(get_entity_service().list_users(timeout=_timeout()))


@commands_bp.route('/users', methods=['POST'])
def create_user():
    data = _payload()
    user = get_entity_service().create_user(
        name=data.get('name'),
        email=data.get('email'),
        role=data.get('role') or 'USER',
        timeout=_timeout(),
    )
    return _ok(user, 201)
