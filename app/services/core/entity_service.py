"""
Entity Service

The only component callers interact with. Each operation:

1. opens one unit of work on the persistence gateway,
2. runs the Integrity Engine checks it needs,
3. performs the mutation,
4. shapes the result into a plain dictionary snapshot.

Failures are raised as InventoryError subclasses (NotFound,
IntegrityViolation, InvalidInput, StorageError, DeadlineExceeded); nothing is
retried. Every operation takes an optional ``timeout`` in seconds, falling
back to the service default.
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.buisness.core.deadline import Deadline
from app.buisness.core.errors import InventoryError, InvalidDate, InvalidInput, NotFound
from app.buisness.core.integrity import IntegrityEngine
from app.data.core.asset import Asset
from app.data.core.consumable import Consumable
from app.data.core.location import Location
from app.data.core.maintenance_log import MaintenanceLog
from app.data.core.project import Project
from app.data.core.transaction import Transaction
from app.data.core.user import User
from app.utils.logger import get_logger

logger = get_logger("inventory.services.entity")

# Marks an optional argument the caller did not pass (None is a real value for parent_id)
UNSET = object()


def parse_timestamp(value, field: str) -> Optional[datetime]:
    """
    Parse a caller-supplied timestamp.

    Accepts None, a datetime, or ISO-8601 / RFC-3339 text ("2024-01-15",
    "2024-01-15T09:30:00Z", "2024-01-15T09:30:00+02:00"). Aware values are
    converted to naive UTC, which is how timestamps are stored.

    Raises:
        InvalidDate: If the value cannot be parsed
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(('Z', 'z')):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise InvalidDate(field, value) from None
    else:
        raise InvalidDate(field, value)

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _require_text(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidInput(f'{field} is required', reason='MissingField', detail=field)
    return value.strip()


def _require_count(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInput(f'{field} must be a non-negative integer', reason='InvalidCount', detail=field)
    return value


class EntityService:
    """
    Create / read / update / delete operations for locations, projects,
    assets, consumables and users, guarded by the Integrity Engine.
    """

    def __init__(self, gateway, integrity: Optional[IntegrityEngine] = None,
                 default_timeout: Optional[float] = None):
        """
        Args:
            gateway: Persistence gateway (constructed once at startup)
            integrity: Integrity engine; built over the same gateway when omitted
            default_timeout: Seconds allowed per operation when the caller passes none
        """
        self.gateway = gateway
        self.integrity = integrity or IntegrityEngine(gateway)
        self.default_timeout = default_timeout

    @contextmanager
    def _operation(self, name: str, timeout: Optional[float]):
        """One unit of work with its deadline; failures are logged once here"""
        deadline = Deadline(timeout if timeout is not None else self.default_timeout)
        try:
            with self.gateway.transaction(deadline):
                yield deadline
        except InventoryError as e:
            logger.error(f"[{name}] {e.kind}: {e}")
            raise

    def _get_or_raise(self, model, record_id, deadline: Deadline, for_update: bool = False):
        deadline.check(f"{model.__name__.lower()} lookup")
        record = self.gateway.find_by_id(model, record_id, for_update=for_update)
        if record is None:
            raise NotFound(model.__name__, record_id)
        return record

    # ------------------------------------------------------------------
    # Locations
    # ------------------------------------------------------------------

    def list_locations(self, timeout: Optional[float] = None) -> List[Dict[str, Any]]:
        with self._operation("list_locations", timeout) as deadline:
            deadline.check("location query")
            locations = self.gateway.find_all(Location, order_by=(Location.display_order, Location.name))
            result = [location.to_dict() for location in locations]
        logger.info(f"[list_locations] Fetched {len(result)} locations")
        return result

    def get_location(self, location_id: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        with self._operation("get_location", timeout) as deadline:
            return self._get_or_raise(Location, location_id, deadline).to_dict()

    def create_location(self, name: str, kind: str, parent_id: Optional[str] = None,
                        description: Optional[str] = None, display_order: int = 0,
                        timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Create a location, optionally under an existing parent.

        Names are not unique. The parent, when given, must exist.

        Raises:
            IntegrityViolation(ParentNotFound): If parent_id does not resolve
        """
        name = _require_text(name, 'name')
        kind = _require_text(kind, 'type')
        logger.info(f"[create_location] Creating location: {name} ({kind}) parent={parent_id}")

        with self._operation("create_location", timeout) as deadline:
            if parent_id is not None:
                self.integrity.can_attach_parent(None, parent_id, deadline).enforce()

            deadline.check("location insert")
            location = self.gateway.insert(
                Location,
                name=name,
                kind=kind,
                description=description,
                parent_location_id=parent_id,
                display_order=display_order,
            )
            result = location.to_dict()

        logger.info(f"[create_location] Location created: {result['id']}")
        return result

    def update_location(self, location_id: str, name: Optional[str] = None, kind: Optional[str] = None,
                        parent_id=UNSET, description=UNSET, display_order: Optional[int] = None,
                        timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Rename, reclassify or reparent a location.

        parent_id=None makes the location a root; leaving it out keeps the
        current parent.

        Raises:
            NotFound: If the location does not exist
            IntegrityViolation(ParentNotFound | ParentCycle): If the new parent is
                missing, or is the location itself or one of its descendants
        """
        changes = {}
        if name is not None:
            changes['name'] = _require_text(name, 'name')
        if kind is not None:
            changes['kind'] = _require_text(kind, 'type')
        if description is not UNSET:
            changes['description'] = description
        if display_order is not None:
            changes['display_order'] = display_order

        with self._operation("update_location", timeout) as deadline:
            location = self._get_or_raise(Location, location_id, deadline, for_update=True)

            if parent_id is not UNSET:
                if parent_id is not None:
                    self.integrity.can_attach_parent(location_id, parent_id, deadline).enforce()
                changes['parent_location_id'] = parent_id

            deadline.check("location update")
            self.gateway.update(location, **changes)
            result = location.to_dict()

        logger.info(f"[update_location] Location updated: {location_id} ({', '.join(sorted(changes)) or 'no changes'})")
        return result

    def delete_location(self, location_id: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Delete an empty location and return its last state.

        Raises:
            NotFound: If the location does not exist
            IntegrityViolation(HasChildLocations): If any location has it as parent
            IntegrityViolation(ContainsAssets): If any asset is placed in it
            IntegrityViolation(ContainsConsumables): If any consumable is stored in it
        """
        logger.info(f"[delete_location] Deleting location: {location_id}")

        with self._operation("delete_location", timeout) as deadline:
            location = self._get_or_raise(Location, location_id, deadline, for_update=True)
            self.integrity.can_delete_location(location_id, deadline).enforce()

            snapshot = location.to_dict()
            deadline.check("location delete")
            self.gateway.delete(Location, location_id)

        logger.info(f"[delete_location] Location deleted: {location_id}")
        return snapshot

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def list_projects(self, timeout: Optional[float] = None) -> List[Dict[str, Any]]:
        with self._operation("list_projects", timeout) as deadline:
            deadline.check("project query")
            projects = self.gateway.find_all(Project, order_by=(Project.display_order, Project.name))
            result = [project.to_dict() for project in projects]
        logger.info(f"[list_projects] Fetched {len(result)} projects")
        return result

    def get_project(self, project_id: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        with self._operation("get_project", timeout) as deadline:
            return self._get_or_raise(Project, project_id, deadline).to_dict()

    def create_project(self, name: str, status: str = 'active', description: Optional[str] = None,
                       start_date=None, end_date=None, display_order: int = 0,
                       timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Create a project. No cross-entity checks apply.

        Raises:
            InvalidInput(InvalidDate): If start_date or end_date cannot be parsed
        """
        name = _require_text(name, 'name')
        status = _require_text(status, 'status')
        start = parse_timestamp(start_date, 'start_date')
        end = parse_timestamp(end_date, 'end_date')
        logger.info(f"[create_project] Creating project: {name} ({status})")

        with self._operation("create_project", timeout) as deadline:
            deadline.check("project insert")
            project = self.gateway.insert(
                Project,
                name=name,
                status=status,
                description=description,
                start_date=start,
                end_date=end,
                display_order=display_order,
            )
            result = project.to_dict()

        logger.info(f"[create_project] Project created: {result['id']}")
        return result

    def delete_project(self, project_id: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Delete a project that no asset is assigned to.

        Raises:
            NotFound: If the project does not exist
            IntegrityViolation(HasAssignedAssets): If any asset references it
        """
        logger.info(f"[delete_project] Deleting project: {project_id}")

        with self._operation("delete_project", timeout) as deadline:
            project = self._get_or_raise(Project, project_id, deadline, for_update=True)
            self.integrity.can_delete_project(project_id, deadline).enforce()

            snapshot = project.to_dict()
            deadline.check("project delete")
            self.gateway.delete(Project, project_id)

        logger.info(f"[delete_project] Project deleted: {project_id}")
        return snapshot

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------

    def list_assets(self, timeout: Optional[float] = None) -> List[Dict[str, Any]]:
        """All assets with their location and assignee resolved. Re-queries on every call."""
        with self._operation("list_assets", timeout) as deadline:
            deadline.check("asset query")
            assets = self.gateway.find_all(Asset, order_by=Asset.name)
            result = [asset.to_summary() for asset in assets]
        logger.info(f"[list_assets] Fetched {len(result)} assets")
        return result

    def get_asset(self, asset_id: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        One asset with location, assignee, project and its transaction and
        maintenance history.

        Raises:
            NotFound: If the asset does not exist ("Asset not found")
        """
        with self._operation("get_asset", timeout) as deadline:
            result = self._get_or_raise(Asset, asset_id, deadline).to_detail()
        logger.info(f"[get_asset] Asset fetched: {asset_id}")
        return result

    def create_asset(self, name: str, asset_type: str, location_id: str, status: str = 'AVAILABLE',
                     project_id: Optional[str] = None, assigned_to_id: Optional[str] = None,
                     serial_number: Optional[str] = None, barcode: Optional[str] = None,
                     notes: Optional[str] = None, timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Create an asset in a location.

        References are not re-validated here: the database foreign keys
        reject a missing location, project or assignee.

        Raises:
            StorageError: If a reference does not resolve
        """
        name = _require_text(name, 'name')
        asset_type = _require_text(asset_type, 'type')
        location_id = _require_text(location_id, 'location_id')
        logger.info(f"[create_asset] Creating asset: {name} in location {location_id}")

        with self._operation("create_asset", timeout) as deadline:
            deadline.check("asset insert")
            asset = self.gateway.insert(
                Asset,
                name=name,
                asset_type=asset_type,
                status=status,
                location_id=location_id,
                project_id=project_id,
                assigned_to_id=assigned_to_id,
                serial_number=serial_number,
                barcode=barcode,
                notes=notes,
            )
            result = asset.to_summary()

        logger.info(f"[create_asset] Asset created: {result['id']}")
        return result

    def update_asset(self, asset_id: str, location_id=UNSET, project_id=UNSET, assigned_to_id=UNSET,
                     timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Reassign an asset's location, project and/or assignee in one unit of work.

        Arguments left out are unchanged. project_id=None unassigns the asset
        from its project, assigned_to_id=None clears the assignee; every
        asset must keep a location.

        Raises:
            NotFound: If the asset or any new reference does not exist
            InvalidInput: If location_id is None
        """
        changes = {}

        with self._operation("update_asset", timeout) as deadline:
            asset = self._get_or_raise(Asset, asset_id, deadline, for_update=True)

            if location_id is not UNSET:
                if location_id is None:
                    raise InvalidInput('location_id is required', reason='MissingField', detail='location_id')
                self._get_or_raise(Location, location_id, deadline)
                changes['location_id'] = location_id
            if project_id is not UNSET:
                if project_id is not None:
                    self._get_or_raise(Project, project_id, deadline)
                changes['project_id'] = project_id
            if assigned_to_id is not UNSET:
                if assigned_to_id is not None:
                    self._get_or_raise(User, assigned_to_id, deadline)
                changes['assigned_to_id'] = assigned_to_id

            deadline.check("asset update")
            self.gateway.update(asset, **changes)
            result = asset.to_summary()

        logger.info(f"[update_asset] Asset updated: {asset_id} ({', '.join(sorted(changes)) or 'no changes'})")
        return result

    def move_asset(self, asset_id: str, location_id: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        """Place an asset in another location. The target must exist."""
        return self.update_asset(asset_id, location_id=location_id, timeout=timeout)

    def assign_asset_project(self, asset_id: str, project_id: Optional[str],
                             timeout: Optional[float] = None) -> Dict[str, Any]:
        """Assign an asset to a project, or unassign it with project_id=None"""
        return self.update_asset(asset_id, project_id=project_id, timeout=timeout)

    def assign_asset_user(self, asset_id: str, user_id: Optional[str],
                          timeout: Optional[float] = None) -> Dict[str, Any]:
        """Set or clear (user_id=None) the asset's assignee"""
        return self.update_asset(asset_id, assigned_to_id=user_id, timeout=timeout)

    def delete_asset(self, asset_id: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        """Delete an asset together with its history and return its last state"""
        logger.info(f"[delete_asset] Deleting asset: {asset_id}")

        with self._operation("delete_asset", timeout) as deadline:
            asset = self._get_or_raise(Asset, asset_id, deadline, for_update=True)
            self.integrity.can_delete_asset(asset_id, deadline).enforce()

            snapshot = asset.to_detail()
            deadline.check("asset delete")
            self.gateway.delete(Asset, asset_id)

        logger.info(f"[delete_asset] Asset deleted: {asset_id}")
        return snapshot

    # ------------------------------------------------------------------
    # Consumables
    # ------------------------------------------------------------------

    def list_consumables(self, timeout: Optional[float] = None) -> List[Dict[str, Any]]:
        with self._operation("list_consumables", timeout) as deadline:
            deadline.check("consumable query")
            consumables = self.gateway.find_all(Consumable, order_by=Consumable.name)
            result = [consumable.to_summary() for consumable in consumables]
        logger.info(f"[list_consumables] Fetched {len(result)} consumables")
        return result

    def get_consumable(self, consumable_id: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        with self._operation("get_consumable", timeout) as deadline:
            return self._get_or_raise(Consumable, consumable_id, deadline).to_summary()

    def create_consumable(self, name: str, location_id: str, quantity: int = 0, reorder_level: int = 0,
                          timeout: Optional[float] = None) -> Dict[str, Any]:
        """
        Stock a consumable in a location.

        As with assets, the location is not looked up first: the foreign key
        rejects a missing one.

        Raises:
            InvalidInput: If quantity or reorder_level is not a non-negative integer
            StorageError: If location_id does not resolve
        """
        name = _require_text(name, 'name')
        location_id = _require_text(location_id, 'location_id')
        quantity = _require_count(quantity, 'quantity')
        reorder_level = _require_count(reorder_level, 'reorder_level')
        logger.info(f"[create_consumable] Creating consumable: {name} x{quantity} in location {location_id}")

        with self._operation("create_consumable", timeout) as deadline:
            deadline.check("consumable insert")
            consumable = self.gateway.insert(
                Consumable,
                name=name,
                location_id=location_id,
                quantity=quantity,
                reorder_level=reorder_level,
            )
            result = consumable.to_summary()

        logger.info(f"[create_consumable] Consumable created: {result['id']}")
        return result

    def set_consumable_quantity(self, consumable_id: str, quantity: int,
                                timeout: Optional[float] = None) -> Dict[str, Any]:
        """Record a new stock count"""
        quantity = _require_count(quantity, 'quantity')

        with self._operation("set_consumable_quantity", timeout) as deadline:
            consumable = self._get_or_raise(Consumable, consumable_id, deadline, for_update=True)
            deadline.check("consumable update")
            self.gateway.update(consumable, quantity=quantity)
            result = consumable.to_summary()

        if result['low_stock']:
            logger.warning(f"[set_consumable_quantity] {result['name']} at or below reorder level ({quantity})")
        return result

    def delete_consumable(self, consumable_id: str, timeout: Optional[float] = None) -> Dict[str, Any]:
        logger.info(f"[delete_consumable] Deleting consumable: {consumable_id}")

        with self._operation("delete_consumable", timeout) as deadline:
            consumable = self._get_or_raise(Consumable, consumable_id, deadline, for_update=True)
            snapshot = consumable.to_summary()
            deadline.check("consumable delete")
            self.gateway.delete(Consumable, consumable_id)

        logger.info(f"[delete_consumable] Consumable deleted: {consumable_id}")
        return snapshot

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def record_transaction(self, asset_id: str, transaction_type: str, user_id: Optional[str] = None,
                           due_date=None, notes: Optional[str] = None,
                           timeout: Optional[float] = None) -> Dict[str, Any]:
        """Append a check-out / check-in record to an asset's history"""
        transaction_type = _require_text(transaction_type, 'type')
        due = parse_timestamp(due_date, 'due_date')

        with self._operation("record_transaction", timeout) as deadline:
            self._get_or_raise(Asset, asset_id, deadline)
            deadline.check("transaction insert")
            record = self.gateway.insert(
                Transaction, type=transaction_type, asset_id=asset_id,
                user_id=user_id, due_date=due, notes=notes,
            )
            return record.to_dict()

    def log_maintenance(self, asset_id: str, description: str, performed_by_id: Optional[str] = None,
                        date=None, next_maintenance_date=None, cost: Optional[float] = None,
                        timeout: Optional[float] = None) -> Dict[str, Any]:
        """Append a maintenance entry to an asset's history"""
        description = _require_text(description, 'description')
        performed_on = parse_timestamp(date, 'date') or datetime.utcnow()
        next_due = parse_timestamp(next_maintenance_date, 'next_maintenance_date')

        with self._operation("log_maintenance", timeout) as deadline:
            self._get_or_raise(Asset, asset_id, deadline)
            deadline.check("maintenance insert")
            record = self.gateway.insert(
                MaintenanceLog, asset_id=asset_id, description=description,
                performed_by_id=performed_by_id, date=performed_on,
                next_maintenance_date=next_due, cost=cost,
            )
            return record.to_dict()

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def list_users(self, timeout: Optional[float] = None) -> List[Dict[str, Any]]:
        with self._operation("list_users", timeout) as deadline:
            deadline.check("user query")
            return [user.to_dict() for user in self.gateway.find_all(User, order_by=User.name)]

    def create_user(self, name: str, email: Optional[str] = None, role: str = 'USER',
                    timeout: Optional[float] = None) -> Dict[str, Any]:
        name = _require_text(name, 'name')
        with self._operation("create_user", timeout) as deadline:
            deadline.check("user insert")
            result = self.gateway.insert(User, name=name, email=email, role=role).to_dict()
        logger.info(f"[create_user] User created: {result['id']}")
        return result
