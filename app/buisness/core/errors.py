"""
Error kinds raised by the inventory core.

Every failure carries a stable ``kind`` (and, for integrity violations, a
``reason``) so callers and tests can branch on it. ``str(error)`` is the
message shown to the outside world; only the command layer converts errors
to strings.
"""

from enum import Enum


class ViolationReason(str, Enum):
    HAS_CHILD_LOCATIONS = 'HasChildLocations'
    CONTAINS_ASSETS = 'ContainsAssets'
    CONTAINS_CONSUMABLES = 'ContainsConsumables'
    HAS_ASSIGNED_ASSETS = 'HasAssignedAssets'
    PARENT_NOT_FOUND = 'ParentNotFound'
    PARENT_CYCLE = 'ParentCycle'


VIOLATION_MESSAGES = {
    ViolationReason.HAS_CHILD_LOCATIONS: 'Cannot delete location with child locations',
    ViolationReason.CONTAINS_ASSETS: 'Cannot delete location that contains assets',
    ViolationReason.CONTAINS_CONSUMABLES: 'Cannot delete location that contains consumables',
    ViolationReason.HAS_ASSIGNED_ASSETS: 'Cannot delete project that has assigned assets',
    ViolationReason.PARENT_NOT_FOUND: 'Parent location not found',
    ViolationReason.PARENT_CYCLE: 'Location cannot be its own ancestor',
}


class InventoryError(Exception):
    """Base class for every failure surfaced by the entity service"""

    kind = 'InventoryError'

    def __init__(self, message, detail=None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def __str__(self):
        return self.message

    def to_dict(self):
        return {'kind': self.kind, 'message': self.message}


class NotFound(InventoryError):
    kind = 'NotFound'

    def __init__(self, entity, entity_id):
        super().__init__(f'{entity} not found', detail=entity_id)
        self.entity = entity
        self.entity_id = entity_id


class IntegrityViolation(InventoryError):
    kind = 'IntegrityViolation'

    def __init__(self, reason, detail=None):
        reason = ViolationReason(reason)
        super().__init__(VIOLATION_MESSAGES[reason], detail=detail)
        self.reason = reason

    def to_dict(self):
        result = super().to_dict()
        result['reason'] = self.reason.value
        return result


class InvalidInput(InventoryError):
    kind = 'InvalidInput'

    def __init__(self, message, reason='InvalidInput', detail=None):
        super().__init__(message, detail=detail)
        self.reason = reason


class InvalidDate(InvalidInput):
    def __init__(self, field, value):
        super().__init__(f'Invalid date for {field}: {value}', reason='InvalidDate', detail=value)
        self.field = field


class StorageError(InventoryError):
    """The persistence layer failed (connection loss, constraint violation, ...)"""

    kind = 'StorageError'

    def __init__(self, detail):
        super().__init__(f'Storage error: {detail}', detail=detail)


class DeadlineExceeded(InventoryError):
    kind = 'DeadlineExceeded'

    def __init__(self, step):
        super().__init__(f'Operation timed out during {step}', detail=step)
        self.step = step
