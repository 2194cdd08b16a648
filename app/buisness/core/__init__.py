from .errors import (
    InventoryError,
    NotFound,
    IntegrityViolation,
    InvalidInput,
    InvalidDate,
    StorageError,
    DeadlineExceeded,
    ViolationReason,
)
from .deadline import Deadline

__all__ = [
    'InventoryError',
    'NotFound',
    'IntegrityViolation',
    'InvalidInput',
    'InvalidDate',
    'StorageError',
    'DeadlineExceeded',
    'ViolationReason',
    'Deadline',
]
