"""
Core models package for the inventory system
"""

from .user import User
from .location import Location
from .project import Project
from .asset import Asset
from .consumable import Consumable
from .transaction import Transaction
from .maintenance_log import MaintenanceLog

__all__ = [
    'User',
    'Location',
    'Project',
    'Asset',
    'Consumable',
    'Transaction',
    'MaintenanceLog',
]
