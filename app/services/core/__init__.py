"""
Core Services
Create / read / update / delete for locations, projects, assets and users.
"""

from .entity_service import EntityService, UNSET, parse_timestamp

__all__ = [
    'EntityService',
    'UNSET',
    'parse_timestamp',
]
