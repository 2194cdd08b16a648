"""
Generic serialization mixin for SQLAlchemy models
Provides from_dict and to_dict so the service layer can hand out plain
dictionary snapshots instead of live ORM instances.

Snapshots are taken inside the unit of work; once the session commits the
instance is expired (and a deleted instance can no longer be loaded), so
callers must never hold on to the model itself.
"""

from datetime import datetime
from sqlalchemy import inspect

AUDIT_FIELDS = ('created_at', 'updated_at')


class DataInsertionMixin:
    """
    Mixin that provides dictionary conversion for SQLAlchemy models

    - from_dict(): build an unsaved instance from a dictionary
    - to_dict(): convert an instance to a JSON-friendly dictionary

    Models may set ``serialized_names`` to expose a column under another key
    (e.g. Location.kind is published as "type").
    """

    serialized_names = {}

    @classmethod
    def from_dict(cls, data_dict):
        """
        Create a model instance from a dictionary

        Args:
            data_dict (dict): Dictionary containing model data; both column
                keys and their serialized names are accepted

        Returns:
            Model instance (not added to the session)
        """
        columns = {c.key for c in inspect(cls).columns}
        aliases = {published: column for column, published in cls.serialized_names.items()}

        filtered_data = {}
        for key, value in data_dict.items():
            key = aliases.get(key, key)
            if key not in columns:
                continue
            if key in AUDIT_FIELDS and value is None:
                continue
            filtered_data[key] = value

        return cls(**filtered_data)

    def to_dict(self):
        """
        Convert model instance to dictionary

        Returns:
            dict: Dictionary representation of the model
        """
        result = {}
        for column in inspect(self.__class__).columns:
            value = getattr(self, column.key)
            if isinstance(value, datetime):
                value = value.isoformat()
            result[self.serialized_names.get(column.key, column.key)] = value

        return result

    def to_reference(self):
        """Short {id, name} form used when embedding one record in another"""
        return {'id': self.id, 'name': self.name}
