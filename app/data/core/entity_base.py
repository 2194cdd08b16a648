from app import db
from datetime import datetime
import uuid
from sqlalchemy.orm import declared_attr
from app.buisness.core.data_insertion_mixin import DataInsertionMixin


def generate_id():
    """Random unique token used as the primary key of every entity"""
    return str(uuid.uuid4())


class EntityBase(db.Model, DataInsertionMixin):
    """Abstract base class for all stored entities: random string id plus timestamps"""

    __abstract__ = True

    @declared_attr
    def __tablename__(cls):
        return cls.__name__.lower() + 's'

    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        label = getattr(self, 'name', None) or self.id
        return f'<{self.__class__.__name__} {label}>'
