from app.data.core.entity_base import EntityBase
from app import db


class User(EntityBase):
    """Person an asset can be assigned to; also the actor on history records"""
    __tablename__ = 'users'

    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=True)
    role = db.Column(db.String(20), nullable=False, default='USER')
