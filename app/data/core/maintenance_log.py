from app.data.core.entity_base import EntityBase
from app import db
from datetime import datetime


class MaintenanceLog(EntityBase):
    __tablename__ = 'maintenance_logs'

    asset_id = db.Column(db.String(36), db.ForeignKey('assets.id', ondelete='CASCADE'), nullable=False, index=True)
    performed_by_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    description = db.Column(db.Text, nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    next_maintenance_date = db.Column(db.DateTime, nullable=True)
    cost = db.Column(db.Float, nullable=True)

    asset = db.relationship('Asset', back_populates='maintenance_logs')
    performed_by = db.relationship('User')
