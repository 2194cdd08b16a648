from app.data.core.entity_base import EntityBase
from app import db


class Transaction(EntityBase):
    """Check-out / check-in record for an asset"""
    __tablename__ = 'transactions'

    type = db.Column(db.String(20), nullable=False)  # CHECK_OUT, CHECK_IN
    asset_id = db.Column(db.String(36), db.ForeignKey('assets.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    due_date = db.Column(db.DateTime, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    asset = db.relationship('Asset', back_populates='transactions')
    user = db.relationship('User')
