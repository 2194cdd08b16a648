from app.data.core.entity_base import EntityBase
from app import db


class Project(EntityBase):
    __tablename__ = 'projects'

    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(50), nullable=False, default='active')
    start_date = db.Column(db.DateTime, nullable=True)
    end_date = db.Column(db.DateTime, nullable=True)
    display_order = db.Column(db.Integer, default=0, nullable=False)
