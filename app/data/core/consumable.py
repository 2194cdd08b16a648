from app.data.core.entity_base import EntityBase
from app import db


class Consumable(EntityBase):
    """
    Stock counted by quantity rather than tracked one by one (cables, tape).

    Like an asset it is always stored in a location, and the foreign key keeps
    that location from being deleted underneath it.
    """
    __tablename__ = 'consumables'

    name = db.Column(db.String(100), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    reorder_level = db.Column(db.Integer, nullable=False, default=0)
    location_id = db.Column(
        db.String(36), db.ForeignKey('locations.id', ondelete='RESTRICT'), nullable=False, index=True
    )

    location = db.relationship('Location')

    @property
    def low_stock(self):
        return self.quantity <= self.reorder_level

    def to_summary(self):
        result = self.to_dict()
        result.update(
            location=self.location.to_reference() if self.location else None,
            low_stock=self.low_stock,
        )
        return result
