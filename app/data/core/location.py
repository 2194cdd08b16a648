from app.data.core.entity_base import EntityBase
from app import db


class Location(EntityBase):
    """
    A node in the containment hierarchy.

    Locations form a forest: a location without parent_location_id is a root.
    The foreign key restricts deletes, so a parent with children (or a
    location holding assets) cannot be removed at the storage level either.
    """
    __tablename__ = 'locations'
    serialized_names = {'kind': 'type'}

    name = db.Column(db.String(100), nullable=False)
    kind = db.Column(db.String(50), nullable=False)  # free-form, e.g. "STUDIO", "STORAGE"
    description = db.Column(db.Text, nullable=True)
    parent_location_id = db.Column(
        db.String(36),
        db.ForeignKey('locations.id', ondelete='RESTRICT'),
        nullable=True,
        index=True,
    )
    display_order = db.Column(db.Integer, default=0, nullable=False)

    # Relationships (no backrefs)
    parent = db.relationship('Location', remote_side='Location.id')
