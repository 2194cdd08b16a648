from app.data.core.entity_base import EntityBase
from app import db


class Asset(EntityBase):
    __tablename__ = 'assets'
    serialized_names = {'asset_type': 'type'}

    name = db.Column(db.String(100), nullable=False)
    asset_type = db.Column(db.String(50), nullable=False)
    status = db.Column(db.String(50), nullable=False, default='AVAILABLE')
    serial_number = db.Column(db.String(100), nullable=True)
    barcode = db.Column(db.String(100), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    location_id = db.Column(
        db.String(36), db.ForeignKey('locations.id', ondelete='RESTRICT'), nullable=False, index=True
    )
    project_id = db.Column(
        db.String(36), db.ForeignKey('projects.id', ondelete='RESTRICT'), nullable=True, index=True
    )
    assigned_to_id = db.Column(
        db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True
    )

    # Relationships
    location = db.relationship('Location')
    project = db.relationship('Project')
    assigned_to = db.relationship('User')
    transactions = db.relationship(
        'Transaction', back_populates='asset', cascade='all, delete-orphan',
        order_by='Transaction.created_at'
    )
    maintenance_logs = db.relationship(
        'MaintenanceLog', back_populates='asset', cascade='all, delete-orphan',
        order_by='MaintenanceLog.date'
    )

    def to_summary(self):
        """List shape: the asset with its location and assignee resolved"""
        return {
            'id': self.id,
            'name': self.name,
            'type': self.asset_type,
            'status': self.status,
            'project_id': self.project_id,
            'location': self.location.to_reference() if self.location else None,
            'assigned_to': self.assigned_to.to_reference() if self.assigned_to else None,
        }

    def to_detail(self):
        """Detail shape: the summary plus project and history pass-through"""
        result = self.to_summary()
        result.update(
            serial_number=self.serial_number,
            barcode=self.barcode,
            notes=self.notes,
            project=self.project.to_reference() if self.project else None,
            transactions=[t.to_dict() for t in self.transactions],
            maintenance_logs=[m.to_dict() for m in self.maintenance_logs],
            created_at=self.created_at.isoformat() if self.created_at else None,
            updated_at=self.updated_at.isoformat() if self.updated_at else None,
        )
        return result
