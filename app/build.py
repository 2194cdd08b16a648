#!/usr/bin/env python3
"""
Database build for the inventory service
Creates the schema and, optionally, the demo data set.
"""

from datetime import datetime, timedelta

from app import db, get_entity_service
from app.utils.logger import get_logger

logger = get_logger("inventory.build")


def create_tables():
    """Create every table that does not exist yet"""
    db.create_all()
    logger.info("Database tables created")


def is_empty():
    from app.data.core import Location, User
    return Location.query.first() is None and User.query.first() is None


def insert_demo_data():
    """
    Insert the demo data set through the entity service, so it passes the
    same checks as any other caller.

    Returns:
        dict: ids of the created records keyed by a short label
    """
    service = get_entity_service()

    admin = service.create_user('Admin User', email='admin@example.com', role='ADMIN')
    engineer = service.create_user('Engineer User', email='engineer@example.com', role='ENGINEER')

    main_studio = service.create_location('Main Studio', 'STUDIO', description='Main production studio')
    equipment_room = service.create_location(
        'Equipment Room', 'STORAGE', parent_id=main_studio['id'], description='Main equipment storage'
    )

    camera = service.create_asset(
        'Sony FX6', 'CAMERA', equipment_room['id'],
        serial_number='FX6-12345', barcode='CAM-FX6-001', notes='Main production camera',
    )
    computer = service.create_asset(
        'Edit Station 1', 'COMPUTER', main_studio['id'],
        serial_number='PC-54321', barcode='PC-EDIT-001', notes='Main editing workstation',
    )

    sdi_cables = service.create_consumable('SDI Cables', equipment_room['id'], quantity=50, reorder_level=10)
    xlr_cables = service.create_consumable('XLR Cables', equipment_room['id'], quantity=30, reorder_level=5)

    service.record_transaction(
        camera['id'], 'CHECK_OUT', user_id=engineer['id'],
        due_date=datetime.utcnow() + timedelta(days=7), notes='Checked out for field production',
    )
    service.log_maintenance(
        computer['id'], 'Annual system maintenance', performed_by_id=admin['id'],
        date='2024-01-15', next_maintenance_date='2025-01-15', cost=150.00,
    )

    logger.info("Demo data inserted")
    return {
        'admin': admin['id'],
        'engineer': engineer['id'],
        'main_studio': main_studio['id'],
        'equipment_room': equipment_room['id'],
        'camera': camera['id'],
        'computer': computer['id'],
        'sdi_cables': sdi_cables['id'],
        'xlr_cables': xlr_cables['id'],
    }


def build_database(seed=False):
    """
    Build the database; must run inside an application context.

    Args:
        seed: Insert the demo data when the database is empty
    """
    logger.info(f"Starting database build (seed={seed})")
    create_tables()

    if seed:
        if is_empty():
            insert_demo_data()
        else:
            logger.info("Database already has data, skipping demo data")

    logger.info("Database build complete")
