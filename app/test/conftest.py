"""
Pytest configuration and fixtures for the inventory tests
"""
import os

# No log files during tests; console output only
os.environ.setdefault('LOG_DIR', '')

import pytest  # noqa: E402
from app import create_app, get_entity_service  # noqa: E402
from app import db as _db  # noqa: E402


@pytest.fixture(scope='function')
def app():
    """Create a Flask application backed by a fresh in-memory database"""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'INVENTORY_OPERATION_TIMEOUT': None,
    })

    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        # Discarding the connection discards the in-memory database; drop_all
        # would trip the RESTRICT foreign keys between parent and child rows
        _db.engine.dispose()


@pytest.fixture(scope='function')
def db(app):
    return _db


@pytest.fixture(scope='function')
def service(app):
    """The EntityService wired by create_app()"""
    return get_entity_service(app)


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture(scope='function')
def warehouse(service):
    """Root location "Warehouse" with child "Shelf A" """
    root = service.create_location('Warehouse', 'BUILDING')
    shelf = service.create_location('Shelf A', 'SHELF', parent_id=root['id'])
    return root, shelf
