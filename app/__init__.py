from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
import os
from app.utils.logger import get_logger

# Initialize extensions
db = SQLAlchemy()


def _configure_sqlite(engine):
    """
    Turn on foreign keys for every SQLite connection and take the write lock
    when a transaction begins, so check-then-delete sequences are serialized.
    """
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN itself (pysqlite would otherwise defer it)
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_app(test_config=None):
    """
    Build the Flask application.

    Configuration comes from the environment; test_config overrides it.
    The persistence gateway and entity service are constructed once here and
    stored in app.extensions['inventory'].
    """
    from pathlib import Path

    app = Flask(__name__, instance_path=str(Path(__file__).parent.parent / 'instance'))

    logger = get_logger("inventory.app")
    logger.info("Initializing Flask application")

    # Configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-DO-NOT-USE-IN-PRODUCTION')

    if os.environ.get('DATABASE_URL'):
        app.config['SQLALCHEMY_DATABASE_URI'] = os.environ['DATABASE_URL']
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    timeout = os.environ.get('INVENTORY_OPERATION_TIMEOUT')
    app.config['INVENTORY_OPERATION_TIMEOUT'] = float(timeout) if timeout else None

    if test_config is not None:
        app.config.update(test_config)

    if not app.config.get('SQLALCHEMY_DATABASE_URI'):
        # Default: SQLite file in the project's instance/ directory
        instance_dir = Path(app.instance_path)
        instance_dir.mkdir(parents=True, exist_ok=True)
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{(instance_dir / 'inventory.db').resolve()}"

    if app.config['SECRET_KEY'].startswith('dev-secret-key'):
        logger.warning("SECRET_KEY not set - using the development key")

    db.init_app(app)

    # Import models so they register with SQLAlchemy
    from app.data.core import Location, Project, Asset, Consumable, User, Transaction, MaintenanceLog  # noqa: F401

    with app.app_context():
        if db.engine.dialect.name == 'sqlite':
            _configure_sqlite(db.engine)
            logger.debug("Database configured: SQLite")
        else:
            logger.debug(f"Database configured: {db.engine.dialect.name}")

    from app.data.gateway import SqlAlchemyGateway
    from app.services.core.entity_service import EntityService

    gateway = SqlAlchemyGateway(db)
    app.extensions['inventory'] = EntityService(
        gateway,
        default_timeout=app.config['INVENTORY_OPERATION_TIMEOUT'],
    )
    logger.debug("Entity service initialized")

    from app.presentation.routes import init_app as init_routes
    init_routes(app)

    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        return response

    logger.info("Flask application initialization complete")

    return app


def get_entity_service(app=None):
    """Return the EntityService wired into the given (or current) app"""
    if app is None:
        from flask import current_app
        app = current_app
    return app.extensions['inventory']
