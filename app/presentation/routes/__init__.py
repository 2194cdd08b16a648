"""
Routes package for the inventory system
"""

from app.utils.logger import get_logger

logger = get_logger("inventory.routes")


def init_app(app):
    """Register the route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from .commands import commands_bp
    app.register_blueprint(commands_bp, url_prefix='/api')

    logger.debug("Registered commands blueprint at /api")
