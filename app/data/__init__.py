"""
Data layer: SQLAlchemy models and the persistence gateway
"""
