"""
Persistence Gateway

The only component that talks to the database. Provides find/exists/insert/
update/delete per entity model and a unit-of-work transaction. Owns no
business rules: every SQLAlchemy failure is re-raised as StorageError and
left to the caller to report.
"""

from contextlib import contextmanager
from functools import wraps
from typing import Any, List, Optional, Type

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.buisness.core.errors import NotFound, StorageError
from app.utils.logger import get_logger

logger = get_logger("inventory.data.gateway")


def _storage_detail(error: SQLAlchemyError) -> str:
    orig = getattr(error, 'orig', None)
    return str(orig) if orig is not None else str(error)


def storage_call(func):
    """Translate SQLAlchemy errors raised by a gateway method into StorageError"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SQLAlchemyError as e:
            detail = _storage_detail(e)
            logger.error(f"[{func.__name__}] Storage failure: {detail}")
            raise StorageError(detail) from e
    return wrapper


class SqlAlchemyGateway:
    """
    Gateway over a Flask-SQLAlchemy handle.

    The handle (and its engine) is created once by create_app(); the session
    used is the request/app-context scoped db.session.
    """

    def __init__(self, db):
        self._db = db

    @property
    def session(self):
        return self._db.session

    @property
    def dialect_name(self) -> str:
        return self._db.engine.dialect.name

    @contextmanager
    def transaction(self, deadline=None):
        """
        Unit of work: everything inside the block commits together or not at all.

        On PostgreSQL the deadline's remaining budget is applied as the
        transaction's statement_timeout so a stalled query is cut off by the
        server as well.
        """
        session = self.session
        try:
            if deadline is not None:
                self._apply_statement_timeout(deadline)
            yield self
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            detail = _storage_detail(e)
            logger.error(f"[transaction] Rolled back after storage failure: {detail}")
            raise StorageError(detail) from e
        except Exception:
            session.rollback()
            raise

    def _apply_statement_timeout(self, deadline):
        remaining = deadline.remaining()
        if remaining is None or self.dialect_name != 'postgresql':
            return
        self.session.execute(
            text("SELECT set_config('statement_timeout', :ms, true)"),
            {'ms': str(max(1, int(remaining * 1000)))},
        )

    @storage_call
    def find_all(self, model: Type, order_by=None, **filters) -> List[Any]:
        """
        All records of a model matching the equality filters

        Args:
            model: Model class
            order_by: Column or sequence of columns to sort by
            **filters: column=value equality filters
        """
        query = model.query.filter_by(**filters)
        if order_by is not None:
            if not isinstance(order_by, (list, tuple)):
                order_by = (order_by,)
            query = query.order_by(*order_by)
        return query.all()

    @storage_call
    def find_by_id(self, model: Type, record_id, for_update: bool = False) -> Optional[Any]:
        """
        Single record by primary key, or None

        Args:
            for_update: lock the row for the rest of the transaction (SELECT ... FOR UPDATE
                where the database supports it)
        """
        if record_id is None:
            return None
        query = model.query.filter_by(id=record_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    @storage_call
    def exists(self, model: Type, **filters) -> bool:
        return self.session.query(model.id).filter_by(**filters).first() is not None

    @storage_call
    def insert(self, model: Type, **fields) -> Any:
        """Add a new record and flush it so defaults (id, timestamps) are populated"""
        record = model.from_dict(fields)
        self.session.add(record)
        self.session.flush()
        return record

    @storage_call
    def update(self, record, **fields) -> Any:
        for key, value in fields.items():
            setattr(record, key, value)
        self.session.flush()
        return record

    @storage_call
    def delete(self, model: Type, record_id) -> Any:
        """
        Delete a record by id and return it

        Raises:
            NotFound: If no record has this id
        """
        record = model.query.filter_by(id=record_id).first()
        if record is None:
            raise NotFound(model.__name__, record_id)
        self.session.delete(record)
        self.session.flush()
        return record
