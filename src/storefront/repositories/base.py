from contextlib import contextmanager
from typing import Optional, Any, Dict, Union
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import InterfaceError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.sql.elements import ClauseElement
from storefront.core.exceptions import DatabaseError
from storefront.db import get_connection
import logging

logger = logging.getLogger(__name__)

Statement = Union[str, ClauseElement]


class BaseRepository:
    """
    Base repository providing common database operations.
    Keeps raw SQL and driver errors out of the service layer.
    """

    def __init__(self, engine: Optional[Engine] = None):
        self.engine = engine

    @contextmanager
    def get_db_connection(self):
        """Database connection context manager with error handling"""
        try:
            with get_connection(self.engine) as conn:
                yield conn
        except (OperationalError, InterfaceError) as e:
            logger.error(f"Database connection error: {str(e)}")
            raise DatabaseError(f"Database connection failed: {str(e)}")

    @staticmethod
    def _statement(query: Statement) -> ClauseElement:
        return text(query) if isinstance(query, str) else query

    def handle_integrity_error(self, error: IntegrityError, operation: str) -> None:
        """Hook for subclasses to translate constraint violations; default is a 500"""
        raise DatabaseError(f"Data integrity violation: {str(error)}", operation)

    def execute_single_query(
        self,
        query: Statement,
        params: Optional[Dict[str, Any]] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Execute query expecting single result

        Returns:
            Single row dictionary or None if not found
        """
        try:
            with self.get_db_connection() as conn:
                row = conn.execute(self._statement(query), params or {}).mappings().first()
                return dict(row) if row else None
        except SQLAlchemyError as e:
            logger.error(f"Single query execution failed: {query}, Error: {str(e)}")
            raise DatabaseError("Single query execution failed", "SELECT")

    def execute_returning(
        self,
        command: Statement,
        params: Optional[Dict[str, Any]] = None,
        operation: str = "WRITE",
    ) -> Optional[Dict[str, Any]]:
        """
        Execute INSERT/UPDATE ... RETURNING and commit

        Returns:
            The returned row, or None when no row was affected
        """
        try:
            with self.get_db_connection() as conn:
                row = conn.execute(self._statement(command), params or {}).mappings().first()
                result = dict(row) if row else None
                conn.commit()
                return result
        except IntegrityError as e:
            logger.warning(f"Integrity constraint violation during {operation}: {str(e.orig)}")
            self.handle_integrity_error(e, operation)
            raise
        except SQLAlchemyError as e:
            logger.error(f"Command execution failed: {command}, Error: {str(e)}")
            raise DatabaseError("Command execution failed", operation)
