"""Base repository with common database operations."""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import Executable, Result, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from routegate_api.exceptions import DataAccessError
from routegate_api.models.orm.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common CRUD operations.

    Every query goes through ``_execute`` so driver failures surface as
    DataAccessError instead of backend-specific exceptions.
    """

    model: type[T]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session."""
        self.session = session

    async def _execute(self, statement: Executable, operation: str) -> Result[Any]:
        """Execute a statement, wrapping database failures.

        Args:
            statement: SQLAlchemy statement
            operation: Operation name used in error details

        Returns:
            Statement result

        Raises:
            DataAccessError: If the database call fails
        """
        try:
            return await self.session.execute(statement)
        except (SQLAlchemyError, ConnectionError, TimeoutError, OSError) as e:
            raise DataAccessError(operation, e) from e

    async def _flush(self, operation: str) -> None:
        try:
            await self.session.flush()
        except (SQLAlchemyError, ConnectionError, TimeoutError, OSError) as e:
            raise DataAccessError(operation, e) from e

    async def get(self, id: UUID) -> T | None:
        """Get a record by ID.

        Args:
            id: Record UUID

        Returns:
            Record or None if not found
        """
        result = await self._execute(
            select(self.model).where(self.model.id == id),
            f"{self.model.__tablename__}.get",
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> T:
        """Create a new record.

        Args:
            **kwargs: Field values

        Returns:
            Created record
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self._flush(f"{self.model.__tablename__}.create")
        await self.session.refresh(instance)
        return instance
