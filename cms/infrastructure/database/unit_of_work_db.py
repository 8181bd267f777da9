"""Session-backed unit of work. Repositories only flush; the save service commits once."""

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cms.application.exceptions import PersistenceFailureError


class DbUnitOfWork:
    """Implements UnitOfWork protocol over the per-request session."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise PersistenceFailureError(f"Committing the save failed: {e}") from e

    async def rollback(self) -> None:
        await self._session.rollback()
