"""FastAPI dependency injection helpers."""

from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.infrastructure.database import async_session_factory


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; rollback on error.

    The lifecycle services open and commit their own transaction, so the
    trailing commit only matters for handlers that write without one.
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
