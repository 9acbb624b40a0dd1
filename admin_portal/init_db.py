import logging

from .database import AsyncSessionLocal, Base, engine

logger = logging.getLogger(__name__)

async def get_db():
    db = AsyncSessionLocal()
    try:
        yield db
    finally:
        # Closing releases the connection and rolls back anything left open
        await db.close()

async def create_tables():
    """Create all tables for local development; production uses Alembic."""
    # Register models on Base.metadata
    from . import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured")
