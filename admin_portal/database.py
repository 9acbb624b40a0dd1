from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from admin_portal.config import settings
import logging

logger = logging.getLogger(__name__)

if settings.database_url:
    SQLALCHEMY_DATABASE_URL = settings.database_url
else:
    # PostgreSQL connection string
    SQLALCHEMY_DATABASE_URL = f"postgresql+psycopg://{settings.db_username}:{settings.db_password.get_secret_value()}@{settings.host}:{settings.port}/{settings.database}"

# Log the connection string (mask password for safety)
masked_url = SQLALCHEMY_DATABASE_URL
if settings.db_password.get_secret_value():
    masked_url = masked_url.replace(settings.db_password.get_secret_value(), "*****")
logger.info(f"SQLAlchemy DB URL: {masked_url}")

# Shared connection pool; sqlite drivers manage their own pooling
engine_options = {}
if SQLALCHEMY_DATABASE_URL.startswith("postgresql"):
    engine_options = {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
    }

engine = create_async_engine(SQLALCHEMY_DATABASE_URL, **engine_options)

AsyncSessionLocal = async_sessionmaker(autocommit=False, autoflush=False, bind=engine, class_=AsyncSession)

Base = declarative_base()
