import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from admin_portal.config import settings
from admin_portal.core.error_handlers import register_exception_handlers
from admin_portal.core.errors import AdminServiceError, ErrorCode
from admin_portal.database import engine
from admin_portal.init_db import create_tables
from admin_portal.services.token_service import verify_token

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.is_production:
        logger.info("Running in production - schema is managed by Alembic")
    else:
        logger.info("Running in development mode - creating tables")
        await create_tables()

    yield

    # Shutdown
    await engine.dispose()

app = FastAPI(title="Event Management Admin API", lifespan=lifespan)
register_exception_handlers(app)

# Missing credentials are reported as UNAUTHORIZED by get_current_admin
security = HTTPBearer(auto_error=False)

# Dependency to get the authenticated admin's token claims
async def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Dict[str, Any]:
    if credentials is None:
        raise AdminServiceError(ErrorCode.UNAUTHORIZED, "Authorization header with Bearer token is required")

    claims = verify_token(credentials.credentials)
    logger.debug(f"Authenticated admin_id={claims.get('adminID')}")
    return claims
