import logging

from .common import app
from .routers.admin.endpoints import router as AdminEndpoints

logger = logging.getLogger(__name__)

# Include routers
app.include_router(AdminEndpoints)

@app.get("/health")
async def health():
    return {"status": "ok"}
