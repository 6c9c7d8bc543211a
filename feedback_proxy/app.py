"""
Feedback Proxy Service - FastAPI Application.

Proxies note and tag operations to the product-feedback API and keeps a
local, rollback-capable ledger of every mutation made through it.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from feedback_proxy.config import get_settings
from feedback_proxy.dependencies import build_services, get_ledger
from feedback_proxy.ledger import Ledger
from feedback_proxy.models import HealthResponse
from feedback_proxy.routes import changes_router, notes_router


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting Feedback Proxy Service...")
    app.state.services = build_services(settings)
    logger.info(f"Change ledger ready with {len(app.state.services.ledger)} changes")

    yield

    # Shutdown
    logger.info("Shutting down Feedback Proxy Service...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
## Feedback Proxy

Proxies the product-feedback API and records every change made through it.

### Key Concepts

- **Notes**: Feedback notes held by the remote service
- **Changes**: Local records of each create, update, delete, tag-add and
  tag-remove performed through this proxy
- **Rollback**: Replaying the inverse API call for a change, after which the
  change is dropped from the ledger

### API Flow

1. Mutate a note (POST/PUT/DELETE /api/notes, POST/DELETE /api/notes/{id}/tags/{tag})
2. Review recorded changes (GET /api/changes)
3. Undo any change (POST /api/rollback/{change_id})
    """,
    version=settings.app_version,
    lifespan=lifespan,
)

# Configure CORS
origins = settings.allowed_origins.split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(notes_router, prefix="/api")
app.include_router(changes_router, prefix="/api")


# Root endpoint
@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Change-tracking proxy for the product-feedback API",
        "docs_url": "/docs",
        "openapi_url": "/openapi.json",
        "endpoints": {
            "notes": "/api/notes",
            "changes": "/api/changes",
            "rollback": "/api/rollback/{change_id}",
            "health": "/health",
        }
    }


@app.get("/health", response_model=HealthResponse)
def health(ledger: Ledger = Depends(get_ledger)):
    """Quick health check."""
    return HealthResponse(
        version=settings.app_version,
        remote_configured=bool(settings.feedback_api_token),
        changes_count=len(ledger),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "feedback_proxy.app:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
