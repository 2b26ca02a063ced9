"""
Ticket Hub - FastAPI Backend
Main application entry point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from app.core.config import settings
from app.api import routes_auth, routes_events, routes_public, routes_tickets, routes_users
from app.api.errors import register_error_handlers
from app.services.firebase_client import get_firestore_client

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    get_firestore_client()
    logger.info("Firestore client ready (environment=%s)", settings.ENVIRONMENT)
    yield
    logger.info("Application shutdown")

# Create FastAPI application
app = FastAPI(
    title="Ticket Hub API",
    description="Event and ticket management backed by Firebase",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers
app.include_router(routes_public.router, prefix=settings.API_PREFIX, tags=["public"])
app.include_router(routes_auth.router, prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])
app.include_router(routes_users.router, prefix=f"{settings.API_PREFIX}/users", tags=["users"])
app.include_router(routes_events.router, prefix=f"{settings.API_PREFIX}/events", tags=["events"])
app.include_router(
    routes_tickets.categories_router,
    prefix=f"{settings.API_PREFIX}/ticket-categories",
    tags=["ticket-categories"]
)
app.include_router(routes_tickets.tickets_router, prefix=f"{settings.API_PREFIX}/tickets", tags=["tickets"])

@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {"message": "Ticket Hub API is running", "docs": "/docs"}

# Note: Run this ASGI app directly with Uvicorn or Hypercorn. For Gunicorn,
# use `uvicorn.workers.UvicornWorker` instead of wrapping the app.

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
