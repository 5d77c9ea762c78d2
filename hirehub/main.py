"""
HireHub - Main Application

FastAPI backend with:
- MongoDB for every entity (users, jobs, applications, resumes, notifications)
- DeepSeek AI for resume parsing and suggestions
- JWT authentication
- Resend for transactional email, S3-compatible storage for resume files

Run: uvicorn hirehub.main:app --reload
"""

import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from hirehub import __version__
from hirehub.api.routes import api_router
from hirehub.core.config import get_settings
from hirehub.core.errors import register_error_handlers
from hirehub.core.logging import configure_logging, get_logger
from hirehub.db.mongodb import MongoConnection, init_indexes

settings = get_settings()
logger = get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title="HireHub",
    description="""
    A recruitment marketplace API.

    ## Features
    - **Authentication**: JWT-based auth for candidates and recruiters
    - **Resumes**: Upload with AI parsing, primary resume, improvement suggestions
    - **Jobs**: Post, search and filter jobs; skill-matched recommendations
    - **Applications**: Apply, track and triage through a status workflow
    - **Notifications**: In-app notifications and transactional email
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# Connection handle; the client opens on first use
app.state.mongo = MongoConnection.from_settings(settings)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include API routes
app.include_router(api_router, prefix="/api")

# Locally stored resume files
if os.path.isdir(settings.upload_dir):
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")


@app.on_event("startup")
async def startup_event():
    """Configure logging and initialize MongoDB indexes."""
    configure_logging()
    try:
        init_indexes(app.state.mongo.db)
    except Exception as e:
        logger.warning("mongo_index_init_failed", error=str(e))


@app.on_event("shutdown")
async def shutdown_event():
    app.state.mongo.close()


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if app.state.mongo.ping() else "disconnected",
    }
