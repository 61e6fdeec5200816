"""
KPL Auction - Cricket Auction Management API
"""
import logging
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.database import init_db
from app.storage import upload_root, UPLOAD_URL_PREFIX
from app.api.auth import router as auth_router
from app.api.auction import router as auction_router
from app.api.players import router as players_router
from app.api.teams import router as teams_router
from app.api.analytics import router as analytics_router
from app.api.users import router as users_router
from app.api.page_access import router as page_access_router
from app.api.cricket import router as cricket_router

# Initialize FastAPI app
app = FastAPI(
    title="KPL Auction",
    description="Cricket auction management API",
    version="0.1.0",
)

# CORS origins - configurable via environment variable
default_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]

# Add custom origins from environment (comma-separated)
if settings.CORS_ORIGINS:
    default_origins.extend([o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=default_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(auction_router, prefix="/api")
app.include_router(players_router, prefix="/api")
app.include_router(teams_router, prefix="/api")
app.include_router(analytics_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(page_access_router, prefix="/api")
app.include_router(cricket_router, prefix="/api")

# Uploaded player/team pictures
Path(upload_root()).mkdir(parents=True, exist_ok=True)
app.mount(UPLOAD_URL_PREFIX, StaticFiles(directory=str(upload_root())), name="uploads")


@app.on_event("startup")
def startup_event():
    """Configure logging and initialize database on startup"""
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s [%(name)s] %(message)s")
    init_db()


@app.get("/")
def root():
    """Health check endpoint"""
    return {
        "name": "KPL Auction API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/api/health")
def health_check():
    """API health check"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
