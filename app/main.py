import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from datetime import datetime
from contextlib import asynccontextmanager

from config import config
from .database import init_db
from .routes import dashboard, farm, financial, tasks, weather

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# --- DATABASE INITIALIZATION ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # This runs when the app starts
    logger.info("Initializing database tables...")
    init_db()
    yield
    # This runs when the app shuts down
    logger.info("Shutting down...")

app = FastAPI(
    title="FarmTrack API",
    description="Farm record keeping: farms, crops, tasks, finances and weather",
    version="1.0.0",
    lifespan=lifespan
)

# --- MIDDLEWARE ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- ROUTERS ---
app.include_router(farm.router, prefix=config.API_V1_PREFIX, tags=["farms"])
app.include_router(tasks.router, prefix=config.API_V1_PREFIX, tags=["tasks"])
app.include_router(financial.router, prefix=config.API_V1_PREFIX, tags=["financial"])
app.include_router(dashboard.router, prefix=config.API_V1_PREFIX, tags=["dashboard"])
app.include_router(weather.router, prefix=config.API_V1_PREFIX, tags=["weather"])

# --- ENDPOINTS ---

@app.get("/")
def read_root():
    return {
        "message": "FarmTrack API",
        "version": "1.0.0",
        "docs": "/docs",
        "redoc": "/redoc"
    }

@app.get(f"{config.API_V1_PREFIX}/health")
def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow()
    }
