from datetime import datetime, timezone
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resume_screener.routers import screening

# Import logging and middleware
from resume_screener.utils.logging_config import configure_for_environment, get_logger
from resume_screener.middleware.error_handlers import ExceptionHandlerMiddleware, PerformanceMiddleware
from resume_screener.models.ai_settings import get_llm_settings

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("Resume Screener API starting up...")

    settings = get_llm_settings()
    if not settings.api_key:
        logger.warning("XAI_API_KEY is not set - screening requests will fail until it is configured")
    logger.info(f"Completion model: {settings.model_name} (timeout {settings.timeout}s)")

    yield

    logger.info("Resume Screener API shutting down...")

app = FastAPI(title="Resume Screener API", version="1.0.0", lifespan=lifespan)

# Middleware is LIFO: the last one added runs outermost
app.add_middleware(PerformanceMiddleware, slow_request_threshold=10.0)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    logger.debug("Root endpoint accessed")
    return {"message": "Welcome to the Resume Screener API", "version": "1.0.0", "status": "ok"}

@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint - handles both GET and HEAD requests"""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

app.include_router(screening.router, prefix="/api", tags=["screening"])

logger.info("Resume Screener API initialized successfully")
