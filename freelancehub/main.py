import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

# Import models to ensure they're registered with SQLAlchemy Base
from . import models  # noqa: F401
from .database import Base, check_database_connection, engine
from .routes.deadlines import router as deadlines_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        check_database_connection()
        logger.info("Database tables ready")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to prepare database: {e}")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="FreelanceHub Scheduler API", version="1.0.0", lifespan=lifespan)

app.include_router(deadlines_router)


@app.get("/")
def root():
    return {"message": "FreelanceHub Scheduler API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
