from fastapi import FastAPI
from contextlib import asynccontextmanager
from beanie import init_beanie

import logging

from carmarket.configs import env, configs
from carmarket.exception_handlers import register_exception_handlers
from carmarket.models.category import Category
from carmarket.routes import categories
from carmarket.schemas.misc import HealthStatus
from carmarket.services.db import get_database_client, close_database_client
from fastapi.middleware.cors import CORSMiddleware


# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handles startup and shutdown events for the application.
    Connects to MongoDB and initializes Beanie ODM (which also builds the
    category indexes, including the unique identity index).
    """
    logger.info("Application startup initiated...")
    try:
        client = await get_database_client()
        await init_beanie(
            database=client[env.get("MONGO_DB")], document_models=[Category]
        )
        logger.info("MongoDB connection and Beanie initialization successful.")
    except Exception as e:
        logger.error(f"Failed to connect to MongoDB or initialize Beanie: {e}")
        raise

    yield

    logger.info("Application shutdown initiated...")
    await close_database_client()
    logger.info("MongoDB connection closed.")


app = FastAPI(
    title=configs.get("app").get("project_name"),
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=configs.get("app").get("cors_origins", []),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(categories.router, prefix="/categories", tags=["Categories"])


@app.get("/health", response_model=HealthStatus)
async def health():
    return HealthStatus()
