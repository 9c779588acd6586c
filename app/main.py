# File: /app/main.py | Version: 2.0 | Title: FastAPI App (router includes + JSON:API errors + system space seeding)
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import settings
from app.core.error_handlers import register_exception_handlers
from app.core.logging import configure_logging
from app.crud.system import seed_system_space
from app.db.session import SessionLocal, transactional
from app.routers import apps, auth, core_entities, health, work_item_types

# Initialize logging
configure_logging()
# Silence very verbose multipart parser logs to avoid pytest "closed file" noise
logging.getLogger("python_multipart.multipart").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.SEED_SYSTEM_SPACE:
        with SessionLocal() as db, transactional(db):
            seed_system_space(db)
        logger.info("System space ready")
    yield


# App
app = FastAPI(title="Work Item Tracker API", lifespan=lifespan)

app.include_router(auth.router)
app.include_router(core_entities.router)
app.include_router(work_item_types.router)
app.include_router(apps.router)
app.include_router(health.router)

# Every error leaves as a JSON:API error document
register_exception_handlers(app)
