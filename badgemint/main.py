import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import badgemint.models  # noqa: F401  registers tables with Base.metadata
from badgemint.core.logging import setup_logging
from badgemint.database.db import Base, engine
from badgemint.routes import badges, claims, events, reports, whitelist

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Create all tables (in production, use migrations such as Alembic)
    Base.metadata.create_all(bind=engine)
    logger.info("badgemint started")
    yield


app = FastAPI(title="badgemint", lifespan=lifespan)

# Configure CORS
origins = [
    "*"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include the routers
app.include_router(events.router)
app.include_router(whitelist.router)
app.include_router(claims.router)
app.include_router(badges.router)
app.include_router(reports.router)
