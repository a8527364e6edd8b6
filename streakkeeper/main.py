import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from streakkeeper.core import clock
from streakkeeper.core.config import SEED_DEFAULT_CATALOG
from streakkeeper.core.errors import StreakError
from streakkeeper.core.log import setup_logging
from streakkeeper.db.base import Base, SessionLocal, engine, log_diagnostics
from streakkeeper.flows.manager import ConversationManager
from streakkeeper.ranks.catalog import seed_rank_systems
from streakkeeper.ranks.table import RankTable
from streakkeeper.tasks.catalog import seed_task_definitions

# Import models so create_all picks them up
from streakkeeper.users.models import User  # noqa: F401
from streakkeeper.journey.models import Journey  # noqa: F401
from streakkeeper.entries.models import Entry  # noqa: F401
from streakkeeper.tasks.models import Task, TaskDefinition  # noqa: F401
from streakkeeper.ranks.models import RankLevel, RankSystem  # noqa: F401

from streakkeeper.api.routes import router as api_router
from streakkeeper.flows.routes import router as flow_router
from streakkeeper.ranks.routes import router as rank_router
from streakkeeper.tasks.routes import router as task_router
from streakkeeper.users.routes import router as user_router

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Streakkeeper", version="0.1.0")


@app.exception_handler(StreakError)
async def streak_error_handler(request: Request, exc: StreakError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Create database tables (still useful in dev; in production prefer Alembic)
log_diagnostics()
Base.metadata.create_all(bind=engine)


def _load_catalog() -> RankTable:
    """Seed defaults when enabled, then build the shared rank table once."""
    db = SessionLocal()
    try:
        if SEED_DEFAULT_CATALOG:
            seed_rank_systems(db)
            seed_task_definitions(db)
        table = RankTable.load(db)
    finally:
        db.close()
    logger.info("[STARTUP] rank systems loaded=%s", len(table))
    return table


app.state.rank_table = _load_catalog()
app.state.conversations = ConversationManager(app.state.rank_table)
app.state.started_at = clock.now()

# Include routers
app.include_router(user_router)
app.include_router(flow_router)
app.include_router(task_router)
app.include_router(rank_router)
app.include_router(api_router)
