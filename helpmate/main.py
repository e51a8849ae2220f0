# helpmate/main.py
import logging
import os
from contextlib import asynccontextmanager
from typing import Callable
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from motor.motor_asyncio import AsyncIOMotorDatabase
from helpmate import config
from helpmate.db import close_client, ensure_indexes, get_database
from helpmate.errors import HelpMateError, Unauthenticated, Unavailable
from helpmate.logging_config import configure_logging
from helpmate.routers import auth, stats, tickets
from helpmate.seed import seed_demo_users
from helpmate.services.tickets import TicketService

logger = logging.getLogger(__name__)


# -------------------------
# Error handling
# -------------------------
async def handle_helpmate_error(request: Request, exc: HelpMateError):
    headers = None
    if isinstance(exc, Unauthenticated):
        headers = {"WWW-Authenticate": "Bearer"}
    if isinstance(exc, Unavailable):
        # details were logged at the store boundary
        message = Unavailable.default_message
    else:
        message = exc.message
    return JSONResponse(status_code=exc.status_code, content={"detail": message}, headers=headers)


# -------------------------
# App factory
# -------------------------
def create_app(db_factory: Callable[[], AsyncIOMotorDatabase] = get_database) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(config.LOG_LEVEL)
        config.warn_on_dev_secret()
        app.state.db = db_factory()
        await ensure_indexes(app.state.db)
        if config.SEED_DEMO_DATA:
            await seed_demo_users(app.state.db)
        # finish any ticket delete that was interrupted before its comment sweep
        await TicketService.from_database(app.state.db).purge_orphan_comments()
        logger.info("HelpMate API started")
        yield
        if db_factory is get_database:
            close_client()

    app = FastAPI(title="HelpMate Support API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(HelpMateError, handle_helpmate_error)

    # -------------------------
    # Root Route
    # -------------------------
    @app.get("/")
    def read_root():
        return {"message": "Welcome to the HelpMate Support API!"}

    # -------------------------
    # Include Routers
    # -------------------------
    app.include_router(auth.router)
    app.include_router(tickets.router)
    app.include_router(stats.router)

    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=config.UPLOAD_DIR), name="uploads")

    return app


app = create_app()
