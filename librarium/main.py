import logging
from contextlib import asynccontextmanager
from logging.config import dictConfig

from fastapi import FastAPI

import librarium.models  # noqa: F401
from librarium.config import LogConfig, config
from librarium.dependencies.database import SessionLocal, engine, init_db
from librarium.exceptions.handlers import setup_exception_handlers
from librarium.middlewares.middlewares import setup_middlewares
from librarium.routers import (
    books,
    catalog,
    fines,
    loans,
    members,
    projects,
    reservations,
    staff,
    tasks,
    users,
)
from librarium.seed import insert_sample_data

dictConfig(LogConfig().model_dump())
logger = logging.getLogger("librarium")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Створення таблиць і демонстраційних даних під час запуску"""

    try:
        await init_db()

        if config.SEED_SAMPLE_DATA:
            async with SessionLocal() as db:
                await insert_sample_data(db)

        yield

    except Exception as e:
        logger.error(f"❌ Помилка при запуску сервера: {e}")
        raise e

    finally:
        await engine.dispose()
        logger.info("🔴 Підключення до бази даних закрито")


app = FastAPI(
    lifespan=lifespan,
    title="Task Management & Library API",
    description="CRUD API for task management and library records",
    version="1.0.0",
)

setup_middlewares(app)
setup_exception_handlers(app)

app.include_router(users.router, prefix="/api/v1")
app.include_router(projects.router, prefix="/api/v1")
app.include_router(tasks.router, prefix="/api/v1")
app.include_router(members.router, prefix="/api/v1")
app.include_router(catalog.router, prefix="/api/v1")
app.include_router(books.router, prefix="/api/v1")
app.include_router(staff.router, prefix="/api/v1")
app.include_router(loans.router, prefix="/api/v1")
app.include_router(reservations.router, prefix="/api/v1")
app.include_router(fines.router, prefix="/api/v1")


@app.get("/")
async def read_root():
    return {"message": "Welcome to the Task Management API"}


logger.info("✅ Task Management & Library API успішно запущено!")
