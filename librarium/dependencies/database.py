import logging
from contextlib import asynccontextmanager

from sqlalchemy import MetaData, event
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from librarium.config import config
from librarium.exceptions.errors import ConnectionFailure, translate_integrity_error

logger = logging.getLogger(__name__)

# Імена обмежень потрібні, щоб повідомляти клієнту, яке саме поле порушене
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

Base = declarative_base(metadata=MetaData(naming_convention=NAMING_CONVENTION))


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, echo: bool = False, ssl: bool = False) -> AsyncEngine:
    connect_args = {"ssl": True} if ssl and url.startswith("postgresql") else {}

    engine = create_async_engine(
        url,
        echo=echo,
        future=True,
        connect_args=connect_args,
        execution_options={"compiled_cache": None},
    )

    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    return engine


def build_session_factory(bind: AsyncEngine) -> sessionmaker:
    return sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(config.DATABASE_URL, echo=config.DB_ECHO, ssl=config.DB_SSL)

SessionLocal = build_session_factory(engine)


async def get_db():
    async with SessionLocal() as session:
        yield session


@asynccontextmanager
async def atomic(db: AsyncSession):
    """Commit everything issued inside the block, or nothing.

    IntegrityError raised by the engine is re-raised as the matching
    ConstraintViolation subclass.
    """
    try:
        yield db
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        violation = translate_integrity_error(exc)
        logger.warning(f"⚠️ {violation.kind} violation on {violation.field}: {violation}")
        raise violation from exc
    except DBAPIError as exc:
        await db.rollback()
        if exc.connection_invalidated:
            logger.error(f"❌ Database connection lost: {exc}")
            raise ConnectionFailure("Database connection was lost") from exc
        raise
    except BaseException:
        await db.rollback()
        raise


async def init_db(bind: AsyncEngine = engine):
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
