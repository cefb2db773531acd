import logging

import sqlalchemy
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from config import config

logger = logging.getLogger(__name__)

# 1. Define the Base here.
# models.py imports this Base from here.
Base = declarative_base()


def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {}
    options = {"connect_args": {"check_same_thread": False}}
    # In-memory databases only live as long as their connection
    if url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return options


# 2. Create database engine
engine = create_engine(config.DATABASE_URL, **_engine_options(config.DATABASE_URL))

# 3. Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# 4. Dependency
def get_db():
    """Dependency to get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# 5. Create tables
def init_db(bind=None):
    # Force the import of ALL models so they register with Base
    from . import models  # noqa: F401

    bind = bind or engine
    # This command only creates tables that DON'T exist yet
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=bind)

    inspector = sqlalchemy.inspect(bind)
    logger.info("Tables currently in DB: %s", inspector.get_table_names())
