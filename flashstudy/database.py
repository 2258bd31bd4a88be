# flashstudy/database.py
import os
from sqlmodel import SQLModel, create_engine
from sqlalchemy.engine import Engine

from flashstudy.config import DATABASE_URL
from flashstudy.core.log_manager import logger


def make_engine(url: str = DATABASE_URL) -> Engine:
    """
    Builds an engine for `url`, creating the parent folder of a file-backed
    SQLite database if needed.
    """
    connect_args = {}
    if url.startswith("sqlite"):
        # check_same_thread=False is needed for SQLite with NiceGUI/FastAPI concurrency
        connect_args["check_same_thread"] = False
        db_file = url.split("///", 1)[1] if "///" in url else ""
        if db_file and db_file != ":memory:":
            os.makedirs(os.path.dirname(db_file) or ".", exist_ok=True)
    return create_engine(url, echo=False, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    """
    Creates the database tables based on the models.
    Should be called on app startup.
    """
    from flashstudy.models import StoredSnapshot  # Import to register models
    SQLModel.metadata.create_all(engine)
    logger.info(f"Database initialized at {engine.url}")
