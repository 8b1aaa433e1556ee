"""Generate database session and the autosave store on top of it"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from src.core.config import AUTOSAVE_SLOT, DATABASE_URL
from src.db.schema import Base
from src.db.sql_repository import SQLAutosaveRepository

# nothing connects until the first query
engine = create_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine)


def init_db() -> None:
    """Ensure all tables are created"""
    Base.metadata.create_all(bind=engine)


def open_autosave_store(slot: str = AUTOSAVE_SLOT) -> SQLAutosaveRepository:
    """Autosave repository on the configured database, ready to hand to `ChessGame(autosave_store=...)`"""
    init_db()
    return SQLAutosaveRepository(SessionLocal(), slot)
