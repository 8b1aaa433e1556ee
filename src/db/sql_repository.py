"""Implementation of AutosaveStore using SQLAlchemy"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.config import AUTOSAVE_SLOT
from src.core.exceptions import RepositoryError
from src.core.models import GameStateSnapshot
from src.db.schema import DBSnapshot
from src.state.snapshots import SnapshotManager


class SQLAutosaveRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session, slot: str = AUTOSAVE_SLOT) -> None:
        self.db = db_session
        self.slot = slot
        self.snapshots = SnapshotManager()

    def save(self, snapshot: GameStateSnapshot) -> None:
        """Insert or overwrite the slot."""
        payload = snapshot.model_dump(mode="json")
        try:
            snapshot_db = self._fetch_snapshot()
            if snapshot_db is None:
                snapshot_db = DBSnapshot(slot=self.slot)
                self.db.add(snapshot_db)
            snapshot_db.payload = payload
            snapshot_db.move_count = snapshot.move_count
            self.db.commit()
        except SQLAlchemyError as error:
            self.db.rollback()
            raise RepositoryError(f"Could not save slot {self.slot!r}") from error

    def load(self) -> Optional[GameStateSnapshot]:
        """Raises SnapshotError if the stored document is not a valid snapshot."""
        snapshot_db = self._fetch_snapshot()
        if snapshot_db is None:
            return None
        return self.snapshots.snapshot_from_payload(snapshot_db.payload)

    def exists(self) -> bool:
        return self._fetch_snapshot() is not None

    def delete(self) -> None:
        snapshot_db = self._fetch_snapshot()
        if snapshot_db is None:
            return
        try:
            self.db.delete(snapshot_db)
            self.db.commit()
        except SQLAlchemyError as error:
            self.db.rollback()
            raise RepositoryError(f"Could not delete slot {self.slot!r}") from error

    def _fetch_snapshot(self) -> DBSnapshot | None:
        query = select(DBSnapshot).where(DBSnapshot.slot == self.slot)
        return self.db.scalar(query)
