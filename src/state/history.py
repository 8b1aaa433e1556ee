"""
Game-state history
----

Keeps the last few full snapshots of the game for undo (rollback) and redo, and forwards the newest one
to the autosave store.

* `record_state()` appends; beyond `max_size` the OLDEST snapshot is dropped.
* `rollback()` moves the newest snapshot onto the redo stack and hands back the one before it.
* `redo()` moves it back again.
* Any newly recorded state clears the redo stack (the TurnManager also clears it on every turn switch).
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from src.core.config import MAX_HISTORY_SIZE
from src.core.exceptions import RepositoryError, SnapshotError
from src.core.models import GameStateSnapshot
from src.db.repository import AutosaveStore

logger = logging.getLogger(__name__)


class StateHistoryManager:
    def __init__(
        self,
        autosave_store: Optional[AutosaveStore] = None,
        max_size: int = MAX_HISTORY_SIZE,
    ) -> None:
        if max_size < 1:
            raise ValueError(f"History needs room for at least one state, got {max_size}")
        self.autosave_store = autosave_store
        self.max_size = max_size
        self._states: list[GameStateSnapshot] = []
        self._redo_stack: list[GameStateSnapshot] = []

    def record_state(self, snapshot: GameStateSnapshot) -> None:
        """A new state makes the undone ones unreachable"""
        self.clear_redo_stack()
        self._states.append(snapshot)
        if len(self._states) > self.max_size:
            self._states.pop(0)
        logger.debug(
            "State recorded. Turn %d, history size: %d",
            snapshot.move_count,
            len(self._states),
        )

    def rollback(self) -> Optional[GameStateSnapshot]:
        """The previous state, or None when there is nothing to go back to"""
        if len(self._states) < 2:
            logger.info("Rollback not possible: insufficient state history")
            return None

        self._redo_stack.append(self._states.pop())
        previous = self._states[-1]
        logger.info("Game rolled back to turn %d", previous.move_count)
        return previous

    def redo(self) -> Optional[GameStateSnapshot]:
        """The most recently undone state, or None when nothing was undone"""
        if not self._redo_stack:
            logger.info("Redo not possible: redo stack is empty")
            return None

        state = self._redo_stack.pop()
        self._states.append(state)
        logger.info("Game redone to turn %d", state.move_count)
        return state

    def clear_redo_stack(self) -> None:
        if self._redo_stack:
            self._redo_stack.clear()
            logger.debug("Redo stack cleared")

    def clear_all(self) -> None:
        self._states.clear()
        self._redo_stack.clear()
        logger.info("All state history cleared")

    # -- QUERIES ---
    def can_rollback(self) -> bool:
        return len(self._states) >= 2

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    @property
    def state_count(self) -> int:
        return len(self._states)

    @property
    def current_state(self) -> Optional[GameStateSnapshot]:
        return self._states[-1] if self._states else None

    # -- AUTOSAVE ---
    def autosave(self, snapshot: GameStateSnapshot) -> bool:
        """
        Store the snapshot in the autosave slot.

        A failing store must never interrupt the game: the failure is logged and reported as False.
        """
        if self.autosave_store is None:
            return False
        try:
            self.autosave_store.save(snapshot)
        except (RepositoryError, SQLAlchemyError) as error:
            logger.warning("Autosave failed: %s", error)
            return False
        logger.debug("Autosave completed. Turn %d", snapshot.move_count)
        return True

    def cleanup_autosave(self) -> None:
        """Game over: the autosave is of no use anymore"""
        if self.autosave_store is None:
            return
        try:
            self.autosave_store.delete()
        except (RepositoryError, SQLAlchemyError) as error:
            logger.warning("Failed to clean up autosave: %s", error)
            return
        logger.info("Autosave cleaned up")

    def load_autosave(self) -> Optional[GameStateSnapshot]:
        """The autosaved snapshot (to resume an interrupted game), if there is one"""
        if self.autosave_store is None:
            return None
        try:
            return self.autosave_store.load()
        except (RepositoryError, SnapshotError, SQLAlchemyError) as error:
            logger.warning("Could not load autosave: %s", error)
            return None
