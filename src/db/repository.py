"""Protocol repository for the autosave slot (implemented with SQL Alchemy, could be a plain file etc.)"""

from typing import Optional, Protocol

from src.core.models import GameStateSnapshot


class AutosaveStore(Protocol):
    """Persistence of the single running-game autosave"""

    def save(self, snapshot: GameStateSnapshot) -> None:
        """Store the snapshot, replacing the previous autosave."""
        ...

    def load(self) -> Optional[GameStateSnapshot]:
        """The stored snapshot, if there is one."""
        ...

    def exists(self) -> bool:
        """Is there an autosave to resume from?"""
        ...

    def delete(self) -> None:
        """Remove the autosave (no-op if there is none)."""
        ...
