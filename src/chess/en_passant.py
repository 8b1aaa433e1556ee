"""
Tracks en passant opportunities
----

After a pawn advances two squares, the opponent may capture it "in passing" on the very next ply, and only then.

The tracker keeps the target (the square the pawn passed over) plus the ply for which it is valid, and compares that
with the game's ply clock whenever it is asked. Expiry is lazy: a stale opportunity stays stored but is never reported.
"""

from dataclasses import dataclass, field
from typing import Optional

from src.chess.location import Location
from src.chess.turns import TurnClock


@dataclass
class EnPassantTracker:
    clock: TurnClock = field(default_factory=TurnClock)
    _target: Optional[Location] = field(default=None, init=False)
    _pawn_location: Optional[Location] = field(default=None, init=False)
    _valid_ply: int = field(default=-1, init=False)

    def record_pawn_double_move(
        self, from_location: Location, to_location: Location
    ) -> None:
        """Register a pawn move. Only a two-square advance opens an opportunity; anything else clears it."""
        if abs(to_location.row - from_location.row) != 2:
            self.clear()
            return

        # The target is the square the pawn passed over, the victim stays where it landed
        passed_over_row = (from_location.row + to_location.row) // 2
        self._target = Location(passed_over_row, to_location.column)
        self._pawn_location = to_location
        self._valid_ply = self.clock.ply + 1

    def clear(self) -> None:
        self._target = None
        self._pawn_location = None
        self._valid_ply = -1

    def next_turn(self) -> None:
        self.clock.advance()

    def reset(self) -> None:
        """New game"""
        self.clear()
        self.clock.reset()

    def _is_live(self) -> bool:
        return self._target is not None and self.clock.ply == self._valid_ply

    @property
    def target(self) -> Optional[Location]:
        """The square a capturing pawn moves to"""
        return self._target if self._is_live() else None

    @property
    def capture_location(self) -> Optional[Location]:
        """The square of the pawn that can be captured"""
        return self._pawn_location if self._is_live() else None

    @property
    def upcoming_target(self) -> Optional[Location]:
        """The target that becomes live on the next ply (the opponent's reply to the double push)"""
        if self._target is not None and self._valid_ply == self.clock.ply + 1:
            return self._target
        return None

    def is_available(self, target_square: Location) -> bool:
        return self.target == target_square

    def state(self) -> tuple[Optional[Location], Optional[Location], int]:
        """Raw state, used to restore the tracker after a cancelled move"""
        return self._target, self._pawn_location, self._valid_ply

    def restore(self, state: tuple[Optional[Location], Optional[Location], int]) -> None:
        self._target, self._pawn_location, self._valid_ply = state

    def reopen(self, from_location: Location, to_location: Location) -> None:
        """
        Undo/redo landed right after a double push: that push is the ply just played,
        so the opportunity is live on the current ply.
        """
        self.record_pawn_double_move(from_location, to_location)
        if self._target is not None:
            self._valid_ply = self.clock.ply
