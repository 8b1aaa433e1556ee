"""Whose turn is it?"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from src.core.shared_types import Color

if TYPE_CHECKING:
    from src.state.history import StateHistoryManager

logger = logging.getLogger(__name__)


@dataclass
class TurnClock:
    """
    The one authoritative ply counter of a game.

    Owned by the TurnManager; other components (the en passant tracker) hold a reference and only read it.
    """

    ply: int = 0

    def advance(self) -> None:
        self.ply += 1

    def reset(self) -> None:
        self.ply = 0


@dataclass
class Player:
    name: str
    color: Color
    has_turn: bool = False


@dataclass
class TurnManager:
    state_history: Optional[StateHistoryManager] = None
    current_player: Color = Color.WHITE
    clock: TurnClock = field(default_factory=TurnClock)
    players: list[Player] = field(default_factory=list)

    def set_players(self, players: list[Player]) -> None:
        self.players = players
        for player in self.players:
            player.has_turn = player.color == self.current_player

    def set_current_player(self, color: Color) -> None:
        self.current_player = color
        for player in self.players:
            player.has_turn = player.color == color

    def switch_turns(self) -> None:
        """
        Hand the turn to the opponent
        ---

        1. flip the color to move (and the players' turn flags)
        2. advance the ply clock (this is what expires en passant opportunities)
        3. a fresh move invalidates anything that could still be redone
        """
        self.current_player = self.current_player.opponent
        if len(self.players) == 2:
            for player in self.players:
                player.has_turn = not player.has_turn

        self.clock.advance()

        if self.state_history is not None:
            self.state_history.clear_redo_stack()

        logger.debug("Turn switched to %s (ply %d)", self.current_player, self.clock.ply)

    def reset(self) -> None:
        self.clock.reset()
        self.set_current_player(Color.WHITE)
