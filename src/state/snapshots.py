"""Conversion between the live board + game context and an immutable GameStateSnapshot"""

import logging
from typing import Any, Iterable

from pydantic import ValidationError

from src.chess.board import Board
from src.chess.location import Location
from src.chess.pieces import Piece
from src.core.exceptions import SnapshotError
from src.core.models import GameContext, GameStateSnapshot, PieceData

logger = logging.getLogger(__name__)


class SnapshotManager:
    def create_snapshot(
        self,
        board: Board,
        context: GameContext,
        move_count: int = 0,
        move_history: Iterable[str] = (),
    ) -> GameStateSnapshot:
        """Every piece on the board (row by row) plus the game context"""
        with board.lock:
            pieces = tuple(
                PieceData(
                    kind=piece.kind,
                    color=piece.color,
                    row=location.row,
                    column=location.column,
                    has_moved=piece.has_moved,
                )
                for location, piece in sorted(
                    board.position.items(),
                    key=lambda item: (item[0].row, item[0].column),
                )
            )
        return GameStateSnapshot(
            pieces=pieces,
            game_id=context.game_id,
            mode=context.mode,
            current_player=context.current_player,
            human_color=context.human_color,
            result=context.result,
            difficulty=context.difficulty,
            white_name=context.white_name,
            black_name=context.black_name,
            move_count=move_count,
            move_history=tuple(move_history),
        )

    def restore_snapshot(self, snapshot: GameStateSnapshot, board: Board) -> GameContext:
        """
        Put the snapshot's pieces back on the board
        ---

        1. build every piece first, so a broken snapshot leaves the board untouched
        2. clear the board and place the pieces (with their moved-flags)
        3. hand back the game context stored alongside

        Raises SnapshotError when the snapshot cannot be placed on a board.
        """
        logger.info("Restoring game state of turn %d", snapshot.move_count)
        placements: dict[Location, Piece] = {}
        for data in snapshot.pieces:
            location = Location(data.row, data.column)
            if location in placements:
                raise SnapshotError(
                    f"Two pieces in the snapshot occupy {location.to_algebraic()}."
                )
            placements[location] = Piece(data.kind, data.color, has_moved=data.has_moved)

        with board.lock:
            board.clear()
            for location, piece in placements.items():
                board.place_piece(piece, location)

        logger.info("Game state restored")
        return snapshot.context()

    def snapshot_from_payload(self, payload: Any) -> GameStateSnapshot:
        """Validate raw (e.g. JSON) data coming back from storage"""
        try:
            return GameStateSnapshot.model_validate(payload)
        except ValidationError as error:
            raise SnapshotError(f"Stored game state is corrupt: {error}") from error
