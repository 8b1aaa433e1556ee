"""
Executes one full move on the board
----

Resolves (en passant) captures, registers double pawn pushes, asks for a promotion choice,
detects check/checkmate against the opponent and appends the move to the history.

NOTE: the move is trusted to be legal. Validation happens before (src/chess/validators.py).
"""

import logging
from typing import Optional

from src.chess.board import AppliedMove, Board
from src.chess.castling import CASTLING_RULES, execute_castle
from src.chess.en_passant import EnPassantTracker
from src.chess.history import MoveHistory, MoveRecord
from src.chess.location import Location
from src.chess.moves import Move
from src.chess.pieces import Piece
from src.chess.promotion import (
    PROMOTION_OPTIONS,
    PromotionChooser,
    create_promoted_piece,
    needs_promotion,
)
from src.chess.rules import is_checkmate, king_in_check
from src.core.exceptions import GameError
from src.core.shared_types import CastlingSide, Color, PieceKind

logger = logging.getLogger(__name__)


class MoveExecutor:
    def __init__(
        self,
        board: Board,
        en_passant: EnPassantTracker,
        history: MoveHistory,
        promotion_chooser: PromotionChooser,
    ) -> None:
        self.board = board
        self.en_passant = en_passant
        self.history = history
        self.promotion_chooser = promotion_chooser
        self.captured_pieces: list[Piece] = []

    def execute_move(
        self,
        from_location: Location,
        to_location: Location,
        promote_to: Optional[PieceKind] = None,
    ) -> Optional[MoveRecord]:
        """
        Make the move
        -----

        1. read the moving piece (nothing to do if there is none)
        2. determine the capture: the destination's occupant, or the en passant victim
        3. relocate the piece, mark it as moved, register a double pawn push
        4. promotion: use `promote_to` when given, otherwise ask the chooser. Cancelling reverts steps 2 and 3 exactly.
        5. does the move put the opponent in check / checkmate?
        6. append the move to the history

        Returns the history record, or None when nothing was played (no piece / cancelled promotion).
        """
        piece = self.board.piece_at(from_location)
        if piece is None:
            logger.warning(
                "execute_move called with no piece at %s", from_location.to_algebraic()
            )
            return None

        player = piece.color
        en_passant_before = self.en_passant.state()

        # 2. captures
        capture_at = self._en_passant_capture_square(piece, to_location)
        is_en_passant = capture_at is not None

        # 3. relocate
        applied = self.board.apply_move(
            from_location, to_location, capture_at=capture_at, mark_moved=True
        )
        if piece.kind == PieceKind.PAWN:
            self.en_passant.record_pawn_double_move(from_location, to_location)
        else:
            self.en_passant.clear()

        move = Move(
            from_location,
            to_location,
            piece,
            captured=applied.captured,
            is_en_passant=is_en_passant and applied.captured is not None,
        )

        # 4. promotion
        if needs_promotion(piece, to_location):
            promote_to = self._choose_promotion(player, promote_to)
            if promote_to is None:
                self._cancel(applied, en_passant_before)
                return None
            self._promote(to_location, promote_to, player)
            move.promote_to = promote_to

        if applied.captured is not None:
            self.captured_pieces.append(applied.captured)
            logger.info(
                "%s captures %s%s",
                piece.kind,
                applied.captured.kind,
                " en passant" if move.is_en_passant else "",
            )

        return self._record(move, player)

    def execute_castle(self, color: Color, side: CastlingSide) -> MoveRecord:
        """Castling that was already validated by the caller"""
        squares = CASTLING_RULES[(color, side)]
        king = self.board.piece_at(squares.king_from)
        if king is None:
            raise GameError(f"No king on {squares.king_from.to_algebraic()} to castle with.")

        execute_castle(self.board, color, side)
        self.en_passant.clear()
        move = Move(squares.king_from, squares.king_to, king, castling_side=side)
        return self._record(move, color)

    def reset(self) -> None:
        self.captured_pieces.clear()

    # -- PRIVATE HELPERS ---
    def _en_passant_capture_square(
        self, piece: Piece, to_location: Location
    ) -> Optional[Location]:
        """Where the victim stands if this pawn move is an en passant capture"""
        if piece.kind != PieceKind.PAWN or not self.board.is_empty(to_location):
            return None
        if not self.en_passant.is_available(to_location):
            return None
        return self.en_passant.capture_location

    def _choose_promotion(
        self, color: Color, preset: Optional[PieceKind] = None
    ) -> Optional[PieceKind]:
        choice = preset or self.promotion_chooser.choose_promotion(color)
        if choice is not None and choice not in PROMOTION_OPTIONS:
            logger.warning("Cannot promote to %s, cancelling the move", choice)
            return None
        return choice

    def _cancel(
        self,
        applied: AppliedMove,
        en_passant_before: tuple[Optional[Location], Optional[Location], int],
    ) -> None:
        """Exact inverse of the partially applied move: position, moved-flag, captured piece, en passant state"""
        applied.undo()
        self.en_passant.restore(en_passant_before)
        logger.warning(
            "Promotion cancelled, move %s-%s taken back",
            applied.from_location.to_algebraic(),
            applied.to_location.to_algebraic(),
        )

    def _promote(self, location: Location, kind: PieceKind, color: Color) -> None:
        self.board.remove_piece(location)
        self.board.place_piece(create_promoted_piece(kind, color), location)
        logger.info("Pawn promoted to %s on %s", kind, location.to_algebraic())

    def _record(self, move: Move, player: Color) -> MoveRecord:
        opponent = player.opponent
        move.is_check = king_in_check(self.board, opponent)
        move.is_checkmate = move.is_check and is_checkmate(
            self.board, opponent, self.en_passant.upcoming_target
        )
        return self.history.add_move(
            move, player, move.is_capture, move.is_check, move.is_checkmate
        )
