"""Pawn promotion: detecting it is a rule, choosing the new piece is up to a collaborator (player UI or AI)."""

from dataclasses import dataclass
from typing import Optional, Protocol

from src.chess.location import Location
from src.chess.moves import promotion_row
from src.chess.pieces import Piece
from src.core.shared_types import Color, PieceKind

PROMOTION_OPTIONS: list[PieceKind] = [
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.ROOK,
    PieceKind.QUEEN,
]


class PromotionChooser(Protocol):
    """Asked synchronously in the middle of a move. Returning None cancels the whole move."""

    def choose_promotion(self, color: Color) -> Optional[PieceKind]: ...


@dataclass
class FixedPromotionChooser:
    """Always picks the same piece (AI players, tests, auto-queen setting)."""

    kind: Optional[PieceKind] = PieceKind.QUEEN

    def choose_promotion(self, color: Color) -> Optional[PieceKind]:
        return self.kind


def needs_promotion(piece: Piece, location: Location) -> bool:
    """A pawn standing on the opponent's back rank"""
    return piece.kind == PieceKind.PAWN and location.row == promotion_row(piece.color)


def create_promoted_piece(kind: PieceKind, color: Color) -> Piece:
    return Piece(kind, color, has_moved=True)
