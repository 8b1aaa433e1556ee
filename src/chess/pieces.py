"""Defines the chess pieces"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from src.core.shared_types import Color, PieceKind

if TYPE_CHECKING:
    from src.chess.location import Location


FEN_TO_PIECE: dict[str, PieceKind] = {
    "p": PieceKind.PAWN,
    "n": PieceKind.KNIGHT,
    "b": PieceKind.BISHOP,
    "r": PieceKind.ROOK,
    "q": PieceKind.QUEEN,
    "k": PieceKind.KING,
}

PIECE_TO_FEN: dict[PieceKind, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Letter used in move notation. Pawns have none.
PIECE_LETTERS: dict[PieceKind, str] = {
    PieceKind.PAWN: "",
    PieceKind.KNIGHT: "N",
    PieceKind.BISHOP: "B",
    PieceKind.ROOK: "R",
    PieceKind.QUEEN: "Q",
    PieceKind.KING: "K",
}


@dataclass(eq=False)
class Piece:
    """
    A piece is owned by exactly one board cell.

    NOTE: `location` is maintained by the Board (set on placement, cleared on removal). Never assign it yourself.
    Equality is identity: two white pawns are different pieces.
    """

    kind: PieceKind
    color: Color
    has_moved: bool = False
    location: Optional[Location] = field(default=None, repr=False)

    @classmethod
    def from_fen(cls, character: str) -> Piece:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        kind = FEN_TO_PIECE[character.lower()]
        return cls(kind, color)

    @property
    def letter(self) -> str:
        return PIECE_LETTERS[self.kind]

    def is_same_as(self, kind: PieceKind, color: Color) -> bool:
        return self.kind == kind and self.color == color
