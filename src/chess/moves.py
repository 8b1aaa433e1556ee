"""
Geometry/Base movement and capturing/attacking rules

Key idea: every piece kind maps onto one pure function that produces its *pseudo-legal* moves:
moves that follow the movement shape and the blocking/capturing rules of that piece, but are blind to checks.

Legality (not leaving your own king in check) is decided later by src/chess/rules.py
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, assert_never

from src.chess.location import Location
from src.chess.pieces import FEN_TO_PIECE, PIECE_TO_FEN, Piece
from src.core.shared_types import CastlingSide, Color, PieceKind


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece_at(self, location: Location) -> Optional[Piece]: ...


Vector = tuple[int, int]

DIAGONALS: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KNIGHT_JUMPS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_STEPS: list[Vector] = STRAIGHTS + DIAGONALS


@dataclass
class Move:
    """A move of one piece. The flags are filled in as the move gets executed."""

    from_location: Location
    to_location: Location
    piece: Piece
    captured: Optional[Piece] = None
    promote_to: Optional[PieceKind] = None
    is_en_passant: bool = False
    castling_side: Optional[CastlingSide] = None
    is_check: bool = False
    is_checkmate: bool = False

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    @property
    def is_promotion(self) -> bool:
        return self.promote_to is not None

    @property
    def is_castle(self) -> bool:
        return self.castling_side is not None

    @property
    def captured_location(self) -> Optional[Location]:
        """
        Where the captured piece stood.

        NOTE: for en passant that is NOT the target square: the victim stands next to the capturing pawn,
        on the capturing pawn's row and the target square's column.
        """
        if self.is_en_passant:
            return Location(self.from_location.row, self.to_location.column)
        if self.captured is not None:
            return self.to_location
        return None

    def to_uci(self) -> str:
        """
        Universal Chess Interface:
        ---
        "e2e4", or "e7e8q" for a promotion. Castling is the king's move ("e1g1").
        """
        piece_char = PIECE_TO_FEN[self.promote_to] if self.is_promotion else ""
        return f"{self.from_location.to_algebraic()}{self.to_location.to_algebraic()}{piece_char}"


def parse_uci(uci: str) -> tuple[Location, Location, Optional[PieceKind]]:
    """
    Split a UCI move into its squares and optional promotion piece.

    NOTE: a UCI string says nothing about the moving piece, so this cannot build a `Move` on its own.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"Not a UCI move: {uci!r}")
    promote_to = FEN_TO_PIECE.get(uci[4].lower()) if len(uci) == 5 else None
    if len(uci) == 5 and promote_to is None:
        raise ValueError(f"Unknown promotion piece in {uci!r}")
    return Location.from_algebraic(uci[:2]), Location.from_algebraic(uci[2:4]), promote_to


# --- PAWN GEOMETRY ---
def pawn_direction(color: Color) -> int:
    """White moves UP the board (towards row 0), black moves DOWN"""
    return -1 if color == Color.WHITE else 1


def pawn_home_row(color: Color) -> int:
    return 6 if color == Color.WHITE else 1


def promotion_row(color: Color) -> int:
    """The opponent's back rank"""
    return 0 if color == Color.WHITE else 7


# --- MOVEMENT RULES ---
def raycasting_move(
    location: Location, piece: Piece, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    Move along each direction until we hit another piece or the edge of the board.
    The first occupied square ends the ray; it is only included when the occupant can be captured.
    """
    moves: list[Move] = []
    for d_row, d_column in directions:
        target = location.offset(d_row, d_column)
        while target is not None:
            occupant = board.piece_at(target)
            if occupant is not None:
                if occupant.color != piece.color:
                    moves.append(Move(location, target, piece, captured=occupant))
                break

            moves.append(Move(location, target, piece))
            target = target.offset(d_row, d_column)
    return moves


def single_step_move(
    location: Location, piece: Piece, board: Board, deltas: list[Vector]
) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just make a single step"""
    moves: list[Move] = []
    for d_row, d_column in deltas:
        target = location.offset(d_row, d_column)
        if target is None:
            continue

        occupant = board.piece_at(target)
        if occupant is None or occupant.color != piece.color:
            moves.append(Move(location, target, piece, captured=occupant))
    return moves


def pawn_moves(location: Location, piece: Piece, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two on its first move (unmoved, on its home rank), when both squares are empty
    - takes diagonally

    NOTE: En passant is only offered through `en_passant_moves()`
    """
    moves: list[Move] = []
    direction = pawn_direction(piece.color)

    one_step = location.offset(direction, 0)
    if one_step is not None and board.piece_at(one_step) is None:
        moves.append(Move(location, one_step, piece))

        on_home_rank = location.row == pawn_home_row(piece.color)
        two_steps = location.offset(2 * direction, 0)
        if (
            on_home_rank
            and not piece.has_moved
            and two_steps is not None
            and board.piece_at(two_steps) is None
        ):
            moves.append(Move(location, two_steps, piece))

    for d_column in (-1, 1):
        target = location.offset(direction, d_column)
        if target is None:
            continue
        occupant = board.piece_at(target)
        if occupant is not None and occupant.color != piece.color:
            moves.append(Move(location, target, piece, captured=occupant))
    return moves


def knight_moves(location: Location, piece: Piece, board: Board) -> list[Move]:
    """Knights always move such that |delta_row| + |delta_column| = 3"""
    return single_step_move(location, piece, board, KNIGHT_JUMPS)


def bishop_moves(location: Location, piece: Piece, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_row| = |delta_column|"""
    return raycasting_move(location, piece, board, DIAGONALS)


def rook_moves(location: Location, piece: Piece, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(location, piece, board, STRAIGHTS)


def queen_moves(location: Location, piece: Piece, board: Board) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(location, piece, board, STRAIGHTS + DIAGONALS)


def king_moves(location: Location, piece: Piece, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time.

    Stepping into check is filtered by the legality rules, castling is executed separately (src/chess/castling.py).
    """
    return single_step_move(location, piece, board, KING_STEPS)


def generate_moves(
    location: Location, board: Board, piece: Optional[Piece] = None
) -> list[Move]:
    """
    Pseudo-legal moves of whatever stands on `location`.

    When `piece` is given, the board is re-read first: if that exact piece no longer stands on `location`
    there are no moves (guards against acting on an outdated location).
    """
    occupant = board.piece_at(location)
    if occupant is None or (piece is not None and occupant is not piece):
        return []

    match occupant.kind:
        case PieceKind.PAWN:
            return pawn_moves(location, occupant, board)
        case PieceKind.KNIGHT:
            return knight_moves(location, occupant, board)
        case PieceKind.BISHOP:
            return bishop_moves(location, occupant, board)
        case PieceKind.ROOK:
            return rook_moves(location, occupant, board)
        case PieceKind.QUEEN:
            return queen_moves(location, occupant, board)
        case PieceKind.KING:
            return king_moves(location, occupant, board)
        case _:
            assert_never(occupant.kind)


# -- EN PASSANT MOVES ---
def en_passant_moves(
    location: Location, board: Board, en_passant_target: Optional[Location]
) -> list[Move]:
    """
    The en passant capture of the pawn on `location`, if the live target square is diagonally in front of it.

    The victim is the opponent's pawn standing right next to the capturing pawn, in the target's column.
    """
    pawn = board.piece_at(location)
    if en_passant_target is None or pawn is None or pawn.kind != PieceKind.PAWN:
        return []

    direction = pawn_direction(pawn.color)
    if en_passant_target.row != location.row + direction:
        return []
    if abs(en_passant_target.column - location.column) != 1:
        return []
    if board.piece_at(en_passant_target) is not None:
        return []

    victim = board.piece_at(Location(location.row, en_passant_target.column))
    if victim is None or not victim.is_same_as(PieceKind.PAWN, pawn.color.opponent):
        return []

    return [
        Move(location, en_passant_target, pawn, captured=victim, is_en_passant=True)
    ]


def generate_moves_with_en_passant(
    location: Location,
    board: Board,
    en_passant_target: Optional[Location],
    piece: Optional[Piece] = None,
) -> list[Move]:
    """Plain pseudo-legal moves, plus the en passant capture when a live target is passed in."""
    occupant = board.piece_at(location)
    if occupant is None or (piece is not None and occupant is not piece):
        return []
    return generate_moves(location, board, occupant) + en_passant_moves(
        location, board, en_passant_target
    )


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    location: Location,
    by_color: Color,
    by_kinds: tuple[PieceKind, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and kind?"_
    """
    for d_row, d_column in directions:
        target = location.offset(d_row, d_column)
        while target is not None:
            occupant = board.piece_at(target)
            if occupant is not None:
                if occupant.color == by_color and occupant.kind in by_kinds:
                    return True
                break
            target = target.offset(d_row, d_column)
    return False


def single_step_attack(
    location: Location,
    by_color: Color,
    by_kind: PieceKind,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """Single step equivalent of `raycasting_attack()`"""
    for d_row, d_column in deltas:
        target = location.offset(d_row, d_column)
        if target is None:
            continue
        occupant = board.piece_at(target)
        if occupant is not None and occupant.is_same_as(by_kind, by_color):
            return True
    return False


def is_attacked_by_pawn(location: Location, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric. To check IF a white pawn attacks your square, look one row
    further DOWN the board (where a white pawn would come from).
    """
    back = -pawn_direction(by_color)
    return single_step_attack(
        location, by_color, PieceKind.PAWN, board, [(back, -1), (back, 1)]
    )


def is_attacked_by_knight(location: Location, by_color: Color, board: Board) -> bool:
    return single_step_attack(location, by_color, PieceKind.KNIGHT, board, KNIGHT_JUMPS)


def is_attacked_along_diagonals(
    location: Location, by_color: Color, board: Board
) -> bool:
    """Bishops and the queen"""
    return raycasting_attack(
        location, by_color, (PieceKind.BISHOP, PieceKind.QUEEN), board, DIAGONALS
    )


def is_attacked_along_straights(
    location: Location, by_color: Color, board: Board
) -> bool:
    """Rooks and the queen"""
    return raycasting_attack(
        location, by_color, (PieceKind.ROOK, PieceKind.QUEEN), board, STRAIGHTS
    )


def is_attacked_by_king(location: Location, by_color: Color, board: Board) -> bool:
    return single_step_attack(location, by_color, PieceKind.KING, board, KING_STEPS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Location, Color, Board], bool]
ATTACK_RULES: list[IsAttackedFn] = [
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_along_diagonals,
    is_attacked_along_straights,
    is_attacked_by_king,
]


def is_square_attacked_by(location: Location, by_color: Color, board: Board) -> bool:
    """Could any piece of `by_color` capture on `location`?"""
    return any(rule(location, by_color, board) for rule in ATTACK_RULES)
