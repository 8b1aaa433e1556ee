"""
The ChessGame class is the entrypoint into the rules engine for whatever drives the game (console, UI, AI loop).
It is responsible for orchestrating all the components required to play a turn:
validation, execution, turn switching, game end detection, state history (undo/redo) and autosave.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.chess.board import Board
from src.chess.castling import CASTLING_RULES, castling_block_reason
from src.chess.en_passant import EnPassantTracker
from src.chess.executor import MoveExecutor
from src.chess.history import MoveHistory, MoveRecord
from src.chess.location import Location
from src.chess.moves import Move, parse_uci
from src.chess.promotion import FixedPromotionChooser, PromotionChooser
from src.chess.rules import (
    all_legal_moves,
    is_checkmate,
    is_stalemate,
    king_in_check,
)
from src.chess.rules import legal_moves as legal_moves_from
from src.chess.turns import Player, TurnManager
from src.chess.validators import validate_move
from src.core.exceptions import OutOfBoundsError
from src.core.models import GameContext, GameStateSnapshot
from src.core.shared_types import (
    CastlingSide,
    Color,
    Difficulty,
    GameMode,
    GameResult,
    PieceKind,
)
from src.db.repository import AutosaveStore
from src.state.history import StateHistoryManager
from src.state.snapshots import SnapshotManager

logger = logging.getLogger(__name__)

WINNER_BY_COLOR: dict[Color, GameResult] = {
    Color.WHITE: GameResult.WHITE_WINS,
    Color.BLACK: GameResult.BLACK_WINS,
}


@dataclass(frozen=True)
class TurnOutcome:
    """What happened to a requested move: the history record when it was played, otherwise the reason why not"""

    record: Optional[MoveRecord] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


class ChessGame:
    # --- ENGINE API CALLED BY THE APPLICATION ---

    def __init__(
        self,
        promotion_chooser: Optional[PromotionChooser] = None,
        autosave_store: Optional[AutosaveStore] = None,
        max_history_size: Optional[int] = None,
    ) -> None:
        self.board = Board.standard()
        self.state_history = (
            StateHistoryManager(autosave_store)
            if max_history_size is None
            else StateHistoryManager(autosave_store, max_history_size)
        )
        self.turns = TurnManager(state_history=self.state_history)
        # one ply clock for the whole game, owned by the turn manager
        self.en_passant = EnPassantTracker(self.turns.clock)
        self.history = MoveHistory()
        self.executor = MoveExecutor(
            self.board,
            self.en_passant,
            self.history,
            promotion_chooser or FixedPromotionChooser(),
        )
        self.snapshots = SnapshotManager()
        self.context = GameContext()
        self._undone_records: list[MoveRecord] = []
        self._earlier_notations: tuple[str, ...] = ()

    # -- SETUP ---
    def new_game(
        self,
        mode: GameMode = GameMode.HUMAN_VS_HUMAN,
        human_color: Color = Color.WHITE,
        difficulty: Difficulty = Difficulty.MEDIUM,
        white_name: str = "White",
        black_name: str = "Black",
        board: Optional[Board] = None,
        current_player: Color = Color.WHITE,
    ) -> None:
        """
        Start a new game
        ----

        `board` allows starting from a constructed position (puzzles, tests); its pieces are copied over.
        """
        self._reset_components()
        source = board.copy() if board is not None else Board.standard()
        for location, piece in source.position.items():
            self.board.place_piece(piece, location)

        self.context = GameContext(
            game_id=self.context.game_id + 1,
            mode=mode,
            current_player=current_player,
            human_color=human_color,
            difficulty=difficulty,
            white_name=white_name,
            black_name=black_name,
        )
        self.turns.set_current_player(current_player)
        self.turns.set_players(
            [Player(white_name, Color.WHITE), Player(black_name, Color.BLACK)]
        )
        self.context.result = self._evaluate_result()
        self.state_history.record_state(self._snapshot())
        logger.info(
            "New game %d: %s vs %s (%s)", self.context.game_id, white_name, black_name, mode
        )

    def resume_autosave(self) -> bool:
        """Continue the autosaved game, if there is one. Undo cannot go back past the resumed position."""
        snapshot = self.state_history.load_autosave()
        if snapshot is None:
            return False

        self._reset_components()
        self.context = self.snapshots.restore_snapshot(snapshot, self.board)
        self._earlier_notations = snapshot.move_history
        self.turns.clock.ply = snapshot.move_count
        self.turns.set_current_player(self.context.current_player)
        self.turns.set_players(
            [
                Player(self.context.white_name, Color.WHITE),
                Player(self.context.black_name, Color.BLACK),
            ]
        )
        self.state_history.record_state(snapshot)
        logger.info("Resumed game %d at turn %d", self.context.game_id, snapshot.move_count)
        return True

    # -- QUERIES ---
    @property
    def current_player(self) -> Color:
        return self.turns.current_player

    @property
    def result(self) -> GameResult:
        return self.context.result

    @property
    def is_over(self) -> bool:
        return self.context.result != GameResult.IN_PROGRESS

    @property
    def move_count(self) -> int:
        return len(self._earlier_notations) + self.history.count

    def notations(self) -> list[str]:
        return [*self._earlier_notations, *self.history.notations()]

    def is_check(self) -> bool:
        return king_in_check(self.board, self.current_player)

    def legal_moves(self, location: Location) -> list[Move]:
        """Legal moves of the current player's piece on `location` (empty for an empty square or the opponent's piece)"""
        return legal_moves_from(
            self.board, location, self.current_player, self.en_passant.target
        )

    def all_legal_moves(self) -> list[Move]:
        return all_legal_moves(self.board, self.current_player, self.en_passant.target)

    def can_castle(self, side: CastlingSide) -> bool:
        return castling_block_reason(self.board, self.current_player, side) is None

    def status(self) -> GameResult:
        """Re-evaluate the position for the player to move and store the result"""
        self.context.result = self._evaluate_result()
        return self.context.result

    # -- PLAYING ---
    def validate_move(self, from_location: Location, to_location: Location) -> Optional[str]:
        """None if the current player may make this move, otherwise the reason why not"""
        if self.is_over:
            return f"The game is over: {self.context.result}"
        return validate_move(
            from_location,
            to_location,
            self.current_player,
            self.board,
            self.en_passant.target,
        )

    def make_move(
        self,
        from_location: Location,
        to_location: Location,
        promote_to: Optional[PieceKind] = None,
    ) -> TurnOutcome:
        """
        Attempt to make a move
        -----

        1. a king moving two squares sideways from its home square is a castling request
        2. validate the move (ownership, movement shape, king safety)
        3. execute it (captures, en passant, promotion)
        4. finish the turn: switch turns, detect the end of the game, record the state and autosave
        """
        castling_side = self._castling_side_of(from_location, to_location)
        if castling_side is not None:
            return self.castle(castling_side)

        reason = self.validate_move(from_location, to_location)
        if reason is not None:
            logger.debug("Move rejected: %s", reason)
            return TurnOutcome(error=reason)

        record = self.executor.execute_move(from_location, to_location, promote_to)
        if record is None:
            return TurnOutcome(error="Promotion cancelled, the move was taken back.")

        self._finish_turn(record)
        return TurnOutcome(record=record)

    def make_uci_move(self, uci: str) -> TurnOutcome:
        """Same as `make_move()`, for moves written as "e2e4" / "e7e8q" (AI collaborators)"""
        try:
            from_location, to_location, promote_to = parse_uci(uci)
        except (ValueError, OutOfBoundsError) as error:
            return TurnOutcome(error=str(error))
        return self.make_move(from_location, to_location, promote_to)

    def castle(self, side: CastlingSide) -> TurnOutcome:
        if self.is_over:
            return TurnOutcome(error=f"The game is over: {self.context.result}")

        reason = castling_block_reason(self.board, self.current_player, side)
        if reason is not None:
            return TurnOutcome(error=reason)

        record = self.executor.execute_castle(self.current_player, side)
        self._finish_turn(record)
        return TurnOutcome(record=record)

    # -- UNDO / REDO ---
    def can_undo(self) -> bool:
        return self.state_history.can_rollback()

    def can_redo(self) -> bool:
        return self.state_history.can_redo()

    def undo(self) -> bool:
        """Take back the last ply. False when there is nothing to take back."""
        snapshot = self.state_history.rollback()
        if snapshot is None:
            return False

        record = self.history.pop_last()
        if record is not None:
            self._undone_records.append(record)
        self._apply_snapshot(snapshot)
        return True

    def redo(self) -> bool:
        """Replay the last ply taken back. False when nothing was taken back (or a new move was made since)."""
        snapshot = self.state_history.redo()
        if snapshot is None:
            return False

        if self._undone_records:
            self.history.restore(self._undone_records.pop())
        self._apply_snapshot(snapshot)
        return True

    # -- PRIVATE HELPERS ---
    def _reset_components(self) -> None:
        self.board.clear()
        self.turns.reset()
        self.en_passant.clear()
        self.history.clear()
        self.executor.reset()
        self.state_history.clear_all()
        self._undone_records.clear()
        self._earlier_notations = ()

    def _snapshot(self) -> GameStateSnapshot:
        return self.snapshots.create_snapshot(
            self.board, self.context, self.move_count, self.notations()
        )

    def _castling_side_of(
        self, from_location: Location, to_location: Location
    ) -> Optional[CastlingSide]:
        for (color, side), squares in CASTLING_RULES.items():
            if (
                color == self.current_player
                and squares.king_from == from_location
                and squares.king_to == to_location
            ):
                piece = self.board.piece_at(from_location)
                if piece is not None and piece.is_same_as(PieceKind.KING, color):
                    return side
        return None

    def _evaluate_result(self) -> GameResult:
        player = self.current_player
        if is_checkmate(self.board, player, self.en_passant.target):
            return WINNER_BY_COLOR[player.opponent]
        if is_stalemate(self.board, player, self.en_passant.target):
            return GameResult.STALEMATE
        return GameResult.IN_PROGRESS

    def _finish_turn(self, record: MoveRecord) -> None:
        """
        Everything that happens after a move was played
        ----

        1. a new move makes the undone moves unreachable
        2. hand the turn over (this also clears the redo stack)
        3. checkmate / stalemate for the player that is now to move?
        4. record the new state; autosave it, or drop the autosave when the game just ended
        """
        self._undone_records.clear()
        self.turns.switch_turns()
        self.context.current_player = self.turns.current_player

        self.context.result = (
            WINNER_BY_COLOR[record.player]
            if record.was_checkmate
            else self._evaluate_result()
        )

        snapshot = self._snapshot()
        self.state_history.record_state(snapshot)
        if self.is_over:
            logger.info("Game %d ended: %s", self.context.game_id, self.context.result)
            self.state_history.cleanup_autosave()
        else:
            self.state_history.autosave(snapshot)

    def _apply_snapshot(self, snapshot: GameStateSnapshot) -> None:
        """Restore position, context, clock and the en passant window after undo/redo"""
        self.context = self.snapshots.restore_snapshot(snapshot, self.board)
        self.turns.clock.ply = snapshot.move_count
        self.turns.set_current_player(self.context.current_player)
        self.en_passant.clear()

        last = self.history.last_move
        if last is not None and last.move.piece.kind == PieceKind.PAWN:
            self.en_passant.reopen(last.move.from_location, last.move.to_location)

        if not self.is_over:
            self.state_history.autosave(snapshot)
