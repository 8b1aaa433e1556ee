"""
Boundary layer data model(s).

Snapshots are what leaves the rules engine: the state-history manager keeps them for undo/redo and the
persistence layer serializes them. Both sides only ever see these models, never the live Board.
"""

from dataclasses import dataclass
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.core.shared_types import Color, Difficulty, GameMode, GameResult, PieceKind

BOARD_SIZE = 8

# Type aliases to make the snapshot easier to read
PlayerName = str


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class GameContext:
    """Everything about a game that is not the position on the board."""

    game_id: int = 0
    mode: GameMode = GameMode.HUMAN_VS_HUMAN
    current_player: Color = Color.WHITE
    human_color: Color = Color.WHITE
    result: GameResult = GameResult.IN_PROGRESS
    difficulty: Difficulty = Difficulty.MEDIUM
    white_name: PlayerName = "White"
    black_name: PlayerName = "Black"


class PieceData(BaseModel):
    """A single piece as it is stored in a snapshot."""

    model_config = ConfigDict(frozen=True)

    kind: PieceKind
    color: Color
    row: int
    column: int
    has_moved: bool = False

    @field_validator("row", "column")
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        if not 0 <= value < BOARD_SIZE:
            raise ValueError(f"Coordinate {value} is not on the board.")
        return value


class GameStateSnapshot(BaseModel):
    """Immutable, complete description of the board contents plus the game context."""

    model_config = ConfigDict(frozen=True)

    pieces: tuple[PieceData, ...]
    game_id: int = 0
    mode: GameMode = GameMode.HUMAN_VS_HUMAN
    current_player: Color = Color.WHITE
    human_color: Color = Color.WHITE
    result: GameResult = GameResult.IN_PROGRESS
    difficulty: Difficulty = Difficulty.MEDIUM
    white_name: PlayerName = "White"
    black_name: PlayerName = "Black"
    move_count: int = 0
    move_history: tuple[str, ...] = ()
    saved_at: datetime = Field(default_factory=utc_now)

    @model_validator(mode="after")
    def validate_unique_squares(self) -> "GameStateSnapshot":
        squares = [(piece.row, piece.column) for piece in self.pieces]
        if len(squares) != len(set(squares)):
            raise ValueError("Two pieces in the snapshot occupy the same square.")
        return self

    def context(self) -> GameContext:
        return GameContext(
            game_id=self.game_id,
            mode=self.mode,
            current_player=self.current_player,
            human_color=self.human_color,
            result=self.result,
            difficulty=self.difficulty,
            white_name=self.white_name,
            black_name=self.black_name,
        )
