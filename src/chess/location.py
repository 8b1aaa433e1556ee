"""
A location on the board

(placed in its own module as multiple other modules need to import it)

Coordinates follow the board as seen from White: row 0 is the 8th rank (Black's back rank), row 7 the 1st rank.
Column 0 is the a-file.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.core.exceptions import OutOfBoundsError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)


def is_within_bounds(row: int, column: int) -> bool:
    return (0 <= row < BOARD_DIMENSIONS[0]) and (0 <= column < BOARD_DIMENSIONS[1])


@dataclass(frozen=True)
class Location:
    row: int
    column: int

    def __post_init__(self) -> None:
        # NOTE: never clamp. A location off the board is a programming error further up.
        if not is_within_bounds(self.row, self.column):
            raise OutOfBoundsError(
                f"Location ({self.row}, {self.column}) is outside of the board."
            )

    @classmethod
    def from_algebraic(cls, sq: str) -> Location:
        """Algebraic notation: 'a8' - 'h1' get converted to (0,0) - (7,7)"""
        column = ord(sq[0]) - ord("a")
        row = BOARD_DIMENSIONS[0] - int(sq[1])
        return cls(row, column)

    def to_algebraic(self) -> str:
        return f"{chr(self.column + ord('a'))}{BOARD_DIMENSIONS[0] - self.row}"

    def offset(self, d_row: int, d_column: int) -> Optional[Location]:
        """The location a given step away, or None when that step leaves the board."""
        row = self.row + d_row
        column = self.column + d_column
        if not is_within_bounds(row, column):
            return None
        return Location(row, column)
