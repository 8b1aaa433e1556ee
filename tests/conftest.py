"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable, Generator

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from src.chess.board import Board
from src.chess.location import Location
from src.chess.pieces import Piece
from src.core.shared_types import Color, PieceKind
from src.db.schema import Base

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)

PiecesOnSquares = dict[str, tuple[PieceKind, Color]]


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def board_with() -> Callable[[PiecesOnSquares], Board]:
    """Call the inner function with {"e1": (PieceKind.KING, Color.WHITE), ...} to get a board with just those pieces"""

    def _create_board(pieces: PiecesOnSquares) -> Board:
        board = Board.empty()
        for square, (kind, color) in pieces.items():
            board.place_piece(Piece(kind, color), Location.from_algebraic(square))
        return board

    return _create_board
