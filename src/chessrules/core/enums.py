"""Core enumerations for the rule engine."""

from __future__ import annotations

from enum import IntEnum, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def pawn_direction(self) -> int:
        """Rank delta of a single pawn step (+1 for white, -1 for black)."""
        return 1 if self == Color.WHITE else -1

    @property
    def home_rank(self) -> int:
        """Rank holding this side's king and rooks at the start (1 or 8)."""
        return 1 if self == Color.WHITE else 8

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class CastlingSide(IntEnum):
    """Which rook the king castles with."""

    KINGSIDE = auto()
    QUEENSIDE = auto()


class BoardStatus(IntEnum):
    """Terminal-condition summary for the side to move."""

    IN_PROGRESS = 0
    CHECK = auto()
    CHECKMATE = auto()
    STALEMATE = auto()


PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)
