"""Piece: colour, type and movement history of a single chessman."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from chessrules.core.enums import Color, PieceType
from chessrules.core.movement import MOVEMENT_RULES

if TYPE_CHECKING:
    from chessrules.core.coordinate import Coordinate
    from chessrules.core.movement import BoardView

# Symbol character ↔ (Color, PieceType)
_CHAR_MAP: dict[str, tuple[Color, PieceType]] = {
    "P": (Color.WHITE, PieceType.PAWN),
    "N": (Color.WHITE, PieceType.KNIGHT),
    "B": (Color.WHITE, PieceType.BISHOP),
    "R": (Color.WHITE, PieceType.ROOK),
    "Q": (Color.WHITE, PieceType.QUEEN),
    "K": (Color.WHITE, PieceType.KING),
    "p": (Color.BLACK, PieceType.PAWN),
    "n": (Color.BLACK, PieceType.KNIGHT),
    "b": (Color.BLACK, PieceType.BISHOP),
    "r": (Color.BLACK, PieceType.ROOK),
    "q": (Color.BLACK, PieceType.QUEEN),
    "k": (Color.BLACK, PieceType.KING),
}

_UNICODE: dict[tuple[Color, PieceType], str] = {
    (Color.WHITE, PieceType.PAWN): "♙",
    (Color.WHITE, PieceType.KNIGHT): "♘",
    (Color.WHITE, PieceType.BISHOP): "♗",
    (Color.WHITE, PieceType.ROOK): "♖",
    (Color.WHITE, PieceType.QUEEN): "♕",
    (Color.WHITE, PieceType.KING): "♔",
    (Color.BLACK, PieceType.PAWN): "♟",
    (Color.BLACK, PieceType.KNIGHT): "♞",
    (Color.BLACK, PieceType.BISHOP): "♝",
    (Color.BLACK, PieceType.ROOK): "♜",
    (Color.BLACK, PieceType.QUEEN): "♛",
    (Color.BLACK, PieceType.KING): "♚",
}

_SYMBOLS: dict[tuple[Color, PieceType], str] = {v: k for k, v in _CHAR_MAP.items()}


@dataclass(frozen=True, slots=True)
class Piece:
    """A chessman owned by a board.

    The movement identity is the ``piece_type`` tag; the per-type rules live
    in :data:`chessrules.core.movement.MOVEMENT_RULES` and are looked up on
    every query. Pieces are immutable: the board records a move by storing
    a new piece with ``has_moved`` set.
    """

    color: Color
    piece_type: PieceType
    has_moved: bool = False

    # ── Symbols ──────────────────────────────────────────────────────────

    @property
    def symbol(self) -> str:
        """Letter symbol (uppercase = white, lowercase = black)."""
        return _SYMBOLS[(self.color, self.piece_type)]

    @property
    def glyph(self) -> str:
        """Unicode chess symbol, e.g. ♞."""
        return _UNICODE[(self.color, self.piece_type)]

    def __str__(self) -> str:
        return self.symbol

    @staticmethod
    def lookup_symbol(char: str) -> tuple[Color, PieceType] | None:
        """Colour and type implied by *char*, or ``None`` if unknown."""
        return _CHAR_MAP.get(char)

    @classmethod
    def from_symbol(cls, char: str) -> Piece:
        """Create piece from a letter symbol, e.g. 'N' → white knight."""
        try:
            color, ptype = _CHAR_MAP[char]
        except KeyError:
            raise ValueError(f"Invalid piece symbol: {char!r}") from None
        return cls(color, ptype)

    # ── Movement ─────────────────────────────────────────────────────────

    def is_valid_move(
        self, from_pos: Coordinate, to_pos: Coordinate, board: BoardView
    ) -> bool:
        """Whether the move has a legal *shape* for this piece.

        Turn order and king safety are the board's business.
        """
        return MOVEMENT_RULES[self.piece_type].is_valid_move(
            self, from_pos, to_pos, board
        )

    def possible_moves(
        self, from_pos: Coordinate, board: BoardView
    ) -> list[Coordinate]:
        """Pseudo-legal destinations: empty or enemy-occupied squares only."""
        return MOVEMENT_RULES[self.piece_type].possible_moves(self, from_pos, board)

    def is_promotion_rank(self, pos: Coordinate) -> bool:
        if self.piece_type != PieceType.PAWN:
            return False
        return pos.rank == self.color.opposite.home_rank

    def duplicate(self) -> Piece:
        """Independent copy with the same colour, type and history."""
        return replace(self)

    def moved(self) -> Piece:
        """This piece after it has left its square."""
        return replace(self, has_moved=True)
