"""Per-piece-type movement rules (shape legality and pseudo-legal targets).

Each :class:`PieceType` maps to exactly one rule object in
:data:`MOVEMENT_RULES`. Rules never check turn order or king safety; they
only answer whether a move has the right shape, and which squares a piece
could reach ignoring self-check.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from chessrules.core.coordinate import Coordinate, between
from chessrules.core.enums import Color, PieceType

if TYPE_CHECKING:
    from chessrules.core.piece import Piece


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

KING_FILE = 5
KINGSIDE_KING_FILE = 7
QUEENSIDE_KING_FILE = 3


class BoardView(Protocol):
    """Read-only board surface the movement rules consult."""

    def get_piece(self, pos: Coordinate) -> Piece | None: ...

    def is_en_passant(
        self, from_pos: Coordinate, to_pos: Coordinate, turn: Color
    ) -> bool: ...

    def can_castle_kingside(self, color: Color) -> bool: ...

    def can_castle_queenside(self, color: Color) -> bool: ...


class MovementRule(Protocol):
    """Movement behaviour of one piece type."""

    def is_valid_move(
        self,
        piece: Piece,
        from_pos: Coordinate,
        to_pos: Coordinate,
        board: BoardView,
    ) -> bool: ...

    def possible_moves(
        self, piece: Piece, from_pos: Coordinate, board: BoardView
    ) -> list[Coordinate]: ...


def _can_land(piece: Piece, pos: Coordinate, board: BoardView) -> bool:
    """*pos* is on the board and empty or held by the enemy."""
    if not pos.is_valid():
        return False
    target = board.get_piece(pos)
    return target is None or target.color != piece.color


def _deltas(from_pos: Coordinate, to_pos: Coordinate) -> tuple[int, int]:
    return to_pos.rank - from_pos.rank, to_pos.file - from_pos.file


# -- Rules ----------------------------------------------------------------------


class _SlidingRule:
    """Queen, rook and bishop: rays stopped by the first occupied square."""

    __slots__ = ("_dirs", "_straight", "_diagonal")

    def __init__(self, dirs: tuple[tuple[int, int], ...]) -> None:
        self._dirs = dirs
        self._straight = any(0 in d for d in dirs)
        self._diagonal = any(0 not in d for d in dirs)

    def is_valid_move(
        self,
        piece: Piece,
        from_pos: Coordinate,
        to_pos: Coordinate,
        board: BoardView,
    ) -> bool:
        if not from_pos.is_valid() or not _can_land(piece, to_pos, board):
            return False
        d_rank, d_file = _deltas(from_pos, to_pos)
        if d_rank == 0 and d_file == 0:
            return False
        straight = d_rank == 0 or d_file == 0
        diagonal = abs(d_rank) == abs(d_file)
        if not ((straight and self._straight) or (diagonal and self._diagonal)):
            return False
        return all(board.get_piece(sq) is None for sq in between(from_pos, to_pos))

    def possible_moves(
        self, piece: Piece, from_pos: Coordinate, board: BoardView
    ) -> list[Coordinate]:
        moves: list[Coordinate] = []
        for d_rank, d_file in self._dirs:
            to_pos = from_pos.offset(d_rank, d_file)
            while to_pos.is_valid():
                target = board.get_piece(to_pos)
                if target is None:
                    moves.append(to_pos)
                    to_pos = to_pos.offset(d_rank, d_file)
                    continue
                if target.color != piece.color:
                    moves.append(to_pos)
                break
        return moves


class _KnightRule:
    __slots__ = ()

    def is_valid_move(
        self,
        piece: Piece,
        from_pos: Coordinate,
        to_pos: Coordinate,
        board: BoardView,
    ) -> bool:
        if not from_pos.is_valid() or not _can_land(piece, to_pos, board):
            return False
        return _deltas(from_pos, to_pos) in KNIGHT_OFFSETS

    def possible_moves(
        self, piece: Piece, from_pos: Coordinate, board: BoardView
    ) -> list[Coordinate]:
        return [
            to_pos
            for to_pos in (from_pos.offset(dr, df) for dr, df in KNIGHT_OFFSETS)
            if _can_land(piece, to_pos, board)
        ]


class _KingRule:
    """One step in any direction, or a two-file castling move."""

    __slots__ = ()

    def is_valid_move(
        self,
        piece: Piece,
        from_pos: Coordinate,
        to_pos: Coordinate,
        board: BoardView,
    ) -> bool:
        if not from_pos.is_valid() or not _can_land(piece, to_pos, board):
            return False
        d_rank, d_file = _deltas(from_pos, to_pos)
        if (d_rank, d_file) in KING_OFFSETS:
            return True
        if d_rank != 0 or abs(d_file) != 2:
            return False
        if from_pos != Coordinate(piece.color.home_rank, KING_FILE):
            return False
        if d_file > 0:
            return board.can_castle_kingside(piece.color)
        return board.can_castle_queenside(piece.color)

    def possible_moves(
        self, piece: Piece, from_pos: Coordinate, board: BoardView
    ) -> list[Coordinate]:
        moves = [
            to_pos
            for to_pos in (from_pos.offset(dr, df) for dr, df in KING_OFFSETS)
            if _can_land(piece, to_pos, board)
        ]
        if from_pos == Coordinate(piece.color.home_rank, KING_FILE):
            if board.can_castle_kingside(piece.color):
                moves.append(Coordinate(from_pos.rank, KINGSIDE_KING_FILE))
            if board.can_castle_queenside(piece.color):
                moves.append(Coordinate(from_pos.rank, QUEENSIDE_KING_FILE))
        return moves


class _PawnRule:
    """Forward pushes onto empty squares, diagonal captures, en passant."""

    __slots__ = ()

    def is_valid_move(
        self,
        piece: Piece,
        from_pos: Coordinate,
        to_pos: Coordinate,
        board: BoardView,
    ) -> bool:
        if not from_pos.is_valid() or not to_pos.is_valid():
            return False
        direction = piece.color.pawn_direction
        d_rank, d_file = _deltas(from_pos, to_pos)

        if d_file == 0:
            if board.get_piece(to_pos) is not None:
                return False
            if d_rank == direction:
                return True
            return (
                d_rank == 2 * direction
                and not piece.has_moved
                and board.get_piece(from_pos.offset(direction, 0)) is None
            )

        if abs(d_file) == 1 and d_rank == direction:
            target = board.get_piece(to_pos)
            if target is not None:
                return target.color != piece.color
            return board.is_en_passant(from_pos, to_pos, piece.color)

        return False

    def possible_moves(
        self, piece: Piece, from_pos: Coordinate, board: BoardView
    ) -> list[Coordinate]:
        moves: list[Coordinate] = []
        direction = piece.color.pawn_direction

        one_step = from_pos.offset(direction, 0)
        if one_step.is_valid() and board.get_piece(one_step) is None:
            moves.append(one_step)
            two_step = from_pos.offset(2 * direction, 0)
            if (
                not piece.has_moved
                and two_step.is_valid()
                and board.get_piece(two_step) is None
            ):
                moves.append(two_step)

        for d_file in (-1, 1):
            capture = from_pos.offset(direction, d_file)
            if not capture.is_valid():
                continue
            target = board.get_piece(capture)
            if target is not None:
                if target.color != piece.color:
                    moves.append(capture)
            elif board.is_en_passant(from_pos, capture, piece.color):
                moves.append(capture)
        return moves


MOVEMENT_RULES: dict[PieceType, MovementRule] = {
    PieceType.PAWN: _PawnRule(),
    PieceType.KNIGHT: _KnightRule(),
    PieceType.BISHOP: _SlidingRule(BISHOP_DIRS),
    PieceType.ROOK: _SlidingRule(ROOK_DIRS),
    PieceType.QUEEN: _SlidingRule(QUEEN_DIRS),
    PieceType.KING: _KingRule(),
}
