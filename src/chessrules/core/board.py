"""Board: authoritative game state, legality queries and move application."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, replace

from chessrules.core.coordinate import ALL_COORDINATES, BOARD_SIZE, Coordinate, between
from chessrules.core.enums import (
    PROMOTION_TYPES,
    CastlingSide,
    Color,
    PieceType,
)
from chessrules.core.events import BoardObserver, ChangeNotifier, Subscription
from chessrules.core.move import Move
from chessrules.core.movement import KING_FILE
from chessrules.core.options import RuleOptions
from chessrules.core.piece import Piece

_LOGGER = logging.getLogger(__name__)

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# Rook start file and the file it lands on when castling.
_ROOK_FILES: dict[CastlingSide, tuple[int, int]] = {
    CastlingSide.KINGSIDE: (8, 6),
    CastlingSide.QUEENSIDE: (1, 4),
}

_ROOK_CORNERS: dict[Coordinate, tuple[Color, CastlingSide]] = {
    Coordinate(1, 1): (Color.WHITE, CastlingSide.QUEENSIDE),
    Coordinate(1, 8): (Color.WHITE, CastlingSide.KINGSIDE),
    Coordinate(8, 1): (Color.BLACK, CastlingSide.QUEENSIDE),
    Coordinate(8, 8): (Color.BLACK, CastlingSide.KINGSIDE),
}

_PROMOTION_CHARS: dict[str, PieceType] = {
    "q": PieceType.QUEEN,
    "r": PieceType.ROOK,
    "b": PieceType.BISHOP,
    "n": PieceType.KNIGHT,
}


@dataclass(slots=True)
class CastlingFlags:
    """Whether each king and original rook has ever moved.

    Flags only ever go from False to True during a game; a king or rook that
    returns to its home square stays ineligible.
    """

    white_king_moved: bool = False
    black_king_moved: bool = False
    white_kingside_rook_moved: bool = False
    white_queenside_rook_moved: bool = False
    black_kingside_rook_moved: bool = False
    black_queenside_rook_moved: bool = False

    def king_moved(self, color: Color) -> bool:
        return getattr(self, f"{color}_king_moved")

    def rook_moved(self, color: Color, side: CastlingSide) -> bool:
        return getattr(self, f"{color}_{side.name.lower()}_rook_moved")

    def mark_king(self, color: Color) -> None:
        setattr(self, f"{color}_king_moved", True)

    def mark_rook(self, color: Color, side: CastlingSide) -> None:
        setattr(self, f"{color}_{side.name.lower()}_rook_moved", True)


class Board:
    """Mutable 8x8 board that owns its pieces.

    Queries never raise for illegal input; they answer ``False`` / ``None``.
    :meth:`make_move` applies a move unconditionally, so callers validate
    first with :meth:`is_valid_move` and :meth:`would_be_in_check` (or obtain
    a token from :meth:`legal_move` and pass it to :meth:`play`).
    """

    __slots__ = ("_grid", "_flags", "_last_move", "_options", "_notifier")

    def __init__(self, *, options: RuleOptions | None = None) -> None:
        self._grid: list[list[Piece | None]] = [
            [None] * BOARD_SIZE for _ in range(BOARD_SIZE)
        ]
        self._flags = CastlingFlags()
        self._last_move: Move | None = None
        self._options = options if options is not None else RuleOptions()
        self._notifier = ChangeNotifier()

    @classmethod
    def initial(cls, *, options: RuleOptions | None = None) -> Board:
        """Board holding the standard starting position."""
        board = cls(options=options)
        board.setup_starting_position()
        return board

    # -- State access ---------------------------------------------------------

    @property
    def options(self) -> RuleOptions:
        return self._options

    @property
    def last_move(self) -> Move | None:
        """Most recent move applied, used for en passant eligibility."""
        return self._last_move

    @property
    def castling_flags(self) -> CastlingFlags:
        """Snapshot of the castling-right flags."""
        return replace(self._flags)

    def get_piece(self, pos: Coordinate) -> Piece | None:
        """Piece on *pos*, or ``None`` for an empty or off-board square."""
        if not pos.is_valid():
            return None
        return self._grid[pos.rank - 1][pos.file - 1]

    __getitem__ = get_piece

    def _set(self, pos: Coordinate, piece: Piece | None) -> None:
        self._grid[pos.rank - 1][pos.file - 1] = piece

    def pieces(self, color: Color | None = None) -> list[tuple[Coordinate, Piece]]:
        """Occupied squares (optionally of one colour), rank-major from a1."""
        found: list[tuple[Coordinate, Piece]] = []
        for pos in ALL_COORDINATES:
            piece = self._grid[pos.rank - 1][pos.file - 1]
            if piece is not None and (color is None or piece.color == color):
                found.append((pos, piece))
        return found

    def king_position(self, color: Color) -> Coordinate | None:
        for pos, piece in self.pieces(color):
            if piece.piece_type == PieceType.KING:
                return pos
        return None

    # -- Legality -------------------------------------------------------------

    def is_valid_move(
        self, from_pos: Coordinate, to_pos: Coordinate, turn: Color
    ) -> bool:
        """Turn ownership, capture exclusivity and piece shape.

        King safety is *not* checked here; see :meth:`would_be_in_check`.
        """
        if not from_pos.is_valid() or not to_pos.is_valid():
            return False
        piece = self.get_piece(from_pos)
        if piece is None or piece.color != turn:
            return False
        target = self.get_piece(to_pos)
        if target is not None and target.color == turn:
            return False
        return piece.is_valid_move(from_pos, to_pos, self)

    def would_be_in_check(
        self, from_pos: Coordinate, to_pos: Coordinate, turn: Color
    ) -> bool:
        """Whether *turn*'s king would be in check after the move.

        The move is played on a hypothetical copy, so this board is never
        touched. An empty source square or off-board coordinate counts as
        "would be in check".
        """
        if not from_pos.is_valid() or not to_pos.is_valid():
            return True
        if self.get_piece(from_pos) is None:
            return True
        return self.propose(from_pos, to_pos).is_in_check(turn)

    def propose(
        self,
        from_pos: Coordinate,
        to_pos: Coordinate,
        promotion: str | PieceType | None = None,
    ) -> Board:
        """Independent board with the move applied and no observers attached."""
        hypothetical = self.copy()
        hypothetical._apply(from_pos, to_pos, promotion)
        return hypothetical

    def is_in_check(self, color: Color) -> bool:
        """Whether any enemy piece could capture *color*'s king.

        A side without a king is never in check.
        """
        king_pos = self.king_position(color)
        if king_pos is None:
            return False
        return any(
            piece.is_valid_move(pos, king_pos, self)
            for pos, piece in self.pieces(color.opposite)
        )

    def is_square_attacked(self, pos: Coordinate, by_color: Color) -> bool:
        """Whether a piece of *by_color* attacks *pos*.

        Meant for empty or enemy-held squares; a square held by *by_color*
        itself only reports pawn and king attacks.
        """
        if not pos.is_valid():
            return False
        for from_pos, piece in self.pieces(by_color):
            d_rank = pos.rank - from_pos.rank
            d_file = pos.file - from_pos.file
            if piece.piece_type == PieceType.PAWN:
                if d_rank == by_color.pawn_direction and abs(d_file) == 1:
                    return True
            elif piece.piece_type == PieceType.KING:
                if max(abs(d_rank), abs(d_file)) == 1:
                    return True
            elif piece.is_valid_move(from_pos, pos, self):
                return True
        return False

    # -- Special moves --------------------------------------------------------

    def can_castle_kingside(self, color: Color) -> bool:
        return self._can_castle(color, CastlingSide.KINGSIDE)

    def can_castle_queenside(self, color: Color) -> bool:
        return self._can_castle(color, CastlingSide.QUEENSIDE)

    def _can_castle(self, color: Color, side: CastlingSide) -> bool:
        if self._flags.king_moved(color) or self._flags.rook_moved(color, side):
            return False

        rank = color.home_rank
        king_pos = Coordinate(rank, KING_FILE)
        rook_pos = Coordinate(rank, _ROOK_FILES[side][0])
        king = self.get_piece(king_pos)
        rook = self.get_piece(rook_pos)
        if king is None or king.piece_type != PieceType.KING or king.color != color:
            return False
        if rook is None or rook.piece_type != PieceType.ROOK or rook.color != color:
            return False
        # A rook that reached the corner from elsewhere never had the right.
        if king.has_moved or rook.has_moved:
            return False

        if any(self.get_piece(sq) is not None for sq in between(king_pos, rook_pos)):
            return False

        if self.is_in_check(color):
            return False

        # Transit squares are only examined when explicitly enabled.
        if self._options.check_castling_transit:
            step = 1 if side == CastlingSide.KINGSIDE else -1
            for sq in (king_pos.offset(0, step), king_pos.offset(0, 2 * step)):
                if self.is_square_attacked(sq, color.opposite):
                    return False
        return True

    def is_en_passant(
        self, from_pos: Coordinate, to_pos: Coordinate, turn: Color
    ) -> bool:
        """Whether the move is an en passant capture available right now.

        The enemy pawn beside the mover must have made the immediately
        preceding move, a double step from its starting rank.
        """
        if not from_pos.is_valid() or not to_pos.is_valid():
            return False
        piece = self.get_piece(from_pos)
        if piece is None or piece.piece_type != PieceType.PAWN or piece.color != turn:
            return False
        if to_pos.rank - from_pos.rank != turn.pawn_direction:
            return False
        if abs(to_pos.file - from_pos.file) != 1:
            return False
        if self.get_piece(to_pos) is not None:
            return False

        victim_pos = Coordinate(from_pos.rank, to_pos.file)
        victim = self.get_piece(victim_pos)
        if victim is None or victim.color == turn:
            return False
        if victim.piece_type != PieceType.PAWN:
            return False

        last = self._last_move
        if last is None or last.to_pos != victim_pos:
            return False
        enemy = turn.opposite
        start_rank = enemy.home_rank + enemy.pawn_direction
        return last.from_pos == Coordinate(start_rank, victim_pos.file) and (
            abs(last.from_pos.rank - last.to_pos.rank) == 2
        )

    # -- Move enumeration -----------------------------------------------------

    def _iter_legal_moves(self, color: Color) -> Iterator[Move]:
        for from_pos, piece in self.pieces(color):
            for to_pos in piece.possible_moves(from_pos, self):
                if not self.is_valid_move(from_pos, to_pos, color):
                    continue
                if self.would_be_in_check(from_pos, to_pos, color):
                    continue
                if piece.is_promotion_rank(to_pos):
                    for ptype in PROMOTION_TYPES:
                        yield Move(from_pos, to_pos, ptype)
                else:
                    yield Move(from_pos, to_pos)

    def legal_moves(self, color: Color) -> list[Move]:
        """Every fully legal move for *color*; promotions listed per piece."""
        return list(self._iter_legal_moves(color))

    def has_legal_move(self, color: Color) -> bool:
        return next(self._iter_legal_moves(color), None) is not None

    def legal_move(
        self,
        from_pos: Coordinate,
        to_pos: Coordinate,
        turn: Color,
        promotion: str | PieceType | None = None,
    ) -> Move | None:
        """Validate a move completely and return it as a move token.

        ``None`` if the move is shape-illegal, out of turn, or leaves the
        mover's king in check.
        """
        if not self.is_valid_move(from_pos, to_pos, turn):
            return None
        if self.would_be_in_check(from_pos, to_pos, turn):
            return None
        piece = self.get_piece(from_pos)
        ptype = None
        if piece is not None and piece.is_promotion_rank(to_pos):
            ptype = self._promotion_type(promotion)
        return Move(from_pos, to_pos, ptype)

    # -- Terminal conditions --------------------------------------------------

    def is_in_checkmate(self, color: Color) -> bool:
        return self.is_in_check(color) and not self.has_legal_move(color)

    def is_in_stalemate(self, color: Color) -> bool:
        return not self.is_in_check(color) and not self.has_legal_move(color)

    # -- Mutation -------------------------------------------------------------

    def make_move(
        self,
        from_pos: Coordinate,
        to_pos: Coordinate,
        promotion: str | PieceType | None = None,
    ) -> None:
        """Apply a move without re-checking legality, then notify observers.

        Handles en passant removal, the castling rook, castling flags and
        promotion. An unsupported promotion, or one requested on a move that
        does not reach the far rank, is ignored.
        """
        self._ensure_mutable()
        if self._apply(from_pos, to_pos, promotion):
            self._notifier.notify()

    def play(self, move: Move) -> None:
        """Apply a move token obtained from :meth:`legal_move`."""
        self.make_move(move.from_pos, move.to_pos, move.promotion)

    def _apply(
        self,
        from_pos: Coordinate,
        to_pos: Coordinate,
        promotion: str | PieceType | None,
    ) -> bool:
        if not from_pos.is_valid() or not to_pos.is_valid():
            _LOGGER.warning(
                "Ignoring move with off-board square: %r -> %r", from_pos, to_pos
            )
            return False
        piece = self.get_piece(from_pos)
        if piece is None:
            _LOGGER.warning("Ignoring move from empty square %s", from_pos)
            return False

        if piece.piece_type == PieceType.PAWN and self.is_en_passant(
            from_pos, to_pos, piece.color
        ):
            victim_pos = Coordinate(from_pos.rank, to_pos.file)
            self._set(victim_pos, None)
            _LOGGER.debug(
                "En passant %s%s removes pawn on %s", from_pos, to_pos, victim_pos
            )

        d_file = to_pos.file - from_pos.file
        if piece.piece_type == PieceType.KING and abs(d_file) == 2:
            side = CastlingSide.KINGSIDE if d_file > 0 else CastlingSide.QUEENSIDE
            if self._can_castle(piece.color, side):
                rook_from, rook_to = _ROOK_FILES[side]
                rook = self.get_piece(Coordinate(from_pos.rank, rook_from))
                if rook is not None:
                    self._set(Coordinate(from_pos.rank, rook_to), rook.moved())
                    self._set(Coordinate(from_pos.rank, rook_from), None)
                _LOGGER.debug("Castling %s for %s", side.name.lower(), piece.color)

        if piece.piece_type == PieceType.KING:
            self._flags.mark_king(piece.color)
        elif piece.piece_type == PieceType.ROOK:
            corner = _ROOK_CORNERS.get(from_pos)
            if corner is not None and corner[0] == piece.color:
                self._flags.mark_rook(*corner)

        piece = piece.moved()
        self._set(to_pos, piece)
        self._set(from_pos, None)

        promoted: PieceType | None = None
        if piece.is_promotion_rank(to_pos):
            promoted = self._promotion_type(promotion)
            if promoted is not None:
                self._set(to_pos, Piece(piece.color, promoted, has_moved=True))
                _LOGGER.debug("Pawn on %s promoted to %s", to_pos, promoted.name)
        elif promotion is not None:
            _LOGGER.warning(
                "Ignoring promotion %r on non-promoting move %s%s",
                promotion,
                from_pos,
                to_pos,
            )

        self._last_move = Move(from_pos, to_pos, promoted)
        _LOGGER.debug("Applied %s", self._last_move)
        return True

    def _promotion_type(self, promotion: str | PieceType | None) -> PieceType | None:
        if promotion is None:
            return self._options.default_promotion
        if isinstance(promotion, PieceType):
            ptype: PieceType | None = (
                promotion if promotion in PROMOTION_TYPES else None
            )
        else:
            ptype = _PROMOTION_CHARS.get(promotion.lower())
        if ptype is None:
            _LOGGER.warning("Ignoring unsupported promotion %r", promotion)
        return ptype

    # -- Setup mode -----------------------------------------------------------

    def add_piece(self, symbol: str, pos: Coordinate) -> None:
        """Place the piece named by *symbol* on *pos*, replacing any occupant."""
        self._ensure_mutable()
        if not pos.is_valid():
            return
        kind = Piece.lookup_symbol(symbol)
        if kind is None:
            _LOGGER.warning("Ignoring unknown piece symbol %r", symbol)
            return
        self._set(pos, Piece(*kind))
        self._notifier.notify()

    def remove_piece(self, pos: Coordinate) -> None:
        self._ensure_mutable()
        if not pos.is_valid():
            return
        self._set(pos, None)
        self._notifier.notify()

    def clear(self) -> None:
        """Remove every piece and forget castling and en passant history."""
        self._ensure_mutable()
        self._clear_grid()
        self.reset_history()
        _LOGGER.debug("Board cleared")
        self._notifier.notify()

    def reset_history(self) -> None:
        """Reset castling flags and the last-move record (pieces untouched)."""
        self._ensure_mutable()
        self._flags = CastlingFlags()
        self._last_move = None

    def setup_starting_position(self) -> None:
        self._ensure_mutable()
        self._clear_grid()
        self.reset_history()
        for file, ptype in enumerate(_BACK_RANK, start=1):
            self._set(Coordinate(1, file), Piece(Color.WHITE, ptype))
            self._set(Coordinate(2, file), Piece(Color.WHITE, PieceType.PAWN))
            self._set(Coordinate(7, file), Piece(Color.BLACK, PieceType.PAWN))
            self._set(Coordinate(8, file), Piece(Color.BLACK, ptype))
        _LOGGER.debug("Starting position set up")
        self._notifier.notify()

    def _clear_grid(self) -> None:
        self._grid = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]

    def count_pieces(self, symbol: str) -> int:
        """Number of pieces matching *symbol* exactly (type and colour)."""
        kind = Piece.lookup_symbol(symbol)
        if kind is None:
            return 0
        color, ptype = kind
        return sum(1 for _, piece in self.pieces(color) if piece.piece_type == ptype)

    def has_pawns_on_end_ranks(self) -> bool:
        return any(
            piece.piece_type == PieceType.PAWN and pos.rank in (1, BOARD_SIZE)
            for pos, piece in self.pieces()
        )

    def is_valid_setup(self) -> bool:
        """One king per side, no pawns on rank 1 or 8, neither king in check."""
        if self.count_pieces("K") != 1 or self.count_pieces("k") != 1:
            return False
        if self.has_pawns_on_end_ranks():
            return False
        return not (self.is_in_check(Color.WHITE) or self.is_in_check(Color.BLACK))

    # -- Observers ------------------------------------------------------------

    def subscribe(self, observer: BoardObserver) -> Subscription:
        """Call *observer* after every change; returns a cancellable handle."""
        return self._notifier.subscribe(observer)

    def unsubscribe(self, observer: BoardObserver | Subscription) -> bool:
        return self._notifier.unsubscribe(observer)

    def _ensure_mutable(self) -> None:
        if self._notifier.notifying:
            raise RuntimeError("Board cannot be modified from a change notification")

    # -- Copying / dunder helpers ---------------------------------------------

    def copy(self) -> Board:
        """Deep copy of pieces and history; observers are not copied."""
        b = Board(options=self._options)
        b._grid = [
            [piece.duplicate() if piece is not None else None for piece in row]
            for row in self._grid
        ]
        b._flags = replace(self._flags)
        b._last_move = self._last_move
        return b

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._grid == other._grid
            and self._flags == other._flags
            and self._last_move == other._last_move
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(BOARD_SIZE, 0, -1):
            row = []
            for file in range(1, BOARD_SIZE + 1):
                p = self._grid[rank - 1][file - 1]
                row.append(str(p) if p else ".")
            rows.append(f"{rank} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
