"""Tests for Piece and the per-type movement rules."""

from dataclasses import FrozenInstanceError

import pytest

from chessrules.core.board import Board
from chessrules.core.coordinate import ALL_COORDINATES, Coordinate
from chessrules.core.enums import Color, PieceType
from chessrules.core.piece import Piece


def sq(name: str) -> Coordinate:
    return Coordinate.parse(name)


def names(coords: list[Coordinate]) -> set[str]:
    return {c.name for c in coords}


def _board(layout: dict[str, str]) -> Board:
    board = Board()
    for name, symbol in layout.items():
        board.add_piece(symbol, sq(name))
    return board


class TestPieceIdentity:
    def test_symbols(self) -> None:
        assert Piece(Color.WHITE, PieceType.KNIGHT).symbol == "N"
        assert Piece(Color.BLACK, PieceType.QUEEN).symbol == "q"
        assert str(Piece(Color.BLACK, PieceType.PAWN)) == "p"
        assert Piece(Color.BLACK, PieceType.KING).glyph == "♚"

    def test_from_symbol(self) -> None:
        assert Piece.from_symbol("r") == Piece(Color.BLACK, PieceType.ROOK)

    def test_from_symbol_invalid(self) -> None:
        with pytest.raises(ValueError, match="Invalid piece symbol"):
            Piece.from_symbol("x")

    def test_lookup_symbol_unknown(self) -> None:
        assert Piece.lookup_symbol("z") is None

    def test_duplicate_is_independent(self) -> None:
        rook = Piece(Color.WHITE, PieceType.ROOK, has_moved=True)
        copy = rook.duplicate()
        assert copy == rook
        assert copy is not rook

    def test_pieces_are_immutable(self) -> None:
        pawn = Piece(Color.WHITE, PieceType.PAWN)
        with pytest.raises(FrozenInstanceError):
            pawn.has_moved = True  # type: ignore[misc]
        moved = pawn.moved()
        assert moved.has_moved
        assert not pawn.has_moved
        assert (moved.color, moved.piece_type) == (pawn.color, pawn.piece_type)

    def test_promotion_rank(self) -> None:
        white = Piece(Color.WHITE, PieceType.PAWN)
        black = Piece(Color.BLACK, PieceType.PAWN)
        assert white.is_promotion_rank(sq("c8"))
        assert not white.is_promotion_rank(sq("c1"))
        assert black.is_promotion_rank(sq("c1"))
        assert not Piece(Color.WHITE, PieceType.QUEEN).is_promotion_rank(sq("c8"))


class TestKnight:
    def test_centre_has_eight_moves(self) -> None:
        board = _board({"d4": "N"})
        knight = board[sq("d4")]
        assert knight is not None
        assert names(knight.possible_moves(sq("d4"), board)) == {
            "b3", "b5", "c2", "c6", "e2", "e6", "f3", "f5",
        }

    def test_corner(self) -> None:
        board = _board({"a1": "n"})
        knight = board[sq("a1")]
        assert knight is not None
        assert names(knight.possible_moves(sq("a1"), board)) == {"b3", "c2"}

    def test_jumps_over_pieces(self) -> None:
        board = Board.initial()
        knight = board[sq("g1")]
        assert knight is not None
        assert knight.is_valid_move(sq("g1"), sq("f3"), board)
        assert not knight.is_valid_move(sq("g1"), sq("g3"), board)


class TestSliders:
    def test_rook_blocked_by_piece(self) -> None:
        board = _board({"a1": "R", "a4": "P", "d1": "p"})
        rook = board[sq("a1")]
        assert rook is not None
        assert names(rook.possible_moves(sq("a1"), board)) == {
            "a2", "a3", "b1", "c1", "d1",
        }
        assert not rook.is_valid_move(sq("a1"), sq("a5"), board)
        assert not rook.is_valid_move(sq("a1"), sq("e1"), board)
        assert rook.is_valid_move(sq("a1"), sq("d1"), board)

    def test_rook_rejects_diagonal(self) -> None:
        board = _board({"d4": "R"})
        rook = board[sq("d4")]
        assert rook is not None
        assert not rook.is_valid_move(sq("d4"), sq("e5"), board)

    def test_bishop_diagonals_only(self) -> None:
        board = _board({"c1": "B"})
        bishop = board[sq("c1")]
        assert bishop is not None
        assert bishop.is_valid_move(sq("c1"), sq("h6"), board)
        assert not bishop.is_valid_move(sq("c1"), sq("c5"), board)
        assert len(bishop.possible_moves(sq("c1"), board)) == 7

    def test_queen_both_shapes(self) -> None:
        board = _board({"d4": "Q"})
        queen = board[sq("d4")]
        assert queen is not None
        assert queen.is_valid_move(sq("d4"), sq("d8"), board)
        assert queen.is_valid_move(sq("d4"), sq("a7"), board)
        assert not queen.is_valid_move(sq("d4"), sq("e6"), board)
        assert len(queen.possible_moves(sq("d4"), board)) == 27

    def test_no_move_to_own_square(self) -> None:
        board = _board({"d4": "Q"})
        queen = board[sq("d4")]
        assert queen is not None
        assert not queen.is_valid_move(sq("d4"), sq("d4"), board)

    def test_capture_only_enemy(self) -> None:
        board = _board({"a1": "r", "a8": "R", "h1": "r"})
        rook = board[sq("a1")]
        assert rook is not None
        assert rook.is_valid_move(sq("a1"), sq("a8"), board)
        assert not rook.is_valid_move(sq("a1"), sq("h1"), board)


class TestKing:
    def test_adjacent_squares(self) -> None:
        board = _board({"e4": "K"})
        king = board[sq("e4")]
        assert king is not None
        assert len(king.possible_moves(sq("e4"), board)) == 8
        assert not king.is_valid_move(sq("e4"), sq("e6"), board)

    def test_two_file_move_needs_castling_right(self) -> None:
        board = _board({"e1": "K"})
        king = board[sq("e1")]
        assert king is not None
        # No rook on h1, so the board refuses castling.
        assert not king.is_valid_move(sq("e1"), sq("g1"), board)

    def test_two_file_move_away_from_home_square(self) -> None:
        board = _board({"d1": "K", "h1": "R"})
        king = board[sq("d1")]
        assert king is not None
        assert not king.is_valid_move(sq("d1"), sq("f1"), board)


class TestPawn:
    def test_white_initial_pushes(self) -> None:
        board = Board.initial()
        pawn = board[sq("e2")]
        assert pawn is not None
        assert names(pawn.possible_moves(sq("e2"), board)) == {"e3", "e4"}

    def test_black_moves_down(self) -> None:
        board = Board.initial()
        pawn = board[sq("d7")]
        assert pawn is not None
        assert names(pawn.possible_moves(sq("d7"), board)) == {"d6", "d5"}
        assert not pawn.is_valid_move(sq("d7"), sq("d8"), board)

    def test_double_step_blocked_by_intermediate(self) -> None:
        board = _board({"e2": "P", "e3": "n"})
        pawn = board[sq("e2")]
        assert pawn is not None
        assert pawn.possible_moves(sq("e2"), board) == []
        assert not pawn.is_valid_move(sq("e2"), sq("e4"), board)

    def test_double_step_blocked_at_destination(self) -> None:
        board = _board({"e2": "P", "e4": "n"})
        pawn = board[sq("e2")]
        assert pawn is not None
        assert names(pawn.possible_moves(sq("e2"), board)) == {"e3"}

    def test_no_double_step_after_moving(self) -> None:
        board = _board({"e2": "P"})
        board.make_move(sq("e2"), sq("e3"))
        pawn = board[sq("e3")]
        assert pawn is not None and pawn.has_moved
        assert names(pawn.possible_moves(sq("e3"), board)) == {"e4"}
        assert not pawn.is_valid_move(sq("e3"), sq("e5"), board)

    def test_forward_cannot_capture(self) -> None:
        board = _board({"e4": "P", "e5": "p"})
        pawn = board[sq("e4")]
        assert pawn is not None
        assert not pawn.is_valid_move(sq("e4"), sq("e5"), board)

    def test_diagonal_capture_enemy_only(self) -> None:
        board = _board({"e4": "P", "d5": "p", "f5": "N"})
        pawn = board[sq("e4")]
        assert pawn is not None
        assert pawn.is_valid_move(sq("e4"), sq("d5"), board)
        assert not pawn.is_valid_move(sq("e4"), sq("f5"), board)
        assert "d5" in names(pawn.possible_moves(sq("e4"), board))
        assert "f5" not in names(pawn.possible_moves(sq("e4"), board))

    def test_diagonal_onto_empty_square_rejected(self) -> None:
        board = _board({"e4": "P"})
        pawn = board[sq("e4")]
        assert pawn is not None
        assert not pawn.is_valid_move(sq("e4"), sq("d5"), board)

    def test_backwards_rejected(self) -> None:
        board = _board({"e4": "P"})
        pawn = board[sq("e4")]
        assert pawn is not None
        assert not pawn.is_valid_move(sq("e4"), sq("e3"), board)


class TestPossibleMovesInvariant:
    @pytest.mark.parametrize(
        "layout",
        [
            None,
            {
                "e1": "K", "d1": "Q", "a1": "R", "c4": "B", "f3": "N", "e4": "P",
                "d5": "p", "e8": "k", "h8": "r", "b4": "b", "c6": "n", "g6": "q",
            },
        ],
    )
    def test_never_targets_own_piece(self, layout: dict[str, str] | None) -> None:
        board = Board.initial() if layout is None else _board(layout)
        for pos in ALL_COORDINATES:
            piece = board[pos]
            if piece is None:
                continue
            for to_pos in piece.possible_moves(pos, board):
                assert to_pos.is_valid()
                target = board[to_pos]
                assert target is None or target.color != piece.color, (
                    f"{piece} on {pos} targets own piece on {to_pos}"
                )
