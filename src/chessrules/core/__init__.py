"""Core domain layer: pure chess rules with zero external dependencies.

Quick start::

    from chessrules.core import Board, Color, Coordinate

    board = Board.initial()
    e2, e4 = Coordinate.parse("e2"), Coordinate.parse("e4")
    if board.is_valid_move(e2, e4, Color.WHITE) and not board.would_be_in_check(
        e2, e4, Color.WHITE
    ):
        board.make_move(e2, e4)
"""

from chessrules.core.board import Board, CastlingFlags
from chessrules.core.coordinate import ALL_COORDINATES, Coordinate, between
from chessrules.core.enums import (
    PROMOTION_TYPES,
    BoardStatus,
    CastlingSide,
    Color,
    PieceType,
)
from chessrules.core.events import BoardObserver, ChangeNotifier, Subscription
from chessrules.core.move import Move
from chessrules.core.movement import MOVEMENT_RULES, BoardView, MovementRule
from chessrules.core.options import RuleOptions
from chessrules.core.piece import Piece
from chessrules.core.rules import Rules

__all__ = [
    # Enums
    "BoardStatus",
    "CastlingSide",
    "Color",
    "PieceType",
    "PROMOTION_TYPES",
    # Coordinates
    "ALL_COORDINATES",
    "Coordinate",
    "between",
    # Domain objects
    "Board",
    "BoardView",
    "CastlingFlags",
    "MOVEMENT_RULES",
    "Move",
    "MovementRule",
    "Piece",
    "RuleOptions",
    "Rules",
    # Notifications
    "BoardObserver",
    "ChangeNotifier",
    "Subscription",
]
