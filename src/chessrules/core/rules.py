"""High-level rules: terminal-condition summary for a side."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.enums import BoardStatus, Color

if TYPE_CHECKING:
    from chessrules.core.board import Board


class Rules:
    """Static rule-checker that operates on a :class:`Board`."""

    @staticmethod
    def status(board: Board, color: Color) -> BoardStatus:
        """Check / checkmate / stalemate status of *color* (the side to move)."""
        in_check = board.is_in_check(color)
        if board.has_legal_move(color):
            return BoardStatus.CHECK if in_check else BoardStatus.IN_PROGRESS
        return BoardStatus.CHECKMATE if in_check else BoardStatus.STALEMATE

    @staticmethod
    def is_terminal(board: Board, color: Color) -> bool:
        return Rules.status(board, color) in (
            BoardStatus.CHECKMATE,
            BoardStatus.STALEMATE,
        )
