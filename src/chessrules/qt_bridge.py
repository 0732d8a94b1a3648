"""Qt bridge that turns board change notifications into a Qt signal."""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from chessrules.core.board import Board
from chessrules.core.events import Subscription


class BoardSignals(QObject):
    """Re-emits a board's change notifications as ``changed``.

    Displays connect their refresh slots to :attr:`changed` instead of
    registering callbacks on the board themselves. Call :meth:`detach` when
    the display goes away; the board keeps the relay alive until then.
    """

    changed = pyqtSignal()

    __slots__ = ("_board", "_subscription")

    def __init__(
        self,
        board: Board | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._board: Board | None = None
        self._subscription: Subscription | None = None
        if board is not None:
            self.attach(board)

    @property
    def board(self) -> Board | None:
        return self._board

    def attach(self, board: Board) -> None:
        """Start relaying *board*'s notifications, detaching any previous one."""
        self.detach()
        self._board = board
        self._subscription = board.subscribe(self._relay)

    def detach(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
        self._subscription = None
        self._board = None

    @pyqtSlot()
    def _relay(self) -> None:
        self.changed.emit()
