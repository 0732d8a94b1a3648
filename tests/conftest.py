"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Iterator

import pytest

from chessrules.core.board import Board
from chessrules.core.coordinate import Coordinate

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QApplication for Qt tests."""
    from PyQt6.QtWidgets import QApplication

    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def place() -> Callable[[dict[str, str]], Board]:
    """Build an ad hoc board from ``{"e1": "K", "e8": "k", ...}``."""

    def _place(layout: dict[str, str]) -> Board:
        board = Board()
        for name, symbol in layout.items():
            board.add_piece(symbol, Coordinate.parse(name))
        return board

    return _place
