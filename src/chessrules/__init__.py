"""chessrules: board and piece rule engine for chess."""

__version__ = "0.1.0"
