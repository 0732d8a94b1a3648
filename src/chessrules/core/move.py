"""Move value object (long-algebraic representation)."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.coordinate import Coordinate
from chessrules.core.enums import PieceType

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}
_PROMO_TYPES: dict[str, PieceType] = {v: k for k, v in _PROMO_CHARS.items()}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single move.

    Instances returned by :meth:`Board.legal_move` and
    :meth:`Board.legal_moves` have already passed every legality check for
    the position they were generated from.
    """

    from_pos: Coordinate
    to_pos: Coordinate
    promotion: PieceType | None = None

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{self.from_pos.name}{self.to_pos.name}"
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base

    @classmethod
    def parse(cls, text: str) -> Move:
        """Parse ``e2e4`` / ``e7e8q`` style text."""
        text = text.strip()
        if len(text) not in (4, 5):
            raise ValueError(f"Invalid move text: {text!r}")
        promotion: PieceType | None = None
        if len(text) == 5:
            try:
                promotion = _PROMO_TYPES[text[4].lower()]
            except KeyError:
                raise ValueError(f"Invalid promotion piece: {text[4]!r}") from None
        return cls(Coordinate.parse(text[:2]), Coordinate.parse(text[2:4]), promotion)
