"""Rule options: the engine's configuration object."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import PROMOTION_TYPES, PieceType


@dataclass(slots=True, frozen=True)
class RuleOptions:
    """Switches for rule details that differ between engine builds.

    Args:
        check_castling_transit: Also refuse castling when the square the king
            passes over, or lands on, is attacked. Off by default: only the
            king's starting square is checked.
        default_promotion: Piece a pawn becomes on the far rank when no
            promotion symbol is supplied. ``None`` leaves it a pawn.
    """

    check_castling_transit: bool = False
    default_promotion: PieceType | None = None

    def __post_init__(self) -> None:
        if (
            self.default_promotion is not None
            and self.default_promotion not in PROMOTION_TYPES
        ):
            raise ValueError(
                f"Invalid default promotion: {self.default_promotion!r}"
            )

    @classmethod
    def standard(cls) -> RuleOptions:
        return cls()

    @classmethod
    def strict(cls) -> RuleOptions:
        """Full castling safety and auto-queen promotion."""
        return cls(check_castling_transit=True, default_promotion=PieceType.QUEEN)
