"""Coordinate value type and helpers.

Ranks and files are 1-based, matching the way squares are named on a real
board::

    a1 = Coordinate(rank=1, file=1)
    h8 = Coordinate(rank=8, file=8)

Out-of-range coordinates can be constructed; they simply report
``is_valid() == False`` and are never used to index the board.
"""

from __future__ import annotations

from dataclasses import dataclass

_FILES = "abcdefgh"
_RANKS = "12345678"

BOARD_SIZE = 8


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Immutable (rank, file) pair."""

    rank: int
    file: int

    def is_valid(self) -> bool:
        return 1 <= self.rank <= BOARD_SIZE and 1 <= self.file <= BOARD_SIZE

    def offset(self, d_rank: int, d_file: int) -> Coordinate:
        """Coordinate shifted by the given deltas (possibly off the board)."""
        return Coordinate(self.rank + d_rank, self.file + d_file)

    # ── Notation ─────────────────────────────────────────────────────────

    @property
    def name(self) -> str:
        """Algebraic name, e.g. ``e4``. Invalid coordinates render as ``?``."""
        if not self.is_valid():
            return "?"
        return _FILES[self.file - 1] + _RANKS[self.rank - 1]

    @classmethod
    def parse(cls, name: str) -> Coordinate:
        """Parse a square name, e.g. ``'e4'`` → ``Coordinate(4, 5)``."""
        if len(name) != 2 or name[0].lower() not in _FILES or name[1] not in _RANKS:
            raise ValueError(f"Invalid square name: {name!r}")
        return cls(_RANKS.index(name[1]) + 1, _FILES.index(name[0].lower()) + 1)

    def __str__(self) -> str:
        return self.name


ALL_COORDINATES: tuple[Coordinate, ...] = tuple(
    Coordinate(rank, file)
    for rank in range(1, BOARD_SIZE + 1)
    for file in range(1, BOARD_SIZE + 1)
)


def between(start: Coordinate, end: Coordinate) -> list[Coordinate]:
    """Squares strictly between *start* and *end* on a shared line.

    Returns an empty list when the two are adjacent or not on a common rank,
    file or diagonal.
    """
    d_rank = end.rank - start.rank
    d_file = end.file - start.file
    if d_rank and d_file and abs(d_rank) != abs(d_file):
        return []
    step_rank = (d_rank > 0) - (d_rank < 0)
    step_file = (d_file > 0) - (d_file < 0)
    squares: list[Coordinate] = []
    current = start.offset(step_rank, step_file)
    while current != end:
        squares.append(current)
        current = current.offset(step_rank, step_file)
    return squares
