"""
Tile addresses.

A ``TileKey`` names one tile of a tiling tree by (row, column, level). Two
string encodings are derived from it:

Morton Code
-----------
Row and column bits interleaved into one integer, column bit ``i`` at bit
``2i`` and row bit ``i`` at bit ``2i + 1``, below a leading sentinel bit
``2^(2 level)``. The sentinel keeps codes of different levels apart; the
root tile is 1. The decimal string of the Morton code is the "HERE tile"
form used as a cache and URL key.

Quad Key
--------
One base-4 digit per level from the root down, digit = column bit +
2 * row bit. The root tile is the empty string.

Python integers are arbitrary precision, so both encodings stay exact at
every level.
"""

from dataclasses import dataclass, field
from functools import cached_property

from common.exceptions import InvalidFormatError, InvalidOperationError


def _interleave(row: int, column: int, level: int) -> int:
    code = 1 << (2 * level)
    for i in range(level):
        code |= ((column >> i) & 1) << (2 * i)
        code |= ((row >> i) & 1) << (2 * i + 1)
    return code


@dataclass(frozen=True)
class TileKey:
    """Immutable (row, column, level) address of a tile.

    Attributes
    ----------
    row : int
        Row index, 0 <= row < 2^level.
    column : int
        Column index, 0 <= column < 2^level.
    level : int
        Tree level, 0 for the root.

    Raises
    ------
    ValueError
        If a component is negative, not an integer, or out of range for
        the level.
    """
    row: int
    column: int
    level: int
    _morton_code: int = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        for name in ("row", "column", "level"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Tile {name} must be an integer, got {value!r}")
            if value < 0:
                raise ValueError(f"Tile {name} must be non-negative, got {value}")
        size = 1 << self.level
        if self.row >= size or self.column >= size:
            raise ValueError(
                f"Tile ({self.row}, {self.column}) out of range at level {self.level}"
            )
        object.__setattr__(self, "_morton_code", _interleave(self.row, self.column, self.level))

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    @classmethod
    def from_row_column_level(cls, row: int, column: int, level: int) -> 'TileKey':
        return cls(row, column, level)

    @classmethod
    def from_quad_key(cls, quad_key: str) -> 'TileKey':
        """Parse a base-4 quad key; ``""`` and ``"-"`` denote the root.

        Raises
        ------
        InvalidFormatError
            If the key contains characters other than 0-3.
        """
        if quad_key == "-":
            quad_key = ""
        row = 0
        column = 0
        for digit in quad_key:
            if digit not in "0123":
                raise InvalidFormatError(f"Invalid quad key: {quad_key!r}")
            value = int(digit)
            column = (column << 1) | (value & 1)
            row = (row << 1) | (value >> 1)
        return cls(row, column, len(quad_key))

    @classmethod
    def from_morton_code(cls, morton_code: int) -> 'TileKey':
        """Decode a Morton code.

        Raises
        ------
        InvalidFormatError
            If the code is not a positive integer with its sentinel bit at
            an even position.
        """
        if isinstance(morton_code, bool) or not isinstance(morton_code, int) or morton_code < 1:
            raise InvalidFormatError(f"Invalid Morton code: {morton_code!r}")
        sentinel = morton_code.bit_length() - 1
        if sentinel % 2:
            raise InvalidFormatError(f"Invalid Morton code: {morton_code!r}")

        level = sentinel // 2
        row = 0
        column = 0
        for i in range(level):
            column |= ((morton_code >> (2 * i)) & 1) << i
            row |= ((morton_code >> (2 * i + 1)) & 1) << i
        return cls(row, column, level)

    @classmethod
    def from_here_tile(cls, here_tile: str) -> 'TileKey':
        """Parse the decimal Morton code string."""
        if not here_tile.isdigit():
            raise InvalidFormatError(f"Invalid HERE tile: {here_tile!r}")
        return cls.from_morton_code(int(here_tile, 10))

    @staticmethod
    def columns_at_level(level: int) -> int:
        return 1 << level

    @staticmethod
    def rows_at_level(level: int) -> int:
        return 1 << level

    @classmethod
    def at_coords(
        cls,
        level: int,
        coord_x: float,
        coord_y: float,
        total_width: float,
        total_height: float
    ) -> 'TileKey':
        """Tile containing (coord_x, coord_y) in a ``total_width`` x ``total_height`` plane.

        Coordinates on or beyond the far edge map to the last tile.
        """
        rows = cls.rows_at_level(level)
        columns = cls.columns_at_level(level)
        row = int(coord_y // (total_height / rows))
        column = int(coord_x // (total_width / columns))
        return cls(min(max(row, 0), rows - 1), min(max(column, 0), columns - 1), level)

    @staticmethod
    def parent_morton_code(morton_code: int) -> int:
        return morton_code >> 2 if morton_code > 1 else morton_code

    # ------------------------------------------------------------------
    # Encodings
    # ------------------------------------------------------------------

    def morton_code(self) -> int:
        return self._morton_code

    def to_here_tile(self) -> str:
        return str(self._morton_code)

    @cached_property
    def _quad_key(self) -> str:
        digits = []
        for i in range(self.level - 1, -1, -1):
            digits.append(str(((self.column >> i) & 1) | (((self.row >> i) & 1) << 1)))
        return "".join(digits)

    def to_quad_key(self) -> str:
        return self._quad_key

    def __str__(self) -> str:
        return f"{self.level}/{self.row}/{self.column}"

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def parent(self) -> 'TileKey':
        """Tile one level up.

        Raises
        ------
        InvalidOperationError
            For the root tile.
        """
        if self.level == 0:
            raise InvalidOperationError("Cannot get the parent of the root tile key")
        return TileKey(self.row >> 1, self.column >> 1, self.level - 1)

    def changed_level_by(self, delta: int) -> 'TileKey':
        """Tile containing this tile's origin ``delta`` levels down (or up if negative)."""
        level = max(0, self.level + delta)
        if delta >= 0:
            return TileKey(self.row << delta, self.column << delta, level)
        return TileKey(self.row >> -delta, self.column >> -delta, level)

    def changed_level_to(self, level: int) -> 'TileKey':
        return self.changed_level_by(level - self.level)

    def added_sub_key(self, sub_key: str) -> 'TileKey':
        """Descendant addressed by a quad key relative to this tile."""
        sub = TileKey.from_quad_key(sub_key)
        child = self.changed_level_by(sub.level)
        return TileKey(child.row + sub.row, child.column + sub.column, child.level)

    def added_sub_here_tile(self, sub_here_tile: str) -> 'TileKey':
        """Descendant addressed by a HERE tile string relative to this tile."""
        sub = TileKey.from_here_tile(sub_here_tile)
        child = self.changed_level_by(sub.level)
        return TileKey(child.row + sub.row, child.column + sub.column, child.level)

    def get_sub_here_tile(self, delta: int) -> str:
        """Relative HERE tile of this tile below its ancestor ``delta`` levels up."""
        if delta < 0:
            raise ValueError(f"Level delta must be non-negative, got {delta}")
        msb = 1 << (delta * 2)
        return str((self._morton_code & (msb - 1)) | msb)

    def row_count(self) -> int:
        return TileKey.rows_at_level(self.level)

    def column_count(self) -> int:
        return TileKey.columns_at_level(self.level)
