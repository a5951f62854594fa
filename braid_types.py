"""
Shared type definitions for the braid model.

A braid is a grid of parallel ropes. Each row holds at most one crossing per
gap between neighbouring ropes, so a braid of N ropes has N - 1 crossing
columns.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping


class CrossingKind(Enum):
    """Handedness of a crossing between two neighbouring ropes."""

    S = "S"  # Left rope passes over right rope
    Z = "Z"  # Right rope passes over left rope


class CellState(Enum):
    """State of a single crossing cell, cycled EMPTY -> S -> Z -> EMPTY."""

    EMPTY = "empty"
    S = "S"
    Z = "Z"

    @classmethod
    def of(cls, crossing: Crossing | None) -> CellState:
        """State of a cell holding `crossing`, or EMPTY for no crossing."""
        if crossing is None:
            return cls.EMPTY
        return cls(crossing.kind.value)

    @property
    def kind(self) -> CrossingKind | None:
        """Kind of crossing this state places, None for EMPTY."""
        if self is CellState.EMPTY:
            return None
        return CrossingKind(self.value)

    def next(self) -> CellState:
        """The state one request advances this cell to."""
        return _NEXT_STATE[self]


_NEXT_STATE = {
    CellState.EMPTY: CellState.S,
    CellState.S: CellState.Z,
    CellState.Z: CellState.EMPTY,
}


# =============================================================================
# Braid Definition Types
# =============================================================================

# (row_index, col_index) of a crossing cell
CellKey = tuple[int, int]

# (col_index, row_index), the order a UI layer reports a cell in
Location = tuple[int, int]


@dataclass(frozen=True)
class Crossing:
    """A crossing of a given kind at one cell of the braid.

    col_index 0 is the gap between the first and second ropes.
    """

    kind: CrossingKind
    row_index: int
    col_index: int

    @property
    def key(self) -> CellKey:
        return (self.row_index, self.col_index)


@dataclass(frozen=True)
class Braid:
    """
    A grid of `ropes` strands, each `length` rows long, plus its crossings.

    The constructor checks every invariant, so any Braid that exists is valid:
    - length and ropes are positive
    - each crossing is stored under its own (row, col) key
    - each crossing lies inside the grid
    - no two crossings in a row are horizontally adjacent

    Raises:
        ValueError: If any of the above does not hold
    """

    length: int
    ropes: int
    crossings: Mapping[CellKey, Crossing] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Copy and freeze so the mapping can't change under a shared value
        object.__setattr__(self, "crossings", MappingProxyType(dict(self.crossings)))

        if self.length < 1 or self.ropes < 1:
            raise ValueError(
                f"Invalid braid dimensions: length={self.length}, ropes={self.ropes}\n"
                f"  Both must be positive integers"
            )

        misplaced = [(key, c) for key, c in self.crossings.items() if key != c.key]
        if misplaced:
            error_msg = "Crossings stored under the wrong cell\n"
            for key, crossing in misplaced:
                error_msg += (
                    f"    Key {key} holds {crossing.kind.value} at row {crossing.row_index}, "
                    f"column {crossing.col_index}\n"
                )
            error_msg += "  Each crossing must be keyed by its own (row, col)"
            raise ValueError(error_msg)

        out_of_bounds = [
            c for c in self.crossings.values() if not self.in_bounds(c.row_index, c.col_index)
        ]
        if out_of_bounds:
            error_msg = (
                f"Crossings out of bounds for braid with length {self.length} and {self.ropes} ropes\n"
                f"  Valid rows: 0..{self.max_row_index}, valid columns: 0..{self.max_col_index}\n"
                f"  Offending crossings:\n"
            )
            for crossing in out_of_bounds:
                error_msg += f"    {crossing.kind.value} at row {crossing.row_index}, column {crossing.col_index}\n"
            raise ValueError(error_msg)

        adjacent = sorted(
            (row, col) for row, col in self.crossings if (row, col + 1) in self.crossings
        )
        if adjacent:
            error_msg = "Horizontally adjacent crossings\n"
            for row, col in adjacent:
                error_msg += f"    Row {row}: columns {col} and {col + 1}\n"
            error_msg += "  A rope cannot cross two different neighbours in the same row"
            raise ValueError(error_msg)

    def __hash__(self) -> int:
        return hash((self.length, self.ropes, frozenset(self.crossings.values())))

    @classmethod
    def from_crossings(
        cls, length: int, ropes: int, crossings: Iterable[Crossing] = ()
    ) -> Braid:
        """
        Build a braid from a collection of crossings, keying each by its cell.

        Args:
            length: Number of rows
            ropes: Number of strands
            crossings: Crossings to place

        Returns:
            A new Braid holding the crossings

        Raises:
            ValueError: If two crossings share a cell, or the result breaks any
                Braid invariant
        """
        placed: dict[CellKey, Crossing] = {}
        duplicates: list[Crossing] = []
        for crossing in crossings:
            if crossing.key in placed:
                duplicates.append(crossing)
            else:
                placed[crossing.key] = crossing

        if duplicates:
            error_msg = "Duplicate crossings for the same cell\n"
            for crossing in duplicates:
                existing = placed[crossing.key]
                error_msg += (
                    f"    Row {crossing.row_index}, column {crossing.col_index}: "
                    f"{existing.kind.value} and {crossing.kind.value}\n"
                )
            error_msg += "  At most one crossing may occupy a cell"
            raise ValueError(error_msg)

        return cls(length, ropes, placed)

    @property
    def max_row_index(self) -> int:
        return self.length - 1

    @property
    def max_col_index(self) -> int:
        return self.ropes - 2

    def in_bounds(self, row_index: int, col_index: int) -> bool:
        return 0 <= row_index <= self.max_row_index and 0 <= col_index <= self.max_col_index

    def crossing_at(self, row_index: int, col_index: int) -> Crossing | None:
        return self.crossings.get((row_index, col_index))

    def cell_state(self, row_index: int, col_index: int) -> CellState:
        return CellState.of(self.crossing_at(row_index, col_index))

    def crossings_in_row(self, row_index: int) -> list[Crossing]:
        """All crossings in a row, ordered by column."""
        return sorted(
            (c for c in self.crossings.values() if c.row_index == row_index),
            key=lambda c: c.col_index,
        )
