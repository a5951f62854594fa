"""
Braid construction and the crossing request handler.

Every operation is pure: it takes a Braid and returns a new one, leaving the
input untouched.
"""

from __future__ import annotations

import logging

from braid_types import Braid, CellKey, CellState, Crossing, CrossingKind, Location

__all__ = [
    "Braid",
    "CellKey",
    "CellState",
    "Crossing",
    "CrossingKind",
    "DEFAULT_LENGTH",
    "DEFAULT_ROPES",
    "Location",
    "create_braid",
    "handle_crossing_request",
]

logger = logging.getLogger(__name__)

DEFAULT_LENGTH = 10
DEFAULT_ROPES = 10


def create_braid() -> Braid:
    """Construct a 10x10 braid with no crossings."""
    return Braid(length=DEFAULT_LENGTH, ropes=DEFAULT_ROPES)


# =============================================================================
# Immutable Update Helpers
# =============================================================================


def _create_crossing(crossing: Crossing, braid: Braid) -> Braid:
    """Add a crossing to a braid. The cell must not already hold one."""
    crossings: dict[CellKey, Crossing] = dict(braid.crossings)
    crossings[crossing.key] = crossing
    return Braid(braid.length, braid.ropes, crossings)


def _update_crossing(crossing: Crossing, braid: Braid) -> Braid:
    """Replace whatever crossing occupies the cell of `crossing`."""
    return _create_crossing(
        crossing,
        _remove_crossing(crossing.row_index, crossing.col_index, braid),
    )


def _remove_crossing(row_index: int, col_index: int, braid: Braid) -> Braid:
    """Drop the crossing at (row_index, col_index), keeping all others."""
    crossings = {key: c for key, c in braid.crossings.items() if key != (row_index, col_index)}
    return Braid(braid.length, braid.ropes, crossings)


# =============================================================================
# Request Handling
# =============================================================================


def _check_location(braid: Braid, row_index: int, col_index: int) -> None:
    if row_index < 0:
        raise IndexError(f"Negative row index: {row_index} is not supported")
    if col_index < 0:
        raise IndexError(f"Negative column index: {col_index} is not supported")
    if row_index > braid.max_row_index:
        raise IndexError(
            f"Row index too large: {row_index} for braid with length {braid.length}"
        )
    if col_index > braid.max_col_index:
        raise IndexError(
            f"Column index too large: {col_index} for braid with {braid.ropes} ropes"
        )


def handle_crossing_request(braid: Braid, location: Location) -> Braid | None:
    """
    Advance the crossing at a cell by one step: EMPTY -> S -> Z -> EMPTY.

    A crossing may never sit directly beside another crossing in its row, since
    one rope would have to go two ways at once. Such requests are rejected.

    Args:
        braid: The current braid
        location: (col_index, row_index) of the cell to change

    Returns:
        New Braid with the cell advanced, or None if the request is rejected
        (the caller keeps its current braid)

    Raises:
        IndexError: If the row or column lies outside the braid
    """
    col_index, row_index = location
    _check_location(braid, row_index, col_index)

    row = braid.crossings_in_row(row_index)
    if any(abs(c.col_index - col_index) == 1 for c in row):
        logger.debug(
            "handle_crossing_request: rejected (row=%d, col=%d), adjacent crossing in row",
            row_index,
            col_index,
        )
        return None

    current = braid.cell_state(row_index, col_index)
    target = current.next()
    logger.debug(
        "handle_crossing_request: (row=%d, col=%d) %s -> %s",
        row_index,
        col_index,
        current.name,
        target.name,
    )

    if target.kind is None:
        return _remove_crossing(row_index, col_index, braid)

    crossing = Crossing(target.kind, row_index, col_index)
    if current is CellState.EMPTY:
        return _create_crossing(crossing, braid)
    return _update_crossing(crossing, braid)
