"""
Row packing: groups the ordered widget list of a home into rows of the
two-column grid. Derived at render time, never persisted.
"""

from typing import List, Sequence

from labby.models import Widget
from labby.sizing import GRID_COLUMNS


def pack_rows(widgets: Sequence[Widget]) -> List[List[Widget]]:
    """
    Greedy single pass, order preserving.
    Multi-column widgets take a row of their own; single-column widgets pair up.
    """
    rows: List[List[Widget]] = []
    pending: List[Widget] = []

    for w in widgets:
        if w.size.column_span > 1:
            if pending:
                rows.append(pending)
                pending = []
            rows.append([w])
        else:
            pending.append(w)
            if len(pending) == GRID_COLUMNS:
                rows.append(pending)
                pending = []

    if pending:
        rows.append(pending)
    return rows


def arrange_two_columns(widgets: Sequence[Widget]) -> List[Widget]:
    """Return copies of ``widgets`` with row/column hints matching the packed rows."""
    arranged: List[Widget] = []
    current_row = 0
    for row in pack_rows(widgets):
        for column, w in enumerate(row):
            arranged.append(w.placed(current_row, column))
        current_row += max(w.size.row_span for w in row)
    return arranged
