"""
Size/capacity model: widget size classes, their grid footprint and how many
metrics each (kind, size) pair can legibly show.
"""

import sys
from enum import Enum
from typing import Dict, List

from labby.metrics import ServiceKind


GRID_COLUMNS = 2


class WidgetSize(str, Enum):
    AUTO = "auto"
    SMALL = "small"          # 1x1
    MEDIUM = "medium"        # 1 column, 2 rows
    WIDE = "wide"            # 2 columns, 1 row
    LARGE = "large"          # 2x2
    TALL = "tall"            # 1 column, 3 rows
    EXTRA_WIDE = "extra_wide"  # 2 columns, 3 rows

    @property
    def column_span(self) -> int:
        return _FOOTPRINT[self][0]

    @property
    def row_span(self) -> int:
        return _FOOTPRINT[self][1]


# (columns, rows). auto renders as a single cell until it is resolved.
_FOOTPRINT: Dict[WidgetSize, tuple[int, int]] = {
    WidgetSize.AUTO: (1, 1),
    WidgetSize.SMALL: (1, 1),
    WidgetSize.MEDIUM: (1, 2),
    WidgetSize.WIDE: (2, 1),
    WidgetSize.LARGE: (2, 2),
    WidgetSize.TALL: (1, 3),
    WidgetSize.EXTRA_WIDE: (2, 3),
}

# Ascending capacity order used when searching for the smallest fitting size.
CONCRETE_SIZES: List[WidgetSize] = [
    WidgetSize.SMALL,
    WidgetSize.MEDIUM,
    WidgetSize.WIDE,
    WidgetSize.LARGE,
    WidgetSize.TALL,
    WidgetSize.EXTRA_WIDE,
]

# ── Capacity tables ───────────────────────────────────

# Text lines a widget body can hold, title line included.
_MAX_LINES: Dict[WidgetSize, int] = {
    WidgetSize.SMALL: 4,
    WidgetSize.MEDIUM: 7,
    WidgetSize.WIDE: 4,
    WidgetSize.LARGE: 9,
    WidgetSize.TALL: 12,
    WidgetSize.EXTRA_WIDE: 21,  # two columns of text
}

# Lines a kind spends before its metrics start (title row).
_HEADER_LINES: Dict[ServiceKind, int] = {
    ServiceKind.HYPERVISOR: 1,
    ServiceKind.MEDIA_SERVER: 1,
    ServiceKind.TORRENT_CLIENT: 1,
    ServiceKind.DNS_FILTER: 1,
}

# Extra lines allowed while the size is being picked interactively.
_TOLERANCE_LINES: Dict[WidgetSize, int] = {
    WidgetSize.SMALL: 1,
    WidgetSize.MEDIUM: 2,
    WidgetSize.WIDE: 2,
    WidgetSize.LARGE: 2,
    WidgetSize.TALL: 2,
    WidgetSize.EXTRA_WIDE: 2,
}

UNBOUNDED = sys.maxsize


def capacity(kind: ServiceKind, size: WidgetSize, tolerant: bool = False) -> int:
    """Maximum number of metrics ``kind`` can show at ``size``."""
    if size == WidgetSize.AUTO:
        return UNBOUNDED
    lines = _MAX_LINES[size] - _HEADER_LINES[kind]
    if tolerant:
        lines += _TOLERANCE_LINES[size]
    return max(0, lines)
