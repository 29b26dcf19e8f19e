"""
Layout validator: fit checks between a widget size and its metric selection.
"""

import logging

from labby.metrics import MetricSelection, ServiceKind
from labby.models import Widget
from labby.sizing import CONCRETE_SIZES, WidgetSize, capacity

logger = logging.getLogger(__name__)


def validate_widget_size(
    size: WidgetSize,
    metrics: MetricSelection,
    service_kind: ServiceKind,
    tolerance: bool = True,
) -> bool:
    """True when ``size`` can show every selected metric. ``auto`` always fits."""
    if size == WidgetSize.AUTO:
        return True
    return len(metrics.metrics) <= capacity(service_kind, size, tolerant=tolerance)


def minimum_size_for_content(
    metrics: MetricSelection,
    service_kind: ServiceKind,
    strict: bool = False,
) -> WidgetSize:
    """
    Smallest size whose capacity holds the selection.
    strict=True uses the non-tolerant capacities. Saturates at extra_wide.
    """
    count = len(metrics.metrics)
    for size in CONCRETE_SIZES:
        if capacity(service_kind, size, tolerant=not strict) >= count:
            return size
    return WidgetSize.EXTRA_WIDE


def correct_widget_size(previous: Widget | None, updated: Widget) -> Widget:
    """
    Re-validate an edited widget and shrink-wrap its size when it no longer fits.

    A metrics change is checked strictly; a size-only change is checked with
    tolerance so the picker does not flicker. Either correction falls back to
    the strict minimum size.
    """
    kind = updated.kind
    if updated.size == WidgetSize.AUTO:
        return updated

    metrics_changed = previous is None or previous.metrics != updated.metrics
    size_changed = previous is not None and previous.size != updated.size

    if metrics_changed:
        fits = validate_widget_size(updated.size, updated.metrics, kind, tolerance=False)
    elif size_changed:
        fits = validate_widget_size(updated.size, updated.metrics, kind, tolerance=True)
    else:
        return updated

    if fits:
        return updated

    corrected = minimum_size_for_content(updated.metrics, kind, strict=True)
    logger.info(f"[{updated.id}] {updated.size.value} too small for {len(updated.metrics.metrics)} metrics -> {corrected.value}")
    return updated.resized(corrected)
