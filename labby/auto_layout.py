"""
Auto-layout generator: default sizes and metric sets per service kind, and
a full layout for a home built from its configured services.
"""

import logging
from enum import Enum
from typing import Dict, List, Sequence

from labby.metrics import (
    DnsFilterMetric,
    HypervisorMetric,
    MediaServerMetric,
    MetricSelection,
    ServiceKind,
    TorrentClientMetric,
    selection_for,
)
from labby.models import Layout, StoredService, Widget
from labby.sizing import CONCRETE_SIZES, WidgetSize, capacity
from labby.validator import minimum_size_for_content, validate_widget_size

logger = logging.getLogger(__name__)


class LayoutTableError(ValueError):
    """A default-metrics table does not fit the capacity it is paired with."""


_OPTIMAL_SIZE: Dict[ServiceKind, WidgetSize] = {
    ServiceKind.HYPERVISOR: WidgetSize.LARGE,
    ServiceKind.MEDIA_SERVER: WidgetSize.MEDIUM,
    ServiceKind.TORRENT_CLIENT: WidgetSize.SMALL,
    ServiceKind.DNS_FILTER: WidgetSize.SMALL,
}

# ── Default metric tables ─────────────────────────────
# Highest priority first. Each list must fit the strict capacity of its size.

_H = HypervisorMetric
_M = MediaServerMetric
_T = TorrentClientMetric
_D = DnsFilterMetric

_DEFAULT_METRICS: Dict[ServiceKind, Dict[WidgetSize, List[Enum]]] = {
    ServiceKind.HYPERVISOR: {
        WidgetSize.SMALL: [_H.CPU_PERCENT, _H.MEMORY_PERCENT, _H.RUNNING_COUNT],
        WidgetSize.WIDE: [_H.CPU_PERCENT, _H.MEMORY_PERCENT, _H.RUNNING_COUNT],
        WidgetSize.MEDIUM: [
            _H.CPU_PERCENT, _H.MEMORY_PERCENT, _H.RUNNING_COUNT,
            _H.STOPPED_COUNT, _H.NET_UP_BPS, _H.NET_DOWN_BPS,
        ],
        WidgetSize.LARGE: [
            _H.CPU_PERCENT, _H.MEMORY_PERCENT, _H.RUNNING_COUNT, _H.NET_UP_BPS, _H.NET_DOWN_BPS,
        ],
        WidgetSize.TALL: list(HypervisorMetric),
        WidgetSize.EXTRA_WIDE: list(HypervisorMetric),
    },
    ServiceKind.MEDIA_SERVER: {
        size: [_M.TV_SHOWS_COUNT, _M.MOVIES_COUNT, _M.USER_COUNT] for size in CONCRETE_SIZES
    },
    ServiceKind.TORRENT_CLIENT: {
        WidgetSize.SMALL: [_T.SEEDING_COUNT, _T.DOWNLOADING_COUNT],
        WidgetSize.WIDE: [_T.SEEDING_COUNT, _T.DOWNLOADING_COUNT, _T.DOWNLOAD_SPEED_BYTES_PER_SEC],
        WidgetSize.MEDIUM: list(TorrentClientMetric),
        WidgetSize.LARGE: list(TorrentClientMetric),
        WidgetSize.TALL: list(TorrentClientMetric),
        WidgetSize.EXTRA_WIDE: list(TorrentClientMetric),
    },
    ServiceKind.DNS_FILTER: {
        WidgetSize.SMALL: [_D.BLOCKING_STATUS, _D.ADS_BLOCKED_TODAY, _D.ADS_PERCENTAGE_TODAY],
        WidgetSize.WIDE: [_D.BLOCKING_STATUS, _D.ADS_BLOCKED_TODAY, _D.ADS_PERCENTAGE_TODAY],
        WidgetSize.MEDIUM: [
            _D.BLOCKING_STATUS, _D.DNS_QUERIES_TODAY, _D.ADS_BLOCKED_TODAY,
            _D.ADS_PERCENTAGE_TODAY, _D.UNIQUE_CLIENTS, _D.DOMAINS_BEING_BLOCKED,
        ],
        WidgetSize.LARGE: [
            _D.DNS_QUERIES_TODAY, _D.ADS_BLOCKED_TODAY, _D.ADS_PERCENTAGE_TODAY, _D.UNIQUE_CLIENTS,
            _D.QUERIES_FORWARDED, _D.QUERIES_CACHED, _D.BLOCKING_STATUS,
        ],
        WidgetSize.TALL: list(DnsFilterMetric),
        WidgetSize.EXTRA_WIDE: list(DnsFilterMetric),
    },
}


def determine_optimal_size(kind: ServiceKind) -> WidgetSize:
    return _OPTIMAL_SIZE[kind]


def default_metrics(kind: ServiceKind, size: WidgetSize = WidgetSize.AUTO) -> MetricSelection:
    """Curated default selection for ``kind`` at ``size``; auto means the kind's optimal size."""
    if size == WidgetSize.AUTO:
        size = determine_optimal_size(kind)
    return selection_for(kind, _DEFAULT_METRICS[kind][size])


def default_widget(service: StoredService) -> Widget:
    size = determine_optimal_size(service.kind)
    return Widget(
        service_id=service.id,
        size=size,
        row=0,
        column=0,
        title_override=None,
        metrics=default_metrics(service.kind, size),
        refresh_interval_override=None,
    )


def generate_layout(home_name: str, services: Sequence[StoredService]) -> Layout:
    """One default widget per service, in the order given."""
    widgets = [default_widget(s) for s in services]
    logger.info(f"[{home_name}] Generated auto layout with {len(widgets)} widgets")
    return Layout(home_name=home_name, widgets=widgets)


def resolve_auto_size(widget: Widget) -> Widget:
    """Replace an ``auto`` size with a concrete one before the widget is stored."""
    if widget.size != WidgetSize.AUTO:
        return widget
    size = determine_optimal_size(widget.kind)
    if not validate_widget_size(size, widget.metrics, widget.kind, tolerance=False):
        size = minimum_size_for_content(widget.metrics, widget.kind, strict=True)
    return widget.resized(size)


def verify_default_tables():
    """Check every default-metrics list against the strict capacity of its size."""
    for kind in ServiceKind:
        if kind not in _OPTIMAL_SIZE:
            raise LayoutTableError(f"No optimal size for {kind.value}")
        table = _DEFAULT_METRICS.get(kind, {})
        for size in CONCRETE_SIZES:
            if size not in table:
                raise LayoutTableError(f"No default metrics for {kind.value}/{size.value}")
            count = len(table[size])
            limit = capacity(kind, size, tolerant=False)
            if count > limit:
                raise LayoutTableError(
                    f"Default metrics for {kind.value}/{size.value} ({count}) exceed capacity {limit}"
                )
    logger.debug("Default layout tables verified")
