import pytest
from pydantic import ValidationError

from labby.metrics import (
    DnsFilterMetric,
    DnsFilterSelection,
    HypervisorMetric,
    METRIC_CATALOG,
    ServiceKind,
    selection_for,
)
from labby.models import Layout, Widget, effective_refresh_interval
from labby.sizing import WidgetSize


def test_catalog_covers_every_kind():
    assert set(METRIC_CATALOG) == set(ServiceKind)
    for kind in ServiceKind:
        assert selection_for(kind).kind == kind


def test_selection_rejects_metrics_of_another_kind():
    with pytest.raises(ValidationError):
        selection_for(ServiceKind.HYPERVISOR, [DnsFilterMetric.BLOCKING_STATUS])


def test_selection_parsed_by_tag():
    w = Widget.model_validate({
        "service_id": "pihole",
        "metrics": {"type": "dns_filter", "metrics": ["blocking_status", "unique_clients"]},
    })
    assert isinstance(w.metrics, DnsFilterSelection)
    assert w.kind == ServiceKind.DNS_FILTER
    assert w.metrics.metrics == [DnsFilterMetric.BLOCKING_STATUS, DnsFilterMetric.UNIQUE_CLIENTS]


def test_unknown_tag_is_rejected():
    with pytest.raises(ValidationError):
        Widget.model_validate({"service_id": "x", "metrics": {"type": "nas", "metrics": []}})


def test_column_normalized_for_size():
    metrics = selection_for(ServiceKind.HYPERVISOR, [HypervisorMetric.CPU_PERCENT])
    assert Widget(service_id="a", size=WidgetSize.LARGE, column=1, metrics=metrics).column == 0
    assert Widget(service_id="a", size=WidgetSize.SMALL, column=5, metrics=metrics).column == 1
    assert Widget(service_id="a", size=WidgetSize.SMALL, row=-3, metrics=metrics).row == 0


def test_refresh_override_must_be_positive():
    metrics = selection_for(ServiceKind.HYPERVISOR)
    with pytest.raises(ValidationError):
        Widget(service_id="a", metrics=metrics, refresh_interval_override=0)


def test_effective_refresh_interval():
    metrics = selection_for(ServiceKind.HYPERVISOR)
    assert effective_refresh_interval(Widget(service_id="a", metrics=metrics), 30) == 30
    assert effective_refresh_interval(Widget(service_id="a", metrics=metrics, refresh_interval_override=5), 30) == 5


def test_widget_ids_are_unique():
    metrics = selection_for(ServiceKind.HYPERVISOR)
    assert Widget(service_id="a", metrics=metrics).id != Widget(service_id="a", metrics=metrics).id


def test_layout_lookup():
    metrics = selection_for(ServiceKind.HYPERVISOR)
    a = Widget(id="a", service_id="s", metrics=metrics)
    b = Widget(id="b", service_id="s", metrics=metrics)
    layout = Layout(home_name="Lab", widgets=[a, b])
    assert layout.index_of("b") == 1
    assert layout.get_widget("a") == a
    assert layout.get_widget("zzz") is None
