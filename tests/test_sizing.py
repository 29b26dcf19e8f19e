from labby.metrics import ServiceKind
from labby.sizing import CONCRETE_SIZES, UNBOUNDED, WidgetSize, capacity


def test_footprints():
    spans = {size: (size.column_span, size.row_span) for size in CONCRETE_SIZES}
    assert spans == {
        WidgetSize.SMALL: (1, 1),
        WidgetSize.MEDIUM: (1, 2),
        WidgetSize.WIDE: (2, 1),
        WidgetSize.LARGE: (2, 2),
        WidgetSize.TALL: (1, 3),
        WidgetSize.EXTRA_WIDE: (2, 3),
    }


def test_capacity_is_monotonic_in_size_order():
    chain = [WidgetSize.SMALL, WidgetSize.MEDIUM, WidgetSize.LARGE, WidgetSize.EXTRA_WIDE]
    for kind in ServiceKind:
        strict = [capacity(kind, size, False) for size in chain]
        assert strict == sorted(strict), kind
        assert capacity(kind, WidgetSize.SMALL) <= capacity(kind, WidgetSize.WIDE) <= capacity(kind, WidgetSize.LARGE)
        assert capacity(kind, WidgetSize.MEDIUM) <= capacity(kind, WidgetSize.TALL) <= capacity(kind, WidgetSize.EXTRA_WIDE)


def test_tolerant_capacity_never_below_strict():
    for kind in ServiceKind:
        for size in CONCRETE_SIZES:
            assert capacity(kind, size, True) >= capacity(kind, size, False)


def test_small_lowest_extra_wide_highest():
    for kind in ServiceKind:
        for tolerant in (False, True):
            values = {size: capacity(kind, size, tolerant) for size in CONCRETE_SIZES}
            assert min(values.values()) == values[WidgetSize.SMALL]
            assert max(values.values()) == values[WidgetSize.EXTRA_WIDE]


def test_auto_is_unbounded():
    assert capacity(ServiceKind.HYPERVISOR, WidgetSize.AUTO) == UNBOUNDED


def test_hypervisor_numbers():
    assert capacity(ServiceKind.HYPERVISOR, WidgetSize.SMALL) == 3
    assert capacity(ServiceKind.HYPERVISOR, WidgetSize.SMALL, tolerant=True) == 4
    assert capacity(ServiceKind.HYPERVISOR, WidgetSize.MEDIUM, tolerant=True) == 8
