import random

from labby.metrics import ServiceKind, selection_for
from labby.models import Widget
from labby.packing import arrange_two_columns, pack_rows
from labby.sizing import CONCRETE_SIZES, WidgetSize


def make(wid: str, size: WidgetSize) -> Widget:
    return Widget(id=wid, service_id=wid, size=size, metrics=selection_for(ServiceKind.MEDIA_SERVER))


def ids(rows):
    return [[w.id for w in row] for row in rows]


def test_empty():
    assert pack_rows([]) == []


def test_single_column_widgets_pair_up():
    widgets = [make("a", WidgetSize.SMALL), make("b", WidgetSize.TALL), make("c", WidgetSize.MEDIUM)]
    assert ids(pack_rows(widgets)) == [["a", "b"], ["c"]]


def test_wide_widget_breaks_the_row():
    widgets = [
        make("a", WidgetSize.SMALL),
        make("b", WidgetSize.WIDE),
        make("c", WidgetSize.SMALL),
        make("d", WidgetSize.SMALL),
        make("e", WidgetSize.EXTRA_WIDE),
        make("f", WidgetSize.LARGE),
    ]
    assert ids(pack_rows(widgets)) == [["a"], ["b"], ["c", "d"], ["e"], ["f"]]


def test_small_before_large_flushes_alone():
    widgets = [make("dns", WidgetSize.SMALL), make("pve", WidgetSize.LARGE), make("qb", WidgetSize.SMALL)]
    assert ids(pack_rows(widgets)) == [["dns"], ["pve"], ["qb"]]


def test_packing_conserves_order_and_count():
    rng = random.Random(7)
    for _ in range(50):
        widgets = [make(f"w{i}", rng.choice(CONCRETE_SIZES)) for i in range(rng.randint(0, 12))]
        rows = pack_rows(widgets)
        flat = [w for row in rows for w in row]
        assert [w.id for w in flat] == [w.id for w in widgets]
        for row in rows:
            assert 1 <= len(row) <= 2
            if len(row) == 2:
                assert all(w.size.column_span == 1 for w in row)


def test_arrange_assigns_hints():
    widgets = [
        make("a", WidgetSize.SMALL),
        make("b", WidgetSize.TALL),
        make("c", WidgetSize.LARGE),
        make("d", WidgetSize.MEDIUM),
    ]
    arranged = arrange_two_columns(widgets)
    assert [(w.id, w.row, w.column) for w in arranged] == [
        ("a", 0, 0),
        ("b", 0, 1),
        ("c", 3, 0),
        ("d", 5, 0),
    ]
    # originals untouched
    assert widgets[1].column == 0
