import math

import pytest

from demandscope.eda.segmentation import ComputedAggregate
from demandscope.plots.interaction import (
    ChartInteraction,
    HoverEvent,
    LegendState,
    arc_label,
    cell_label_visible,
    format_volume,
    hit_test_arc,
    hit_test_rect,
    item_label,
    node_aggregate,
    place_tooltip,
    pointer_to_canvas,
    tooltip_content,
    truncate_label,
)
from demandscope.plots.core.config import SUNBURST_LAYOUT
from demandscope.plots.layout.matrix import layout_abc_xyz_matrix
from demandscope.plots.layout.sunburst import build_sunburst
from demandscope.plots.layout.treemap import Rect

CX, CY = SUNBURST_LAYOUT["cx"], SUNBURST_LAYOUT["cy"]


@pytest.fixture
def tree():
    # A covers the first three quarters from 12 o'clock, B the last quarter
    return build_sunburst([("A/x", 300, 10), ("B/y", 100, 30)])


@pytest.fixture
def matrix():
    aggs = [
        ComputedAggregate("A-x", "A/x", 600.0, 10.0, "A", "X"),
        ComputedAggregate("B-y", "B/y", 300.0, 30.0, "B", "Y"),
        ComputedAggregate("C-z", "C/z", 100.0, 50.0, "C", "Z"),
    ]
    return layout_abc_xyz_matrix(aggs)


# ---------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------

@pytest.mark.parametrize("value,volume_type,expected", [
    (2_345_678, "monetary", "$2.3M"),
    (48_200, "quantity", "48K"),
    (999, "quantity", "999"),
    (1_000, "monetary", "$1K"),
    (12.9, "monetary", "$12"),
])
def test_format_volume(value, volume_type, expected):
    assert format_volume(value, volume_type) == expected


def test_format_volume_rejects_unknown_type():
    with pytest.raises(ValueError):
        format_volume(1, "units")


def test_truncate_label():
    assert truncate_label("Women's Performance", 13) == "Women's Perf…"
    assert truncate_label("Kids", 13) == "Kids"
    assert len(truncate_label("abcdefghijklmnop", 13)) == 13


def test_item_label_visibility():
    label = item_label(Rect(0, 0, 100, 30), "Women's Performance")
    assert label.text == "Women's Perf…"
    assert label.font_size == 10
    assert (label.x, label.y) == (50, 15)
    assert item_label(Rect(0, 0, 27, 30), "x") is None
    assert item_label(Rect(0, 0, 100, 11.9), "x") is None
    assert item_label(Rect(0, 0, 30, 12), "x").font_size == 5


def test_cell_label_visibility():
    assert cell_label_visible(Rect(0, 0, 23, 15))
    assert not cell_label_visible(Rect(0, 0, 22, 15))
    assert not cell_label_visible(Rect(0, 0, 30, 14))


def test_arc_label_orientation():
    t = build_sunburst([("Alpha", 300, 10), ("Bravo", 100, 10)])
    right = arc_label(t.node("Alpha"))
    assert right.text == "Alpha"
    assert right.font_size == 13
    assert right.angle == pytest.approx(45)
    left = arc_label(t.node("Bravo"))
    # left half is flipped so the text is never upside down
    assert left.angle == pytest.approx(225 + 180)


def test_arc_label_hidden_on_thin_arcs():
    t = build_sunburst([("Big", 10_000, 1), ("Tiny", 1, 1)])
    assert arc_label(t.node("Tiny")) is None


def test_arc_label_truncates_to_ring_width():
    t = build_sunburst([("A very long category name", 1, 1)])
    label = arc_label(t.node("A very long category name"))
    assert label.text == "A very …"


# ---------------------------------------------------------------------
# Tooltips
# ---------------------------------------------------------------------

def test_aggregate_tooltip():
    agg = ComputedAggregate(
        "x", "Apparel/Women's Performance Training Collection", 2_345_678, 12.34, "A", "Y"
    )
    tip = tooltip_content(agg, "monetary")
    assert tip.lines() == [
        "Apparel",
        "Women's Performance Trai…",
        "Revenue: $2.3M",
        "AY · Variance: 12.3%",
    ]
    assert tip.to_html().startswith("Apparel<br><b>Women's")


def test_node_tooltip_without_breadcrumb(tree):
    tip = tooltip_content(tree.node("A"), "quantity")
    assert tip.lines() == ["A", "Qty: 300", "Variance: 10.0%"]
    assert tip.to_html().startswith("<b>A</b>")


def test_node_tooltip_breadcrumb():
    t = build_sunburst([("Apparel/Kids/Shorts/SKU-1", 10, 5)])
    tip = tooltip_content(t.node("Apparel/Kids/Shorts/SKU-1"), "quantity")
    assert tip.breadcrumb == "Apparel › Kids › Shorts"


def test_place_tooltip_clamps():
    box = place_tooltip(700, 10)
    assert (box.x, box.y) == (504, 4)
    assert place_tooltip(100, 300).x == 112
    box = place_tooltip(100, 300, SUNBURST_LAYOUT, height=80)
    assert (box.x, box.y, box.h) == (114, 260, 80)


# ---------------------------------------------------------------------
# Hit-testing
# ---------------------------------------------------------------------

def test_hit_test_arc_by_angle(tree):
    assert hit_test_arc(tree, CX + 93, CY).path == "A"
    assert hit_test_arc(tree, CX - 93, CY).path == "B"
    assert hit_test_arc(tree, CX, CY - 93).path == "A"
    assert hit_test_arc(tree, CX + 160, CY).path == "A/x"


def test_hit_test_arc_misses(tree):
    assert hit_test_arc(tree, CX, CY) is None
    # separator between rings 1 and 2
    assert hit_test_arc(tree, CX + 126, CY) is None
    # beyond the populated rings
    assert hit_test_arc(tree, CX + 200, CY) is None


def test_hit_test_rect(matrix):
    item = matrix.cell("AX").items[0]
    cx, cy = item.rect.center
    assert hit_test_rect(matrix, cx, cy).aggregate.element_id == "A-x"
    assert hit_test_rect(matrix, 1, 1) is None
    assert hit_test_rect(None, cx, cy) is None


def test_node_aggregate_for_inner_node(tree):
    agg = node_aggregate(tree.node("B"))
    assert agg.element_id == "B"
    assert agg.abc_class == "B"
    assert agg.xyz_class == "Y"
    assert agg.volume_total == 100


def test_node_aggregate_for_leaf():
    leaf = ComputedAggregate("A-x", "A/x", 5.0, 1.0, "C", "X")
    t = build_sunburst([leaf])
    assert node_aggregate(t.node("A/x")) is leaf


# ---------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------

def test_subscribe_validation(matrix):
    ui = ChartInteraction(matrix)
    with pytest.raises(ValueError):
        ui.subscribe("drag", print)
    with pytest.raises(TypeError):
        ui.subscribe("hover", "not callable")
    with pytest.raises(ValueError):
        ui.emit("drag")


def test_matrix_hover_click_and_leave(matrix):
    ui = ChartInteraction(matrix, "monetary")
    events = []
    ui.subscribe("hover", lambda e: events.append(("hover", e)))
    ui.subscribe("leave", lambda e: events.append(("leave", e)))
    ui.subscribe("select", lambda a: events.append(("select", a)))

    ui.hover(1, 1)
    assert events == []

    cx, cy = matrix.cell("BY").items[0].rect.center
    event = ui.hover(cx, cy)
    assert isinstance(event, HoverEvent)
    assert event.aggregate.element_id == "B-y"
    assert event.tooltip.cell == "BY"
    assert event.box.h == 76

    ui.hover(1, 1)
    assert [name for name, _ in events] == ["hover", "leave"]

    assert ui.click(cx, cy).element_id == "B-y"
    assert events[-1][0] == "select"
    assert ui.click(1, 1) is None


def test_sunburst_hover_and_click(tree):
    ui = ChartInteraction(tree, "monetary")
    assert ui.is_sunburst
    selected = []
    ui.subscribe("select", selected.append)

    event = ui.hover(CX + 160, CY)
    assert event.target.path == "A/x"
    assert event.tooltip.lines() == ["A", "x", "Revenue: $300", "Variance: 10.0%"]
    assert (event.box.x, event.box.y, event.box.h) == (489, 350, 80)

    short = ui.hover(CX + 93, CY)
    assert short.box.h == 64

    agg = ui.click(CX - 93, CY)
    assert selected == [agg]
    assert agg.hierarchy_path == "B"


def test_unsubscribe(matrix):
    ui = ChartInteraction(matrix)
    calls = []
    handler = ui.subscribe("legend", calls.append)
    ui.toggle_legend()
    ui.unsubscribe("legend", handler)
    ui.toggle_legend()
    assert calls == [False]
    assert ui.legend.visible is True


def test_legend_state():
    legend = LegendState()
    assert legend.caption == "Hide legend"
    assert legend.toggle() is False
    assert legend.caption == "Show legend"


def test_pointer_to_canvas():
    x, y = pointer_to_canvas(150, 100, (50, 0, 370, 295), (740, 590))
    assert x == pytest.approx(200)
    assert y == pytest.approx(200)
