import math

import pytest

from demandscope.plots.core.palette import PLASMA_STOPS, plasma_color
from demandscope.plots.layout.sunburst import (
    MIN_SPAN,
    SunburstTree,
    arc_points,
    build_sunburst,
    ring_radii,
)

TWO_PI = 2 * math.pi


@pytest.fixture
def small_tree():
    return build_sunburst([("A/x", 100, 10), ("A/y", 300, 30), ("B/z", 600, 20)])


def test_volume_and_weighted_variance_roll_up():
    tree = build_sunburst([("A/x", 100, 10), ("A/y", 300, 30)])
    node = tree.node("A")
    assert node.volume == 400
    assert node.variance_percent == pytest.approx(25.0)
    assert tree.root.volume == 400
    assert len(tree) == 4


def test_root_children_cover_full_circle(small_tree):
    roots = small_tree.children(small_tree.root)
    assert [n.path for n in roots] == ["B", "A"]
    assert roots[0].start_angle == pytest.approx(-math.pi / 2)
    assert sum(n.span for n in roots) == pytest.approx(TWO_PI)
    assert roots[0].end_angle == pytest.approx(roots[1].start_angle)
    assert roots[0].span == pytest.approx(TWO_PI * 0.6)


def test_children_nest_inside_parent(small_tree):
    for node in small_tree.walk():
        kids = small_tree.children(node)
        if not kids:
            continue
        assert kids[0].start_angle == pytest.approx(node.start_angle)
        assert kids[-1].end_angle == pytest.approx(node.end_angle)
        for a, b in zip(kids, kids[1:]):
            assert a.end_angle == pytest.approx(b.start_angle)
        assert sum(k.span for k in kids) == pytest.approx(node.span)


def test_siblings_sorted_by_volume_stable():
    tree = build_sunburst([("A/p", 5, 1), ("A/q", 9, 1), ("A/r", 5, 1)])
    assert [n.label for n in tree.children(tree.node("A"))] == ["q", "p", "r"]


def test_walk_is_preorder(small_tree):
    assert [n.path for n in small_tree.walk()] == ["B", "B/z", "A", "A/y", "A/x"]


def test_zero_volume_node_retained_but_hidden():
    tree = build_sunburst([("A/x", 100, 10), ("B/y", 0, 50)])
    b = tree.node("B")
    assert b.span == 0
    assert b.variance_percent == 0.0
    assert b in tree.retained_nodes()
    assert b not in tree.visible_nodes()
    assert not tree.node("B/y").drawable
    assert tree.node("A").span == pytest.approx(TWO_PI)


def test_colors_span_the_ramp():
    tree = build_sunburst([("A/x", 100, 10), ("A/y", 300, 30)])
    assert tree.min_variance == pytest.approx(10)
    assert tree.max_variance == pytest.approx(30)
    assert tree.node("A/x").color == PLASMA_STOPS[0]
    assert tree.node("A/y").color == PLASMA_STOPS[-1]
    assert tree.node("A").color == plasma_color(0.75)
    assert tree.root.color is None
    assert tree.variance_at(0.5) == pytest.approx(20.0)


def test_equal_variances_use_middle_color():
    tree = build_sunburst([("A/x", 100, 15), ("A/y", 50, 15)])
    assert {n.color for n in tree.walk()} == {plasma_color(0.5)}


def test_leaves_keep_their_aggregate():
    from demandscope.eda.segmentation import ComputedAggregate

    agg = ComputedAggregate("A-x", "A/x", 10.0, 5.0, "A", "X")
    tree = build_sunburst([agg])
    assert tree.node("A/x").aggregate is agg
    assert tree.node("A").aggregate is None


def test_layout_callback():
    seen = []
    build_sunburst([("A/x", 1, 1), ("B/y", 0, 1)],
                   callbacks={"on_layout_complete": lambda *a: seen.append(a)})
    assert seen == [("sunburst", 4, 2)]


def test_empty_tree():
    tree = build_sunburst([])
    assert len(tree) == 1
    assert tree.visible_nodes() == []
    assert (tree.min_variance, tree.max_variance) == (0.0, 0.0)


def test_ring_radii():
    assert ring_radii(1) == pytest.approx((60.8, 125.2))
    assert ring_radii(1, inset=False) == (60, 126)
    assert ring_radii(4, inset=False) == (258, 324)


def test_arc_points_closed_polygon():
    xs, ys = arc_points(0, 0, 10, 20, 0, math.pi / 2, resolution=40)
    # 3 steps → 4 outer + 4 inner points + closing point
    assert len(xs) == len(ys) == 9
    assert (xs[0], ys[0]) == (xs[-1], ys[-1])
    assert xs[0] == pytest.approx(20)
    assert ys[3] == pytest.approx(20)
    assert xs[4] == pytest.approx(0, abs=1e-9)
    assert ys[4] == pytest.approx(10)


def test_arc_points_degenerate_and_full():
    assert arc_points(0, 0, 1, 2, 1.0, 1.0) == ([], [])
    assert arc_points(0, 0, 1, 2, 1.0, 1.0 + MIN_SPAN / 2) == ([], [])
    xs, ys = arc_points(0, 0, 1, 2, 0, TWO_PI)
    n_outer = (len(xs) - 1) // 2
    assert n_outer == 181
    # the ring stays open: the last outer point sits just short of the first
    assert ys[0] == pytest.approx(0.0)
    assert ys[n_outer - 1] < 0


def test_manual_tree_add():
    tree = SunburstTree()
    leaf = tree.add("A/B/C/D", 10, 20)
    assert leaf.level == 4
    assert leaf.is_leaf
    assert tree.node("A/B").parent == tree.node("A").index
    tree.layout()
    assert leaf.span == pytest.approx(TWO_PI)
