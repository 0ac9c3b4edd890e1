import pytest

from demandscope.eda.segmentation import ComputedAggregate
from demandscope.plots.layout.matrix import layout_abc_xyz_matrix


def agg(path, volume, abc, xyz):
    return ComputedAggregate(path.replace("/", "-"), path, volume, 10.0, abc, xyz)


@pytest.fixture
def three_cells():
    return [
        agg("A/x", 600.0, "A", "X"),
        agg("B/y", 300.0, "B", "Y"),
        agg("C/z", 100.0, "C", "Z"),
    ]


def test_empty_input_has_no_layout():
    assert layout_abc_xyz_matrix([]) is None


def test_rows_and_columns_are_volume_proportional(three_cells):
    layout = layout_abc_xyz_matrix(three_cells)
    chart_h = 590 - 54 - 8
    chart_w = 740 - 56 - 10
    assert sum(layout.row_h) == pytest.approx(chart_h)
    assert sum(layout.col_w) == pytest.approx(chart_w)
    assert layout.row_h[0] == pytest.approx(0.6 * chart_h)
    assert layout.col_w[2] == pytest.approx(0.1 * chart_w)
    assert layout.row_y[0] == 8
    assert layout.col_x[0] == 56
    assert layout.row_totals == [600.0, 300.0, 100.0]


def test_nine_cells_in_row_major_order(three_cells):
    layout = layout_abc_xyz_matrix(three_cells)
    assert [c.key for c in layout.cells] == ["AX", "AY", "AZ", "BX", "BY", "BZ", "CX", "CY", "CZ"]
    assert layout.cell("AY").rect.w == pytest.approx(layout.cell("AX").rect.w * 0.3 / 0.6)
    assert layout.cell("AY").items == []
    with pytest.raises(KeyError):
        layout.cell("DX")


def test_item_fills_inner_area(three_cells):
    layout = layout_abc_xyz_matrix(three_cells)
    cell = layout.cell("AX")
    inner = cell.rect.inset(1.5, 16, 1.5, 1.5)
    (item,) = cell.items
    assert item.rect.area == pytest.approx(inner.area)
    assert item.rect.y == pytest.approx(cell.rect.y + 16)
    assert item.drawable


def test_items_share_cell_by_volume():
    aggs = [agg("A/x", 300.0, "A", "X"), agg("A/y", 100.0, "A", "X")]
    layout = layout_abc_xyz_matrix(aggs)
    big, small = layout.cell("AX").items
    assert big.rect.area == pytest.approx(3 * small.rect.area)


def test_layout_callback(three_cells):
    seen = []
    layout_abc_xyz_matrix(three_cells, callbacks={"on_layout_complete": lambda *a: seen.append(a)})
    assert seen == [("abc_xyz", 3, 0)]


def test_all_zero_volumes_are_not_drawable():
    aggs = [agg("A/x", 0.0, "C", "X"), agg("A/y", 0.0, "C", "X")]
    seen = []
    layout = layout_abc_xyz_matrix(aggs, callbacks={"on_layout_complete": lambda *a: seen.append(a)})
    assert all(item.rect is None for item in layout.items())
    assert not any(item.drawable for item in layout.items())
    assert seen == [("abc_xyz", 2, 2)]
    assert sum(layout.row_h) == 0


def test_config_overrides():
    layout = layout_abc_xyz_matrix([agg("A/x", 1.0, "A", "X")], config={"width": 400, "height": 300})
    assert layout.config["width"] == 400
    assert layout.col_w[0] == pytest.approx(400 - 56 - 10)
    assert layout.row_h[0] == pytest.approx(300 - 54 - 8)
