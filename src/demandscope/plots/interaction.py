# =====================================================================
# demandscope.plots.interaction
# Hit-testing, tooltips, label fitting and event dispatch for the charts
# =====================================================================

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from demandscope.eda.segmentation import ComputedAggregate, check_volume_type, element_id_for, xyz_class
from demandscope.eda.thresholds import ClassificationThresholds, DEFAULT_THRESHOLDS
from demandscope.plots.core.config import MATRIX_LAYOUT, SUNBURST_LAYOUT
from demandscope.plots.layout.matrix import MatrixItem, MatrixLayout
from demandscope.plots.layout.sunburst import SunburstNode, SunburstTree, ring_radii
from demandscope.plots.layout.treemap import Rect

ELLIPSIS = '…'
BREADCRUMB_SEP = ' › '
EVENTS = ('hover', 'leave', 'select', 'legend')


# =====================================================================
# Text
# =====================================================================
def format_volume(value: float, volume_type: str = 'monetary') -> str:
    """
    Abbreviate a volume for display.

    >=1e6 → one decimal with 'M', >=1e3 → no decimals with 'K', otherwise the
    integer part. Monetary volumes get a '$' prefix.

    Examples
    --------
    >>> format_volume(2_345_678)
    '$2.3M'
    >>> format_volume(48_200, 'quantity')
    '48K'
    """
    check_volume_type(volume_type)
    prefix = '$' if volume_type == 'monetary' else ''
    if value >= 1_000_000:
        return f"{prefix}{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{prefix}{value / 1_000:.0f}K"
    return f"{prefix}{int(value)}"


def volume_caption(volume_type: str) -> str:
    return 'Revenue' if volume_type == 'monetary' else 'Qty'


def truncate_label(text: str, max_chars: int) -> str:
    """Cut ``text`` to ``max_chars`` characters, the last one being '…'."""
    if len(text) <= max_chars:
        return text
    return text[:max(0, max_chars - 1)] + ELLIPSIS


@dataclass
class Label:
    text: str
    x: float
    y: float
    font_size: float
    angle: float = 0.0


def item_label(rect: Rect, text: str, config: Optional[Dict] = None) -> Optional[Label]:
    """Centered treemap label, or ``None`` when the rectangle is too small."""
    cfg = {**MATRIX_LAYOUT, **(config or {})}
    fs = min(cfg["item_label_max_font"], rect.h / 2.4, rect.w / 4)
    if rect.w < cfg["item_label_min_w"] or rect.h < cfg["item_label_min_h"] or fs < cfg["min_font"]:
        return None
    cx, cy = rect.center
    return Label(truncate_label(text, cfg["item_label_max_chars"]), cx, cy, fs)


def cell_label_visible(rect: Rect, config: Optional[Dict] = None) -> bool:
    cfg = {**MATRIX_LAYOUT, **(config or {})}
    return rect.w > cfg["cell_label_min_w"] and rect.h > cfg["cell_label_min_h"]


def arc_label(node: SunburstNode, config: Optional[Dict] = None) -> Optional[Label]:
    """
    Radial label at the middle of the node's ring segment.

    Font size shrinks with the arc length (at most one fifth of it); the text
    reads outward and is flipped on the left half so it is never upside down.
    """
    cfg = {**SUNBURST_LAYOUT, **(config or {})}
    r1, r2 = ring_radii(node.level, cfg, inset=False)
    mid_r = (r1 + r2) / 2
    mid = node.mid_angle
    arc_len = mid_r * node.span

    base = cfg["label_font"].get(node.level, min(cfg["label_font"].values()))
    fs = min(base, arc_len / 5)
    if arc_len <= cfg["label_min_arc"] or fs < cfg["min_font"]:
        return None

    deg = math.degrees(mid) + (180 if math.cos(mid) < 0 else 0)
    max_chars = max(2, int(cfg["ring_width"] // (fs * cfg["char_width"])))
    return Label(
        truncate_label(node.label, max_chars),
        cfg["cx"] + mid_r * math.cos(mid),
        cfg["cy"] + mid_r * math.sin(mid),
        fs,
        deg,
    )


# =====================================================================
# Tooltips
# =====================================================================
@dataclass
class Tooltip:
    breadcrumb: str
    name: str
    volume: str
    variance: str
    cell: Optional[str] = None

    def lines(self) -> List[str]:
        out = [self.breadcrumb] if self.breadcrumb else []
        out.append(self.name)
        out.append(self.volume)
        out.append(f"{self.cell} · {self.variance}" if self.cell else self.variance)
        return out

    def to_html(self) -> str:
        """Plotly hover text (``<br>``-separated, name in bold)."""
        parts = self.lines()
        i = 1 if self.breadcrumb else 0
        parts[i] = f"<b>{parts[i]}</b>"
        return '<br>'.join(parts)


def tooltip_content(
    target: Union[ComputedAggregate, SunburstNode],
    volume_type: str = 'monetary',
    name_max_chars: Optional[int] = 25,
) -> Tooltip:
    """
    Tooltip text for an aggregate (matrix) or a sunburst node.

    Aggregates show their ABC×XYZ cell next to the variance; sunburst nodes
    show only the variance.
    """
    if isinstance(target, ComputedAggregate):
        path, volume, variance = target.hierarchy_path, target.volume_total, target.variance_percent
        cell = target.cell
    else:
        path, volume, variance = target.path, target.volume, target.variance_percent
        cell = None

    parts = path.split('/')
    name = parts[-1]
    if name_max_chars is not None:
        name = truncate_label(name, name_max_chars)
    return Tooltip(
        breadcrumb=BREADCRUMB_SEP.join(parts[:-1]),
        name=name,
        volume=f"{volume_caption(volume_type)}: {format_volume(volume, volume_type)}",
        variance=f"Variance: {variance:.1f}%",
        cell=cell,
    )


def place_tooltip(
    px: float,
    py: float,
    config: Optional[Dict] = None,
    height: Optional[float] = None,
) -> Rect:
    """
    Tooltip box next to the pointer, kept inside the canvas.

    The box sits ``tooltip_offset`` to the right of the pointer (clamped
    against the right edge) and is vertically centred on it (clamped against
    the top edge).
    """
    cfg = {**MATRIX_LAYOUT, **(config or {})}
    w = cfg["tooltip_w"]
    h = cfg["tooltip_h"] if height is None else height
    tx = min(px + cfg["tooltip_offset"], cfg["width"] - w - cfg["tooltip_margin"])
    ty = max(py - h / 2, cfg["tooltip_min_y"])
    return Rect(tx, ty, w, h)


# =====================================================================
# Hit-testing
# =====================================================================
def hit_test_rect(layout: Optional[MatrixLayout], px: float, py: float) -> Optional[MatrixItem]:
    """Drawable treemap item under the point, if any."""
    if layout is None:
        return None
    for item in layout.items():
        if item.drawable and item.rect.contains(px, py):
            return item
    return None


def _normalize_angle(a: float, start: float) -> float:
    return start + (a - start) % (2 * math.pi)


def hit_test_arc(
    tree: SunburstTree,
    px: float,
    py: float,
    config: Optional[Dict] = None,
    start_angle: float = -math.pi / 2,
) -> Optional[SunburstNode]:
    """
    Sunburst node under the point, if any.

    The ring is found from the distance to the centre, then the node whose
    [start, end) span holds the pointer angle. Zero-span nodes never match.
    """
    cfg = {**SUNBURST_LAYOUT, **(config or {})}
    dx, dy = px - cfg["cx"], py - cfg["cy"]
    r = math.hypot(dx, dy)
    if r < cfg["inner_radius"]:
        return None
    level = int((r - cfg["inner_radius"]) // cfg["ring_width"]) + 1
    r1, r2 = ring_radii(level, cfg)
    if not (r1 <= r <= r2):
        return None

    angle = _normalize_angle(math.atan2(dy, dx), start_angle)
    for node in tree.visible_nodes():
        if node.level == level and node.start_angle <= angle < node.end_angle:
            return node
    return None


def node_aggregate(
    node: SunburstNode,
    thresholds: ClassificationThresholds = DEFAULT_THRESHOLDS,
) -> ComputedAggregate:
    """
    Aggregate behind a sunburst node.

    Leaves carry their own aggregate. Inner nodes get a synthesized one with
    the node's volume and weighted variance, ABC class 'B' and the XYZ class
    of that variance.
    """
    if node.aggregate is not None:
        return node.aggregate
    return ComputedAggregate(
        element_id=element_id_for(node.path),
        hierarchy_path=node.path,
        volume_total=node.volume,
        variance_percent=node.variance_percent,
        abc_class='B',
        xyz_class=xyz_class(node.variance_percent, thresholds),
    )


# =====================================================================
# Events
# =====================================================================
@dataclass
class HoverEvent:
    target: Any
    aggregate: Optional[ComputedAggregate]
    x: float
    y: float
    tooltip: Tooltip
    box: Rect


class LegendState:
    """Show/hide flag of a chart legend; pure UI state."""

    def __init__(self, visible: bool = True):
        self.visible = visible

    def toggle(self) -> bool:
        self.visible = not self.visible
        return self.visible

    @property
    def caption(self) -> str:
        return 'Hide legend' if self.visible else 'Show legend'


class ChartInteraction:
    """
    Pointer handling for one chart.

    Handlers are registered per event and called synchronously:

    - ``hover``  → ``HoverEvent``
    - ``leave``  → ``None``
    - ``select`` → ``ComputedAggregate``
    - ``legend`` → ``bool`` (new visibility)

    Parameters
    ----------
    geometry : MatrixLayout or SunburstTree
        Output of ``layout_abc_xyz_matrix`` or ``build_sunburst``.
    volume_type : {'quantity', 'monetary'}
        Drives the tooltip volume formatting.
    config : dict, optional
        Overrides for the chart's layout dict.

    Examples
    --------
    >>> ui = ChartInteraction(layout, 'monetary')
    >>> ui.subscribe('select', lambda agg: print(agg.hierarchy_path))
    >>> ui.click(300, 200)
    """

    def __init__(
        self,
        geometry: Union[MatrixLayout, SunburstTree, None],
        volume_type: str = 'monetary',
        config: Optional[Dict] = None,
        thresholds: ClassificationThresholds = DEFAULT_THRESHOLDS,
    ):
        self.geometry = geometry
        self.volume_type = check_volume_type(volume_type)
        self.is_sunburst = isinstance(geometry, SunburstTree)
        base = SUNBURST_LAYOUT if self.is_sunburst else MATRIX_LAYOUT
        self.config = {**base, **(config or {})}
        self.thresholds = thresholds
        self.legend = LegendState()
        self.hovered = None
        self._handlers: Dict[str, List[Callable]] = {e: [] for e in EVENTS}

    def subscribe(self, event: str, handler: Callable) -> Callable:
        if event not in self._handlers:
            raise ValueError(f"Unknown event '{event}'. Expected one of {list(EVENTS)}")
        if not callable(handler):
            raise TypeError(f"Handler for '{event}' must be callable, got {type(handler).__name__}")
        self._handlers[event].append(handler)
        return handler

    def unsubscribe(self, event: str, handler: Callable) -> None:
        if event in self._handlers and handler in self._handlers[event]:
            self._handlers[event].remove(handler)

    def emit(self, event: str, payload=None) -> None:
        if event not in self._handlers:
            raise ValueError(f"Unknown event '{event}'. Expected one of {list(EVENTS)}")
        for handler in list(self._handlers[event]):
            handler(payload)

    # -----------------------------------------------------------------
    def hit_test(self, px: float, py: float):
        if self.is_sunburst:
            return hit_test_arc(self.geometry, px, py, self.config)
        item = hit_test_rect(self.geometry, px, py)
        return item.aggregate if item is not None else None

    def _aggregate(self, target) -> Optional[ComputedAggregate]:
        if target is None:
            return None
        if isinstance(target, SunburstNode):
            return node_aggregate(target, self.thresholds)
        return target

    def hover(self, px: float, py: float) -> Optional[HoverEvent]:
        """Pointer moved to (px, py) in canvas units."""
        target = self.hit_test(px, py)
        if target is None:
            return self.leave()

        if self.is_sunburst:
            tip = tooltip_content(target, self.volume_type, name_max_chars=None)
            height = self.config["tooltip_h"] if tip.breadcrumb else self.config["tooltip_h_short"]
        else:
            tip = tooltip_content(target, self.volume_type)
            height = None

        event = HoverEvent(
            target=target,
            aggregate=self._aggregate(target),
            x=px, y=py,
            tooltip=tip,
            box=place_tooltip(px, py, self.config, height),
        )
        self.hovered = target
        self.emit('hover', event)
        return event

    def leave(self) -> None:
        if self.hovered is not None:
            self.hovered = None
            self.emit('leave')
        return None

    def click(self, px: float, py: float) -> Optional[ComputedAggregate]:
        aggregate = self._aggregate(self.hit_test(px, py))
        if aggregate is not None:
            self.emit('select', aggregate)
        return aggregate

    def toggle_legend(self) -> bool:
        visible = self.legend.toggle()
        self.emit('legend', visible)
        return visible


def pointer_to_canvas(
    client_x: float,
    client_y: float,
    bounds: Tuple[float, float, float, float],
    canvas: Tuple[float, float],
) -> Tuple[float, float]:
    """Map a client-space pointer into canvas units given the on-screen ``bounds`` (left, top, width, height)."""
    left, top, width, height = bounds
    cw, ch = canvas
    return (client_x - left) * cw / width, (client_y - top) * ch / height
