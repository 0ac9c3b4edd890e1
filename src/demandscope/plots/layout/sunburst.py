# =====================================================================
# demandscope.plots.layout.sunburst
# Radial hierarchy: tree build, angular subdivision, variance coloring
# =====================================================================

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from demandscope.eda.segmentation import ComputedAggregate
from demandscope.plots.core.config import SUNBURST_LAYOUT
from demandscope.plots.core.palette import PLASMA_STOPS, RGB, plasma_color

ROOT = 0
MIN_SPAN = 1e-9


@dataclass
class SunburstNode:
    """One ring segment. ``children`` and ``parent`` are indices into the tree."""

    index: int
    id: str
    label: str
    level: int
    path: str
    volume: float = 0.0
    variance_weighted_sum: float = 0.0
    children: List[int] = field(default_factory=list)
    parent: Optional[int] = None
    start_angle: float = 0.0
    end_angle: float = 0.0
    color: Optional[RGB] = None
    aggregate: Optional[ComputedAggregate] = None

    @property
    def variance_percent(self) -> float:
        """Volume-weighted mean variance of the leaves beneath this node."""
        if self.volume > 0:
            return self.variance_weighted_sum / self.volume
        return 0.0

    @property
    def span(self) -> float:
        return self.end_angle - self.start_angle

    @property
    def mid_angle(self) -> float:
        return (self.start_angle + self.end_angle) / 2

    @property
    def drawable(self) -> bool:
        return self.level > 0 and self.span > MIN_SPAN

    @property
    def is_leaf(self) -> bool:
        return not self.children


class SunburstTree:
    """
    Arena of ``SunburstNode`` objects addressed by integer index.

    Index 0 is a synthetic root (level 0, empty path). Traversal is top-down
    through ``children``; ``parent`` is informational only.
    """

    def __init__(self):
        self.nodes: List[SunburstNode] = [
            SunburstNode(index=ROOT, id='__root__', label='', level=0, path='')
        ]
        self._by_path: Dict[str, int] = {'': ROOT}
        self.min_variance: float = 0.0
        self.max_variance: float = 0.0

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[SunburstNode]:
        return iter(self.nodes)

    @property
    def root(self) -> SunburstNode:
        return self.nodes[ROOT]

    def node(self, path: str) -> SunburstNode:
        return self.nodes[self._by_path[path]]

    def children(self, node: SunburstNode) -> List[SunburstNode]:
        return [self.nodes[i] for i in node.children]

    # -----------------------------------------------------------------
    # Build
    # -----------------------------------------------------------------
    def add(
        self,
        path: str,
        volume: float,
        variance_percent: float,
        aggregate: Optional[ComputedAggregate] = None,
    ) -> SunburstNode:
        """Walk/create the nodes of ``path`` and accumulate the leaf values on each."""
        parts = path.split('/')
        cur = self.root
        for depth in range(len(parts)):
            sub = '/'.join(parts[:depth + 1])
            idx = self._by_path.get(sub)
            if idx is None:
                idx = len(self.nodes)
                self.nodes.append(SunburstNode(
                    index=idx, id=sub, label=parts[depth], level=depth + 1,
                    path=sub, parent=cur.index,
                ))
                self._by_path[sub] = idx
                cur.children.append(idx)
            child = self.nodes[idx]
            child.volume += volume
            child.variance_weighted_sum += variance_percent * volume
            cur = child
        self.root.volume += volume
        self.root.variance_weighted_sum += variance_percent * volume
        if aggregate is not None:
            cur.aggregate = aggregate
        return cur

    # -----------------------------------------------------------------
    # Layout
    # -----------------------------------------------------------------
    def layout(self, start: float = -math.pi / 2, end: Optional[float] = None) -> None:
        """
        Assign angular spans top-down.

        Siblings are ordered by volume descending (stable) and each child gets
        ``parent_span × child_volume / parent_volume``, laid contiguously.
        Children of a zero-volume node collapse to zero width at its start.
        """
        if end is None:
            end = start + 2 * math.pi
        root = self.root
        root.start_angle, root.end_angle = start, end

        stack = [ROOT]
        while stack:
            node = self.nodes[stack.pop()]
            if not node.children:
                continue
            node.children.sort(key=lambda i: -self.nodes[i].volume)
            cur = node.start_angle
            for ci in node.children:
                child = self.nodes[ci]
                share = child.volume / node.volume if node.volume > 0 else 0.0
                width = node.span * share
                child.start_angle, child.end_angle = cur, cur + width
                cur += width
            stack.extend(reversed(node.children))

    def colorize(self, stops: List[RGB] = PLASMA_STOPS) -> None:
        """Map each non-root node's variance through the plasma ramp (min→0, max→1)."""
        retained = self.retained_nodes()
        if not retained:
            self.min_variance = self.max_variance = 0.0
            return
        variances = [n.variance_percent for n in retained]
        lo, hi = min(variances), max(variances)
        self.min_variance, self.max_variance = lo, hi
        for n in retained:
            t = 0.5 if hi == lo else (n.variance_percent - lo) / (hi - lo)
            n.color = plasma_color(t, stops)

    def variance_at(self, t: float) -> float:
        """Variance value shown at legend position ``t`` (0 bottom, 1 top)."""
        return self.min_variance + t * (self.max_variance - self.min_variance)

    # -----------------------------------------------------------------
    # Traversal
    # -----------------------------------------------------------------
    def walk(self) -> Iterator[SunburstNode]:
        """Pre-order, children in layout order, root excluded."""
        stack = list(reversed(self.root.children))
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    def retained_nodes(self) -> List[SunburstNode]:
        return list(self.walk())

    def visible_nodes(self) -> List[SunburstNode]:
        """Nodes with a non-zero span; zero-volume nodes stay in the tree but are not drawn."""
        return [n for n in self.walk() if n.drawable]


# =====================================================================
# Builders
# =====================================================================
def _as_item(item) -> Tuple[str, float, float, Optional[ComputedAggregate]]:
    if isinstance(item, ComputedAggregate):
        return item.hierarchy_path, item.volume_total, item.variance_percent, item
    path, volume, variance = item
    return path, float(volume), float(variance), None


def build_sunburst(
    items: Iterable,
    start_angle: float = -math.pi / 2,
    stops: List[RGB] = PLASMA_STOPS,
    callbacks: Optional[Dict[str, Callable]] = None,
) -> SunburstTree:
    """
    Build, lay out and color a sunburst tree.

    Parameters
    ----------
    items : iterable of ComputedAggregate or (path, volume, variance_percent)
        Leaves of the tree; paths are '/'-joined.
    start_angle : float, default -π/2
        Angle (radians) where the first child of the root starts. On a canvas
        whose y axis grows downward this is 12 o'clock.
    stops : list of RGB
        Color ramp for the variance coloring.
    callbacks : dict, optional
        'on_layout_complete' receives ("sunburst", n_nodes, n_hidden).

    Returns
    -------
    SunburstTree

    Examples
    --------
    >>> tree = build_sunburst([("A/x", 100, 10), ("A/y", 300, 30)])
    >>> tree.node("A").variance_percent
    25.0
    """
    callbacks = callbacks or {}
    tree = SunburstTree()
    for item in items:
        path, volume, variance, agg = _as_item(item)
        tree.add(path, volume, variance, agg)
    tree.layout(start_angle)
    tree.colorize(stops)

    if 'on_layout_complete' in callbacks:
        retained = tree.retained_nodes()
        callbacks['on_layout_complete'](
            "sunburst", len(retained), sum(not n.drawable for n in retained)
        )
    return tree


# =====================================================================
# Geometry helpers
# =====================================================================
def ring_radii(level: int, config: Optional[Dict] = None, inset: bool = True) -> Tuple[float, float]:
    """Inner/outer radius of ring ``level`` (1-based), optionally inset."""
    cfg = {**SUNBURST_LAYOUT, **(config or {})}
    r1 = cfg["inner_radius"] + (level - 1) * cfg["ring_width"]
    r2 = r1 + cfg["ring_width"]
    if inset:
        return r1 + cfg["ring_inset"], r2 - cfg["ring_inset"]
    return r1, r2


def arc_points(
    cx: float,
    cy: float,
    r1: float,
    r2: float,
    a1: float,
    a2: float,
    resolution: float = 2.0,
) -> Tuple[List[float], List[float]]:
    """
    Closed polygon approximating an annular sector.

    Outer arc from ``a1`` to ``a2``, then the inner arc back. ``resolution``
    is the maximum angular step in degrees. Returns ``([], [])`` for a zero
    span; a full circle is shortened by 1e-6 rad so the ring stays open.
    """
    span = a2 - a1
    if span <= MIN_SPAN:
        return [], []
    if span >= 2 * math.pi - 1e-6:
        a2 = a1 + 2 * math.pi - 1e-6
        span = a2 - a1

    steps = max(2, int(math.ceil(math.degrees(span) / resolution)))
    angles = [a1 + span * k / steps for k in range(steps + 1)]

    xs = [cx + r2 * math.cos(a) for a in angles]
    ys = [cy + r2 * math.sin(a) for a in angles]
    xs += [cx + r1 * math.cos(a) for a in reversed(angles)]
    ys += [cy + r1 * math.sin(a) for a in reversed(angles)]
    xs.append(xs[0])
    ys.append(ys[0])
    return xs, ys
