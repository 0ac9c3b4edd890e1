# =====================================================================
# demandscope.plots.layout.treemap
# Squarified treemap: area-proportional rectangles with low aspect ratio
# =====================================================================

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import List, Sequence


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle; ``y`` grows downward like a canvas."""

    x: float
    y: float
    w: float
    h: float

    @property
    def area(self) -> float:
        return self.w * self.h

    @property
    def center(self):
        return (self.x + self.w / 2, self.y + self.h / 2)

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px < self.x + self.w and self.y <= py < self.y + self.h

    def inset(self, left: float = 0.0, top: float = 0.0, right: float = 0.0, bottom: float = 0.0) -> "Rect":
        """Shrink by the given amounts, never below zero size."""
        return Rect(
            self.x + left,
            self.y + top,
            max(0.0, self.w - left - right),
            max(0.0, self.h - top - bottom),
        )


def worst_ratio(row: Sequence[float], short_edge: float) -> float:
    """
    Worst aspect ratio of ``row`` laid along a side of length ``short_edge``.

    max(s²·max/sum², sum²/(s²·min)); infinite for an empty row, a zero sum,
    a zero-length side, or a zero-area item.
    """
    if not row:
        return math.inf
    total = sum(row)
    if total == 0:
        return math.inf
    se2 = short_edge * short_edge
    denom = se2 * min(row)
    if denom == 0:
        return math.inf
    return max(se2 * max(row) / (total * total), total * total / denom)


def squarify(weights: Sequence[float], container: Rect) -> List[Rect]:
    """
    Partition ``container`` among ``weights`` (squarified treemap).

    Parameters
    ----------
    weights : sequence of float
        Non-negative weights.
    container : Rect
        Area to fill.

    Returns
    -------
    list of Rect
        One rectangle per weight, in input order. Areas are proportional to
        the weights and together tile the container.

    Notes
    -----
    - Empty ``weights`` → ``[]``.
    - All-zero weights or a zero-area container → one copy of ``container``
      per weight; callers treat these as not drawable.
    - Items are laid out largest first; a row keeps growing while its worst
      aspect ratio does not get strictly worse.

    Examples
    --------
    >>> rects = squarify([4, 3, 2, 1], Rect(0, 0, 100, 100))
    >>> [round(r.area) for r in rects]
    [4000, 3000, 2000, 1000]
    """
    if not weights:
        return []
    total = float(sum(weights))
    if total <= 0 or container.w <= 0 or container.h <= 0:
        return [replace(container) for _ in weights]

    area = container.w * container.h
    norm = [w / total * area for w in weights]
    order = sorted(range(len(norm)), key=lambda i: -norm[i])

    sorted_rects = _strip([norm[i] for i in order], container)

    result: List[Rect] = [container] * len(weights)
    for si, orig in enumerate(order):
        result[orig] = sorted_rects[si]
    return result


def _strip(items: List[float], rect: Rect) -> List[Rect]:
    """Lay one row along the shorter side, then recurse on the remainder."""
    out: List[Rect] = []
    while items:
        if len(items) == 1:
            out.append(rect)
            break

        x, y, w, h = rect.x, rect.y, rect.w, rect.h
        wide = w >= h
        s = h if wide else w

        row = [items[0]]
        row_end = 1
        for i in range(1, len(items)):
            cand = row + [items[i]]
            if worst_ratio(cand, s) > worst_ratio(row, s):
                break
            row = cand
            row_end = i + 1

        row_sum = sum(row)
        thick = row_sum / s if s > 0 else 0.0
        off = 0.0
        for a in row:
            length = a / row_sum * s if row_sum > 0 else 0.0
            if wide:
                out.append(Rect(x, y + off, thick, length))
            else:
                out.append(Rect(x + off, y, length, thick))
            off += length

        items = items[row_end:]
        if wide:
            rect = Rect(x + thick, y, max(0.0, w - thick), h)
        else:
            rect = Rect(x, y + thick, w, max(0.0, h - thick))
    return out
