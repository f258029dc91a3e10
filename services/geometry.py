from typing import Iterable, Optional, Tuple

Bounds = Tuple[Tuple[float, float], Tuple[float, float]]  # ((min_x, min_y), (max_x, max_y))


def bounding_box(points: Iterable[Tuple[float, float]]) -> Optional[Bounds]:
    pts = list(points)
    if not pts:
        return None
    xs = [p[0] for p in pts]
    ys = [p[1] for p in pts]
    return (min(xs), min(ys)), (max(xs), max(ys))


def extend_bounds(bounds: Optional[Bounds], other: Optional[Bounds]) -> Optional[Bounds]:
    if bounds is None:
        return other
    if other is None:
        return bounds
    (ax1, ay1), (ax2, ay2) = bounds
    (bx1, by1), (bx2, by2) = other
    return (min(ax1, bx1), min(ay1, by1)), (max(ax2, bx2), max(ay2, by2))
