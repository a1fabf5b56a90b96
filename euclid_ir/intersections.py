"""Intersection candidates between circles and segments.

The primitives work on plain ``(x, y)`` tuples. The state-aware helpers turn
their output into :class:`IntersectionCandidate` records, tagged with the two
element ids and a ``which`` index. Candidates of one pair are always ordered
top to bottom (descending y, then ascending x), so ``which=0`` is the upper
intersection whichever operand comes first.
"""

from __future__ import annotations

import logging
from math import sqrt
from typing import List, Optional, Sequence, Tuple

from .config import get_engine_config
from .construction import get_all_circles, get_all_points, get_all_segments, get_element, get_point, get_radius
from .logging_utils import apply_debug_logging
from .types import Circle, ConstructionElement, ConstructionState, Coord, IntersectionCandidate, Segment

logger = logging.getLogger(__name__)

_EPS = 1e-12
_MEMBERSHIP_EPS = 1e-9


def _vec(a: Coord, b: Coord) -> Coord:
    return b[0] - a[0], b[1] - a[1]


def _dot(a: Coord, b: Coord) -> float:
    return a[0] * b[0] + a[1] * b[1]


def _cross(a: Coord, b: Coord) -> float:
    return a[0] * b[1] - a[1] * b[0]


def _norm(v: Coord) -> float:
    return sqrt(max(_dot(v, v), 0.0))


def _close(a: Coord, b: Coord, tol: float) -> bool:
    return abs(a[0] - b[0]) < tol and abs(a[1] - b[1]) < tol


def _top_to_bottom(points: Sequence[Coord]) -> List[Coord]:
    return sorted(points, key=lambda pt: (-pt[1], pt[0]))


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------


def circle_circle_intersections(
    c0: Coord, r0: float, c1: Coord, r1: float, tangency_eps: Optional[float] = None
) -> List[Coord]:
    """Intersect two circles via their radical line.

    Returns no points for concentric, disjoint or nested circles and a single
    point when the circles are tangent within ``tangency_eps``.
    """

    eps = get_engine_config().tangency_eps if tangency_eps is None else tangency_eps
    dx = c1[0] - c0[0]
    dy = c1[1] - c0[1]
    d = sqrt(dx * dx + dy * dy)
    if d <= _EPS:
        return []
    if d > r0 + r1 + eps:
        return []
    if d < abs(r0 - r1) - eps:
        return []
    a_param = (r0 * r0 - r1 * r1 + d * d) / (2.0 * d)
    h_sq = r0 * r0 - a_param * a_param
    x2 = c0[0] + (a_param * dx) / d
    y2 = c0[1] + (a_param * dy) / d
    if h_sq <= eps * max(r0, r1, 1.0):
        return [(x2, y2)]
    h = sqrt(h_sq)
    rx = -dy * (h / d)
    ry = dx * (h / d)
    return [(x2 + rx, y2 + ry), (x2 - rx, y2 - ry)]


def _line_circle_params(p0: Coord, p1: Coord, center: Coord, radius: float) -> List[float]:
    d = _vec(p0, p1)
    diff = _vec(center, p0)
    a = _dot(d, d)
    if a <= _EPS:
        return []
    b = 2.0 * _dot(d, diff)
    c_term = _dot(diff, diff) - radius * radius
    disc = b * b - 4.0 * a * c_term
    tol = get_engine_config().tangency_eps * max(a, 1.0)
    if disc < -tol:
        return []
    if abs(disc) <= tol:
        return [-b / (2.0 * a)]
    sqrt_disc = sqrt(disc)
    return [(-b - sqrt_disc) / (2.0 * a), (-b + sqrt_disc) / (2.0 * a)]


def circle_line_intersections(center: Coord, radius: float, p0: Coord, p1: Coord) -> List[Coord]:
    """Intersect a circle with the unbounded line through ``p0`` and ``p1``."""

    d = _vec(p0, p1)
    return [(p0[0] + t * d[0], p0[1] + t * d[1]) for t in _line_circle_params(p0, p1, center, radius)]


def circle_segment_intersections(center: Coord, radius: float, p0: Coord, p1: Coord) -> List[Coord]:
    d = _vec(p0, p1)
    return [
        (p0[0] + t * d[0], p0[1] + t * d[1])
        for t in _line_circle_params(p0, p1, center, radius)
        if -_MEMBERSHIP_EPS <= t <= 1.0 + _MEMBERSHIP_EPS
    ]


def _line_line_params(p0: Coord, p1: Coord, q0: Coord, q1: Coord) -> Optional[Tuple[float, float]]:
    r = _vec(p0, p1)
    s = _vec(q0, q1)
    denom = _cross(r, s)
    if abs(denom) <= _EPS:
        return None
    qp = _vec(p0, q0)
    return _cross(qp, s) / denom, _cross(qp, r) / denom


def line_line_intersection(p0: Coord, p1: Coord, q0: Coord, q1: Coord) -> List[Coord]:
    params = _line_line_params(p0, p1, q0, q1)
    if params is None:
        return []
    t, _ = params
    return [(p0[0] + t * (p1[0] - p0[0]), p0[1] + t * (p1[1] - p0[1]))]


def segment_segment_intersection(p0: Coord, p1: Coord, q0: Coord, q1: Coord) -> List[Coord]:
    """Intersect two finite segments; parallel or collinear segments give nothing."""

    params = _line_line_params(p0, p1, q0, q1)
    if params is None:
        return []
    t, u = params
    lo, hi = -_MEMBERSHIP_EPS, 1.0 + _MEMBERSHIP_EPS
    if not (lo <= t <= hi and lo <= u <= hi):
        return []
    return [(p0[0] + t * (p1[0] - p0[0]), p0[1] + t * (p1[1] - p0[1]))]


# ---------------------------------------------------------------------------
# State-aware helpers
# ---------------------------------------------------------------------------


def _circle_geometry(state: ConstructionState, circle: Circle) -> Optional[Tuple[Coord, float]]:
    center = get_point(state, circle.center_id)
    if center is None:
        return None
    radius = get_radius(state, circle.id)
    if radius <= _EPS:
        return None
    return center.coords, radius


def _segment_geometry(state: ConstructionState, segment: Segment) -> Optional[Tuple[Coord, Coord]]:
    start = get_point(state, segment.from_id)
    end = get_point(state, segment.to_id)
    if start is None or end is None:
        return None
    return start.coords, end.coords


def _operand_order(element: ConstructionElement) -> Tuple[int, str]:
    return (0 if isinstance(element, Circle) else 1, element.id)


def _raw_intersections(
    state: ConstructionState, first: ConstructionElement, second: ConstructionElement, produce: bool
) -> List[Coord]:
    first, second = sorted((first, second), key=_operand_order)
    if isinstance(first, Circle) and isinstance(second, Circle):
        g0 = _circle_geometry(state, first)
        g1 = _circle_geometry(state, second)
        if g0 is None or g1 is None:
            return []
        return circle_circle_intersections(g0[0], g0[1], g1[0], g1[1])
    if isinstance(first, Circle) and isinstance(second, Segment):
        circle = _circle_geometry(state, first)
        seg = _segment_geometry(state, second)
        if circle is None or seg is None:
            return []
        if produce:
            return circle_line_intersections(circle[0], circle[1], seg[0], seg[1])
        return circle_segment_intersections(circle[0], circle[1], seg[0], seg[1])
    if isinstance(first, Segment) and isinstance(second, Segment):
        s0 = _segment_geometry(state, first)
        s1 = _segment_geometry(state, second)
        if s0 is None or s1 is None:
            return []
        if produce:
            return line_line_intersection(s0[0], s0[1], s1[0], s1[1])
        return segment_segment_intersection(s0[0], s0[1], s1[0], s1[1])
    return []


def intersections_between(
    state: ConstructionState, a_id: str, b_id: str, produce: bool = False
) -> List[IntersectionCandidate]:
    """All intersections of two circles/segments, ordered top to bottom.

    Points are not intersectable; an unknown or point id yields no candidates.
    With ``produce`` segments are treated as their unbounded lines.
    """

    first = get_element(state, a_id)
    second = get_element(state, b_id)
    if not isinstance(first, (Circle, Segment)) or not isinstance(second, (Circle, Segment)):
        return []
    if first.id == second.id:
        return []
    points = _top_to_bottom(_raw_intersections(state, first, second, produce))
    return [
        IntersectionCandidate(x=x, y=y, of_a=a_id, of_b=b_id, which=idx)
        for idx, (x, y) in enumerate(points)
    ]


def _is_duplicate(
    pt: Coord,
    candidates: Sequence[IntersectionCandidate],
    point_coords: Sequence[Coord],
    tol: float,
) -> bool:
    if any(_close(pt, cand.coords, tol) for cand in candidates):
        return True
    return any(_close(pt, existing, tol) for existing in point_coords)


def _production_points(
    state: ConstructionState,
    circle: Circle,
    segment: Segment,
    finite_points: Sequence[Coord],
    tol: float,
) -> List[Coord]:
    if segment.origin not in ("given", "straightedge"):
        return []
    if circle.center_id not in (segment.from_id, segment.to_id):
        return []
    circle_geom = _circle_geometry(state, circle)
    seg = _segment_geometry(state, segment)
    if circle_geom is None or seg is None:
        return []
    line_points = circle_line_intersections(circle_geom[0], circle_geom[1], seg[0], seg[1])
    return [pt for pt in line_points if not any(_close(pt, other, tol) for other in finite_points)]


def find_new_intersections(
    state: ConstructionState,
    element: ConstructionElement,
    existing: Sequence[IntersectionCandidate],
    extend_segments: bool = False,
) -> List[IntersectionCandidate]:
    """Candidates created by a freshly added circle or segment.

    The new element is tested against every other circle and segment already
    in ``state``. Points that coincide with an existing candidate or point are
    dropped. With ``extend_segments`` a circle centred on a segment endpoint
    also meets that segment's production.
    """

    if not isinstance(element, (Circle, Segment)):
        return []
    tol = get_engine_config().candidate_tolerance
    point_coords = [pt.coords for pt in get_all_points(state)]
    others: List[ConstructionElement] = [*get_all_circles(state), *get_all_segments(state)]

    found: List[IntersectionCandidate] = []
    for other in others:
        if other.id == element.id:
            continue
        points = _raw_intersections(state, element, other, produce=False)
        if extend_segments:
            if isinstance(element, Circle) and isinstance(other, Segment):
                points = points + _production_points(state, element, other, points, tol)
            elif isinstance(element, Segment) and isinstance(other, Circle):
                points = points + _production_points(state, other, element, points, tol)
        for idx, pt in enumerate(_top_to_bottom(points)):
            if _is_duplicate(pt, [*existing, *found], point_coords, tol):
                continue
            found.append(IntersectionCandidate(x=pt[0], y=pt[1], of_a=element.id, of_b=other.id, which=idx))

    if found:
        logger.debug("Element %s produced %d new candidate(s)", element.id, len(found))
    return found


def is_candidate_beyond_point(
    candidate: IntersectionCandidate, beyond_id: str, state: ConstructionState
) -> bool:
    """True when ``candidate`` lies strictly past ``beyond_id`` on its segment's production.

    The side is measured from the segment endpoint that is not ``beyond_id``.
    When the pair has no segment, or the points cannot be resolved, there is
    nothing to measure against and the candidate passes.
    """

    segment = None
    for element_id in (candidate.of_a, candidate.of_b):
        element = get_element(state, element_id)
        if isinstance(element, Segment):
            segment = element
            break
    if segment is None:
        return True
    beyond = get_point(state, beyond_id)
    start = get_point(state, segment.from_id)
    end = get_point(state, segment.to_id)
    if beyond is None or start is None or end is None:
        return True
    tol = get_engine_config().candidate_tolerance
    at_start = abs(beyond.x - start.x) < tol and abs(beyond.y - start.y) < tol
    other = end if at_start else start
    outward = _vec(other.coords, beyond.coords)
    offset = _vec(beyond.coords, candidate.coords)
    return _dot(offset, outward) > _MEMBERSHIP_EPS * max(_norm(outward), 1.0)


def _matches_pair(candidate: IntersectionCandidate, a_id: str, b_id: str) -> bool:
    return (candidate.of_a == a_id and candidate.of_b == b_id) or (
        candidate.of_a == b_id and candidate.of_b == a_id
    )


def select_candidate(
    candidates: Sequence[IntersectionCandidate],
    a_id: Optional[str],
    b_id: Optional[str],
    beyond_id: Optional[str],
    state: ConstructionState,
) -> Optional[IntersectionCandidate]:
    """Pick the canonical candidate for an intersection step.

    Only candidates of the ``(a_id, b_id)`` pair (in either order) qualify;
    with no ids every candidate does. A ``beyond_id`` filter is applied next.
    Remaining ties go to the candidate with the larger y.
    """

    if a_id is not None and b_id is not None:
        pool = [cand for cand in candidates if _matches_pair(cand, a_id, b_id)]
    elif a_id is None and b_id is None:
        pool = list(candidates)
    else:
        return None
    if beyond_id is not None:
        pool = [cand for cand in pool if is_candidate_beyond_point(cand, beyond_id, state)]
    if not pool:
        return None
    return max(pool, key=lambda cand: cand.y)


def production_point(
    state: ConstructionState, base_id: str, through_id: str, distance: float
) -> Optional[Coord]:
    """Point ``distance`` past ``through`` on the ray from ``base`` through it."""

    base = get_point(state, base_id)
    through = get_point(state, through_id)
    if base is None or through is None:
        return None
    direction = _vec(base.coords, through.coords)
    length = _norm(direction)
    if length < get_engine_config().degenerate_length:
        return None
    return (
        through.x + distance * direction[0] / length,
        through.y + distance * direction[1] / length,
    )


def remove_candidates_at(
    candidates: Sequence[IntersectionCandidate], x: float, y: float
) -> List[IntersectionCandidate]:
    tol = get_engine_config().candidate_tolerance
    return [cand for cand in candidates if not _close(cand.coords, (x, y), tol)]


apply_debug_logging(
    globals(),
    logger=logger,
    skip={"_vec", "_dot", "_cross", "_norm", "_close", "_top_to_bottom", "_matches_pair", "_operand_order"},
)
