"""Builders shared by the proposition definitions."""

from __future__ import annotations

from typing import List, Mapping, Optional, Sequence

import numpy as np

from ..types import (
    BYRNE,
    CompassPhaseTrigger,
    Coord,
    ElementSelector,
    MacroSelectTrigger,
    Point,
    Segment,
    TutorialHint,
    TutorialSubStep,
)


def given_point(label: str, x: float, y: float) -> Point:
    return Point(id=f"pt-{label}", x=float(x), y=float(y), label=label, color=BYRNE.given, origin="given")


def given_segment(from_label: str, to_label: str) -> Segment:
    return Segment(
        id=f"seg-{from_label}{to_label}",
        from_id=f"pt-{from_label}",
        to_id=f"pt-{to_label}",
        color=BYRNE.given,
        origin="given",
    )


def rotation_matrix(theta: float) -> np.ndarray:
    c, s = np.cos(theta), np.sin(theta)
    return np.array([[c, -s], [s, c]])


def rotate_about(pivot: Coord, point: Coord, theta: float, anchor: Coord) -> Coord:
    """Rotate ``point - pivot`` by ``theta`` and attach the result at ``anchor``."""

    offset = np.asarray(point, dtype=float) - np.asarray(pivot, dtype=float)
    rotated = rotation_matrix(theta) @ offset + np.asarray(anchor, dtype=float)
    return float(rotated[0]), float(rotated[1])


def position(positions: Mapping[str, Coord], point_id: str, default: Coord) -> Coord:
    coords = positions.get(point_id)
    if coords is None:
        return default
    return float(coords[0]), float(coords[1])


# ---------------------------------------------------------------------------
# Tutorial text
# ---------------------------------------------------------------------------


def _verbs(is_touch: bool):
    tap = "Tap" if is_touch else "Click"
    hold = "Tap and hold" if is_touch else "Click and hold"
    sweep = "Sweep your finger" if is_touch else "Move your mouse"
    return tap, hold, sweep


def _name(point_id: str) -> str:
    return point_id[3:] if point_id.startswith("pt-") else point_id


def compass_tutorial(center_id: str, radius_point_id: str, is_touch: bool, intro: str = "") -> List[TutorialSubStep]:
    _, hold, sweep = _verbs(is_touch)
    center, rim = _name(center_id), _name(radius_point_id)
    return [
        TutorialSubStep(
            instruction=f"{hold} point {center}",
            speech=f"{intro}{hold} on {center} to place the compass point.".strip(),
            hint=TutorialHint(type="point", point_id=center_id),
            advance_on=CompassPhaseTrigger("center-set"),
        ),
        TutorialSubStep(
            instruction=f"Drag to point {rim}",
            speech=f"Drag to {rim}. The compass opens to the length {center}{rim}.",
            hint=TutorialHint(type="arrow", from_id=center_id, to_id=radius_point_id),
            advance_on=CompassPhaseTrigger("radius-set"),
        ),
        TutorialSubStep(
            instruction=f"{sweep} around",
            speech="Sweep all the way around to draw the circle.",
            hint=TutorialHint(type="sweep", center_id=center_id, radius_point_id=radius_point_id),
            advance_on=None,
        ),
    ]


def straightedge_tutorial(from_id: str, to_id: str, is_touch: bool) -> List[TutorialSubStep]:
    _, hold, _ = _verbs(is_touch)
    start, end = _name(from_id), _name(to_id)
    return [
        TutorialSubStep(
            instruction=f"{hold} point {start}",
            speech=f"Join {start} to {end}. {hold} on {start}, then release on {end}.",
            hint=TutorialHint(type="arrow", from_id=from_id, to_id=to_id),
            advance_on=None,
        )
    ]


def intersection_tutorial(
    of_a: ElementSelector,
    of_b: ElementSelector,
    label: str,
    is_touch: bool,
    beyond_id: Optional[str] = None,
    where: str = "where they cross",
) -> List[TutorialSubStep]:
    tap, _, _ = _verbs(is_touch)
    return [
        TutorialSubStep(
            instruction=f"{tap} {where}",
            speech=f"{tap} the crossing point. It becomes {label}.",
            hint=TutorialHint(type="candidates", of_a=of_a, of_b=of_b, beyond_id=beyond_id),
            advance_on=None,
        )
    ]


def macro_tutorial(point_ids: Sequence[str], roles: Sequence[str], is_touch: bool, intro: str) -> List[TutorialSubStep]:
    tap, _, _ = _verbs(is_touch)
    sub_steps: List[TutorialSubStep] = []
    last = len(point_ids) - 1
    for index, (point_id, role) in enumerate(zip(point_ids, roles)):
        name = _name(point_id)
        speech = f"{intro} {tap} {name}, the {role.lower()}." if index == 0 else f"{tap} {name}, the {role.lower()}."
        sub_steps.append(
            TutorialSubStep(
                instruction=f"{tap} point {name}",
                speech=speech,
                hint=TutorialHint(type="point", point_id=point_id),
                advance_on=None if index == last else MacroSelectTrigger(index),
            )
        )
    return sub_steps
