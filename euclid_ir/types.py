"""Value types shared across the construction engine.

Everything a construction session threads through its calls lives here:
construction elements and state, intersection candidates, proof facts with
their citations, element selectors, the expected-action union a proposition
step declares, tutorial sub-steps and ghost geometry for macro previews.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Literal, Mapping, Optional, Tuple, Union

if TYPE_CHECKING:  # pragma: no cover
    from .facts import FactStore


Coord = Tuple[float, float]

ElementOrigin = Literal["given", "compass", "straightedge", "intersection"]
SegmentOrigin = Literal["given", "straightedge"]
ToolName = Literal["compass", "straightedge", "macro", "extend"]


class _Palette:
    given = "#1a1a1a"
    red = "#d42a20"
    blue = "#1d5c9b"
    yellow = "#f5b800"


BYRNE = _Palette()
BYRNE_CYCLE: Tuple[str, ...] = (BYRNE.red, BYRNE.blue, BYRNE.yellow)


# ---------------------------------------------------------------------------
# Construction elements
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Point:
    id: str
    x: float
    y: float
    label: str
    color: str
    origin: ElementOrigin

    kind = "point"

    @property
    def coords(self) -> Coord:
        return (self.x, self.y)


@dataclass(frozen=True)
class Circle:
    """A circle defined by its center and a point on its rim.

    The radius is never stored; see :func:`euclid_ir.construction.get_radius`.
    """

    id: str
    center_id: str
    radius_point_id: str
    color: str

    kind = "circle"


@dataclass(frozen=True)
class Segment:
    id: str
    from_id: str
    to_id: str
    color: str
    origin: SegmentOrigin = "straightedge"

    kind = "segment"


ConstructionElement = Union[Point, Circle, Segment]


@dataclass(frozen=True)
class ConstructionState:
    elements: Tuple[ConstructionElement, ...] = ()
    next_label_index: int = 0
    next_color_index: int = 0


@dataclass(frozen=True)
class IntersectionCandidate:
    x: float
    y: float
    of_a: str
    of_b: str
    which: int

    @property
    def coords(self) -> Coord:
        return (self.x, self.y)


# ---------------------------------------------------------------------------
# Facts
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DistancePair:
    a: str
    b: str

    @property
    def key(self) -> Tuple[str, str, str]:
        lo, hi = sorted((self.a, self.b))
        return ("dist", lo, hi)


@dataclass(frozen=True)
class AngleMeasure:
    vertex: str
    ray1_end: str
    ray2_end: str

    @property
    def key(self) -> Tuple[str, str, str, str]:
        lo, hi = sorted((self.ray1_end, self.ray2_end))
        return ("angle", self.vertex, lo, hi)


@dataclass(frozen=True)
class GivenCitation:
    type: str = field(default="given", init=False)


@dataclass(frozen=True)
class Def15Citation:
    circle_id: str
    type: str = field(default="def15", init=False)


@dataclass(frozen=True)
class PropCitation:
    prop_id: int
    type: str = field(default="prop", init=False)


@dataclass(frozen=True)
class CN1Citation:
    via: DistancePair
    type: str = field(default="cn1", init=False)


@dataclass(frozen=True)
class CN3Citation:
    whole: DistancePair
    part: DistancePair
    type: str = field(default="cn3", init=False)


@dataclass(frozen=True)
class CN3AngleCitation:
    whole: AngleMeasure
    part: AngleMeasure
    type: str = field(default="cn3-angle", init=False)


@dataclass(frozen=True)
class CN4Citation:
    type: str = field(default="cn4", init=False)


Citation = Union[
    GivenCitation,
    Def15Citation,
    PropCitation,
    CN1Citation,
    CN3Citation,
    CN3AngleCitation,
    CN4Citation,
]


@dataclass(frozen=True)
class ProofFact:
    id: int
    left: Union[DistancePair, AngleMeasure]
    right: Union[DistancePair, AngleMeasure]
    citation: Citation
    statement: str
    justification: str
    at_step: int

    @property
    def kind(self) -> Literal["distance", "angle"]:
        return "angle" if isinstance(self.left, AngleMeasure) else "distance"


# ---------------------------------------------------------------------------
# Element selectors
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ElementRef:
    id: str


@dataclass(frozen=True)
class CircleRef:
    center_id: str
    radius_point_id: str


@dataclass(frozen=True)
class SegmentRef:
    from_id: str
    to_id: str


ElementSelector = Union[ElementRef, CircleRef, SegmentRef]


# ---------------------------------------------------------------------------
# Expected actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompassAction:
    center_id: str
    radius_point_id: str
    type: str = field(default="compass", init=False)


@dataclass(frozen=True)
class StraightedgeAction:
    from_id: str
    to_id: str
    type: str = field(default="straightedge", init=False)


@dataclass(frozen=True)
class IntersectionAction:
    of_a: Optional[ElementSelector] = None
    of_b: Optional[ElementSelector] = None
    beyond_id: Optional[str] = None
    label: Optional[str] = None
    type: str = field(default="intersection", init=False)


@dataclass(frozen=True)
class MacroAction:
    prop_id: int
    input_point_ids: Tuple[str, ...]
    output_labels: Optional[Mapping[str, str]] = None
    type: str = field(default="macro", init=False)


@dataclass(frozen=True)
class ExtendAction:
    """Produce ``base -> through`` past ``through`` by ``distance``."""

    base_id: str
    through_id: str
    distance: float
    label: str
    type: str = field(default="extend", init=False)


ExpectedAction = Union[CompassAction, StraightedgeAction, IntersectionAction, MacroAction, ExtendAction]


# ---------------------------------------------------------------------------
# Tutorials
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CompassPhaseTrigger:
    phase: Literal["center-set", "radius-set", "sweeping"]
    kind: str = field(default="compass-phase", init=False)


@dataclass(frozen=True)
class MacroSelectTrigger:
    index: int
    kind: str = field(default="macro-select", init=False)


AdvanceOn = Optional[Union[CompassPhaseTrigger, MacroSelectTrigger]]


@dataclass(frozen=True)
class TutorialHint:
    type: Literal["point", "arrow", "sweep", "candidates", "none"]
    point_id: Optional[str] = None
    from_id: Optional[str] = None
    to_id: Optional[str] = None
    center_id: Optional[str] = None
    radius_point_id: Optional[str] = None
    of_a: Optional[ElementSelector] = None
    of_b: Optional[ElementSelector] = None
    beyond_id: Optional[str] = None


@dataclass(frozen=True)
class TutorialSubStep:
    instruction: str
    speech: str
    hint: TutorialHint
    advance_on: AdvanceOn = None


# ---------------------------------------------------------------------------
# Ghost geometry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class GhostCircle:
    cx: float
    cy: float
    r: float
    color: str
    kind: str = field(default="circle", init=False)


@dataclass(frozen=True)
class GhostSegment:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str
    is_production: bool = False
    kind: str = field(default="segment", init=False)


@dataclass(frozen=True)
class GhostPoint:
    x: float
    y: float
    label: str
    color: str
    kind: str = field(default="point", init=False)


GhostElement = Union[GhostCircle, GhostSegment, GhostPoint]


@dataclass(frozen=True)
class GhostLayer:
    prop_id: int
    depth: int
    at_step: int
    elements: Tuple[GhostElement, ...]


# ---------------------------------------------------------------------------
# Propositions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PropositionStep:
    instruction: str
    expected: ExpectedAction
    highlight_ids: Tuple[str, ...] = ()
    tool: Optional[ToolName] = None
    citation: Optional[str] = None


@dataclass(frozen=True)
class GivenFact:
    left: DistancePair
    right: DistancePair
    statement: str


@dataclass(frozen=True)
class GivenAngleFact:
    left: AngleMeasure
    right: AngleMeasure
    statement: str


@dataclass(frozen=True)
class ResultSegment:
    from_id: str
    to_id: str


ConclusionFn = Callable[["FactStore", ConstructionState, int], List[ProofFact]]
GivenElementsFn = Callable[[Mapping[str, Coord]], List[ConstructionElement]]
TutorialFn = Callable[[bool], List[List[TutorialSubStep]]]
TheoremConclusionFn = Callable[[ConstructionState], str]


@dataclass(frozen=True)
class PropositionDef:
    id: int
    title: str
    given_elements: Tuple[ConstructionElement, ...]
    steps: Tuple[PropositionStep, ...]
    kind: Literal["construction", "theorem"] = "construction"
    result_segments: Tuple[ResultSegment, ...] = ()
    draggable_point_ids: Tuple[str, ...] = ()
    compute_given_elements: Optional[GivenElementsFn] = None
    given_facts: Tuple[GivenFact, ...] = ()
    given_angle_facts: Tuple[GivenAngleFact, ...] = ()
    derive_conclusion: Optional[ConclusionFn] = None
    get_tutorial: Optional[TutorialFn] = None
    theorem_conclusion: Optional[str] = None
    compute_theorem_conclusion: Optional[TheoremConclusionFn] = None


def theorem_conclusion_for(prop: PropositionDef, state: ConstructionState) -> Optional[str]:
    """Return the closing statement of a theorem, worded for the current figure."""

    if prop.compute_theorem_conclusion is not None:
        return prop.compute_theorem_conclusion(state)
    return prop.theorem_conclusion


def needs_extended_segments(prop: PropositionDef) -> bool:
    """Return ``True`` when some step marks a point on a produced segment."""

    return any(
        isinstance(step.expected, IntersectionAction) and step.expected.beyond_id
        for step in prop.steps
    )


PositionMap = Dict[str, Coord]
