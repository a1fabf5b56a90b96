"""Proposition I.1: on a given finite straight line, construct an equilateral triangle."""

from __future__ import annotations

from typing import List

from ..facts import FactStore, add_fact, distance_pair
from ..types import (
    CircleRef,
    CN1Citation,
    CompassAction,
    ConstructionState,
    IntersectionAction,
    PropositionDef,
    PropositionStep,
    ProofFact,
    ResultSegment,
    StraightedgeAction,
    TutorialSubStep,
)
from .common import compass_tutorial, given_point, given_segment, intersection_tutorial, straightedge_tutorial


def get_prop1_tutorial(is_touch: bool) -> List[List[TutorialSubStep]]:
    return [
        compass_tutorial("pt-A", "pt-B", is_touch, intro="We start with the line AB. "),
        compass_tutorial("pt-B", "pt-A", is_touch, intro="Now a second circle, centred on B. "),
        intersection_tutorial(
            CircleRef("pt-A", "pt-B"),
            CircleRef("pt-B", "pt-A"),
            "C",
            is_touch,
            where="where the circles cross above AB",
        ),
        straightedge_tutorial("pt-C", "pt-A", is_touch),
        straightedge_tutorial("pt-C", "pt-B", is_touch),
    ]


def derive_prop1_conclusion(store: FactStore, state: ConstructionState, at_step: int) -> List[ProofFact]:
    ca = distance_pair("pt-C", "pt-A")
    cb = distance_pair("pt-C", "pt-B")
    return add_fact(
        store,
        ca,
        cb,
        CN1Citation(via=distance_pair("pt-A", "pt-B")),
        "CA = CB",
        at_step,
        justification="C.N.1: things equal to the same thing are equal to one another",
    )


PROP_1 = PropositionDef(
    id=1,
    title="On a given finite straight line to construct an equilateral triangle",
    kind="construction",
    given_elements=(
        given_point("A", -2.0, 0.0),
        given_point("B", 2.0, 0.0),
        given_segment("A", "B"),
    ),
    steps=(
        PropositionStep(
            instruction="Draw a circle centred at A through B",
            expected=CompassAction("pt-A", "pt-B"),
            highlight_ids=("pt-A", "pt-B"),
            tool="compass",
            citation="Post.3",
        ),
        PropositionStep(
            instruction="Draw a circle centred at B through A",
            expected=CompassAction("pt-B", "pt-A"),
            highlight_ids=("pt-B", "pt-A"),
            tool="compass",
            citation="Post.3",
        ),
        PropositionStep(
            instruction="Mark the point C where the circles meet",
            expected=IntersectionAction(
                of_a=CircleRef("pt-A", "pt-B"),
                of_b=CircleRef("pt-B", "pt-A"),
                label="C",
            ),
            tool=None,
            citation="Def.15",
        ),
        PropositionStep(
            instruction="Join C to A",
            expected=StraightedgeAction("pt-C", "pt-A"),
            highlight_ids=("pt-C", "pt-A"),
            tool="straightedge",
            citation="Post.1",
        ),
        PropositionStep(
            instruction="Join C to B",
            expected=StraightedgeAction("pt-C", "pt-B"),
            highlight_ids=("pt-C", "pt-B"),
            tool="straightedge",
            citation="Post.1",
        ),
    ),
    result_segments=(
        ResultSegment("pt-C", "pt-A"),
        ResultSegment("pt-C", "pt-B"),
    ),
    draggable_point_ids=("pt-A", "pt-B"),
    derive_conclusion=derive_prop1_conclusion,
    get_tutorial=get_prop1_tutorial,
)
