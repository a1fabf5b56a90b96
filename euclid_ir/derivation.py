"""Facts that follow directly from marking an intersection point."""

from __future__ import annotations

import logging
from typing import List

from .construction import get_circle
from .facts import FactStore, add_fact, distance_pair, format_equality
from .logging_utils import apply_debug_logging
from .types import ConstructionState, Def15Citation, IntersectionCandidate, ProofFact

logger = logging.getLogger(__name__)


def derive_def15_facts(
    candidate: IntersectionCandidate,
    point_id: str,
    state: ConstructionState,
    store: FactStore,
    at_step: int,
) -> List[ProofFact]:
    """A point on a circle is as far from the center as the radius point (Def. 15)."""

    new_facts: List[ProofFact] = []
    for element_id in (candidate.of_a, candidate.of_b):
        circle = get_circle(state, element_id)
        if circle is None or circle.radius_point_id == point_id:
            continue
        on_circle = distance_pair(circle.center_id, point_id)
        radius = distance_pair(circle.center_id, circle.radius_point_id)
        statement = format_equality(on_circle, radius, state)
        new_facts.extend(
            add_fact(
                store,
                on_circle,
                radius,
                Def15Citation(circle.id),
                statement,
                at_step,
                justification="Def.15: radii of the same circle are equal",
            )
        )
    return new_facts


apply_debug_logging(globals(), logger=logger)
