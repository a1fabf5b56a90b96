"""Equality reasoning over distances and angles.

A :class:`FactStore` keeps every recorded :class:`ProofFact` in order, plus a
union-find structure over canonical keys. Distance pairs are unordered point
pairs. Angle measures keep their vertex and treat the two ray ends as
unordered. Two operands are equal iff they share a class, directly or
transitively.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, List, Optional, Union

from .construction import get_point
from .logging_utils import apply_debug_logging
from .types import AngleMeasure, Citation, ConstructionState, DistancePair, ProofFact

logger = logging.getLogger(__name__)

Operand = Union[DistancePair, AngleMeasure]


@dataclass
class FactStore:
    facts: List[ProofFact] = field(default_factory=list)
    parents: Dict[Hashable, Hashable] = field(default_factory=dict)
    members: Dict[Hashable, Operand] = field(default_factory=dict)
    next_id: int = 1

    def copy(self) -> "FactStore":
        return FactStore(
            facts=list(self.facts),
            parents=dict(self.parents),
            members=dict(self.members),
            next_id=self.next_id,
        )


def create_fact_store() -> FactStore:
    return FactStore()


def distance_pair(a: str, b: str) -> DistancePair:
    return DistancePair(a, b)


def angle_measure(vertex: str, ray1_end: str, ray2_end: str) -> AngleMeasure:
    return AngleMeasure(vertex, ray1_end, ray2_end)


def _find(store: FactStore, key: Hashable) -> Hashable:
    root = key
    while store.parents.get(root, root) != root:
        root = store.parents[root]
    # path compression
    while key != root:
        parent = store.parents[key]
        store.parents[key] = root
        key = parent
    return root


def _register(store: FactStore, operand: Operand) -> Hashable:
    key = operand.key
    if key not in store.parents:
        store.parents[key] = key
        store.members[key] = operand
    return key


def _record(
    store: FactStore,
    left: Operand,
    right: Operand,
    citation: Citation,
    statement: str,
    at_step: int,
    justification: str,
) -> List[ProofFact]:
    if left.key == right.key:
        logger.debug("Ignoring trivial fact %s", statement)
        return []
    left_root = _find(store, _register(store, left))
    right_root = _find(store, _register(store, right))
    if left_root != right_root:
        store.parents[right_root] = left_root
    else:
        logger.debug("Fact %s already known; recording without merge", statement)
    fact = ProofFact(
        id=store.next_id,
        left=left,
        right=right,
        citation=citation,
        statement=statement,
        justification=justification,
        at_step=at_step,
    )
    store.facts.append(fact)
    store.next_id += 1
    return [fact]


def add_fact(
    store: FactStore,
    left: DistancePair,
    right: DistancePair,
    citation: Citation,
    statement: str,
    at_step: int,
    justification: str = "",
) -> List[ProofFact]:
    """Record ``left = right`` and merge their classes.

    Returns the recorded fact as a one-element list, or ``[]`` when both
    sides are the same pair. Facts that are already known transitively are
    still recorded so the proof display stays complete.
    """

    if not isinstance(left, DistancePair) or not isinstance(right, DistancePair):
        raise TypeError("add_fact expects two DistancePair operands")
    return _record(store, left, right, citation, statement, at_step, justification)


def add_angle_fact(
    store: FactStore,
    left: AngleMeasure,
    right: AngleMeasure,
    citation: Citation,
    statement: str,
    at_step: int,
    justification: str = "",
) -> List[ProofFact]:
    if not isinstance(left, AngleMeasure) or not isinstance(right, AngleMeasure):
        raise TypeError("add_angle_fact expects two AngleMeasure operands")
    return _record(store, left, right, citation, statement, at_step, justification)


def _same_class(store: FactStore, left: Operand, right: Operand) -> bool:
    if left.key == right.key:
        return True
    if left.key not in store.parents or right.key not in store.parents:
        return False
    return _find(store, left.key) == _find(store, right.key)


def query_equality(store: FactStore, left: DistancePair, right: DistancePair) -> bool:
    return _same_class(store, left, right)


def query_angle_equality(store: FactStore, left: AngleMeasure, right: AngleMeasure) -> bool:
    return _same_class(store, left, right)


def _class_members(store: FactStore, operand: Operand) -> List[Operand]:
    if operand.key not in store.parents:
        return [operand]
    root = _find(store, operand.key)
    return [store.members[key] for key in list(store.parents) if _find(store, key) == root]


def get_equal_distances(store: FactStore, pair: DistancePair) -> List[DistancePair]:
    return [member for member in _class_members(store, pair) if isinstance(member, DistancePair)]


def get_equal_angles(store: FactStore, angle: AngleMeasure) -> List[AngleMeasure]:
    return [member for member in _class_members(store, angle) if isinstance(member, AngleMeasure)]


def rebuild_fact_store(facts: Iterable[ProofFact]) -> FactStore:
    """Rebuild a store by replaying ``facts`` in order, keeping their ids."""

    store = create_fact_store()
    for fact in facts:
        left_root = _find(store, _register(store, fact.left))
        right_root = _find(store, _register(store, fact.right))
        if left_root != right_root:
            store.parents[right_root] = left_root
        store.facts.append(fact)
        store.next_id = max(store.next_id, fact.id + 1)
    return store


def facts_at_step(store: FactStore, at_step: int) -> List[ProofFact]:
    return [fact for fact in store.facts if fact.at_step == at_step]


def _label(state: Optional[ConstructionState], point_id: str) -> str:
    if state is not None:
        point = get_point(state, point_id)
        if point is not None:
            return point.label
    return point_id[3:] if point_id.startswith("pt-") else point_id


def format_distance(pair: DistancePair, state: Optional[ConstructionState] = None) -> str:
    return f"{_label(state, pair.a)}{_label(state, pair.b)}"


def format_angle(angle: AngleMeasure, state: Optional[ConstructionState] = None) -> str:
    return f"∠{_label(state, angle.ray1_end)}{_label(state, angle.vertex)}{_label(state, angle.ray2_end)}"


def format_equality(left: Operand, right: Operand, state: Optional[ConstructionState] = None) -> str:
    if isinstance(left, AngleMeasure) and isinstance(right, AngleMeasure):
        return f"{format_angle(left, state)} = {format_angle(right, state)}"
    return f"{format_distance(left, state)} = {format_distance(right, state)}"  # type: ignore[arg-type]


apply_debug_logging(
    globals(),
    logger=logger,
    skip={"_find", "_register", "_same_class", "_label", "distance_pair", "angle_measure"},
)
