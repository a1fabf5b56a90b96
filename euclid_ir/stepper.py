"""Proposition stepper: tool phase machines and step acceptance.

A :class:`ProofSession` is an immutable snapshot of one user's progress
through a proposition. Committed tool actions go through :func:`dispatch`,
which either accepts the action (a new session with the step advanced) or
rejects it. A rejected action returns the very same session object, so
construction state, facts and step index are untouched.
Once every step is done, further circles and lines and their crossings are
accepted as free play.

The per-tool phase functions (``compass_*``, ``straightedge_*``, ``macro_*``
and ``extend_*``) model the gestures that lead up to a commit and emit
:class:`ToolEvent` records that the tutorial layer listens to.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .config import get_engine_config
from .construction import (
    add_circle,
    add_point,
    add_segment,
    get_point,
    initialize_given,
)
from .derivation import derive_def15_facts
from .facts import FactStore, add_angle_fact, add_fact, create_fact_store
from .intersections import find_new_intersections, production_point, remove_candidates_at
from .logging_utils import apply_debug_logging
from .macro_engine import execute_macro
from .macros import MACRO_REGISTRY
from .selectors import canonical_candidate
from .types import (
    CompassAction,
    ConstructionElement,
    ConstructionState,
    ExpectedAction,
    ExtendAction,
    GhostLayer,
    GivenCitation,
    IntersectionAction,
    IntersectionCandidate,
    MacroAction,
    ProofFact,
    PropositionDef,
    StraightedgeAction,
    needs_extended_segments,
)
from .validate import validate_step

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tool phases
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Idle:
    name: str = "idle"


@dataclass(frozen=True)
class CompassCenterSet:
    center_id: str
    name: str = "center-set"


@dataclass(frozen=True)
class CompassRadiusSet:
    center_id: str
    radius_point_id: str
    radius: float
    name: str = "radius-set"


@dataclass(frozen=True)
class CompassSweeping:
    center_id: str
    radius_point_id: str
    radius: float
    last_angle: float
    cumulative_sweep: float = 0.0
    name: str = "sweeping"


@dataclass(frozen=True)
class StraightedgeFromSet:
    from_id: str
    name: str = "from-set"


@dataclass(frozen=True)
class MacroSelecting:
    prop_id: int
    input_labels: Tuple[str, ...]
    selected_point_ids: Tuple[str, ...] = ()
    name: str = "selecting"


@dataclass(frozen=True)
class ExtendBaseSet:
    base_id: str
    name: str = "base-set"


@dataclass(frozen=True)
class Extending:
    base_id: str
    through_id: str
    name: str = "extending"


ToolPhase = Union[
    Idle,
    CompassCenterSet,
    CompassRadiusSet,
    CompassSweeping,
    StraightedgeFromSet,
    MacroSelecting,
    ExtendBaseSet,
    Extending,
]

IDLE = Idle()


@dataclass(frozen=True)
class ToolEvent:
    kind: str
    phase: Optional[str] = None
    index: Optional[int] = None


# ---------------------------------------------------------------------------
# Committed actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CommitCircle:
    center_id: str
    radius_point_id: str


@dataclass(frozen=True)
class CommitSegment:
    from_id: str
    to_id: str


@dataclass(frozen=True)
class MarkIntersection:
    candidate: IntersectionCandidate


@dataclass(frozen=True)
class CommitMacro:
    prop_id: int
    input_point_ids: Tuple[str, ...]


@dataclass(frozen=True)
class CommitExtend:
    base_id: str
    through_id: str
    distance: Optional[float] = None


CommittedAction = Union[CommitCircle, CommitSegment, MarkIntersection, CommitMacro, CommitExtend]


# Free play after completion is recorded by element ids so it can be replayed
# on top of a rebuilt construction when the givens move.


@dataclass(frozen=True)
class FreeCircle:
    center_id: str
    radius_point_id: str
    type: str = field(default="circle", init=False)


@dataclass(frozen=True)
class FreeSegment:
    from_id: str
    to_id: str
    type: str = field(default="segment", init=False)


@dataclass(frozen=True)
class FreeIntersection:
    of_a: str
    of_b: str
    which: int
    type: str = field(default="intersection", init=False)


PostCompletionAction = Union[FreeCircle, FreeSegment, FreeIntersection]


# ---------------------------------------------------------------------------
# Session
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProofSession:
    prop: PropositionDef
    state: ConstructionState
    facts: FactStore
    candidates: Tuple[IntersectionCandidate, ...] = ()
    current_step: int = 0
    proof_facts: Tuple[ProofFact, ...] = ()
    ghost_layers: Tuple[GhostLayer, ...] = ()
    tool_phase: ToolPhase = IDLE
    completed: bool = False
    extend_segments: bool = False
    guided: bool = True
    post_completion_actions: Tuple[PostCompletionAction, ...] = ()

    @property
    def expected(self) -> Optional[ExpectedAction]:
        if self.completed or self.current_step >= len(self.prop.steps):
            return None
        return self.prop.steps[self.current_step].expected


@dataclass(frozen=True)
class StepOutcome:
    session: ProofSession
    accepted: bool
    reason: Optional[str] = None
    events: Tuple[ToolEvent, ...] = ()
    added_elements: Tuple[ConstructionElement, ...] = ()
    new_facts: Tuple[ProofFact, ...] = ()


def load_given_facts(prop: PropositionDef, store: FactStore) -> List[ProofFact]:
    loaded: List[ProofFact] = []
    for fact in prop.given_facts:
        loaded += add_fact(store, fact.left, fact.right, GivenCitation(), fact.statement, -1, "Given")
    for fact in prop.given_angle_facts:
        loaded += add_angle_fact(store, fact.left, fact.right, GivenCitation(), fact.statement, -1, "Given")
    return loaded


def start_session(
    prop: PropositionDef,
    given_elements: Optional[Sequence[ConstructionElement]] = None,
    guided: bool = True,
) -> ProofSession:
    state = initialize_given(prop.given_elements if given_elements is None else given_elements)
    store = create_fact_store()
    given = load_given_facts(prop, store)
    logger.info("Started session for I.%d with %d given fact(s)", prop.id, len(given))
    return ProofSession(
        prop=prop,
        state=state,
        facts=store,
        proof_facts=tuple(given),
        extend_segments=needs_extended_segments(prop),
        guided=guided,
        completed=not prop.steps,
    )


def _reject(session: ProofSession, reason: str) -> StepOutcome:
    logger.debug("Rejected action at step %d of I.%d: %s", session.current_step, session.prop.id, reason)
    return StepOutcome(session=session, accepted=False, reason=reason)


def _advance(
    session: ProofSession,
    state: ConstructionState,
    store: FactStore,
    candidates: Iterable[IntersectionCandidate],
    added: Sequence[ConstructionElement],
    new_facts: List[ProofFact],
    ghost_layers: Sequence[GhostLayer] = (),
) -> StepOutcome:
    next_step = session.current_step + 1
    completed = next_step >= len(session.prop.steps)
    if completed and session.prop.derive_conclusion is not None:
        new_facts = new_facts + session.prop.derive_conclusion(store, state, len(session.prop.steps))
    advanced = replace(
        session,
        state=state,
        facts=store,
        candidates=tuple(candidates),
        current_step=next_step,
        proof_facts=session.proof_facts + tuple(new_facts),
        ghost_layers=session.ghost_layers + tuple(ghost_layers),
        tool_phase=IDLE,
        completed=completed,
    )
    logger.debug(
        "Accepted step %d of I.%d (%d new fact(s))", session.current_step, session.prop.id, len(new_facts)
    )
    if completed:
        logger.info("Proposition I.%d complete", session.prop.id)
    return StepOutcome(
        session=advanced,
        accepted=True,
        added_elements=tuple(added),
        new_facts=tuple(new_facts),
    )


def _commit_circle(session: ProofSession, action: CommitCircle, expected: ExpectedAction) -> StepOutcome:
    if not isinstance(expected, CompassAction):
        return _reject(session, f"expected a {expected.type} step, not a circle")
    if get_point(session.state, action.center_id) is None or get_point(session.state, action.radius_point_id) is None:
        return _reject(session, "circle references an unknown point")
    if action.center_id == action.radius_point_id:
        return _reject(session, "circle needs distinct center and radius points")
    state, circle = add_circle(session.state, action.center_id, action.radius_point_id)
    if not validate_step(expected, state, circle):
        return _reject(session, "circle does not match the expected center and radius point")
    candidates = list(session.candidates)
    candidates += find_new_intersections(state, circle, candidates, session.extend_segments)
    return _advance(session, state, session.facts.copy(), candidates, [circle], [])


def _commit_segment(session: ProofSession, action: CommitSegment, expected: ExpectedAction) -> StepOutcome:
    if not isinstance(expected, StraightedgeAction):
        return _reject(session, f"expected a {expected.type} step, not a segment")
    if get_point(session.state, action.from_id) is None or get_point(session.state, action.to_id) is None:
        return _reject(session, "segment references an unknown point")
    state, segment = add_segment(session.state, action.from_id, action.to_id)
    if not validate_step(expected, state, segment):
        return _reject(session, "segment does not join the expected points")
    candidates = list(session.candidates)
    candidates += find_new_intersections(state, segment, candidates, session.extend_segments)
    return _advance(session, state, session.facts.copy(), candidates, [segment], [])


def _same_spot(a: IntersectionCandidate, b: IntersectionCandidate) -> bool:
    tol = get_engine_config().candidate_tolerance
    return abs(a.x - b.x) < tol and abs(a.y - b.y) < tol


def _mark_intersection(session: ProofSession, action: MarkIntersection, expected: ExpectedAction) -> StepOutcome:
    if not isinstance(expected, IntersectionAction):
        return _reject(session, f"expected a {expected.type} step, not an intersection")
    clicked = action.candidate
    if not any(_same_spot(clicked, cand) for cand in session.candidates):
        return _reject(session, "not a current intersection candidate")

    if expected.of_a is None and expected.of_b is None:
        chosen = clicked
    else:
        chosen = canonical_candidate(expected, session.state, session.candidates)
        if chosen is None:
            return _reject(session, "no admissible intersection for this step yet")
        if not _same_spot(clicked, chosen):
            return _reject(session, "a different intersection is expected")

    state, point = add_point(session.state, chosen.x, chosen.y, "intersection", expected.label)
    if not validate_step(expected, state, point, chosen):
        return _reject(session, "intersection does not lie on the expected elements")
    store = session.facts.copy()
    new_facts = derive_def15_facts(chosen, point.id, state, store, session.current_step)
    candidates = remove_candidates_at(session.candidates, chosen.x, chosen.y)
    return _advance(session, state, store, candidates, [point], new_facts)


def _commit_macro(session: ProofSession, action: CommitMacro, expected: ExpectedAction) -> StepOutcome:
    if not isinstance(expected, MacroAction):
        return _reject(session, f"expected a {expected.type} step, not a macro")
    if action.prop_id != expected.prop_id:
        return _reject(session, f"expected macro I.{expected.prop_id}, not I.{action.prop_id}")
    if tuple(action.input_point_ids) != tuple(expected.input_point_ids):
        return _reject(session, "macro inputs do not match the expected points")
    store = session.facts.copy()
    result = execute_macro(
        action.prop_id,
        session.state,
        action.input_point_ids,
        session.candidates,
        store,
        session.current_step,
        session.extend_segments,
        expected.output_labels,
    )
    if not result.added_elements:
        return _reject(session, "macro produced no construction")
    return _advance(
        session,
        result.state,
        store,
        result.candidates,
        result.added_elements,
        list(result.new_facts),
        result.ghost_layers,
    )


def _commit_extend(session: ProofSession, action: CommitExtend, expected: ExpectedAction) -> StepOutcome:
    if not isinstance(expected, ExtendAction):
        return _reject(session, f"expected a {expected.type} step, not a production")
    if (action.base_id, action.through_id) != (expected.base_id, expected.through_id):
        return _reject(session, "production does not follow the expected line")
    distance = expected.distance if action.distance is None else action.distance
    coords = production_point(session.state, action.base_id, action.through_id, distance)
    if coords is None:
        return _reject(session, "cannot produce a degenerate line")
    state, point = add_point(session.state, coords[0], coords[1], "straightedge", expected.label)
    if not validate_step(expected, session.state, point):
        return _reject(session, "produced point is not at the expected distance")
    state, segment = add_segment(state, action.through_id, point.id)
    candidates = remove_candidates_at(session.candidates, point.x, point.y)
    candidates += find_new_intersections(state, segment, candidates, session.extend_segments)
    return _advance(session, state, session.facts.copy(), candidates, [point, segment], [])


def enter_free_play(session: ProofSession) -> ProofSession:
    """Switch a completed session to produced lines for free construction.

    Candidates from every circle and segment are recomputed with segment
    production, once. Sessions that already produce lines are returned as is.
    """

    if session.extend_segments:
        return session
    candidates = list(session.candidates)
    for element in session.state.elements:
        candidates += find_new_intersections(session.state, element, candidates, True)
    return replace(session, candidates=tuple(candidates), extend_segments=True)


def _played(
    session: ProofSession,
    state: ConstructionState,
    candidates: Iterable[IntersectionCandidate],
    added: Sequence[ConstructionElement],
    recorded: PostCompletionAction,
    store: Optional[FactStore] = None,
    new_facts: Sequence[ProofFact] = (),
) -> StepOutcome:
    played = replace(
        session,
        state=state,
        facts=session.facts if store is None else store,
        candidates=tuple(candidates),
        proof_facts=session.proof_facts + tuple(new_facts),
        tool_phase=IDLE,
        post_completion_actions=session.post_completion_actions + (recorded,),
    )
    logger.debug("Free play on I.%d: %s", session.prop.id, recorded)
    return StepOutcome(session=played, accepted=True, added_elements=tuple(added), new_facts=tuple(new_facts))


def _free_play(session: ProofSession, action: CommittedAction) -> StepOutcome:
    if isinstance(action, (CommitMacro, CommitExtend)):
        return _reject(session, "proposition already complete")
    free = enter_free_play(session)
    if isinstance(action, CommitCircle):
        if get_point(free.state, action.center_id) is None or get_point(free.state, action.radius_point_id) is None:
            return _reject(session, "circle references an unknown point")
        if action.center_id == action.radius_point_id:
            return _reject(session, "circle needs distinct center and radius points")
        state, circle = add_circle(free.state, action.center_id, action.radius_point_id)
        candidates = list(free.candidates)
        candidates += find_new_intersections(state, circle, candidates, True)
        return _played(free, state, candidates, [circle], FreeCircle(action.center_id, action.radius_point_id))
    if isinstance(action, CommitSegment):
        if get_point(free.state, action.from_id) is None or get_point(free.state, action.to_id) is None:
            return _reject(session, "segment references an unknown point")
        if action.from_id == action.to_id:
            return _reject(session, "segment needs two distinct points")
        state, segment = add_segment(free.state, action.from_id, action.to_id)
        candidates = list(free.candidates)
        candidates += find_new_intersections(state, segment, candidates, True)
        return _played(free, state, candidates, [segment], FreeSegment(action.from_id, action.to_id))
    if isinstance(action, MarkIntersection):
        chosen = next((cand for cand in free.candidates if _same_spot(action.candidate, cand)), None)
        if chosen is None:
            return _reject(session, "not a current intersection candidate")
        state, point = add_point(free.state, chosen.x, chosen.y, "intersection")
        store = free.facts.copy()
        new_facts = derive_def15_facts(chosen, point.id, state, store, len(free.prop.steps))
        candidates = remove_candidates_at(free.candidates, chosen.x, chosen.y)
        recorded = FreeIntersection(chosen.of_a, chosen.of_b, chosen.which)
        return _played(free, state, candidates, [point], recorded, store, new_facts)
    raise TypeError(f"Unsupported action: {action!r}")


def dispatch(session: ProofSession, action: CommittedAction) -> StepOutcome:
    """Accept ``action`` if it satisfies the current step, else reject it unchanged.

    Once the proposition is complete, circles, segments and intersections are
    accepted as free play and recorded in ``post_completion_actions``.
    """

    expected = session.expected
    if expected is None:
        return _free_play(session, action)
    if isinstance(action, CommitCircle):
        return _commit_circle(session, action, expected)
    if isinstance(action, CommitSegment):
        return _commit_segment(session, action, expected)
    if isinstance(action, MarkIntersection):
        return _mark_intersection(session, action, expected)
    if isinstance(action, CommitMacro):
        return _commit_macro(session, action, expected)
    if isinstance(action, CommitExtend):
        return _commit_extend(session, action, expected)
    raise TypeError(f"Unsupported action: {action!r}")


# ---------------------------------------------------------------------------
# Phase machines
# ---------------------------------------------------------------------------


def _ignored(session: ProofSession, reason: str) -> StepOutcome:
    return StepOutcome(session=session, accepted=False, reason=reason)


def _moved(session: ProofSession, phase: ToolPhase, *events: ToolEvent) -> StepOutcome:
    return StepOutcome(session=replace(session, tool_phase=phase), accepted=True, events=tuple(events))


def _after_commit(session: ProofSession, outcome: StepOutcome, events: Tuple[ToolEvent, ...] = ()) -> StepOutcome:
    # A rejected commit still ends the gesture.
    if outcome.accepted:
        return replace(outcome, events=events + outcome.events)
    return StepOutcome(
        session=replace(session, tool_phase=IDLE),
        accepted=False,
        reason=outcome.reason,
        events=events,
    )


def cancel_tool(session: ProofSession) -> ProofSession:
    return replace(session, tool_phase=IDLE)


def compass_press(session: ProofSession, point_id: str) -> StepOutcome:
    if not isinstance(session.tool_phase, Idle):
        return _ignored(session, "another tool gesture is in progress")
    if get_point(session.state, point_id) is None:
        return _ignored(session, "no point under the compass")
    expected = session.expected
    if session.guided and isinstance(expected, CompassAction) and point_id != expected.center_id:
        return _ignored(session, "compass must start at the expected center")
    return _moved(session, CompassCenterSet(point_id), ToolEvent("compass-phase", phase="center-set"))


def compass_drag_to(session: ProofSession, point_id: str) -> StepOutcome:
    phase = session.tool_phase
    if not isinstance(phase, (CompassCenterSet, CompassRadiusSet)):
        return _ignored(session, "compass has no center")
    if point_id == phase.center_id:
        return _ignored(session, "radius point must differ from the center")
    center = get_point(session.state, phase.center_id)
    rim = get_point(session.state, point_id)
    if center is None or rim is None:
        return _ignored(session, "no point to snap the radius to")
    expected = session.expected
    if session.guided and isinstance(expected, CompassAction) and point_id != expected.radius_point_id:
        return _ignored(session, "compass snaps only to the expected radius point")
    radius = math.hypot(rim.x - center.x, rim.y - center.y)
    new_phase = CompassRadiusSet(phase.center_id, point_id, radius)
    if isinstance(phase, CompassRadiusSet):
        return _moved(session, new_phase)
    return _moved(session, new_phase, ToolEvent("compass-phase", phase="radius-set"))


def _wrap_angle(delta: float) -> float:
    while delta > math.pi:
        delta -= 2.0 * math.pi
    while delta <= -math.pi:
        delta += 2.0 * math.pi
    return delta


def compass_sweep(session: ProofSession, angle: float) -> StepOutcome:
    """Feed the pointer angle (radians, around the center) during a sweep."""

    phase = session.tool_phase
    if isinstance(phase, CompassRadiusSet):
        sweeping = CompassSweeping(phase.center_id, phase.radius_point_id, phase.radius, angle)
        return _moved(session, sweeping, ToolEvent("compass-phase", phase="sweeping"))
    if not isinstance(phase, CompassSweeping):
        return _ignored(session, "compass is not ready to sweep")
    cumulative = phase.cumulative_sweep + _wrap_angle(angle - phase.last_angle)
    if abs(cumulative) >= get_engine_config().sweep_threshold:
        outcome = dispatch(session, CommitCircle(phase.center_id, phase.radius_point_id))
        return _after_commit(session, outcome)
    return _moved(session, replace(phase, last_angle=angle, cumulative_sweep=cumulative))


def compass_release(session: ProofSession) -> StepOutcome:
    """Lift the compass; an incomplete sweep is discarded."""

    if isinstance(session.tool_phase, Idle):
        return _ignored(session, "no compass gesture in progress")
    return _moved(session, IDLE)


def straightedge_press(session: ProofSession, point_id: str) -> StepOutcome:
    if not isinstance(session.tool_phase, Idle):
        return _ignored(session, "another tool gesture is in progress")
    if get_point(session.state, point_id) is None:
        return _ignored(session, "no point under the straightedge")
    return _moved(session, StraightedgeFromSet(point_id))


def straightedge_release(session: ProofSession, point_id: Optional[str]) -> StepOutcome:
    phase = session.tool_phase
    if not isinstance(phase, StraightedgeFromSet):
        return _ignored(session, "straightedge was not started")
    if point_id is None or point_id == phase.from_id or get_point(session.state, point_id) is None:
        return _moved(session, IDLE)
    outcome = dispatch(session, CommitSegment(phase.from_id, point_id))
    return _after_commit(session, outcome)


def macro_begin(session: ProofSession, prop_id: int) -> StepOutcome:
    macro = MACRO_REGISTRY.get(prop_id)
    if macro is None:
        return _ignored(session, f"I.{prop_id} is not available as a macro")
    if not isinstance(session.tool_phase, Idle):
        return _ignored(session, "another tool gesture is in progress")
    return _moved(session, MacroSelecting(prop_id, macro.input_labels))


def macro_select(session: ProofSession, point_id: str) -> StepOutcome:
    phase = session.tool_phase
    if not isinstance(phase, MacroSelecting):
        return _ignored(session, "no macro is being selected")
    if get_point(session.state, point_id) is None:
        return _ignored(session, "no point to select")
    index = len(phase.selected_point_ids)
    expected = session.expected
    if session.guided and isinstance(expected, MacroAction) and expected.prop_id == phase.prop_id:
        if index >= len(expected.input_point_ids) or expected.input_point_ids[index] != point_id:
            return _ignored(session, "not the expected input point")
    selected = phase.selected_point_ids + (point_id,)
    event = ToolEvent("macro-select", index=index)
    if len(selected) < len(phase.input_labels):
        return _moved(session, replace(phase, selected_point_ids=selected), event)
    outcome = dispatch(session, CommitMacro(phase.prop_id, selected))
    return _after_commit(session, outcome, (event,))


def extend_press(session: ProofSession, base_id: str) -> StepOutcome:
    if not isinstance(session.tool_phase, Idle):
        return _ignored(session, "another tool gesture is in progress")
    if get_point(session.state, base_id) is None:
        return _ignored(session, "no point to extend from")
    return _moved(session, ExtendBaseSet(base_id))


def extend_through(session: ProofSession, through_id: str) -> StepOutcome:
    phase = session.tool_phase
    if not isinstance(phase, ExtendBaseSet):
        return _ignored(session, "production has no base point")
    if through_id == phase.base_id or get_point(session.state, through_id) is None:
        return _ignored(session, "production needs a second, distinct point")
    return _moved(session, Extending(phase.base_id, through_id))


def extend_release(session: ProofSession, distance: Optional[float] = None) -> StepOutcome:
    phase = session.tool_phase
    if not isinstance(phase, Extending):
        if isinstance(phase, ExtendBaseSet):
            return _moved(session, IDLE)
        return _ignored(session, "no production in progress")
    outcome = dispatch(session, CommitExtend(phase.base_id, phase.through_id, distance))
    return _after_commit(session, outcome)


apply_debug_logging(
    globals(),
    logger=logger,
    skip={"_wrap_angle", "_same_spot", "_ignored", "_moved", "_reject"},
)
