"""Headless replay of a proposition: autoplay, drag-to-explore.

Replays drive the same :func:`euclid_ir.stepper.dispatch` the interactive
session uses, so a replayed construction is exactly what a user following
the steps would have built. Only an intersection step whose crossing does
not exist for the current givens is treated differently: its label is
consumed and the replay moves on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Sequence, Tuple

from .construction import skip_point_label
from .facts import FactStore
from .logging_utils import apply_debug_logging
from .selectors import canonical_candidate
from .stepper import (
    CommitCircle,
    CommitExtend,
    CommitMacro,
    CommitSegment,
    CommittedAction,
    FreeCircle,
    FreeIntersection,
    FreeSegment,
    MarkIntersection,
    PostCompletionAction,
    ProofSession,
    dispatch,
    enter_free_play,
    start_session,
)
from .types import (
    CompassAction,
    ConstructionElement,
    ConstructionState,
    Coord,
    ExtendAction,
    GhostLayer,
    IntersectionAction,
    IntersectionCandidate,
    MacroAction,
    Point,
    ProofFact,
    PropositionDef,
    StraightedgeAction,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReplayResult:
    state: ConstructionState
    facts: FactStore
    proof_facts: Tuple[ProofFact, ...]
    candidates: Tuple[IntersectionCandidate, ...]
    ghost_layers: Tuple[GhostLayer, ...]
    steps_completed: int


def planned_action(session: ProofSession) -> Optional[CommittedAction]:
    """The committed action that satisfies the current step, if one exists."""

    expected = session.expected
    if expected is None:
        return None
    if isinstance(expected, CompassAction):
        return CommitCircle(expected.center_id, expected.radius_point_id)
    if isinstance(expected, StraightedgeAction):
        return CommitSegment(expected.from_id, expected.to_id)
    if isinstance(expected, IntersectionAction):
        chosen = canonical_candidate(expected, session.state, session.candidates)
        return None if chosen is None else MarkIntersection(chosen)
    if isinstance(expected, MacroAction):
        return CommitMacro(expected.prop_id, tuple(expected.input_point_ids))
    if isinstance(expected, ExtendAction):
        return CommitExtend(expected.base_id, expected.through_id)
    return None


def autoplay(
    prop: PropositionDef,
    given_elements: Optional[Sequence[ConstructionElement]] = None,
) -> ProofSession:
    """Drive a fresh session through :func:`dispatch` until it stops."""

    session = start_session(prop, given_elements)
    while not session.completed:
        action = planned_action(session)
        if action is None:
            logger.info("Autoplay of I.%d stopped at step %d: nothing to do", prop.id, session.current_step)
            break
        outcome = dispatch(session, action)
        if not outcome.accepted:
            logger.info(
                "Autoplay of I.%d stopped at step %d: %s", prop.id, session.current_step, outcome.reason
            )
            break
        session = outcome.session
    return session


def _skip_step(session: ProofSession) -> ProofSession:
    expected = session.expected
    label = getattr(expected, "label", None)
    if isinstance(expected, MacroAction) and expected.output_labels:
        state = session.state
        for output_label in expected.output_labels.values():
            state = skip_point_label(state, output_label)
    else:
        state = skip_point_label(session.state, label)
    next_step = session.current_step + 1
    completed = next_step >= len(session.prop.steps)
    proof_facts = session.proof_facts
    facts = session.facts
    if completed and session.prop.derive_conclusion is not None:
        facts = facts.copy()
        proof_facts += tuple(session.prop.derive_conclusion(facts, state, len(session.prop.steps)))
    return replace(
        session,
        state=state,
        facts=facts,
        current_step=next_step,
        proof_facts=proof_facts,
        completed=completed,
    )


def _replay_free_play(session: ProofSession, extra_actions: Sequence[PostCompletionAction]) -> ProofSession:
    session = enter_free_play(session)
    for recorded in extra_actions:
        action: Optional[CommittedAction]
        if isinstance(recorded, FreeCircle):
            action = CommitCircle(recorded.center_id, recorded.radius_point_id)
        elif isinstance(recorded, FreeSegment):
            action = CommitSegment(recorded.from_id, recorded.to_id)
        else:
            matching = next(
                (
                    cand
                    for cand in session.candidates
                    if {cand.of_a, cand.of_b} == {recorded.of_a, recorded.of_b} and cand.which == recorded.which
                ),
                None,
            )
            action = None if matching is None else MarkIntersection(matching)
        outcome = dispatch(session, action) if action is not None else None
        if outcome is not None and outcome.accepted:
            session = outcome.session
            continue
        reason = "intersection no longer exists" if outcome is None else outcome.reason
        logger.info("Replay of I.%d dropped free play %s: %s", session.prop.id, recorded, reason)
        if isinstance(recorded, FreeIntersection):
            session = replace(session, state=skip_point_label(session.state))
    return session


def replay_construction(
    prop: PropositionDef,
    given_elements: Optional[Sequence[ConstructionElement]] = None,
    extra_actions: Sequence[PostCompletionAction] = (),
) -> ReplayResult:
    """Run every step of ``prop``, then its conclusion, then ``extra_actions``.

    Steps that cannot be satisfied for these givens are skipped and not
    counted in ``steps_completed``. Free play recorded after completion is
    replayed with produced lines. An intersection that no longer exists
    still consumes its label so later labels stay put.
    """

    session = start_session(prop, given_elements)
    completed_steps = 0
    while not session.completed:
        action = planned_action(session)
        outcome = dispatch(session, action) if action is not None else None
        if outcome is not None and outcome.accepted:
            session = outcome.session
            completed_steps += 1
            continue
        reason = "no admissible intersection" if outcome is None else outcome.reason
        logger.info("Replay of I.%d skipped step %d: %s", prop.id, session.current_step, reason)
        session = _skip_step(session)
    if extra_actions:
        session = _replay_free_play(session, extra_actions)

    return ReplayResult(
        state=session.state,
        facts=session.facts,
        proof_facts=session.proof_facts,
        candidates=session.candidates,
        ghost_layers=session.ghost_layers,
        steps_completed=completed_steps,
    )


def given_elements_for(prop: PropositionDef, positions: Mapping[str, Coord]) -> Tuple[ConstructionElement, ...]:
    """Givens of ``prop`` with draggable points moved to ``positions``."""

    if prop.compute_given_elements is not None:
        return tuple(prop.compute_given_elements(positions))
    moved = []
    for element in prop.given_elements:
        if isinstance(element, Point) and element.id in positions and element.id in prop.draggable_point_ids:
            x, y = positions[element.id]
            element = replace(element, x=float(x), y=float(y))
        moved.append(element)
    return tuple(moved)


def drag_given_points(
    prop: PropositionDef,
    positions: Mapping[str, Coord],
    extra_actions: Sequence[PostCompletionAction] = (),
) -> ReplayResult:
    ignored = sorted(set(positions) - set(prop.draggable_point_ids))
    if ignored:
        logger.warning("I.%d ignores drags of non-draggable point(s): %s", prop.id, ", ".join(ignored))
    allowed = {point_id: coords for point_id, coords in positions.items() if point_id in prop.draggable_point_ids}
    return replay_construction(prop, given_elements_for(prop, allowed), extra_actions)


apply_debug_logging(globals(), logger=logger, skip={"_skip_step", "_replay_free_play"})
