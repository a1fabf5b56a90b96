import math

import pytest

from euclid_ir.construction import get_point, get_point_by_label
from euclid_ir.facts import angle_measure, distance_pair, query_angle_equality, query_equality
from euclid_ir.propositions import PROP_1, PROP_2, PROP_3, PROP_4, PROP_5, PROP_6, PROP_7
from euclid_ir.propositions.common import given_point, given_segment
from euclid_ir.replay import given_elements_for, planned_action
from euclid_ir.stepper import (
    CommitCircle,
    CommitExtend,
    CommitMacro,
    CommitSegment,
    CompassCenterSet,
    CompassRadiusSet,
    CompassSweeping,
    FreeCircle,
    FreeIntersection,
    FreeSegment,
    Idle,
    MacroSelecting,
    MarkIntersection,
    ToolEvent,
    cancel_tool,
    compass_drag_to,
    compass_press,
    compass_release,
    compass_sweep,
    dispatch,
    extend_press,
    extend_release,
    extend_through,
    macro_begin,
    macro_select,
    start_session,
    straightedge_press,
    straightedge_release,
)
from euclid_ir.types import ExtendAction, IntersectionCandidate, PropositionDef, PropositionStep, theorem_conclusion_for


def d(a, b):
    return distance_pair(f'pt-{a}', f'pt-{b}')


def _accept(session, action):
    outcome = dispatch(session, action)
    assert outcome.accepted, outcome.reason
    return outcome.session


def _play(session, steps):
    for _ in range(steps):
        session = _accept(session, planned_action(session))
    return session


def _upper(candidates):
    return max(candidates, key=lambda cand: cand.y)


def test_prop1_end_to_end():
    session = start_session(PROP_1)
    assert session.current_step == 0 and session.proof_facts == ()

    session = _accept(session, CommitCircle('pt-A', 'pt-B'))
    session = _accept(session, CommitCircle('pt-B', 'pt-A'))
    assert len(session.candidates) == 2

    outcome = dispatch(session, MarkIntersection(_upper(session.candidates)))
    assert outcome.accepted
    session = outcome.session
    apex = get_point_by_label(session.state, 'C')
    assert apex.coords == pytest.approx((0.0, 2.0 * math.sqrt(3.0)))
    assert {fact.statement for fact in outcome.new_facts} == {'AC = AB', 'BC = BA'}
    assert len(session.candidates) == 1

    session = _accept(session, CommitSegment('pt-C', 'pt-A'))
    outcome = dispatch(session, CommitSegment('pt-B', 'pt-C'))
    session = outcome.session

    assert session.completed
    assert session.current_step == len(PROP_1.steps)
    assert outcome.new_facts[-1].statement == 'CA = CB'
    assert query_equality(session.facts, d('C', 'A'), d('C', 'B'))
    assert query_equality(session.facts, d('A', 'B'), d('B', 'C'))


def test_rejected_action_returns_the_same_session():
    session = start_session(PROP_1)

    for action in (
        CommitCircle('pt-B', 'pt-A'),
        CommitSegment('pt-A', 'pt-B'),
        CommitCircle('pt-A', 'pt-Q'),
        CommitMacro(1, ('pt-A', 'pt-B')),
        CommitExtend('pt-A', 'pt-B'),
    ):
        outcome = dispatch(session, action)
        assert not outcome.accepted
        assert outcome.reason
        assert outcome.session is session

    assert session.current_step == 0
    assert len(session.state.elements) == 3
    assert session.facts.facts == []


def test_rejected_action_leaves_previous_snapshots_alone():
    session = _play(start_session(PROP_1), 2)
    facts_before = list(session.facts.facts)

    lower = min(session.candidates, key=lambda cand: cand.y)
    outcome = dispatch(session, MarkIntersection(lower))

    assert not outcome.accepted
    assert outcome.session is session
    assert session.facts.facts == facts_before
    assert len(session.candidates) == 2


def test_accepting_copies_the_fact_store():
    before = _play(start_session(PROP_1), 2)

    after = dispatch(before, MarkIntersection(_upper(before.candidates))).session

    assert before.facts.facts == []
    assert len(after.facts.facts) == 2


def test_unknown_candidate_is_rejected():
    session = _play(start_session(PROP_1), 2)
    stray = IntersectionCandidate(9.0, 9.0, 'cir-1', 'cir-2', 0)

    outcome = dispatch(session, MarkIntersection(stray))

    assert not outcome.accepted
    assert outcome.session is session


def test_macros_and_productions_are_rejected_after_completion():
    session = _play(start_session(PROP_4), 1)
    assert session.completed

    for action in (CommitExtend('pt-E', 'pt-F'), CommitMacro(1, ('pt-A', 'pt-B'))):
        outcome = dispatch(session, action)

        assert not outcome.accepted
        assert outcome.session is session


def _crossing(session, circle_a, circle_b):
    return [cand for cand in session.candidates if {cand.of_a, cand.of_b} == {circle_a, circle_b}]


def test_free_play_after_completion_is_recorded():
    done = _play(start_session(PROP_1), len(PROP_1.steps))

    circled = dispatch(done, CommitCircle('pt-C', 'pt-A'))
    assert circled.accepted
    new_circle = circled.added_elements[0]
    session = circled.session
    assert session.completed
    assert session.current_step == len(PROP_1.steps)
    assert session.extend_segments

    (crossing,) = _crossing(session, new_circle.id, 'cir-1')
    assert crossing.coords == pytest.approx((-4.0, 2.0 * math.sqrt(3.0)))
    marked = dispatch(session, MarkIntersection(crossing))
    assert marked.accepted
    assert marked.added_elements[0].label == 'D'
    assert query_equality(marked.session.facts, d('C', 'D'), d('C', 'A'))
    assert marked.session.proof_facts[-len(marked.new_facts):] == marked.new_facts

    session = _accept(marked.session, CommitSegment('pt-C', 'pt-D'))

    assert session.post_completion_actions == (
        FreeCircle('pt-C', 'pt-A'),
        FreeIntersection(crossing.of_a, crossing.of_b, crossing.which),
        FreeSegment('pt-C', 'pt-D'),
    )
    assert done.post_completion_actions == ()


def test_free_play_rejects_unknown_points_unchanged():
    done = _play(start_session(PROP_1), len(PROP_1.steps))

    outcome = dispatch(done, CommitSegment('pt-C', 'pt-Z'))

    assert not outcome.accepted
    assert outcome.session is done


def test_given_facts_are_loaded_before_the_first_step():
    session = start_session(PROP_5)

    assert [(fact.statement, fact.at_step, fact.citation.type) for fact in session.proof_facts] == [
        ('AB = AC', -1, 'given')
    ]
    assert session.extend_segments


def test_prop3_degenerate_configuration_stays_on_the_intersection_step():
    # CD is longer than AB, so the circle about A misses the finite segment AB.
    given = given_elements_for(PROP_3, {'pt-D': (5.0, -1.5)})
    session = _play(start_session(PROP_3, given), 2)

    assert session.current_step == 2
    assert planned_action(session) is None
    for candidate in session.candidates:
        outcome = dispatch(session, MarkIntersection(candidate))
        assert not outcome.accepted
        assert outcome.session is session
    assert not session.completed


@pytest.mark.parametrize('prop', [PROP_1, PROP_2, PROP_3, PROP_4, PROP_5, PROP_6, PROP_7], ids=lambda p: f'I.{p.id}')
def test_planned_actions_complete_every_proposition(prop):
    session = _play(start_session(prop), len(prop.steps))

    assert session.completed


def test_prop2_places_a_line_equal_to_bc_at_a():
    session = _play(start_session(PROP_2), len(PROP_2.steps))

    a = get_point(session.state, 'pt-A')
    f = get_point(session.state, 'pt-F')
    assert math.isclose(math.dist(a.coords, f.coords), 1.5, rel_tol=1e-9)
    assert query_equality(session.facts, d('A', 'F'), d('B', 'C'))
    assert len(session.ghost_layers) == 1


def test_prop5_concludes_the_base_angles_are_equal():
    session = _play(start_session(PROP_5), len(PROP_5.steps))

    abc = angle_measure('pt-B', 'pt-A', 'pt-C')
    acb = angle_measure('pt-C', 'pt-A', 'pt-B')
    assert query_angle_equality(session.facts, abc, acb)
    assert session.proof_facts[-1].citation.type == 'cn3-angle'


def test_prop6_cuts_bd_equal_to_ac_and_concludes_ab_equals_ac():
    session = _play(start_session(PROP_6), len(PROP_6.steps))

    b = get_point(session.state, 'pt-B')
    c = get_point(session.state, 'pt-C')
    a = get_point(session.state, 'pt-A')
    dd = get_point(session.state, 'pt-D')
    assert math.isclose(math.dist(b.coords, dd.coords), math.dist(a.coords, c.coords), rel_tol=1e-9)
    assert get_point_by_label(session.state, 'E') is not None
    assert query_equality(session.facts, d('B', 'D'), d('A', 'C'))
    assert query_equality(session.facts, d('A', 'B'), d('A', 'C'))
    assert [fact.statement for fact in session.proof_facts][0] == '∠ABC = ∠ACB'
    assert theorem_conclusion_for(PROP_6, session.state) == 'AB = AC'


def test_prop7_derives_both_isosceles_angle_pairs():
    session = _play(start_session(PROP_7), len(PROP_7.steps))

    assert query_angle_equality(
        session.facts, angle_measure('pt-C', 'pt-A', 'pt-D'), angle_measure('pt-D', 'pt-A', 'pt-C')
    )
    assert query_angle_equality(
        session.facts, angle_measure('pt-C', 'pt-B', 'pt-D'), angle_measure('pt-D', 'pt-B', 'pt-C')
    )
    assert [fact.citation.type for fact in session.proof_facts] == ['given', 'given', 'prop', 'prop']


@pytest.mark.parametrize(
    'd_position, expected',
    [
        ((1.0, 2.3), '∠BDC > ∠ADC'),
        ((-1.0, 2.3), '∠ADC > ∠BDC'),
    ],
)
def test_prop7_conclusion_follows_where_d_lies(d_position, expected):
    session = start_session(PROP_7, given_elements_for(PROP_7, {'pt-D': d_position}))

    assert expected in theorem_conclusion_for(PROP_7, session.state)


# ---------------------------------------------------------------------------
# Tool phases
# ---------------------------------------------------------------------------


def test_compass_gesture_commits_after_a_full_sweep():
    session = start_session(PROP_1)
    events = []

    outcome = compass_press(session, 'pt-A')
    events += outcome.events
    assert isinstance(outcome.session.tool_phase, CompassCenterSet)

    outcome = compass_drag_to(outcome.session, 'pt-B')
    events += outcome.events
    assert isinstance(outcome.session.tool_phase, CompassRadiusSet)
    assert math.isclose(outcome.session.tool_phase.radius, 4.0)

    for angle in (0.0, 1.0, 2.0, 3.0, 4.0, 5.0, 6.0):
        outcome = compass_sweep(outcome.session, angle)
        events += outcome.events
        assert isinstance(outcome.session.tool_phase, CompassSweeping)
    assert outcome.session.current_step == 0

    outcome = compass_sweep(outcome.session, 6.2)

    assert outcome.accepted
    assert outcome.session.current_step == 1
    assert isinstance(outcome.session.tool_phase, Idle)
    assert [event.phase for event in events] == ['center-set', 'radius-set', 'sweeping']


def test_sweep_direction_does_not_matter():
    session = compass_drag_to(compass_press(start_session(PROP_1), 'pt-A').session, 'pt-B').session
    session = compass_sweep(session, 0.0).session

    for angle in (-1.0, -2.0, -3.0, -4.0, -5.0, -6.0):
        session = compass_sweep(session, angle).session
    outcome = compass_sweep(session, -6.2)

    assert outcome.session.current_step == 1


def test_releasing_early_discards_the_circle():
    session = compass_drag_to(compass_press(start_session(PROP_1), 'pt-A').session, 'pt-B').session
    session = compass_sweep(compass_sweep(session, 0.0).session, 1.5).session

    outcome = compass_release(session)

    assert isinstance(outcome.session.tool_phase, Idle)
    assert outcome.session.state == session.state
    assert outcome.session.current_step == 0


def test_guided_compass_ignores_the_wrong_center():
    session = start_session(PROP_1)

    outcome = compass_press(session, 'pt-B')

    assert not outcome.accepted
    assert outcome.session is session


def test_free_compass_commits_then_rejects_the_wrong_circle():
    session = start_session(PROP_1, guided=False)
    session = compass_drag_to(compass_press(session, 'pt-B').session, 'pt-A').session
    session = compass_sweep(session, 0.0).session
    for angle in (2.0, 4.0, 6.0, 6.3):
        outcome = compass_sweep(session, angle)
        session = outcome.session

    assert not outcome.accepted
    assert isinstance(session.tool_phase, Idle)
    assert session.current_step == 0
    assert len(session.state.elements) == 3


def test_repeated_drag_only_reports_radius_once():
    session = compass_press(start_session(PROP_1), 'pt-A').session
    first = compass_drag_to(session, 'pt-B')
    second = compass_drag_to(first.session, 'pt-B')

    assert first.events == (ToolEvent('compass-phase', phase='radius-set'),)
    assert second.events == ()


def test_straightedge_gesture():
    session = _play(start_session(PROP_1), 3)

    pressed = straightedge_press(session, 'pt-C')
    released = straightedge_release(pressed.session, 'pt-A')

    assert released.accepted
    assert released.session.current_step == 4


def test_straightedge_release_on_start_point_cancels():
    session = _play(start_session(PROP_1), 3)
    pressed = straightedge_press(session, 'pt-C')

    outcome = straightedge_release(pressed.session, 'pt-C')

    assert isinstance(outcome.session.tool_phase, Idle)
    assert outcome.session.current_step == 3


def test_macro_selection_in_guided_mode():
    session = _play(start_session(PROP_2), 1)

    session = macro_begin(session, 1).session
    assert isinstance(session.tool_phase, MacroSelecting)

    ignored = macro_select(session, 'pt-B')
    assert not ignored.accepted and ignored.session is session

    first = macro_select(session, 'pt-A')
    assert first.events == (ToolEvent('macro-select', index=0),)
    assert first.session.tool_phase.selected_point_ids == ('pt-A',)

    last = macro_select(first.session, 'pt-B')

    assert last.accepted
    assert last.events[0] == ToolEvent('macro-select', index=1)
    assert last.session.current_step == 2
    assert get_point_by_label(last.session.state, 'D') is not None
    assert [layer.prop_id for layer in last.session.ghost_layers] == [1]


def test_unknown_macro_cannot_begin():
    session = start_session(PROP_2)

    outcome = macro_begin(session, 12)

    assert not outcome.accepted
    assert outcome.session is session


def test_cancel_tool_resets_phase_only():
    session = start_session(PROP_1)
    pressed = compass_press(session, 'pt-A').session

    cancelled = cancel_tool(pressed)

    assert isinstance(cancelled.tool_phase, Idle)
    assert cancelled.state is session.state
    assert cancelled.facts is session.facts


def test_extend_gesture_produces_the_line():
    prop = PropositionDef(
        id=90,
        title='Produce AB',
        given_elements=(given_point('A', 0, 0), given_point('B', 2, 0), given_segment('A', 'B')),
        steps=(PropositionStep('Produce AB past B by 3', ExtendAction('pt-A', 'pt-B', 3.0, 'C'), tool='extend'),),
    )
    session = start_session(prop)

    session = extend_press(session, 'pt-A').session
    session = extend_through(session, 'pt-B').session
    outcome = extend_release(session)

    assert outcome.accepted
    point = get_point_by_label(outcome.session.state, 'C')
    assert point.coords == pytest.approx((5.0, 0.0))
    assert outcome.session.completed


def test_extend_to_the_wrong_distance_is_rejected():
    prop = PropositionDef(
        id=90,
        title='Produce AB',
        given_elements=(given_point('A', 0, 0), given_point('B', 2, 0)),
        steps=(PropositionStep('Produce AB past B by 3', ExtendAction('pt-A', 'pt-B', 3.0, 'C')),),
    )
    session = start_session(prop)

    outcome = dispatch(session, CommitExtend('pt-A', 'pt-B', 1.0))

    assert not outcome.accepted
    assert outcome.session is session
