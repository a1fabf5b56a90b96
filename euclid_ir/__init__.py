from .types import (
    BYRNE,
    AngleMeasure,
    Circle,
    CircleRef,
    CompassAction,
    ConstructionState,
    DistancePair,
    ElementRef,
    ExtendAction,
    GhostLayer,
    IntersectionAction,
    IntersectionCandidate,
    MacroAction,
    Point,
    ProofFact,
    PropositionDef,
    PropositionStep,
    Segment,
    SegmentRef,
    StraightedgeAction,
    TutorialSubStep,
    theorem_conclusion_for,
)
from .config import EngineConfig, get_engine_config, set_engine_config
from .construction import (
    add_circle,
    add_point,
    add_segment,
    create_initial_state,
    get_all_points,
    get_point,
    initialize_given,
    skip_point_label,
)
from .intersections import find_new_intersections, intersections_between, select_candidate
from .facts import (
    FactStore,
    add_angle_fact,
    add_fact,
    angle_measure,
    create_fact_store,
    distance_pair,
    format_distance,
    query_angle_equality,
    query_equality,
    rebuild_fact_store,
)
from .selectors import resolve_selector
from .macros import MACRO_REGISTRY, MacroResult
from .macro_engine import execute_macro
from .ghost import compute_macro_ghost
from .propositions import PROP_REGISTRY, get_proposition
from .validate import (
    PropositionDefinitionError,
    ValidationError,
    check_proposition_def,
    validate_proposition_def,
    validate_step,
)
from .stepper import (
    CommitCircle,
    CommitExtend,
    CommitMacro,
    CommitSegment,
    FreeCircle,
    FreeIntersection,
    FreeSegment,
    MarkIntersection,
    PostCompletionAction,
    ProofSession,
    StepOutcome,
    ToolEvent,
    dispatch,
    enter_free_play,
    start_session,
)
from .tutorial import TutorialCursor, advance_tutorial, current_sub_step, sync_tutorial, tutorial_for
from .replay import ReplayResult, autoplay, drag_given_points, given_elements_for, planned_action, replay_construction
from .tikz import generate_tikz_code, generate_tikz_document

__all__ = [
    'BYRNE',
    'AngleMeasure',
    'Circle',
    'CircleRef',
    'CompassAction',
    'ConstructionState',
    'DistancePair',
    'ElementRef',
    'ExtendAction',
    'GhostLayer',
    'IntersectionAction',
    'IntersectionCandidate',
    'MacroAction',
    'Point',
    'ProofFact',
    'PropositionDef',
    'PropositionStep',
    'Segment',
    'SegmentRef',
    'StraightedgeAction',
    'TutorialSubStep',
    'EngineConfig',
    'get_engine_config',
    'set_engine_config',
    'add_circle',
    'add_point',
    'add_segment',
    'create_initial_state',
    'get_all_points',
    'get_point',
    'initialize_given',
    'skip_point_label',
    'find_new_intersections',
    'intersections_between',
    'select_candidate',
    'FactStore',
    'add_angle_fact',
    'add_fact',
    'angle_measure',
    'create_fact_store',
    'distance_pair',
    'format_distance',
    'query_angle_equality',
    'query_equality',
    'rebuild_fact_store',
    'resolve_selector',
    'MACRO_REGISTRY',
    'MacroResult',
    'execute_macro',
    'compute_macro_ghost',
    'PROP_REGISTRY',
    'get_proposition',
    'PropositionDefinitionError',
    'ValidationError',
    'check_proposition_def',
    'validate_proposition_def',
    'validate_step',
    'CommitCircle',
    'CommitExtend',
    'CommitMacro',
    'CommitSegment',
    'FreeCircle',
    'FreeIntersection',
    'FreeSegment',
    'MarkIntersection',
    'PostCompletionAction',
    'ProofSession',
    'StepOutcome',
    'ToolEvent',
    'dispatch',
    'enter_free_play',
    'start_session',
    'TutorialCursor',
    'advance_tutorial',
    'current_sub_step',
    'sync_tutorial',
    'tutorial_for',
    'ReplayResult',
    'autoplay',
    'drag_given_points',
    'given_elements_for',
    'planned_action',
    'replay_construction',
    'generate_tikz_code',
    'generate_tikz_document',
    'theorem_conclusion_for',
]
