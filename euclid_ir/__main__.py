import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from euclid_ir import (
    PROP_REGISTRY,
    PropositionDefinitionError,
    autoplay,
    check_proposition_def,
    distance_pair,
    format_distance,
    generate_tikz_document,
    get_all_points,
    get_proposition,
    given_elements_for,
    theorem_conclusion_for,
    tutorial_for,
)

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _parse_drag(values: Optional[List[str]]) -> Dict[str, Tuple[float, float]]:
    positions: Dict[str, Tuple[float, float]] = {}
    for value in values or []:
        point_id, sep, coords = value.partition("=")
        parts = [part.strip() for part in coords.split(",")]
        if not sep or len(parts) != 2:
            raise ValueError(f"Drag must look like pt-A=x,y, got {value!r}")
        positions[point_id.strip()] = (float(parts[0]), float(parts[1]))
    return positions


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Play through a proposition of Euclid's Elements, Book I")
    parser.add_argument("prop_id", nargs="?", type=int, help="Proposition number, e.g. 1 for I.1")
    parser.add_argument(
        "--list",
        action="store_true",
        help="List the available propositions and exit",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--touch",
        action="store_true",
        help="Print the touch-screen wording of the tutorial",
    )
    parser.add_argument(
        "--drag",
        action="append",
        metavar="POINT=X,Y",
        help="Move a draggable given point before playing, e.g. pt-A=-1,0.5 (repeatable)",
    )
    parser.add_argument(
        "--tikz-output-path",
        help="Write a standalone TikZ document of the finished construction to the given path",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    if args.list:
        for prop_id, prop in sorted(PROP_REGISTRY.items()):
            print(f"I.{prop_id} [{prop.kind}] {prop.title}")
        return

    if args.prop_id is None:
        parser.error("a proposition id is required unless --list is given")

    try:
        prop = get_proposition(args.prop_id)
        check_proposition_def(prop)
        positions = _parse_drag(args.drag)
    except (KeyError, PropositionDefinitionError, ValueError) as exc:
        logger.error("%s", exc.args[0] if isinstance(exc, KeyError) else exc)
        raise SystemExit(1)
    logger.info("Validation succeeded for I.%d", prop.id)

    given = given_elements_for(prop, positions) if positions else None
    session = autoplay(prop, given)
    tutorial = tutorial_for(prop, is_touch=args.touch)

    print(f"Proposition I.{prop.id}: {prop.title}")
    print("Steps:")
    for index, step in enumerate(prop.steps):
        marker = "x" if index < session.current_step else " "
        citation = f" [{step.citation}]" if step.citation else ""
        print(f"  [{marker}] {index + 1}. {step.instruction}{citation}")
        if index < len(tutorial):
            for sub_step in tutorial[index]:
                print(f"        - {sub_step.instruction}")

    print("Points:")
    for point in get_all_points(session.state):
        print(f"  {point.label}: ({point.x:.6f}, {point.y:.6f})")

    print("Proof:")
    for fact in session.proof_facts:
        reason = f" ({fact.justification})" if fact.justification else ""
        print(f"  {fact.statement}{reason}")

    for segment in prop.result_segments:
        print(f"Result: {format_distance(distance_pair(segment.from_id, segment.to_id), session.state)}")
    conclusion = theorem_conclusion_for(prop, session.state)
    if conclusion:
        print("Conclusion:")
        for line in conclusion.splitlines():
            print(f"  {line}")

    if not session.completed:
        logger.error("I.%d stopped at step %d of %d", prop.id, session.current_step + 1, len(prop.steps))
        raise SystemExit(1)

    if args.tikz_output_path:
        output_path = Path(args.tikz_output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing TikZ document to %s", output_path)
        tikz_document = generate_tikz_document(
            session.state,
            session.proof_facts,
            session.ghost_layers,
            title=f"Proposition I.{prop.id}",
        )
        output_path.write_text(tikz_document, encoding="utf-8")
        print(f"TikZ document written to {output_path}")


if __name__ == "__main__":
    main(sys.argv[1:])
