from __future__ import annotations

import pytest

from euclid_ir.construction import add_circle, add_point, add_segment, create_initial_state
from euclid_ir.propositions import PROP_1, PROP_3, PROP_5
from euclid_ir.replay import autoplay
from euclid_ir.tikz import generate_tikz_code, generate_tikz_document, latex_escape_keep_math
from euclid_ir.tikz.utils import statement_to_math


def _basic_state():
    state = create_initial_state()
    state, _ = add_point(state, 0.0, 0.0, 'given', 'A')
    state, _ = add_point(state, 2.0, 0.0, 'given', 'B')
    state, _ = add_segment(state, 'pt-A', 'pt-B')
    state, _ = add_circle(state, 'pt-A', 'pt-B')
    return state


def test_generate_tikz_document_minimal_preamble() -> None:
    document = generate_tikz_document(_basic_state(), title='A & B')

    assert document.startswith('\\documentclass[border=2pt]{standalone}')
    assert '\\tikzset{' in document
    assert '\\textbf{A \\& B}' in document
    assert '\\begin{enumerate}' not in document


def test_generate_tikz_code_draws_elements_in_byrne_colours() -> None:
    tikz = generate_tikz_code(_basic_state())

    assert tikz.startswith('\\begin{tikzpicture}')
    assert tikz.endswith('\\end{tikzpicture}')
    assert '\\coordinate (A) at (-4,0);' in tikz
    assert '\\coordinate (B) at (4,0);' in tikz
    assert '\\draw[carrier, draw=byrne' in tikz
    assert '(A) -- (B);' in tikz
    assert '\\draw[circle, draw=byrne' in tikz
    assert '(A) circle (8);' in tikz
    assert '\\definecolor{byrne0}{HTML}' in tikz
    assert '\\node[ptlabel, left] at (A) {$A$};' in tikz
    assert '\\node[ptlabel, right] at (B) {$B$};' in tikz


def test_finished_proposition_lists_its_proof() -> None:
    session = autoplay(PROP_1)

    document = generate_tikz_document(session.state, session.proof_facts, session.ghost_layers, title='Proposition I.1')

    assert '\\item $CA = CB$ \\hfill (C.N.1)' in document
    assert '(Def.15)' in document
    assert document.count('\\item ') == len(session.proof_facts)


def test_angle_facts_render_in_math_mode() -> None:
    session = autoplay(PROP_5)

    document = generate_tikz_document(session.state, session.proof_facts)

    assert '$\\angle ABC = \\angle ACB$' in document
    assert '∠' not in document


def test_macro_ghosts_are_drawn_in_ghost_scopes() -> None:
    session = autoplay(PROP_3)

    tikz = generate_tikz_code(session.state, session.ghost_layers)

    assert tikz.count('\\begin{scope}[ghost]') == len(session.ghost_layers)
    assert '% I.2 ghost (depth 1' in tikz
    assert '% I.1 ghost (depth 2' in tikz
    assert '\\draw[aux, draw=' in tikz


def test_empty_state_still_renders() -> None:
    tikz = generate_tikz_code(create_initial_state())

    assert tikz == '\\begin{tikzpicture}\n\\end{tikzpicture}'


@pytest.mark.parametrize(
    'text, expected',
    [
        ('AB & CD', 'AB \\& CD'),
        ('50% of $x_1$', '50\\% of $x_1$'),
        ('angle $∠ABC$', 'angle $\\angle ABC$'),
    ],
)
def test_latex_escape_keep_math(text, expected) -> None:
    assert latex_escape_keep_math(text) == expected


def test_statement_to_math_converts_symbols() -> None:
    assert statement_to_math('∠ABC = ∠ACB') == '$\\angle ABC = \\angle ACB$'
    assert statement_to_math('△ABC ≅ △DEF') == '$\\triangle ABC \\cong \\triangle DEF$'


@pytest.mark.parametrize(
    'statement, expected',
    [
        ('△ABC ≅ △DEF', '$\\triangle ABC \\cong \\triangle DEF$'),
        ('∠ABC=∠DEF', '$\\angle ABC=\\angle DEF$'),
        ('x ≅', '$x \\cong$'),
    ],
)
def test_symbols_are_separated_by_a_single_space(statement, expected) -> None:
    converted = statement_to_math(statement)

    assert converted == expected
    assert '  ' not in converted
