"""Standalone TikZ export of a construction and its proof."""

from .generator import generate_tikz_code, generate_tikz_document
from .utils import latex_escape_keep_math, statement_to_math

__all__ = [
    "generate_tikz_code",
    "generate_tikz_document",
    "latex_escape_keep_math",
    "statement_to_math",
]
