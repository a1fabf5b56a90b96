import re
import unicodedata
from typing import List

_MATH_DELIM_RE = re.compile(r'(?<!\\)(\$\$|\$)')  # matches unescaped $ or $$

# Symbols that show up in fact statements and need a math-mode spelling.
_MATH_SYMBOLS = {
    '∠': r'\angle',
    '≅': r'\cong',
    '△': r'\triangle',
}


def _strip_combining(text: str) -> str:
    text = unicodedata.normalize('NFC', text)
    return ''.join(ch for ch in text if unicodedata.category(ch) != 'Mn')


def _escape_text_segment(text: str) -> str:
    text = _strip_combining(text)
    repl = {
        '\\': r'\textbackslash{}',
        '&':  r'\&',
        '%':  r'\%',
        '#':  r'\#',
        '_':  r'\_',
        '{':  r'\{',
        '}':  r'\}',
        '~':  r'\textasciitilde{}',
        '^':  r'\textasciicircum{}',
    }
    return ''.join(repl.get(c, c) for c in text)


def _convert_symbols_in_math(s: str) -> str:
    parts: List[str] = []
    for idx, ch in enumerate(s):
        macro = _MATH_SYMBOLS.get(ch)
        if macro is None:
            parts.append(ch)
            continue
        parts.append(macro)
        # a control word needs a separator before a following letter
        if idx + 1 < len(s) and not s[idx + 1].isspace():
            parts.append(' ')
    return ''.join(parts)


def latex_escape_keep_math(s: str) -> str:
    """Escape LaTeX text while leaving ``$...$`` spans as math."""
    parts: List[str] = []
    pos = 0
    in_math = False
    current_delim = None  # '$' or '$$'

    for m in _MATH_DELIM_RE.finditer(s):
        delim = m.group(1)
        start, end = m.span()

        chunk = s[pos:start]
        parts.append(_convert_symbols_in_math(chunk) if in_math else _escape_text_segment(chunk))

        parts.append(delim)
        if not in_math:
            in_math = True
            current_delim = delim
        elif delim == current_delim:
            in_math = False
            current_delim = None
        pos = end

    tail = s[pos:]
    parts.append(_convert_symbols_in_math(tail) if in_math else _escape_text_segment(tail))
    return ''.join(parts)


def statement_to_math(statement: str) -> str:
    """``"∠ABC = ∠ACB"`` -> ``"$\\angle ABC = \\angle ACB$"``."""
    return '$' + _convert_symbols_in_math(statement.strip()) + '$'
