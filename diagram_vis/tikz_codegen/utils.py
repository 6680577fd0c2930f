import math
import re
import unicodedata
from typing import List, Tuple

_MATH_DELIM_RE = re.compile(r'(?<!\\)(\$\$|\$)')  # matches unescaped $ or $$
_NAME_CHARS_RE = re.compile(r'[^A-Za-z]+')

_TEXT_REPLACEMENTS = {
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

def _strip_combining(text: str) -> str:
    text = unicodedata.normalize('NFC', text)
    return ''.join(ch for ch in text if unicodedata.category(ch) != 'Mn')

def _escape_text_segment(text: str) -> str:
    text = _strip_combining(text)
    return ''.join(_TEXT_REPLACEMENTS.get(c, c) for c in text)

def latex_escape(s: str) -> str:
    """Escape every LaTeX special character, dollar signs included."""
    return _escape_text_segment(s).replace('$', r'\$')

def latex_escape_keep_math(s: str) -> str:
    """
    Escape LaTeX text while passing ``$...$`` and ``$$...$$`` spans through.

    An unterminated math span runs to the end of the string.
    """
    parts: List[str] = []
    pos = 0
    in_math = False
    current_delim = None  # '$' or '$$'

    for m in _MATH_DELIM_RE.finditer(s):
        delim = m.group(1)
        start, end = m.span()

        chunk = s[pos:start]
        parts.append(chunk if in_math else _escape_text_segment(chunk))

        parts.append(delim)
        if not in_math:
            in_math = True
            current_delim = delim
        elif delim == current_delim:
            in_math = False
            current_delim = None
        pos = end

    tail = s[pos:]
    parts.append(tail if in_math else _escape_text_segment(tail))
    return ''.join(parts)

def format_float(value: float) -> str:
    if math.isnan(value) or math.isinf(value):
        raise ValueError("Cannot format non-finite float for TikZ output")
    formatted = f"{value:.4f}"
    formatted = formatted.rstrip("0").rstrip(".")
    if formatted in ("", "-0"):
        return "0"
    return formatted

def format_point(point: Tuple[float, float]) -> str:
    return f"({format_float(point[0])}, {format_float(point[1])})"

def tex_name(prefix: str, name: str, index: int) -> str:
    """Letters-only macro-safe identifier derived from ``name``."""
    letters = _NAME_CHARS_RE.sub('', name)
    suffix = ''.join(chr(ord('a') + int(d)) for d in str(index))
    return f"{prefix}{letters}{suffix}"
