"""String helpers for log messages and report typesetting."""

from __future__ import annotations

import re
from typing import Iterable

_SUBSCRIPT_PATTERN = re.compile(r"([a-zA-Z]+)([0-9]+)")


def paste_nicely(items: Iterable[object], *, initial: str = ", ", conjunction: str = " and ") -> str:
    """Join ``items`` into an English list.

    >>> paste_nicely(["HG", "PRD", "CC"])
    'HG, PRD and CC'
    """

    words = [str(item) for item in items]
    if len(words) <= 1:
        return "".join(words)
    return initial.join(words[:-1]) + conjunction + words[-1]


def bold_latex(text: object) -> str:
    """Wrap ``text`` in ``\\textbf{}`` (e.g. for table column names)."""
    return f"\\textbf{{{text}}}"


def math_latex(text: object) -> str:
    """Wrap ``text`` in inline math delimiters (e.g. for table contents)."""
    return f"${text}$"


def sub_latex(text: str) -> str:
    """Turn trailing digits into a math-mode subscript, e.g. ``q1`` -> ``\\mli{q}_{1}``."""
    return _SUBSCRIPT_PATTERN.sub(r"\\mli{\1}_{\2}", text)


__all__ = ["bold_latex", "math_latex", "paste_nicely", "sub_latex"]
