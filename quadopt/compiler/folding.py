"""Build-time integer constant folding.

Folding is purely textual: it looks at the literal text of a quadruple's
operands and never at the value a variable happens to be bound to.

Arithmetic uses unbounded Python ints.  Division truncates toward zero
and a literal zero divisor is left for run time.
"""

from __future__ import annotations

import re
from typing import Optional

from quadopt.compiler.ir import MalformedBlockError, is_numeric_literal

_INTEGER_RE = re.compile(r"-?[0-9]+")


def parse_literal(text: str) -> int:
    """Return the integer value of literal *text*.

    Text that passed ``is_numeric_literal`` but is not a well formed
    integer (``"-"``, ``"--3"``, ``"3-4"``) raises ``MalformedBlockError``.
    """
    if not _INTEGER_RE.fullmatch(text):
        raise MalformedBlockError(f"ill-formed integer literal '{text}'")
    return int(text)


def truncating_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def try_fold(op: str, arg1: str, arg2: str) -> Optional[str]:
    """Evaluate ``arg1 op arg2`` if both are literals; return the literal text.

    An empty *arg2* counts as ``0``.  Returns ``None`` when the operands are
    not both literal-looking, when *op* is not arithmetic, or on division by
    zero.
    """
    if not is_numeric_literal(arg1):
        return None
    if arg2 and not is_numeric_literal(arg2):
        return None

    val1 = parse_literal(arg1)
    val2 = parse_literal(arg2) if arg2 else 0

    if op == "+":
        res = val1 + val2
    elif op == "-":
        res = val1 - val2
    elif op == "*":
        res = val1 * val2
    elif op == "/":
        if val2 == 0:
            return None
        res = truncating_div(val1, val2)
    else:
        return None

    return str(res)
