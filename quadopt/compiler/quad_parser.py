"""Quadruple text codec – reads and writes blocks of three-address code.

Format (one instruction per line)::

    (op, arg1, arg2, result)

- Lines without both a ``(`` and a later ``)`` are skipped.
- Fields are split on ``,`` and stripped of surrounding whitespace.
- Missing trailing fields are empty; fields beyond the fourth are ignored.
- Output uses the same shape, fields joined with ``", "``, so an empty
  field prints as ``(=, T3, , X)``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Union

from quadopt.compiler.ir import Quadruple

logger = logging.getLogger(__name__)

_FIELDS = 4


def parse_quadruples(lines: Iterable[str]) -> List[Quadruple]:
    """Parse text *lines* into quadruples, skipping non-instruction lines."""
    quads: List[Quadruple] = []

    for lineno, line in enumerate(lines, start=1):
        if not line:
            continue
        start = line.find("(")
        end = line.find(")")
        if start == -1 or end == -1 or end < start:
            logger.debug("skipping line %d: %r", lineno, line)
            continue

        parts = [part.strip() for part in line[start + 1:end].split(",")]
        parts.extend([""] * (_FIELDS - len(parts)))
        quads.append(Quadruple.of(*parts[:_FIELDS]))

    return quads


def parse_source(source: str) -> List[Quadruple]:
    """Parse a whole block given as one string."""
    return parse_quadruples(source.splitlines())


def read_block(path: Union[str, Path]) -> List[Quadruple]:
    """Read and parse the block stored in *path*."""
    text = Path(path).read_text(encoding="utf-8")
    return parse_source(text)


def format_quadruple(quad: Quadruple) -> str:
    return quad.to_text()


def format_quadruples(quads: Iterable[Quadruple]) -> str:
    """Render *quads* one per line (no trailing newline)."""
    return "\n".join(format_quadruple(q) for q in quads)
