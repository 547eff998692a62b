"""Local (single basic block) optimizer for three-address code.

Implements, in one build pass and one emit pass:
- **Constant folding**: integer arithmetic over two literal operands is
  evaluated while the DAG is built.
- **Common Subexpression Elimination (CSE)**: the same operator over the
  same operand values is computed once; every other result name becomes
  a copy of it.
- **Dead value elimination**: values no variable names at the end of the
  block are never emitted.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from quadopt import config
from quadopt.compiler.dag import DAG, DAGBuilder
from quadopt.compiler.emitter import CodeEmitter
from quadopt.compiler.ir import Quadruple
from quadopt.compiler.quad_parser import parse_source

logger = logging.getLogger(__name__)


def resolve_alias_mode(alias_mode: Optional[str]) -> str:
    mode = alias_mode or config.ALIAS_MODE
    if mode not in config.ALIAS_MODES:
        raise ValueError(f"unknown alias mode '{mode}' (expected one of {', '.join(config.ALIAS_MODES)})")
    return mode


def build_dag(quads: Iterable[Quadruple], alias_mode: Optional[str] = None) -> DAG:
    """Build the value DAG of one block."""
    return DAGBuilder(resolve_alias_mode(alias_mode)).build(quads)


def optimize(quads: Iterable[Quadruple], alias_mode: Optional[str] = None) -> List[Quadruple]:
    """Return an equivalent, shorter quadruple sequence for the block *quads*.

    Raises ``MalformedBlockError`` if the block cannot be optimized; no
    partial output is produced in that case.
    """
    quads = list(quads)
    dag = build_dag(quads, alias_mode)
    out = CodeEmitter(dag).emit()
    logger.debug("optimized block: %d -> %d quadruple(s), %d node(s)", len(quads), len(out), len(dag))
    return out


def optimize_source(source: str, alias_mode: Optional[str] = None) -> List[Quadruple]:
    """Parse block text and optimize it."""
    return optimize(parse_source(source), alias_mode)
