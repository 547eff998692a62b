"""Block report builder.

A Block Report is a content-addressed JSON artifact describing one
optimized block.  The ``block_id`` is the SHA-256 of the canonical JSON
representation of the input quadruples and the alias mode, so the same
block optimized the same way always gets the same id.
"""

from __future__ import annotations

import hashlib
import json
from typing import Dict, List, Sequence

from pydantic import BaseModel

from quadopt.compiler.ir import Quadruple
from quadopt.compiler.quad_parser import format_quadruples


class BlockReport(BaseModel):
    """Result of optimizing one block."""

    block_id: str  # SHA-256 hex digest
    alias_mode: str
    input_count: int
    output_count: int
    quadruples: List[Dict[str, str]]
    text: str


def block_id(inputs: Sequence[Quadruple], alias_mode: str) -> str:
    # Canonical JSON (sorted keys, no whitespace) for hashing
    canonical = json.dumps(
        {"alias_mode": alias_mode, "quadruples": [q.as_tuple() for q in inputs]},
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(canonical.encode()).hexdigest()


def build_report(
    inputs: Sequence[Quadruple],
    outputs: Sequence[Quadruple],
    alias_mode: str,
) -> BlockReport:
    """Build a ``BlockReport`` from a block and its optimized form."""
    return BlockReport(
        block_id=block_id(inputs, alias_mode),
        alias_mode=alias_mode,
        input_count=len(inputs),
        output_count=len(outputs),
        quadruples=[q.to_dict() for q in outputs],
        text=format_quadruples(outputs),
    )
