"""Intermediate representation for basic-block optimization.

A block is an ordered list of ``Quadruple`` instructions.  While a block
is being optimized its values live in a DAG of ``DAGNode`` objects kept in
an append-only arena, so node ids are dense and a child id always refers
to an earlier node.

Node kinds:

  leaf      – a literal (``"3"``, ``"-7"``) or an input variable (``"A"``)
  interior  – one operator applied to a left and a right child

Operators: ``=`` (copy, ``arg2`` always empty) and the binary arithmetic
operators ``+ - * /``.  An interior node built from an operation with an
empty ``arg2`` has ``SENTINEL_NONE`` as its right child.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict

ASSIGN = "="
ARITHMETIC_OPS = ("+", "-", "*", "/")

# Right child of an interior node that has no second operand.
SENTINEL_NONE = -1

_LITERAL_CHARS = frozenset("0123456789-")


class MalformedBlockError(Exception):
    """Raised when a block cannot be optimized (fatal for that block only)."""


def is_numeric_literal(text: str) -> bool:
    """True if *text* looks like an integer literal (digits and ``-`` only).

    The check is character-wise: ``"--3"`` passes here and is rejected
    later, when its value is actually needed.
    """
    return bool(text) and all(c in _LITERAL_CHARS for c in text)


class Quadruple(BaseModel):
    """One three-address instruction ``(op, arg1, arg2, result)``."""

    model_config = ConfigDict(frozen=True)

    op: str = ""
    arg1: str = ""
    arg2: str = ""
    result: str = ""

    @classmethod
    def of(cls, op: str, arg1: str = "", arg2: str = "", result: str = "") -> "Quadruple":
        return cls(op=op, arg1=arg1, arg2=arg2, result=result)

    def as_tuple(self) -> Tuple[str, str, str, str]:
        return (self.op, self.arg1, self.arg2, self.result)

    def to_text(self) -> str:
        return "(" + ", ".join(self.as_tuple()) + ")"

    def to_dict(self) -> Dict[str, str]:
        return self.model_dump()


class DAGNode(BaseModel):
    """A single value in the block DAG."""

    id: int
    label: str  # operator symbol (interior) or literal / variable text (leaf)
    left: Optional[int] = None
    right: Optional[int] = None
    # First entry is the representative name used when the node is an operand.
    aliases: List[str] = []
    # Names retracted from ``aliases`` when rebound elsewhere (retract mode).
    retired_aliases: List[str] = []

    @property
    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    @property
    def is_literal(self) -> bool:
        return self.is_leaf and is_numeric_literal(self.label)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
