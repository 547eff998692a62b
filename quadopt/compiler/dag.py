"""Block DAG construction.

``DAGBuilder.process`` consumes one quadruple at a time:

1. ``=`` with a non-empty ``arg1`` binds ``result`` to the node of
   ``arg1``; with an empty ``arg1`` the quadruple is dropped.
2. Any other operator whose operands are both literals is folded and
   handled as an assignment of the folded literal.
3. Otherwise the operands are resolved and the ``(op, left, right)``
   triple is looked up in the expression cache.  A hit binds ``result``
   to the existing node (common-subexpression elimination); a miss
   creates and registers a new interior node.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List

from quadopt.compiler.folding import try_fold
from quadopt.compiler.ir import (
    ASSIGN,
    SENTINEL_NONE,
    DAGNode,
    MalformedBlockError,
    Quadruple,
)
from quadopt.compiler.tables import ExpressionCache, ValueTable

logger = logging.getLogger(__name__)


class DAG:
    """Append-only node arena plus the tables that index it."""

    def __init__(self, alias_mode: str = "accumulate") -> None:
        self.nodes: List[DAGNode] = []
        self.values = ValueTable(self, alias_mode)
        self.exprs = ExpressionCache()

    @property
    def alias_mode(self) -> str:
        return self.values.alias_mode

    def __len__(self) -> int:
        return len(self.nodes)

    def node(self, node_id: int) -> DAGNode:
        """Return node *node_id*; any id outside the arena is malformed input."""
        if node_id < 0 or node_id >= len(self.nodes):
            raise MalformedBlockError(f"Node index out of range: {node_id}")
        return self.nodes[node_id]

    def add_leaf(self, label: str) -> DAGNode:
        node = DAGNode(id=len(self.nodes), label=label)
        self.nodes.append(node)
        return node

    def add_interior(self, op: str, left_id: int, right_id: int) -> DAGNode:
        node = DAGNode(id=len(self.nodes), label=op, left=left_id, right=right_id)
        self.nodes.append(node)
        return node

    # ------------------------------------------------------------------
    # Inspection
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        return {
            "alias_mode": self.alias_mode,
            "nodes": [n.to_dict() for n in self.nodes],
            "bindings": dict(self.values.items()),
        }

    def dump(self) -> str:
        """Readable listing of every node followed by the variable bindings."""
        lines = ["DAG Structure:"]
        for node in self.nodes:
            line = f"Node {node.id}: op={node.label}"
            if node.left is not None:
                line += f", left={node.left}"
            if node.right is not None and node.right != SENTINEL_NONE:
                line += f", right={node.right}"
            line += f", aliases=[{', '.join(node.aliases)}]"
            lines.append(line)
        lines.append("Variable to Node mappings:")
        for name, node_id in self.values.items():
            lines.append(f"{name} -> Node {node_id}")
        return "\n".join(lines)


class DAGBuilder:
    """Grows a ``DAG`` from the quadruples of one block."""

    def __init__(self, alias_mode: str = "accumulate") -> None:
        self.dag = DAG(alias_mode)

    def build(self, quads: Iterable[Quadruple]) -> DAG:
        for quad in quads:
            self.process(quad)
        return self.dag

    def process(self, quad: Quadruple) -> None:
        values = self.dag.values

        if quad.op == ASSIGN:
            if not quad.arg1:
                logger.debug("dropping empty assignment to '%s'", quad.result)
                return
            values.bind(quad.result, values.resolve_or_create_leaf(quad.arg1))
            return

        folded = try_fold(quad.op, quad.arg1, quad.arg2)
        if folded is not None:
            logger.debug("folded %s to %s", quad.to_text(), folded)
            values.bind(quad.result, values.resolve_or_create_leaf(folded))
            return

        if not quad.arg1:
            raise MalformedBlockError(f"operation without a first operand: {quad.to_text()}")

        left_id = values.resolve_or_create_leaf(quad.arg1)
        right_id = values.resolve_or_create_leaf(quad.arg2) if quad.arg2 else SENTINEL_NONE

        existing = self.dag.exprs.lookup(quad.op, left_id, right_id)
        if existing is not None:
            logger.debug("reusing node %d for %s", existing, quad.to_text())
            values.bind(quad.result, existing)
            return

        node = self.dag.add_interior(quad.op, left_id, right_id)
        self.dag.exprs.register(quad.op, left_id, right_id, node.id)
        values.bind(quad.result, node.id)
