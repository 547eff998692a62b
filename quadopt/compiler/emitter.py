"""Re-linearization of a block DAG into quadruples.

Only nodes that some variable still names at the end of the block are
required.  Required nodes are visited in ascending id order, each with a
memoized post-order walk (left child, right child, node), so every
operand is defined before the instruction that reads it.

Per visited node:

- interior: ``(op, left, right, first_alias)`` followed by one copy
  ``(=, first_alias, , alias)`` per additional alias
- literal leaf: ``(=, literal, , alias)`` for every alias
- variable leaf: one copy per alias beyond the first; the first alias is
  the block's input and is never redefined
"""

from __future__ import annotations

import logging
from typing import List, Set, Tuple

from quadopt.compiler.dag import DAG
from quadopt.compiler.ir import ASSIGN, SENTINEL_NONE, DAGNode, MalformedBlockError, Quadruple

logger = logging.getLogger(__name__)


class CodeEmitter:
    """Produces the optimized quadruple sequence for a finished ``DAG``."""

    def __init__(self, dag: DAG) -> None:
        self.dag = dag
        self._visited: Set[int] = set()
        self._out: List[Quadruple] = []

    def emit(self) -> List[Quadruple]:
        self._visited.clear()
        self._out = []
        required = sorted(self.dag.values.node_ids())
        logger.debug("emitting %d required node(s) out of %d", len(required), len(self.dag))
        for node_id in required:
            self._visit(node_id)
        return self._out

    # ------------------------------------------------------------------
    # Traversal
    # ------------------------------------------------------------------

    def _visit(self, root_id: int) -> None:
        """Post-order walk from *root_id* (left, right, node) without recursion.

        Long operand chains are deeper than the interpreter's recursion
        limit, so pending nodes are kept on an explicit stack of
        ``(node_id, children_done)`` frames.
        """
        stack: List[Tuple[int, bool]] = [(root_id, False)]
        while stack:
            node_id, children_done = stack.pop()
            if node_id in self._visited:
                continue
            node = self.dag.node(node_id)

            if not children_done:
                stack.append((node_id, True))
                # Pushed right first so the left subtree is finished first.
                if node.right is not None and node.right != SENTINEL_NONE:
                    stack.append((node.right, False))
                if node.left is not None:
                    stack.append((node.left, False))
                continue

            self._emit_node(node)
            self._visited.add(node_id)

    def _emit_node(self, node: DAGNode) -> None:
        if not node.is_leaf:
            self._emit_interior(node)
        elif node.is_literal:
            for alias in node.aliases:
                self._out.append(Quadruple.of(ASSIGN, node.label, "", alias))
        else:
            self._emit_copies(node.aliases)

    def _emit_interior(self, node: DAGNode) -> None:
        target = self._target_name(node)
        left = self._operand_name(node.left)
        right = "" if node.right == SENTINEL_NONE else self._operand_name(node.right)
        self._out.append(Quadruple.of(node.label, left, right, target))
        self._emit_copies(node.aliases)

    def _emit_copies(self, aliases: List[str]) -> None:
        if len(aliases) < 2:
            return
        first = aliases[0]
        for alias in aliases[1:]:
            self._out.append(Quadruple.of(ASSIGN, first, "", alias))

    def _target_name(self, node: DAGNode) -> str:
        if node.aliases:
            return node.aliases[0]
        # Only reachable in retract mode, for a child whose names all moved on.
        if node.retired_aliases:
            return node.retired_aliases[0]
        raise MalformedBlockError(f"interior node {node.id} has no name to hold its value")

    def _operand_name(self, node_id: int) -> str:
        child = self.dag.node(node_id)
        if child.aliases:
            return child.aliases[0]
        if not child.is_leaf and child.retired_aliases:
            return child.retired_aliases[0]
        return child.label
