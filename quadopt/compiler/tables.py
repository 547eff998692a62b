"""Lookup tables used while building a block DAG.

- ``ValueTable``: variable name → id of the node currently holding its
  value (last write wins).
- ``ExpressionCache``: ``(op, left_id, right_id)`` → id of the interior
  node that already computes it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterator, Optional, Tuple

from quadopt.config import ALIAS_MODES
from quadopt.compiler.ir import is_numeric_literal

if TYPE_CHECKING:
    from quadopt.compiler.dag import DAG

ExprKey = Tuple[str, int, int]


class ValueTable:
    """Current variable bindings of a block.

    In ``accumulate`` mode a rebound name stays in the alias list of the
    node it used to denote.  In ``retract`` mode it is moved from that
    node's ``aliases`` to its ``retired_aliases``.
    """

    def __init__(self, dag: "DAG", alias_mode: str = "accumulate") -> None:
        if alias_mode not in ALIAS_MODES:
            raise ValueError(f"unknown alias mode '{alias_mode}'")
        self._dag = dag
        self.alias_mode = alias_mode
        self._bindings: Dict[str, int] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._bindings

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def get(self, name: str) -> Optional[int]:
        return self._bindings.get(name)

    def items(self):
        return self._bindings.items()

    def node_ids(self) -> set:
        """Ids of every node some variable currently names."""
        return set(self._bindings.values())

    def resolve_or_create_leaf(self, text: str) -> int:
        """Return the node bound to *text*, creating a leaf if unbound.

        A new variable leaf binds itself and carries its own name as its
        only alias.  A new literal leaf is neither bound nor aliased.
        """
        if not text:
            raise ValueError("cannot resolve an empty operand")
        node_id = self._bindings.get(text)
        if node_id is not None:
            return node_id

        node = self._dag.add_leaf(text)
        if not is_numeric_literal(text):
            self._bindings[text] = node.id
            node.aliases.append(text)
        return node.id

    def bind(self, name: str, node_id: int) -> None:
        """Make *name* denote node *node_id* and record it as an alias."""
        target = self._dag.node(node_id)
        previous = self._bindings.get(name)

        if self.alias_mode == "retract" and previous is not None:
            if previous == node_id and name in target.aliases:
                return
            if previous != node_id:
                self._retract(name, previous)

        self._bindings[name] = node_id
        target.aliases.append(name)

    def _retract(self, name: str, node_id: int) -> None:
        old = self._dag.node(node_id)
        if name not in old.aliases:
            return
        old.aliases[:] = [a for a in old.aliases if a != name]
        if name not in old.retired_aliases:
            old.retired_aliases.append(name)


class ExpressionCache:
    """Maps an operation over two resolved operands to the node computing it."""

    def __init__(self) -> None:
        self._entries: Dict[ExprKey, int] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def lookup(self, op: str, left_id: int, right_id: int) -> Optional[int]:
        return self._entries.get((op, left_id, right_id))

    def register(self, op: str, left_id: int, right_id: int, node_id: int) -> None:
        self._entries[(op, left_id, right_id)] = node_id
