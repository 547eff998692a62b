"""Reference interpreter for quadruple blocks.

Runs a block instruction by instruction over an environment of integer
variables.  It is used to check that an optimized block leaves every
variable with the same value as the original one.

Supported operators: ``=`` (copy) and ``+ - * /``.  Division truncates
toward zero, the same rule the constant folder applies.  An empty
``arg2`` evaluates as ``0``.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping

from quadopt.compiler.folding import parse_literal, truncating_div
from quadopt.compiler.ir import ASSIGN, MalformedBlockError, Quadruple, is_numeric_literal


class ExecutionError(Exception):
    """Raised when a block cannot be executed."""


def _operand(text: str, env: Mapping[str, int]) -> int:
    if not text:
        return 0
    if is_numeric_literal(text):
        try:
            return parse_literal(text)
        except MalformedBlockError as exc:
            raise ExecutionError(str(exc)) from exc
    if text not in env:
        raise ExecutionError(f"Unbound variable '{text}'")
    return env[text]


def execute_block(quads: Iterable[Quadruple], inputs: Mapping[str, int]) -> Dict[str, int]:
    """Execute *quads* starting from *inputs*; return the final environment."""
    env: Dict[str, int] = dict(inputs)

    for quad in quads:
        op = quad.op
        if op == ASSIGN:
            if not quad.arg1:
                continue
            env[quad.result] = _operand(quad.arg1, env)
            continue

        if not quad.arg1:
            raise ExecutionError(f"Missing first operand in {quad.to_text()}")
        a_val = _operand(quad.arg1, env)
        b_val = _operand(quad.arg2, env)
        if op == "+":
            env[quad.result] = a_val + b_val
        elif op == "-":
            env[quad.result] = a_val - b_val
        elif op == "*":
            env[quad.result] = a_val * b_val
        elif op == "/":
            if b_val == 0:
                raise ExecutionError(f"Division by zero in {quad.to_text()}")
            env[quad.result] = truncating_div(a_val, b_val)
        else:
            raise ExecutionError(f"Unknown operator '{op}'")

    return env
