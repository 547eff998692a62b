#!/usr/bin/env python3
"""quadopt end-to-end demo.

Usage (after ``uvicorn quadopt.service.app:app``):
    python -m quadopt.demo.run_demo

The script:
1. Optimizes the sample block locally and prints the DAG.
2. Checks the optimized block against the original with the interpreter.
3. Sends the same block to the optimizer service.
4. Fetches the stored report back by its block id.
5. Runs a batch in which one block is malformed, to show isolation.
"""

from __future__ import annotations

import os

import httpx

from quadopt.config import SERVICE_URL
from quadopt.compiler.optimizer import build_dag, optimize
from quadopt.compiler.quad_parser import format_quadruples, parse_source
from quadopt.runtime.executor import execute_block

SERVICE = os.environ.get("QUADOPT_DEMO_URL", SERVICE_URL)

# ---------- sample block -------------------------------------------------
SAMPLE_BLOCK = """\
(*, A, B, T1)
(/, 6, 2, T2)
(-, T1, T2, T3)
(=, T3, , X)
(=, 5, , C)
(*, A, B, T4)
(=, 2, , C)
(+, 18, C, T5)
(*, T4, T5, T6)
(=, T6, , Y)
"""


def banner(msg: str) -> None:
    print(f"\n{'='*60}")
    print(f"  {msg}")
    print(f"{'='*60}")


def main() -> None:
    # ---- 1. Local optimization ----
    banner("1) Optimize locally")
    quads = parse_source(SAMPLE_BLOCK)
    print(format_quadruples(quads))
    print()
    print(build_dag(quads).dump())
    optimized = optimize(quads)
    print()
    print(format_quadruples(optimized))
    print(f"\n   {len(quads)} -> {len(optimized)} quadruples")

    # ---- 2. Equivalence check ----
    banner("2) Interpret original and optimized block")
    inputs = {"A": 4, "B": 5}
    before = execute_block(quads, inputs)
    after = execute_block(optimized, inputs)
    match = "✓" if before == after else "✗"
    print(f"   X={after['X']}  Y={after['Y']}  C={after['C']}  {match}")

    # ---- 3. Remote optimization ----
    banner(f"3) Optimize via service at {SERVICE}")
    client = httpx.Client(timeout=15.0)
    try:
        resp = client.post(f"{SERVICE}/optimize", json={"source": SAMPLE_BLOCK})
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        print(f"   Service unavailable: {exc}")
        client.close()
        return
    report = resp.json()
    print(f"   block_id = {report['block_id'][:16]}…")
    print(report["text"])

    # ---- 4. Fetch report ----
    banner("4) Fetch stored report")
    resp = client.get(f"{SERVICE}/reports/{report['block_id']}")
    resp.raise_for_status()
    print(f"   {resp.json()['input_count']} -> {resp.json()['output_count']} quadruples")

    # ---- 5. Batch with a malformed block ----
    banner("5) Batch with one malformed block")
    resp = client.post(
        f"{SERVICE}/optimize_batch",
        json={"blocks": {"good": SAMPLE_BLOCK, "bad": "(+, , B, T1)"}},
    )
    resp.raise_for_status()
    body = resp.json()
    for name, rep in body["results"].items():
        print(f"   {name}: ok ({rep['output_count']} quadruples)")
    for name, reason in body["errors"].items():
        print(f"   {name}: FAILED ({reason})")

    banner("DEMO COMPLETE")
    client.close()


if __name__ == "__main__":
    main()
