"""quadopt - command line front end for the block optimizer.

Usage examples:
  quadopt block.txt                 optimize one block, print the result
  quadopt blocks/ -o optimized/     optimize every block file in a directory
  quadopt --dump-dag < block.txt    read stdin (until an empty line)

An empty stdin block is an error (exit code 1); there is no fallback to a
built-in sample block.  The sample lives in ``quadopt.demo.run_demo``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from quadopt import config
from quadopt.compiler.ir import MalformedBlockError, Quadruple
from quadopt.compiler.optimizer import build_dag, optimize
from quadopt.compiler.quad_parser import format_quadruples, parse_quadruples, read_block
from quadopt.driver import optimize_directory


def read_stdin_block(stream: TextIO) -> List[Quadruple]:
    """Read lines from *stream* up to the first empty line."""
    lines: List[str] = []
    for line in stream:
        line = line.rstrip("\r\n")
        if not line:
            break
        lines.append(line)
    return parse_quadruples(lines)


def _run_block(quads: List[Quadruple], args: argparse.Namespace) -> int:
    if not quads:
        print("Error: No valid quadruples found in input.", file=sys.stderr)
        return 1
    try:
        if args.dump_dag:
            print(build_dag(quads, args.alias_mode).dump())
            print()
        out = optimize(quads, args.alias_mode)
    except MalformedBlockError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    text = format_quadruples(out)
    if args.output:
        Path(args.output).write_text(text + "\n", encoding="utf-8")
    else:
        print(text)
    return 0


def _run_directory(src: Path, args: argparse.Namespace) -> int:
    result = optimize_directory(src, args.output, args.pattern, args.alias_mode)
    for name in result.names():
        if name in result.failures:
            print(f"{name}: FAILED ({result.failures[name]})", file=sys.stderr)
        else:
            report = result.reports[name]
            print(f"{name}: {report.input_count} -> {report.output_count}")
            if args.output is None:
                print(report.text)
    return 0 if result.ok else 1


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    ap = argparse.ArgumentParser(prog="quadopt", description="Basic-block DAG optimizer for quadruples")
    ap.add_argument("input", nargs="?", default="-", help="Block file, directory of blocks, or '-' for stdin")
    ap.add_argument("-o", dest="output", help="Output file (single block) or directory (batch)")
    ap.add_argument("--pattern", default=config.DEFAULT_BLOCK_PATTERN, help="Block file glob in batch mode")
    ap.add_argument("--alias-mode", choices=config.ALIAS_MODES, default=config.ALIAS_MODE,
                    help="Handling of variable names rebound to another value")
    ap.add_argument("--dump-dag", action="store_true", help="Print the DAG before the optimized block")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args(argv)
    # The default comes from QUADOPT_ALIAS_MODE and bypasses choices.
    if args.alias_mode not in config.ALIAS_MODES:
        ap.error(f"unknown alias mode '{args.alias_mode}' (set by QUADOPT_ALIAS_MODE)")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.LOG_LEVEL,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.input == "-":
        return _run_block(read_stdin_block(sys.stdin), args)

    src = Path(args.input)
    if src.is_dir():
        return _run_directory(src, args)
    try:
        quads = read_block(src)
    except OSError as exc:
        print(f"Error: cannot read {src}: {exc}", file=sys.stderr)
        return 1
    return _run_block(quads, args)


if __name__ == "__main__":
    sys.exit(main())
