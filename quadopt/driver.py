"""Directory batch driver – one block per file.

Each matching file is read, optimized and (optionally) written to an
output directory under the same name.  A block that fails is logged and
recorded; the remaining blocks are still processed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from quadopt.config import DEFAULT_BLOCK_PATTERN
from quadopt.compiler.ir import MalformedBlockError
from quadopt.compiler.optimizer import optimize, resolve_alias_mode
from quadopt.compiler.quad_parser import read_block
from quadopt.compiler.report import BlockReport, build_report

logger = logging.getLogger(__name__)


@dataclass
class BatchResult:
    """Outcome of one directory run."""

    reports: Dict[str, BlockReport] = field(default_factory=dict)
    # file name -> failure reason
    failures: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    def names(self) -> List[str]:
        return sorted([*self.reports, *self.failures])


def optimize_file(path: Path, alias_mode: str) -> BlockReport:
    """Optimize the block in *path*; raises MalformedBlockError on failure."""
    quads = read_block(path)
    if not quads:
        raise MalformedBlockError("No valid quadruples found in input")
    return build_report(quads, optimize(quads, alias_mode), alias_mode)


def optimize_directory(
    src_dir: Union[str, Path],
    out_dir: Union[str, Path, None] = None,
    pattern: str = DEFAULT_BLOCK_PATTERN,
    alias_mode: Optional[str] = None,
) -> BatchResult:
    """Optimize every file in *src_dir* matching *pattern*."""
    src = Path(src_dir)
    if not src.is_dir():
        raise NotADirectoryError(f"{src} is not a directory")
    mode = resolve_alias_mode(alias_mode)
    dest = Path(out_dir) if out_dir is not None else None
    if dest is not None:
        dest.mkdir(parents=True, exist_ok=True)

    result = BatchResult()
    for path in sorted(p for p in src.glob(pattern) if p.is_file()):
        try:
            report = optimize_file(path, mode)
        except (MalformedBlockError, OSError, UnicodeDecodeError) as exc:
            logger.warning("%s: %s", path.name, exc)
            result.failures[path.name] = str(exc)
            continue

        result.reports[path.name] = report
        logger.info("%s: %d -> %d quadruple(s)", path.name, report.input_count, report.output_count)
        if dest is not None:
            (dest / path.name).write_text(report.text + "\n", encoding="utf-8")

    return result

