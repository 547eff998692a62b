"""Optimizer FastAPI application.

Every request carries its own block(s); blocks never share state, so a
malformed block only fails itself.

Endpoints:
- POST /optimize        – optimize one block, return its report
- POST /optimize_batch  – optimize several named blocks independently
- POST /dag             – return the DAG built for one block
- GET  /reports/{id}    – fetch a report produced earlier
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from quadopt.config import MAX_BLOCK_QUADRUPLES
from quadopt.compiler.ir import MalformedBlockError, Quadruple
from quadopt.compiler.optimizer import build_dag, optimize, resolve_alias_mode
from quadopt.compiler.quad_parser import parse_source
from quadopt.compiler.report import BlockReport, build_report

logger = logging.getLogger(__name__)

# ------ request models (module-level for Pydantic / FastAPI compat) ------


class BlockRequest(BaseModel):
    """A block given either as text or as explicit quadruples."""

    source: Optional[str] = None
    quadruples: Optional[List[Quadruple]] = None
    alias_mode: Optional[str] = None


class BatchRequest(BaseModel):
    blocks: Dict[str, str]  # block name -> block text
    alias_mode: Optional[str] = None


class BatchResponse(BaseModel):
    results: Dict[str, BlockReport]
    errors: Dict[str, str]


class ServiceState:
    """Per-app mutable state."""

    def __init__(self) -> None:
        # block_id -> BlockReport
        self.reports: Dict[str, BlockReport] = {}


def _block_quads(req: BlockRequest) -> List[Quadruple]:
    if req.quadruples is not None:
        quads = list(req.quadruples)
    elif req.source is not None:
        quads = parse_source(req.source)
    else:
        raise HTTPException(400, "Either 'source' or 'quadruples' is required")
    if not quads:
        raise HTTPException(400, "No valid quadruples found in input")
    if len(quads) > MAX_BLOCK_QUADRUPLES:
        raise HTTPException(413, f"Block exceeds {MAX_BLOCK_QUADRUPLES} quadruples")
    return quads


def _alias_mode(requested: Optional[str]) -> str:
    try:
        return resolve_alias_mode(requested)
    except ValueError as exc:
        raise HTTPException(400, str(exc))


def _optimize_block(state: ServiceState, quads: List[Quadruple], mode: str) -> BlockReport:
    """Optimize one block and remember its report; raises MalformedBlockError."""
    out = optimize(quads, mode)
    report = build_report(quads, out, mode)
    state.reports[report.block_id] = report
    return report


def create_app(state: ServiceState | None = None) -> FastAPI:
    """Factory that creates an optimizer app with its own report store."""
    if state is None:
        state = ServiceState()

    app = FastAPI(title="quadopt Block Optimizer")

    @app.post("/optimize")
    async def optimize_endpoint(req: BlockRequest) -> BlockReport:
        quads = _block_quads(req)
        mode = _alias_mode(req.alias_mode)
        try:
            return _optimize_block(state, quads, mode)
        except MalformedBlockError as exc:
            logger.info("rejected malformed block: %s", exc)
            raise HTTPException(422, str(exc))

    @app.post("/optimize_batch")
    async def optimize_batch(req: BatchRequest) -> BatchResponse:
        mode = _alias_mode(req.alias_mode)
        results: Dict[str, BlockReport] = {}
        errors: Dict[str, str] = {}
        for name, source in req.blocks.items():
            quads = parse_source(source)
            if not quads:
                errors[name] = "No valid quadruples found in input"
                continue
            if len(quads) > MAX_BLOCK_QUADRUPLES:
                errors[name] = f"Block exceeds {MAX_BLOCK_QUADRUPLES} quadruples"
                continue
            try:
                results[name] = _optimize_block(state, quads, mode)
            except MalformedBlockError as exc:
                logger.info("block '%s' failed: %s", name, exc)
                errors[name] = str(exc)
        return BatchResponse(results=results, errors=errors)

    @app.post("/dag")
    async def dag_endpoint(req: BlockRequest) -> Dict[str, Any]:
        quads = _block_quads(req)
        mode = _alias_mode(req.alias_mode)
        try:
            return build_dag(quads, mode).to_dict()
        except MalformedBlockError as exc:
            raise HTTPException(422, str(exc))

    @app.get("/reports/{block_id}")
    async def get_report(block_id: str) -> BlockReport:
        report = state.reports.get(block_id)
        if report is None:
            raise HTTPException(404, "Report not found")
        return report

    return app


app = create_app()
