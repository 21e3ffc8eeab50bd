"""
minic HTTP API
==============
FastAPI application exposing the analyser to editors and other tools.

Launch:
    python -m minic serve --port 8000
    python -m minic.server

Endpoints:
    GET  /api/health    → liveness and version
    POST /api/analyze   → run one analysis, return diagnostic + events
    POST /api/tokens    → token stream of a source text
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from pydantic import BaseModel, Field

from . import __version__
from .config import AnalysisConfig
from .lexer import Lexer, TokenKind
from .reporter import RecordingReporter
from .session import AnalysisSession

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
#  App Setup
# ─────────────────────────────────────────────────────────────

app = FastAPI(title="minic", version=__version__)


# ─────────────────────────────────────────────────────────────
#  Request Models
# ─────────────────────────────────────────────────────────────

class AnalyzeRequest(BaseModel):
    source: str
    max_symbols: int | None = Field(default=None, ge=1)
    max_depth: int | None = Field(default=100, ge=1)
    max_lexeme_length: int | None = Field(default=None, ge=1)
    trace: bool = True


class TokensRequest(BaseModel):
    source: str


# ─────────────────────────────────────────────────────────────
#  Routes
# ─────────────────────────────────────────────────────────────

@app.get("/api/health")
async def api_health():
    return {"status": "ok", "version": __version__}


@app.post("/api/analyze")
async def api_analyze(req: AnalyzeRequest):
    """Analyse ``req.source``; a rejected program is a 200 with ok=false."""
    config = AnalysisConfig(
        max_symbols=req.max_symbols,
        max_depth=req.max_depth,
        max_lexeme_length=req.max_lexeme_length,
        trace=req.trace,
    )
    reporter = RecordingReporter()
    result = AnalysisSession(req.source, config, reporter).run()
    logger.info("analyze: %d chars, ok=%s", len(req.source), result.ok)
    body = result.to_dict()
    body["events"] = reporter.to_list()
    return body


@app.post("/api/tokens")
async def api_tokens(req: TokensRequest):
    tokens = []
    for token in Lexer(req.source):
        tokens.append({
            "kind": token.kind.name,
            "lexeme": None if token.kind == TokenKind.EOF else token.lexeme,
            "line": token.line,
            "column": token.column,
        })
    return {"tokens": tokens}


def run_server(host: str = "127.0.0.1", port: int = 8000):
    """Launch the API with uvicorn."""
    import uvicorn

    print(f"\n─── minic API ───")
    print(f"  http://{host}:{port}/docs")
    print(f"  Press Ctrl+C to stop\n")

    uvicorn.run(app, host=host, port=port, log_level="warning")


if __name__ == "__main__":
    run_server()
