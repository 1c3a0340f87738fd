"""FastAPI application exposing the highlight pipeline over HTTP.

WHY: Rendering front ends post source text and need back the nested
Lines structure as JSON. FastAPI gives request validation and OpenAPI
docs for free.

HOW: POST /highlight parses the body into HighlightRequest, runs
highlight_source() with the requested (or default) language and rule,
and returns the wire JSON. Handlers are plain ``def`` functions, so
FastAPI runs them in its threadpool; the pipeline shares no state, so
requests run in parallel without locks. The default language's query is
compiled at startup; a query that does not compile stops the server.

RULES:
- Body that is not valid JSON or not {"code": str} → 400 text/plain
  "Invalid JSON payload"
- Unknown language → 404 ErrorResponse
- Malformed capture spans → 422 ErrorResponse
- Query compilation failure → 500 ErrorResponse
- Success → 200 application/json, [[{"node_type", "element_text"}, ...], ...]
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse, Response

from syntax_lines import __version__
from syntax_lines.config import API_HOST, API_PORT, DEFAULT_LANGUAGE, DEFAULT_RULE, FILL_TRAILING, LOG_LEVEL
from syntax_lines.core.ir import DuplicateRule, lines_to_json
from syntax_lines.core.normalizer import MalformedSpanError
from syntax_lines.core.pipeline import highlight_source
from syntax_lines.parser.captures import (
    QueryCompilationError,
    UnsupportedLanguageError,
    available_languages,
    load_query,
)
from syntax_lines.server.models import (
    ErrorResponse,
    HealthResponse,
    HighlightRequest,
    LanguageListResponse,
    TokenModel,
)

logger = logging.getLogger(__name__)

INVALID_PAYLOAD_MESSAGE = "Invalid JSON payload"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Compile the default language's query before serving requests."""
    load_query(DEFAULT_LANGUAGE)
    logger.info("Highlight service ready (default language: %s)", DEFAULT_LANGUAGE)
    yield


app = FastAPI(
    lifespan=lifespan,
    title="Syntax Lines API",
    description=(
        "Turns source code into line-structured, typed text fragments "
        "for syntax-highlighted rendering."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


@app.exception_handler(RequestValidationError)
async def _invalid_payload_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
    return PlainTextResponse(INVALID_PAYLOAD_MESSAGE, status_code=400)


# ---------------------------------------------------------------------------
# POST /highlight
# ---------------------------------------------------------------------------


@app.post(
    "/highlight",
    response_model=List[List[TokenModel]],
    tags=["highlight"],
    summary="Highlight source code",
    description=(
        "Parse the submitted code, resolve duplicate captures, and return "
        "one list of typed fragments per source line."
    ),
    responses={
        400: {"description": "Body is not valid JSON or lacks a string 'code' field.",
              "content": {"text/plain": {}}},
        404: {"model": ErrorResponse, "description": "No highlight query for the language."},
        422: {"model": ErrorResponse, "description": "The parser reported malformed capture spans."},
        500: {"model": ErrorResponse, "description": "The highlight query failed to compile."},
    },
)
def highlight(body: HighlightRequest) -> Response:
    language = body.language or DEFAULT_LANGUAGE
    rule = DuplicateRule(body.rule.value) if body.rule else DEFAULT_RULE

    try:
        lines = highlight_source(body.code, language, rule=rule, fill_trailing=FILL_TRAILING)
    except UnsupportedLanguageError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except MalformedSpanError as exc:
        logger.exception("Malformed capture span while highlighting %s", language)
        raise HTTPException(status_code=422, detail=str(exc))
    except QueryCompilationError as exc:
        logger.exception("Highlight query for %s does not compile", language)
        raise HTTPException(status_code=500, detail=str(exc))

    return Response(content=lines_to_json(lines), media_type="application/json")


# ---------------------------------------------------------------------------
# GET /languages, GET /health
# ---------------------------------------------------------------------------


@app.get(
    "/languages",
    response_model=LanguageListResponse,
    tags=["highlight"],
    summary="List supported languages",
)
def list_languages() -> LanguageListResponse:
    return LanguageListResponse(languages=available_languages(), default=DEFAULT_LANGUAGE)


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api():
    """Entry point for the syntax-lines-api console script."""
    import uvicorn

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    uvicorn.run(app, host=API_HOST, port=API_PORT)
