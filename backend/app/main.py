import json
import logging

import structlog
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from app.config import settings
from app.errors import ChatError, UpstreamGenerationError, ValidationError
from app.models.analytics_models import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    MCPToolCallRequest,
    MCPToolCallResponse,
    MCPToolsListResponse,
    HealthResponse,
)
from app.mcp.server import NATURAL_LANGUAGE_CAPABILITY, mcp_handler
from app.mcp.validators import validate_tool_arguments
from app.analytics.query_engine import ChatQueryEngine, query_engine

structlog.configure(
    wrapper_class=structlog.make_filtering_bound_logger(
        logging.getLevelName(settings.log_level.upper())
    ),
)
log = structlog.get_logger()

GENERIC_ERROR = "Failed to process your request. Please try again."
MESSAGE_REQUIRED = "Message is required"
CHAT_PATH = "/api/chat"

# ── Rate limiter ──────────────────────────────────────────────────────────────

def _get_user_identity(request: Request) -> str:
    """
    Identify the caller for rate limiting.
    Priority:
      1. X-Forwarded-For first hop, set by the load balancer
      2. direct remote addr fallback (local dev)
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


limiter = Limiter(key_func=_get_user_identity)

# ── App ───────────────────────────────────────────────────────────────────────
app = FastAPI(
    title="Dealership Analytics Chat Backend",
    description="FastAPI + MCP server answering dealership GA4 questions",
    version="1.0.0",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins_list,
    allow_credentials=True,
    allow_methods=["POST", "GET"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def _validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content=ErrorResponse(error=exc.message).model_dump())


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError):
    # Chat clients only ever see the {"error": ...} shape.
    if request.url.path == CHAT_PATH:
        return JSONResponse(status_code=400, content=ErrorResponse(error=MESSAGE_REQUIRED).model_dump())
    return await request_validation_exception_handler(request, exc)


@app.exception_handler(UpstreamGenerationError)
async def _upstream_error_handler(request: Request, exc: UpstreamGenerationError):
    log.error("analyst_unavailable", error=exc.message)
    return JSONResponse(status_code=500, content=ErrorResponse(error=GENERIC_ERROR).model_dump())


def get_query_engine() -> ChatQueryEngine:
    return query_engine


# ── Chat endpoint ─────────────────────────────────────────────────────────────

@app.post(CHAT_PATH, response_model=ChatResponse)
@limiter.limit(f"{settings.rate_limit_per_hour}/hour")
async def chat(
    request: Request,
    body: ChatRequest,
    engine: ChatQueryEngine = Depends(get_query_engine),
):
    """Answer a free-text analytics question, with a chart when data came back."""
    try:
        result = await engine.answer(body.message)
    except ChatError:
        raise
    except Exception:
        log.exception("chat_failed")
        return JSONResponse(status_code=500, content=ErrorResponse(error=GENERIC_ERROR).model_dump())

    return ChatResponse(response=result.response, chart_data=result.chart)


# ── MCP endpoints ─────────────────────────────────────────────────────────────

@app.post("/mcp/tools/list", response_model=MCPToolsListResponse)
async def mcp_list_tools():
    """MCP: return the analytics tools with their JSON schemas."""
    return MCPToolsListResponse(tools=mcp_handler.get_tools_list())


@app.post("/mcp/tools/call", response_model=MCPToolCallResponse)
@limiter.limit(f"{settings.rate_limit_per_hour}/hour")
async def mcp_call_tool(
    request: Request,
    body: MCPToolCallRequest,
    engine: ChatQueryEngine = Depends(get_query_engine),
):
    """MCP: validate and execute an analytics tool, return result in MCP format."""
    tool_name = body.name

    if not mcp_handler.tool_exists(tool_name):
        raise HTTPException(status_code=404, detail=f"Tool '{tool_name}' not found")

    validate_tool_arguments(tool_name, body.arguments)

    capability = mcp_handler.map_to_capability(tool_name)

    log.info("mcp_tool_call", tool=tool_name, capability=capability)

    try:
        if capability == NATURAL_LANGUAGE_CAPABILITY:
            answer = await engine.answer(body.arguments["query"])
            result = {
                "response": answer.response,
                "chart_data": answer.chart.model_dump() if answer.chart else None,
            }
        else:
            result = await engine.run_named_report(capability)
    except ChatError:
        raise
    except Exception:
        log.exception("mcp_tool_failed", tool=tool_name)
        return JSONResponse(status_code=500, content=ErrorResponse(error=GENERIC_ERROR).model_dump())

    return MCPToolCallResponse(
        content=[{"type": "text", "text": json.dumps(result, default=str)}]
    )


# ── Health ────────────────────────────────────────────────────────────────────

@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        status="healthy",
        service="dealership-analytics-backend",
    )


@app.get("/")
async def root():
    return {
        "service": "dealership analytics chat backend",
        "docs": "/docs",
        "health": "/health",
        "chat": "/api/chat",
        "mcp_tools": "/mcp/tools/list",
    }
