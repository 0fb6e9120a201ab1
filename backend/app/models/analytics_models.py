from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Discriminator, Field, Tag


# ── Report outcome ────────────────────────────────────────────────────────────

class DateRange(BaseModel):
    start_date: str
    end_date: str


class ReportSuccess(BaseModel):
    success: Literal[True] = True
    row_count: int
    rows: list[dict[str, str]]
    totals: dict[str, str]
    date_range: DateRange


class ReportFailure(BaseModel):
    success: Literal[False] = False
    error: str


def _outcome_tag(value: Any) -> str:
    success = value.get("success") if isinstance(value, dict) else getattr(value, "success", None)
    return "success" if success else "failure"


# Tagged on the boolean ``success`` field.
ReportOutcome = Annotated[
    Union[Annotated[ReportSuccess, Tag("success")], Annotated[ReportFailure, Tag("failure")]],
    Discriminator(_outcome_tag),
]


# ── Chart ─────────────────────────────────────────────────────────────────────

class ChartSpec(BaseModel):
    rows: list[dict[str, str | int | float]]
    x_key: str
    y_keys: list[str]
    chart_kind: str = "bar"


# ── Chat API ──────────────────────────────────────────────────────────────────

class ChatRequest(BaseModel):
    # Optional here so a missing field reaches the handler and gets the
    # fixed "Message is required" error instead of a 422.
    message: str | None = None


class ChatResponse(BaseModel):
    response: str
    chart_data: ChartSpec | None = None


class ErrorResponse(BaseModel):
    error: str


# ── MCP ───────────────────────────────────────────────────────────────────────

class MCPToolCallRequest(BaseModel):
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class MCPToolCallResponse(BaseModel):
    content: list[dict[str, Any]]


class MCPToolsListResponse(BaseModel):
    tools: list[dict[str, Any]]


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str = "1.0.0"
