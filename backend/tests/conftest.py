import pytest

from app.analytics.query_engine import ChatQueryEngine
from app.analytics.report_client import RawReport, RawRow
from app.main import app, get_query_engine, limiter


class FakeReportClient:
    def __init__(self, raw: RawReport | None = None, error: Exception | None = None):
        self.raw = raw or RawReport()
        self.error = error
        self.calls = []

    async def run_report(self, template):
        self.calls.append(template)
        if self.error:
            raise self.error
        return self.raw


class FakeAnalyst:
    def __init__(self, reply: str = "## Key Findings\nLooks good.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def generate(self, message, data_context):
        self.calls.append((message, data_context))
        if self.error:
            raise self.error
        return self.reply


@pytest.fixture
def city_report() -> RawReport:
    return RawReport(
        rows=[
            RawRow(dimension_values=["Miami"], metric_values=["120", "85"]),
            RawRow(dimension_values=["Tampa"], metric_values=["64", "70"]),
        ],
        totals=RawRow(metric_values=["184", "155"]),
        row_count=2,
    )


@pytest.fixture
def make_engine():
    def _make(report_client=None, analyst=None):
        return ChatQueryEngine(report_client or FakeReportClient(), analyst or FakeAnalyst())
    return _make


@pytest.fixture
def use_engine():
    """Route the API's engine dependency to the given engine for one test."""
    def _use(engine: ChatQueryEngine) -> ChatQueryEngine:
        app.dependency_overrides[get_query_engine] = lambda: engine
        return engine
    yield _use
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def _reset_rate_limits():
    limiter.reset()
    yield
