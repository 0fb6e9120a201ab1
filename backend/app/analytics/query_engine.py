from dataclasses import dataclass
from typing import Any

import structlog

from app.config import settings
from app.errors import BackendError, ValidationError
from app.models.analytics_models import (
    ChartSpec,
    DateRange,
    ReportFailure,
    ReportOutcome,
    ReportSuccess,
)
from .chart_projector import project
from .claude_client import analyst_client
from .ga4_client import ga4_client
from .intent_router import select_rule
from .narrative import describe
from .normalizer import normalize
from .report_client import ReportClient
from .report_templates import TEMPLATES, ReportTemplate

log = structlog.get_logger()

# Pipeline:
#   1. intent_router.select_rule → template (or none)
#   2. report_client.run_report(template) → RawReport, BackendError → ReportFailure
#   3. normalizer.normalize → rows + totals
#   4. chart_projector.project / narrative.describe
#   5. analyst.generate(message, narrative)


@dataclass
class ChatResult:
    response: str
    chart: ChartSpec | None = None


class ChatQueryEngine:
    def __init__(self, report_client: ReportClient, analyst: Any, preview_rows: int = 10):
        self.report_client = report_client
        self.analyst = analyst
        self.preview_rows = preview_rows

    async def run_report(self, template: ReportTemplate) -> ReportOutcome:
        try:
            raw = await self.report_client.run_report(template)
        except BackendError as e:
            log.warning("report_fetch_failed", error=e.message)
            return ReportFailure(error=e.message)

        report = normalize(raw, template)
        return ReportSuccess(
            row_count=report.row_count,
            rows=report.rows,
            totals=report.totals,
            date_range=DateRange(start_date=template.start_date, end_date=template.end_date),
        )

    def chart_for(self, outcome: ReportOutcome | None) -> ChartSpec | None:
        if not isinstance(outcome, ReportSuccess):
            return None
        return project(outcome.rows, preview_size=self.preview_rows)

    async def answer(self, message: str | None) -> ChatResult:
        if not message or not message.strip():
            raise ValidationError("Message is required")

        rule = select_rule(message)
        outcome: ReportOutcome | None = None
        if rule is not None:
            log.info("report_selected", rule=rule.name)
            outcome = await self.run_report(rule.template)
        else:
            log.info("report_skipped", reason="no_matching_intent")

        chart = self.chart_for(outcome)
        response = await self.analyst.generate(message, describe(outcome))
        return ChatResult(response=response, chart=chart)

    async def run_named_report(self, name: str) -> dict[str, Any]:
        """Run a catalogue template directly and return outcome + chart as plain data."""
        outcome = await self.run_report(TEMPLATES[name])
        chart = self.chart_for(outcome)
        return {
            "template": name,
            "outcome": outcome.model_dump(),
            "chart_data": chart.model_dump() if chart else None,
        }


query_engine = ChatQueryEngine(ga4_client, analyst_client, preview_rows=settings.chart_preview_rows)
