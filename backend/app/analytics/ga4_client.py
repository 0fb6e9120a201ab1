import asyncio
from typing import Any

import structlog
from google.analytics.data_v1beta import BetaAnalyticsDataAsyncClient
from google.analytics.data_v1beta.types import (
    DateRange,
    Dimension,
    Metric,
    MetricAggregation,
    RunReportRequest,
)
from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account

from app.config import Settings, settings
from app.errors import BackendError
from .report_client import RawReport, RawRow
from .report_templates import ReportTemplate

log = structlog.get_logger()

# Everything the transport or auth layer can raise for a failed call.
# Timeouts and transport-level cancellation arrive as GoogleAPIError subclasses
# or asyncio.TimeoutError from the wait_for guard below.
_BACKEND_FAILURES = (GoogleAPIError, GoogleAuthError, asyncio.TimeoutError, OSError)


def build_request(property_name: str, template: ReportTemplate) -> RunReportRequest:
    return RunReportRequest(
        property=property_name,
        dimensions=[Dimension(name=name) for name in template.dimensions],
        metrics=[Metric(name=name) for name in template.metrics],
        date_ranges=[DateRange(start_date=template.start_date, end_date=template.end_date)],
        limit=template.limit,
        metric_aggregations=[MetricAggregation.TOTAL],
    )


def _to_raw_row(row: Any) -> RawRow:
    return RawRow(
        dimension_values=[v.value for v in row.dimension_values],
        metric_values=[v.value for v in row.metric_values],
    )


def to_raw_report(response: Any) -> RawReport:
    """Flatten a GA4 RunReportResponse into the backend-neutral RawReport."""
    totals = list(response.totals)
    return RawReport(
        rows=[_to_raw_row(row) for row in response.rows],
        totals=_to_raw_row(totals[0]) if totals else None,
        row_count=response.row_count or 0,
    )


class GA4ReportClient:
    def __init__(self, config: Settings, client: Any = None):
        self.config = config
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            creds_path = self.config.google_application_credentials
            if creds_path:
                try:
                    credentials = service_account.Credentials.from_service_account_file(creds_path)
                except (OSError, ValueError, GoogleAuthError) as e:
                    log.warning("ga4_credentials_invalid", path=creds_path, error=str(e))
                    raise BackendError(f"Could not load GA4 service account credentials: {e}") from e
                self._client = BetaAnalyticsDataAsyncClient(credentials=credentials)
            else:
                # Application Default Credentials
                self._client = BetaAnalyticsDataAsyncClient()
        return self._client

    async def run_report(self, template: ReportTemplate) -> RawReport:
        if not self.config.ga4_property_id:
            raise BackendError("GA4 property id is not configured")

        request = build_request(self.config.ga4_property, template)
        timeout = self.config.report_timeout_seconds

        try:
            client = self._get_client()
            response = await asyncio.wait_for(client.run_report(request=request), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise BackendError(f"GA4 request timed out after {timeout:g}s") from e
        except _BACKEND_FAILURES as e:
            message = getattr(e, "message", None) or str(e) or type(e).__name__
            log.warning("ga4_report_failed", error=message, dimensions=list(template.dimensions))
            raise BackendError(message) from e

        return to_raw_report(response)


ga4_client = GA4ReportClient(settings)
