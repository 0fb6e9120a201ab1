from typing import Any

import anthropic
import structlog

from app.config import Settings, settings
from app.errors import UpstreamGenerationError
from .report_templates import VEHICLE_PAGEVIEW_EVENT

log = structlog.get_logger()

FALLBACK_REPLY = "Sorry, I could not process your request."

PROMPT_TEMPLATE = """You are a Google Analytics expert specializing in automotive dealership data analysis.

You're helping a Florida car dealership analyze their website performance. The dealership sells new, used, and certified pre-owned (CPO) vehicles.

Key context:
- This is a Florida-based car dealership
- They track vehicle inventory page views with event "{pageview_event}"
- They have a custom dimension "item_condition" with values: new, used, cpo
- They care about: traffic by Florida cities, vehicle model performance, mobile vs desktop usage, lead generation, service vs sales traffic
{data_context}

User question: {message}

Please provide a detailed, actionable analysis formatted using markdown for better readability:

- Use **bold** for important metrics and key findings
- Use headers (##, ###) to structure your response
- Use bullet points and numbered lists for recommendations
- Use tables when showing data comparisons
- Use code blocks (```) for specific GA4 dimensions/metrics
- Format numbers clearly (e.g., **1,234 sessions** instead of 1234)

Structure your response with clear sections like:
## Key Findings
## Data Analysis
## Recommendations
## Next Steps

Make it professional and actionable for a marketing team."""


def build_prompt(message: str, data_context: str) -> str:
    return PROMPT_TEMPLATE.format(
        pageview_event=VEHICLE_PAGEVIEW_EVENT,
        data_context=data_context,
        message=message,
    )


class AnalystClient:
    def __init__(self, config: Settings, client: Any = None):
        self.config = config
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.config.anthropic_api_key:
                raise UpstreamGenerationError("Anthropic API key is not configured")
            self._client = anthropic.AsyncAnthropic(
                api_key=self.config.anthropic_api_key,
                timeout=self.config.llm_timeout_seconds,
            )
        return self._client

    async def generate(self, message: str, data_context: str) -> str:
        """Return the analyst's markdown answer for the question and data context."""
        client = self._get_client()
        try:
            response = await client.messages.create(
                model=self.config.anthropic_model,
                max_tokens=self.config.anthropic_max_tokens,
                messages=[{"role": "user", "content": build_prompt(message, data_context)}],
            )
        except anthropic.APIError as e:
            log.error("analyst_call_failed", error=str(e), model=self.config.anthropic_model)
            raise UpstreamGenerationError(str(e)) from e

        first = response.content[0] if response.content else None
        if first is None or getattr(first, "type", None) != "text":
            return FALLBACK_REPLY
        return first.text


analyst_client = AnalystClient(settings)
