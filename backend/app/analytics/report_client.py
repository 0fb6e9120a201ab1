from dataclasses import dataclass, field
from typing import Protocol

from .report_templates import ReportTemplate


@dataclass
class RawRow:
    """One backend row; values are positionally aligned to the template."""

    dimension_values: list[str] = field(default_factory=list)
    metric_values: list[str] = field(default_factory=list)


@dataclass
class RawReport:
    rows: list[RawRow] = field(default_factory=list)
    totals: RawRow | None = None
    row_count: int | None = None


class ReportClient(Protocol):
    """Anything that can run a report template and hand back positional rows.

    Implementations raise ``BackendError`` for every failure of the backend call.
    """

    async def run_report(self, template: ReportTemplate) -> RawReport: ...
