from dataclasses import dataclass, field

from .report_client import RawReport, RawRow
from .report_templates import ReportTemplate


@dataclass
class NormalizedReport:
    rows: list[dict[str, str]] = field(default_factory=list)
    totals: dict[str, str] = field(default_factory=dict)
    row_count: int = 0


def _zip_values(names: tuple[str, ...], values: list[str]) -> dict[str, str]:
    # Names the backend returned no value for still get a key so every row
    # of a report carries the same fields.
    return {name: (values[i] if i < len(values) else "") or "" for i, name in enumerate(names)}


def normalize_row(row: RawRow, template: ReportTemplate) -> dict[str, str]:
    result = _zip_values(template.dimensions, row.dimension_values)
    result.update(_zip_values(template.metrics, row.metric_values))
    return result


def normalize(raw: RawReport, template: ReportTemplate) -> NormalizedReport:
    """Turn positional backend rows into flat ``{field: value}`` mappings.

    Keys are the template's dimensions followed by its metrics. Totals only
    carry metric names and are empty when the backend sent no aggregate row.
    """
    rows = [normalize_row(row, template) for row in raw.rows]
    totals = _zip_values(template.metrics, raw.totals.metric_values) if raw.totals else {}
    return NormalizedReport(rows=rows, totals=totals, row_count=raw.row_count or 0)
