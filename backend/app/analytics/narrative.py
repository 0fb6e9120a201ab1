import json

from app.models.analytics_models import ReportFailure, ReportOutcome

TOP_RESULTS_LIMIT = 10
FIELD_SEPARATOR = ", "


def _format_row(row: dict[str, str]) -> str:
    return FIELD_SEPARATOR.join(f"{key}: {value}" for key, value in row.items())


def describe(outcome: ReportOutcome | None) -> str:
    """Render the data context block that is embedded in the analyst prompt.

    Returns an empty string when no report was run.
    """
    if outcome is None:
        return ""

    if isinstance(outcome, ReportFailure):
        return (
            "\n\nDATA FETCH ERROR: " + outcome.error + "\n"
            "Please provide analysis based on typical dealership patterns "
            "and suggest how to get this data."
        )

    top = "\n".join(
        f"{i}. {_format_row(row)}" for i, row in enumerate(outcome.rows[:TOP_RESULTS_LIMIT], start=1)
    )
    return (
        "\n\nREAL GA4 DATA FROM YOUR DEALERSHIP:\n"
        f"Date Range: {outcome.date_range.start_date} to {outcome.date_range.end_date}\n"
        f"Total Rows: {outcome.row_count}\n"
        "\n"
        f"Totals: {json.dumps(outcome.totals, indent=2)}\n"
        "\n"
        "Top Results:\n"
        f"{top}\n"
        "\n"
        "Please analyze this ACTUAL data from the dealership's GA4 account."
    )
