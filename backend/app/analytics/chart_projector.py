import re

from app.models.analytics_models import ChartSpec

DEFAULT_PREVIEW_ROWS = 10
DEFAULT_CHART_KIND = "bar"

# Whole-string decimal literal: "120", "-3.5", ".25", "1e3". Rejects "12abc",
# "nan", "inf" and empty strings.
_NUMERIC = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


def is_numeric(value: str) -> bool:
    return bool(_NUMERIC.match(value.strip()))


def coerce_value(value: str) -> str | int | float:
    text = value.strip()
    match = _NUMERIC.match(text)
    if not match:
        return value
    if "." not in text and match.group(3) is None:
        return int(text)
    return float(text)


def project(rows: list[dict[str, str]], preview_size: int = DEFAULT_PREVIEW_ROWS) -> ChartSpec | None:
    """Build a bar-chart spec from normalized rows, or None when there is nothing to plot.

    Axis roles come from the first row: its first non-numeric field is the
    category axis and every numeric field is a series. Later rows are coerced
    value by value and do not change the axis choice.
    """
    if not rows:
        return None

    first = rows[0]
    keys = list(first.keys())
    if not keys:
        return None

    x_key = next((k for k in keys if not is_numeric(first[k])), keys[0])
    y_keys = [k for k in keys if k != x_key and is_numeric(first[k])]

    preview = [{k: coerce_value(v) for k, v in row.items()} for row in rows[:preview_size]]

    return ChartSpec(rows=preview, x_key=x_key, y_keys=y_keys, chart_kind=DEFAULT_CHART_KIND)
