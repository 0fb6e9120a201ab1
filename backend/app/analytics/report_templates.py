# Fixed GA4 report shapes the chat pipeline can run.
# Date values are GA4 relative tokens and are sent to the API as-is.

from dataclasses import dataclass

DEFAULT_LIMIT = 100

# Custom dimension registered on the dealership property (values: new, used, cpo)
ITEM_CONDITION_DIMENSION = "customEvent:item_condition"

# Event fired on every vehicle detail page view
VEHICLE_PAGEVIEW_EVENT = "asc_item_pageviews"


@dataclass(frozen=True)
class ReportTemplate:
    dimensions: tuple[str, ...]
    metrics: tuple[str, ...]
    start_date: str
    end_date: str
    limit: int = DEFAULT_LIMIT


TEMPLATES: dict[str, ReportTemplate] = {
    "traffic_by_city": ReportTemplate(
        dimensions=("city",),
        metrics=("activeUsers", "sessions"),
        start_date="7daysAgo",
        end_date="yesterday",
        limit=20,
    ),
    "traffic_by_device": ReportTemplate(
        dimensions=("deviceCategory",),
        metrics=("activeUsers", "sessions", "bounceRate"),
        start_date="7daysAgo",
        end_date="yesterday",
    ),
    "daily_traffic": ReportTemplate(
        dimensions=("date",),
        metrics=("activeUsers", "sessions"),
        start_date="7daysAgo",
        end_date="yesterday",
    ),
    "vehicle_inventory_views": ReportTemplate(
        dimensions=("eventName", ITEM_CONDITION_DIMENSION),
        metrics=("eventCount",),
        start_date="30daysAgo",
        end_date="yesterday",
        limit=50,
    ),
    "campaign_sources": ReportTemplate(
        dimensions=("sessionSource", "sessionMedium"),
        metrics=("sessions", "conversions"),
        start_date="30daysAgo",
        end_date="yesterday",
        limit=20,
    ),
}
