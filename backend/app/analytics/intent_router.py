# Keyword router: maps a chat message to one of the fixed report templates.
#
# Rules are evaluated in order and the first match wins, so a message that
# mentions both traffic and vehicles is answered with a traffic report.

from dataclasses import dataclass
from typing import Callable

from .report_templates import TEMPLATES, VEHICLE_PAGEVIEW_EVENT, ReportTemplate

TRAFFIC_KEYWORDS = ["active users", "traffic"]
LOCATION_KEYWORDS = ["city", "florida", "location"]
DEVICE_KEYWORDS = ["device", "mobile", "desktop"]
INVENTORY_KEYWORDS = ["vehicle", "inventory", VEHICLE_PAGEVIEW_EVENT]
CAMPAIGN_KEYWORDS = ["campaign", "marketing", "source"]


def _mentions(q: str, keywords: list[str]) -> bool:
    return any(kw in q for kw in keywords)


@dataclass(frozen=True)
class IntentRule:
    name: str
    predicate: Callable[[str], bool]
    template: ReportTemplate


INTENT_RULES: list[IntentRule] = [
    IntentRule(
        "traffic_by_city",
        lambda q: _mentions(q, TRAFFIC_KEYWORDS) and _mentions(q, LOCATION_KEYWORDS),
        TEMPLATES["traffic_by_city"],
    ),
    IntentRule(
        "traffic_by_device",
        lambda q: _mentions(q, TRAFFIC_KEYWORDS) and _mentions(q, DEVICE_KEYWORDS),
        TEMPLATES["traffic_by_device"],
    ),
    IntentRule(
        "daily_traffic",
        lambda q: _mentions(q, TRAFFIC_KEYWORDS),
        TEMPLATES["daily_traffic"],
    ),
    IntentRule(
        "vehicle_inventory_views",
        lambda q: _mentions(q, INVENTORY_KEYWORDS),
        TEMPLATES["vehicle_inventory_views"],
    ),
    IntentRule(
        "campaign_sources",
        lambda q: _mentions(q, CAMPAIGN_KEYWORDS),
        TEMPLATES["campaign_sources"],
    ),
]


def select_rule(text: str, rules: list[IntentRule] | None = None) -> IntentRule | None:
    """Return the first rule whose predicate matches the case-folded text."""
    q = text.casefold()
    for rule in rules if rules is not None else INTENT_RULES:
        if rule.predicate(q):
            return rule
    return None


def select_template(text: str) -> ReportTemplate | None:
    rule = select_rule(text)
    return rule.template if rule else None
