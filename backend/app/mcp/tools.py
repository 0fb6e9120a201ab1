# MCP tool definitions: one natural-language tool plus one tool per report template.

_NO_ARGUMENTS = {
    "type": "object",
    "additionalProperties": False,
    "properties": {},
    "required": []
}

REPORT_TOOLS: list[dict] = [
    {
        "name": "query_dealership_analytics",
        "description": "Ask a free-text question about the dealership's GA4 analytics",
        "inputSchema": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "query": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Natural language question, e.g. 'traffic by city in Florida'"
                }
            },
            "required": ["query"]
        }
    },
    {
        "name": "get_traffic_by_city",
        "description": "Active users and sessions by city for the last 7 days (top 20)",
        "inputSchema": _NO_ARGUMENTS
    },
    {
        "name": "get_traffic_by_device",
        "description": "Active users, sessions and bounce rate by device category for the last 7 days",
        "inputSchema": _NO_ARGUMENTS
    },
    {
        "name": "get_daily_traffic",
        "description": "Daily active users and sessions for the last 7 days",
        "inputSchema": _NO_ARGUMENTS
    },
    {
        "name": "get_vehicle_inventory_views",
        "description": "Event counts by event name and vehicle condition (new, used, cpo) for the last 30 days",
        "inputSchema": _NO_ARGUMENTS
    },
    {
        "name": "get_campaign_sources",
        "description": "Sessions and conversions by source and medium for the last 30 days (top 20)",
        "inputSchema": _NO_ARGUMENTS
    },
]

# Quick lookup by name
TOOLS_BY_NAME: dict[str, dict] = {t["name"]: t for t in REPORT_TOOLS}
