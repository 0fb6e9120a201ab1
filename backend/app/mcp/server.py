from .tools import REPORT_TOOLS, TOOLS_BY_NAME

NATURAL_LANGUAGE_CAPABILITY = "natural_language_query"

# Tool name → pipeline capability (a report template name or the chat pipeline).
TOOL_CAPABILITY_MAP: dict[str, str] = {
    "query_dealership_analytics":  NATURAL_LANGUAGE_CAPABILITY,
    "get_traffic_by_city":         "traffic_by_city",
    "get_traffic_by_device":       "traffic_by_device",
    "get_daily_traffic":           "daily_traffic",
    "get_vehicle_inventory_views": "vehicle_inventory_views",
    "get_campaign_sources":        "campaign_sources",
}


class MCPProtocolHandler:
    def get_tools_list(self) -> list[dict]:
        return REPORT_TOOLS

    def tool_exists(self, tool_name: str) -> bool:
        return tool_name in TOOLS_BY_NAME

    def map_to_capability(self, tool_name: str) -> str:
        return TOOL_CAPABILITY_MAP.get(tool_name, tool_name)


mcp_handler = MCPProtocolHandler()
