import json

import pytest
from httpx import AsyncClient, ASGITransport

from app.analytics.report_client import RawReport
from app.errors import BackendError, UpstreamGenerationError
from app.main import app
from conftest import FakeAnalyst, FakeReportClient


def _client():
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_health():
    async with _client() as client:
        r = await client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_chat_returns_response_and_chart(make_engine, use_engine, city_report):
    use_engine(make_engine(FakeReportClient(raw=city_report), FakeAnalyst(reply="## Key Findings")))

    async with _client() as client:
        r = await client.post("/api/chat", json={"message": "traffic by city"})

    assert r.status_code == 200
    body = r.json()
    assert body["response"] == "## Key Findings"
    assert body["chart_data"]["x_key"] == "city"
    assert body["chart_data"]["y_keys"] == ["activeUsers", "sessions"]
    assert body["chart_data"]["chart_kind"] == "bar"
    assert body["chart_data"]["rows"][0] == {"city": "Miami", "activeUsers": 120, "sessions": 85}


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{}, {"message": ""}, {"message": None}])
async def test_chat_rejects_missing_message(make_engine, use_engine, payload):
    reports = FakeReportClient()
    use_engine(make_engine(reports))

    async with _client() as client:
        r = await client.post("/api/chat", json=payload)

    assert r.status_code == 400
    assert r.json() == {"error": "Message is required"}
    assert reports.calls == []


@pytest.mark.asyncio
async def test_chat_backend_failure_still_answers(make_engine, use_engine):
    use_engine(make_engine(FakeReportClient(error=BackendError("PERMISSION_DENIED"))))

    async with _client() as client:
        r = await client.post("/api/chat", json={"message": "campaign results"})

    assert r.status_code == 200
    assert r.json()["chart_data"] is None


@pytest.mark.asyncio
async def test_chat_analyst_failure_is_generic_500(make_engine, use_engine):
    use_engine(make_engine(analyst=FakeAnalyst(error=UpstreamGenerationError("overloaded"))))

    async with _client() as client:
        r = await client.post("/api/chat", json={"message": "hello"})

    assert r.status_code == 500
    assert r.json() == {"error": "Failed to process your request. Please try again."}


@pytest.mark.asyncio
async def test_chat_unexpected_error_is_generic_500(make_engine, use_engine):
    use_engine(make_engine(FakeReportClient(error=KeyError("rows"))))

    async with _client() as client:
        r = await client.post("/api/chat", json={"message": "show traffic"})

    assert r.status_code == 500
    assert r.json() == {"error": "Failed to process your request. Please try again."}


@pytest.mark.asyncio
async def test_mcp_tools_list_returns_all_tools():
    async with _client() as client:
        r = await client.post("/mcp/tools/list")
    assert r.status_code == 200
    names = [t["name"] for t in r.json()["tools"]]
    assert len(names) == 6
    assert "query_dealership_analytics" in names
    assert "get_vehicle_inventory_views" in names


@pytest.mark.asyncio
async def test_mcp_call_unknown_tool_returns_404():
    async with _client() as client:
        r = await client.post("/mcp/tools/call", json={"name": "nonexistent_tool", "arguments": {}})
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_mcp_call_invalid_args_returns_400():
    async with _client() as client:
        # query_dealership_analytics requires a query
        r = await client.post("/mcp/tools/call", json={
            "name": "query_dealership_analytics",
            "arguments": {}
        })
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_mcp_call_report_tool(make_engine, use_engine):
    use_engine(make_engine(FakeReportClient(raw=RawReport(rows=[], row_count=0))))

    async with _client() as client:
        r = await client.post("/mcp/tools/call", json={"name": "get_traffic_by_device", "arguments": {}})

    assert r.status_code == 200
    result = json.loads(r.json()["content"][0]["text"])
    assert result["template"] == "traffic_by_device"
    assert result["outcome"]["row_count"] == 0
    assert result["chart_data"] is None


@pytest.mark.asyncio
async def test_mcp_call_natural_language_tool(make_engine, use_engine, city_report):
    use_engine(make_engine(FakeReportClient(raw=city_report), FakeAnalyst(reply="Miami leads.")))

    async with _client() as client:
        r = await client.post("/mcp/tools/call", json={
            "name": "query_dealership_analytics",
            "arguments": {"query": "active users by city"}
        })

    result = json.loads(r.json()["content"][0]["text"])
    assert result["response"] == "Miami leads."
    assert result["chart_data"]["x_key"] == "city"


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [{"message": 123}, {"message": ["traffic"]}])
async def test_chat_rejects_non_string_message(make_engine, use_engine, payload):
    reports = FakeReportClient()
    use_engine(make_engine(reports))

    async with _client() as client:
        r = await client.post("/api/chat", json=payload)

    assert r.status_code == 400
    assert r.json() == {"error": "Message is required"}
    assert reports.calls == []


@pytest.mark.asyncio
async def test_chat_rejects_non_json_body():
    async with _client() as client:
        r = await client.post("/api/chat", content=b"traffic please", headers={"Content-Type": "application/json"})

    assert r.status_code == 400
    assert r.json() == {"error": "Message is required"}


@pytest.mark.asyncio
async def test_mcp_call_bad_body_keeps_default_422():
    async with _client() as client:
        r = await client.post("/mcp/tools/call", json={"arguments": {}})

    assert r.status_code == 422
    assert "detail" in r.json()


@pytest.mark.asyncio
async def test_mcp_call_unexpected_error_is_generic_500(make_engine, use_engine):
    use_engine(make_engine(FakeReportClient(error=KeyError("rows"))))

    async with _client() as client:
        r = await client.post("/mcp/tools/call", json={"name": "get_daily_traffic", "arguments": {}})

    assert r.status_code == 500
    assert r.json() == {"error": "Failed to process your request. Please try again."}
