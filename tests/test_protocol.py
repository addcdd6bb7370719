"""Tests for JSON-RPC request handling."""

import json

import httpx
import pytest

from geminirag.interfaces.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PROTOCOL_VERSION,
    ProtocolHandler,
)


@pytest.fixture
def handler(service):
    return ProtocolHandler(service)


def rpc(method, params=None, request_id=1):
    request = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        request["params"] = params
    return request


class TestLifecycle:
    @pytest.mark.asyncio
    async def test_initialize(self, handler):
        resp = await handler.handle(rpc("initialize", {}))
        result = resp["result"]
        assert resp["id"] == 1
        assert result["protocolVersion"] == PROTOCOL_VERSION
        assert result["serverInfo"] == {"name": "gemini-file-search-rag", "version": "0.1.0"}
        assert "tools" in result["capabilities"]

    @pytest.mark.asyncio
    async def test_ping(self, handler):
        assert (await handler.handle(rpc("ping")))["result"] == {}

    @pytest.mark.asyncio
    async def test_notification_gets_no_response(self, handler):
        assert await handler.handle({"jsonrpc": "2.0", "method": "notifications/initialized"}) is None
        assert await handler.handle({"jsonrpc": "2.0", "method": "ping"}) is None


class TestTools:
    @pytest.mark.asyncio
    async def test_list(self, handler):
        resp = await handler.handle(rpc("tools/list"))
        assert len(resp["result"]["tools"]) == 12

    @pytest.mark.asyncio
    async def test_call(self, handler, backend):
        backend.respond_with(httpx.Response(200, json={"name": "fileSearchStores/a"}))
        resp = await handler.handle(rpc("tools/call", {
            "name": "gemini_create_store",
            "arguments": {"display_name": "Docs"},
        }))

        content = resp["result"]["content"]
        assert content[0]["type"] == "text"
        assert json.loads(content[0]["text"]) == {"name": "fileSearchStores/a"}
        assert "isError" not in resp["result"]

    @pytest.mark.asyncio
    async def test_tool_failure_is_a_result(self, handler):
        resp = await handler.handle(rpc("tools/call", {"name": "gemini_nope", "arguments": {}}))

        assert "error" not in resp
        assert resp["result"]["isError"] is True
        assert resp["result"]["content"][0]["text"] == "Error: Unknown tool: gemini_nope"

    @pytest.mark.asyncio
    async def test_call_requires_name(self, handler):
        resp = await handler.handle(rpc("tools/call", {"arguments": {}}))
        assert resp["error"]["code"] == INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_unconfigured_call(self, unconfigured_service, backend):
        handler = ProtocolHandler(unconfigured_service)
        resp = await handler.handle(rpc("tools/call", {"name": "gemini_list_stores"}))

        text = resp["result"]["content"][0]["text"]
        assert "GEMINI_API_KEY" in text
        assert backend.requests == []


class TestPromptsAndResources:
    @pytest.mark.asyncio
    async def test_prompts_list(self, handler):
        resp = await handler.handle(rpc("prompts/list"))
        assert [p["name"] for p in resp["result"]["prompts"]] == ["setup-rag", "query-rag"]

    @pytest.mark.asyncio
    async def test_prompt_get(self, handler):
        resp = await handler.handle(rpc("prompts/get", {"name": "query-rag"}))
        message = resp["result"]["messages"][0]
        assert message["role"] == "user"
        assert "gemini_rag_query" in message["content"]["text"]

    @pytest.mark.asyncio
    async def test_unknown_prompt(self, handler):
        resp = await handler.handle(rpc("prompts/get", {"name": "nope"}))
        assert resp["error"]["code"] == INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_server_info_resource(self, unconfigured_service):
        handler = ProtocolHandler(unconfigured_service)
        listed = await handler.handle(rpc("resources/list"))
        uri = listed["result"]["resources"][0]["uri"]
        assert uri == "gemini://server-info"

        resp = await handler.handle(rpc("resources/read", {"uri": uri}))
        info = json.loads(resp["result"]["contents"][0]["text"])
        assert info["connected"] is False
        assert info["tools_available"] == 12
        assert info["tool_categories"]["stores"] == 4

    @pytest.mark.asyncio
    async def test_unknown_resource(self, handler):
        resp = await handler.handle(rpc("resources/read", {"uri": "gemini://nope"}))
        assert resp["error"]["code"] == INVALID_PARAMS


class TestMalformed:
    @pytest.mark.asyncio
    async def test_unknown_method(self, handler):
        resp = await handler.handle(rpc("tools/destroy"))
        assert resp["error"]["code"] == METHOD_NOT_FOUND

    @pytest.mark.asyncio
    async def test_not_an_object(self, handler):
        resp = await handler.handle([1, 2])
        assert resp["id"] is None
        assert resp["error"]["code"] == INVALID_REQUEST

    @pytest.mark.asyncio
    async def test_wrong_version(self, handler):
        resp = await handler.handle({"jsonrpc": "1.0", "id": 7, "method": "ping"})
        assert resp["id"] == 7
        assert resp["error"]["code"] == INVALID_REQUEST

    @pytest.mark.asyncio
    async def test_malformed_notification_gets_no_response(self, handler):
        assert await handler.handle({"jsonrpc": "1.0", "method": "ping"}) is None
        assert await handler.handle({"jsonrpc": "2.0", "method": 42}) is None

    @pytest.mark.asyncio
    async def test_params_must_be_object(self, handler):
        resp = await handler.handle(rpc("tools/call", ["gemini_list_stores"]))
        assert resp["error"]["code"] == INVALID_PARAMS

    @pytest.mark.asyncio
    async def test_handler_crash_is_internal_error(self, handler, monkeypatch):
        def explode():
            raise RuntimeError("broken")

        monkeypatch.setattr(handler._service, "list_prompts", explode)
        resp = await handler.handle(rpc("prompts/list"))
        assert resp["error"]["code"] == INTERNAL_ERROR
