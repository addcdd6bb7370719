"""JSON-RPC 2.0 request handling shared by the stdio and HTTP transports."""

from __future__ import annotations

import json
import logging
from typing import Any

from geminirag.core.service import SERVER_INFO_URI, SERVER_VERSION, RAGService

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ProtocolError(Exception):
    """Raised by a method handler to produce a JSON-RPC error response."""

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


def error_response(request_id: Any, code: int, message: str) -> dict:
    return {"jsonrpc": "2.0", "id": request_id, "error": {"code": code, "message": message}}


class ProtocolHandler:
    """Maps JSON-RPC methods onto the service.

    Tool failures are returned as ``isError`` results by the dispatcher; only
    protocol-level problems (unknown method, bad params, unknown prompt or
    resource) become JSON-RPC errors.
    """

    def __init__(self, service: RAGService):
        self._service = service
        self._methods = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
            "prompts/list": self._list_prompts,
            "prompts/get": self._get_prompt,
            "resources/list": self._list_resources,
            "resources/read": self._read_resource,
        }

    async def handle(self, request: Any) -> dict | None:
        """Handle one decoded JSON-RPC message; returns None for notifications."""
        if not isinstance(request, dict):
            return error_response(None, INVALID_REQUEST, "Invalid Request")
        if request.get("jsonrpc") != "2.0" or not isinstance(request.get("method"), str):
            if "id" not in request:
                return None
            return error_response(request["id"], INVALID_REQUEST, "Invalid Request")

        method = request["method"]
        request_id = request.get("id")
        params = request.get("params") or {}
        is_notification = "id" not in request

        if method.startswith("notifications/"):
            return None

        if not isinstance(params, dict):
            if is_notification:
                return None
            return error_response(request_id, INVALID_PARAMS, "params must be an object")

        handler = self._methods.get(method)
        if handler is None:
            if is_notification:
                return None
            return error_response(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")

        try:
            result = await handler(params)
        except ProtocolError as e:
            if is_notification:
                return None
            return error_response(request_id, e.code, e.message)
        except Exception as e:
            logger.exception("Request %s failed", method)
            if is_notification:
                return None
            return error_response(request_id, INTERNAL_ERROR, str(e))

        if is_notification:
            return None
        return {"jsonrpc": "2.0", "id": request_id, "result": result}

    # -- methods ----------------------------------------------------------

    async def _initialize(self, params: dict) -> dict:
        return {
            "protocolVersion": params.get("protocolVersion") or PROTOCOL_VERSION,
            "capabilities": {
                "tools": {"listChanged": False},
                "prompts": {"listChanged": False},
                "resources": {"subscribe": False, "listChanged": False},
            },
            "serverInfo": {"name": self._service.name, "version": SERVER_VERSION},
        }

    async def _ping(self, params: dict) -> dict:
        return {}

    async def _list_tools(self, params: dict) -> dict:
        return {"tools": self._service.dispatcher.list_tools()}

    async def _call_tool(self, params: dict) -> dict:
        name = params.get("name")
        if not isinstance(name, str):
            raise ProtocolError(INVALID_PARAMS, "tools/call requires a tool name")
        result = await self._service.dispatcher.call_tool(name, params.get("arguments") or {})
        return result.to_content()

    async def _list_prompts(self, params: dict) -> dict:
        return {"prompts": self._service.list_prompts()}

    async def _get_prompt(self, params: dict) -> dict:
        name = params.get("name")
        prompt = self._service.get_prompt(name) if isinstance(name, str) else None
        if prompt is None:
            raise ProtocolError(INVALID_PARAMS, f"Unknown prompt: {name}")
        return prompt

    async def _list_resources(self, params: dict) -> dict:
        return {"resources": self._service.list_resources()}

    async def _read_resource(self, params: dict) -> dict:
        uri = params.get("uri")
        if uri != SERVER_INFO_URI:
            raise ProtocolError(INVALID_PARAMS, f"Unknown resource: {uri}")
        return {
            "contents": [{
                "uri": SERVER_INFO_URI,
                "mimeType": "application/json",
                "text": json.dumps(self._service.server_info(), indent=2),
            }],
        }
