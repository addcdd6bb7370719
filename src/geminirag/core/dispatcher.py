"""Dispatcher: route tool invocations to the Gemini File Search client."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import httpx

from geminirag.client.gemini import GeminiRAGClient
from geminirag.core.config import Settings
from geminirag.core.errors import ConfigurationError, ErrorKind, ToolError, UnknownToolError
from geminirag.tools import arguments as a
from geminirag.tools.arguments import INVOCATION_TYPES, ToolInvocation, resolve_invocation
from geminirag.tools.catalog import list_tools

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "Missing required configuration: GEMINI_API_KEY. Set it before using any tools."
)

Route = Callable[[Any, GeminiRAGClient], Awaitable[dict]]

_ROUTES: dict[type[ToolInvocation], Route] = {
    a.CreateStore: lambda inv, c: c.create_store(inv.display_name),
    a.ListStores: lambda inv, c: c.list_stores(inv.page_size, inv.page_token),
    a.GetStore: lambda inv, c: c.get_store(inv.store_name),
    a.DeleteStore: lambda inv, c: c.delete_store(inv.store_name, inv.force),
    a.UploadToStore: lambda inv, c: c.upload_to_store(
        inv.store_name,
        mime_type=inv.mime_type,
        content=inv.content,
        display_name=inv.display_name,
        content_encoding=inv.content_encoding,
        custom_metadata=inv.custom_metadata,
        chunking_config=inv.chunking_config,
    ),
    a.ImportFileToStore: lambda inv, c: c.import_file_to_store(
        inv.store_name,
        file_name=inv.file_name,
        custom_metadata=inv.custom_metadata,
        chunking_config=inv.chunking_config,
    ),
    a.GetOperation: lambda inv, c: c.get_operation(inv.operation_name),
    a.GetUploadOperation: lambda inv, c: c.get_upload_operation(inv.operation_name),
    a.ListDocuments: lambda inv, c: c.list_documents(inv.store_name, inv.page_size, inv.page_token),
    a.GetDocument: lambda inv, c: c.get_document(inv.document_name),
    a.DeleteDocument: lambda inv, c: c.delete_document(inv.document_name, inv.force),
    a.RagQuery: lambda inv, c: c.rag_query(
        inv.query,
        inv.store_names,
        model=inv.model,
        metadata_filter=inv.metadata_filter,
    ),
}


@dataclass
class ToolResult:
    """Outcome of one tool call, ready for the transport."""

    text: str
    is_error: bool = False
    error_kind: ErrorKind | None = None
    value: Any = None

    def to_content(self) -> dict:
        result: dict = {"content": [{"type": "text", "text": self.text}]}
        if self.is_error:
            result["isError"] = True
        return result


def _classify(exc: Exception) -> ErrorKind:
    if isinstance(exc, ToolError):
        return exc.kind
    if isinstance(exc, httpx.HTTPError):
        return ErrorKind.NETWORK
    return ErrorKind.INTERNAL


class Dispatcher:
    """Owns the (lazily created) client and forwards one call per invocation.

    No retries, caching or reordering happen here: each dispatch is a single
    forward to the remote service.
    """

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self._settings = settings
        self._transport = transport
        self._client: GeminiRAGClient | None = None
        self._client_lock = threading.Lock()

    @property
    def configured(self) -> bool:
        return self._settings.has_credentials

    @property
    def client(self) -> GeminiRAGClient:
        """Create the client on first use; fails while no API key is configured."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    if not self._settings.gemini_api_key:
                        raise ConfigurationError(MISSING_KEY_MESSAGE)
                    self._client = GeminiRAGClient(
                        api_key=self._settings.gemini_api_key,
                        config=self._settings.gemini,
                        transport=self._transport,
                    )
                    logger.info("Gemini File Search client initialised")
        return self._client

    def list_tools(self) -> list[dict]:
        return list_tools()

    async def dispatch(self, tool_name: str, arguments: dict | None = None) -> dict:
        """Resolve and forward one invocation. Raises on any failure.

        Checked in order: tool name, credential, arguments.
        """
        if tool_name not in INVOCATION_TYPES:
            raise UnknownToolError(tool_name)
        client = self.client
        invocation = resolve_invocation(tool_name, arguments)
        route = _ROUTES[type(invocation)]
        logger.info("Dispatching %s", tool_name)
        return await route(invocation, client)

    async def call_tool(self, tool_name: str, arguments: dict | None = None) -> ToolResult:
        """Dispatch and convert the outcome (or any error) into a ToolResult."""
        try:
            value = await self.dispatch(tool_name, arguments)
        except Exception as e:
            kind = _classify(e)
            if kind is ErrorKind.INTERNAL:
                logger.exception("Tool execution failed: %s", tool_name)
            else:
                logger.warning("Tool %s failed (%s): %s", tool_name, kind.value, e)
            return ToolResult(text=f"Error: {e}", is_error=True, error_kind=kind)

        return ToolResult(text=json.dumps(value, indent=2), value=value)
