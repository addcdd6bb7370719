"""HTTP client for the Gemini File Search API (API key authentication)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from geminirag.client.multipart import build_multipart_body, decode_content
from geminirag.client.types import ChunkingConfig, CustomMetadata
from geminirag.core.config import DEFAULT_MODEL, GeminiConfig
from geminirag.core.errors import RemoteHTTPError

logger = logging.getLogger(__name__)


def _page_params(page_size: int | None, page_token: str | None) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if page_size:
        params["pageSize"] = page_size
    if page_token:
        params["pageToken"] = page_token
    return params


def _decode(response: httpx.Response) -> dict:
    # DELETE and some operations answer with an empty body
    if not response.content:
        return {}
    return response.json()


class GeminiRAGClient:
    """Thin async wrapper over the File Search REST surface.

    Resource names (``fileSearchStores/abc``, ``.../documents/xyz``) are used
    verbatim as URL paths. Every non-2xx response raises RemoteHTTPError with
    the status and raw body; transport errors from httpx propagate unchanged.
    """

    def __init__(
        self,
        api_key: str,
        config: GeminiConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key = api_key
        self._config = config or GeminiConfig()
        self._base_url = self._config.base_url.rstrip("/")
        self._upload_url = self._config.upload_url.rstrip("/")
        self._transport = transport

    def _http(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self._config.timeout)

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict | None = None,
    ) -> dict:
        query = dict(params or {})
        query["key"] = self._api_key
        logger.debug("%s %s", method, path)

        async with self._http() as client:
            response = await client.request(
                method,
                f"{self._base_url}{path}",
                params=query,
                json=json,
                headers={"Content-Type": "application/json"},
            )

        if response.is_error:
            raise RemoteHTTPError(response.status_code, response.text)
        return _decode(response)

    # ---------------------------------------------------------------------
    # Stores
    # ---------------------------------------------------------------------

    async def create_store(self, display_name: str) -> dict:
        return await self._request("POST", "/fileSearchStores", json={"displayName": display_name})

    async def list_stores(self, page_size: int | None = None, page_token: str | None = None) -> dict:
        return await self._request("GET", "/fileSearchStores", params=_page_params(page_size, page_token))

    async def get_store(self, store_name: str) -> dict:
        return await self._request("GET", f"/{store_name}")

    async def delete_store(self, store_name: str, force: bool | None = False) -> dict:
        params = {"force": "true"} if force else None
        return await self._request("DELETE", f"/{store_name}", params=params)

    # ---------------------------------------------------------------------
    # Upload & import
    # ---------------------------------------------------------------------

    async def upload_to_store(
        self,
        store_name: str,
        *,
        mime_type: str,
        content: str,
        display_name: str | None = None,
        content_encoding: str = "text",
        custom_metadata: list[CustomMetadata] | None = None,
        chunking_config: ChunkingConfig | None = None,
    ) -> dict:
        """Upload inline content as a new document; returns the upload operation."""
        metadata: dict[str, Any] = {"mimeType": mime_type}
        if display_name:
            metadata["displayName"] = display_name
        if custom_metadata is not None:
            metadata["customMetadata"] = [m.to_api() for m in custom_metadata]
        if chunking_config is not None:
            metadata["chunkingConfig"] = chunking_config.to_api()

        multipart = build_multipart_body(metadata, decode_content(content, content_encoding), mime_type)
        logger.debug("POST upload %s (%d bytes)", store_name, len(multipart.body))

        async with self._http() as client:
            response = await client.post(
                f"{self._upload_url}/{store_name}:uploadToFileSearchStore",
                params={"key": self._api_key},
                content=multipart.body,
                headers={"Content-Type": multipart.content_type},
            )

        if response.is_error:
            raise RemoteHTTPError(response.status_code, response.text, source="Gemini Upload")
        return _decode(response)

    async def import_file_to_store(
        self,
        store_name: str,
        *,
        file_name: str,
        custom_metadata: list[CustomMetadata] | None = None,
        chunking_config: ChunkingConfig | None = None,
    ) -> dict:
        """Import a file already uploaded through the Files API."""
        body: dict[str, Any] = {"fileName": file_name}
        if custom_metadata is not None:
            body["customMetadata"] = [m.to_api() for m in custom_metadata]
        if chunking_config is not None:
            body["chunkingConfig"] = chunking_config.to_api()
        return await self._request("POST", f"/{store_name}:importFile", json=body)

    # ---------------------------------------------------------------------
    # Operations
    # ---------------------------------------------------------------------

    async def get_operation(self, operation_name: str) -> dict:
        return await self._request("GET", f"/{operation_name}")

    async def get_upload_operation(self, operation_name: str) -> dict:
        return await self._request("GET", f"/{operation_name}")

    # ---------------------------------------------------------------------
    # Documents
    # ---------------------------------------------------------------------

    async def list_documents(
        self,
        store_name: str,
        page_size: int | None = None,
        page_token: str | None = None,
    ) -> dict:
        return await self._request(
            "GET", f"/{store_name}/documents", params=_page_params(page_size, page_token)
        )

    async def get_document(self, document_name: str) -> dict:
        return await self._request("GET", f"/{document_name}")

    async def delete_document(self, document_name: str, force: bool | None = False) -> dict:
        params = {"force": "true"} if force else None
        return await self._request("DELETE", f"/{document_name}", params=params)

    # ---------------------------------------------------------------------
    # RAG query
    # ---------------------------------------------------------------------

    async def rag_query(
        self,
        query: str,
        store_names: list[str],
        model: str | None = None,
        metadata_filter: str | None = None,
    ) -> dict:
        """Run generateContent with a fileSearch tool bound to the given stores."""
        model = model or self._config.default_model or DEFAULT_MODEL
        file_search: dict[str, Any] = {"fileSearchStoreNames": store_names}
        if metadata_filter:
            file_search["metadataFilter"] = metadata_filter

        return await self._request(
            "POST",
            f"/models/{model}:generateContent",
            json={
                "contents": [{"parts": [{"text": query}]}],
                "tools": [{"fileSearch": file_search}],
            },
        )
