"""Shared service layer used by the CLI and both protocol transports."""

from __future__ import annotations

import logging

import httpx
from dotenv import load_dotenv

from geminirag.core.config import Settings, get_project_root, load_settings
from geminirag.core.dispatcher import Dispatcher
from geminirag.tools.catalog import TOOLS, tool_categories

logger = logging.getLogger(__name__)

SERVER_VERSION = "0.1.0"
SERVER_INFO_URI = "gemini://server-info"

PROMPTS: dict[str, dict] = {
    "setup-rag": {
        "description": "Guide for setting up RAG - create stores, upload documents, and index content",
        "text": "\n".join([
            "You are a Gemini RAG setup assistant. Help me create and populate a knowledge base.",
            "",
            "Setup steps:",
            "1. **Create store** - Use gemini_create_store with a display name",
            "2. **Upload files** - Use gemini_upload_to_store to upload local files",
            "3. **Import files** - Use gemini_import_file_to_store to import files from the Files API",
            "4. **Check status** - Use gemini_get_operation to monitor indexing progress",
            "5. **List documents** - Use gemini_list_documents to verify uploaded content",
            "",
            "Start by listing existing stores with gemini_list_stores.",
        ]),
    },
    "query-rag": {
        "description": "Guide for querying your indexed documents using Gemini RAG",
        "text": "\n".join([
            "You are a Gemini RAG query assistant. Help me search my indexed documents.",
            "",
            "Query steps:",
            "1. **List stores** - Use gemini_list_stores to see available knowledge bases",
            "2. **Query** - Use gemini_rag_query with store name and your question",
            "3. **Check documents** - Use gemini_list_documents to see what is indexed",
            "4. **Get details** - Use gemini_get_document for document metadata",
            "",
            "What would you like to search for?",
        ]),
    },
}


class RAGService:
    """Central service that loads configuration and wires the dispatcher.

    Nothing here needs the API key: tool listing, prompts and the server-info
    resource all work unconfigured. The key is only checked when a tool call
    first needs the remote client.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if settings is None:
            self._load_env()
            settings = load_settings()
        self.settings = settings
        self.dispatcher = Dispatcher(settings, transport=transport)

        if not settings.has_credentials:
            logger.warning("GEMINI_API_KEY not set; tool calls will fail until it is configured")

    @staticmethod
    def _load_env():
        load_dotenv(get_project_root() / ".env")

    @property
    def name(self) -> str:
        return self.settings.server.name

    def server_info(self) -> dict:
        """Describe this server; rebuilt on every read."""
        return {
            "name": self.name,
            "version": SERVER_VERSION,
            "connected": self.dispatcher.configured,
            "tools_available": len(TOOLS),
            "tool_categories": tool_categories(),
        }

    def list_resources(self) -> list[dict]:
        return [{
            "uri": SERVER_INFO_URI,
            "name": "Gemini RAG Server Info",
            "description": "Connection status and available tools for this Gemini RAG server",
            "mimeType": "application/json",
        }]

    def list_prompts(self) -> list[dict]:
        return [{"name": name, "description": p["description"]} for name, p in PROMPTS.items()]

    def get_prompt(self, name: str) -> dict | None:
        prompt = PROMPTS.get(name)
        if prompt is None:
            return None
        return {
            "description": prompt["description"],
            "messages": [{
                "role": "user",
                "content": {"type": "text", "text": prompt["text"]},
            }],
        }
