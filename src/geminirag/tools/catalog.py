"""Tool catalog: the twelve File Search tools, their input schemas and hints."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

STORE_NAME = {
    "type": "string",
    "description": 'Store resource name, e.g. "fileSearchStores/abc123"',
}

PAGE_TOKEN = {
    "type": "string",
    "description": "Token for next page from previous response",
}

CUSTOM_METADATA = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "key": {"type": "string"},
            "stringValue": {"type": "string"},
            "numericValue": {"type": "number"},
            "stringListValue": {
                "type": "object",
                "properties": {"values": {"type": "array", "items": {"type": "string"}}},
                "required": ["values"],
            },
        },
        "required": ["key"],
    },
    "description": (
        "Custom metadata for filtering (max 20). Each entry has a key and exactly one of "
        "stringValue, numericValue or stringListValue"
    ),
}

CHUNKING_CONFIG = {
    "type": "object",
    "properties": {
        "chunkSize": {"type": "integer", "description": "Maximum tokens per chunk"},
        "chunkOverlap": {"type": "integer", "description": "Tokens shared between adjacent chunks"},
    },
    "description": "How the service splits the document into chunks (optional)",
}


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    title: str
    description: str
    category: str
    properties: dict = field(default_factory=dict)
    required: tuple[str, ...] = ()
    read_only: bool = False
    destructive: bool = False
    open_world: bool = False

    @property
    def input_schema(self) -> dict:
        schema: dict = {"type": "object", "properties": self.properties}
        if self.required:
            schema["required"] = list(self.required)
        return schema

    def to_dict(self) -> dict:
        """Wire form returned from tools/list."""
        return {
            "name": self.name,
            "description": self.description,
            "annotations": {
                "title": self.title,
                "readOnlyHint": self.read_only,
                "destructiveHint": self.destructive,
                "openWorldHint": self.open_world,
            },
            "inputSchema": self.input_schema,
        }


TOOLS: tuple[ToolDescriptor, ...] = (
    # ========== Stores (4) ==========
    ToolDescriptor(
        name="gemini_create_store",
        title="Create Store",
        description=(
            "Create a new Gemini File Search store for RAG documents. Returns the created store "
            "resource. Use this to create a knowledge base before uploading documents."
        ),
        category="stores",
        properties={
            "display_name": {
                "type": "string",
                "description": "Display name for the store (max 512 characters)",
            },
        },
        required=("display_name",),
    ),
    ToolDescriptor(
        name="gemini_list_stores",
        title="List Stores",
        description=(
            "List all Gemini File Search stores. Returns store names, display names, and "
            "timestamps. Use to see available knowledge bases."
        ),
        category="stores",
        properties={
            "page_size": {
                "type": "number",
                "description": "Number of stores to return per page (default 10, max 20)",
            },
            "page_token": PAGE_TOKEN,
        },
        read_only=True,
        open_world=True,
    ),
    ToolDescriptor(
        name="gemini_get_store",
        title="Get Store",
        description="Get details of a specific Gemini File Search store by its resource name.",
        category="stores",
        properties={"store_name": STORE_NAME},
        required=("store_name",),
        read_only=True,
        open_world=True,
    ),
    ToolDescriptor(
        name="gemini_delete_store",
        title="Delete Store",
        description=(
            "Delete a Gemini File Search store. Use force=true to also delete all documents inside it."
        ),
        category="stores",
        properties={
            "store_name": STORE_NAME,
            "force": {
                "type": "boolean",
                "description": "If true, cascade delete all documents in the store",
            },
        },
        required=("store_name",),
        destructive=True,
    ),
    # ========== Upload & import (2) ==========
    ToolDescriptor(
        name="gemini_upload_to_store",
        title="Upload to Store",
        description=(
            "Upload content directly to a Gemini File Search store. Accepts text content or "
            "base64-encoded binary. For large files, use gemini_import_file_to_store instead. "
            "Returns an operation to track upload progress."
        ),
        category="upload",
        properties={
            "store_name": STORE_NAME,
            "mime_type": {
                "type": "string",
                "description": (
                    'MIME type of the content, e.g. "text/plain", "application/pdf", "text/markdown"'
                ),
            },
            "content": {
                "type": "string",
                "description": (
                    "The content to upload. Plain text by default, or base64-encoded if "
                    'content_encoding is "base64"'
                ),
            },
            "display_name": {
                "type": "string",
                "description": "Display name for the document (optional)",
            },
            "content_encoding": {
                "type": "string",
                "enum": ["text", "base64"],
                "description": 'How the content is encoded: "text" (default) or "base64" for binary files',
            },
            "custom_metadata": CUSTOM_METADATA,
            "chunking_config": CHUNKING_CONFIG,
        },
        required=("store_name", "mime_type", "content"),
    ),
    ToolDescriptor(
        name="gemini_import_file_to_store",
        title="Import File to Store",
        description=(
            "Import a file from the Gemini Files API into a File Search store. Use this for large "
            "files that were uploaded separately via the Files API. Returns an operation to track "
            "import progress."
        ),
        category="upload",
        properties={
            "store_name": STORE_NAME,
            "file_name": {
                "type": "string",
                "description": 'Gemini file resource name, e.g. "files/abc-123"',
            },
            "custom_metadata": CUSTOM_METADATA,
            "chunking_config": CHUNKING_CONFIG,
        },
        required=("store_name", "file_name"),
    ),
    # ========== Operations (2) ==========
    ToolDescriptor(
        name="gemini_get_operation",
        title="Get Operation Status",
        description=(
            "Check the status of a store operation (create, delete, import). Returns whether the "
            "operation is done and any error details."
        ),
        category="operations",
        properties={
            "operation_name": {
                "type": "string",
                "description": 'Operation resource name, e.g. "fileSearchStores/abc123/operations/op456"',
            },
        },
        required=("operation_name",),
        read_only=True,
        open_world=True,
    ),
    ToolDescriptor(
        name="gemini_get_upload_operation",
        title="Get Upload Operation Status",
        description=(
            "Check the status of a file upload operation. Returns whether the upload is done and "
            "any error details."
        ),
        category="operations",
        properties={
            "operation_name": {
                "type": "string",
                "description": (
                    "Upload operation resource name, e.g. "
                    '"fileSearchStores/abc123/upload/operations/op789"'
                ),
            },
        },
        required=("operation_name",),
        read_only=True,
        open_world=True,
    ),
    # ========== Documents (3) ==========
    ToolDescriptor(
        name="gemini_list_documents",
        title="List Documents",
        description=(
            "List documents in a Gemini File Search store. Returns document names, display names, "
            "state, size, and MIME types."
        ),
        category="documents",
        properties={
            "store_name": STORE_NAME,
            "page_size": {
                "type": "number",
                "description": "Number of documents to return per page (default 10, max 20)",
            },
            "page_token": PAGE_TOKEN,
        },
        required=("store_name",),
        read_only=True,
        open_world=True,
    ),
    ToolDescriptor(
        name="gemini_get_document",
        title="Get Document",
        description=(
            "Get details of a specific document in a File Search store, including state, size, "
            "and metadata."
        ),
        category="documents",
        properties={
            "document_name": {
                "type": "string",
                "description": 'Document resource name, e.g. "fileSearchStores/abc123/documents/doc456"',
            },
        },
        required=("document_name",),
        read_only=True,
        open_world=True,
    ),
    ToolDescriptor(
        name="gemini_delete_document",
        title="Delete Document",
        description=(
            "Delete a document from a File Search store. Use force=true to also delete associated chunks."
        ),
        category="documents",
        properties={
            "document_name": {
                "type": "string",
                "description": 'Document resource name, e.g. "fileSearchStores/abc123/documents/doc456"',
            },
            "force": {
                "type": "boolean",
                "description": "If true, also delete associated chunks",
            },
        },
        required=("document_name",),
        destructive=True,
    ),
    # ========== Query (1) ==========
    ToolDescriptor(
        name="gemini_rag_query",
        title="RAG Query",
        description=(
            "Query your documents using Gemini RAG. Sends a natural language query grounded in your "
            "File Search stores. Returns AI-generated answer with source citations from your documents."
        ),
        category="query",
        properties={
            "query": {
                "type": "string",
                "description": "Natural language query to search your documents",
            },
            "store_names": {
                "type": "array",
                "items": {"type": "string"},
                "description": (
                    'Array of store resource names to search, e.g. ["fileSearchStores/abc123"]'
                ),
            },
            "model": {
                "type": "string",
                "description": (
                    'Gemini model to use (default: "gemini-2.5-flash-lite"). Options: '
                    "gemini-2.5-flash-lite, gemini-2.5-flash, gemini-2.5-pro"
                ),
            },
            "metadata_filter": {
                "type": "string",
                "description": "Optional metadata filter expression (Google AIP-160 syntax)",
            },
        },
        required=("query", "store_names"),
        read_only=True,
        open_world=True,
    ),
)


def list_tools() -> list[dict]:
    """Return the full catalog in wire form, in declaration order."""
    return [t.to_dict() for t in TOOLS]


def get_tool(name: str) -> ToolDescriptor | None:
    for descriptor in TOOLS:
        if descriptor.name == name:
            return descriptor
    return None


def tool_categories() -> dict[str, int]:
    """Count tools per category, in first-seen order."""
    return dict(Counter(t.category for t in TOOLS))
