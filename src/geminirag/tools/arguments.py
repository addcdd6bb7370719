"""Typed tool invocations.

Each tool's argument bag is parsed into its own pydantic model, tagged by the
tool name. The twelve models form a closed discriminated union that is
resolved once, at the dispatch boundary.
"""

from __future__ import annotations

import binascii
from typing import Annotated, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

from geminirag.client.multipart import decode_content
from geminirag.client.types import ChunkingConfig, CustomMetadata
from geminirag.core.errors import InvalidArgumentsError, UnknownToolError


class ToolInvocation(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


# -- stores ---------------------------------------------------------------


class CreateStore(ToolInvocation):
    tool: Literal["gemini_create_store"] = "gemini_create_store"
    display_name: str = Field(max_length=512)


class ListStores(ToolInvocation):
    tool: Literal["gemini_list_stores"] = "gemini_list_stores"
    page_size: int | None = None
    page_token: str | None = None


class GetStore(ToolInvocation):
    tool: Literal["gemini_get_store"] = "gemini_get_store"
    store_name: str


class DeleteStore(ToolInvocation):
    tool: Literal["gemini_delete_store"] = "gemini_delete_store"
    store_name: str
    force: bool | None = None


# -- upload & import ------------------------------------------------------


class UploadToStore(ToolInvocation):
    tool: Literal["gemini_upload_to_store"] = "gemini_upload_to_store"
    store_name: str
    mime_type: str
    content: str
    display_name: str | None = None
    content_encoding: Literal["text", "base64"] = "text"
    custom_metadata: list[CustomMetadata] | None = None
    chunking_config: ChunkingConfig | None = None

    @field_validator("content_encoding", mode="before")
    @classmethod
    def _default_encoding(cls, value):
        return value or "text"

    @model_validator(mode="after")
    def _content_decodes(self) -> UploadToStore:
        if self.content_encoding == "base64":
            try:
                decode_content(self.content, "base64")
            except binascii.Error as e:
                raise ValueError(f"content is not valid base64 ({e})") from e
        return self


class ImportFileToStore(ToolInvocation):
    tool: Literal["gemini_import_file_to_store"] = "gemini_import_file_to_store"
    store_name: str
    file_name: str
    custom_metadata: list[CustomMetadata] | None = None
    chunking_config: ChunkingConfig | None = None


# -- operations -----------------------------------------------------------


class GetOperation(ToolInvocation):
    tool: Literal["gemini_get_operation"] = "gemini_get_operation"
    operation_name: str


class GetUploadOperation(ToolInvocation):
    tool: Literal["gemini_get_upload_operation"] = "gemini_get_upload_operation"
    operation_name: str


# -- documents ------------------------------------------------------------


class ListDocuments(ToolInvocation):
    tool: Literal["gemini_list_documents"] = "gemini_list_documents"
    store_name: str
    page_size: int | None = None
    page_token: str | None = None


class GetDocument(ToolInvocation):
    tool: Literal["gemini_get_document"] = "gemini_get_document"
    document_name: str


class DeleteDocument(ToolInvocation):
    tool: Literal["gemini_delete_document"] = "gemini_delete_document"
    document_name: str
    force: bool | None = None


# -- query ----------------------------------------------------------------


class RagQuery(ToolInvocation):
    tool: Literal["gemini_rag_query"] = "gemini_rag_query"
    query: str
    store_names: list[str]
    model: str | None = None
    metadata_filter: str | None = None


Invocation = Annotated[
    Union[
        CreateStore,
        ListStores,
        GetStore,
        DeleteStore,
        UploadToStore,
        ImportFileToStore,
        GetOperation,
        GetUploadOperation,
        ListDocuments,
        GetDocument,
        DeleteDocument,
        RagQuery,
    ],
    Field(discriminator="tool"),
]

INVOCATION_TYPES: dict[str, type[ToolInvocation]] = {
    cls.model_fields["tool"].default: cls
    for cls in ToolInvocation.__subclasses__()
}

_adapter: TypeAdapter[Invocation] = TypeAdapter(Invocation)


def _describe(tool_name: str, exc: ValidationError) -> str:
    problems = []
    for err in exc.errors():
        loc = err["loc"][1:] if err["loc"] and err["loc"][0] == tool_name else err["loc"]
        location = ".".join(str(p) for p in loc) or "arguments"
        problems.append(f"{location}: {err['msg']}")
    return "; ".join(problems)


def resolve_invocation(tool_name: str, arguments: dict | None) -> ToolInvocation:
    """Parse a raw (name, argument bag) pair into its typed invocation.

    Raises:
        UnknownToolError: the name is not one of the twelve tools.
        InvalidArgumentsError: the arguments do not satisfy the tool's contract.
    """
    if tool_name not in INVOCATION_TYPES:
        raise UnknownToolError(tool_name)
    if arguments is not None and not isinstance(arguments, dict):
        raise InvalidArgumentsError(tool_name, "arguments must be an object")

    try:
        return _adapter.validate_python({**(arguments or {}), "tool": tool_name})
    except ValidationError as e:
        raise InvalidArgumentsError(tool_name, _describe(tool_name, e)) from e
