"""Gemini File Search data types.

Request values (custom metadata, chunking config) are pydantic models so they
validate tool input and dump straight to the wire format. Responses are passed
through as plain dicts; the dataclasses below are read-only views over them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class StringList(BaseModel):
    values: list[str]


class CustomMetadata(BaseModel):
    """A key plus exactly one typed value."""

    model_config = ConfigDict(populate_by_name=True)

    key: str
    string_value: str | None = Field(default=None, alias="stringValue")
    numeric_value: int | float | None = Field(default=None, alias="numericValue")
    string_list_value: StringList | None = Field(default=None, alias="stringListValue")

    @model_validator(mode="after")
    def _exactly_one_value(self) -> CustomMetadata:
        present = [
            v for v in (self.string_value, self.numeric_value, self.string_list_value) if v is not None
        ]
        if len(present) != 1:
            raise ValueError(
                f"custom metadata '{self.key}' needs exactly one of "
                "stringValue, numericValue, stringListValue"
            )
        return self

    def to_api(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ChunkingConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    chunk_size: int | None = Field(default=None, alias="chunkSize")
    chunk_overlap: int | None = Field(default=None, alias="chunkOverlap")

    def to_api(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


TERMINAL_DOCUMENT_STATES = ("ACTIVE", "FAILED")


@dataclass
class Store:
    name: str
    display_name: str = ""
    create_time: str | None = None
    update_time: str | None = None

    @classmethod
    def from_api(cls, data: dict) -> Store:
        return cls(
            name=data.get("name", ""),
            display_name=data.get("displayName", ""),
            create_time=data.get("createTime"),
            update_time=data.get("updateTime"),
        )


@dataclass
class Document:
    name: str
    display_name: str = ""
    state: str = "PENDING"
    size_bytes: int | None = None
    mime_type: str | None = None
    custom_metadata: list[dict] = field(default_factory=list)
    create_time: str | None = None
    update_time: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_DOCUMENT_STATES

    @classmethod
    def from_api(cls, data: dict) -> Document:
        # sizeBytes is an int64 and arrives as a JSON string
        size = data.get("sizeBytes")
        return cls(
            name=data.get("name", ""),
            display_name=data.get("displayName", ""),
            state=data.get("state", "PENDING"),
            size_bytes=int(size) if size is not None else None,
            mime_type=data.get("mimeType"),
            custom_metadata=list(data.get("customMetadata") or []),
            create_time=data.get("createTime"),
            update_time=data.get("updateTime"),
        )


@dataclass
class OperationError:
    code: int
    message: str


@dataclass
class Operation:
    name: str
    done: bool = False
    metadata: dict | None = None
    error: OperationError | None = None
    response: dict | None = None

    @classmethod
    def from_api(cls, data: dict) -> Operation:
        """Build an Operation, rejecting payloads that break the done/error/response rules."""
        done = bool(data.get("done", False))
        error = data.get("error")
        response = data.get("response")
        if error is not None and response is not None:
            raise ValueError(f"Operation {data.get('name')} has both error and response")
        if not done and (error is not None or response is not None):
            raise ValueError(f"Operation {data.get('name')} is not done but carries a result")
        return cls(
            name=data.get("name", ""),
            done=done,
            metadata=data.get("metadata"),
            error=OperationError(code=error.get("code", 0), message=error.get("message", ""))
            if error is not None
            else None,
            response=response,
        )

    @property
    def status(self) -> str:
        if not self.done:
            return "running"
        return "failed" if self.error else "succeeded"


@dataclass
class Citation:
    uri: str | None = None
    title: str | None = None
    text: str | None = None


@dataclass
class Answer:
    text: str
    citations: list[Citation] = field(default_factory=list)


@dataclass
class QueryResult:
    answers: list[Answer] = field(default_factory=list)

    @property
    def text(self) -> str:
        return self.answers[0].text if self.answers else ""

    @classmethod
    def from_api(cls, data: dict) -> QueryResult:
        answers = []
        for candidate in data.get("candidates") or []:
            parts = (candidate.get("content") or {}).get("parts") or []
            text = "".join(p.get("text", "") for p in parts)
            chunks = (candidate.get("groundingMetadata") or {}).get("groundingChunks") or []
            citations = [
                Citation(uri=ctx.get("uri"), title=ctx.get("title"), text=ctx.get("text"))
                for ctx in (chunk.get("retrievedContext") for chunk in chunks)
                if ctx
            ]
            answers.append(Answer(text=text, citations=citations))
        return cls(answers=answers)
