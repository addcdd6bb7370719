"""multipart/related body construction for direct store uploads.

Byte layout (fixed order, metadata first)::

    --<boundary>\\r\\n
    Content-Type: application/json\\r\\n\\r\\n
    <metadata json>\\r\\n
    --<boundary>\\r\\n
    Content-Type: <mime type>\\r\\n\\r\\n
    <raw bytes>\\r\\n
    --<boundary>--
"""

from __future__ import annotations

import base64
import json
import uuid
from dataclasses import dataclass
from typing import Any

BOUNDARY_PREFIX = "geminirag-boundary-"

CONTENT_ENCODINGS = ("text", "base64")


def decode_content(content: str, content_encoding: str = "text") -> bytes:
    """Turn tool-supplied content into the bytes to upload.

    ``base64`` content is decoded strictly (whitespace such as line wraps is
    allowed, any other character outside the alphabet raises
    ``binascii.Error``); anything else is treated as text and UTF-8 encoded.
    """
    if content_encoding == "base64":
        return base64.b64decode("".join(content.split()), validate=True)
    return content.encode("utf-8")


def new_boundary(*avoid: bytes) -> str:
    """Generate a boundary token that does not occur in any of ``avoid``."""
    while True:
        boundary = BOUNDARY_PREFIX + uuid.uuid4().hex
        marker = boundary.encode("ascii")
        if not any(marker in chunk for chunk in avoid):
            return boundary


@dataclass
class MultipartBody:
    boundary: str
    body: bytes

    @property
    def content_type(self) -> str:
        return f"multipart/related; boundary={self.boundary}"


def build_multipart_body(
    metadata: dict[str, Any],
    content: bytes,
    mime_type: str,
    boundary: str | None = None,
) -> MultipartBody:
    """Assemble the two-part upload body: JSON metadata, then the raw content."""
    metadata_json = json.dumps(metadata, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    if boundary is None:
        boundary = new_boundary(content, metadata_json)

    prefix = (
        f"--{boundary}\r\n"
        "Content-Type: application/json\r\n\r\n"
    ).encode("utf-8")
    middle = (
        f"\r\n--{boundary}\r\n"
        f"Content-Type: {mime_type}\r\n\r\n"
    ).encode("utf-8")
    suffix = f"\r\n--{boundary}--".encode("utf-8")

    return MultipartBody(boundary=boundary, body=prefix + metadata_json + middle + content + suffix)
