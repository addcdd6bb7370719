"""Test fixtures for geminirag."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import httpx
import pytest

from geminirag.core.config import Settings
from geminirag.core.dispatcher import Dispatcher
from geminirag.core.service import RAGService


class RecordingBackend:
    """Stand-in for the Gemini REST API.

    Records every request and answers with the queued responses in order
    (the last one repeats). Plug ``transport`` into the client under test.
    """

    def __init__(self, responses: list[httpx.Response] | None = None):
        self._responses = responses or [httpx.Response(200, json={})]
        self._call_index = 0
        self.requests: list[httpx.Request] = []
        self.transport = httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        resp = self._responses[min(self._call_index, len(self._responses) - 1)]
        self._call_index += 1
        # a Response object is bound to one request; hand out copies
        return httpx.Response(resp.status_code, headers=resp.headers, content=resp.content)

    def respond_with(self, *responses: httpx.Response) -> None:
        self._responses = list(responses)
        self._call_index = 0

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last.content)


@pytest.fixture
def tmp_dir():
    with tempfile.TemporaryDirectory() as d:
        yield Path(d)


@pytest.fixture
def backend():
    return RecordingBackend()


@pytest.fixture
def settings():
    return Settings(gemini_api_key="test-key")


@pytest.fixture
def unconfigured_settings():
    return Settings(gemini_api_key="")


@pytest.fixture
def dispatcher(settings, backend):
    return Dispatcher(settings, transport=backend.transport)


@pytest.fixture
def service(settings, backend):
    return RAGService(settings=settings, transport=backend.transport)


@pytest.fixture
def unconfigured_service(unconfigured_settings, backend):
    return RAGService(settings=unconfigured_settings, transport=backend.transport)
