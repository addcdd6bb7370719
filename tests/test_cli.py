"""Tests for the Click CLI."""

import base64
import json
from unittest.mock import patch

import httpx
import pytest
from click.testing import CliRunner

from geminirag.interfaces.cli import _encode_file, cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, service):
    """Run a CLI command against the recording backend."""
    def _invoke(*args):
        with patch("geminirag.interfaces.cli.RAGService", return_value=service):
            return runner.invoke(cli, list(args), obj={})
    return _invoke


class TestEncodeFile:
    def test_text(self):
        assert _encode_file(b"hello", "text/markdown") == ("hello", "text")

    def test_json_is_text(self):
        assert _encode_file(b"{}", "application/json") == ("{}", "text")

    def test_binary(self):
        data = b"\x89PNG\r\n"
        assert _encode_file(data, "image/png") == (base64.b64encode(data).decode(), "base64")

    def test_undecodable_text_falls_back(self):
        data = b"\xff\xfe"
        assert _encode_file(data, "text/plain")[1] == "base64"


class TestCatalogCommands:
    def test_tools(self, runner):
        result = runner.invoke(cli, ["tools"])
        assert result.exit_code == 0
        assert "gemini_rag_query" in result.output
        assert "destructive" in result.output

    def test_info(self, invoke):
        result = invoke("info")
        assert result.exit_code == 0
        assert json.loads(result.output)["tools_available"] == 12


class TestCall:
    def test_success(self, invoke, backend):
        backend.respond_with(httpx.Response(200, json={"name": "fileSearchStores/a"}))
        result = invoke("call", "gemini_create_store", "--args", '{"display_name": "Docs"}')

        assert result.exit_code == 0
        assert json.loads(result.output) == {"name": "fileSearchStores/a"}
        assert json.loads(backend.last.content) == {"displayName": "Docs"}

    def test_tool_error_exits_nonzero(self, invoke):
        result = invoke("call", "gemini_nope")
        assert result.exit_code == 1
        assert "Unknown tool: gemini_nope" in result.output

    def test_bad_json(self, invoke):
        result = invoke("call", "gemini_list_stores", "--args", "{nope")
        assert result.exit_code == 2


class TestConvenienceCommands:
    def test_stores(self, invoke, backend):
        backend.respond_with(httpx.Response(200, json={
            "fileSearchStores": [{"name": "fileSearchStores/a", "displayName": "Docs"}],
            "nextPageToken": "next",
        }))
        result = invoke("stores", "--page-size", "5")

        assert result.exit_code == 0
        assert "fileSearchStores/a" in result.output
        assert "Next page token: next" in result.output
        assert backend.last.url.params["pageSize"] == "5"

    def test_stores_empty(self, invoke, backend):
        backend.respond_with(httpx.Response(200, json={}))
        result = invoke("stores")
        assert "No stores found." in result.output

    def test_documents(self, invoke, backend):
        backend.respond_with(httpx.Response(200, json={"documents": [{
            "name": "fileSearchStores/a/documents/d",
            "state": "ACTIVE",
            "sizeBytes": "42",
            "mimeType": "text/plain",
        }]}))
        result = invoke("documents", "fileSearchStores/a")

        assert result.exit_code == 0
        assert "ACTIVE" in result.output
        assert "42" in result.output

    def test_operation(self, invoke, backend):
        backend.respond_with(httpx.Response(200, json={
            "name": "fileSearchStores/a/upload/operations/op",
            "done": True,
            "error": {"code": 3, "message": "unsupported file"},
        }))
        result = invoke("operation", "fileSearchStores/a/upload/operations/op", "--upload")

        assert result.exit_code == 0
        assert "failed" in result.output
        assert "unsupported file" in result.output

    def test_operation_malformed_payload(self, invoke, backend):
        backend.respond_with(httpx.Response(200, json={
            "name": "fileSearchStores/a/operations/op",
            "done": True,
            "error": {"code": 13, "message": "boom"},
            "response": {"documentName": "d"},
        }))
        result = invoke("operation", "fileSearchStores/a/operations/op")

        assert result.exit_code == 1
        assert "Malformed operation in response" in result.output
        assert not isinstance(result.exception, ValueError)

    def test_query(self, invoke, backend):
        backend.respond_with(httpx.Response(200, json={"candidates": [{
            "content": {"parts": [{"text": "Forty-two."}]},
            "groundingMetadata": {"groundingChunks": [{"retrievedContext": {"title": "guide.md"}}]},
        }]}))
        result = invoke("query", "What is the answer?", "-s", "fileSearchStores/a", "-m", "gemini-2.5-pro")

        assert result.exit_code == 0
        assert "Forty-two." in result.output
        assert "[1] guide.md" in result.output
        assert backend.last.url.path == "/v1beta/models/gemini-2.5-pro:generateContent"

    def test_upload(self, invoke, backend, tmp_dir):
        path = tmp_dir / "notes.md"
        path.write_text("# Notes\n")
        backend.respond_with(httpx.Response(200, json={"name": "fileSearchStores/a/upload/operations/op"}))

        result = invoke("upload", "fileSearchStores/a", str(path))

        assert result.exit_code == 0
        assert "Uploaded 'notes.md'" in result.output
        assert "running" in result.output
        body = backend.last.content
        assert b'"displayName":"notes.md"' in body
        assert b"# Notes\n" in body

    def test_remote_error_becomes_cli_error(self, invoke, backend):
        backend.respond_with(httpx.Response(404, text="not found"))
        result = invoke("documents", "fileSearchStores/missing")

        assert result.exit_code == 1
        assert "Gemini API Error (404): not found" in result.output
