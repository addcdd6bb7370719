"""Tests for the RAGService layer."""

from unittest.mock import patch

from geminirag.core.config import ServerConfig, Settings
from geminirag.core.service import SERVER_INFO_URI, RAGService


class TestRAGService:
    def test_server_info(self, service):
        info = service.server_info()
        assert info == {
            "name": "gemini-file-search-rag",
            "version": "0.1.0",
            "connected": True,
            "tools_available": 12,
            "tool_categories": {"stores": 4, "upload": 2, "operations": 2, "documents": 3, "query": 1},
        }

    def test_server_info_unconfigured(self, unconfigured_service):
        assert unconfigured_service.server_info()["connected"] is False

    def test_custom_name(self):
        svc = RAGService(settings=Settings(gemini_api_key="k", server=ServerConfig(name="kb")))
        assert svc.name == "kb"
        assert svc.server_info()["name"] == "kb"

    def test_resources(self, service):
        resources = service.list_resources()
        assert [r["uri"] for r in resources] == [SERVER_INFO_URI]
        assert resources[0]["mimeType"] == "application/json"

    def test_prompts(self, service):
        assert {p["name"] for p in service.list_prompts()} == {"setup-rag", "query-rag"}
        prompt = service.get_prompt("setup-rag")
        assert "gemini_create_store" in prompt["messages"][0]["content"]["text"]
        assert service.get_prompt("missing") is None

    def test_loads_settings_when_none_given(self):
        with patch("geminirag.core.service.load_dotenv") as mock_dotenv, \
             patch("geminirag.core.service.load_settings", return_value=Settings(gemini_api_key="env-key")):
            svc = RAGService()

        mock_dotenv.assert_called_once()
        assert svc.dispatcher.configured

    def test_missing_key_logged(self, unconfigured_settings, caplog):
        with caplog.at_level("WARNING"):
            RAGService(settings=unconfigured_settings)
        assert "GEMINI_API_KEY" in caplog.text
