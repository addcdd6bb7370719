"""Client for the remote Gemini File Search service."""

from geminirag.client.gemini import GeminiRAGClient
from geminirag.client.types import ChunkingConfig, CustomMetadata

__all__ = ["ChunkingConfig", "CustomMetadata", "GeminiRAGClient"]
