"""FastAPI application serving the JSON-RPC handler over HTTP."""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from geminirag.core.service import SERVER_VERSION, RAGService
from geminirag.interfaces.protocol import PARSE_ERROR, ProtocolHandler, error_response

logger = logging.getLogger(__name__)


def create_app(service: RAGService | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    service = service or RAGService()
    handler = ProtocolHandler(service)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting %s over HTTP", service.name)
        yield
        logger.info("%s stopped", service.name)

    app = FastAPI(
        title=service.name,
        version=SERVER_VERSION,
        description="Gemini File Search RAG tools over JSON-RPC",
        lifespan=lifespan,
    )
    app.state.service = service

    @app.get("/health", tags=["System"], summary="Health check")
    async def health_check():
        return JSONResponse({
            "status": "healthy",
            "version": SERVER_VERSION,
            "connected": service.dispatcher.configured,
        })

    @app.get("/tools", tags=["Tools"], summary="Tool catalog")
    async def list_tools():
        return JSONResponse({"tools": service.dispatcher.list_tools()})

    @app.post("/mcp", tags=["Protocol"], summary="JSON-RPC endpoint")
    async def rpc(request: Request):
        body = await request.body()
        try:
            message = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return JSONResponse(error_response(None, PARSE_ERROR, f"Parse error: {e}"))

        response = await handler.handle(message)
        if response is None:
            return Response(status_code=202)
        return JSONResponse(response)

    return app
