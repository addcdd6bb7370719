"""Line-delimited JSON-RPC over stdin/stdout."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import TextIO

from geminirag.interfaces.protocol import PARSE_ERROR, ProtocolHandler, error_response

logger = logging.getLogger(__name__)


class StdioServer:
    """Reads one JSON message per line and writes one response per line.

    Each request runs as its own task so a slow tool call does not hold up
    the others; responses may therefore arrive out of request order.
    """

    def __init__(
        self,
        handler: ProtocolHandler,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ):
        self._handler = handler
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._tasks: set[asyncio.Task] = set()

    def _write(self, message: dict) -> None:
        self._stdout.write(json.dumps(message) + "\n")
        self._stdout.flush()

    async def _respond(self, request: dict) -> None:
        response = await self._handler.handle(request)
        if response is not None:
            self._write(response)

    async def serve(self) -> None:
        """Run until stdin is closed, then wait for in-flight requests."""
        logger.info("stdio server started")
        while True:
            line = await asyncio.to_thread(self._stdin.readline)
            if not line:
                break
            line = line.strip()
            if not line:
                continue

            try:
                request = json.loads(line)
            except json.JSONDecodeError as e:
                self._write(error_response(None, PARSE_ERROR, f"Parse error: {e}"))
                continue

            task = asyncio.create_task(self._respond(request))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        if self._tasks:
            await asyncio.gather(*self._tasks)
        logger.info("stdio server stopped")
