"""
FastAPI/ASGI app for the thinking server.

- /health: liveness check
- /metrics: Prometheus text built from the shared tool metrics
- /mcp/discovery: registered tool names and a hash of the tool set
- everything else: the FastMCP SSE app (GET /sse opens the push channel,
  POST /messages/ delivers client messages)
"""
from __future__ import annotations

import hashlib
import logging
import os
from typing import Any, List

from fastapi import FastAPI, Response

from .observability import InMemoryMetrics, format_prometheus, get_shared_metrics
from .server import mcp, server_cfg

logger = logging.getLogger("thinking_server.http_app")


async def _list_tool_names() -> List[str]:
    tools = await mcp.list_tools()
    return sorted(tool.name for tool in tools)


def _compute_tools_hash(tool_names: List[str]) -> str:
    """SHA256 over the sorted, newline-joined tool names."""
    content = "\n".join(sorted(tool_names))
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Sequential Thinking MCP Server",
        description="MCP tool server for step-by-step reasoning",
        version="0.2.0",
    )

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"ok": True, "status": "healthy"}

    @app.get("/metrics")
    async def metrics() -> Response:
        metrics_instance = get_shared_metrics()
        if metrics_instance is None:
            # No MCP client has connected yet, so nothing has been recorded
            metrics_instance = InMemoryMetrics()
        content = format_prometheus(metrics_instance.snapshot())
        return Response(content=content, media_type="text/plain; version=0.0.4")

    @app.get("/mcp/discovery")
    async def discovery() -> dict[str, Any]:
        tool_names = await _list_tool_names()
        tools_hash = _compute_tools_hash(tool_names)

        response: dict[str, Any] = {
            "version": "1.0",
            "server": server_cfg.get("name", "sequential-thinking"),
            "transport": "sse",
            "endpoint": "/sse",
            "tools": [{"name": name} for name in tool_names],
            "tool_count": len(tool_names),
            "tools_hash": tools_hash,
        }

        pinned_hash = os.environ.get("PINNED_TOOLS_HASH", "").strip()
        if pinned_hash:
            hash_mismatch = tools_hash != pinned_hash
            if hash_mismatch:
                logger.warning(
                    f"Tools hash mismatch: expected {pinned_hash}, got {tools_hash}. "
                    f"Tool set may have changed unexpectedly."
                )
            response["pinned_hash"] = pinned_hash
            response["hash_mismatch"] = hash_mismatch

        return response

    app.mount("/", mcp.sse_app())
    logger.info("Mounted FastMCP SSE app at /sse")
    return app
