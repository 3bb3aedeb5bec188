"""
Entry point for the thinking server.

MCP_TRANSPORT=sse (default) serves the FastAPI app with uvicorn;
MCP_TRANSPORT=stdio runs the MCP server over stdin/stdout.
"""
from __future__ import annotations

import os
import sys

import uvicorn

from .http_app import create_app
from .server import mcp, server_cfg


def main() -> None:
    transport = os.getenv("MCP_TRANSPORT", "sse").strip().lower()
    try:
        if transport == "stdio":
            mcp.run(transport="stdio")
            return

        host = os.getenv("MCP_SERVER_HOST", server_cfg.get("host", "127.0.0.1"))
        port = int(os.getenv("MCP_SERVER_PORT", str(server_cfg.get("port", 4002))))
        app = create_app()

        print(f"Starting thinking server on http://{host}:{port}")
        print(f"SSE endpoint: http://{host}:{port}/sse")
        print(f"Message endpoint: http://{host}:{port}/messages/")
        print(f"Healthcheck: http://{host}:{port}/health")

        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level=str(server_cfg.get("log_level", "INFO")).lower(),
            server_header=False,
        )
    except KeyboardInterrupt:
        print("\nServer shutdown requested...", file=sys.stderr)
        sys.exit(0)
    except Exception as e:
        print(f"Failed to start thinking server: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
