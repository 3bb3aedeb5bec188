from __future__ import annotations

import asyncio
import json
import os
import sys
from typing import Any, Dict

from mcp import ClientSession
from mcp.client.sse import sse_client


SSE_URL = os.getenv("THINKING_SERVER_SSE_URL", "http://127.0.0.1:4002/sse")


async def main() -> None:
    if len(sys.argv) < 3:
        print("Usage: python scripts/call_tool.py <tool_name> '<json-args>'")
        raise SystemExit(1)

    tool_name = sys.argv[1]
    raw_args = sys.argv[2]

    try:
        params: Dict[str, Any] = json.loads(raw_args)
    except json.JSONDecodeError as exc:
        print("Failed to parse JSON arguments")
        print(repr(exc))
        raise SystemExit(1)

    async with sse_client(SSE_URL) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()
            result = await session.call_tool(tool_name, params)
            print("Tool call result:" if not result.isError else "Tool call returned an error:")
            for item in result.content:
                print(getattr(item, "text", item))


if __name__ == "__main__":
    asyncio.run(main())
