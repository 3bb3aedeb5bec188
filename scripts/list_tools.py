from __future__ import annotations

import asyncio
import os

from mcp import ClientSession
from mcp.client.sse import sse_client


SSE_URL = os.getenv("THINKING_SERVER_SSE_URL", "http://127.0.0.1:4002/sse")


async def main() -> None:
    async with sse_client(SSE_URL) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()
            tools_result = await session.list_tools()
            print("Available tools:")
            for tool in tools_result.tools:
                print(f"- {tool.name}: {tool.description}")


if __name__ == "__main__":
    asyncio.run(main())
