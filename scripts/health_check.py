"""Connect over SSE, list tools and walk a short three-step thought sequence."""
from __future__ import annotations

import asyncio
import os

from mcp import ClientSession
from mcp.client.sse import sse_client


SSE_URL = os.getenv("THINKING_SERVER_SSE_URL", "http://127.0.0.1:4002/sse")

STEPS = [
    {"thought": "Restate the problem", "thoughtNumber": 1, "totalThoughts": 2, "nextThoughtNeeded": True},
    {"thought": "Try an alternative", "thoughtNumber": 2, "totalThoughts": 2, "nextThoughtNeeded": True,
     "branchFromThought": 1, "branchId": "health-check"},
    {"thought": "Conclude", "thoughtNumber": 3, "totalThoughts": 2, "nextThoughtNeeded": False},
]


async def main() -> None:
    print(f"Connecting to thinking server at {SSE_URL}...")
    async with sse_client(SSE_URL) as (read_stream, write_stream):
        async with ClientSession(read_stream, write_stream) as session:
            await session.initialize()

            tools = await session.list_tools()
            print(f"Found {len(tools.tools)} tools:")
            for tool in tools.tools:
                print(f" - {tool.name}")

            for step in STEPS:
                result = await session.call_tool("sequentialthinking", step)
                status = "FAILED" if result.isError else "OK"
                print(f"sequentialthinking step {step['thoughtNumber']} {status}")
                for item in result.content:
                    print(getattr(item, "text", item))


if __name__ == "__main__":
    asyncio.run(main())
