from __future__ import annotations

import logging
import os
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Optional

from mcp.server.fastmcp import Context, FastMCP
from mcp.server.session import ServerSession
from mcp.types import CallToolResult, TextContent
from pydantic import Field

from .config import config_path_from_env, load_config, section
from .observability import InMemoryMetrics, get_shared_metrics, set_shared_metrics
from .session import THOUGHT_LOGGER_NAME, ThinkingSession, ThoughtSink, default_thought_sink
from .tools.utility_tools import register_utility_tools


CONFIG_PATH = config_path_from_env()
CONFIG = load_config(CONFIG_PATH)

THINKING_TOOL_NAME = "sequentialthinking"
THINKING_TOOL_DESCRIPTION = """A detailed tool for dynamic and reflective problem-solving through thoughts.
This tool helps analyze problems through a flexible thinking process that can adapt and evolve.
Each thought can build on, question, or revise previous insights as understanding deepens."""


def setup_logger(config: Dict[str, Any]) -> logging.Logger:
    logger = logging.getLogger("thinking_server")
    if logger.handlers:
        return logger
    server_cfg = section(config, "server")
    level_name = str(server_cfg.get("log_level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    logger.setLevel(level)
    handler = logging.StreamHandler()

    class StructuredFormatter(logging.Formatter):
        """Fills in structured fields that a log call did not pass via `extra`."""

        def format(self, record: logging.LogRecord) -> str:
            for name in ("tool", "duration_ms", "history_length"):
                if not hasattr(record, name):
                    setattr(record, name, "")
            return super().format(record)

    handler.setFormatter(StructuredFormatter(
        '{"ts":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","tool":"%(tool)s",'
        '"duration_ms":"%(duration_ms)s","history_length":"%(history_length)s","msg":"%(message)s"}'
    ))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def setup_thought_logger() -> logging.Logger:
    """The framed thought blocks are multi-line, so they get a plain formatter of their own."""
    logger = logging.getLogger(THOUGHT_LOGGER_NAME)
    if logger.handlers:
        return logger
    logger.setLevel(logging.INFO)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def _discard_thought(_text: str) -> None:
    return None


def build_thought_sink(config: Dict[str, Any]) -> ThoughtSink:
    if not section(config, "thinking").get("log_thoughts", True):
        return _discard_thought
    setup_thought_logger()
    return default_thought_sink()


@dataclass
class AppContext:
    config: Dict[str, Any]
    session: ThinkingSession
    logger: logging.Logger
    metrics: InMemoryMetrics


TypedContext = Context[ServerSession, AppContext]


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[AppContext]:
    logger = setup_logger(CONFIG)

    # One metrics instance per process, shared with the HTTP /metrics route
    metrics = get_shared_metrics()
    if metrics is None:
        metrics = InMemoryMetrics()
        set_shared_metrics(metrics)

    session = ThinkingSession(sink=build_thought_sink(CONFIG))
    logger.info("Thinking session started")
    app_ctx = AppContext(
        config=CONFIG,
        session=session,
        logger=logger,
        metrics=metrics,
    )
    try:
        yield app_ctx
    finally:
        session.close()


server_cfg = section(CONFIG, "server")

_server_host = os.getenv("MCP_SERVER_HOST", server_cfg.get("host", "127.0.0.1"))
_server_port = int(os.getenv("MCP_SERVER_PORT", server_cfg.get("port", 4002)))

mcp = FastMCP(
    server_cfg.get("name", "sequential-thinking"),
    lifespan=lifespan,
    host=_server_host,
    port=_server_port,
)


def _require_context(ctx: TypedContext | None) -> TypedContext:
    """Ensure context is provided, raise if None."""
    if ctx is None:
        raise RuntimeError("Context is required")
    return ctx


def _record_call(ctx: Optional[Context], tool_name: str, start: float, error: bool) -> None:
    """Record latency and outcome of a tool call; a no-op outside a request."""
    if ctx is None:
        return
    app = ctx.request_context.lifespan_context
    duration_ms = (time.perf_counter() - start) * 1000.0
    app.metrics.record(tool_name, duration_ms, error=error)
    log = app.logger.warning if error else app.logger.info
    log(
        "Tool call failed" if error else "Tool call succeeded",
        extra={
            "tool": tool_name,
            "duration_ms": duration_ms,
            "history_length": len(app.session.history),
        },
    )


def _tool_profile() -> str:
    tools_cfg = section(CONFIG, "tools")
    return os.getenv("MCP_TOOL_PROFILE", str(tools_cfg.get("profile", "full"))).strip().lower()


@mcp.tool(
    name=THINKING_TOOL_NAME,
    description=THINKING_TOOL_DESCRIPTION,
    structured_output=False,
)
def sequential_thinking(
    thought: Annotated[str, Field(description="Your current thinking step")],
    nextThoughtNeeded: Annotated[bool, Field(description="Whether another thought step is needed")],
    thoughtNumber: Annotated[int, Field(ge=1, description="Current thought number")],
    totalThoughts: Annotated[int, Field(ge=1, description="Estimated total thoughts needed")],
    isRevision: Annotated[Optional[bool], Field(description="Whether this revises previous thinking")] = None,
    revisesThought: Annotated[Optional[int], Field(ge=1, description="Which thought is being reconsidered")] = None,
    branchFromThought: Annotated[Optional[int], Field(ge=1, description="Branching point thought number")] = None,
    branchId: Annotated[Optional[str], Field(description="Branch identifier")] = None,
    needsMoreThoughts: Annotated[Optional[bool], Field(description="If more thoughts are needed")] = None,
    ctx: TypedContext | None = None,
) -> CallToolResult:
    ctx = _require_context(ctx)
    app = ctx.request_context.lifespan_context
    start = time.perf_counter()

    raw: Dict[str, Any] = {
        "thought": thought,
        "nextThoughtNeeded": nextThoughtNeeded,
        "thoughtNumber": thoughtNumber,
        "totalThoughts": totalThoughts,
    }
    optional = {
        "isRevision": isRevision,
        "revisesThought": revisesThought,
        "branchFromThought": branchFromThought,
        "branchId": branchId,
        "needsMoreThoughts": needsMoreThoughts,
    }
    raw.update({k: v for k, v in optional.items() if v is not None})

    envelope = app.session.handle(raw)
    _record_call(ctx, THINKING_TOOL_NAME, start, envelope["isError"])
    return CallToolResult(
        content=[TextContent(type="text", text=item["text"]) for item in envelope["content"]],
        isError=envelope["isError"],
    )


@mcp.tool(
    name="observability_metrics",
    description="Return in-memory counters and average latency per MCP tool.",
)
async def observability_metrics(
    ctx: TypedContext | None = None,
) -> Dict[str, Any]:
    ctx = _require_context(ctx)
    app = ctx.request_context.lifespan_context
    return {"metrics": app.metrics.snapshot()}


@mcp.tool(
    name="observability_health",
    description="Return server configuration and the state of the current thinking session.",
)
async def observability_health(
    include_config: bool = True,
    ctx: TypedContext | None = None,
) -> Dict[str, Any]:
    ctx = _require_context(ctx)
    app = ctx.request_context.lifespan_context
    cfg = section(app.config, "server")
    summary = app.session.summary()
    data: Dict[str, Any] = {
        "time": datetime.now(timezone.utc).isoformat(),
        "server": {
            "host": cfg.get("host"),
            "port": cfg.get("port"),
            "name": cfg.get("name", "sequential-thinking"),
            "log_level": cfg.get("log_level", "INFO"),
        },
        "session": {
            "thoughtHistoryLength": summary.length,
            "branches": summary.branch_ids,
            "closed": app.session.closed,
        },
        "tool_profile": _tool_profile(),
    }
    if include_config:
        data["server_config"] = cfg
    return data


@mcp.tool(
    name="observability_discovery",
    description="List all available MCP tools and their parameters.",
)
async def observability_discovery(
    ctx: TypedContext | None = None,
) -> Dict[str, Any]:
    _require_context(ctx)
    tools_list: List[Dict[str, Any]] = []
    for tool in await mcp.list_tools():
        tools_list.append({
            "name": tool.name,
            "description": tool.description or "",
            "inputSchema": tool.inputSchema,
        })
    tools_list = sorted(tools_list, key=lambda x: x["name"])
    return {
        "tool_count": len(tools_list),
        "tools": tools_list,
        "transport": "sse",
        "endpoint": "/sse",
    }


if _tool_profile() == "full":
    register_utility_tools(mcp, _record_call)
