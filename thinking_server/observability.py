from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass
class ToolMetrics:
    calls: int = 0
    errors: int = 0
    total_latency_ms: float = 0.0

    def observe(self, duration_ms: float, error: bool) -> None:
        self.calls += 1
        self.total_latency_ms += float(duration_ms)
        if error:
            self.errors += 1

    @property
    def avg_latency_ms(self) -> float:
        if self.calls == 0:
            return 0.0
        return self.total_latency_ms / self.calls


class InMemoryMetrics:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tools: Dict[str, ToolMetrics] = {}

    def record(self, tool: str, duration_ms: float, error: bool) -> None:
        with self._lock:
            metrics = self._tools.get(tool)
            if metrics is None:
                metrics = ToolMetrics()
                self._tools[tool] = metrics
            metrics.observe(duration_ms, error)

    def snapshot(self) -> Dict[str, Dict[str, float]]:
        with self._lock:
            data: Dict[str, Dict[str, float]] = {}
            for name, m in self._tools.items():
                data[name] = {
                    "calls": float(m.calls),
                    "errors": float(m.errors),
                    "avg_latency_ms": float(m.avg_latency_ms),
                }
            return data


# Metrics instance shared between the MCP lifespan and the HTTP /metrics route
_shared_metrics: Optional[InMemoryMetrics] = None


def set_shared_metrics(metrics: InMemoryMetrics) -> None:
    global _shared_metrics
    _shared_metrics = metrics


def get_shared_metrics() -> Optional[InMemoryMetrics]:
    return _shared_metrics


def format_prometheus(snapshot: Dict[str, Dict[str, float]], healthy: bool = True) -> str:
    """Render a metrics snapshot in the Prometheus text exposition format."""
    lines: List[str] = [
        "# HELP thinking_server_healthy Server health status",
        "# TYPE thinking_server_healthy gauge",
        f"thinking_server_healthy {1 if healthy else 0}",
    ]
    series = [
        ("mcp_tool_calls_total", "counter", "Total number of tool calls", "calls"),
        ("mcp_tool_errors_total", "counter", "Total number of tool errors", "errors"),
        ("mcp_tool_avg_latency_ms", "gauge", "Average tool latency in milliseconds", "avg_latency_ms"),
    ]
    for metric, kind, help_text, key in series:
        lines.append(f"# HELP {metric} {help_text}")
        lines.append(f"# TYPE {metric} {kind}")
        for tool_name in sorted(snapshot):
            lines.append(f'{metric}{{tool="{tool_name}"}} {snapshot[tool_name][key]}')
    return "\n".join(lines) + "\n"
