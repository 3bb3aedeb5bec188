from __future__ import annotations

import json
import logging
import re
import time
from collections import Counter
from typing import Any, Callable, Dict, List, Literal, Optional

from mcp.server.fastmcp import Context, FastMCP

logger = logging.getLogger("thinking_server.tools")

RecordCall = Callable[[Optional[Context], str, float, bool], None]

Operation = Literal["add", "subtract", "multiply", "divide"]
TextOperation = Literal["uppercase", "lowercase", "reverse"]
AnalysisType = Literal[
    "word_count",
    "character_count",
    "sentence_count",
    "average_word_length",
    "most_common_words",
]
SchemaType = Literal["email", "phone", "url", "date", "credit_card"]

PATTERNS: Dict[str, re.Pattern[str]] = {
    "email": re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+"),
    "phone": re.compile(r"\+?[\d\s-]{10,}"),
    "url": re.compile(r"(https?://)?([\da-z.-]+)\.([a-z.]{2,6})([/\w .-]*)/?"),
    "date": re.compile(r"\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])"),
    "credit_card": re.compile(r"\d{4}[- ]?\d{4}[- ]?\d{4}[- ]?\d{4}"),
}


def _format_number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def calculate(operation: str, a: float, b: float) -> float:
    if operation == "add":
        return a + b
    if operation == "subtract":
        return a - b
    if operation == "multiply":
        return a * b
    if operation == "divide":
        if b == 0:
            raise ValueError("Division by zero")
        return a / b
    raise ValueError(f"Unknown operation: {operation}")


def transform_text(text: str, operation: str) -> str:
    if operation == "uppercase":
        return text.upper()
    if operation == "lowercase":
        return text.lower()
    if operation == "reverse":
        return text[::-1]
    raise ValueError(f"Unknown operation: {operation}")


def analyze_text(text: str, analysis_types: List[str]) -> Dict[str, Any]:
    """
    Compute the requested statistics for a text.

    Keys appear in the order the analyses were requested. The average word
    length is None for text without words.
    """
    words = text.split()
    results: Dict[str, Any] = {}
    for analysis in analysis_types:
        if analysis == "word_count":
            results["word_count"] = len(words)
        elif analysis == "character_count":
            results["character_count"] = len(re.sub(r"\s", "", text))
        elif analysis == "sentence_count":
            sentences = [s for s in re.split(r"[.!?]+", text) if s.strip()]
            results["sentence_count"] = len(sentences)
        elif analysis == "average_word_length":
            results["average_word_length"] = (
                sum(len(w) for w in words) / len(words) if words else None
            )
        elif analysis == "most_common_words":
            frequency = Counter(text.lower().split())
            results["most_common_words"] = [[w, c] for w, c in frequency.most_common(5)]
    return results


def validate_data(schema_type: str, data: str) -> Dict[str, Any]:
    pattern = PATTERNS.get(schema_type)
    if pattern is None:
        raise ValueError(f"Unknown schema type: {schema_type}")
    valid = pattern.fullmatch(data) is not None
    details = ""
    if valid and schema_type == "email":
        local, domain = data.split("@", 1)
        details = f"Local part: {local}, Domain: {domain}"
    elif valid and schema_type == "date":
        year, month, day = (int(part) for part in data.split("-"))
        details = f"Day: {day}, Month: {month}, Year: {year}"
    return {"valid": valid, "schema": schema_type, "details": details}


def format_validation(result: Dict[str, Any]) -> str:
    details = f"Details: {result['details']}" if result["details"] else ""
    valid = "true" if result["valid"] else "false"
    return f"Validation Results:\nValid: {valid}\nSchema: {result['schema']}\n{details}"


def register_utility_tools(mcp: FastMCP, record_call: RecordCall) -> None:
    """Register the stateless helper tools on the given server."""

    @mcp.tool(name="calculate", description="Perform basic arithmetic operations")
    def calculate_tool(
        operation: Operation,
        a: float,
        b: float,
        ctx: Context | None = None,
    ) -> str:
        start = time.perf_counter()
        try:
            result = calculate(operation, a, b)
        except ValueError as exc:
            logger.error(f"Calculation error: {exc}")
            record_call(ctx, "calculate", start, True)
            return f"Error: {exc}"
        record_call(ctx, "calculate", start, False)
        return f"Result: {_format_number(result)}"

    @mcp.tool(name="transform_text", description="Transform text using various operations")
    def transform_text_tool(
        text: str,
        operation: TextOperation,
        ctx: Context | None = None,
    ) -> str:
        start = time.perf_counter()
        try:
            result = transform_text(text, operation)
        except ValueError as exc:
            logger.error(f"Text transformation error: {exc}")
            record_call(ctx, "transform_text", start, True)
            return f"Error: {exc}"
        record_call(ctx, "transform_text", start, False)
        return result

    @mcp.tool(name="analyze_text", description="Analyze text and provide various statistics")
    def analyze_text_tool(
        text: str,
        analysis_types: List[AnalysisType],
        ctx: Context | None = None,
    ) -> str:
        start = time.perf_counter()
        results = analyze_text(text, list(analysis_types))
        record_call(ctx, "analyze_text", start, False)
        return f"Analysis Results:\n{json.dumps(results, indent=2)}"

    @mcp.tool(name="validate_data", description="Validate data against predefined schemas")
    def validate_data_tool(
        schema_type: SchemaType,
        data: str,
        options: Optional[Dict[str, Any]] = None,
        ctx: Context | None = None,
    ) -> str:
        start = time.perf_counter()
        # options (strict, region) are accepted for client compatibility but not applied
        try:
            result = validate_data(schema_type, data)
        except ValueError as exc:
            logger.error(f"Validation error: {exc}")
            record_call(ctx, "validate_data", start, True)
            return f"Error: {exc}"
        record_call(ctx, "validate_data", start, False)
        return format_validation(result)
