from __future__ import annotations

import pytest

from thinking_server.tools.utility_tools import (
    analyze_text,
    calculate,
    format_validation,
    transform_text,
    validate_data,
)


class TestCalculate:
    def test_basic_operations(self):
        assert calculate("add", 2, 3) == 5
        assert calculate("subtract", 2, 3) == -1
        assert calculate("multiply", 2, 3) == 6
        assert calculate("divide", 3, 2) == 1.5

    def test_division_by_zero(self):
        with pytest.raises(ValueError, match="Division by zero"):
            calculate("divide", 1, 0)

    def test_unknown_operation(self):
        with pytest.raises(ValueError):
            calculate("modulo", 1, 2)


def test_transform_text() -> None:
    assert transform_text("Hello", "uppercase") == "HELLO"
    assert transform_text("Hello", "lowercase") == "hello"
    assert transform_text("Hello", "reverse") == "olleH"


def test_analyze_text_statistics() -> None:
    text = "The cat sat. The dog ran! Did the cat see?"
    results = analyze_text(
        text,
        ["word_count", "character_count", "sentence_count", "average_word_length", "most_common_words"],
    )
    assert list(results) == [
        "word_count",
        "character_count",
        "sentence_count",
        "average_word_length",
        "most_common_words",
    ]
    assert results["word_count"] == 10
    assert results["character_count"] == len(text.replace(" ", ""))
    assert results["sentence_count"] == 3
    assert results["average_word_length"] == pytest.approx(sum(len(w) for w in text.split()) / 10)
    assert results["most_common_words"][0] == ["the", 3]
    assert len(results["most_common_words"]) == 5


def test_analyze_empty_text() -> None:
    results = analyze_text("   ", ["word_count", "average_word_length"])
    assert results == {"word_count": 0, "average_word_length": None}


class TestValidateData:
    def test_email_details(self):
        result = validate_data("email", "jane@example.com")
        assert result["valid"] is True
        assert result["details"] == "Local part: jane, Domain: example.com"

    def test_invalid_email(self):
        assert validate_data("email", "not-an-email")["valid"] is False

    def test_date_details(self):
        result = validate_data("date", "2024-03-09")
        assert result["valid"] is True
        assert result["details"] == "Day: 9, Month: 3, Year: 2024"

    def test_other_schemas(self):
        assert validate_data("phone", "+1 555-123-4567")["valid"] is True
        assert validate_data("phone", "12345")["valid"] is False
        assert validate_data("url", "https://example.com/path")["valid"] is True
        assert validate_data("credit_card", "1234-5678-9012-3456")["valid"] is True
        assert validate_data("credit_card", "1234")["valid"] is False

    def test_format_validation(self):
        text = format_validation(validate_data("phone", "12345"))
        assert text == "Validation Results:\nValid: false\nSchema: phone\n"
        text = format_validation(validate_data("email", "a@b.io"))
        assert text.endswith("Details: Local part: a, Domain: b.io")
