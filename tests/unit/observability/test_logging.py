"""Tests for structured logging."""

import pytest

from itemsync.observability.logging import PIIRedactor, get_logger, setup_logging


class TestSetupLogging:
    """Tests for setup_logging function."""

    @pytest.mark.parametrize("format", ["json", "console"])
    def test_setup_formats(self, format: str) -> None:
        """Should configure both renderers without raising."""
        setup_logging(level="DEBUG", format=format, redact_pii=False)
        get_logger("test").debug("test_message", item_key="5")

    def test_get_logger_returns_logger(self) -> None:
        setup_logging(level="INFO", format="json")
        assert get_logger("itemsync.test") is not None


class TestPIIRedactor:
    """Tests for PIIRedactor processor."""

    @pytest.fixture
    def redactor(self) -> PIIRedactor:
        return PIIRedactor()

    def test_redacts_sensitive_keys(self, redactor: PIIRedactor) -> None:
        result = redactor(None, "info", {"event": "x", "list_row": {"Title": "a"}, "token": "t"})
        assert result["list_row"] == "[REDACTED]"
        assert result["token"] == "[REDACTED]"
        assert result["event"] == "x"

    def test_masks_emails_in_values(self, redactor: PIIRedactor) -> None:
        result = redactor(None, "info", {"event": "assigned", "owner": "ada@example.com"})
        assert result["owner"] == "[EMAIL]"

    def test_recurses_into_nested_values(self, redactor: PIIRedactor) -> None:
        result = redactor(
            None,
            "info",
            {"event": "x", "fields": [{"email": "a@b.co", "name": "Ada"}, "c@d.io"]},
        )
        assert result["fields"] == [{"email": "[REDACTED]", "name": "Ada"}, "[EMAIL]"]

    def test_leaves_non_strings(self, redactor: PIIRedactor) -> None:
        result = redactor(None, "info", {"event": "x", "count": 3, "flag": True})
        assert result["count"] == 3
        assert result["flag"] is True
