"""Tests for the structured logging helpers."""

import logging

import pytest

from kidstreak.core.logging import log_event, log_kid_event


logger = logging.getLogger("kidstreak.tests")


@pytest.mark.unit
class TestLogHelpers:
    """Tests for log_event and log_kid_event."""

    def test_log_event_attaches_fields(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test fields become attributes on the emitted record."""
        with caplog.at_level(logging.INFO, logger="kidstreak.tests"):
            log_event(logger, "INFO", "reset_checked", today="2024-06-01")

        record = caplog.records[-1]
        assert record.getMessage() == "reset_checked"
        assert record.levelno == logging.INFO
        assert record.today == "2024-06-01"

    def test_log_kid_event_tags_kid(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test the kid ID is attached when given and omitted otherwise."""
        with caplog.at_level(logging.DEBUG, logger="kidstreak.tests"):
            log_kid_event(logger, "warning", "streak_updated", kid_id="kid1", streak_count=2)
            log_kid_event(logger, "debug", "streak_skipped")

        tagged, untagged = caplog.records[-2:]
        assert tagged.levelno == logging.WARNING
        assert tagged.kid_id == "kid1"
        assert tagged.streak_count == 2
        assert not hasattr(untagged, "kid_id")
