"""Unit tests for commit status log events."""

from __future__ import annotations

import pytest

from ghstatus.statuses import (
    CommitStatusAPIError,
    CommitStatusEventLogger,
    CommitStatusEventType,
    CommitStatusNotFoundError,
    CommitStatusTransportError,
    CommitStatusValidationError,
)
from tests.helpers.femtologging_capture import capture_femto_logs

_LOGGER_NAME = "ghstatus.statuses.observability"
_PARAMS = {"owner": "octo", "repo": "reef", "ref": "main"}


@pytest.fixture
def event_logger() -> CommitStatusEventLogger:
    """Provide a commit status event logger."""
    return CommitStatusEventLogger()


class TestRequestEvents:
    """Lifecycle events for successful requests."""

    def test_started_event(self, event_logger: CommitStatusEventLogger) -> None:
        """The started event names the operation and its parameters."""
        with capture_femto_logs(_LOGGER_NAME) as capture:
            event_logger.log_request_started("get_all", _PARAMS)

        capture.wait_for_count(1)
        record = capture.records[0]
        assert record.level == "INFO"
        assert record.message == (
            "[statuses.request.started] operation=get_all "
            "owner=octo repo=reef ref=main"
        )

    def test_completed_event_includes_count(
        self, event_logger: CommitStatusEventLogger
    ) -> None:
        """The completed event reports how many statuses were returned."""
        with capture_femto_logs(_LOGGER_NAME) as capture:
            event_logger.log_request_completed("get_combined", _PARAMS, count=3)

        capture.wait_for_count(1)
        record = capture.records[0]
        assert record.level == "INFO"
        assert CommitStatusEventType.REQUEST_COMPLETED in record.message
        assert "operation=get_combined" in record.message
        assert record.message.endswith("count=3")


class TestRequestFailedEvent:
    """Levels and fields of the failure event."""

    def test_client_errors_log_warning(
        self, event_logger: CommitStatusEventLogger
    ) -> None:
        """A 404 is the caller's problem and logs at WARN."""
        error = CommitStatusNotFoundError(
            "not found", operation="get_all", params=_PARAMS, status_code=404
        )

        with capture_femto_logs(_LOGGER_NAME) as capture:
            event_logger.log_request_failed("get_all", _PARAMS, error)

        capture.wait_for_count(1)
        record = capture.records[0]
        assert record.level == "WARN"
        assert CommitStatusEventType.REQUEST_FAILED in record.message
        assert "status_code=404" in record.message
        assert "error_type=CommitStatusNotFoundError" in record.message

    def test_local_validation_logs_warning(
        self, event_logger: CommitStatusEventLogger
    ) -> None:
        """Validation failures without a status code log at WARN."""
        error = CommitStatusValidationError.invalid_page_size(
            0, operation="get_all", params=_PARAMS
        )

        with capture_femto_logs(_LOGGER_NAME) as capture:
            event_logger.log_request_failed("get_all", _PARAMS, error)

        capture.wait_for_count(1)
        assert capture.records[0].level == "WARN"
        assert "status_code=None" in capture.records[0].message

    def test_server_errors_log_error(
        self, event_logger: CommitStatusEventLogger
    ) -> None:
        """5xx responses log at ERROR."""
        error = CommitStatusAPIError(
            "bad gateway", operation="create", params=_PARAMS, status_code=502
        )

        with capture_femto_logs(_LOGGER_NAME) as capture:
            event_logger.log_request_failed("create", _PARAMS, error)

        capture.wait_for_count(1)
        assert capture.records[0].level == "ERROR"
        assert "status_code=502" in capture.records[0].message

    def test_transport_errors_log_error(
        self, event_logger: CommitStatusEventLogger
    ) -> None:
        """Requests that never completed log at ERROR."""
        error = CommitStatusTransportError(
            "GET /repos timed out", operation="get_all", params=_PARAMS
        )

        with capture_femto_logs(_LOGGER_NAME) as capture:
            event_logger.log_request_failed("get_all", _PARAMS, error)

        capture.wait_for_count(1)
        record = capture.records[0]
        assert record.level == "ERROR"
        assert "error_type=CommitStatusTransportError" in record.message
        assert "error=GET /repos timed out" in record.message
