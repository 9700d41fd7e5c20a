"""
Tests for custom exceptions and error handling utilities.
"""

import logging
from itertools import islice
from unittest.mock import Mock, patch

import pytest

from loadplan.error_handling import (
    ErrorContext,
    backoff_delays,
    is_transient_error,
    log_error,
    with_retry,
)
from loadplan.exceptions import (
    ConfigurationError,
    DataError,
    DragSessionActiveError,
    LoadPlanError,
    ResizeCommitError,
    ResizeError,
    RetryExhaustedError,
    ServerError,
)


class TestExceptionHierarchy:
    """Test custom exception classes and hierarchy."""

    def test_base_error_with_details(self):
        error = LoadPlanError("Test error", details={"key": "value"})
        assert str(error) == "Test error (key=value)"
        assert error.message == "Test error"
        assert error.details == {"key": "value"}

    def test_base_error_without_details(self):
        error = LoadPlanError("Test error")
        assert str(error) == "Test error"
        assert error.details == {}
        assert error.to_user_message() == "Test error"

    def test_configuration_and_data_errors(self):
        assert isinstance(ConfigurationError("bad"), LoadPlanError)
        assert isinstance(DataError("bad"), LoadPlanError)

    def test_resize_error_hierarchy(self):
        assert isinstance(DragSessionActiveError("busy"), ResizeError)
        assert isinstance(ResizeCommitError("rejected"), ResizeError)
        assert isinstance(ResizeCommitError("rejected"), LoadPlanError)

    def test_default_user_messages_hide_details(self):
        error = ServerError("pool exhausted on db-3", details={"host": "db-3"})
        assert "db-3" not in error.to_user_message()
        assert "db-3" in str(error)

        commit_error = ResizeCommitError("HTTP 409 from /loadings/L1")
        assert commit_error.to_user_message() == (
            "The new dates could not be saved. The loading was restored."
        )

    def test_explicit_user_message_wins(self):
        error = RetryExhaustedError("gave up", user_message="Try again")
        assert error.to_user_message() == "Try again"


class TestIsTransientError:
    """Test transient error detection."""

    def test_detects_server_error(self):
        assert is_transient_error(ServerError("Backend unavailable")) is True

    def test_detects_builtin_connection_and_timeout_errors(self):
        assert is_transient_error(ConnectionError("reset")) is True
        assert is_transient_error(TimeoutError()) is True

    def test_detects_message_patterns(self):
        assert is_transient_error(Exception("Connection reset by peer")) is True
        assert is_transient_error(Exception("Request timed out")) is True

    def test_rejects_non_transient_errors(self):
        assert is_transient_error(ValueError("Invalid date")) is False
        assert is_transient_error(DataError("Missing columns")) is False


class TestWithRetry:
    """Test retry decorator."""

    @patch("loadplan.error_handling.time.sleep")
    def test_succeeds_after_transient_failures(self, mock_sleep):
        func = Mock(side_effect=[ConnectionError("down"), ConnectionError("down"), True])
        func.__name__ = "update_loading_dates"

        result = with_retry(max_attempts=3, initial_delay=0.1)(func)()

        assert result is True
        assert func.call_count == 3
        assert mock_sleep.call_count == 2

    @patch("loadplan.error_handling.time.sleep")
    def test_backoff_is_exponential_and_capped(self, mock_sleep):
        func = Mock(side_effect=ConnectionError("down"))
        func.__name__ = "save"

        with pytest.raises(RetryExhaustedError):
            with_retry(max_attempts=4, initial_delay=1.0, backoff_factor=2.0, max_delay=3.0)(
                func
            )()

        delays = [call.args[0] for call in mock_sleep.call_args_list]
        assert delays == [1.0, 2.0, 3.0]

    def test_backoff_delays_series(self):
        assert list(islice(backoff_delays(0.5, 2.0, 3.0), 5)) == [0.5, 1.0, 2.0, 3.0, 3.0]

    @patch("loadplan.error_handling.time.sleep")
    def test_exhaustion_chains_last_error(self, mock_sleep):
        func = Mock(side_effect=ServerError("busy"))
        func.__name__ = "save"

        with pytest.raises(RetryExhaustedError) as excinfo:
            with_retry(max_attempts=2)(func)()

        assert isinstance(excinfo.value.__cause__, ServerError)
        assert excinfo.value.details["function"] == "save"

    @patch("loadplan.error_handling.time.sleep")
    def test_non_transient_error_is_not_retried(self, mock_sleep):
        func = Mock(side_effect=ValueError("bad range"))
        func.__name__ = "save"

        with pytest.raises(ValueError):
            with_retry(max_attempts=3)(func)()

        assert func.call_count == 1
        mock_sleep.assert_not_called()

    @patch("loadplan.error_handling.time.sleep")
    def test_retry_on_restricts_exception_types(self, mock_sleep):
        func = Mock(side_effect=[KeyError("x"), "ok"])
        func.__name__ = "save"

        assert with_retry(retry_on=(KeyError,))(func)() == "ok"


class TestLogError:
    """Test error logging helper."""

    def test_logs_context_type_and_extra(self, caplog):
        with caplog.at_level(logging.ERROR, logger="loadplan.error_handling"):
            log_error(ValueError("boom"), "Resize commit", extra={"loading_id": "L1"})

        assert "Resize commit: ValueError - boom (loading_id=L1)" in caplog.text


class TestErrorContext:
    """Test error context manager."""

    def test_reraises_by_default(self):
        with pytest.raises(DataError):
            with ErrorContext("loading csv"):
                raise DataError("Missing columns")

    def test_suppresses_and_returns_default(self):
        with ErrorContext("loading csv", reraise=False, default_value=[]) as ctx:
            raise DataError("Missing columns")

        assert isinstance(ctx.error, DataError)
        assert ctx.get_value(["unused"]) == []

    def test_success_value_without_error(self):
        with ErrorContext("loading csv") as ctx:
            pass

        assert ctx.get_value("ok") == "ok"
