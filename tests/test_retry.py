"""Tests for store error classification and retry."""

from unittest.mock import Mock, patch

import pytest
from botocore.exceptions import EndpointConnectionError

from prefix_manifest.core import settings
from prefix_manifest.core.exceptions import ConfigurationError, TransientStoreError
from prefix_manifest.objectstorage.listing.retry import (
    ErrorKind,
    RetryPolicy,
    classify_error,
    format_context,
)

from conftest import make_client_error


class TestClassifyError:
    """Test permanent versus transient classification."""

    @pytest.mark.parametrize(
        "code,status",
        [
            ("InvalidArgument", 400),
            ("AccessDenied", 403),
            ("InvalidAccessKeyId", 403),
            ("Unauthorized", 401),
            ("NoSuchBucket", 404),
        ],
    )
    def test_permanent_client_errors(self, code, status):
        """Test that client and auth errors are permanent."""
        assert classify_error(make_client_error(code, status)) is ErrorKind.PERMANENT

    @pytest.mark.parametrize(
        "code,status",
        [
            ("InternalError", 500),
            ("ServiceUnavailable", 503),
            ("SlowDown", 503),
            ("TooManyRequests", 429),
            ("RequestTimeout", 408),
            ("Throttling", 400),
        ],
    )
    def test_transient_client_errors(self, code, status):
        """Test that server errors and throttling are transient."""
        assert classify_error(make_client_error(code, status)) is ErrorKind.TRANSIENT

    def test_connection_errors_are_transient(self):
        """Test that network failures are transient."""
        error = EndpointConnectionError(endpoint_url="https://s3.example.com")
        assert classify_error(error) is ErrorKind.TRANSIENT

    def test_unknown_errors_are_transient(self):
        """Test that unrecognized store errors are retried."""
        assert classify_error(RuntimeError("boom")) is ErrorKind.TRANSIENT

    def test_typed_errors_keep_their_kind(self):
        """Test that already classified errors are not reclassified."""
        assert classify_error(ConfigurationError("bad")) is ErrorKind.PERMANENT
        assert classify_error(TransientStoreError("flaky")) is ErrorKind.TRANSIENT


class TestRetryPolicy:
    """Test retry execution."""

    def setup_method(self):
        """Set up test environment."""
        self.sleeps = []
        self.policy = RetryPolicy(
            max_attempts=3, initial_wait=1.0, max_wait=10.0, jitter=1.0,
            sleep=self.sleeps.append,
        )

    def test_success_first_attempt(self):
        """Test that a successful call is not retried."""
        operation = Mock(return_value="page")

        assert self.policy.execute(operation) == "page"
        operation.assert_called_once()
        assert self.sleeps == []

    def test_transient_then_success(self):
        """Test recovery after transient failures."""
        operation = Mock(
            side_effect=[
                make_client_error("InternalError", 500),
                make_client_error("SlowDown", 503),
                "page",
            ]
        )

        assert self.policy.execute(operation) == "page"
        assert operation.call_count == 3
        assert len(self.sleeps) == 2

    def test_backoff_grows_with_jitter_bound(self):
        """Test exponential backoff between attempts."""
        operation = Mock(side_effect=[RuntimeError("a"), RuntimeError("b"), "page"])

        self.policy.execute(operation)

        assert 1.0 <= self.sleeps[0] <= 2.0
        assert 2.0 <= self.sleeps[1] <= 3.0

    def test_transient_exhausted(self):
        """Test that the last transient error surfaces after the budget."""
        operation = Mock(side_effect=make_client_error("InternalError", 500))

        with pytest.raises(TransientStoreError) as exc_info:
            self.policy.execute(operation, context={"bucket": "b", "prefix": "logs/"})

        assert operation.call_count == 3
        assert "bucket:b, prefix:logs/" in str(exc_info.value)
        assert exc_info.value.__cause__ is operation.side_effect

    def test_permanent_not_retried(self):
        """Test that bad requests fail immediately with context."""
        operation = Mock(side_effect=make_client_error("InvalidArgument", 400))

        with pytest.raises(ConfigurationError) as exc_info:
            self.policy.execute(
                operation,
                context={"bucket": "b", "prefix": "logs/", "last_path": "CgZsb2dzL2I="},
            )

        operation.assert_called_once()
        assert self.sleeps == []
        message = str(exc_info.value)
        assert message.startswith("Files listing failed: bucket:b, prefix:logs/")
        assert "last_path:CgZsb2dzL2I=" in message

    def test_auth_failure_not_retried(self):
        """Test that authorization failures are reported as access denied."""
        operation = Mock(side_effect=make_client_error("AccessDenied", 403))

        with pytest.raises(ConfigurationError) as exc_info:
            self.policy.execute(operation, context={"bucket": "b"})

        operation.assert_called_once()
        assert "Access denied" in str(exc_info.value)

    def test_configuration_error_passes_through(self):
        """Test that configuration errors from the operation are not wrapped."""
        error = ConfigurationError("bad prefix")
        operation = Mock(side_effect=error)

        with pytest.raises(ConfigurationError) as exc_info:
            self.policy.execute(operation)

        assert exc_info.value is error
        operation.assert_called_once()

    def test_invalid_attempt_count(self):
        """Test that at least one attempt is required."""
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=-1)

    def test_invalid_attempt_count_from_settings(self):
        """Test that a configured attempt count below one is rejected."""
        with patch.object(settings, "retry_max_attempts", 0):
            with pytest.raises(ValueError, match="at least 1, got 0"):
                RetryPolicy()


class TestFormatContext:
    """Test context rendering for messages."""

    def test_format_context(self):
        """Test key:value rendering."""
        assert format_context({"bucket": "b", "prefix": ""}) == "bucket:b, prefix:"

    def test_format_empty_context(self):
        """Test that missing context renders as empty."""
        assert format_context(None) == ""
