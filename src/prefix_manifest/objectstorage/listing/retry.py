"""Retry policy for store calls.

Store errors are classified as permanent or transient. Permanent errors
(bad request, bad token or prefix, missing bucket, authorization) are never
retried and surface as ``ConfigurationError``. Transient errors (connection
failures, timeouts, throttling, 5xx) are retried with exponential backoff
and jitter; when the budget is spent the last one surfaces as
``TransientStoreError``.
"""

from collections.abc import Callable, Mapping
from enum import Enum
from typing import Any, Optional, TypeVar

from botocore.exceptions import ClientError
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)
from tenacity.nap import sleep as default_sleep

from prefix_manifest.core import get_logger, settings
from prefix_manifest.core.exceptions import (
    ConfigurationError,
    PrefixManifestError,
    TransientStoreError,
)

logger = get_logger(__name__)

T = TypeVar("T")

AUTH_ERROR_CODES = frozenset(
    {
        "AccessDenied",
        "AllAccessDisabled",
        "ExpiredToken",
        "InvalidAccessKeyId",
        "InvalidToken",
        "SignatureDoesNotMatch",
        "Unauthorized",
    }
)
THROTTLING_ERROR_CODES = frozenset(
    {
        "RequestLimitExceeded",
        "RequestTimeout",
        "SlowDown",
        "Throttling",
        "ThrottlingException",
        "TooManyRequests",
    }
)
RETRYABLE_CLIENT_STATUSES = frozenset({408, 429})


class ErrorKind(str, Enum):
    """How a store error should be handled."""

    PERMANENT = "permanent"
    TRANSIENT = "transient"


def _client_error_details(exc: ClientError) -> tuple[str, Optional[int]]:
    code = exc.response.get("Error", {}).get("Code", "")
    status = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return str(code), status


def is_auth_error(exc: BaseException) -> bool:
    """Check whether an error is an authorization failure."""
    if not isinstance(exc, ClientError):
        return False
    code, status = _client_error_details(exc)
    return code in AUTH_ERROR_CODES or status in (401, 403)


def classify_error(exc: BaseException) -> ErrorKind:
    """Classify a store error as permanent or transient.

    Args:
        exc: Error raised by a store client call

    Returns:
        ErrorKind.PERMANENT for authorization failures and client (4xx)
        errors other than timeouts and throttling; ErrorKind.TRANSIENT
        for everything else
    """
    if isinstance(exc, ConfigurationError):
        return ErrorKind.PERMANENT
    if isinstance(exc, TransientStoreError):
        return ErrorKind.TRANSIENT
    if isinstance(exc, ClientError):
        code, status = _client_error_details(exc)
        if code in THROTTLING_ERROR_CODES:
            return ErrorKind.TRANSIENT
        if is_auth_error(exc):
            return ErrorKind.PERMANENT
        if status is not None and 400 <= status < 500:
            if status in RETRYABLE_CLIENT_STATUSES:
                return ErrorKind.TRANSIENT
            return ErrorKind.PERMANENT
    return ErrorKind.TRANSIENT


def format_context(context: Optional[Mapping[str, Any]]) -> str:
    """Render call context as ``key:value`` pairs for error messages."""
    if not context:
        return ""
    return ", ".join(f"{key}:{value}" for key, value in context.items())


def _message(summary: str, details: str, exc: BaseException) -> str:
    if details:
        return f"{summary}: {details}: {exc}"
    return f"{summary}: {exc}"


class RetryPolicy:
    """Bounded retry with exponential backoff for a single store call."""

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        initial_wait: Optional[float] = None,
        max_wait: Optional[float] = None,
        jitter: Optional[float] = None,
        sleep: Callable[[float], None] = default_sleep,
    ):
        """Initialize retry policy.

        Unset values fall back to the application settings.

        Args:
            max_attempts: Total attempts, including the first one
            initial_wait: Backoff before the first retry, in seconds
            max_wait: Upper bound on a single backoff, in seconds
            jitter: Maximum random jitter added to each backoff, in seconds
            sleep: Function used to wait between attempts
        """
        self.max_attempts = (
            settings.retry_max_attempts if max_attempts is None else max_attempts
        )
        self.initial_wait = (
            settings.retry_initial_wait if initial_wait is None else initial_wait
        )
        self.max_wait = settings.retry_max_wait if max_wait is None else max_wait
        self.jitter = settings.retry_jitter if jitter is None else jitter
        self.sleep = sleep

        if self.max_attempts < 1:
            raise ValueError(
                f"max_attempts must be at least 1, got {self.max_attempts}"
            )

    def execute(
        self,
        operation: Callable[[], T],
        *,
        context: Optional[Mapping[str, Any]] = None,
    ) -> T:
        """Run an operation under this policy.

        Args:
            operation: Zero-argument store call
            context: Parameters identifying the call (bucket, prefix, token),
                included in error messages and logs

        Returns:
            The operation's result

        Raises:
            ConfigurationError: On a permanent error, without retrying
            TransientStoreError: When every attempt failed transiently
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.initial_wait, max=self.max_wait, jitter=self.jitter
            ),
            retry=retry_if_exception_type(TransientStoreError),
            before_sleep=self._log_retry(context),
            sleep=self.sleep,
            reraise=True,
        )
        return retrying(self._attempt, operation, context)

    @staticmethod
    def _attempt(
        operation: Callable[[], T], context: Optional[Mapping[str, Any]]
    ) -> T:
        try:
            return operation()
        except PrefixManifestError:
            raise
        except Exception as e:
            details = format_context(context)
            if classify_error(e) is ErrorKind.TRANSIENT:
                message = _message("Store call failed", details, e)
                raise TransientStoreError(message) from e
            if is_auth_error(e):
                raise ConfigurationError(_message("Access denied", details, e)) from e
            message = _message("Files listing failed", details, e)
            raise ConfigurationError(message) from e

    def _log_retry(
        self, context: Optional[Mapping[str, Any]]
    ) -> Callable[[RetryCallState], None]:
        def _log(state: RetryCallState) -> None:
            exc = state.outcome.exception() if state.outcome else None
            wait_s = state.next_action.sleep if state.next_action else None
            logger.warning(
                "Retrying store call",
                attempt=state.attempt_number,
                max_attempts=self.max_attempts,
                wait_s=wait_s,
                error=str(exc),
                **dict(context or {}),
            )

        return _log
