"""Exception hierarchy for prefix-manifest."""


class PrefixManifestError(Exception):
    """Base exception for all prefix-manifest errors."""

    pass


class ValidationError(PrefixManifestError):
    """Raised when user input fails validation."""

    pass


class ConfigurationError(PrefixManifestError):
    """Raised when the listing cannot proceed with the given configuration.

    Always fatal to a listing run.
    """

    pass


class PathTooLongError(ConfigurationError):
    """Raised when a resumption path does not fit the token format."""

    pass


class InvalidTokenError(ConfigurationError):
    """Raised when a resumption token cannot be decoded."""

    pass


class StoreError(PrefixManifestError):
    """Base exception for object store failures."""

    pass


class TransientStoreError(StoreError):
    """Raised when the store keeps failing with retryable errors."""

    pass
