"""Object storage listing operations."""

from .object_lister import ListingOutcome, ListingStatus, ObjectLister
from .retry import ErrorKind, RetryPolicy, classify_error
from .token_codec import (
    build_start_token,
    decode_resumption_token,
    encode_resumption_token,
)

__all__ = [
    "ErrorKind",
    "ListingOutcome",
    "ListingStatus",
    "ObjectLister",
    "RetryPolicy",
    "build_start_token",
    "classify_error",
    "decode_resumption_token",
    "encode_resumption_token",
]
