"""Resumption token codec.

A listing can be resumed after an arbitrary path by handing the store a page
token built from that path. The token is the base64 encoding of::

    0x0A | len(utf8(path)) | utf8(path)

where the length is a single byte, which limits resumable paths to 127
UTF-8 bytes.
"""

import base64
import binascii
from typing import Optional

from prefix_manifest.core import get_logger
from prefix_manifest.core.exceptions import InvalidTokenError, PathTooLongError

logger = get_logger(__name__)

TOKEN_TAG = 0x0A
MAX_PATH_BYTES = 127


def encode_resumption_token(path: str) -> str:
    """Encode a last-seen path into a store page token.

    Args:
        path: Object path to resume listing after

    Returns:
        Base64 page token

    Raises:
        PathTooLongError: If the path is 128 UTF-8 bytes or longer
    """
    utf8 = path.encode("utf-8")
    if len(utf8) > MAX_PATH_BYTES:
        raise PathTooLongError(
            f"last_path '{path}' is too long to encode. "
            "Please try to reduce its length"
        )

    token = base64.b64encode(bytes([TOKEN_TAG, len(utf8)]) + utf8).decode("ascii")
    logger.debug("Resumption token encoded", path=path, token=token)
    return token


def decode_resumption_token(token: str) -> str:
    """Decode a page token produced by encode_resumption_token.

    Raises:
        InvalidTokenError: If the token is not a resumption token
    """
    try:
        raw = base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidTokenError(f"Resumption token is not valid base64: {token}") from e

    if len(raw) < 2 or raw[0] != TOKEN_TAG:
        raise InvalidTokenError(f"Resumption token has an unknown tag: {token}")
    if raw[1] != len(raw) - 2:
        raise InvalidTokenError(
            f"Resumption token length byte {raw[1]} does not match "
            f"payload of {len(raw) - 2} bytes"
        )

    try:
        return raw[2:].decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidTokenError(f"Resumption token path is not UTF-8: {token}") from e


def build_start_token(last_path: Optional[str]) -> Optional[str]:
    """Return the token to start a listing from, or None to list from the start."""
    if not last_path:
        return None
    return encode_resumption_token(last_path)
