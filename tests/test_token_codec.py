"""Tests for resumption token encoding."""

import base64

import pytest

from prefix_manifest.core.exceptions import (
    ConfigurationError,
    InvalidTokenError,
    PathTooLongError,
)
from prefix_manifest.objectstorage.listing.token_codec import (
    build_start_token,
    decode_resumption_token,
    encode_resumption_token,
)


class TestEncodeResumptionToken:
    """Test the page token byte layout."""

    def test_encode_known_path(self):
        """Test the token for a short ASCII path."""
        token = encode_resumption_token("logs/b")

        assert token == "CgZsb2dzL2I="
        assert base64.b64decode(token) == bytes.fromhex("0a066c6f67732f62")

    def test_encode_empty_path(self):
        """Test that an empty path encodes to tag and zero length."""
        assert base64.b64decode(encode_resumption_token("")) == b"\x0a\x00"

    def test_length_byte_counts_utf8_bytes(self):
        """Test that the length byte is the UTF-8 byte count, not characters."""
        path = "données/é"
        raw = base64.b64decode(encode_resumption_token(path))

        assert raw[0] == 0x0A
        assert raw[1] == len(path.encode("utf-8"))
        assert raw[2:] == path.encode("utf-8")

    @pytest.mark.parametrize("length", [1, 60, 127])
    def test_encode_accepts_up_to_127_bytes(self, length):
        """Test paths up to the single-byte length limit."""
        path = "a" * length
        raw = base64.b64decode(encode_resumption_token(path))

        assert raw == bytes([0x0A, length]) + path.encode("utf-8")

    @pytest.mark.parametrize("length", [128, 200])
    def test_encode_rejects_128_bytes_or_more(self, length):
        """Test that long paths fail as a configuration error."""
        with pytest.raises(PathTooLongError) as exc_info:
            encode_resumption_token("a" * length)

        assert isinstance(exc_info.value, ConfigurationError)
        assert "too long to encode" in str(exc_info.value)

    def test_encode_rejects_multibyte_path_over_limit(self):
        """Test that the limit applies to encoded bytes."""
        # 64 characters, 128 bytes
        with pytest.raises(PathTooLongError):
            encode_resumption_token("é" * 64)


class TestDecodeResumptionToken:
    """Test decoding tokens back to paths."""

    def test_decode_encoded_path(self):
        """Test decoding a token built by the encoder."""
        assert decode_resumption_token(encode_resumption_token("logs/b")) == "logs/b"

    def test_decode_bad_base64(self):
        """Test error on input that is not base64."""
        with pytest.raises(InvalidTokenError):
            decode_resumption_token("not base64!")

    def test_decode_wrong_tag(self):
        """Test error on an unknown leading tag byte."""
        token = base64.b64encode(b"\x0b\x01a").decode()
        with pytest.raises(InvalidTokenError) as exc_info:
            decode_resumption_token(token)

        assert "unknown tag" in str(exc_info.value)

    def test_decode_length_mismatch(self):
        """Test error when the length byte disagrees with the payload."""
        token = base64.b64encode(b"\x0a\x05ab").decode()
        with pytest.raises(InvalidTokenError):
            decode_resumption_token(token)


class TestBuildStartToken:
    """Test choosing the first page token."""

    def test_no_last_path(self):
        """Test that listing starts unconditioned without a last path."""
        assert build_start_token(None) is None
        assert build_start_token("") is None

    def test_with_last_path(self):
        """Test that a last path is encoded."""
        assert build_start_token("logs/b") == "CgZsb2dzL2I="
