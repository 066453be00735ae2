"""Tests for base58btc, base32, base64url and multibase prefixes."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ipni_advert.multiformats import Base32, Base58, Base64Url, decode_multibase, encode_multibase


class TestBase58:
    """Tests for the bitcoin-alphabet base58 codec."""

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            (b"", ""),
            (b"hello world", "StV1DL6CwTryKyV"),
            (b"\x00", "1"),
            (b"\x00\x00\x01", "112"),
        ],
    )
    def test_encode(self, data: bytes, expected: str) -> None:
        """Known vectors, including leading zero bytes."""
        assert Base58.encode(data) == expected

    @given(st.binary(max_size=64))
    def test_decode_inverts_encode(self, data: bytes) -> None:
        """Decoding an encoded string restores the bytes, leading zeros included."""
        assert Base58.decode(Base58.encode(data)) == data

    @pytest.mark.parametrize("char", ["0", "O", "I", "l", "+"])
    def test_invalid_character(self, char: str) -> None:
        """Characters outside the alphabet are rejected."""
        with pytest.raises(ValueError, match="Invalid Base58 character"):
            Base58.decode(f"abc{char}")


class TestBase32:
    """Tests for lowercase unpadded base32."""

    def test_encode_rfc4648_vector(self) -> None:
        """RFC 4648 test vector, lowercased and unpadded."""
        assert Base32.encode(b"foobar") == "mzxw6ytboi"

    def test_decode_accepts_either_case(self) -> None:
        """Upper and lower case decode alike."""
        assert Base32.decode("mzxw6ytboi") == b"foobar"
        assert Base32.decode("MZXW6YTBOI") == b"foobar"

    def test_decode_invalid(self) -> None:
        """Characters outside the alphabet are rejected."""
        with pytest.raises(ValueError, match="Invalid base32"):
            Base32.decode("mzxw6yt!oi")


class TestBase64Url:
    """Tests for unpadded base64url."""

    def test_encode_uses_url_alphabet(self) -> None:
        """URL-safe characters replace + and /; padding is dropped."""
        assert Base64Url.encode(b"\xfb\xff") == "-_8"

    @given(st.binary(max_size=64))
    def test_decode_inverts_encode(self, data: bytes) -> None:
        """Decoding an encoded string restores the bytes."""
        assert Base64Url.decode(Base64Url.encode(data)) == data

    @pytest.mark.parametrize("text", ["-_+", "ab/c", "a!bc", "a"])
    def test_decode_invalid(self, text: str) -> None:
        """Standard-alphabet characters, stray symbols and bad lengths are rejected."""
        with pytest.raises(ValueError, match="Invalid base64url"):
            Base64Url.decode(text)


class TestMultibase:
    """Tests for prefix dispatch."""

    def test_base32_prefix(self) -> None:
        """The b prefix selects base32."""
        assert encode_multibase("b", b"foobar") == "bmzxw6ytboi"
        assert decode_multibase("bmzxw6ytboi") == b"foobar"

    def test_base58btc_prefix(self) -> None:
        """The z prefix selects base58btc."""
        assert encode_multibase("z", b"hello world") == "zStV1DL6CwTryKyV"
        assert decode_multibase("zStV1DL6CwTryKyV") == b"hello world"

    def test_base64url_prefix(self) -> None:
        """The u prefix selects base64url."""
        assert encode_multibase("u", b"\xfb\xff") == "u-_8"
        assert decode_multibase("u-_8") == b"\xfb\xff"

    def test_unsupported_prefix(self) -> None:
        """Unknown prefixes are rejected both ways."""
        with pytest.raises(ValueError, match="Unsupported multibase prefix"):
            encode_multibase("m", b"x")
        with pytest.raises(ValueError, match="Unsupported multibase prefix"):
            decode_multibase("mZm9v")

    def test_empty_string(self) -> None:
        """An empty string has no prefix."""
        with pytest.raises(ValueError, match="Empty"):
            decode_multibase("")
