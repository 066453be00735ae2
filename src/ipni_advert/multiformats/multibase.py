"""
Multibase text encodings.

A multibase string is a single prefix character naming the encoding,
followed by the encoded bytes. Advertisements and provider addresses meet three of them:

- ``b``: RFC 4648 base32, lowercase, no padding (the CIDv1 default).
- ``z``: base58btc (peer ids and CIDv0 use it without the prefix).
- ``u``: RFC 4648 base64url, no padding (multiaddr certificate hashes).

References:
    https://github.com/multiformats/multibase
"""

from __future__ import annotations

import base64
from typing import Final

__all__ = [
    "Base58",
    "Base32",
    "Base64Url",
    "BASE32_PREFIX",
    "BASE64URL_PREFIX",
    "BASE58BTC_PREFIX",
    "encode_multibase",
    "decode_multibase",
]

BASE32_PREFIX: Final = "b"
"""Multibase prefix for lowercase, unpadded RFC 4648 base32."""

BASE58BTC_PREFIX: Final = "z"
"""Multibase prefix for base58btc."""

BASE64URL_PREFIX: Final = "u"
"""Multibase prefix for unpadded base64url."""


class Base58:
    """
    Base58 encoding/decoding (Bitcoin-style alphabet).

    The alphabet excludes visually ambiguous characters (0, O, I, l).
    """

    ALPHABET: Final[str] = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
    """Base58 alphabet (Bitcoin style, excludes 0, O, I, l)."""

    @classmethod
    def encode(cls, data: bytes) -> str:
        """
        Encode bytes as a Base58 string.

        Leading zero bytes become leading '1' characters.
        """
        leading_zeros = len(data) - len(data.lstrip(b"\x00"))

        num = int.from_bytes(data, "big")
        result: list[str] = []
        while num > 0:
            num, remainder = divmod(num, 58)
            result.append(cls.ALPHABET[remainder])

        result.extend([cls.ALPHABET[0]] * leading_zeros)
        return "".join(reversed(result))

    @classmethod
    def decode(cls, s: str) -> bytes:
        """
        Decode a Base58 string to bytes.

        Raises:
            ValueError: If the string contains a character outside the alphabet.
        """
        leading_ones = len(s) - len(s.lstrip("1"))

        num = 0
        for char in s:
            index = cls.ALPHABET.find(char)
            if index < 0:
                raise ValueError(f"Invalid Base58 character: {char!r}")
            num = num * 58 + index

        result = num.to_bytes((num.bit_length() + 7) // 8, "big") if num else b""
        return b"\x00" * leading_ones + result


class Base32:
    """Lowercase, unpadded RFC 4648 base32 as used by CIDv1 strings."""

    @staticmethod
    def encode(data: bytes) -> str:
        """Encode bytes without '=' padding, in lowercase."""
        return base64.b32encode(data).decode("ascii").rstrip("=").lower()

    @staticmethod
    def decode(s: str) -> bytes:
        """
        Decode an unpadded base32 string (either case).

        Raises:
            ValueError: If the string is not valid base32.
        """
        padding = "=" * (-len(s) % 8)
        try:
            return base64.b32decode(s.upper() + padding)
        except ValueError as e:
            raise ValueError(f"Invalid base32 string: {s!r}") from e


class Base64Url:
    """URL-safe, unpadded RFC 4648 base64."""

    @staticmethod
    def encode(data: bytes) -> str:
        """Encode bytes without '=' padding."""
        return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")

    @staticmethod
    def decode(s: str) -> bytes:
        """
        Decode an unpadded base64url string.

        Raises:
            ValueError: If the string is not valid base64url.
        """
        if "+" in s or "/" in s:
            raise ValueError(f"Invalid base64url string: {s!r}")
        padding = "=" * (-len(s) % 4)
        try:
            return base64.b64decode(s + padding, altchars=b"-_", validate=True)
        except ValueError as e:
            raise ValueError(f"Invalid base64url string: {s!r}") from e


def encode_multibase(prefix: str, data: bytes) -> str:
    """
    Encode bytes with the given multibase prefix.

    Raises:
        ValueError: If the prefix is not one of the supported encodings.
    """
    if prefix == BASE32_PREFIX:
        return prefix + Base32.encode(data)
    if prefix == BASE58BTC_PREFIX:
        return prefix + Base58.encode(data)
    if prefix == BASE64URL_PREFIX:
        return prefix + Base64Url.encode(data)
    raise ValueError(f"Unsupported multibase prefix: {prefix!r}")


def decode_multibase(text: str) -> bytes:
    """
    Decode a multibase string, dispatching on its prefix character.

    Raises:
        ValueError: If the string is empty, uses an unsupported prefix or is malformed.
    """
    if not text:
        raise ValueError("Empty multibase string")

    prefix, body = text[0], text[1:]
    if prefix == BASE32_PREFIX:
        return Base32.decode(body)
    if prefix == BASE58BTC_PREFIX:
        return Base58.decode(body)
    if prefix == BASE64URL_PREFIX:
        return Base64Url.decode(body)
    raise ValueError(f"Unsupported multibase prefix: {prefix!r}")
