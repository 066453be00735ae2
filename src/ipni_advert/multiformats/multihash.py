"""
Self-describing hashes.

A multihash prefixes a digest with the hash function that produced it and
the digest length::

    [code (varint)][length (varint)][digest]

Entry chunks store multihashes verbatim, so their lengths vary with the hash
function (34 bytes for SHA2-256, 66 bytes for SHA2-512). The signing payload
of an advertisement is always a SHA2-256 multihash (34 bytes).

References:
    https://github.com/multiformats/multihash
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import IntEnum

from .varint import decode_varint, encode_varint

__all__ = ["Multihash", "MultihashCode"]


class MultihashCode(IntEnum):
    """Multihash function codes."""

    IDENTITY = 0x00
    """Identity "hash": the digest is the data itself."""

    SHA2_256 = 0x12
    """SHA2-256 (32-byte digest)."""

    SHA2_512 = 0x13
    """SHA2-512 (64-byte digest)."""


@dataclass(frozen=True, slots=True)
class Multihash:
    """
    A digest tagged with its hash function.

    Attributes:
        code: Hash function identifier.
        digest: Hash output (or raw data for identity).
    """

    code: int
    """Hash function code. Unknown codes are carried through untouched."""

    digest: bytes
    """Hash output or identity data."""

    def encode(self) -> bytes:
        """Encode as multihash bytes: varint code, varint length, digest."""
        return encode_varint(self.code) + encode_varint(len(self.digest)) + self.digest

    @property
    def byte_length(self) -> int:
        """Length of the encoded multihash."""
        return len(self.encode())

    @classmethod
    def decode(cls, data: bytes) -> Multihash:
        """
        Decode multihash bytes, requiring the input to hold exactly one multihash.

        Raises:
            ValueError: If the input is truncated or has trailing bytes.
        """
        multihash, consumed = cls.decode_prefix(data)
        if consumed != len(data):
            raise ValueError(f"Trailing bytes after multihash: {len(data) - consumed}")
        return multihash

    @classmethod
    def decode_prefix(cls, data: bytes, offset: int = 0) -> tuple[Multihash, int]:
        """
        Decode a multihash starting at offset.

        Returns:
            Tuple of (multihash, bytes_consumed).

        Raises:
            ValueError: If the digest is shorter than its declared length.
        """
        code, n = decode_varint(data, offset)
        length, m = decode_varint(data, offset + n)

        start = offset + n + m
        digest = data[start : start + length]
        if len(digest) != length:
            raise ValueError(f"Truncated multihash: expected {length} digest bytes")

        return cls(code=code, digest=bytes(digest)), n + m + length

    @classmethod
    def identity(cls, data: bytes) -> Multihash:
        """Create an identity multihash (no hashing)."""
        return cls(code=MultihashCode.IDENTITY, digest=data)

    @classmethod
    def sha256(cls, data: bytes) -> Multihash:
        """Create a SHA2-256 multihash of data."""
        return cls(code=MultihashCode.SHA2_256, digest=hashlib.sha256(data).digest())

    @classmethod
    def sha512(cls, data: bytes) -> Multihash:
        """Create a SHA2-512 multihash of data."""
        return cls(code=MultihashCode.SHA2_512, digest=hashlib.sha512(data).digest())
