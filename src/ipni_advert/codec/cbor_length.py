"""
Encoded lengths of CBOR tokens, computed without encoding.

Every CBOR data item starts with a head: a 3-bit major type and an argument
(a length, a count, a tag number or a small integer)::

    argument < 24          -> 1 byte  (argument packed into the initial byte)
    argument < 2^8         -> 2 bytes (initial byte + uint8)
    argument < 2^16        -> 3 bytes (initial byte + uint16)
    argument < 2^32        -> 5 bytes (initial byte + uint32)
    otherwise              -> 9 bytes (initial byte + uint64)

DAG-CBOR always uses the shortest head, so the encoded length of a value with
a known shape is a closed-form sum of head lengths and payload lengths. Entry
chunk size accounting relies on this: an array of 65535 entries costs a
3-byte header, 65536 entries a 5-byte header.

A CID is encoded as tag 42 over a byte string holding a 0x00 prefix
followed by the binary CID::

    [0xD8 0x2A] [bytes head] [0x00] [cid bytes]

References:
    - RFC 8949 section 3 (encoding of data items)
    - https://ipld.io/specs/codecs/dag-cbor/spec/
"""

from __future__ import annotations

from typing import Final

from ipni_advert.multiformats import CID

__all__ = [
    "CID_TAG",
    "head_length",
    "bytes_token_length",
    "string_token_length",
    "array_header_length",
    "map_header_length",
    "cid_token_length",
]

CID_TAG: Final = 42
"""CBOR tag number reserved for IPLD links."""


def head_length(argument: int) -> int:
    """
    Length of a CBOR head carrying the given argument.

    Raises:
        ValueError: If argument is negative or exceeds 64 bits.
    """
    if argument < 0:
        raise ValueError("CBOR head argument must be non-negative")
    if argument < 24:
        return 1
    if argument < 0x100:
        return 2
    if argument < 0x10000:
        return 3
    if argument < 0x100000000:
        return 5
    if argument < 0x10000000000000000:
        return 9
    raise ValueError(f"CBOR head argument exceeds 64 bits: {argument}")


def bytes_token_length(length: int) -> int:
    """Encoded length of a byte string of the given length."""
    return head_length(length) + length


def string_token_length(text: str) -> int:
    """Encoded length of a text string."""
    return bytes_token_length(len(text.encode("utf-8")))


def array_header_length(count: int) -> int:
    """Encoded length of an array head (items not included)."""
    return head_length(count)


def map_header_length(count: int) -> int:
    """Encoded length of a map head (entries not included)."""
    return head_length(count)


def cid_token_length(cid: CID) -> int:
    """Encoded length of a CID link, tag included."""
    # The byte string carries the 0x00 multibase-identity prefix.
    return head_length(CID_TAG) + bytes_token_length(cid.byte_length + 1)
