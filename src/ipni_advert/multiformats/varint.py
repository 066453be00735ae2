"""
Unsigned varint encoding as used by multiformats.

Every self-describing value in this package starts with one or more varints:
multicodec tags (CID codecs, transport protocol tags in advertisement
metadata), multihash function codes and digest lengths, and the length
prefixes of libp2p signed envelopes.

The encoding is unsigned LEB128: integers are split into 7-bit groups, low
group first, and every byte except the last carries the continuation bit::

    [C|D D D D D D D]
     ^-- 1 = more bytes follow, 0 = last byte

Examples::

    0x55      -> 55            (raw codec, 1 byte)
    0x0900    -> 80 12         (bitswap transport, 2 bytes)
    0x3D0000  -> 80 80 F4 01   (ipfs gateway http transport, 4 bytes)

Multiformats narrows LEB128 in two ways:

- At most 9 bytes (63 bits of payload).
- Encodings must be minimal: a trailing 0x00 continuation group is rejected.

References:
    https://github.com/multiformats/unsigned-varint
"""

from __future__ import annotations

from typing import Final

MAX_VARINT_BYTES: Final = 9
"""Longest varint accepted by the multiformats unsigned-varint spec."""

MAX_VARINT_VALUE: Final = 2**63 - 1
"""Largest value that fits in MAX_VARINT_BYTES."""


class VarintError(ValueError):
    """Raised when varint decoding fails."""


def encode_varint(value: int) -> bytes:
    """
    Encode an unsigned integer as a multiformats varint.

    Args:
        value: Integer in the range [0, 2^63 - 1].

    Returns:
        Minimal varint encoding (1 to 9 bytes).

    Raises:
        ValueError: If value is negative or exceeds 63 bits.
    """
    if value < 0:
        raise ValueError("Varint must be non-negative")
    if value > MAX_VARINT_VALUE:
        raise ValueError(f"Varint exceeds 63 bits: {value}")

    result = bytearray()

    # Emit 7-bit groups with the continuation bit until the rest fits in one byte.
    while value >= 0x80:
        result.append((value & 0x7F) | 0x80)
        value >>= 7
    result.append(value)

    return bytes(result)


def decode_varint(data: bytes, offset: int = 0) -> tuple[int, int]:
    """
    Decode a varint from bytes at the given offset.

    Args:
        data: Input bytes containing the varint.
        offset: Starting position in data.

    Returns:
        Tuple of (decoded_value, bytes_consumed).

    Raises:
        VarintError: If the input is truncated, longer than 9 bytes,
            or not minimally encoded.
    """
    result = 0
    shift = 0
    pos = offset

    while True:
        if pos >= len(data):
            raise VarintError("Truncated varint")
        if pos - offset >= MAX_VARINT_BYTES:
            raise VarintError("Varint too long")

        byte = data[pos]
        pos += 1

        result |= (byte & 0x7F) << shift
        shift += 7

        if not (byte & 0x80):
            # A zero final group after the first byte could have been omitted.
            if byte == 0 and pos - offset > 1:
                raise VarintError("Varint not minimally encoded")
            break

    return result, pos - offset


def varint_length(value: int) -> int:
    """Return the number of bytes encode_varint(value) produces."""
    if value < 0:
        raise ValueError("Varint must be non-negative")
    return max(1, (value.bit_length() + 6) // 7)
