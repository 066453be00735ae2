"""
DAG-CBOR codec.

DAG-CBOR is canonical CBOR with one extension: links (CIDs) are tag 42 over
a byte string of ``0x00 || cid.bytes``. Canonical form means:

- shortest heads for integers, lengths and counts,
- map keys sorted length-first, then bytewise,
- definite-length items only.

cbor2's canonical mode provides the first three; this module adds the link
tag in both directions. Advertisement records contain no floats, so the
float-width rule of DAG-CBOR never comes into play.
"""

from __future__ import annotations

from typing import Any

import cbor2

from ipni_advert.multiformats import CID

from .cbor_length import CID_TAG

__all__ = ["encode", "decode"]


def _encode_link(encoder: cbor2.CBOREncoder, value: Any) -> None:
    if not isinstance(value, CID):
        raise cbor2.CBOREncodeTypeError(f"Cannot encode {type(value).__name__} as DAG-CBOR")
    encoder.encode(cbor2.CBORTag(CID_TAG, b"\x00" + value.bytes))


def _decode_link(decoder: cbor2.CBORDecoder, tag: cbor2.CBORTag) -> CID:
    # Hook signature of the cbor2 5.x series, which the package pins.
    # cbor2 5.x hook signature; 6.x passes (tag, immutable) instead.
    if tag.tag != CID_TAG:
        raise cbor2.CBORDecodeValueError(f"Unsupported CBOR tag in DAG-CBOR: {tag.tag}")
    if not isinstance(tag.value, bytes) or not tag.value.startswith(b"\x00"):
        raise cbor2.CBORDecodeValueError("Link must be a byte string with a 0x00 prefix")
    return CID.decode(tag.value[1:])


def encode(value: Any) -> bytes:
    """Encode an IPLD data model value (dicts, lists, bytes, str, int, bool, None, CID)."""
    return cbor2.dumps(value, canonical=True, default=_encode_link)


def decode(data: bytes) -> Any:
    """Decode DAG-CBOR bytes, turning tag 42 back into CID values."""
    return cbor2.loads(data, tag_hook=_decode_link)
