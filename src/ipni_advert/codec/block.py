"""Content-addressed blocks: encoded bytes plus the CID naming them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ipni_advert.multiformats import CID, Multicodec, Multihash

from . import dag_cbor, dag_json

__all__ = ["Block", "encode_block", "decode_block"]

_ENCODERS: dict[int, Callable[[Any], bytes]] = {
    Multicodec.DAG_CBOR: dag_cbor.encode,
    Multicodec.DAG_JSON: dag_json.encode,
}

_DECODERS: dict[int, Callable[[bytes], Any]] = {
    Multicodec.DAG_CBOR: dag_cbor.decode,
    Multicodec.DAG_JSON: dag_json.decode,
}


@dataclass(frozen=True, slots=True)
class Block:
    """
    An immutable encoded block.

    Attributes:
        cid: CIDv1 of the bytes (codec + sha2-256 multihash).
        bytes: The encoded value.
        value: The IPLD data model value that was encoded.
    """

    cid: CID
    bytes: bytes
    value: Any


def encode_block(value: Any, codec: int = Multicodec.DAG_CBOR) -> Block:
    """
    Encode value with the given codec and hash it into a block.

    Raises:
        ValueError: If the codec is not DAG-CBOR or DAG-JSON.
    """
    encoder = _ENCODERS.get(codec)
    if encoder is None:
        raise ValueError(f"Unsupported block codec: {codec:#x}")

    data = encoder(value)
    cid = CID.create(1, codec, Multihash.sha256(data))
    return Block(cid=cid, bytes=data, value=value)


def decode_block(cid: CID, data: bytes) -> Block:
    """
    Decode block bytes with the codec named by cid, checking the hash.

    Raises:
        ValueError: If the codec is unsupported or the bytes do not match the CID.
    """
    decoder = _DECODERS.get(cid.codec)
    if decoder is None:
        raise ValueError(f"Unsupported block codec: {cid.codec:#x}")
    if Multihash.sha256(data) != cid.multihash:
        raise ValueError(f"Block bytes do not match {cid}")
    return Block(cid=cid, bytes=data, value=decoder(data))
