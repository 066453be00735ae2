"""
Peer identities derived from public keys.

libp2p peer ids are multihashes of the protobuf-encoded public key:
    1. Encode the public key as protobuf (libp2p-crypto format)
    2. If encoded <= 42 bytes: PeerId = multihash(identity, encoded)
    3. If encoded > 42 bytes: PeerId = multihash(sha2-256, encoded)

Protobuf wire format (from crypto.proto)::

    message PublicKey {
        required KeyType Type = 1;  // Field 1, varint
        required bytes Data = 2;    // Field 2, length-delimited
    }

    [0x08][type_varint][0x12][length_varint][key_bytes]

An Ed25519 key encodes to 36 bytes, so its peer id is an identity multihash
and its string form starts with "12D3KooW". The string form is what
advertisements carry in ``Provider`` and ``ExtendedProvider.Providers[].ID``
and what the signature payloads concatenate.

References:
    - https://github.com/libp2p/specs/blob/master/peer-ids/peer-ids.md
    - https://github.com/libp2p/go-libp2p/blob/master/core/crypto/pb/crypto.proto
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from ipni_advert.multiformats import CID, Base58, Multicodec, Multihash, MultihashCode
from ipni_advert.multiformats.varint import decode_varint, encode_varint

__all__ = [
    "KeyType",
    "PublicKeyProto",
    "PeerId",
]


class KeyType(IntEnum):
    """libp2p-crypto key type codes (from crypto.proto KeyType enum)."""

    RSA = 0
    """RSA public key (DER-encoded PKIX format)."""

    ED25519 = 1
    """Ed25519 public key (32 bytes)."""

    SECP256K1 = 2
    """secp256k1 public key (33 bytes compressed, Bitcoin format)."""

    ECDSA = 3
    """ECDSA public key (ASN.1 DER encoded)."""


class _ProtobufTag(IntEnum):
    """
    Protobuf field tags shared by the PublicKey and PrivateKey messages.

    Tag format: (field_number << 3) | wire_type
    """

    TYPE = 0x08  # (1 << 3) | 0 = field 1, varint
    DATA = 0x12  # (2 << 3) | 2 = field 2, length-delimited


_IDENTITY_THRESHOLD: Final[int] = 42
"""Encoded keys up to this size are inlined with the identity multihash."""


def encode_key_proto(key_type: KeyType, key_data: bytes) -> bytes:
    """Encode the Type/Data protobuf used for both public and private keys."""
    type_field = bytes([_ProtobufTag.TYPE]) + encode_varint(key_type)
    data_field = bytes([_ProtobufTag.DATA]) + encode_varint(len(key_data)) + key_data
    return type_field + data_field


def decode_key_proto(data: bytes) -> tuple[KeyType, bytes]:
    """
    Decode the Type/Data protobuf used for both public and private keys.

    Raises:
        ValueError: If a field is missing, truncated or of an unknown key type.
    """
    key_type: int | None = None
    key_data: bytes | None = None

    offset = 0
    while offset < len(data):
        tag = data[offset]
        offset += 1

        if tag == _ProtobufTag.TYPE:
            key_type, consumed = decode_varint(data, offset)
            offset += consumed
        elif tag == _ProtobufTag.DATA:
            length, consumed = decode_varint(data, offset)
            offset += consumed
            if offset + length > len(data):
                raise ValueError("Truncated key data")
            key_data = bytes(data[offset : offset + length])
            offset += length
        else:
            raise ValueError(f"Unexpected protobuf tag in key: {tag:#x}")

    if key_type is None or key_data is None:
        raise ValueError("Key protobuf requires both Type and Data")
    return KeyType(key_type), key_data


@dataclass(frozen=True, slots=True)
class PublicKeyProto:
    """
    A public key in libp2p-crypto protobuf format.

    Attributes:
        key_type: Cryptographic algorithm identifier.
        key_data: Raw public key bytes (format depends on key_type).
    """

    key_type: KeyType
    key_data: bytes

    def encode(self) -> bytes:
        """Encode as deterministic protobuf: Type first, then Data, minimal varints."""
        return encode_key_proto(self.key_type, self.key_data)

    @classmethod
    def decode(cls, data: bytes) -> PublicKeyProto:
        """Decode a protobuf-encoded PublicKey message."""
        key_type, key_data = decode_key_proto(data)
        return cls(key_type=key_type, key_data=key_data)


@dataclass(frozen=True, slots=True)
class PeerId:
    """
    A libp2p peer identifier.

    Attributes:
        multihash: The underlying multihash bytes.
    """

    multihash: bytes
    """Raw multihash bytes (before Base58 encoding)."""

    def __str__(self) -> str:
        """Return the Base58 string form carried by advertisements."""
        return Base58.encode(self.multihash)

    def __repr__(self) -> str:
        """Return detailed representation."""
        return f"PeerId({self!s})"

    def to_base58(self) -> str:
        """Return the Base58-encoded PeerId string."""
        return Base58.encode(self.multihash)

    def to_bytes(self) -> bytes:
        """Return the raw multihash bytes."""
        return self.multihash

    def to_cid(self) -> CID:
        """Return the peer id as a CIDv1 with the libp2p-key codec."""
        return CID.create(1, Multicodec.LIBP2P_KEY, Multihash.decode(self.multihash))

    @classmethod
    def from_base58(cls, s: str) -> PeerId:
        """
        Parse a Base58-encoded PeerId.

        Raises:
            ValueError: If the string is not valid Base58 or not a multihash.
        """
        data = Base58.decode(s)
        Multihash.decode(data)
        return cls(multihash=data)

    @classmethod
    def parse(cls, s: str) -> PeerId:
        """
        Parse a peer id in either legacy Base58 or CIDv1 string form.

        Raises:
            ValueError: If the string is neither, or a CID of another codec.
        """
        if s.startswith(("1", "Qm")):
            return cls.from_base58(s)

        cid = CID.parse(s)
        if cid.codec != Multicodec.LIBP2P_KEY:
            raise ValueError(f"CID is not a libp2p-key: codec {cid.codec:#x}")
        return cls(multihash=cid.multihash.encode())

    @classmethod
    def from_bytes(cls, data: bytes) -> PeerId:
        """Create PeerId from raw multihash bytes."""
        return cls(multihash=data)

    @classmethod
    def from_public_key(cls, public_key: PublicKeyProto) -> PeerId:
        """Derive a PeerId from a public key (identity or sha2-256 multihash)."""
        encoded = public_key.encode()
        if len(encoded) <= _IDENTITY_THRESHOLD:
            mh = Multihash.identity(encoded)
        else:
            mh = Multihash.sha256(encoded)
        return cls(multihash=mh.encode())

    def extract_public_key(self) -> PublicKeyProto | None:
        """Return the inlined public key of an identity-multihash peer id, if any."""
        mh = Multihash.decode(self.multihash)
        if mh.code != MultihashCode.IDENTITY:
            return None
        return PublicKeyProto.decode(mh.digest)
