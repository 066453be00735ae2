"""
libp2p signed envelopes.

Advertisement signatures are not bare signatures: each one is a marshalled
signed envelope that binds a payload to a signing domain and a payload type
(codec) so that a signature produced for one purpose cannot be replayed for
another.

Signed content (what the key actually signs)::

    varint(len(domain))       || domain
    varint(len(payload_type)) || payload_type
    varint(len(payload))      || payload

Envelope format (protobuf-encoded)::

    message Envelope {
        PublicKey public_key = 1;   // protobuf PublicKey of the signer
        bytes payload_type = 2;     // e.g. "/indexer/ingest/adSignature"
        bytes payload = 3;          // the 34-byte sha2-256 multihash
        bytes signature = 5;
    }

References:
    - https://github.com/libp2p/specs/blob/master/RFC/0002-signed-envelopes.md
"""

from __future__ import annotations

from dataclasses import dataclass

from ipni_advert.identity.keypair import IdentityKeypair
from ipni_advert.identity.peer_id import PeerId, PublicKeyProto
from ipni_advert.multiformats.varint import decode_varint, encode_varint

__all__ = ["SignedEnvelope", "envelope_signing_input"]

# Protobuf field tags for Envelope, all length-delimited (wire type 2).
_TAG_PUBLIC_KEY = 0x0A  # (1 << 3) | 2
_TAG_PAYLOAD_TYPE = 0x12  # (2 << 3) | 2
_TAG_PAYLOAD = 0x1A  # (3 << 3) | 2
_TAG_SIGNATURE = 0x2A  # (5 << 3) | 2

_FIELD_PUBLIC_KEY = 1
_FIELD_PAYLOAD_TYPE = 2
_FIELD_PAYLOAD = 3
_FIELD_SIGNATURE = 5

_WIRE_VARINT = 0
_WIRE_LENGTH_DELIMITED = 2
_FIXED_WIDTHS = {1: 8, 5: 4}
"""Byte width of the fixed64 (1) and fixed32 (5) wire types."""


def _length_delimited(tag: int, value: bytes) -> bytes:
    return bytes([tag]) + encode_varint(len(value)) + value


def envelope_signing_input(domain: bytes, payload_type: bytes, payload: bytes) -> bytes:
    """Build the byte string a signer signs for an envelope."""
    out = bytearray()
    for field in (domain, payload_type, payload):
        out += encode_varint(len(field))
        out += field
    return bytes(out)


@dataclass(frozen=True, slots=True)
class SignedEnvelope:
    """
    A sealed payload and the signature over it.

    Attributes:
        public_key: Signer's public key in libp2p protobuf form.
        payload_type: Codec string identifying what the payload is.
        payload: The signed payload.
        signature: Signature over envelope_signing_input(domain, payload_type, payload).
    """

    public_key: PublicKeyProto
    payload_type: bytes
    payload: bytes
    signature: bytes

    @classmethod
    def seal(
        cls,
        keypair: IdentityKeypair,
        domain: bytes,
        payload_type: bytes,
        payload: bytes,
    ) -> SignedEnvelope:
        """
        Sign payload under domain and payload_type.

        The domain is part of the signed content but not of the envelope:
        a verifier must know it in advance.
        """
        signature = keypair.sign(envelope_signing_input(domain, payload_type, payload))
        return cls(
            public_key=keypair.public_key_proto(),
            payload_type=payload_type,
            payload=payload,
            signature=signature,
        )

    def encode(self) -> bytes:
        """Encode as protobuf wire format, fields in tag order."""
        return (
            _length_delimited(_TAG_PUBLIC_KEY, self.public_key.encode())
            + _length_delimited(_TAG_PAYLOAD_TYPE, self.payload_type)
            + _length_delimited(_TAG_PAYLOAD, self.payload)
            + _length_delimited(_TAG_SIGNATURE, self.signature)
        )

    @classmethod
    def decode(cls, data: bytes) -> SignedEnvelope:
        """
        Decode from protobuf wire format.

        This only parses; it does not check the signature.

        Raises:
            ValueError: If data is malformed or a field is missing.
        """
        fields: dict[int, bytes] = {}

        offset = 0
        while offset < len(data):
            tag, consumed = decode_varint(data, offset)
            offset += consumed
            field_number, wire_type = tag >> 3, tag & 0x07

            # Fields of other wire types are skipped; none of them are ours.
            if wire_type == _WIRE_VARINT:
                _, consumed = decode_varint(data, offset)
                offset += consumed
                continue
            if wire_type in _FIXED_WIDTHS:
                offset += _FIXED_WIDTHS[wire_type]
                if offset > len(data):
                    raise ValueError("Truncated envelope")
                continue
            if wire_type != _WIRE_LENGTH_DELIMITED:
                raise ValueError(f"Unsupported protobuf wire type {wire_type} in envelope")

            length, consumed = decode_varint(data, offset)
            offset += consumed

            if offset + length > len(data):
                raise ValueError("Truncated envelope")

            fields[field_number] = bytes(data[offset : offset + length])
            offset += length

        for field_number, name in (
            (_FIELD_PUBLIC_KEY, "public_key"),
            (_FIELD_PAYLOAD_TYPE, "payload_type"),
            (_FIELD_SIGNATURE, "signature"),
        ):
            if field_number not in fields:
                raise ValueError(f"Missing {name} in envelope")

        return cls(
            public_key=PublicKeyProto.decode(fields[_FIELD_PUBLIC_KEY]),
            payload_type=fields[_FIELD_PAYLOAD_TYPE],
            payload=fields.get(_FIELD_PAYLOAD, b""),
            signature=fields[_FIELD_SIGNATURE],
        )

    def signer(self) -> PeerId:
        """PeerId of the key that sealed this envelope."""
        return PeerId.from_public_key(self.public_key)
