"""
Identity keypairs for providers.

Indexers accept any libp2p key type; two are supported here:

- Ed25519: the common choice for index providers. Pure EdDSA signatures.
- secp256k1: ECDSA-SHA256 signatures, DER-encoded, as libp2p specifies.

Private keys are exchanged in the libp2p ``PrivateKey`` protobuf, the same
Type/Data message used for public keys. For Ed25519 the Data field holds the
64-byte seed || public key concatenation; for secp256k1 it holds the 32-byte
scalar.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec, ed25519

from ipni_advert.types import ConfigurationError

from .peer_id import KeyType, PeerId, PublicKeyProto, decode_key_proto, encode_key_proto

__all__ = [
    "Ed25519Keypair",
    "Secp256k1Keypair",
    "IdentityKeypair",
    "generate_keypair",
    "load_private_key",
    "marshal_private_key",
]


@dataclass(frozen=True, slots=True)
class Ed25519Keypair:
    """
    Ed25519 keypair.

    Attributes:
        private_key: The Ed25519 private key.
    """

    KEY_TYPE: ClassVar[KeyType] = KeyType.ED25519

    private_key: ed25519.Ed25519PrivateKey

    @classmethod
    def generate(cls) -> Ed25519Keypair:
        """Generate a new random keypair."""
        return cls(private_key=ed25519.Ed25519PrivateKey.generate())

    @classmethod
    def from_bytes(cls, data: bytes) -> Ed25519Keypair:
        """
        Load a keypair from a 32-byte seed or the 64-byte libp2p form.

        Raises:
            ValueError: If data has the wrong length, or the embedded
                public key does not match the seed.
        """
        if len(data) not in (32, 64):
            raise ValueError(f"Expected 32 or 64 bytes, got {len(data)}")

        keypair = cls(private_key=ed25519.Ed25519PrivateKey.from_private_bytes(data[:32]))
        if len(data) == 64 and data[32:] != keypair.public_key_bytes():
            raise ValueError("Ed25519 public key does not match the private seed")
        return keypair

    def private_key_bytes(self) -> bytes:
        """Return the 64-byte seed || public key form used by libp2p."""
        seed = self.private_key.private_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PrivateFormat.Raw,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return seed + self.public_key_bytes()

    def public_key_bytes(self) -> bytes:
        """Return the 32-byte public key."""
        return self.private_key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    def sign(self, message: bytes) -> bytes:
        """Sign a message; returns a 64-byte Ed25519 signature."""
        return self.private_key.sign(message)

    def public_key_proto(self) -> PublicKeyProto:
        """Return the public key in libp2p protobuf form."""
        return PublicKeyProto(key_type=self.KEY_TYPE, key_data=self.public_key_bytes())

    def to_peer_id(self) -> PeerId:
        """Derive the PeerId (identity multihash, "12D3KooW..." string form)."""
        return PeerId.from_public_key(self.public_key_proto())


@dataclass(frozen=True, slots=True)
class Secp256k1Keypair:
    """
    secp256k1 keypair.

    Attributes:
        private_key: The secp256k1 private key.
    """

    KEY_TYPE: ClassVar[KeyType] = KeyType.SECP256K1

    private_key: ec.EllipticCurvePrivateKey

    @classmethod
    def generate(cls) -> Secp256k1Keypair:
        """Generate a new random keypair."""
        return cls(private_key=ec.generate_private_key(ec.SECP256K1()))

    @classmethod
    def from_bytes(cls, data: bytes) -> Secp256k1Keypair:
        """
        Load a keypair from the raw 32-byte private scalar.

        Raises:
            ValueError: If data is not a valid secp256k1 private key.
        """
        if len(data) != 32:
            raise ValueError(f"Expected 32 bytes, got {len(data)}")

        private_key = ec.derive_private_key(int.from_bytes(data, "big"), ec.SECP256K1())
        return cls(private_key=private_key)

    def private_key_bytes(self) -> bytes:
        """Return the raw 32-byte private key scalar."""
        return self.private_key.private_numbers().private_value.to_bytes(32, "big")

    def public_key_bytes(self) -> bytes:
        """Return the 33-byte compressed public key."""
        return self.private_key.public_key().public_bytes(
            encoding=serialization.Encoding.X962,
            format=serialization.PublicFormat.CompressedPoint,
        )

    def sign(self, message: bytes) -> bytes:
        """Sign a message with ECDSA-SHA256; returns a DER-encoded signature."""
        return self.private_key.sign(message, ec.ECDSA(hashes.SHA256()))

    def public_key_proto(self) -> PublicKeyProto:
        """Return the public key in libp2p protobuf form."""
        return PublicKeyProto(key_type=self.KEY_TYPE, key_data=self.public_key_bytes())

    def to_peer_id(self) -> PeerId:
        """Derive the PeerId ("16Uiu2..." string form)."""
        return PeerId.from_public_key(self.public_key_proto())


IdentityKeypair = Ed25519Keypair | Secp256k1Keypair
"""Any keypair that can sign for a provider."""

_KEYPAIR_TYPES: dict[KeyType, type[Ed25519Keypair] | type[Secp256k1Keypair]] = {
    KeyType.ED25519: Ed25519Keypair,
    KeyType.SECP256K1: Secp256k1Keypair,
}


def _keypair_class(key_type: KeyType) -> type[Ed25519Keypair] | type[Secp256k1Keypair]:
    cls = _KEYPAIR_TYPES.get(key_type)
    if cls is None:
        raise ConfigurationError(f"Unsupported key type: {key_type.name}", protocol=key_type)
    return cls


def generate_keypair(key_type: KeyType = KeyType.ED25519) -> IdentityKeypair:
    """
    Generate a fresh keypair of the given type.

    Raises:
        ConfigurationError: If the key type is not supported.
    """
    return _keypair_class(key_type).generate()


def load_private_key(data: bytes) -> IdentityKeypair:
    """
    Load a keypair from a marshalled libp2p PrivateKey protobuf.

    Raises:
        ConfigurationError: If the key type is not supported.
        ValueError: If the protobuf or the key material is malformed.
    """
    key_type, key_data = decode_key_proto(data)
    return _keypair_class(key_type).from_bytes(key_data)


def marshal_private_key(keypair: IdentityKeypair) -> bytes:
    """Encode a keypair as a libp2p PrivateKey protobuf."""
    return encode_key_proto(keypair.KEY_TYPE, keypair.private_key_bytes())
