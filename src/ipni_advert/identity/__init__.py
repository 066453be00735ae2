"""
Provider identity.

Peer ids name providers in advertisements; keypairs produce the signatures
that prove a provider stands behind an advertisement.
"""

from .keypair import (
    Ed25519Keypair,
    IdentityKeypair,
    Secp256k1Keypair,
    generate_keypair,
    load_private_key,
    marshal_private_key,
)
from .peer_id import KeyType, PeerId, PublicKeyProto

__all__ = [
    "KeyType",
    "PeerId",
    "PublicKeyProto",
    "Ed25519Keypair",
    "Secp256k1Keypair",
    "IdentityKeypair",
    "generate_keypair",
    "load_private_key",
    "marshal_private_key",
]
