"""Shared fixtures for advertisement tests."""

from __future__ import annotations

import pytest

from ipni_advert.identity import Ed25519Keypair, Secp256k1Keypair
from ipni_advert.ingest import GraphsyncMetadata, Provider, TransportProtocol
from ipni_advert.multiformats import CID
from ipni_advert.record import Keyring

EMPTY_DIR_CID = "bafybeiczsscdsbs7ffqz55asqdf3smv6klcw3gofszvwlyarci47bgf354"
"""UnixFS empty directory, the entries link used throughout the tests."""

PIECE_CID = "QmeUdoMyahuQUPHS2odrZEL6yk2HnNfBJ147BeLXsZuqLJ"


@pytest.fixture
def empty_dir_cid() -> CID:
    """CID of the empty UnixFS directory."""
    return CID.parse(EMPTY_DIR_CID)


@pytest.fixture
def ed25519_keypair() -> Ed25519Keypair:
    """Deterministic Ed25519 keypair."""
    return Ed25519Keypair.from_bytes(bytes(range(32)))


@pytest.fixture
def other_keypair() -> Ed25519Keypair:
    """A second deterministic Ed25519 keypair."""
    return Ed25519Keypair.from_bytes(bytes(range(32, 64)))


@pytest.fixture
def secp256k1_keypair() -> Secp256k1Keypair:
    """Deterministic secp256k1 keypair."""
    return Secp256k1Keypair.from_bytes(b"\x00" * 31 + b"\x07")


@pytest.fixture
def keyring(
    ed25519_keypair: Ed25519Keypair,
    other_keypair: Ed25519Keypair,
    secp256k1_keypair: Secp256k1Keypair,
) -> Keyring:
    """Keyring holding every fixture keypair."""
    return Keyring([ed25519_keypair, other_keypair, secp256k1_keypair])


@pytest.fixture
def http_provider(ed25519_keypair: Ed25519Keypair) -> Provider:
    """HTTP provider signed for by ed25519_keypair."""
    return Provider(
        peer_id=ed25519_keypair.to_peer_id(),
        addresses=["/dns4/example.org/tcp/443/https"],
        protocol=TransportProtocol.HTTP,
    )


@pytest.fixture
def bitswap_provider(other_keypair: Ed25519Keypair) -> Provider:
    """Bitswap provider signed for by other_keypair."""
    return Provider(
        peer_id=other_keypair.to_peer_id(),
        addresses=["/ip4/12.34.56.78/tcp/999/ws"],
        protocol=TransportProtocol.BITSWAP,
    )


@pytest.fixture
def graphsync_provider(secp256k1_keypair: Secp256k1Keypair) -> Provider:
    """Graphsync provider signed for by secp256k1_keypair."""
    return Provider(
        peer_id=secp256k1_keypair.to_peer_id(),
        addresses=["/ip4/120.0.0.1/tcp/999/ws"],
        protocol=TransportProtocol.GRAPHSYNC,
        metadata=GraphsyncMetadata(
            piece_cid=CID.parse(PIECE_CID),
            verified_deal=True,
            fast_retrieval=True,
        ),
    )
