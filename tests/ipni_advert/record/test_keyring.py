"""Tests for the in-memory signer."""

from __future__ import annotations

import logging

import pytest

from ipni_advert.identity import Ed25519Keypair, Secp256k1Keypair
from ipni_advert.record import Keyring, SignedEnvelope, Signer
from ipni_advert.types import SigningError


class TestKeyring:
    """Tests for Keyring."""

    def test_is_a_signer(self) -> None:
        """Keyring satisfies the Signer protocol."""
        assert isinstance(Keyring(), Signer)

    def test_add_returns_peer_id(self, ed25519_keypair: Ed25519Keypair) -> None:
        """Registering a keypair returns the peer it signs for."""
        keyring = Keyring()
        peer_id = keyring.add(ed25519_keypair)
        assert peer_id == ed25519_keypair.to_peer_id()
        assert peer_id in keyring
        assert len(keyring) == 1

    def test_peer_ids_in_registration_order(
        self, ed25519_keypair: Ed25519Keypair, secp256k1_keypair: Secp256k1Keypair
    ) -> None:
        """peer_ids lists peers in the order their keys were added."""
        keyring = Keyring([secp256k1_keypair, ed25519_keypair])
        assert keyring.peer_ids() == [
            secp256k1_keypair.to_peer_id(),
            ed25519_keypair.to_peer_id(),
        ]

    @pytest.mark.parametrize("fixture", ["ed25519_keypair", "secp256k1_keypair"])
    def test_seal(self, fixture: str, request: pytest.FixtureRequest) -> None:
        """seal returns a marshalled envelope signed by the requested peer."""
        keypair = request.getfixturevalue(fixture)
        keyring = Keyring([keypair])
        peer_id = keypair.to_peer_id()

        sealed = keyring.seal(peer_id, b"indexer", b"/codec", b"payload")

        envelope = SignedEnvelope.decode(sealed)
        assert envelope.signer() == peer_id
        assert envelope.payload_type == b"/codec"
        assert envelope.payload == b"payload"

    def test_missing_key(
        self, ed25519_keypair: Ed25519Keypair, other_keypair: Ed25519Keypair
    ) -> None:
        """Signing for an unknown peer raises SigningError naming the peer."""
        keyring = Keyring([ed25519_keypair])
        missing = other_keypair.to_peer_id()

        with pytest.raises(SigningError, match="No key material") as exc_info:
            keyring.seal(missing, b"indexer", b"/codec", b"payload")
        assert exc_info.value.peer_id == str(missing)

    def test_logs_each_seal(
        self, ed25519_keypair: Ed25519Keypair, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Every seal is logged at debug level."""
        keyring = Keyring([ed25519_keypair])
        with caplog.at_level(logging.DEBUG, logger="ipni_advert.record.keyring"):
            keyring.seal(ed25519_keypair.to_peer_id(), b"indexer", b"/codec", b"p")
        assert "/codec" in caplog.text
