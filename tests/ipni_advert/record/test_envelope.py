"""Tests for libp2p signed envelopes."""

from __future__ import annotations

import pytest
from cryptography.hazmat.primitives.asymmetric import ed25519

from ipni_advert.identity import Ed25519Keypair
from ipni_advert.record import SignedEnvelope, envelope_signing_input


class TestSigningInput:
    """Tests for the signed byte string."""

    def test_length_prefixed_fields(self) -> None:
        """Domain, payload type and payload are each varint-length prefixed."""
        data = envelope_signing_input(b"indexer", b"/codec", b"\x01\x02")
        assert data == b"\x07indexer" + b"\x06/codec" + b"\x02\x01\x02"

    def test_empty_payload(self) -> None:
        """An empty payload still gets a zero length prefix."""
        assert envelope_signing_input(b"d", b"t", b"").endswith(b"\x01t\x00")


class TestSignedEnvelope:
    """Tests for sealing and encoding envelopes."""

    def test_seal_signs_the_signing_input(self, ed25519_keypair: Ed25519Keypair) -> None:
        """The signature covers domain, payload type and payload."""
        envelope = SignedEnvelope.seal(ed25519_keypair, b"indexer", b"/codec", b"payload")
        public = ed25519.Ed25519PublicKey.from_public_bytes(ed25519_keypair.public_key_bytes())
        public.verify(
            envelope.signature, envelope_signing_input(b"indexer", b"/codec", b"payload")
        )

    def test_domain_is_not_encoded(self, ed25519_keypair: Ed25519Keypair) -> None:
        """Verifiers must know the domain; it is not part of the envelope bytes."""
        encoded = SignedEnvelope.seal(ed25519_keypair, b"indexer", b"/codec", b"p").encode()
        assert b"indexer" not in encoded

    def test_field_tags(self, ed25519_keypair: Ed25519Keypair) -> None:
        """Fields 1, 2, 3 and 5 are written in tag order."""
        envelope = SignedEnvelope.seal(ed25519_keypair, b"d", b"/codec", b"p")
        encoded = envelope.encode()
        public_key = envelope.public_key.encode()

        assert encoded[0] == 0x0A
        assert encoded[1] == len(public_key)
        rest = encoded[2 + len(public_key) :]
        assert rest[:8] == b"\x12\x06/codec"
        assert rest[8:11] == b"\x1a\x01p"
        assert rest[11] == 0x2A

    def test_decode_inverts_encode(self, ed25519_keypair: Ed25519Keypair) -> None:
        """Decoding restores every field and the signer."""
        envelope = SignedEnvelope.seal(ed25519_keypair, b"d", b"/codec", b"payload")
        decoded = SignedEnvelope.decode(envelope.encode())
        assert decoded == envelope
        assert decoded.signer() == ed25519_keypair.to_peer_id()

    def test_decode_truncated(self, ed25519_keypair: Ed25519Keypair) -> None:
        """A cut-off envelope is rejected."""
        encoded = SignedEnvelope.seal(ed25519_keypair, b"d", b"/codec", b"payload").encode()
        with pytest.raises(ValueError, match="Truncated"):
            SignedEnvelope.decode(encoded[:-10])

    def test_decode_missing_signature(self) -> None:
        """An envelope without a signature is rejected."""
        with pytest.raises(ValueError, match="Missing signature"):
            SignedEnvelope.decode(b"\x0a\x00\x12\x01t")

    def test_decode_skips_unknown_fields(self, ed25519_keypair: Ed25519Keypair) -> None:
        """Varint, fixed-width and multi-byte-tag fields of other numbers are ignored."""
        envelope = SignedEnvelope.seal(ed25519_keypair, b"d", b"/codec", b"payload")
        extra = (
            b"\x30\x96\x01"  # field 6, varint 150
            + b"\x3d\x00\x00\x00\x00"  # field 7, fixed32
            + b"\x41" + b"\x00" * 8  # field 8, fixed64
            + b"\x82\x01\x02hi"  # field 16, length-delimited (two-byte tag)
        )
        assert SignedEnvelope.decode(extra + envelope.encode()) == envelope
        assert SignedEnvelope.decode(envelope.encode() + extra) == envelope

    def test_decode_rejects_group_wire_type(self, ed25519_keypair: Ed25519Keypair) -> None:
        """Deprecated group wire types cannot be skipped and are rejected."""
        encoded = SignedEnvelope.seal(ed25519_keypair, b"d", b"/codec", b"p").encode()
        with pytest.raises(ValueError, match="wire type 3"):
            SignedEnvelope.decode(encoded + b"\x33")

    def test_decode_truncated_fixed_field(self, ed25519_keypair: Ed25519Keypair) -> None:
        """A fixed-width field running past the end is rejected."""
        encoded = SignedEnvelope.seal(ed25519_keypair, b"d", b"/codec", b"p").encode()
        with pytest.raises(ValueError, match="Truncated"):
            SignedEnvelope.decode(encoded + b"\x3d\x00\x00")
