"""
Signing collaborators.

Advertisements never hold private keys. They ask a ``Signer`` to seal each
signature payload on behalf of a peer, so that key storage (memory, files,
hardware, a remote signing service) stays outside the encoding logic.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from ipni_advert.identity import IdentityKeypair, PeerId
from ipni_advert.types import SigningError

from .envelope import SignedEnvelope

__all__ = ["Signer", "Keyring"]

logger = logging.getLogger(__name__)


@runtime_checkable
class Signer(Protocol):
    """
    Seals signature payloads for peers.

    Implementations raise SigningError when they cannot sign for a peer.
    """

    def seal(self, peer_id: PeerId, domain: bytes, codec: bytes, payload: bytes) -> bytes:
        """Return the marshalled signed envelope of payload, signed by peer_id."""
        ...


class Keyring:
    """In-memory signer backed by keypairs, indexed by peer id."""

    def __init__(self, keypairs: Iterable[IdentityKeypair] = ()) -> None:
        self._keypairs: dict[PeerId, IdentityKeypair] = {}
        for keypair in keypairs:
            self.add(keypair)

    def add(self, keypair: IdentityKeypair) -> PeerId:
        """Register a keypair and return the peer id it signs for."""
        peer_id = keypair.to_peer_id()
        self._keypairs[peer_id] = keypair
        return peer_id

    def __contains__(self, peer_id: object) -> bool:
        return peer_id in self._keypairs

    def __len__(self) -> int:
        return len(self._keypairs)

    def peer_ids(self) -> list[PeerId]:
        """Peer ids in registration order."""
        return list(self._keypairs)

    def seal(self, peer_id: PeerId, domain: bytes, codec: bytes, payload: bytes) -> bytes:
        """
        Seal payload with the keypair registered for peer_id.

        Raises:
            SigningError: If no key is registered for the peer, or the
                crypto backend fails to sign.
        """
        keypair = self._keypairs.get(peer_id)
        if keypair is None:
            raise SigningError("No key material", peer_id=str(peer_id))

        try:
            envelope = SignedEnvelope.seal(keypair, domain, codec, payload)
        except (ValueError, TypeError) as e:
            raise SigningError(f"Signing failed: {e}", peer_id=str(peer_id)) from e

        logger.debug("Sealed %s for %s", codec.decode("utf-8", "replace"), peer_id)
        return envelope.encode()
