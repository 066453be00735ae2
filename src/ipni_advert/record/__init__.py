"""Signed envelopes and the signers that produce them."""

from .envelope import SignedEnvelope, envelope_signing_input
from .keyring import Keyring, Signer

__all__ = [
    "SignedEnvelope",
    "envelope_signing_input",
    "Keyring",
    "Signer",
]
