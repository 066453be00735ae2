"""
Advertisements: signed announcements of where content can be retrieved.

An advertisement links a batch of multihashes (an entries chain) to one or
more providers. Advertisements of one publisher form a backwards-linked
chain through PreviousID; the first advertisement of a chain has none.

Signatures
----------

The root provider signs the advertisement. The signed payload is the sha2-256
multihash of::

    previous link bytes      (empty when there is no previous advertisement)
    entries link bytes
    root provider id         (string form, UTF-8)
    root provider addresses  (string forms joined with no separator, UTF-8)
    root provider metadata
    remove flag              (one byte, 1 or 0)

That 34-byte multihash is sealed in a libp2p signed envelope under the
"indexer" domain and the "/indexer/ingest/adSignature" payload type.

With two or more providers the advertisement carries an ExtendedProvider
section. Every provider, the root included and in declared order, seals the
multihash of its own payload (see provider.py) under the
"/indexer/ingest/extendedProviderSignature" payload type.

Rules
-----

- The context id is at most 64 bytes; empty means "all content of the provider".
- A removal names exactly one provider.
- Override needs a context id and an extended provider set to replace.
- The previous link is always passed explicitly, None for the first advertisement.

References:
    - https://github.com/ipni/specs/blob/main/IPNI.md#advertisements
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import field_validator, model_validator

from ipni_advert.codec import Block, encode_block
from ipni_advert.identity import PeerId
from ipni_advert.multiformats import CID, Multicodec, Multihash
from ipni_advert.record import Signer
from ipni_advert.types import CheckedModel, ValidationError

from .config import (
    AD_SIGNATURE_CODEC,
    EXTENDED_PROVIDER_SIGNATURE_CODEC,
    MAX_CONTEXT_ID_LENGTH,
    NO_ENTRIES,
    SIGNATURE_DOMAIN,
)
from .provider import Provider
from .schema import AdvertisementRecord, ExtendedProviderRecord, ProviderRecord

__all__ = ["Advertisement", "create_extended_provider_ad", "signature_digest"]

logger = logging.getLogger(__name__)


def signature_digest(data: bytes) -> bytes:
    """Multihash of signable bytes: the payload placed in a signature envelope."""
    return Multihash.sha256(data).encode()


class Advertisement(CheckedModel):
    """
    An unsigned advertisement, validated at construction.

    Build the next advertisement of a chain by passing the CID of the
    previous one's exported block as previous.
    """

    providers: tuple[Provider, ...]
    """Providers of the content. The first is the root provider."""

    entries: CID
    """Head of the entries chain, or NO_ENTRIES."""

    context: bytes
    """Context id grouping the advertised content (0 to 64 bytes)."""

    previous: CID | None
    """Previous advertisement of the chain. Required, None for the first."""

    remove: bool = False
    """Withdraw the content of this context instead of announcing it."""

    override: bool = False
    """Replace, rather than extend, extended providers announced for this context."""

    @model_validator(mode="before")
    @classmethod
    def _require_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        if "previous" not in data:
            raise ValidationError(
                "previous_required",
                "previous must be passed explicitly, None for the first advertisement",
            )
        for name in ("providers", "entries", "context"):
            if data.get(name) is None:
                raise ValidationError("required_field", f"advertisement {name} is required")
        return data

    @field_validator("providers", mode="before")
    @classmethod
    def _coerce_providers(cls, value: Any) -> Any:
        if isinstance(value, Provider):
            value = (value,)
        if not isinstance(value, (list, tuple)):
            raise ValidationError("providers", f"expected providers, got {type(value).__name__}")
        for provider in value:
            if not isinstance(provider, Provider):
                raise ValidationError(
                    "providers", f"expected a Provider, got {type(provider).__name__}"
                )
        return tuple(value)

    @field_validator("context", mode="before")
    @classmethod
    def _coerce_context(cls, value: Any) -> Any:
        if isinstance(value, (bytearray, memoryview)):
            return bytes(value)
        return value

    @model_validator(mode="after")
    def _check_rules(self) -> Advertisement:
        if not self.providers:
            raise ValidationError("providers_empty", "an advertisement needs at least one provider")

        if len(self.context) > MAX_CONTEXT_ID_LENGTH:
            raise ValidationError(
                "context_length",
                f"context id is {len(self.context)} bytes, limit is {MAX_CONTEXT_ID_LENGTH}",
            )

        if self.remove and len(self.providers) != 1:
            raise ValidationError(
                "remove_single_provider",
                f"a removal names exactly one provider, got {len(self.providers)}",
            )

        if self.override:
            if not self.context:
                raise ValidationError("override_context", "override requires a context id")
            if len(self.providers) < 2:
                raise ValidationError(
                    "override_providers", "override requires at least two providers"
                )
        return self

    @property
    def root_provider(self) -> Provider:
        """Provider whose identity and addresses head the wire record."""
        return self.providers[0]

    @property
    def is_extended(self) -> bool:
        """Whether the advertisement carries an extended provider section."""
        return len(self.providers) > 1

    def signable_bytes(self) -> bytes:
        """Bytes signed by the root provider."""
        root = self.root_provider
        return b"".join(
            [
                self.previous.bytes if self.previous is not None else b"",
                self.entries.bytes,
                root.identity_string.encode("utf-8"),
                "".join(root.address_strings).encode("utf-8"),
                root.encode_metadata(),
                b"\x01" if self.remove else b"\x00",
            ]
        )

    def _sign(self, signer: Signer, peer_id: PeerId, codec: bytes, data: bytes) -> bytes:
        envelope = signer.seal(peer_id, SIGNATURE_DOMAIN, codec, signature_digest(data))
        logger.debug("Signed %s for %s", codec.decode("ascii"), peer_id)
        return envelope

    def encode_and_sign(self, signer: Signer) -> AdvertisementRecord:
        """
        Sign the advertisement and assemble its wire record.

        Signatures are requested one at a time: the root signature first, then
        one extended provider signature per provider in declared order.

        Raises:
            SigningError: If the signer cannot sign for one of the providers.
        """
        root = self.root_provider
        signature = self._sign(signer, root.peer_id, AD_SIGNATURE_CODEC, self.signable_bytes())

        extended_provider = None
        if self.is_extended:
            extended_provider = ExtendedProviderRecord(
                providers=tuple(self._sign_provider(signer, p) for p in self.providers),
                override=self.override,
            )

        return AdvertisementRecord(
            previous_id=self.previous,
            provider=root.identity_string,
            addresses=tuple(root.address_strings),
            signature=signature,
            entries=self.entries,
            context_id=self.context,
            metadata=root.encode_metadata(),
            is_rm=self.remove,
            extended_provider=extended_provider,
        )

    def _sign_provider(self, signer: Signer, provider: Provider) -> ProviderRecord:
        signature = self._sign(
            signer,
            provider.peer_id,
            EXTENDED_PROVIDER_SIGNATURE_CODEC,
            provider.signable_bytes(self),
        )
        return ProviderRecord(
            id=provider.identity_string,
            addresses=tuple(provider.address_strings),
            metadata=provider.encode_metadata(),
            signature=signature,
        )

    def export(self, signer: Signer, codec: int = Multicodec.DAG_CBOR) -> Block:
        """Sign the advertisement and encode its wire record as a block."""
        block = encode_block(self.encode_and_sign(signer).to_ipld(), codec)
        logger.debug("Exported advertisement %s", block.cid)
        return block


def create_extended_provider_ad(
    providers: list[Provider] | tuple[Provider, ...],
    previous: CID | None,
) -> Advertisement:
    """
    Build an advertisement announcing extra providers for all content.

    It has no entries and an empty context id, so the extended providers
    apply to every past and future advertisement of the chain.

    Raises:
        ValidationError: If fewer than two providers are given.
    """
    if len(providers) < 2:
        raise ValidationError(
            "extended_providers",
            f"an extended provider advertisement needs at least two providers, got {len(providers)}",
        )
    return Advertisement(providers=providers, entries=NO_ENTRIES, context=b"", previous=previous)
