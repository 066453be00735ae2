"""
Providers: where and how advertised content can be fetched.

A provider is one network endpoint: a peer identity, the multiaddrs it
listens on and the transfer protocol it serves. The first provider of an
advertisement is its root provider; every further provider is an extended
provider that co-signs the advertisement.

Extended provider signature payload
-----------------------------------

Each provider in an extended-provider advertisement signs, in order::

    previous link bytes      (empty when there is no previous advertisement)
    entries link bytes
    root provider id         (string form, UTF-8)
    context id
    this provider id         (string form, UTF-8)
    this provider addresses  (string forms joined with no separator, UTF-8)
    this provider metadata
    override flag            (one byte, 1 or 0)

Peer ids and addresses contribute their string forms, not their binary
encodings, matching the go-libipni implementation that indexers verify with.

References:
    - https://github.com/ipni/specs/blob/main/IPNI.md#extendedprovider
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from pydantic import field_validator, model_validator

from ipni_advert.identity import PeerId
from ipni_advert.multiformats import Multiaddr
from ipni_advert.types import CheckedModel, ConfigurationError, ValidationError

from .metadata import GraphsyncMetadata, TransportProtocol, encode_metadata

if TYPE_CHECKING:
    from .advertisement import Advertisement

__all__ = ["Provider"]

_REQUIRED_FIELDS = ("peer_id", "addresses", "protocol")


class Provider(CheckedModel):
    """An endpoint serving advertised content over one transfer protocol."""

    peer_id: PeerId
    """Identity of the provider."""

    addresses: tuple[Multiaddr, ...]
    """Listen addresses, in announcement order. Never empty."""

    protocol: TransportProtocol
    """Transfer protocol served at the addresses."""

    metadata: GraphsyncMetadata | None = None
    """Graphsync retrieval parameters. Required for, and only allowed with, graphsync."""

    @model_validator(mode="before")
    @classmethod
    def _require_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            for name in _REQUIRED_FIELDS:
                if data.get(name) is None:
                    raise ValidationError("required_field", f"provider {name} is required")
        return data

    @field_validator("addresses", mode="before")
    @classmethod
    def _parse_addresses(cls, value: Any) -> tuple[Multiaddr, ...]:
        items: Iterable[Any] = (value,) if isinstance(value, (str, Multiaddr)) else value
        if not isinstance(items, (list, tuple)):
            raise ValidationError("address", f"expected multiaddrs, got {type(value).__name__}")

        addresses: list[Multiaddr] = []
        for item in items:
            if not isinstance(item, (str, Multiaddr)):
                raise ValidationError("address", f"expected a multiaddr, got {type(item).__name__}")
            try:
                addresses.append(Multiaddr.coerce(item))
            except ValueError as e:
                raise ValidationError("address", str(e)) from e

        if not addresses:
            raise ValidationError("addresses_empty", "a provider needs at least one address")
        return tuple(addresses)

    @field_validator("protocol", mode="before")
    @classmethod
    def _parse_protocol(cls, value: Any) -> TransportProtocol:
        if isinstance(value, str):
            return TransportProtocol.parse(value)
        try:
            return TransportProtocol(value)
        except ValueError:
            raise ConfigurationError(f"Unknown protocol {value!r}", protocol=value) from None

    @model_validator(mode="after")
    def _check_metadata(self) -> Provider:
        if self.protocol is TransportProtocol.GRAPHSYNC and self.metadata is None:
            raise ConfigurationError("graphsync metadata is required", protocol=self.protocol)
        if self.protocol is not TransportProtocol.GRAPHSYNC and self.metadata is not None:
            raise ValidationError(
                "metadata_protocol",
                f"{self.protocol.name.lower()} providers carry no metadata",
            )
        return self

    @property
    def identity_string(self) -> str:
        """String form of the peer id, as written to the wire record."""
        return str(self.peer_id)

    @property
    def address_strings(self) -> list[str]:
        """String forms of the addresses, as written to the wire record."""
        return [str(address) for address in self.addresses]

    def encode_metadata(self) -> bytes:
        """Retrieval metadata bytes for this provider's protocol."""
        return encode_metadata(self.protocol, self.metadata)

    def signable_bytes(self, ad: Advertisement) -> bytes:
        """Bytes this provider signs to join ad as an extended provider."""
        return b"".join(
            [
                ad.previous.bytes if ad.previous is not None else b"",
                ad.entries.bytes,
                ad.providers[0].identity_string.encode("utf-8"),
                ad.context,
                self.identity_string.encode("utf-8"),
                "".join(self.address_strings).encode("utf-8"),
                self.encode_metadata(),
                b"\x01" if ad.override else b"\x00",
            ]
        )
