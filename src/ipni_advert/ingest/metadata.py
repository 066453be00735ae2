"""
Retrieval metadata carried by advertisements.

Metadata tells a retrieval client how to fetch advertised content. It starts
with the varint multicodec of the transfer protocol; only graphsync carries a
payload after the prefix::

    HTTP       varint(0x3D0000)                  80 80 F4 01
    BITSWAP    varint(0x0900)                    80 12
    GRAPHSYNC  varint(0x0910) || DAG-CBOR map    90 12 A3 ...

The graphsync payload is the map {PieceCID, VerifiedDeal, FastRetrieval}.

References:
    - https://github.com/ipni/specs/blob/main/IPNI.md#metadata
"""

from __future__ import annotations

from enum import IntEnum

from ipni_advert.codec import dag_cbor
from ipni_advert.multiformats import CID, Multicodec
from ipni_advert.types import CheckedModel, ConfigurationError

from .config import BITSWAP_PREFIX, GRAPHSYNC_PREFIX, HTTP_PREFIX

__all__ = ["TransportProtocol", "GraphsyncMetadata", "encode_metadata"]


class TransportProtocol(IntEnum):
    """Transfer protocols a provider can serve content over, keyed by multicodec."""

    HTTP = Multicodec.TRANSPORT_IPFS_GATEWAY_HTTP
    BITSWAP = Multicodec.TRANSPORT_BITSWAP
    GRAPHSYNC = Multicodec.TRANSPORT_GRAPHSYNC_FILECOINV1

    @classmethod
    def parse(cls, name: str) -> TransportProtocol:
        """
        Look up a protocol by its configuration name ("http", "bitswap", "graphsync").

        Raises:
            ConfigurationError: If the name is not a known protocol.
        """
        try:
            return cls[name.strip().upper()]
        except KeyError:
            known = ", ".join(p.name.lower() for p in cls)
            raise ConfigurationError(
                f"Unknown protocol {name!r}. Must be one of {known}", protocol=name
            ) from None


class GraphsyncMetadata(CheckedModel):
    """Filecoin graphsync retrieval parameters."""

    piece_cid: CID
    """Piece containing the advertised content."""

    verified_deal: bool
    """Whether the storage deal is a verified (Fil+) deal."""

    fast_retrieval: bool
    """Whether an unsealed copy is kept for fast retrieval."""

    def to_ipld(self) -> dict[str, object]:
        """IPLD map with the wire field names."""
        return {
            "PieceCID": self.piece_cid,
            "VerifiedDeal": self.verified_deal,
            "FastRetrieval": self.fast_retrieval,
        }


_PREFIXES: dict[TransportProtocol, bytes] = {
    TransportProtocol.HTTP: HTTP_PREFIX,
    TransportProtocol.BITSWAP: BITSWAP_PREFIX,
    TransportProtocol.GRAPHSYNC: GRAPHSYNC_PREFIX,
}


def encode_metadata(
    protocol: TransportProtocol, metadata: GraphsyncMetadata | None = None
) -> bytes:
    """
    Encode the retrieval metadata of a protocol.

    Raises:
        ConfigurationError: If the protocol is unknown, or graphsync metadata is missing.
    """
    try:
        protocol = TransportProtocol(protocol)
    except ValueError:
        raise ConfigurationError(f"Unknown protocol {protocol!r}", protocol=protocol) from None

    prefix = _PREFIXES[protocol]
    if protocol is not TransportProtocol.GRAPHSYNC:
        return prefix

    if metadata is None:
        raise ConfigurationError("graphsync metadata is required", protocol=protocol)
    return prefix + dag_cbor.encode(metadata.to_ipld())
