"""
Multicodec codes used by advertisements.

Values come from the multicodec table and must match the network's registered
values exactly: indexers dispatch on them.

References:
    https://github.com/multiformats/multicodec/blob/master/table.csv
"""

from __future__ import annotations

from enum import IntEnum

__all__ = ["Multicodec"]


class Multicodec(IntEnum):
    """Multicodec codes for content codecs, key formats and transports."""

    RAW = 0x55
    """Raw binary, no structure."""

    DAG_PB = 0x70
    """MerkleDAG protobuf (implied by every CIDv0)."""

    DAG_CBOR = 0x71
    """MerkleDAG CBOR; entry chunks and advertisements are stored in it."""

    LIBP2P_KEY = 0x72
    """libp2p public key; the codec of a peer id rendered as a CID."""

    DAG_JSON = 0x0129
    """MerkleDAG JSON."""

    TRANSPORT_BITSWAP = 0x0900
    """Bitswap transfer protocol metadata tag."""

    TRANSPORT_GRAPHSYNC_FILECOINV1 = 0x0910
    """Filecoin graphsync transfer protocol metadata tag."""

    TRANSPORT_IPFS_GATEWAY_HTTP = 0x3D0000
    """IPFS trustless gateway over HTTP metadata tag."""
