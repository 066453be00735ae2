"""
Build and sign content advertisements for the InterPlanetary Network Indexer.

Typical use::

    from ipni_advert import Advertisement, EntryChunk, Keyring, Provider, generate_keypair

    keypair = generate_keypair()
    provider = Provider(
        peer_id=keypair.to_peer_id(),
        addresses=["/dns4/example.org/tcp/443/https"],
        protocol="http",
    )
    entries = EntryChunk.from_cids(cids).export()
    ad = Advertisement(providers=[provider], entries=entries.cid, context=b"car", previous=None)
    block = ad.export(Keyring([keypair]))
"""

from .codec import Block, encode_block
from .identity import PeerId, generate_keypair, load_private_key, marshal_private_key
from .ingest import (
    NO_ENTRIES,
    Advertisement,
    AdvertisementRecord,
    EntryChunk,
    GraphsyncMetadata,
    Provider,
    TransportProtocol,
    chunk_entries,
    create_extended_provider_ad,
)
from .multiformats import CID, Multiaddr, Multihash
from .record import Keyring, Signer
from .types import ConfigurationError, IpniError, SigningError, ValidationError

__all__ = [
    "Advertisement",
    "AdvertisementRecord",
    "create_extended_provider_ad",
    "Provider",
    "TransportProtocol",
    "GraphsyncMetadata",
    "EntryChunk",
    "chunk_entries",
    "NO_ENTRIES",
    "Block",
    "encode_block",
    "CID",
    "Multiaddr",
    "Multihash",
    "PeerId",
    "generate_keypair",
    "load_private_key",
    "marshal_private_key",
    "Keyring",
    "Signer",
    "IpniError",
    "ValidationError",
    "ConfigurationError",
    "SigningError",
]
