"""
Indexer ingestion records: providers, entry chunks and signed advertisements.
"""

from .advertisement import Advertisement, create_extended_provider_ad, signature_digest
from .config import (
    AD_SIGNATURE_CODEC,
    BITSWAP_PREFIX,
    EXTENDED_PROVIDER_SIGNATURE_CODEC,
    GRAPHSYNC_PREFIX,
    HTTP_PREFIX,
    MAX_CONTEXT_ID_LENGTH,
    MAX_ENTRYCHUNK_CHAIN_LENGTH,
    NO_ENTRIES,
    RECOMMENDED_MAX_BLOCK_BYTES,
    SIGNATURE_DOMAIN,
)
from .entry_chunk import (
    EntryChunk,
    calculate_dag_cbor_size,
    chunk_entries,
    encode_entry_chunk,
    entry_chunk_overhead,
)
from .metadata import GraphsyncMetadata, TransportProtocol, encode_metadata
from .provider import Provider
from .schema import (
    AdvertisementRecord,
    EntryChunkRecord,
    ExtendedProviderRecord,
    ProviderRecord,
)

__all__ = [
    # Records
    "Advertisement",
    "create_extended_provider_ad",
    "signature_digest",
    "Provider",
    "EntryChunk",
    "chunk_entries",
    "encode_entry_chunk",
    "calculate_dag_cbor_size",
    "entry_chunk_overhead",
    # Metadata
    "TransportProtocol",
    "GraphsyncMetadata",
    "encode_metadata",
    # Wire schema
    "AdvertisementRecord",
    "ExtendedProviderRecord",
    "ProviderRecord",
    "EntryChunkRecord",
    # Constants
    "SIGNATURE_DOMAIN",
    "AD_SIGNATURE_CODEC",
    "EXTENDED_PROVIDER_SIGNATURE_CODEC",
    "HTTP_PREFIX",
    "BITSWAP_PREFIX",
    "GRAPHSYNC_PREFIX",
    "MAX_CONTEXT_ID_LENGTH",
    "RECOMMENDED_MAX_BLOCK_BYTES",
    "MAX_ENTRYCHUNK_CHAIN_LENGTH",
    "NO_ENTRIES",
]
