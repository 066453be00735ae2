"""Indexer Ingestion Protocol Constants."""

from typing_extensions import Final

from ipni_advert.multiformats import CID, Multicodec, encode_varint

SIGNATURE_DOMAIN: Final = b"indexer"
"""Signed-envelope domain shared by every advertisement signature."""

AD_SIGNATURE_CODEC: Final = b"/indexer/ingest/adSignature"
"""Envelope payload type of the root provider's advertisement signature."""

EXTENDED_PROVIDER_SIGNATURE_CODEC: Final = b"/indexer/ingest/extendedProviderSignature"
"""Envelope payload type of each extended provider's signature."""

HTTP_PREFIX: Final = encode_varint(Multicodec.TRANSPORT_IPFS_GATEWAY_HTTP)
"""Metadata of a provider serving content over the IPFS HTTP gateway protocol."""

BITSWAP_PREFIX: Final = encode_varint(Multicodec.TRANSPORT_BITSWAP)
"""Metadata of a provider serving content over Bitswap."""

GRAPHSYNC_PREFIX: Final = encode_varint(Multicodec.TRANSPORT_GRAPHSYNC_FILECOINV1)
"""Metadata prefix of a Filecoin graphsync provider, followed by a DAG-CBOR payload."""

MAX_CONTEXT_ID_LENGTH: Final = 64
"""Maximum length in bytes of an advertisement context id."""

RECOMMENDED_MAX_BLOCK_BYTES: Final = 1_048_576
"""Soft size target for one entry chunk block (1 MiB). Indexers accept up to 4 MiB."""

MAX_ENTRYCHUNK_CHAIN_LENGTH: Final = 400
"""Number of Next links an indexer follows before giving up on an entries chain."""

NO_ENTRIES: Final = CID.parse("bafkqaaa")
"""Entries link of an advertisement that carries no content: raw CIDv1 of an empty identity hash."""
