"""
Entry chunks: pages of the multihash list an advertisement points at.

An advertisement's Entries link names the head of a forward-linked list of
EntryChunk blocks::

    EntryChunk { Entries: [bytes], Next?: Link }

Each chunk should stay below the block size indexers and transfer protocols
accept, so large entry lists are split across chunks. Deciding where to split
requires knowing the encoded size of a chunk after every append. Re-encoding
on each append is quadratic; instead the size is kept as a closed-form sum of
CBOR token lengths:

    size = overhead(Next) + sum(bytes token per entry) + array header(count)

The overhead covers the map head, the "Entries" key and, when Next is set,
the "Next" key and the link token. It is fixed for the life of a chunk. The
entries sum grows by one token per append. The array head depends only on
the count. Every term is O(1) to update.

References:
    - https://github.com/ipni/specs/blob/main/IPNI.md#entrychunk-chain
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from ipni_advert.codec import (
    Block,
    array_header_length,
    bytes_token_length,
    cid_token_length,
    encode_block,
    map_header_length,
    string_token_length,
)
from ipni_advert.multiformats import CID, Multihash
from ipni_advert.types import ValidationError

from .config import MAX_ENTRYCHUNK_CHAIN_LENGTH, RECOMMENDED_MAX_BLOCK_BYTES

__all__ = [
    "EntryChunk",
    "encode_entry_chunk",
    "calculate_dag_cbor_size",
    "entry_chunk_overhead",
    "chunk_entries",
]

logger = logging.getLogger(__name__)

_ENTRIES_KEY = "Entries"
_NEXT_KEY = "Next"


def encode_entry_chunk(entries: Sequence[bytes], next: CID | None = None) -> dict[str, object]:
    """Build the IPLD shape of an entry chunk. Next is omitted when absent."""
    chunk: dict[str, object] = {_ENTRIES_KEY: list(entries)}
    if next is not None:
        chunk[_NEXT_KEY] = next
    return chunk


def entry_chunk_overhead(next: CID | None = None) -> int:
    """Encoded length of an entry chunk minus its Entries array (head and items)."""
    if next is None:
        return map_header_length(1) + string_token_length(_ENTRIES_KEY)
    return (
        map_header_length(2)
        + string_token_length(_NEXT_KEY)
        + cid_token_length(next)
        + string_token_length(_ENTRIES_KEY)
    )


def calculate_dag_cbor_size(entries: Sequence[bytes], next: CID | None = None) -> int:
    """
    Encoded length of an entry chunk, summed over its full token stream.

    Linear in the number of entries. EntryChunk keeps the same sum incrementally.
    """
    size = map_header_length(2 if next is not None else 1)
    size += string_token_length(_ENTRIES_KEY)
    size += array_header_length(len(entries))
    for entry in entries:
        size += bytes_token_length(len(entry))
    if next is not None:
        size += string_token_length(_NEXT_KEY) + cid_token_length(next)
    return size


class EntryChunk:
    """
    One page of an entries chain with an O(1) encoded-size query.

    Entries are appended with add() and never removed. Once exported, the
    chunk is sealed and further appends are rejected.
    """

    def __init__(self, entries: Iterable[bytes] | None = None, next: CID | None = None) -> None:
        if next is not None and not isinstance(next, CID):
            raise ValidationError("next_link", f"next must be a CID, got {type(next).__name__}")

        self._entries: list[bytes] = []
        self._next = next
        self._exported = False

        # Fixed cost of the map, keys and Next link.
        self._encoding_overhead = entry_chunk_overhead(next)
        # Sum of the entry byte-string tokens, without the array head.
        self._encoded_entries_length = 0

        for entry in entries or ():
            self._append(entry)

    @property
    def entries(self) -> tuple[bytes, ...]:
        """Entries in insertion order."""
        return tuple(self._entries)

    @property
    def next(self) -> CID | None:
        """Link to the following chunk of the chain."""
        return self._next

    def __len__(self) -> int:
        return len(self._entries)

    def _append(self, entry: bytes) -> None:
        if not isinstance(entry, bytes):
            raise ValidationError("entry", f"entries must be bytes, got {type(entry).__name__}")
        self._entries.append(entry)
        self._encoded_entries_length += bytes_token_length(len(entry))

    def add(self, entry: bytes) -> None:
        """
        Append one multihash.

        No size limit is applied; callers query calculate_encoded_size() to
        decide when to start a new chunk.

        Raises:
            ValidationError: If the chunk was already exported, or entry is not bytes.
        """
        if self._exported:
            raise ValidationError("chunk_exported", "cannot add to an exported entry chunk")
        self._append(entry)

    def calculate_encoded_size(self) -> int:
        """Exact DAG-CBOR byte length of the chunk."""
        array_size = array_header_length(len(self._entries))
        return self._encoding_overhead + self._encoded_entries_length + array_size

    def encoded_size_with(self, entry: bytes) -> int:
        """Exact DAG-CBOR byte length the chunk would have after adding entry."""
        return (
            self._encoding_overhead
            + self._encoded_entries_length
            + bytes_token_length(len(entry))
            + array_header_length(len(self._entries) + 1)
        )

    def ipld_view(self) -> dict[str, object]:
        """IPLD shape of the chunk."""
        return encode_entry_chunk(self._entries, self._next)

    def export(self) -> Block:
        """Encode the chunk as a DAG-CBOR block and seal it."""
        self._exported = True
        return encode_block(self.ipld_view())

    @classmethod
    def from_multihashes(cls, multihashes: Iterable[Multihash]) -> EntryChunk:
        """Build a chunk holding the given multihashes."""
        return cls(entries=[mh.encode() for mh in multihashes])

    @classmethod
    def from_cids(cls, cids: Iterable[CID]) -> EntryChunk:
        """Build a chunk holding the multihash of each CID."""
        return cls(entries=[cid.multihash.encode() for cid in cids])


def chunk_entries(
    entries: Iterable[bytes],
    max_block_bytes: int = RECOMMENDED_MAX_BLOCK_BYTES,
    next: CID | None = None,
) -> list[Block]:
    """
    Split multihashes into a linked chain of entry chunk blocks.

    A chunk is exported as soon as the next entry would push it past
    max_block_bytes, and the following chunk links back to it through Next.
    An entry too large for any chunk gets a chunk of its own.

    Args:
        entries: Encoded multihashes, in order.
        max_block_bytes: Size budget of one chunk block.
        next: Existing chain to extend, linked from the first chunk written.

    Returns:
        Blocks in write order. The last block is the chain head that an
        advertisement's Entries link should name.
    """
    if max_block_bytes <= 0:
        raise ValidationError("max_block_bytes", f"must be positive, got {max_block_bytes}")

    blocks: list[Block] = []
    chunk = EntryChunk(next=next)

    for entry in entries:
        if len(chunk) > 0 and chunk.encoded_size_with(entry) > max_block_bytes:
            blocks.append(_export_chunk(chunk, len(blocks)))
            chunk = EntryChunk(next=blocks[-1].cid)
        chunk.add(entry)

    if len(chunk) > 0 or not blocks:
        blocks.append(_export_chunk(chunk, len(blocks)))

    if len(blocks) > MAX_ENTRYCHUNK_CHAIN_LENGTH:
        logger.warning(
            "Entry chunk chain of %d blocks exceeds the %d indexers follow",
            len(blocks),
            MAX_ENTRYCHUNK_CHAIN_LENGTH,
        )
    return blocks


def _export_chunk(chunk: EntryChunk, index: int) -> Block:
    size = chunk.calculate_encoded_size()
    block = chunk.export()
    logger.debug("Entry chunk %d: %s (%d entries, %d bytes)", index, block.cid, len(chunk), size)
    return block
