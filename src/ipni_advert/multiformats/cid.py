"""
Content identifiers (links).

A CID names a block of content by its codec and hash::

    CIDv0:  <sha2-256 multihash>                       (always dag-pb, base58btc text)
    CIDv1:  <version varint><codec varint><multihash>  (multibase text, base32 default)

Advertisements carry CIDs in three places: the ``PreviousID`` link to the
prior advertisement, the ``Entries`` link to an entry chunk chain, and the
``Next`` link between chunks. Their binary form feeds signature payloads, and
their byte length drives entry chunk size accounting.

References:
    https://github.com/multiformats/cid
"""

from __future__ import annotations

from dataclasses import dataclass

from .multibase import BASE32_PREFIX, Base58, decode_multibase, encode_multibase
from .multicodec import Multicodec
from .multihash import Multihash, MultihashCode
from .varint import decode_varint, encode_varint

__all__ = ["CID"]


@dataclass(frozen=True, slots=True)
class CID:
    """
    A content identifier.

    Attributes:
        version: 0 or 1.
        codec: Multicodec of the referenced content.
        multihash: Hash of the referenced content.
    """

    version: int
    codec: int
    multihash: Multihash

    def __post_init__(self) -> None:
        if self.version not in (0, 1):
            raise ValueError(f"Unsupported CID version: {self.version}")
        if self.version == 0:
            if self.codec != Multicodec.DAG_PB:
                raise ValueError("CIDv0 requires the dag-pb codec")
            if self.multihash.code != MultihashCode.SHA2_256 or len(self.multihash.digest) != 32:
                raise ValueError("CIDv0 requires a 32-byte sha2-256 multihash")

    @classmethod
    def create(cls, version: int, codec: int, multihash: Multihash) -> CID:
        """Create a CID from its parts."""
        return cls(version=version, codec=codec, multihash=multihash)

    @classmethod
    def parse(cls, text: str) -> CID:
        """
        Parse the string form of a CID.

        Strings of 46 characters starting with "Qm" are CIDv0 (bare base58btc).
        Everything else must be a multibase-prefixed CIDv1.

        Raises:
            ValueError: If the string is not a valid CID.
        """
        if len(text) == 46 and text.startswith("Qm"):
            return cls.decode(Base58.decode(text))

        data = decode_multibase(text)
        cid = cls.decode(data)
        if cid.version == 0:
            raise ValueError("CIDv0 must not carry a multibase prefix")
        return cid

    @classmethod
    def decode(cls, data: bytes) -> CID:
        """
        Decode the binary form of a CID.

        Raises:
            ValueError: If the bytes are not a valid CID.
        """
        # A CIDv0 is a bare sha2-256 multihash: 0x12 0x20 <32 bytes>.
        if len(data) == 34 and data[0] == MultihashCode.SHA2_256 and data[1] == 0x20:
            return cls(version=0, codec=Multicodec.DAG_PB, multihash=Multihash.decode(data))

        version, n = decode_varint(data, 0)
        if version != 1:
            raise ValueError(f"Unsupported CID version: {version}")
        codec, m = decode_varint(data, n)
        return cls(version=1, codec=codec, multihash=Multihash.decode(data[n + m :]))

    @property
    def bytes(self) -> bytes:
        """Binary form of the CID."""
        if self.version == 0:
            return self.multihash.encode()
        return encode_varint(self.version) + encode_varint(self.codec) + self.multihash.encode()

    @property
    def byte_length(self) -> int:
        """Length of the binary form."""
        return len(self.bytes)

    def to_v1(self) -> CID:
        """Return the CIDv1 naming the same content."""
        return CID(version=1, codec=self.codec, multihash=self.multihash)

    def __str__(self) -> str:
        """Return the canonical string form (base58btc for v0, base32 for v1)."""
        if self.version == 0:
            return Base58.encode(self.bytes)
        return encode_multibase(BASE32_PREFIX, self.bytes)

    def __repr__(self) -> str:
        """Return detailed representation."""
        return f"CID({self!s})"
