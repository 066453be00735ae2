"""Self-describing multiformat values: varints, hashes, links and addresses."""

from .cid import CID
from .multiaddr import Multiaddr
from .multibase import Base32, Base58, Base64Url, decode_multibase, encode_multibase
from .multicodec import Multicodec
from .multihash import Multihash, MultihashCode
from .varint import VarintError, decode_varint, encode_varint, varint_length

__all__ = [
    "CID",
    "Multiaddr",
    "Multicodec",
    "Multihash",
    "MultihashCode",
    "Base32",
    "Base58",
    "Base64Url",
    "encode_multibase",
    "decode_multibase",
    "VarintError",
    "encode_varint",
    "decode_varint",
    "varint_length",
]
