"""IPLD codecs (DAG-CBOR, DAG-JSON) and encoded-length arithmetic."""

from . import dag_cbor, dag_json
from .block import Block, decode_block, encode_block
from .cbor_length import (
    CID_TAG,
    array_header_length,
    bytes_token_length,
    cid_token_length,
    head_length,
    map_header_length,
    string_token_length,
)

__all__ = [
    "dag_cbor",
    "dag_json",
    "Block",
    "encode_block",
    "decode_block",
    "CID_TAG",
    "head_length",
    "bytes_token_length",
    "string_token_length",
    "array_header_length",
    "map_header_length",
    "cid_token_length",
]
