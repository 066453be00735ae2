"""Tests for content-addressed blocks."""

from __future__ import annotations

import pytest

from ipni_advert.codec import dag_cbor, dag_json, decode_block, encode_block
from ipni_advert.multiformats import CID, Multicodec, Multihash


class TestEncodeBlock:
    """Tests for encode_block."""

    def test_dag_cbor_default(self) -> None:
        """Blocks default to DAG-CBOR with a sha2-256 CIDv1."""
        value = {"hello": "world"}
        block = encode_block(value)
        assert block.bytes == dag_cbor.encode(value)
        assert block.cid == CID.create(1, Multicodec.DAG_CBOR, Multihash.sha256(block.bytes))
        assert str(block.cid).startswith("bafyrei")
        assert block.value is value

    def test_dag_json(self) -> None:
        """DAG-JSON blocks carry the dag-json codec."""
        block = encode_block({"hello": "world"}, Multicodec.DAG_JSON)
        assert block.bytes == dag_json.encode({"hello": "world"})
        assert block.cid.codec == Multicodec.DAG_JSON
        assert str(block.cid).startswith("baguqeera")

    def test_unsupported_codec(self) -> None:
        """Only the two IPLD codecs are supported."""
        with pytest.raises(ValueError, match="Unsupported block codec"):
            encode_block(b"raw", Multicodec.RAW)


class TestDecodeBlock:
    """Tests for decode_block."""

    @pytest.mark.parametrize("codec", [Multicodec.DAG_CBOR, Multicodec.DAG_JSON])
    def test_decode(self, codec: Multicodec) -> None:
        """Decoding an encoded block restores its value."""
        block = encode_block({"n": 1, "b": b"\x00"}, codec)
        assert decode_block(block.cid, block.bytes) == block

    @pytest.mark.parametrize("codec", [Multicodec.DAG_CBOR, Multicodec.DAG_JSON])
    def test_decode_with_link(self, codec: Multicodec) -> None:
        """A block linking to another block decodes the link back to a CID."""
        child = encode_block({"Entries": [b"\x00\x00"]})
        parent = encode_block({"Entries": child.cid}, codec)
        decoded = decode_block(parent.cid, parent.bytes)
        assert decoded.value == {"Entries": child.cid}
        assert isinstance(decoded.value["Entries"], CID)

    def test_hash_mismatch(self) -> None:
        """Bytes that do not hash to the CID are rejected."""
        block = encode_block({"n": 1})
        with pytest.raises(ValueError, match="do not match"):
            decode_block(block.cid, block.bytes + b"\x00")
