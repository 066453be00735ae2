"""Tests for the command-line tools."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest

from ipni_advert.__main__ import main, parse_entry, read_entries
from ipni_advert.codec import dag_cbor, dag_json
from ipni_advert.identity import Ed25519Keypair, load_private_key, marshal_private_key
from ipni_advert.ingest import HTTP_PREFIX, NO_ENTRIES, AdvertisementRecord
from ipni_advert.multiformats import CID, Base58, Multihash

EMPTY_DIR = "bafybeiczsscdsbs7ffqz55asqdf3smv6klcw3gofszvwlyarci47bgf354"


@pytest.fixture(autouse=True)
def no_log_handlers() -> Iterator[None]:
    """Keep main() from installing root handlers that outlive a test."""
    with patch("ipni_advert.__main__.setup_logging"):
        yield


@pytest.fixture
def key_file(tmp_path: Path, ed25519_keypair: Ed25519Keypair) -> Path:
    """Marshalled ed25519_keypair on disk."""
    path = tmp_path / "provider.key"
    path.write_bytes(marshal_private_key(ed25519_keypair))
    return path


@pytest.fixture
def other_key_file(tmp_path: Path, other_keypair: Ed25519Keypair) -> Path:
    """Marshalled other_keypair on disk."""
    path = tmp_path / "other.key"
    path.write_bytes(marshal_private_key(other_keypair))
    return path


class TestParseEntry:
    """Tests for entries file parsing."""

    def test_cid_line(self) -> None:
        """A CID contributes its multihash."""
        assert parse_entry(EMPTY_DIR) == CID.parse(EMPTY_DIR).multihash.encode()

    def test_multihash_line(self) -> None:
        """A base58 multihash is used as is."""
        multihash = Multihash.sha512(b"x").encode()
        assert parse_entry(Base58.encode(multihash)) == multihash

    def test_invalid_line(self) -> None:
        """Anything else is rejected."""
        with pytest.raises(ValueError):
            parse_entry("0OIl")

    def test_read_entries_skips_comments(self, tmp_path: Path) -> None:
        """Blank lines and comments are ignored."""
        path = tmp_path / "entries.txt"
        path.write_text(f"# header\n\n{EMPTY_DIR}\n  bafkqaaa  \n")
        assert read_entries(path) == [
            CID.parse(EMPTY_DIR).multihash.encode(),
            NO_ENTRIES.multihash.encode(),
        ]

    def test_read_entries_reports_line(self, tmp_path: Path) -> None:
        """Errors name the file and line."""
        path = tmp_path / "entries.txt"
        path.write_text(f"{EMPTY_DIR}\nnope!\n")
        with pytest.raises(ValueError, match="entries.txt:2"):
            read_entries(path)


class TestKeygen:
    """Tests for the keygen command."""

    @pytest.mark.parametrize(("key_type", "prefix"), [("ed25519", "12D3KooW"), ("secp256k1", "16Uiu2")])
    def test_writes_key(
        self, key_type: str, prefix: str, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """The key file loads back to the printed peer id."""
        out = tmp_path / "new.key"
        assert main(["keygen", "--type", key_type, "--out", str(out)]) == 0

        printed = capsys.readouterr().out.strip()
        assert printed.startswith(prefix)
        assert str(load_private_key(out.read_bytes()).to_peer_id()) == printed


class TestChunk:
    """Tests for the chunk command."""

    def test_writes_chain(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Every chunk is written under its CID; the head is printed."""
        entries = [Base58.encode(Multihash.sha256(bytes([i])).encode()) for i in range(50)]
        source = tmp_path / "entries.txt"
        source.write_text("\n".join(entries))
        out = tmp_path / "blocks"

        assert main(["chunk", "--input", str(source), "--out", str(out), "--max-block-bytes", "400"]) == 0

        head = capsys.readouterr().out.strip()
        files = {path.name for path in out.iterdir()}
        assert head in files
        assert len(files) > 1

        chunk = dag_cbor.decode((out / head).read_bytes())
        assert chunk["Entries"][-1] == Base58.decode(entries[-1])
        assert str(chunk["Next"]) in files

    def test_bad_input(self, tmp_path: Path) -> None:
        """Unparseable entries fail with exit code 1."""
        source = tmp_path / "entries.txt"
        source.write_text("not a multihash\n")
        assert main(["chunk", "--input", str(source), "--out", str(tmp_path / "blocks")]) == 1

    def test_missing_input(self, tmp_path: Path) -> None:
        """A missing entries file fails with exit code 1."""
        assert main(["chunk", "--input", str(tmp_path / "absent"), "--out", str(tmp_path)]) == 1


class TestAdvertise:
    """Tests for the advertise command."""

    def test_dag_cbor(
        self,
        key_file: Path,
        ed25519_keypair: Ed25519Keypair,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """The written block holds the signed advertisement."""
        out = tmp_path / "blocks"
        code = main(
            [
                "advertise",
                "--key", str(key_file),
                "--address", "/dns4/example.org/tcp/443/https",
                "--protocol", "http",
                "--entries", EMPTY_DIR,
                "--context", "c",
                "--format", "dag-cbor",
                "--out", str(out),
            ]
        )  # fmt: skip
        assert code == 0

        cid = capsys.readouterr().out.strip()
        record = AdvertisementRecord.from_ipld(dag_cbor.decode((out / cid).read_bytes()))
        assert record.provider == str(ed25519_keypair.to_peer_id())
        assert record.addresses == ("/dns4/example.org/tcp/443/https",)
        assert record.metadata == HTTP_PREFIX
        assert record.context_id == b"c"
        assert record.previous_id is None
        assert record.extended_provider is None

    def test_graphsync_needs_piece_cid(self, key_file: Path, tmp_path: Path) -> None:
        """Graphsync without --piece-cid fails with exit code 1."""
        code = main(
            [
                "advertise",
                "--key", str(key_file),
                "--address", "/ip4/1.2.3.4/tcp/999/ws",
                "--protocol", "graphsync",
                "--entries", EMPTY_DIR,
                "--context", "c",
                "--out", str(tmp_path),
            ]
        )  # fmt: skip
        assert code == 1

    def test_unknown_protocol(self, key_file: Path, tmp_path: Path) -> None:
        """Unknown protocol names fail with exit code 1."""
        code = main(
            [
                "advertise",
                "--key", str(key_file),
                "--address", "/ip4/1.2.3.4/tcp/999/ws",
                "--protocol", "ftp",
                "--entries", EMPTY_DIR,
                "--context", "c",
                "--out", str(tmp_path),
            ]
        )  # fmt: skip
        assert code == 1


class TestExtend:
    """Tests for the extend command."""

    def test_two_providers(
        self,
        key_file: Path,
        other_key_file: Path,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Both providers appear in the extended provider section."""
        code = main(
            [
                "extend",
                "--key", str(key_file),
                "--address", "/dns4/example.org/tcp/443/https",
                "--protocol", "http",
                "--key", str(other_key_file),
                "--address", "/ip4/12.34.56.78/tcp/999/ws",
                "--protocol", "bitswap",
                "--previous", EMPTY_DIR,
                "--out", str(tmp_path),
            ]
        )  # fmt: skip
        assert code == 0

        cid = capsys.readouterr().out.strip()
        ipld = dag_json.decode((tmp_path / cid).read_bytes())
        assert ipld["Entries"] == NO_ENTRIES
        assert ipld["PreviousID"] == CID.parse(EMPTY_DIR)
        assert [p["Addresses"] for p in ipld["ExtendedProvider"]["Providers"]] == [
            ["/dns4/example.org/tcp/443/https"],
            ["/ip4/12.34.56.78/tcp/999/ws"],
        ]

    def test_mismatched_options(self, key_file: Path, tmp_path: Path) -> None:
        """Each provider needs a key, an address and a protocol."""
        code = main(
            [
                "extend",
                "--key", str(key_file),
                "--address", "/dns4/example.org/tcp/443/https",
                "--address", "/ip4/12.34.56.78/tcp/999/ws",
                "--protocol", "http",
                "--out", str(tmp_path),
            ]
        )  # fmt: skip
        assert code == 1

    def test_single_provider(self, key_file: Path, tmp_path: Path) -> None:
        """One provider is not an extension."""
        code = main(
            [
                "extend",
                "--key", str(key_file),
                "--address", "/dns4/example.org/tcp/443/https",
                "--protocol", "http",
                "--out", str(tmp_path),
            ]
        )  # fmt: skip
        assert code == 1
