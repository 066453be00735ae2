"""
Command-line tools for building and signing indexer advertisements.

Usage::

    python -m ipni_advert keygen --out provider.key
    python -m ipni_advert chunk --input multihashes.txt --out blocks/
    python -m ipni_advert advertise --key provider.key \\
        --address /dns4/example.org/tcp/443/https --protocol http \\
        --entries bafy... --context my-car --out blocks/
    python -m ipni_advert extend --key a.key --address /ip4/1.2.3.4/tcp/999/ws --protocol bitswap \\
        --key b.key --address /dns4/example.org/tcp/443/https --protocol http --out blocks/

Commands:
    keygen      Generate a libp2p private key and print its peer id
    chunk       Split a list of multihashes or CIDs into an entry chunk chain
    advertise   Sign an advertisement for one provider
    extend      Sign an extended-provider advertisement for several providers

Blocks are written to the output directory under their CID. The CID of the
block an indexer should start from is printed on stdout.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ipni_advert import config
from ipni_advert.codec import Block
from ipni_advert.identity import (
    IdentityKeypair,
    KeyType,
    generate_keypair,
    load_private_key,
    marshal_private_key,
)
from ipni_advert.ingest import (
    Advertisement,
    GraphsyncMetadata,
    Provider,
    TransportProtocol,
    chunk_entries,
    create_extended_provider_ad,
)
from ipni_advert.multiformats import CID, Base58, Multicodec, Multihash
from ipni_advert.record import Keyring
from ipni_advert.types import IpniError

logger = logging.getLogger(__name__)

_KEY_TYPES = {"ed25519": KeyType.ED25519, "secp256k1": KeyType.SECP256K1}

_FORMATS = {"dag-json": Multicodec.DAG_JSON, "dag-cbor": Multicodec.DAG_CBOR}


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)
        timestamp = f"{self.CYAN}{self.formatTime(record, self.datefmt)}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"
        return f"{timestamp} {levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging for the tools with optional colors."""
    level = logging.DEBUG if verbose else config.LOG_LEVEL_NO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    if no_color:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def parse_entry(line: str) -> bytes:
    """
    Parse one line of an entries file into an encoded multihash.

    A line is either a CID (its multihash is used) or a base58btc multihash.

    Raises:
        ValueError: If the line is neither.
    """
    try:
        return CID.parse(line).multihash.encode()
    except ValueError:
        pass

    data = Base58.decode(line)
    Multihash.decode(data)
    return data


def read_entries(path: Path) -> list[bytes]:
    """Read multihashes from a file, one per line. Blank lines and # comments are skipped."""
    entries: list[bytes] = []
    for number, raw in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        try:
            entries.append(parse_entry(line))
        except ValueError as e:
            raise ValueError(f"{path}:{number}: not a CID or multihash: {line!r}") from e
    return entries


def write_block(out_dir: Path, block: Block) -> Path:
    """Write a block to out_dir under its CID."""
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / str(block.cid)
    path.write_bytes(block.bytes)
    return path


def load_keypair(path: Path) -> IdentityKeypair:
    """Load a marshalled libp2p private key from a file."""
    return load_private_key(path.read_bytes())


def _graphsync_metadata(args: argparse.Namespace) -> GraphsyncMetadata | None:
    if args.piece_cid is None:
        return None
    return GraphsyncMetadata(
        piece_cid=CID.parse(args.piece_cid),
        verified_deal=args.verified_deal,
        fast_retrieval=args.fast_retrieval,
    )


def _provider(
    keypair: IdentityKeypair, addresses: list[str], protocol: TransportProtocol, args: argparse.Namespace
) -> Provider:
    metadata = _graphsync_metadata(args) if protocol is TransportProtocol.GRAPHSYNC else None
    return Provider(
        peer_id=keypair.to_peer_id(),
        addresses=addresses,
        protocol=protocol,
        metadata=metadata,
    )


def cmd_keygen(args: argparse.Namespace) -> int:
    """Generate a private key file."""
    keypair = generate_keypair(_KEY_TYPES[args.type])
    args.out.write_bytes(marshal_private_key(keypair))
    peer_id = keypair.to_peer_id()
    logger.info("Wrote %s key for %s to %s", args.type, peer_id, args.out)
    print(peer_id)
    return 0


def cmd_chunk(args: argparse.Namespace) -> int:
    """Write the entry chunk chain of an entries file."""
    entries = read_entries(args.input)
    blocks = chunk_entries(entries, args.max_block_bytes)
    for block in blocks:
        write_block(args.out, block)
    logger.info("Wrote %d entries in %d chunks to %s", len(entries), len(blocks), args.out)
    print(blocks[-1].cid)
    return 0


def cmd_advertise(args: argparse.Namespace) -> int:
    """Sign and write a single-provider advertisement."""
    keypair = load_keypair(args.key)
    protocol = TransportProtocol.parse(args.protocol)
    provider = _provider(keypair, args.address, protocol, args)

    ad = Advertisement(
        providers=[provider],
        entries=CID.parse(args.entries),
        context=args.context.encode("utf-8"),
        previous=CID.parse(args.previous) if args.previous else None,
        remove=args.remove,
    )
    block = ad.export(Keyring([keypair]), _FORMATS[args.format])
    path = write_block(args.out, block)
    logger.info("Wrote advertisement to %s", path)
    print(block.cid)
    return 0


def cmd_extend(args: argparse.Namespace) -> int:
    """Sign and write an extended-provider advertisement."""
    if not (len(args.key) == len(args.address) == len(args.protocol)):
        raise ValueError("--key, --address and --protocol must be given once per provider")

    keyring = Keyring()
    providers: list[Provider] = []
    for key_path, address, protocol_name in zip(args.key, args.address, args.protocol, strict=True):
        keypair = load_keypair(key_path)
        keyring.add(keypair)
        protocol = TransportProtocol.parse(protocol_name)
        providers.append(_provider(keypair, [address], protocol, args))

    ad = create_extended_provider_ad(
        providers, CID.parse(args.previous) if args.previous else None
    )
    block = ad.export(keyring, _FORMATS[args.format])
    path = write_block(args.out, block)
    logger.info("Wrote extended provider advertisement for %d providers to %s", len(providers), path)
    print(block.cid)
    return 0


def _add_signing_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--previous",
        default=None,
        help="CID of the previous advertisement of the chain (omit for the first)",
    )
    parser.add_argument(
        "--piece-cid",
        default=None,
        help="Piece CID for graphsync providers",
    )
    parser.add_argument(
        "--verified-deal",
        action="store_true",
        help="Mark the graphsync deal as verified",
    )
    parser.add_argument(
        "--fast-retrieval",
        action="store_true",
        help="Mark the graphsync deal as fast-retrieval",
    )
    parser.add_argument(
        "--out",
        type=Path,
        default=Path("."),
        help="Directory to write the advertisement block to (default: .)",
    )
    parser.add_argument(
        "--format",
        choices=sorted(_FORMATS),
        default="dag-json",
        help="Block codec (default: dag-json)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser of all commands."""
    parser = argparse.ArgumentParser(
        prog="ipni-advert",
        description="Build and sign indexer advertisements",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    keygen = commands.add_parser("keygen", help="Generate a libp2p private key")
    keygen.add_argument("--type", choices=sorted(_KEY_TYPES), default="ed25519", help="Key type")
    keygen.add_argument("--out", type=Path, required=True, help="Path of the key file")
    keygen.set_defaults(handler=cmd_keygen)

    chunk = commands.add_parser("chunk", help="Build an entry chunk chain")
    chunk.add_argument("--input", type=Path, required=True, help="File of CIDs or multihashes")
    chunk.add_argument("--out", type=Path, required=True, help="Directory to write blocks to")
    chunk.add_argument(
        "--max-block-bytes",
        type=int,
        default=config.MAX_BLOCK_BYTES,
        help=f"Size budget of one chunk (default: {config.MAX_BLOCK_BYTES})",
    )
    chunk.set_defaults(handler=cmd_chunk)

    advertise = commands.add_parser("advertise", help="Sign a single-provider advertisement")
    advertise.add_argument("--key", type=Path, required=True, help="Provider private key file")
    advertise.add_argument(
        "--address",
        action="append",
        required=True,
        help="Provider multiaddr (can be repeated)",
    )
    advertise.add_argument("--protocol", required=True, help="http, bitswap or graphsync")
    advertise.add_argument("--entries", required=True, help="CID of the entry chunk chain head")
    advertise.add_argument("--context", required=True, help="Context id (UTF-8 text)")
    advertise.add_argument("--remove", action="store_true", help="Withdraw the context's content")
    _add_signing_options(advertise)
    advertise.set_defaults(handler=cmd_advertise)

    extend = commands.add_parser("extend", help="Sign an extended-provider advertisement")
    extend.add_argument(
        "--key",
        type=Path,
        action="append",
        required=True,
        help="Provider private key file (once per provider)",
    )
    extend.add_argument(
        "--address",
        action="append",
        required=True,
        help="Provider multiaddr (once per provider)",
    )
    extend.add_argument(
        "--protocol",
        action="append",
        required=True,
        help="Provider protocol (once per provider)",
    )
    _add_signing_options(extend)
    extend.set_defaults(handler=cmd_extend)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    try:
        return args.handler(args)
    except (IpniError, ValueError, OSError) as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
