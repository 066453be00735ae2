"""
Composable network addresses.

A multiaddr is a path of (protocol, value) components::

    /dns4/example.org/tcp/443/https
    /ip4/12.34.56.78/tcp/999/ws
    /ip4/127.0.0.1/udp/4001/quic-v1/webtransport/certhash/uEiA.../p2p/12D3KooW...

Advertisements carry provider addresses in string form, and the signature
payloads concatenate those strings. The string form produced here is
canonical (IP addresses normalised, ports rendered as decimal, peer ids in
base58btc) so that equal addresses always sign identically.

Binary encoding (one entry per component)::

    [protocol code (varint)][value]

where value is fixed width for IPs and ports, absent for flag protocols
(tls, ws, https, p2p-circuit, ...), and varint-length-prefixed for names,
peer ids, certificate hashes and paths.

Path protocols (unix) take every remaining component as their value.

References:
    https://github.com/multiformats/multiaddr
    https://github.com/multiformats/multicodec/blob/master/table.csv
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Final
from urllib.parse import unquote

from .cid import CID
from .multibase import Base58, decode_multibase
from .multicodec import Multicodec
from .multihash import Multihash
from .varint import encode_varint

__all__ = ["Multiaddr", "PROTOCOLS"]


@dataclass(frozen=True, slots=True)
class _Protocol:
    """One row of the multiaddr protocol table."""

    name: str
    code: int
    size: int
    """Value width in bits; 0 for no value, -1 for length-prefixed, -2 for paths."""


_VARIABLE: Final = -1
_PATH: Final = -2

PROTOCOLS: Final[dict[str, _Protocol]] = {
    p.name: p
    for p in (
        _Protocol("ip4", 0x04, 32),
        _Protocol("tcp", 0x06, 16),
        _Protocol("dccp", 0x21, 16),
        _Protocol("ip6", 0x29, 128),
        _Protocol("ip6zone", 0x2A, _VARIABLE),
        _Protocol("ipcidr", 0x2B, 8),
        _Protocol("dns", 0x35, _VARIABLE),
        _Protocol("dns4", 0x36, _VARIABLE),
        _Protocol("dns6", 0x37, _VARIABLE),
        _Protocol("dnsaddr", 0x38, _VARIABLE),
        _Protocol("sctp", 0x84, 16),
        _Protocol("udp", 0x0111, 16),
        _Protocol("webrtc-direct", 0x0118, 0),
        _Protocol("webrtc", 0x0119, 0),
        _Protocol("p2p-circuit", 0x0122, 0),
        _Protocol("udt", 0x012D, 0),
        _Protocol("utp", 0x012E, 0),
        _Protocol("unix", 0x0190, _PATH),
        _Protocol("p2p", 0x01A5, _VARIABLE),
        _Protocol("https", 0x01BB, 0),
        _Protocol("tls", 0x01C0, 0),
        _Protocol("sni", 0x01C1, _VARIABLE),
        _Protocol("noise", 0x01C6, 0),
        _Protocol("quic", 0x01CC, 0),
        _Protocol("quic-v1", 0x01CD, 0),
        _Protocol("webtransport", 0x01D1, 0),
        _Protocol("certhash", 0x01D2, _VARIABLE),
        _Protocol("ws", 0x01DD, 0),
        _Protocol("wss", 0x01DE, 0),
        _Protocol("http", 0x01E0, 0),
        _Protocol("http-path", 0x01E1, _VARIABLE),
    )
}
"""Supported protocols, keyed by their string name."""

_ALIASES: Final[dict[str, str]] = {"ipfs": "p2p"}
"""Legacy protocol names and the name they are written back as."""

_PORT_PROTOCOLS: Final = frozenset({"tcp", "udp", "dccp", "sctp"})


def _canonical_peer_id(value: str) -> str:
    """
    Return the base58btc form of a peer id given as base58 or as a CID.

    Raises:
        ValueError: If value is neither a base58 multihash nor a libp2p-key CID.
    """
    if value.startswith(("Qm", "1")):
        data = Base58.decode(value)
        Multihash.decode(data)
        return Base58.encode(data)

    cid = CID.parse(value)
    if cid.codec != Multicodec.LIBP2P_KEY:
        raise ValueError(f"CID is not a libp2p-key peer id: {value!r}")
    return Base58.encode(cid.multihash.encode())


def _canonical_value(protocol: _Protocol, value: str) -> str:
    """Validate a component value and return its canonical string form."""
    if not value:
        raise ValueError(f"Empty value for /{protocol.name}")
    if protocol.name == "ip4":
        return str(ipaddress.IPv4Address(value))
    if protocol.name == "ip6":
        return str(ipaddress.IPv6Address(value))
    if protocol.name in _PORT_PROTOCOLS:
        if not value.isdigit() or not 0 <= int(value) <= 0xFFFF:
            raise ValueError(f"Invalid {protocol.name} port: {value!r}")
        return str(int(value))
    if protocol.name == "ipcidr":
        if not value.isdigit() or not 0 <= int(value) <= 0xFF:
            raise ValueError(f"Invalid ipcidr mask: {value!r}")
        return str(int(value))
    if protocol.name == "p2p":
        return _canonical_peer_id(value)
    if protocol.name == "certhash":
        Multihash.decode(decode_multibase(value))
    return value


def _encode_value(protocol: _Protocol, value: str) -> bytes:
    """Binary form of a component value (without the protocol code)."""
    if protocol.name == "ip4":
        return ipaddress.IPv4Address(value).packed
    if protocol.name == "ip6":
        return ipaddress.IPv6Address(value).packed
    if protocol.name in _PORT_PROTOCOLS:
        return int(value).to_bytes(2, "big")
    if protocol.name == "ipcidr":
        return bytes([int(value)])

    if protocol.name == "p2p":
        raw = Base58.decode(value)
    elif protocol.name == "certhash":
        raw = decode_multibase(value)
    elif protocol.name in ("unix", "http-path"):
        # The string form is percent-escaped; the binary form is not.
        raw = unquote(value).encode("utf-8")
    else:
        raw = value.encode("utf-8")
    return encode_varint(len(raw)) + raw


@dataclass(frozen=True, slots=True)
class Multiaddr:
    """
    A parsed multiaddr.

    Attributes:
        components: Ordered (protocol name, value) pairs. Flag protocols
            carry an empty value.
    """

    components: tuple[tuple[str, str], ...]

    @classmethod
    def parse(cls, text: str) -> Multiaddr:
        """
        Parse the string form of a multiaddr.

        Raises:
            ValueError: If the string is empty, does not start with "/",
                names an unknown protocol or is missing a value.
        """
        if not text.startswith("/"):
            raise ValueError(f"Multiaddr must start with '/': {text!r}")

        parts = text.rstrip("/").split("/")[1:]
        if not parts:
            raise ValueError("Empty multiaddr")

        components: list[tuple[str, str]] = []
        i = 0
        while i < len(parts):
            name = _ALIASES.get(parts[i], parts[i])
            protocol = PROTOCOLS.get(name)
            if protocol is None:
                raise ValueError(f"Unknown multiaddr protocol: {parts[i]!r}")
            i += 1

            if protocol.size == 0:
                components.append((name, ""))
                continue

            if i >= len(parts):
                raise ValueError(f"Missing value for /{name}")

            if protocol.size == _PATH:
                value = "/".join(parts[i:])
                i = len(parts)
            else:
                value = parts[i]
                i += 1
            components.append((name, _canonical_value(protocol, value)))

        return cls(components=tuple(components))

    @classmethod
    def coerce(cls, value: Multiaddr | str) -> Multiaddr:
        """Return value unchanged if already parsed, otherwise parse it."""
        return value if isinstance(value, Multiaddr) else cls.parse(value)

    def to_bytes(self) -> bytes:
        """Binary multiaddr encoding."""
        out = bytearray()
        for name, value in self.components:
            protocol = PROTOCOLS[name]
            out += encode_varint(protocol.code)
            if protocol.size != 0:
                out += _encode_value(protocol, value)
        return bytes(out)

    def protocols(self) -> list[str]:
        """Protocol names in path order."""
        return [name for name, _ in self.components]

    def __str__(self) -> str:
        """Return the canonical string form."""
        return "".join(f"/{name}/{value}" if value else f"/{name}" for name, value in self.components)

    def __repr__(self) -> str:
        """Return detailed representation."""
        return f"Multiaddr({self!s})"
