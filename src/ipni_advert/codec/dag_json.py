"""
DAG-JSON codec.

JSON with two reserved shapes under the "/" key::

    {"/": "bafy..."}                  a link (CID string form)
    {"/": {"bytes": "<base64>"}}      a byte string (standard alphabet, no padding)

Maps are written with sorted keys and no whitespace, which is the form
indexer tooling reads advertisements back from.
"""

from __future__ import annotations

import base64
import json
from typing import Any

from ipni_advert.multiformats import CID

__all__ = ["encode", "decode"]


def _to_json(value: Any) -> Any:
    if isinstance(value, CID):
        return {"/": str(value)}
    if isinstance(value, bytes):
        return {"/": {"bytes": base64.b64encode(value).decode("ascii").rstrip("=")}}
    if isinstance(value, dict):
        return {str(k): _to_json(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_json(v) for v in value]
    if value is None or isinstance(value, (bool, int, str)):
        return value
    raise TypeError(f"Cannot encode {type(value).__name__} as DAG-JSON")


def _from_json(value: Any) -> Any:
    if isinstance(value, dict):
        if set(value) == {"/"}:
            inner = value["/"]
            if isinstance(inner, str):
                return CID.parse(inner)
            if isinstance(inner, dict) and set(inner) == {"bytes"}:
                encoded = inner["bytes"]
                return base64.b64decode(encoded + "=" * (-len(encoded) % 4))
        return {k: _from_json(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_json(v) for v in value]
    return value


def encode(value: Any) -> bytes:
    """Encode an IPLD data model value as DAG-JSON bytes."""
    return json.dumps(
        _to_json(value), sort_keys=True, separators=(",", ":"), ensure_ascii=False
    ).encode("utf-8")


def decode(data: bytes) -> Any:
    """Decode DAG-JSON bytes, restoring links and byte strings."""
    return _from_json(json.loads(data))
