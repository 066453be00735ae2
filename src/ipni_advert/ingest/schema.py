"""
Wire records of the indexer ingestion protocol.

Field aliases are the IPLD field names indexers decode::

    Advertisement {
        PreviousID?       Link
        Provider          String
        Addresses         [String]
        Signature         Bytes
        Entries           Link
        ContextID         Bytes
        Metadata          Bytes
        IsRm              Bool
        ExtendedProvider? ExtendedProvider
    }

    ExtendedProvider { Providers [Provider], Override Bool }
    Provider         { ID String, Addresses [String], Metadata Bytes, Signature Bytes }
    EntryChunk       { Entries [Bytes], Next? Link }

Optional fields are omitted from the encoded map when absent, never null.
"""

from __future__ import annotations

from typing import Any, Self

from pydantic import ConfigDict, Field

from ipni_advert.multiformats import CID
from ipni_advert.types import StrictBaseModel

__all__ = [
    "EntryChunkRecord",
    "ProviderRecord",
    "ExtendedProviderRecord",
    "AdvertisementRecord",
]


class _Record(StrictBaseModel):
    """Base of the wire records: IPLD conversion keyed by field alias."""

    model_config = ConfigDict(populate_by_name=True)

    def to_ipld(self) -> dict[str, Any]:
        """IPLD map with the wire field names, absent optional fields omitted."""
        out: dict[str, Any] = {}
        for name, field in type(self).model_fields.items():
            value = getattr(self, name)
            if value is None:
                continue
            out[field.alias or name] = _to_ipld(value)
        return out

    @classmethod
    def from_ipld(cls, value: dict[str, Any]) -> Self:
        """Rebuild a record from a decoded IPLD map."""
        return cls.model_validate(value, strict=False)


def _to_ipld(value: Any) -> Any:
    if isinstance(value, _Record):
        return value.to_ipld()
    if isinstance(value, tuple):
        return [_to_ipld(item) for item in value]
    return value


class EntryChunkRecord(_Record):
    """One page of an entries chain."""

    entries: tuple[bytes, ...] = Field(alias="Entries")
    next: CID | None = Field(default=None, alias="Next")


class ProviderRecord(_Record):
    """One signed member of an extended provider set."""

    id: str = Field(alias="ID")
    addresses: tuple[str, ...] = Field(alias="Addresses")
    metadata: bytes = Field(alias="Metadata")
    signature: bytes = Field(alias="Signature")


class ExtendedProviderRecord(_Record):
    """Providers serving the advertised content in addition to the root provider."""

    providers: tuple[ProviderRecord, ...] = Field(alias="Providers")
    override: bool = Field(alias="Override")


class AdvertisementRecord(_Record):
    """A signed advertisement as published to indexers."""

    previous_id: CID | None = Field(default=None, alias="PreviousID")
    provider: str = Field(alias="Provider")
    addresses: tuple[str, ...] = Field(alias="Addresses")
    signature: bytes = Field(alias="Signature")
    entries: CID = Field(alias="Entries")
    context_id: bytes = Field(alias="ContextID")
    metadata: bytes = Field(alias="Metadata")
    is_rm: bool = Field(alias="IsRm")
    extended_provider: ExtendedProviderRecord | None = Field(default=None, alias="ExtendedProvider")
