"""Off-chain notarization document pinned for every agreement."""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class _DocumentPart(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class PropertyRef(_DocumentPart):
    id: UUID
    title: str
    location: str


class OwnerRef(_DocumentPart):
    id: UUID


class TenantRef(_DocumentPart):
    id: UUID
    name: str
    email: str


class NotarizationDocument(_DocumentPart):
    """
    Terms of an agreement as pinned to the content store.

    Field declaration order is the serialized key order. ``to_json`` output
    re-parsed with ``from_json`` serializes back to the same bytes.
    """

    property: PropertyRef
    owner: OwnerRef
    tenant: TenantRef
    monthly_rent: Decimal = Field(alias="monthlyRent")
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    offer_id: UUID = Field(alias="offerId")
    generated_at: datetime = Field(alias="generatedAt")

    @field_serializer("monthly_rent")
    def _rent_as_number(self, value: Decimal) -> Union[int, float]:
        return int(value) if value == value.to_integral_value() else float(value)

    @field_serializer("generated_at")
    def _utc_timestamp(self, value: datetime) -> str:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")

    @classmethod
    def from_json(cls, raw: Union[str, bytes]) -> "NotarizationDocument":
        return cls.model_validate_json(raw)
