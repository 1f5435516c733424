"""Data models for raw catalog records and their indexed form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from .text import to_text


def _choices(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class RawListing(BaseModel):
    """Canonical view of a loosely shaped catalog record.

    Each field lists the legacy key names it may arrive under, in priority
    order; the first one present on the record wins. Values are coerced
    leniently so a wrong-shaped field reads as absent instead of failing.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    listing_id: Optional[str] = Field(default=None, validation_alias=_choices("id", "uuid", "slug", "listing_id"))
    name: Optional[str] = Field(default=None, validation_alias=_choices("name", "title", "hostel_name"))
    location: Optional[str] = Field(default=None, validation_alias=_choices("location", "area", "neighborhood"))
    address: Optional[str] = Field(default=None, validation_alias=_choices("address", "street_address"))
    room_type: Optional[str] = Field(
        default=None, validation_alias=_choices("room_type", "roomType", "type", "category")
    )
    amenities: Optional[str] = Field(
        default=None, validation_alias=_choices("amenities", "facilities", "features", "tags")
    )
    description: Optional[str] = Field(default=None, validation_alias=_choices("description", "summary", "about"))
    features: Optional[str] = Field(default=None, validation_alias=_choices("features", "facilities"))
    tags: Optional[str] = Field(default=None, validation_alias=_choices("tags", "keywords"))
    category: Optional[str] = Field(default=None, validation_alias=_choices("category",))
    price_unit: Optional[str] = Field(
        default=None, validation_alias=_choices("price_unit", "priceUnit", "billing_period", "period")
    )
    near_campus_flag: Any = Field(
        default=None, validation_alias=_choices("near_campus", "nearCampus", "is_near_campus", "close_to_campus")
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if value is not None and value != ""}
        return data

    @field_validator("name", "location", "address", "listing_id", "price_unit", mode="before")
    @classmethod
    def _scalar_text(cls, value: Any) -> Optional[str]:
        if isinstance(value, bool):
            return None
        if isinstance(value, (str, int, float)):
            text = str(value).strip()
            return text or None
        return None

    @field_validator("room_type", "amenities", "description", "features", "tags", "category", mode="before")
    @classmethod
    def _flattened_text(cls, value: Any) -> Optional[str]:
        text = to_text(value).strip()
        return text or None

    @classmethod
    def empty(cls) -> "RawListing":
        return cls.model_construct()


@dataclass(frozen=True, slots=True)
class IndexedListing:
    """Immutable snapshot of one raw record with precomputed search fields."""

    listing_id: str
    name: str
    location: str
    address: str
    name_n: str
    location_n: str
    address_n: str
    room_type_n: str
    amenity_n: str
    features_n: str
    price: Optional[float]
    price_unit: Optional[str]
    near_campus: bool
    image_urls: Tuple[str, ...]
    has_images: int
    has_price: int
    raw: Any = field(default=None, repr=False, hash=False)

    @property
    def image_count(self) -> int:
        return len(self.image_urls)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable summary of the listing."""

        return {
            "id": self.listing_id,
            "name": self.name,
            "location": self.location,
            "address": self.address,
            "price": self.price,
            "price_unit": self.price_unit,
            "near_campus": self.near_campus,
            "images": list(self.image_urls),
        }


def as_mapping(record: Any) -> Mapping[str, Any]:
    """Return *record* if it is a mapping, else an empty one."""

    return record if isinstance(record, Mapping) else {}


__all__ = ["RawListing", "IndexedListing", "as_mapping"]
