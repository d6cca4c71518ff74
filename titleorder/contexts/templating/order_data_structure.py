"""
Order Data Structure

Structured representation of a title order as consumed by the order form
template. Records are built fresh for every request from JSON-shaped data and
are not validated beyond defaulting optional fields.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class ScopeItem:
    """One entry of the title scope or E&R list."""

    name: str = ""
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScopeItem":
        return cls(name=data.get("name") or "", description=data.get("description"))


@dataclass
class ParcelRow:
    """One row of the parcel table."""

    name: Optional[str] = None
    parcel_id: Optional[str] = None
    address: Optional[str] = None
    county_st: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParcelRow":
        return cls(
            name=data.get("name"),
            parcel_id=data.get("parcel_id"),
            address=data.get("address"),
            county_st=data.get("county_st"),
        )


@dataclass
class DocumentRecord:
    """
    A title order ready to be rendered.

    Attributes:
        title: Order title (usually the ClickUp task name)
        date_ordered: MM/DD/YYYY date, or None/"—" to use today's date
        title_scope_items: Requested title scope entries
        er_items: Requested easements & restrictions entries
        include_property_profile: Whether a property profile is requested
        delivery_instructions: Free text, possibly multi-line
        delivery_email: Where the finished product is sent
        parcels: Parcel table rows
    """

    title: Optional[str] = None
    date_ordered: Optional[str] = None
    title_scope_items: List[ScopeItem] = field(default_factory=list)
    er_items: List[ScopeItem] = field(default_factory=list)
    include_property_profile: Union[bool, str, None] = None
    delivery_instructions: Optional[str] = None
    delivery_email: Optional[str] = None
    parcels: List[ParcelRow] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DocumentRecord":
        """
        Build a record from JSON-shaped data.

        Absent keys and null collections degrade to None / empty lists.
        """
        return cls(
            title=data.get("title"),
            date_ordered=data.get("date_ordered"),
            title_scope_items=[
                ScopeItem.from_dict(item) for item in data.get("title_scope_items") or []
            ],
            er_items=[ScopeItem.from_dict(item) for item in data.get("er_items") or []],
            include_property_profile=data.get("include_property_profile"),
            delivery_instructions=data.get("delivery_instructions"),
            delivery_email=data.get("delivery_email"),
            parcels=[ParcelRow.from_dict(row) for row in data.get("parcels") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
