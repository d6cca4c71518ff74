"""Request bodies for the order form API."""

from typing import List, Optional, Union

from pydantic import BaseModel

from titleorder.contexts.templating.order_data_structure import DocumentRecord


class ScopeItemBody(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None


class ParcelBody(BaseModel):
    name: Optional[str] = None
    parcel_id: Optional[str] = None
    address: Optional[str] = None
    county_st: Optional[str] = None


class OrderRecordBody(BaseModel):
    """
    Order record as sent by the frontend.

    Every field is optional: missing values render as "—" (or today's date
    for date_ordered) instead of failing the request.
    """

    title: Optional[str] = None
    date_ordered: Optional[str] = None
    title_scope_items: Optional[List[ScopeItemBody]] = None
    er_items: Optional[List[ScopeItemBody]] = None
    include_property_profile: Union[bool, str, None] = None
    delivery_instructions: Optional[str] = None
    delivery_email: Optional[str] = None
    parcels: Optional[List[ParcelBody]] = None

    def to_record(self) -> DocumentRecord:
        return DocumentRecord.from_dict(self.model_dump())
