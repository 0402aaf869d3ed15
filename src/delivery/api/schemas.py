"""Pydantic API schemas for the Delivery domain.

These are the external API contracts, separate from domain commands.
Responses are built from aggregates and tracking projections by the
``from_*`` helpers below.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class AddressPayload(BaseModel):
    recipient_name: str | None = None
    street: str
    city: str
    state: str | None = None
    postal_code: str
    country: str = "India"
    phone: str | None = None


class OpenLegsRequest(BaseModel):
    booking_type: Literal["tailor", "fabric", "complete"]
    customer_id: str | None = None
    delivery_address: AddressPayload | None = None
    leg_type: Literal["FABRIC", "GARMENT"] | None = None  # open a single leg


class DispatchLegRequest(BaseModel):
    courier_name: str
    tracking_id: str
    delivery_method: str | None = None


class MarkReadyRequest(BaseModel):
    delivery_method: str


class CreateLegacyRecordRequest(BaseModel):
    order_id: str
    booking_type: Literal["tailor", "fabric", "complete"]
    customer_id: str | None = None
    delivery_address: AddressPayload | None = None


class VendorDispatchRequest(BaseModel):
    status: str
    tracking_number: str | None = None
    courier_name: str | None = None
    estimated_delivery: datetime | None = None
    notes: str | None = None


class TailorDeliveryRequest(BaseModel):
    status: str
    delivery_method: str | None = None
    tracking_number: str | None = None
    courier_name: str | None = None
    notes: str | None = None
    failure_reason: str | None = None


class RegisterOrderRequest(BaseModel):
    """Raw order document; ids may be strings, numbers or ``{"_id": ...}``."""

    order: dict


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class HistoryEventResponse(BaseModel):
    sequence: int | None = None
    status: str
    phase: str | None = None
    notes: str | None = None
    occurred_at: datetime


class LegResponse(BaseModel):
    leg_id: str
    order_id: str
    customer_id: str | None = None
    leg_type: str
    status: str
    courier_name: str | None = None
    tracking_id: str | None = None
    delivery_method: str | None = None
    ready_at: datetime | None = None
    dispatched_at: datetime | None = None
    delivered_at: datetime | None = None
    history: list[HistoryEventResponse] = Field(default_factory=list)

    @classmethod
    def from_leg(cls, leg) -> "LegResponse":
        return cls(
            leg_id=str(leg.id),
            order_id=str(leg.order_id),
            customer_id=str(leg.customer_id) if leg.customer_id else None,
            leg_type=leg.leg_type,
            status=leg.status,
            courier_name=leg.courier_name,
            tracking_id=leg.tracking_id,
            delivery_method=leg.delivery_method,
            ready_at=leg.ready_at,
            dispatched_at=leg.dispatched_at,
            delivered_at=leg.delivered_at,
            history=[
                HistoryEventResponse(
                    sequence=entry.sequence,
                    status=entry.status,
                    phase=leg.leg_type,
                    notes=entry.notes,
                    occurred_at=entry.occurred_at,
                )
                for entry in sorted(leg.history or [], key=lambda e: e.sequence)
            ],
        )


class VendorDispatchResponse(BaseModel):
    status: str
    tracking_number: str | None = None
    courier_name: str | None = None
    estimated_delivery: datetime | None = None
    notes: str | None = None


class TailorDeliveryResponse(BaseModel):
    status: str
    delivery_method: str | None = None
    tracking_number: str | None = None
    courier_name: str | None = None
    notes: str | None = None
    failure_reason: str | None = None


class LegacyRecordResponse(BaseModel):
    order_id: str
    customer_id: str | None = None
    booking_type: str
    overall_status: str
    vendor_dispatch: VendorDispatchResponse | None = None
    tailor_delivery: TailorDeliveryResponse | None = None
    delivery_address: dict | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_record(cls, record) -> "LegacyRecordResponse":
        vendor = record.vendor_dispatch
        tailor = record.tailor_delivery
        return cls(
            order_id=str(record.order_id),
            customer_id=str(record.customer_id) if record.customer_id else None,
            booking_type=record.booking_type,
            overall_status=record.overall_status,
            vendor_dispatch=VendorDispatchResponse(
                status=vendor.status,
                tracking_number=vendor.tracking_number,
                courier_name=vendor.courier_name,
                estimated_delivery=vendor.estimated_delivery,
                notes=vendor.notes,
            )
            if vendor
            else None,
            tailor_delivery=TailorDeliveryResponse(
                status=tailor.status,
                delivery_method=tailor.delivery_method,
                tracking_number=tailor.tracking_number,
                courier_name=tailor.courier_name,
                notes=tailor.notes,
                failure_reason=tailor.failure_reason,
            )
            if tailor
            else None,
            delivery_address=record.delivery_address.to_dict() if record.delivery_address else None,
            updated_at=record.updated_at,
        )


class ProgressRowResponse(BaseModel):
    order_id: str
    source: str
    overall_status: str
    progress_percent: int
    fabric_status: str | None = None
    garment_status: str | None = None
    updated_at: datetime | None = None


class RegisteredOrderResponse(BaseModel):
    order_id: str
    booking_type: str
    tailor_id: str | None = None
    seller_id: str | None = None
