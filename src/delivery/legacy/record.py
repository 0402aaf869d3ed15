"""LegacyDeliveryRecord aggregate — the combined per-order delivery schema.

Orders confirmed before per-leg records existed carry a single record with
two embedded sub-states:

    vendor_dispatch:  pending → dispatched → in_transit → delivered_to_tailor
    tailor_delivery:  pending → ready_for_delivery → out_for_delivery → delivered
                                                         └──→ failed

Both sub-states only move forward (skipping ahead is allowed). The stored
``overall_status`` is recomputed from the sub-states after every change and
is never accepted from callers.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import (
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    ValueObject,
)

from delivery.domain import delivery
from delivery.exceptions import ConflictError, ValidationError
from delivery.leg.leg import DeliveryMethod
from delivery.legacy.events import (
    LegacyDeliveryCreated,
    TailorDeliveryUpdated,
    VendorDispatchUpdated,
)
from delivery.shared.address import DeliveryAddress
from delivery.shared.booking import BookingType, has_fabric_leg
from delivery.tracking.progress import (
    FABRIC_STAGE_ORDER,
    GARMENT_STAGE_ORDER,
    FabricStage,
    GarmentStage,
    OverallStatus,
    overall_status,
)


class HistoryPhase(Enum):
    VENDOR_DISPATCH = "vendor_dispatch"
    TAILOR_DELIVERY = "tailor_delivery"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@delivery.value_object(part_of="LegacyDeliveryRecord")
class VendorDispatch:
    status = String(choices=FabricStage, default=FabricStage.PENDING.value)
    tracking_number = String(max_length=255)
    courier_name = String(max_length=100)
    estimated_delivery = DateTime()
    notes = String(max_length=500)


@delivery.value_object(part_of="LegacyDeliveryRecord")
class TailorDelivery:
    status = String(choices=GarmentStage, default=GarmentStage.PENDING.value)
    delivery_method = String(max_length=50, choices=DeliveryMethod)
    tracking_number = String(max_length=255)
    courier_name = String(max_length=100)
    notes = String(max_length=500)
    failure_reason = String(max_length=500)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@delivery.entity(part_of="LegacyDeliveryRecord")
class StatusHistoryEntry:
    """Append-only; stored chronologically, displayed newest first."""

    sequence = Integer(required=True, min_value=1)
    status = String(required=True, max_length=50)
    phase = String(required=True, choices=HistoryPhase)
    notes = String(max_length=500)
    occurred_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@delivery.aggregate
class LegacyDeliveryRecord:
    order_id = Identifier(identifier=True)
    customer_id = Identifier()
    booking_type = String(required=True, choices=BookingType)
    delivery_address = ValueObject(DeliveryAddress)
    vendor_dispatch = ValueObject(VendorDispatch)  # absent for tailor bookings
    tailor_delivery = ValueObject(TailorDelivery)
    overall_status = String(choices=OverallStatus, default=OverallStatus.PENDING.value)
    status_history = HasMany(StatusHistoryEntry)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(
        cls,
        order_id: str,
        booking_type: str,
        customer_id: str | None = None,
        delivery_address: DeliveryAddress | None = None,
    ):
        now = datetime.now(UTC)
        record = cls(
            order_id=order_id,
            customer_id=customer_id,
            booking_type=booking_type,
            delivery_address=delivery_address,
            vendor_dispatch=VendorDispatch() if has_fabric_leg(booking_type) else None,
            tailor_delivery=TailorDelivery(),
            created_at=now,
            updated_at=now,
        )
        record._refresh_overall_status()
        record._append_history(
            GarmentStage.PENDING.value,
            HistoryPhase.TAILOR_DELIVERY.value,
            "Delivery record created",
            now,
        )
        record.raise_(
            LegacyDeliveryCreated(
                order_id=order_id,
                customer_id=customer_id,
                booking_type=booking_type,
                created_at=now,
            )
        )
        return record

    # -------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------
    @property
    def fabric_stage(self) -> FabricStage | None:
        if self.vendor_dispatch is None:
            return None
        return FabricStage(self.vendor_dispatch.status)

    @property
    def garment_stage(self) -> GarmentStage:
        if self.tailor_delivery is None:
            return GarmentStage.PENDING
        return GarmentStage(self.tailor_delivery.status)

    def _refresh_overall_status(self) -> None:
        self.overall_status = overall_status(self.fabric_stage, self.garment_stage).value

    def _append_history(self, status: str, phase: str, notes: str | None, occurred_at: datetime) -> None:
        self.add_status_history(
            StatusHistoryEntry(
                sequence=len(self.status_history or []) + 1,
                status=status,
                phase=phase,
                notes=notes,
                occurred_at=occurred_at,
            )
        )

    # -------------------------------------------------------------------
    # Vendor dispatch (seller → tailor)
    # -------------------------------------------------------------------
    def update_vendor_dispatch(
        self,
        status: str,
        tracking_number: str | None = None,
        courier_name: str | None = None,
        estimated_delivery: datetime | None = None,
        notes: str | None = None,
    ) -> None:
        if not has_fabric_leg(self.booking_type):
            raise ValidationError({"booking_type": ["Tailor bookings have no vendor dispatch"]})
        try:
            target = FabricStage(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown vendor dispatch status: {status}"]}) from None

        tracking_number = (tracking_number or "").strip() or None
        courier_name = (courier_name or "").strip() or None
        if target != FabricStage.PENDING:
            errors = {}
            if not courier_name:
                errors["courier_name"] = ["Courier name is required once the fabric leaves the seller"]
            if not tracking_number:
                errors["tracking_number"] = ["Tracking number is required once the fabric leaves the seller"]
            if errors:
                raise ValidationError(errors)

        current = self.fabric_stage
        if FABRIC_STAGE_ORDER.index(target) < FABRIC_STAGE_ORDER.index(current):
            raise ConflictError({"status": [f"Cannot move vendor dispatch from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        self.vendor_dispatch = VendorDispatch(
            status=target.value,
            tracking_number=tracking_number,
            courier_name=courier_name,
            estimated_delivery=estimated_delivery,
            notes=notes,
        )
        if target != current:
            self._append_history(target.value, HistoryPhase.VENDOR_DISPATCH.value, notes, now)
        self._refresh_overall_status()
        self.updated_at = now
        self.raise_(
            VendorDispatchUpdated(
                order_id=str(self.order_id),
                status=target.value,
                previous_status=current.value,
                overall_status=self.overall_status,
                updated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Tailor delivery (tailor → customer)
    # -------------------------------------------------------------------
    def update_tailor_delivery(
        self,
        status: str,
        delivery_method: str | None = None,
        tracking_number: str | None = None,
        courier_name: str | None = None,
        notes: str | None = None,
        failure_reason: str | None = None,
    ) -> None:
        try:
            target = GarmentStage(status)
        except ValueError:
            raise ValidationError({"status": [f"Unknown tailor delivery status: {status}"]}) from None
        if delivery_method and delivery_method not in {m.value for m in DeliveryMethod}:
            raise ValidationError({"delivery_method": [f"Unknown delivery method: {delivery_method}"]})

        current = self.garment_stage
        previous = self.tailor_delivery or TailorDelivery()
        delivery_method = delivery_method or previous.delivery_method
        tracking_number = (tracking_number or "").strip() or None
        courier_name = (courier_name or "").strip() or None
        failure_reason = (failure_reason or "").strip() or None

        if current == GarmentStage.FAILED:
            raise ConflictError({"status": ["Tailor delivery has already failed"]})
        if target == GarmentStage.FAILED:
            if current != GarmentStage.OUT_FOR_DELIVERY:
                raise ConflictError({"status": [f"Cannot fail a delivery that is {current.value}"]})
            if not failure_reason:
                raise ValidationError({"failure_reason": ["Failure reason is required"]})
        elif GARMENT_STAGE_ORDER.index(target) < GARMENT_STAGE_ORDER.index(current):
            raise ConflictError({"status": [f"Cannot move tailor delivery from {current.value} to {target.value}"]})

        if target == GarmentStage.OUT_FOR_DELIVERY and delivery_method == DeliveryMethod.COURIER.value:
            errors = {}
            if not courier_name:
                errors["courier_name"] = ["Courier name is required for courier delivery"]
            if not tracking_number:
                errors["tracking_number"] = ["Tracking number is required for courier delivery"]
            if errors:
                raise ValidationError(errors)

        now = datetime.now(UTC)
        self.tailor_delivery = TailorDelivery(
            status=target.value,
            delivery_method=delivery_method,
            tracking_number=tracking_number or previous.tracking_number,
            courier_name=courier_name or previous.courier_name,
            notes=notes,
            failure_reason=failure_reason,
        )
        if target != current:
            self._append_history(target.value, HistoryPhase.TAILOR_DELIVERY.value, notes or failure_reason, now)
        self._refresh_overall_status()
        self.updated_at = now
        self.raise_(
            TailorDeliveryUpdated(
                order_id=str(self.order_id),
                status=target.value,
                previous_status=current.value,
                overall_status=self.overall_status,
                updated_at=now,
            )
        )
