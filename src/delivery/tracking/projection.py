"""Tracking projection — the read-only result handed to every caller.

One pure function per record schema reduces the stored data to the same
shape. Overall status and progress are always recomputed from the leg
stages; a stored ``overall_status`` is never copied across.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime

from delivery.leg.leg import DeliveryLeg, LegStatus, LegType
from delivery.legacy.record import LegacyDeliveryRecord
from delivery.tracking.progress import FabricStage, GarmentStage, summarize


@dataclass(frozen=True)
class LegView:
    leg_type: str
    status: str
    leg_id: str | None = None
    courier_name: str | None = None
    tracking_id: str | None = None
    delivery_method: str | None = None
    estimated_delivery: datetime | None = None
    failure_reason: str | None = None
    dispatched_at: datetime | None = None
    delivered_at: datetime | None = None


@dataclass(frozen=True)
class HistoryEvent:
    status: str
    phase: str
    occurred_at: datetime
    notes: str | None = None


@dataclass(frozen=True)
class TrackingProjection:
    order_id: str
    source: str  # "legs" or "legacy"
    overall_status: str
    progress_percent: int
    fabric: LegView | None = None
    garment: LegView | None = None
    delivery_address: dict | None = None
    history: list[HistoryEvent] = field(default_factory=list)  # newest first

    available = True

    def to_dict(self) -> dict:
        return {"available": True, **asdict(self)}


@dataclass(frozen=True)
class NotAvailable:
    """No delivery record exists yet for the order. Not an error."""

    order_id: str

    available = False

    def to_dict(self) -> dict:
        return {"available": False, "order_id": self.order_id}


# ---------------------------------------------------------------------------
# Per-leg schema
# ---------------------------------------------------------------------------
_FABRIC_STAGE_FOR = {
    LegStatus.CREATED: FabricStage.PENDING,
    LegStatus.DISPATCHED: FabricStage.DISPATCHED,
    LegStatus.DELIVERED: FabricStage.DELIVERED_TO_TAILOR,
}

_GARMENT_STAGE_FOR = {
    LegStatus.CREATED: GarmentStage.PENDING,
    LegStatus.DISPATCHED: GarmentStage.OUT_FOR_DELIVERY,
    LegStatus.DELIVERED: GarmentStage.DELIVERED,
}


def fabric_stage_of(leg: DeliveryLeg | None) -> FabricStage | None:
    if leg is None:
        return None
    return _FABRIC_STAGE_FOR[LegStatus(leg.status)]


def garment_stage_of(leg: DeliveryLeg | None) -> GarmentStage:
    if leg is None:
        return GarmentStage.PENDING
    status = LegStatus(leg.status)
    if status == LegStatus.CREATED and leg.is_ready:
        return GarmentStage.READY_FOR_DELIVERY
    return _GARMENT_STAGE_FOR[status]


def _leg_view(leg: DeliveryLeg) -> LegView:
    return LegView(
        leg_id=str(leg.id),
        leg_type=leg.leg_type,
        status=leg.status,
        courier_name=leg.courier_name,
        tracking_id=leg.tracking_id,
        delivery_method=leg.delivery_method,
        dispatched_at=leg.dispatched_at,
        delivered_at=leg.delivered_at,
    )


def project_legs(order_id: str, legs: list[DeliveryLeg]) -> TrackingProjection:
    """Projection built only from leg records."""
    by_type = {leg.leg_type: leg for leg in legs}
    fabric = by_type.get(LegType.FABRIC.value)
    garment = by_type.get(LegType.GARMENT.value)
    summary = summarize(fabric_stage_of(fabric), garment_stage_of(garment))

    history = []
    for leg in legs:
        for entry in leg.history or []:
            history.append(
                (
                    entry.occurred_at,
                    entry.sequence,
                    HistoryEvent(
                        status=entry.status,
                        phase=leg.leg_type,
                        occurred_at=entry.occurred_at,
                        notes=entry.notes,
                    ),
                )
            )
    history.sort(key=lambda item: (item[0], item[1]), reverse=True)

    address_leg = garment or fabric
    address = address_leg.delivery_address if address_leg else None
    return TrackingProjection(
        order_id=str(order_id),
        source="legs",
        overall_status=summary.overall_status,
        progress_percent=summary.progress_percent,
        fabric=_leg_view(fabric) if fabric else None,
        garment=_leg_view(garment) if garment else None,
        delivery_address=address.to_dict() if address else None,
        history=[event for _, _, event in history],
    )


# ---------------------------------------------------------------------------
# Legacy combined schema
# ---------------------------------------------------------------------------
def project_legacy(record: LegacyDeliveryRecord) -> TrackingProjection:
    """Projection built only from a legacy record's embedded sub-states."""
    summary = summarize(record.fabric_stage, record.garment_stage)

    fabric = None
    if record.vendor_dispatch is not None:
        vendor = record.vendor_dispatch
        fabric = LegView(
            leg_type=LegType.FABRIC.value,
            status=vendor.status,
            courier_name=vendor.courier_name,
            tracking_id=vendor.tracking_number,
            estimated_delivery=vendor.estimated_delivery,
        )

    garment = None
    if record.tailor_delivery is not None:
        tailor = record.tailor_delivery
        garment = LegView(
            leg_type=LegType.GARMENT.value,
            status=tailor.status,
            courier_name=tailor.courier_name,
            tracking_id=tailor.tracking_number,
            delivery_method=tailor.delivery_method,
            failure_reason=tailor.failure_reason,
        )

    entries = sorted(record.status_history or [], key=lambda entry: entry.sequence, reverse=True)
    return TrackingProjection(
        order_id=str(record.order_id),
        source="legacy",
        overall_status=summary.overall_status,
        progress_percent=summary.progress_percent,
        fabric=fabric,
        garment=garment,
        delivery_address=record.delivery_address.to_dict() if record.delivery_address else None,
        history=[
            HistoryEvent(
                status=entry.status,
                phase=entry.phase,
                occurred_at=entry.occurred_at,
                notes=entry.notes,
            )
            for entry in entries
        ],
    )
