"""Status aggregator — order-level status and progress from leg stages.

Both record schemas are reduced to the same stage vocabulary before they
reach this module: a fabric stage (seller → tailor) and a garment stage
(tailor → customer). Progress is decided by the first matching row below,
so a fabric-only signal never outranks a more advanced garment signal:

    garment delivered                        100
    garment out_for_delivery (or failed)      80
    garment ready_for_delivery                60
    fabric delivered_to_tailor                50
    fabric in_transit                         30
    fabric dispatched                         20
    otherwise                                 10

The table mirrors what the customer-facing tracking page shows. Extending it
to new leg types needs a product decision, not just a new row.
"""

from dataclasses import dataclass
from enum import Enum


class FabricStage(Enum):
    PENDING = "pending"
    DISPATCHED = "dispatched"
    IN_TRANSIT = "in_transit"
    DELIVERED_TO_TAILOR = "delivered_to_tailor"


class GarmentStage(Enum):
    PENDING = "pending"
    READY_FOR_DELIVERY = "ready_for_delivery"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    FAILED = "failed"


class OverallStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    FAILED = "failed"


# Forward order of each stage sequence; FAILED sits outside the sequence.
FABRIC_STAGE_ORDER = [
    FabricStage.PENDING,
    FabricStage.DISPATCHED,
    FabricStage.IN_TRANSIT,
    FabricStage.DELIVERED_TO_TAILOR,
]

GARMENT_STAGE_ORDER = [
    GarmentStage.PENDING,
    GarmentStage.READY_FOR_DELIVERY,
    GarmentStage.OUT_FOR_DELIVERY,
    GarmentStage.DELIVERED,
]

_GARMENT_PROGRESS = [
    ({GarmentStage.DELIVERED}, 100),
    ({GarmentStage.OUT_FOR_DELIVERY, GarmentStage.FAILED}, 80),
    ({GarmentStage.READY_FOR_DELIVERY}, 60),
]

_FABRIC_PROGRESS = [
    ({FabricStage.DELIVERED_TO_TAILOR}, 50),
    ({FabricStage.IN_TRANSIT}, 30),
    ({FabricStage.DISPATCHED}, 20),
]

BASELINE_PROGRESS = 10


@dataclass(frozen=True)
class ProgressSummary:
    overall_status: str
    progress_percent: int


def progress_percent(fabric: FabricStage | None, garment: GarmentStage | None) -> int:
    """Progress of an order, 10..100, from its fabric and garment stages.

    ``fabric`` is ``None`` for orders without a fabric leg; ``garment`` is
    ``None`` (treated as pending) until the garment leg exists.
    """
    for stages, percent in _GARMENT_PROGRESS:
        if garment in stages:
            return percent
    for stages, percent in _FABRIC_PROGRESS:
        if fabric in stages:
            return percent
    return BASELINE_PROGRESS


def overall_status(fabric: FabricStage | None, garment: GarmentStage | None) -> OverallStatus:
    if garment == GarmentStage.FAILED:
        return OverallStatus.FAILED
    if garment == GarmentStage.DELIVERED:
        return OverallStatus.DELIVERED

    fabric_started = fabric is not None and fabric != FabricStage.PENDING
    garment_started = garment is not None and garment != GarmentStage.PENDING
    if fabric_started or garment_started:
        return OverallStatus.IN_PROGRESS
    return OverallStatus.PENDING


def summarize(fabric: FabricStage | None, garment: GarmentStage | None) -> ProgressSummary:
    """Overall status and progress percentage for one order."""
    return ProgressSummary(
        overall_status=overall_status(fabric, garment).value,
        progress_percent=progress_percent(fabric, garment),
    )
