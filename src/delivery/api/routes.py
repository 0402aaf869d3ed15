"""FastAPI routes for the Delivery domain."""

import os

from fastapi import APIRouter, HTTPException
from fastapi.encoders import jsonable_encoder

from delivery.api.schemas import (
    CreateLegacyRecordRequest,
    DispatchLegRequest,
    HistoryEventResponse,
    LegacyRecordResponse,
    LegResponse,
    MarkReadyRequest,
    OpenLegsRequest,
    ProgressRowResponse,
    RegisteredOrderResponse,
    RegisterOrderRequest,
    TailorDeliveryRequest,
    VendorDispatchRequest,
)
from delivery.leg.completion import complete_leg
from delivery.leg.dispatch import dispatch_leg, mark_leg_ready
from delivery.leg.opening import open_leg, open_legs
from delivery.leg.queries import legs_for_actor, legs_for_order
from delivery.legacy.maintenance import (
    create_legacy_record,
    legacy_history,
    legacy_record,
    update_tailor_delivery,
    update_vendor_dispatch,
)
from delivery.order_pool import get_order_pool
from delivery.order_pool.fake_adapter import FakeOrderPool
from delivery.projections.order_progress import progress_board
from delivery.tracking.reconciliation import get_tracking, tracking_for_customer

# ---------------------------------------------------------------------------
# Delivery Router
# ---------------------------------------------------------------------------
delivery_router = APIRouter(prefix="/deliveries", tags=["deliveries"])


# ---------------------------------------------------------------------------
# Tracking
# ---------------------------------------------------------------------------
@delivery_router.get("/tracking/{order_id}")
async def get_order_tracking(order_id: str) -> dict:
    """Tracking view for an order, or ``{"available": false}`` when none exists yet."""
    return jsonable_encoder(get_tracking(order_id).to_dict())


@delivery_router.get("/customers/{customer_id}")
async def get_customer_tracking(customer_id: str) -> list[dict]:
    return [jsonable_encoder(projection.to_dict()) for projection in tracking_for_customer(customer_id)]


@delivery_router.get("/progress", response_model=list[ProgressRowResponse])
async def get_progress_board(overall_status: str | None = None) -> list[ProgressRowResponse]:
    """Admin board of order progress, optionally filtered by overall status."""
    return [
        ProgressRowResponse(
            order_id=str(row.order_id),
            source=row.source,
            overall_status=row.overall_status,
            progress_percent=row.progress_percent,
            fabric_status=row.fabric_status,
            garment_status=row.garment_status,
            updated_at=row.updated_at,
        )
        for row in progress_board(overall_status)
    ]


# ---------------------------------------------------------------------------
# Legs
# ---------------------------------------------------------------------------
@delivery_router.get("/orders/{order_id}/legs", response_model=list[LegResponse])
async def get_order_legs(order_id: str, leg_type: str | None = None) -> list[LegResponse]:
    return [LegResponse.from_leg(leg) for leg in legs_for_order(order_id, leg_type)]


@delivery_router.post("/orders/{order_id}/legs", status_code=201, response_model=list[LegResponse])
async def post_order_legs(order_id: str, body: OpenLegsRequest) -> list[LegResponse]:
    """Open delivery legs for a confirmed order."""
    address = body.delivery_address.model_dump() if body.delivery_address else None
    if body.leg_type:
        legs = [
            open_leg(
                order_id=order_id,
                booking_type=body.booking_type,
                leg_type=body.leg_type,
                customer_id=body.customer_id,
                delivery_address=address,
            )
        ]
    else:
        legs = open_legs(
            order_id=order_id,
            booking_type=body.booking_type,
            customer_id=body.customer_id,
            delivery_address=address,
        )
    return [LegResponse.from_leg(leg) for leg in legs]


@delivery_router.get("/actors/{actor_id}/legs", response_model=list[LegResponse])
async def get_actor_legs(actor_id: str, leg_type: str) -> list[LegResponse]:
    """Legs a seller (FABRIC) or tailor (GARMENT) is responsible for."""
    return [LegResponse.from_leg(leg) for leg in legs_for_actor(actor_id, leg_type)]


@delivery_router.post("/legs/{leg_id}/dispatch", response_model=LegResponse)
async def post_dispatch(leg_id: str, body: DispatchLegRequest) -> LegResponse:
    leg = dispatch_leg(
        leg_id,
        courier_name=body.courier_name,
        tracking_id=body.tracking_id,
        delivery_method=body.delivery_method,
    )
    return LegResponse.from_leg(leg)


@delivery_router.post("/legs/{leg_id}/ready", response_model=LegResponse)
async def post_ready(leg_id: str, body: MarkReadyRequest) -> LegResponse:
    return LegResponse.from_leg(mark_leg_ready(leg_id, body.delivery_method))


@delivery_router.post("/legs/{leg_id}/complete", response_model=LegResponse)
async def post_complete(leg_id: str) -> LegResponse:
    return LegResponse.from_leg(complete_leg(leg_id))


# ---------------------------------------------------------------------------
# Legacy records
# ---------------------------------------------------------------------------
@delivery_router.post("/legacy", status_code=201, response_model=LegacyRecordResponse)
async def post_legacy_record(body: CreateLegacyRecordRequest) -> LegacyRecordResponse:
    record = create_legacy_record(
        order_id=body.order_id,
        booking_type=body.booking_type,
        customer_id=body.customer_id,
        delivery_address=body.delivery_address.model_dump() if body.delivery_address else None,
    )
    return LegacyRecordResponse.from_record(record)


@delivery_router.get("/legacy/{order_id}", response_model=LegacyRecordResponse)
async def get_legacy_record(order_id: str) -> LegacyRecordResponse:
    return LegacyRecordResponse.from_record(legacy_record(order_id))


@delivery_router.put("/legacy/{order_id}/vendor-dispatch", response_model=LegacyRecordResponse)
async def put_vendor_dispatch(order_id: str, body: VendorDispatchRequest) -> LegacyRecordResponse:
    record = update_vendor_dispatch(order_id, **body.model_dump())
    return LegacyRecordResponse.from_record(record)


@delivery_router.put("/legacy/{order_id}/tailor-delivery", response_model=LegacyRecordResponse)
async def put_tailor_delivery(order_id: str, body: TailorDeliveryRequest) -> LegacyRecordResponse:
    record = update_tailor_delivery(order_id, **body.model_dump())
    return LegacyRecordResponse.from_record(record)


@delivery_router.get("/legacy/{order_id}/history", response_model=list[HistoryEventResponse])
async def get_legacy_history(order_id: str, phase: str | None = None) -> list[HistoryEventResponse]:
    return [
        HistoryEventResponse(
            sequence=entry.sequence,
            status=entry.status,
            phase=entry.phase,
            notes=entry.notes,
            occurred_at=entry.occurred_at,
        )
        for entry in legacy_history(order_id, phase)
    ]


# ---------------------------------------------------------------------------
# Order pool (non-production only)
# ---------------------------------------------------------------------------
@delivery_router.post("/order-pool", status_code=201, response_model=RegisteredOrderResponse)
async def register_order(body: RegisterOrderRequest) -> RegisteredOrderResponse:
    """Register an order with the FakeOrderPool (non-production only)."""
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Order pool configuration not available in production")

    pool = get_order_pool()
    if not isinstance(pool, FakeOrderPool):
        raise HTTPException(status_code=400, detail="Order registration only available for FakeOrderPool")

    order = pool.register(body.order)
    return RegisteredOrderResponse(
        order_id=order.order_id,
        booking_type=order.booking_type,
        tailor_id=order.tailor_id,
        seller_id=order.seller_id,
    )
