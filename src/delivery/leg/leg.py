"""DeliveryLeg aggregate (CQRS) — one independently tracked shipping segment.

An order has at most one FABRIC leg (seller → tailor) and one GARMENT leg
(tailor → customer). Each leg runs the same strictly forward state machine:

State Machine:
    CREATED → DISPATCHED → DELIVERED

A garment leg may additionally be marked ready for delivery while still
CREATED; readiness is recorded on the leg but is not a separate state.
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
from delivery.leg.events import LegDelivered, LegDispatched, LegMarkedReady, LegOpened
from delivery.shared.address import DeliveryAddress


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class LegType(Enum):
    FABRIC = "FABRIC"
    GARMENT = "GARMENT"


class LegStatus(Enum):
    CREATED = "CREATED"
    DISPATCHED = "DISPATCHED"
    DELIVERED = "DELIVERED"


class DeliveryMethod(Enum):
    COURIER = "courier"
    PICKUP = "pickup"
    HAND_DELIVERY = "hand_delivery"


_VALID_TRANSITIONS = {
    LegStatus.CREATED: {LegStatus.DISPATCHED},
    LegStatus.DISPATCHED: {LegStatus.DELIVERED},
    LegStatus.DELIVERED: set(),  # terminal
}


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@delivery.entity(part_of="DeliveryLeg")
class LegHistoryEvent:
    """One entry in the leg's append-only history."""

    sequence = Integer(required=True, min_value=1)
    status = String(required=True, max_length=50)
    notes = String(max_length=500)
    occurred_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root (CQRS)
# ---------------------------------------------------------------------------
@delivery.aggregate
class DeliveryLeg:
    order_id = Identifier(required=True)
    customer_id = Identifier()
    leg_type = String(required=True, choices=LegType)
    status = String(choices=LegStatus, default=LegStatus.CREATED.value)
    courier_name = String(max_length=100)
    tracking_id = String(max_length=255)
    delivery_method = String(max_length=50, choices=DeliveryMethod)
    delivery_address = ValueObject(DeliveryAddress)
    ready_at = DateTime()
    dispatched_at = DateTime()
    delivered_at = DateTime()
    history = HasMany(LegHistoryEvent)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def open(
        cls,
        order_id: str,
        leg_type: str,
        customer_id: str | None = None,
        delivery_address: DeliveryAddress | None = None,
    ):
        """Open a leg in CREATED state for a confirmed order."""
        now = datetime.now(UTC)
        leg = cls(
            order_id=order_id,
            customer_id=customer_id,
            leg_type=leg_type,
            status=LegStatus.CREATED.value,
            delivery_address=delivery_address,
            created_at=now,
            updated_at=now,
        )
        leg._append_history(LegStatus.CREATED.value, "Leg created", now)
        leg.raise_(
            LegOpened(
                leg_id=str(leg.id),
                order_id=order_id,
                customer_id=customer_id,
                leg_type=leg_type,
                opened_at=now,
            )
        )
        return leg

    # -------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------
    @property
    def is_ready(self) -> bool:
        return self.ready_at is not None

    def _assert_can_transition(self, target_status: LegStatus) -> None:
        current = LegStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ConflictError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _append_history(self, status: str, notes: str, occurred_at: datetime) -> None:
        self.add_history(
            LegHistoryEvent(
                sequence=len(self.history or []) + 1,
                status=status,
                notes=notes,
                occurred_at=occurred_at,
            )
        )

    def _validated_delivery_method(self, delivery_method: str | None) -> str | None:
        if not delivery_method:
            return None
        if LegType(self.leg_type) != LegType.GARMENT:
            raise ValidationError({"delivery_method": ["Only garment legs carry a delivery method"]})
        if delivery_method not in {m.value for m in DeliveryMethod}:
            raise ValidationError({"delivery_method": [f"Unknown delivery method: {delivery_method}"]})
        return delivery_method

    # -------------------------------------------------------------------
    # Readiness (garment legs only)
    # -------------------------------------------------------------------
    def mark_ready(self, delivery_method: str) -> None:
        """Record that the finished garment is ready to leave the tailor."""
        if LegType(self.leg_type) != LegType.GARMENT:
            raise ValidationError({"leg_type": ["Only garment legs can be marked ready for delivery"]})
        if not delivery_method:
            raise ValidationError({"delivery_method": ["Delivery method is required"]})
        method = self._validated_delivery_method(delivery_method)

        if LegStatus(self.status) != LegStatus.CREATED:
            raise ConflictError({"status": [f"Cannot mark a {self.status} leg ready for delivery"]})
        if self.is_ready:
            raise ConflictError({"status": ["Leg is already marked ready for delivery"]})

        now = datetime.now(UTC)
        self.delivery_method = method
        self.ready_at = now
        self.updated_at = now
        self._append_history("READY_FOR_DELIVERY", f"Ready for delivery via {method}", now)
        self.raise_(
            LegMarkedReady(
                leg_id=str(self.id),
                order_id=str(self.order_id),
                delivery_method=method,
                ready_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------
    def dispatch(self, courier_name: str, tracking_id: str, delivery_method: str | None = None) -> None:
        """Hand the leg to a courier."""
        courier_name = (courier_name or "").strip()
        tracking_id = (tracking_id or "").strip()

        errors = {}
        if not courier_name:
            errors["courier_name"] = ["Courier name is required"]
        if not tracking_id:
            errors["tracking_id"] = ["Tracking id is required"]
        if errors:
            raise ValidationError(errors)
        method = self._validated_delivery_method(delivery_method)

        self._assert_can_transition(LegStatus.DISPATCHED)

        now = datetime.now(UTC)
        self.status = LegStatus.DISPATCHED.value
        self.courier_name = courier_name
        self.tracking_id = tracking_id
        if method:
            self.delivery_method = method
        self.dispatched_at = now
        self.updated_at = now
        self._append_history(LegStatus.DISPATCHED.value, f"Dispatched via {courier_name} ({tracking_id})", now)
        self.raise_(
            LegDispatched(
                leg_id=str(self.id),
                order_id=str(self.order_id),
                leg_type=self.leg_type,
                courier_name=courier_name,
                tracking_id=tracking_id,
                dispatched_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Completion
    # -------------------------------------------------------------------
    def complete(self) -> None:
        """Record that the leg reached its destination."""
        self._assert_can_transition(LegStatus.DELIVERED)
        now = datetime.now(UTC)
        self.status = LegStatus.DELIVERED.value
        self.delivered_at = now
        self.updated_at = now
        self._append_history(LegStatus.DELIVERED.value, "Delivered", now)
        self.raise_(
            LegDelivered(
                leg_id=str(self.id),
                order_id=str(self.order_id),
                leg_type=self.leg_type,
                delivered_at=now,
            )
        )
