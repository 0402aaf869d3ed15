"""Order references as seen by the delivery context.

Orders are owned elsewhere; the delivery context only needs the booking
type, the customer and who is responsible for each leg. Identifiers arrive
in several shapes (strings, integers, ``{"_id": ...}`` documents) and are
normalized here, at the boundary, so the matcher compares plain strings.
"""

from dataclasses import dataclass

from delivery.exceptions import ValidationError
from delivery.shared.booking import BookingType


def normalize_id(value) -> str | None:
    """Canonical string form of an identifier, or ``None`` if absent."""
    if value is None:
        return None
    if isinstance(value, dict):
        return normalize_id(value.get("_id", value.get("id")))
    if isinstance(value, bool):
        raise ValidationError({"id": [f"Not an identifier: {value!r}"]})
    if isinstance(value, (str, int)):
        text = str(value).strip()
        return text or None
    return normalize_id(str(value))


@dataclass(frozen=True)
class FabricDetails:
    seller_id: str | None
    fabric_name: str | None = None


@dataclass(frozen=True)
class OrderRef:
    order_id: str
    booking_type: str
    customer_id: str | None = None
    tailor_id: str | None = None
    fabric_details: FabricDetails | None = None

    @property
    def seller_id(self) -> str | None:
        return self.fabric_details.seller_id if self.fabric_details else None

    @classmethod
    def from_payload(cls, payload: dict) -> "OrderRef":
        """Build an ``OrderRef`` from an order document of the order service."""
        order_id = normalize_id(payload.get("order_id", payload.get("_id", payload.get("id"))))
        if not order_id:
            raise ValidationError({"order_id": ["Order id is required"]})

        booking_type = payload.get("booking_type")
        if booking_type not in {b.value for b in BookingType}:
            raise ValidationError({"booking_type": [f"Unknown booking type: {booking_type}"]})

        fabric_details = None
        raw_fabric = payload.get("fabric_details")
        if raw_fabric:
            fabric_details = FabricDetails(
                seller_id=normalize_id(raw_fabric.get("seller_id", raw_fabric.get("seller"))),
                fabric_name=raw_fabric.get("fabric_name"),
            )

        return cls(
            order_id=order_id,
            booking_type=booking_type,
            customer_id=normalize_id(payload.get("customer_id")),
            tailor_id=normalize_id(payload.get("tailor_id", payload.get("tailor"))),
            fabric_details=fabric_details,
        )
