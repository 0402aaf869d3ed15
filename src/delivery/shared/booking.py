"""Booking types and the legs each one needs."""

from enum import Enum


class BookingType(Enum):
    TAILOR = "tailor"  # customer supplies fabric; tailoring only
    FABRIC = "fabric"  # fabric bought from a seller, sent to a tailor
    COMPLETE = "complete"  # fabric purchase plus tailoring


def has_fabric_leg(booking_type: str) -> bool:
    return BookingType(booking_type) != BookingType.TAILOR


def initial_leg_types(booking_type: str) -> list[str]:
    """Leg types opened when an order of ``booking_type`` is confirmed.

    Fabric-only bookings get their garment leg later, once the tailor takes
    the job, so only the fabric leg is opened up front.
    """
    booking = BookingType(booking_type)
    if booking == BookingType.TAILOR:
        return ["GARMENT"]
    if booking == BookingType.FABRIC:
        return ["FABRIC"]
    return ["FABRIC", "GARMENT"]
