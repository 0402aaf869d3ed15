"""Legacy delivery record events."""

from protean.fields import DateTime, Identifier, String

from delivery.domain import delivery


@delivery.event(part_of="LegacyDeliveryRecord")
class LegacyDeliveryCreated:
    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier()
    booking_type = String(required=True)
    created_at = DateTime(required=True)


@delivery.event(part_of="LegacyDeliveryRecord")
class VendorDispatchUpdated:
    """The seller → tailor sub-state moved forward or had its details refreshed."""

    __version__ = 1

    order_id = Identifier(required=True)
    status = String(required=True)
    previous_status = String()
    overall_status = String(required=True)
    updated_at = DateTime(required=True)


@delivery.event(part_of="LegacyDeliveryRecord")
class TailorDeliveryUpdated:
    """The tailor → customer sub-state moved forward or had its details refreshed."""

    __version__ = 1

    order_id = Identifier(required=True)
    status = String(required=True)
    previous_status = String()
    overall_status = String(required=True)
    updated_at = DateTime(required=True)
