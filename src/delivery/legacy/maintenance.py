"""Legacy record maintenance — commands, handler and history query.

Pre-existing orders keep their combined delivery record; sellers and tailors
advance its sub-states through these commands until the order is migrated.
"""

import json
from datetime import datetime

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, String, Text
from protean.utils.globals import current_domain

from delivery.domain import delivery
from delivery.exceptions import ConflictError, ValidationError
from delivery.legacy.record import HistoryPhase, LegacyDeliveryRecord
from delivery.shared.address import DeliveryAddress
from delivery.shared.booking import BookingType
from delivery.shared.locking import record_lock
from delivery.shared.store import store_errors

logger = structlog.get_logger(__name__)


@delivery.command(part_of="LegacyDeliveryRecord")
class CreateLegacyRecord:
    order_id = Identifier(required=True)
    booking_type = String(required=True, choices=BookingType)
    customer_id = Identifier()
    delivery_address = Text()  # JSON address dict


@delivery.command(part_of="LegacyDeliveryRecord")
class UpdateVendorDispatch:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    tracking_number = String(max_length=255)
    courier_name = String(max_length=100)
    estimated_delivery = DateTime()
    notes = String(max_length=500)


@delivery.command(part_of="LegacyDeliveryRecord")
class UpdateTailorDelivery:
    order_id = Identifier(required=True)
    status = String(required=True, max_length=50)
    delivery_method = String(max_length=50)
    tracking_number = String(max_length=255)
    courier_name = String(max_length=100)
    notes = String(max_length=500)
    failure_reason = String(max_length=500)


@delivery.command_handler(part_of=LegacyDeliveryRecord)
class LegacyRecordHandler:
    @handle(CreateLegacyRecord)
    def create_record(self, command):
        repo = current_domain.repository_for(LegacyDeliveryRecord)
        if repo.find(command.order_id) is not None:
            raise ConflictError({"order_id": [f"Order {command.order_id} already has a delivery record"]})

        address = None
        if command.delivery_address:
            address = DeliveryAddress(**json.loads(command.delivery_address))
        record = LegacyDeliveryRecord.create(
            order_id=command.order_id,
            booking_type=command.booking_type,
            customer_id=command.customer_id,
            delivery_address=address,
        )
        repo.add(record)

    @handle(UpdateVendorDispatch)
    def update_vendor_dispatch(self, command):
        repo = current_domain.repository_for(LegacyDeliveryRecord)
        record = repo.fetch(command.order_id)
        record.update_vendor_dispatch(
            status=command.status,
            tracking_number=command.tracking_number,
            courier_name=command.courier_name,
            estimated_delivery=command.estimated_delivery,
            notes=command.notes,
        )
        repo.add(record)

    @handle(UpdateTailorDelivery)
    def update_tailor_delivery(self, command):
        repo = current_domain.repository_for(LegacyDeliveryRecord)
        record = repo.fetch(command.order_id)
        record.update_tailor_delivery(
            status=command.status,
            delivery_method=command.delivery_method,
            tracking_number=command.tracking_number,
            courier_name=command.courier_name,
            notes=command.notes,
            failure_reason=command.failure_reason,
        )
        repo.add(record)


def _process(order_id: str, command, action: str) -> LegacyDeliveryRecord:
    try:
        with record_lock("legacy", order_id), store_errors("Legacy delivery"):
            current_domain.process(command, asynchronous=False)
    except (ValidationError, ConflictError) as exc:
        logger.warning("Legacy record update rejected", order_id=order_id, action=action, error=str(exc))
        raise

    record = current_domain.repository_for(LegacyDeliveryRecord).fetch(order_id)
    logger.info(
        "Legacy record updated",
        order_id=order_id,
        action=action,
        status=record.overall_status,
    )
    return record


def create_legacy_record(
    order_id: str,
    booking_type: str,
    customer_id: str | None = None,
    delivery_address: dict | None = None,
) -> LegacyDeliveryRecord:
    command = CreateLegacyRecord(
        order_id=order_id,
        booking_type=booking_type,
        customer_id=customer_id,
        delivery_address=json.dumps(delivery_address) if delivery_address else None,
    )
    return _process(order_id, command, "create")


def update_vendor_dispatch(
    order_id: str,
    status: str,
    tracking_number: str | None = None,
    courier_name: str | None = None,
    estimated_delivery: datetime | None = None,
    notes: str | None = None,
) -> LegacyDeliveryRecord:
    command = UpdateVendorDispatch(
        order_id=order_id,
        status=status,
        tracking_number=tracking_number,
        courier_name=courier_name,
        estimated_delivery=estimated_delivery,
        notes=notes,
    )
    return _process(order_id, command, "vendor_dispatch")


def update_tailor_delivery(
    order_id: str,
    status: str,
    delivery_method: str | None = None,
    tracking_number: str | None = None,
    courier_name: str | None = None,
    notes: str | None = None,
    failure_reason: str | None = None,
) -> LegacyDeliveryRecord:
    command = UpdateTailorDelivery(
        order_id=order_id,
        status=status,
        delivery_method=delivery_method,
        tracking_number=tracking_number,
        courier_name=courier_name,
        notes=notes,
        failure_reason=failure_reason,
    )
    return _process(order_id, command, "tailor_delivery")


def legacy_record(order_id: str) -> LegacyDeliveryRecord:
    return current_domain.repository_for(LegacyDeliveryRecord).fetch(order_id)


def legacy_history(order_id: str, phase: str | None = None) -> list:
    """History entries of a legacy record, newest first."""
    if phase is not None and phase not in {p.value for p in HistoryPhase}:
        raise ValidationError({"phase": [f"Unknown history phase: {phase}"]})

    record = legacy_record(order_id)
    entries = [entry for entry in record.status_history or [] if phase is None or entry.phase == phase]
    return sorted(entries, key=lambda entry: entry.sequence, reverse=True)
