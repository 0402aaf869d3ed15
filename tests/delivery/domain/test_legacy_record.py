"""Tests for the LegacyDeliveryRecord aggregate."""

import pytest
from delivery.exceptions import ConflictError, ValidationError
from delivery.legacy.events import LegacyDeliveryCreated, TailorDeliveryUpdated, VendorDispatchUpdated
from delivery.legacy.record import LegacyDeliveryRecord


def _record(booking_type="complete"):
    return LegacyDeliveryRecord.create(order_id="ord-lg-001", booking_type=booking_type, customer_id="cust-lg")


def _ship_fabric(record, status="dispatched"):
    record.update_vendor_dispatch(status, tracking_number="BD123", courier_name="BlueDart")


class TestCreate:
    def test_sub_states_start_pending(self):
        record = _record()
        assert record.vendor_dispatch.status == "pending"
        assert record.tailor_delivery.status == "pending"
        assert record.overall_status == "pending"

    def test_tailor_booking_has_no_vendor_dispatch(self):
        record = _record("tailor")
        assert record.vendor_dispatch is None
        assert record.fabric_stage is None

    def test_create_writes_one_history_entry(self):
        record = _record()
        assert len(record.status_history) == 1
        assert record.status_history[0].sequence == 1

    def test_create_raises_event(self):
        record = _record()
        assert isinstance(record._events[0], LegacyDeliveryCreated)


class TestVendorDispatch:
    def test_forward_move_updates_status(self):
        record = _record()
        _ship_fabric(record)
        assert record.vendor_dispatch.status == "dispatched"
        assert record.vendor_dispatch.courier_name == "BlueDart"
        assert record.overall_status == "in_progress"

    def test_skipping_ahead_is_allowed(self):
        record = _record()
        _ship_fabric(record, "delivered_to_tailor")
        assert record.vendor_dispatch.status == "delivered_to_tailor"

    def test_backward_move_conflicts(self):
        record = _record()
        _ship_fabric(record, "in_transit")
        with pytest.raises(ConflictError):
            _ship_fabric(record, "dispatched")
        assert record.vendor_dispatch.status == "in_transit"

    def test_same_status_refreshes_details_without_history(self):
        record = _record()
        _ship_fabric(record)
        history_length = len(record.status_history)
        record.update_vendor_dispatch("dispatched", tracking_number="BD999", courier_name="BlueDart", notes="relabelled")
        assert record.vendor_dispatch.tracking_number == "BD999"
        assert len(record.status_history) == history_length

    def test_leaving_pending_requires_courier_details(self):
        record = _record()
        with pytest.raises(ValidationError) as exc_info:
            record.update_vendor_dispatch("dispatched")
        assert "courier_name" in exc_info.value.messages
        assert "tracking_number" in exc_info.value.messages

    def test_unknown_status_is_rejected(self):
        record = _record()
        with pytest.raises(ValidationError):
            record.update_vendor_dispatch("lost", tracking_number="X", courier_name="Y")

    def test_not_allowed_on_tailor_booking(self):
        record = _record("tailor")
        with pytest.raises(ValidationError):
            _ship_fabric(record)

    def test_history_records_phase(self):
        record = _record()
        _ship_fabric(record)
        entry = record.status_history[-1]
        assert entry.phase == "vendor_dispatch"
        assert entry.status == "dispatched"
        assert entry.sequence == 2

    def test_raises_event(self):
        record = _record()
        record._events.clear()
        _ship_fabric(record)
        event = record._events[0]
        assert isinstance(event, VendorDispatchUpdated)
        assert event.previous_status == "pending"
        assert event.overall_status == "in_progress"


class TestTailorDelivery:
    def test_ready_for_delivery(self):
        record = _record()
        record.update_tailor_delivery("ready_for_delivery", delivery_method="pickup")
        assert record.tailor_delivery.status == "ready_for_delivery"
        assert record.tailor_delivery.delivery_method == "pickup"

    def test_out_for_delivery_by_courier_requires_details(self):
        record = _record()
        with pytest.raises(ValidationError):
            record.update_tailor_delivery("out_for_delivery", delivery_method="courier")

    def test_out_for_delivery_by_hand_needs_no_courier(self):
        record = _record()
        record.update_tailor_delivery("out_for_delivery", delivery_method="hand_delivery")
        assert record.tailor_delivery.status == "out_for_delivery"

    def test_delivered_sets_overall_delivered(self):
        record = _record()
        record.update_tailor_delivery("delivered", delivery_method="pickup")
        assert record.overall_status == "delivered"

    def test_backward_move_conflicts(self):
        record = _record()
        record.update_tailor_delivery("delivered", delivery_method="pickup")
        with pytest.raises(ConflictError):
            record.update_tailor_delivery("ready_for_delivery")

    def test_failed_requires_out_for_delivery(self):
        record = _record()
        with pytest.raises(ConflictError):
            record.update_tailor_delivery("failed", failure_reason="Customer not home")

    def test_failed_requires_reason(self):
        record = _record()
        record.update_tailor_delivery("out_for_delivery", delivery_method="hand_delivery")
        with pytest.raises(ValidationError) as exc_info:
            record.update_tailor_delivery("failed")
        assert "failure_reason" in exc_info.value.messages

    def test_failed_is_terminal(self):
        record = _record()
        record.update_tailor_delivery("out_for_delivery", delivery_method="hand_delivery")
        record.update_tailor_delivery("failed", failure_reason="Address not found")
        assert record.overall_status == "failed"
        with pytest.raises(ConflictError):
            record.update_tailor_delivery("delivered")

    def test_courier_details_carry_forward(self):
        record = _record()
        record.update_tailor_delivery(
            "out_for_delivery", delivery_method="courier", courier_name="Delhivery", tracking_number="DL1"
        )
        record.update_tailor_delivery("delivered")
        assert record.tailor_delivery.courier_name == "Delhivery"
        assert record.tailor_delivery.delivery_method == "courier"

    def test_raises_event(self):
        record = _record()
        record._events.clear()
        record.update_tailor_delivery("ready_for_delivery", delivery_method="pickup")
        assert isinstance(record._events[0], TailorDeliveryUpdated)

    def test_history_sequence_is_monotonic(self):
        record = _record()
        _ship_fabric(record)
        record.update_tailor_delivery("ready_for_delivery", delivery_method="pickup")
        record.update_tailor_delivery("delivered")
        assert [entry.sequence for entry in record.status_history] == [1, 2, 3, 4]
