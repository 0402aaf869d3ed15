"""Application tests for legacy record maintenance commands."""

import pytest
from delivery.exceptions import ConflictError, NotFoundError, UnavailableError, ValidationError
from delivery.legacy.maintenance import (
    create_legacy_record,
    legacy_history,
    legacy_record,
    update_tailor_delivery,
    update_vendor_dispatch,
)
from delivery.legacy.record import LegacyDeliveryRecord
from protean import current_domain
from protean.adapters.repository.memory import DictDAO
from protean.exceptions import DatabaseError


class TestCreateLegacyRecord:
    def test_create(self, address):
        record = create_legacy_record("ord-lm-001", "complete", customer_id="cust-lm", delivery_address=address)
        assert record.overall_status == "pending"
        stored = current_domain.repository_for(LegacyDeliveryRecord).get("ord-lm-001")
        assert stored.delivery_address.postal_code == "560001"

    def test_duplicate_conflicts(self):
        create_legacy_record("ord-lm-002", "complete")
        with pytest.raises(ConflictError):
            create_legacy_record("ord-lm-002", "tailor")

    def test_missing_record(self):
        with pytest.raises(NotFoundError):
            legacy_record("ord-lm-missing")


class TestUpdates:
    def test_vendor_dispatch_persists_and_recomputes(self):
        create_legacy_record("ord-lm-010", "complete")
        record = update_vendor_dispatch("ord-lm-010", "in_transit", tracking_number="BD1", courier_name="BlueDart")
        assert record.vendor_dispatch.status == "in_transit"
        assert record.overall_status == "in_progress"

    def test_backward_vendor_dispatch_conflicts(self):
        create_legacy_record("ord-lm-011", "complete")
        update_vendor_dispatch("ord-lm-011", "delivered_to_tailor", tracking_number="BD1", courier_name="BlueDart")
        with pytest.raises(ConflictError):
            update_vendor_dispatch("ord-lm-011", "in_transit", tracking_number="BD1", courier_name="BlueDart")
        assert legacy_record("ord-lm-011").vendor_dispatch.status == "delivered_to_tailor"

    def test_vendor_dispatch_on_tailor_booking(self):
        create_legacy_record("ord-lm-012", "tailor")
        with pytest.raises(ValidationError):
            update_vendor_dispatch("ord-lm-012", "dispatched", tracking_number="BD1", courier_name="BlueDart")

    def test_tailor_delivery_to_delivered(self):
        create_legacy_record("ord-lm-013", "tailor")
        update_tailor_delivery("ord-lm-013", "ready_for_delivery", delivery_method="pickup")
        record = update_tailor_delivery("ord-lm-013", "delivered")
        assert record.overall_status == "delivered"

    def test_update_unknown_order(self):
        with pytest.raises(NotFoundError):
            update_tailor_delivery("ord-lm-missing", "ready_for_delivery", delivery_method="pickup")


class TestLegacyHistory:
    def _walk(self):
        create_legacy_record("ord-lm-020", "complete")
        update_vendor_dispatch("ord-lm-020", "dispatched", tracking_number="BD1", courier_name="BlueDart")
        update_vendor_dispatch("ord-lm-020", "delivered_to_tailor", tracking_number="BD1", courier_name="BlueDart")
        update_tailor_delivery("ord-lm-020", "ready_for_delivery", delivery_method="hand_delivery")

    def test_newest_first(self):
        self._walk()
        history = legacy_history("ord-lm-020")
        assert [entry.sequence for entry in history] == [4, 3, 2, 1]
        assert history[0].status == "ready_for_delivery"

    def test_filter_by_phase(self):
        self._walk()
        history = legacy_history("ord-lm-020", phase="vendor_dispatch")
        assert [entry.status for entry in history] == ["delivered_to_tailor", "dispatched"]

    def test_unknown_phase(self):
        self._walk()
        with pytest.raises(ValidationError):
            legacy_history("ord-lm-020", phase="billing")


class TestStoreOutage:
    def test_update_reports_unavailable(self, monkeypatch):
        create_legacy_record("ord-lm-090", "complete")

        def broken(*args, **kwargs):
            raise DatabaseError("connection to server was lost")

        monkeypatch.setattr(DictDAO, "_update", broken)
        with pytest.raises(UnavailableError):
            update_vendor_dispatch("ord-lm-090", "dispatched", tracking_number="BD1", courier_name="BlueDart")
        assert legacy_record("ord-lm-090").overall_status == "pending"
