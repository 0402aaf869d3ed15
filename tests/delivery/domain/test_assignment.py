"""Tests for order normalization and the assignment matcher."""

import pytest
from delivery.assignment.matcher import orders_owned_by, owns
from delivery.assignment.orders import OrderRef, normalize_id
from delivery.exceptions import ValidationError


def _order(order_id="ord-1", booking_type="complete", seller="seller-1", tailor="tailor-1"):
    payload = {"_id": order_id, "booking_type": booking_type, "customer_id": "cust-1", "tailor_id": tailor}
    if seller is not None:
        payload["fabric_details"] = {"seller_id": seller, "fabric_name": "Raw silk"}
    return OrderRef.from_payload(payload)


class TestNormalizeId:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("abc", "abc"),
            ("  abc ", "abc"),
            (42, "42"),
            ({"_id": "abc"}, "abc"),
            ({"id": 7}, "7"),
            ({"_id": {"_id": "nested"}}, "nested"),
            (None, None),
            ("", None),
        ],
    )
    def test_shapes(self, raw, expected):
        assert normalize_id(raw) == expected

    def test_booleans_are_not_identifiers(self):
        with pytest.raises(ValidationError):
            normalize_id(True)


class TestOrderRef:
    def test_from_payload(self):
        order = OrderRef.from_payload(
            {
                "id": 1001,
                "booking_type": "complete",
                "customer_id": {"_id": "cust-9"},
                "tailor": {"_id": "tailor-9"},
                "fabric_details": {"seller": 55},
            }
        )
        assert order.order_id == "1001"
        assert order.customer_id == "cust-9"
        assert order.tailor_id == "tailor-9"
        assert order.seller_id == "55"

    def test_missing_order_id(self):
        with pytest.raises(ValidationError):
            OrderRef.from_payload({"booking_type": "tailor"})

    def test_unknown_booking_type(self):
        with pytest.raises(ValidationError):
            OrderRef.from_payload({"_id": "ord-x", "booking_type": "rental"})

    def test_order_without_fabric_details(self):
        order = _order(seller=None)
        assert order.fabric_details is None
        assert order.seller_id is None


class TestFabricOwnership:
    def test_seller_owns_fabric_leg(self):
        assert owns("seller-1", "FABRIC", _order())

    def test_other_seller_does_not(self):
        assert not owns("seller-2", "FABRIC", _order())

    def test_order_without_fabric_details_is_excluded(self):
        assert not owns("seller-1", "FABRIC", _order(seller=None))

    @pytest.mark.parametrize("actor_id", ["seller-1", "tailor-1", "cust-1", "ord-1", ""])
    def test_tailor_booking_never_matches_fabric(self, actor_id):
        order = _order(booking_type="tailor", seller="seller-1")
        assert orders_owned_by(actor_id, "FABRIC", [order]) == []

    def test_actor_id_is_normalized_at_the_boundary(self):
        order = _order(seller="101")
        assert orders_owned_by(101, "FABRIC", [order]) == [order]
        assert orders_owned_by({"_id": "101"}, "FABRIC", [order]) == [order]


class TestGarmentOwnership:
    def test_assigned_tailor_owns_garment_leg(self):
        assert owns("tailor-1", "GARMENT", _order())

    def test_seller_does_not_own_garment_leg(self):
        assert not owns("seller-1", "GARMENT", _order())

    def test_unassigned_order_is_excluded(self):
        assert not owns("tailor-1", "GARMENT", _order(tailor=None))

    def test_filters_pool(self):
        mine = _order(order_id="ord-a", tailor="tailor-1")
        theirs = _order(order_id="ord-b", tailor="tailor-2")
        assert orders_owned_by("tailor-1", "GARMENT", [mine, theirs]) == [mine]
