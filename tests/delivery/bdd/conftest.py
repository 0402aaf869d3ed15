"""Shared BDD fixtures and step definitions for the Delivery domain."""

import pytest
from delivery.exceptions import ConflictError
from delivery.leg.completion import complete_leg
from delivery.leg.dispatch import dispatch_leg
from delivery.leg.leg import DeliveryLeg
from delivery.leg.opening import open_legs
from delivery.legacy.maintenance import create_legacy_record, update_tailor_delivery, update_vendor_dispatch
from delivery.tracking.reconciliation import get_tracking
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def order():
    """Container for the order id under test and its legs."""
    return {"order_id": None, "legs": {}}


@pytest.fixture()
def tracking():
    return {"result": None}


def _leg(order, leg_type) -> DeliveryLeg:
    return current_domain.repository_for(DeliveryLeg).get(order["legs"][leg_type])


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a confirmed "{booking_type}" order "{order_id}"'))
def confirmed_order(order, booking_type, order_id):
    order["order_id"] = order_id
    order["legs"] = {leg.leg_type: str(leg.id) for leg in open_legs(order_id, booking_type, customer_id="cust-bdd")}


@given("the FABRIC leg was delivered to the tailor")
def fabric_delivered(order):
    leg_id = order["legs"]["FABRIC"]
    dispatch_leg(leg_id, "BlueDart", "BD123")
    complete_leg(leg_id)


@given(
    parsers.cfparse('the GARMENT leg was dispatched with courier "{courier}" and tracking id "{tracking_id}"')
)
def garment_dispatched(order, courier, tracking_id):
    dispatch_leg(order["legs"]["GARMENT"], courier, tracking_id)


@given(parsers.cfparse('a legacy "{booking_type}" record for order "{order_id}"'))
def legacy_record(order, booking_type, order_id):
    order["order_id"] = order_id
    create_legacy_record(order_id, booking_type, customer_id="cust-bdd")


@given(
    parsers.cfparse(
        'the legacy vendor dispatch is "{status}" with courier "{courier}" and tracking number "{tracking_number}"'
    )
)
def legacy_vendor_dispatch(order, status, courier, tracking_number):
    update_vendor_dispatch(order["order_id"], status, tracking_number=tracking_number, courier_name=courier)


@given(parsers.cfparse('the legacy tailor delivery is "{status}" by "{method}"'))
def legacy_tailor_delivery(order, status, method):
    update_tailor_delivery(order["order_id"], status, delivery_method=method)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the {leg_type} leg is {status}"))
def leg_status(order, leg_type, status):
    assert _leg(order, leg_type).status == status


@then(parsers.cfparse('the order tracking shows "{overall_status}" at {percent:d} percent'))
def order_tracking_shows(order, overall_status, percent):
    result = get_tracking(order["order_id"])
    assert result.overall_status == overall_status
    assert result.progress_percent == percent


@then(parsers.cfparse('the tracking shows "{overall_status}" at {percent:d} percent'))
def tracking_shows(tracking, overall_status, percent):
    assert tracking["result"].overall_status == overall_status
    assert tracking["result"].progress_percent == percent


@then("the GARMENT leg has a delivery time")
def garment_delivered_at(order):
    assert _leg(order, "GARMENT").delivered_at is not None


@then("dispatching the GARMENT leg again is rejected as a conflict")
def garment_redispatch_conflicts(order):
    with pytest.raises(ConflictError):
        dispatch_leg(order["legs"]["GARMENT"], "BlueDart", "BD999")
