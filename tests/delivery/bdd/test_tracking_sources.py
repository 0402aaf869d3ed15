"""BDD tests for tracking source selection."""

from delivery.legacy.maintenance import update_tailor_delivery
from delivery.tracking.projection import NotAvailable
from delivery.tracking.reconciliation import get_tracking
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/tracking_sources.feature")


@when(parsers.cfparse('tracking is requested for order "{order_id}"'))
def request_tracking(tracking, order_id):
    tracking["result"] = get_tracking(order_id)


@when(parsers.cfparse('the legacy tailor delivery fails because "{reason}"'))
def legacy_delivery_fails(order, reason):
    update_tailor_delivery(order["order_id"], "failed", failure_reason=reason)


@then("the tracking result is not available")
def not_available(tracking):
    assert isinstance(tracking["result"], NotAvailable)


@then(parsers.cfparse('the tracking comes from the "{source}" records'))
def tracking_source(tracking, source):
    assert tracking["result"].source == source
