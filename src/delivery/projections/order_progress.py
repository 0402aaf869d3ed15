"""Admin board of every order's delivery status."""

from datetime import UTC, datetime

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from delivery.domain import delivery
from delivery.exceptions import ValidationError
from delivery.leg.events import LegDelivered, LegDispatched, LegMarkedReady, LegOpened
from delivery.leg.leg import DeliveryLeg
from delivery.legacy.events import (
    LegacyDeliveryCreated,
    TailorDeliveryUpdated,
    VendorDispatchUpdated,
)
from delivery.legacy.record import LegacyDeliveryRecord
from delivery.shared.store import store_errors
from delivery.tracking.progress import OverallStatus
from delivery.tracking.reconciliation import get_tracking


@delivery.projection
class OrderProgressView:
    order_id = Identifier(identifier=True, required=True)
    source = String(required=True)
    overall_status = String(required=True)
    progress_percent = Integer(default=10)
    fabric_status = String()
    garment_status = String()
    updated_at = DateTime()


@delivery.projector(projector_for=OrderProgressView, aggregates=[DeliveryLeg, LegacyDeliveryRecord])
class OrderProgressProjector:
    """Rebuilds an order's row through the reconciliation adapter on every change."""

    def _refresh(self, order_id):
        tracking = get_tracking(str(order_id))
        if not tracking.available:
            return

        repo = current_domain.repository_for(OrderProgressView)
        try:
            view = repo.get(str(order_id))
        except ObjectNotFoundError:
            view = OrderProgressView(order_id=str(order_id), source=tracking.source, overall_status=tracking.overall_status)

        view.source = tracking.source
        view.overall_status = tracking.overall_status
        view.progress_percent = tracking.progress_percent
        view.fabric_status = tracking.fabric.status if tracking.fabric else None
        view.garment_status = tracking.garment.status if tracking.garment else None
        view.updated_at = datetime.now(UTC)
        repo.add(view)

    @on(LegOpened)
    def on_leg_opened(self, event):
        self._refresh(event.order_id)

    @on(LegMarkedReady)
    def on_leg_marked_ready(self, event):
        self._refresh(event.order_id)

    @on(LegDispatched)
    def on_leg_dispatched(self, event):
        self._refresh(event.order_id)

    @on(LegDelivered)
    def on_leg_delivered(self, event):
        self._refresh(event.order_id)

    @on(LegacyDeliveryCreated)
    def on_legacy_created(self, event):
        self._refresh(event.order_id)

    @on(VendorDispatchUpdated)
    def on_vendor_dispatch_updated(self, event):
        self._refresh(event.order_id)

    @on(TailorDeliveryUpdated)
    def on_tailor_delivery_updated(self, event):
        self._refresh(event.order_id)


def progress_board(overall_status: str | None = None) -> list[OrderProgressView]:
    """Rows of the progress board, most recently updated first."""
    repo = current_domain.repository_for(OrderProgressView)
    query = repo._dao.query
    if overall_status is not None:
        if overall_status not in {s.value for s in OverallStatus}:
            raise ValidationError({"overall_status": [f"Unknown overall status: {overall_status}"]})
        query = query.filter(overall_status=overall_status)
    with store_errors("Order progress"):
        return list(query.order_by("-updated_at").all().items)
