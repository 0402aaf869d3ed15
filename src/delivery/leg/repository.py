"""Repository for the DeliveryLeg aggregate."""

from collections.abc import Iterable

from protean.exceptions import ObjectNotFoundError

from delivery.domain import delivery
from delivery.exceptions import NotFoundError
from delivery.leg.leg import DeliveryLeg, LegType
from delivery.shared.store import store_errors

_LEG_TYPE_ORDER = {LegType.FABRIC.value: 0, LegType.GARMENT.value: 1}


def _sorted(legs: list[DeliveryLeg]) -> list[DeliveryLeg]:
    return sorted(legs, key=lambda leg: _LEG_TYPE_ORDER.get(leg.leg_type, 99))


@delivery.repository(part_of=DeliveryLeg)
class DeliveryLegRepository:
    """Secondary-index style queries on top of the standard CRUD methods."""

    def _query(self, **filters) -> list[DeliveryLeg]:
        with store_errors("Delivery leg"):
            return list(self._dao.query.filter(**filters).all().items)

    def for_order(self, order_id: str, leg_type: str | None = None) -> list[DeliveryLeg]:
        """All legs of an order, FABRIC before GARMENT."""
        filters = {"order_id": str(order_id)}
        if leg_type:
            filters["leg_type"] = leg_type
        return _sorted(self._query(**filters))

    def for_orders(self, order_ids: Iterable[str], leg_type: str | None = None) -> list[DeliveryLeg]:
        legs = []
        for order_id in dict.fromkeys(str(o) for o in order_ids):
            legs.extend(self.for_order(order_id, leg_type))
        return legs

    def for_customer(self, customer_id: str) -> list[DeliveryLeg]:
        return _sorted(self._query(customer_id=str(customer_id)))

    def fetch(self, leg_id: str) -> DeliveryLeg:
        """Load a leg by id, raising ``NotFoundError`` when it does not exist."""
        with store_errors("Delivery leg"):
            try:
                return self.get(leg_id)
            except ObjectNotFoundError as exc:
                raise NotFoundError({"leg_id": [f"Delivery leg {leg_id} does not exist"]}) from exc
