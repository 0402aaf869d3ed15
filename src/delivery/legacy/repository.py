"""Repository for legacy delivery records, keyed by order id."""

from protean.exceptions import ObjectNotFoundError

from delivery.domain import delivery
from delivery.exceptions import NotFoundError
from delivery.legacy.record import LegacyDeliveryRecord
from delivery.shared.store import store_errors


@delivery.repository(part_of=LegacyDeliveryRecord)
class LegacyDeliveryRecordRepository:
    def _query(self, **filters) -> list[LegacyDeliveryRecord]:
        with store_errors("Legacy delivery"):
            return list(self._dao.query.filter(**filters).all().items)

    def find(self, order_id: str) -> LegacyDeliveryRecord | None:
        """The record for ``order_id``, or ``None`` when the order has none."""
        records = self._query(order_id=str(order_id))
        return records[0] if records else None

    def fetch(self, order_id: str) -> LegacyDeliveryRecord:
        with store_errors("Legacy delivery"):
            try:
                return self.get(order_id)
            except ObjectNotFoundError as exc:
                raise NotFoundError({"order_id": [f"No legacy delivery record for order {order_id}"]}) from exc

    def for_customer(self, customer_id: str) -> list[LegacyDeliveryRecord]:
        return self._query(customer_id=str(customer_id))
