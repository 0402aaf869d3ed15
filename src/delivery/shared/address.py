"""Where a shipment ends up."""

from protean.fields import String

from delivery.domain import delivery


@delivery.value_object
class DeliveryAddress:
    """Postal address copied from the order at confirmation time.

    Stored by value on each record; later edits to the customer's address
    book do not rewrite addresses of shipments already in flight.
    """

    recipient_name = String(max_length=200)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(max_length=100, default="India")
    phone = String(max_length=20)

    def to_dict(self) -> dict:
        return {
            "recipient_name": self.recipient_name,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country": self.country,
            "phone": self.phone,
        }
