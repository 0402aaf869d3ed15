"""Order pool port — read access to orders owned by the ordering service."""

from abc import ABC, abstractmethod

from delivery.assignment.orders import OrderRef


class OrderPoolPort(ABC):
    @abstractmethod
    def list_orders(self) -> list[OrderRef]:
        """All orders visible to the delivery context, already normalized."""
        ...
