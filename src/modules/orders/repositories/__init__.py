"""Order repositories package."""

from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.repositories.interfaces import IOrderRepository, OrderLine

__all__ = ["IOrderRepository", "OrderDjangoRepository", "OrderLine"]
