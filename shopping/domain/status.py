# shopping/domain/status.py
from enum import Enum


class CartStatus(str, Enum):
    ACTIVE = "active"
    ORDERED = "ordered"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls) -> list[str]:
        return [s.value for s in cls]
