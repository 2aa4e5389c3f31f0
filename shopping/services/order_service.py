# shopping/services/order_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from shopping.domain.errors import InvalidInput, NotFound
from shopping.domain.status import OrderStatus
from shopping.repos.order_repo import OrderRepo
from shopping.utils.logging import get_logger

logger = get_logger(__name__)


def _item_dict(item) -> Dict[str, Any]:
    return {
        "product_id": item.product_id,
        "product_name": item.product_name,
        "quantity": item.quantity,
        "price": item.price,
        "subtotal": item.subtotal,
    }


class OrderService:
    """
    Zapytania o zamowienia i zmiana statusu.
    Tworzenie zamowien jest w CheckoutService.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = OrderRepo(db)

    def get_order(self, order_id: int) -> Dict[str, Any]:
        """
        Use Case: Pobranie zamowienia z pozycjami (Query).
        """
        row = self.repo.get_order_with_user(order_id)
        if row is None:
            raise NotFound("order")

        order, user = row
        items = self.repo.get_order_items(order_id)

        return {
            "order": {
                "id": order.id,
                "user_id": order.user_id,
                "cart_id": order.cart_id,
                "total_amount": order.total_amount,
                "status": order.status,
                "shipping_address": order.shipping_address,
                "payment_method": order.payment_method,
                "created_at": order.created_at,
                "updated_at": order.updated_at,
                "username": user.username if user else None,
                "email": user.email if user else None,
            },
            "items": [_item_dict(i) for i in items],
            "item_count": len(items),
        }

    def list_user_orders(self, user_id: int) -> Dict[str, Any]:
        rows = self.repo.list_orders_by_user(user_id)
        orders = [
            {
                "id": order.id,
                "total_amount": order.total_amount,
                "status": order.status,
                "shipping_address": order.shipping_address,
                "payment_method": order.payment_method,
                "created_at": order.created_at,
                "item_count": item_count,
            }
            for order, item_count in rows
        ]
        return {"count": len(orders), "orders": orders}

    def update_order_status(self, order_id: int, status: str | None) -> Dict[str, Any]:
        """
        Use Case: Zmiana statusu zamowienia (Command).
        Tylko wartosci z OrderStatus, tresc zamowienia sie nie zmienia.
        """
        if status not in OrderStatus.values():
            raise InvalidInput("Invalid status", valid_statuses=OrderStatus.values())

        try:
            rowcount = self.repo.update_order_status(order_id, status)
            if rowcount == 0:
                raise NotFound("order")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info("Order status updated", order_id=order_id, status=status)
        return {"message": "Order status updated successfully", "status": status}
