# shopping/repos/order_repo.py
from typing import List, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from shopping.data.models.order import OrderModel
from shopping.data.models.order_item import OrderItemModel
from shopping.data.models.user import UserModel


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def insert_order(self, order: OrderModel) -> OrderModel:
        #flush zamiast commit - id potrzebne od razu, commit robi serwis
        self.db.add(order)
        self.db.flush()
        return order

    def insert_order_item(self, item: OrderItemModel) -> OrderItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def get_order_with_user(self, order_id: int) -> Tuple[OrderModel, UserModel | None] | None:
        row = self.db.execute(
            select(OrderModel, UserModel)
            .outerjoin(UserModel, UserModel.id == OrderModel.user_id)
            .where(OrderModel.id == order_id)
        ).first()
        if row is None:
            return None
        return row[0], row[1]

    def get_order_items(self, order_id: int) -> List[OrderItemModel]:
        return list(
            self.db.execute(
                select(OrderItemModel)
                .where(OrderItemModel.order_id == order_id)
                .order_by(OrderItemModel.id)
            ).scalars().all()
        )

    def list_orders_by_user(self, user_id: int) -> List[Tuple[OrderModel, int]]:
        """Zamowienia uzytkownika z liczba pozycji, najnowsze pierwsze."""
        rows = self.db.execute(
            select(OrderModel, func.count(OrderItemModel.id))
            .outerjoin(OrderItemModel, OrderItemModel.order_id == OrderModel.id)
            .where(OrderModel.user_id == user_id)
            .group_by(OrderModel.id)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        ).all()
        return [(order, count) for order, count in rows]

    def update_order_status(self, order_id: int, status: str) -> int:
        result = self.db.execute(
            update(OrderModel)
            .where(OrderModel.id == order_id)
            .values(status=status)
        )
        return result.rowcount
