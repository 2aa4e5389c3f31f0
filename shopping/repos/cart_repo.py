# shopping/repos/cart_repo.py
from typing import List, Tuple

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from shopping.data.models.cart import CartModel
from shopping.data.models.cart_item import CartItemModel
from shopping.data.models.product import ProductModel


class CartRepo:
    """
    Operacje na koszyku uzywane przez checkout.
    Repo nie robi commit - o granicach transakcji decyduje serwis.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_cart_for_update(self, cart_id: int) -> CartModel | None:
        #SELECT ... FOR UPDATE - drugi checkout tego samego koszyka czeka na commit pierwszego
        return self.db.execute(
            select(CartModel)
            .where(CartModel.id == cart_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def list_lines_with_product(
        self, cart_id: int
    ) -> List[Tuple[CartItemModel, ProductModel | None]]:
        """
        Pozycje koszyka razem z aktualnym stanem produktu (outer join,
        brakujacy produkt -> None). Posortowane po product_id.
        """
        rows = self.db.execute(
            select(CartItemModel, ProductModel)
            .outerjoin(ProductModel, ProductModel.id == CartItemModel.product_id)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.product_id)
        ).all()
        return [(item, product) for item, product in rows]

    def set_status(self, cart_id: int, new_status: str, expected_status: str) -> int:
        """
        Warunkowa zmiana statusu (compare-and-swap).
        Zwraca liczbe zmienionych wierszy, 0 = ktos nas wyprzedzil.
        """
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.status == expected_status)
            .values(status=new_status)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
