# shopping/repos/product_repo.py
from typing import Dict, Iterable

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from shopping.data.models.product import ProductModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def lock_products(self, product_ids: Iterable[int]) -> Dict[int, ProductModel]:
        """
        Blokuje wiersze produktow na czas transakcji.
        Zawsze rosnaco po id - dwa checkouty z tymi samymi produktami
        biora blokady w tej samej kolejnosci, wiec nie ma deadlocka.
        """
        ids = sorted(set(product_ids))
        if not ids:
            return {}

        products = self.db.execute(
            select(ProductModel)
            .where(ProductModel.id.in_(ids))
            .order_by(ProductModel.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalars().all()
        return {p.id: p for p in products}

    def decrement_stock(self, product_id: int, amount: int) -> bool:
        """
        UPDATE products SET stock_quantity = stock_quantity - :amount
        WHERE id = :id AND stock_quantity >= :amount

        False gdy stan poszedlby ponizej zera (nic nie zmieniono).
        """
        result = self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id, ProductModel.stock_quantity >= amount)
            .values(stock_quantity=ProductModel.stock_quantity - amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
