# shopping/services/checkout_service.py
from typing import Any, Dict, List

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from shopping.data.models.order import OrderModel
from shopping.data.models.order_item import OrderItemModel
from shopping.domain.errors import (
    Forbidden,
    InsufficientStock,
    InvalidInput,
    InvalidState,
    NotFound,
    StorageFailure,
)
from shopping.domain.money import format_money, line_subtotal, money_sum, to_money
from shopping.domain.schemas import MAX_ID
from shopping.domain.status import CartStatus, OrderStatus
from shopping.repos.cart_repo import CartRepo
from shopping.repos.order_repo import OrderRepo
from shopping.repos.product_repo import ProductRepo
from shopping.repos.user_repo import UserRepo
from shopping.services.notification_service import NotificationService
from shopping.utils.logging import get_logger
from shopping.utils.retry import db_retry

logger = get_logger(__name__)

PAYMENT_METHOD_MAX_LENGTH = 50


class CheckoutService:
    """
    Use Case: zamiana aktywnego koszyka w zamowienie.

    Cala operacja to jedna jednostka pracy:
    - blokada koszyka (FOR UPDATE) i produktow (FOR UPDATE, rosnaco po id)
    - walidacja wszystkich pozycji zanim cokolwiek zapiszemy
    - insert order + order_items, warunkowe zmniejszenie stanow
    - koszyk active -> ordered
    - jeden commit na koncu, kazdy blad = rollback
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        max_attempts: int | None = None,
    ):
        self.db = db
        self.users = UserRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.orders = OrderRepo(db)
        self.notification_service = notification_service or NotificationService()
        self.max_attempts = max_attempts

    def place_order(
        self,
        user_id: int | None,
        cart_id: int | None,
        shipping_address: str | None = None,
        payment_method: str | None = None,
    ) -> Dict[str, Any]:
        self._validate_input(user_id, cart_id, shipping_address, payment_method)

        logger.info("Checkout started", user_id=user_id, cart_id=cart_id)

        run = db_retry(self.max_attempts)(self._place_order_once)
        try:
            order = run(user_id, cart_id, shipping_address, payment_method)
        except OperationalError as e:
            logger.error("Checkout failed after retries", cart_id=cart_id, error=str(e))
            raise StorageFailure(
                "checkout could not be committed, nothing was changed - retry later"
            ) from e
        except SQLAlchemyError as e:
            logger.error("Checkout storage error", cart_id=cart_id, error=str(e))
            raise StorageFailure("checkout could not be committed, nothing was changed") from e

        logger.info(
            "Order placed",
            order_id=order["id"],
            cart_id=cart_id,
            total_amount=format_money(order["total_amount"]),
            items=len(order["items"]),
        )
        self._notify(order)
        return order

    @staticmethod
    def _validate_input(user_id, cart_id, shipping_address, payment_method) -> None:
        if user_id is None or cart_id is None:
            raise InvalidInput("user_id and cart_id are required")

        for name, value in (("user_id", user_id), ("cart_id", cart_id)):
            # bool to tez int w pythonie
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0 or value > MAX_ID:
                raise InvalidInput(f"{name} must be a positive integer not above {MAX_ID}", field=name)

        if shipping_address is not None and not isinstance(shipping_address, str):
            raise InvalidInput("shipping_address must be text", field="shipping_address")

        if payment_method is not None:
            if not isinstance(payment_method, str):
                raise InvalidInput("payment_method must be text", field="payment_method")
            if len(payment_method) > PAYMENT_METHOD_MAX_LENGTH:
                raise InvalidInput(
                    f"payment_method must be at most {PAYMENT_METHOD_MAX_LENGTH} characters",
                    field="payment_method",
                )

    def _place_order_once(self, user_id, cart_id, shipping_address, payment_method) -> Dict[str, Any]:
        try:
            order = self._checkout(user_id, cart_id, shipping_address, payment_method)
            self.db.commit()
        except Exception:
            #wycofaj wszystko co zdazylismy zrobic w tej transakcji
            self.db.rollback()
            raise
        return order

    def _checkout(self, user_id, cart_id, shipping_address, payment_method) -> Dict[str, Any]:
        if self.users.get_user(user_id) is None:
            raise NotFound("user")

        cart = self.carts.get_cart_for_update(cart_id)
        if cart is None:
            raise NotFound("cart")

        #status przed wlascicielem - drugi checkout zawsze dostaje InvalidState
        if cart.status != CartStatus.ACTIVE.value:
            raise InvalidState("cart not active", cart_id=cart_id, status=cart.status)

        if cart.user_id != user_id:
            raise Forbidden("cart does not belong to this user")

        lines = self.carts.list_lines_with_product(cart_id)
        if not lines:
            raise InvalidState("empty cart", cart_id=cart_id)

        #produkt usuniety z katalogu - outer join daje None
        for item, product in lines:
            if product is None:
                raise NotFound("product", product_id=item.product_id)

        products = self.products.lock_products(item.product_id for item, _ in lines)

        #najpierw sprawdz wszystkie pozycje, dopiero potem cokolwiek zmieniaj
        snapshot: List[Dict[str, Any]] = []
        for item, _ in lines:
            product = products.get(item.product_id)
            if product is None:
                raise NotFound("product", product_id=item.product_id)
            if product.stock_quantity < item.quantity:
                raise InsufficientStock(
                    product=product.name,
                    available=product.stock_quantity,
                    requested=item.quantity,
                )
            price = to_money(item.price_at_addition)
            snapshot.append(
                {
                    "product_id": product.id,
                    "product_name": product.name,
                    "quantity": item.quantity,
                    "price": price,
                    "subtotal": line_subtotal(item.quantity, price),
                }
            )

        total = money_sum(line["subtotal"] for line in snapshot)

        order = self.orders.insert_order(
            OrderModel(
                user_id=user_id,
                cart_id=cart_id,
                total_amount=total,
                status=OrderStatus.PENDING.value,
                shipping_address=shipping_address,
                payment_method=payment_method,
            )
        )

        for line in snapshot:
            self.orders.insert_order_item(OrderItemModel(order_id=order.id, **line))

            if not self.products.decrement_stock(line["product_id"], line["quantity"]):
                # nie powinno sie zdarzyc przy blokadzie wierszy, ale stan pilnuje warunek w UPDATE
                raise InsufficientStock(
                    product=line["product_name"],
                    available=products[line["product_id"]].stock_quantity,
                    requested=line["quantity"],
                )

        if self.carts.set_status(cart_id, CartStatus.ORDERED.value, CartStatus.ACTIVE.value) == 0:
            raise InvalidState("cart not active", cart_id=cart_id)

        return {
            "id": order.id,
            "user_id": order.user_id,
            "cart_id": order.cart_id,
            "total_amount": total,
            "status": order.status,
            "shipping_address": order.shipping_address,
            "payment_method": order.payment_method,
            "created_at": order.created_at,
            "items": snapshot,
        }

    def _notify(self, order: Dict[str, Any]) -> None:
        # zamowienie jest juz zatwierdzone, brak brokera nie moze go cofnac
        try:
            self.notification_service.send_order_placed(
                order["user_id"], order["id"], format_money(order["total_amount"])
            )
        except Exception as e:
            logger.warning(
                "Failed to queue order notification",
                order_id=order["id"],
                error=str(e),
            )
