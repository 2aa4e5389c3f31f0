from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from shopping.domain.errors import InvalidInput, NotFound
from shopping.services.checkout_service import CheckoutService
from shopping.services.notification_service import NotificationService, send_order_placed_notification
from shopping.services.order_service import OrderService


@pytest.fixture()
def placed_order(shop, db):
    user = shop.user("carol")
    a = shop.product("Lamp", "12.50", stock=4)
    b = shop.product("Bulb", "1.25", stock=40)
    cart = shop.cart(user, [(a, 1, "12.50"), (b, 4, "1.25")])
    order = CheckoutService(db, notification_service=MagicMock()).place_order(user.id, cart.id)
    return user, order


def test_get_order_returns_snapshot(db, placed_order):
    user, order = placed_order

    result = OrderService(db).get_order(order["id"])

    assert result["order"]["total_amount"] == Decimal("17.50")
    assert result["order"]["username"] == "carol"
    assert result["item_count"] == 2
    assert [(i["product_name"], i["subtotal"]) for i in result["items"]] == [
        ("Lamp", Decimal("12.50")),
        ("Bulb", Decimal("5.00")),
    ]


def test_get_missing_order(db):
    with pytest.raises(NotFound):
        OrderService(db).get_order(123)


def test_list_user_orders(db, placed_order):
    user, order = placed_order

    result = OrderService(db).list_user_orders(user.id)

    assert result["count"] == 1
    assert result["orders"][0]["id"] == order["id"]
    assert result["orders"][0]["item_count"] == 2


@pytest.mark.parametrize("status", ["processing", "shipped", "delivered", "cancelled", "pending"])
def test_update_to_every_valid_status(db, placed_order, status):
    _, order = placed_order
    svc = OrderService(db)

    assert svc.update_order_status(order["id"], status)["status"] == status
    assert svc.get_order(order["id"])["order"]["status"] == status


@pytest.mark.parametrize("status", ["", None, "PENDING", "refunded"])
def test_invalid_status_rejected(db, placed_order, status):
    _, order = placed_order

    with pytest.raises(InvalidInput) as exc:
        OrderService(db).update_order_status(order["id"], status)

    assert "shipped" in exc.value.extra["valid_statuses"]


def test_update_status_of_missing_order(db):
    with pytest.raises(NotFound):
        OrderService(db).update_order_status(404, "shipped")


def test_notification_task_runs_eagerly():
    result = NotificationService.send_order_placed(1, 2, "10.00")

    assert result.get() == {"user_id": 1, "order_id": 2, "status": "sent"}
    assert send_order_placed_notification.name.endswith("send_order_placed_notification")
