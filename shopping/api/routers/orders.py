# shopping/api/routers/orders.py
from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session

from shopping.data.database import get_db
from shopping.domain.schemas import (
    MAX_ID,
    OrderDetailOut,
    OrderOut,
    OrderStatusIn,
    OrderStatusOut,
    PlaceOrderIn,
    UserOrdersOut,
)
from shopping.services.checkout_service import CheckoutService
from shopping.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])

# bledy (ShoppingError) mapuje na HTTP shopping.api.errors, tu ich nie lapiemy


def get_checkout_service(db: Session = Depends(get_db)) -> CheckoutService:
    return CheckoutService(db)


def get_order_service(db: Session = Depends(get_db)) -> OrderService:
    return OrderService(db)


@router.post("", response_model=OrderOut, status_code=201)
def place_order(
    payload: PlaceOrderIn,
    svc: CheckoutService = Depends(get_checkout_service),
):
    """
    Sklada zamowienie z aktywnego koszyka.
    Stany produktow, koszyk i zamowienie zmieniaja sie atomowo.
    """
    return svc.place_order(
        user_id=payload.user_id,
        cart_id=payload.cart_id,
        shipping_address=payload.shipping_address,
        payment_method=payload.payment_method,
    )


@router.get("/user/{user_id}", response_model=UserOrdersOut)
def list_user_orders(
    user_id: int = Path(..., gt=0, le=MAX_ID),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_user_orders(user_id)


@router.get("/{order_id}", response_model=OrderDetailOut)
def get_order(
    order_id: int = Path(..., gt=0, le=MAX_ID),
    svc: OrderService = Depends(get_order_service),
):
    """
    Pobiera szczegoly zamowienia.
    """
    return svc.get_order(order_id)


@router.put("/{order_id}/status", response_model=OrderStatusOut)
def update_order_status(
    payload: OrderStatusIn,
    order_id: int = Path(..., gt=0, le=MAX_ID),
    svc: OrderService = Depends(get_order_service),
):
    return svc.update_order_status(order_id, payload.status)
