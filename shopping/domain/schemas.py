# shopping/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

from shopping.domain.money import format_money

#kwoty zawsze jako string z 2 miejscami po przecinku, np. "34.98"
Money = Annotated[Decimal, PlainSerializer(format_money, return_type=str)]

#Integer w bazie - wieksze id nigdy nie istnieje, a sterownik rzuca OverflowError/DataError
MAX_ID = 2**31 - 1


class PlaceOrderIn(BaseModel):
    """Schema dla skladania zamowienia z koszyka.

    Identyfikatory sa opcjonalne w schemacie, brak sprawdza CheckoutService
    (InvalidInput), zeby walidacja byla w jednym miejscu.
    """

    user_id: int | None = Field(None, gt=0, le=MAX_ID, description="ID uzytkownika")
    cart_id: int | None = Field(None, gt=0, le=MAX_ID, description="ID koszyka")
    shipping_address: str | None = Field(None, description="Adres wysylki (dowolny tekst)")
    payment_method: str | None = Field(None, description="Metoda platnosci (etykieta)")


class OrderItemOut(BaseModel):
    product_id: int
    product_name: str
    quantity: int
    price: Money
    subtotal: Money

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    """Zamowienie razem z pozycjami (odpowiedz checkoutu)."""

    id: int
    user_id: int
    cart_id: int
    total_amount: Money
    status: str
    shipping_address: str | None = None
    payment_method: str | None = None
    created_at: datetime | None = None
    items: List[OrderItemOut]

    model_config = ConfigDict(from_attributes=True)


class OrderRecordOut(BaseModel):
    id: int
    user_id: int
    cart_id: int
    total_amount: Money
    status: str
    shipping_address: str | None = None
    payment_method: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    username: str | None = None
    email: str | None = None


class OrderDetailOut(BaseModel):
    order: OrderRecordOut
    items: List[OrderItemOut]
    item_count: int


class OrderSummaryOut(BaseModel):
    id: int
    total_amount: Money
    status: str
    shipping_address: str | None = None
    payment_method: str | None = None
    created_at: datetime | None = None
    item_count: int


class UserOrdersOut(BaseModel):
    count: int
    orders: List[OrderSummaryOut]


class OrderStatusIn(BaseModel):
    status: str | None = None


class OrderStatusOut(BaseModel):
    message: str
    status: str


class HealthOut(BaseModel):
    status: str
    service: str
    timestamp: datetime
    database: str
