import os
import tempfile
from decimal import Decimal
from pathlib import Path

# konfiguracja musi byc ustawiona przed pierwszym importem pakietu shopping
_TMP_DIR = tempfile.mkdtemp(prefix="shopping-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{Path(_TMP_DIR) / 'default.db'}")
os.environ.setdefault("CELERY_TASK_ALWAYS_EAGER", "true")
os.environ.setdefault("CELERY_BROKER_URL", "memory://")
os.environ.setdefault("CELERY_RESULT_BACKEND", "cache+memory://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient

from shopping.data.database import init_db, make_engine, make_session_factory
from shopping.data.models import (
    CartItemModel,
    CartModel,
    OrderItemModel,
    OrderModel,
    ProductModel,
    UserModel,
)
from shopping.main import create_app


@pytest.fixture()
def engine(tmp_path):
    """Osobna baza SQLite w pliku na kazdy test."""
    eng = make_engine(f"sqlite:///{tmp_path / 'shopping.db'}")
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client(engine):
    app = create_app(engine)
    with TestClient(app) as c:
        yield c


class Shop:
    """Pomocnik do zakladania danych testowych (uzytkownicy, produkty, koszyki)."""

    def __init__(self, session_factory, engine):
        self.session_factory = session_factory
        self.engine = engine

    def _save(self, obj):
        with self.session_factory() as s:
            s.add(obj)
            s.commit()
            s.refresh(obj)
            return obj

    def user(self, username="alice"):
        return self._save(UserModel(username=username, email=f"{username}@example.com", full_name=username.title()))

    def product(self, name="Keyboard", price="9.99", stock=10):
        return self._save(ProductModel(name=name, price=Decimal(price), stock_quantity=stock))

    def cart(self, user, lines=(), status="active"):
        """lines: [(product, quantity, price_at_addition)]"""
        with self.session_factory() as s:
            cart = CartModel(user_id=user.id, status=status)
            s.add(cart)
            s.flush()
            for product, quantity, price in lines:
                s.add(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=product.id,
                        quantity=quantity,
                        price_at_addition=Decimal(price),
                    )
                )
            s.commit()
            s.refresh(cart)
            return cart

    def orphan_line(self, cart, product_id, quantity=1, price="1.00"):
        """
        Pozycja wskazujaca na produkt, ktorego nie ma w katalogu.
        Sesja zawsze otwiera BEGIN IMMEDIATE, a w transakcji PRAGMA foreign_keys
        nie dziala, wiec wstawiamy przez surowe polaczenie DBAPI (autocommit).
        """
        raw = self.engine.raw_connection()
        try:
            cursor = raw.cursor()
            cursor.execute("PRAGMA foreign_keys=OFF")
            cursor.execute(
                "INSERT INTO cart_items (cart_id, product_id, quantity, price_at_addition, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (cart.id, product_id, quantity, price, "2026-01-01 00:00:00.000000", "2026-01-01 00:00:00.000000"),
            )
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
        finally:
            raw.close()

    def stock(self, product) -> int:
        with self.session_factory() as s:
            return s.get(ProductModel, product.id).stock_quantity

    def cart_status(self, cart) -> str:
        with self.session_factory() as s:
            return s.get(CartModel, cart.id).status

    def order_count(self) -> int:
        with self.session_factory() as s:
            return s.query(OrderModel).count()

    def order_item_count(self) -> int:
        with self.session_factory() as s:
            return s.query(OrderItemModel).count()


@pytest.fixture()
def shop(session_factory, engine):
    return Shop(session_factory, engine)
