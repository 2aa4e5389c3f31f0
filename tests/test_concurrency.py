"""Concurrent checkouts: no overselling, no double checkout of one cart."""

from concurrent.futures import ThreadPoolExecutor
from threading import Barrier

import pytest

from shopping.domain.errors import InsufficientStock, InvalidState, StorageFailure
from shopping.services.checkout_service import CheckoutService

pytestmark = pytest.mark.concurrency


def _run_parallel(session_factory, jobs):
    """jobs: [(user_id, cart_id)] - kazdy w osobnym watku, z wlasna sesja."""
    barrier = Barrier(len(jobs))

    def checkout(user_id, cart_id):
        session = session_factory()
        try:
            barrier.wait()
            return CheckoutService(session).place_order(user_id, cart_id)
        except (InsufficientStock, InvalidState, StorageFailure) as e:
            return e
        finally:
            session.close()

    with ThreadPoolExecutor(max_workers=len(jobs)) as pool:
        futures = [pool.submit(checkout, u, c) for u, c in jobs]
        return [f.result() for f in futures]


def test_shared_product_is_never_oversold(shop, session_factory):
    product = shop.product("Limited", "5.00", stock=5)
    other = shop.product("Common", "1.00", stock=100)
    jobs = []
    for i in range(6):
        user = shop.user(f"buyer{i}")
        cart = shop.cart(user, [(other, 1, "1.00"), (product, 2, "5.00")])
        jobs.append((user.id, cart.id))

    results = _run_parallel(session_factory, jobs)

    placed = [r for r in results if isinstance(r, dict)]
    rejected = [r for r in results if not isinstance(r, dict)]
    assert len(placed) == 2
    assert all(isinstance(r, (InsufficientStock, StorageFailure)) for r in rejected)
    assert shop.stock(product) == 5 - 2 * len(placed)
    assert shop.stock(other) == 100 - len(placed)
    assert shop.order_count() == len(placed)


def test_same_cart_checked_out_concurrently_only_once(shop, session_factory):
    user = shop.user()
    product = shop.product(stock=50)
    cart = shop.cart(user, [(product, 3, "9.99")])

    results = _run_parallel(session_factory, [(user.id, cart.id)] * 5)

    placed = [r for r in results if isinstance(r, dict)]
    assert len(placed) == 1
    assert all(isinstance(r, InvalidState) for r in results if not isinstance(r, dict))
    assert shop.order_count() == 1
    assert shop.order_item_count() == 1
    assert shop.stock(product) == 47
    assert shop.cart_status(cart) == "ordered"
