#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from shopping.data.models.user import UserModel
from shopping.data.models.product import ProductModel
from shopping.data.models.cart import CartModel
from shopping.data.models.cart_item import CartItemModel
from shopping.data.models.order import OrderModel
from shopping.data.models.order_item import OrderItemModel

__all__ = [
    "UserModel",
    "ProductModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "OrderItemModel",
]
