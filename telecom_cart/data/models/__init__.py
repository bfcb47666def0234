#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from telecom_cart.data.models.cart import CartModel
from telecom_cart.data.models.cart_item import CartItemModel

__all__ = ["CartModel", "CartItemModel"]
