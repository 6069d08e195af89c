"""Model module imports for SQLAlchemy relationship registration."""

from crudapp.db.models.cart import CartItem
from crudapp.db.models.order import Order
from crudapp.db.models.order import OrderItem
from crudapp.db.models.post import Post
from crudapp.db.models.product import Product
from crudapp.db.models.todo import Todo
from crudapp.db.models.user import Base
from crudapp.db.models.user import User

__all__ = [
    "Base",
    "CartItem",
    "Order",
    "OrderItem",
    "Post",
    "Product",
    "Todo",
    "User",
]
