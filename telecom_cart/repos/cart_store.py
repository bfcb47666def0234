# telecom_cart/repos/cart_store.py
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from typing import Tuple

from telecom_cart.domain.cart import Cart, CartItem, ItemUpdate, NewCartItem
from telecom_cart.domain.errors import ConflictError
from telecom_cart.utils.retry import conflict_retry
from telecom_cart.utils.logging import get_logger

logger = get_logger(__name__)


class CartStore(ABC):
    """
    Kontrakt persystencji koszykow i pozycji.
    Implementacje: InMemoryCartStore (w procesie) i SqlCartStore (SQLAlchemy).
    Kazda awaria backendu ma wyjsc jako StoreError.
    """

    @abstractmethod
    def find_cart_by_user(self, user_id: str) -> Cart | None: ...

    @abstractmethod
    def create_cart(self, user_id: str) -> Cart:
        """Nowy pusty koszyk; ConflictError jesli uzytkownik juz go ma."""

    @abstractmethod
    def find_item_with_owner(self, item_id: str) -> Tuple[CartItem, str] | None: ...

    @abstractmethod
    def insert_item(self, cart_id: str, item: NewCartItem) -> CartItem: ...

    @abstractmethod
    def update_item(self, item_id: str, update: ItemUpdate) -> None:
        """NotFoundError jesli pozycji nie ma."""

    @abstractmethod
    def delete_item(self, item_id: str) -> None: ...

    @abstractmethod
    def delete_all_items(self, cart_id: str) -> None: ...

    @abstractmethod
    def touch_cart(self, cart_id: str, at: datetime) -> None:
        """Ustawia updated_at, ale nigdy go nie cofa."""

    @abstractmethod
    def reload(self, user_id: str) -> Cart: ...

    @contextmanager
    def unit_of_work(self):
        """Granica jednej operacji serwisu (odczyty + zapisy + reload)."""
        yield

    def commit(self) -> None:
        pass

    def rollback(self) -> None:
        pass

    def ping(self) -> None:
        pass

    @conflict_retry()
    def get_or_create_cart(self, user_id: str) -> Cart:
        cart = self.find_cart_by_user(user_id)
        if cart:
            return cart

        try:
            created = self.create_cart(user_id)
        except ConflictError:
            # inny request utworzyl koszyk miedzy odczytem a insertem - retry go odczyta
            logger.info(f"Wyscig przy tworzeniu koszyka dla {user_id}, ponawiam odczyt")
            raise

        logger.info(f"Utworzono nowy koszyk {created.id} dla uzytkownika {user_id}")
        return created
