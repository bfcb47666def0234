from datetime import datetime, timezone
from typing import Callable

from telecom_cart.domain.cart import Cart, ItemUpdate, NewCartItem
from telecom_cart.domain.errors import NotFoundError, StoreError
from telecom_cart.repos.cart_store import CartStore
from telecom_cart.services.snapshot_cache import CartSnapshotCache
from telecom_cart.utils.logging import get_logger

logger = get_logger(__name__)

ITEM_NOT_FOUND = "Item not found in cart"


class CartService:
    """
    Use case'y domeny koszyka, wszystko kluczowane po user_id.
    commands (add, update, remove, clear) modyfikuja stan i robia commit
    query (get, total) tylko odczyt, z opcjonalnym fallbackiem na snapshot
    """

    def __init__(
        self,
        store: CartStore,
        cache: CartSnapshotCache | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        self.store = store
        self.cache = cache
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    #query - odczyt
    def get_cart(self, user_id: str) -> Cart:
        return self._read(user_id)

    def get_cart_total(self, user_id: str) -> float:
        return self._read(user_id).total

    #commands
    def add_item(self, user_id: str, item: NewCartItem) -> Cart:
        item.validate()

        def run():
            cart = self.store.get_or_create_cart(user_id)
            created = self.store.insert_item(cart.id, item)
            self.store.touch_cart(cart.id, self.clock())
            logger.info(
                f"Dodano pozycje {created.id} (produkt {item.product_id}, ilosc {item.quantity}) "
                f"do koszyka {cart.id}"
            )

        return self._write(user_id, run)

    def update_item(self, user_id: str, item_id: str, update: ItemUpdate) -> Cart:
        update.validate()

        def run():
            cart_id = self._owned_item_cart_id(user_id, item_id)
            self.store.update_item(item_id, update)
            self.store.touch_cart(cart_id, self.clock())
            logger.info(f"Zaktualizowano pozycje {item_id} w koszyku {cart_id}: {update.as_fields()}")

        return self._write(user_id, run)

    def remove_item(self, user_id: str, item_id: str) -> Cart:
        def run():
            cart_id = self._owned_item_cart_id(user_id, item_id)
            self.store.delete_item(item_id)
            self.store.touch_cart(cart_id, self.clock())
            logger.info(f"Usunieto pozycje {item_id} z koszyka {cart_id}")

        return self._write(user_id, run)

    def clear_cart(self, user_id: str) -> Cart:
        def run():
            cart = self.store.get_or_create_cart(user_id)
            self.store.delete_all_items(cart.id)
            self.store.touch_cart(cart.id, self.clock())
            logger.info(f"Wyczyszczono koszyk {cart.id} uzytkownika {user_id}")

        return self._write(user_id, run)

    def _owned_item_cart_id(self, user_id: str, item_id: str) -> str:
        # brak pozycji i cudza pozycja wygladaja tak samo - nie zdradzamy istnienia
        found = self.store.find_item_with_owner(item_id)
        if found is None or found[1] != user_id:
            raise NotFoundError(ITEM_NOT_FOUND)

        cart = self.store.find_cart_by_user(user_id)
        if cart is None:
            raise NotFoundError(ITEM_NOT_FOUND)
        return cart.id

    def _write(self, user_id: str, run: Callable[[], None]) -> Cart:
        with self.store.unit_of_work():
            try:
                run()
                self.store.commit()
            except Exception:
                self.store.rollback()
                raise

            cart = self.store.reload(user_id)

        self._remember(cart)
        return cart

    def _read(self, user_id: str) -> Cart:
        try:
            with self.store.unit_of_work():
                cart = self.store.get_or_create_cart(user_id)
        except StoreError as e:
            snapshot = self.cache.get(user_id) if self.cache is not None else None
            if snapshot is None:
                raise
            logger.warning(f"Baza niedostepna ({e}), zwracam ostatni znany koszyk {snapshot.id} dla {user_id}")
            return snapshot

        self._remember(cart)
        return cart

    def _remember(self, cart: Cart) -> None:
        if self.cache is not None:
            self.cache.put(cart)
