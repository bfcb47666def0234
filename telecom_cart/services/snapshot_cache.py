# telecom_cart/services/snapshot_cache.py
import threading
from collections import OrderedDict

from telecom_cart.domain.cart import Cart


class CartSnapshotCache:
    """
    Ostatni znany stan koszyka per uzytkownik.
    Tylko podpowiedz dla odczytow gdy baza nie odpowiada, nigdy zrodlo prawdy.
    Ograniczony do max_entries - po przekroczeniu wypada najdawniej uzywany wpis.
    """

    def __init__(self, max_entries: int = 10000):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._snapshots: "OrderedDict[str, Cart]" = OrderedDict()
        self._lock = threading.Lock()

    def put(self, cart: Cart) -> None:
        with self._lock:
            self._snapshots[cart.user_id] = cart
            self._snapshots.move_to_end(cart.user_id)
            while len(self._snapshots) > self.max_entries:
                self._snapshots.popitem(last=False)

    def get(self, user_id: str) -> Cart | None:
        with self._lock:
            cart = self._snapshots.get(user_id)
            if cart is not None:
                self._snapshots.move_to_end(user_id)
            return cart

    def clear(self) -> None:
        with self._lock:
            self._snapshots.clear()

    def __len__(self) -> int:
        return len(self._snapshots)
