# telecom_cart/repos/memory_cart_store.py
import threading
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Dict, List, Tuple

from telecom_cart.domain.cart import Cart, CartItem, ItemUpdate, NewCartItem
from telecom_cart.domain.errors import ConflictError, NotFoundError, StoreError
from telecom_cart.repos.cart_store import CartStore


@dataclass
class _CartRecord:
    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime
    item_ids: List[str] = field(default_factory=list)


class InMemoryCartStore(CartStore):
    """
    Ulotny magazyn w pamieci procesu.
    Zapisy sa natychmiastowe, wiec commit/rollback nic nie robia.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self._carts: Dict[str, _CartRecord] = {}
        self._cart_ids_by_user: Dict[str, str] = {}
        self._items: Dict[str, CartItem] = {}
        self._item_owner: Dict[str, str] = {}

    def find_cart_by_user(self, user_id: str) -> Cart | None:
        with self._lock:
            cart_id = self._cart_ids_by_user.get(user_id)
            if cart_id is None:
                return None
            return self._snapshot(self._carts[cart_id])

    def create_cart(self, user_id: str) -> Cart:
        with self._lock:
            if user_id in self._cart_ids_by_user:
                raise ConflictError(f"Cart already exists for user {user_id}")

            now = datetime.now(timezone.utc)
            record = _CartRecord(id=str(uuid.uuid4()), user_id=user_id, created_at=now, updated_at=now)
            self._carts[record.id] = record
            self._cart_ids_by_user[user_id] = record.id
            return self._snapshot(record)

    def find_item_with_owner(self, item_id: str) -> Tuple[CartItem, str] | None:
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                return None
            owner = self._carts[self._item_owner[item_id]].user_id
            return item, owner

    def insert_item(self, cart_id: str, item: NewCartItem) -> CartItem:
        with self._lock:
            record = self._carts.get(cart_id)
            if record is None:
                raise StoreError(f"Cart {cart_id} does not exist")

            created = CartItem(
                id=str(uuid.uuid4()),
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                price=item.price,
                plan_type=item.plan_type,
                data_allowance=item.data_allowance,
            )
            self._items[created.id] = created
            self._item_owner[created.id] = cart_id
            record.item_ids.append(created.id)
            return created

    def update_item(self, item_id: str, update: ItemUpdate) -> None:
        with self._lock:
            item = self._items.get(item_id)
            if item is None:
                raise NotFoundError("Item not found in cart")
            self._items[item_id] = replace(item, **update.as_fields())

    def delete_item(self, item_id: str) -> None:
        with self._lock:
            cart_id = self._item_owner.pop(item_id, None)
            self._items.pop(item_id, None)
            if cart_id is not None:
                self._carts[cart_id].item_ids.remove(item_id)

    def delete_all_items(self, cart_id: str) -> None:
        with self._lock:
            record = self._carts.get(cart_id)
            if record is None:
                return
            for item_id in record.item_ids:
                self._items.pop(item_id, None)
                self._item_owner.pop(item_id, None)
            record.item_ids.clear()

    def touch_cart(self, cart_id: str, at: datetime) -> None:
        with self._lock:
            record = self._carts.get(cart_id)
            if record is not None and at > record.updated_at:
                record.updated_at = at

    def reload(self, user_id: str) -> Cart:
        cart = self.find_cart_by_user(user_id)
        if cart is None:
            raise StoreError(f"Cart for user {user_id} disappeared")
        return cart

    def _snapshot(self, record: _CartRecord) -> Cart:
        return Cart(
            id=record.id,
            user_id=record.user_id,
            created_at=record.created_at,
            updated_at=record.updated_at,
            items=tuple(self._items[item_id] for item_id in record.item_ids),
        )
