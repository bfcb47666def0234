# telecom_cart/repos/sql_cart_store.py
from contextlib import contextmanager, nullcontext
from datetime import datetime, timezone
from typing import Tuple

from sqlalchemy import delete, func, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from telecom_cart.data.database import connection_lock
from telecom_cart.data.models.cart import CartModel
from telecom_cart.data.models.cart_item import CartItemModel
from telecom_cart.domain.cart import Cart, CartItem, ItemUpdate, NewCartItem
from telecom_cart.domain.errors import CartError, ConflictError, NotFoundError, StoreError
from telecom_cart.repos.cart_store import CartStore
from telecom_cart.utils.logging import get_logger

logger = get_logger(__name__)


def _aware(value: datetime) -> datetime:
    # sqlite zwraca naive datetime, zapisujemy zawsze UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_item(model: CartItemModel) -> CartItem:
    return CartItem(
        id=model.id,
        product_id=model.product_id,
        product_name=model.product_name,
        quantity=model.quantity,
        price=model.price,
        plan_type=model.plan_type,
        data_allowance=model.data_allowance,
    )


def to_cart(model: CartModel) -> Cart:
    return Cart(
        id=model.id,
        user_id=model.user_id,
        created_at=_aware(model.created_at),
        updated_at=_aware(model.updated_at),
        items=tuple(to_item(i) for i in model.items),
    )


class SqlCartStore(CartStore):
    """Magazyn koszykow na SQLAlchemy, jedna sesja na request."""

    def __init__(self, db: Session):
        self.db = db
        # tylko dla sqlite w pamieci (StaticPool), inaczej None
        self._lock = connection_lock(db.get_bind())

    @contextmanager
    def unit_of_work(self):
        with self._lock if self._lock is not None else nullcontext():
            try:
                yield
            finally:
                # oddaje polaczenie do puli zanim inny request dostanie lock
                self.db.close()

    @contextmanager
    def _errors(self, action: str):
        try:
            yield
        except CartError:
            raise
        except SQLAlchemyError as e:
            logger.error(f"Blad bazy podczas operacji '{action}': {e}")
            self.db.rollback()
            raise StoreError(f"Failed to {action}") from e

    def _load_cart(self, user_id: str) -> CartModel | None:
        stmt = (
            select(CartModel)
            .options(selectinload(CartModel.items))
            .where(CartModel.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def find_cart_by_user(self, user_id: str) -> Cart | None:
        with self._errors("read cart"):
            cart = self._load_cart(user_id)
            return to_cart(cart) if cart else None

    def create_cart(self, user_id: str) -> Cart:
        with self._errors("create cart"):
            cart = CartModel(user_id=user_id)
            self.db.add(cart)
            try:
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                raise ConflictError(f"Cart already exists for user {user_id}") from e
            self.db.refresh(cart)
            return to_cart(cart)

    def find_item_with_owner(self, item_id: str) -> Tuple[CartItem, str] | None:
        with self._errors("read item"):
            row = self.db.execute(
                select(CartItemModel, CartModel.user_id)
                .join(CartModel, CartItemModel.cart_id == CartModel.id)
                .where(CartItemModel.id == item_id)
            ).first()
            if row is None:
                return None
            item, owner = row
            return to_item(item), owner

    def insert_item(self, cart_id: str, item: NewCartItem) -> CartItem:
        with self._errors("insert item"):
            next_seq = self.db.execute(
                select(func.coalesce(func.max(CartItemModel.seq), 0) + 1)
                .where(CartItemModel.cart_id == cart_id)
            ).scalar_one()

            model = CartItemModel(
                cart_id=cart_id,
                seq=next_seq,
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity,
                price=item.price,
                plan_type=item.plan_type,
                data_allowance=item.data_allowance,
            )
            self.db.add(model)
            self.db.flush()
            return to_item(model)

    def update_item(self, item_id: str, update: ItemUpdate) -> None:
        with self._errors("update item"):
            model = self.db.get(CartItemModel, item_id)
            if model is None:
                raise NotFoundError("Item not found in cart")
            for name, value in update.as_fields().items():
                setattr(model, name, value)
            self.db.flush()

    def delete_item(self, item_id: str) -> None:
        with self._errors("delete item"):
            self.db.execute(
                delete(CartItemModel)
                .where(CartItemModel.id == item_id)
                .execution_options(synchronize_session="fetch")
            )

    def delete_all_items(self, cart_id: str) -> None:
        with self._errors("clear cart"):
            self.db.execute(
                delete(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .execution_options(synchronize_session="fetch")
            )

    def touch_cart(self, cart_id: str, at: datetime) -> None:
        with self._errors("touch cart"):
            # warunek na updated_at - znacznik czasu tylko do przodu
            self.db.execute(
                update(CartModel)
                .where(CartModel.id == cart_id, CartModel.updated_at < at)
                .values(updated_at=at)
                .execution_options(synchronize_session=False)
            )

    def reload(self, user_id: str) -> Cart:
        with self._errors("reload cart"):
            cart = self._load_cart(user_id)
            if cart is None:
                raise StoreError(f"Cart for user {user_id} disappeared")
            return to_cart(cart)

    def commit(self) -> None:
        with self._errors("commit"):
            self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def ping(self) -> None:
        with self.unit_of_work(), self._errors("reach database"):
            self.db.execute(text("SELECT 1"))
