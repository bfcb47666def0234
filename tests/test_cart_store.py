from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from telecom_cart.domain.cart import ItemUpdate, NewCartItem, PlanType
from telecom_cart.domain.errors import ConflictError, NotFoundError, StoreError
from telecom_cart.repos.sql_cart_store import SqlCartStore


def make_item(product_id="prod-001", **overrides):
    fields = dict(
        product_id=product_id,
        product_name="Unlimited Talk",
        quantity=1,
        price=25.0,
        plan_type=PlanType.PREPAID,
    )
    fields.update(overrides)
    return NewCartItem(**fields)


def test_find_cart_by_user_returns_none_when_absent(store):
    assert store.find_cart_by_user("nobody") is None


def test_create_cart_is_unique_per_user(store):
    created = store.create_cart("alice")

    with pytest.raises(ConflictError):
        store.create_cart("alice")

    assert store.find_cart_by_user("alice").id == created.id


def test_get_or_create_rereads_winner_after_conflict(store):
    winner = store.create_cart("alice")
    real_find = store.find_cart_by_user

    # pierwszy odczyt "przegrywa" wyscig, kolejny widzi koszyk zwyciezcy
    with patch.object(store, "find_cart_by_user", side_effect=[None, real_find("alice")]):
        cart = store.get_or_create_cart("alice")

    assert cart.id == winner.id


def test_insert_item_appends_in_order(store):
    cart = store.create_cart("alice")

    first = store.insert_item(cart.id, make_item("prod-001"))
    second = store.insert_item(cart.id, make_item("prod-002"))
    store.commit()

    reloaded = store.reload("alice")
    assert [i.id for i in reloaded.items] == [first.id, second.id]
    assert first.id != second.id


def test_find_item_with_owner(store):
    cart = store.create_cart("alice")
    item = store.insert_item(cart.id, make_item())
    store.commit()

    found, owner = store.find_item_with_owner(item.id)

    assert found == item
    assert owner == "alice"
    assert store.find_item_with_owner("missing") is None


def test_update_item_applies_only_given_fields(store):
    cart = store.create_cart("alice")
    item = store.insert_item(cart.id, make_item(quantity=1, price=25.0))
    store.update_item(item.id, ItemUpdate(price=30.0))
    store.commit()

    updated = store.reload("alice").items[0]
    assert updated.price == 30.0
    assert updated.quantity == 1
    assert updated.plan_type is PlanType.PREPAID


def test_update_missing_item_raises_not_found(store):
    with pytest.raises(NotFoundError, match="Item not found in cart"):
        store.update_item("missing", ItemUpdate(quantity=2))


def test_delete_all_items_only_hits_one_cart(store):
    alice = store.create_cart("alice")
    bob = store.create_cart("bob")
    store.insert_item(alice.id, make_item())
    store.insert_item(alice.id, make_item("prod-002"))
    store.insert_item(bob.id, make_item())
    store.delete_all_items(alice.id)
    store.commit()

    assert store.reload("alice").items == ()
    assert len(store.reload("bob").items) == 1


def test_touch_cart_only_moves_forward(store):
    cart = store.create_cart("alice")
    earlier = cart.created_at - timedelta(days=365)
    later = cart.created_at + timedelta(days=365)

    store.touch_cart(cart.id, earlier)
    store.commit()
    assert store.reload("alice").updated_at == cart.updated_at

    store.touch_cart(cart.id, later)
    store.commit()
    assert store.reload("alice").updated_at == later


def test_reload_missing_cart_raises_store_error(store):
    with pytest.raises(StoreError):
        store.reload("ghost")


def test_memory_insert_into_unknown_cart(memory_store):
    with pytest.raises(StoreError):
        memory_store.insert_item("no-such-cart", make_item())


def test_sql_plan_type_stored_upper_case(sql_store, db_session):
    cart = sql_store.create_cart("alice")
    sql_store.insert_item(cart.id, make_item(plan_type=PlanType.POSTPAID))
    sql_store.commit()

    stored = db_session.execute(text("SELECT plan_type FROM cart_items")).scalar_one()
    assert stored == "POSTPAID"


def test_sql_errors_become_store_errors():
    session = MagicMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection refused"))
    store = SqlCartStore(session)

    with pytest.raises(StoreError, match="Failed to read cart"):
        store.find_cart_by_user("alice")
    session.rollback.assert_called_once()

    with pytest.raises(StoreError):
        store.ping()


def test_sql_ping(sql_store):
    sql_store.ping()
