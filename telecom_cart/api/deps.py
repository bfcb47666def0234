# telecom_cart/api/deps.py
from typing import Iterator

from fastapi import Depends, Request

from telecom_cart.repos.cart_store import CartStore
from telecom_cart.repos.sql_cart_store import SqlCartStore
from telecom_cart.services.cart_service import CartService


def get_store(request: Request) -> Iterator[CartStore]:
    # tryb "memory" - jeden magazyn na proces trzymany w app.state, bez sesji SQL
    memory_store = getattr(request.app.state, "memory_store", None)
    if memory_store is not None:
        yield memory_store
        return

    db = request.app.state.session_factory()
    try:
        yield SqlCartStore(db)
    finally:
        db.close()


def get_service(request: Request, store: CartStore = Depends(get_store)) -> CartService:
    return CartService(
        store=store,
        cache=getattr(request.app.state, "snapshot_cache", None),
    )
