#telecom_cart/api/routers/carts.py
from fastapi import APIRouter, Depends, status

from telecom_cart.api.deps import get_service
from telecom_cart.domain.schemas import (
    ItemIn,
    ItemUpdateIn,
    CartOut,
    CartTotalOut,
)
from telecom_cart.services.cart_service import CartService

router = APIRouter(prefix="/api/cart", tags=["cart"])


@router.get("/{user_id}", response_model=CartOut)
def get_cart(user_id: str, svc: CartService = Depends(get_service)):
    return svc.get_cart(user_id)


@router.post("/{user_id}/items", response_model=CartOut, status_code=status.HTTP_201_CREATED)
def add_item(user_id: str, payload: ItemIn, svc: CartService = Depends(get_service)):
    return svc.add_item(user_id, payload.to_new_item())


@router.put("/{user_id}/items/{item_id}", response_model=CartOut)
def update_item(
    user_id: str,
    item_id: str,
    payload: ItemUpdateIn,
    svc: CartService = Depends(get_service),
):
    return svc.update_item(user_id, item_id, payload.to_update())


@router.delete("/{user_id}/items/{item_id}", response_model=CartOut)
def remove_item(user_id: str, item_id: str, svc: CartService = Depends(get_service)):
    return svc.remove_item(user_id, item_id)


@router.delete("/{user_id}", response_model=CartOut)
def clear_cart(user_id: str, svc: CartService = Depends(get_service)):
    return svc.clear_cart(user_id)


@router.get("/{user_id}/total", response_model=CartTotalOut)
def get_cart_total(user_id: str, svc: CartService = Depends(get_service)):
    return CartTotalOut(user_id=user_id, total=svc.get_cart_total(user_id))
