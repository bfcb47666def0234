from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from starlette import status

from telecom_cart.api.deps import get_store
from telecom_cart.domain.errors import StoreError
from telecom_cart.repos.cart_store import CartStore

router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("")
def health():
    return "OK"


@router.get("/ready")
def ready(store: CartStore = Depends(get_store)):
    """Readiness - sprawdza czy magazyn koszykow odpowiada."""
    try:
        store.ping()
    except StoreError as e:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "error": e.message},
        )
    return {"status": "ready"}
