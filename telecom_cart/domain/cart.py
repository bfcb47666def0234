# telecom_cart/domain/cart.py
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Tuple

from telecom_cart.domain.errors import ValidationError


class PlanType(str, Enum):
    PREPAID = "PREPAID"
    POSTPAID = "POSTPAID"

    @classmethod
    def parse(cls, raw: "str | PlanType | None") -> "PlanType | None":
        """Parsowanie bez wzgledu na wielkosc liter, robione raz na wejsciu."""
        if raw is None or isinstance(raw, cls):
            return raw
        try:
            return cls[str(raw).strip().upper()]
        except KeyError:
            raise ValidationError(
                f"Invalid planType '{raw}', expected one of: prepaid, postpaid",
                field="planType",
            ) from None


@dataclass(frozen=True)
class CartItem:
    id: str
    product_id: str
    product_name: str
    quantity: int
    price: float
    plan_type: PlanType | None = None
    data_allowance: str | None = None

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity


@dataclass(frozen=True)
class Cart:
    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime
    items: Tuple[CartItem, ...] = field(default_factory=tuple)

    @property
    def total(self) -> float:
        # bez zaokraglania, float jak w kontrakcie API
        total = 0.0
        for item in self.items:
            total += item.subtotal
        return total


@dataclass(frozen=True)
class NewCartItem:
    product_id: str
    product_name: str
    quantity: int
    price: float
    plan_type: PlanType | None = None
    data_allowance: str | None = None

    def validate(self) -> None:
        if not self.product_id or not self.product_id.strip():
            raise ValidationError("productId must not be empty", field="productId")
        if not self.product_name or not self.product_name.strip():
            raise ValidationError("productName must not be empty", field="productName")
        _check_quantity(self.quantity)
        _check_price(self.price)


@dataclass(frozen=True)
class ItemUpdate:
    """Czesciowa aktualizacja - tylko quantity i price sa modyfikowalne."""

    quantity: int | None = None
    price: float | None = None

    def validate(self) -> None:
        if self.quantity is not None:
            _check_quantity(self.quantity)
        if self.price is not None:
            _check_price(self.price)

    def as_fields(self) -> Dict[str, Any]:
        fields = {}
        if self.quantity is not None:
            fields["quantity"] = self.quantity
        if self.price is not None:
            fields["price"] = self.price
        return fields


def _check_quantity(quantity: int) -> None:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
        raise ValidationError("quantity must be a positive integer", field="quantity")


def _check_price(price: float) -> None:
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise ValidationError("price must be a non-negative number", field="price")
    # tylko skonczone liczby, bez inf/nan
    if not math.isfinite(price) or price < 0:
        raise ValidationError("price must be a finite, non-negative number", field="price")
