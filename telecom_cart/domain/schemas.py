# telecom_cart/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import List
from datetime import datetime

from telecom_cart.domain.cart import ItemUpdate, NewCartItem, PlanType
from telecom_cart.domain.errors import ValidationError


class CamelModel(BaseModel):
    """JSON w camelCase, na wejsciu akceptujemy tez snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ItemIn(CamelModel):
    """Schema dla dodawania pozycji (planu albo pakietu danych) do koszyka."""

    product_id: str = Field(..., min_length=1, description="ID produktu z katalogu")
    product_name: str = Field(..., min_length=1, description="Nazwa planu / pakietu")
    quantity: int = Field(..., gt=0, description="Ilosc (musi byc > 0)")
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Cena jednostkowa")
    plan_type: PlanType | None = Field(None, description="prepaid / postpaid, bez wzgledu na wielkosc liter")
    data_allowance: str | None = Field(None, description="Limit danych, np. 50GB")

    @field_validator("plan_type", mode="before")
    @classmethod
    def parse_plan_type(cls, value):
        try:
            return PlanType.parse(value)
        except ValidationError as e:
            # pydantic zamienia ValueError na blad walidacji requestu
            raise ValueError(e.message) from None

    def to_new_item(self) -> NewCartItem:
        return NewCartItem(
            product_id=self.product_id,
            product_name=self.product_name,
            quantity=self.quantity,
            price=self.price,
            plan_type=self.plan_type,
            data_allowance=self.data_allowance,
        )


class ItemUpdateIn(CamelModel):
    """Schema dla aktualizacji pozycji - oba pola opcjonalne."""

    quantity: int | None = Field(None, gt=0)
    price: float | None = Field(None, ge=0, allow_inf_nan=False)

    def to_update(self) -> ItemUpdate:
        return ItemUpdate(quantity=self.quantity, price=self.price)


class CartItemOut(CamelModel):
    """Schema dla pozycji w koszyku (response)."""

    id: str
    product_id: str
    product_name: str
    quantity: int
    price: float
    plan_type: PlanType | None = None
    data_allowance: str | None = None

    model_config = ConfigDict(from_attributes=True)


class CartOut(CamelModel):
    """Schema dla koszyka (response)."""

    id: str
    user_id: str
    items: List[CartItemOut]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CartTotalOut(CamelModel):
    user_id: str
    total: float
