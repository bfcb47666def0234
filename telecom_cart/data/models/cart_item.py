import uuid

from sqlalchemy import Column, Integer, ForeignKey, String, Float, Enum
from sqlalchemy.orm import relationship

from telecom_cart.data.database import Base
from telecom_cart.domain.cart import PlanType


class CartItemModel(Base):
    __tablename__ = "cart_items"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    cart_id = Column(String(36), ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    # kolejnosc dodania w obrebie koszyka
    seq = Column(Integer, nullable=False)

    product_id = Column(String, nullable=False)
    product_name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    plan_type = Column(Enum(PlanType, name="plan_type"), nullable=True)
    data_allowance = Column(String, nullable=True)

    cart = relationship("CartModel", back_populates="items")
