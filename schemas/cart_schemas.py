from pydantic import BaseModel, Field
from typing import List, Optional


class CartItem(BaseModel):
    id: str
    name: str
    price: float
    quantity: int
    image: Optional[str] = None
    variantId: str
    quantityAvailable: Optional[int] = None


class Cart(BaseModel):
    items: List[CartItem] = []
    totalItems: int = 0
    totalPrice: float = 0


class CartProductSchema(BaseModel):
    # snapshot of the product/variant the shopper picked
    id: str
    name: str
    price: float = Field(..., ge=0)
    image: Optional[str] = None
    variantId: str
    quantityAvailable: Optional[int] = None


class UpdateQuantitySchema(BaseModel):
    variantId: str
    quantity: int


class RemoveCartItemSchema(BaseModel):
    variantId: str


__all__ = ["CartItem", "Cart", "CartProductSchema",
           "UpdateQuantitySchema", "RemoveCartItemSchema"]
