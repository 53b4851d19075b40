from pydantic import BaseModel, EmailStr, Field
from typing import List, Literal, Optional


class OrderItemSchema(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    price: float = 0
    quantity: int = Field(..., gt=0)
    image: Optional[str] = None
    variantId: str
    quantityAvailable: Optional[int] = None


class PickupFormSchema(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    date: Optional[str] = None
    time: Optional[str] = None


class DeliveryFormSchema(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone: str = Field(..., min_length=1)
    street: str
    number: str = ""
    city: Optional[str] = None
    postalCode: Optional[str] = None


class OrderSchema(BaseModel):
    items: Optional[List[OrderItemSchema]] = None
    deliveryOption: Optional[Literal["pickup", "delivery"]] = None
    pickupForm: Optional[PickupFormSchema] = None
    deliveryForm: Optional[DeliveryFormSchema] = None
    selectedLocation: Optional[str] = None
    totalPrice: float = 0


__all__ = ["OrderItemSchema", "PickupFormSchema",
           "DeliveryFormSchema", "OrderSchema"]
