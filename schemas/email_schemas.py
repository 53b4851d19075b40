import os
from dotenv import load_dotenv
from fastapi_mail import ConnectionConfig
from pydantic import BaseModel, ConfigDict
from typing import List, Literal, Optional, Union


load_dotenv()

conf = ConnectionConfig(
    MAIL_USERNAME=os.getenv("MAIL_USERNAME", ""),
    MAIL_PASSWORD=os.getenv("MAIL_PASSWORD", ""),
    MAIL_FROM=os.getenv("MAIL_FROM", "noreply@tupperstock.com"),
    MAIL_PORT=int(os.getenv("MAIL_PORT", "587")),
    MAIL_SERVER=os.getenv("MAIL_SERVER", "smtp.resend.com"),
    MAIL_FROM_NAME=os.getenv("MAIL_FROM_NAME", "TupperStock"),
    MAIL_STARTTLS=os.getenv("MAIL_STARTTLS", "true").lower() == "true",
    MAIL_SSL_TLS=os.getenv("MAIL_SSL_TLS", "false").lower() == "true",
    USE_CREDENTIALS=bool(os.getenv("MAIL_USERNAME")),
    VALIDATE_CERTS=True,
    SUPPRESS_SEND=int(os.getenv("MAIL_SUPPRESS_SEND", "0")),
)


class EmailItemSchema(BaseModel):
    title: str
    quantity: int
    price: str
    variantTitle: Optional[str] = None
    image: Optional[str] = None


class EmailCustomerSchema(BaseModel):
    # the platform may hand back a full customer record
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[int, str]] = None
    first_name: Optional[str] = ""
    last_name: Optional[str] = ""
    email: Optional[str] = None
    phone: Optional[str] = None


class ShippingAddressSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    first_name: Optional[str] = ""
    last_name: Optional[str] = ""
    address1: Optional[str] = ""
    address2: Optional[str] = None
    city: Optional[str] = ""
    country: Optional[str] = ""
    zip: Optional[str] = ""
    phone: Optional[str] = None


class PickupDetailsSchema(BaseModel):
    date: Optional[str] = None
    time: Optional[str] = None


class OrderConfirmationSchema(BaseModel):
    orderId: str
    orderName: str
    customer: Optional[EmailCustomerSchema] = None
    items: List[EmailItemSchema]
    total: str
    currency: str = "EUR"
    shippingAddress: Optional[ShippingAddressSchema] = None
    deliveryOption: Literal["pickup", "delivery"]
    pickupDetails: Optional[PickupDetailsSchema] = None
    note: Optional[str] = None
    createdAt: str


class SendTestEmailSchema(BaseModel):
    email: Optional[str] = None
    testType: Optional[str] = None
    customerStructure: Optional[str] = None


__all__ = ["conf", "EmailItemSchema", "EmailCustomerSchema", "ShippingAddressSchema",
           "PickupDetailsSchema", "OrderConfirmationSchema", "SendTestEmailSchema"]
