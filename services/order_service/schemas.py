from typing import List, Optional

from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator

from .status import PaymentStatus


def _blank_to_none(value):
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class LineItemIn(BaseModel):
    # "_id" and "price" are what the storefront cart sends
    product_ref: str = Field(validation_alias=AliasChoices("productRef", "_id", "product_ref"))
    quantity: int = Field(gt=0)
    unit_price: float = Field(ge=0, validation_alias=AliasChoices("unitPrice", "price", "unit_price"))

    @field_validator("product_ref", mode="before")
    @classmethod
    def _coerce_ref(cls, value):
        if isinstance(value, int):
            value = str(value)
        return _blank_to_none(value)


class CustomerInfoIn(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, validation_alias=AliasChoices("zipCode", "zip_code"))
    country: Optional[str] = None
    user_id: Optional[str] = Field(None, validation_alias=AliasChoices("userId", "user_id"))

    @field_validator("*", mode="before")
    @classmethod
    def _strip(cls, value):
        return _blank_to_none(value)


class ShippingInfoIn(BaseModel):
    country: str
    postal_code: str = Field(validation_alias=AliasChoices("postalCode", "postal_code"))
    city: str
    address: str


class OrderCreate(BaseModel):
    """Checkout payload. Strict checks (items, name, email) happen in OrderService."""
    items: Optional[List[LineItemIn]] = None
    total_amount: Optional[float] = Field(None, ge=0, validation_alias=AliasChoices("totalAmount", "total_amount"))
    customer_info: Optional[CustomerInfoIn] = Field(None, validation_alias=AliasChoices("customerInfo", "customer_info"))
    payment_status: Optional[PaymentStatus] = Field(None, validation_alias=AliasChoices("paymentStatus", "payment_status"))
    user_ref: Optional[str] = Field(None, validation_alias=AliasChoices("userRef", "userId", "user_ref"))
    shipping_info: Optional[ShippingInfoIn] = Field(None, validation_alias=AliasChoices("shippingInfo", "shipping_info"))


class CustomerInfo(BaseModel):
    """Normalized customer block as stored: optional parts are empty strings, never null."""
    name: str
    email: str
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""

    def to_public(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
        }


class OrderCreated(BaseModel):
    order_id: int
    tracking_number: str
    order_number: str

