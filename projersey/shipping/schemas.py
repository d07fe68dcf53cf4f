from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .service import ShipmentItem, ShippingAddress, ShippingQuote


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShippingAddressV1(_CamelModel):
    # Presence of street/city/... is checked by the route to return a 400
    name: str = ""
    street: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""

    def to_domain(self) -> ShippingAddress:
        return ShippingAddress(
            name=self.name,
            street=self.street,
            city=self.city,
            state=self.state,
            postal_code=self.postal_code,
            country=self.country,
        )


class ShipmentItemV1(_CamelModel):
    quantity: int = Field(ge=1)
    weight: Optional[float] = None
    size: Optional[str] = None

    def to_domain(self) -> ShipmentItem:
        return ShipmentItem(quantity=self.quantity, weight=self.weight, size=self.size)


class ShippingCalculateInputV1(_CamelModel):
    shipping_address: ShippingAddressV1
    items: List[ShipmentItemV1] = Field(min_length=1)
    subtotal: int = Field(ge=0, description="Subtotal after discounts, minor units")


class ShippingOptionV1(_CamelModel):
    id: str
    name: str
    description: str
    price: int
    estimated_delivery: str


class ShippingCalculateOutputV1(_CamelModel):
    shipping_options: List[ShippingOptionV1]
    base_shipping_cost: int
    recommended_option_id: str

    @classmethod
    def from_domain(cls, q: ShippingQuote) -> "ShippingCalculateOutputV1":
        return cls(
            shipping_options=[
                ShippingOptionV1(
                    id=o.id,
                    name=o.name,
                    description=o.description,
                    price=o.price_minor,
                    estimated_delivery=o.estimated_delivery,
                )
                for o in q.options
            ],
            base_shipping_cost=q.base_shipping_cost,
            recommended_option_id=q.recommended_option_id,
        )


class AddressValidateInputV1(_CamelModel):
    address: ShippingAddressV1
