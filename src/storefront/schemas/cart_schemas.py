from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from storefront.models.cart import CartLineItem


class CartLineItemSchema(BaseModel):
    """Line item as stored in the session store (browser field names)"""
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 7,
                "name": "Linen shirt",
                "price": "42.50",
                "image": "/uploads/linen-shirt.jpg",
                "quantity": 2,
                "selectedSize": "M",
                "subtotal": "85.00",
            }
        },
    )

    id: Union[int, str]
    name: str
    price: Decimal = Field(ge=0)
    image: Optional[str] = None
    quantity: int = Field(gt=0)
    selected_size: Optional[Union[str, int]] = Field(default=None, alias="selectedSize")
    subtotal: Optional[Decimal] = None

    def to_line_item(self) -> CartLineItem:
        # subtotal is derived; recomputing it keeps restored carts consistent
        return CartLineItem(
            id=self.id,
            name=self.name,
            price=self.price,
            quantity=self.quantity,
            selected_size=self.selected_size,
            image=self.image,
        )


SavedCart = TypeAdapter(List[CartLineItemSchema])


def parse_saved_cart(raw: Union[str, bytes]) -> List[CartLineItem]:
    """
    Decode the persisted cart.

    Raises pydantic.ValidationError for malformed JSON or items.
    """
    return [item.to_line_item() for item in SavedCart.validate_json(raw)]
