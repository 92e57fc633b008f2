from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

ProductId = Union[int, str]
Size = Optional[Union[str, int]]


class CartActionType(str, Enum):
    """Transitions understood by cart_reducer"""
    ADD_ITEM = "ADD_ITEM"
    REMOVE_ITEM = "REMOVE_ITEM"
    UPDATE_QUANTITY = "UPDATE_QUANTITY"
    CLEAR_CART = "CLEAR_CART"
    SET_SELECTED_SIZE = "SET_SELECTED_SIZE"
    RESTORE_CART = "RESTORE_CART"


@dataclass(frozen=True)
class CartLineItem:
    """
    One product + size pair in the cart.

    price is the unit price after promotion at the moment the item was added;
    it never changes afterwards. subtotal is kept equal to price * quantity.
    """
    id: ProductId
    name: str
    price: Decimal
    quantity: int
    selected_size: Size = None
    image: Optional[str] = None
    subtotal: Optional[Decimal] = None

    def __post_init__(self):
        if self.subtotal is None:
            object.__setattr__(self, "subtotal", self.price * self.quantity)

    def matches(self, product_id: ProductId, selected_size: Size) -> bool:
        return self.id == product_id and self.selected_size == selected_size

    def with_quantity(self, quantity: int) -> "CartLineItem":
        """Copy with a new quantity and recomputed subtotal"""
        return replace(self, quantity=quantity, subtotal=self.price * quantity)

    def to_dict(self) -> Dict[str, Any]:
        """Storage/JSON shape, field names as the browser client expects them"""
        return {
            "id": self.id,
            "name": self.name,
            "price": str(self.price),
            "image": self.image,
            "quantity": self.quantity,
            "selectedSize": self.selected_size,
            "subtotal": str(self.subtotal),
        }


@dataclass(frozen=True)
class CartState:
    items: Tuple[CartLineItem, ...] = ()
    selected_size: Size = None  # UI selection only, never persisted

    @property
    def total(self) -> Decimal:
        return sum((item.subtotal for item in self.items), Decimal("0"))

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def is_empty(self) -> bool:
        return len(self.items) == 0

    def find(self, product_id: ProductId, selected_size: Size) -> Optional[CartLineItem]:
        return next((item for item in self.items if item.matches(product_id, selected_size)), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "selectedSize": self.selected_size,
            "total": str(self.total),
            "itemCount": self.item_count,
        }


@dataclass(frozen=True)
class CartAction:
    type: CartActionType
    payload: Any = None
