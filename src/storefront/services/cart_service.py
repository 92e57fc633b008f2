import json
import logging
from decimal import Decimal
from typing import Tuple

from pydantic import ValidationError as PydanticValidationError

from storefront.models.cart import (
    CartAction, CartActionType, CartLineItem, CartState, ProductId, Size
)
from storefront.models.product import Product
from storefront.repositories.session_store import CART_STORAGE_KEY, SessionStore, SessionStoreError
from storefront.schemas.cart_schemas import parse_saved_cart
from storefront.services.cart_reducer import cart_reducer

logger = logging.getLogger(__name__)


class CartService:
    """
    Shopping cart for one client session

    Responsibilities:
    - Own the single live CartState for the session
    - Translate cart operations into reducer actions
    - Mirror the item list to the session store after every action
    - Hydrate from the session store once, at construction

    Persistence problems are logged and never raised: a broken store means
    an empty cart, not a failed page.
    """

    def __init__(self, store: SessionStore, storage_key: str = CART_STORAGE_KEY):
        self.store = store
        self.storage_key = storage_key
        self.state = CartState()
        self._hydrate()

    @property
    def items(self) -> Tuple[CartLineItem, ...]:
        return self.state.items

    @property
    def selected_size(self) -> Size:
        return self.state.selected_size

    def dispatch(self, action: CartAction) -> CartState:
        self.state = cart_reducer(self.state, action)
        self._persist()
        return self.state

    def add_to_cart(self, product: Product, quantity: int, selected_size: Size = None) -> CartState:
        """Add quantity of product; the promoted price is frozen into the line item."""
        final_price = product.final_price
        logger.debug(f"Adding product {product.id} (size {selected_size!r}) x{quantity} at {final_price}")
        return self.dispatch(CartAction(
            CartActionType.ADD_ITEM,
            CartLineItem(
                id=product.id,
                name=product.name,
                price=final_price,
                image=product.banner,
                quantity=quantity,
                selected_size=selected_size,
                subtotal=final_price * quantity,
            ),
        ))

    def remove_from_cart(self, product_id: ProductId, selected_size: Size = None) -> CartState:
        return self.dispatch(CartAction(
            CartActionType.REMOVE_ITEM,
            {"id": product_id, "selected_size": selected_size},
        ))

    def update_quantity(self, product_id: ProductId, selected_size: Size, quantity: int) -> CartState:
        if quantity <= 0:
            return self.remove_from_cart(product_id, selected_size)
        return self.dispatch(CartAction(
            CartActionType.UPDATE_QUANTITY,
            {"id": product_id, "selected_size": selected_size, "quantity": quantity},
        ))

    def clear_cart(self) -> CartState:
        return self.dispatch(CartAction(CartActionType.CLEAR_CART))

    def set_selected_size(self, selected_size: Size) -> CartState:
        return self.dispatch(CartAction(CartActionType.SET_SELECTED_SIZE, selected_size))

    def cart_total(self) -> Decimal:
        return self.state.total

    def item_count(self) -> int:
        return self.state.item_count

    def serialize_items(self) -> str:
        return json.dumps([item.to_dict() for item in self.state.items])

    def _persist(self) -> None:
        # Always the full item list; selected_size is not persisted
        try:
            self.store.set(self.storage_key, self.serialize_items())
        except SessionStoreError as e:
            logger.error(f"Could not persist cart: {e}")

    def _hydrate(self) -> None:
        try:
            raw = self.store.get(self.storage_key)
        except SessionStoreError as e:
            logger.warning(f"Could not read saved cart, starting empty: {e}")
            return

        if raw is None:
            return

        try:
            saved_items = parse_saved_cart(raw)
        except PydanticValidationError as e:
            logger.warning(f"Ignoring unreadable saved cart: {e.error_count()} error(s)")
            return

        self.dispatch(CartAction(CartActionType.RESTORE_CART, saved_items))
