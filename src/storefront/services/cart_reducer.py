from dataclasses import replace
from typing import Callable, Dict, Iterable

from storefront.models.cart import CartAction, CartActionType, CartLineItem, CartState


def _add_item(state: CartState, item: CartLineItem) -> CartState:
    existing = state.find(item.id, item.selected_size)
    if existing is None:
        return replace(state, items=state.items + (item,))

    # The price frozen on the existing line wins over the incoming one
    merged = existing.with_quantity(existing.quantity + item.quantity)
    return replace(
        state,
        items=tuple(merged if line is existing else line for line in state.items),
    )


def _remove_item(state: CartState, payload: Dict) -> CartState:
    product_id, size = payload["id"], payload.get("selected_size")
    return replace(
        state,
        items=tuple(line for line in state.items if not line.matches(product_id, size)),
    )


def _update_quantity(state: CartState, payload: Dict) -> CartState:
    if payload["quantity"] <= 0:
        return _remove_item(state, payload)

    product_id, size = payload["id"], payload.get("selected_size")
    return replace(
        state,
        items=tuple(
            line.with_quantity(payload["quantity"]) if line.matches(product_id, size) else line
            for line in state.items
        ),
    )


def _clear_cart(state: CartState, _payload) -> CartState:
    return replace(state, items=())


def _set_selected_size(state: CartState, size) -> CartState:
    return replace(state, selected_size=size)


def _restore_cart(state: CartState, items: Iterable[CartLineItem]) -> CartState:
    return replace(state, items=tuple(items))


_HANDLERS: Dict[CartActionType, Callable[[CartState, object], CartState]] = {
    CartActionType.ADD_ITEM: _add_item,
    CartActionType.REMOVE_ITEM: _remove_item,
    CartActionType.UPDATE_QUANTITY: _update_quantity,
    CartActionType.CLEAR_CART: _clear_cart,
    CartActionType.SET_SELECTED_SIZE: _set_selected_size,
    CartActionType.RESTORE_CART: _restore_cart,
}


def cart_reducer(state: CartState, action: CartAction) -> CartState:
    """
    Apply one action and return the next cart state.

    Pure: the input state is never modified. Unknown action types return
    the state unchanged.

    Payloads:
        ADD_ITEM           CartLineItem
        REMOVE_ITEM        {"id", "selected_size"}
        UPDATE_QUANTITY    {"id", "selected_size", "quantity"}; quantity <= 0 removes
        CLEAR_CART         None
        SET_SELECTED_SIZE  size value
        RESTORE_CART       iterable of CartLineItem
    """
    handler = _HANDLERS.get(action.type)
    if handler is None:
        return state
    return handler(state, action.payload)
