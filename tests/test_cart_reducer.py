from decimal import Decimal

from storefront.models.cart import CartAction, CartActionType, CartLineItem, CartState
from storefront.services.cart_reducer import cart_reducer


def line(product_id=7, size="M", quantity=1, price="50", name="Linen shirt"):
    return CartLineItem(
        id=product_id,
        name=name,
        price=Decimal(price),
        quantity=quantity,
        selected_size=size,
    )


def add(state, item):
    return cart_reducer(state, CartAction(CartActionType.ADD_ITEM, item))


def test_add_item_appends_new_line():
    state = add(CartState(), line())
    assert len(state.items) == 1
    assert state.items[0].subtotal == Decimal("50")


def test_add_same_product_and_size_merges_quantities():
    state = add(CartState(), line(quantity=2))
    state = add(state, line(quantity=1))

    assert len(state.items) == 1
    assert state.items[0].quantity == 3
    assert state.items[0].subtotal == Decimal("150")


def test_merge_keeps_price_frozen_on_existing_line():
    state = add(CartState(), line(quantity=1, price="50"))
    state = add(state, line(quantity=1, price="40"))

    assert state.items[0].price == Decimal("50")
    assert state.items[0].subtotal == Decimal("100")


def test_same_product_different_sizes_are_distinct_lines():
    state = add(CartState(), line(size="M"))
    state = add(state, line(size="L"))

    assert [item.selected_size for item in state.items] == ["M", "L"]


def test_merge_updates_line_in_place_and_preserves_order():
    state = add(CartState(), line(product_id=1))
    state = add(state, line(product_id=2))
    state = add(state, line(product_id=1, quantity=4))

    assert [item.id for item in state.items] == [1, 2]
    assert state.items[0].quantity == 5


def test_reducer_does_not_mutate_input_state():
    before = add(CartState(), line(quantity=1))
    after = add(before, line(quantity=2))

    assert before.items[0].quantity == 1
    assert after.items[0].quantity == 3


def test_remove_item_only_drops_matching_size():
    state = add(add(CartState(), line(size="M")), line(size="L"))
    state = cart_reducer(state, CartAction(CartActionType.REMOVE_ITEM, {"id": 7, "selected_size": "M"}))

    assert [item.selected_size for item in state.items] == ["L"]


def test_remove_missing_item_is_noop():
    state = add(CartState(), line())
    after = cart_reducer(state, CartAction(CartActionType.REMOVE_ITEM, {"id": 99, "selected_size": "M"}))
    assert after.items == state.items


def test_update_quantity_recomputes_subtotal():
    state = add(CartState(), line(quantity=1, price="12.50"))
    state = cart_reducer(state, CartAction(
        CartActionType.UPDATE_QUANTITY, {"id": 7, "selected_size": "M", "quantity": 4}
    ))

    assert state.items[0].quantity == 4
    assert state.items[0].subtotal == Decimal("50.00")


def test_update_quantity_to_zero_or_less_removes_and_is_idempotent():
    state = add(CartState(), line())
    for quantity in (0, -1):
        state = cart_reducer(state, CartAction(
            CartActionType.UPDATE_QUANTITY, {"id": 7, "selected_size": "M", "quantity": quantity}
        ))
        assert state.items == ()


def test_clear_then_restore_reproduces_saved_items():
    state = add(add(CartState(), line(product_id=1)), line(product_id=2, size=None))
    saved = state.items

    state = cart_reducer(state, CartAction(CartActionType.CLEAR_CART))
    assert state.is_empty

    state = cart_reducer(state, CartAction(CartActionType.RESTORE_CART, list(saved)))
    assert state.items == saved


def test_set_selected_size_leaves_items_alone():
    state = add(CartState(), line())
    after = cart_reducer(state, CartAction(CartActionType.SET_SELECTED_SIZE, "XL"))

    assert after.selected_size == "XL"
    assert after.items == state.items


def test_unknown_action_returns_same_state():
    state = add(CartState(), line())
    assert cart_reducer(state, CartAction("APPLY_COUPON", "SUMMER")) is state


def test_total_and_count_follow_subtotals_through_any_sequence():
    state = CartState()
    actions = [
        CartAction(CartActionType.ADD_ITEM, line(product_id=1, quantity=2, price="19.99")),
        CartAction(CartActionType.ADD_ITEM, line(product_id=2, quantity=1, price="5")),
        CartAction(CartActionType.ADD_ITEM, line(product_id=1, quantity=1, price="19.99")),
        CartAction(CartActionType.UPDATE_QUANTITY, {"id": 2, "selected_size": "M", "quantity": 6}),
        CartAction(CartActionType.REMOVE_ITEM, {"id": 3, "selected_size": "M"}),
    ]
    for action in actions:
        state = cart_reducer(state, action)
        assert state.total == sum((item.subtotal for item in state.items), Decimal("0"))
        assert all(item.subtotal == item.price * item.quantity for item in state.items)

    assert state.total == Decimal("89.97")
    assert state.item_count == 9
