# Importing all models here also ensures table models are registered with
# Base.metadata before any call to Base.metadata.create_all().

from storefront.models.admin import AdminAccount, AdminAccountModel, CredentialPatch
from storefront.models.cart import CartAction, CartActionType, CartLineItem, CartState
from storefront.models.product import Product

__all__ = [
    "AdminAccount",
    "AdminAccountModel",
    "CredentialPatch",
    "CartAction",
    "CartActionType",
    "CartLineItem",
    "CartState",
    "Product",
]
