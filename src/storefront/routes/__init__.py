from storefront.routes.admin import admin_bp
from storefront.routes.cart import cart_bp

__all__ = ["admin_bp", "cart_bp"]
