from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from storefront.models.cart import ProductId


@dataclass
class Product:
    """Catalog product as shown on the storefront"""
    id: ProductId
    name: str
    price: Decimal
    promotion: Decimal = Decimal("0")  # percent off, 0 when not on sale
    banner: Optional[str] = None

    @property
    def is_on_sale(self) -> bool:
        return self.promotion > 0

    @property
    def final_price(self) -> Decimal:
        """Price after the current promotion"""
        if self.is_on_sale:
            return self.price - (self.price * self.promotion) / 100
        return self.price
