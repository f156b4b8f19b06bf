from __future__ import annotations

from product_page.application.ports.product_catalog import ProductCatalogPort
from product_page.domain.entities.product import Product, ProductColor, ProductImage
from product_page.domain.entities.selection_state import SelectionState
from product_page.infrastructure.catalog.product_catalog_data import PRODUCT


class ProductCatalogStore(ProductCatalogPort):
    def __init__(self, product: Product | None = None) -> None:
        self._product = product or PRODUCT
        if not self._product.images:
            raise ValueError("Product catalog needs at least one image")

    def get_product(self) -> Product:
        return self._product

    def get_image(self, image_id: int) -> ProductImage:
        for image in self._product.images:
            if image.id == image_id:
                return image
        return self._product.images[0]

    def has_image(self, image_id: int) -> bool:
        return any(image.id == image_id for image in self._product.images)

    def get_color(self, code: str) -> ProductColor | None:
        normalized = code.strip().upper()
        for color in self._product.colors:
            if color.code.upper() == normalized:
                return color
        return None

    def has_size(self, size: str) -> bool:
        return size in self._product.sizes

    def default_selection(self) -> SelectionState:
        return SelectionState(main_image_id=self._product.images[0].id)
