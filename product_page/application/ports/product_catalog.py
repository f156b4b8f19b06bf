from __future__ import annotations

from abc import ABC, abstractmethod

from product_page.domain.entities.product import Product, ProductColor, ProductImage
from product_page.domain.entities.selection_state import SelectionState


class ProductCatalogPort(ABC):
    @abstractmethod
    def get_product(self) -> Product:
        raise NotImplementedError

    @abstractmethod
    def get_image(self, image_id: int) -> ProductImage:
        """Return the image with this id, falling back to the first image."""
        raise NotImplementedError

    @abstractmethod
    def has_image(self, image_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get_color(self, code: str) -> ProductColor | None:
        raise NotImplementedError

    @abstractmethod
    def has_size(self, size: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def default_selection(self) -> SelectionState:
        """Selection a new session starts from: first image, nothing chosen, quantity 1."""
        raise NotImplementedError
