from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProductImage:
    id: int
    url: str
    title: str


@dataclass(frozen=True)
class ProductColor:
    id: int
    name: str
    code: str


@dataclass(frozen=True)
class Product:
    id: str
    title: str
    description: str
    price: float
    discount_price: float
    images: tuple[ProductImage, ...]
    sizes: tuple[str, ...]
    colors: tuple[ProductColor, ...]
    stock: int
    rating: float
    reviews: int
