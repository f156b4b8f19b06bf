from __future__ import annotations

from product_page.domain.entities.product import Product, ProductColor, ProductImage


PRODUCT = Product(
    id="12345",
    title="Tênis Esportivo Premium",
    description=(
        "Tênis esportivo com tecnologia de amortecimento avançada para máximo conforto "
        "durante corridas e atividades físicas."
    ),
    price=299.99,
    discount_price=249.99,
    images=(
        ProductImage(id=1, url="/AC_SY500_.jpg", title="adidas Men's Barreda Sneaker"),
        ProductImage(id=2, url="/AC_SX500_.jpg", title="adidas Men's Barricade Clay Tennis Shoe"),
        ProductImage(id=3, url="/_AC_SX500_.jpg", title="adidas Men's Run Falcon 5 Sneaker"),
    ),
    sizes=("35", "36", "37", "38", "39", "40", "41", "42", "43", "44"),
    colors=(
        ProductColor(id=1, name="Preto", code="#000000"),
        ProductColor(id=2, name="Branco", code="#FFFFFF"),
        ProductColor(id=3, name="Azul Marinho", code="#000080"),
        ProductColor(id=4, name="Vermelho", code="#FF0000"),
    ),
    stock=15,
    rating=4.5,
    reviews=128,
)
