from product_page.infrastructure.catalog.product_catalog_store import ProductCatalogStore


def test_unknown_image_falls_back_to_first():
    catalog = ProductCatalogStore()

    assert catalog.get_image(2).id == 2
    assert catalog.get_image(99).id == 1
    assert not catalog.has_image(99)


def test_color_lookup_is_case_insensitive():
    catalog = ProductCatalogStore()

    assert catalog.get_color("#ffffff").name == "Branco"
    assert catalog.get_color("#123456") is None


def test_default_selection_uses_first_image():
    state = ProductCatalogStore().default_selection()

    assert state.main_image_id == 1
    assert state.quantity == 1
    assert state.selected_size == ""
    assert state.resolved_address is None
