from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Path

from product_page.api.v1.schemas import (
    AddressSchema, AdjustQuantityRequestSchema, CatalogSchema, ColorSchema, ImageSchema,
    LookupResponseSchema, PostalCodeRequestSchema, SelectColorRequestSchema,
    SelectImageRequestSchema, SelectionSchema, SelectSizeRequestSchema, SessionResponseSchema,
)
from product_page.application.ports.product_catalog import ProductCatalogPort
from product_page.application.use_cases.resolve_address import AddressResolutionPipeline
from product_page.application.use_cases.session_state_cache import SessionStateCache
from product_page.wiring.dependencies import get_product_catalog, get_resolution_pipeline, get_session_cache

router = APIRouter()
logger = logging.getLogger(__name__)

SESSION_ID_PATTERN = r"^[A-Za-z0-9_-]{1,64}$"


def session_cache(session_id: str = Path(pattern=SESSION_ID_PATTERN)) -> SessionStateCache:
    return get_session_cache(session_id)


def _session_response(session_id: str, cache: SessionStateCache, catalog: ProductCatalogPort) -> SessionResponseSchema:
    state = cache.state
    color = catalog.get_color(state.selected_color) if state.selected_color else None
    address = state.resolved_address
    return SessionResponseSchema(
        session_id=session_id,
        selection=SelectionSchema(
            main_image_id=state.main_image_id,
            selected_size=state.selected_size,
            selected_color=state.selected_color,
            quantity=state.quantity,
            postal_code=state.postal_code,
            resolved_address=AddressSchema(**asdict(address)) if address else None,
        ),
        main_image=ImageSchema(**asdict(catalog.get_image(state.main_image_id))),
        selected_color_name=color.name if color else None,
        error=cache.error,
        loading=cache.loading,
    )


@router.get("/catalog", response_model=CatalogSchema)
def get_catalog(catalog: ProductCatalogPort = Depends(get_product_catalog)):
    product = catalog.get_product()
    return CatalogSchema(
        id=product.id,
        title=product.title,
        description=product.description,
        price=product.price,
        discount_price=product.discount_price,
        images=[ImageSchema(**asdict(image)) for image in product.images],
        sizes=list(product.sizes),
        colors=[ColorSchema(**asdict(color)) for color in product.colors],
        stock=product.stock,
        rating=product.rating,
        reviews=product.reviews,
    )


@router.get("/sessions/{session_id}", response_model=SessionResponseSchema)
def get_session(
    session_id: str,
    cache: SessionStateCache = Depends(session_cache),
    catalog: ProductCatalogPort = Depends(get_product_catalog),
):
    return _session_response(session_id, cache, catalog)


@router.put("/sessions/{session_id}/image", response_model=SessionResponseSchema)
def select_image(
    session_id: str,
    req: SelectImageRequestSchema,
    cache: SessionStateCache = Depends(session_cache),
    catalog: ProductCatalogPort = Depends(get_product_catalog),
):
    if not catalog.has_image(req.image_id):
        raise HTTPException(status_code=400, detail=f"Unknown image id {req.image_id}")
    cache.select_image(req.image_id)
    return _session_response(session_id, cache, catalog)


@router.put("/sessions/{session_id}/size", response_model=SessionResponseSchema)
def select_size(
    session_id: str,
    req: SelectSizeRequestSchema,
    cache: SessionStateCache = Depends(session_cache),
    catalog: ProductCatalogPort = Depends(get_product_catalog),
):
    if req.size and not catalog.has_size(req.size):
        raise HTTPException(status_code=400, detail=f"Unknown size {req.size!r}")
    cache.select_size(req.size)
    return _session_response(session_id, cache, catalog)


@router.put("/sessions/{session_id}/color", response_model=SessionResponseSchema)
def select_color(
    session_id: str,
    req: SelectColorRequestSchema,
    cache: SessionStateCache = Depends(session_cache),
    catalog: ProductCatalogPort = Depends(get_product_catalog),
):
    color = catalog.get_color(req.color_code) if req.color_code else None
    if req.color_code and color is None:
        raise HTTPException(status_code=400, detail=f"Unknown color {req.color_code!r}")
    cache.select_color(color.code if color else "")
    return _session_response(session_id, cache, catalog)


@router.post("/sessions/{session_id}/quantity", response_model=SessionResponseSchema)
def adjust_quantity(
    session_id: str,
    req: AdjustQuantityRequestSchema,
    cache: SessionStateCache = Depends(session_cache),
    catalog: ProductCatalogPort = Depends(get_product_catalog),
):
    cache.set_quantity(req.delta, catalog.get_product().stock)
    return _session_response(session_id, cache, catalog)


@router.post("/sessions/{session_id}/postal-code", response_model=LookupResponseSchema)
async def submit_postal_code(
    session_id: str,
    req: PostalCodeRequestSchema,
    cache: SessionStateCache = Depends(session_cache),
    catalog: ProductCatalogPort = Depends(get_product_catalog),
    pipeline: AddressResolutionPipeline = Depends(get_resolution_pipeline),
):
    if cache.loading:
        logger.info("Postal code submit rejected while lookup in flight", extra={"session_id": session_id})
        raise HTTPException(status_code=409, detail="Address lookup already in progress")

    cache.set_postal_code(req.postal_code)
    outcome = await pipeline.submit(cache)
    return LookupResponseSchema(
        status=outcome.status,
        error=outcome.error,
        session=_session_response(session_id, cache, catalog),
    )
