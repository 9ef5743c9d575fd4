"""FastAPI routes for the catalogue: public catalog reads and seller product management."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.catalogue.api.schemas import (
    CreateProductRequest,
    ProductIdResponse,
    QuoteRequest,
    QuoteResponse,
    ReplaceVariantsRequest,
    SetStockRequest,
    StatusResponse,
    UpdatePricingRequest,
)
from storefront.catalogue.product.management import (
    CreateProduct,
    DeleteProduct,
    ReplaceProductVariants,
    UpdateProductPricing,
    set_stock,
)
from storefront.catalogue.product.product import Product
from storefront.catalogue.quote import quote
from storefront.catalogue.selection import composite_key
from storefront.shared.caller import Caller, current_seller

# ---------------------------------------------------------------------------
# Catalog Router (public)
# ---------------------------------------------------------------------------
catalog_router = APIRouter(prefix="/catalog", tags=["catalog"])


@catalog_router.get("/{product_id}")
async def get_catalog(product_id: str) -> dict:
    """Variant catalog snapshot of a product."""
    product = current_domain.repository_for(Product).get(product_id)
    return product.catalog().to_dict()


@catalog_router.post("/{product_id}/quote", response_model=QuoteResponse)
async def quote_selection(product_id: str, body: QuoteRequest) -> QuoteResponse:
    """Unit price and availability of a product configured as ``selection``."""
    catalog = current_domain.repository_for(Product).get(product_id).catalog()
    result = quote(catalog, body.selection, body.quantity)
    return QuoteResponse(
        product_id=catalog.product_id,
        unit_price=float(result.unit_price),
        quantity=result.quantity,
        line_total=float(result.line_total),
        available=result.available,
        available_quantity=result.available_quantity,
        key=composite_key(catalog.product_id, body.selection),
    )


# ---------------------------------------------------------------------------
# Product Router (sellers)
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


def _dump(items) -> str:
    return json.dumps([item.model_dump(exclude_none=True) for item in items])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest, caller: Caller = Depends(current_seller)) -> ProductIdResponse:
    command = CreateProduct(
        seller_id=caller.user_id,
        name=body.name,
        description=body.description,
        price=body.price,
        offer_price=body.offer_price,
        stock_quantity=body.stock_quantity,
        min_buy=body.min_buy,
        variants=_dump(body.variants),
        colors=_dump(body.colors),
        media=json.dumps(body.media),
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=product_id)


@product_router.put("/{product_id}/variants")
async def replace_variants(
    product_id: str, body: ReplaceVariantsRequest, caller: Caller = Depends(current_seller)
) -> dict:
    command = ReplaceProductVariants(
        product_id=product_id,
        seller_id=caller.user_id,
        variants=_dump(body.variants),
        colors=_dump(body.colors) if body.colors is not None else None,
    )
    current_domain.process(command, asynchronous=False)
    return current_domain.repository_for(Product).get(product_id).catalog().to_dict()


@product_router.put("/{product_id}/stock")
async def update_stock(product_id: str, body: SetStockRequest, caller: Caller = Depends(current_seller)) -> dict:
    set_stock(product_id, caller.user_id, body.stock_quantity)
    return current_domain.repository_for(Product).get(product_id).catalog().to_dict()


@product_router.put("/{product_id}/pricing")
async def update_pricing(
    product_id: str, body: UpdatePricingRequest, caller: Caller = Depends(current_seller)
) -> dict:
    command = UpdateProductPricing(
        product_id=product_id,
        seller_id=caller.user_id,
        price=body.price,
        offer_price=body.offer_price,
        clear_offer=body.clear_offer,
        min_buy=body.min_buy,
    )
    current_domain.process(command, asynchronous=False)
    return current_domain.repository_for(Product).get(product_id).catalog().to_dict()


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def delete_product(product_id: str, caller: Caller = Depends(current_seller)) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id, seller_id=caller.user_id), asynchronous=False)
    return StatusResponse(status="deleted")
