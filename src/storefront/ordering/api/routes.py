"""FastAPI routes for carts and orders."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.ordering.api.schemas import (
    AddCartLineRequest,
    CartResponse,
    InvoiceRequest,
    NoteRequest,
    PlaceOrderRequest,
    PlaceOrderResponse,
    SellerUpdateRequest,
    SetCartLineQuantityRequest,
    SpecialRequestRequest,
)
from storefront.ordering.cart.lines import AddCartLine, SetCartLineQuantity, cart_summary
from storefront.ordering.order.documents import AttachInvoice, RemoveInvoice, UpdateSpecialRequest
from storefront.ordering.order.notes import DeleteAdminNote, SaveAdminNote
from storefront.ordering.order.order import Order
from storefront.ordering.order.placement import place_order
from storefront.ordering.order.seller_updates import UpdateOrderBySeller
from storefront.ordering.order.views import order_view, seller_orders, view_for
from storefront.shared.caller import Caller, current_caller, current_seller

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("", response_model=CartResponse)
async def get_cart(caller: Caller = Depends(current_caller)) -> CartResponse:
    return CartResponse(**cart_summary(caller.user_id))


@cart_router.post("/lines", response_model=CartResponse)
async def add_cart_line(body: AddCartLineRequest, caller: Caller = Depends(current_caller)) -> CartResponse:
    key = current_domain.process(
        AddCartLine(
            buyer_id=caller.user_id,
            product_id=body.product_id,
            selection=json.dumps(body.selection) if body.selection else None,
        ),
        asynchronous=False,
    )
    return CartResponse(**cart_summary(caller.user_id), key=key)


@cart_router.put("/lines/{key:path}", response_model=CartResponse)
async def set_cart_line_quantity(
    key: str, body: SetCartLineQuantityRequest, caller: Caller = Depends(current_caller)
) -> CartResponse:
    stored = current_domain.process(
        SetCartLineQuantity(buyer_id=caller.user_id, line_key=key, quantity=body.quantity),
        asynchronous=False,
    )
    return CartResponse(**cart_summary(caller.user_id), key=key, quantity=stored)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=PlaceOrderResponse)
async def create_order(body: PlaceOrderRequest, caller: Caller = Depends(current_caller)) -> PlaceOrderResponse:
    result = place_order(
        buyer_id=caller.user_id,
        address_id=body.address_id,
        lines=[line.model_dump(exclude_none=True) for line in body.lines],
        special_request=body.special_request,
        payment_method=body.payment_method.value,
    )
    return PlaceOrderResponse(**result)


@order_router.get("/seller")
async def list_seller_orders(caller: Caller = Depends(current_seller)) -> list[dict]:
    return seller_orders(caller.user_id)


@order_router.get("/{order_id}")
async def get_order(order_id: str, caller: Caller = Depends(current_caller)) -> dict:
    order = current_domain.repository_for(Order).get(order_id)
    return view_for(order, caller)


@order_router.put("/{order_id}")
async def update_order(
    order_id: str, body: SellerUpdateRequest, caller: Caller = Depends(current_seller)
) -> dict:
    current_domain.process(
        UpdateOrderBySeller(order_id=order_id, seller_id=caller.user_id, **body.model_dump(exclude_none=True)),
        asynchronous=False,
    )
    order = current_domain.repository_for(Order).get(order_id)
    return order_view(order, seller_id=caller.user_id)


@order_router.post("/{order_id}/notes")
async def save_note(order_id: str, body: NoteRequest, caller: Caller = Depends(current_seller)) -> dict:
    current_domain.process(
        SaveAdminNote(order_id=order_id, seller_id=caller.user_id, note=body.note),
        asynchronous=False,
    )
    order = current_domain.repository_for(Order).get(order_id)
    return order_view(order, seller_id=caller.user_id)


@order_router.delete("/{order_id}/notes")
async def delete_note(order_id: str, caller: Caller = Depends(current_seller)) -> dict:
    current_domain.process(DeleteAdminNote(order_id=order_id, seller_id=caller.user_id), asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return order_view(order, seller_id=caller.user_id)


@order_router.put("/{order_id}/special-request")
async def update_special_request(
    order_id: str, body: SpecialRequestRequest, caller: Caller = Depends(current_caller)
) -> dict:
    current_domain.process(
        UpdateSpecialRequest(order_id=order_id, buyer_id=caller.user_id, special_request=body.special_request),
        asynchronous=False,
    )
    return order_view(current_domain.repository_for(Order).get(order_id))


@order_router.put("/{order_id}/invoice")
async def attach_invoice(order_id: str, body: InvoiceRequest, caller: Caller = Depends(current_seller)) -> dict:
    current_domain.process(
        AttachInvoice(order_id=order_id, seller_id=caller.user_id, invoice_url=body.invoice_url),
        asynchronous=False,
    )
    return order_view(current_domain.repository_for(Order).get(order_id), seller_id=caller.user_id)


@order_router.delete("/{order_id}/invoice")
async def remove_invoice(order_id: str, caller: Caller = Depends(current_seller)) -> dict:
    current_domain.process(RemoveInvoice(order_id=order_id, seller_id=caller.user_id), asynchronous=False)
    return order_view(current_domain.repository_for(Order).get(order_id), seller_id=caller.user_id)
