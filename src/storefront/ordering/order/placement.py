"""Order placement: command, handler and the checkout service.

The handler checks and decrements stock for every line and persists the
order in one unit of work, so a failing line leaves no stock taken and no
order behind. ``place_order`` wraps it in the per-product stock locks,
then creates the gateway order and empties the buyer's cart.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.pricing import resolve_unit_price
from storefront.catalogue.product.product import Product
from storefront.catalogue.product.stock import reserve_stock
from storefront.catalogue.selection import decode
from storefront.domain import storefront
from storefront.ordering.cart.lines import ClearCart
from storefront.ordering.order.order import Order, PaymentMethod
from storefront.ordering.order.payment import RecordGatewayOrder
from storefront.payments.gateway import get_gateway
from storefront.shared.errors import UpstreamPaymentError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CURRENCY = "INR"


@storefront.command(part_of="Order")
class PlaceOrder:
    buyer_id = Identifier(required=True)
    address_id = Identifier(required=True)
    lines = Text(required=True)  # JSON: [{"product_id" | "key", "quantity", "selection"?}]
    special_request = Text()
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)


def requested_lines(raw_lines) -> list[dict]:
    """Normalize submitted lines into product id, quantity and selection.

    A line may name its product by id or by cart composite key; an explicit
    selection wins over the one encoded in the key.
    """
    if not raw_lines:
        raise ValidationError({"lines": ["An order needs at least one line"]})

    lines = []
    for raw in raw_lines:
        product_id, key_selection = decode(raw.get("key")) if raw.get("key") else (raw.get("product_id"), None)
        if not product_id:
            raise ValidationError({"lines": ["Every line needs a product"]})

        try:
            quantity = int(raw.get("quantity"))
        except (TypeError, ValueError):
            raise ValidationError({"lines": [f"Invalid quantity for product {product_id}"]}) from None

        lines.append(
            {
                "product_id": str(product_id),
                "quantity": quantity,
                "selection": raw.get("selection") or key_selection,
            }
        )
    return lines


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        repo = current_domain.repository_for(Product)
        products = {}
        priced_lines = []

        for line in requested_lines(json.loads(command.lines)):
            product = products.get(line["product_id"])
            if product is None:
                product = repo.get(line["product_id"])
                products[line["product_id"]] = product

            catalog = product.catalog()
            if line["quantity"] < catalog.min_buy:
                raise ValidationError(
                    {"lines": [f"Minimum purchase for {product.name} is {catalog.min_buy}"]}
                )

            # Product-level stock only; variant stock is checked when the cart line is added
            product.decrement_stock(line["quantity"])

            priced_lines.append(
                {
                    "product_id": line["product_id"],
                    "seller_id": product.seller_id,
                    "product_name": product.name,
                    "quantity": line["quantity"],
                    "unit_price": resolve_unit_price(catalog, line["selection"]),
                    "selection": line["selection"],
                }
            )

        order = Order.place(
            buyer_id=command.buyer_id,
            address_id=command.address_id,
            lines=priced_lines,
            special_request=command.special_request,
            payment_method=command.payment_method,
        )

        for product in products.values():
            repo.add(product)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            buyer_id=str(command.buyer_id),
            total_amount=order.total_amount,
            line_count=len(priced_lines),
        )
        return str(order.id)


def _open_gateway_order(order_id, total_amount) -> str | None:
    """Create the gateway-side order. Failure is logged; the order stays placed."""
    try:
        result = get_gateway().create_order(
            amount_minor=int(round(total_amount * 100)),
            currency=CURRENCY,
            receipt=order_id,
        )
    except UpstreamPaymentError as exc:
        logger.error("Gateway order creation failed", order_id=order_id, error=exc.message)
        return None

    if not result.success:
        logger.error("Gateway order rejected", order_id=order_id, reason=result.failure_reason)
        return None

    current_domain.process(
        RecordGatewayOrder(order_id=order_id, gateway_order_id=result.gateway_order_id),
        asynchronous=False,
    )
    return result.gateway_order_id


def place_order(buyer_id, address_id, lines, special_request=None, payment_method=None) -> dict:
    """Check out ``lines`` for ``buyer_id``.

    Returns the order id, the charged total and, for gateway payments, the
    gateway order id the client needs to collect the payment.
    """
    payment_method = payment_method or PaymentMethod.COD.value
    normalized = requested_lines(lines)

    with reserve_stock(line["product_id"] for line in normalized):
        order_id = current_domain.process(
            PlaceOrder(
                buyer_id=buyer_id,
                address_id=address_id,
                lines=json.dumps(normalized),
                special_request=special_request,
                payment_method=payment_method,
            ),
            asynchronous=False,
        )

    order = current_domain.repository_for(Order).get(order_id)

    gateway_order_id = None
    if payment_method == PaymentMethod.RAZORPAY.value:
        gateway_order_id = _open_gateway_order(order_id, order.total_amount)

    current_domain.process(ClearCart(buyer_id=buyer_id), asynchronous=False)

    return {
        "order_id": order_id,
        "total_amount": order.total_amount,
        "gateway_order_id": gateway_order_id,
    }
