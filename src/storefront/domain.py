"""Domain initialization and configuration."""

import importlib

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Composition root: catalogue, carts, orders and payments share one domain so
# that stock decrements commit in the same unit of work as the order.
storefront = Domain(name="storefront")

# Domain auto-discovery only walks one directory below this package, so the
# aggregate packages nested under each context are listed here.
ELEMENT_MODULES = (
    "storefront.catalogue.product.product",
    "storefront.catalogue.product.events",
    "storefront.catalogue.product.management",
    "storefront.ordering.cart.cart",
    "storefront.ordering.cart.events",
    "storefront.ordering.cart.lines",
    "storefront.ordering.order.order",
    "storefront.ordering.order.events",
    "storefront.ordering.order.placement",
    "storefront.ordering.order.seller_updates",
    "storefront.ordering.order.notes",
    "storefront.ordering.order.documents",
    "storefront.ordering.order.payment",
)


def load_elements() -> None:
    """Import every module that registers elements with the storefront domain."""
    for module in ELEMENT_MODULES:
        importlib.import_module(module)


def init_storefront() -> Domain:
    """Register all elements and initialize the domain."""
    load_elements()
    storefront.init()
    return storefront
