"""Seller-side product management: commands and handler.

Every command except creation carries the acting seller, and the handler
refuses to touch a product the seller does not own.
"""

import json

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.catalogue.product.stock import reserve_stock
from storefront.domain import storefront
from storefront.media import discard_media
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _json_or_none(text):
    if text is None:
        return None
    return json.loads(text) if isinstance(text, str) else text


@storefront.command(part_of="Product")
class CreateProduct:
    seller_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    description: Text()
    price: Float(required=True, min_value=0.0)
    offer_price: Float(min_value=0.0)
    stock_quantity: Integer(min_value=0)
    min_buy: Integer(default=1, min_value=1)
    variants: Text()  # JSON list of variant groups
    colors: Text()  # JSON list of colour swatches
    media: Text()  # JSON list of media references


@storefront.command(part_of="Product")
class ReplaceProductVariants:
    product_id: Identifier(required=True)
    seller_id: Identifier(required=True)
    variants: Text(required=True)
    colors: Text()


@storefront.command(part_of="Product")
class SetProductStock:
    product_id: Identifier(required=True)
    seller_id: Identifier(required=True)
    stock_quantity: Integer(min_value=0)  # omitted means unlimited


@storefront.command(part_of="Product")
class UpdateProductPricing:
    product_id: Identifier(required=True)
    seller_id: Identifier(required=True)
    price: Float(min_value=0.0)
    offer_price: Float(min_value=0.0)
    clear_offer: Boolean(default=False)
    min_buy: Integer(min_value=1)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id: Identifier(required=True)
    seller_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            seller_id=command.seller_id,
            name=command.name,
            description=command.description,
            price=command.price,
            offer_price=command.offer_price,
            stock_quantity=command.stock_quantity,
            min_buy=command.min_buy,
            variants=_json_or_none(command.variants),
            colors=_json_or_none(command.colors),
            media=_json_or_none(command.media),
        )
        current_domain.repository_for(Product).add(product)
        logger.info("Product created", product_id=str(product.id), seller_id=str(command.seller_id))
        return str(product.id)

    @handle(ReplaceProductVariants)
    def replace_variants(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.assert_owned_by(command.seller_id)
        product.replace_variants(_json_or_none(command.variants), colors=_json_or_none(command.colors))
        repo.add(product)

    @handle(UpdateProductPricing)
    def update_pricing(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.assert_owned_by(command.seller_id)
        product.update_pricing(
            price=command.price,
            offer_price=command.offer_price,
            min_buy=command.min_buy,
            clear_offer=command.clear_offer,
        )
        repo.add(product)

    @handle(SetProductStock)
    def set_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.assert_owned_by(command.seller_id)
        product.set_stock(command.stock_quantity)
        repo.add(product)

    @handle(DeleteProduct)
    def delete_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.assert_owned_by(command.seller_id)

        refs = product.media_refs
        repo._dao.delete(product)
        discard_media(refs, product_id=str(product.id))
        logger.info("Product deleted", product_id=str(product.id), media_count=len(refs))


def set_stock(product_id, seller_id, stock_quantity):
    """Set stock while holding the product's stock lock so no order decrements in between."""
    with reserve_stock([product_id]):
        current_domain.process(
            SetProductStock(product_id=product_id, seller_id=seller_id, stock_quantity=stock_quantity),
            asynchronous=False,
        )
