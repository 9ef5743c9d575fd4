"""Cart ledger aggregate: one per buyer, keyed by the buyer id.

Each line is addressed by its composite key (product id plus encoded
selection) and holds only a quantity. Prices are never stored in the cart;
they are resolved from the live catalog every time a total is asked for.
"""

from datetime import UTC, datetime
from decimal import Decimal

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, Text

from storefront.catalogue.availability import available_quantity, is_available
from storefront.catalogue.catalog import VariantCatalog
from storefront.catalogue.pricing import floor_cents, resolve_unit_price
from storefront.catalogue.selection import canonical_key, composite_key, decode, missing_colors
from storefront.domain import storefront
from storefront.ordering.cart.events import CartCleared, CartLineAdded, CartLineQuantitySet, CartLineRemoved
from storefront.shared.errors import OutOfStock


@storefront.entity(part_of="CartLedger")
class CartLine:
    line_key = Text(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()

    @property
    def selection(self) -> dict | None:
        return decode(self.line_key)[1]


@storefront.aggregate
class CartLedger:
    buyer_id = Identifier(required=True)
    lines = HasMany(CartLine)
    updated_at = DateTime()

    @classmethod
    def create(cls, buyer_id):
        # The buyer id doubles as the ledger id: one ledger per buyer, last write wins
        return cls(id=str(buyer_id), buyer_id=buyer_id, updated_at=datetime.now(UTC))

    def line_for(self, key) -> CartLine | None:
        return next((line for line in self.lines if line.line_key == key), None)

    def quantity_of(self, key) -> int:
        line = self.line_for(key)
        return line.quantity if line else 0

    def add(self, catalog: VariantCatalog, selection: dict | None = None) -> str:
        """Add one minimum-purchase lot of ``catalog`` to the cart. Returns the line key."""
        if missing_colors(catalog, selection):
            raise ValidationError({"selection": ["missing color selection"]})

        key = composite_key(catalog.product_id, selection)
        line = self.line_for(key)
        new_quantity = (line.quantity if line else 0) + catalog.min_buy

        if not is_available(catalog, selection, new_quantity):
            raise OutOfStock(catalog.name, available_quantity(catalog, selection) or 0)

        now = datetime.now(UTC)
        if line:
            line.quantity = new_quantity
        else:
            self.add_lines(
                CartLine(
                    line_key=key,
                    product_id=catalog.product_id,
                    quantity=new_quantity,
                    added_at=now,
                )
            )
        self.updated_at = now

        self.raise_(
            CartLineAdded(
                buyer_id=self.buyer_id,
                line_key=key,
                product_id=catalog.product_id,
                quantity=new_quantity,
            )
        )
        return key

    def set_quantity(self, key, quantity, catalog: VariantCatalog | None = None) -> int:
        """Set a line's quantity and return what was stored.

        Zero or less removes the line. Anything under the product's minimum
        purchase is raised to it; a product that no longer exists counts as
        minimum 1.
        """
        key = canonical_key(key)
        line = self.line_for(key)
        if line is None:
            raise ValidationError({"line_key": ["Line not found in cart"]})

        now = datetime.now(UTC)
        if quantity is None or quantity <= 0:
            self.remove_lines(line)
            self.updated_at = now
            self.raise_(CartLineRemoved(buyer_id=self.buyer_id, line_key=key))
            return 0

        min_buy = catalog.min_buy if catalog else 1
        stored = max(quantity, min_buy)
        line.quantity = stored
        self.updated_at = now

        self.raise_(
            CartLineQuantitySet(
                buyer_id=self.buyer_id,
                line_key=key,
                requested_quantity=quantity,
                quantity=stored,
            )
        )
        return stored

    def total(self, lookup) -> Decimal:
        """Sum of unit price times quantity over every line.

        ``lookup`` maps a product id to its ``VariantCatalog`` or ``None``;
        lines whose product is gone are skipped.
        """
        total = Decimal("0")
        for line in self.lines:
            if line.quantity <= 0:
                continue
            catalog = lookup(str(line.product_id))
            if catalog is None:
                continue
            total += resolve_unit_price(catalog, line.selection) * line.quantity
        return floor_cents(total)

    def clear(self):
        count = len(self.lines)
        for line in list(self.lines):
            self.remove_lines(line)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartCleared(buyer_id=self.buyer_id, line_count=count))
