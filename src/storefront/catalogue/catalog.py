"""Read-only view of a product's variant configuration.

Products persist their variant groups and colour swatches as JSON. Pricing
and availability never read that JSON directly; they work on the frozen
``VariantCatalog`` built from it, so one request sees one consistent
snapshot of the product.

Stored shape of a variant group::

    {"name": "Size",
     "options": [{"id": "...", "label": "L", "description": "...",
                  "price": 150, "priceDelta": 10, "stock": 4,
                  "colors": ["Red", "Blue"]}]}
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from uuid import uuid4

from protean.exceptions import ValidationError

# Selection key reserved for the product-level colour choice
PRODUCT_COLOR_KEY = "_productColor"


def parse_number(value) -> Decimal | None:
    """Coerce a stored or submitted number. Blank and non-numeric values are absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def parse_stock(value) -> int | None:
    number = parse_number(value)
    if number is None:
        return None
    return int(number)


def _plain(number: Decimal | None):
    """Render a Decimal back into a JSON-friendly int or float."""
    if number is None:
        return None
    if number == number.to_integral_value():
        return int(number)
    return float(number)


def _color_labels(raw) -> tuple[str, ...]:
    labels = []
    for entry in raw or []:
        label = entry.get("label") if isinstance(entry, dict) else entry
        if label is not None and str(label).strip():
            labels.append(str(label).strip())
    return tuple(labels)


@dataclass(frozen=True)
class VariantOption:
    label: str
    option_id: str | None = None
    description: str | None = None
    price: Decimal | None = None
    price_delta: Decimal | None = None
    stock: int | None = None
    colors: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict) -> "VariantOption":
        return cls(
            label=str(data.get("label", "")).strip(),
            option_id=data.get("id"),
            description=data.get("description") or None,
            price=parse_number(data.get("price")),
            price_delta=parse_number(data.get("priceDelta")),
            stock=parse_stock(data.get("stock")),
            colors=_color_labels(data.get("colors")),
        )

    def to_dict(self) -> dict:
        data = {"id": self.option_id, "label": self.label}
        if self.description:
            data["description"] = self.description
        if self.price is not None:
            data["price"] = _plain(self.price)
        if self.price_delta is not None:
            data["priceDelta"] = _plain(self.price_delta)
        if self.stock is not None:
            data["stock"] = self.stock
        if self.colors:
            data["colors"] = list(self.colors)
        return data

    def snapshot(self, color: str | None = None) -> dict:
        """The dict a shopper's selection carries for this option."""
        data = self.to_dict()
        if color:
            data["color"] = color
        return data


@dataclass(frozen=True)
class VariantGroup:
    name: str
    options: tuple[VariantOption, ...] = ()

    def find(self, option_id=None, label=None) -> VariantOption | None:
        if option_id:
            for option in self.options:
                if option.option_id == option_id:
                    return option
        if label:
            for option in self.options:
                if option.label == label:
                    return option
        return None

    def to_dict(self) -> dict:
        return {"name": self.name, "options": [option.to_dict() for option in self.options]}


@dataclass(frozen=True)
class ColorSwatch:
    label: str
    color: str | None = None
    image_index: int | None = None

    def to_dict(self) -> dict:
        return {"label": self.label, "color": self.color, "imageIndex": self.image_index}


@dataclass(frozen=True)
class VariantCatalog:
    product_id: str
    name: str
    price: Decimal
    offer_price: Decimal | None = None
    stock: int | None = None
    min_buy: int = 1
    groups: tuple[VariantGroup, ...] = ()
    colors: tuple[ColorSwatch, ...] = ()
    seller_id: str | None = None

    @property
    def base_price(self) -> Decimal:
        return self.offer_price if self.offer_price is not None else self.price

    @property
    def has_variants(self) -> bool:
        return bool(self.groups)

    def group(self, name: str) -> VariantGroup | None:
        return next((group for group in self.groups if group.name == name), None)

    @classmethod
    def build(
        cls,
        product_id,
        name,
        price,
        offer_price=None,
        stock=None,
        min_buy=1,
        variants=None,
        colors=None,
        seller_id=None,
    ) -> "VariantCatalog":
        groups = tuple(
            VariantGroup(
                name=str(group.get("name", "")).strip(),
                options=tuple(VariantOption.from_dict(option) for option in group.get("options") or []),
            )
            for group in variants or []
        )
        swatches = tuple(
            ColorSwatch(
                label=str(swatch.get("label", "")).strip(),
                color=swatch.get("color"),
                image_index=parse_stock(swatch.get("imageIndex")),
            )
            for swatch in colors or []
        )
        return cls(
            product_id=str(product_id),
            name=name,
            price=parse_number(price) or Decimal("0"),
            offer_price=parse_number(offer_price),
            stock=parse_stock(stock),
            min_buy=max(1, parse_stock(min_buy) or 1),
            groups=groups,
            colors=swatches,
            seller_id=str(seller_id) if seller_id is not None else None,
        )

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "seller_id": self.seller_id,
            "price": _plain(self.price),
            "offer_price": _plain(self.offer_price),
            "stock_quantity": self.stock,
            "min_buy": self.min_buy,
            "variants": [group.to_dict() for group in self.groups],
            "colors": [swatch.to_dict() for swatch in self.colors],
        }


def normalize_variants(raw_groups) -> list[dict]:
    """Validate seller-submitted variant groups and give every option a stable id.

    Numbers arrive as strings from forms; they are coerced here, blanks dropped.
    Existing option ids are preserved so previously encoded selections keep
    resolving after an edit.
    """
    if raw_groups is None:
        return []
    if not isinstance(raw_groups, list):
        raise ValidationError({"variants": ["Variants must be a list of groups"]})

    groups = []
    seen_groups = set()
    for raw_group in raw_groups:
        if not isinstance(raw_group, dict):
            raise ValidationError({"variants": ["Each variant group must be an object"]})

        name = str(raw_group.get("name") or "").strip()
        if not name:
            raise ValidationError({"variants": ["Variant group name is required"]})
        if name == PRODUCT_COLOR_KEY:
            raise ValidationError({"variants": [f"{PRODUCT_COLOR_KEY} is a reserved group name"]})
        if name in seen_groups:
            raise ValidationError({"variants": [f"Duplicate variant group {name}"]})
        seen_groups.add(name)

        options = []
        seen_labels = set()
        for raw_option in raw_group.get("options") or []:
            if not isinstance(raw_option, dict):
                raise ValidationError({"variants": [f"Options of {name} must be objects"]})

            option = VariantOption.from_dict(raw_option)
            if not option.label:
                raise ValidationError({"variants": [f"Every option of {name} needs a label"]})
            if option.label in seen_labels:
                raise ValidationError({"variants": [f"Duplicate option {option.label} in {name}"]})
            if option.stock is not None and option.stock < 0:
                raise ValidationError({"variants": [f"Stock for {option.label} cannot be negative"]})
            if option.price is not None and option.price < 0:
                raise ValidationError({"variants": [f"Price for {option.label} cannot be negative"]})
            seen_labels.add(option.label)

            data = option.to_dict()
            data["id"] = option.option_id or uuid4().hex[:12]
            options.append(data)

        groups.append({"name": name, "options": options})
    return groups


def normalize_colors(raw_colors) -> list[dict]:
    if raw_colors is None:
        return []
    if not isinstance(raw_colors, list):
        raise ValidationError({"colors": ["Colors must be a list"]})

    swatches = []
    for raw in raw_colors:
        if isinstance(raw, str):
            raw = {"label": raw}
        label = str((raw or {}).get("label") or "").strip()
        if not label:
            raise ValidationError({"colors": ["Every color needs a label"]})
        swatches.append(
            {
                "label": label,
                "color": raw.get("color"),
                "imageIndex": parse_stock(raw.get("imageIndex")),
            }
        )
    return swatches
