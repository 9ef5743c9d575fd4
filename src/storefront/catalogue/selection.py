"""Shopper selections and the composite keys that identify cart lines.

A selection maps a variant group name to the snapshot of the option the
shopper picked (plus the ``_productColor`` entry for product-level colour).
A composite key is ``<product_id>::<url-encoded JSON selection>``; the bare
product id is the key of a selection-free line.

Decoding never raises: keys come from clients and from legacy carts, so
anything malformed decodes to ``None``.
"""

import json
from urllib.parse import quote, unquote

from storefront.catalogue.catalog import PRODUCT_COLOR_KEY, VariantCatalog, VariantGroup

SEPARATOR = "::"


def encode(selection: dict | None) -> str:
    if not selection:
        return ""
    # Sorted keys give one canonical key per selection regardless of insertion order
    payload = json.dumps(selection, sort_keys=True, separators=(",", ":"), default=str)
    return quote(payload, safe="")


def composite_key(product_id, selection: dict | None = None) -> str:
    fragment = encode(selection)
    if not fragment:
        return str(product_id)
    return f"{product_id}{SEPARATOR}{fragment}"


def decode(key) -> tuple[str, dict | None]:
    """Split a composite key into ``(product_id, selection)``.

    Array-shaped selections from older clients are re-keyed by position.
    """
    if not isinstance(key, str) or not key:
        return "", None

    product_id, separator, fragment = key.partition(SEPARATOR)
    if not separator or not fragment:
        return product_id, None

    try:
        parsed = json.loads(unquote(fragment))
    except (ValueError, RecursionError):
        return product_id, None

    if isinstance(parsed, dict):
        return product_id, parsed
    if isinstance(parsed, list):
        return product_id, {str(index): value for index, value in enumerate(parsed)}
    return product_id, None


def canonical_key(key: str) -> str:
    """Re-encode a key so equal selections compare equal. Undecodable keys pass through."""
    product_id, selection = decode(key)
    if selection is None:
        return key
    return composite_key(product_id, selection)


def selected_options(selection: dict | None) -> list[dict]:
    """The option snapshots in a selection, skipping the product colour entry."""
    if not selection:
        return []
    return [
        value
        for name, value in selection.items()
        if name != PRODUCT_COLOR_KEY and isinstance(value, dict)
    ]


def snapshot_for_group(group: VariantGroup, selection: dict | None, group_names=()) -> dict | None:
    """Find the snapshot chosen for ``group``: by group name first, then by option id, then label.

    Entries filed under one of ``group_names`` belong to that group and are not
    considered for any other, so options sharing a label across groups stay apart.
    """
    if not selection:
        return None

    chosen = selection.get(group.name)
    if isinstance(chosen, dict):
        return chosen

    candidates = [
        value
        for name, value in selection.items()
        if name != PRODUCT_COLOR_KEY and name not in group_names and isinstance(value, dict)
    ]
    ids = {option.option_id for option in group.options if option.option_id}
    for value in candidates:
        if value.get("id") in ids:
            return value

    labels = {option.label for option in group.options}
    for value in candidates:
        if value.get("label") in labels:
            return value
    return None


def product_color(selection: dict | None) -> str | None:
    if not selection:
        return None
    value = selection.get(PRODUCT_COLOR_KEY)
    if isinstance(value, dict):
        value = value.get("label")
    if value is None or not str(value).strip():
        return None
    return str(value)


def missing_colors(catalog: VariantCatalog, selection: dict | None) -> list[str]:
    """Names of the places where a colour must be chosen but was not."""
    missing = []
    if catalog.colors and not product_color(selection):
        missing.append(PRODUCT_COLOR_KEY)

    group_names = {group.name for group in catalog.groups}
    for group in catalog.groups:
        snapshot = snapshot_for_group(group, selection, group_names)
        if snapshot is None:
            continue
        live = group.find(option_id=snapshot.get("id"), label=snapshot.get("label"))
        colors = snapshot.get("colors") or (live.colors if live else ())
        if colors and not snapshot.get("color"):
            missing.append(group.name)
    return missing
