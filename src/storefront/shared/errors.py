"""Storefront-specific failures.

Input problems use protean's ``ValidationError`` and missing records use
``ObjectNotFoundError``; the classes here cover the remaining cases, each
carrying the HTTP status the API layer maps it to.
"""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthorized(StorefrontError):
    """No caller identity accompanied the request."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized") -> None:
        super().__init__(message)


class Forbidden(StorefrontError):
    """The caller is known but does not own the record being touched."""

    status_code = 403

    def __init__(self, message: str = "Forbidden") -> None:
        super().__init__(message)


class OutOfStock(StorefrontError):
    status_code = 409

    def __init__(self, product_name: str, available: int) -> None:
        super().__init__(f"Only {available} left for {product_name}")
        self.product_name = product_name
        self.available = available


class UpstreamPaymentError(StorefrontError):
    """The payment gateway was unreachable or answered with an error."""

    status_code = 502
