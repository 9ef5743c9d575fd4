"""Pydantic request/response schemas for the catalogue API."""

from typing import Any

from pydantic import BaseModel, Field


class VariantOptionSchema(BaseModel):
    id: str | None = None
    label: str
    description: str | None = None
    price: float | str | None = None
    priceDelta: float | str | None = None
    stock: int | str | None = None
    colors: list[str] = Field(default_factory=list)


class VariantGroupSchema(BaseModel):
    name: str
    options: list[VariantOptionSchema] = Field(default_factory=list)


class ColorSwatchSchema(BaseModel):
    label: str
    color: str | None = None
    imageIndex: int | None = None


class CreateProductRequest(BaseModel):
    name: str
    description: str | None = None
    price: float = Field(ge=0)
    offer_price: float | None = Field(default=None, ge=0)
    stock_quantity: int | None = Field(default=None, ge=0)
    min_buy: int = Field(default=1, ge=1)
    variants: list[VariantGroupSchema] = Field(default_factory=list)
    colors: list[ColorSwatchSchema] = Field(default_factory=list)
    media: list[str] = Field(default_factory=list)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Phone case",
                    "price": 100,
                    "offer_price": 90,
                    "stock_quantity": 25,
                    "min_buy": 1,
                    "variants": [
                        {
                            "name": "Size",
                            "options": [
                                {"label": "Regular"},
                                {"label": "Max", "priceDelta": 20, "stock": 5, "colors": ["Black", "Blue"]},
                            ],
                        }
                    ],
                }
            ]
        }
    }


class ReplaceVariantsRequest(BaseModel):
    variants: list[VariantGroupSchema]
    colors: list[ColorSwatchSchema] | None = None


class SetStockRequest(BaseModel):
    stock_quantity: int | None = Field(default=None, ge=0)


class UpdatePricingRequest(BaseModel):
    price: float | None = Field(default=None, ge=0)
    offer_price: float | None = Field(default=None, ge=0)
    clear_offer: bool = False
    min_buy: int | None = Field(default=None, ge=1)


class QuoteRequest(BaseModel):
    selection: dict[str, Any] | None = None
    quantity: int | None = Field(default=None, ge=1)


class QuoteResponse(BaseModel):
    product_id: str
    unit_price: float
    quantity: int
    line_total: float
    available: bool
    available_quantity: int | None = None
    key: str


class ProductIdResponse(BaseModel):
    product_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
