from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator
from storefront.products.constants import GENDERS


class VariantIn(BaseModel):
    sku_id: int = Field(..., ge=1)
    label: str = Field(..., min_length=1, max_length=64)
    inventory_count: int = Field(0, ge=0)
    available: bool = True


class ProductCreateIn(BaseModel):
    product_id: int = Field(..., ge=1)
    product_name: str = Field(..., max_length=255)
    brand: str = Field(..., max_length=128)
    category: str = Field(..., max_length=128)
    gender: Literal[GENDERS]
    primary_colour: Optional[str] = Field(None, max_length=64)
    price: int = Field(..., ge=0)
    mrp: int = Field(..., ge=0)
    discount_display_label: Optional[str] = None
    search_image: Optional[str] = None
    additional_info: Optional[str] = None
    rating: float = Field(0, ge=0, le=5)
    rating_count: int = Field(0, ge=0)
    variants: List[VariantIn] = Field(..., min_length=1)

    @field_validator("variants")
    @classmethod
    def unique_skus(cls, variants: List[VariantIn]) -> List[VariantIn]:
        sku_ids = [v.sku_id for v in variants]
        if len(sku_ids) != len(set(sku_ids)):
            raise ValueError("duplicate sku_id in variants")
        return variants


class StockDecrementIn(BaseModel):
    sku_id: int
    quantity: int = Field(..., gt=0)

    model_config = {"extra": "forbid"}


class VariantInventoryIn(BaseModel):
    inventory_count: int = Field(..., ge=0)
    available: Optional[bool] = None   # defaults to inventory_count > 0

    model_config = {"extra": "forbid"}


class ProductSearchFilters(BaseModel):
    category: Optional[str] = None
    brand: Optional[str] = None
    gender: Optional[str] = None
    color: Optional[str] = None
    min_price: Optional[int] = Field(None, ge=0)
    max_price: Optional[int] = Field(None, ge=0)
    min_rating: Optional[float] = Field(None, ge=0, le=5)
    in_stock_only: bool = False
