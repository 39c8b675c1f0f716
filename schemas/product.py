# schemas/product.py
from pydantic import ConfigDict, Field
from typing import List, Optional, Union

from schemas.base import CamelModel


class Product(CamelModel):
    """Catalog product as returned by the upstream API (extra fields kept)."""

    model_config = ConfigDict(extra="allow")

    id: Union[int, str]
    name: str
    price: float = Field(ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = None
    category_id: Optional[Union[int, str]] = None
    stock: Optional[int] = None
    sizes: Optional[List[str]] = None


class ProductCreate(CamelModel):
    name: str
    price: float = Field(ge=0)
    category_id: Union[int, str]
    stock: int = Field(0, ge=0)
    sizes: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    image_url: Optional[str] = None


class ProductUpdate(CamelModel):
    name: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    category_id: Optional[Union[int, str]] = None
    stock: Optional[int] = Field(None, ge=0)
    sizes: Optional[List[str]] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class CategoryIn(CamelModel):
    name: str
    description: Optional[str] = None


class StyleIn(CamelModel):
    name: str
    category_id: Union[int, str]
    base_price: float = Field(ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = None


class MaterialIn(CamelModel):
    name: str
    price_per_meter: float = Field(ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = None
