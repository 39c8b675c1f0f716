# schemas/cart.py
from pydantic import BaseModel, Field
from typing import List, Optional, Union

ProductId = Union[int, str]


class CartLine(BaseModel):
    product_id: ProductId
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)
    image_url: Optional[str] = None


class CartAdd(BaseModel):
    product_id: ProductId
    quantity: int = Field(1, ge=1)


class CartUpdate(BaseModel):
    product_id: ProductId
    quantity: int     # < 1 is ignored, removal goes through /cart/remove


class CartRemove(BaseModel):
    product_id: ProductId


class CartOut(BaseModel):
    items: List[CartLine]
    total: float
    count: int
