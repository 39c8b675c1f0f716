# schemas/order.py
from pydantic import BaseModel
from typing import List, Literal, Optional

OrderStatus = Literal["pending", "paid", "processing", "shipped", "delivered", "cancelled"]
CustomOrderStatus = Literal["pending", "paid", "in_progress", "completed", "cancelled"]


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    current_status: Optional[str] = None


class CustomOrderStatusUpdate(BaseModel):
    status: CustomOrderStatus
    current_status: Optional[str] = None


class OrderHistoryOut(BaseModel):
    orders: List[dict]
    custom_orders: List[dict]
    errors: List[str] = []


class PaymentVerifyOut(BaseModel):
    status: Literal["success", "error"]
    message: str
    redirect: Optional[str] = None
