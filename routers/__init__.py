from fastapi import APIRouter
from .auth import auth_router
from . import admin, cart, checkout, custom_orders, orders, payments, products
router = APIRouter()
router.include_router(auth_router)
router.include_router(products.router)
router.include_router(cart.router)
router.include_router(custom_orders.router)
router.include_router(checkout.router)
router.include_router(payments.router)
router.include_router(orders.router)
router.include_router(admin.router)
