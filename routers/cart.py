from fastapi import APIRouter, Depends, HTTPException
from core.dependencies import get_api, get_cart
from core.errors import ApiError, http_error
from schemas.cart import CartAdd, CartOut, CartRemove, CartUpdate
from schemas.product import Product
from services.api_client import StorefrontApi
from services.cart_store import CartStore

router = APIRouter(prefix="/cart", tags=["Cart"])


def cart_out(cart: CartStore) -> CartOut:
    return CartOut(items=cart.lines, total=cart.cart_total, count=cart.cart_count)


# GET /cart/ - current cart with totals
@router.get("/", response_model=CartOut)
async def get_cart_view(cart: CartStore = Depends(get_cart)):
    return cart_out(cart)


# POST /cart/add - add a product (merges with an existing line)
@router.post("/add")
async def add_to_cart(
    item: CartAdd,
    cart: CartStore = Depends(get_cart),
    api: StorefrontApi = Depends(get_api),
):
    # name and price come from the catalog, never from the client
    try:
        product = Product.model_validate(await api.get_product(item.product_id))
    except ApiError as e:
        if e.status == 404:
            raise HTTPException(status_code=404, detail="Product not found")
        raise http_error(e)

    await cart.add_to_cart(product, item.quantity)
    return {"message": "Added to cart", "cart": cart_out(cart)}


# PUT /cart/update - set a line's quantity (values below 1 are ignored)
@router.put("/update")
async def update_cart(data: CartUpdate, cart: CartStore = Depends(get_cart)):
    await cart.update_quantity(data.product_id, data.quantity)
    return {"message": "Cart updated", "cart": cart_out(cart)}


# DELETE /cart/remove - drop one line
@router.delete("/remove")
async def remove_from_cart(data: CartRemove, cart: CartStore = Depends(get_cart)):
    await cart.remove_from_cart(data.product_id)
    return {"message": "Removed from cart", "cart": cart_out(cart)}


# DELETE /cart/clear - empty the cart
@router.delete("/clear")
async def clear_cart(cart: CartStore = Depends(get_cart)):
    await cart.clear_cart()
    return {"message": "Cart cleared", "cart": cart_out(cart)}
