from fastapi import APIRouter, Request, Response
from schemas.cart_schemas import CartProductSchema, RemoveCartItemSchema, UpdateQuantitySchema
from services.cart_service import add_to_cart, clear_cart, load_cart, remove_from_cart, save_cart, update_quantity

router = APIRouter(prefix="/cart")


def _reply(response, cart):
    save_cart(response, cart)
    return {"status": "success", "cart": cart}


@router.get("")
async def get_cart(request: Request):
    # the cart is read back from the shopper's cookie
    return {"status": "success", "cart": load_cart(request)}


@router.post("/add-cart-item")
async def add_cart_item(product: CartProductSchema, request: Request, response: Response):
    # adds one unit, capped by the last known stock of the variant
    return _reply(response, add_to_cart(load_cart(request), product))


@router.post("/update-quantity")
async def update_cart_item(data: UpdateQuantitySchema, request: Request, response: Response):
    return _reply(response, update_quantity(load_cart(request), data.variantId, data.quantity))


@router.post("/delete-cart-item")
async def delete_cart_item(data: RemoveCartItemSchema, request: Request, response: Response):
    return _reply(response, remove_from_cart(load_cart(request), data.variantId))


@router.post("/clear")
async def clear(response: Response):
    return _reply(response, clear_cart())
