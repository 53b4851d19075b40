import base64
import json
import logging
import re
from fastapi import HTTPException
from pydantic import ValidationError
from schemas.cart_schemas import Cart, CartItem


logger = logging.getLogger(__name__)

# the cart lives on the shopper's side, json encoded under this key
CART_COOKIE = "shopify-cart"
CART_MAX_AGE = 30 * 24 * 60 * 60
# name=value limit most browsers enforce per cookie
MAX_COOKIE_BYTES = 4096
SHOPIFY_CDN = "https://cdn.shopify.com/s/files/"
CART_FULL_MESSAGE = "O carrinho está cheio. Finalize a encomenda ou remova produtos antes de adicionar mais."


def with_totals(items):
    # totals are always derived from the lines, never patched incrementally
    return Cart(
        items=items,
        totalItems=sum(item.quantity for item in items),
        totalPrice=round(sum(item.price * item.quantity for item in items), 2),
    )


def add_to_cart(cart: Cart, product):
    existing = next((item for item in cart.items if item.variantId == product.variantId), None)
    current_quantity = existing.quantity if existing else 0
    available = product.quantityAvailable or 0
    # unknown stock (0/None) doesn't block, known stock caps the line
    if available > 0 and current_quantity >= available:
        return cart
    if existing:
        items = [
            item.model_copy(update={
                "quantity": item.quantity + 1,
                "quantityAvailable": product.quantityAvailable or item.quantityAvailable,
            }) if item.variantId == product.variantId else item
            for item in cart.items
        ]
    else:
        items = cart.items + [CartItem(**product.model_dump(), quantity=1)]
    return with_totals(items)


def update_quantity(cart: Cart, variant_id: str, quantity: int):
    item = next((item for item in cart.items if item.variantId == variant_id), None)
    if not item:
        return cart
    if quantity <= 0:
        return with_totals([line for line in cart.items if line.variantId != variant_id])
    available = item.quantityAvailable or 0
    if available > 0:
        quantity = min(quantity, available)
    return with_totals([
        line.model_copy(update={"quantity": quantity}) if line.variantId == variant_id else line
        for line in cart.items
    ])


def remove_from_cart(cart: Cart, variant_id: str):
    return update_quantity(cart, variant_id, 0)


def clear_cart():
    return Cart()


def _short_id(value, kind):
    # shopify gids are stored as their bare number, anything else as is
    match = re.fullmatch(rf"gid://shopify/{kind}/(\d+)", value)
    return int(match.group(1)) if match else value


def _full_id(value, kind):
    return f"gid://shopify/{kind}/{value}" if isinstance(value, int) else value


def _short_image(url):
    if url and url.startswith(SHOPIFY_CDN):
        return url[len(SHOPIFY_CDN):]
    return url


def _full_image(path):
    if path and not path.startswith(("http://", "https://")):
        return SHOPIFY_CDN + path
    return path


def encode_cart(cart: Cart):
    # one compact list per line, totals are rebuilt on decode
    lines = [
        [_short_id(item.variantId, "ProductVariant"), _short_id(item.id, "Product"), item.name,
         item.price, item.quantity, item.quantityAvailable, _short_image(item.image)]
        for item in cart.items
    ]
    raw = json.dumps(lines, separators=(",", ":"), ensure_ascii=False)
    # unpadded, so the value needs no cookie quoting
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cart(value):
    if not value:
        return Cart()
    try:
        padded = value + "=" * (-len(value) % 4)
        lines = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))
        items = []
        for variant_id, product_id, name, price, quantity, available, image in lines:
            items.append(CartItem(
                id=_full_id(product_id, "Product"),
                name=name,
                price=price,
                quantity=quantity,
                image=_full_image(image),
                variantId=_full_id(variant_id, "ProductVariant"),
                quantityAvailable=available,
            ))
    except (ValueError, TypeError, ValidationError) as e:
        logger.error(f"Error loading stored cart: {e}")
        return Cart()
    # stored totals may be stale or tampered with
    return with_totals(items)


def load_cart(request):
    return decode_cart(request.cookies.get(CART_COOKIE))


def save_cart(response, cart: Cart):
    value = encode_cart(cart)
    if len(CART_COOKIE) + 1 + len(value) > MAX_COOKIE_BYTES:
        # browsers silently drop a cookie this large
        logger.warning(f"Cart with {len(cart.items)} lines doesn't fit in its cookie")
        raise HTTPException(status_code=400, detail={"error": CART_FULL_MESSAGE})
    response.set_cookie(
        key=CART_COOKIE,
        value=value,
        httponly=False,
        samesite="Lax",
        path="/",
        max_age=CART_MAX_AGE,
    )
